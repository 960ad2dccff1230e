"""Tests for operator configuration."""

from __future__ import annotations

import pytest

from managed_resource_operator.config import ConfigurationError, OperatorConfig


class TestOperatorConfig:
    """Test cases for OperatorConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = OperatorConfig()
        assert config.poll_interval == 30.0
        assert config.retry_min_delay == 5.0
        assert config.retry_max_delay == 300.0
        assert config.max_workers == 4

    def test_from_env(self, monkeypatch):
        """Test reading configuration from environment variables."""
        monkeypatch.setenv("POLL_INTERVAL_SECONDS", "15")
        monkeypatch.setenv("RETRY_MIN_DELAY_SECONDS", "2")
        monkeypatch.setenv("MAX_WORKERS", "8")
        monkeypatch.setenv("K8S_CACHE_TTL_SECONDS", "0")

        config = OperatorConfig.from_env()

        assert config.poll_interval == 15.0
        assert config.retry_min_delay == 2.0
        assert config.max_workers == 8
        assert config.cache_ttl == 0.0

    def test_from_env_invalid_number(self, monkeypatch):
        """Test that non-numeric values are rejected."""
        monkeypatch.setenv("POLL_INTERVAL_SECONDS", "soon")

        with pytest.raises(ConfigurationError, match="POLL_INTERVAL_SECONDS must be a number"):
            OperatorConfig.from_env()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"poll_interval": 0},
            {"retry_min_delay": -1},
            {"retry_min_delay": 10, "retry_max_delay": 5},
            {"retry_backoff": 0.5},
            {"max_workers": 0},
            {"metrics_port": 70000},
            {"cache_ttl": -1},
        ],
    )
    def test_validation(self, kwargs):
        """Test that invalid values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            OperatorConfig(**kwargs)


class TestRetryDelay:
    """Test cases for retry backoff."""

    def test_exponential_growth(self):
        """Test that each retry doubles the delay."""
        config = OperatorConfig(retry_min_delay=5, retry_max_delay=300, retry_backoff=2.0)
        assert [config.retry_delay(n) for n in range(4)] == [5, 10, 20, 40]

    def test_capped_at_max(self):
        """Test that the delay never exceeds the maximum."""
        config = OperatorConfig(retry_min_delay=5, retry_max_delay=60, retry_backoff=2.0)
        assert config.retry_delay(10) == 60

    def test_negative_attempt(self):
        """Test that a negative attempt is treated as the first."""
        assert OperatorConfig(retry_min_delay=5).retry_delay(-1) == 5
