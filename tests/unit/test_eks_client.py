"""Tests for the EKS cluster client."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from managed_resource_operator.services.aws.eks import EKSClusterClient
from managed_resource_operator.services.errors import AlreadyExistsError, BadRequestError, NotFoundError

SPEC = {
    "region": "eu-west-1",
    "roleArn": "arn:aws:iam::123456789012:role/eks",
    "version": "1.30",
    "resourcesVpcConfig": {"subnetIds": ["subnet-a", "subnet-b"]},
}


def make_client():
    session = MagicMock()
    eks = MagicMock()
    session.client.return_value = eks
    return EKSClusterClient(region="us-east-1", access_key="ak", secret_key="sk", session=session), session, eks


class TestCreate:
    """Test cases for EKSClusterClient.create."""

    def test_create_cluster(self):
        """Test that the cluster is created in the record's region."""
        cluster_client, session, eks = make_client()
        eks.create_cluster.return_value = {"cluster": {"status": "CREATING", "arn": "arn:aws:eks:eu-west-1:1:cluster/eks-u1"}}

        observed = cluster_client.create("eks-u1", SPEC)

        assert observed.state == "CREATING"
        assert observed.ready is False
        assert observed.provider_id == "arn:aws:eks:eu-west-1:1:cluster/eks-u1"
        assert session.client.call_args.kwargs["region_name"] == "eu-west-1"
        kwargs = eks.create_cluster.call_args.kwargs
        assert kwargs["name"] == "eks-u1"
        assert kwargs["version"] == "1.30"

    def test_create_invalid_spec(self):
        """Test that a spec the builder rejects is a bad request."""
        cluster_client, _, eks = make_client()

        with pytest.raises(BadRequestError, match="roleArn is required"):
            cluster_client.create("eks-u1", {"region": "eu-west-1"})
        eks.create_cluster.assert_not_called()

    def test_create_name_in_use(self):
        """Test that a name collision is reported as AlreadyExists."""
        cluster_client, _, eks = make_client()
        eks.create_cluster.side_effect = ClientError(
            {"Error": {"Code": "ResourceInUseException", "Message": "Cluster already exists with name: eks-u1"}},
            "CreateCluster",
        )

        with pytest.raises(AlreadyExistsError):
            cluster_client.create("eks-u1", SPEC)


class TestGet:
    """Test cases for EKSClusterClient.get."""

    def test_get_creating(self):
        """Test that a creating cluster has no connection details."""
        cluster_client, _, eks = make_client()
        eks.describe_cluster.return_value = {"cluster": {"status": "CREATING"}}

        observed = cluster_client.get("eu-west-1", "eks-u1")

        assert observed.ready is False
        assert observed.connection is None
        eks.describe_cluster.assert_called_once_with(name="eks-u1")

    def test_get_active(self):
        """Test that an active cluster yields endpoint and CA certificate."""
        cluster_client, _, eks = make_client()
        ca = b"-----BEGIN CERTIFICATE-----\nMIIB\n-----END CERTIFICATE-----\n"
        eks.describe_cluster.return_value = {
            "cluster": {
                "status": "ACTIVE",
                "endpoint": "https://ABC.gr7.eu-west-1.eks.amazonaws.com",
                "certificateAuthority": {"data": base64.b64encode(ca).decode("ascii")},
                "arn": "arn:aws:eks:eu-west-1:1:cluster/eks-u1",
            }
        }

        observed = cluster_client.get("eu-west-1", "eks-u1")

        assert observed.ready is True
        assert observed.connection.endpoint == "https://ABC.gr7.eu-west-1.eks.amazonaws.com"
        assert observed.connection.ca_certificate == ca
        assert observed.connection.password == ""

    def test_get_not_found(self):
        """Test that a missing cluster raises NotFoundError."""
        cluster_client, _, eks = make_client()
        eks.describe_cluster.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "No cluster found"}},
            "DescribeCluster",
        )

        with pytest.raises(NotFoundError):
            cluster_client.get("eu-west-1", "eks-u1")

    def test_clients_are_cached_per_region(self):
        """Test that one boto3 client is built per region."""
        cluster_client, session, eks = make_client()
        eks.describe_cluster.return_value = {"cluster": {"status": "CREATING"}}

        cluster_client.get("eu-west-1", "a")
        cluster_client.get("eu-west-1", "b")
        cluster_client.get(None, "c")

        regions = [c.kwargs["region_name"] for c in session.client.call_args_list]
        assert regions == ["eu-west-1", "us-east-1"]


class TestDelete:
    """Test cases for EKSClusterClient.delete."""

    def test_delete(self):
        cluster_client, _, eks = make_client()

        cluster_client.delete("eu-west-1", "eks-u1")

        eks.delete_cluster.assert_called_once_with(name="eks-u1")
