"""Kubernetes operator that provisions EKS clusters and RDS instances from custom resources."""

__version__ = "0.1.0"
