"""Builders that turn CRD specs into client requests and clients."""
