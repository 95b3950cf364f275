"""Cluster API collaborator used to list and delete resources."""

from __future__ import annotations

from .client import BACKGROUND_PROPAGATION, ClusterClient, KubernetesClusterClient, create_api_client

__all__ = [
    "BACKGROUND_PROPAGATION",
    "ClusterClient",
    "KubernetesClusterClient",
    "create_api_client",
]
