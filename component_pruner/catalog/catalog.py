"""Ordered catalog of resource kinds swept by the pruner.

Kinds that reference or depend on another kind are listed before the kinds
they depend on, so deletions never leave dangling references mid-sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from ..models.resource_kind import ResourceKind


@dataclass(frozen=True)
class ResourceCatalog:
    """Immutable ordered catalog.

    Attributes:
        namespaced: Namespace-scoped kinds, first to last deleted
        cluster_scoped: Cluster-scoped kinds, first to last deleted
    """

    namespaced: Tuple[ResourceKind, ...]
    cluster_scoped: Tuple[ResourceKind, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable but freeze to tuples
        object.__setattr__(self, "namespaced", tuple(self.namespaced))
        object.__setattr__(self, "cluster_scoped", tuple(self.cluster_scoped))

        seen = set()
        for kind in self.namespaced + self.cluster_scoped:
            if kind in seen:
                raise ValueError(f"Duplicate kind in catalog: {kind}")
            seen.add(kind)

    def kinds(self) -> Iterator[ResourceKind]:
        """Traverse namespaced kinds, then cluster-scoped kinds."""
        yield from self.namespaced
        yield from self.cluster_scoped

    def is_cluster_scoped(self, kind: ResourceKind) -> bool:
        return kind in self.cluster_scoped

    def is_cluster_scoped_kind(self, kind_name: str) -> bool:
        """Check scope by kind name alone (manifests carry no scope information)."""
        return any(k.kind == kind_name for k in self.cluster_scoped)

    def index(self, kind: ResourceKind) -> int:
        """Position of a kind in traversal order."""
        return list(self.kinds()).index(kind)

    def restricted_to(self, kind_names: Iterable[str]) -> "ResourceCatalog":
        """Return a catalog keeping only the named kinds, preserving order."""
        wanted = set(kind_names)
        return ResourceCatalog(
            namespaced=tuple(k for k in self.namespaced if k.kind in wanted),
            cluster_scoped=tuple(k for k in self.cluster_scoped if k.kind in wanted),
        )

    def __len__(self) -> int:
        return len(self.namespaced) + len(self.cluster_scoped)

    def __iter__(self) -> Iterator[ResourceKind]:
        return self.kinds()


def _kinds(*entries: Tuple[str, str, str]) -> Tuple[ResourceKind, ...]:
    return tuple(ResourceKind(group=g, version=v, kind=k) for g, v, k in entries)


DEFAULT_CATALOG = ResourceCatalog(
    # ordered by which types should be deleted, first to last
    namespaced=_kinds(
        ("autoscaling", "v2beta1", "HorizontalPodAutoscaler"),
        ("policy", "v1beta1", "PodDisruptionBudget"),
        ("apps", "v1", "StatefulSet"),
        ("apps", "v1", "Deployment"),
        ("apps", "v1", "DaemonSet"),
        ("extensions", "v1beta1", "Ingress"),
        ("", "v1", "Service"),
        # Endpoints are created by the cluster, never from manifests.
        ("", "v1", "ConfigMap"),
        ("", "v1", "PersistentVolumeClaim"),
        ("", "v1", "Pod"),
        ("", "v1", "Secret"),
        ("", "v1", "ServiceAccount"),
        ("rbac.authorization.k8s.io", "v1beta1", "RoleBinding"),
        ("rbac.authorization.k8s.io", "v1", "RoleBinding"),
        ("rbac.authorization.k8s.io", "v1beta1", "Role"),
        ("rbac.authorization.k8s.io", "v1", "Role"),
        ("config.istio.io", "v1alpha2", "adapter"),
        ("config.istio.io", "v1alpha2", "attributemanifest"),
        ("config.istio.io", "v1alpha2", "handler"),
        ("config.istio.io", "v1alpha2", "instance"),
        ("config.istio.io", "v1alpha2", "HTTPAPISpec"),
        ("config.istio.io", "v1alpha2", "HTTPAPISpecBinding"),
        ("config.istio.io", "v1alpha2", "QuotaSpec"),
        ("config.istio.io", "v1alpha2", "QuotaSpecBinding"),
        ("config.istio.io", "v1alpha2", "rule"),
        ("config.istio.io", "v1alpha2", "template"),
        ("networking.istio.io", "v1alpha3", "DestinationRule"),
        ("networking.istio.io", "v1alpha3", "EnvoyFilter"),
        ("networking.istio.io", "v1alpha3", "Gateway"),
        ("networking.istio.io", "v1alpha3", "ServiceEntry"),
        ("networking.istio.io", "v1alpha3", "Sidecar"),
        ("networking.istio.io", "v1alpha3", "VirtualService"),
        ("rbac.istio.io", "v1alpha1", "ClusterRbacConfig"),
        ("rbac.istio.io", "v1alpha1", "RbacConfig"),
        ("rbac.istio.io", "v1alpha1", "ServiceRole"),
        ("rbac.istio.io", "v1alpha1", "ServiceRoleBinding"),
        ("security.istio.io", "v1beta1", "AuthorizationPolicy"),
        ("security.istio.io", "v1beta1", "RequestAuthentication"),
        ("security.istio.io", "v1beta1", "PeerAuthentication"),
    ),
    cluster_scoped=_kinds(
        ("admissionregistration.k8s.io", "v1beta1", "MutatingWebhookConfiguration"),
        ("admissionregistration.k8s.io", "v1beta1", "ValidatingWebhookConfiguration"),
        ("rbac.authorization.k8s.io", "v1", "ClusterRole"),
        ("rbac.authorization.k8s.io", "v1", "ClusterRoleBinding"),
        # CRDs are never pruned: removing one wipes out user config.
    ),
)
