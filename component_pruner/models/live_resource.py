"""Live resource model for objects returned by cluster enumeration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .resource_kind import ResourceKind


def identity_hash(kind: str, namespace: Optional[str], name: str) -> str:
    """Build the identity hash of an object.

    The hash is `Kind:namespace:name`; cluster-scoped objects have an empty
    namespace segment.
    """
    return f"{kind}:{namespace or ''}:{name}"


@dataclass
class LiveResource:
    """A resource instance that currently exists in the cluster.

    Only the fields the pruner needs are modelled explicitly; the full object
    is kept in `manifest` for logging and audit purposes.

    Attributes:
        kind: Resource kind the object was listed as
        name: metadata.name
        namespace: metadata.namespace (None for cluster-scoped objects)
        labels: metadata.labels
        manifest: Raw object as returned by the cluster
    """

    kind: ResourceKind
    name: str
    namespace: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    manifest: Dict[str, Any] = field(default_factory=dict)

    @property
    def identity_hash(self) -> str:
        """Content-derived identity used to compare against the expected set."""
        return identity_hash(self.kind.kind, self.namespace, self.name)

    def owner(self, owner_key: str) -> Optional[str]:
        """Return the value of the ownership label, if present."""
        return self.labels.get(owner_key)

    @classmethod
    def from_dict(cls, kind: ResourceKind, data: Dict[str, Any]) -> "LiveResource":
        """Create a live resource from a raw object dictionary."""
        metadata = data.get("metadata") or {}
        return cls(
            kind=kind,
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace") or None,
            labels=dict(metadata.get("labels") or {}),
            manifest=data,
        )
