"""Resource kind model identifying a cluster resource type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceKind:
    """A (group, version, kind) triple.

    Instances are immutable and hashable so they can be used as catalog
    entries and dictionary keys.

    Attributes:
        group: API group, empty string for the core group
        version: API version within the group (e.g., "v1")
        kind: Resource kind (e.g., "Deployment")
    """

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """Return the apiVersion string used in manifests."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "ResourceKind":
        """Build a kind from a manifest's apiVersion and kind fields."""
        if "/" in api_version:
            group, version = api_version.split("/", 1)
        else:
            group, version = "", api_version
        return cls(group=group, version=version, kind=kind)

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"
