"""Ownership label selector derivation."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional

from ..errors import LabelComputationFailure

# MetadataNamespace is the namespace for reconciler metadata (labels, annotations)
METADATA_NAMESPACE = "install.operator.istio.io"

OWNER_NAME_SUFFIX = "owner-name"

MAX_LABEL_VALUE_LENGTH = 63
_LABEL_VALUE_RE = re.compile(r"^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$")


def owner_name_key(metadata_namespace: str = METADATA_NAMESPACE) -> str:
    """Label key carrying the owning component's name."""
    return f"{metadata_namespace}/{OWNER_NAME_SUFFIX}"


def selector_string(labels: Mapping[str, str]) -> str:
    """Render labels as an equality-based selector (`k=v,k2=v2`)."""
    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


class OwnershipLabeler:
    """Derives the label selector scoping lookups to one component.

    Attributes:
        metadata_namespace: Label domain for reconciler metadata
        extra_labels: Static labels every owned resource also carries
        known_components: When set, only these component names resolve
    """

    def __init__(
        self,
        metadata_namespace: str = METADATA_NAMESPACE,
        extra_labels: Optional[Mapping[str, str]] = None,
        known_components: Optional[Iterable[str]] = None,
    ) -> None:
        self.metadata_namespace = metadata_namespace
        self.extra_labels = dict(extra_labels or {})
        self.known_components = frozenset(known_components) if known_components is not None else None

    @property
    def owner_key(self) -> str:
        return owner_name_key(self.metadata_namespace)

    def selector_for(self, component_name: Optional[str]) -> Dict[str, str]:
        """Compute the ownership selector for a component.

        Args:
            component_name: Name of the owning component

        Returns:
            Label mapping including the owner-name label

        Raises:
            LabelComputationFailure: If the name is missing, unknown or not a valid label value
        """
        if not component_name:
            raise LabelComputationFailure(component_name, "component name is empty")

        if self.known_components is not None and component_name not in self.known_components:
            raise LabelComputationFailure(component_name, "component is not known to this reconciler")

        for key, value in [(self.owner_key, component_name)] + list(self.extra_labels.items()):
            if len(value) > MAX_LABEL_VALUE_LENGTH or not _LABEL_VALUE_RE.match(value):
                raise LabelComputationFailure(component_name, f"invalid value {value!r} for label {key}")

        labels = dict(self.extra_labels)
        labels[self.owner_key] = component_name
        return labels
