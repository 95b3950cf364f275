"""Identity hashing for desired manifests."""

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Iterable, Optional

from ..catalog.catalog import DEFAULT_CATALOG, ResourceCatalog
from ..models.live_resource import identity_hash

logger = logging.getLogger(__name__)


def object_hash(
    manifest: Dict[str, Any],
    default_namespace: Optional[str] = None,
    catalog: ResourceCatalog = DEFAULT_CATALOG,
) -> str:
    """Compute the identity hash of a desired manifest.

    Namespaced objects without metadata.namespace are assumed to land in
    `default_namespace`, which is where the reconciler applies them.

    Args:
        manifest: Object dictionary with kind and metadata.name
        default_namespace: Namespace applied when the manifest has none
        catalog: Catalog used to tell cluster-scoped kinds apart

    Returns:
        Identity hash string (Kind:namespace:name)

    Raises:
        ValueError: If kind or metadata.name is missing
    """
    kind = manifest.get("kind")
    metadata = manifest.get("metadata") or {}
    name = metadata.get("name")
    if not kind or not name:
        raise ValueError(f"Manifest is missing kind or metadata.name: {manifest!r:.120}")

    if catalog.is_cluster_scoped_kind(kind):
        namespace = None
    else:
        namespace = metadata.get("namespace") or default_namespace

    return identity_hash(kind, namespace, name)


def expected_hashes(
    manifests: Iterable[Dict[str, Any]],
    default_namespace: Optional[str] = None,
    catalog: ResourceCatalog = DEFAULT_CATALOG,
) -> FrozenSet[str]:
    """Build the expected set for a component from its desired manifests."""
    hashes = set()
    for manifest in manifests:
        hashes.add(object_hash(manifest, default_namespace=default_namespace, catalog=catalog))
    logger.debug(f"Computed {len(hashes)} expected object hashes")
    return frozenset(hashes)
