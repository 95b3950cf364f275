"""Desired manifest loading and identity hashing."""

from __future__ import annotations

from .hashing import expected_hashes, object_hash
from .loader import load_component_manifests, load_manifests

__all__ = [
    "expected_hashes",
    "load_component_manifests",
    "load_manifests",
    "object_hash",
]
