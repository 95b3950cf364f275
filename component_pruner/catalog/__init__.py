"""Resource kind catalog defining prune order."""

from __future__ import annotations

from .catalog import DEFAULT_CATALOG, ResourceCatalog

__all__ = ["DEFAULT_CATALOG", "ResourceCatalog"]
