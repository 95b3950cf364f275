"""Data models for prune sweeps."""

from __future__ import annotations

from .live_resource import LiveResource
from .prune_operation import OperationMode, OperationStatus, PruneOperation, PruneResult
from .prune_record import PruneDecision, PruneRecord
from .resource_kind import ResourceKind

__all__ = [
    "LiveResource",
    "OperationMode",
    "OperationStatus",
    "PruneDecision",
    "PruneOperation",
    "PruneRecord",
    "PruneResult",
    "ResourceKind",
]
