"""Prune operation model.

Represents a complete sweep over the catalog for one component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from ..errors import CompositePruneError, ErrorAggregator
from .prune_record import PruneDecision, PruneRecord


class OperationMode(Enum):
    """Operation execution mode."""

    DRY_RUN = "dry-run"
    EXECUTE = "execute"


class OperationStatus(Enum):
    """Operation status with state transitions."""

    PLANNED = "planned"
    EXECUTING = "executing"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class PruneOperation:
    """Prune operation entity.

    State transitions:
        planned → executing → completed (no deletion failed)
        planned → executing → partial (some deletions failed)
        planned → executing → failed (every attempted deletion failed)
        planned → executing → cancelled (deadline hit or cancelled mid-sweep)

    Attributes:
        operation_id: Unique identifier for the operation
        component: Component whose resources were swept
        namespace: Target namespace for namespaced kinds
        timestamp: When the operation was initiated (UTC)
        mode: dry-run or execute
        status: Current status
        records: One record per visited resource, in visit order
        skipped_kinds: Kinds whose enumeration failed softly, with the reason
        failures: Aggregated deletion failures
        started_at: When the sweep started (optional)
        completed_at: When the sweep finished (optional)
    """

    operation_id: str
    component: str
    namespace: str
    timestamp: datetime
    mode: OperationMode
    status: OperationStatus = OperationStatus.PLANNED
    records: List[PruneRecord] = field(default_factory=list)
    skipped_kinds: Dict[str, str] = field(default_factory=dict)
    failures: ErrorAggregator = field(default_factory=ErrorAggregator)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def _count(self, decision: PruneDecision) -> int:
        return sum(1 for r in self.records if r.decision == decision)

    @property
    def total_resources(self) -> int:
        return len(self.records)

    @property
    def retained_count(self) -> int:
        return self._count(PruneDecision.RETAINED)

    @property
    def skipped_count(self) -> int:
        return self._count(PruneDecision.DRY_RUN_SKIPPED)

    @property
    def deleted_count(self) -> int:
        return self._count(PruneDecision.DELETED)

    @property
    def failed_count(self) -> int:
        return self._count(PruneDecision.DELETE_FAILED)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def error(self) -> Optional[CompositePruneError]:
        """Composite error for the sweep, None when every deletion succeeded."""
        return self.failures.to_error()

    def raise_for_errors(self) -> None:
        """Raise the composite error if any deletion failed."""
        error = self.error
        if error is not None:
            raise error

    def finish(self, cancelled: bool = False) -> None:
        """Settle the final status from the recorded outcomes."""
        self.completed_at = datetime.utcnow()

        if cancelled:
            self.status = OperationStatus.CANCELLED
        elif self.mode == OperationMode.DRY_RUN:
            self.status = OperationStatus.PLANNED
        elif self.failed_count > 0:
            if self.deleted_count > 0:
                self.status = OperationStatus.PARTIAL
            else:
                self.status = OperationStatus.FAILED
        else:
            self.status = OperationStatus.COMPLETED

    def validate(self) -> bool:
        """Validate operation invariants.

        Validation rules:
            - every failed record has a matching aggregated failure
            - completed_at must be after started_at
            - dry-run mode never deletes and ends planned or cancelled

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.failed_count != len(self.failures):
            raise ValueError("Failed records don't match aggregated failures")

        if self.completed_at and self.started_at:
            if self.completed_at < self.started_at:
                raise ValueError("Completion time before start time")

        if self.mode == OperationMode.DRY_RUN:
            if self.deleted_count or self.failed_count:
                raise ValueError("Dry-run mode cannot delete resources")
            if self.status not in (OperationStatus.PLANNED, OperationStatus.CANCELLED):
                raise ValueError("Dry-run mode must have planned or cancelled status")

        return True


@dataclass
class PruneResult:
    """Outcome of pruning several components.

    Attributes:
        operations: One operation per swept component, in sweep order
        failures: Failures of every component, merged
        cancelled: Whether the run stopped before sweeping every component
    """

    operations: List[PruneOperation] = field(default_factory=list)
    failures: ErrorAggregator = field(default_factory=ErrorAggregator)
    cancelled: bool = False

    @property
    def error(self) -> Optional[CompositePruneError]:
        return self.failures.to_error()

    def raise_for_errors(self) -> None:
        error = self.error
        if error is not None:
            raise error
