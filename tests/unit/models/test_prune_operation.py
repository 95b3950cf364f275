"""Tests for PruneOperation and PruneResult models."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from component_pruner.errors import CompositePruneError, DeletionFailure
from component_pruner.models.prune_operation import (
    OperationMode,
    OperationStatus,
    PruneOperation,
    PruneResult,
)
from component_pruner.models.prune_record import PruneDecision, PruneRecord


def _operation(mode: OperationMode = OperationMode.EXECUTE) -> PruneOperation:
    return PruneOperation(
        operation_id="op_123",
        component="gateway",
        namespace="istio-system",
        timestamp=datetime(2025, 11, 11, 15, 30, 0),
        mode=mode,
        status=OperationStatus.EXECUTING,
        started_at=datetime(2025, 11, 11, 15, 30, 0),
    )


def _add(operation: PruneOperation, decision: PruneDecision, name: str) -> None:
    error_message = None
    if decision == PruneDecision.DELETE_FAILED:
        error_message = "forbidden"
        operation.failures.add(DeletionFailure("gateway", "apps/v1, Kind=Deployment", f"Deployment:ns:{name}", "forbidden"))
    operation.records.append(
        PruneRecord(
            operation_id=operation.operation_id,
            component="gateway",
            resource_kind="apps/v1, Kind=Deployment",
            resource_hash=f"Deployment:ns:{name}",
            decision=decision,
            timestamp=datetime(2025, 11, 11, 15, 30, 1),
            error_message=error_message,
        )
    )


class TestPruneOperation:
    """Test suite for PruneOperation model."""

    def test_counts_by_decision(self) -> None:
        """Test counters derive from records."""
        operation = _operation()
        _add(operation, PruneDecision.RETAINED, "d1")
        _add(operation, PruneDecision.DELETED, "d2")
        _add(operation, PruneDecision.DELETED, "d3")
        _add(operation, PruneDecision.DELETE_FAILED, "d4")

        assert operation.total_resources == 4
        assert operation.retained_count == 1
        assert operation.deleted_count == 2
        assert operation.failed_count == 1
        assert operation.skipped_count == 0

    def test_finish_completed_without_failures(self) -> None:
        """Test a clean sweep completes with no error."""
        operation = _operation()
        _add(operation, PruneDecision.DELETED, "d1")

        operation.finish()

        assert operation.status == OperationStatus.COMPLETED
        assert operation.error is None
        operation.raise_for_errors()
        assert operation.validate() is True

    def test_finish_partial_with_some_failures(self) -> None:
        """Test mixed results end partial with a composite error."""
        operation = _operation()
        _add(operation, PruneDecision.DELETED, "d1")
        _add(operation, PruneDecision.DELETE_FAILED, "d2")

        operation.finish()

        assert operation.status == OperationStatus.PARTIAL
        assert isinstance(operation.error, CompositePruneError)
        with pytest.raises(CompositePruneError):
            operation.raise_for_errors()

    def test_finish_failed_when_every_deletion_failed(self) -> None:
        """Test a sweep where nothing could be deleted ends failed."""
        operation = _operation()
        _add(operation, PruneDecision.DELETE_FAILED, "d1")

        operation.finish()

        assert operation.status == OperationStatus.FAILED

    def test_finish_dry_run_stays_planned(self) -> None:
        """Test dry-run sweeps end in planned status."""
        operation = _operation(OperationMode.DRY_RUN)
        _add(operation, PruneDecision.DRY_RUN_SKIPPED, "d1")

        operation.finish()

        assert operation.status == OperationStatus.PLANNED
        assert operation.validate() is True

    def test_finish_cancelled(self) -> None:
        """Test cancellation wins over other outcomes."""
        operation = _operation()
        _add(operation, PruneDecision.DELETE_FAILED, "d1")

        operation.finish(cancelled=True)

        assert operation.status == OperationStatus.CANCELLED
        assert operation.error is not None

    def test_duration(self) -> None:
        """Test duration is derived from timestamps."""
        operation = _operation()
        operation.completed_at = operation.started_at + timedelta(seconds=12)

        assert operation.duration_seconds == 12.0

    def test_validate_rejects_dry_run_deletions(self) -> None:
        """Test dry-run operations cannot contain deletions."""
        operation = _operation(OperationMode.DRY_RUN)
        _add(operation, PruneDecision.DELETED, "d1")
        operation.status = OperationStatus.PLANNED

        with pytest.raises(ValueError, match="Dry-run mode cannot delete"):
            operation.validate()

    def test_validate_rejects_unmatched_failures(self) -> None:
        """Test failed records must match aggregated failures."""
        operation = _operation()
        operation.failures.add(DeletionFailure("gateway", "k", "h", "boom"))

        with pytest.raises(ValueError, match="don't match"):
            operation.validate()

    def test_validate_rejects_completion_before_start(self) -> None:
        """Test timing validation."""
        operation = _operation()
        operation.completed_at = operation.started_at - timedelta(seconds=1)

        with pytest.raises(ValueError, match="Completion time before start time"):
            operation.validate()


class TestPruneResult:
    """Test suite for PruneResult model."""

    def test_empty_result_is_success(self) -> None:
        """Test an empty result has no error."""
        result = PruneResult()

        assert result.error is None
        result.raise_for_errors()

    def test_result_with_failures_raises(self) -> None:
        """Test merged failures surface as one composite error."""
        result = PruneResult()
        result.failures.add(DeletionFailure("a", "k", "h1", "boom"))
        result.failures.add(DeletionFailure("b", "k", "h2", "boom"))

        with pytest.raises(CompositePruneError) as exc_info:
            result.raise_for_errors()

        assert len(exc_info.value.errors) == 2
