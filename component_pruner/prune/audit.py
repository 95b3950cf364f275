"""Audit storage for prune operations.

Stores and retrieves audit logs in YAML format for troubleshooting.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from ..models.prune_operation import PruneOperation


class AuditStorage:
    """Audit log storage and retrieval.

    Stores prune operation audit logs as YAML files organized by year/month.
    Supports querying operations by date range and component.

    Storage structure:
        ~/.component-pruner/audit-logs/
            2025/
                11/
                    operation-op_123.yaml
                    operation-op_456.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.component-pruner/audit-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".component-pruner" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_operation(self, operation: PruneOperation) -> Path:
        """Log prune operation to audit storage.

        Creates YAML file with operation metadata, skipped kinds, failures and
        all prune records. Overwrites existing log if operation ID already exists.

        Args:
            operation: Finished prune operation

        Returns:
            Path of the written audit file
        """
        year = operation.timestamp.year
        month = operation.timestamp.month
        year_month_dir = self.storage_dir / str(year) / f"{month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "component_prune",
                "created_at": datetime.utcnow().isoformat() + "Z",
            },
            "operation": {
                "operation_id": operation.operation_id,
                "component": operation.component,
                "namespace": operation.namespace,
                "timestamp": operation.timestamp.isoformat() + "Z",
                "mode": operation.mode.value,
                "status": operation.status.value,
                "total_resources": operation.total_resources,
                "retained_count": operation.retained_count,
                "deleted_count": operation.deleted_count,
                "skipped_count": operation.skipped_count,
                "failed_count": operation.failed_count,
                "started_at": operation.started_at.isoformat() + "Z" if operation.started_at else None,
                "completed_at": operation.completed_at.isoformat() + "Z" if operation.completed_at else None,
                "duration_seconds": operation.duration_seconds,
            },
            "skipped_kinds": dict(operation.skipped_kinds),
            "failures": [str(error) for error in operation.failures],
            "records": [
                {
                    "resource_kind": record.resource_kind,
                    "resource_hash": record.resource_hash,
                    "decision": record.decision.value,
                    "timestamp": record.timestamp.isoformat() + "Z",
                    "error_message": record.error_message,
                }
                for record in operation.records
            ],
        }

        audit_file = year_month_dir / f"operation-{operation.operation_id}.yaml"
        with open(audit_file, "w") as f:
            yaml.dump(audit_data, f, default_flow_style=False, sort_keys=False)

        return audit_file

    def get_operation(self, operation_id: str) -> Optional[dict]:
        """Retrieve operation audit log by ID.

        Args:
            operation_id: Operation ID to retrieve

        Returns:
            Audit log dictionary if found, None otherwise
        """
        for audit_file in self.storage_dir.glob(f"*/*/operation-{operation_id}.yaml"):
            with open(audit_file, "r") as f:
                return yaml.safe_load(f)

        return None

    def query_operations(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        component: Optional[str] = None,
    ) -> list[dict]:
        """Query operations within date range.

        Args:
            since: Start date (inclusive), None for all
            until: End date (inclusive), None for all
            component: Only operations for this component, None for all

        Returns:
            List of operation audit logs matching criteria, oldest first
        """
        results = []

        for audit_file in self.storage_dir.glob("*/*/operation-*.yaml"):
            with open(audit_file, "r") as f:
                audit_data = yaml.safe_load(f)

            operation = audit_data["operation"]
            timestamp = datetime.fromisoformat(operation["timestamp"].rstrip("Z"))

            if since and timestamp < since:
                continue
            if until and timestamp > until:
                continue
            if component and operation["component"] != component:
                continue

            results.append(audit_data)

        results.sort(key=lambda data: data["operation"]["timestamp"])
        return results
