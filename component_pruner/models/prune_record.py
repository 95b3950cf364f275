"""Prune record model.

Outcome of visiting a single live resource during a sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class PruneDecision(Enum):
    """Outcome for a single visited resource."""

    RETAINED = "retained"
    DRY_RUN_SKIPPED = "dry-run-skipped"
    DELETED = "deleted"
    DELETE_FAILED = "delete-failed"


@dataclass
class PruneRecord:
    """Prune record entity.

    Validation rules:
        - decision=delete-failed: requires error_message
        - any other decision: no error_message

    Attributes:
        operation_id: Parent operation identifier
        component: Component the resource is owned by
        resource_kind: Kind rendered as string
        resource_hash: Identity hash (Kind:namespace:name)
        decision: Outcome for the resource
        timestamp: When the decision was made (UTC)
        error_message: Failure detail for delete-failed records (optional)
    """

    operation_id: str
    component: str
    resource_kind: str
    resource_hash: str
    decision: PruneDecision
    timestamp: datetime
    error_message: Optional[str] = None

    def validate(self) -> bool:
        """Validate record invariants.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.decision == PruneDecision.DELETE_FAILED:
            if not self.error_message:
                raise ValueError("Failed deletion requires error_message")
        elif self.error_message:
            raise ValueError(f"Decision {self.decision.value} cannot carry an error message")

        if not self.resource_hash:
            raise ValueError("Record requires a resource hash")

        return True
