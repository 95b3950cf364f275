"""Resource pruning module.

This module discovers live resources owned by a component that are no longer
part of its desired manifests and deletes them, in catalog order, with dry-run
gating and partial-failure tolerance.

Classes:
    Pruner: Main orchestrator for prune sweeps
    OwnershipLabeler: Ownership label selector derivation
    ResourceEnumerator: Soft-failing, ownership-scoped listing
    PruneDecisionEngine: Expected-set membership classification
    DeletionExecutor: Dry-run gated cascading deletion
    AuditStorage: Audit log storage and retrieval
    PruneReporter: Terminal reporting of prune operations
"""

from __future__ import annotations

__all__ = [
    "Pruner",
    "OwnershipLabeler",
    "ResourceEnumerator",
    "PruneDecisionEngine",
    "DeletionExecutor",
    "AuditStorage",
    "PruneReporter",
]
