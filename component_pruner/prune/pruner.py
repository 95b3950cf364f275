"""Pruner for component garbage collection.

Main orchestrator: sweeps the catalog for a component, classifies every owned
live resource against the expected set and deletes what is no longer desired.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import AbstractSet, Any, Dict, Iterable, Mapping, Optional

from ..catalog.catalog import DEFAULT_CATALOG, ResourceCatalog
from ..cluster.client import ClusterClient
from ..errors import DeletionFailure, LabelComputationFailure, SweepCancelled
from ..manifest.hashing import expected_hashes
from ..models.prune_operation import OperationMode, OperationStatus, PruneOperation, PruneResult
from ..models.prune_record import PruneDecision, PruneRecord
from .audit import AuditStorage
from .cache import ObjectCache
from .cancellation import CancellationToken
from .decision import Decision, PruneDecisionEngine
from .enumerator import ResourceEnumerator
from .executor import DeletionExecutor
from .labels import OwnershipLabeler, selector_string

logger = logging.getLogger(__name__)


class Pruner:
    """Prune orchestrator.

    Coordinates ownership labelling, enumeration, classification and deletion
    for one or more components. Sweeps run sequentially in catalog order and
    never stop on a single deletion failure.

    Attributes:
        namespace: Target namespace for namespaced kinds
        catalog: Ordered kinds to sweep
        dry_run: Log deletions instead of issuing them
        labeler: Ownership selector derivation
        enumerator: Live resource listing
        decision_engine: Expected-set classification
        executor: Deletion executor
        audit_storage: Audit log storage (optional)
    """

    def __init__(
        self,
        client: ClusterClient,
        namespace: str,
        catalog: ResourceCatalog = DEFAULT_CATALOG,
        dry_run: bool = False,
        labeler: Optional[OwnershipLabeler] = None,
        cache: Optional[ObjectCache] = None,
        audit_storage: Optional[AuditStorage] = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
    ) -> None:
        """Initialize pruner.

        Args:
            client: Cluster client collaborator
            namespace: Target namespace for namespaced kinds
            catalog: Catalog to traverse (default: DEFAULT_CATALOG)
            dry_run: Suppress deletions, keep decisions and logs
            labeler: Ownership labeler (default: OwnershipLabeler())
            cache: Owned object cache updated on successful deletion
            audit_storage: Audit storage; every finished sweep is logged when set
            max_retries: Attempts for retryable cluster errors
            backoff_base: Base retry delay in seconds
        """
        self.namespace = namespace
        self.catalog = catalog
        self.dry_run = dry_run
        self.labeler = labeler or OwnershipLabeler()
        self.audit_storage = audit_storage
        self.enumerator = ResourceEnumerator(client, max_retries=max_retries, backoff_base=backoff_base)
        self.decision_engine = PruneDecisionEngine(self.labeler.owner_key)
        self.executor = DeletionExecutor(
            client,
            dry_run=dry_run,
            cache=cache,
            max_retries=max_retries,
            backoff_base=backoff_base,
        )

    @property
    def cache(self) -> ObjectCache:
        return self.executor.cache

    def prune(
        self,
        manifests_by_component: Mapping[str, Iterable[Dict[str, Any]]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> PruneResult:
        """Remove resources not listed in the desired manifests of each component.

        Every component is swept even if an earlier one failed; all failures
        are merged into the result.

        Args:
            manifests_by_component: Desired manifests keyed by component name
            cancel_token: Cancellation/deadline token (optional)

        Returns:
            PruneResult with one operation per swept component
        """
        token = cancel_token or CancellationToken()
        result = PruneResult()

        for component_name, manifests in manifests_by_component.items():
            if token.cancelled:
                logger.warning(f"Prune cancelled before component {component_name}")
                result.cancelled = True
                break

            try:
                expected = expected_hashes(manifests, default_namespace=self.namespace, catalog=self.catalog)
            except ValueError as e:
                logger.error(f"Skipping prune of component {component_name}: invalid manifests: {e}")
                result.failures.add(e)
                continue

            try:
                operation = self.prune_unlisted_resources(expected, component_name, cancel_token=token)
            except LabelComputationFailure as e:
                logger.error(f"Skipping prune of component {component_name}: {e}")
                result.failures.add(e)
                continue

            result.operations.append(operation)
            result.failures.extend(operation.failures)
            if operation.status == OperationStatus.CANCELLED:
                result.cancelled = True
                break

        return result

    def delete_component(
        self,
        component_name: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PruneOperation:
        """Remove every resource owned by a component."""
        return self.prune_unlisted_resources(frozenset(), component_name, cancel_token=cancel_token)

    def prune_unlisted_resources(
        self,
        excluded: AbstractSet[str],
        component_name: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PruneOperation:
        """Delete owned resources whose identity hash is not in `excluded`.

        Args:
            excluded: Identity hashes that must survive the sweep
            component_name: Owning component
            cancel_token: Cancellation/deadline token (optional)

        Returns:
            PruneOperation with a record per visited resource

        Raises:
            LabelComputationFailure: If no ownership selector can be derived
        """
        token = cancel_token or CancellationToken()

        # Fails before any listing or deletion
        selector = self.labeler.selector_for(component_name)

        now = datetime.utcnow()
        operation = PruneOperation(
            operation_id=f"op_{uuid.uuid4()}",
            component=component_name,
            namespace=self.namespace,
            timestamp=now,
            mode=OperationMode.DRY_RUN if self.dry_run else OperationMode.EXECUTE,
            status=OperationStatus.EXECUTING,
            started_at=now,
        )
        logger.info(
            f"Pruning component {component_name} ({operation.mode.value}), "
            f"{len(excluded)} expected objects, selector {selector_string(selector)}"
        )

        cancelled = False
        for kind in self.catalog.kinds():
            if token.cancelled:
                cancelled = True
                break

            namespace = None if self.catalog.is_cluster_scoped(kind) else self.namespace
            try:
                resources, skip_reason = self.enumerator.list_owned(kind, selector, namespace, cancel_token=token)
            except SweepCancelled:
                cancelled = True
                break
            if skip_reason is not None:
                operation.skipped_kinds[str(kind)] = skip_reason
                continue

            for resource in resources:
                if token.cancelled:
                    cancelled = True
                    break

                decision = self.decision_engine.classify(resource, excluded, component_name)
                if decision == Decision.FOREIGN:
                    continue

                record = PruneRecord(
                    operation_id=operation.operation_id,
                    component=component_name,
                    resource_kind=str(kind),
                    resource_hash=resource.identity_hash,
                    decision=PruneDecision.RETAINED,
                    timestamp=datetime.utcnow(),
                )

                if decision == Decision.DELETE:
                    try:
                        record.decision = self.executor.execute(resource, component_name, cancel_token=token)
                    except SweepCancelled:
                        cancelled = True
                        break
                    except DeletionFailure as e:
                        operation.failures.add(e)
                        record.decision = PruneDecision.DELETE_FAILED
                        record.error_message = e.reason

                operation.records.append(record)

            if cancelled:
                break

        operation.finish(cancelled=cancelled)
        if cancelled:
            logger.warning(f"Prune of component {component_name} cancelled, returning partial results")

        logger.info(
            f"Pruned component {component_name}: {operation.deleted_count} deleted, "
            f"{operation.skipped_count} skipped (dry run), {operation.retained_count} retained, "
            f"{operation.failed_count} failed"
        )

        if self.audit_storage is not None:
            self.audit_storage.log_operation(operation)

        return operation
