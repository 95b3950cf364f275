"""Dry-run gated, cascading resource deletion."""

from __future__ import annotations

import logging
from typing import Optional

from ..cluster.client import BACKGROUND_PROPAGATION, ClusterClient
from ..errors import ClusterError, DeletionFailure, ResourceGoneError, SweepCancelled
from ..models.live_resource import LiveResource
from ..models.prune_record import PruneDecision
from .cache import ObjectCache
from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Deletes resources that are no longer desired.

    Deletions use background propagation so the cluster removes dependent
    objects asynchronously. An object that is already gone counts as deleted.

    Attributes:
        client: Cluster client collaborator
        dry_run: When True, log intended deletions without issuing them
        cache: Owned object cache updated after confirmed deletions
        max_retries: Attempts per resource for retryable errors
        backoff_base: Base delay in seconds, doubled on each retry
    """

    def __init__(
        self,
        client: ClusterClient,
        dry_run: bool = False,
        cache: Optional[ObjectCache] = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
    ) -> None:
        self.client = client
        self.dry_run = dry_run
        self.cache = cache if cache is not None else ObjectCache()
        self.max_retries = max_retries
        self.backoff_base = backoff_base

    def execute(
        self,
        resource: LiveResource,
        component: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> PruneDecision:
        """Delete a resource, or log the intent in dry-run mode.

        Args:
            resource: Resource classified for deletion
            component: Owning component
            cancel_token: Cancellation/deadline token (optional)

        Returns:
            PruneDecision.DRY_RUN_SKIPPED or PruneDecision.DELETED

        Raises:
            DeletionFailure: If the cluster rejected the deletion
            SweepCancelled: If the token fired before the deletion could complete
        """
        object_hash = resource.identity_hash

        if self.dry_run:
            logger.info(f"Not pruning object {object_hash} because of dry run.")
            return PruneDecision.DRY_RUN_SKIPPED

        token = cancel_token or CancellationToken()
        try:
            self._delete(resource, token)
        except ResourceGoneError:
            logger.info(f"Object {object_hash} already deleted")
        except ClusterError as e:
            if token.cancelled:
                logger.warning(f"Deletion of {object_hash} interrupted by cancellation: {e}")
                raise SweepCancelled(f"cancelled while deleting {object_hash}") from e
            logger.error(f"Failed to prune object {object_hash}: {e}")
            raise DeletionFailure(component, str(resource.kind), object_hash, str(e)) from e

        self.cache.remove(component, object_hash)
        logger.info(f"Pruned object {object_hash}.")
        return PruneDecision.DELETED

    def _delete(self, resource: LiveResource, token: CancellationToken) -> None:
        for attempt in range(self.max_retries):
            try:
                self.client.delete(
                    resource,
                    propagation_policy=BACKGROUND_PROPAGATION,
                    timeout=token.remaining(),
                )
                return
            except ClusterError as e:
                if not e.retryable or attempt >= self.max_retries - 1:
                    raise
                wait_time = self.backoff_base * 2 ** attempt
                logger.debug(
                    f"Deleting {resource.identity_hash} failed ({e}), retrying in {wait_time}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                if not token.wait(wait_time):
                    raise

        raise ClusterError(f"no deletion attempts configured for {resource.identity_hash}")
