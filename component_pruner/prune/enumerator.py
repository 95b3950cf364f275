"""Ownership-scoped enumeration of live resources."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from ..cluster.client import ClusterClient
from ..errors import ClusterError, KindNotFoundError, SweepCancelled
from ..models.live_resource import LiveResource
from ..models.resource_kind import ResourceKind
from .cancellation import CancellationToken
from .labels import selector_string

logger = logging.getLogger(__name__)


class ResourceEnumerator:
    """Lists live resources of a kind owned by a component.

    Listing never fails a sweep: a kind the cluster does not serve is skipped
    immediately, and transient errors are retried with exponential backoff
    before the kind is skipped.
    """

    def __init__(self, client: ClusterClient, max_retries: int = 3, backoff_base: float = 1.0) -> None:
        """Initialize enumerator.

        Args:
            client: Cluster client collaborator
            max_retries: Attempts per kind for retryable errors (default: 3)
            backoff_base: Base delay in seconds, doubled on each retry
        """
        self.client = client
        self.max_retries = max_retries
        self.backoff_base = backoff_base

    def list_owned(
        self,
        kind: ResourceKind,
        selector: Mapping[str, str],
        namespace: Optional[str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Tuple[List[LiveResource], Optional[str]]:
        """List resources of a kind matching the ownership selector.

        Args:
            kind: Resource kind to list
            selector: Ownership label selector
            namespace: Namespace to list in (None for cluster-scoped kinds)
            cancel_token: Cancellation/deadline token (optional)

        Returns:
            Tuple of (resources, skip_reason); skip_reason is None on success

        Raises:
            SweepCancelled: If the token fired while listing was failing
        """
        token = cancel_token or CancellationToken()
        label_selector = selector_string(selector)

        for attempt in range(self.max_retries):
            try:
                resources = self.client.list(
                    kind,
                    label_selector,
                    namespace=namespace,
                    timeout=token.remaining(),
                )
                logger.debug(f"Found {len(resources)} {kind.kind} objects matching {label_selector}")
                return resources, None

            except KindNotFoundError as e:
                logger.warning(f"retrieving resources to prune type {kind}: not found: {e}")
                return [], f"kind not served: {e}"

            except ClusterError as e:
                if token.cancelled:
                    raise SweepCancelled(f"cancelled while listing {kind}") from e
                if e.retryable and attempt < self.max_retries - 1:
                    wait_time = self.backoff_base * 2 ** attempt
                    logger.debug(
                        f"Listing {kind} failed ({e}), retrying in {wait_time}s "
                        f"(attempt {attempt + 1}/{self.max_retries})"
                    )
                    if token.wait(wait_time):
                        continue
                    raise SweepCancelled(f"cancelled while listing {kind}") from e
                logger.warning(f"retrieving resources to prune type {kind}: {e}")
                return [], str(e)

        # max_retries < 1
        return [], "no listing attempts configured"
