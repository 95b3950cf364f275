"""Prune decision engine: expected-set membership classification."""

from __future__ import annotations

import logging
from enum import Enum
from typing import AbstractSet

from ..models.live_resource import LiveResource

logger = logging.getLogger(__name__)


class Decision(Enum):
    """Classification of a live resource."""

    RETAIN = "retain"
    DELETE = "delete"
    FOREIGN = "foreign"


class PruneDecisionEngine:
    """Classifies live resources as retained or deletable.

    A resource is retained if and only if its identity hash is in the expected
    set. Resources that do not carry the swept component's ownership label are
    reported as foreign and never become deletion candidates.
    """

    def __init__(self, owner_key: str) -> None:
        self.owner_key = owner_key

    def classify(self, resource: LiveResource, expected: AbstractSet[str], component: str) -> Decision:
        if resource.owner(self.owner_key) != component:
            logger.warning(
                f"Ignoring {resource.identity_hash}: owned by {resource.owner(self.owner_key)!r}, not {component!r}"
            )
            return Decision.FOREIGN

        if resource.identity_hash in expected:
            return Decision.RETAIN

        return Decision.DELETE
