"""Error types raised and aggregated by the pruner.

Taxonomy:
    LabelComputationFailure: fatal, aborts a component's sweep before any deletion
    KindNotFoundError / ClusterError: soft during enumeration, logged and skipped
    DeletionFailure: aggregated, the sweep continues
    SweepCancelled: not a failure, the sweep stops with partial results
    CompositePruneError: every aggregated failure of one or more sweeps
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional


class PrunerError(Exception):
    """Base class for all pruner errors."""


class ConfigError(PrunerError):
    """Invalid or unreadable configuration."""


class LabelComputationFailure(PrunerError):
    """An ownership selector could not be derived for a component."""

    def __init__(self, component: Optional[str], reason: str) -> None:
        self.component = component
        self.reason = reason
        super().__init__(f"cannot compute owner labels for component {component!r}: {reason}")


RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class ClusterError(PrunerError):
    """A cluster API call failed.

    Attributes:
        status: HTTP status returned by the API server, None for transport errors
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Transport failures and throttling/server errors are worth retrying."""
        return self.status is None or self.status in RETRYABLE_STATUS_CODES


class KindNotFoundError(ClusterError):
    """The cluster does not serve the requested resource kind."""

    @property
    def retryable(self) -> bool:
        return False


class ResourceGoneError(ClusterError):
    """The object no longer exists in the cluster."""

    @property
    def retryable(self) -> bool:
        return False


class DeletionFailure(PrunerError):
    """Deleting a single resource failed.

    Attributes:
        component: Component the resource belongs to
        kind: Resource kind rendered as string
        resource_hash: Identity hash of the resource
        reason: Error reported by the cluster
    """

    def __init__(self, component: str, kind: str, resource_hash: str, reason: str) -> None:
        self.component = component
        self.kind = kind
        self.resource_hash = resource_hash
        self.reason = reason
        super().__init__(f"failed to delete {resource_hash} ({kind}) of component {component}: {reason}")


class SweepCancelled(PrunerError):
    """The cancellation token fired while a cluster request was failing.

    Not a failure: the sweep stops and reports partial completion.
    """


class CompositePruneError(PrunerError):
    """One or more failures collected across a sweep."""

    def __init__(self, errors: List[Exception]) -> None:
        self.errors = list(errors)
        super().__init__(self._render())

    def _render(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0])
        lines = [f"{len(self.errors)} errors occurred:"]
        lines.extend(f"\t* {e}" for e in self.errors)
        return "\n".join(lines)


class ErrorAggregator:
    """Collects failures from independent operations without aborting.

    Nested composites are flattened so the final error lists every individual
    failure once.
    """

    def __init__(self, errors: Optional[Iterable[Exception]] = None) -> None:
        self._errors: List[Exception] = []
        for error in errors or ():
            self.add(error)

    def add(self, error: Optional[Exception]) -> None:
        """Record a failure. None is ignored."""
        if error is None:
            return
        if isinstance(error, CompositePruneError):
            self._errors.extend(error.errors)
        else:
            self._errors.append(error)

    def extend(self, other: "ErrorAggregator") -> None:
        """Merge another aggregator's failures into this one."""
        self._errors.extend(other.errors)

    @property
    def errors(self) -> List[Exception]:
        return list(self._errors)

    def to_error(self) -> Optional[CompositePruneError]:
        """Return a composite error, or None when nothing failed."""
        if not self._errors:
            return None
        return CompositePruneError(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __iter__(self) -> Iterator[Exception]:
        return iter(self._errors)
