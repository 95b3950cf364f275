"""Prune operation reporter for terminal output."""

from __future__ import annotations

from typing import Dict, List

from rich.console import Console
from rich.table import Table

from ..models.prune_operation import PruneOperation
from ..models.prune_record import PruneDecision

DECISION_STYLES = {
    PruneDecision.RETAINED: "green",
    PruneDecision.DRY_RUN_SKIPPED: "yellow",
    PruneDecision.DELETED: "cyan",
    PruneDecision.DELETE_FAILED: "red",
}


class PruneReporter:
    """Report prune operations using Rich."""

    def __init__(self, console: Console, show_retained: bool = False) -> None:
        """Initialize reporter.

        Args:
            console: Rich console to print to
            show_retained: Include retained resources in the table
        """
        self.console = console
        self.show_retained = show_retained

    def build_table(self, operation: PruneOperation) -> Table:
        table = Table(title=f"Component {operation.component} ({operation.mode.value})")
        table.add_column("Decision", style="bold")
        table.add_column("Kind")
        table.add_column("Object")
        table.add_column("Error")

        for record in operation.records:
            if record.decision == PruneDecision.RETAINED and not self.show_retained:
                continue
            style = DECISION_STYLES[record.decision]
            table.add_row(
                f"[{style}]{record.decision.value}[/{style}]",
                record.resource_kind,
                record.resource_hash,
                record.error_message or "",
            )

        return table

    def generate_summary(self, operations: List[PruneOperation]) -> Dict[str, int]:
        """Summarize counts across operations.

        Args:
            operations: Prune operations to summarize

        Returns:
            Dictionary with summary statistics
        """
        return {
            "components": len(operations),
            "total_resources": sum(op.total_resources for op in operations),
            "retained_count": sum(op.retained_count for op in operations),
            "deleted_count": sum(op.deleted_count for op in operations),
            "skipped_count": sum(op.skipped_count for op in operations),
            "failed_count": sum(op.failed_count for op in operations),
            "skipped_kinds": sum(len(op.skipped_kinds) for op in operations),
        }

    def display(self, operations: List[PruneOperation]) -> None:
        for operation in operations:
            if any(r.decision != PruneDecision.RETAINED or self.show_retained for r in operation.records):
                self.console.print(self.build_table(operation))
            else:
                self.console.print(f"✓ Component [bold cyan]{operation.component}[/bold cyan]: nothing to prune")

            if operation.skipped_kinds:
                self.console.print(
                    f"  [dim]{len(operation.skipped_kinds)} kind(s) not listed "
                    f"(not installed or unavailable), use --verbose for details[/dim]"
                )

        summary = self.generate_summary(operations)
        self.console.print(
            f"\nDeleted: {summary['deleted_count']}  "
            f"Dry-run skipped: {summary['skipped_count']}  "
            f"Retained: {summary['retained_count']}  "
            f"Failed: {summary['failed_count']}"
        )
