"""Main CLI entry point using Typer."""

import logging
import sys
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..catalog.catalog import DEFAULT_CATALOG
from ..cluster.client import ClusterClient, KubernetesClusterClient, create_api_client
from ..errors import ConfigError, LabelComputationFailure
from ..manifest.loader import load_component_manifests
from ..models.prune_operation import OperationStatus
from ..prune.audit import AuditStorage
from ..prune.cancellation import CancellationToken
from ..prune.labels import OwnershipLabeler
from ..prune.pruner import Pruner
from ..prune.reporter import PruneReporter
from ..utils.logging import setup_logging
from .config import Config

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="component-pruner",
    help="Component Pruner - remove cluster resources no longer in a component's desired manifests",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None

EXIT_PRUNE_FAILED = 1
EXIT_ERROR = 2
EXIT_CANCELLED = 3


@app.callback()
def main(
    kubeconfig: Optional[str] = typer.Option(None, "--kubeconfig", help="Path to kubeconfig file"),
    context: Optional[str] = typer.Option(None, "--context", help="Kubeconfig context to use"),
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Target namespace"),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        help="Config file (default: ~/.component-pruner/config.yaml or $PRUNER_CONFIG)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """Component Pruner - garbage collection for reconciled cluster resources."""
    global config

    # Load configuration
    try:
        config = Config.load(config_file)
    except ConfigError as e:
        console.print(f"✗ Configuration error: {e}", style="bold red")
        raise typer.Exit(code=EXIT_ERROR)

    # Override with CLI options
    if kubeconfig:
        config.kubeconfig = kubeconfig
    if context:
        config.context = context
    if namespace:
        config.namespace = namespace

    # Setup logging
    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    # Disable colors if requested
    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import kubernetes

    from .. import __version__

    console.print(f"component-pruner version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"kubernetes client {kubernetes.__version__}")


def _build_client() -> ClusterClient:
    """Create the cluster client from the loaded configuration."""
    api_client = create_api_client(kubeconfig=config.kubeconfig, context=config.context)
    return KubernetesClusterClient(api_client)


def _build_pruner(dry_run: Optional[bool], audit: bool, known_components: Optional[List[str]] = None) -> Pruner:
    labeler = OwnershipLabeler(
        metadata_namespace=config.metadata_namespace,
        extra_labels=config.owner_labels,
        known_components=known_components,
    )
    return Pruner(
        client=_build_client(),
        namespace=config.namespace,
        catalog=DEFAULT_CATALOG,
        dry_run=config.dry_run if dry_run is None else dry_run,
        labeler=labeler,
        audit_storage=AuditStorage(config.audit_path) if audit else None,
        max_retries=config.max_retries,
    )


def _cancel_token(timeout: Optional[float]) -> CancellationToken:
    return CancellationToken(timeout=timeout if timeout is not None else config.timeout)


@app.command()
def prune(
    manifests: str = typer.Argument(..., help="Directory with one YAML file or sub-directory per component"),
    component: Optional[List[str]] = typer.Option(
        None, "--component", "-c", help="Only prune these components (can specify multiple)"
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Log deletions without issuing them (default: from config)"
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Overall deadline in seconds"),
    audit: bool = typer.Option(True, "--audit/--no-audit", help="Write an audit log for each component"),
    show_retained: bool = typer.Option(False, "--show-retained", help="List retained resources too"),
):
    """Prune resources that are no longer in each component's desired manifests.

    Examples:
        # Preview what would be pruned
        component-pruner prune ./manifests --dry-run

        # Prune only the gateway component
        component-pruner prune ./manifests --component gateway
    """
    try:
        manifests_by_component = load_component_manifests(manifests)
        if component:
            missing = [c for c in component if c not in manifests_by_component]
            if missing:
                console.print(f"✗ No manifests for component(s): {', '.join(missing)}", style="bold red")
                raise typer.Exit(code=EXIT_ERROR)
            manifests_by_component = {c: manifests_by_component[c] for c in component}

        if not manifests_by_component:
            console.print(f"No component manifests found in {manifests}", style="yellow")
            raise typer.Exit(code=0)

        pruner = _build_pruner(dry_run, audit, known_components=list(manifests_by_component))
        if pruner.dry_run:
            console.print("🔍 Dry run: no resources will be deleted\n")

        result = pruner.prune(manifests_by_component, cancel_token=_cancel_token(timeout))

        PruneReporter(console, show_retained=show_retained).display(result.operations)

        if result.cancelled:
            console.print("✗ Prune cancelled before completion, results are partial", style="bold yellow")
            raise typer.Exit(code=EXIT_CANCELLED)

        if result.error is not None:
            console.print(f"\n✗ Prune finished with errors:\n{result.error}", style="bold red")
            raise typer.Exit(code=EXIT_PRUNE_FAILED)

        console.print("\n✓ Prune complete", style="bold green")

    except typer.Exit:
        raise
    except (FileNotFoundError, NotADirectoryError) as e:
        console.print(f"✗ Manifests not found: {e}", style="bold red")
        raise typer.Exit(code=EXIT_ERROR)
    except ConfigError as e:
        console.print(f"✗ Configuration error: {e}", style="bold red")
        raise typer.Exit(code=EXIT_ERROR)
    except Exception as e:
        console.print(f"✗ Error during prune: {e}", style="bold red")
        logger.exception("Error in prune command")
        raise typer.Exit(code=EXIT_ERROR)


@app.command("delete-component")
def delete_component(
    name: str = typer.Argument(..., help="Component to decommission"),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Log deletions without issuing them (default: from config)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Overall deadline in seconds"),
    audit: bool = typer.Option(True, "--audit/--no-audit", help="Write an audit log"),
):
    """Delete every resource owned by a component."""
    try:
        pruner = _build_pruner(dry_run, audit)

        if not pruner.dry_run and not yes:
            confirm = typer.confirm(
                f"Delete ALL resources owned by component '{name}' in namespace '{config.namespace}'?"
            )
            if not confirm:
                console.print("Cancelled")
                raise typer.Exit(code=0)

        operation = pruner.delete_component(name, cancel_token=_cancel_token(timeout))

        PruneReporter(console).display([operation])

        if operation.status == OperationStatus.CANCELLED:
            console.print("✗ Deletion cancelled before completion, results are partial", style="bold yellow")
            raise typer.Exit(code=EXIT_CANCELLED)

        if operation.error is not None:
            console.print(f"\n✗ Deletion finished with errors:\n{operation.error}", style="bold red")
            raise typer.Exit(code=EXIT_PRUNE_FAILED)

        console.print(f"\n✓ Component '{name}' removed", style="bold green")

    except typer.Exit:
        raise
    except LabelComputationFailure as e:
        console.print(f"✗ {e}", style="bold red")
        raise typer.Exit(code=EXIT_ERROR)
    except ConfigError as e:
        console.print(f"✗ Configuration error: {e}", style="bold red")
        raise typer.Exit(code=EXIT_ERROR)
    except Exception as e:
        console.print(f"✗ Error deleting component: {e}", style="bold red")
        logger.exception("Error in delete-component command")
        raise typer.Exit(code=EXIT_ERROR)


@app.command()
def catalog():
    """Show resource kinds in prune order."""
    table = Table(title="Prune Order")
    table.add_column("#", justify="right")
    table.add_column("API Version")
    table.add_column("Kind")
    table.add_column("Scope")

    for position, kind in enumerate(DEFAULT_CATALOG.kinds(), start=1):
        scope = "Cluster" if DEFAULT_CATALOG.is_cluster_scoped(kind) else "Namespaced"
        table.add_row(str(position), kind.api_version, kind.kind, scope)

    console.print(table)


# Audit commands group
audit_app = typer.Typer(help="Audit log commands")
app.add_typer(audit_app, name="audit")


@audit_app.command("list")
def audit_list(
    component: Optional[str] = typer.Option(None, "--component", "-c", help="Filter by component"),
    since: Optional[str] = typer.Option(None, "--since", help="Only operations on or after date (YYYY-MM-DD)"),
):
    """List recorded prune operations."""
    try:
        since_dt = datetime.strptime(since, "%Y-%m-%d") if since else None
    except ValueError:
        console.print("✗ Invalid date format. Use YYYY-MM-DD", style="bold red")
        raise typer.Exit(code=1)

    storage = AuditStorage(config.audit_path)
    operations = storage.query_operations(since=since_dt, component=component)

    if not operations:
        console.print("No prune operations recorded")
        return

    table = Table(title="Prune Operations")
    table.add_column("Operation ID", style="cyan")
    table.add_column("Timestamp")
    table.add_column("Component")
    table.add_column("Mode")
    table.add_column("Status")
    table.add_column("Deleted", justify="right")
    table.add_column("Failed", justify="right")

    for data in operations:
        op = data["operation"]
        table.add_row(
            op["operation_id"],
            op["timestamp"],
            op["component"],
            op["mode"],
            op["status"],
            str(op["deleted_count"]),
            str(op["failed_count"]),
        )

    console.print(table)


@audit_app.command("show")
def audit_show(operation_id: str = typer.Argument(..., help="Operation ID")):
    """Show the records of one prune operation."""
    storage = AuditStorage(config.audit_path)
    data = storage.get_operation(operation_id)

    if data is None:
        console.print(f"✗ Operation '{operation_id}' not found", style="bold red")
        raise typer.Exit(code=1)

    op = data["operation"]
    console.print(f"[bold]Operation:[/bold] {op['operation_id']}")
    console.print(f"[bold]Component:[/bold] {op['component']} ({op['namespace']})")
    console.print(f"[bold]Mode:[/bold] {op['mode']}  [bold]Status:[/bold] {op['status']}")

    table = Table()
    table.add_column("Decision")
    table.add_column("Kind")
    table.add_column("Object")
    table.add_column("Error")
    for record in data["records"]:
        table.add_row(
            record["decision"],
            record["resource_kind"],
            record["resource_hash"],
            record["error_message"] or "",
        )
    console.print(table)

    for kind, reason in (data.get("skipped_kinds") or {}).items():
        console.print(f"  [dim]skipped {kind}: {reason}[/dim]")


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
