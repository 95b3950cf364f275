"""Integration tests for the prune CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from component_pruner.cli import main
from component_pruner.cli.main import app
from tests.fixtures.cluster import (
    CONFIG_MAP,
    DEPLOYMENT,
    SERVICE,
    FakeClusterClient,
    forbidden,
    make_manifest,
    make_resource,
)


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config and audit logs at a temporary directory."""
    audit_dir = tmp_path / "audit"
    monkeypatch.setenv("PRUNER_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.setenv("PRUNER_AUDIT_PATH", str(audit_dir))
    monkeypatch.setattr(main.console, "width", 200)
    for name in ("PRUNER_NAMESPACE", "PRUNER_DRY_RUN", "PRUNER_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    yield audit_dir

    # Drop handlers bound to the runner's captured streams
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_component_pruner", False):
            root.removeHandler(handler)


@pytest.fixture
def manifests_dir(tmp_path: Path) -> Path:
    """One file per component: gateway keeps its Deployment, pilot keeps its Service."""
    directory = tmp_path / "manifests"
    directory.mkdir()
    (directory / "gateway.yaml").write_text(yaml.dump(make_manifest(DEPLOYMENT, "gw")))
    (directory / "pilot.yaml").write_text(
        yaml.dump_all([make_manifest(SERVICE, "istiod"), make_manifest(CONFIG_MAP, "mesh")])
    )
    return directory


@pytest.fixture
def cluster() -> FakeClusterClient:
    return FakeClusterClient(
        [
            make_resource(DEPLOYMENT, "gw"),
            make_resource(DEPLOYMENT, "gw-old"),
            make_resource(SERVICE, "istiod", component="pilot"),
            make_resource(CONFIG_MAP, "mesh", component="pilot"),
            make_resource(CONFIG_MAP, "mesh-v1", component="pilot"),
            make_resource(CONFIG_MAP, "user-config", component=None),
        ]
    )


def _invoke(runner: CliRunner, cluster: FakeClusterClient, args: list[str], **kwargs):
    with patch("component_pruner.cli.main._build_client", return_value=cluster):
        return runner.invoke(app, args, **kwargs)


class TestPruneCommand:
    def test_prune_removes_unlisted_resources(self, runner, cluster, manifests_dir) -> None:
        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "--no-audit"])

        assert result.exit_code == 0, result.output
        assert sorted(cluster.deleted) == ["ConfigMap:istio-system:mesh-v1", "Deployment:istio-system:gw-old"]
        assert "ConfigMap:istio-system:user-config" in cluster.hashes()
        assert "Prune complete" in result.output

    def test_dry_run_deletes_nothing(self, runner, cluster, manifests_dir) -> None:
        before = cluster.hashes()

        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "--dry-run", "--no-audit"])

        assert result.exit_code == 0, result.output
        assert cluster.deleted == []
        assert cluster.hashes() == before
        assert "Dry-run skipped: 2" in result.output

    def test_dry_run_from_environment(self, runner, cluster, manifests_dir, monkeypatch) -> None:
        monkeypatch.setenv("PRUNER_DRY_RUN", "true")

        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "--no-audit"])

        assert result.exit_code == 0, result.output
        assert cluster.deleted == []

    def test_component_filter(self, runner, cluster, manifests_dir) -> None:
        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "-c", "gateway", "--no-audit"])

        assert result.exit_code == 0, result.output
        assert cluster.deleted == ["Deployment:istio-system:gw-old"]

    def test_unknown_component_is_an_error(self, runner, cluster, manifests_dir) -> None:
        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "-c", "egress", "--no-audit"])

        assert result.exit_code == 2
        assert cluster.calls == []

    def test_missing_manifests_directory(self, runner, cluster, tmp_path) -> None:
        result = _invoke(runner, cluster, ["prune", str(tmp_path / "nope"), "--no-audit"])

        assert result.exit_code == 2
        assert "Manifests not found" in result.output

    def test_deletion_failure_exits_nonzero(self, runner, cluster, manifests_dir) -> None:
        cluster.delete_errors["Deployment:istio-system:gw-old"] = [forbidden()]

        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "--no-audit"])

        assert result.exit_code == 1
        # The other component is still swept
        assert "ConfigMap:istio-system:mesh-v1" not in cluster.hashes()
        assert "Deployment:istio-system:gw-old" in cluster.hashes()

    def test_expired_deadline_exits_cancelled(self, runner, cluster, manifests_dir) -> None:
        result = _invoke(runner, cluster, ["prune", str(manifests_dir), "--timeout", "0", "--no-audit"])

        assert result.exit_code == 3
        assert cluster.deleted == []

    def test_prune_writes_audit_log(self, runner, cluster, manifests_dir, isolated_config) -> None:
        result = _invoke(runner, cluster, ["prune", str(manifests_dir)])
        assert result.exit_code == 0, result.output

        audit_files = sorted(isolated_config.glob("*/*/operation-*.yaml"))
        assert len(audit_files) == 2

        listing = _invoke(runner, cluster, ["audit", "list", "--component", "gateway"])
        assert listing.exit_code == 0, listing.output
        assert "gateway" in listing.output


class TestDeleteComponentCommand:
    def test_delete_component_with_yes(self, runner, cluster) -> None:
        result = _invoke(runner, cluster, ["delete-component", "pilot", "--yes", "--no-audit"])

        assert result.exit_code == 0, result.output
        assert sorted(cluster.deleted) == [
            "ConfigMap:istio-system:mesh",
            "ConfigMap:istio-system:mesh-v1",
            "Service:istio-system:istiod",
        ]
        assert "ConfigMap:istio-system:user-config" in cluster.hashes()

    def test_delete_component_declined(self, runner, cluster) -> None:
        result = _invoke(runner, cluster, ["delete-component", "pilot", "--no-audit"], input="n\n")

        assert result.exit_code == 0
        assert cluster.deleted == []

    def test_delete_component_dry_run_skips_prompt(self, runner, cluster) -> None:
        result = _invoke(runner, cluster, ["delete-component", "gateway", "--dry-run", "--no-audit"])

        assert result.exit_code == 0, result.output
        assert cluster.deleted == []

    def test_invalid_component_name(self, runner, cluster) -> None:
        result = _invoke(runner, cluster, ["delete-component", "not a label", "--yes", "--no-audit"])

        assert result.exit_code == 2
        assert cluster.calls == []


class TestInfoCommands:
    def test_catalog(self, runner) -> None:
        result = runner.invoke(app, ["catalog"])

        assert result.exit_code == 0, result.output
        assert "Deployment" in result.output
        assert "ClusterRole" in result.output

    def test_audit_show_missing(self, runner) -> None:
        result = runner.invoke(app, ["audit", "show", "op_missing"])

        assert result.exit_code == 1
        assert "not found" in result.output
