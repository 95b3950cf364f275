"""Tests for manifest loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from component_pruner.manifest.loader import load_component_manifests, load_manifests

DEPLOYMENT_YAML = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: ingress
---
apiVersion: v1
kind: Service
metadata:
  name: ingress
---
"""

LIST_YAML = """\
apiVersion: v1
kind: List
items:
  - apiVersion: v1
    kind: ConfigMap
    metadata:
      name: mesh
  - apiVersion: v1
    kind: Secret
    metadata:
      name: certs
"""


class TestLoadManifests:
    """Test suite for load_manifests."""

    def test_multi_document_file(self, tmp_path: Path) -> None:
        """Test every document is loaded and empty ones skipped."""
        path = tmp_path / "gateway.yaml"
        path.write_text(DEPLOYMENT_YAML)

        manifests = load_manifests(path)

        assert [m["kind"] for m in manifests] == ["Deployment", "Service"]

    def test_list_objects_are_flattened(self, tmp_path: Path) -> None:
        """Test List kinds expand into their items."""
        path = tmp_path / "config.yaml"
        path.write_text(LIST_YAML)

        manifests = load_manifests(path)

        assert [m["metadata"]["name"] for m in manifests] == ["mesh", "certs"]

    def test_directory_is_loaded_recursively(self, tmp_path: Path) -> None:
        """Test YAML files in nested directories are loaded."""
        (tmp_path / "nested").mkdir()
        (tmp_path / "a.yaml").write_text(DEPLOYMENT_YAML)
        (tmp_path / "nested" / "b.yml").write_text(LIST_YAML)
        (tmp_path / "README.md").write_text("not yaml")

        manifests = load_manifests(tmp_path)

        assert len(manifests) == 4

    def test_non_mapping_document_raises(self, tmp_path: Path) -> None:
        """Test scalar documents are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="Expected a mapping"):
            load_manifests(path)

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_manifests(tmp_path / "missing.yaml")


class TestLoadComponentManifests:
    """Test suite for load_component_manifests."""

    def test_files_and_directories_map_to_components(self, tmp_path: Path) -> None:
        """Test each file stem or sub-directory becomes a component."""
        (tmp_path / "gateway.yaml").write_text(DEPLOYMENT_YAML)
        (tmp_path / "pilot").mkdir()
        (tmp_path / "pilot" / "config.yaml").write_text(LIST_YAML)

        components = load_component_manifests(tmp_path)

        assert list(components) == ["gateway", "pilot"]
        assert len(components["gateway"]) == 2
        assert len(components["pilot"]) == 2

    def test_requires_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "gateway.yaml"
        path.write_text(DEPLOYMENT_YAML)

        with pytest.raises(NotADirectoryError):
            load_component_manifests(path)
