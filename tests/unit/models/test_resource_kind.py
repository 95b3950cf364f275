"""Tests for ResourceKind and LiveResource models."""

from __future__ import annotations

import pytest

from component_pruner.models.live_resource import LiveResource, identity_hash
from component_pruner.models.resource_kind import ResourceKind


class TestResourceKind:
    """Test suite for ResourceKind model."""

    def test_api_version_for_core_group(self) -> None:
        """Test core group kinds use the bare version."""
        assert ResourceKind("", "v1", "Service").api_version == "v1"

    def test_api_version_for_named_group(self) -> None:
        """Test named group kinds use group/version."""
        assert ResourceKind("apps", "v1", "Deployment").api_version == "apps/v1"

    def test_str_rendering(self) -> None:
        """Test string form includes api version and kind."""
        assert str(ResourceKind("apps", "v1", "Deployment")) == "apps/v1, Kind=Deployment"

    def test_from_api_version(self) -> None:
        """Test parsing apiVersion strings."""
        assert ResourceKind.from_api_version("apps/v1", "Deployment") == ResourceKind("apps", "v1", "Deployment")
        assert ResourceKind.from_api_version("v1", "Service") == ResourceKind("", "v1", "Service")

    def test_is_immutable_and_hashable(self) -> None:
        """Test kinds can be used as dict keys and cannot be mutated."""
        kind = ResourceKind("apps", "v1", "Deployment")
        assert {kind: 1}[ResourceKind("apps", "v1", "Deployment")] == 1

        with pytest.raises(AttributeError):
            kind.kind = "StatefulSet"  # type: ignore[misc]


class TestLiveResource:
    """Test suite for LiveResource model."""

    def test_from_dict_reads_metadata(self) -> None:
        """Test building a live resource from a raw object."""
        kind = ResourceKind("apps", "v1", "Deployment")
        data = {
            "kind": "Deployment",
            "metadata": {"name": "ingress", "namespace": "istio-system", "labels": {"app": "ingress"}},
        }

        resource = LiveResource.from_dict(kind, data)

        assert resource.name == "ingress"
        assert resource.namespace == "istio-system"
        assert resource.labels == {"app": "ingress"}
        assert resource.manifest is data

    def test_identity_hash_namespaced(self) -> None:
        """Test identity hash format for namespaced objects."""
        resource = LiveResource(kind=ResourceKind("apps", "v1", "Deployment"), name="d1", namespace="ns")
        assert resource.identity_hash == "Deployment:ns:d1"

    def test_identity_hash_cluster_scoped(self) -> None:
        """Test cluster-scoped objects have an empty namespace segment."""
        data = {"metadata": {"name": "reader"}}
        resource = LiveResource.from_dict(ResourceKind("rbac.authorization.k8s.io", "v1", "ClusterRole"), data)

        assert resource.namespace is None
        assert resource.identity_hash == "ClusterRole::reader"
        assert identity_hash("ClusterRole", None, "reader") == identity_hash("ClusterRole", "", "reader")

    def test_owner_label_lookup(self) -> None:
        """Test owner() returns the ownership label value."""
        resource = LiveResource(
            kind=ResourceKind("", "v1", "Service"),
            name="s1",
            labels={"example.io/owner-name": "gateway"},
        )

        assert resource.owner("example.io/owner-name") == "gateway"
        assert resource.owner("other") is None
