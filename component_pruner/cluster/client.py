"""Cluster client contract and its Kubernetes implementation.

The pruner depends only on `ClusterClient`; `KubernetesClusterClient` adapts
the official kubernetes dynamic client to it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from kubernetes import config as kube_config
from kubernetes.client import ApiClient
from kubernetes.config import ConfigException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import (
    DynamicApiError,
    NotFoundError,
    ResourceNotFoundError,
    ResourceNotUniqueError,
)
from urllib3.exceptions import HTTPError

from ..errors import ClusterError, ConfigError, KindNotFoundError, ResourceGoneError
from ..models.live_resource import LiveResource
from ..models.resource_kind import ResourceKind

logger = logging.getLogger(__name__)

BACKGROUND_PROPAGATION = "Background"


class ClusterClient(Protocol):
    """List/delete contract the pruner relies on."""

    def list(
        self,
        kind: ResourceKind,
        label_selector: str,
        namespace: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[LiveResource]:
        """List objects of a kind matching a label selector.

        Raises:
            KindNotFoundError: If the cluster does not serve the kind
            ClusterError: For any other API or transport failure
        """
        ...

    def delete(
        self,
        resource: LiveResource,
        propagation_policy: str = BACKGROUND_PROPAGATION,
        timeout: Optional[float] = None,
    ) -> None:
        """Delete an object.

        Raises:
            ResourceGoneError: If the object no longer exists
            ClusterError: For any other API or transport failure
        """
        ...


def create_api_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> ApiClient:
    """Create a kubernetes API client.

    Loads the given (or default) kubeconfig; falls back to in-cluster service
    account configuration when no kubeconfig is available and none was
    explicitly requested.

    Args:
        kubeconfig: Path to kubeconfig file (optional)
        context: Kubeconfig context name (optional)

    Returns:
        Configured ApiClient

    Raises:
        ConfigError: If no usable configuration is found
    """
    try:
        return kube_config.new_client_from_config(config_file=kubeconfig, context=context)
    except (ConfigException, FileNotFoundError) as e:
        if kubeconfig or context:
            raise ConfigError(f"Cannot load kubeconfig: {e}") from e
        logger.debug(f"No kubeconfig available ({e}), trying in-cluster configuration")

    try:
        kube_config.load_incluster_config()
    except ConfigException as e:
        raise ConfigError(f"No kubeconfig and not running in a cluster: {e}") from e
    return ApiClient()


class KubernetesClusterClient:
    """ClusterClient backed by `kubernetes.dynamic.DynamicClient`.

    API discovery happens lazily on first use so constructing the client
    never touches the network.
    """

    def __init__(self, api_client: ApiClient) -> None:
        """Initialize cluster client.

        Args:
            api_client: Configured kubernetes ApiClient
        """
        self.api_client = api_client
        self._dynamic: Optional[DynamicClient] = None

    @property
    def dynamic(self) -> DynamicClient:
        if self._dynamic is None:
            try:
                self._dynamic = DynamicClient(self.api_client)
            except (DynamicApiError, HTTPError) as e:
                raise ClusterError(f"API discovery failed: {e}", status=getattr(e, "status", None)) from e
        return self._dynamic

    def _resource(self, kind: ResourceKind) -> Any:
        # Discovery is refreshed over the network when a kind is missing from the cache
        try:
            return self.dynamic.resources.get(api_version=kind.api_version, kind=kind.kind)
        except ResourceNotFoundError as e:
            raise KindNotFoundError(f"{kind} not found: {e}", status=404) from e
        except ResourceNotUniqueError as e:
            raise KindNotFoundError(f"{kind} is ambiguous: {e}") from e
        except NotFoundError as e:
            raise KindNotFoundError(f"{kind} not found: {e.summary()}", status=404) from e
        except DynamicApiError as e:
            raise ClusterError(f"discovering {kind}: {e.summary()}", status=e.status) from e
        except HTTPError as e:
            raise ClusterError(f"discovering {kind}: {e}") from e

    def list(
        self,
        kind: ResourceKind,
        label_selector: str,
        namespace: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> List[LiveResource]:
        resource = self._resource(kind)
        try:
            result = resource.get(
                namespace=namespace if resource.namespaced else None,
                label_selector=label_selector,
                _request_timeout=timeout,
            )
        except NotFoundError as e:
            raise KindNotFoundError(f"{kind} not found: {e.summary()}", status=404) from e
        except DynamicApiError as e:
            raise ClusterError(f"listing {kind}: {e.summary()}", status=e.status) from e
        except HTTPError as e:
            raise ClusterError(f"listing {kind}: {e}") from e

        items: List[Dict[str, Any]] = result.to_dict().get("items") or []
        return [LiveResource.from_dict(kind, item) for item in items]

    def delete(
        self,
        resource: LiveResource,
        propagation_policy: str = BACKGROUND_PROPAGATION,
        timeout: Optional[float] = None,
    ) -> None:
        api = self._resource(resource.kind)
        body = {
            "apiVersion": "v1",
            "kind": "DeleteOptions",
            "propagationPolicy": propagation_policy,
        }
        try:
            api.delete(
                name=resource.name,
                namespace=resource.namespace,
                body=body,
                _request_timeout=timeout,
            )
        except NotFoundError as e:
            raise ResourceGoneError(f"{resource.identity_hash} already deleted", status=404) from e
        except DynamicApiError as e:
            raise ClusterError(f"deleting {resource.identity_hash}: {e.summary()}", status=e.status) from e
        except HTTPError as e:
            raise ClusterError(f"deleting {resource.identity_hash}: {e}") from e
