"""DigitalOcean Kubernetes node-pool client using the pydo SDK."""

from __future__ import annotations

from typing import Any, Protocol

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from pydo import Client

DEFAULT_API_URL = "https://api.digitalocean.com"
USER_AGENT_PRODUCT = "cluster-autoscaler-digitalocean"

type NodePool = dict[str, Any]


class NodePoolClient(Protocol):
    """Node-pool operations the adapter needs from the DOKS API.

    Implementations raise azure-core exceptions on failure. A missing
    pool must raise ``azure.core.exceptions.ResourceNotFoundError``.
    """

    def list_node_pools(self, cluster_id: str) -> list[NodePool]:
        ...

    def get_node_pool(self, cluster_id: str, pool_id: str) -> NodePool:
        ...

    def update_node_pool(self, cluster_id: str, pool_id: str, name: str, count: int) -> NodePool:
        ...

    def delete_node(self, cluster_id: str, pool_id: str, node_id: str) -> None:
        ...


def user_agent(version: str) -> str:
    return f"{USER_AGENT_PRODUCT}/{version}"


def get_client(token: str, url: str = DEFAULT_API_URL, version: str = "dev") -> Client:
    """Create authenticated pydo client.

    Args:
        token: DigitalOcean API token.
        url: API base URL.
        version: Autoscaler version, sent as part of the User-Agent.

    Returns:
        Authenticated pydo Client instance.
    """
    return Client(token=token, endpoint=url, user_agent=user_agent(version))


class PydoNodePoolClient:
    """NodePoolClient backed by ``pydo.Client.kubernetes``.

    pydo treats 404 as an expected status on these operations and returns
    the error body (``{"id": "not_found", "message": ...}``) instead of
    raising, so every response is checked here.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    def list_node_pools(self, cluster_id: str) -> list[NodePool]:
        resp = self._client.kubernetes.list_node_pools(cluster_id=cluster_id)
        return list(_unwrap(resp, "node_pools") or [])

    def get_node_pool(self, cluster_id: str, pool_id: str) -> NodePool:
        resp = self._client.kubernetes.get_node_pool(cluster_id=cluster_id, node_pool_id=pool_id)
        return _unwrap(resp, "node_pool")

    def update_node_pool(self, cluster_id: str, pool_id: str, name: str, count: int) -> NodePool:
        resp = self._client.kubernetes.update_node_pool(
            cluster_id=cluster_id,
            node_pool_id=pool_id,
            body={"name": name, "count": count},
        )
        return _unwrap(resp, "node_pool")

    def delete_node(self, cluster_id: str, pool_id: str, node_id: str) -> None:
        resp = self._client.kubernetes.delete_node(
            cluster_id=cluster_id,
            node_pool_id=pool_id,
            node_id=node_id,
        )
        # 202 carries no body
        if resp:
            raise _api_error(resp)


def _unwrap(resp: Any, key: str) -> Any:
    if isinstance(resp, dict) and key in resp:
        return resp[key]
    raise _api_error(resp)


def _api_error(resp: Any) -> HttpResponseError:
    body = resp if isinstance(resp, dict) else {}
    error_id = body.get("id", "unknown")
    message = f"{error_id}: {body.get('message', resp)}"
    if error_id == "not_found":
        return ResourceNotFoundError(message=message)
    return HttpResponseError(message=message)
