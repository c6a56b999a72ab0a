"""DOKS node pool exposed as an autoscaler node group.

A NodeGroup only carries the pool id, the cluster id and the client. Size
and membership change outside the autoscaler's control, so every query
goes to the API instead of a cache.
"""

from __future__ import annotations

from collections.abc import Sequence

from azure.core.exceptions import ResourceNotFoundError
from loguru import logger

from doks_autoscaler import cloudprovider
from doks_autoscaler.cloudprovider import Instance, Node
from doks_autoscaler.core.exceptions import (
    InvalidDeltaError,
    NodeNotInGroupError,
    NotImplementedByProvider,
    SizeLimitError,
)

from .client import NodePool, NodePoolClient
from .status import provider_id_for, to_instances

# DOKS does not expose per-pool autoscaling bounds to the autoscaler yet.
MIN_NODE_POOL_SIZE = 1
MAX_NODE_POOL_SIZE = 200

log = logger.bind(provider="digitalocean")


class NodeGroup(cloudprovider.NodeGroup):
    """Node group backed by a single DOKS node pool."""

    def __init__(self, id: str, cluster_id: str, client: NodePoolClient) -> None:
        self._id = id
        self._cluster_id = cluster_id
        self._client = client

    @property
    def cluster_id(self) -> str:
        return self._cluster_id

    def id(self) -> str:
        return self._id

    def min_size(self) -> int:
        return MIN_NODE_POOL_SIZE

    def max_size(self) -> int:
        return MAX_NODE_POOL_SIZE

    def debug(self) -> str:
        return f"{self.id()} ({self.min_size()}:{self.max_size()})"

    def __str__(self) -> str:
        return self.debug()

    def __repr__(self) -> str:
        return f"NodeGroup(id={self._id!r}, cluster_id={self._cluster_id!r})"

    def target_size(self) -> int:
        return int(self._get_node_pool()["count"])

    def increase_size(self, delta: int) -> None:
        """Increase the pool's node count by ``delta``.

        Returns once the API has accepted the resize; the new nodes show up
        in ``nodes()`` as they get provisioned.
        """
        if delta <= 0:
            raise InvalidDeltaError("increase_size", delta, "positive")

        pool = self._get_node_pool()
        target = int(pool["count"]) + delta
        if target > self.max_size():
            raise SizeLimitError(
                f"size increase is too large. current: {pool['count']} desired: {target} "
                f"max: {self.max_size()}"
            )

        self._resize(pool, target)

    def decrease_target_size(self, delta: int) -> None:
        """Reduce the requested size without deleting any existing node.

        Only outstanding scale-up requests can be retracted: the resulting
        target may not drop below the number of nodes the pool already has.
        """
        if delta >= 0:
            raise InvalidDeltaError("decrease_target_size", delta, "negative")

        pool = self._get_node_pool()
        existing = len(pool.get("nodes") or [])
        target = int(pool["count"]) + delta
        if target < existing:
            raise SizeLimitError(
                f"attempt to delete existing nodes. target: {target} existing nodes: {existing}"
            )
        if target < self.min_size():
            raise SizeLimitError(
                f"size decrease is too large. current: {pool['count']} desired: {target} "
                f"min: {self.min_size()}"
            )

        self._resize(pool, target)

    def delete_nodes(self, nodes: Sequence[Node]) -> None:
        """Delete member nodes of this group.

        Membership of every node is checked against the live pool before
        any deletion is issued. Deletions are not transactional: if one
        delete call fails, the ones already accepted stay in effect.

        Raises:
            NodeNotInGroupError: If a node is not a member of this group.
        """
        pool = self._get_node_pool()
        members = {provider_id_for(n): str(n["id"]) for n in pool.get("nodes") or []}

        node_ids: list[str] = []
        for node in nodes:
            node_id = members.get(node.provider_id)
            if node_id is None:
                raise NodeNotInGroupError(node.provider_id, self._id)
            if node_id not in node_ids:
                node_ids.append(node_id)

        for node_id in node_ids:
            log.info("Deleting node {node} from node pool {pool}", node=node_id, pool=self._id)
            self._client.delete_node(self._cluster_id, self._id, node_id)

    def nodes(self) -> list[Instance]:
        """All nodes of the pool, in the order the API returns them."""
        return to_instances(self._get_node_pool().get("nodes") or [])

    def exist(self) -> bool:
        """Whether the node pool still exists.

        Never raises: any failure other than "not found" is logged and
        reported as a missing pool.
        """
        try:
            self._client.get_node_pool(self._cluster_id, self._id)
        except ResourceNotFoundError:
            return False
        except Exception as e:
            log.error("couldn't obtain node pool information: {err}", err=e)
            return False
        return True

    def create(self) -> NodeGroup:
        raise NotImplementedByProvider("NodeGroup.create")

    def delete(self) -> None:
        raise NotImplementedByProvider("NodeGroup.delete")

    def autoprovisioned(self) -> bool:
        return False

    def template_node_info(self) -> object:
        raise NotImplementedByProvider("NodeGroup.template_node_info")

    def _get_node_pool(self) -> NodePool:
        return self._client.get_node_pool(self._cluster_id, self._id)

    def _resize(self, pool: NodePool, target: int) -> None:
        log.info(
            "Resizing node pool {pool} from {current} to {target}",
            pool=self._id, current=pool["count"], target=target,
        )
        self._client.update_node_pool(self._cluster_id, self._id, pool["name"], target)
