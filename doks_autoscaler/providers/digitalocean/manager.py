"""DigitalOcean manager: API client, cluster id and node-group cache.

The cache holds only what is stable between control-loop iterations: the
set of node pools and which node belongs to which pool. It is rebuilt
from scratch on every refresh and swapped in as one immutable snapshot,
so concurrent readers see either the previous generation or the new one.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from loguru import logger

from doks_autoscaler.core.exceptions import ConfigurationError, ProviderInitError

from .client import NodePoolClient, PydoNodePoolClient, get_client
from .config import DigitalOcean
from .node_group import NodeGroup
from .status import provider_id_for

log = logger.bind(provider="digitalocean", component="manager")


@dataclass(frozen=True, slots=True)
class NodeGroupCache:
    """One generation of node-group data.

    ``droplets`` maps a node's provider id to its node group id; every
    value is a key of ``node_groups``.
    """
    node_groups: Mapping[str, NodeGroup] = field(default_factory=lambda: MappingProxyType({}))
    droplets: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


class DigitalOceanManager:
    """Handles DigitalOcean communication and caching of node groups."""

    def __init__(self, client: NodePoolClient, cluster_id: str) -> None:
        if not cluster_id:
            raise ConfigurationError("cluster ID is not provided")

        self._client = client
        self._cluster_id = cluster_id
        self._swap_lock = threading.Lock()
        self._cache = NodeGroupCache()

        self.refresh()

    @classmethod
    def from_config(cls, config: DigitalOcean) -> DigitalOceanManager:
        """Build a manager talking to the DigitalOcean API.

        Raises:
            ConfigurationError: If the configuration is incomplete.
            ProviderInitError: If the initial node pool listing fails.
        """
        config.validate()
        client = PydoNodePoolClient(
            get_client(config.token, url=config.api_url, version=config.client_version)
        )
        try:
            return cls(client, config.cluster_id)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ProviderInitError(
                f"couldn't list node pools of cluster {config.cluster_id} at {config.api_url}: {e}"
            ) from e

    @property
    def cluster_id(self) -> str:
        return self._cluster_id

    @property
    def cache(self) -> NodeGroupCache:
        return self._cache

    def refresh(self) -> None:
        """Reload node pools and replace the node-group cache.

        If listing fails the previous cache stays in place and the error
        propagates.
        """
        node_pools = self._client.list_node_pools(self._cluster_id)

        node_groups: dict[str, NodeGroup] = {}
        droplets: dict[str, str] = {}
        for pool in node_pools:
            pool_id = str(pool["id"])
            # size and nodes are not cached here, NodeGroup fetches them live
            node_groups[pool_id] = NodeGroup(pool_id, self._cluster_id, self._client)
            for node in pool.get("nodes") or []:
                droplets[provider_id_for(node)] = pool_id

        cache = NodeGroupCache(
            node_groups=MappingProxyType(node_groups),
            droplets=MappingProxyType(droplets),
        )
        with self._swap_lock:
            self._cache = cache

        log.debug(
            "Refreshed {groups} node groups with {nodes} nodes",
            groups=len(node_groups), nodes=len(droplets),
        )

    def node_groups(self) -> list[NodeGroup]:
        return list(self._cache.node_groups.values())

    def node_group(self, id: str) -> NodeGroup | None:
        return self._cache.node_groups.get(id)

    def node_group_id_for(self, provider_id: str) -> str | None:
        return self._cache.droplets.get(provider_id)

    def node_group_for_provider_id(self, provider_id: str) -> NodeGroup | None:
        cache = self._cache
        group_id = cache.droplets.get(provider_id)
        if group_id is None:
            return None
        return cache.node_groups.get(group_id)
