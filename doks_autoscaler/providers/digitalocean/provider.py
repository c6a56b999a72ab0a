"""DigitalOcean cloud provider for the cluster autoscaler."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import override

from loguru import logger

from doks_autoscaler.cloudprovider import CloudProvider, Node
from doks_autoscaler.core.exceptions import NodeGroupLookupError, NotImplementedByProvider

from .config import load_config
from .manager import DigitalOceanManager
from .node_group import NodeGroup

PROVIDER_NAME = "digitalocean"

# Label added to nodes with GPU resource.
GPU_LABEL = "cloud.digitalocean.com/gpu-node"

log = logger.bind(provider="digitalocean")


class DigitalOceanCloudProvider(CloudProvider):
    """CloudProvider over the node groups cached by a DigitalOceanManager.

    Example:
        from doks_autoscaler.providers.digitalocean import build_digitalocean

        provider = build_digitalocean("/etc/kubernetes/cloud-config.json")
        for group in provider.node_groups():
            print(group.debug(), group.target_size())
    """

    def __init__(self, manager: DigitalOceanManager) -> None:
        self._manager = manager

    @property
    def manager(self) -> DigitalOceanManager:
        return self._manager

    @override
    def name(self) -> str:
        return PROVIDER_NAME

    @override
    def node_groups(self) -> list[NodeGroup]:
        return self._manager.node_groups()

    @override
    def node_group_for_node(self, node: Node) -> NodeGroup:
        """Node group of ``node``, resolved from the cache.

        Raises:
            NodeGroupLookupError: If the node is unknown, or maps to a node
                group missing from the cache.
        """
        cache = self._manager.cache
        group_id = cache.droplets.get(node.provider_id)
        if group_id is None:
            raise NodeGroupLookupError(f"node with id {node.provider_id!r} does not exist")

        group = cache.node_groups.get(group_id)
        if group is None:
            raise NodeGroupLookupError(f"node group with id {group_id!r} does not exist")
        return group

    @override
    def refresh(self) -> None:
        self._manager.refresh()

    @override
    def pricing(self) -> object:
        raise NotImplementedByProvider("pricing")

    @override
    def get_available_machine_types(self) -> list[str]:
        raise NotImplementedByProvider("get_available_machine_types")

    @override
    def new_node_group(
        self,
        machine_type: str,
        labels: Mapping[str, str],
        system_labels: Mapping[str, str],
        taints: Sequence[Mapping[str, str]],
        extra_resources: Mapping[str, str],
    ) -> NodeGroup:
        raise NotImplementedByProvider("new_node_group")

    @override
    def get_resource_limiter(self) -> object:
        raise NotImplementedByProvider("get_resource_limiter")

    @override
    def gpu_label(self) -> str:
        return GPU_LABEL

    @override
    def get_available_gpu_types(self) -> Mapping[str, None]:
        return {}

    @override
    def cleanup(self) -> None:
        raise NotImplementedByProvider("cleanup")


def build_digitalocean(cloud_config: str | Path | None = None) -> DigitalOceanCloudProvider:
    """Build the DigitalOcean cloud provider from a cloud config file.

    Raises:
        ConfigurationError: If the configuration is missing or invalid.
        ProviderInitError: If the DigitalOcean API could not be reached.
    """
    config = load_config(cloud_config)
    manager = DigitalOceanManager.from_config(config)
    log.info(
        "DigitalOcean provider ready for cluster {cluster} with {groups} node groups",
        cluster=config.cluster_id, groups=len(manager.node_groups()),
    )
    return DigitalOceanCloudProvider(manager)
