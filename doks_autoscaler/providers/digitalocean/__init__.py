"""DigitalOcean Kubernetes (DOKS) cloud provider.

Example:
    from doks_autoscaler.providers.digitalocean import build_digitalocean

    provider = build_digitalocean("/etc/kubernetes/cloud-config.json")
    provider.refresh()
    group = provider.node_group_for_node(node)
"""

from doks_autoscaler.providers.digitalocean.client import NodePoolClient, PydoNodePoolClient
from doks_autoscaler.providers.digitalocean.config import DigitalOcean, load_config
from doks_autoscaler.providers.digitalocean.manager import DigitalOceanManager, NodeGroupCache
from doks_autoscaler.providers.digitalocean.node_group import (
    MAX_NODE_POOL_SIZE,
    MIN_NODE_POOL_SIZE,
    NodeGroup,
)
from doks_autoscaler.providers.digitalocean.provider import (
    GPU_LABEL,
    PROVIDER_NAME,
    DigitalOceanCloudProvider,
    build_digitalocean,
)
from doks_autoscaler.providers.digitalocean.status import to_instance_status

__all__ = [
    "DigitalOcean",
    "DigitalOceanCloudProvider",
    "DigitalOceanManager",
    "GPU_LABEL",
    "MAX_NODE_POOL_SIZE",
    "MIN_NODE_POOL_SIZE",
    "NodeGroup",
    "NodeGroupCache",
    "NodePoolClient",
    "PROVIDER_NAME",
    "PydoNodePoolClient",
    "build_digitalocean",
    "load_config",
    "to_instance_status",
]
