"""doks-autoscaler - DigitalOcean Kubernetes node pools for the cluster autoscaler.

Example:

    from doks_autoscaler import build_digitalocean, Node

    provider = build_digitalocean("/etc/kubernetes/cloud-config.json")

    for group in provider.node_groups():
        print(group.debug(), group.target_size())

    group = provider.node_group_for_node(Node(name="n1", provider_id="digitalocean://123"))
    group.increase_size(1)
"""

from loguru import logger

from doks_autoscaler.cloudprovider import (
    CloudProvider,
    Instance,
    InstanceErrorInfo,
    InstanceStatus,
    Node,
    NodeGroup,
)
from doks_autoscaler.core.exceptions import (
    ConfigurationError,
    DOKSAutoscalerError,
    InvalidDeltaError,
    NodeGroupLookupError,
    NodeNotInGroupError,
    NotImplementedByProvider,
    ProviderInitError,
    SizeLimitError,
)
from doks_autoscaler.observability.logging import LogConfig, setup_logging, teardown_logging
from doks_autoscaler.providers.digitalocean import (
    DigitalOcean,
    DigitalOceanCloudProvider,
    DigitalOceanManager,
    build_digitalocean,
)

__version__ = "0.1.0"

# Silent until setup_logging() enables the package.
logger.disable("doks_autoscaler")

__all__ = [
    # Contract
    "CloudProvider",
    "NodeGroup",
    "Node",
    "Instance",
    "InstanceStatus",
    "InstanceErrorInfo",
    # DigitalOcean
    "DigitalOcean",
    "DigitalOceanCloudProvider",
    "DigitalOceanManager",
    "build_digitalocean",
    # Logging
    "LogConfig",
    "setup_logging",
    "teardown_logging",
    # Exceptions
    "DOKSAutoscalerError",
    "ConfigurationError",
    "ProviderInitError",
    "InvalidDeltaError",
    "SizeLimitError",
    "NodeNotInGroupError",
    "NodeGroupLookupError",
    "NotImplementedByProvider",
]
