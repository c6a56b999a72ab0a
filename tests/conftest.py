from __future__ import annotations

import pytest
from fakes.node_pool_client import FakeNodePoolClient, make_node, make_pool

from doks_autoscaler.providers.digitalocean import DigitalOceanCloudProvider, DigitalOceanManager

CLUSTER_ID = "123456"


@pytest.fixture
def client() -> FakeNodePoolClient:
    """Cluster with pool p1 (n1 running, n2 provisioning) and pool p2 (n3 running)."""
    return FakeNodePoolClient([
        make_pool("p1", [make_node("n1", "running"), make_node("n2", "provisioning")]),
        make_pool("p2", [make_node("n3", "running", droplet_id="3003")]),
    ])


@pytest.fixture
def manager(client: FakeNodePoolClient) -> DigitalOceanManager:
    m = DigitalOceanManager(client, CLUSTER_ID)
    client.reset_calls()
    return m


@pytest.fixture
def provider(manager: DigitalOceanManager) -> DigitalOceanCloudProvider:
    return DigitalOceanCloudProvider(manager)
