from __future__ import annotations

import json
from pathlib import Path

import pytest
from azure.core.exceptions import HttpResponseError
from fakes.node_pool_client import FakeNodePoolClient, make_node, make_pool, server_error

from doks_autoscaler.cloudprovider import CloudProvider, Instance, InstanceStatus, Node, NodeGroup
from doks_autoscaler.core.exceptions import (
    ConfigurationError,
    NodeGroupLookupError,
    NotImplementedByProvider,
)
from doks_autoscaler.providers.digitalocean import manager as manager_module
from doks_autoscaler.providers.digitalocean.manager import DigitalOceanManager, NodeGroupCache
from doks_autoscaler.providers.digitalocean.provider import (
    GPU_LABEL,
    DigitalOceanCloudProvider,
    build_digitalocean,
)

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]


class TestConformance:
    def test_satisfies_protocols(self, provider: DigitalOceanCloudProvider):
        assert isinstance(provider, CloudProvider)
        assert all(isinstance(g, NodeGroup) for g in provider.node_groups())

    def test_every_method_callable(self, provider: DigitalOceanCloudProvider, client: FakeNodePoolClient):
        assert provider.name() == "digitalocean"
        assert provider.gpu_label() == GPU_LABEL == "cloud.digitalocean.com/gpu-node"
        assert provider.get_available_gpu_types() == {}
        provider.refresh()

        group = provider.node_group_for_node(Node(name="node-n1", provider_id="n1"))
        assert group is not None
        assert group.id() == "p1"
        assert group.min_size() == 1
        assert group.max_size() == 200
        assert group.debug() == "p1 (1:200)"
        assert group.exist() is True
        assert group.target_size() == 2
        assert len(group.nodes()) == 2
        group.increase_size(2)
        group.decrease_target_size(-1)
        group.delete_nodes([Node(name="node-n1", provider_id="n1")])
        assert group.autoprovisioned() is False

        for call in (group.create, group.delete):
            with pytest.raises(NotImplementedByProvider):
                call()

    @pytest.mark.parametrize(
        "method, args",
        [
            ("pricing", ()),
            ("get_available_machine_types", ()),
            ("new_node_group", ("s-2vcpu-4gb", {}, {}, [], {})),
            ("get_resource_limiter", ()),
            ("cleanup", ()),
        ],
    )
    def test_optional_capabilities_unsupported(
        self, provider: DigitalOceanCloudProvider, client: FakeNodePoolClient, method: str, args: tuple
    ):
        with pytest.raises(NotImplementedByProvider) as exc:
            getattr(provider, method)(*args)
        assert exc.value.capability == method
        assert client.calls == []


class TestNodeGroups:
    def test_snapshot_of_cache(self, provider: DigitalOceanCloudProvider, client: FakeNodePoolClient):
        assert sorted(g.id() for g in provider.node_groups()) == ["p1", "p2"]
        assert client.calls == []

    def test_refresh_delegates_to_manager(self, provider: DigitalOceanCloudProvider, client: FakeNodePoolClient):
        client.pools["p3"] = make_pool("p3")
        provider.refresh()
        assert client.calls == [("list_node_pools", "123456")]
        assert sorted(g.id() for g in provider.node_groups()) == ["p1", "p2", "p3"]

    def test_refresh_failure_keeps_groups(self, provider: DigitalOceanCloudProvider, client: FakeNodePoolClient):
        client.list_error = server_error()
        with pytest.raises(HttpResponseError):
            provider.refresh()
        assert sorted(g.id() for g in provider.node_groups()) == ["p1", "p2"]


class TestNodeGroupForNode:
    def test_resolves_droplet_provider_id(self, provider: DigitalOceanCloudProvider):
        group = provider.node_group_for_node(Node(name="node-n3", provider_id="digitalocean://3003"))
        assert group is not None and group.id() == "p2"

    def test_unknown_node_is_lookup_error(self, provider: DigitalOceanCloudProvider):
        with pytest.raises(NodeGroupLookupError, match="node with id 'digitalocean://999' does not exist"):
            provider.node_group_for_node(Node(name="ghost", provider_id="digitalocean://999"))

    def test_dangling_group_id_is_lookup_error(self, provider: DigitalOceanCloudProvider):
        manager = provider.manager
        manager._cache = NodeGroupCache(node_groups={}, droplets={"n1": "p1"})
        with pytest.raises(NodeGroupLookupError, match="node group with id 'p1' does not exist"):
            provider.node_group_for_node(Node(name="node-n1", provider_id="n1"))


class TestEndToEnd:
    def test_single_pool_scenario(self):
        client = FakeNodePoolClient([
            make_pool("p1", [make_node("n1", "running"), make_node("n2", "provisioning")]),
        ])
        provider = DigitalOceanCloudProvider(DigitalOceanManager(client, "cluster-1"))

        groups = provider.node_groups()
        assert [g.id() for g in groups] == ["p1"]
        assert (groups[0].min_size(), groups[0].max_size()) == (1, 200)

        group = provider.node_group_for_node(Node(name="node-n2", provider_id="n2"))
        assert group is not None and group.id() == "p1"

        assert group.nodes() == [
            Instance(id="n1", status=InstanceStatus(state="running")),
            Instance(id="n2", status=InstanceStatus(state="creating")),
        ]

    def test_scale_up_then_converge(self):
        client = FakeNodePoolClient([make_pool("p1", [make_node("n1", "running")])])
        provider = DigitalOceanCloudProvider(DigitalOceanManager(client, "cluster-1"))
        group = provider.node_groups()[0]

        group.increase_size(1)
        assert group.target_size() == 2
        assert len(group.nodes()) == 1

        client.pools["p1"]["nodes"].append(make_node("n2", "provisioning", droplet_id="42"))
        provider.refresh()

        new_group = provider.node_group_for_node(Node(name="node-n2", provider_id="digitalocean://42"))
        assert new_group is not None and new_group.id() == "p1"
        assert [i.status for i in new_group.nodes()] == [
            InstanceStatus(state="running"),
            InstanceStatus(state="creating"),
        ]


class TestBuildDigitalOcean:
    def test_missing_config_is_configuration_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("DIGITALOCEAN_TOKEN", raising=False)
        monkeypatch.delenv("DIGITALOCEAN_CLUSTER_ID", raising=False)
        with pytest.raises(ConfigurationError):
            build_digitalocean()

    def test_builds_from_cloud_config(
        self, tmp_path: Path, client: FakeNodePoolClient, monkeypatch: pytest.MonkeyPatch
    ):
        path = tmp_path / "cloud-config.json"
        path.write_text(json.dumps({"cluster_id": "123456", "token": "secret"}))
        monkeypatch.setattr(manager_module, "get_client", lambda *a, **kw: object())
        monkeypatch.setattr(manager_module, "PydoNodePoolClient", lambda _: client)

        provider = build_digitalocean(path)

        assert isinstance(provider, DigitalOceanCloudProvider)
        assert provider.manager.cluster_id == "123456"
        assert sorted(g.id() for g in provider.node_groups()) == ["p1", "p2"]
