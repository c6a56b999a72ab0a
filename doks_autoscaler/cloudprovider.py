"""Provider-agnostic contract consumed by the autoscaling control loop.

The control loop only ever talks to these types: a CloudProvider that
enumerates node groups and resolves nodes to groups, and NodeGroup handles
that expose size bounds, live sizes and scale operations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable

type InstanceState = Literal["creating", "running", "deleting"]

type InstanceErrorClass = Literal["out_of_resources", "other"]


@dataclass(frozen=True, slots=True)
class InstanceErrorInfo:
    """Why an instance is in an error state."""
    error_class: InstanceErrorClass
    error_code: str
    error_message: str


@dataclass(frozen=True, slots=True)
class InstanceStatus:
    """Lifecycle status of an instance.

    Exactly one of ``state`` and ``error_info`` is set.
    """
    state: InstanceState | None = None
    error_info: InstanceErrorInfo | None = None

    @property
    def errored(self) -> bool:
        return self.error_info is not None


@dataclass(frozen=True, slots=True)
class Instance:
    """A single compute node as seen by the control loop."""
    id: str
    status: InstanceStatus | None = None


@dataclass(frozen=True, slots=True)
class Node:
    """Reference to a Kubernetes node handed in by the control loop."""
    name: str
    provider_id: str
    labels: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class NodeGroup(Protocol):
    """A set of nodes that share capacity and labels and scale together."""

    def id(self) -> str:
        """Unique identifier of the node group."""
        ...

    def min_size(self) -> int:
        ...

    def max_size(self) -> int:
        ...

    def target_size(self) -> int:
        """Current requested size of the node group.

        It may differ from the number of registered nodes until the
        group stabilizes (new nodes finish startup, removed nodes go away).
        """
        ...

    def increase_size(self, delta: int) -> None:
        """Request ``delta`` more nodes. Returns once the request is accepted."""
        ...

    def decrease_target_size(self, delta: int) -> None:
        """Retract unfulfilled scale-up requests. ``delta`` is negative.

        Never deletes an existing node.
        """
        ...

    def delete_nodes(self, nodes: Sequence[Node]) -> None:
        """Delete the given member nodes from the group."""
        ...

    def nodes(self) -> list[Instance]:
        ...

    def exist(self) -> bool:
        """Whether the group really exists on the cloud provider side."""
        ...

    def debug(self) -> str:
        ...

    def create(self) -> NodeGroup:
        ...

    def delete(self) -> None:
        ...

    def autoprovisioned(self) -> bool:
        ...


@runtime_checkable
class CloudProvider(Protocol):
    """Capability set the autoscaling control loop expects from a provider.

    Optional capabilities raise NotImplementedByProvider when a provider
    does not support them.
    """

    def name(self) -> str:
        ...

    def node_groups(self) -> list[NodeGroup]:
        ...

    def node_group_for_node(self, node: Node) -> NodeGroup | None:
        """Node group owning ``node``.

        Raises NodeGroupLookupError when the node cannot be resolved.
        """
        ...

    def refresh(self) -> None:
        """Called before every control-loop iteration to reload provider state."""
        ...

    def pricing(self) -> object:
        ...

    def get_available_machine_types(self) -> list[str]:
        ...

    def new_node_group(
        self,
        machine_type: str,
        labels: Mapping[str, str],
        system_labels: Mapping[str, str],
        taints: Sequence[Mapping[str, str]],
        extra_resources: Mapping[str, str],
    ) -> NodeGroup:
        ...

    def get_resource_limiter(self) -> object:
        ...

    def gpu_label(self) -> str:
        ...

    def get_available_gpu_types(self) -> Mapping[str, None]:
        ...

    def cleanup(self) -> None:
        ...
