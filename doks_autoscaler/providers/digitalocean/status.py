"""Translation of DOKS node lifecycle states into instance statuses."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from doks_autoscaler.cloudprovider import (
    Instance,
    InstanceErrorInfo,
    InstanceState,
    InstanceStatus,
)

PROVIDER_ID_PREFIX = "digitalocean://"

# Error code reported for node states DOKS does not classify further.
NO_CODE_ERROR = "no-code-digitalocean"

_STATES: dict[str, InstanceState] = {
    "provisioning": "creating",
    "running": "running",
    "draining": "deleting",
    "deleting": "deleting",
}


def to_provider_id(droplet_id: str | int) -> str:
    """Kubelet provider id for a droplet (``digitalocean://<droplet_id>``)."""
    return f"{PROVIDER_ID_PREFIX}{droplet_id}"


def provider_id_for(node: dict[str, Any]) -> str:
    """Provider id of a node-pool member.

    Falls back to the node-pool node id while the droplet is not yet assigned.
    """
    droplet_id = node.get("droplet_id")
    if droplet_id:
        return to_provider_id(droplet_id)
    return str(node["id"])


def to_instance_status(status: dict[str, Any] | None) -> InstanceStatus | None:
    """Map a DOKS node status object to an InstanceStatus.

    A missing status object means the node has not reported yet and maps to
    None. A present but unrecognized state is an error, never "running".
    """
    if status is None:
        return None

    state = _STATES.get(status.get("state") or "")
    if state is not None:
        return InstanceStatus(state=state)

    return InstanceStatus(
        error_info=InstanceErrorInfo(
            error_class="other",
            error_code=NO_CODE_ERROR,
            error_message=status.get("message") or "",
        )
    )


def to_instance(node: dict[str, Any]) -> Instance:
    return Instance(id=provider_id_for(node), status=to_instance_status(node.get("status")))


def to_instances(nodes: Iterable[dict[str, Any]]) -> list[Instance]:
    return [to_instance(node) for node in nodes]
