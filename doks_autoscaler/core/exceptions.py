"""Custom exception hierarchy for doks-autoscaler.

All adapter-specific exceptions inherit from DOKSAutoscalerError, enabling
callers to catch every locally-raised error with a single except clause.
Errors raised by the remote API client (pydo / azure-core) are not wrapped
and propagate verbatim.
"""

from __future__ import annotations


class DOKSAutoscalerError(Exception):
    """Base exception for all doks-autoscaler errors."""


class ConfigurationError(DOKSAutoscalerError):
    """Raised for invalid configuration or missing required settings."""


class ProviderInitError(DOKSAutoscalerError):
    """Raised when the provider cannot load its initial node groups."""


class InvalidDeltaError(DOKSAutoscalerError, ValueError):
    """Raised when a resize delta has the wrong sign."""

    def __init__(self, operation: str, delta: int, expected: str) -> None:
        self.operation = operation
        self.delta = delta
        super().__init__(f"{operation}: delta must be {expected}, got {delta}")


class SizeLimitError(DOKSAutoscalerError):
    """Raised when a resize would cross the node group's bounds."""


class NodeNotInGroupError(DOKSAutoscalerError):
    """Raised when a node does not belong to the node group it is deleted from."""

    def __init__(self, provider_id: str, node_group_id: str) -> None:
        self.provider_id = provider_id
        self.node_group_id = node_group_id
        super().__init__(f"node {provider_id!r} does not belong to node group {node_group_id!r}")


class NodeGroupLookupError(DOKSAutoscalerError, LookupError):
    """Raised when the node-group cache cannot resolve a node or group id."""


class NotImplementedByProvider(DOKSAutoscalerError):
    """Raised by optional capabilities this provider does not support.

    Callers treat it as "skip this feature", not as a fatal condition.
    """

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(f"{capability} is not implemented by this cloud provider")
