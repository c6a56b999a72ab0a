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

__all__ = [
    "DOKSAutoscalerError",
    "ConfigurationError",
    "ProviderInitError",
    "InvalidDeltaError",
    "SizeLimitError",
    "NodeNotInGroupError",
    "NodeGroupLookupError",
    "NotImplementedByProvider",
]
