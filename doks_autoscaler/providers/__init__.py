"""Cloud providers for doks-autoscaler."""

from doks_autoscaler.providers.digitalocean import DigitalOceanCloudProvider, build_digitalocean

__all__ = [
    "DigitalOceanCloudProvider",
    "build_digitalocean",
]
