"""DigitalOcean provider configuration.

Immutable configuration for the DOKS cloud provider, read from the cloud
config file handed to the autoscaler and completed from the environment.

Example cloud config (JSON)::

    {"cluster_id": "6b1e...", "token": "dop_v1_...", "url": "", "version": "1.0.0"}

The same keys are accepted in a ``.toml`` file.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from loguru import logger

from doks_autoscaler.core.exceptions import ConfigurationError

from .client import DEFAULT_API_URL

log = logger.bind(provider="digitalocean", component="config")

type RawConfig = dict[str, Any]

ENV_TOKEN = "DIGITALOCEAN_TOKEN"
ENV_CLUSTER_ID = "DIGITALOCEAN_CLUSTER_ID"
ENV_API_URL = "DIGITALOCEAN_API_URL"


@dataclass(frozen=True, slots=True)
class DigitalOcean:
    """DigitalOcean Kubernetes provider configuration.

    Args:
        cluster_id: DOKS cluster the autoscaler runs in. Required.
        token: DigitalOcean API access token. Required.
        url: API base URL. Empty means https://api.digitalocean.com.
        version: Autoscaler version used in the User-Agent. Default: dev.
    """

    cluster_id: str = ""
    token: str = ""
    url: str = ""
    version: str = ""

    @property
    def type(self) -> str: return "digitalocean"

    @property
    def api_url(self) -> str:
        return self.url or DEFAULT_API_URL

    @property
    def client_version(self) -> str:
        return self.version or "dev"

    def validate(self) -> DigitalOcean:
        if not self.token:
            raise ConfigurationError("access token is not provided")
        if not self.cluster_id:
            raise ConfigurationError("cluster ID is not provided")
        return self

    def __repr__(self) -> str:
        return (
            f"DigitalOcean(cluster_id={self.cluster_id!r}, token='***', "
            f"url={self.url!r}, version={self.version!r})"
        )


def _read_cloud_config(path: Path) -> RawConfig:
    try:
        if path.suffix == ".toml":
            with path.open("rb") as f:
                return tomllib.load(f)
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"couldn't open cloud provider configuration {path}: {e}") from e
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"couldn't parse cloud provider configuration {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"cloud provider configuration {path} must be an object")
    return raw


def load_config(
    cloud_config: str | Path | None = None,
    *,
    environ: dict[str, str] | None = None,
) -> DigitalOcean:
    """Load and validate the provider configuration.

    Values from the cloud config file take precedence; missing values are
    taken from DIGITALOCEAN_TOKEN, DIGITALOCEAN_CLUSTER_ID and
    DIGITALOCEAN_API_URL.

    Raises:
        ConfigurationError: If the file is unreadable or the token or
            cluster id is missing.
    """
    env = os.environ if environ is None else environ
    raw: RawConfig = _read_cloud_config(Path(cloud_config)) if cloud_config else {}

    known = {f.name for f in fields(DigitalOcean)}
    unknown = sorted(set(raw) - known)
    if unknown:
        log.warning("Ignoring unknown cloud config keys: {keys}", keys=", ".join(unknown))

    config = DigitalOcean(
        cluster_id=str(raw.get("cluster_id") or env.get(ENV_CLUSTER_ID, "")),
        token=str(raw.get("token") or env.get(ENV_TOKEN, "")),
        url=str(raw.get("url") or env.get(ENV_API_URL, "")),
        version=str(raw.get("version") or ""),
    )
    return config.validate()
