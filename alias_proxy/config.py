"""
Proxy configuration: the host rule table plus server settings.

The document is YAML, parsed with yaml.safe_load and validated into frozen
pydantic models. Once loaded a ProxyConfig is never mutated, so every request
handler shares the same instance without locking.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from alias_proxy.errors import ConfigLoadError

logger = logging.getLogger("uvicorn.error")


class HostRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str
    alias: str


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Upstream HTTP proxy URL; validated lazily by the forwarder
    proxy: str = ""
    address: str = ":8080"


class ProxyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host_rules: Tuple[HostRule, ...] = ()
    alias_uses_https: bool = False
    origin_uses_https: bool = True
    settings: Settings = Field(default_factory=Settings)

    @property
    def upstream_proxy(self) -> Optional[str]:
        return self.settings.proxy or None


def load_config(path: Union[str, Path]) -> ProxyConfig:
    """Read and validate the YAML configuration at ``path``."""
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigLoadError(f"cannot read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"config {config_path} must be a mapping")

    try:
        config = ProxyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"invalid config {config_path}: {e}") from e

    duplicates = [
        alias for alias, count in Counter(r.alias for r in config.host_rules).items() if count > 1
    ]
    for alias in duplicates:
        logger.warning(f"Alias {alias} is configured more than once, first rule wins")

    return config


def parse_address(address: str) -> Tuple[str, int]:
    """Split a ``host:port`` listen address; an empty host binds all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigLoadError(f"invalid listen address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host or "0.0.0.0", int(port)

