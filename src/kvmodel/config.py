"""Configuration for kvmodel."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Callable

from kvmodel.errors import ConfigurationError

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


@dataclass
class KvModelConfig:
    """Global settings read lazily by key derivation and the connection layer."""

    namespace: str | None = None
    redis_url: str = DEFAULT_REDIS_URL

    @classmethod
    def from_env(cls) -> KvModelConfig:
        """Build a config from ``KVMODEL_*`` environment variables."""
        return cls(
            namespace=os.getenv("KVMODEL_NAMESPACE") or None,
            redis_url=os.getenv("KVMODEL_REDIS_URL") or DEFAULT_REDIS_URL,
        )


_config = KvModelConfig()


def get_config() -> KvModelConfig:
    return _config


def configure(
    callback: Callable[[KvModelConfig], None] | None = None, **settings: Any
) -> KvModelConfig:
    """Update the global config in place.

    Accepts keyword settings, a callback receiving the config object, or both::

        configure(namespace="app")
        configure(lambda c: setattr(c, "namespace", "app"))
    """
    known = {f.name for f in fields(KvModelConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ConfigurationError(", ".join(unknown), "unknown setting")
    for name, value in settings.items():
        setattr(_config, name, value)
    if callback is not None:
        callback(_config)
    return _config


def reset_config() -> KvModelConfig:
    """Restore defaults; used by tests and the CLI."""
    defaults = KvModelConfig()
    for f in fields(KvModelConfig):
        setattr(_config, f.name, getattr(defaults, f.name))
    return _config

