"""Configuration namespace for docscout."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .policy import PolicyConfig
from .publication import PublicationConfig
from .source import GitHubSourceConfig
from .storage import StorageConfig
from .utils import resolve_env_reference

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "PolicyConfig",
    "PublicationConfig",
    "GitHubSourceConfig",
    "StorageConfig",
    "resolve_env_reference",
]
