"""Application-level configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from docscout.config.base import BaseConfig
from docscout.config.policy import PolicyConfig
from docscout.config.publication import PublicationConfig
from docscout.config.source import GitHubSourceConfig
from docscout.config.storage import StorageConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for the entire application."""

    data_root: Path | None = Field(None, description="Root directory for relative storage paths")
    logging_level: str = Field("INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")

    policy: PolicyConfig = Field(default_factory=PolicyConfig, description="Eligibility policy")
    source: GitHubSourceConfig = Field(default_factory=GitHubSourceConfig, description="Repository host settings")
    publication: PublicationConfig = Field(
        default_factory=PublicationConfig,
        description="Publication prober settings",
    )
    storage: StorageConfig = Field(default_factory=StorageConfig, description="State and output locations")

    def resolve_path(self, fragment: str | Path, base_path: Path | None = None) -> Path:
        """Resolve a configured path against ``base_path`` or ``data_root``."""
        path = Path(fragment)
        if path.is_absolute():
            return path
        root = base_path if base_path is not None else self.data_root
        if root is None:
            return path
        return Path(root) / path


__all__ = ["AppConfig"]
