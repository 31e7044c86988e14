"""Filesystem locations for persisted state and generated artefacts."""

from __future__ import annotations

from pydantic import Field

from .base import BaseConfig


class StorageConfig(BaseConfig):
    """Directories are resolved against ``AppConfig.data_root`` when relative."""

    data_dir: str = Field("data", description="Directory holding history.json and candidates.json")
    tasks_dir: str = Field("intent", description="Directory where task bundles are created")
    failure_log_dir: str = Field("logs/failures", description="Directory for daily failure logs")


__all__ = ["StorageConfig"]
