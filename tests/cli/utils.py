"""Shared helpers for CLI tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pytest import MonkeyPatch

from docscout.config import AppConfig, GitHubSourceConfig, PolicyConfig, StorageConfig


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def make_app_config(base_dir: Path) -> AppConfig:
    """Construct an in-memory AppConfig whose state lives under ``base_dir``."""

    base_dir.mkdir(parents=True, exist_ok=True)
    return AppConfig(
        data_root=base_dir,
        logging_level="INFO",
        policy=PolicyConfig(min_stars=500, max_files=750, languages=["en", "zh"]),
        source=GitHubSourceConfig(token="env:GITHUB_TOKEN"),
        storage=StorageConfig(data_dir="data", tasks_dir="intent", failure_log_dir="logs/failures"),
    )


def patch_load_config(monkeypatch: MonkeyPatch, config: AppConfig) -> None:
    """Force the CLI to return the provided config instead of reading from disk."""

    def _fake_load_config(model: object, path: Path) -> AppConfig:
        if model is not AppConfig:
            raise AssertionError("Unexpected config model request")
        return config

    monkeypatch.setattr("docscout.cli.load_config", _fake_load_config)
