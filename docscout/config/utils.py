"""Helper utilities for configuration handling."""

from __future__ import annotations

import os

_ENV_PREFIX = "env:"


def resolve_env_reference(value: str | None) -> str | None:
    """Resolve ``"env:VAR_NAME"`` references against ``os.environ``.

    Plain strings are returned unchanged. An unset or empty variable resolves
    to ``None``, since every credential docscout reads is optional.
    """

    if not value:
        return None
    if not value.startswith(_ENV_PREFIX):
        return value
    return os.getenv(value[len(_ENV_PREFIX):]) or None


__all__ = ["resolve_env_reference"]
