"""Base configuration model and TOML loader."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Common base for all configuration models.

    Configuration is read once per run and never mutated afterwards, so the
    models are frozen and reject unknown keys.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


def load_config(config_cls: type[ConfigT], path: Path | str) -> ConfigT:
    """Load ``path`` as TOML and validate it against ``config_cls``.

    Raises :class:`FileNotFoundError` when the file does not exist and
    :class:`ValueError` when the TOML cannot be parsed. Schema violations
    surface as :class:`pydantic.ValidationError`.
    """

    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config not found: {config_path}")

    try:
        with config_path.open("rb") as handle:
            raw = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Config is not valid TOML at {config_path}: {exc}") from exc

    return config_cls.model_validate(raw)


__all__ = ["BaseConfig", "load_config"]
