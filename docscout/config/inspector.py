"""Utilities for inspecting and validating configuration files."""

from __future__ import annotations

from pathlib import Path
from types import UnionType
from typing import Any, Iterable, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from .app import AppConfig
from .base import load_config
from .utils import resolve_env_reference


ConfigModel = AppConfig


class ConfigInspectionError(RuntimeError):
    """Raised when configuration inspection fails unexpectedly."""


def _error_result(path: Path, error_type: str, message: str, **extra: Any) -> dict[str, Any]:
    return {
        "status": "error",
        "config_path": str(path),
        "error": {"type": error_type, "message": message, **extra},
    }


def check_config(path: Path, *, config_cls: type[ConfigModel] = ConfigModel) -> tuple[dict[str, Any], int, ConfigModel | None]:
    """Validate the configuration file and collect warnings.

    Returns a tuple of ``(result_dict, exit_code, config_instance_or_None)``.
    """

    try:
        config = load_config(config_cls, path)
    except FileNotFoundError as exc:
        return _error_result(path, "missing_file", str(exc)), 2, None
    except ValidationError as exc:
        details = [
            {
                "loc": _format_error_location(err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return _error_result(path, "validation_error", "Configuration validation failed", details=details), 3, None
    except PermissionError as exc:
        return _error_result(path, "permission_error", str(exc)), 2, None
    except ValueError as exc:
        return _error_result(path, "invalid_format", str(exc)), 1, None
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError("Unexpected configuration inspection error") from exc

    result = {
        "status": "ok",
        "config_path": str(path),
        "warnings": _collect_warnings(config),
    }
    return result, 0, config


def explain_config(*, config_cls: type[ConfigModel] = ConfigModel) -> list[dict[str, Any]]:
    """Describe configuration fields for documentation purposes."""

    documentation: list[dict[str, Any]] = []
    visited: set[type[BaseModel]] = set()

    def _walk(model_cls: type[BaseModel], prefix: str = "") -> None:
        if model_cls in visited:
            return
        visited.add(model_cls)

        for field_name, field in model_cls.model_fields.items():
            documentation.append(
                {
                    "name": f"{prefix}{field_name}",
                    "type": _format_annotation(field.annotation),
                    "required": field.is_required(),
                    "default": _format_default(field),
                    "description": field.description or "",
                }
            )
            nested = field.annotation
            if isinstance(nested, type) and issubclass(nested, BaseModel):
                _walk(nested, f"{prefix}{field_name}.")

    _walk(config_cls)
    return documentation


def _format_error_location(location: Iterable[Union[int, str]]) -> str:
    return ".".join(str(part) for part in location)


def _collect_warnings(config: ConfigModel) -> list[str]:
    warnings: list[str] = []

    if resolve_env_reference(config.source.token) is None:
        warnings.append("No GitHub token available; search requests are subject to anonymous rate limits")
    if not config.policy.languages:
        warnings.append("'policy.languages' is empty; task bundles will not request any locale")
    if config.policy.max_files == 0:
        warnings.append("'policy.max_files' is 0; every non-empty repository will be rejected")
    if config.data_root is None:
        warnings.append("'data_root' is not set; storage paths resolve relative to the config file")

    return warnings


def _format_annotation(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type):
            return annotation.__name__
        return repr(annotation).replace("typing.", "")

    args = get_args(annotation)
    if origin in {Union, UnionType}:
        non_none = [arg for arg in args if arg is not type(None)]  # noqa: E721
        if len(non_none) == 1 and len(args) == 2:
            return f"Optional[{_format_annotation(non_none[0])}]"
        joined = ", ".join(_format_annotation(arg) for arg in args)
        return f"Union[{joined}]"

    origin_name = getattr(origin, "__name__", repr(origin).replace("typing.", ""))
    if args:
        joined_args = ", ".join(_format_annotation(arg) for arg in args)
        return f"{origin_name}[{joined_args}]"
    return origin_name


def _format_default(field: FieldInfo) -> Any:
    if field.default_factory is not None:
        try:
            value = field.default_factory()
        except Exception:  # pragma: no cover - factory failure is unexpected
            return "<factory>"
        return _stringify_default(value)
    if field.is_required():
        return None
    return _stringify_default(field.default)


def _stringify_default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, (list, tuple)):
        return [_stringify_default(item) for item in value]
    return value


__all__ = ["check_config", "explain_config", "ConfigInspectionError"]
