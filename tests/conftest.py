"""Shared pytest fixtures and path configuration."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from docscout.discovery.models import Candidate  # noqa: E402

FIXED_NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


def build_candidate(**overrides: Any) -> Candidate:
    """Candidate that passes every filter of the default policy unless overridden."""
    name = overrides.pop("name", "widget")
    values: dict[str, Any] = {
        "name": name,
        "full_name": f"acme/{name}",
        "owner": "acme",
        "description": "A widget toolkit",
        "stars": 1200,
        "forks": 40,
        "language": "Python",
        "topics": ("cli",),
        "archived": False,
        "readme_length": 800,
        "file_count": 120,
        "has_docs_folder": False,
        "is_english_primary": True,
        "html_url": f"https://github.com/acme/{name}",
        "default_branch": "main",
    }
    values.update(overrides)
    return Candidate(**values)


@pytest.fixture()
def make_candidate() -> Callable[..., Candidate]:
    return build_candidate


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def _no_live_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests opt in to a credential explicitly."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
