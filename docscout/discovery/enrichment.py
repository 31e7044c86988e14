"""Documentation-quality signals derived from README text and file trees."""

from __future__ import annotations

from typing import Sequence

from .models import Candidate, RawRepo

DOCS_FOLDER_PREFIXES: tuple[str, ...] = ("docs/", "doc/", "documentation/")
ENGLISH_ASCII_RATIO = 0.8


def has_docs_folder(paths: Sequence[str]) -> bool:
    """True when any path lives under a top-level documentation folder (case-sensitive)."""
    return any(path.startswith(DOCS_FOLDER_PREFIXES) for path in paths)


def ascii_ratio(text: str) -> float:
    if not text:
        return 0.0
    ascii_chars = sum(1 for char in text if ord(char) < 0x80)
    return ascii_chars / len(text)


def is_english_primary(readme: str) -> bool:
    """Heuristic: a non-empty README that is more than 80% 7-bit ASCII."""
    return bool(readme) and ascii_ratio(readme) > ENGLISH_ASCII_RATIO


def enrich(repo: RawRepo, readme: str, paths: Sequence[str]) -> Candidate:
    """Combine host metadata with signals computed from ``readme`` and ``paths``.

    ``paths`` must contain file entries only; the client already drops
    directories from tree listings.
    """
    return Candidate(
        name=repo.name,
        full_name=repo.full_name,
        owner=repo.owner,
        description=repo.description,
        stars=repo.stars,
        forks=repo.forks,
        language=repo.language,
        topics=tuple(repo.topics),
        archived=repo.archived,
        readme_length=len(readme),
        file_count=len(paths),
        has_docs_folder=has_docs_folder(paths),
        is_english_primary=is_english_primary(readme),
        html_url=repo.html_url,
        default_branch=repo.default_branch,
    )


__all__ = [
    "DOCS_FOLDER_PREFIXES",
    "ENGLISH_ASCII_RATIO",
    "ascii_ratio",
    "enrich",
    "has_docs_folder",
    "is_english_primary",
]
