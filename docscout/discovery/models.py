"""Data models shared by the discovery pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping

HistoryStatus = Literal["pending", "success", "failed"]
HISTORY_STATUSES: tuple[str, ...] = ("pending", "success", "failed")


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True, slots=True)
class RawRepo:
    """Repository metadata as returned by the repository host search."""

    name: str
    full_name: str
    owner: str
    description: str = ""
    stars: int = 0
    forks: int = 0
    language: str | None = None
    topics: tuple[str, ...] = ()
    archived: bool = False
    default_branch: str = "main"
    html_url: str = ""


@dataclass(frozen=True, slots=True)
class Candidate:
    """A repository under consideration, enriched with documentation signals."""

    name: str
    full_name: str
    owner: str
    description: str
    stars: int
    forks: int
    language: str | None
    topics: tuple[str, ...]
    archived: bool
    readme_length: int
    file_count: int
    has_docs_folder: bool
    is_english_primary: bool
    html_url: str
    default_branch: str

    def summary(self) -> "CandidateSummary":
        return CandidateSummary(
            name=self.name,
            full_name=self.full_name,
            stars=self.stars,
            language=self.language,
            readme_length=self.readme_length,
            file_count=self.file_count,
        )


@dataclass(frozen=True, slots=True)
class CandidateSummary:
    """Reduced projection of :class:`Candidate` persisted in the shortlist."""

    name: str
    full_name: str
    stars: int
    language: str | None = None
    readme_length: int = 0
    file_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CandidateSummary":
        return cls(
            name=str(payload.get("name", "")),
            full_name=str(payload.get("full_name", "")),
            stars=int(payload.get("stars") or 0),
            language=_optional_str(payload.get("language")),
            readme_length=int(payload.get("readme_length") or 0),
            file_count=int(payload.get("file_count") or 0),
        )


@dataclass(slots=True)
class HistoryRecord:
    """One attempt of the downstream pipeline on a repository."""

    repo: str
    status: HistoryStatus
    timestamp: str
    url: str | None = None
    phase: int | None = None
    error: str | None = None
    duration: float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update({"repo": self.repo, "status": self.status, "timestamp": self.timestamp})
        for key in ("url", "phase", "error", "duration"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "HistoryRecord":
        known = {"repo", "status", "timestamp", "url", "phase", "error", "duration"}
        return cls(
            repo=str(payload.get("repo", "")),
            status=str(payload.get("status", "pending")),  # type: ignore[arg-type]
            timestamp=str(payload.get("timestamp", "")),
            url=payload.get("url"),
            phase=payload.get("phase"),
            error=payload.get("error"),
            duration=payload.get("duration"),
            extra={key: value for key, value in payload.items() if key not in known},
        )


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Outcome of a discovery run reported to the scheduler."""

    created: bool
    task_dir: Path | None
    candidate_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "task_dir": str(self.task_dir) if self.task_dir is not None else None,
            "candidate_count": self.candidate_count,
        }


__all__ = [
    "HISTORY_STATUSES",
    "HistoryStatus",
    "RawRepo",
    "Candidate",
    "CandidateSummary",
    "HistoryRecord",
    "DiscoveryResult",
]
