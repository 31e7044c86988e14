"""Pick the next shortlisted candidate after a failed downstream attempt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from .models import CandidateSummary, HistoryRecord

if TYPE_CHECKING:
    from docscout.storage.store import JsonStateStore

_ATTEMPTED_STATUSES = frozenset({"success", "failed"})


def attempted_repos(history: Iterable[HistoryRecord]) -> frozenset[str]:
    """Repositories with a finished attempt. Pending attempts do not count."""
    return frozenset(record.repo for record in history if record.status in _ATTEMPTED_STATUSES)


def next_unattempted(
    summaries: Sequence[CandidateSummary],
    history: Iterable[HistoryRecord],
) -> CandidateSummary | None:
    """First summary, in stored order, whose repository has no finished attempt."""
    if not summaries:
        return None
    attempted = attempted_repos(history)
    for summary in summaries:
        if summary.full_name not in attempted:
            return summary
    return None


def next_unattempted_from_store(store: "JsonStateStore") -> CandidateSummary | None:
    """Read both collections from ``store`` and select; never writes."""
    return next_unattempted(store.read_candidates(), store.read_history())


__all__ = ["attempted_repos", "next_unattempted", "next_unattempted_from_store"]
