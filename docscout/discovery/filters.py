"""Eligibility filters and ranking for discovered candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from loguru import logger

from docscout.config.policy import PolicyConfig

from .models import Candidate, HistoryRecord

GOOD_README_LENGTH = 2000


@dataclass(frozen=True, slots=True)
class FilterContext:
    """Per-run inputs shared by every filter predicate."""

    policy: PolicyConfig
    excluded: frozenset[str]
    succeeded: frozenset[str]
    publication_flags: Mapping[str, bool]


Predicate = Callable[[Candidate, FilterContext], bool]


def meets_star_threshold(candidate: Candidate, ctx: FilterContext) -> bool:
    return candidate.stars >= ctx.policy.min_stars


def has_documentation_gap(candidate: Candidate, ctx: FilterContext) -> bool:
    # Well documented only when all three signals hold; exactly 2000 chars is still a gap.
    well_documented = (
        candidate.readme_length > GOOD_README_LENGTH
        and candidate.has_docs_folder
        and candidate.is_english_primary
    )
    return not well_documented


def not_published(candidate: Candidate, ctx: FilterContext) -> bool:
    # Keyed by short name; absent entries count as unpublished.
    return ctx.publication_flags.get(candidate.name) is not True


def not_excluded(candidate: Candidate, ctx: FilterContext) -> bool:
    return candidate.full_name.lower() not in ctx.excluded


def not_already_succeeded(candidate: Candidate, ctx: FilterContext) -> bool:
    return candidate.full_name not in ctx.succeeded


def not_archived(candidate: Candidate, ctx: FilterContext) -> bool:
    return not candidate.archived


def within_file_budget(candidate: Candidate, ctx: FilterContext) -> bool:
    return candidate.file_count <= ctx.policy.max_files


FILTERS: tuple[tuple[str, Predicate], ...] = (
    ("min_stars", meets_star_threshold),
    ("documentation_gap", has_documentation_gap),
    ("not_published", not_published),
    ("not_excluded", not_excluded),
    ("not_succeeded", not_already_succeeded),
    ("not_archived", not_archived),
    ("max_files", within_file_budget),
)


def successful_repos(history: Iterable[HistoryRecord]) -> frozenset[str]:
    return frozenset(record.repo for record in history if record.status == "success")


def first_rejection(candidate: Candidate, ctx: FilterContext) -> str | None:
    """Name of the first filter ``candidate`` fails, or ``None`` when it passes all."""
    for name, predicate in FILTERS:
        if not predicate(candidate, ctx):
            return name
    return None


def select_candidates(
    candidates: Sequence[Candidate],
    policy: PolicyConfig,
    history: Sequence[HistoryRecord],
    publication_flags: Mapping[str, bool],
) -> list[Candidate]:
    """Apply the eligibility filters and rank survivors by stars, descending.

    The sort is stable, so candidates with equal stars keep their input order.
    An empty result is a normal outcome.
    """
    ctx = FilterContext(
        policy=policy,
        excluded=policy.excluded_names(),
        succeeded=successful_repos(history),
        publication_flags=publication_flags,
    )

    survivors: list[Candidate] = []
    for candidate in candidates:
        rejected_by = first_rejection(candidate, ctx)
        if rejected_by is None:
            survivors.append(candidate)
        else:
            logger.debug("Rejected {} by filter {}", candidate.full_name, rejected_by)

    return sorted(survivors, key=lambda candidate: candidate.stars, reverse=True)


__all__ = [
    "FILTERS",
    "FilterContext",
    "GOOD_README_LENGTH",
    "first_rejection",
    "select_candidates",
    "successful_repos",
]
