"""Repository discovery: source client, enrichment, probing, filtering and retry.

:mod:`docscout.discovery.pipeline` is imported explicitly by callers because
it depends on the storage and task packages, which import the models here.
"""

from __future__ import annotations

from .client import GitHubRepositoryClient, RepositorySource
from .enrichment import enrich, has_docs_folder, is_english_primary
from .filters import select_candidates
from .models import Candidate, CandidateSummary, DiscoveryResult, HistoryRecord, RawRepo
from .prober import PublicationCache, PublicationChecker, PublicationProber
from .retry import next_unattempted

__all__ = [
    "Candidate",
    "CandidateSummary",
    "DiscoveryResult",
    "GitHubRepositoryClient",
    "HistoryRecord",
    "PublicationCache",
    "PublicationChecker",
    "PublicationProber",
    "RawRepo",
    "RepositorySource",
    "enrich",
    "has_docs_folder",
    "is_english_primary",
    "next_unattempted",
    "select_candidates",
]
