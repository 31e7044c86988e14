"""Check whether a repository already has published documentation."""

from __future__ import annotations

import re
from typing import Protocol

import requests
from loguru import logger

from docscout.config.publication import PublicationConfig
from docscout.security.redaction import RedactionConfig, redact

_LOC_PATTERN = re.compile(r"<loc>(.*?)</loc>", re.IGNORECASE)
_TITLE_PATTERN = re.compile(r"<title>([^<]*)</title>", re.IGNORECASE)


class PublicationChecker(Protocol):
    def is_published(self, name: str) -> bool:
        """Whether documentation for repository ``name`` is already published."""


class PublicationCache:
    """Memoized probe results for the lifetime of one run."""

    def __init__(self) -> None:
        self._results: dict[str, bool] = {}

    def get(self, name: str) -> bool | None:
        return self._results.get(name)

    def set(self, name: str, published: bool) -> None:
        self._results[name] = published

    def clear(self) -> None:
        self._results.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._results

    def __len__(self) -> int:
        return len(self._results)


class PublicationProber:
    """Two-stage probe against the publication site.

    The sitemap is scanned first; when it does not mention the repository, the
    per-repository docs page is fetched and its ``<title>`` compared to the
    site's default title (the site answers 200 for unknown paths). Transport
    errors fail open: the repository is reported as not published.
    """

    def __init__(
        self,
        config: PublicationConfig | None = None,
        *,
        cache: PublicationCache | None = None,
        session: requests.Session | None = None,
        redaction: RedactionConfig | None = None,
    ) -> None:
        self.config = config or PublicationConfig()
        self.redaction = redaction
        self.cache = cache if cache is not None else PublicationCache()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def is_published(self, name: str) -> bool:
        if not name or not name.strip():
            return False

        normalized = name.strip().lower()
        cached = self.cache.get(normalized)
        if cached is not None:
            return cached

        if self._listed_in_sitemap(normalized):
            self.cache.set(normalized, True)
            return True

        found = self._docs_page_exists(normalized)
        self.cache.set(normalized, found)
        return found

    def _listed_in_sitemap(self, normalized: str) -> bool:
        try:
            response = self.session.get(self.config.sitemap_url, timeout=self.config.timeout)
        except requests.RequestException as exc:
            logger.warning("Sitemap fetch failed: {}", redact(str(exc), self.redaction))
            return False
        if not response.ok:
            logger.debug("Sitemap returned HTTP {}", response.status_code)
            return False

        for match in _LOC_PATTERN.finditer(response.text):
            loc = match.group(1).lower()
            if f"/docs/{normalized}" in loc or f"/{normalized}/" in loc:
                logger.debug("Found {} in sitemap entry {}", normalized, loc)
                return True
        return False

    def _docs_page_exists(self, normalized: str) -> bool:
        url = f"{self.config.docs_base_url.rstrip('/')}/{normalized}"
        try:
            response = self.session.get(url, timeout=self.config.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            logger.warning("Docs page probe failed for {}: {}", normalized, redact(str(exc), self.redaction))
            return False
        if not response.ok:
            return False

        match = _TITLE_PATTERN.search(response.text)
        title = match.group(1).strip() if match else ""
        return title != "" and title != self.config.default_title


__all__ = ["PublicationCache", "PublicationChecker", "PublicationProber"]
