"""GitHub REST client used as the repository source."""

from __future__ import annotations

import base64
import binascii
from datetime import date, timedelta
from typing import Any, Callable, Protocol
from urllib.parse import quote

import requests
from loguru import logger

from docscout.config.source import GitHubSourceConfig
from docscout.config.utils import resolve_env_reference
from docscout.security.redaction import RedactionConfig, redact

from .models import RawRepo

FALLBACK_BRANCH = "master"
DEFAULT_BRANCH = "main"


class RepositorySource(Protocol):
    """Operations the discovery pipeline needs from a repository host."""

    def list_recent_popular(self, min_stars: int) -> list[RawRepo]:
        """Repositories with at least ``min_stars`` stars pushed recently."""

    def fetch_readme_text(self, owner: str, name: str) -> str:
        """Decoded README text, or an empty string."""

    def fetch_file_tree(self, owner: str, name: str, branch: str | None = None) -> list[str]:
        """Paths of every file in the repository, or an empty list."""


class GitHubRepositoryClient:
    """Client for the GitHub search, contents and git tree APIs.

    Every public method recovers from HTTP and decoding errors by returning an
    empty result, so an unreachable host yields "no candidates this run".
    """

    def __init__(
        self,
        config: GitHubSourceConfig | None = None,
        *,
        token: str | None = None,
        session: requests.Session | None = None,
        today: Callable[[], date] = date.today,
        redaction: RedactionConfig | None = None,
    ) -> None:
        self.config = config or GitHubSourceConfig()
        self.base_url = self.config.api_base_url.rstrip("/")
        self._today = today
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": self.config.user_agent,
            }
        )
        resolved = token if token is not None else resolve_env_reference(self.config.token)
        if resolved:
            self.session.headers["Authorization"] = f"Bearer {resolved}"
        self.redaction = redaction or RedactionConfig.for_token(resolved)

    def list_recent_popular(self, min_stars: int) -> list[RawRepo]:
        """
        Search for popular repositories pushed within the recency window.

        Args:
            min_stars: Minimum stargazer count used in the search query

        Returns:
            RawRepo objects in the order returned by the API (stars descending)
        """
        pushed_since = (self._today() - timedelta(days=self.config.recency_days)).isoformat()
        params = {
            "q": f"stars:>={min_stars} pushed:>={pushed_since}",
            "sort": "stars",
            "order": "desc",
            "per_page": str(self.config.per_page),
        }
        payload = self._get_json(f"{self.base_url}/search/repositories", params=params)
        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            return []

        repos = [self._parse_repo(item) for item in payload["items"] if isinstance(item, dict)]
        logger.debug("Search returned {} repositories", len(repos))
        return repos

    def fetch_readme_text(self, owner: str, name: str) -> str:
        payload = self._get_json(f"{self._repo_url(owner, name)}/readme")
        if not isinstance(payload, dict) or not payload.get("content"):
            return ""
        try:
            raw = base64.b64decode(str(payload["content"]).replace("\n", ""), validate=False)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Could not decode README for {}/{}: {}", owner, name, exc)
            return ""
        return raw.decode("utf-8", errors="replace")

    def fetch_file_tree(self, owner: str, name: str, branch: str | None = None) -> list[str]:
        """Return file (blob) paths of the recursive git tree.

        When ``branch`` is omitted, ``main`` is tried first and ``master`` second.
        """
        paths = self._tree_paths(owner, name, branch or DEFAULT_BRANCH)
        if paths is None and branch is None:
            logger.debug("No '{}' tree for {}/{}; trying '{}'", DEFAULT_BRANCH, owner, name, FALLBACK_BRANCH)
            paths = self._tree_paths(owner, name, FALLBACK_BRANCH)
        return paths or []

    # ------------------------------------------------------------------
    def _tree_paths(self, owner: str, name: str, branch: str) -> list[str] | None:
        url = f"{self._repo_url(owner, name)}/git/trees/{quote(branch, safe='')}"
        payload = self._get_json(url, params={"recursive": "1"})
        if payload is None:
            return None
        tree = payload.get("tree") if isinstance(payload, dict) else None
        if not isinstance(tree, list):
            return []
        return [
            str(item["path"])
            for item in tree
            if isinstance(item, dict) and item.get("type") == "blob" and item.get("path")
        ]

    def _repo_url(self, owner: str, name: str) -> str:
        return f"{self.base_url}/repos/{quote(owner, safe='')}/{quote(name, safe='')}"

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any | None:
        """GET ``url`` and decode JSON; ``None`` on any HTTP or transport failure."""
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException as exc:
            logger.error("GitHub API error: {}", redact(str(exc), self.redaction))
            return None
        if not response.ok:
            logger.warning("GitHub API returned HTTP {} for {}", response.status_code, url)
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("GitHub API returned invalid JSON for {}: {}", url, exc)
            return None

    @staticmethod
    def _parse_repo(item: dict[str, Any]) -> RawRepo:
        owner = item.get("owner") or {}
        return RawRepo(
            name=item.get("name") or "",
            full_name=item.get("full_name") or "",
            owner=(owner.get("login") if isinstance(owner, dict) else None) or "",
            description=item.get("description") or "",
            stars=int(item.get("stargazers_count") or 0),
            forks=int(item.get("forks_count") or 0),
            language=item.get("language"),
            topics=tuple(item.get("topics") or ()),
            archived=bool(item.get("archived", False)),
            default_branch=item.get("default_branch") or DEFAULT_BRANCH,
            html_url=item.get("html_url") or "",
        )


__all__ = ["GitHubRepositoryClient", "RepositorySource"]
