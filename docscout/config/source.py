"""Configuration for the repository host (GitHub REST API)."""

from __future__ import annotations

from pydantic import Field

from .base import BaseConfig


class GitHubSourceConfig(BaseConfig):
    """Connection settings for the GitHub search and contents APIs."""

    api_base_url: str = Field("https://api.github.com", description="GitHub REST API base URL")
    token: str | None = Field(
        "env:GITHUB_TOKEN",
        description="API token or env:VAR reference; optional for unauthenticated access",
    )
    per_page: int = Field(50, ge=1, le=100, description="Repositories requested per search page")
    recency_days: int = Field(30, ge=1, description="Only consider repositories pushed within this many days")
    timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field("docscout", description="User-Agent header sent with every request")


__all__ = ["GitHubSourceConfig"]
