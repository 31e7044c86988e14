"""Configuration for the publication prober."""

from __future__ import annotations

from pydantic import Field

from .base import BaseConfig


class PublicationConfig(BaseConfig):
    """Where to look for documentation that has already been published."""

    sitemap_url: str = Field(
        "https://docsmith.aigne.io/sitemap.xml",
        description="Sitemap listing every published documentation page",
    )
    docs_base_url: str = Field(
        "https://docsmith.aigne.io/discuss/docs",
        description="Base URL of per-repository documentation pages",
    )
    default_title: str = Field(
        "AIGNE DocSmith",
        description="Page title served for unknown documentation paths",
    )
    timeout: float = Field(15.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field("docscout", description="User-Agent header sent with every request")


__all__ = ["PublicationConfig"]
