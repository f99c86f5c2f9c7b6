# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level PostureGuard facade: fetch a page, then analyze it."""

from __future__ import annotations

import logging

from .analysis.engine import SecurityAnalyzer
from .config import AnalyzerSettings, HttpSettings, load_analyzer_settings, load_http_settings
from .http.fetch import PageFetcher, create_page_fetcher
from .http.models import FetchedPage
from .http.url import parse_target_url
from .models import SecurityAnalysisResult

logger = logging.getLogger(__name__)


class PostureGuard:
    """
    Convenience wrapper that pairs a page fetcher with the security analyzer.

    The analyzer itself never touches the network; this class owns fetching so
    CLI and library consumers get a one-call workflow.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        settings: AnalyzerSettings | None = None,
        http_settings: HttpSettings | None = None,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.fetcher = fetcher or create_page_fetcher(self.http_settings)
        self.analyzer = SecurityAnalyzer(settings or load_analyzer_settings())

    def fetch(self, url: str) -> FetchedPage:
        """Fetch ``url``; InvalidURLError is raised before any request is made."""
        parse_target_url(url)
        page = self.fetcher.fetch(url)
        if page.redirects:
            logger.info("Followed %d redirect(s): %s", len(page.redirects), " -> ".join(page.redirect_chain))
        return page

    def analyze_page(self, page: FetchedPage) -> SecurityAnalysisResult:
        """Analyze a fetched or saved page at its final URL."""
        if page.upgraded_to_https:
            logger.debug("%s upgraded to HTTPS at %s", page.requested_url, page.final_url)
        return self.analyzer.analyze(page.final_url, page.headers, page.body, self.http_settings.user_agent)

    def analyze_url(self, url: str) -> SecurityAnalysisResult:
        return self.analyze_page(self.fetch(url))

    def close(self) -> None:
        close = getattr(self.fetcher, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> PostureGuard:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["PostureGuard"]
