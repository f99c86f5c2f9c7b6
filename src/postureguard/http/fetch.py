# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Page fetching for the runtime facade. The analyzer itself never calls this."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import FetchError, categorize_exception
from .models import FetchedPage, RedirectHop

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    """Anything that can turn a URL into a FetchedPage."""

    def fetch(self, url: str) -> FetchedPage: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


class HttpxPageFetcher:
    """
    GET a page with httpx, following redirects when configured.

    The body is streamed and capped at ``max_body_bytes``; each followed redirect
    is recorded so callers can tell whether plain HTTP was upgraded.
    """

    def __init__(self, settings: HttpSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_http_settings()
        self._client = client or httpx.Client(
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def fetch(self, url: str) -> FetchedPage:
        try:
            with self._client.stream(
                "GET",
                url,
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=self.settings.allow_redirects,
            ) as resp:
                body, truncated = _read_capped(resp, self.settings.max_body_bytes)
        except (httpx.HTTPError, OSError) as exc:
            category = categorize_exception(exc)
            logger.debug("Fetch failed for %s: %s (%s)", url, exc, category.value)
            raise FetchError(url, str(exc) or type(exc).__name__, category) from exc

        redirects = [
            RedirectHop(url=str(hop.url), status_code=hop.status_code, location=hop.headers.get("location", ""))
            for hop in resp.history
        ]
        if truncated:
            logger.debug("Body of %s truncated at %d bytes", resp.url, len(body))
        return FetchedPage(
            requested_url=url,
            final_url=str(resp.url),
            status_code=resp.status_code,
            headers=list(resp.headers.multi_items()),
            body=body,
            body_truncated=truncated,
            redirects=redirects,
        )

    def close(self) -> None:
        self._client.close()


def _read_capped(resp: httpx.Response, max_body_bytes: int) -> tuple[bytes, bool]:
    content = bytearray()
    for chunk in resp.iter_bytes():
        remaining = max_body_bytes - len(content)
        if len(chunk) > remaining:
            content.extend(chunk[:remaining])
            return bytes(content), True
        content.extend(chunk)
    return bytes(content), False


def create_page_fetcher(settings: HttpSettings | None = None) -> PageFetcher:
    """Factory for the default httpx-backed fetcher."""
    return HttpxPageFetcher(settings or load_http_settings())


__all__ = ["HttpxPageFetcher", "PageFetcher", "create_page_fetcher"]
