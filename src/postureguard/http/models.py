# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Records describing a fetched page, as handed to the analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

HeaderPairs = list[tuple[str, str]]


@dataclass(frozen=True)
class RedirectHop:
    """One redirect response the fetcher followed."""

    url: str
    status_code: int
    location: str = ""


@dataclass(frozen=True)
class FetchedPage:
    """
    A page as it was received: the final URL after redirects, its response
    headers in wire order (repeated names kept) and the raw body bytes.
    """

    requested_url: str
    final_url: str
    status_code: int | None = None
    headers: HeaderPairs = field(default_factory=list)
    body: bytes = b""
    body_truncated: bool = False
    redirects: list[RedirectHop] = field(default_factory=list)

    @classmethod
    def offline(cls, url: str, headers: HeaderPairs | None = None, body: bytes = b"") -> FetchedPage:
        """Wrap a saved response so it flows through the same analysis path as a live fetch."""
        return cls(requested_url=url, final_url=url, headers=list(headers or []), body=body)

    @property
    def redirect_chain(self) -> list[str]:
        if not self.redirects:
            return []
        return [hop.url for hop in self.redirects] + [self.final_url]

    @property
    def upgraded_to_https(self) -> bool:
        """True when a plain-HTTP request ended on an HTTPS page."""
        requested = urlsplit(self.requested_url).scheme.lower()
        final = urlsplit(self.final_url).scheme.lower()
        return requested == "http" and final == "https"


__all__ = ["FetchedPage", "HeaderPairs", "RedirectHop"]
