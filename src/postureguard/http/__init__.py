# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP helpers: header access, URL parsing and page fetching."""

from .fetch import HttpxPageFetcher, PageFetcher, create_page_fetcher
from .headers import header_value, iter_header_pairs, normalize_headers
from .models import FetchedPage, HeaderPairs, RedirectHop
from .url import is_https, parse_target_url

__all__ = [
    "FetchedPage",
    "HeaderPairs",
    "HttpxPageFetcher",
    "PageFetcher",
    "RedirectHop",
    "create_page_fetcher",
    "header_value",
    "is_https",
    "iter_header_pairs",
    "normalize_headers",
    "parse_target_url",
]
