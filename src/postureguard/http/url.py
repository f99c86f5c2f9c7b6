# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the analyzer and runtime."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from ..errors import InvalidURLError

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def parse_target_url(url: str) -> SplitResult:
    """
    Parse an absolute URL, raising InvalidURLError when it is unusable.

    A usable URL has a syntactically valid scheme and a host.
    """
    raw = str(url or "").strip()
    if not raw:
        raise InvalidURLError(str(url or ""), "empty URL")
    try:
        parsed = urlsplit(raw)
        # Accessing .port validates the port component.
        parsed.port  # noqa: B018
    except ValueError as exc:
        raise InvalidURLError(raw, str(exc)) from exc

    if not parsed.scheme or not _SCHEME_RE.match(parsed.scheme):
        raise InvalidURLError(raw, "missing scheme")
    if not parsed.hostname:
        raise InvalidURLError(raw, "missing host")
    return parsed


def is_https(parsed: SplitResult) -> bool:
    return parsed.scheme.lower() == "https"


__all__ = ["is_https", "parse_target_url"]
