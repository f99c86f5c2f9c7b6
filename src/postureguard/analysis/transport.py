# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTPS classification and mixed-content detection."""

from __future__ import annotations

import re
from urllib.parse import SplitResult

from ..http.url import is_https
from ..models import CertificateInfo, HTTPSConfig, MixedContentAnalysis

# Attribute references to absolute http:// URLs, quoted or unquoted.
_HTTP_ATTRIBUTE_RE = re.compile(
    r"""\b(?:src|href|action|formaction|data|poster)\s*=\s*
        (?:"(?P<dq>http://[^"]*)"|'(?P<sq>http://[^']*)'|(?P<uq>http://[^\s"'<>`]+))""",
    re.IGNORECASE | re.VERBOSE,
)
# CSS url(http://...) references in inline styles and <style> blocks.
_HTTP_CSS_URL_RE = re.compile(r"""url\(\s*["']?(?P<url>http://[^"')\s]+)""", re.IGNORECASE)


def detect_mixed_content(body: str, https: bool) -> MixedContentAnalysis:
    """
    Collect distinct plain-HTTP resource URLs referenced by an HTTPS page.

    Non-HTTPS pages are insecure rather than mixed, so they always return the empty analysis.
    """
    if not https or not body:
        return MixedContentAnalysis()

    found: list[tuple[int, str]] = []
    for match in _HTTP_ATTRIBUTE_RE.finditer(body):
        url = match.group("dq") or match.group("sq") or match.group("uq")
        found.append((match.start(), url.strip()))
    for match in _HTTP_CSS_URL_RE.finditer(body):
        found.append((match.start(), match.group("url").strip()))

    resources: list[str] = []
    seen: set[str] = set()
    for _, url in sorted(found, key=lambda item: item[0]):
        if not url or url in seen:
            continue
        seen.add(url)
        resources.append(url)
    return MixedContentAnalysis.from_resources(resources)


def classify_transport(parsed_url: SplitResult, body: str = "") -> HTTPSConfig:
    """Derive the transport configuration from the URL scheme and page body."""
    https = is_https(parsed_url)
    return HTTPSConfig(
        is_https=https,
        certificate_info=CertificateInfo(valid=https),
        # Followed redirects are recorded by the runtime fetcher, not inferred here.
        https_redirect=https,
        mixed_content=detect_mixed_content(body, https),
    )


__all__ = ["classify_transport", "detect_mixed_content"]
