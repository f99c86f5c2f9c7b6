# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Security analysis orchestrator."""

from __future__ import annotations

import logging
import time
from typing import Any

from ..config import AnalyzerSettings, load_analyzer_settings
from ..http.url import parse_target_url
from ..models import AnalysisMetadata, SecurityAnalysisResult
from .headers import analyze_security_headers
from .scoring import calculate_overall_score, generate_recommendations
from .transport import classify_transport
from .vulnerabilities import scan_vulnerabilities

logger = logging.getLogger(__name__)

Body = bytes | bytearray | memoryview | str | None


def decode_body(body: Body) -> str:
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return bytes(body).decode("utf-8", errors="replace")


def body_length(body: Body) -> int:
    if body is None:
        return 0
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    return memoryview(body).nbytes


class SecurityAnalyzer:
    """
    Derives a security posture report from an already-fetched page.

    The analyzer performs no I/O and keeps no state between calls, so one instance
    can be shared across threads.
    """

    def __init__(self, settings: AnalyzerSettings | None = None):
        self.settings = settings or load_analyzer_settings()

    def analyze(self, url: str, headers: Any, body: Body, user_agent: str = "") -> SecurityAnalysisResult:
        """
        Analyze ``url``'s transport, ``headers`` and raw ``body``.

        Raises InvalidURLError when ``url`` is not an absolute URL; every other
        deficiency is reported inside the result.
        """
        started = time.perf_counter()
        html = decode_body(body)
        logger.debug("Starting security analysis for %s (%d bytes, user agent %r)", url, body_length(body), user_agent)

        parsed_url = parse_target_url(url)

        https_config = classify_transport(parsed_url, html)
        security_headers = analyze_security_headers(headers, self.settings)
        vulnerabilities = scan_vulnerabilities(
            html,
            headers,
            parsed_url,
            mixed_content=https_config.mixed_content,
            settings=self.settings,
        )
        overall_score, breakdown = calculate_overall_score(https_config, security_headers, vulnerabilities, self.settings)
        recommendations = generate_recommendations(https_config, security_headers, vulnerabilities, overall_score)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        result = SecurityAnalysisResult(
            metadata=AnalysisMetadata(
                url=url,
                user_agent=user_agent or "",
                content_length=body_length(body),
                analysis_time_ms=elapsed_ms,
            ),
            https_configuration=https_config,
            security_headers=security_headers,
            vulnerabilities=vulnerabilities,
            overall_score=overall_score,
            recommendations=recommendations,
            score_breakdown=breakdown,
        )
        logger.debug(
            "Security analysis completed for %s: score=%d https=%d headers=%d vulnerabilities=%s (%.2f ms)",
            url,
            overall_score,
            breakdown.https_score,
            breakdown.headers_score,
            result.vulnerability_types() or "none",
            elapsed_ms,
        )
        return result


def analyze(
    url: str,
    headers: Any,
    body: Body,
    user_agent: str = "",
    *,
    settings: AnalyzerSettings | None = None,
) -> SecurityAnalysisResult:
    """Module-level convenience wrapper around SecurityAnalyzer.analyze()."""
    return SecurityAnalyzer(settings).analyze(url, headers, body, user_agent)


__all__ = ["SecurityAnalyzer", "analyze", "decode_body"]
