# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PostureGuard package entrypoint.

This package analyzes an already-fetched web page (URL, response headers and raw
HTML) and produces a security posture report: per-header scores, detected
vulnerabilities, an overall score and recommendations. The analyzer is a pure
function of its inputs; fetching is handled by an injectable page fetcher in the
runtime facade.
"""

from .analysis import SecurityAnalyzer, analyze
from .config import AnalyzerSettings, HttpSettings, load_analyzer_settings, load_http_settings
from .errors import ErrorCategory, FetchError, InvalidURLError, PostureGuardError
from .http import FetchedPage, HttpxPageFetcher, PageFetcher, RedirectHop, create_page_fetcher
from .log import setup_logging
from .models import (
    HeaderAnalysis,
    HTTPSConfig,
    MixedContentAnalysis,
    SecurityAnalysisResult,
    SecurityHeadersAnalysis,
    SecurityVulnerability,
    Severity,
    VulnerabilityType,
)
from .runtime import PostureGuard
from .version import __version__

__all__ = [
    "AnalyzerSettings",
    "ErrorCategory",
    "FetchError",
    "FetchedPage",
    "HTTPSConfig",
    "HeaderAnalysis",
    "HttpSettings",
    "HttpxPageFetcher",
    "InvalidURLError",
    "MixedContentAnalysis",
    "PageFetcher",
    "PostureGuard",
    "PostureGuardError",
    "RedirectHop",
    "SecurityAnalysisResult",
    "SecurityAnalyzer",
    "SecurityHeadersAnalysis",
    "SecurityVulnerability",
    "Severity",
    "VulnerabilityType",
    "analyze",
    "create_page_fetcher",
    "load_analyzer_settings",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
