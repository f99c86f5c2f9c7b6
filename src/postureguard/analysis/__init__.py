# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Security posture analysis: transport, headers, markup and scoring."""

from .engine import SecurityAnalyzer, analyze
from .headers import HeaderFamily, analyze_header, analyze_security_headers
from .scoring import calculate_overall_score, generate_recommendations
from .transport import classify_transport, detect_mixed_content
from .vulnerabilities import scan_vulnerabilities

__all__ = [
    "HeaderFamily",
    "SecurityAnalyzer",
    "analyze",
    "analyze_header",
    "analyze_security_headers",
    "calculate_overall_score",
    "classify_transport",
    "detect_mixed_content",
    "generate_recommendations",
    "scan_vulnerabilities",
]
