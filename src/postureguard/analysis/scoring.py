# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Overall security scoring and recommendations."""

from __future__ import annotations

from ..config import AnalyzerSettings
from ..models import (
    HTTPSConfig,
    ScoreBreakdown,
    SecurityHeadersAnalysis,
    SecurityVulnerability,
    VulnerabilityType,
)
from .headers import HEADER_SPECS, HeaderFamily

HTTPS_BASE_SCORE = 70
VALID_CERTIFICATE_BONUS = 20
HTTPS_REDIRECT_BONUS = 5
NO_MIXED_CONTENT_BONUS = 5
MIXED_RESOURCE_PENALTY = 2

TRANSPORT_RECOMMENDATION = "Enable HTTPS: the page is served without transport encryption"
FALLBACK_RECOMMENDATION = "Review the site's security configuration against current best practices"

VULNERABILITY_RECOMMENDATIONS: dict[VulnerabilityType, str] = {
    VulnerabilityType.XSS_RISK: "Move inline JavaScript to external files and restrict scripts with CSP nonces or hashes",
    VulnerabilityType.CSRF_RISK: "Add anti-forgery tokens to every state-changing POST form",
    VulnerabilityType.INFORMATION_DISCLOSURE: "Remove API keys, secrets and passwords from client-side scripts and rotate them",
    VulnerabilityType.MIXED_CONTENT: "Load every sub-resource over HTTPS to eliminate mixed content",
    VulnerabilityType.CLICKJACKING_RISK: "Add X-Frame-Options or a CSP frame-ancestors directive to prevent clickjacking",
}


def _clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


def calculate_https_score(config: HTTPSConfig) -> int:
    """High for HTTPS pages, zero for plain HTTP."""
    if not config.is_https:
        return 0

    score = HTTPS_BASE_SCORE
    if config.certificate_info.valid:
        score += VALID_CERTIFICATE_BONUS
    if config.https_redirect:
        score += HTTPS_REDIRECT_BONUS
    if config.mixed_content.has_mixed_content:
        score -= config.mixed_content.count * MIXED_RESOURCE_PENALTY
    else:
        score += NO_MIXED_CONTENT_BONUS
    return _clamp(score)


def calculate_headers_score(headers: SecurityHeadersAnalysis) -> int:
    """Arithmetic mean of the per-header scores."""
    scores = headers.scores()
    return _clamp(round(sum(scores) / len(scores)))


def calculate_vulnerability_penalty(vulnerabilities: list[SecurityVulnerability]) -> int:
    return sum(vuln.severity.penalty for vuln in vulnerabilities)


def calculate_overall_score(
    https_config: HTTPSConfig,
    headers: SecurityHeadersAnalysis,
    vulnerabilities: list[SecurityVulnerability],
    settings: AnalyzerSettings | None = None,
) -> tuple[int, ScoreBreakdown]:
    """
    Blend the transport and header components, then subtract vulnerability penalties.

    Returns the overall score clamped to [0, 100] and the components it came from.
    """
    settings = settings or AnalyzerSettings()
    https_score = calculate_https_score(https_config)
    headers_score = calculate_headers_score(headers)
    penalty = calculate_vulnerability_penalty(vulnerabilities)

    blended = settings.https_weight * https_score + settings.headers_weight * headers_score
    overall = _clamp(round(blended) - penalty)
    return overall, ScoreBreakdown(
        https_score=https_score,
        headers_score=headers_score,
        vulnerability_penalty=penalty,
    )


def generate_recommendations(
    https_config: HTTPSConfig,
    headers: SecurityHeadersAnalysis,
    vulnerabilities: list[SecurityVulnerability],
    overall_score: int,
) -> list[str]:
    """
    One recommendation per deficient component, most severe first.

    Order: insecure transport, then each header scoring below 100 in family order,
    then each distinct vulnerability type in scan order.
    """
    recommendations: list[str] = []

    if not https_config.is_https:
        recommendations.append(TRANSPORT_RECOMMENDATION)

    for family in HeaderFamily:
        analysis = getattr(headers, family.value)
        if analysis.score >= 100:
            continue
        display_name = HEADER_SPECS[family].display_name
        if not analysis.present:
            recommendations.append(f"Add the {display_name} header")
        elif analysis.recommendations:
            recommendations.append(f"{display_name}: {analysis.recommendations[0]}")
        else:
            recommendations.append(f"{display_name}: strengthen the header configuration")

    seen: set[VulnerabilityType] = set()
    for vuln in vulnerabilities:
        if vuln.type in seen:
            continue
        seen.add(vuln.type)
        recommendations.append(VULNERABILITY_RECOMMENDATIONS.get(vuln.type, f"Fix {vuln.title}"))

    if overall_score < 100 and not recommendations:
        recommendations.append(FALLBACK_RECOMMENDATION)
    return recommendations


__all__ = [
    "VULNERABILITY_RECOMMENDATIONS",
    "calculate_headers_score",
    "calculate_https_score",
    "calculate_overall_score",
    "calculate_vulnerability_penalty",
    "generate_recommendations",
]
