# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Security header sub-analyzers.

Each tracked header family has a dedicated evaluator that turns the raw header
value into a scored HeaderAnalysis. Families are independent of each other.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config import AnalyzerSettings
from ..http.headers import header_value
from ..models import HeaderAnalysis, SecurityHeadersAnalysis


class HeaderFamily(str, Enum):
    HSTS = "hsts"
    CONTENT_SECURITY_POLICY = "content_security_policy"
    X_FRAME_OPTIONS = "x_frame_options"
    X_CONTENT_TYPE_OPTIONS = "x_content_type_options"
    X_XSS_PROTECTION = "x_xss_protection"
    REFERRER_POLICY = "referrer_policy"
    PERMISSIONS_POLICY = "permissions_policy"
    EXPECT_CT = "expect_ct"


@dataclass(frozen=True)
class HeaderSpec:
    """Where a family's value comes from and how it is described when missing."""

    header_names: tuple[str, ...]
    display_name: str
    missing_recommendations: tuple[str, ...]


HEADER_SPECS: dict[HeaderFamily, HeaderSpec] = {
    HeaderFamily.HSTS: HeaderSpec(
        ("Strict-Transport-Security",),
        "HSTS",
        (
            "Add Strict-Transport-Security header to enforce HTTPS",
            "Include 'includeSubDomains' directive for comprehensive protection",
        ),
    ),
    HeaderFamily.CONTENT_SECURITY_POLICY: HeaderSpec(
        ("Content-Security-Policy", "Content-Security-Policy-Report-Only"),
        "Content Security Policy",
        (
            "Implement Content Security Policy to prevent XSS attacks",
            "Start with report-only mode to test policy",
        ),
    ),
    HeaderFamily.X_FRAME_OPTIONS: HeaderSpec(
        ("X-Frame-Options",),
        "X-Frame-Options",
        (
            "Add X-Frame-Options header to prevent clickjacking",
            "Use 'DENY' or 'SAMEORIGIN' value",
        ),
    ),
    HeaderFamily.X_CONTENT_TYPE_OPTIONS: HeaderSpec(
        ("X-Content-Type-Options",),
        "X-Content-Type-Options",
        ("Add X-Content-Type-Options: nosniff to prevent MIME type sniffing",),
    ),
    HeaderFamily.X_XSS_PROTECTION: HeaderSpec(
        ("X-XSS-Protection",),
        "X-XSS-Protection",
        (
            "Add X-XSS-Protection: 1; mode=block for legacy browser protection",
            "Note: Modern browsers rely on CSP instead",
        ),
    ),
    HeaderFamily.REFERRER_POLICY: HeaderSpec(
        ("Referrer-Policy",),
        "Referrer-Policy",
        (
            "Add Referrer-Policy header to control referrer information",
            "Consider 'strict-origin-when-cross-origin' for balanced privacy",
        ),
    ),
    HeaderFamily.PERMISSIONS_POLICY: HeaderSpec(
        ("Permissions-Policy", "Feature-Policy"),
        "Permissions-Policy",
        (
            "Add Permissions-Policy header to control browser features",
            "Disable unused features like camera, microphone, geolocation",
        ),
    ),
    HeaderFamily.EXPECT_CT: HeaderSpec(
        ("Expect-CT",),
        "Expect-CT",
        (
            "Consider adding Expect-CT header for certificate transparency",
            "Note: This header is being deprecated in favor of Certificate Transparency logs",
        ),
    ),
}

HSTS_BASE_SCORE = 70
HSTS_MISSING_SUBDOMAINS_PENALTY = 15
HSTS_MISSING_PRELOAD_PENALTY = 10
HSTS_SHORT_MAX_AGE_PENALTY = 5

CSP_BASE_SCORE = 60
CSP_UNSAFE_INLINE_PENALTY = 20
CSP_UNSAFE_EVAL_PENALTY = 15
CSP_MISSING_SCRIPT_SRC_PENALTY = 10

X_FRAME_OPTIONS_SCORE = 100
X_CONTENT_TYPE_OPTIONS_SCORE = 100
X_XSS_PROTECTION_SCORE = 80
REFERRER_POLICY_SCORE = 90
PERMISSIONS_POLICY_SCORE = 80
EXPECT_CT_SCORE = 70

_MAX_AGE_RE = re.compile(r"""max-age\s*=\s*["']?(\d+)""", re.IGNORECASE)

_KNOWN_REFERRER_POLICIES = frozenset(
    {
        "no-referrer",
        "no-referrer-when-downgrade",
        "origin",
        "origin-when-cross-origin",
        "same-origin",
        "strict-origin",
        "strict-origin-when-cross-origin",
        "unsafe-url",
    }
)


@dataclass(frozen=True)
class HeaderInput:
    """The resolved header value plus which header name supplied it."""

    value: str
    source: str


def parse_directives(value: str) -> dict[str, list[str]]:
    """
    Split a ``;``-separated policy into lowercase directive names and their tokens.

    The first occurrence of a directive wins, matching how browsers treat CSP duplicates.
    """
    directives: dict[str, list[str]] = {}
    for raw in value.split(";"):
        parts = raw.strip().split()
        if not parts:
            continue
        name, _, inline_value = parts[0].partition("=")
        name = name.lower()
        if name in directives:
            continue
        tokens = parts[1:]
        if inline_value:
            tokens.insert(0, inline_value)
        directives[name] = tokens
    return directives


def resolve_header(headers: Any, family: HeaderFamily) -> HeaderInput | None:
    """Return the first non-empty value among the family's header names, in priority order."""
    for name in HEADER_SPECS[family].header_names:
        value = header_value(headers, name)
        if value:
            return HeaderInput(value=value, source=name)
    return None


def _missing(family: HeaderFamily) -> HeaderAnalysis:
    spec = HEADER_SPECS[family]
    return HeaderAnalysis(
        present=False,
        value="",
        score=0,
        issues=[f"{spec.display_name} header not present"],
        recommendations=list(spec.missing_recommendations),
    )


def _evaluate_hsts(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:
    directives = parse_directives(header.value)
    score = HSTS_BASE_SCORE
    issues: list[str] = []
    recommendations: list[str] = []

    if "includesubdomains" not in directives:
        score -= HSTS_MISSING_SUBDOMAINS_PENALTY
        issues.append("Missing includeSubDomains directive")
        recommendations.append("Add 'includeSubDomains' to protect all subdomains")

    if "preload" not in directives:
        score -= HSTS_MISSING_PRELOAD_PENALTY
        issues.append("Missing preload directive")
        recommendations.append("Consider adding 'preload' directive for browser preload lists")

    match = _MAX_AGE_RE.search(header.value)
    if match is None:
        score -= HSTS_SHORT_MAX_AGE_PENALTY
        issues.append("HSTS header missing max-age directive")
        recommendations.append(f"Set max-age to at least {settings.hsts_min_max_age}")
    elif int(match.group(1)) < settings.hsts_min_max_age:
        score -= HSTS_SHORT_MAX_AGE_PENALTY
        issues.append(f"HSTS max-age is below the recommended {settings.hsts_min_max_age} seconds")
        recommendations.append(f"Set max-age to at least {settings.hsts_min_max_age}")

    if not recommendations:
        recommendations.append("Submit the domain to the HSTS preload list at hstspreload.org")

    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=max(score, 0),
        issues=issues,
        recommendations=recommendations,
    )


def _evaluate_csp(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    directives = parse_directives(header.value)
    sources = {token.lower() for tokens in directives.values() for token in tokens}
    score = CSP_BASE_SCORE
    issues: list[str] = []
    recommendations: list[str] = []

    if "'unsafe-inline'" in sources:
        score -= CSP_UNSAFE_INLINE_PENALTY
        issues.append("CSP allows 'unsafe-inline' which reduces security")
        recommendations.append("Remove 'unsafe-inline' and use nonces or hashes")

    if "'unsafe-eval'" in sources:
        score -= CSP_UNSAFE_EVAL_PENALTY
        issues.append("CSP allows 'unsafe-eval' which can enable code injection")
        recommendations.append("Remove 'unsafe-eval' directive")

    if "script-src" not in directives:
        score -= CSP_MISSING_SCRIPT_SRC_PENALTY
        issues.append("CSP missing 'script-src' directive")
        recommendations.append("Add 'script-src' to control script execution")

    if header.source.lower().endswith("-report-only"):
        issues.append("CSP is delivered in report-only mode and is not enforced")
        recommendations.append("Promote the policy to an enforcing Content-Security-Policy header")

    if not recommendations:
        recommendations.append("Add 'frame-ancestors' and 'object-src' directives to tighten the policy")

    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=max(score, 0),
        issues=issues,
        recommendations=recommendations,
    )


def _evaluate_x_frame_options(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    lowered = header.value.lower()
    issues: list[str] = []
    recommendations: list[str] = []
    if lowered not in {"deny", "sameorigin"} and not lowered.startswith("allow-from"):
        issues.append(f"Unrecognised X-Frame-Options value '{header.value}'")
        recommendations.append("Use 'DENY' or 'SAMEORIGIN' for X-Frame-Options")
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=X_FRAME_OPTIONS_SCORE,
        issues=issues,
        recommendations=recommendations,
    )


def _evaluate_x_content_type_options(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    issues: list[str] = []
    recommendations: list[str] = []
    if header.value.lower() != "nosniff":
        issues.append(f"Unrecognised X-Content-Type-Options value '{header.value}'")
        recommendations.append("Set X-Content-Type-Options to 'nosniff'")
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=X_CONTENT_TYPE_OPTIONS_SCORE,
        issues=issues,
        recommendations=recommendations,
    )


def _evaluate_x_xss_protection(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    lowered = header.value.lower()
    if lowered == "0":
        recommendations = ["X-XSS-Protection is disabled; rely on a strong Content-Security-Policy"]
    elif "mode=block" not in lowered:
        recommendations = ["Consider adding 'mode=block' for better protection"]
    else:
        recommendations = ["X-XSS-Protection is deprecated; rely on Content-Security-Policy for XSS protection"]
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=X_XSS_PROTECTION_SCORE,
        recommendations=recommendations,
    )


def _evaluate_referrer_policy(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    # Browsers use the last recognised token of a comma-separated fallback list.
    tokens = [token.strip().lower() for token in header.value.split(",") if token.strip()]
    recognised = [token for token in tokens if token in _KNOWN_REFERRER_POLICIES]
    issues: list[str] = []
    if not recognised:
        issues.append(f"Unrecognised Referrer-Policy value '{header.value}'")
        recommendations = ["Use a recognised Referrer-Policy value such as 'strict-origin-when-cross-origin'"]
    elif recognised[-1] in {"unsafe-url", "no-referrer-when-downgrade"}:
        recommendations = ["Consider using a more privacy-focused referrer policy"]
    else:
        recommendations = ["Consider 'no-referrer' for maximum referrer privacy"]
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=REFERRER_POLICY_SCORE,
        issues=issues,
        recommendations=recommendations,
    )


def _evaluate_permissions_policy(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    lowered = header.value.lower()
    recommendations: list[str] = []
    if header.source.lower() == "feature-policy":
        recommendations.append("Migrate the legacy Feature-Policy header to Permissions-Policy")
    if "camera" not in lowered:
        recommendations.append("Consider explicitly controlling camera access")
    if "microphone" not in lowered:
        recommendations.append("Consider explicitly controlling microphone access")
    if not recommendations:
        recommendations.append("Review Permissions-Policy to disable unused browser features")
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=PERMISSIONS_POLICY_SCORE,
        recommendations=recommendations,
    )


def _evaluate_expect_ct(header: HeaderInput, settings: AnalyzerSettings) -> HeaderAnalysis:  # noqa: ARG001
    if "enforce" not in header.value.lower():
        recommendations = ["Consider adding 'enforce' directive for stronger protection"]
    else:
        recommendations = ["Expect-CT is deprecated; browsers now enforce Certificate Transparency by default"]
    return HeaderAnalysis(
        present=True,
        value=header.value,
        score=EXPECT_CT_SCORE,
        recommendations=recommendations,
    )


Evaluator = Callable[[HeaderInput, AnalyzerSettings], HeaderAnalysis]

EVALUATORS: dict[HeaderFamily, Evaluator] = {
    HeaderFamily.HSTS: _evaluate_hsts,
    HeaderFamily.CONTENT_SECURITY_POLICY: _evaluate_csp,
    HeaderFamily.X_FRAME_OPTIONS: _evaluate_x_frame_options,
    HeaderFamily.X_CONTENT_TYPE_OPTIONS: _evaluate_x_content_type_options,
    HeaderFamily.X_XSS_PROTECTION: _evaluate_x_xss_protection,
    HeaderFamily.REFERRER_POLICY: _evaluate_referrer_policy,
    HeaderFamily.PERMISSIONS_POLICY: _evaluate_permissions_policy,
    HeaderFamily.EXPECT_CT: _evaluate_expect_ct,
}


def analyze_header(family: HeaderFamily, headers: Any, settings: AnalyzerSettings | None = None) -> HeaderAnalysis:
    """Analyze a single header family."""
    header = resolve_header(headers, family)
    if header is None:
        return _missing(family)
    return EVALUATORS[family](header, settings or AnalyzerSettings())


def analyze_security_headers(headers: Any, settings: AnalyzerSettings | None = None) -> SecurityHeadersAnalysis:
    """Run every header sub-analyzer."""
    settings = settings or AnalyzerSettings()
    return SecurityHeadersAnalysis(**{family.value: analyze_header(family, headers, settings) for family in HeaderFamily})


__all__ = [
    "EVALUATORS",
    "HEADER_SPECS",
    "HeaderFamily",
    "HeaderInput",
    "HeaderSpec",
    "analyze_header",
    "analyze_security_headers",
    "parse_directives",
    "resolve_header",
]
