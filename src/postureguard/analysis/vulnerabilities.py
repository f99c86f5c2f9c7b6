# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pattern-based vulnerability scanner.

Checks run in a fixed order and each emits at most one finding. Callers read
the resulting list positionally, so the order below is part of the contract.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult

from ..config import AnalyzerSettings
from ..errors import InvalidURLError
from ..http.headers import header_value
from ..http.url import is_https
from ..models import MixedContentAnalysis, SecurityVulnerability, Severity, VulnerabilityType
from .headers import parse_directives
from .markup import iter_forms, iter_inline_scripts, iter_inputs
from .transport import detect_mixed_content

CSRF_FIELD_MARKERS: tuple[str, ...] = ("csrf", "token")

INLINE_SCRIPT = SecurityVulnerability(
    type=VulnerabilityType.XSS_RISK,
    severity=Severity.MEDIUM,
    title="Inline JavaScript Detected",
    description="Inline JavaScript can increase XSS attack surface",
    location="HTML content",
    remediation="Move JavaScript to external files and implement CSP",
)
MISSING_CSRF_TOKEN = SecurityVulnerability(
    type=VulnerabilityType.CSRF_RISK,
    severity=Severity.HIGH,
    title="Potential CSRF Vulnerability",
    description="POST forms detected without apparent CSRF protection",
    location="HTML forms",
    remediation="Implement CSRF tokens in all state-changing forms",
)
SENSITIVE_EXPOSURE = SecurityVulnerability(
    type=VulnerabilityType.INFORMATION_DISCLOSURE,
    severity=Severity.CRITICAL,
    title="Sensitive Information Exposure",
    description="Potential API keys, secrets, or passwords found in inline scripts",
    location="Inline JavaScript",
    remediation="Remove sensitive information from client-side code",
)
MIXED_CONTENT = SecurityVulnerability(
    type=VulnerabilityType.MIXED_CONTENT,
    severity=Severity.MEDIUM,
    title="Mixed Content Detected",
    description="HTTP resources loaded on HTTPS page",
    location="Resource links",
    remediation="Update all resource URLs to use HTTPS",
)
CLICKJACKING = SecurityVulnerability(
    type=VulnerabilityType.CLICKJACKING_RISK,
    severity=Severity.MEDIUM,
    title="Clickjacking Protection Missing",
    description="No X-Frame-Options or CSP frame-ancestors directive found",
    location="HTTP headers",
    remediation="Add X-Frame-Options or CSP frame-ancestors directive",
)


@dataclass(frozen=True)
class ScanInput:
    """Everything a vulnerability check may look at."""

    body: str
    headers: Any
    parsed_url: SplitResult
    mixed_content: MixedContentAnalysis
    settings: AnalyzerSettings


# One start per identifier run, so the scan stays linear in the script length.
SENSITIVE_ASSIGNMENT_RE = re.compile(
    r"""(?<![\w$-])([\w$-]+)["']?\s*[:=]\s*(["'`])[^"'`\r\n]+\2""",
)


def find_sensitive_assignment(content: str, keywords: tuple[str, ...]) -> str | None:
    """
    Return the first identifier assigned a string literal whose name contains a keyword.

    Identifiers may be quoted object keys; ``==``/``===`` comparisons do not match.
    Keyword matching is case-insensitive, so ``apiKey`` matches ``apikey``.
    """
    needles = [keyword.lower() for keyword in keywords if keyword]
    if not needles:
        return None
    for match in SENSITIVE_ASSIGNMENT_RE.finditer(content):
        identifier = match.group(1)
        lowered = identifier.lower()
        if any(needle in lowered for needle in needles):
            return identifier
    return None


def _check_inline_script(scan: ScanInput) -> SecurityVulnerability | None:
    for _ in iter_inline_scripts(scan.body):
        return INLINE_SCRIPT
    return None


def _form_has_csrf_field(content: str) -> bool:
    for attrs in iter_inputs(content):
        if attrs.get("type", "").strip().lower() != "hidden":
            continue
        name = attrs.get("name", "").lower()
        if any(marker in name for marker in CSRF_FIELD_MARKERS):
            return True
    return False


def _check_csrf(scan: ScanInput) -> SecurityVulnerability | None:
    for form in iter_forms(scan.body):
        if form.attrs.get("method", "").strip().lower() != "post":
            continue
        if not _form_has_csrf_field(form.content):
            return MISSING_CSRF_TOKEN
    return None


def _check_sensitive_information(scan: ScanInput) -> SecurityVulnerability | None:
    keywords = tuple(scan.settings.sensitive_keywords)
    for content in iter_inline_scripts(scan.body):
        if find_sensitive_assignment(content, keywords) is not None:
            return SENSITIVE_EXPOSURE
    return None


def _check_mixed_content(scan: ScanInput) -> SecurityVulnerability | None:
    if scan.mixed_content.has_mixed_content:
        return MIXED_CONTENT
    return None


def _check_clickjacking(scan: ScanInput) -> SecurityVulnerability | None:
    if header_value(scan.headers, "X-Frame-Options"):
        return None
    # Report-only policies are not enforced, so only the enforcing header counts.
    csp = header_value(scan.headers, "Content-Security-Policy")
    if csp and "frame-ancestors" in parse_directives(csp):
        return None
    return CLICKJACKING


CHECKS: tuple[Callable[[ScanInput], SecurityVulnerability | None], ...] = (
    _check_inline_script,
    _check_csrf,
    _check_sensitive_information,
    _check_mixed_content,
    _check_clickjacking,
)


def scan_vulnerabilities(
    body: str,
    headers: Any,
    parsed_url: SplitResult | None,
    mixed_content: MixedContentAnalysis | None = None,
    settings: AnalyzerSettings | None = None,
) -> list[SecurityVulnerability]:
    """Run every check in order and return the findings, at most one per type."""
    if parsed_url is None:
        raise InvalidURLError("", "URL was not parsed")
    body = body or ""
    if mixed_content is None:
        mixed_content = detect_mixed_content(body, is_https(parsed_url))
    scan = ScanInput(
        body=body,
        headers=headers,
        parsed_url=parsed_url,
        mixed_content=mixed_content,
        settings=settings or AnalyzerSettings(),
    )

    findings: list[SecurityVulnerability] = []
    seen: set[VulnerabilityType] = set()
    for check in CHECKS:
        finding = check(scan)
        if finding is None or finding.type in seen:
            continue
        seen.add(finding.type)
        findings.append(finding)
    return findings


__all__ = [
    "CHECKS",
    "CLICKJACKING",
    "CSRF_FIELD_MARKERS",
    "INLINE_SCRIPT",
    "MISSING_CSRF_TOKEN",
    "MIXED_CONTENT",
    "SENSITIVE_EXPOSURE",
    "ScanInput",
    "scan_vulnerabilities",
    "SENSITIVE_ASSIGNMENT_RE",
    "find_sensitive_assignment",
]
