# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for the security analysis report."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .findings import SecurityVulnerability


@dataclass(frozen=True)
class CertificateInfo:
    """Scheme-derived certificate validity; no chain verification is performed."""

    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid}


@dataclass(frozen=True)
class MixedContentAnalysis:
    """Plain-HTTP sub-resources referenced from an HTTPS page."""

    has_mixed_content: bool = False
    http_resources: list[str] = field(default_factory=list)
    count: int = 0

    @classmethod
    def from_resources(cls, resources: list[str]) -> MixedContentAnalysis:
        return cls(has_mixed_content=bool(resources), http_resources=list(resources), count=len(resources))

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_mixed_content": self.has_mixed_content,
            "http_resources": list(self.http_resources),
            "count": self.count,
        }


@dataclass(frozen=True)
class HTTPSConfig:
    """Transport classification for the analyzed URL."""

    is_https: bool = False
    certificate_info: CertificateInfo = field(default_factory=CertificateInfo)
    https_redirect: bool = False
    mixed_content: MixedContentAnalysis = field(default_factory=MixedContentAnalysis)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_https": self.is_https,
            "certificate_info": self.certificate_info.to_dict(),
            "https_redirect": self.https_redirect,
            "mixed_content": self.mixed_content.to_dict(),
        }


@dataclass(frozen=True)
class HeaderAnalysis:
    """Analysis of a single security header."""

    present: bool = False
    value: str = ""
    score: int = 0
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "present": self.present,
            "value": self.value,
            "score": self.score,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class SecurityHeadersAnalysis:
    """One HeaderAnalysis per tracked header family."""

    hsts: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    content_security_policy: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    x_frame_options: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    x_content_type_options: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    x_xss_protection: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    referrer_policy: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    permissions_policy: HeaderAnalysis = field(default_factory=HeaderAnalysis)
    expect_ct: HeaderAnalysis = field(default_factory=HeaderAnalysis)

    FIELDS = (
        "hsts",
        "content_security_policy",
        "x_frame_options",
        "x_content_type_options",
        "x_xss_protection",
        "referrer_policy",
        "permissions_policy",
        "expect_ct",
    )

    def items(self) -> Iterator[tuple[str, HeaderAnalysis]]:
        for name in self.FIELDS:
            yield name, getattr(self, name)

    def scores(self) -> list[int]:
        return [analysis.score for _, analysis in self.items()]

    def to_dict(self) -> dict[str, Any]:
        return {name: analysis.to_dict() for name, analysis in self.items()}


@dataclass(frozen=True)
class ScoreBreakdown:
    """Components the overall score was derived from."""

    https_score: int = 0
    headers_score: int = 0
    vulnerability_penalty: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "https_score": self.https_score,
            "headers_score": self.headers_score,
            "vulnerability_penalty": self.vulnerability_penalty,
        }


@dataclass(frozen=True)
class AnalysisMetadata:
    url: str
    user_agent: str = ""
    content_length: int = 0
    # Wall-clock timing differs between otherwise identical runs.
    analysis_time_ms: float = field(default=0.0, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "user_agent": self.user_agent,
            "content_length": self.content_length,
            "analysis_time_ms": self.analysis_time_ms,
        }


@dataclass(frozen=True)
class SecurityAnalysisResult:
    """Top-level result of one analysis run."""

    metadata: AnalysisMetadata
    https_configuration: HTTPSConfig
    security_headers: SecurityHeadersAnalysis
    vulnerabilities: list[SecurityVulnerability] = field(default_factory=list)
    overall_score: int = 0
    recommendations: list[str] = field(default_factory=list)
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def vulnerability_types(self) -> list[str]:
        return [v.type.value for v in self.vulnerabilities]

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "https_configuration": self.https_configuration.to_dict(),
            "security_headers": self.security_headers.to_dict(),
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "overall_score": self.overall_score,
            "recommendations": list(self.recommendations),
            "score_breakdown": self.score_breakdown.to_dict(),
        }


__all__ = [
    "AnalysisMetadata",
    "CertificateInfo",
    "HTTPSConfig",
    "HeaderAnalysis",
    "MixedContentAnalysis",
    "ScoreBreakdown",
    "SecurityAnalysisResult",
    "SecurityHeadersAnalysis",
]
