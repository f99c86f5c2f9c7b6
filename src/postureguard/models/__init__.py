# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for PostureGuard."""

from .findings import SEVERITY_PENALTIES, SecurityVulnerability, Severity, VulnerabilityType
from .report import (
    AnalysisMetadata,
    CertificateInfo,
    HeaderAnalysis,
    HTTPSConfig,
    MixedContentAnalysis,
    ScoreBreakdown,
    SecurityAnalysisResult,
    SecurityHeadersAnalysis,
)

__all__ = [
    "AnalysisMetadata",
    "CertificateInfo",
    "HTTPSConfig",
    "HeaderAnalysis",
    "MixedContentAnalysis",
    "SEVERITY_PENALTIES",
    "ScoreBreakdown",
    "SecurityAnalysisResult",
    "SecurityHeadersAnalysis",
    "SecurityVulnerability",
    "Severity",
    "VulnerabilityType",
]
