# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Vulnerability finding models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class VulnerabilityType(str, Enum):
    XSS_RISK = "xss_risk"
    CSRF_RISK = "csrf_risk"
    INFORMATION_DISCLOSURE = "information_disclosure"
    MIXED_CONTENT = "mixed_content"
    CLICKJACKING_RISK = "clickjacking_risk"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def penalty(self) -> int:
        """Points deducted from the overall score per finding of this severity."""
        return SEVERITY_PENALTIES[self]


SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 40,
    Severity.HIGH: 25,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}


@dataclass(frozen=True)
class SecurityVulnerability:
    """A single detected weakness. Equal findings compare equal."""

    type: VulnerabilityType
    severity: Severity
    title: str
    description: str = ""
    location: str = ""
    remediation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "remediation": self.remediation,
        }


__all__ = [
    "SEVERITY_PENALTIES",
    "SecurityVulnerability",
    "Severity",
    "VulnerabilityType",
]
