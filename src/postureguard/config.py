# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for PostureGuard."""

import os
from dataclasses import dataclass, field

from .version import __version__

DEFAULT_USER_AGENT = f"PostureGuard/{__version__} (+https://github.com/postureguard/postureguard)"

# One year, the lower bound browsers' HSTS preload lists require.
HSTS_MIN_MAX_AGE = 31536000

# Matched as case-insensitive substrings of the assigned identifier.
DEFAULT_SENSITIVE_KEYWORDS: tuple[str, ...] = (
    "api_key",
    "apikey",
    "api-key",
    "secret",
    "password",
    "passwd",
    "token",
)


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(item.strip().lower() for item in value.split(",") if item.strip())
    return items or default


@dataclass
class HttpSettings:
    """HTTP client defaults used when the runtime fetches pages itself."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("POSTUREGUARD_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("POSTUREGUARD_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("POSTUREGUARD_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("POSTUREGUARD_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("POSTUREGUARD_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class AnalyzerSettings:
    """Tunable thresholds for the security analyzer."""

    hsts_min_max_age: int = HSTS_MIN_MAX_AGE
    sensitive_keywords: tuple[str, ...] = field(default=DEFAULT_SENSITIVE_KEYWORDS)
    https_weight: float = 0.4

    @property
    def headers_weight(self) -> float:
        return 1.0 - self.https_weight

    @classmethod
    def from_env(cls) -> "AnalyzerSettings":
        """Create settings from environment variables (evaluated at call time)."""
        hsts_min_max_age = _int_env("POSTUREGUARD_HSTS_MIN_MAX_AGE", cls.hsts_min_max_age)
        if hsts_min_max_age < 0:
            hsts_min_max_age = cls.hsts_min_max_age
        https_weight = _float_env("POSTUREGUARD_HTTPS_WEIGHT", cls.https_weight)
        if not 0.0 <= https_weight <= 1.0:
            https_weight = cls.https_weight
        return cls(
            hsts_min_max_age=hsts_min_max_age,
            sensitive_keywords=_list_env("POSTUREGUARD_SENSITIVE_KEYWORDS", DEFAULT_SENSITIVE_KEYWORDS),
            https_weight=https_weight,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_analyzer_settings() -> AnalyzerSettings:
    """Load analyzer settings from environment with sensible defaults."""
    return AnalyzerSettings.from_env()
