# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110) and a name may be sent
more than once. Callers hand us plain dicts, dicts of lists, ``httpx.Headers``
or raw ``(name, value)`` pairs, so lookups normalize all of them to "first value
wins" semantics.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _first(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        for item in value:
            if item is not None:
                return str(item)
        return None
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def iter_header_pairs(headers: Any) -> Iterable[tuple[str, str]]:
    """
    Yield ``(name, value)`` pairs from any supported header container.

    Supports:
    - plain dicts, with string or list-of-string values
    - httpx.Headers (via ``multi_items()`` so repeated names stay separate)
    - email.message.Message / HTTPMessage-like types (support `.items()`)
    - iterable-of-pairs (e.g. list[tuple[str, str]])
    """
    if not headers:
        return

    multi_items = getattr(headers, "multi_items", None)
    if callable(multi_items):
        pairs: Iterable[Any] = multi_items()
    elif isinstance(headers, Mapping):
        pairs = headers.items()
    else:
        items = getattr(headers, "items", None)
        pairs = items() if callable(items) else headers

    for pair in pairs:
        try:
            key, value = pair
        except (TypeError, ValueError):
            continue
        if key is None:
            continue
        name = key.decode("latin-1") if isinstance(key, bytes) else str(key)
        first = _first(value)
        if first is None:
            continue
        yield name, first


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header container, keeping the first value per name."""
    out: dict[str, str] = {}
    for key, value in iter_header_pairs(headers):
        name = key.strip().lower()
        if not name or name in out:
            continue
        out[name] = value
    return out


def header_value(headers: Any, name: str, default: str = "") -> str:
    """
    Return the first value for ``name`` using case-insensitive key matching.

    Values are stripped; a header sent with an empty value reads as ``default``.
    """
    if not headers or not name:
        return default

    lower = str(name).lower()
    for key, value in iter_header_pairs(headers):
        if key.strip().lower() == lower:
            stripped = value.strip()
            return stripped if stripped else default

    return default


__all__ = ["header_value", "iter_header_pairs", "normalize_headers"]
