# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Regex helpers for inspecting raw, unparsed HTML."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

_ATTR_RE = re.compile(r"""([^\s"'=<>/`]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?""")
_SCRIPT_RE = re.compile(r"<script\b(?P<attrs>[^>]*)>(?P<content>.*?)</script\s*>", re.IGNORECASE | re.DOTALL)
# Unterminated forms run to the end of the document.
_FORM_RE = re.compile(r"<form\b(?P<attrs>[^>]*)>(?P<content>.*?)(?:</form\s*>|\Z)", re.IGNORECASE | re.DOTALL)
_INPUT_RE = re.compile(r"<input\b(?P<attrs>[^>]*)>", re.IGNORECASE)


@dataclass(frozen=True)
class Element:
    """A matched tag: its attributes and, for paired tags, the raw inner markup."""

    attrs: dict[str, str]
    content: str = ""


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse a tag's attribute string into a lowercase-keyed dict (first occurrence wins)."""
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(raw or ""):
        name = match.group(1).lower()
        if name in attrs:
            continue
        value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        attrs[name] = value
    return attrs


def iter_scripts(body: str) -> Iterator[Element]:
    for match in _SCRIPT_RE.finditer(body):
        yield Element(parse_attributes(match.group("attrs")), match.group("content"))


def iter_inline_scripts(body: str) -> Iterator[str]:
    """Yield the content of every ``<script>`` without a ``src`` attribute and with non-blank content."""
    for script in iter_scripts(body):
        if "src" in script.attrs:
            continue
        if script.content.strip():
            yield script.content


def iter_forms(body: str) -> Iterator[Element]:
    for match in _FORM_RE.finditer(body):
        yield Element(parse_attributes(match.group("attrs")), match.group("content"))


def iter_inputs(markup: str) -> Iterator[dict[str, str]]:
    for match in _INPUT_RE.finditer(markup):
        yield parse_attributes(match.group("attrs"))


__all__ = [
    "Element",
    "iter_forms",
    "iter_inline_scripts",
    "iter_inputs",
    "iter_scripts",
    "parse_attributes",
]
