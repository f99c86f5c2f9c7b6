# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""PostureGuard CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from ..config import HttpSettings, load_http_settings
from ..errors import PostureGuardError
from ..http import FetchedPage, create_page_fetcher
from ..log import setup_logging
from ..models import SecurityAnalysisResult
from ..runtime import PostureGuard

CLI_TEXT_TRUNCATION_BYTES = 4096
_SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PostureGuard HTTP security posture analyzer")
    parser.add_argument("url", help="Target URL to analyze")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument(
        "--body-file",
        type=Path,
        help="Analyze a saved HTML body instead of fetching the URL",
    )
    parser.add_argument(
        "--headers-file",
        type=Path,
        help="Response headers for offline analysis, one 'Name: value' per line",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: POSTUREGUARD_LOG_LEVEL or WARNING)")
    return parser


def parse_headers_text(text: str) -> list[tuple[str, str]]:
    """Parse ``Name: value`` lines; status lines, blanks and malformed lines are skipped."""
    pairs: list[tuple[str, str]] = []
    for line in text.splitlines():
        name, sep, value = line.partition(":")
        if not sep or not name.strip() or " " in name.strip():
            continue
        pairs.append((name.strip(), value.strip()))
    return pairs


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _truncate_for_cli(value: Any, *, max_bytes: int) -> Any:
    """Truncate large strings (e.g. long header values) in JSON output."""
    if isinstance(value, str):
        return _truncate_text_bytes(value, max_bytes)
    if isinstance(value, dict):
        return {k: _truncate_for_cli(v, max_bytes=max_bytes) for k, v in value.items()}
    if isinstance(value, list):
        return [_truncate_for_cli(v, max_bytes=max_bytes) for v in value]
    return value


def _print_json(result: SecurityAnalysisResult | dict[str, Any]) -> None:
    payload = result.to_dict() if hasattr(result, "to_dict") else result
    json.dump(_truncate_for_cli(payload, max_bytes=CLI_TEXT_TRUNCATION_BYTES), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(result: SecurityAnalysisResult | dict[str, Any], redirect_chain: list[str] | None = None) -> None:
    payload = result.to_dict() if hasattr(result, "to_dict") else result
    if not isinstance(payload, dict):
        print(payload)
        return

    metadata = payload.get("metadata") or {}
    transport = payload.get("https_configuration") or {}
    mixed = transport.get("mixed_content") or {}

    print(f"[PostureGuard] {metadata.get('url', '-')}")
    if redirect_chain:
        print(f"Redirects: {' -> '.join(redirect_chain)}")
    print(f"Overall score: {payload.get('overall_score', 0)}/100")
    print(f"HTTPS: {'yes' if transport.get('is_https') else 'no'}")
    if mixed.get("has_mixed_content"):
        print(f"Mixed content: {mixed.get('count', 0)} HTTP resource(s)")

    headers = payload.get("security_headers") or {}
    if headers:
        print("Headers:")
        for name, analysis in headers.items():
            state = "present" if analysis.get("present") else "missing"
            print(f"- {name}: {analysis.get('score', 0)} ({state})")

    vulnerabilities = [v for v in payload.get("vulnerabilities") or [] if isinstance(v, dict)]
    if vulnerabilities:
        print("Findings:")
        for vuln in sorted(vulnerabilities, key=lambda v: _SEVERITY_ORDER.get(str(v.get("severity")), 9)):
            print(f"- [{vuln.get('severity')}] {vuln.get('title')} ({vuln.get('type')})")

    recommendations = payload.get("recommendations") or []
    if recommendations:
        print("Recommendations:")
        for item in recommendations:
            print(f"- {item}")


def _load_offline_page(args: argparse.Namespace) -> FetchedPage:
    body = args.body_file.read_bytes() if args.body_file is not None else b""
    headers = parse_headers_text(args.headers_file.read_text(encoding="utf-8")) if args.headers_file is not None else []
    return FetchedPage.offline(args.url, headers, body)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    offline = args.body_file is not None or args.headers_file is not None
    try:
        with PostureGuard(fetcher=create_page_fetcher(settings), http_settings=settings) as guard:
            page = _load_offline_page(args) if offline else guard.fetch(args.url)
            result = guard.analyze_page(page)
    except PostureGuardError as exc:
        print(f"error: {exc} ({exc.reason})", file=sys.stderr)
        return 2
    except OSError as exc:
        # Fetch failures arrive as FetchError, so this is an unreadable input file.
        print(f"error: cannot read input: {exc}", file=sys.stderr)
        return 2

    if args.json:
        _print_json(result)
    else:
        _pretty_print(result, page.redirect_chain)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
