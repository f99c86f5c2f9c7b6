# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unit tests for the security header sub-analyzers.
"""

import unittest

import httpx

from postureguard.analysis.headers import (
    HeaderFamily,
    analyze_header,
    analyze_security_headers,
    parse_directives,
)
from postureguard.config import AnalyzerSettings


class TestHSTSAnalysis(unittest.TestCase):
    def _analyze(self, value):
        return analyze_header(HeaderFamily.HSTS, {"Strict-Transport-Security": value})

    def test_complete_header_scores_base(self):
        result = self._analyze("max-age=31536000; includeSubDomains; preload")
        self.assertTrue(result.present)
        self.assertEqual(result.value, "max-age=31536000; includeSubDomains; preload")
        self.assertEqual(result.score, 70)
        self.assertEqual(result.issues, [])

    def test_max_age_only(self):
        result = self._analyze("max-age=31536000")
        self.assertEqual(result.score, 45)
        self.assertIn("Missing includeSubDomains directive", result.issues)
        self.assertIn("Missing preload directive", result.issues)

    def test_short_max_age(self):
        result = self._analyze("max-age=3600; includeSubDomains; preload")
        self.assertEqual(result.score, 65)
        self.assertEqual(len(result.issues), 1)

    def test_directives_are_case_insensitive(self):
        result = self._analyze("MAX-AGE=63072000; INCLUDESUBDOMAINS; Preload")
        self.assertEqual(result.score, 70)

    def test_all_deductions_are_cumulative(self):
        result = self._analyze("max-age=0")
        self.assertEqual(result.score, 40)
        self.assertEqual(len(result.issues), 3)
        self.assertEqual(len(set(result.issues)), 3)

    def test_custom_threshold(self):
        result = analyze_header(
            HeaderFamily.HSTS,
            {"Strict-Transport-Security": "max-age=3600; includeSubDomains; preload"},
            AnalyzerSettings(hsts_min_max_age=3600),
        )
        self.assertEqual(result.score, 70)

    def test_short_max_age_issue_names_configured_threshold(self):
        result = analyze_header(
            HeaderFamily.HSTS,
            {"Strict-Transport-Security": "max-age=3600; includeSubDomains; preload"},
            AnalyzerSettings(hsts_min_max_age=86400),
        )
        self.assertEqual(result.score, 65)
        self.assertEqual(result.issues, ["HSTS max-age is below the recommended 86400 seconds"])

    def test_missing_header(self):
        result = analyze_header(HeaderFamily.HSTS, {})
        self.assertFalse(result.present)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.value, "")
        self.assertIn("HSTS header not present", result.issues)


class TestCSPAnalysis(unittest.TestCase):
    def _analyze(self, headers):
        return analyze_header(HeaderFamily.CONTENT_SECURITY_POLICY, headers)

    def test_basic_policy(self):
        result = self._analyze({"Content-Security-Policy": "default-src 'self'; script-src 'self'"})
        self.assertTrue(result.present)
        self.assertEqual(result.score, 60)
        self.assertEqual(result.issues, [])

    def test_unsafe_inline(self):
        result = self._analyze({"Content-Security-Policy": "default-src 'self'; script-src 'self' 'unsafe-inline'"})
        self.assertEqual(result.score, 40)

    def test_unsafe_eval(self):
        result = self._analyze({"Content-Security-Policy": "default-src 'self'; script-src 'self' 'unsafe-eval'"})
        self.assertEqual(result.score, 45)

    def test_report_only_without_script_src(self):
        result = self._analyze({"Content-Security-Policy-Report-Only": "default-src 'self'"})
        self.assertTrue(result.present)
        self.assertEqual(result.value, "default-src 'self'")
        self.assertEqual(result.score, 50)
        self.assertIn("CSP missing 'script-src' directive", result.issues)

    def test_all_deductions_floor_above_zero(self):
        result = self._analyze({"Content-Security-Policy": "default-src * 'unsafe-inline' 'unsafe-eval'"})
        self.assertEqual(result.score, 15)
        self.assertEqual(len(result.issues), 3)

    def test_enforcing_header_preferred_over_report_only(self):
        result = self._analyze(
            {
                "Content-Security-Policy-Report-Only": "default-src 'self'",
                "Content-Security-Policy": "script-src 'self'",
            }
        )
        self.assertEqual(result.value, "script-src 'self'")
        self.assertEqual(result.score, 60)

    def test_missing_header(self):
        result = self._analyze({})
        self.assertFalse(result.present)
        self.assertEqual(result.score, 0)
        self.assertIn("Content Security Policy header not present", result.issues)


class TestFixedScoreHeaders(unittest.TestCase):
    def test_presence_scores(self):
        cases = {
            HeaderFamily.X_FRAME_OPTIONS: ("X-Frame-Options", "DENY", 100),
            HeaderFamily.X_CONTENT_TYPE_OPTIONS: ("X-Content-Type-Options", "nosniff", 100),
            HeaderFamily.X_XSS_PROTECTION: ("X-XSS-Protection", "1; mode=block", 80),
            HeaderFamily.REFERRER_POLICY: ("Referrer-Policy", "strict-origin-when-cross-origin", 90),
            HeaderFamily.PERMISSIONS_POLICY: ("Permissions-Policy", "camera=(), microphone=()", 80),
            HeaderFamily.EXPECT_CT: ("Expect-CT", "max-age=86400, enforce", 70),
        }
        for family, (name, value, score) in cases.items():
            with self.subTest(family=family):
                result = analyze_header(family, {name: value})
                self.assertTrue(result.present)
                self.assertEqual(result.value, value)
                self.assertEqual(result.score, score)

    def test_xss_protection_disabled_still_scores_presence(self):
        result = analyze_header(HeaderFamily.X_XSS_PROTECTION, {"X-XSS-Protection": "0"})
        self.assertEqual(result.score, 80)
        self.assertTrue(result.recommendations)

    def test_unrecognised_values_add_informational_issue_without_deduction(self):
        cases = {
            HeaderFamily.X_FRAME_OPTIONS: ("X-Frame-Options", "bogus", 100),
            HeaderFamily.X_CONTENT_TYPE_OPTIONS: ("X-Content-Type-Options", "sniff", 100),
            HeaderFamily.REFERRER_POLICY: ("Referrer-Policy", "whatever", 90),
        }
        for family, (name, value, score) in cases.items():
            with self.subTest(family=family):
                result = analyze_header(family, {name: value})
                self.assertEqual(result.score, score)
                self.assertEqual(result.issues, [f"Unrecognised {name} value '{value}'"])
                self.assertTrue(result.recommendations)

    def test_recognised_values_have_no_issues(self):
        cases = {
            HeaderFamily.X_FRAME_OPTIONS: ("X-Frame-Options", "SAMEORIGIN"),
            HeaderFamily.X_CONTENT_TYPE_OPTIONS: ("X-Content-Type-Options", "nosniff"),
            HeaderFamily.REFERRER_POLICY: ("Referrer-Policy", "no-referrer, strict-origin-when-cross-origin"),
        }
        for family, (name, value) in cases.items():
            with self.subTest(family=family):
                self.assertEqual(analyze_header(family, {name: value}).issues, [])

    def test_legacy_feature_policy_counts_as_permissions_policy(self):
        result = analyze_header(HeaderFamily.PERMISSIONS_POLICY, {"Feature-Policy": "camera 'none'"})
        self.assertTrue(result.present)
        self.assertEqual(result.score, 80)
        self.assertTrue(any("Feature-Policy" in rec for rec in result.recommendations))


class TestSecurityHeadersAnalysis(unittest.TestCase):
    def test_no_headers_all_absent(self):
        analysis = analyze_security_headers({})
        for name, header in analysis.items():
            with self.subTest(header=name):
                self.assertFalse(header.present)
                self.assertEqual(header.score, 0)
                self.assertTrue(header.issues)
                self.assertTrue(header.issues[0].endswith("header not present"))

    def test_good_headers(self):
        analysis = analyze_security_headers(
            {
                "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
                "Content-Security-Policy": "default-src 'self'; script-src 'self'",
                "X-Frame-Options": "DENY",
                "X-Content-Type-Options": "nosniff",
                "X-Xss-Protection": "1; mode=block",
                "Referrer-Policy": "strict-origin-when-cross-origin",
            }
        )
        self.assertEqual(analysis.hsts.score, 70)
        self.assertEqual(analysis.content_security_policy.score, 60)
        self.assertEqual(analysis.x_frame_options.score, 100)
        self.assertEqual(analysis.x_content_type_options.score, 100)
        self.assertEqual(analysis.x_xss_protection.score, 80)
        self.assertEqual(analysis.referrer_policy.score, 90)
        self.assertFalse(analysis.permissions_policy.present)
        self.assertFalse(analysis.expect_ct.present)
        self.assertEqual(len(analysis.scores()), 8)

    def test_lookup_is_case_insensitive_and_takes_first_value(self):
        analysis = analyze_security_headers(
            [
                ("strict-transport-security", "max-age=31536000"),
                ("STRICT-TRANSPORT-SECURITY", "max-age=31536000; includeSubDomains; preload"),
            ]
        )
        self.assertEqual(analysis.hsts.value, "max-age=31536000")
        self.assertEqual(analysis.hsts.score, 45)

    def test_list_values_use_first_entry(self):
        analysis = analyze_security_headers({"X-Frame-Options": ["DENY", "SAMEORIGIN"]})
        self.assertEqual(analysis.x_frame_options.value, "DENY")

    def test_httpx_headers_supported(self):
        headers = httpx.Headers([("Referrer-Policy", "no-referrer"), ("Referrer-Policy", "unsafe-url")])
        analysis = analyze_security_headers(headers)
        self.assertEqual(analysis.referrer_policy.value, "no-referrer")

    def test_blank_value_counts_as_absent(self):
        analysis = analyze_security_headers({"X-Frame-Options": "   "})
        self.assertFalse(analysis.x_frame_options.present)


class TestParseDirectives(unittest.TestCase):
    def test_names_lowercased_and_first_wins(self):
        directives = parse_directives("Script-Src 'self'; script-src *; max-age=10")
        self.assertEqual(directives["script-src"], ["'self'"])
        self.assertEqual(directives["max-age"], ["10"])

    def test_empty_segments_ignored(self):
        self.assertEqual(parse_directives(" ; ;"), {})


if __name__ == "__main__":
    unittest.main()
