"""
Unit tests for overall security scoring and recommendations.
"""

import unittest

from postureguard.analysis.scoring import (
    calculate_headers_score,
    calculate_https_score,
    calculate_overall_score,
    calculate_vulnerability_penalty,
    generate_recommendations,
)
from postureguard.config import AnalyzerSettings
from postureguard.models import (
    SEVERITY_PENALTIES,
    CertificateInfo,
    HeaderAnalysis,
    HTTPSConfig,
    MixedContentAnalysis,
    SecurityHeadersAnalysis,
    SecurityVulnerability,
    Severity,
    VulnerabilityType,
)

SECURE_TRANSPORT = HTTPSConfig(
    is_https=True,
    certificate_info=CertificateInfo(valid=True),
    https_redirect=True,
    mixed_content=MixedContentAnalysis(),
)


def _headers(score, present=True):
    return SecurityHeadersAnalysis(
        **{name: HeaderAnalysis(present=present, score=score) for name in SecurityHeadersAnalysis.FIELDS}
    )


def _vuln(vuln_type, severity):
    return SecurityVulnerability(type=vuln_type, severity=severity, title=vuln_type.value)


class TestComponentScores(unittest.TestCase):
    def test_https_score_for_secure_transport(self):
        self.assertEqual(calculate_https_score(SECURE_TRANSPORT), 100)

    def test_https_score_zero_without_https(self):
        self.assertEqual(calculate_https_score(HTTPSConfig(is_https=False)), 0)

    def test_mixed_content_reduces_https_score(self):
        config = HTTPSConfig(
            is_https=True,
            certificate_info=CertificateInfo(valid=True),
            https_redirect=True,
            mixed_content=MixedContentAnalysis.from_resources(["http://a/1", "http://a/2", "http://a/3"]),
        )
        self.assertEqual(calculate_https_score(config), 89)

    def test_headers_score_is_mean(self):
        headers = SecurityHeadersAnalysis(
            hsts=HeaderAnalysis(present=True, score=70),
            content_security_policy=HeaderAnalysis(present=True, score=60),
            x_frame_options=HeaderAnalysis(present=True, score=100),
            x_content_type_options=HeaderAnalysis(present=True, score=100),
            x_xss_protection=HeaderAnalysis(present=True, score=80),
            referrer_policy=HeaderAnalysis(present=True, score=90),
        )
        self.assertEqual(calculate_headers_score(headers), 62)

    def test_vulnerability_penalty_by_severity(self):
        vulns = [
            _vuln(VulnerabilityType.INFORMATION_DISCLOSURE, Severity.CRITICAL),
            _vuln(VulnerabilityType.CSRF_RISK, Severity.HIGH),
            _vuln(VulnerabilityType.XSS_RISK, Severity.MEDIUM),
        ]
        self.assertEqual(calculate_vulnerability_penalty(vulns), 40 + 25 + 10)
        self.assertEqual(Severity.LOW.penalty, 5)


class TestOverallScore(unittest.TestCase):
    def test_perfect_security(self):
        score, breakdown = calculate_overall_score(SECURE_TRANSPORT, _headers(100), [])
        self.assertGreaterEqual(score, 95)
        self.assertLessEqual(score, 100)
        self.assertEqual(breakdown.https_score, 100)
        self.assertEqual(breakdown.headers_score, 100)
        self.assertEqual(breakdown.vulnerability_penalty, 0)

    def test_poor_security(self):
        vulns = [
            _vuln(VulnerabilityType.INFORMATION_DISCLOSURE, Severity.CRITICAL),
            _vuln(VulnerabilityType.CSRF_RISK, Severity.HIGH),
        ]
        score, _ = calculate_overall_score(HTTPSConfig(is_https=False), _headers(0, present=False), vulns)
        self.assertGreaterEqual(score, 0)
        self.assertLessEqual(score, 20)
        recommendations = generate_recommendations(HTTPSConfig(is_https=False), _headers(0, present=False), vulns, score)
        self.assertTrue(recommendations)

    def test_weighted_blend(self):
        score, _ = calculate_overall_score(SECURE_TRANSPORT, _headers(50), [])
        self.assertEqual(score, 70)  # 0.4 * 100 + 0.6 * 50

    def test_weights_are_configurable(self):
        score, _ = calculate_overall_score(SECURE_TRANSPORT, _headers(50), [], AnalyzerSettings(https_weight=0.5))
        self.assertEqual(score, 75)

    def test_score_clamped_to_zero(self):
        vulns = [_vuln(t, Severity.CRITICAL) for t in VulnerabilityType]
        score, breakdown = calculate_overall_score(SECURE_TRANSPORT, _headers(100), vulns)
        self.assertEqual(score, 0)
        self.assertEqual(breakdown.vulnerability_penalty, 200)


class TestRecommendations(unittest.TestCase):
    def test_insecure_transport_first(self):
        recs = generate_recommendations(HTTPSConfig(is_https=False), _headers(100), [], 60)
        self.assertEqual(len(recs), 1)
        self.assertIn("HTTPS", recs[0])

    def test_missing_and_weak_headers(self):
        headers = SecurityHeadersAnalysis(
            hsts=HeaderAnalysis(present=True, score=45, recommendations=["Add 'includeSubDomains'"]),
            content_security_policy=HeaderAnalysis(present=False, score=0),
            x_frame_options=HeaderAnalysis(present=True, score=100),
            x_content_type_options=HeaderAnalysis(present=True, score=100),
            x_xss_protection=HeaderAnalysis(present=True, score=100),
            referrer_policy=HeaderAnalysis(present=True, score=100),
            permissions_policy=HeaderAnalysis(present=True, score=100),
            expect_ct=HeaderAnalysis(present=True, score=100),
        )
        recs = generate_recommendations(SECURE_TRANSPORT, headers, [], 90)
        self.assertEqual(recs, ["HSTS: Add 'includeSubDomains'", "Add the Content Security Policy header"])

    def test_one_recommendation_per_vulnerability_type(self):
        vulns = [
            _vuln(VulnerabilityType.XSS_RISK, Severity.MEDIUM),
            _vuln(VulnerabilityType.XSS_RISK, Severity.MEDIUM),
            _vuln(VulnerabilityType.CLICKJACKING_RISK, Severity.MEDIUM),
        ]
        recs = generate_recommendations(SECURE_TRANSPORT, _headers(100), vulns, 80)
        self.assertEqual(len(recs), 2)

    def test_no_recommendations_for_perfect_score(self):
        self.assertEqual(generate_recommendations(SECURE_TRANSPORT, _headers(100), [], 100), [])

    def test_fallback_when_nothing_specific_applies(self):
        recs = generate_recommendations(SECURE_TRANSPORT, _headers(100), [], 99)
        self.assertEqual(len(recs), 1)


class TestSeverityPenaltiesConsistency(unittest.TestCase):
    def test_every_severity_has_positive_penalty(self):
        for severity in Severity:
            with self.subTest(severity=severity):
                self.assertIsInstance(SEVERITY_PENALTIES[severity], int)
                self.assertGreater(SEVERITY_PENALTIES[severity], 0)


if __name__ == "__main__":
    unittest.main()
