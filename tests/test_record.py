import dataclasses

import pytest

from site_insight.analyzer.contrast import ContrastIssue
from site_insight.report.record import (
    Analysis,
    ComplianceStatus,
    CoreWebVitals,
    SecurityHeaders,
    create_default_analysis,
    merge_analysis,
)


class TestCreateDefaultAnalysis:
    def test_defaults(self):
        record = create_default_analysis("example.com")

        assert record.url == "https://example.com"
        assert record.performance_score == 0
        assert record.seo_score == 0
        assert record.readability_score == 0
        assert record.core_web_vitals == CoreWebVitals(lcp=0, fid=0, cls=0)
        assert record.security_headers == SecurityHeaders()
        assert record.compliance_status == ComplianceStatus.WARN
        assert record.data["seo"]["metaTags"] == {}
        assert record.data["performance"]["mobileResponsive"] is False
        assert record.data["ui"]["imageAnalysis"]["totalImages"] == 0
        assert record.data["technical"]["accessibility"]["violations"] == []

    def test_timestamp(self):
        assert create_default_analysis("a.com", timestamp="2024-01-01T00:00:00Z").timestamp == "2024-01-01T00:00:00Z"
        assert create_default_analysis("a.com").timestamp

    def test_records_do_not_share_data(self):
        first = create_default_analysis("a.com")
        second = create_default_analysis("b.com")
        first.data["ui"]["colors"].append({"hex": "#000000"})
        assert second.data["ui"]["colors"] == []

    def test_frozen(self):
        record = create_default_analysis("a.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.seo_score = 1

    def test_to_dict_key_order(self):
        keys = list(create_default_analysis("a.com").to_dict())
        assert keys == [
            "url", "timestamp", "status", "coreWebVitals", "performanceScore",
            "seoScore", "readabilityScore", "securityHeaders", "complianceStatus", "data",
        ]


class TestMergeAnalysis:
    def test_overlays_sections(self):
        base = create_default_analysis("a.com")
        merged = merge_analysis(base, {
            "performanceScore": 0.5,
            "data": {"seo": {"metaTags": {"title": "Home"}}},
        })

        assert merged.performance_score == 0.5
        assert merged.data["seo"]["metaTags"] == {"title": "Home"}
        assert merged.data["seo"]["checks"] == []
        assert base.performance_score == 0
        assert base.data["seo"]["metaTags"] == {}

    def test_disjoint_merges_commute(self):
        base = create_default_analysis("a.com", timestamp="t")
        a = {"data": {"ui": {"fonts": [{"name": "Roboto", "count": 1}]}}}
        b = {"seoScore": 0.7, "data": {"technical": {"securityScore": 60}}}

        assert merge_analysis(merge_analysis(base, a), b) == merge_analysis(merge_analysis(base, b), a)

    def test_enum_and_value_objects_in_fragment(self):
        merged = merge_analysis(create_default_analysis("a.com"), {
            "complianceStatus": ComplianceStatus.PASS,
            "securityHeaders": SecurityHeaders(xfo="DENY"),
        })
        assert merged.compliance_status == ComplianceStatus.PASS
        assert merged.security_headers.xfo == "DENY"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            merge_analysis(create_default_analysis("a.com"), {"bogus": 1})

    def test_invalid_score_rejected(self):
        with pytest.raises(ValueError):
            merge_analysis(create_default_analysis("a.com"), {"seoScore": 1.5})


class TestAnalysisValidation:
    def test_bool_score_rejected(self):
        with pytest.raises(ValueError):
            Analysis(url="https://a.com", performance_score=True)

    def test_empty_url_rejected(self):
        with pytest.raises(ValueError):
            Analysis(url="")

    def test_compliance_string_coerced(self):
        assert Analysis(url="https://a.com", compliance_status="fail").compliance_status == ComplianceStatus.FAIL

    def test_invalid_compliance_rejected(self):
        with pytest.raises(ValueError):
            Analysis(url="https://a.com", compliance_status="maybe")

    def test_from_dict_requires_url(self):
        with pytest.raises(ValueError):
            Analysis.from_dict({"timestamp": "t"})

    def test_from_dict_keeps_data_as_given(self):
        record = Analysis.from_dict({"url": "https://a.com", "data": {"seo": {"score": 80}}})
        assert record.data == {"seo": {"score": 80}}

    def test_from_dict_rejects_non_mapping_data(self):
        with pytest.raises(ValueError):
            Analysis.from_dict({"url": "https://a.com", "data": ["seo"]})

    def test_to_dict_converts_result_objects(self):
        issue = ContrastIssue(foreground="#777777", background="#ffffff", ratio=4.48)
        record = Analysis(url="https://a.com", data={"ui": {"contrastIssues": [issue]}})
        assert record.to_dict()["data"] == {
            "ui": {"contrastIssues": [{"foreground": "#777777", "background": "#ffffff", "ratio": 4.48}]}
        }

    def test_from_dict_rejects_unknown_nested_fields(self):
        with pytest.raises(ValueError):
            Analysis.from_dict({"url": "https://a.com", "coreWebVitals": {"ttfb": 1}})
