import pytest

from site_insight.analyzer.seo import (
    SEOCheck,
    SEOExtractor,
    calculate_seo_score,
    compute_readability_score,
    extract_meta_tags,
    is_mobile_responsive,
    perform_seo_checks,
)


DESCRIPTION = " ".join(["word"] * 28)

GOOD_PAGE = f"""<!DOCTYPE html>
<html>
<head>
  <title>Example Domain - Testing the SEO extractor</title>
  <meta charset="utf-8">
  <meta name="description" content="{DESCRIPTION}">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta property="og:title" content="Example">
  <meta property="og:description" content="Example page">
  <link rel="stylesheet" href="/style.css">
  <link rel="canonical" href="https://example.com/">
</head>
<body>
  <h1>Example</h1>
  <p>The cat sat on the mat. It was a sunny day.</p>
  <script>var ignored = "not counted";</script>
</body>
</html>"""

BARE_PAGE = "<html><body><p>Hi</p></body></html>"


def statuses(checks):
    return {check.name: check.status for check in checks}


class TestExtractMetaTags:
    def test_description_and_canonical(self):
        tags = extract_meta_tags(GOOD_PAGE)

        assert tags["description"] == DESCRIPTION
        assert tags["canonical"] == "https://example.com/"
        assert tags["title"] == "Example Domain - Testing the SEO extractor"
        assert tags["og:title"] == "Example"

    def test_first_duplicate_wins(self):
        html = '<meta name="Description" content="first"><meta name="description" content="second">'
        assert extract_meta_tags(html)["description"] == "first"

    def test_empty_page(self):
        assert extract_meta_tags(BARE_PAGE) == {}


class TestMobileResponsive:
    def test_device_width_viewport(self):
        assert is_mobile_responsive(GOOD_PAGE)
        assert is_mobile_responsive('<meta name="viewport" content="width = device-width">')

    def test_fixed_or_missing_viewport(self):
        assert not is_mobile_responsive('<meta name="viewport" content="width=1024">')
        assert not is_mobile_responsive(BARE_PAGE)


class TestReadability:
    def test_score_in_range(self):
        score = compute_readability_score(GOOD_PAGE)
        assert 0 < score <= 100

    def test_harder_text_scores_lower(self):
        simple = "<p>The cat sat on the mat. The dog ran to the park.</p>"
        dense = (
            "<p>Notwithstanding considerable institutional heterogeneity, "
            "interdisciplinary collaboration necessitates comprehensive organizational "
            "accountability mechanisms.</p>"
        )
        assert compute_readability_score(dense) < compute_readability_score(simple)

    def test_no_words(self):
        assert compute_readability_score("<p>123 456</p>") == 0


class TestSeoChecks:
    def test_good_page(self):
        checks = perform_seo_checks(extract_meta_tags(GOOD_PAGE), GOOD_PAGE)

        assert set(statuses(checks).values()) == {"good"}
        assert calculate_seo_score(checks) == 100

    def test_bare_page(self):
        checks = statuses(perform_seo_checks(extract_meta_tags(BARE_PAGE), BARE_PAGE))

        assert checks["Title Tag"] == "error"
        assert checks["Meta Description"] == "error"
        assert checks["H1 Tag"] == "error"
        assert checks["Open Graph"] == "error"
        assert checks["Canonical URL"] == "warning"
        assert checks["Mobile Viewport"] == "error"

    def test_length_warnings(self):
        meta_tags = {"title": "Short", "description": "Too short", "og:title": "x"}
        checks = statuses(perform_seo_checks(meta_tags, "<h1>a</h1><h1>b</h1>"))

        assert checks["Title Tag"] == "warning"
        assert checks["Meta Description"] == "warning"
        assert checks["H1 Tag"] == "warning"
        assert checks["Open Graph"] == "warning"

    @pytest.mark.parametrize("check_statuses,expected", [
        ([], 0),
        (["good", "good"], 100),
        (["good", "warning"], 75),
        (["error", "error", "good", "good"], 50),
    ])
    def test_score(self, check_statuses, expected):
        checks = [SEOCheck(f"c{i}", status, "") for i, status in enumerate(check_statuses)]
        assert calculate_seo_score(checks) == expected


class TestSEOExtractor:
    def test_extract(self):
        result = SEOExtractor().extract(GOOD_PAGE)

        assert result.score == 100
        assert result.mobile_responsive is True
        assert result.recommendations == []

    def test_recommendations_for_bare_page(self):
        result = SEOExtractor().extract(BARE_PAGE)
        priorities = {r["title"]: r["priority"] for r in result.recommendations}

        assert priorities["Improve Title Tag"] == "high"
        assert priorities["Improve Canonical URL"] == "medium"

    def test_fragment(self):
        fragment = SEOExtractor().extract(GOOD_PAGE).as_fragment()

        assert fragment["data"]["seo"]["metaTags"]["canonical"] == "https://example.com/"
        assert fragment["data"]["performance"]["mobileResponsive"] is True
