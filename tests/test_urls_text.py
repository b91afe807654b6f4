from datetime import date

from site_insight.utils.log import get_logger
from site_insight.utils.text import EM_DASH, dash_if_empty
from site_insight.utils.urls import export_filename, get_domain, normalize_url


class TestNormalizeUrl:
    def test_bare_domain_gets_https(self):
        assert normalize_url("example.com") == "https://example.com"

    def test_existing_scheme_is_kept(self):
        assert normalize_url("http://test.com") == "http://test.com"
        assert normalize_url("https://test.com") == "https://test.com"

    def test_scheme_check_is_case_insensitive(self):
        assert normalize_url("HTTPS://Test.com/Path") == "HTTPS://Test.com/Path"

    def test_other_schemes_are_prefixed(self):
        assert normalize_url("ftp.example.com/x") == "https://ftp.example.com/x"

    def test_idempotent(self):
        once = normalize_url("example.com/page")
        assert normalize_url(once) == once


class TestExportFilename:
    def test_uses_domain_and_date(self):
        name = export_filename("https://www.example.com/a?b=1", "csv", day=date(2024, 1, 31))
        assert name == "www.example.com-analysis-2024-01-31.csv"

    def test_port_is_made_filename_safe(self):
        name = export_filename("localhost:8080", "json", day=date(2024, 2, 1))
        assert name == "localhost_8080-analysis-2024-02-01.json"

    def test_get_domain_lowercases(self):
        assert get_domain("Example.COM/path") == "example.com"


class TestDashIfEmpty:
    def test_empty_values_become_em_dash(self):
        assert dash_if_empty("") == EM_DASH
        assert dash_if_empty(None) == EM_DASH
        assert EM_DASH == "—"

    def test_non_empty_strings_pass_through(self):
        assert dash_if_empty("1.5s") == "1.5s"


def test_area_loggers_are_package_children():
    logger = get_logger("colors")
    assert logger.name == "site_insight.colors"
    assert get_logger("colors") is logger
