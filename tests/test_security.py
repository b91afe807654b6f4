from site_insight.analyzer.security import calculate_security_score, extract_security_headers
from site_insight.report.record import SecurityHeaders


class FakeHeaders:
    """Header object with a case-insensitive get, like aiohttp's CIMultiDict."""

    def __init__(self, values):
        self._values = {k.lower(): v for k, v in values.items()}

    def get(self, name, default=None):
        return self._values.get(name.lower(), default)


class TestExtractSecurityHeaders:
    def test_all_headers(self, secure_headers):
        headers = extract_security_headers(secure_headers)

        assert headers.csp == "default-src 'self'"
        assert headers.hsts == "max-age=31536000"
        assert headers.xfo == "DENY"
        assert headers.xcto == "nosniff"
        assert headers.referrer == "no-referrer"

    def test_case_insensitive_mapping(self):
        headers = extract_security_headers({"x-frame-options": "SAMEORIGIN"})
        assert headers.xfo == "SAMEORIGIN"
        assert headers.csp == ""

    def test_header_object_with_get(self):
        headers = extract_security_headers(FakeHeaders({"Referrer-Policy": "same-origin"}))
        assert headers.referrer == "same-origin"

    def test_missing_headers_default_to_empty(self):
        assert extract_security_headers({}) == SecurityHeaders()
        assert extract_security_headers(None) == SecurityHeaders()
        assert set(extract_security_headers({}).to_dict()) == {"csp", "hsts", "xfo", "xcto", "referrer"}


class TestSecurityScore:
    def test_all_headers_score_100(self, secure_headers):
        assert calculate_security_score(extract_security_headers(secure_headers)) == 100

    def test_partial(self):
        headers = SecurityHeaders(csp="default-src 'self'", xcto="nosniff")
        assert calculate_security_score(headers) == 40

    def test_none(self):
        assert calculate_security_score(SecurityHeaders()) == 0
