import pytest

from site_insight.analyzer.social import (
    check_links,
    detect_cookie_scripts,
    detect_minification,
    detect_share_buttons,
    detect_social_meta,
)


PAGE = """
<meta property="og:title" content="t">
<meta name="twitter:card" content="s">
<link rel="stylesheet" href="style.min.css">
<script src="app.min.js"></script>
<script src="cookieconsent.js"></script>
<a href="http://insecure.com/page"></a>
<a href="https://good.com/"></a>
"""


class HostFetcher:
    """Answers HEAD requests; hosts in ``good`` succeed, others return 404."""

    def __init__(self, good=("good.com",), errors=()):
        self.good = good
        self.errors = errors
        self.calls = []

    async def __call__(self, url, method="GET"):
        self.calls.append((method, url))
        if any(host in url for host in self.errors):
            raise OSError("connection reset")
        ok = any(host in url for host in self.good)
        return type("Response", (), {"ok": ok, "status": 200 if ok else 404})()


class TestDetectors:
    def test_social_meta(self):
        social = detect_social_meta(PAGE)
        assert social.has_open_graph is True
        assert social.has_twitter_card is True
        assert social.has_share_buttons is False

    def test_share_buttons(self):
        assert detect_share_buttons('<a href="https://twitter.com/share">t</a>')
        assert detect_share_buttons('<div class="addthis_toolbox"></div>')
        assert not detect_share_buttons('<a href="https://twitter.com/acme">t</a>')

    def test_cookie_scripts(self):
        cookies = detect_cookie_scripts(PAGE + '<script src="CookieConsent.min.js"></script>')
        assert cookies.has_cookie_script is True
        assert cookies.scripts == ["cookieconsent"]

    def test_no_cookie_scripts(self):
        assert detect_cookie_scripts("<p>x</p>").to_dict() == {"hasCookieScript": False, "scripts": []}

    def test_minification(self):
        minification = detect_minification(PAGE)
        assert minification.css_minified is True
        assert minification.js_minified is True

        plain = detect_minification('<link href="a.css" rel="stylesheet"><script src="b.js"></script>')
        assert plain.to_dict() == {"cssMinified": False, "jsMinified": False}


class TestCheckLinks:
    @pytest.mark.asyncio
    async def test_broken_and_mixed(self):
        links = await check_links(PAGE, "https://example.com", HostFetcher())

        assert links.broken_links == ["http://insecure.com/page"]
        assert links.mixed_content_links == ["http://insecure.com/page"]

    @pytest.mark.asyncio
    async def test_head_requests_and_skipped_schemes(self):
        html = (
            '<a href="/about">About</a>'
            '<a href="mailto:hi@example.com">Mail</a>'
            '<a href="javascript:void(0)">JS</a>'
            '<a href="#top">Top</a>'
        )
        fetcher = HostFetcher(good=("example.com",))
        links = await check_links(html, "https://example.com/", fetcher)

        assert fetcher.calls == [("HEAD", "https://example.com/about")]
        assert links.broken_links == []

    @pytest.mark.asyncio
    async def test_duplicates_and_errors(self):
        html = '<a href="https://down.com/x"></a><a href="https://down.com/x"></a>'
        links = await check_links(html, "https://example.com", HostFetcher(errors=("down.com",)))

        assert links.broken_links == ["https://down.com/x"]

    @pytest.mark.asyncio
    async def test_http_page_has_no_mixed_content(self):
        html = '<a href="http://good.com/page"></a>'
        links = await check_links(html, "http://example.com", HostFetcher())
        assert links.mixed_content_links == []
