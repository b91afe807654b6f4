"""
Social, cookie, minification and link checks.

Lightweight pattern checks over raw markup. Link checking issues a HEAD
request per anchor through the injected fetch capability.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import urljoin, urlparse

from .pagespeed import Fetcher, _is_success
from ..utils.log import get_logger


OPEN_GRAPH_PATTERN = re.compile(r'<meta[^>]+(?:property|name)=["\']og:', re.IGNORECASE)
TWITTER_CARD_PATTERN = re.compile(r'<meta[^>]+(?:property|name)=["\']twitter:', re.IGNORECASE)
SHARE_BUTTON_PATTERN = re.compile(
    r'(facebook\.com/sharer|twitter\.com/share|linkedin\.com/share'
    r'|addthis|sharethis|\.share-buttons)',
    re.IGNORECASE
)
COOKIE_SCRIPT_PATTERN = re.compile(
    r'(cookieconsent|cookiebot|onetrust|osano|cookie-script)', re.IGNORECASE
)
CSS_LINK_PATTERN = re.compile(r'<link[^>]+href=["\'][^"\']+\.css[^"\']*["\']', re.IGNORECASE)
JS_SCRIPT_PATTERN = re.compile(r'<script[^>]+src=["\'][^"\']+\.js[^"\']*["\']', re.IGNORECASE)
ANCHOR_PATTERN = re.compile(r'<a[^>]+href=["\']([^"\'#]+)["\']', re.IGNORECASE)

SKIPPED_SCHEMES = ('mailto:', 'javascript:', 'tel:')

logger = get_logger("social")


@dataclass
class SocialMeta:
    has_open_graph: bool = False
    has_twitter_card: bool = False
    has_share_buttons: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            'hasOpenGraph': self.has_open_graph,
            'hasTwitterCard': self.has_twitter_card,
            'hasShareButtons': self.has_share_buttons,
        }


@dataclass
class CookieInfo:
    has_cookie_script: bool = False
    scripts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {'hasCookieScript': self.has_cookie_script, 'scripts': list(self.scripts)}


@dataclass
class MinificationInfo:
    css_minified: bool = False
    js_minified: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {'cssMinified': self.css_minified, 'jsMinified': self.js_minified}


@dataclass
class LinkIssues:
    broken_links: List[str] = field(default_factory=list)
    mixed_content_links: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            'brokenLinks': list(self.broken_links),
            'mixedContentLinks': list(self.mixed_content_links),
        }


def detect_social_meta(html: str) -> SocialMeta:
    """Detect Open Graph and Twitter card meta tags plus share buttons."""
    return SocialMeta(
        has_open_graph=bool(OPEN_GRAPH_PATTERN.search(html)),
        has_twitter_card=bool(TWITTER_CARD_PATTERN.search(html)),
        has_share_buttons=detect_share_buttons(html),
    )


def detect_share_buttons(html: str) -> bool:
    """Detect common social share widgets and share URLs."""
    return bool(SHARE_BUTTON_PATTERN.search(html))


def detect_cookie_scripts(html: str) -> CookieInfo:
    """
    Detect known cookie consent providers.

    Returns:
        CookieInfo with provider names lower-cased, de-duplicated and in
        order of first appearance
    """
    scripts = list(dict.fromkeys(m.lower() for m in COOKIE_SCRIPT_PATTERN.findall(html)))
    return CookieInfo(has_cookie_script=bool(scripts), scripts=scripts)


def detect_minification(html: str) -> MinificationInfo:
    """Check whether any linked stylesheet or script is a .min build."""
    css_links = CSS_LINK_PATTERN.findall(html)
    js_scripts = JS_SCRIPT_PATTERN.findall(html)
    return MinificationInfo(
        css_minified=any('.min.css' in link for link in css_links),
        js_minified=any('.min.js' in script for script in js_scripts),
    )


def _is_mixed_content(base_url: str, url: str) -> bool:
    return base_url.lower().startswith('https://') and urlparse(url).scheme == 'http'


async def check_links(html: str, base_url: str, fetcher: Fetcher) -> LinkIssues:
    """
    Check every anchor on the page.

    Links are resolved against ``base_url`` and requested one at a time
    with HEAD. A request that errors or reports non-success marks the link
    broken. Plain http links on an https page are reported as mixed content.

    Args:
        html: HTML content to scan
        base_url: Page URL
        fetcher: Async callable accepting ``(url, method=...)``

    Returns:
        LinkIssues with each list de-duplicated in first-seen order
    """
    broken: List[str] = []
    mixed: List[str] = []

    for href in ANCHOR_PATTERN.findall(html):
        if href.lower().startswith(SKIPPED_SCHEMES):
            continue
        try:
            url = urljoin(base_url, href)
            if _is_mixed_content(base_url, url):
                mixed.append(url)
            response = await fetcher(url, method="HEAD")
            if not _is_success(response):
                broken.append(url)
        except Exception as e:
            logger.debug(f"Link check failed for {href}: {e}")
            broken.append(href)

    return LinkIssues(
        broken_links=list(dict.fromkeys(broken)),
        mixed_content_links=list(dict.fromkeys(mixed)),
    )
