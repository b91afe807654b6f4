"""
PageSpeed Insights normalizer.

Maps a Lighthouse report returned by the PageSpeed Insights API onto the
scores and Core Web Vitals of an analysis record. The HTTP call goes through
an injected fetch capability, so callers decide on transport, timeouts and
retries.
"""

import inspect
import json
from dataclasses import dataclass
from numbers import Real
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

import aiohttp
from aiohttp import ClientTimeout

from ..exceptions import MalformedResponseError, RemoteFetchError
from ..report.record import CoreWebVitals
from ..utils.constants import (
    DEFAULT_STRATEGY,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    PSI_CATEGORIES,
    PSI_ENDPOINT,
)
from ..utils.log import get_logger
from ..utils.urls import normalize_url


# A fetcher takes a URL and returns a response-like object exposing ``ok``
# or ``status`` and a ``json()`` method (plain or awaitable).
Fetcher = Callable[[str], Awaitable[Any]]

LCP_AUDIT = "largest-contentful-paint"
FID_AUDIT = "first-input-delay"
CLS_AUDIT = "cumulative-layout-shift"

logger = get_logger("pagespeed")


@dataclass(frozen=True)
class PageSpeedResult:
    """Scores and Core Web Vitals taken from a PageSpeed report."""
    url: str
    core_web_vitals: CoreWebVitals
    performance_score: float
    seo_score: float
    readability_score: float

    def as_fragment(self) -> Dict[str, Any]:
        """Render as a record fragment for merge_analysis."""
        return {
            'coreWebVitals': self.core_web_vitals.to_dict(),
            'performanceScore': self.performance_score,
            'seoScore': self.seo_score,
            'readabilityScore': self.readability_score,
            'data': {
                'performance': {
                    'performanceScore': self.performance_score,
                    'coreWebVitals': [self.core_web_vitals.to_dict()],
                },
            },
        }


@dataclass
class FetchResponse:
    """Minimal response object produced by AiohttpFetcher."""
    url: str
    status: int
    body: str
    headers: Dict[str, str]

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.body)


class AiohttpFetcher:
    """
    Fetch capability backed by an aiohttp session.

    Use as an async context manager; the session is closed on exit.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the fetcher.

        Args:
            timeout: Total request timeout in seconds
            user_agent: User agent string for requests
        """
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "AiohttpFetcher":
        self._session = aiohttp.ClientSession(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent}
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def __call__(self, url: str, method: str = "GET") -> FetchResponse:
        if self._session is None:
            raise RuntimeError("AiohttpFetcher must be used inside 'async with'")

        async with self._session.request(method, url) as response:
            body = await response.text() if method != "HEAD" else ""
            return FetchResponse(
                url=str(response.url),
                status=response.status,
                body=body,
                headers={k: v for k, v in response.headers.items()}
            )


def build_psi_url(url: str, api_key: Optional[str] = None, strategy: str = DEFAULT_STRATEGY) -> str:
    """
    Build the PageSpeed Insights request URL for a page.

    Args:
        url: Page to analyze (normalized before use)
        api_key: Optional PageSpeed API key
        strategy: 'mobile' or 'desktop'

    Returns:
        Fully encoded request URL
    """
    params = [('url', normalize_url(url)), ('strategy', strategy)]
    params.extend(('category', category) for category in PSI_CATEGORIES)
    if api_key:
        params.append(('key', api_key))
    return f"{PSI_ENDPOINT}?{urlencode(params)}"


def _is_success(response: Any) -> bool:
    ok = getattr(response, 'ok', None)
    if ok is not None:
        return bool(ok)
    status = getattr(response, 'status', None)
    return isinstance(status, int) and 200 <= status < 300


def _require(payload: Any, *path: str) -> Any:
    """Walk ``path`` through nested mappings, raising on the first gap."""
    current = payload
    for depth, key in enumerate(path):
        if not isinstance(current, Mapping) or key not in current or current[key] is None:
            raise MalformedResponseError('.'.join(path[:depth + 1]))
        current = current[key]
    return current


def _require_number(payload: Any, *path: str) -> float:
    value = _require(payload, *path)
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedResponseError(
            '.'.join(path), f"Field '{'.'.join(path)}' is not numeric: {value!r}"
        )
    return value


def _require_score(payload: Any, category: str) -> float:
    path = ('lighthouseResult', 'categories', category, 'score')
    score = _require_number(payload, *path)
    if not 0 <= score <= 1:
        raise MalformedResponseError(
            '.'.join(path), f"Score '{category}' is outside [0, 1]: {score!r}"
        )
    return score


def parse_psi_payload(url: str, payload: Any) -> PageSpeedResult:
    """
    Map a PageSpeed Insights JSON payload onto a PageSpeedResult.

    Args:
        url: Analyzed page URL
        payload: Decoded JSON body

    Returns:
        PageSpeedResult with LCP in seconds, FID in milliseconds

    Raises:
        MalformedResponseError: If a required field is absent or not numeric
    """
    audits = ('lighthouseResult', 'audits')
    lcp_ms = _require_number(payload, *audits, LCP_AUDIT, 'numericValue')
    fid_ms = _require_number(payload, *audits, FID_AUDIT, 'numericValue')
    cls = _require_number(payload, *audits, CLS_AUDIT, 'numericValue')

    return PageSpeedResult(
        url=url,
        core_web_vitals=CoreWebVitals(lcp=lcp_ms / 1000, fid=fid_ms, cls=cls),
        performance_score=_require_score(payload, 'performance'),
        seo_score=_require_score(payload, 'seo'),
        readability_score=_require_score(payload, 'accessibility'),
    )


async def fetch_psi_data(
    url: str,
    fetcher: Fetcher,
    api_key: Optional[str] = None,
    strategy: str = DEFAULT_STRATEGY
) -> PageSpeedResult:
    """
    Fetch and normalize PageSpeed Insights data for a page.

    Performs exactly one call through ``fetcher``; no retries.

    Args:
        url: Page to analyze
        fetcher: Async callable returning a response-like object
        api_key: Optional PageSpeed API key
        strategy: 'mobile' or 'desktop'

    Returns:
        PageSpeedResult for the page

    Raises:
        RemoteFetchError: If the request fails or reports non-success
        MalformedResponseError: If the body lacks required fields
    """
    target = normalize_url(url)
    request_url = build_psi_url(target, api_key=api_key, strategy=strategy)
    logger.info(f"Requesting PageSpeed report for {target}")

    try:
        response = await fetcher(request_url)
    except Exception as e:
        raise RemoteFetchError(target, reason=str(e)) from e

    if not _is_success(response):
        raise RemoteFetchError(target, status=getattr(response, 'status', None))

    try:
        payload = response.json()
        if inspect.isawaitable(payload):
            payload = await payload
    except Exception as e:
        raise MalformedResponseError('body', f"Response body is not JSON: {e}") from e

    result = parse_psi_payload(target, payload)
    logger.debug(
        f"PageSpeed for {target}: performance={result.performance_score} "
        f"seo={result.seo_score} lcp={result.core_web_vitals.lcp}s"
    )
    return result
