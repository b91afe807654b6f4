"""
Shared fixtures: fake fetch capabilities and a sample PageSpeed payload.
"""

import json

import pytest


class FakeResponse:
    """Response-like object accepted by the fetch capability contract."""

    def __init__(self, status=200, payload=None, body=None):
        self.status = status
        self._payload = payload
        self._body = body

    @property
    def ok(self):
        return 200 <= self.status < 300

    def json(self):
        if self._body is not None:
            return json.loads(self._body)
        return self._payload


class RecordingFetcher:
    """Async fetcher returning a fixed response and remembering each call."""

    def __init__(self, response):
        self.response = response
        self.calls = []

    async def __call__(self, url, method="GET"):
        self.calls.append((method, url))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def psi_payload(lcp=1500, fid=10, cls=0.01, performance=0.9, seo=0.93, accessibility=0.88):
    return {
        "lighthouseResult": {
            "audits": {
                "largest-contentful-paint": {"numericValue": lcp},
                "first-input-delay": {"numericValue": fid},
                "cumulative-layout-shift": {"numericValue": cls},
            },
            "categories": {
                "performance": {"score": performance},
                "seo": {"score": seo},
                "accessibility": {"score": accessibility},
            },
        }
    }


@pytest.fixture
def sample_psi_payload():
    return psi_payload()


@pytest.fixture
def make_fetcher():
    """Build a RecordingFetcher around a response or an exception."""
    def factory(response):
        return RecordingFetcher(response)
    return factory


@pytest.fixture
def secure_headers():
    return {
        "Content-Security-Policy": "default-src 'self'",
        "Strict-Transport-Security": "max-age=31536000",
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
    }


@pytest.fixture
def make_psi_payload():
    return psi_payload


@pytest.fixture
def make_response():
    return FakeResponse
