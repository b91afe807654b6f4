"""
Exception types raised by site-insight.

Best-effort extractors never raise; these errors come from the strict
components (PageSpeed normalization and the export codec).
"""

from typing import Optional


class SiteInsightError(Exception):
    """Base class for all site-insight errors."""


class RemoteFetchError(SiteInsightError):
    """The injected fetch capability reported a failed request."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "request failed")
        super().__init__(f"Fetching {url} failed: {detail}")


class MalformedResponseError(SiteInsightError):
    """A remote payload is missing a required field or has the wrong shape."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"Response is missing required field '{field}'")


class CodecError(SiteInsightError):
    """Serialized analysis data could not be decoded into records."""
