"""
Security header extraction module.

Normalizes an HTTP header collection into the fixed set of security
headers tracked on an analysis record.
"""

from typing import Any, Callable, Mapping

from ..report.record import SecurityHeaders
from ..utils.log import get_logger


# Record field -> HTTP header name
SECURITY_HEADER_NAMES = {
    'csp': 'content-security-policy',
    'hsts': 'strict-transport-security',
    'xfo': 'x-frame-options',
    'xcto': 'x-content-type-options',
    'referrer': 'referrer-policy',
}

POINTS_PER_HEADER = 100 // len(SECURITY_HEADER_NAMES)

logger = get_logger("security")


def _header_getter(headers: Any) -> Callable[[str], Any]:
    """
    Build a case-insensitive lookup over a header collection.

    Plain mappings are re-keyed in lower case; any other object must expose
    a case-insensitive ``get(name)`` (aiohttp, requests and email headers do).
    """
    if isinstance(headers, Mapping):
        lowered = {str(key).lower(): value for key, value in headers.items()}
        return lowered.get
    return headers.get


def extract_security_headers(headers: Any) -> SecurityHeaders:
    """
    Extract security headers from a header collection.

    Args:
        headers: Mapping of header names to values, or a header object
                 exposing a case-insensitive ``get``

    Returns:
        SecurityHeaders with every field present
    """
    if headers is None:
        return SecurityHeaders()

    get = _header_getter(headers)
    values = {}
    for field_name, header_name in SECURITY_HEADER_NAMES.items():
        value = get(header_name)
        values[field_name] = str(value) if value else ""

    result = SecurityHeaders(**values)
    logger.debug(f"Found {result.present_count}/{len(SECURITY_HEADER_NAMES)} security headers")
    return result


def calculate_security_score(headers: SecurityHeaders) -> int:
    """
    Score header coverage from 0 to 100.

    Each present header is worth an equal share.
    """
    return min(100, headers.present_count * POINTS_PER_HEADER)
