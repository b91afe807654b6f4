"""
URL utilities for site-insight.

Provides URL normalization and export file naming.
"""

import re
from datetime import date
from typing import Optional
from urllib.parse import urlparse


_SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def normalize_url(url: str) -> str:
    """
    Ensure a URL carries an http(s) scheme.

    Inputs that already start with ``http://`` or ``https://`` (any case)
    are returned unchanged; everything else is prefixed with ``https://``.

    Args:
        url: URL to normalize

    Returns:
        Scheme-prefixed URL string
    """
    if _SCHEME_PATTERN.match(url):
        return url
    return f"https://{url}"


def get_domain(url: str) -> str:
    """
    Extract the domain from a URL.

    Args:
        url: URL to extract domain from

    Returns:
        Domain string (e.g., 'example.com')
    """
    parsed = urlparse(normalize_url(url))
    return parsed.netloc.lower()


def export_filename(url: str, fmt: str, day: Optional[date] = None) -> str:
    """
    Build the download file name for an exported analysis.

    Args:
        url: Analyzed URL
        fmt: File extension (csv, json)
        day: Export date (default: today)

    Returns:
        File name such as ``example.com-analysis-2024-01-31.csv``
    """
    day = day or date.today()
    domain = get_domain(url) or "site"
    # Ports are not valid in file names on every platform
    domain = domain.replace(':', '_')
    return f"{domain}-analysis-{day.isoformat()}.{fmt}"
