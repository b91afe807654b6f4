"""
Utility modules for site-insight.

Contains logging, URL handling, display helpers, and constants.
"""

from .log import setup_logger, get_logger
from .urls import normalize_url, get_domain, export_filename
from .text import dash_if_empty, EM_DASH
from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_TIMEOUT,
    DEFAULT_STRATEGY,
    PSI_ENDPOINT,
    TASK_TYPES,
    CSV_FIELDS,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "normalize_url",
    "get_domain",
    "export_filename",
    "dash_if_empty",
    "EM_DASH",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_STRATEGY",
    "PSI_ENDPOINT",
    "TASK_TYPES",
    "CSV_FIELDS",
]
