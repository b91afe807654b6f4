"""
Small display helpers shared by the CLI and exports.
"""

from typing import Any

EM_DASH = "—"


def dash_if_empty(value: Any) -> str:
    """Return ``str(value)``, or an em-dash for empty/None values."""
    return str(value) if value else EM_DASH
