"""
Report module: the Analysis record and its export codec.
"""

from .record import (
    Analysis,
    ComplianceStatus,
    CoreWebVitals,
    SecurityHeaders,
    create_default_analysis,
    merge_analysis,
)
from .export import (
    analyses_to_csv,
    analysis_to_csv,
    analyses_to_json,
    analysis_to_json,
    parse_analyses_json,
    filter_sections,
)

__all__ = [
    # Record
    "Analysis",
    "ComplianceStatus",
    "CoreWebVitals",
    "SecurityHeaders",
    "create_default_analysis",
    "merge_analysis",
    # Export
    "analyses_to_csv",
    "analysis_to_csv",
    "analyses_to_json",
    "analysis_to_json",
    "parse_analyses_json",
    "filter_sections",
]
