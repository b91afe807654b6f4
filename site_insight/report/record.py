"""
Analysis record model.

An Analysis is an immutable value: it is created with full defaults by
create_default_analysis and only ever "changed" by merge_analysis, which
returns a new record with a partial result overlaid section by section.
"""

import copy
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Any, Dict, Mapping, Optional

from ..utils.urls import normalize_url


class ComplianceStatus(str, Enum):
    """Overall compliance verdict for a page."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class CoreWebVitals:
    """LCP in seconds, FID in milliseconds, CLS unitless."""
    lcp: float = 0
    fid: float = 0
    cls: float = 0

    def __post_init__(self):
        for f in fields(self):
            _check_number(f"coreWebVitals.{f.name}", getattr(self, f.name))

    def to_dict(self) -> Dict[str, float]:
        return {'lcp': self.lcp, 'fid': self.fid, 'cls': self.cls}


@dataclass(frozen=True)
class SecurityHeaders:
    """Security-relevant response headers; empty string when absent."""
    csp: str = ""
    hsts: str = ""
    xfo: str = ""
    xcto: str = ""
    referrer: str = ""

    def __post_init__(self):
        for f in fields(self):
            if not isinstance(getattr(self, f.name), str):
                raise ValueError(f"securityHeaders.{f.name} must be a string")

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def present_count(self) -> int:
        return sum(1 for f in fields(self) if getattr(self, f.name))


# Serialized name -> attribute name, in serialized order
RECORD_FIELDS = {
    'url': 'url',
    'timestamp': 'timestamp',
    'status': 'status',
    'coreWebVitals': 'core_web_vitals',
    'performanceScore': 'performance_score',
    'seoScore': 'seo_score',
    'readabilityScore': 'readability_score',
    'securityHeaders': 'security_headers',
    'complianceStatus': 'compliance_status',
    'data': 'data',
}

SCORE_FIELDS = ('performance_score', 'seo_score', 'readability_score')


def default_data() -> Dict[str, Any]:
    """Fresh copy of the default ``data`` sections."""
    return {
        'overview': {
            'overallScore': 0,
            'pageLoadTime': '',
            'seoScore': 0,
            'userExperienceScore': 0,
        },
        'ui': {
            'colors': [],
            'fonts': [],
            'images': [],
            'imageAnalysis': {
                'totalImages': 0,
                'estimatedPhotos': 0,
                'estimatedIcons': 0,
                'imageUrls': [],
                'photoUrls': [],
                'iconUrls': [],
            },
            'contrastIssues': [],
        },
        'performance': {
            'coreWebVitals': [],
            'performanceScore': 0,
            'recommendations': [],
            'mobileResponsive': False,
        },
        'seo': {
            'score': 0,
            'checks': [],
            'recommendations': [],
            'metaTags': {},
        },
        'technical': {
            'techStack': [],
            'healthGrade': '',
            'issues': [],
            'securityScore': 0,
            'accessibility': {'violations': []},
            'social': {'hasOpenGraph': False, 'hasTwitterCard': False, 'hasShareButtons': False},
            'cookies': {'hasCookieScript': False, 'scripts': []},
            'minification': {'cssMinified': False, 'jsMinified': False},
            'linkIssues': {'brokenLinks': [], 'mixedContentLinks': []},
        },
    }


def _check_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class Analysis:
    """Normalized analysis of one URL."""
    url: str
    timestamp: str = ""
    status: str = "complete"
    core_web_vitals: CoreWebVitals = field(default_factory=CoreWebVitals)
    performance_score: float = 0
    seo_score: float = 0
    readability_score: float = 0
    security_headers: SecurityHeaders = field(default_factory=SecurityHeaders)
    compliance_status: ComplianceStatus = ComplianceStatus.WARN
    data: Dict[str, Any] = field(default_factory=default_data)

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url:
            raise ValueError("url must be a non-empty string")
        for name in SCORE_FIELDS:
            value = getattr(self, name)
            _check_number(name, value)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be within [0, 1], got {value!r}")
        if not isinstance(self.core_web_vitals, CoreWebVitals):
            raise ValueError("core_web_vitals must be a CoreWebVitals instance")
        if not isinstance(self.security_headers, SecurityHeaders):
            raise ValueError("security_headers must be a SecurityHeaders instance")
        if not isinstance(self.data, dict):
            raise ValueError("data must be a mapping of sections")
        # Frozen: coerce plain strings through object.__setattr__
        object.__setattr__(self, 'compliance_status', ComplianceStatus(self.compliance_status))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the documented camelCase keys, in schema order."""
        return {
            'url': self.url,
            'timestamp': self.timestamp,
            'status': self.status,
            'coreWebVitals': self.core_web_vitals.to_dict(),
            'performanceScore': self.performance_score,
            'seoScore': self.seo_score,
            'readabilityScore': self.readability_score,
            'securityHeaders': self.security_headers.to_dict(),
            'complianceStatus': self.compliance_status.value,
            'data': to_plain(self.data),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Analysis":
        """
        Build a record from its serialized form.

        Missing optional fields take their defaults. ``data`` is kept as
        given, so a serialized record parses back to an equal record.

        Raises:
            ValueError: If the payload does not have the record shape
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Analysis must be an object, got {type(payload).__name__}")

        unknown = set(payload) - set(RECORD_FIELDS)
        if unknown:
            raise ValueError(f"Unknown analysis fields: {', '.join(sorted(unknown))}")
        if 'url' not in payload:
            raise ValueError("Analysis is missing 'url'")

        kwargs: Dict[str, Any] = {}
        for key, attr in RECORD_FIELDS.items():
            if key not in payload:
                continue
            value = payload[key]
            if key == 'coreWebVitals':
                value = CoreWebVitals(**_sub_mapping(key, value, CoreWebVitals))
            elif key == 'securityHeaders':
                value = SecurityHeaders(**_sub_mapping(key, value, SecurityHeaders))
            elif key == 'data':
                if not isinstance(value, Mapping):
                    raise ValueError("data must be an object")
                value = copy.deepcopy(dict(value))
            elif key in ('timestamp', 'status') and not isinstance(value, str):
                raise ValueError(f"{key} must be a string")
            kwargs[attr] = value

        return cls(**kwargs)


def _sub_mapping(key: str, value: Any, value_type: type) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be an object")
    allowed = {f.name for f in fields(value_type)}
    unknown = set(value) - allowed
    if unknown:
        raise ValueError(f"Unknown {key} fields: {', '.join(sorted(unknown))}")
    return dict(value)


def to_plain(value: Any) -> Any:
    """Convert result objects (dataclasses with to_dict, enums) to JSON types."""
    if hasattr(value, 'to_dict'):
        return to_plain(value.to_dict())
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def _deep_merge(base: Dict[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overlay`` into ``base`` in place; nested mappings merge key by key."""
    for key, value in overlay.items():
        value = to_plain(value)
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def create_default_analysis(url: str, timestamp: Optional[str] = None) -> Analysis:
    """
    Create a record with every field at its documented default.

    Args:
        url: Page URL (normalized to carry a scheme)
        timestamp: ISO-8601 creation time (default: now, UTC)

    Returns:
        New Analysis
    """
    return Analysis(
        url=normalize_url(url),
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
    )


def merge_analysis(record: Analysis, fragment: Mapping[str, Any]) -> Analysis:
    """
    Overlay a partial result onto a record.

    The fragment uses the serialized schema: any top-level field and/or a
    ``data`` mapping of sections. Sections and keys the fragment does not
    mention are preserved, so merges of different sections commute.

    Args:
        record: Record to start from (not modified)
        fragment: Partial result

    Returns:
        New Analysis with the fragment applied

    Raises:
        ValueError: If the fragment has unknown fields or invalid values
    """
    unknown = set(fragment) - set(RECORD_FIELDS)
    if unknown:
        raise ValueError(f"Unknown analysis fields: {', '.join(sorted(unknown))}")

    merged = _deep_merge(record.to_dict(), fragment)
    return Analysis.from_dict(merged)
