"""
Export codec for analysis records.

Serializes record collections to CSV (a flat summary, one row per record)
and JSON (the full record, lossless), and parses the JSON form back.
"""

import csv
import io
import json
from typing import Any, Dict, Iterable, List, Sequence

from .record import Analysis
from ..exceptions import CodecError
from ..utils.constants import CSV_FIELDS
from ..utils.log import get_logger


logger = get_logger("export")

# Sections that can be left out of an export
EXPORT_SECTIONS = ('overview', 'ui', 'performance', 'seo', 'technical')


def _presence(value: Any) -> str:
    return 'Present' if value else 'Missing'


def flatten_analysis(record: Analysis) -> Dict[str, Any]:
    """
    Flatten a record into the CSV summary columns.

    Args:
        record: Record to flatten

    Returns:
        Mapping with one entry per CSV_FIELDS column
    """
    data = record.data
    overview = data.get('overview') or {}
    image_data = (data.get('ui') or {}).get('imageAnalysis') or {}
    meta_tags = (data.get('seo') or {}).get('metaTags') or {}

    return {
        'url': record.url,
        'timestamp': record.timestamp,
        'status': record.status,
        'overallScore': overview.get('overallScore', ''),
        'lcp': record.core_web_vitals.lcp,
        'fid': record.core_web_vitals.fid,
        'cls': record.core_web_vitals.cls,
        'performanceScore': record.performance_score,
        'seoScore': record.seo_score,
        'titleTag': _presence(meta_tags.get('title')),
        'metaDescription': _presence(meta_tags.get('description')),
        'canonicalUrl': _presence(meta_tags.get('canonical')),
        'openGraphTags': _presence(meta_tags.get('og:title') or meta_tags.get('og:description')),
        'readabilityScore': record.readability_score,
        'totalImages': image_data.get('totalImages', ''),
        'estimatedPhotos': image_data.get('estimatedPhotos', ''),
        'estimatedIcons': image_data.get('estimatedIcons', ''),
        'complianceStatus': record.compliance_status.value,
    }


def analyses_to_csv(records: Sequence[Analysis], delimiter: str = ',') -> str:
    """
    Serialize records as CSV.

    Args:
        records: Records to export
        delimiter: Field delimiter

    Returns:
        Header row plus one row per record, joined by newlines with no
        trailing newline. Values containing the delimiter, quotes or
        newlines are quoted.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=CSV_FIELDS,
        delimiter=delimiter,
        lineterminator='\n',
        quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    for record in records:
        writer.writerow(flatten_analysis(record))

    return buffer.getvalue()[:-1]


def analysis_to_csv(record: Analysis, delimiter: str = ',') -> str:
    """Serialize a single record as CSV."""
    return analyses_to_csv([record], delimiter=delimiter)


def analyses_to_json(records: Iterable[Analysis]) -> str:
    """Serialize records as a JSON array in schema key order."""
    return json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)


def analysis_to_json(record: Analysis) -> str:
    """Serialize a single record as a JSON object."""
    return json.dumps(record.to_dict(), indent=2, ensure_ascii=False)


def parse_analyses_json(text: str) -> List[Analysis]:
    """
    Parse records produced by analyses_to_json.

    A single JSON object is accepted as a one-record list.

    Args:
        text: JSON document

    Returns:
        Records in document order

    Raises:
        CodecError: If the document is not JSON or any element is not a
                    valid record; nothing is returned in that case
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise CodecError(f"Invalid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise CodecError(f"Expected a JSON array of analyses, got {type(payload).__name__}")

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(Analysis.from_dict(item))
        except (TypeError, ValueError) as e:
            raise CodecError(f"Analysis #{index} is invalid: {e}") from e

    logger.debug(f"Parsed {len(records)} analyses")
    return records


def filter_sections(record: Analysis, sections: Iterable[str]) -> Dict[str, Any]:
    """
    Serialize a record keeping only the selected data sections.

    The result is an export payload, not a record: dropped sections are
    absent rather than defaulted.

    Args:
        record: Record to export
        sections: Names from EXPORT_SECTIONS to keep

    Returns:
        Serialized record with the unselected sections removed
    """
    keep = set(sections)
    unknown = keep - set(EXPORT_SECTIONS)
    if unknown:
        raise ValueError(f"Unknown sections: {', '.join(sorted(unknown))}")

    payload = record.to_dict()
    for name in EXPORT_SECTIONS:
        if name not in keep:
            payload['data'].pop(name, None)
    return payload
