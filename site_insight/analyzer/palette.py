"""
Palette grouping module.

Buckets ranked palette colors into usage tiers for display.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .colors import ColorEntry
from ..utils.constants import MOST_USED_FRACTION, MOST_USED_MIN, SUPPORTING_FRACTION


MOST_USED = "Most Used"
SUPPORTING = "Supporting Colors"
ACCENT = "Accent Colors"


@dataclass
class FrequencyGroup:
    """A named usage tier of palette colors."""
    name: str
    colors: List[ColorEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {'name': self.name, 'colors': [c.to_dict() for c in self.colors]}


def tier_sizes(total: int) -> Dict[str, int]:
    """
    Compute tier sizes for ``total`` entries.

    The top tier takes 40% of the entries but never fewer than three (or
    all of them when there are fewer), the supporting tier takes 30% with
    at least one entry, and accents take whatever remains.
    """
    most_used = min(total, max(MOST_USED_MIN, math.ceil(total * MOST_USED_FRACTION)))
    remaining = total - most_used
    supporting = min(remaining, max(1, math.ceil(total * SUPPORTING_FRACTION)))
    return {
        MOST_USED: most_used,
        SUPPORTING: supporting,
        ACCENT: remaining - supporting,
    }


def group_by_frequency(colors: Sequence[ColorEntry]) -> List[FrequencyGroup]:
    """
    Group colors into usage tiers.

    Args:
        colors: Palette entries in any order

    Returns:
        Non-empty tiers in order Most Used, Supporting Colors, Accent Colors
    """
    # sorted() is stable, ties keep their input order
    ranked = sorted(colors, key=lambda c: c.count, reverse=True)

    groups = []
    start = 0
    for name, size in tier_sizes(len(ranked)).items():
        if size:
            groups.append(FrequencyGroup(name=name, colors=ranked[start:start + size]))
        start += size
    return groups
