"""
Accessibility checker module for structural accessibility findings.

Detects violations from raw markup with regular expressions and scores the
quality of image alt text.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from ..utils.log import get_logger


IMG_TAG_PATTERN = re.compile(r'<img\b[^>]*>', re.IGNORECASE)

# alt attribute with or without a value
ALT_ATTR_PATTERN = re.compile(r'\salt(?:\s*=|[\s/>])', re.IGNORECASE)

# Generic alt text values that do not describe the image
SUSPECT_ALT_TEXT = {
    'image', 'img', 'picture', 'photo', 'icon', 'logo', 'banner',
    'graphic', 'placeholder', 'untitled', 'spacer', 'blank', 'alt',
    'alt text', 'description', 'click here', 'read more', 'more info',
    'info', 'here', 'link', 'button',
}

FILENAME_PATTERN = re.compile(r'\.(jpg|jpeg|png|gif|svg|webp|bmp)$')


class Impact(Enum):
    """Severity of an accessibility violation (axe-core scale)."""
    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"


@dataclass(frozen=True)
class AccessibilityViolation:
    """Represents an accessibility rule violation."""
    id: str
    impact: Impact
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {'id': self.id, 'impact': self.impact.value, 'description': self.description}


@dataclass(frozen=True)
class AltStats:
    """Alt text statistics for a set of images."""
    total_images: int = 0
    with_alt: int = 0
    suspect_alt: int = 0


class AccessibilityScanner:
    """
    Checks markup for structural accessibility violations.

    Uses tag-level pattern matching instead of a parsed document, so the
    result on broken markup is predictable.
    """

    def __init__(self):
        """Initialize the accessibility scanner."""
        self.logger = get_logger("accessibility")

    def analyze(self, html: str) -> List[AccessibilityViolation]:
        """
        Check HTML content for accessibility violations.

        Args:
            html: HTML content to analyze

        Returns:
            Violations found; empty when none or when scanning fails
        """
        violations = []
        try:
            violation = self._check_image_alt(html)
            if violation:
                violations.append(violation)
        except Exception as e:
            self.logger.debug(f"Accessibility scan failed: {e}")
            return []
        return violations

    def _check_image_alt(self, html: str) -> Optional[AccessibilityViolation]:
        """Report once if any <img> lacks an alt attribute."""
        for tag in IMG_TAG_PATTERN.findall(html):
            if not ALT_ATTR_PATTERN.search(tag):
                return AccessibilityViolation(
                    id="image-alt",
                    impact=Impact.MODERATE,
                    description="Image tag missing alt text"
                )
        return None


def is_suspect_alt_text(alt_text: str) -> bool:
    """Check if alt text is generic or non-descriptive."""
    if not alt_text:
        return False

    normalized = alt_text.lower().strip()

    if normalized in SUSPECT_ALT_TEXT:
        return True
    # Very short text, bare numbers or a single letter
    if len(normalized) < 3:
        return True
    if re.fullmatch(r'[0-9\s]+', normalized) or re.fullmatch(r'[a-z]\s*', normalized):
        return True
    if FILENAME_PATTERN.search(normalized):
        return True

    return False


def get_alt_stats(images: Iterable[Mapping[str, Optional[str]]]) -> AltStats:
    """
    Analyze alt text usage for a list of images.

    Args:
        images: Mappings with optional 'alt' and 'src' keys

    Returns:
        AltStats with totals; empty alt text does not count as present
    """
    total = 0
    with_alt = 0
    suspect = 0

    for image in images:
        total += 1
        alt_text = image.get('alt') or ''
        if alt_text:
            with_alt += 1
            if is_suspect_alt_text(alt_text):
                suspect += 1

    return AltStats(total_images=total, with_alt=with_alt, suspect_alt=suspect)


def calculate_alt_text_score(stats: AltStats) -> int:
    """
    Calculate an alt text score from 0 to 100.

    Suspect alt text reduces the score by up to half.
    """
    if stats.total_images == 0:
        return 100

    score = stats.with_alt / stats.total_images * 100

    if stats.with_alt > 0:
        suspect_ratio = stats.suspect_alt / stats.with_alt
        score *= 1 - suspect_ratio * 0.5

    return round(max(0, min(100, score)))


_default_scanner = AccessibilityScanner()


def analyze_accessibility(html: str) -> List[AccessibilityViolation]:
    """Module-level shortcut for AccessibilityScanner.analyze."""
    return _default_scanner.analyze(html)
