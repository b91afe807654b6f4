"""
Contrast evaluation module for WCAG color contrast checks.

Computes relative-luminance contrast ratios and flags inline text and
background pairs that fall below the WCAG AA body-text threshold.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .colors import ColorExtractor, hex_to_rgb, normalize_hex, rgb_to_hex
from ..utils.constants import (
    WCAG_AA_NORMAL,
    WCAG_AA_LARGE,
    WCAG_AAA_NORMAL,
    WCAG_AAA_LARGE,
)
from ..utils.log import get_logger


RGB_PATTERN = re.compile(r'rgba?\s*\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})')

# Text color declaration; the lookbehind keeps background-color/border-color out
TEXT_COLOR_PATTERN = re.compile(
    r'(?<![-\w])color\s*:\s*(#[0-9a-fA-F]{6}\b|#[0-9a-fA-F]{3}\b)', re.IGNORECASE
)
BACKGROUND_COLOR_PATTERN = re.compile(
    r'(?<![-\w])background(?:-color)?\s*:\s*(#[0-9a-fA-F]{6}\b|#[0-9a-fA-F]{3}\b)',
    re.IGNORECASE
)


@dataclass(frozen=True)
class ContrastIssue:
    """A text/background pair below the AA threshold."""
    foreground: str
    background: str
    ratio: float

    def to_dict(self) -> Dict[str, object]:
        return {'foreground': self.foreground, 'background': self.background, 'ratio': self.ratio}


def parse_color(color: str) -> Optional[Tuple[int, int, int]]:
    """Parse a hex or rgb()/rgba() color string; alpha is ignored."""
    color = color.strip()
    if color.startswith('#'):
        try:
            return hex_to_rgb(color)
        except ValueError:
            return None

    match = RGB_PATTERN.match(color)
    if match:
        return hex_to_rgb(rgb_to_hex(*(int(v) for v in match.groups())))
    return None


def relative_luminance(rgb: Tuple[int, int, int]) -> float:
    """WCAG relative luminance of an sRGB color."""
    linear = []
    for channel in rgb:
        c = channel / 255
        linear.append(c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4)
    return 0.2126 * linear[0] + 0.7152 * linear[1] + 0.0722 * linear[2]


def contrast_ratio(color1: str, color2: str) -> float:
    """
    Calculate the contrast ratio between two colors.

    Args:
        color1: First color (hex or rgb() string)
        color2: Second color (hex or rgb() string)

    Returns:
        Contrast ratio (1.0 to 21.0), independent of argument order

    Raises:
        ValueError: If either color cannot be parsed
    """
    rgb1 = parse_color(color1)
    rgb2 = parse_color(color2)
    if rgb1 is None or rgb2 is None:
        raise ValueError(f"Cannot compute contrast for {color1!r} and {color2!r}")

    l1 = relative_luminance(rgb1)
    l2 = relative_luminance(rgb2)

    lighter = max(l1, l2)
    darker = min(l1, l2)

    return (lighter + 0.05) / (darker + 0.05)


def required_ratio_aa(large_text: bool = False) -> float:
    """Minimum ratio for WCAG AA."""
    return WCAG_AA_LARGE if large_text else WCAG_AA_NORMAL


def required_ratio_aaa(large_text: bool = False) -> float:
    """Minimum ratio for WCAG AAA."""
    return WCAG_AAA_LARGE if large_text else WCAG_AAA_NORMAL


def passes_aa(ratio: float, large_text: bool = False) -> bool:
    return ratio >= required_ratio_aa(large_text)


def passes_aaa(ratio: float, large_text: bool = False) -> bool:
    return ratio >= required_ratio_aaa(large_text)


def check_wcag_compliance(foreground: str, background: str) -> Dict[str, object]:
    """
    Check WCAG color contrast compliance.

    Args:
        foreground: Foreground color
        background: Background color

    Returns:
        Dictionary with the ratio and compliance results for each level
    """
    ratio = contrast_ratio(foreground, background)

    return {
        'ratio': ratio,
        'aa_normal': passes_aa(ratio),
        'aa_large': passes_aa(ratio, large_text=True),
        'aaa_normal': passes_aaa(ratio),
        'aaa_large': passes_aaa(ratio, large_text=True),
    }


class ContrastEvaluator:
    """
    Finds low-contrast text in inline styles.

    Only elements declaring both a text color and a background color in the
    same style attribute are evaluated; inherited colors are not resolved.
    """

    def __init__(self, threshold: float = WCAG_AA_NORMAL):
        """
        Initialize the evaluator.

        Args:
            threshold: Ratio below which a pair is reported
        """
        self.threshold = threshold
        self.logger = get_logger("contrast")
        self._styles = ColorExtractor()

    def extract_contrast_issues(self, html: str) -> List[ContrastIssue]:
        """
        Extract low-contrast color pairs from HTML.

        Args:
            html: HTML content to analyze

        Returns:
            One ContrastIssue per element below the threshold; empty on failure
        """
        try:
            issues = []
            for style in self._styles.iter_style_attributes(html):
                issue = self._evaluate_style(style)
                if issue:
                    issues.append(issue)
            return issues
        except Exception as e:
            self.logger.debug(f"Contrast extraction failed: {e}")
            return []

    def _evaluate_style(self, style: str) -> Optional[ContrastIssue]:
        """Evaluate one inline style declaration block."""
        color = TEXT_COLOR_PATTERN.search(style)
        background = BACKGROUND_COLOR_PATTERN.search(style)
        if not color or not background:
            return None

        foreground = normalize_hex(color.group(1))
        background_hex = normalize_hex(background.group(1))
        ratio = contrast_ratio(foreground, background_hex)
        if ratio >= self.threshold:
            return None

        return ContrastIssue(
            foreground=foreground,
            background=background_hex,
            ratio=round(ratio, 2)
        )


_default_evaluator = ContrastEvaluator()


def extract_contrast_issues(html: str) -> List[ContrastIssue]:
    """Module-level shortcut for ContrastEvaluator.extract_contrast_issues."""
    return _default_evaluator.extract_contrast_issues(html)
