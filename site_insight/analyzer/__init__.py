"""
Analyzer module for page analysis.

Contains extractors for colors, fonts, contrast, accessibility, security
headers, SEO, images, social signals and PageSpeed data.
"""

from .colors import ColorExtractor, ColorEntry, extract_css_colors, extract_font_families, extract_palette
from .contrast import ContrastEvaluator, ContrastIssue, contrast_ratio, extract_contrast_issues
from .accessibility import (
    AccessibilityScanner,
    AccessibilityViolation,
    AltStats,
    Impact,
    analyze_accessibility,
    get_alt_stats,
)
from .security import extract_security_headers, calculate_security_score
from .palette import FrequencyGroup, group_by_frequency
from .pagespeed import AiohttpFetcher, PageSpeedResult, fetch_psi_data
from .seo import SEOExtractor, SEOAnalysisResult, SEOCheck
from .images import ImageAnalyzer, ImageAnalysis, analyze_images
from .social import (
    detect_social_meta,
    detect_share_buttons,
    detect_cookie_scripts,
    detect_minification,
    check_links,
)

__all__ = [
    # Colors
    "ColorExtractor",
    "ColorEntry",
    "extract_css_colors",
    "extract_font_families",
    "extract_palette",
    # Contrast
    "ContrastEvaluator",
    "ContrastIssue",
    "contrast_ratio",
    "extract_contrast_issues",
    # Accessibility
    "AccessibilityScanner",
    "AccessibilityViolation",
    "AltStats",
    "Impact",
    "analyze_accessibility",
    "get_alt_stats",
    # Security
    "extract_security_headers",
    "calculate_security_score",
    # Palette
    "FrequencyGroup",
    "group_by_frequency",
    # PageSpeed
    "AiohttpFetcher",
    "PageSpeedResult",
    "fetch_psi_data",
    # SEO
    "SEOExtractor",
    "SEOAnalysisResult",
    "SEOCheck",
    # Images
    "ImageAnalyzer",
    "ImageAnalysis",
    "analyze_images",
    # Social
    "detect_social_meta",
    "detect_share_buttons",
    "detect_cookie_scripts",
    "detect_minification",
    "check_links",
]
