"""
Site Insight - web page analysis and reporting.

This package extracts colors, fonts, contrast, accessibility, SEO and
security information from page markup, normalizes PageSpeed Insights data,
and exports the results as analysis records.
"""

__version__ = "1.0.0"
__author__ = "Site Insight Team"
