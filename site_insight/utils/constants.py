"""
Shared constants for site-insight.

Contains common configuration values used across multiple modules.
"""

# Default user agent string for outgoing HTTP requests
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Default request timeout in seconds (used by the aiohttp fetcher only)
DEFAULT_TIMEOUT = 60

# PageSpeed Insights v5 endpoint
PSI_ENDPOINT = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

# Lighthouse categories requested from PageSpeed Insights
PSI_CATEGORIES = ("performance", "accessibility", "seo")

# Default PageSpeed strategy (mobile or desktop)
DEFAULT_STRATEGY = "mobile"

# Environment variable holding the PageSpeed API key
PSI_API_KEY_ENV = "PAGESPEED_API_KEY"

# WCAG 2.x contrast thresholds
WCAG_AA_NORMAL = 4.5
WCAG_AA_LARGE = 3.0
WCAG_AAA_NORMAL = 7.0
WCAG_AAA_LARGE = 4.5

# Frequency tiers: share of entries per tier and the top-tier floor
MOST_USED_FRACTION = 0.4
SUPPORTING_FRACTION = 0.3
MOST_USED_MIN = 3

# Task types enqueued for every scan
TASK_TYPES = ("tech", "colors", "seo", "perf")

# CSV export column order
CSV_FIELDS = (
    "url",
    "timestamp",
    "status",
    "overallScore",
    "lcp",
    "fid",
    "cls",
    "performanceScore",
    "seoScore",
    "titleTag",
    "metaDescription",
    "canonicalUrl",
    "openGraphTags",
    "readabilityScore",
    "totalImages",
    "estimatedPhotos",
    "estimatedIcons",
    "complianceStatus",
)
