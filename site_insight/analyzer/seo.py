"""
SEO extractor module for extracting SEO-related metadata.

Extracts meta tags, mobile viewport support and a readability estimate,
and turns them into pass/warn/fail checks with a score.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List

from bs4 import BeautifulSoup

from ..utils.log import get_logger


SENTENCE_SPLIT = re.compile(r'[.!?]+')
WORD_PATTERN = re.compile(r"[A-Za-z]+(?:'[A-Za-z]+)?")
VOWEL_GROUPS = re.compile(r'[aeiouy]+')

# Optimal lengths used by the title and description checks
TITLE_LENGTH = (30, 60)
DESCRIPTION_LENGTH = (120, 160)

STATUS_WEIGHTS = {'good': 1.0, 'warning': 0.5, 'error': 0.0}


@dataclass
class SEOCheck:
    """Outcome of one SEO check."""
    name: str
    status: str  # good, warning, error
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'status': self.status, 'description': self.description}


@dataclass
class SEOAnalysisResult:
    """Result of SEO analysis."""
    meta_tags: Dict[str, str] = field(default_factory=dict)
    checks: List[SEOCheck] = field(default_factory=list)
    recommendations: List[Dict[str, str]] = field(default_factory=list)
    mobile_responsive: bool = False
    readability: float = 0.0
    score: int = 0

    def as_fragment(self) -> Dict[str, object]:
        """Render as a record fragment for merge_analysis."""
        return {
            'data': {
                'seo': {
                    'score': self.score,
                    'checks': [c.to_dict() for c in self.checks],
                    'recommendations': self.recommendations,
                    'metaTags': dict(self.meta_tags),
                    'readability': self.readability,
                },
                'performance': {'mobileResponsive': self.mobile_responsive},
            }
        }


def _parse(html: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(html, 'lxml')
    except Exception:
        return BeautifulSoup(html, 'html.parser')


def extract_meta_tags(html: str) -> Dict[str, str]:
    """
    Extract meta tags keyed by name or property.

    The document title is stored under 'title' and the canonical link
    under 'canonical'. Later duplicates do not overwrite earlier tags.

    Args:
        html: HTML content to analyze

    Returns:
        Mapping of tag name to content
    """
    soup = _parse(html)
    tags: Dict[str, str] = {}

    title = soup.find('title')
    if title and title.get_text(strip=True):
        tags['title'] = title.get_text(strip=True)

    for meta in soup.find_all('meta'):
        name = meta.get('name') or meta.get('property')
        content = meta.get('content')
        if name and content is not None:
            tags.setdefault(name.strip().lower(), content.strip())

    canonical = soup.find('link', rel='canonical')
    if canonical and canonical.get('href'):
        tags.setdefault('canonical', canonical['href'].strip())

    return tags


def is_mobile_responsive(html: str) -> bool:
    """Check for a viewport meta tag scaled to the device width."""
    soup = _parse(html)
    viewport = soup.find('meta', attrs={'name': 'viewport'})
    if not viewport:
        return False
    content = re.sub(r'\s+', '', viewport.get('content', '')).lower()
    return 'width=device-width' in content


def _count_syllables(word: str) -> int:
    word = word.lower()
    count = len(VOWEL_GROUPS.findall(word))
    if word.endswith('e') and not word.endswith('le') and count > 1:
        count -= 1
    return max(1, count)


def compute_readability_score(html: str) -> float:
    """
    Estimate readability with the Flesch reading-ease formula.

    Args:
        html: HTML content to analyze

    Returns:
        Score clamped to [0, 100]; 0 when the page has no words
    """
    soup = _parse(html)
    for tag in soup(['script', 'style', 'noscript']):
        tag.decompose()
    body = soup.body or soup
    text = body.get_text(' ', strip=True)

    words = WORD_PATTERN.findall(text)
    if not words:
        return 0.0

    sentences = max(1, len([s for s in SENTENCE_SPLIT.split(text) if s.strip()]))
    syllables = sum(_count_syllables(w) for w in words)

    score = (
        206.835
        - 1.015 * (len(words) / sentences)
        - 84.6 * (syllables / len(words))
    )
    return round(max(0.0, min(100.0, score)), 1)


def perform_seo_checks(meta_tags: Dict[str, str], html: str) -> List[SEOCheck]:
    """
    Run on-page SEO checks.

    Args:
        meta_tags: Output of extract_meta_tags
        html: HTML content (for heading and viewport checks)

    Returns:
        One SEOCheck per rule
    """
    checks = []

    title = meta_tags.get('title')
    if not title:
        checks.append(SEOCheck('Title Tag', 'error', 'Missing title tag'))
    elif TITLE_LENGTH[0] <= len(title) <= TITLE_LENGTH[1]:
        checks.append(SEOCheck(
            'Title Tag', 'good', 'Title tag is present and optimal length (30-60 characters)'
        ))
    else:
        checks.append(SEOCheck(
            'Title Tag', 'warning',
            f'Title tag length is {len(title)} characters (optimal: 30-60)'
        ))

    description = meta_tags.get('description')
    if not description:
        checks.append(SEOCheck('Meta Description', 'error', 'Missing meta description'))
    elif DESCRIPTION_LENGTH[0] <= len(description) <= DESCRIPTION_LENGTH[1]:
        checks.append(SEOCheck(
            'Meta Description', 'good',
            'Meta description is present and optimal length (120-160 characters)'
        ))
    else:
        checks.append(SEOCheck(
            'Meta Description', 'warning',
            f'Meta description length is {len(description)} characters (optimal: 120-160)'
        ))

    h1_count = len(_parse(html).find_all('h1'))
    if h1_count == 1:
        checks.append(SEOCheck('H1 Tag', 'good', 'Exactly one H1 tag found'))
    elif h1_count == 0:
        checks.append(SEOCheck('H1 Tag', 'error', 'No H1 tag found'))
    else:
        checks.append(SEOCheck('H1 Tag', 'warning', f'Multiple H1 tags found ({h1_count})'))

    if meta_tags.get('og:title') and meta_tags.get('og:description'):
        checks.append(SEOCheck('Open Graph', 'good', 'Open Graph title and description present'))
    elif meta_tags.get('og:title') or meta_tags.get('og:description'):
        checks.append(SEOCheck('Open Graph', 'warning', 'Open Graph tags are incomplete'))
    else:
        checks.append(SEOCheck('Open Graph', 'error', 'No Open Graph tags found'))

    if meta_tags.get('canonical'):
        checks.append(SEOCheck('Canonical URL', 'good', 'Canonical URL is specified'))
    else:
        checks.append(SEOCheck('Canonical URL', 'warning', 'No canonical URL specified'))

    if is_mobile_responsive(html):
        checks.append(SEOCheck('Mobile Viewport', 'good', 'Viewport is set to the device width'))
    else:
        checks.append(SEOCheck('Mobile Viewport', 'error', 'No responsive viewport meta tag'))

    return checks


def calculate_seo_score(checks: List[SEOCheck]) -> int:
    """Average check weights into a 0-100 score."""
    if not checks:
        return 0
    total = sum(STATUS_WEIGHTS.get(c.status, 0.0) for c in checks)
    return round(total / len(checks) * 100)


def generate_recommendations(checks: List[SEOCheck]) -> List[Dict[str, str]]:
    """Turn failed and partial checks into prioritized recommendations."""
    recommendations = []
    for check in checks:
        if check.status == 'good':
            continue
        recommendations.append({
            'title': f"Improve {check.name}",
            'description': check.description,
            'priority': 'high' if check.status == 'error' else 'medium',
        })
    return recommendations


class SEOExtractor:
    """
    Extracts SEO information from web pages.

    Parses HTML to extract meta tags and derive on-page checks.
    """

    def __init__(self):
        """Initialize the SEO extractor."""
        self.logger = get_logger("seo")

    def extract(self, html: str) -> SEOAnalysisResult:
        """
        Extract SEO information from HTML content.

        Args:
            html: HTML content to analyze

        Returns:
            SEOAnalysisResult; an empty result if parsing fails
        """
        result = SEOAnalysisResult()

        try:
            result.meta_tags = extract_meta_tags(html)
            result.mobile_responsive = is_mobile_responsive(html)
            result.readability = compute_readability_score(html)
            result.checks = perform_seo_checks(result.meta_tags, html)
            result.score = calculate_seo_score(result.checks)
            result.recommendations = generate_recommendations(result.checks)
        except Exception as e:
            self.logger.debug(f"SEO extraction failed: {e}")
            return SEOAnalysisResult()

        return result
