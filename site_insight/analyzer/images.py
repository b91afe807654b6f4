"""
Image inventory module.

Lists the images referenced by a page and estimates which are photos and
which are icons from declared dimensions and file names.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .accessibility import AltStats, get_alt_stats
from ..utils.log import get_logger


# Images at or below this area (in CSS pixels) count as icons
ICON_MAX_AREA = 32 * 32

ICON_HINTS = re.compile(r'(icon|favicon|sprite|glyph|\.ico$|\.svg$)', re.IGNORECASE)
LOGO_HINT = re.compile(r'logo', re.IGNORECASE)
DIMENSION_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*(?:px)?\s*$')


@dataclass
class ImageInfo:
    """One image referenced by the page."""
    url: str
    alt: Optional[str] = None
    width: int = 0
    height: int = 0
    type: str = "photo"  # photo, icon, logo
    format: str = "unknown"

    def to_dict(self) -> Dict[str, object]:
        return {
            'url': self.url,
            'alt': self.alt,
            'width': self.width,
            'height': self.height,
            'type': self.type,
            'format': self.format,
        }


@dataclass
class ImageAnalysis:
    """Summary of a page's images."""
    images: List[ImageInfo] = field(default_factory=list)
    alt_stats: AltStats = field(default_factory=AltStats)

    @property
    def photos(self) -> List[ImageInfo]:
        return [img for img in self.images if img.type == "photo"]

    @property
    def icons(self) -> List[ImageInfo]:
        return [img for img in self.images if img.type == "icon"]

    def to_dict(self) -> Dict[str, object]:
        return {
            'totalImages': len(self.images),
            'estimatedPhotos': len(self.photos),
            'estimatedIcons': len(self.icons),
            'imageUrls': [img.url for img in self.images],
            'photoUrls': [img.url for img in self.photos],
            'iconUrls': [img.url for img in self.icons],
        }


def _dimension(value: Optional[str]) -> int:
    if not value:
        return 0
    match = DIMENSION_PATTERN.match(str(value))
    return int(float(match.group(1))) if match else 0


def classify_image(src: str, alt: Optional[str], width: int, height: int) -> str:
    """
    Guess whether an image is a photo, an icon or a logo.

    Declared dimensions decide when both are known; otherwise the file
    name is used.
    """
    if LOGO_HINT.search(src) or (alt and LOGO_HINT.search(alt)):
        return "logo"
    if width and height:
        return "photo" if width * height > ICON_MAX_AREA else "icon"
    if ICON_HINTS.search(src.split('?')[0]):
        return "icon"
    return "photo"


class ImageAnalyzer:
    """Collects image information from HTML content."""

    def __init__(self):
        """Initialize the image analyzer."""
        self.logger = get_logger("images")

    def analyze(self, html: str, base_url: str = "") -> ImageAnalysis:
        """
        Collect the images of a page.

        Inline data: images are skipped. Relative sources are resolved
        against base_url when one is given.

        Args:
            html: HTML content to analyze
            base_url: Page URL for resolving relative sources

        Returns:
            ImageAnalysis; empty if parsing fails
        """
        try:
            try:
                soup = BeautifulSoup(html, 'lxml')
            except Exception:
                soup = BeautifulSoup(html, 'html.parser')

            images = []
            for img in soup.find_all('img'):
                src = (img.get('src') or img.get('data-src') or '').strip()
                if not src or src.startswith('data:'):
                    continue
                if base_url:
                    src = urljoin(base_url, src)

                alt = img.get('alt')
                width = _dimension(img.get('width'))
                height = _dimension(img.get('height'))
                path = src.split('?')[0].split('#')[0]
                ext = path.rsplit('.', 1)[-1].lower() if '.' in path.rsplit('/', 1)[-1] else 'unknown'

                images.append(ImageInfo(
                    url=src,
                    alt=alt,
                    width=width,
                    height=height,
                    type=classify_image(src, alt, width, height),
                    format=ext,
                ))

            stats = get_alt_stats({'alt': img.alt, 'src': img.url} for img in images)
            self.logger.debug(f"Found {len(images)} images")
            return ImageAnalysis(images=images, alt_stats=stats)

        except Exception as e:
            self.logger.debug(f"Image analysis failed: {e}")
            return ImageAnalysis()


_default_analyzer = ImageAnalyzer()


def analyze_images(html: str, base_url: str = "") -> ImageAnalysis:
    """Module-level shortcut for ImageAnalyzer.analyze."""
    return _default_analyzer.analyze(html, base_url)
