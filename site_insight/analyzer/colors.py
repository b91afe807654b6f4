"""
Color extractor module for pulling design colors and fonts out of markup.

Works on inline ``style="..."`` attributes with regular expressions rather
than a DOM tree, so it behaves the same on malformed markup. Every public
function is best-effort: failures are logged and produce an empty result.
"""

import re
from collections import Counter, OrderedDict
from dataclasses import dataclass
from html import unescape
from typing import Dict, List, Optional, Tuple

from ..utils.log import get_logger


# Inline style attribute values, honoring the opening quote character
STYLE_ATTR_PATTERN = re.compile(r'\bstyle\s*=\s*(["\'])(.*?)\1', re.IGNORECASE | re.DOTALL)

# font-family declarations (value ends at ; } or a tag boundary)
FONT_FAMILY_PATTERN = re.compile(r'font-family\s*:\s*([^;}<>]+)', re.IGNORECASE)

# One color token inside a declaration value, in source order
COLOR_TOKEN_PATTERN = re.compile(
    r'#(?P<hex>[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b'
    r'|rgba?\s*\(\s*(?P<r>\d{1,3})\s*,\s*(?P<g>\d{1,3})\s*,\s*(?P<b>\d{1,3})(?:\s*,\s*[\d.]+)?\s*\)'
    r'|(?<![-#\w])(?P<name>[a-zA-Z]+)(?![-\w])'
)

# Six-digit hex literals in any declaration, color property or not
HEX_LITERAL_PATTERN = re.compile(r'#([0-9a-fA-F]{6})(?![0-9a-fA-F])')

# url(...) arguments and quoted strings, which never hold color keywords
URL_OR_STRING_PATTERN = re.compile(r'url\s*\([^)]*\)|"[^"]*"|\'[^\']*\'', re.IGNORECASE)

HEX6_PATTERN = re.compile(r'^#?([0-9a-fA-F]{6})$')

# Named colors (subset of CSS named colors)
NAMED_COLORS = {
    'black': '#000000', 'white': '#ffffff', 'red': '#ff0000',
    'green': '#008000', 'blue': '#0000ff', 'yellow': '#ffff00',
    'cyan': '#00ffff', 'magenta': '#ff00ff', 'gray': '#808080',
    'grey': '#808080', 'silver': '#c0c0c0', 'maroon': '#800000',
    'olive': '#808000', 'lime': '#00ff00', 'aqua': '#00ffff',
    'teal': '#008080', 'navy': '#000080', 'fuchsia': '#ff00ff',
    'purple': '#800080', 'orange': '#ffa500', 'pink': '#ffc0cb',
    'brown': '#a52a2a', 'gold': '#ffd700', 'coral': '#ff7f50',
    'crimson': '#dc143c', 'darkblue': '#00008b', 'darkgreen': '#006400',
    'darkred': '#8b0000', 'lightblue': '#add8e6', 'lightgreen': '#90ee90',
    'lightgray': '#d3d3d3', 'lightgrey': '#d3d3d3', 'darkgray': '#a9a9a9',
    'darkgrey': '#a9a9a9',
}

# Color property names for context detection
BACKGROUND_PROPS = {'background', 'background-color'}
TEXT_PROPS = {'color'}
BORDER_PROPS = {
    'border', 'border-color', 'border-top', 'border-right', 'border-bottom',
    'border-left', 'border-top-color', 'border-right-color',
    'border-bottom-color', 'border-left-color', 'outline', 'outline-color',
}
OTHER_COLOR_PROPS = {'fill', 'stroke', 'accent-color', 'caret-color'}

USAGE_LABELS = {
    'background': 'Background',
    'text': 'Text',
    'border': 'Border',
    'other': 'Other',
}


def normalize_hex(value: str) -> Optional[str]:
    """
    Normalize a hex literal to lower-case ``#rrggbb``.

    Three-digit values are expanded and an eight-digit alpha channel is
    dropped. Returns None for anything that is not a hex color.
    """
    hex_val = value.strip().lstrip('#').lower()

    if len(hex_val) == 3:
        hex_val = ''.join(c * 2 for c in hex_val)
    elif len(hex_val) == 8:
        hex_val = hex_val[:6]
    elif len(hex_val) != 6:
        return None

    try:
        int(hex_val, 16)
    except ValueError:
        return None
    return f"#{hex_val}"


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB to hex color."""
    r = max(0, min(255, r))
    g = max(0, min(255, g))
    b = max(0, min(255, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert a hex color to an RGB tuple; raises ValueError when invalid."""
    normalized = normalize_hex(hex_color)
    if normalized is None:
        raise ValueError(f"Not a hex color: {hex_color!r}")
    hex_val = normalized[1:]
    return tuple(int(hex_val[i:i + 2], 16) for i in (0, 2, 4))


@dataclass
class ColorEntry:
    """A palette color with its usage context and occurrence count."""
    name: str
    hex: str
    usage: str
    count: int = 0

    def __post_init__(self):
        match = HEX6_PATTERN.match(self.hex or '')
        if not match:
            raise ValueError(f"Color hex must be a 6-digit hex string, got {self.hex!r}")
        self.hex = f"#{match.group(1).lower()}"
        if self.count < 0:
            raise ValueError(f"Color count must be >= 0, got {self.count}")

    def to_dict(self) -> Dict[str, object]:
        return {'name': self.name, 'hex': self.hex, 'usage': self.usage, 'count': self.count}


class ColorExtractor:
    """
    Extracts colors and font families from web pages.

    Scans inline style attributes for color-bearing declarations. This is
    a documented heuristic: a DOM-based extractor can replace it as long
    as it keeps the same method signatures.
    """

    def __init__(self):
        """Initialize the color extractor."""
        self.logger = get_logger("colors")

    def extract_css_colors(self, html: str) -> List[str]:
        """
        Extract color values from inline styles.

        Args:
            html: HTML content to analyze

        Returns:
            Lower-case ``#rrggbb`` colors in first-seen order (duplicates kept)
        """
        try:
            return [hex_color for hex_color, _ in self._scan_inline_colors(html)]
        except Exception as e:
            self.logger.debug(f"Color extraction failed: {e}")
            return []

    def extract_font_families(self, html: str) -> List[str]:
        """
        Extract the primary family of every font-family declaration.

        The whole markup is scanned, which covers inline styles and
        <style> blocks alike. Character references such as ``&quot;``
        are decoded first.

        Args:
            html: HTML content to analyze

        Returns:
            Family names in first-seen order (duplicates kept)
        """
        try:
            families = []
            for match in FONT_FAMILY_PATTERN.finditer(unescape(html)):
                primary = match.group(1).split(',')[0]
                primary = primary.replace('"', '').replace("'", '').strip()
                if primary:
                    families.append(primary)
            return families
        except Exception as e:
            self.logger.debug(f"Font extraction failed: {e}")
            return []

    def extract_palette(self, html: str) -> List[ColorEntry]:
        """
        Build palette entries with usage counts.

        Each distinct color is labelled with the context it appears in most
        often (Background, Text, Border or Other).

        Args:
            html: HTML content to analyze

        Returns:
            ColorEntry list in first-seen order
        """
        try:
            contexts: Dict[str, List[str]] = OrderedDict()
            for hex_color, context in self._scan_inline_colors(html):
                contexts.setdefault(hex_color, []).append(context)

            entries = []
            for hex_color, seen in contexts.items():
                dominant = Counter(seen).most_common(1)[0][0]
                entries.append(ColorEntry(
                    name=self._color_name(hex_color),
                    hex=hex_color,
                    usage=USAGE_LABELS[dominant],
                    count=len(seen)
                ))
            return entries
        except Exception as e:
            self.logger.debug(f"Palette extraction failed: {e}")
            return []

    def iter_style_attributes(self, html: str) -> List[str]:
        """Return the decoded value of every inline style attribute."""
        return [unescape(match.group(2)) for match in STYLE_ATTR_PATTERN.finditer(html)]

    def _scan_inline_colors(self, html: str) -> List[Tuple[str, str]]:
        """
        Collect (hex, context) pairs from all inline style attributes.

        Color properties contribute every color token they hold; any other
        declaration contributes only its six-digit hex literals, labelled
        'other'.
        """
        found = []
        for style in self.iter_style_attributes(html):
            for prop in style.split(';'):
                if ':' not in prop:
                    continue
                name, value = prop.split(':', 1)
                value = URL_OR_STRING_PATTERN.sub(' ', value)
                context = self._property_context(name.strip().lower())
                if context is None:
                    colors = [f"#{m.group(1).lower()}" for m in HEX_LITERAL_PATTERN.finditer(value)]
                    context = 'other'
                else:
                    colors = self._extract_colors_from_value(value)
                for hex_color in colors:
                    found.append((hex_color, context))
        return found

    def _property_context(self, name: str) -> Optional[str]:
        """Map a CSS property name to a usage context, None if not a color property."""
        if name in BACKGROUND_PROPS:
            return 'background'
        if name in TEXT_PROPS:
            return 'text'
        if name in BORDER_PROPS:
            return 'border'
        if name in OTHER_COLOR_PROPS:
            return 'other'
        return None

    def _extract_colors_from_value(self, value: str) -> List[str]:
        """Extract all color values from a CSS value string, in order."""
        colors = []
        for match in COLOR_TOKEN_PATTERN.finditer(value):
            if match.group('hex'):
                normalized = normalize_hex(match.group('hex'))
                if normalized:
                    colors.append(normalized)
            elif match.group('r'):
                colors.append(rgb_to_hex(
                    int(match.group('r')), int(match.group('g')), int(match.group('b'))
                ))
            else:
                named = NAMED_COLORS.get(match.group('name').lower())
                if named:
                    colors.append(named)
        return colors

    def _color_name(self, hex_color: str) -> str:
        """Use the CSS name when the color has one, otherwise the hex value."""
        for name, value in NAMED_COLORS.items():
            if value == hex_color:
                return name
        return hex_color


_default_extractor = ColorExtractor()


def extract_css_colors(html: str) -> List[str]:
    """Module-level shortcut for ColorExtractor.extract_css_colors."""
    return _default_extractor.extract_css_colors(html)


def extract_font_families(html: str) -> List[str]:
    """Module-level shortcut for ColorExtractor.extract_font_families."""
    return _default_extractor.extract_font_families(html)


def extract_palette(html: str) -> List[ColorEntry]:
    """Module-level shortcut for ColorExtractor.extract_palette."""
    return _default_extractor.extract_palette(html)
