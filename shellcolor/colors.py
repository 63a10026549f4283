"""Color tables, lookup and contrast for Shell Color."""

import re
import string
from types import MappingProxyType
from typing import NamedTuple, Optional


class Theme(NamedTuple):
    """Background/foreground pair applied as-is."""
    background: str
    foreground: str


COLOR_NAMES = MappingProxyType({
    'red': '#FF0000',
    'green': '#00FF00',
    'blue': '#0000FF',
    'lightblue': '#ADD8E6',
    'darkblue': '#00008B',
    'yellow': '#FFFF00',
    'orange': '#FFA500',
    'purple': '#800080',
    'pink': '#FFC0CB',
    'black': '#000000',
    'white': '#FFFFFF',
    'gray': '#808080',
    'lightgray': '#D3D3D3',
    'darkgray': '#404040',
    'brown': '#8B4513',
})

THEMES = MappingProxyType({
    'dracula': Theme('#282A36', '#F8F8F2'),
    'solarizeddark': Theme('#002B36', '#839496'),
    'solarizedlight': Theme('#FDF6E3', '#657B83'),
    'nord': Theme('#2E3440', '#D8DEE9'),
    'gruvbox': Theme('#282828', '#EBDBB2'),
    'monokai': Theme('#272822', '#F8F8F2'),
})

BLACK = '#000000'
WHITE = '#FFFFFF'

# 299*R + 587*G + 114*B above this reads as a bright background
BRIGHTNESS_THRESHOLD = 186000

_HEX_RE = re.compile(r'#[0-9A-Fa-f]{6}')
_WHITESPACE_RE = re.compile(r'\s+')


def normalize(text: Optional[str]) -> str:
    """Strip all whitespace and lowercase, so ' Light Blue ' == 'lightblue'."""
    if not text:
        return ''
    return _WHITESPACE_RE.sub('', text).lower()


def is_hex_color(value) -> bool:
    """Strict #RRGGBB check, no normalization."""
    return isinstance(value, str) and bool(_HEX_RE.fullmatch(value))


def lookup_name(name: str) -> str:
    """Get hex value for a color name, or '' if unknown."""
    return COLOR_NAMES.get(normalize(name), '')


def lookup_theme(name: str) -> Optional[Theme]:
    """Get theme pair by name, or None if unknown."""
    return THEMES.get(normalize(name))


def lookup_color(text: str) -> str:
    """Resolve a color name or hex string to a hex value.

    Args:
        text: Free-text color identifier (e.g. ' Light Blue ', '#1e1e2e')

    Returns:
        Hex color string, or '' if the input is not a recognized color.
        Hex input keeps the case of its digits and is never truncated
        or padded.
    """
    compact = _WHITESPACE_RE.sub('', text or '')
    if _HEX_RE.fullmatch(compact):
        return compact
    return lookup_name(compact)


def contrast_color(background: str) -> str:
    """Pick black or white text for a background.

    Uses unnormalized YIQ luma (299*R + 587*G + 114*B) against
    BRIGHTNESS_THRESHOLD. Malformed input gets white.

    Args:
        background: Hex color string with leading '#'

    Returns:
        '#000000' for bright backgrounds, '#FFFFFF' otherwise.
    """
    digits = background or ''
    if digits.startswith('#'):
        digits = digits[1:]
    if len(digits) != 6 or not all(c in string.hexdigits for c in digits):
        return WHITE
    red = int(digits[0:2], 16)
    green = int(digits[2:4], 16)
    blue = int(digits[4:6], 16)

    brightness = 299 * red + 587 * green + 114 * blue
    if brightness > BRIGHTNESS_THRESHOLD:
        return BLACK
    return WHITE
