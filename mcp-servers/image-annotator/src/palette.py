"""
Color palette and preset themes for annotations.

Colors can be referenced by palette name ("blue", "primary", ...) or given
as any literal CSS color string, which passes through untouched. Themes
supply per-type defaults that explicit annotation fields always override.
"""

from __future__ import annotations

import logging
from typing import Any

_logger = logging.getLogger("annotator.palette")

DEFAULT_COLOR = "#E53935"

COLORS: dict[str, str] = {
    # Primary colors
    "red": "#E53935",
    "orange": "#FB8C00",
    "yellow": "#FDD835",
    "green": "#43A047",
    "blue": "#1E88E5",
    "purple": "#8E24AA",
    "pink": "#D81B60",
    "cyan": "#00ACC1",
    "teal": "#00897B",
    # Neutrals
    "white": "#FFFFFF",
    "black": "#212121",
    "gray": "#757575",
    "lightGray": "#E0E0E0",
    "darkGray": "#424242",
    # Semantic colors
    "success": "#4CAF50",
    "warning": "#FF9800",
    "error": "#F44336",
    "info": "#2196F3",
    # Documentation colors
    "primary": "#1976D2",
    "secondary": "#7B1FA2",
    "accent": "#FF4081",
}

# Theme defaults use field names, not the camelCase wire keys.
THEMES: dict[str, dict[str, dict[str, Any]]] = {
    "documentation": {
        "marker": {"color": "primary", "size": 28},
        "arrow": {"color": "primary", "stroke_width": 3},
        "label": {"color": "primary", "font_size": 18, "background": "white"},
        "callout": {"color": "primary", "background": "white"},
    },
    "tutorial": {
        "marker": {"color": "green", "size": 32},
        "arrow": {"color": "green", "stroke_width": 4},
        "label": {"color": "darkGray", "font_size": 20, "background": "lightGray"},
        "callout": {"color": "green", "background": "white"},
    },
    "bugReport": {
        "marker": {"color": "error", "size": 28},
        "arrow": {"color": "error", "stroke_width": 3},
        "label": {"color": "error", "font_size": 18, "background": "white"},
        "callout": {"color": "error", "background": "white"},
    },
    "highlight": {
        "marker": {"color": "warning", "size": 28},
        "arrow": {"color": "warning", "stroke_width": 3},
        "label": {"color": "darkGray", "font_size": 18, "background": "yellow"},
        "callout": {"color": "warning", "background": "yellow"},
    },
}


def resolve_color(color: str | None) -> str:
    """Map a palette name to its hex value; anything else passes through."""
    if not color:
        return DEFAULT_COLOR
    return COLORS.get(color, color)


def adjust_color(color: str, amount: int) -> str:
    """
    Shift every RGB channel of a hex color by ``amount``, clamped to 0..255.

    Colors that are not ``#rgb`` / ``#rrggbb`` hex (rgba(), CSS names) are
    returned unchanged.
    """
    if not color.startswith("#"):
        return color
    digits = color[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6:
        return color
    try:
        value = int(digits, 16)
    except ValueError:
        return color

    channels = ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    r, g, b = (min(255, max(0, c + amount)) for c in channels)
    return f"#{r:02x}{g:02x}{b:02x}"


def get_theme(name: str | None) -> dict[str, dict[str, Any]] | None:
    """Look up a theme by name. Unknown names are logged and ignored."""
    if not name:
        return None
    theme = THEMES.get(name)
    if theme is None:
        _logger.warning("Unknown theme %r; annotations rendered without theme defaults", name)
    return theme


def merge_with_theme(
    annotation_type: str,
    fields: dict[str, Any],
    theme: dict[str, dict[str, Any]] | None,
) -> dict[str, Any]:
    """
    Overlay explicit annotation fields on the theme defaults for its type.

    Returns a new dict; neither input is modified.
    """
    defaults = theme.get(annotation_type) if theme else None
    if not defaults:
        return dict(fields)
    return {**defaults, **fields}
