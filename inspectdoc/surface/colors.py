"""Color helpers shared by drawing surfaces."""

from __future__ import annotations

from reportlab.lib.colors import Color, HexColor

NAMED_COLORS = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#EF4444",
    "slate": "#1E293B",
    "sky": "#0EA5E9",
    "gray": "#64748B",
    "grey": "#64748B",
}


def normalize_color(value: object, fallback: str = "#000000") -> str:
    """Return a ``#rrggbb`` string for a hex code, bare hex digits or a known name."""
    token = str(value or "").strip()
    if not token:
        return fallback

    lowered = token.lower()
    if lowered in NAMED_COLORS:
        return NAMED_COLORS[lowered]

    if token.startswith("#"):
        candidate = token
    elif len(token) in {3, 6} and all(ch in "0123456789abcdefABCDEF" for ch in token):
        candidate = f"#{token}"
    else:
        return fallback

    try:
        HexColor(candidate)
    except ValueError:
        return fallback
    return candidate


def to_color(value: object, fallback: str = "#000000") -> Color:
    return HexColor(normalize_color(value, fallback))
