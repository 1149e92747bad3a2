"""
colors.py — Color harmony engine.

Converts between hex and HSL, evaluates WCAG luminance/contrast, and derives
harmonious palettes + semantic color suggestions from a single primary color.

Every function is total: malformed hex input never raises, it degrades to a
zero value (HSL(0, 0, 0) or luminance 0.0).

Usage:
    from brandkit.colors import generate_harmonies, format_harmony_options_for_prompt

    palettes = generate_harmonies("#6AABDB")
    # → [HarmonyPalette(name="Complementary", colors=(...)), ...]

    block = format_harmony_options_for_prompt("#6AABDB")
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Tuple

# ── Constants ─────────────────────────────────────────────────────────────────

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)

AA_NORMAL_TEXT = 4.5
LIGHT_LUMINANCE_THRESHOLD = 0.179


# ── Value types ───────────────────────────────────────────────────────────────

class HSL(NamedTuple):
    h: int   # 0–359
    s: int   # 0–100
    l: int   # 0–100


@dataclass(frozen=True)
class HarmonyColor:
    role: str   # primary / secondary / accent
    hex: str


@dataclass(frozen=True)
class HarmonyPalette:
    name: str
    colors: Tuple[HarmonyColor, ...]

    def hex_for(self, role: str) -> Optional[str]:
        for color in self.colors:
            if color.role == role:
                return color.hex
        return None


@dataclass(frozen=True)
class SemanticSuggestions:
    """Three candidate hex colors per semantic category."""
    success: Tuple[str, str, str]
    warning: Tuple[str, str, str]
    error: Tuple[str, str, str]
    info: Tuple[str, str, str]

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "success": list(self.success),
            "warning": list(self.warning),
            "error":   list(self.error),
            "info":    list(self.info),
        }


# ── Helpers ───────────────────────────────────────────────────────────────────

def _round(x: float) -> int:
    """Round half up (x.5 → x+1), independent of Python's banker's rounding."""
    return int(math.floor(x + 0.5))


def _parse_hex(hex_color: str) -> Optional[Tuple[int, int, int]]:
    if not isinstance(hex_color, str):
        return None
    m = _HEX_RE.fullmatch(hex_color)
    if not m:
        return None
    return int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16)


def _normalize_hue(h: float) -> float:
    return ((h % 360) + 360) % 360


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ── Color space conversion ────────────────────────────────────────────────────

def hex_to_hsl(hex_color: str) -> HSL:
    """
    Convert '#RRGGBB' (or 'RRGGBB', any case) → HSL(h 0–359, s 0–100, l 0–100).

    Malformed input returns HSL(0, 0, 0).
    """
    rgb = _parse_hex(hex_color)
    if rgb is None:
        return HSL(0, 0, 0)

    r, g, b = (c / 255 for c in rgb)
    mx, mn = max(r, g, b), min(r, g, b)
    l = (mx + mn) / 2

    if mx == mn:
        return HSL(0, 0, _round(l * 100))

    d = mx - mn
    s = d / (2 - mx - mn) if l > 0.5 else d / (mx + mn)

    if mx == r:
        h = ((g - b) / d + (6 if g < b else 0)) / 6
    elif mx == g:
        h = ((b - r) / d + 2) / 6
    else:
        h = ((r - g) / d + 4) / 6

    # a hue just under 360° rounds up to 360; fold it back onto 0
    return HSL(_round(h * 360) % 360, _round(s * 100), _round(l * 100))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """
    Convert HSL (h in degrees, s/l in percent) → lowercase '#rrggbb'.

    h is treated periodically, so any real value is accepted.
    """
    s /= 100
    l /= 100
    a = s * min(l, 1 - l)

    def k(n: int) -> float:
        return (n + h / 30) % 12

    def f(n: int) -> float:
        return l - a * max(-1, min(k(n) - 3, min(9 - k(n), 1)))

    def to_hex(x: float) -> str:
        return f"{_round(x * 255):02x}"

    return f"#{to_hex(f(0))}{to_hex(f(8))}{to_hex(f(4))}"


# ── Perceptual metrics ────────────────────────────────────────────────────────

def relative_luminance(hex_color: str) -> float:
    """WCAG 2.0 relative luminance (0–1). Malformed input → 0.0."""
    rgb = _parse_hex(hex_color)
    if rgb is None:
        return 0.0

    def _linear(c: int) -> float:
        v = c / 255
        return v / 12.92 if v <= 0.03928 else ((v + 0.055) / 1.055) ** 2.4

    r, g, b = (_linear(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(hex1: str, hex2: str) -> float:
    """WCAG contrast ratio between two colors (1.0–21.0)."""
    l1 = relative_luminance(hex1)
    l2 = relative_luminance(hex2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def passes_aa(hex1: str, hex2: str) -> bool:
    """True if the pair meets WCAG AA for normal text (ratio ≥ 4.5)."""
    return contrast_ratio(hex1, hex2) >= AA_NORMAL_TEXT


def is_light(hex_color: str) -> bool:
    """True if overlaid text should use dark ink rather than white."""
    return relative_luminance(hex_color) > LIGHT_LUMINANCE_THRESHOLD


# ── Harmony generation ────────────────────────────────────────────────────────

# (name, secondary offset, accent offset, accent lightness bump)
_HARMONY_RULES: List[Tuple[str, int, int, int]] = [
    ("Complementary",       180, 180, 0),
    ("Analogous",            30, -30, 0),
    ("Triadic",             120, 240, 0),
    ("Split-Complementary", 150, 210, 0),
    ("Tetradic",             90, 180, 10),
]


def generate_harmonies(primary_hex: str) -> List[HarmonyPalette]:
    """
    Generate 5 harmony palettes from a primary color.

    Each palette keeps the primary exactly as given and derives a lighter,
    slightly desaturated secondary and a darker, more saturated accent by
    rotating the hue.

    Args:
        primary_hex: Seed color, e.g. '#6AABDB'

    Returns:
        Complementary, Analogous, Triadic, Split-Complementary and Tetradic
        palettes, in that order, each with primary/secondary/accent colors.
    """
    h, s, l = hex_to_hsl(primary_hex)

    sec_s = max(20, s - 10)
    sec_l = min(85, l + 10)
    acc_s = min(100, s + 10)
    acc_l = max(25, l - 5)

    palettes: List[HarmonyPalette] = []
    for name, sec_offset, acc_offset, acc_bump in _HARMONY_RULES:
        accent_l = min(80, acc_l + acc_bump) if acc_bump else acc_l
        palettes.append(HarmonyPalette(
            name=name,
            colors=(
                HarmonyColor("primary", primary_hex),
                HarmonyColor("secondary", hsl_to_hex(_normalize_hue(h + sec_offset), sec_s, sec_l)),
                HarmonyColor("accent", hsl_to_hex(_normalize_hue(h + acc_offset), acc_s, accent_l)),
            ),
        ))
    return palettes


def generate_semantic_suggestions(primary_hex: str) -> SemanticSuggestions:
    """
    Suggest success/warning/error/info colors that sit well next to the primary.

    Hues are fixed per category; saturation and lightness follow the
    primary's energy, clamped to a readable band.
    """
    _, s, l = hex_to_hsl(primary_hex)

    sem_s = _clamp(s, 35, 75)
    sem_l = _clamp(l, 35, 55)

    return SemanticSuggestions(
        success=(
            hsl_to_hex(145, sem_s, sem_l),            # classic green
            hsl_to_hex(155, sem_s, sem_l + 5),        # teal-green
            hsl_to_hex(135, sem_s - 5, sem_l + 5),    # warm green
        ),
        warning=(
            hsl_to_hex(40, sem_s + 10, sem_l + 10),   # amber
            hsl_to_hex(35, sem_s + 5, sem_l + 15),    # gold
            hsl_to_hex(45, sem_s, sem_l + 5),         # warm yellow
        ),
        error=(
            hsl_to_hex(0, sem_s + 5, sem_l + 5),      # classic red
            hsl_to_hex(355, sem_s, sem_l),            # cool red
            hsl_to_hex(10, sem_s + 5, sem_l + 5),     # warm red
        ),
        info=(
            hsl_to_hex(210, sem_s, sem_l + 5),        # classic blue
            hsl_to_hex(200, sem_s - 5, sem_l + 10),   # soft blue
            hsl_to_hex(220, sem_s, sem_l),            # deep blue
        ),
    )


def format_harmony_options_for_prompt(primary_hex: str) -> str:
    """Render harmony + semantic options as a text block for the model's prompt."""
    harmonies = generate_harmonies(primary_hex)
    semantics = generate_semantic_suggestions(primary_hex)

    lines = ["PRE-GENERATED HARMONIOUS PALETTE OPTIONS (choose the best option for the brand):", ""]
    for palette in harmonies:
        lines.append(
            f"{palette.name}: " + ", ".join(f"{c.role}={c.hex}" for c in palette.colors)
        )

    lines += [
        "",
        "PRE-GENERATED SEMANTIC COLOR OPTIONS (choose ONE from each row):",
        f"Success options: {', '.join(semantics.success)}",
        f"Warning options: {', '.join(semantics.warning)}",
        f"Error options: {', '.join(semantics.error)}",
        f"Info options: {', '.join(semantics.info)}",
        "",
        f"You MUST use the provided primary color {primary_hex} as-is. "
        "For secondary and accent, choose from one of the palette options above. "
        "For semantic colors, choose from the options above. "
        "You may adjust lightness ±5% if needed for contrast.",
    ]
    return "\n".join(lines)
