"""
palette_renderer.py — Render design-system colors and harmony options as PNG previews.

Design system sheet (render_palette_image):
  ┌──────┬──────┬──────┬──────┬──────┐
  │ROLE  │      │      │      │      │
  │      │      │      │      │      │  ← color fill
  │NAME  │NAME  │NAME  │NAME  │NAME  │  ← ink picked by is_light()
  ├──────┼──────┼──────┼──────┼──────┤
  │#HEX  │#HEX  │#HEX  │#HEX  │#HEX  │  ← footer
  │4.6:1 AA Pass                      │  ← brand colors only, vs white
  └──────┴──────┴──────┴──────┴──────┘

Harmony sheet (render_harmony_image): one row per harmony palette
(primary / secondary / accent) plus one row per semantic category.

Usage:
    from brandkit.palette_renderer import render_palette, swatches_from_design_system

    path = render_palette(swatches_from_design_system(ds), "outputs/palette.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .colors import (
    contrast_ratio,
    generate_harmonies,
    generate_semantic_suggestions,
    is_light,
    passes_aa,
)

INK = (44, 44, 44)          # #2C2C2C
WHITE = (255, 255, 255)
BG = (250, 250, 250)
FALLBACK_RGB = (136, 136, 136)

# ── Font helpers ────────────────────────────────────────────────────────────

_FONT_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
]

_FONT_BOLD_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
]


def _load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    candidates = _FONT_BOLD_CANDIDATES if bold else _FONT_CANDIDATES
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


# ── Color utilities ─────────────────────────────────────────────────────────

def _hex_to_rgb(hex_str: str) -> Tuple[int, int, int]:
    h = hex_str.strip().lstrip("#")
    if len(h) != 6:
        return FALLBACK_RGB
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return FALLBACK_RGB


def _text_color(hex_str: str) -> Tuple[int, int, int]:
    """Dark ink on light swatches, white on dark ones."""
    return INK if is_light(hex_str) else WHITE


def _text_height(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    try:
        bb = draw.textbbox((0, 0), text, font=font)
        return bb[3] - bb[1]
    except (AttributeError, ValueError):
        return getattr(font, "size", 16)


def contrast_badge(hex_str: str, against: str = "#FFFFFF") -> str:
    ratio = contrast_ratio(hex_str, against)
    return f"{ratio:.1f}:1 {'AA Pass' if passes_aa(hex_str, against) else 'AA Fail'}"


# ── Design system → color dicts ─────────────────────────────────────────────

def swatches_from_design_system(ds) -> List[Dict]:
    """
    Flatten a design system's palette into renderer color dicts.

    Brand colors (primary/secondary/accent) carry a contrast badge vs white.
    """
    c = ds.colors
    result: List[Dict] = []
    for role, sw in (("primary", c.primary), ("secondary", c.secondary), ("accent", c.accent)):
        result.append({"hex": sw.hex, "name": sw.name, "role": role, "badge": contrast_badge(sw.hex)})
    for sw in c.neutrals:
        result.append({"hex": sw.hex, "name": sw.name, "role": "neutral"})
    for role in ("success", "warning", "error", "info"):
        sw = getattr(c.semantic, role)
        result.append({"hex": sw.hex, "name": sw.name, "role": role})
    return result


# ── Core renderer ───────────────────────────────────────────────────────────

def render_palette_image(
    colors: List[Dict],
    width: int = 2400,
    height: int = 640,
    gap: int = 3,
    label_text: str = "COLOR PALETTE",
) -> Image.Image:
    """
    Render a vertical-strip color palette as a PIL Image.

    Args:
        colors:     Color dicts with at least {'hex': '#RRGGBB', 'name': str}.
                    Optional keys: 'role', 'badge'.
        width:      Total image width in pixels.
        height:     Total image height in pixels.
        gap:        Pixel gap between strips.
        label_text: Header label; empty string hides the header.

    Returns:
        PIL Image in RGB mode.
    """
    img = Image.new("RGB", (width, height), BG)
    if not colors:
        return img

    n = len(colors)
    draw = ImageDraw.Draw(img)

    header_h = 44 if label_text else 0
    footer_h = max(80, int(height * 0.20))
    pad = 14
    strip_h = height - header_h

    total_gap = gap * (n - 1)
    strip_w = max(1, (width - total_gap) // n)
    remainder = width - total_gap - strip_w * n

    if label_text:
        draw.text((pad, 12), label_text, fill=(110, 110, 120), font=_load_font(20))

    font_name = _load_font(max(10, min(24, int(strip_w * 0.09))), bold=True)
    font_hex = _load_font(max(9, min(20, int(strip_w * 0.08))))
    font_small = _load_font(max(8, min(14, int(strip_w * 0.06))))

    for i, color in enumerate(colors):
        hex_val = color.get("hex", "#888888")
        name = color.get("name", "Color")
        role = color.get("role", "")
        badge = color.get("badge", "")

        rgb = _hex_to_rgb(hex_val)
        ink = _text_color(hex_val)

        sw = strip_w + (remainder if i == n - 1 else 0)
        sx = i * (strip_w + gap)
        sy = header_h

        draw.rectangle([sx, sy, sx + sw - 1, sy + strip_h - 1], fill=rgb)

        # Footer band: plain background so the hex/badge read the same on every strip
        fy = sy + strip_h - footer_h
        draw.rectangle([sx, fy, sx + sw - 1, sy + strip_h - 1], fill=WHITE)

        if role:
            draw.text((sx + pad, sy + 10), role.upper(), fill=ink, font=font_small)

        name_short = name[:18]
        name_y = fy - _text_height(draw, name_short, font_name) - 14
        draw.text((sx + pad, max(sy + 30, name_y)), name_short, fill=ink, font=font_name)

        draw.text((sx + pad, fy + 10), hex_val.upper(), fill=INK, font=font_hex)
        if badge:
            badge_col = (34, 139, 34) if "Pass" in badge else (184, 134, 11)
            draw.text(
                (sx + pad, fy + 16 + _text_height(draw, hex_val, font_hex)),
                badge,
                fill=badge_col,
                font=font_small,
            )

    return img


def render_harmony_image(
    primary_hex: str,
    width: int = 1600,
    row_height: int = 110,
) -> Image.Image:
    """
    Render the 5 harmony palettes and the 4 semantic suggestion rows for a seed color.
    """
    rows: List[Tuple[str, List[Tuple[str, str]]]] = []
    for palette in generate_harmonies(primary_hex):
        rows.append((palette.name, [(c.role, c.hex) for c in palette.colors]))
    for category, options in generate_semantic_suggestions(primary_hex).as_dict().items():
        rows.append((category.title(), [(f"option {i + 1}", hex_val) for i, hex_val in enumerate(options)]))

    label_w = 260
    gap = 4
    img = Image.new("RGB", (width, len(rows) * (row_height + gap)), BG)
    draw = ImageDraw.Draw(img)

    font_label = _load_font(22, bold=True)
    font_role = _load_font(14)
    font_hex = _load_font(18)

    for r, (label, cells) in enumerate(rows):
        y = r * (row_height + gap)
        draw.text((16, y + (row_height - 22) // 2), label, fill=INK, font=font_label)

        cell_w = (width - label_w - gap * (len(cells) - 1)) // len(cells)
        for c, (role, hex_val) in enumerate(cells):
            x = label_w + c * (cell_w + gap)
            draw.rectangle([x, y, x + cell_w - 1, y + row_height - 1], fill=_hex_to_rgb(hex_val))
            ink = _text_color(hex_val)
            draw.text((x + 12, y + 10), role.upper(), fill=ink, font=font_role)
            draw.text((x + 12, y + row_height - 32), hex_val.upper(), fill=ink, font=font_hex)

    return img


# ── Standalone export ───────────────────────────────────────────────────────

def render_palette(
    colors: List[Dict],
    output_path: Union[str, Path],
    width: int = 2400,
    height: int = 640,
    brand_name: str = "",
) -> Path:
    """
    Render a vertical-strip palette and save as PNG.

    Returns:
        Path to the saved PNG.
    """
    label = f"COLOR PALETTE / {brand_name.upper()}" if brand_name else "COLOR PALETTE"
    img = render_palette_image(colors, width=width, height=height, label_text=label)

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(out), "PNG")
    return out


def render_harmonies(primary_hex: str, output_path: Union[str, Path]) -> Path:
    img = render_harmony_image(primary_hex)
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(out), "PNG")
    return out
