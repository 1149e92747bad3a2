"""
pdf_report.py — Export a generated design system as a PDF document.

Uses fpdf2. Single-column, flowing layout:
  cover → overview → colors (+ contrast) → typography → spacing → logo → voice

Brand-colored values come from report_styles(brand_hex), a memoized pure
function of the brand color, so nothing is mutated between documents.

Fonts: pass a FontCache to embed the design system's Google Fonts. If those
cannot be fetched, the brief's typography preset pair is tried next. Without
either the report falls back to Helvetica, which only covers Latin-1, so text
is folded accordingly.

Usage:
    from brandkit.pdf_report import generate_pdf_report
    pdf_path = generate_pdf_report(design_system, output_dir, font_cache=FontCache())
"""

from __future__ import annotations

import base64
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Set, Tuple

from fpdf import FPDF, XPos, YPos

from .colors import contrast_ratio, is_light, passes_aa
from .director import ColorSwatch, DesignSystemOutput, contrast_report
from .fonts import FontCache, TypographyPreset

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

INK: RGB = (44, 44, 44)
GRAY: RGB = (107, 107, 107)
LIGHT_GRAY: RGB = (226, 226, 226)
WHITE: RGB = (255, 255, 255)

CORE_FONT = "Helvetica"

_LATIN1_FOLD = {
    "—": "-", "–": "-", "‘": "'", "’": "'",
    "“": '"', "”": '"', "…": "...", "•": "-", "→": "->",
}


# ── Styles ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReportStyles:
    brand: RGB       # brand color
    tint: RGB        # 85% toward white, for section backgrounds
    on_brand: RGB    # readable text on the brand color


def _rgb(hex_str: str) -> RGB:
    h = hex_str.lstrip("#")
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return (136, 136, 136)


@lru_cache(maxsize=64)
def report_styles(brand_hex: str) -> ReportStyles:
    r, g, b = _rgb(brand_hex)
    tint = tuple(round(c + (255 - c) * 0.85) for c in (r, g, b))
    return ReportStyles(
        brand=(r, g, b),
        tint=tint,
        on_brand=INK if is_light(brand_hex) else WHITE,
    )


def _fold_latin1(text: str) -> str:
    for src, dst in _LATIN1_FOLD.items():
        text = text.replace(src, dst)
    return text.encode("latin-1", "replace").decode("latin-1")


# ── Document ──────────────────────────────────────────────────────────────────

class DesignSystemPDF(FPDF):
    def __init__(self, brand_name: str, styles: ReportStyles) -> None:
        super().__init__()
        self.brand_name = brand_name
        self.styles = styles
        self.heading_font = CORE_FONT
        self.body_font = CORE_FONT
        self.registered_fonts: Set[str] = set()

    @property
    def unicode_fonts(self) -> bool:
        return self.heading_font != CORE_FONT and self.body_font != CORE_FONT

    def t(self, text: str) -> str:
        return text if self.unicode_fonts else _fold_latin1(text)

    def use_fonts(self, heading: str, body: str, font_cache: FontCache) -> bool:
        """Switch to a heading/body pair if both families can be embedded."""
        if not (self.register_family(heading, font_cache) and self.register_family(body, font_cache)):
            return False
        self.heading_font = heading
        self.body_font = body
        return True

    def register_family(self, family: str, font_cache: FontCache) -> bool:
        """Embed a Google Fonts family once per document."""
        if family in self.registered_fonts:
            return True
        files = font_cache.get(family)
        if files is None:
            return False
        self.add_font(family, "", str(files.regular))
        self.add_font(family, "B", str(files.bold or files.regular))
        self.registered_fonts.add(family)
        return True

    def header(self):
        if self.page_no() == 1:
            return
        self.set_font(self.body_font, "B", 8)
        self.set_text_color(*GRAY)
        self.cell(0, 8, self.t(f"{self.brand_name} - Design System"), align="R")
        self.ln(4)
        self.set_draw_color(*LIGHT_GRAY)
        self.line(15, self.get_y(), 195, self.get_y())
        self.ln(6)

    def footer(self):
        self.set_y(-15)
        self.set_font(self.body_font, "", 8)
        self.set_text_color(160, 160, 160)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")

    # ── Building blocks ─────────────────────────────────────────────────────

    def section_title(self, title: str) -> None:
        self.set_font(self.heading_font, "B", 20)
        self.set_text_color(*INK)
        self.cell(0, 12, self.t(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_fill_color(*self.styles.brand)
        self.rect(15, self.get_y(), 24, 1, "F")
        self.ln(6)

    def body(self, text: str, size: int = 10) -> None:
        self.set_font(self.body_font, "", size)
        self.set_text_color(*GRAY)
        self.multi_cell(0, 6, self.t(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def label(self, text: str) -> None:
        self.set_font(self.body_font, "B", 9)
        self.set_text_color(*INK)
        self.cell(0, 6, self.t(text.upper()), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def bullets(self, items: List[str]) -> None:
        for item in items:
            self.body(f"- {item}")

    def swatch_row(self, swatches: List[ColorSwatch], size: float = 28) -> None:
        """Row of square swatches; name/hex ink follows is_light()."""
        x = 15.0
        y = self.get_y()
        for sw in swatches:
            if x + size > 195:
                x = 15.0
                y += size + 4
            if y + size > self.h - 25:
                self.add_page()
                y = self.get_y()
            self.set_fill_color(*_rgb(sw.hex))
            self.rect(x, y, size, size, "F")
            ink = INK if is_light(sw.hex) else WHITE
            self.set_text_color(*ink)
            self.set_font(self.body_font, "B", 6)
            self.set_xy(x + 2, y + size - 10)
            self.cell(size - 4, 4, self.t(sw.name[:20]))
            self.set_font(self.body_font, "", 6)
            self.set_xy(x + 2, y + size - 6)
            self.cell(size - 4, 4, self.t(sw.hex.upper()))
            x += size + 4
        self.set_xy(15, y + size + 6)


def _decode_logo(data_uri: Optional[str]) -> Optional[io.BytesIO]:
    if not data_uri:
        return None
    m = re.match(r"data:image/[\w.+-]+;base64,(.+)", data_uri, re.DOTALL)
    if not m:
        return None
    try:
        return io.BytesIO(base64.b64decode(m.group(1)))
    except ValueError:
        return None


# ── Sections ──────────────────────────────────────────────────────────────────

def _cover(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    st = pdf.styles
    pdf.add_page()
    pdf.set_fill_color(*st.brand)
    pdf.rect(0, 0, pdf.w, 90, "F")

    pdf.set_xy(15, 40)
    pdf.set_font(pdf.heading_font, "B", 36)
    pdf.set_text_color(*st.on_brand)
    pdf.cell(0, 16, pdf.t(ds.brand_name), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf.body_font, "", 14)
    pdf.cell(0, 10, pdf.t(ds.tagline), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.set_xy(15, 110)
    pdf.set_font(pdf.body_font, "B", 9)
    pdf.set_text_color(*GRAY)
    pdf.cell(0, 6, "DESIGN SYSTEM", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf.body_font, "", 9)
    pdf.cell(
        0, 6,
        f"Generated {datetime.now().strftime('%B %d, %Y')}",
        new_x=XPos.LMARGIN, new_y=YPos.NEXT,
    )


def _colors(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    c = ds.colors
    pdf.add_page()
    pdf.section_title("Colors")

    pdf.label("Brand")
    pdf.swatch_row([c.primary, c.secondary, c.accent], size=50)
    for sw in (c.primary, c.secondary, c.accent):
        pdf.body(f"{sw.name} ({sw.hex.upper()}): {sw.usage}", size=9)

    if c.neutrals:
        pdf.label("Neutrals")
        pdf.swatch_row(list(c.neutrals))

    pdf.label("Semantic")
    pdf.swatch_row([c.semantic.success, c.semantic.warning, c.semantic.error, c.semantic.info])

    pdf.label("Contrast ratios (vs white)")
    for check in contrast_report(ds):
        pdf.set_font(pdf.body_font, "", 9)
        pdf.set_text_color(*INK)
        pdf.cell(80, 6, pdf.t(check.name))
        pdf.set_text_color(*((34, 139, 34) if check.passes else (184, 134, 11)))
        pdf.cell(0, 6, check.label, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    # ink chosen for text on the primary, as used on the cover
    on_hex = "#%02x%02x%02x" % pdf.styles.on_brand
    ratio = contrast_ratio(c.primary.hex, on_hex)
    verdict = "passes" if passes_aa(c.primary.hex, on_hex) else "fails"
    pdf.set_text_color(*GRAY)
    pdf.set_font(pdf.body_font, "", 8)
    pdf.cell(0, 6, f"Text on primary: {ratio:.1f}:1 ({verdict} AA)", new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def _typography(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    t = ds.typography
    pdf.add_page()
    pdf.section_title("Typography")
    pdf.body(f"Heading: {t.heading_font}    Body: {t.body_font}")

    pdf.set_draw_color(*LIGHT_GRAY)
    for entry in t.scale:
        pdf.set_font(pdf.body_font, "B", 9)
        pdf.set_text_color(*INK)
        pdf.cell(30, 8, pdf.t(entry.name))
        pdf.set_font(pdf.body_font, "", 9)
        pdf.set_text_color(*GRAY)
        pdf.cell(50, 8, pdf.t(f"{entry.size} / {entry.line_height} / {entry.weight}"))
        pdf.cell(0, 8, pdf.t(entry.usage), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.line(15, pdf.get_y(), 195, pdf.get_y())


def _spacing(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    sp = ds.spacing
    pdf.add_page()
    pdf.section_title("Spacing")
    pdf.body(f"Base unit: {sp.base_unit}px")

    pdf.label("Scale")
    for tok in sp.scale:
        pdf.set_font(pdf.body_font, "", 9)
        pdf.set_text_color(*INK)
        pdf.cell(30, 6, pdf.t(tok.name))
        px = re.match(r"(\d+(?:\.\d+)?)", tok.value)
        bar = min(float(px.group(1)) * 0.8, 140) if px else 0
        if bar:
            pdf.set_fill_color(*pdf.styles.brand)
            pdf.rect(45, pdf.get_y() + 1.5, bar, 3, "F")
        pdf.set_x(45 + bar + 4)
        pdf.set_text_color(*GRAY)
        pdf.cell(0, 6, pdf.t(tok.value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(2)
    pdf.label("Border radius")
    pdf.body(", ".join(f"{r.name}: {r.value}" for r in sp.border_radius), size=9)
    pdf.label("Shadows")
    for sh in sp.shadows:
        pdf.body(f"{sh.name}: {sh.value} ({sh.usage})", size=9)


def _logo(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    lg = ds.logo_guidelines
    pdf.add_page()
    pdf.section_title("Logo")

    logo = _decode_logo(ds.generated_logo_url)
    if logo is not None:
        try:
            pdf.image(logo, x=15, w=40)
            pdf.ln(4)
        except Exception as e:
            logger.warning("Could not embed logo in PDF: %s", e)

    pdf.body(lg.description)
    pdf.label("Clear space")
    pdf.body(lg.clear_space_rule)
    pdf.label("Minimum size")
    pdf.body(lg.minimum_size)
    pdf.label("Don'ts")
    pdf.bullets(lg.donts)


def _voice(pdf: DesignSystemPDF, ds: DesignSystemOutput) -> None:
    v = ds.brand_voice
    pdf.add_page()
    pdf.section_title("Brand Voice")
    pdf.body(v.personality)
    pdf.label("Tone")
    pdf.body(", ".join(v.tone_attributes))
    pdf.label("Do")
    pdf.bullets(v.dos)
    pdf.label("Don't")
    pdf.bullets(v.donts)

    pdf.ln(2)
    pdf.set_fill_color(*pdf.styles.tint)
    pdf.set_font(pdf.heading_font, "B", 14)
    pdf.set_text_color(*INK)
    pdf.multi_cell(0, 8, pdf.t(v.sample_headline), fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(pdf.body_font, "", 10)
    pdf.multi_cell(0, 6, pdf.t(v.sample_body_copy), fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)


# ── Public API ────────────────────────────────────────────────────────────────

def build_pdf(
    ds: DesignSystemOutput,
    font_cache: Optional[FontCache] = None,
    preset: Optional[TypographyPreset] = None,
) -> DesignSystemPDF:
    """
    Lay out the full document without writing it.

    Fonts are tried in order: the design system's pair, then the brief's
    typography preset pair, then Helvetica.
    """
    pdf = DesignSystemPDF(ds.brand_name, report_styles(ds.colors.primary.hex))
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.set_margins(15, 15, 15)

    if font_cache is not None:
        pairs = [(ds.typography.heading_font, ds.typography.body_font)]
        if preset is not None:
            pairs.append((preset.heading_font, preset.body_font))
        if not any(pdf.use_fonts(heading, body, font_cache) for heading, body in pairs):
            logger.info("Falling back to %s for the PDF", CORE_FONT)

    _cover(pdf, ds)
    pdf.add_page()
    pdf.section_title("Overview")
    pdf.body(ds.brand_overview, size=11)
    _colors(pdf, ds)
    _typography(pdf, ds)
    _spacing(pdf, ds)
    _logo(pdf, ds)
    _voice(pdf, ds)
    return pdf


def generate_pdf_report(
    ds: DesignSystemOutput,
    output_dir: Path,
    font_cache: Optional[FontCache] = None,
    preset: Optional[TypographyPreset] = None,
) -> Path:
    """
    Write the design system PDF into output_dir.

    Returns:
        Path to the PDF.
    """
    pdf = build_pdf(ds, font_cache=font_cache, preset=preset)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    slug = re.sub(r"\W+", "_", ds.brand_name.lower()).strip("_") or "brand"
    pdf_path = output_dir / f"{slug}_design_system.pdf"
    pdf.output(str(pdf_path))
    return pdf_path
