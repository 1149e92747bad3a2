"""
Brief parser — reads brief.md into a WizardBrief: the company, identity and
visual-preference inputs the design system is generated from.

FORMAT:
    briefs/acme/
      brief.md          ← all sections in one file
      logo.png          ← optional existing logo (png / jpg / jpeg / webp / svg)

SECTIONS IN brief.md:
  ## Company Name       → company_name      (required)
  ## Industry           → industry          (required)
  ## Adjectives         → adjectives        (3–5, bullets or comma separated)
  ## Target Audience    → target_audience   (required, may span lines)
  ## Color Mood         → color_mood        (required)
  ## Typography Style   → typography_style  (required, a preset id or label:
                                             modern, classic, playful,
                                             technical, elegant, editorial)
  ## Design Density     → design_density    (0 airy … 100 dense, default 50)
  ## Primary Color      → primary_color     (optional, #RRGGBB)
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .colors import format_harmony_options_for_prompt
from .fonts import TYPOGRAPHY_PRESETS, TypographyPreset, get_preset

LOGO_EXTS = {
    ".png":  "image/png",
    ".jpg":  "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".svg":  "image/svg+xml",
}

MIN_ADJECTIVES = 3
MAX_ADJECTIVES = 5

_HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{6}")


class BriefValidationError(ValueError):
    """Raised when a brief is missing required inputs."""

    def __init__(self, problems: List[str]) -> None:
        self.problems = problems
        super().__init__("Invalid brief: " + "; ".join(problems))


@dataclass
class WizardBrief:
    # Company
    company_name: str
    industry: str
    # Identity
    adjectives: List[str] = field(default_factory=list)
    target_audience: str = ""
    # Visual preferences
    color_mood: str = ""
    typography_style: str = ""
    design_density: int = 50           # 0 (minimal/airy) → 100 (rich/detailed)
    primary_color: Optional[str] = None
    logo: Optional[str] = None         # base64 data URI

    def missing_fields(self) -> List[str]:
        """Return human-readable problems; empty list means the brief is complete."""
        problems: List[str] = []
        if not self.company_name.strip():
            problems.append("company name is required")
        if not self.industry.strip():
            problems.append("industry is required")
        if not MIN_ADJECTIVES <= len(self.adjectives) <= MAX_ADJECTIVES:
            problems.append(
                f"choose {MIN_ADJECTIVES}–{MAX_ADJECTIVES} adjectives (got {len(self.adjectives)})"
            )
        if not self.target_audience.strip():
            problems.append("target audience is required")
        if not self.color_mood.strip():
            problems.append("color mood is required")
        if not self.typography_style.strip():
            problems.append("typography style is required")
        elif self.typography_preset() is None:
            choices = ", ".join(p.id for p in TYPOGRAPHY_PRESETS)
            problems.append(f"typography style must be one of: {choices} (got {self.typography_style!r})")
        if not 0 <= self.design_density <= 100:
            problems.append(f"design density must be 0–100 (got {self.design_density})")
        if self.primary_color is not None and not _HEX_COLOR_RE.fullmatch(self.primary_color):
            problems.append(f"primary color must be #RRGGBB (got {self.primary_color!r})")
        return problems

    def validate(self) -> "WizardBrief":
        problems = self.missing_fields()
        if problems:
            raise BriefValidationError(problems)
        return self

    def typography_preset(self) -> Optional[TypographyPreset]:
        return get_preset(self.typography_style)

    def typography_guidance(self) -> str:
        preset = self.typography_preset()
        if preset is None:
            return self.typography_style
        return (
            f"{preset.label} ({preset.description}) "
            f"Suggested pairing: {preset.heading_font} for headings, {preset.body_font} for body."
        )

    def density_label(self) -> str:
        if self.design_density < 33:
            return "minimal and airy — generous whitespace, few elements, breathing room"
        if self.design_density < 66:
            return "balanced — moderate density, well-structured layouts"
        return "rich and detailed — dense information, many visual elements, layered"

    def color_guidance(self) -> str:
        if self.primary_color:
            return (
                f"PRIMARY COLOR (user-chosen): {self.primary_color}\n\n"
                f"{format_harmony_options_for_prompt(self.primary_color)}"
            )
        return "PRIMARY COLOR: Choose one that fits the brand perfectly."

    def to_prompt_block(self) -> str:
        """Format the brief as the user message for the design-system model."""
        return "\n".join([
            f'COMPANY: "{self.company_name}"',
            f"INDUSTRY: {self.industry}",
            f"BRAND ADJECTIVES: {', '.join(self.adjectives)}",
            f"TARGET AUDIENCE: {self.target_audience}",
            f"COLOR MOOD: {self.color_mood}",
            f"TYPOGRAPHY STYLE PREFERENCE: {self.typography_guidance()}",
            f"DESIGN DENSITY: {self.density_label()}",
            self.color_guidance(),
        ])


def _extract_section(text: str, *section_names: str) -> str:
    """Extract first non-empty line from any matching ## Section heading."""
    pattern = "|".join(re.escape(n) for n in section_names)
    in_section = False
    for line in text.splitlines():
        if re.match(rf"##\s*({pattern})\s*$", line.strip(), re.IGNORECASE):
            in_section = True
            continue
        if in_section:
            # headings only; a bare "#6AABDB" value line is content
            if re.match(r"^#{1,6}\s", line):
                break
            stripped = line.strip()
            if stripped:
                return stripped
    return ""


def _extract_multiline_section(text: str, *section_names: str) -> str:
    """Extract all lines from any matching ## Section until the next ## heading."""
    pattern = "|".join(re.escape(n) for n in section_names)
    in_section = False
    collected: List[str] = []
    for line in text.splitlines():
        if re.match(rf"##\s*({pattern})\s*$", line.strip(), re.IGNORECASE):
            in_section = True
            continue
        if in_section:
            if re.match(r"^#{1,3}\s", line):
                break
            collected.append(line)
    return "\n".join(collected).strip()


def _parse_adjectives(block: str) -> List[str]:
    adjectives: List[str] = []
    for line in block.splitlines():
        for item in line.strip().lstrip("-*").split(","):
            item = item.strip()
            if item and item.lower() not in (a.lower() for a in adjectives):
                adjectives.append(item)
    return adjectives


def _parse_density(raw: str) -> int:
    m = re.search(r"-?\d+", raw)
    return int(m.group()) if m else 50


def _load_logo(root: Path) -> Optional[str]:
    for p in sorted(root.iterdir()):
        if p.is_file() and p.stem.lower() == "logo" and p.suffix.lower() in LOGO_EXTS:
            mime = LOGO_EXTS[p.suffix.lower()]
            encoded = base64.b64encode(p.read_bytes()).decode("ascii")
            return f"data:{mime};base64,{encoded}"
    return None


def parse_brief(brief_dir: str) -> WizardBrief:
    """
    Parse a brief directory into a WizardBrief.

    The result is not validated; call .validate() before generating.
    """
    root = Path(brief_dir)
    if not root.exists():
        raise FileNotFoundError(f"Brief directory not found: {brief_dir}")

    brief_file = root / "brief.md"
    if not brief_file.exists():
        raise FileNotFoundError(f"brief.md not found in {brief_dir}")

    text = brief_file.read_text(encoding="utf-8")

    primary_color = _extract_section(text, "Primary Color", "Primary Colour") or None
    if primary_color and not primary_color.startswith("#"):
        primary_color = f"#{primary_color}"

    density_raw = _extract_section(text, "Design Density", "Density")

    return WizardBrief(
        company_name=_extract_section(text, "Company Name", "Company", "Brand Name"),
        industry=_extract_section(text, "Industry"),
        adjectives=_parse_adjectives(_extract_multiline_section(text, "Adjectives", "Brand Adjectives")),
        target_audience=" ".join(
            _extract_multiline_section(text, "Target Audience", "Audience").split()
        ),
        color_mood=_extract_section(text, "Color Mood", "Colour Mood"),
        typography_style=_extract_section(text, "Typography Style", "Typography"),
        design_density=_parse_density(density_raw) if density_raw else 50,
        primary_color=primary_color,
        logo=_load_logo(root),
    )
