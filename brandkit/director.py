"""
Director — sends a WizardBrief to Gemini and returns a complete, structured
design system.

The design system includes:
  - Color palette (primary / secondary / accent, 5 neutrals, 4 semantic colors)
  - Typography (heading + body Google Fonts, 8-level type scale)
  - Spacing (base unit, spacing scale, radii, shadows)
  - Logo guidelines
  - Brand voice
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import json_repair
from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .colors import contrast_ratio, passes_aa
from .parser import WizardBrief

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_MODEL = "gemini-2.5-flash"
RETRY_BASE_DELAY = 2.0


class GenerationError(RuntimeError):
    """Raised when the model call fails or returns an unusable design system."""


# ── Pydantic schema for structured Gemini output ─────────────────────────────

class ColorSwatch(BaseModel):
    name: str = Field(description="Descriptive color name, e.g. 'Harbor Blue'")
    hex: str = Field(description="Hex code, e.g. '#1A2B3C'")
    usage: str = Field(description="When to use this color")


class SemanticColors(BaseModel):
    success: ColorSwatch
    warning: ColorSwatch
    error: ColorSwatch
    info: ColorSwatch


class ColorPalette(BaseModel):
    primary: ColorSwatch
    secondary: ColorSwatch
    accent: ColorSwatch
    neutrals: List[ColorSwatch] = Field(description="5 neutrals, lightest to darkest")
    semantic: SemanticColors


class TypeScaleEntry(BaseModel):
    name: str = Field(description="Display, H1, H2, H3, Body Large, Body, Small, Tiny")
    size: str = Field(description="e.g. '48px'")
    line_height: str = Field(description="e.g. '1.1'")
    weight: str = Field(description="e.g. '700'")
    usage: str


class TypographySpec(BaseModel):
    heading_font: str = Field(description="Exact Google Fonts family name")
    body_font: str = Field(description="Exact Google Fonts family name")
    scale: List[TypeScaleEntry]


class SpacingToken(BaseModel):
    name: str
    value: str = Field(description="e.g. '16px'")


class ShadowToken(BaseModel):
    name: str
    value: str = Field(description="CSS box-shadow value")
    usage: str


class SpacingSpec(BaseModel):
    base_unit: int = Field(description="Base spacing unit in px")
    scale: List[SpacingToken]
    border_radius: List[SpacingToken]
    shadows: List[ShadowToken]


class LogoGuideline(BaseModel):
    description: str = Field(description="The ideal logo concept")
    clear_space_rule: str
    minimum_size: str
    donts: List[str] = Field(description="4–5 things not to do with the logo")


class BrandVoice(BaseModel):
    personality: str
    tone_attributes: List[str]
    dos: List[str]
    donts: List[str]
    sample_headline: str
    sample_body_copy: str


class GeneratedDesignSystem(BaseModel):
    brand_name: str = Field(description="The company name, possibly refined")
    tagline: str = Field(description="Short, punchy brand tagline")
    brand_overview: str = Field(description="2–3 sentence brand positioning statement")
    colors: ColorPalette
    typography: TypographySpec
    spacing: SpacingSpec
    logo_guidelines: LogoGuideline
    brand_voice: BrandVoice


class DesignSystemOutput(GeneratedDesignSystem):
    generated_logo_url: Optional[str] = None   # user's logo as a data URI


# ── System prompt ─────────────────────────────────────────────────────────────

SYSTEM_PROMPT = """\
You are an expert brand designer and design systems architect.
Generate a complete design system for the company described by the user.

Be specific with actual values: real hex codes, real Google Fonts family names,
real pixel values. Every color must be chosen for harmony and WCAG compliance.
Provide 5 neutrals from lightest to darkest.
If the user supplies a primary color and pre-generated palette options, follow them.
"""


# ── Response decoding ─────────────────────────────────────────────────────────

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{6}")


def decode_json_response(text: str) -> Dict[str, Any]:
    """
    Decode the model's JSON reply.

    Tries plain JSON first, then again with markdown fences stripped, and
    finally lets json_repair salvage near-JSON (trailing commas, truncation).

    Raises:
        ValueError: if the reply does not decode to a JSON object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        cleaned = _FENCE_RE.sub("", text).strip()
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            logger.warning("Model reply is not valid JSON — attempting repair")
            data = json_repair.loads(cleaned)

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _is_rate_limited(exc: Exception) -> bool:
    if getattr(exc, "code", None) == 429:
        return True
    err = str(exc).lower()
    return "429" in err or "resource_exhausted" in err or "rate limit" in err


# ── Director function ─────────────────────────────────────────────────────────

def generate_design_system(
    brief: WizardBrief,
    client: Optional[Any] = None,
    *,
    model: Optional[str] = None,
    max_retries: int = 3,
    sleep: Callable[[float], None] = time.sleep,
) -> DesignSystemOutput:
    """
    Call Gemini to turn a brief into a structured design system.

    Args:
        brief:       Validated WizardBrief
        client:      genai.Client (created from GEMINI_API_KEY if omitted)
        model:       Model id (default: GEMINI_MODEL env var or gemini-2.5-flash)
        max_retries: Attempts before giving up on rate-limit (429) errors
        sleep:       Backoff sleeper, injectable for tests

    Returns:
        DesignSystemOutput with the user's logo attached.

    Raises:
        GenerationError: on API failure, empty output or an invalid payload.
    """
    if client is None:
        api_key = os.environ.get("GEMINI_API_KEY")
        if not api_key:
            raise GenerationError("GEMINI_API_KEY not configured")
        client = genai.Client(api_key=api_key)

    model = model or os.environ.get("GEMINI_MODEL", DEFAULT_MODEL)
    config = types.GenerateContentConfig(
        system_instruction=SYSTEM_PROMPT,
        response_mime_type="application/json",
        response_schema=GeneratedDesignSystem,
    )

    text = ""
    for attempt in range(max_retries):
        try:
            response = client.models.generate_content(
                model=model,
                contents=brief.to_prompt_block(),
                config=config,
            )
            text = response.text or ""
            break
        except Exception as e:
            if _is_rate_limited(e) and attempt < max_retries - 1:
                delay = RETRY_BASE_DELAY * (2 ** attempt)
                logger.warning(
                    "Gemini rate limited (429) — retrying in %.0fs (%d/%d)",
                    delay, attempt + 1, max_retries,
                )
                sleep(delay)
                continue
            raise GenerationError(f"Gemini request failed: {e}") from e

    if not text.strip():
        raise GenerationError("Gemini returned no content")

    try:
        data = decode_json_response(text)
        design_system = DesignSystemOutput.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise GenerationError(f"Gemini returned an invalid design system: {e}") from e

    design_system.generated_logo_url = brief.logo
    return design_system


# ── Contrast checks ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContrastCheck:
    name: str
    hex: str
    ratio: float
    passes: bool

    @property
    def label(self) -> str:
        return f"{self.ratio:.1f}:1 {'AA Pass' if self.passes else 'AA Fail'}"


def contrast_report(ds: GeneratedDesignSystem, against: str = "#FFFFFF") -> List[ContrastCheck]:
    """Contrast of the primary, secondary and accent colors against white."""
    checks = []
    for swatch in (ds.colors.primary, ds.colors.secondary, ds.colors.accent):
        checks.append(ContrastCheck(
            name=swatch.name,
            hex=swatch.hex,
            ratio=contrast_ratio(swatch.hex, against),
            passes=passes_aa(swatch.hex, against),
        ))
    return checks


# ── Display helpers ───────────────────────────────────────────────────────────

def display_design_system(ds: GeneratedDesignSystem) -> None:
    """Pretty-print the design system to the terminal.

    Every model-written string goes through rich.markup.escape.
    """
    console.print(
        Panel(
            f"[bold]{escape(ds.tagline)}[/bold]\n\n[italic]{escape(ds.brand_overview)}[/italic]",
            title=f"[bold]{escape(ds.brand_name)}[/bold]",
            border_style="blue",
        )
    )

    colors = Table(title="Colors", show_lines=False)
    colors.add_column("Role")
    colors.add_column("Name")
    colors.add_column("Hex")
    colors.add_column("Usage")
    brand = [("primary", ds.colors.primary), ("secondary", ds.colors.secondary), ("accent", ds.colors.accent)]
    semantic = [(k, getattr(ds.colors.semantic, k)) for k in ("success", "warning", "error", "info")]
    neutrals = [("neutral", s) for s in ds.colors.neutrals]
    for role, swatch in brand + neutrals + semantic:
        chip = f"[on {swatch.hex}]   [/] " if _HEX_COLOR_RE.fullmatch(swatch.hex) else ""
        colors.add_row(role, escape(swatch.name), f"{chip}{escape(swatch.hex)}", escape(swatch.usage))
    console.print(colors)

    for check in contrast_report(ds):
        style = "green" if check.passes else "yellow"
        console.print(f"  {escape(check.name):<24} vs white  [{style}]{check.label}[/{style}]")

    t = ds.typography
    scale = "\n".join(
        escape(f"{e.name:<11} {e.size:>6} / {e.line_height:<4} {e.weight}  {e.usage}") for e in t.scale
    )
    console.print(
        Panel(
            f"[bold]Heading:[/bold] {escape(t.heading_font)}\n"
            f"[bold]Body:[/bold] {escape(t.body_font)}\n\n"
            + scale,
            title="[bold]Typography[/bold]",
            border_style="magenta",
        )
    )

    v = ds.brand_voice
    console.print(
        Panel(
            f"{escape(v.personality)}\n\n"
            f"[bold]Tone:[/bold] {escape(', '.join(v.tone_attributes))}\n"
            f"[bold]Sample headline:[/bold] {escape(v.sample_headline)}",
            title="[bold]Brand Voice[/bold]",
            border_style="green",
        )
    )
