"""
brandkit — Design System Generator

Usage:
  python -m brandkit.main generate --brief briefs/acme
  python -m brandkit.main generate --brief briefs/acme --output outputs/acme --no-pdf
  python -m brandkit.main palette "#6AABDB" --output harmonies.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from .colors import (
    contrast_ratio,
    generate_harmonies,
    generate_semantic_suggestions,
    hex_to_hsl,
    is_light,
)
from .director import (
    DesignSystemOutput,
    GenerationError,
    display_design_system,
    generate_design_system,
)
from .fonts import FontCache, build_google_fonts_url
from .palette_renderer import render_harmonies, render_palette, swatches_from_design_system
from .parser import BriefValidationError, parse_brief
from .pdf_report import generate_pdf_report

logger = logging.getLogger(__name__)
console = Console()

OUTPUTS_ROOT = Path("outputs")


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="brandkit",
        description="Design System Generator — brand brief in, design system out",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a design system from a brief")
    gen.add_argument(
        "--brief",
        default="briefs/example",
        help="Path to brief directory (containing brief.md)",
    )
    gen.add_argument(
        "--output",
        default=None,
        help="Output directory (default: outputs/<timestamp>)",
    )
    gen.add_argument("--no-pdf", action="store_true", help="Skip the PDF export")
    gen.add_argument("--no-preview", action="store_true", help="Skip the palette PNG")

    pal = sub.add_parser("palette", help="Show harmony palettes for a primary color (offline)")
    pal.add_argument("primary", help="Primary color, e.g. '#6AABDB'")
    pal.add_argument("--output", default=None, help="Also render the harmonies to this PNG")

    return parser.parse_args(argv)


# ── Output helpers ────────────────────────────────────────────────────────────

def save_design_system_json(ds: DesignSystemOutput, output_dir: Path) -> Path:
    """Save the raw design system JSON for downstream processing."""
    json_path = output_dir / "design_system.json"
    json_path.write_text(ds.model_dump_json(indent=2), encoding="utf-8")
    return json_path


def save_design_system_md(ds: DesignSystemOutput, output_dir: Path) -> Path:
    """Save the design system as a Markdown summary."""
    c = ds.colors
    lines = [
        f"# {ds.brand_name} — Design System",
        f"\n_{ds.tagline}_\n",
        f"_Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}_\n",
        "---\n",
        "## Overview",
        f"\n{ds.brand_overview}\n",
        "## Colors\n",
        "| Role | Name | Hex | Usage |",
        "|------|------|-----|-------|",
    ]
    brand = [("primary", c.primary), ("secondary", c.secondary), ("accent", c.accent)]
    neutrals = [("neutral", sw) for sw in c.neutrals]
    semantic = [(k, getattr(c.semantic, k)) for k in ("success", "warning", "error", "info")]
    for role, sw in brand + neutrals + semantic:
        lines.append(f"| {role} | {sw.name} | `{sw.hex}` | {sw.usage} |")

    t = ds.typography
    lines += [
        "\n## Typography\n",
        f"**Heading:** {t.heading_font}  ",
        f"**Body:** {t.body_font}  ",
        f"**Embed:** {build_google_fonts_url(list(dict.fromkeys([t.heading_font, t.body_font])))}\n",
        "| Level | Size | Line-Height | Weight | Usage |",
        "|-------|------|-------------|--------|-------|",
    ]
    lines += [f"| {e.name} | {e.size} | {e.line_height} | {e.weight} | {e.usage} |" for e in t.scale]

    sp = ds.spacing
    lines += [
        "\n## Spacing\n",
        f"**Base unit:** {sp.base_unit}px\n",
        ", ".join(f"`{s.name}` {s.value}" for s in sp.scale),
        "\n**Border radius:** " + ", ".join(f"`{r.name}` {r.value}" for r in sp.border_radius),
        "\n**Shadows:**",
    ]
    lines += [f"- `{s.name}` `{s.value}` — {s.usage}" for s in sp.shadows]

    lg = ds.logo_guidelines
    lines += [
        "\n## Logo\n",
        lg.description,
        f"\n**Clear space:** {lg.clear_space_rule}  ",
        f"**Minimum size:** {lg.minimum_size}\n",
    ]
    lines += [f"- ✗ {d}" for d in lg.donts]

    v = ds.brand_voice
    lines += [
        "\n## Brand Voice\n",
        v.personality,
        f"\n**Tone:** {', '.join(v.tone_attributes)}\n",
    ]
    lines += [f"- ✓ {d}" for d in v.dos]
    lines += [f"- ✗ {d}" for d in v.donts]
    lines += [f"\n> **{v.sample_headline}**\n>\n> {v.sample_body_copy}\n"]

    md_path = output_dir / "design_system.md"
    md_path.write_text("\n".join(lines), encoding="utf-8")
    return md_path


# ── Commands ──────────────────────────────────────────────────────────────────

def run_generate(args: argparse.Namespace) -> int:
    pipeline_start = time.time()

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = Path(args.output) if args.output else OUTPUTS_ROOT / timestamp

    console.print(Rule("[bold magenta]Design System Generator[/bold magenta]"))
    console.print(f"  Brief: [bold]{escape(args.brief)}[/bold]  |  Output: [bold]{escape(str(output_dir))}[/bold]")

    # ── Step 1: Parse brief ──────────────────────────────────────────────────
    console.print("\n[bold]Step 1/3 — Parsing brief[/bold]")
    try:
        brief = parse_brief(args.brief).validate()
    except (FileNotFoundError, BriefValidationError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
    console.print(
        f"  [green]✓[/green] "
        + escape(
            f"{brief.company_name} · {brief.industry} · {len(brief.adjectives)} adjectives"
            + f" · {brief.typography_preset().label} type"
            + (f" · primary {brief.primary_color}" if brief.primary_color else "")
            + (" · logo attached" if brief.logo else "")
        )
    )
    output_dir.mkdir(parents=True, exist_ok=True)

    # ── Step 2: Generate design system via Gemini ────────────────────────────
    console.print("\n[bold]Step 2/3 — Generating design system (Gemini)[/bold]")
    t0 = time.time()
    try:
        ds = generate_design_system(brief)
    except GenerationError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
    console.print(f"  [green]✓ Done in {time.time() - t0:.1f}s[/green]")

    display_design_system(ds)

    # ── Step 3: Export ───────────────────────────────────────────────────────
    console.print("\n[bold]Step 3/3 — Exporting[/bold]")
    outputs = [save_design_system_json(ds, output_dir), save_design_system_md(ds, output_dir)]

    if not args.no_preview:
        try:
            outputs.append(render_palette(
                swatches_from_design_system(ds), output_dir / "palette.png", brand_name=ds.brand_name
            ))
        except OSError as e:
            logger.warning("Palette preview failed: %s", e)
            console.print(f"  [yellow]⚠ Palette preview failed: {escape(str(e))}[/yellow]")

    if not args.no_pdf:
        try:
            outputs.append(generate_pdf_report(
                ds, output_dir, font_cache=FontCache(), preset=brief.typography_preset()
            ))
        except Exception as e:
            logger.warning("PDF generation failed: %s", e)
            console.print(f"  [yellow]⚠ PDF export failed: {escape(str(e))}[/yellow]")

    for path in outputs:
        console.print(f"  [green]✓[/green] {escape(str(path))}")

    console.print(
        Panel(
            f"Design system for [bold]{escape(ds.brand_name)}[/bold] generated in "
            f"[bold]{time.time() - pipeline_start:.0f}s[/bold]\n"
            f"Outputs saved to: [bold]{escape(str(output_dir))}[/bold]",
            title="[bold green]Complete[/bold green]",
            border_style="green",
        )
    )
    return 0


def run_palette(args: argparse.Namespace) -> int:
    primary = args.primary if args.primary.startswith("#") else f"#{args.primary}"
    h, s, l = hex_to_hsl(primary)
    console.print(Rule(f"[bold]{primary}[/bold]  hsl({h}, {s}%, {l}%)"))

    harmonies = Table(title="Harmony palettes")
    harmonies.add_column("Palette")
    for role in ("primary", "secondary", "accent"):
        harmonies.add_column(role.title())
    for palette in generate_harmonies(primary):
        harmonies.add_row(palette.name, *[c.hex for c in palette.colors])
    console.print(harmonies)

    semantic = Table(title="Semantic suggestions")
    semantic.add_column("Category")
    for i in range(3):
        semantic.add_column(f"Option {i + 1}")
    for category, options in generate_semantic_suggestions(primary).as_dict().items():
        semantic.add_row(category, *options)
    console.print(semantic)

    on_white = contrast_ratio(primary, "#FFFFFF")
    on_black = contrast_ratio(primary, "#000000")
    console.print(
        f"  vs white {on_white:.2f}:1 · vs black {on_black:.2f}:1 · "
        f"label ink: {'dark' if is_light(primary) else 'white'}"
    )

    if args.output:
        path = render_harmonies(primary, args.output)
        console.print(f"  [green]✓[/green] {path}")
    return 0


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    if args.command == "generate":
        sys.exit(run_generate(args))
    sys.exit(run_palette(args))


if __name__ == "__main__":
    main()
