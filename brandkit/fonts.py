"""
fonts.py — Typography presets and Google Fonts resolution.

Google Fonts serves .ttf files (instead of woff2) when the stylesheet is
requested with an old desktop-Safari User-Agent. FontCache uses that to
download the regular (400) and bold (700) files of a family once, so the PDF
report can embed the design system's real fonts.

Usage:
    from brandkit.fonts import FontCache

    cache = FontCache()                 # one per process or per request
    files = cache.get("Playfair Display")
    # → FontFiles(regular=Path(...), bold=Path(...)) or None
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

GOOGLE_FONTS_CSS = "https://fonts.googleapis.com/css2"

# Old Safari UA → Google Fonts answers with TrueType URLs
_TTF_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; U; Intel Mac OS X 10_6_8; de-at) "
    "AppleWebKit/533.21.1 (KHTML, like Gecko) Version/5.0.5 Safari/533.21.1"
)

_TTF_URL_RE = re.compile(r"url\((https://[^)]+\.ttf)\)")


# ── Presets ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TypographyPreset:
    id: str
    label: str
    description: str
    heading_font: str
    body_font: str


TYPOGRAPHY_PRESETS: List[TypographyPreset] = [
    TypographyPreset("modern", "Modern",
                     "Clean geometric sans-serifs. Contemporary and confident.",
                     "Inter", "Inter"),
    TypographyPreset("classic", "Classic",
                     "Traditional serifs paired with clean sans. Timeless authority.",
                     "Playfair Display", "Source Sans 3"),
    TypographyPreset("playful", "Playful",
                     "Rounded, friendly forms. Approachable and warm.",
                     "Nunito", "Nunito Sans"),
    TypographyPreset("technical", "Technical",
                     "Monospaced + grotesque. Precision and transparency.",
                     "Space Grotesk", "IBM Plex Sans"),
    TypographyPreset("elegant", "Elegant",
                     "High-contrast serifs with graceful details. Refined luxury.",
                     "Cormorant Garamond", "Raleway"),
    TypographyPreset("editorial", "Editorial",
                     "Magazine-inspired contrast. Bold headlines, readable body.",
                     "DM Serif Display", "DM Sans"),
]


def get_preset(preset_id: str) -> Optional[TypographyPreset]:
    """Look a preset up by id or label, case-insensitively."""
    key = preset_id.strip().lower()
    return next((p for p in TYPOGRAPHY_PRESETS if key in (p.id, p.label.lower())), None)


def build_google_fonts_url(families: List[str]) -> str:
    """Google Fonts stylesheet URL loading weights 400–700 for each family."""
    params = "&".join(
        f"family={f.replace(' ', '+')}:wght@400;500;600;700" for f in families
    )
    return f"{GOOGLE_FONTS_CSS}?{params}&display=swap"


# ── CSS parsing ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FontUrls:
    regular: str = ""
    bold: str = ""


def parse_font_css(css: str) -> FontUrls:
    """
    Pick the first regular and first bold .ttf URL out of a Google Fonts
    stylesheet. Each @font-face block declares its own font-weight.
    """
    regular = ""
    bold = ""
    for block in css.split("@font-face"):
        if not block.strip():
            continue
        m = _TTF_URL_RE.search(block)
        if not m:
            continue
        is_bold = "font-weight: 700" in block
        if is_bold and not bold:
            bold = m.group(1)
        elif not is_bold and not regular:
            regular = m.group(1)
    return FontUrls(regular=regular, bold=bold)


# ── Font cache ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FontFiles:
    family: str
    regular: Path
    bold: Optional[Path] = None


def _default_cache_dir() -> Path:
    env = os.environ.get("BRANDKIT_FONT_CACHE")
    return Path(env) if env else Path.home() / ".cache" / "brandkit" / "fonts"


class FontCache:
    """
    Downloads Google Fonts TTF files once per family.

    Lookups (hits and misses) are memoized for the lifetime of the instance;
    downloaded files also persist in cache_dir across runs.
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir else _default_cache_dir()
        self.session = session or requests.Session()
        self.timeout = timeout
        self._resolved: Dict[str, Optional[FontFiles]] = {}

    def __contains__(self, family: str) -> bool:
        return family in self._resolved

    def get(self, family: str) -> Optional[FontFiles]:
        """Return local TTF paths for a family, or None if it can't be fetched."""
        if family not in self._resolved:
            self._resolved[family] = self._fetch(family)
        return self._resolved[family]

    def _fetch(self, family: str) -> Optional[FontFiles]:
        slug = re.sub(r"\W+", "_", family.lower()).strip("_")
        regular_path = self.cache_dir / f"{slug}-400.ttf"
        bold_path = self.cache_dir / f"{slug}-700.ttf"
        if regular_path.exists():
            return FontFiles(family, regular_path, bold_path if bold_path.exists() else None)

        try:
            resp = self.session.get(
                GOOGLE_FONTS_CSS,
                params={"family": f"{family}:wght@400;700", "display": "swap"},
                headers={"User-Agent": _TTF_USER_AGENT},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            urls = parse_font_css(resp.text)
            if not urls.regular:
                logger.warning("No TrueType source found for font %r", family)
                return None

            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self._download(urls.regular, regular_path)
            if urls.bold:
                self._download(urls.bold, bold_path)
        except requests.RequestException as e:
            logger.warning("Font download failed for %r: %s", family, e)
            return None

        logger.info("Cached font %r → %s", family, regular_path.parent)
        return FontFiles(family, regular_path, bold_path if urls.bold else None)

    def _download(self, url: str, dest: Path) -> None:
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        dest.write_bytes(resp.content)
