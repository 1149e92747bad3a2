from types import SimpleNamespace

import pytest
import requests

from brandkit.fonts import (
    TYPOGRAPHY_PRESETS,
    FontCache,
    build_google_fonts_url,
    get_preset,
    parse_font_css,
)

CSS = """\
@font-face {
  font-family: 'Inter';
  font-style: normal;
  font-weight: 400;
  src: url(https://fonts.gstatic.com/s/inter/v1/regular.ttf) format('truetype');
}
@font-face {
  font-family: 'Inter';
  font-style: normal;
  font-weight: 700;
  src: url(https://fonts.gstatic.com/s/inter/v1/bold.ttf) format('truetype');
}
"""


class FakeSession:
    def __init__(self, css=CSS, fail=False):
        self.css = css
        self.fail = fail
        self.urls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.urls.append(url)
        if self.fail:
            raise requests.ConnectionError("offline")
        if url.endswith(".ttf"):
            return SimpleNamespace(content=b"TTF:" + url.encode(), raise_for_status=lambda: None)
        return SimpleNamespace(text=self.css, raise_for_status=lambda: None)


# ── Presets / URLs ────────────────────────────────────────────────────────────

def test_presets():
    assert [p.id for p in TYPOGRAPHY_PRESETS] == [
        "modern", "classic", "playful", "technical", "elegant", "editorial",
    ]
    classic = get_preset(" Classic ")
    assert (classic.heading_font, classic.body_font) == ("Playfair Display", "Source Sans 3")
    assert get_preset("unknown") is None


def test_build_google_fonts_url():
    url = build_google_fonts_url(["Playfair Display", "Inter"])
    assert url == (
        "https://fonts.googleapis.com/css2"
        "?family=Playfair+Display:wght@400;500;600;700"
        "&family=Inter:wght@400;500;600;700&display=swap"
    )


# ── CSS parsing ───────────────────────────────────────────────────────────────

def test_parse_font_css_picks_regular_and_bold():
    urls = parse_font_css(CSS)
    assert urls.regular.endswith("regular.ttf")
    assert urls.bold.endswith("bold.ttf")


def test_parse_font_css_without_ttf():
    urls = parse_font_css("@font-face { src: url(https://x/a.woff2) format('woff2'); }")
    assert urls.regular == ""
    assert urls.bold == ""


# ── FontCache ─────────────────────────────────────────────────────────────────

def test_font_cache_downloads_once(tmp_path):
    session = FakeSession()
    cache = FontCache(cache_dir=tmp_path, session=session)

    files = cache.get("Inter")
    assert files.regular == tmp_path / "inter-400.ttf"
    assert files.bold == tmp_path / "inter-700.ttf"
    assert files.regular.read_bytes().endswith(b"regular.ttf")
    assert "Inter" in cache

    assert cache.get("Inter") is files
    assert len(session.urls) == 3


def test_font_cache_reuses_files_on_disk(tmp_path):
    (tmp_path / "playfair_display-400.ttf").write_bytes(b"x")
    session = FakeSession()
    files = FontCache(cache_dir=tmp_path, session=session).get("Playfair Display")
    assert files.regular == tmp_path / "playfair_display-400.ttf"
    assert files.bold is None
    assert session.urls == []


def test_font_cache_memoizes_failures(tmp_path):
    session = FakeSession(fail=True)
    cache = FontCache(cache_dir=tmp_path, session=session)
    assert cache.get("Inter") is None
    assert cache.get("Inter") is None
    assert len(session.urls) == 1


def test_font_cache_without_truetype_source(tmp_path):
    cache = FontCache(cache_dir=tmp_path, session=FakeSession(css="/* nothing */"))
    assert cache.get("Inter") is None


def test_font_cache_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("BRANDKIT_FONT_CACHE", str(tmp_path))
    assert FontCache(session=FakeSession()).cache_dir == tmp_path


def test_get_preset_accepts_label():
    assert get_preset("Editorial").id == "editorial"
    assert get_preset("TECHNICAL").heading_font == "Space Grotesk"
