import base64

import pytest

from brandkit.parser import BriefValidationError, WizardBrief, parse_brief

BRIEF_MD = """\
# Brand Brief

## Company Name
Harbor Health

## Industry
Healthcare / telemedicine

## Adjectives
- Trustworthy
- Calm
- Modern, calm

## Target Audience
Working parents who need quick, reliable
access to a doctor.

## Color Mood
Cool and reassuring

## Typography Style
Modern

## Design Density
20

## Primary Color
{primary}
"""


def _write_brief(tmp_path, primary="#6AABDB"):
    (tmp_path / "brief.md").write_text(BRIEF_MD.format(primary=primary), encoding="utf-8")
    return tmp_path


def _brief(**overrides):
    values = dict(
        company_name="Harbor Health",
        industry="Healthcare",
        adjectives=["Trustworthy", "Calm", "Modern"],
        target_audience="Working parents",
        color_mood="Cool",
        typography_style="Modern",
    )
    values.update(overrides)
    return WizardBrief(**values)


# ── parse_brief ───────────────────────────────────────────────────────────────

def test_parse_brief_reads_all_sections(tmp_path):
    brief = parse_brief(str(_write_brief(tmp_path)))
    assert brief.company_name == "Harbor Health"
    assert brief.industry == "Healthcare / telemedicine"
    assert brief.adjectives == ["Trustworthy", "Calm", "Modern"]
    assert brief.target_audience == "Working parents who need quick, reliable access to a doctor."
    assert brief.color_mood == "Cool and reassuring"
    assert brief.typography_style == "Modern"
    assert brief.design_density == 20
    assert brief.primary_color == "#6AABDB"
    assert brief.logo is None
    assert brief.validate() is brief


def test_primary_color_without_hash_is_prefixed(tmp_path):
    brief = parse_brief(str(_write_brief(tmp_path, primary="6AABDB")))
    assert brief.primary_color == "#6AABDB"


def test_missing_optional_sections_use_defaults(tmp_path):
    text = BRIEF_MD.split("## Design Density")[0]
    (tmp_path / "brief.md").write_text(text, encoding="utf-8")
    brief = parse_brief(str(tmp_path))
    assert brief.design_density == 50
    assert brief.primary_color is None


def test_logo_is_loaded_as_data_uri(tmp_path):
    _write_brief(tmp_path)
    (tmp_path / "logo.png").write_bytes(b"\x89PNG fake")
    brief = parse_brief(str(tmp_path))
    assert brief.logo == "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_brief(str(tmp_path / "nope"))


def test_missing_brief_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_brief(str(tmp_path))


# ── Validation ────────────────────────────────────────────────────────────────

def test_complete_brief_has_no_problems():
    assert _brief().missing_fields() == []


@pytest.mark.parametrize("adjectives", [["One", "Two"], ["a", "b", "c", "d", "e", "f"]])
def test_adjective_count_is_enforced(adjectives):
    with pytest.raises(BriefValidationError) as exc:
        _brief(adjectives=adjectives).validate()
    assert any("adjectives" in p for p in exc.value.problems)


def test_empty_required_fields_are_reported():
    problems = _brief(company_name=" ", industry="", color_mood="").missing_fields()
    assert "company name is required" in problems
    assert "industry is required" in problems
    assert "color mood is required" in problems


def test_bad_primary_color_is_reported():
    problems = _brief(primary_color="#ABC").missing_fields()
    assert len(problems) == 1
    assert "primary color" in problems[0]


def test_density_out_of_range_is_reported():
    assert _brief(design_density=120).missing_fields()


# ── Prompt formatting ─────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "density, word",
    [(0, "minimal"), (32, "minimal"), (33, "balanced"), (65, "balanced"), (66, "rich"), (100, "rich")],
)
def test_density_label(density, word):
    assert _brief(design_density=density).density_label().startswith(word)


def test_color_guidance_with_primary_includes_harmonies():
    guidance = _brief(primary_color="#6AABDB").color_guidance()
    assert guidance.startswith("PRIMARY COLOR (user-chosen): #6AABDB")
    assert "Complementary: primary=#6AABDB" in guidance


def test_color_guidance_without_primary():
    assert _brief().color_guidance() == "PRIMARY COLOR: Choose one that fits the brand perfectly."


def test_prompt_block_lists_brief_fields():
    block = _brief().to_prompt_block()
    assert 'COMPANY: "Harbor Health"' in block
    assert "BRAND ADJECTIVES: Trustworthy, Calm, Modern" in block
    assert "DESIGN DENSITY: balanced" in block


# ── Typography presets ────────────────────────────────────────────────────────

@pytest.mark.parametrize("style", ["classic", "Classic", " CLASSIC "])
def test_typography_style_maps_to_preset(style):
    brief = _brief(typography_style=style)
    assert brief.missing_fields() == []
    assert brief.typography_preset().heading_font == "Playfair Display"


def test_unknown_typography_style_is_reported():
    problems = _brief(typography_style="Comic Sans everywhere").missing_fields()
    assert len(problems) == 1
    assert problems[0].startswith("typography style must be one of: modern, classic")


def test_prompt_block_includes_preset_pairing():
    block = _brief(typography_style="editorial").to_prompt_block()
    assert "TYPOGRAPHY STYLE PREFERENCE: Editorial (" in block
    assert "Suggested pairing: DM Serif Display for headings, DM Sans for body." in block
