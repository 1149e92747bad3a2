import json

import pytest

from brandkit import main as cli
from brandkit.director import GenerationError

BRIEF = """\
## Company Name
Harbor Health

## Industry
Healthcare

## Adjectives
Trustworthy, Calm, Modern

## Target Audience
Working parents

## Color Mood
Cool

## Typography Style
Modern
"""


@pytest.fixture
def brief_dir(tmp_path):
    d = tmp_path / "brief"
    d.mkdir()
    (d / "brief.md").write_text(BRIEF, encoding="utf-8")
    return d


def test_palette_command_renders_png(tmp_path):
    out = tmp_path / "harmonies.png"
    with pytest.raises(SystemExit) as exc:
        cli.main(["palette", "6AABDB", "--output", str(out)])
    assert exc.value.code == 0
    assert out.exists()


def test_generate_writes_outputs(brief_dir, tmp_path, monkeypatch, design_system):
    monkeypatch.setattr(cli, "generate_design_system", lambda brief: design_system)
    out = tmp_path / "out"

    with pytest.raises(SystemExit) as exc:
        cli.main(["generate", "--brief", str(brief_dir), "--output", str(out), "--no-pdf"])

    assert exc.value.code == 0
    data = json.loads((out / "design_system.json").read_text(encoding="utf-8"))
    assert data["brand_name"] == "Harbor Health"
    md = (out / "design_system.md").read_text(encoding="utf-8")
    assert "| primary | Harbor Navy | `#1F4E79` |" in md
    assert "**Embed:** https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" in md
    assert (out / "palette.png").exists()
    assert not list(out.glob("*.pdf"))


def test_generate_rejects_incomplete_brief(tmp_path):
    d = tmp_path / "brief"
    d.mkdir()
    (d / "brief.md").write_text("## Company Name\nAcme\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["generate", "--brief", str(d), "--output", str(tmp_path / "out")])
    assert exc.value.code == 1
    assert not (tmp_path / "out").exists()


def test_generate_reports_generation_errors(brief_dir, tmp_path, monkeypatch):
    def fail(brief):
        raise GenerationError("quota")

    monkeypatch.setattr(cli, "generate_design_system", fail)
    with pytest.raises(SystemExit) as exc:
        cli.main(["generate", "--brief", str(brief_dir), "--output", str(tmp_path / "out")])
    assert exc.value.code == 1


def test_generate_survives_markup_in_model_text(brief_dir, tmp_path, monkeypatch, design_system_data):
    from brandkit.director import DesignSystemOutput

    design_system_data["tagline"] = "Care [/] for all"
    ds = DesignSystemOutput.model_validate(design_system_data)
    monkeypatch.setattr(cli, "generate_design_system", lambda brief: ds)
    out = tmp_path / "out"

    with pytest.raises(SystemExit) as exc:
        cli.main(["generate", "--brief", str(brief_dir), "--output", str(out), "--no-pdf", "--no-preview"])
    assert exc.value.code == 0
    assert (out / "design_system.json").exists()
