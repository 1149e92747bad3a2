from brandkit.palette_renderer import (
    INK,
    WHITE,
    _text_color,
    contrast_badge,
    render_harmonies,
    render_harmony_image,
    render_palette,
    render_palette_image,
    swatches_from_design_system,
)


def test_text_color_follows_lightness():
    assert _text_color("#FFFFFF") == INK
    assert _text_color("#6AABDB") == INK
    assert _text_color("#1F4E79") == WHITE


def test_contrast_badge():
    assert contrast_badge("#000000") == "21.0:1 AA Pass"
    assert contrast_badge("#6AABDB") == "2.5:1 AA Fail"


def test_swatches_from_design_system(design_system):
    swatches = swatches_from_design_system(design_system)
    assert len(swatches) == 3 + 5 + 4
    assert [s["role"] for s in swatches[:3]] == ["primary", "secondary", "accent"]
    assert all("badge" in s for s in swatches[:3])
    assert all("badge" not in s for s in swatches[3:])
    assert swatches[-1]["role"] == "info"


def test_render_palette_image_size(design_system):
    img = render_palette_image(swatches_from_design_system(design_system), width=1200, height=320)
    assert img.size == (1200, 320)
    assert img.mode == "RGB"
    # first strip is the primary color
    assert img.getpixel((5, 100)) == (0x1F, 0x4E, 0x79)


def test_render_palette_image_empty():
    img = render_palette_image([], width=100, height=50)
    assert img.size == (100, 50)


def test_render_palette_image_tolerates_bad_hex():
    img = render_palette_image([{"hex": "oops", "name": "Broken"}], width=200, height=200)
    assert img.getpixel((190, 60)) == (136, 136, 136)


def test_render_harmony_image_rows():
    img = render_harmony_image("#6AABDB", width=800, row_height=50)
    # 5 harmonies + 4 semantic categories
    assert img.size == (800, 9 * (50 + 4))


def test_render_to_disk(tmp_path, design_system):
    palette = render_palette(
        swatches_from_design_system(design_system),
        tmp_path / "out" / "palette.png",
        brand_name=design_system.brand_name,
    )
    harmonies = render_harmonies("#6AABDB", tmp_path / "harmonies.png")
    assert palette.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert harmonies.exists()
