"""
Tests for choosing and painting gallery presentations.
"""

import base64
import io
import random

import pytest
from PIL import Image

import render_gallery as gallery_module
from gallery_schema import EmptyStateConfig, GalleryProps
from render_gallery import (
    ERROR_TEXT,
    Presentation,
    build_presentation,
    generate_gallery,
    load_source_image,
    paint_presentation,
    placement_report,
    render_debug_overlay,
    render_gallery,
)

RED = (255, 0, 0, 255)


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / "red.png"
    Image.new("RGBA", (40, 40), RED).save(path)
    return path


def test_missing_images_means_loading():
    presentation = build_presentation({"images": None})
    assert presentation.kind == "loading"
    assert (presentation.width, presentation.height) == (320, 400)


def test_loading_ignores_empty_state():
    presentation = build_presentation({"images": None, "empty_state": {"title": "Nothing"}})
    assert presentation.kind == "loading"


def test_empty_list_with_empty_state():
    presentation = build_presentation({"images": [], "empty_state": {}})
    assert presentation.kind == "empty"
    assert presentation.empty_state.title == "No Images"


def test_empty_list_without_empty_state_is_blank():
    presentation = build_presentation({"images": [], "width": 200, "height": 100})
    assert presentation.kind == "blank"
    assert (presentation.width, presentation.height) == (200, 100)


def test_all_invalid_entries_show_empty_state():
    presentation = build_presentation({"images": [None, {}, {"foo": 1}], "empty_state": {}})
    assert presentation.kind == "empty"


def test_zero_max_items_is_blank_without_empty_state():
    presentation = build_presentation({"images": ["a.png"], "max_items": 0})
    assert presentation.kind == "blank"


def test_valid_images_give_stack():
    presentation = build_presentation({"images": ["a.png", "b.png"], "width": 300, "height": 300}, rng=random.Random(1))
    assert presentation.kind == "stack"
    assert [item["id"] for item in presentation.items] == [0, 1]


@pytest.mark.parametrize("force", [True, "listEmptyState"])
def test_forced_empty_state(force):
    props = {"images": ["a.png"], "empty_state": {}, "force_empty_state": force}
    assert build_presentation(props).kind == "empty"


@pytest.mark.parametrize("force", [True, "listEmptyState"])
def test_force_without_empty_state_keeps_stack(force):
    props = {"images": ["a.png"], "force_empty_state": force}
    assert build_presentation(props).kind == "stack"


def test_other_accordion_panel_does_not_force():
    props = {"images": ["a.png"], "empty_state": {}, "force_empty_state": "style"}
    assert build_presentation(props).kind == "stack"


def test_zero_dimensions_fall_back_to_defaults():
    presentation = build_presentation({"images": [], "width": 0, "height": None})
    assert (presentation.width, presentation.height) == (320, 400)


def test_invalid_props_become_error():
    presentation = build_presentation({"images": ["a.png"], "max_items": "many", "width": 250})
    assert presentation.kind == "error"
    assert (presentation.width, presentation.height) == (250, 400)


def test_invalid_props_with_bad_size_use_defaults():
    presentation = build_presentation({"images": ["a.png"], "unknown": 1, "width": "wide", "height": -3})
    assert presentation.kind == "error"
    assert (presentation.width, presentation.height) == (320, 400)


def test_accepts_gallery_props_instance():
    props = GalleryProps(images=["a.png"], width=100, height=100)
    presentation = build_presentation(props, rng=random.Random(0))
    assert presentation.kind == "stack"


def test_render_stack_paints_items(red_png):
    image = render_gallery({"images": [str(red_png)], "width": 200, "height": 160}, rng=random.Random(3))
    assert image.size == (200, 160)
    assert image.mode == "RGBA"
    assert image.getbbox() is not None
    assert RED in [color for _count, color in image.getcolors(200 * 160)]


def test_unloadable_images_get_placeholder_tiles(tmp_path):
    image = render_gallery({"images": [str(tmp_path / "missing.png"), "https://example.com/x.png"]}, rng=random.Random(4))
    assert image.size == (320, 400)
    colors = [color for _count, color in image.getcolors(320 * 400)]
    assert gallery_module.PLACEHOLDER_FILL in colors


def test_items_without_source_are_skipped():
    presentation = Presentation(
        "stack",
        100,
        100,
        items=[{"id": 0, "source": None, "url": None, "size": 50, "rotation": 0, "left": 10, "top": 10, "z_index": 0}],
    )
    assert paint_presentation(presentation).getbbox() is None


def test_numeric_zero_handle_is_painted(red_png):
    image = render_gallery({"images": [0], "width": 120, "height": 120}, rng=random.Random(0), assets={0: str(red_png)})
    assert RED in [color for _count, color in image.getcolors(120 * 120)]


def test_blank_presentation_is_transparent():
    image = render_gallery({"images": [], "width": 90, "height": 60})
    assert image.size == (90, 60)
    assert image.getbbox() is None


def test_loading_draws_indicator_in_centre():
    image = render_gallery({"images": None, "width": 100, "height": 100})
    left, top, right, bottom = image.getbbox()
    assert 35 <= left and right <= 65
    assert 35 <= top and bottom <= 65


def test_error_placeholder_is_drawn_at_container_size():
    image = render_gallery({"images": ["a.png"], "max_items": "many", "width": 150, "height": 90})
    assert image.size == (150, 90)
    assert image.getbbox() is not None


def test_paint_failure_becomes_error_placeholder(monkeypatch, caplog):
    def broken_stack(*args, **kwargs):
        raise RuntimeError("paint failed")

    monkeypatch.setattr(gallery_module, "render_stack", broken_stack)
    with caplog.at_level("ERROR", logger="render_gallery"):
        image = render_gallery({"images": ["a.png"], "width": 180, "height": 120})
    assert image.size == (180, 120)
    assert image.getbbox() is not None
    assert "render error" in caplog.text


@pytest.mark.parametrize("width", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_width_renders_default_container(width):
    image = render_gallery({"images": ["missing.png"], "width": width, "height": 300})
    assert image.size == (320, 300)


@pytest.mark.parametrize("kind", ["loading", "blank", "empty", "error"])
def test_non_finite_presentation_still_paints(kind):
    presentation = Presentation(kind, float("nan"), float("inf"), empty_state=EmptyStateConfig())
    image = gallery_module._paint_safely(presentation, gallery_module.DEFAULT_BG_COLOR, None, None)[1]
    assert image.size[0] <= gallery_module.MAX_CANVAS_SIDE
    assert image.size[1] <= gallery_module.MAX_CANVAS_SIDE


def test_huge_container_is_capped():
    image = render_gallery({"images": [], "width": 1e6, "height": 200})
    assert image.size == (gallery_module.MAX_CANVAS_SIDE, 200)


def test_error_placeholder_failure_still_returns_image(monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise MemoryError("no room")

    monkeypatch.setattr(gallery_module, "render_stack", broken)
    monkeypatch.setattr(gallery_module, "render_error", broken)
    with caplog.at_level("ERROR", logger="render_gallery"):
        image = render_gallery({"images": ["a.png"], "width": 90, "height": 60})
    assert image.size == (90, 60)
    assert "placeholder could not be painted" in caplog.text


def test_generate_gallery_with_non_finite_height(tmp_path):
    out = tmp_path / "nan.png"
    generate_gallery({"images": [], "height": float("nan")}, str(out), seed=1)
    with Image.open(out) as img:
        assert img.size == (320, 400)


def test_unknown_presentation_kind_is_rejected():
    with pytest.raises(gallery_module.RenderError):
        paint_presentation(Presentation("confetti", 10, 10))


def test_empty_state_text_only():
    image = render_gallery({"images": [], "empty_state": {"text_display": "titleAndSubtitle"}})
    assert image.getbbox() is not None


def test_empty_state_without_text_or_image_is_blank():
    image = render_gallery({"images": [], "empty_state": {"text_display": "noText"}})
    assert image.getbbox() is None


def test_empty_state_image_above(red_png):
    config = {"image_status": "above", "image_source": {"value": {"uri": str(red_png)}}}
    image = render_gallery({"images": [], "empty_state": config})
    assert image.getpixel((160, 100)) == RED
    assert image.getpixel((160, 330)) != RED


def test_empty_state_image_below(red_png):
    config = {"image_status": "below", "image_source": str(red_png)}
    image = render_gallery({"images": [], "empty_state": config})
    assert image.getpixel((160, 300)) == RED
    assert image.getpixel((160, 100)) != RED


def test_empty_state_legacy_no_image_status(red_png):
    config = EmptyStateConfig(image_status="noImage", image_source=str(red_png), text_display="noText")
    assert config.image_status == "none"
    image = render_gallery({"images": [], "empty_state": config})
    assert image.getbbox() is None


def test_empty_state_style_overrides():
    config = {"styles": {"title": {"font_size": 30, "color": "#FF0000"}}}
    image = render_gallery({"images": [], "empty_state": config})
    assert RED in [color for _count, color in image.getcolors(320 * 400)]


def test_load_source_image_from_path_and_file_uri(red_png):
    assert load_source_image({"uri": str(red_png)}).size == (40, 40)
    assert load_source_image({"uri": red_png.as_uri()}).mode == "RGBA"
    assert load_source_image(str(red_png)) is not None


def test_load_source_image_relative_to_base_dir(red_png):
    assert load_source_image({"uri": "red.png"}, base_dir=str(red_png.parent)) is not None


def test_load_source_image_from_data_uri():
    buffer = io.BytesIO()
    Image.new("RGB", (5, 5), (0, 0, 255)).save(buffer, format="PNG")
    uri = "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
    assert load_source_image({"uri": uri}).size == (5, 5)


def test_load_source_image_asset_handles(red_png):
    assert load_source_image(7, assets={7: str(red_png)}) is not None
    assert load_source_image(7, assets={"7": str(red_png)}) is not None
    assert load_source_image(8, assets={"7": str(red_png)}) is None
    assert load_source_image(7) is None


def test_load_source_image_failures(tmp_path, caplog):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    with caplog.at_level("WARNING", logger="render_gallery"):
        assert load_source_image({"uri": str(broken)}) is None
    assert "Could not open image" in caplog.text
    assert load_source_image({"uri": "https://example.com/a.png"}) is None
    assert load_source_image({"uri": "data:text/plain,hello"}) is None
    assert load_source_image({"uri": ""}) is None
    assert load_source_image(None) is None


def test_debug_overlay_matches_container():
    items = [{"id": 0, "size": 40, "rotation": 5, "left": 10, "top": 20}]
    overlay = render_debug_overlay(120, 80, items)
    assert overlay.size == (120, 80)
    assert overlay.getbbox() is not None


def test_placement_report_lists_items():
    presentation = build_presentation({"images": ["a.png", "b.png"]}, rng=random.Random(9))
    lines = placement_report(presentation)
    assert lines[0] == "Presentation: stack (320x400)"
    assert any(line.strip().startswith("00") for line in lines)
    assert any(line.startswith("Fill ratio") for line in lines)


def test_generate_gallery_writes_outputs(tmp_path, red_png, capsys):
    out = tmp_path / "out" / "gallery.png"
    overlay = tmp_path / "debug" / "overlay.png"
    log_file = tmp_path / "logs" / "placements.txt"
    path = generate_gallery(
        {"images": [str(red_png)] * 3, "width": 240, "height": 200},
        output_path=str(out),
        seed=11,
        verbose=True,
        debug_overlay_path=str(overlay),
        log_file_path=str(log_file),
    )
    assert path == str(out)
    with Image.open(out) as img:
        assert img.size == (240, 200)
    assert overlay.exists()
    assert "Presentation: stack" in log_file.read_text(encoding="utf-8")
    assert "Item placements" in capsys.readouterr().out


def test_generate_gallery_is_reproducible_with_seed(tmp_path, red_png):
    props = {"images": [str(red_png)] * 4}
    first = generate_gallery(props, str(tmp_path / "a.png"), seed=5)
    second = generate_gallery(props, str(tmp_path / "b.png"), seed=5)
    with Image.open(first) as a, Image.open(second) as b:
        assert a.tobytes() == b.tobytes()


def test_cli_renders_png(tmp_path, red_png, monkeypatch, capsys):
    monkeypatch.setattr(gallery_module, "setup_logging", lambda *args, **kwargs: None)
    out = tmp_path / "cli.png"
    code = gallery_module.main([str(red_png), "--out", str(out), "--seed", "1", "--width", "200", "--height", "150"])
    assert code == 0
    assert f"Saved: {out}" in capsys.readouterr().out
    with Image.open(out) as img:
        assert img.size == (200, 150)


def test_cli_empty_state_without_images_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(gallery_module, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "empty.png"
    code = gallery_module.main(["--out", str(out), "--empty-title", "Nothing here"])
    assert code == 0
    with Image.open(out) as img:
        assert img.getbbox() is not None


def test_cli_rejects_bad_settings(monkeypatch, capsys):
    monkeypatch.setenv("GALLERY_WIDTH", "wide")
    assert gallery_module.main(["--out", "unused.png"]) == 1
    assert "GALLERY_WIDTH" in capsys.readouterr().out


def test_discover_images(tmp_path):
    (tmp_path / "b.png").write_bytes(b"")
    (tmp_path / "a.JPG").write_bytes(b"")
    (tmp_path / "notes.txt").write_bytes(b"")
    found = gallery_module.discover_images_if_needed([], default_dir=str(tmp_path))
    assert [p.split("/")[-1] for p in found] == ["a.JPG", "b.png"]
    assert gallery_module.discover_images_if_needed(["x.png"]) == ["x.png"]
    assert gallery_module.discover_images_if_needed([], default_dir=str(tmp_path / "nope")) == []
