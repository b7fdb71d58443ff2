import argparse
import base64
import io
import logging
import math
import os
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse

from PIL import Image, ImageChops, ImageDraw, ImageFont, ImageOps

from gallery_errors import AssetLoadError, ConfigError, RenderError
from gallery_logging import setup_logging
from gallery_schema import EmptyStateConfig, GalleryProps
from gallery_settings import DEFAULT_HEIGHT, DEFAULT_WIDTH, load_settings
from image_normalizer import get_image_source, is_asset_handle, normalize_image_value
from stack_layout import compute_layout

logger = logging.getLogger(__name__)

# =========================
# Constants Section
# =========================

DEFAULT_BG_COLOR = "#00000000"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")
REMOTE_URI_SCHEMES = ("http", "https", "ftp")
MAX_CANVAS_SIDE = 4096

# Stack items
ITEM_CORNER_RADIUS = 10
PLACEHOLDER_FILL = (224, 224, 224, 255)
PLACEHOLDER_OUTLINE = (189, 189, 189, 255)
PLACEHOLDER_OUTLINE_WIDTH = 2

# Empty state block
EMPTY_STATE_PADDING = 32
EMPTY_STATE_IMAGE_SIZE = 170
EMPTY_STATE_IMAGE_GAP = 32
EMPTY_STATE_TEXT_MARGIN = 32
EMPTY_STATE_TITLE_SIZE = 18
EMPTY_STATE_SUBTITLE_SIZE = 16
EMPTY_STATE_TITLE_GAP = 8
EMPTY_STATE_TEXT_COLOR = "#212121"

# Loading indicator
LOADING_COLOR = "#999999"
LOADING_RADIUS = 10
LOADING_STROKE_WIDTH = 3
LOADING_ARC_DEG = (0, 270)

# Error placeholder
ERROR_TEXT = "Error loading gallery"
ERROR_COLOR = "#999999"
ERROR_FONT_SIZE = 14

# Debug overlay
DEBUG_OVERLAY_CONTAINER_OUTLINE = (0, 0, 0, 80)
DEBUG_OVERLAY_CONTAINER_WIDTH = 2
DEBUG_OVERLAY_ITEM_OUTLINE = (255, 0, 0, 120)
DEBUG_OVERLAY_ITEM_WIDTH = 2
DEBUG_OVERLAY_CROSSHAIR_COLOR = (255, 0, 0, 180)
DEBUG_OVERLAY_CROSSHAIR_WIDTH = 2
DEBUG_OVERLAY_CROSSHAIR_SIZE = 6

# =========================
# End of Constants Section
# =========================


@dataclass(frozen=True)
class Presentation:
    """What a gallery shows: loading, empty, blank, stack or error."""

    kind: str
    width: float
    height: float
    items: List[dict] = field(default_factory=list)
    empty_state: Optional[EmptyStateConfig] = None


def _coerce_props(props: Any) -> GalleryProps:
    if isinstance(props, GalleryProps):
        return props
    return GalleryProps.model_validate(props)


def _fallback_extent(value: Any, default: float) -> float:
    try:
        extent = float(value or default)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(extent) or extent <= 0:
        return default
    return extent


def _fallback_size(props: Any) -> Tuple[float, float]:
    if isinstance(props, Mapping):
        width, height = props.get("width"), props.get("height")
    else:
        width, height = getattr(props, "width", None), getattr(props, "height", None)
    return _fallback_extent(width, DEFAULT_WIDTH), _fallback_extent(height, DEFAULT_HEIGHT)


def build_presentation(props: Any, rng: Any = None) -> Presentation:
    """Decide which presentation a gallery should show. Never raises."""
    try:
        gallery = _coerce_props(props)
        width, height = gallery.width, gallery.height

        if gallery.images is None:
            return Presentation("loading", width, height)

        items = compute_layout(
            gallery.images,
            max_items=gallery.max_items,
            image_size=gallery.image_size,
            container_width=width,
            container_height=height,
            rng=rng,
        )
        has_images = isinstance(gallery.images, (list, tuple)) and len(gallery.images) > 0

        if gallery.empty_state is not None and (not has_images or not items or gallery.empty_state_forced):
            return Presentation("empty", width, height, empty_state=gallery.empty_state)

        if not items:
            return Presentation("blank", width, height)

        return Presentation("stack", width, height, items=items)
    except Exception:
        logger.exception("Gallery props could not be laid out")
        width, height = _fallback_size(props)
        return Presentation("error", width, height)


# -------------------------
# Image sources
# -------------------------

def _open_image(path_or_buffer: Any) -> Image.Image:
    try:
        with Image.open(path_or_buffer) as img:
            return img.convert("RGBA")
    except (OSError, ValueError) as e:
        raise AssetLoadError(f"Could not open image {path_or_buffer!r}: {e}") from e


def _uri_to_file(uri: str, base_dir: Optional[str]) -> Any:
    parsed = urlparse(uri)
    scheme = parsed.scheme.lower()
    if scheme in REMOTE_URI_SCHEMES:
        return None
    if scheme == "data":
        header, _, payload = uri.partition(",")
        if not header.endswith(";base64"):
            raise AssetLoadError("Only base64 data URIs are supported")
        try:
            return io.BytesIO(base64.b64decode(payload, validate=True))
        except ValueError as e:
            raise AssetLoadError(f"Malformed data URI: {e}") from e
    if scheme == "file":
        return unquote(parsed.path)
    if base_dir and not os.path.isabs(uri):
        return os.path.join(base_dir, uri)
    return uri


def load_source_image(
    source: Any,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: Optional[str] = None,
) -> Optional[Image.Image]:
    """
    Open the image behind a renderer source value.

    Numeric handles are looked up in the assets registry (int or str keys),
    {"uri": ...} values are read from disk or decoded from data URIs. Remote
    URIs are never fetched. Returns None when nothing could be opened.
    """
    try:
        if is_asset_handle(source):
            registry = assets or {}
            target = registry.get(source, registry.get(str(source)))
            if target is None:
                logger.warning("Unknown asset handle %r", source)
                return None
            if base_dir and not os.path.isabs(target):
                target = os.path.join(base_dir, target)
        else:
            uri = source.get("uri") if isinstance(source, Mapping) else source
            if not uri or not isinstance(uri, str):
                return None
            target = _uri_to_file(uri, base_dir)
            if target is None:
                logger.info("Skipping remote image %s", uri)
                return None
        return _open_image(target)
    except AssetLoadError as e:
        logger.warning("%s", e)
        return None


# -------------------------
# Painting
# -------------------------

def _canvas_side(value: float) -> int:
    if not math.isfinite(value):
        return 1
    return min(MAX_CANVAS_SIDE, max(1, int(round(value))))


def _canvas_size(width: float, height: float) -> Tuple[int, int]:
    return _canvas_side(width), _canvas_side(height)


def _load_font(size: int) -> Any:
    return ImageFont.load_default(size=size)


def _fit_contain(img: Image.Image, side: int) -> Image.Image:
    fitted = ImageOps.contain(img, (side, side), method=Image.BICUBIC)
    tile = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    tile.paste(fitted, ((side - fitted.width) // 2, (side - fitted.height) // 2))
    return tile


def _round_corners(tile: Image.Image, radius: int) -> Image.Image:
    mask = Image.new("L", tile.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle([0, 0, tile.width - 1, tile.height - 1], radius=radius, fill=255)
    rounded = tile.copy()
    rounded.putalpha(ImageChops.multiply(tile.getchannel("A"), mask))
    return rounded


def _placeholder_tile(side: int) -> Image.Image:
    tile = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    ImageDraw.Draw(tile).rounded_rectangle(
        [0, 0, side - 1, side - 1],
        radius=ITEM_CORNER_RADIUS,
        fill=PLACEHOLDER_FILL,
        outline=PLACEHOLDER_OUTLINE,
        width=PLACEHOLDER_OUTLINE_WIDTH,
    )
    return tile


def render_stack(
    items: List[dict],
    width: float,
    height: float,
    background: str = DEFAULT_BG_COLOR,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: Optional[str] = None,
) -> Image.Image:
    canvas = Image.new("RGBA", _canvas_size(width, height), background)
    for item in sorted(items, key=lambda it: (it or {}).get("z_index", 0)):
        if not item or item.get("source") is None:
            continue

        side = max(1, int(round(item["size"])))
        img = load_source_image(item["source"], assets=assets, base_dir=base_dir)
        if img is None:
            tile = _placeholder_tile(side)
        else:
            tile = _round_corners(_fit_contain(img, side), ITEM_CORNER_RADIUS)

        # Positive rotation turns clockwise around the tile centre
        rotated = tile.rotate(-item["rotation"], resample=Image.BICUBIC, expand=True)
        center_x = item["left"] + item["size"] / 2.0
        center_y = item["top"] + item["size"] / 2.0
        x = int(round(center_x - rotated.width / 2.0))
        y = int(round(center_y - rotated.height / 2.0))

        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        layer.paste(rotated, (x, y))
        canvas = Image.alpha_composite(canvas, layer)
    return canvas


def _wrap_text(draw: ImageDraw.ImageDraw, text: str, font: Any, max_width: float) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and draw.textlength(candidate, font=font) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def _line_height(draw: ImageDraw.ImageDraw, font: Any) -> int:
    left, top, right, bottom = draw.textbbox((0, 0), "Ag", font=font)
    return bottom - top


def render_empty_state(
    config: EmptyStateConfig,
    width: float,
    height: float,
    background: str = DEFAULT_BG_COLOR,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: Optional[str] = None,
) -> Image.Image:
    canvas = Image.new("RGBA", _canvas_size(width, height), background)
    draw = ImageDraw.Draw(canvas)
    show_text = config.text_display != "noText"

    # Optional picture above or below the text
    picture: Optional[Image.Image] = None
    if config.image_status in ("above", "below"):
        real_source = get_image_source(config.image_source)
        normalized = normalize_image_value(real_source)
        if normalized is not None:
            img = load_source_image(normalized["source"], assets=assets, base_dir=base_dir)
            if img is None:
                picture = _placeholder_tile(EMPTY_STATE_IMAGE_SIZE)
            else:
                picture = _fit_contain(img, EMPTY_STATE_IMAGE_SIZE)

    # Text lines as (text, font, color, gap_after)
    text_rows: List[Tuple[str, Any, str, int]] = []
    if show_text:
        max_text_width = max(1, canvas.width - 2 * (EMPTY_STATE_PADDING + EMPTY_STATE_TEXT_MARGIN))
        title_style = config.styles.title
        title_font = _load_font(title_style.font_size or EMPTY_STATE_TITLE_SIZE)
        title_color = title_style.color or EMPTY_STATE_TEXT_COLOR
        title_lines = _wrap_text(draw, config.title, title_font, max_text_width)
        for i, line in enumerate(title_lines):
            gap = EMPTY_STATE_TITLE_GAP if i == len(title_lines) - 1 else 0
            text_rows.append((line, title_font, title_color, gap))

        if config.text_display == "titleAndSubtitle":
            subtitle_style = config.styles.subtitle
            subtitle_font = _load_font(subtitle_style.font_size or EMPTY_STATE_SUBTITLE_SIZE)
            subtitle_color = subtitle_style.color or EMPTY_STATE_TEXT_COLOR
            for line in _wrap_text(draw, config.subtitle, subtitle_font, max_text_width):
                text_rows.append((line, subtitle_font, subtitle_color, 0))

    text_height = sum(_line_height(draw, font) + gap for _text, font, _color, gap in text_rows)
    picture_gap = EMPTY_STATE_IMAGE_GAP if text_rows else 0
    column_height = text_height
    if picture is not None:
        column_height += picture.height + picture_gap

    y = (canvas.height - column_height) / 2.0

    if picture is not None and config.image_status == "above":
        canvas.alpha_composite(picture, dest=(max(0, (canvas.width - picture.width) // 2), max(0, int(y))))
        y += picture.height + picture_gap

    for text, font, color, gap in text_rows:
        x = (canvas.width - draw.textlength(text, font=font)) / 2.0
        left, top, _right, _bottom = draw.textbbox((0, 0), text, font=font)
        draw.text((x - left, y - top), text, font=font, fill=color)
        y += _line_height(draw, font) + gap

    if picture is not None and config.image_status == "below":
        y += picture_gap
        canvas.alpha_composite(picture, dest=(max(0, (canvas.width - picture.width) // 2), max(0, int(y))))

    return canvas


def render_loading(width: float, height: float, background: str = DEFAULT_BG_COLOR) -> Image.Image:
    canvas = Image.new("RGBA", _canvas_size(width, height), background)
    cx, cy = canvas.width / 2.0, canvas.height / 2.0
    ImageDraw.Draw(canvas).arc(
        [cx - LOADING_RADIUS, cy - LOADING_RADIUS, cx + LOADING_RADIUS, cy + LOADING_RADIUS],
        start=LOADING_ARC_DEG[0],
        end=LOADING_ARC_DEG[1],
        fill=LOADING_COLOR,
        width=LOADING_STROKE_WIDTH,
    )
    return canvas


def render_error(width: float, height: float, background: str = DEFAULT_BG_COLOR) -> Image.Image:
    canvas = Image.new("RGBA", _canvas_size(width, height), background)
    draw = ImageDraw.Draw(canvas)
    font = _load_font(ERROR_FONT_SIZE)
    left, top, right, bottom = draw.textbbox((0, 0), ERROR_TEXT, font=font)
    x = (canvas.width - (right - left)) / 2.0 - left
    y = (canvas.height - (bottom - top)) / 2.0 - top
    draw.text((x, y), ERROR_TEXT, font=font, fill=ERROR_COLOR)
    return canvas


def paint_presentation(
    presentation: Presentation,
    background: str = DEFAULT_BG_COLOR,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: Optional[str] = None,
) -> Image.Image:
    kind = presentation.kind
    width, height = presentation.width, presentation.height
    if kind == "stack":
        return render_stack(presentation.items, width, height, background, assets, base_dir)
    if kind == "empty":
        return render_empty_state(presentation.empty_state, width, height, background, assets, base_dir)
    if kind == "loading":
        return render_loading(width, height, background)
    if kind == "blank":
        return Image.new("RGBA", _canvas_size(width, height), background)
    if kind == "error":
        return render_error(width, height, background)
    raise RenderError(f"Unknown presentation kind: {kind!r}")


def _paint_safely(
    presentation: Presentation,
    background: str,
    assets: Optional[Dict[Any, str]],
    base_dir: Optional[str],
) -> Tuple[Presentation, Image.Image]:
    try:
        return presentation, paint_presentation(presentation, background, assets, base_dir)
    except Exception:
        logger.exception("RandomStackGallery render error")
    failed = Presentation("error", *_fallback_size(presentation))
    try:
        return failed, render_error(failed.width, failed.height)
    except Exception:
        logger.exception("Error placeholder could not be painted")
        return failed, Image.new("RGBA", _canvas_size(failed.width, failed.height), (0, 0, 0, 0))


def render_gallery(
    props: Any,
    rng: Any = None,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: Optional[str] = None,
    background: str = DEFAULT_BG_COLOR,
) -> Image.Image:
    """Lay out and paint a gallery. Failures come back as the error placeholder."""
    presentation = build_presentation(props, rng=rng)
    _presentation, image = _paint_safely(presentation, background, assets, base_dir)
    return image


def render_debug_overlay(width: float, height: float, items: List[dict]) -> Image.Image:
    overlay = Image.new("RGBA", _canvas_size(width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    draw.rectangle(
        [0, 0, overlay.width - 1, overlay.height - 1],
        outline=DEBUG_OVERLAY_CONTAINER_OUTLINE,
        width=DEBUG_OVERLAY_CONTAINER_WIDTH,
    )
    for item in items:
        half = item["size"] / 2.0
        cx = item["left"] + half
        cy = item["top"] + half
        theta = math.radians(item["rotation"])
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        corners = []
        for dx, dy in ((-half, -half), (half, -half), (half, half), (-half, half)):
            corners.append((cx + dx * cos_t - dy * sin_t, cy + dx * sin_t + dy * cos_t))
        draw.polygon(corners, outline=DEBUG_OVERLAY_ITEM_OUTLINE, width=DEBUG_OVERLAY_ITEM_WIDTH)
        # crosshair
        x, y = int(round(cx)), int(round(cy))
        draw.line([x - DEBUG_OVERLAY_CROSSHAIR_SIZE, y, x + DEBUG_OVERLAY_CROSSHAIR_SIZE, y], fill=DEBUG_OVERLAY_CROSSHAIR_COLOR, width=DEBUG_OVERLAY_CROSSHAIR_WIDTH)
        draw.line([x, y - DEBUG_OVERLAY_CROSSHAIR_SIZE, x, y + DEBUG_OVERLAY_CROSSHAIR_SIZE], fill=DEBUG_OVERLAY_CROSSHAIR_COLOR, width=DEBUG_OVERLAY_CROSSHAIR_WIDTH)
    return overlay


def placement_report(presentation: Presentation) -> List[str]:
    lines: List[str] = [f"Presentation: {presentation.kind} ({presentation.width:g}x{presentation.height:g})"]
    items = presentation.items
    if not items:
        return lines

    lines.append("Item placements (id size left top rot_deg):")
    for item in items:
        lines.append(
            f"  {item['id']:02d}  size={item['size']:7.2f}  left={item['left']:7.2f}  "
            f"top={item['top']:7.2f}  rot={item['rotation']:+06.2f}°"
        )

    sizes = [item["size"] for item in items]
    container_area = presentation.width * presentation.height
    fill_ratio = sum(s * s for s in sizes) / container_area if container_area > 0 else 0.0
    centers_x = [item["left"] + item["size"] / 2.0 for item in items]
    centers_y = [item["top"] + item["size"] / 2.0 for item in items]
    spread_x = (max(centers_x) - min(centers_x)) / presentation.width if presentation.width > 0 else 0.0
    spread_y = (max(centers_y) - min(centers_y)) / presentation.height if presentation.height > 0 else 0.0

    lines.append(f"Size stats: min={min(sizes):.2f}  avg={sum(sizes) / len(sizes):.2f}  max={max(sizes):.2f}")
    lines.append(f"Fill ratio (item area / container area): {fill_ratio:.2f}")
    lines.append(f"Centre spread: x={spread_x:.2f}  y={spread_y:.2f}")
    return lines


def generate_gallery(
    props: Any,
    output_path: str,
    seed: int | None = None,
    assets: Optional[Dict[Any, str]] = None,
    base_dir: str | None = None,
    background: str = DEFAULT_BG_COLOR,
    verbose: bool = False,
    debug_overlay_path: str | None = None,
    log_file_path: str | None = None,
) -> str:
    rng = random.Random(seed)

    presentation = build_presentation(props, rng=rng)
    presentation, composed = _paint_safely(presentation, background, assets, base_dir)

    # Optional debug overlay
    if debug_overlay_path is not None:
        overlay = render_debug_overlay(presentation.width, presentation.height, presentation.items)
        overlay_dir = os.path.dirname(debug_overlay_path)
        if overlay_dir:
            os.makedirs(overlay_dir, exist_ok=True)
        overlay.save(debug_overlay_path)

    if verbose:
        log_lines = placement_report(presentation)
        for line in log_lines:
            print(line)
        if log_file_path:
            out_dir = os.path.dirname(log_file_path)
            if out_dir:
                os.makedirs(out_dir, exist_ok=True)
            with open(log_file_path, "w", encoding="utf-8") as f:
                f.write("\n".join(log_lines) + "\n")

    # Ensure output directory exists
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    composed.save(output_path)
    return output_path


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Render a randomly scattered image stack to PNG.")
    parser.add_argument(
        "images",
        nargs="*",
        help="Image file paths or URIs. If omitted, all images in ./images are used",
    )
    parser.add_argument("--out", dest="out", default=os.path.join("output", "gallery.png"), help="Output image path (PNG recommended)")
    parser.add_argument("--width", dest="width", type=float, default=settings.width, help="Container width in pixels")
    parser.add_argument("--height", dest="height", type=float, default=settings.height, help="Container height in pixels")
    parser.add_argument("--max-items", dest="max_items", type=int, default=settings.max_items, help="Maximum number of images in the stack")
    parser.add_argument("--image-size", dest="image_size", type=float, default=settings.image_size, help="Base image size as %% of the shorter container side (30-100)")
    parser.add_argument("--seed", dest="seed", type=int, default=None, help="Random seed for reproducibility (omit for randomness)")
    parser.add_argument("--bg", dest="bg", default=DEFAULT_BG_COLOR, help="Container background color (hex, alpha allowed)")
    parser.add_argument("--assets-dir", dest="assets_dir", default=settings.assets_dir, help="Directory relative image paths are resolved against")
    parser.add_argument("--loading", dest="loading", action="store_true", help="Render the loading state instead of the images")
    parser.add_argument("--empty-state", dest="empty_state", action="store_true", help="Show an empty-state block when there are no images")
    parser.add_argument("--force-empty", dest="force_empty", action="store_true", help="Show the empty-state block even when images exist")
    parser.add_argument("--empty-title", dest="empty_title", default=None, help="Empty-state title")
    parser.add_argument("--empty-subtitle", dest="empty_subtitle", default=None, help="Empty-state subtitle")
    parser.add_argument("--empty-text", dest="empty_text", choices=["noText", "titleOnly", "titleAndSubtitle"], default=None, help="Which empty-state texts to show")
    parser.add_argument("--empty-image", dest="empty_image", default=None, help="Empty-state image path")
    parser.add_argument("--empty-image-position", dest="empty_image_position", choices=["none", "above", "below"], default=None, help="Where the empty-state image goes")
    parser.add_argument("--verbose", dest="verbose", action="store_true", help="Print the presentation and placement diagnostics")
    parser.add_argument("--debug-overlay", dest="debug_overlay", default=None, help="Optional path to save a debug overlay PNG")
    parser.add_argument("--log-file", dest="log_file", default=None, help="Optional path to save verbose placement logs")
    parser.add_argument("--log-level", dest="log_level", default=settings.log_level, help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-json", dest="log_json", action="store_true", default=settings.log_json, help="Emit logs as JSON lines")
    return parser.parse_args(argv)


def discover_images_if_needed(paths: List[str], default_dir: str = "images") -> List[str]:
    if paths:
        return paths
    if not os.path.isdir(default_dir):
        logger.info("No images given and %s not found; rendering an empty gallery", default_dir)
        return []
    candidates: List[str] = []
    for name in os.listdir(default_dir):
        if name.lower().endswith(IMAGE_EXTENSIONS):
            candidates.append(os.path.join(default_dir, name))
    candidates.sort()
    return candidates


def build_empty_state(args: argparse.Namespace) -> Optional[EmptyStateConfig]:
    overrides: Dict[str, Any] = {}
    if args.empty_title is not None:
        overrides["title"] = args.empty_title
    if args.empty_subtitle is not None:
        overrides["subtitle"] = args.empty_subtitle
    if args.empty_text is not None:
        overrides["text_display"] = args.empty_text
    if args.empty_image is not None:
        overrides["image_source"] = args.empty_image
        overrides["image_status"] = args.empty_image_position or "above"
    elif args.empty_image_position is not None:
        overrides["image_status"] = args.empty_image_position

    if not (args.empty_state or args.force_empty or overrides):
        return None
    return EmptyStateConfig(**overrides)


def main(argv: List[str] | None = None) -> int:
    try:
        args = parse_args(argv)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(args.log_level, json_output=args.log_json)

    try:
        images = None if args.loading else discover_images_if_needed(args.images)
        props = GalleryProps(
            images=images,
            max_items=args.max_items,
            image_size=args.image_size,
            width=args.width,
            height=args.height,
            force_empty_state=args.force_empty,
            empty_state=build_empty_state(args),
        )
        out_path = generate_gallery(
            props,
            output_path=args.out,
            seed=args.seed,
            base_dir=args.assets_dir,
            background=args.bg,
            verbose=args.verbose,
            debug_overlay_path=args.debug_overlay,
            log_file_path=args.log_file,
        )
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print(f"Saved: {out_path}")
    return 0


if __name__ == "__main__":
    exit(main())
