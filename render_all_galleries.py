import json
import os
from typing import Any, Dict, List

from pydantic import ValidationError

from gallery_errors import ManifestError
from gallery_logging import setup_logging
from gallery_schema import GalleryProps
from render_gallery import DEFAULT_BG_COLOR, generate_gallery

# =========================
# Constants Section
# =========================

OUTPUT_DIR = "output"
GALLERY_PREFIX = "gallery_"
MANIFEST_FILE = "galleries.json"

# =========================
# End of Constants Section
# =========================

def load_manifest(manifest_path: str) -> Dict[str, Any]:
    """
    Read and validate a gallery manifest.

    Expected shape:
        {
          "assets": {"1": "images/logo.png"},
          "galleries": [{"name": "home", "images": ["a.png", 1], "max_items": 3}, ...]
        }

    Returns:
        Dict with "assets" (handle -> path) and "galleries" (list of GalleryProps)
    """
    if not os.path.exists(manifest_path):
        raise ManifestError(f"Manifest not found: {manifest_path}")

    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("galleries"), list):
        raise ManifestError("Manifest must be an object with a 'galleries' list")

    assets = raw.get("assets") or {}
    if not isinstance(assets, dict):
        raise ManifestError("Manifest 'assets' must map asset handles to paths")

    galleries: List[GalleryProps] = []
    for i, entry in enumerate(raw["galleries"]):
        try:
            galleries.append(GalleryProps.model_validate(entry))
        except ValidationError as e:
            raise ManifestError(f"Gallery {i + 1} is invalid: {e}") from e

    return {"assets": {str(k): v for k, v in assets.items()}, "galleries": galleries}


def gallery_output_name(index: int, props: GalleryProps) -> str:
    if props.name:
        return f"{props.name}.png"
    return f"{GALLERY_PREFIX}{index + 1:02d}.png"


def render_all_galleries(
    manifest_path: str = MANIFEST_FILE,
    output_dir: str = OUTPUT_DIR,
    background_color: str = DEFAULT_BG_COLOR,
    seed: int | None = None,
    verbose: bool = False,
) -> List[str]:
    """
    Render every gallery listed in a manifest.

    Args:
        manifest_path: JSON manifest with assets and gallery props
        output_dir: Directory to save the rendered PNGs
        background_color: Container background color
        seed: Base random seed; gallery i uses seed + i
        verbose: Print per-gallery placement diagnostics

    Returns:
        List of paths to rendered gallery images
    """
    os.makedirs(output_dir, exist_ok=True)

    manifest = load_manifest(manifest_path)
    galleries: List[GalleryProps] = manifest["galleries"]
    base_dir = os.path.dirname(os.path.abspath(manifest_path))
    print(f"Found {len(galleries)} galleries in {manifest_path}")

    generated_paths = []
    for i, props in enumerate(galleries):
        print(f"Rendering gallery {i + 1}/{len(galleries)}...")

        if props.seed is not None:
            gallery_seed = props.seed
        else:
            gallery_seed = seed + i if seed is not None else None

        output_path = os.path.join(output_dir, gallery_output_name(i, props))
        generated_path = generate_gallery(
            props,
            output_path=output_path,
            seed=gallery_seed,
            assets=manifest["assets"],
            base_dir=base_dir,
            background=background_color,
            verbose=verbose,
        )
        generated_paths.append(generated_path)

    print(f"\nSuccessfully rendered {len(generated_paths)} galleries in {output_dir}")
    return generated_paths


def main(argv: List[str] | None = None) -> int:
    """Render all galleries from a manifest."""
    import argparse

    parser = argparse.ArgumentParser(description="Render every gallery in a JSON manifest")
    parser.add_argument("--manifest", "-m", default=MANIFEST_FILE, help="Gallery manifest (JSON)")
    parser.add_argument("--output", "-o", default=OUTPUT_DIR, help="Output directory for rendered galleries")
    parser.add_argument("--bg", default=DEFAULT_BG_COLOR, help="Container background color (hex)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        generated_paths = render_all_galleries(
            manifest_path=args.manifest,
            output_dir=args.output,
            background_color=args.bg,
            seed=args.seed,
            verbose=args.verbose,
        )

        print(f"\nAll galleries rendered successfully!")
        print(f"Output directory: {args.output}")
        print(f"Total galleries: {len(generated_paths)}")

    except Exception as e:
        print(f"Error: {e}")
        return 1

    return 0

if __name__ == "__main__":
    exit(main())
