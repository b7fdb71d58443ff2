import math
from collections.abc import Mapping
from typing import Any, Optional


def is_asset_handle(value: Any) -> bool:
    """Numbers identify bundled assets. Booleans and NaN are not handles."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and not math.isnan(value)


def normalize_image_value(img: Any) -> Optional[dict]:
    """
    Map one raw image reference to {"source": ..., "url": ...}.

    Accepted shapes, checked in order:
      "https://x/a.png"                 -> {"source": {"uri": ...}, "url": ...}
      {"uri": "a.png", ...}             -> source is the mapping itself
      {"image": "a.png"}                -> {"source": {"uri": "a.png"}, ...}
      {"image": {"uri": "a.png"}}       -> {"source": {"uri": "a.png"}, ...}
      {"url": "a.png"}                  -> {"source": {"uri": "a.png"}, ...}
      42                                -> {"source": 42, "url": None}

    Empty strings count as missing and fall through to the next rule.
    Returns None for anything else.
    """
    if img is None:
        return None

    if isinstance(img, str):
        return {"source": {"uri": img}, "url": img}

    if isinstance(img, Mapping):
        if img.get("uri"):
            return {"source": img, "url": img["uri"]}

        image = img.get("image")
        if image:
            if isinstance(image, str):
                return {"source": {"uri": image}, "url": image}
            if isinstance(image, Mapping) and image.get("uri"):
                return {"source": {"uri": image["uri"]}, "url": image["uri"]}

        if img.get("url"):
            return {"source": {"uri": img["url"]}, "url": img["url"]}

        return None

    if is_asset_handle(img):
        return {"source": img, "url": None}

    return None


def get_image_source(image_source: Any) -> Any:
    # Editors hand over picked assets as {"value": {...}}
    if not image_source and not is_asset_handle(image_source):
        return None

    if isinstance(image_source, Mapping) and isinstance(image_source.get("value"), Mapping):
        return image_source["value"]

    return image_source
