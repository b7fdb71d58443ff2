import logging
import math
import random
from collections.abc import Mapping
from typing import Any, List, Optional

from image_normalizer import normalize_image_value

logger = logging.getLogger(__name__)

# =========================
# Constants Section
# =========================

DEFAULT_MAX_ITEMS = 5
DEFAULT_IMAGE_SIZE = 60
DEFAULT_CONTAINER_WIDTH = 320
DEFAULT_CONTAINER_HEIGHT = 400

# Base size percentage bounds (of the container's shorter side)
IMAGE_SIZE_MIN_PERCENT = 30
IMAGE_SIZE_MAX_PERCENT = 100

# Random size jitter around the base size
SIZE_VARIATION_FRAC = 0.25

# Hard size bounds as fractions of the container's shorter side
ITEM_MIN_SIZE_FRAC = 0.2
ITEM_MAX_SIZE_FRAC = 0.8

# Rotation range in degrees
ROTATION_MAX_DEG = 8.0

# =========================
# End of Constants Section
# =========================


def get_random_value(min_value: float, max_value: float, rng: Any = None) -> float:
    source = rng if rng is not None else random
    return source.random() * (max_value - min_value) + min_value


def extract_image_ref(item: Any) -> Any:
    """Unwrap records like {"image": ..., "title": ...} to their image field."""
    if isinstance(item, Mapping) and item.get("image"):
        return item["image"]
    return item


def _container_extent(value: Any, name: str) -> float:
    extent = float(value)
    if not math.isfinite(extent):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return max(0.0, extent)


def compute_layout(
    images: Any,
    max_items: Optional[int] = DEFAULT_MAX_ITEMS,
    image_size: Optional[float] = DEFAULT_IMAGE_SIZE,
    container_width: float = DEFAULT_CONTAINER_WIDTH,
    container_height: float = DEFAULT_CONTAINER_HEIGHT,
    rng: Any = None,
) -> List[dict]:
    """
    Normalize the image list and scatter up to max_items of them inside the container.

    Each returned item is the normalized image dict extended with id, size,
    rotation, left, top and z_index. Items keep input order and paint in that
    order. This function does not raise: failures are logged and yield [].
    """
    if not images or not isinstance(images, (list, tuple)):
        return []

    try:
        if max_items is None:
            max_items = DEFAULT_MAX_ITEMS
        if image_size is None:
            image_size = DEFAULT_IMAGE_SIZE

        limit = int(max_items)
        if limit <= 0:
            return []

        width = _container_extent(container_width, "container_width")
        height = _container_extent(container_height, "container_height")

        valid_images: List[dict] = []
        for item in images:
            normalized = normalize_image_value(extract_image_ref(item))
            if normalized is None:
                continue
            valid_images.append(normalized)
            if len(valid_images) >= limit:
                break

        if not valid_images:
            return []

        shorter_side = min(width, height)
        size_fraction = max(IMAGE_SIZE_MIN_PERCENT, min(IMAGE_SIZE_MAX_PERCENT, float(image_size))) / 100.0
        base_size = shorter_side * size_fraction
        size_variation = base_size * SIZE_VARIATION_FRAC
        min_size = shorter_side * ITEM_MIN_SIZE_FRAC
        max_size = shorter_side * ITEM_MAX_SIZE_FRAC

        layout: List[dict] = []
        for index, img in enumerate(valid_images):
            calculated_size = base_size + get_random_value(-size_variation, size_variation, rng)
            final_size = max(min_size, min(calculated_size, max_size))

            max_left = max(0.0, width - final_size)
            max_top = max(0.0, height - final_size)

            left = get_random_value(0.0, max_left, rng)
            top = get_random_value(0.0, max_top, rng)

            layout.append(
                {
                    **img,
                    "id": index,
                    "size": final_size,
                    "rotation": get_random_value(-ROTATION_MAX_DEG, ROTATION_MAX_DEG, rng),
                    "left": left,
                    "top": top,
                    "z_index": index,
                }
            )
        return layout
    except Exception:
        logger.exception("Error processing images")
        return []
