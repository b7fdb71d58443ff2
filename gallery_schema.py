from __future__ import annotations

import math
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from gallery_settings import DEFAULT_HEIGHT, DEFAULT_IMAGE_SIZE, DEFAULT_MAX_ITEMS, DEFAULT_WIDTH

# -----------------------------
# Core Types
# -----------------------------

ImagePlacement = Literal["none", "above", "below"]

TextDisplay = Literal["noText", "titleOnly", "titleAndSubtitle"]

# Legacy editors send the open accordion panel name instead of a flag
FORCE_EMPTY_STATE_PANEL = "listEmptyState"

# -----------------------------
# Empty State
# -----------------------------

class TextStyleOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    font_size: Optional[int] = Field(default=None, ge=1, le=200)
    color: Optional[str] = None          # hex


class EmptyStateStyles(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: TextStyleOverride = Field(default_factory=TextStyleOverride)
    subtitle: TextStyleOverride = Field(default_factory=TextStyleOverride)


class EmptyStateConfig(BaseModel):
    """Fallback block shown instead of the stack when there is nothing to scatter."""
    model_config = ConfigDict(extra="forbid")

    image_status: ImagePlacement = "none"
    image_source: Any = None             # raw image ref, optionally {"value": ...}
    text_display: TextDisplay = "titleOnly"
    title: str = "No Images"
    subtitle: str = "Add images to see the gallery"
    styles: EmptyStateStyles = Field(default_factory=EmptyStateStyles)

    @field_validator("image_status", mode="before")
    @classmethod
    def _legacy_no_image(cls, v: Any) -> Any:
        return "none" if v == "noImage" else v

# -----------------------------
# Gallery Props
# -----------------------------

class GalleryProps(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    images: Any = None                   # None means "still loading"
    max_items: Optional[int] = DEFAULT_MAX_ITEMS
    image_size: Optional[float] = DEFAULT_IMAGE_SIZE
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    force_empty_state: Union[bool, str] = False
    empty_state: Optional[EmptyStateConfig] = None
    seed: Optional[int] = None

    @field_validator("max_items", "image_size", mode="after")
    @classmethod
    def _fallback_tuning(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return DEFAULT_MAX_ITEMS if info.field_name == "max_items" else DEFAULT_IMAGE_SIZE
        return v

    @field_validator("width", "height", mode="before")
    @classmethod
    def _fallback_dimension(cls, v: Any, info: ValidationInfo) -> Any:
        # 0 and missing values mean "use the default container size"
        if not v:
            return DEFAULT_WIDTH if info.field_name == "width" else DEFAULT_HEIGHT
        return v

    @field_validator("width", "height", mode="after")
    @classmethod
    def _finite_dimension(cls, v: float, info: ValidationInfo) -> float:
        if not math.isfinite(v):
            return DEFAULT_WIDTH if info.field_name == "width" else DEFAULT_HEIGHT
        return v

    @property
    def empty_state_forced(self) -> bool:
        if isinstance(self.force_empty_state, str):
            return self.force_empty_state == FORCE_EMPTY_STATE_PANEL
        return bool(self.force_empty_state)
