"""
Shared Pydantic models for the image annotator.

Named annotation_types.py (NOT types.py) to avoid shadowing the stdlib types module.

Two layers of descriptor models live here:

- ``AnnotationSpec`` is the loose record accepted at the request boundary.
  It mirrors the JSON shape callers send (camelCase keys, every field
  optional) and ignores unknown keys.
- One frozen model per annotation variant, holding only the fields that
  variant draws with and the defaults it draws with. The document builder
  merges theme defaults into the boundary record and validates the result
  into one of these before compiling.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Point = tuple[float, float]

ThemeName = Literal["documentation", "tutorial", "bugReport", "highlight"]


# ─── Request boundary record ────────────────────────────────────────────────


class AnnotationSpec(BaseModel):
    """One annotation as sent by a caller. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = Field(
        description=(
            "Annotation type: marker, arrow, curved-arrow, callout, rect, circle, "
            "label, highlight, blur, connector, icon"
        )
    )
    x: float | None = Field(default=None, description="X coordinate")
    y: float | None = Field(default=None, description="Y coordinate")
    number: int | None = Field(default=None, description="Number for markers")
    text: str | None = Field(default=None, description="Text for labels/callouts")
    from_: Point | None = Field(default=None, alias="from", description="[x, y] start point")
    to: Point | None = Field(default=None, description="[x, y] end point")
    width: float | None = None
    height: float | None = None
    radius: float | None = None
    color: str | None = None
    background: str | None = None
    size: float | None = None
    font_size: float | None = Field(default=None, alias="fontSize")
    stroke_width: float | None = Field(default=None, alias="strokeWidth")
    style: str | None = Field(
        default=None, description="filled | outline | badge (markers), solid | dashed (lines)"
    )
    pointer: str | None = Field(default=None, description="top | bottom | left | right (callouts)")
    icon: str | None = Field(default=None, description="check, x, warning, info, question")
    shadow: bool | None = None
    curve: float | None = None
    corner_radius: float | None = Field(default=None, alias="cornerRadius")
    opacity: float | None = None
    fill: str | None = None
    intensity: float | None = None
    head_style: str | None = Field(default=None, alias="headStyle", description="filled | open")
    font_weight: str | None = Field(default=None, alias="fontWeight")
    padding: float | None = None

    def explicit_fields(self) -> dict[str, object]:
        """Fields the caller actually supplied, keyed by field name."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"type"})


# ─── Per-variant descriptors ────────────────────────────────────────────────


class _Variant(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class MarkerAnnotation(_Variant):
    """Numbered circle or pill badge."""

    x: float
    y: float
    number: int
    color: str = "red"
    size: float = 28
    shadow: bool = True
    style: Literal["filled", "outline", "badge"] = "filled"


class ArrowAnnotation(_Variant):
    """Straight arrow with an arrow-head at ``to``."""

    from_: Point = Field(alias="from")
    to: Point
    color: str = "red"
    stroke_width: float = Field(default=3, alias="strokeWidth")
    style: str = "solid"
    head_style: str = Field(default="filled", alias="headStyle")
    shadow: bool = True


class CurvedArrowAnnotation(_Variant):
    """Arrow bowed through a quadratic curve."""

    from_: Point = Field(alias="from")
    to: Point
    curve: float = 50
    color: str = "red"
    stroke_width: float = Field(default=3, alias="strokeWidth")
    shadow: bool = True


class CalloutAnnotation(_Variant):
    """Speech-bubble text box whose tail points at (x, y)."""

    x: float
    y: float
    text: str
    color: str = "primary"
    background: str = "white"
    width: float | None = None
    pointer: str = "bottom"
    font_size: float = Field(default=16, alias="fontSize")
    shadow: bool = True


class RectAnnotation(_Variant):
    x: float
    y: float
    width: float
    height: float
    color: str = "red"
    stroke_width: float = Field(default=3, alias="strokeWidth")
    fill: str = "none"
    corner_radius: float = Field(default=8, alias="cornerRadius")
    style: str = "solid"
    shadow: bool = False


class CircleAnnotation(_Variant):
    x: float
    y: float
    radius: float = 30
    color: str = "red"
    stroke_width: float = Field(default=3, alias="strokeWidth")
    fill: str = "none"
    style: str = "solid"
    shadow: bool = False


class LabelAnnotation(_Variant):
    """Text with an optional background plate."""

    x: float
    y: float
    text: str
    color: str = "darkGray"
    font_size: float = Field(default=16, alias="fontSize")
    font_weight: str = Field(default="bold", alias="fontWeight")
    background: str | None = None
    padding: float = 8
    corner_radius: float = Field(default=4, alias="cornerRadius")
    shadow: bool = False


class HighlightAnnotation(_Variant):
    x: float
    y: float
    width: float
    height: float
    color: str = "yellow"
    opacity: float = 0.35
    corner_radius: float = Field(default=0, alias="cornerRadius")


class BlurAnnotation(_Variant):
    x: float
    y: float
    width: float
    height: float
    intensity: float = 8


class ConnectorAnnotation(_Variant):
    from_: Point = Field(alias="from")
    to: Point
    color: str = "gray"
    stroke_width: float = Field(default=2, alias="strokeWidth")
    style: str = "dashed"


class IconAnnotation(_Variant):
    x: float
    y: float
    icon: str | None = None
    color: str = "green"
    size: float = 24
    shadow: bool = True


# ─── Results ────────────────────────────────────────────────────────────────


class ImageMetadata(BaseModel):
    """Measured size and format of a raster image."""

    width: int = Field(ge=1, description="Width in pixels")
    height: int = Field(ge=1, description="Height in pixels")
    format: str = Field(description="Image format as reported by Pillow (e.g. 'png', 'jpeg')")


class AnnotateResult(BaseModel):
    """Summary of one annotate call."""

    output_path: str = Field(description="Path of the written annotated image")
    width: int = Field(description="Canvas width in pixels")
    height: int = Field(description="Canvas height in pixels")
    annotation_count: int = Field(description="Number of annotations supplied")


class Step(BaseModel):
    """One numbered step of a step guide."""

    x: float = Field(description="X coordinate for marker")
    y: float = Field(description="Y coordinate for marker")
    label: str = Field(description="Step description")
    color: str | None = Field(default=None, description="Color (optional)")
