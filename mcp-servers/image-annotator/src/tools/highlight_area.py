"""
highlight_area — Mark one region with a circle, rectangle or translucent fill.

Mutable: writes a new image file (default suffix "-highlighted").
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_file_exists, assert_sandboxed
from annotator import (
    HighlightShape,
    LabelPosition,
    annotate_image,
    build_highlight_area,
    default_output_path,
)


class Params(BaseModel):
    """Parameters for highlight_area."""

    input_path: str
    output_path: str | None = None
    shape: HighlightShape = Field(description="Shape type")
    x: float
    y: float
    width: float = Field(gt=0, description="Width (or diameter for circle)")
    height: float | None = Field(default=None, gt=0, description="Height (for rect only)")
    color: str = Field(default="red", description="Color (default: red)")
    label: str | None = Field(default=None, description="Optional label")
    label_position: LabelPosition = Field(
        default="right", description="Label position relative to shape"
    )


class Result(BaseModel):
    """Return value for highlight_area."""

    output_path: str


class HighlightArea(MCPTool[Params, Result]):
    """Highlight a specific area with a shape and optional label."""

    name = "highlight_area"
    description = "Quickly highlight a specific area with a shape and optional label."
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[Result]:
        assert_absolute_path(params.input_path, "input_path")
        assert_sandboxed(params.input_path)
        assert_file_exists(params.input_path)

        output_path = params.output_path or default_output_path(params.input_path, "-highlighted")
        assert_absolute_path(output_path, "output_path")
        assert_sandboxed(output_path)

        annotations = build_highlight_area(
            params.shape,
            params.x,
            params.y,
            params.width,
            params.height,
            color=params.color,
            label=params.label,
            label_position=params.label_position,
        )
        annotate_image(params.input_path, output_path, annotations)

        return MCPResult(success=True, data=Result(output_path=output_path))
