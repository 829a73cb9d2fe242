"""
blur_area — Mask a rectangular area that holds sensitive information.

The mask is a blurred flat gray rectangle drawn over the region; the
pixels underneath are covered, not blurred.

Mutable: writes a new image file (default suffix "-blurred").
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_file_exists, assert_sandboxed
from annotator import annotate_image, build_blur, default_output_path


class Params(BaseModel):
    """Parameters for blur_area."""

    input_path: str
    output_path: str | None = None
    x: float
    y: float
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    intensity: float = Field(default=8, ge=0, description="Blur intensity (default: 8)")


class Result(BaseModel):
    """Return value for blur_area."""

    output_path: str


class BlurArea(MCPTool[Params, Result]):
    """Blur a rectangular area to hide sensitive information."""

    name = "blur_area"
    description = "Blur a rectangular area to hide sensitive information."
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[Result]:
        assert_absolute_path(params.input_path, "input_path")
        assert_sandboxed(params.input_path)
        assert_file_exists(params.input_path)

        output_path = params.output_path or default_output_path(params.input_path, "-blurred")
        assert_absolute_path(output_path, "output_path")
        assert_sandboxed(output_path)

        annotations = build_blur(params.x, params.y, params.width, params.height, params.intensity)
        annotate_image(params.input_path, output_path, annotations)

        return MCPResult(success=True, data=Result(output_path=output_path))
