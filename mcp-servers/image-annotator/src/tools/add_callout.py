"""
add_callout — Add a speech-bubble callout pointing at a location.

Mutable: writes a new image file (default suffix "-callout").
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_file_exists, assert_sandboxed
from annotator import LabelPosition, annotate_image, build_callout, default_output_path


class Params(BaseModel):
    """Parameters for add_callout."""

    input_path: str
    output_path: str | None = None
    x: float = Field(description="X coordinate where pointer points")
    y: float = Field(description="Y coordinate where pointer points")
    text: str = Field(description="Callout text (supports \\n for newlines)")
    pointer: LabelPosition = Field(default="left", description="Direction the pointer comes from")
    color: str = "primary"
    background: str = "white"


class Result(BaseModel):
    """Return value for add_callout."""

    output_path: str


class AddCallout(MCPTool[Params, Result]):
    """Add a callout (speech bubble) pointing to a specific location."""

    name = "add_callout"
    description = "Add a callout (speech bubble) pointing to a specific location."
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[Result]:
        assert_absolute_path(params.input_path, "input_path")
        assert_sandboxed(params.input_path)
        assert_file_exists(params.input_path)

        output_path = params.output_path or default_output_path(params.input_path, "-callout")
        assert_absolute_path(output_path, "output_path")
        assert_sandboxed(output_path)

        annotations = build_callout(
            params.x,
            params.y,
            params.text,
            pointer=params.pointer,
            color=params.color,
            background=params.background,
        )
        annotate_image(params.input_path, output_path, annotations)

        return MCPResult(success=True, data=Result(output_path=output_path))
