"""
create_step_guide — Number the steps of a walkthrough on a screenshot.

Each step gets a numbered marker, a short arrow and a label; consecutive
steps are joined by dashed connectors unless connect_steps is false.

Mutable: writes a new image file (default suffix "-guide").
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_file_exists, assert_sandboxed
from annotation_types import Step, ThemeName
from annotator import annotate_image, build_step_guide, default_output_path


class Params(BaseModel):
    """Parameters for create_step_guide."""

    input_path: str = Field(description="Path to input screenshot")
    output_path: str | None = Field(default=None, description="Output path (optional)")
    steps: list[Step] = Field(min_length=1, description="Array of steps")
    connect_steps: bool = Field(
        default=True, description="Draw dashed lines connecting steps (default: true)"
    )
    theme: ThemeName | None = None


class Result(BaseModel):
    """Return value for create_step_guide."""

    output_path: str
    steps: int


class CreateStepGuide(MCPTool[Params, Result]):
    """Create a numbered step-by-step guide on a screenshot."""

    name = "create_step_guide"
    description = (
        "Create a numbered step-by-step guide on a screenshot. "
        "Automatically places numbered markers with labels and connecting arrows."
    )
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[Result]:
        assert_absolute_path(params.input_path, "input_path")
        assert_sandboxed(params.input_path)
        assert_file_exists(params.input_path)

        output_path = params.output_path or default_output_path(params.input_path, "-guide")
        assert_absolute_path(output_path, "output_path")
        assert_sandboxed(output_path)

        annotations = build_step_guide(params.steps, params.connect_steps)
        summary = annotate_image(params.input_path, output_path, annotations, params.theme)

        return MCPResult(
            success=True,
            data=Result(output_path=summary.output_path, steps=len(params.steps)),
        )
