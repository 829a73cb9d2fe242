"""
annotate_screenshot — Draw a list of annotations onto a screenshot.

Mutable: writes a new image file next to the input (or at output_path).
The input image is never modified.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_file_exists, assert_sandboxed
from annotation_types import AnnotationSpec, ThemeName
from annotator import annotate_image, default_output_path


class Params(BaseModel):
    """Parameters for annotate_screenshot."""

    input_path: str = Field(description="Absolute path to the input screenshot")
    output_path: str | None = Field(
        default=None, description="Output path (optional, defaults to input-annotated.png)"
    )
    theme: ThemeName | None = Field(
        default=None, description="Apply a preset theme for consistent styling"
    )
    annotations: list[AnnotationSpec] = Field(description="Array of annotation objects")


class Result(BaseModel):
    """Return value for annotate_screenshot."""

    output_path: str
    width: int
    height: int
    annotation_count: int
    theme: str | None = None


class AnnotateScreenshot(MCPTool[Params, Result]):
    """Add annotations to a screenshot image."""

    name = "annotate_screenshot"
    description = (
        "Add professional annotations to a screenshot image.\n\n"
        "Annotation types: marker (numbered circles), arrow, curved-arrow, "
        "callout (speech bubbles), rect, circle, label, highlight "
        "(semi-transparent overlay), blur (hide sensitive content), "
        "connector (dashed line), icon (check, x, warning, info, question).\n\n"
        "Themes: documentation, tutorial, bugReport, highlight\n\n"
        "Colors: red, orange, yellow, green, blue, purple, pink, cyan, teal, "
        "white, black, gray, lightGray, darkGray, success, warning, error, info, "
        "primary, secondary, accent, or any hex color."
    )
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[Result]:
        """Composite the annotations and report the written file."""
        assert_absolute_path(params.input_path, "input_path")
        assert_sandboxed(params.input_path)
        assert_file_exists(params.input_path)

        output_path = params.output_path or default_output_path(params.input_path)
        assert_absolute_path(output_path, "output_path")
        assert_sandboxed(output_path)

        summary = annotate_image(params.input_path, output_path, params.annotations, params.theme)
        return MCPResult(
            success=True,
            data=Result(**summary.model_dump(), theme=params.theme),
        )
