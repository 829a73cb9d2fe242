"""
get_image_dimensions — Report width, height and format of an image.

Non-destructive: no confirmation required.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcp_base import MCPResult, MCPTool
from validation import assert_absolute_path, assert_sandboxed
from annotation_types import ImageMetadata
from annotator import get_image_dimensions


class Params(BaseModel):
    """Parameters for get_image_dimensions."""

    image_path: str = Field(description="Absolute path to the image")


class GetImageDimensions(MCPTool[Params, ImageMetadata]):
    """Measure an image so annotation coordinates can be planned."""

    name = "get_image_dimensions"
    description = (
        "Get width, height, and format of an image. "
        "Essential for calculating annotation coordinates."
    )
    confirmation_required = False
    undo_supported = False

    async def execute(self, params: Params) -> MCPResult[ImageMetadata]:
        assert_absolute_path(params.image_path, "image_path")
        assert_sandboxed(params.image_path)

        return MCPResult(success=True, data=get_image_dimensions(params.image_path))
