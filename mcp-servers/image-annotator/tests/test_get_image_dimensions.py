"""Tests for image-annotator.get_image_dimensions tool."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from mcp_base import ErrorCodes, MCPError
from tools.get_image_dimensions import GetImageDimensions


@pytest.fixture()
def tool() -> GetImageDimensions:
    return GetImageDimensions()


async def test_png_dimensions(tool: GetImageDimensions, large_image: Path) -> None:
    """Should report width, height and format."""
    result = await tool.execute(tool.get_params_model()(image_path=str(large_image)))

    assert result.success is True
    assert result.data is not None
    assert result.data.width == 640
    assert result.data.height == 480
    assert result.data.format == "png"


async def test_jpeg_format(tool: GetImageDimensions, tmp_dir: Path) -> None:
    """Format is reported in lower case as Pillow names it."""
    img = tmp_dir / "photo.jpg"
    Image.new("RGB", (33, 21), "blue").save(img)

    result = await tool.execute(tool.get_params_model()(image_path=str(img)))

    assert result.data is not None
    assert (result.data.width, result.data.height) == (33, 21)
    assert result.data.format == "jpeg"


async def test_missing_file(tool: GetImageDimensions, tmp_dir: Path) -> None:
    """Should raise FILE_NOT_FOUND."""
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(tool.get_params_model()(image_path=str(tmp_dir / "nope.png")))

    assert exc_info.value.code == ErrorCodes.FILE_NOT_FOUND


async def test_not_an_image(tool: GetImageDimensions, tmp_dir: Path) -> None:
    """Undecodable files surface as IMAGE_IO_ERROR."""
    bogus = tmp_dir / "notes.png"
    bogus.write_text("definitely not a png")

    with pytest.raises(MCPError) as exc_info:
        await tool.execute(tool.get_params_model()(image_path=str(bogus)))

    assert exc_info.value.code == ErrorCodes.IMAGE_IO_ERROR


async def test_relative_path_rejected(tool: GetImageDimensions) -> None:
    """Should reject relative paths."""
    with pytest.raises(ValueError, match="absolute"):
        await tool.execute(tool.get_params_model()(image_path="photo.png"))


async def test_outside_sandbox(tool: GetImageDimensions) -> None:
    """Should reject paths outside the sandbox."""
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(tool.get_params_model()(image_path="/etc/hosts"))

    assert exc_info.value.code == ErrorCodes.SANDBOX_VIOLATION
