"""Tests for image-annotator.blur_area tool."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image
from pydantic import ValidationError

from annotator import build_blur
from mcp_base import ErrorCodes, MCPError
from tools.blur_area import BlurArea


@pytest.fixture()
def tool() -> BlurArea:
    return BlurArea()


def test_builder() -> None:
    assert build_blur(1, 2, 3, 4) == [
        {"type": "blur", "x": 1, "y": 2, "width": 3, "height": 4, "intensity": 8}
    ]


async def test_writes_blurred_image(tool: BlurArea, sample_image: Path, tmp_dir: Path) -> None:
    """Should write <stem>-blurred<ext> at the source size."""
    result = await tool.execute(
        tool.get_params_model()(input_path=str(sample_image), x=10, y=10, width=50, height=20, intensity=12)
    )

    assert result.success is True
    assert result.data is not None
    assert result.data.output_path == str(tmp_dir / "photo-blurred.png")
    with Image.open(tmp_dir / "photo-blurred.png") as img:
        assert img.size == (100, 100)
        # The mask covers the region; the far corner keeps the source pixels.
        assert img.convert("RGB").getpixel((95, 95)) == (255, 255, 255)
        assert img.convert("RGB").getpixel((35, 20)) != (255, 255, 255)


async def test_outside_sandbox(tool: BlurArea) -> None:
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(tool.get_params_model()(input_path="/etc/hosts", x=0, y=0, width=5, height=5))

    assert exc_info.value.code == ErrorCodes.SANDBOX_VIOLATION


def test_rejects_negative_intensity(tool: BlurArea) -> None:
    with pytest.raises(ValidationError):
        tool.get_params_model()(input_path="/tmp/a.png", x=0, y=0, width=5, height=5, intensity=-1)
