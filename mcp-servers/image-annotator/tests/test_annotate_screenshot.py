"""Tests for image-annotator.annotate_screenshot tool."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from mcp_base import ErrorCodes, MCPError
from tools.annotate_screenshot import AnnotateScreenshot

RED_SQUARE = {"type": "rect", "x": 10, "y": 10, "width": 40, "height": 40, "fill": "red"}


@pytest.fixture()
def tool() -> AnnotateScreenshot:
    return AnnotateScreenshot()


def _params(tool: AnnotateScreenshot, **kwargs: object):
    return tool.get_params_model()(**kwargs)


async def test_annotates_and_reports_size(tool: AnnotateScreenshot, sample_image: Path, tmp_dir: Path) -> None:
    """Should write the composite at the source size and report it."""
    out = tmp_dir / "out.png"
    result = await tool.execute(
        _params(tool, input_path=str(sample_image), output_path=str(out), annotations=[RED_SQUARE])
    )

    assert result.success is True
    assert result.data is not None
    assert result.data.output_path == str(out)
    assert (result.data.width, result.data.height) == (100, 100)
    assert result.data.annotation_count == 1
    assert result.data.theme is None

    with Image.open(out) as img:
        assert img.size == (100, 100)
        r, g, b = img.convert("RGB").getpixel((30, 30))
        assert r > 200 and g < 120 and b < 120
        assert img.convert("RGB").getpixel((80, 80)) == (255, 255, 255)


async def test_input_left_untouched(tool: AnnotateScreenshot, sample_image: Path) -> None:
    """Should never modify the source image."""
    before = sample_image.read_bytes()
    await tool.execute(_params(tool, input_path=str(sample_image), annotations=[RED_SQUARE]))
    assert sample_image.read_bytes() == before


async def test_default_output_path(tool: AnnotateScreenshot, sample_image: Path, tmp_dir: Path) -> None:
    """Should write <stem>-annotated<ext> beside the input when no output is given."""
    result = await tool.execute(_params(tool, input_path=str(sample_image), annotations=[RED_SQUARE]))

    assert result.data is not None
    assert result.data.output_path == str(tmp_dir / "photo-annotated.png")
    assert (tmp_dir / "photo-annotated.png").exists()


async def test_output_format_follows_extension(
    tool: AnnotateScreenshot, sample_image: Path, tmp_dir: Path
) -> None:
    """A .jpg output path should produce a JPEG file."""
    out = tmp_dir / "photo.jpg"
    await tool.execute(_params(tool, input_path=str(sample_image), output_path=str(out), annotations=[RED_SQUARE]))

    with Image.open(out) as img:
        assert img.format == "JPEG"


async def test_alpha_preserved(tool: AnnotateScreenshot, transparent_image: Path, tmp_dir: Path) -> None:
    """Transparent PNG sources keep their alpha band; untouched pixels stay clear."""
    out = tmp_dir / "t-out.png"
    await tool.execute(
        _params(tool, input_path=str(transparent_image), output_path=str(out), annotations=[RED_SQUARE])
    )

    with Image.open(out) as img:
        assert img.mode == "RGBA"
        assert img.size == (120, 80)
        assert img.getpixel((100, 70))[3] == 0
        assert img.getpixel((30, 30))[3] == 255


async def test_every_annotation_type(tool: AnnotateScreenshot, large_image: Path, tmp_dir: Path) -> None:
    """All annotation types should composite in one pass."""
    annotations = [
        {"type": "marker", "x": 50, "y": 50, "number": 1},
        {"type": "marker", "x": 120, "y": 50, "number": 12, "style": "badge"},
        {"type": "arrow", "from": [10, 10], "to": [100, 100], "style": "dashed"},
        {"type": "curved-arrow", "from": [10, 200], "to": [200, 200]},
        {"type": "callout", "x": 300, "y": 200, "text": "Line one\nLine two", "pointer": "top"},
        {"type": "rect", "x": 5, "y": 5, "width": 40, "height": 20},
        {"type": "circle", "x": 300, "y": 100, "radius": 25, "style": "dashed"},
        {"type": "label", "x": 20, "y": 300, "text": "Label", "background": "white"},
        {"type": "highlight", "x": 0, "y": 0, "width": 50, "height": 50},
        {"type": "blur", "x": 400, "y": 400, "width": 80, "height": 20},
        {"type": "connector", "from": [0, 0], "to": [50, 50]},
        {"type": "icon", "x": 500, "y": 50, "icon": "question"},
    ]
    out = tmp_dir / "all.png"
    result = await tool.execute(
        _params(tool, input_path=str(large_image), output_path=str(out), annotations=annotations)
    )

    assert result.data is not None
    assert result.data.annotation_count == len(annotations)
    with Image.open(out) as img:
        assert img.size == (640, 480)


async def test_theme_passed_through(tool: AnnotateScreenshot, sample_image: Path) -> None:
    """Should echo the applied theme."""
    result = await tool.execute(
        _params(
            tool,
            input_path=str(sample_image),
            theme="tutorial",
            annotations=[{"type": "marker", "x": 50, "y": 50, "number": 1}],
        )
    )

    assert result.data is not None
    assert result.data.theme == "tutorial"


async def test_empty_annotation_list(tool: AnnotateScreenshot, sample_image: Path, tmp_dir: Path) -> None:
    """No annotations still writes an unchanged copy of the image."""
    out = tmp_dir / "copy.png"
    result = await tool.execute(_params(tool, input_path=str(sample_image), output_path=str(out), annotations=[]))

    assert result.data is not None
    assert result.data.annotation_count == 0
    with Image.open(out) as img:
        assert img.convert("RGB").getpixel((50, 50)) == (255, 255, 255)


async def test_unknown_type_skipped_but_counted(tool: AnnotateScreenshot, sample_image: Path) -> None:
    """Unknown types are skipped, not fatal; the count reports what was supplied."""
    result = await tool.execute(
        _params(tool, input_path=str(sample_image), annotations=[RED_SQUARE, {"type": "sparkle", "x": 1, "y": 1}])
    )

    assert result.data is not None
    assert result.data.annotation_count == 2


async def test_invalid_descriptor_writes_nothing(tool: AnnotateScreenshot, sample_image: Path, tmp_dir: Path) -> None:
    """A malformed annotation fails the call before any output is written."""
    out = tmp_dir / "never.png"
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(
            _params(
                tool,
                input_path=str(sample_image),
                output_path=str(out),
                annotations=[RED_SQUARE, {"type": "marker", "x": 1, "y": 1}],
            )
        )

    assert exc_info.value.code == ErrorCodes.INVALID_PARAMS
    assert not out.exists()


async def test_missing_input(tool: AnnotateScreenshot, tmp_dir: Path) -> None:
    """Should raise FILE_NOT_FOUND for a missing input."""
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(_params(tool, input_path=str(tmp_dir / "missing.png"), annotations=[]))

    assert exc_info.value.code == ErrorCodes.FILE_NOT_FOUND


async def test_relative_path_rejected(tool: AnnotateScreenshot) -> None:
    """Should reject relative paths."""
    with pytest.raises(ValueError, match="absolute"):
        await tool.execute(_params(tool, input_path="photo.png", annotations=[]))


async def test_input_outside_sandbox(tool: AnnotateScreenshot) -> None:
    """Should reject inputs outside the sandbox."""
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(_params(tool, input_path="/etc/hosts", annotations=[]))

    assert exc_info.value.code == ErrorCodes.SANDBOX_VIOLATION


async def test_output_outside_sandbox(tool: AnnotateScreenshot, sample_image: Path) -> None:
    """Should reject output paths outside the sandbox."""
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(
            _params(tool, input_path=str(sample_image), output_path="/etc/annotated.png", annotations=[])
        )

    assert exc_info.value.code == ErrorCodes.SANDBOX_VIOLATION


def test_unknown_theme_rejected_by_schema(tool: AnnotateScreenshot) -> None:
    """Theme names are a closed set at the tool boundary."""
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        _params(tool, input_path="/tmp/x.png", theme="neon", annotations=[])
