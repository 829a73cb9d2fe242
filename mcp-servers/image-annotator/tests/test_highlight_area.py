"""Tests for image-annotator.highlight_area tool and its annotation builder."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from annotator import build_highlight_area
from mcp_base import ErrorCodes, MCPError
from tools.highlight_area import HighlightArea


@pytest.fixture()
def tool() -> HighlightArea:
    return HighlightArea()


class TestBuildHighlightArea:
    def test_circle_uses_half_width_as_radius(self) -> None:
        (circle,) = build_highlight_area("circle", 50, 60, 40)
        assert circle["type"] == "circle"
        assert circle["radius"] == 20
        assert circle["color"] == "red"

    def test_rect_defaults_to_square(self) -> None:
        (rect,) = build_highlight_area("rect", 10, 10, 30, color="blue")
        assert rect["type"] == "rect"
        assert (rect["width"], rect["height"]) == (30, 30)
        assert rect["color"] == "blue"

    def test_highlight_is_yellow_overlay(self) -> None:
        (overlay,) = build_highlight_area("highlight", 0, 0, 100, 20, color="red")
        assert overlay["type"] == "highlight"
        assert overlay["color"] == "yellow"
        assert overlay["opacity"] == 0.35

    @pytest.mark.parametrize(
        ("position", "expected"),
        [
            ("right", (125, 30)),
            ("left", (0, 30)),
            ("top", (60, 0)),
            ("bottom", (60, 70)),
        ],
    )
    def test_label_positions(self, position: str, expected: tuple[float, float]) -> None:
        annotations = build_highlight_area("rect", 10, 10, 100, 40, label="Here", label_position=position)
        label = annotations[-1]
        assert label["type"] == "label"
        assert (label["x"], label["y"]) == expected
        assert label["background"] == "white"

    def test_no_label(self) -> None:
        assert len(build_highlight_area("rect", 0, 0, 10)) == 1


async def test_writes_highlighted_image(tool: HighlightArea, sample_image: Path, tmp_dir: Path) -> None:
    """Should write <stem>-highlighted<ext>."""
    result = await tool.execute(
        tool.get_params_model()(
            input_path=str(sample_image), shape="circle", x=50, y=50, width=40, label="Look"
        )
    )

    assert result.success is True
    assert result.data is not None
    assert result.data.output_path == str(tmp_dir / "photo-highlighted.png")
    assert (tmp_dir / "photo-highlighted.png").exists()


async def test_missing_input(tool: HighlightArea, tmp_dir: Path) -> None:
    with pytest.raises(MCPError) as exc_info:
        await tool.execute(
            tool.get_params_model()(input_path=str(tmp_dir / "gone.png"), shape="rect", x=0, y=0, width=5)
        )

    assert exc_info.value.code == ErrorCodes.FILE_NOT_FOUND


def test_rejects_unknown_shape(tool: HighlightArea) -> None:
    with pytest.raises(ValidationError):
        tool.get_params_model()(input_path="/tmp/a.png", shape="star", x=0, y=0, width=5)


def test_rejects_zero_width(tool: HighlightArea) -> None:
    with pytest.raises(ValidationError):
        tool.get_params_model()(input_path="/tmp/a.png", shape="rect", x=0, y=0, width=0)
