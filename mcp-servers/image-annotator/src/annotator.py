"""
Annotate images: measure the source, build the overlay, composite it.

Also holds the annotation list builders behind the convenience tools
(step guides, single-shape highlights, callouts, blur masks).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from annotation_types import AnnotateResult, AnnotationSpec, ImageMetadata, Step
from compositor import composite_overlay, read_metadata
from mcp_base import ErrorCodes, MCPError
from svg_builder import build_svg

_logger = logging.getLogger("annotator.annotator")

STEP_COLORS: tuple[str, ...] = ("primary", "green", "orange", "purple", "cyan")

HighlightShape = Literal["circle", "rect", "highlight"]
LabelPosition = Literal["top", "bottom", "left", "right"]


def default_output_path(input_path: str, suffix: str = "-annotated") -> str:
    """``/dir/shot.png`` -> ``/dir/shot<suffix>.png``."""
    directory = os.path.dirname(input_path)
    stem, ext = os.path.splitext(os.path.basename(input_path))
    return os.path.join(directory, f"{stem}{suffix}{ext}")


def get_image_dimensions(image_path: str) -> ImageMetadata:
    if not os.path.exists(image_path):
        raise MCPError(ErrorCodes.FILE_NOT_FOUND, f"File not found: {image_path}")
    return read_metadata(image_path)


def annotate_image(
    input_path: str,
    output_path: str,
    annotations: Sequence[AnnotationSpec | Mapping[str, Any]],
    theme: str | None = None,
) -> AnnotateResult:
    """
    Draw ``annotations`` over the image at ``input_path``.

    The overlay is built at the source's exact pixel size. Raises MCPError
    with FILE_NOT_FOUND when the input is missing; invalid descriptors and
    image I/O failures surface as their own MCPError subclasses.
    """
    if not os.path.exists(input_path):
        raise MCPError(ErrorCodes.FILE_NOT_FOUND, f"Input file not found: {input_path}")

    metadata = read_metadata(input_path)
    svg = build_svg(metadata.width, metadata.height, annotations, theme)
    composite_overlay(input_path, svg, output_path)

    _logger.info(
        "Annotated %s -> %s (%dx%d, %d annotations)",
        input_path,
        output_path,
        metadata.width,
        metadata.height,
        len(annotations),
    )
    return AnnotateResult(
        output_path=output_path,
        width=metadata.width,
        height=metadata.height,
        annotation_count=len(annotations),
    )


# ─── Annotation list builders ───────────────────────────────────────────────


def build_step_guide(steps: Sequence[Step], connect_steps: bool = True) -> list[dict[str, Any]]:
    """Numbered markers with arrow-pointed labels, optionally chained by connectors."""
    annotations: list[dict[str, Any]] = []

    for i, step in enumerate(steps):
        color = step.color or STEP_COLORS[i % len(STEP_COLORS)]
        label_x, label_y = step.x + 50, step.y

        annotations.append(
            {"type": "marker", "x": step.x, "y": step.y, "number": i + 1, "color": color, "size": 24}
        )
        annotations.append(
            {
                "type": "arrow",
                "from": [step.x + 28, step.y],
                "to": [label_x - 5, label_y],
                "color": color,
                "strokeWidth": 2,
            }
        )
        annotations.append(
            {
                "type": "label",
                "x": label_x,
                "y": label_y + 6,
                "text": step.label,
                "color": "darkGray",
                "fontSize": 16,
                "background": "white",
                "shadow": True,
            }
        )

        if connect_steps and i < len(steps) - 1:
            nxt = steps[i + 1]
            annotations.append(
                {
                    "type": "connector",
                    "from": [step.x, step.y + 30],
                    "to": [nxt.x, nxt.y - 30],
                    "color": "gray",
                }
            )

    return annotations


def build_highlight_area(
    shape: HighlightShape,
    x: float,
    y: float,
    width: float,
    height: float | None = None,
    color: str = "red",
    label: str | None = None,
    label_position: LabelPosition = "right",
) -> list[dict[str, Any]]:
    """One shape around a region, plus an optional label beside it."""
    h = height or width

    if shape == "circle":
        annotations = [
            {"type": "circle", "x": x, "y": y, "radius": width / 2, "color": color, "strokeWidth": 3}
        ]
    elif shape == "highlight":
        annotations = [
            {"type": "highlight", "x": x, "y": y, "width": width, "height": h, "color": "yellow", "opacity": 0.35}
        ]
    else:
        annotations = [
            {"type": "rect", "x": x, "y": y, "width": width, "height": h, "color": color, "strokeWidth": 3}
        ]

    if label:
        if label_position == "top":
            label_x, label_y = x + width / 2, y - 10
        elif label_position == "bottom":
            label_x, label_y = x + width / 2, y + h + 20
        elif label_position == "left":
            label_x, label_y = x - 10, y + h / 2
        else:
            label_x, label_y = x + width + 15, y + h / 2

        annotations.append(
            {
                "type": "label",
                "x": label_x,
                "y": label_y,
                "text": label,
                "color": color,
                "fontSize": 16,
                "background": "white",
                "shadow": True,
            }
        )

    return annotations


def build_callout(
    x: float,
    y: float,
    text: str,
    pointer: LabelPosition = "left",
    color: str = "primary",
    background: str = "white",
) -> list[dict[str, Any]]:
    return [
        {
            "type": "callout",
            "x": x,
            "y": y,
            "text": text,
            "pointer": pointer,
            "color": color,
            "background": background,
            "shadow": True,
        }
    ]


def build_blur(x: float, y: float, width: float, height: float, intensity: float = 8) -> list[dict[str, Any]]:
    return [{"type": "blur", "x": x, "y": y, "width": width, "height": height, "intensity": intensity}]
