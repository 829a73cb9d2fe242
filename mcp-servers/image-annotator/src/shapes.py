"""
Shape compilers: one pure function per annotation type.

Each compiler turns a validated annotation model into a ``Fragment``: the
reusable SVG definitions it needs (gradients, filters, arrow-head markers)
and the drawable elements themselves. Definition ids come from the
``IdGenerator`` passed in, so many annotations of one type can share a
document without id collisions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable
from xml.sax.saxutils import escape

from annotation_types import (
    ArrowAnnotation,
    BlurAnnotation,
    CalloutAnnotation,
    CircleAnnotation,
    ConnectorAnnotation,
    CurvedArrowAnnotation,
    HighlightAnnotation,
    IconAnnotation,
    LabelAnnotation,
    MarkerAnnotation,
    RectAnnotation,
)
from palette import adjust_color, resolve_color

FONT_FAMILY = "Arial, Helvetica, sans-serif"

# Average glyph advance as a fraction of font size. Text boxes are sized
# from character counts, not real font metrics.
GLYPH_WIDTH_FACTOR = 0.6

GRADIENT_DARKEN = -30
CALLOUT_PADDING = 12
CALLOUT_POINTER_SIZE = 12
MIN_ARROW_HEAD = 10


# ─── Fragment & ids ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Fragment:
    """Compiled output of one annotation."""

    defs: str = ""
    element: str = ""


class IdGenerator:
    """Per-document counter for SVG definition ids."""

    def __init__(self) -> None:
        self._count = 0

    def reset(self) -> None:
        self._count = 0

    def next(self, prefix: str = "ann") -> str:
        self._count += 1
        return f"{prefix}-{self._count}"


# ─── Markup helpers ─────────────────────────────────────────────────────────


def fmt(value: float) -> str:
    """Format a coordinate: integral values without a decimal point."""
    rounded = round(float(value), 3)
    if rounded.is_integer():
        return str(int(rounded))
    return repr(rounded)


def escape_xml(text: Any) -> str:
    """Escape text for use inside an element or attribute."""
    return escape(str(text), {'"': "&quot;", "'": "&apos;"})


def tag(name: str, attrs: dict[str, Any], body: str | None = None) -> str:
    """Render one SVG element. Attributes whose value is None are dropped."""
    parts = [name]
    for key, value in attrs.items():
        if value is None:
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = fmt(value)
        parts.append(f'{key}="{escape_xml(value)}"')
    opening = " ".join(parts)
    if body is None:
        return f"<{opening}/>"
    return f"<{opening}>{body}</{name}>"


def drop_shadow(filter_id: str, blur: float = 4, opacity: float = 0.3) -> str:
    return tag(
        "filter",
        {"id": filter_id, "x": "-50%", "y": "-50%", "width": "200%", "height": "200%"},
        tag("feDropShadow", {"dx": 2, "dy": 2, "stdDeviation": blur, "flood-opacity": opacity}),
    )


def _shadow(enabled: bool, base_id: str, defs: list[str], **kwargs: float) -> str | None:
    """Append a drop-shadow filter to ``defs`` and return its url reference."""
    if not enabled:
        return None
    shadow_id = f"{base_id}-shadow"
    defs.append(drop_shadow(shadow_id, **kwargs))
    return f"url(#{shadow_id})"


def _dash(dashed: bool, pattern: str) -> str | None:
    return pattern if dashed else None


def _arrow_head(head_id: str, size: float, color: str, filled: bool = True) -> str:
    points = f"0 0, {fmt(size)} {fmt(size * 0.35)}, 0 {fmt(size * 0.7)}"
    if filled:
        shape = tag("polygon", {"points": points, "fill": color})
    else:
        shape = tag(
            "polyline",
            {
                "points": points,
                "fill": "none",
                "stroke": color,
                "stroke-width": 2,
                "stroke-linejoin": "round",
            },
        )
    return tag(
        "marker",
        {
            "id": head_id,
            "markerWidth": size,
            "markerHeight": size * 0.7,
            "refX": size - 1,
            "refY": size * 0.35,
            "orient": "auto",
            "markerUnits": "userSpaceOnUse",
        },
        shape,
    )


def _head_size(stroke_width: float) -> float:
    return max(MIN_ARROW_HEAD, stroke_width * 3)


# ─── Marker ─────────────────────────────────────────────────────────────────


def compile_marker(ann: MarkerAnnotation, ids: IdGenerator) -> Fragment:
    """Numbered marker in filled, outline or badge (pill) style."""
    color = resolve_color(ann.color)
    marker_id = ids.next("marker")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, marker_id, defs)

    gradient_id = f"{marker_id}-gradient"
    defs.append(
        tag(
            "linearGradient",
            {"id": gradient_id, "x1": "0%", "y1": "0%", "x2": "0%", "y2": "100%"},
            tag("stop", {"offset": "0%", "stop-color": color, "stop-opacity": 1})
            + tag(
                "stop",
                {"offset": "100%", "stop-color": adjust_color(color, GRADIENT_DARKEN), "stop-opacity": 1},
            ),
        )
    )
    gradient_fill = f"url(#{gradient_id})"

    def number(fill: str) -> str:
        return tag(
            "text",
            {
                "x": ann.x,
                "y": ann.y + ann.size * 0.35,
                "text-anchor": "middle",
                "fill": fill,
                "font-size": ann.size * 0.9,
                "font-weight": "bold",
                "font-family": FONT_FAMILY,
            },
            escape_xml(ann.number),
        )

    if ann.style == "outline":
        elements = [
            tag(
                "circle",
                {
                    "cx": ann.x,
                    "cy": ann.y,
                    "r": ann.size,
                    "fill": "white",
                    "stroke": color,
                    "stroke-width": 3,
                    "filter": filter_ref,
                },
            ),
            number(color),
        ]
    elif ann.style == "badge":
        # Pill for two or more digits
        width = ann.size * 1.6 if ann.number > 9 else ann.size * 2
        height = ann.size * 2
        elements = [
            tag(
                "rect",
                {
                    "x": ann.x - width / 2,
                    "y": ann.y - height / 2,
                    "width": width,
                    "height": height,
                    "rx": height / 2,
                    "fill": gradient_fill,
                    "filter": filter_ref,
                },
            ),
            number("white"),
        ]
    else:
        elements = [
            tag("circle", {"cx": ann.x, "cy": ann.y, "r": ann.size, "fill": gradient_fill, "filter": filter_ref}),
            tag(
                "circle",
                {
                    "cx": ann.x,
                    "cy": ann.y,
                    "r": ann.size - 2,
                    "fill": "none",
                    "stroke": "rgba(255,255,255,0.3)",
                    "stroke-width": 2,
                },
            ),
            number("white"),
        ]

    return Fragment(defs="\n".join(defs), element="\n".join(elements))


# ─── Arrows ─────────────────────────────────────────────────────────────────


def compile_arrow(ann: ArrowAnnotation, ids: IdGenerator) -> Fragment:
    """Straight arrow from ``from_`` to ``to``."""
    color = resolve_color(ann.color)
    (x1, y1), (x2, y2) = ann.from_, ann.to
    arrow_id = ids.next("arrow")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, arrow_id, defs, blur=2, opacity=0.2)

    # Head styles other than filled/open draw a bare line
    head_ref = None
    if ann.head_style in ("filled", "open"):
        head_id = f"{arrow_id}-head"
        defs.append(_arrow_head(head_id, _head_size(ann.stroke_width), color, filled=ann.head_style == "filled"))
        head_ref = f"url(#{head_id})"

    element = tag(
        "line",
        {
            "x1": x1,
            "y1": y1,
            "x2": x2,
            "y2": y2,
            "stroke": color,
            "stroke-width": ann.stroke_width,
            "stroke-linecap": "round",
            "marker-end": head_ref,
            "stroke-dasharray": _dash(ann.style == "dashed", "10,5"),
            "filter": filter_ref,
        },
    )
    return Fragment(defs="\n".join(defs), element=element)


def curve_control_point(
    start: tuple[float, float], end: tuple[float, float], curve: float
) -> tuple[float, float]:
    """Midpoint pushed ``curve`` units along the segment's left-hand normal."""
    (x1, y1), (x2, y2) = start, end
    dx, dy = x2 - x1, y2 - y1
    length = math.hypot(dx, dy) or 1
    nx, ny = -dy / length, dx / length
    return (x1 + x2) / 2 + nx * curve, (y1 + y2) / 2 + ny * curve


def compile_curved_arrow(ann: CurvedArrowAnnotation, ids: IdGenerator) -> Fragment:
    color = resolve_color(ann.color)
    (x1, y1), (x2, y2) = ann.from_, ann.to
    cx, cy = curve_control_point(ann.from_, ann.to, ann.curve)
    arrow_id = ids.next("curved-arrow")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, arrow_id, defs, blur=2, opacity=0.2)

    head_id = f"{arrow_id}-head"
    defs.append(_arrow_head(head_id, _head_size(ann.stroke_width), color))

    element = tag(
        "path",
        {
            "d": f"M{fmt(x1)},{fmt(y1)} Q{fmt(cx)},{fmt(cy)} {fmt(x2)},{fmt(y2)}",
            "fill": "none",
            "stroke": color,
            "stroke-width": ann.stroke_width,
            "stroke-linecap": "round",
            "marker-end": f"url(#{head_id})",
            "filter": filter_ref,
        },
    )
    return Fragment(defs="\n".join(defs), element=element)


# ─── Callout ────────────────────────────────────────────────────────────────


def callout_box(ann: CalloutAnnotation) -> tuple[float, float, float, float, str]:
    """
    Lay out a callout.

    Returns (box_x, box_y, box_width, box_height, tail_path). The tail tip
    sits at (x, y) and the box abuts the tail on the ``pointer`` side. An
    unrecognised pointer gets no tail and a box anchored top-left at (x, y).
    """
    x, y = ann.x, ann.y
    lines = ann.text.split("\n")
    line_height = ann.font_size * 1.4
    width = ann.width or (
        max(len(line) for line in lines) * ann.font_size * GLYPH_WIDTH_FACTOR + CALLOUT_PADDING * 2
    )
    height = len(lines) * line_height + CALLOUT_PADDING * 2
    p = CALLOUT_POINTER_SIZE

    if ann.pointer == "top":
        box_x, box_y = x - width / 2, y + p
        tail = [(x - p, y + p), (x, y), (x + p, y + p)]
    elif ann.pointer == "left":
        box_x, box_y = x + p, y - height / 2
        tail = [(x + p, y - p), (x, y), (x + p, y + p)]
    elif ann.pointer == "right":
        box_x, box_y = x - width - p, y - height / 2
        tail = [(x - p, y - p), (x, y), (x - p, y + p)]
    elif ann.pointer == "bottom":
        box_x, box_y = x - width / 2, y - height - p
        tail = [(x - p, y - p), (x, y), (x + p, y - p)]
    else:
        return x, y, width, height, ""

    (ax, ay), (bx, by), (cx, cy) = tail
    tail_path = f"M{fmt(ax)},{fmt(ay)} L{fmt(bx)},{fmt(by)} L{fmt(cx)},{fmt(cy)}"
    return box_x, box_y, width, height, tail_path


def compile_callout(ann: CalloutAnnotation, ids: IdGenerator) -> Fragment:
    """Rounded text box with a triangular pointer tail."""
    border = resolve_color(ann.color)
    background = resolve_color(ann.background)
    callout_id = ids.next("callout")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, callout_id, defs, blur=4, opacity=0.15)

    box_x, box_y, width, height, tail_path = callout_box(ann)
    line_height = ann.font_size * 1.4
    text_x = box_x + CALLOUT_PADDING

    spans = "".join(
        tag("tspan", {"x": text_x, "dy": 0 if i == 0 else line_height}, escape_xml(line))
        for i, line in enumerate(ann.text.split("\n"))
    )
    parts = [
        tag(
            "rect",
            {
                "x": box_x,
                "y": box_y,
                "width": width,
                "height": height,
                "rx": 6,
                "fill": background,
                "stroke": border,
                "stroke-width": 2,
            },
        )
    ]
    if tail_path:
        parts.append(tag("path", {"d": tail_path, "fill": background, "stroke": border, "stroke-width": 2}))
    parts.append(
        tag(
            "text",
            {
                "x": text_x,
                "y": box_y + CALLOUT_PADDING + ann.font_size,
                "fill": resolve_color("darkGray"),
                "font-size": ann.font_size,
                "font-family": FONT_FAMILY,
            },
            spans,
        )
    )
    body = "\n".join(parts)
    return Fragment(defs="\n".join(defs), element=tag("g", {"filter": filter_ref}, body))


# ─── Shapes ─────────────────────────────────────────────────────────────────


def _fill(value: str) -> str:
    return "none" if value == "none" else resolve_color(value)


def compile_rect(ann: RectAnnotation, ids: IdGenerator) -> Fragment:
    rect_id = ids.next("rect")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, rect_id, defs)
    element = tag(
        "rect",
        {
            "x": ann.x,
            "y": ann.y,
            "width": ann.width,
            "height": ann.height,
            "rx": ann.corner_radius,
            "fill": _fill(ann.fill),
            "stroke": resolve_color(ann.color),
            "stroke-width": ann.stroke_width,
            "stroke-dasharray": _dash(ann.style == "dashed", "10,5"),
            "filter": filter_ref,
        },
    )
    return Fragment(defs="\n".join(defs), element=element)


def compile_circle(ann: CircleAnnotation, ids: IdGenerator) -> Fragment:
    circle_id = ids.next("circle")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, circle_id, defs)
    element = tag(
        "circle",
        {
            "cx": ann.x,
            "cy": ann.y,
            "r": ann.radius,
            "fill": _fill(ann.fill),
            "stroke": resolve_color(ann.color),
            "stroke-width": ann.stroke_width,
            "stroke-dasharray": _dash(ann.style == "dashed", "8,4"),
            "filter": filter_ref,
        },
    )
    return Fragment(defs="\n".join(defs), element=element)


def compile_label(ann: LabelAnnotation, ids: IdGenerator) -> Fragment:
    """Text label, optionally on a rounded background plate."""
    label_id = ids.next("label")
    defs: list[str] = []
    elements: list[str] = []

    text_width = len(ann.text) * ann.font_size * GLYPH_WIDTH_FACTOR
    text_height = ann.font_size * 1.2

    if ann.background:
        # Only a plate can cast a shadow
        filter_ref = _shadow(ann.shadow, label_id, defs, blur=3, opacity=0.15)
        elements.append(
            tag(
                "rect",
                {
                    "x": ann.x - ann.padding,
                    "y": ann.y - text_height - ann.padding + 4,
                    "width": text_width + ann.padding * 2,
                    "height": text_height + ann.padding * 2,
                    "rx": ann.corner_radius,
                    "fill": resolve_color(ann.background),
                    "filter": filter_ref,
                },
            )
        )

    elements.append(
        tag(
            "text",
            {
                "x": ann.x,
                "y": ann.y,
                "fill": resolve_color(ann.color),
                "font-size": ann.font_size,
                "font-weight": ann.font_weight,
                "font-family": FONT_FAMILY,
            },
            escape_xml(ann.text),
        )
    )
    return Fragment(defs="\n".join(defs), element="\n".join(elements))


def compile_highlight(ann: HighlightAnnotation, ids: IdGenerator) -> Fragment:
    element = tag(
        "rect",
        {
            "x": ann.x,
            "y": ann.y,
            "width": ann.width,
            "height": ann.height,
            "rx": ann.corner_radius,
            "fill": resolve_color(ann.color),
            "opacity": ann.opacity,
        },
    )
    return Fragment(element=element)


def compile_blur(ann: BlurAnnotation, ids: IdGenerator) -> Fragment:
    """
    Gray rectangle run through a Gaussian blur.

    The blur applies to the flat gray fill, not to the pixels underneath;
    composited on top it hides the region rather than softening it.
    """
    blur_id = ids.next("blur")
    defs = tag("filter", {"id": blur_id}, tag("feGaussianBlur", {"stdDeviation": ann.intensity}))
    element = tag(
        "rect",
        {
            "x": ann.x,
            "y": ann.y,
            "width": ann.width,
            "height": ann.height,
            "fill": "#808080",
            "filter": f"url(#{blur_id})",
        },
    )
    return Fragment(defs=defs, element=element)


def compile_connector(ann: ConnectorAnnotation, ids: IdGenerator) -> Fragment:
    (x1, y1), (x2, y2) = ann.from_, ann.to
    element = tag(
        "line",
        {
            "x1": x1,
            "y1": y1,
            "x2": x2,
            "y2": y2,
            "stroke": resolve_color(ann.color),
            "stroke-width": ann.stroke_width,
            "stroke-dasharray": _dash(ann.style == "dashed", "6,4"),
        },
    )
    return Fragment(element=element)


# ─── Icons ──────────────────────────────────────────────────────────────────

_WHITE_STROKE = {"stroke": "white", "stroke-width": 3, "stroke-linecap": "round"}


def _dot(x: float, y: float) -> str:
    return tag("circle", {"cx": x, "cy": y, "r": 2, "fill": "white"})


def _stroke(x1: float, y1: float, x2: float, y2: float) -> str:
    return tag("line", {"x1": x1, "y1": y1, "x2": x2, "y2": y2, **_WHITE_STROKE})


def _glyph_check(x: float, y: float, s: float) -> str:
    d = (
        f"M{fmt(x - s * 0.3)},{fmt(y)} "
        f"L{fmt(x - s * 0.1)},{fmt(y + s * 0.25)} "
        f"L{fmt(x + s * 0.35)},{fmt(y - s * 0.25)}"
    )
    return tag("path", {"d": d, "fill": "none", **_WHITE_STROKE, "stroke-linejoin": "round"})


def _glyph_cross(x: float, y: float, s: float) -> str:
    return _stroke(x - s * 0.2, y - s * 0.2, x + s * 0.2, y + s * 0.2) + _stroke(
        x + s * 0.2, y - s * 0.2, x - s * 0.2, y + s * 0.2
    )


def _glyph_warning(x: float, y: float, s: float) -> str:
    return _stroke(x, y - s * 0.15, x, y + s * 0.05) + _dot(x, y + s * 0.25)


def _glyph_info(x: float, y: float, s: float) -> str:
    return _dot(x, y - s * 0.2) + _stroke(x, y - s * 0.05, x, y + s * 0.25)


def _glyph_question(x: float, y: float, s: float) -> str:
    d = (
        f"M{fmt(x - s * 0.15)},{fmt(y - s * 0.25)} "
        f"Q{fmt(x - s * 0.15)},{fmt(y - s * 0.4)} {fmt(x)},{fmt(y - s * 0.4)} "
        f"Q{fmt(x + s * 0.2)},{fmt(y - s * 0.4)} {fmt(x + s * 0.2)},{fmt(y - s * 0.2)} "
        f"Q{fmt(x + s * 0.2)},{fmt(y - s * 0.05)} {fmt(x)},{fmt(y)}"
    )
    path = tag(
        "path",
        {"d": d, "fill": "none", "stroke": "white", "stroke-width": 2.5, "stroke-linecap": "round"},
    )
    return path + _dot(x, y + s * 0.2)


GLYPHS: dict[str, Callable[[float, float, float], str]] = {
    "check": _glyph_check,
    "checkmark": _glyph_check,
    "cross": _glyph_cross,
    "x": _glyph_cross,
    "warning": _glyph_warning,
    "!": _glyph_warning,
    "info": _glyph_info,
    "i": _glyph_info,
    "question": _glyph_question,
    "?": _glyph_question,
}


def compile_icon(ann: IconAnnotation, ids: IdGenerator) -> Fragment:
    """Filled circular badge with a white glyph; unknown glyphs leave it plain."""
    icon_id = ids.next("icon")
    defs: list[str] = []
    filter_ref = _shadow(ann.shadow, icon_id, defs)

    glyph = GLYPHS.get(ann.icon or "")
    body = tag("circle", {"cx": ann.x, "cy": ann.y, "r": ann.size, "fill": resolve_color(ann.color)})
    if glyph:
        body += glyph(ann.x, ann.y, ann.size)
    return Fragment(defs="\n".join(defs), element=tag("g", {"filter": filter_ref}, body))
