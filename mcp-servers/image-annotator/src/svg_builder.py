"""
Document assembler: turns an ordered list of annotations into one SVG overlay.

The build runs in two passes. The first canonicalises each annotation's
type, applies theme defaults and validates it into its per-type model, so a
malformed descriptor fails the whole request before anything is compiled.
The second pass runs the shape compilers in input order; that order is the
paint order of the overlay.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from annotation_types import (
    AnnotationSpec,
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
from mcp_base import ErrorCodes, MCPError
from palette import get_theme, merge_with_theme
from shapes import (
    Fragment,
    IdGenerator,
    compile_arrow,
    compile_blur,
    compile_callout,
    compile_circle,
    compile_connector,
    compile_curved_arrow,
    compile_highlight,
    compile_icon,
    compile_label,
    compile_marker,
    compile_rect,
    fmt,
)

_logger = logging.getLogger("annotator.svg_builder")


class InvalidDescriptorError(MCPError):
    """An annotation could not be validated for its type."""

    def __init__(self, index: int, message: str) -> None:
        super().__init__(ErrorCodes.INVALID_PARAMS, f"Invalid annotation at index {index}: {message}")
        self.index = index


@dataclass(frozen=True)
class ShapeKind:
    """A drawable annotation type: its model and its compiler."""

    model: type[BaseModel]
    compile: Callable[[Any, IdGenerator], Fragment]


SHAPE_KINDS: dict[str, ShapeKind] = {
    "marker": ShapeKind(MarkerAnnotation, compile_marker),
    "arrow": ShapeKind(ArrowAnnotation, compile_arrow),
    "curved-arrow": ShapeKind(CurvedArrowAnnotation, compile_curved_arrow),
    "callout": ShapeKind(CalloutAnnotation, compile_callout),
    "rect": ShapeKind(RectAnnotation, compile_rect),
    "circle": ShapeKind(CircleAnnotation, compile_circle),
    "label": ShapeKind(LabelAnnotation, compile_label),
    "highlight": ShapeKind(HighlightAnnotation, compile_highlight),
    "blur": ShapeKind(BlurAnnotation, compile_blur),
    "connector": ShapeKind(ConnectorAnnotation, compile_connector),
    "icon": ShapeKind(IconAnnotation, compile_icon),
}

TYPE_ALIASES: dict[str, str] = {
    "number": "marker",
    "curvedArrow": "curved-arrow",
    "rectangle": "rect",
    "box": "rect",
    "text": "label",
    "line": "connector",
}

ANNOTATION_TYPES: tuple[str, ...] = tuple(SHAPE_KINDS)


def canonical_type(annotation_type: str) -> str | None:
    """Resolve aliases; None for types with no compiler."""
    name = TYPE_ALIASES.get(annotation_type, annotation_type)
    return name if name in SHAPE_KINDS else None


def _raw_type(annotation: AnnotationSpec | Mapping[str, Any]) -> Any:
    if isinstance(annotation, AnnotationSpec):
        return annotation.type
    if isinstance(annotation, Mapping):
        return annotation.get("type")
    return None


def _as_spec(index: int, annotation: AnnotationSpec | Mapping[str, Any]) -> AnnotationSpec:
    if isinstance(annotation, AnnotationSpec):
        return annotation
    try:
        return AnnotationSpec.model_validate(annotation)
    except ValidationError as e:
        raise InvalidDescriptorError(index, str(e)) from e


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


class SvgDocumentBuilder:
    """
    Builds SVG overlays of a fixed canvas size.

    The id generator is reset on every ``build`` call, so ids are
    reproducible within one document. Builds on one instance must not be
    interleaved.
    """

    def __init__(self, width: int, height: int, theme: str | None = None) -> None:
        self.width = width
        self.height = height
        self.theme_name = theme
        self._ids = IdGenerator()

    def resolve(
        self, annotations: Iterable[AnnotationSpec | Mapping[str, Any]]
    ) -> list[tuple[ShapeKind, BaseModel]]:
        """Validate every annotation, skipping unknown types."""
        theme = get_theme(self.theme_name)
        resolved: list[tuple[ShapeKind, BaseModel]] = []

        for index, raw in enumerate(annotations):
            # Type is checked before the entry is validated
            raw_type = _raw_type(raw)
            kind_name = canonical_type(raw_type) if isinstance(raw_type, str) else None
            if kind_name is None:
                _logger.warning("Unknown annotation type: %s (index %d), skipping", raw_type, index)
                continue

            spec = _as_spec(index, raw)
            kind = SHAPE_KINDS[kind_name]
            fields = merge_with_theme(kind_name, spec.explicit_fields(), theme)
            try:
                resolved.append((kind, kind.model.model_validate(fields)))
            except ValidationError as e:
                raise InvalidDescriptorError(index, f"{spec.type}: {_first_error(e)}") from e

        return resolved

    def compile(self, annotations: Iterable[AnnotationSpec | Mapping[str, Any]]) -> list[Fragment]:
        """Compile annotations to fragments, in input order."""
        resolved = self.resolve(annotations)
        self._ids.reset()
        return [kind.compile(model, self._ids) for kind, model in resolved]

    def build(self, annotations: Iterable[AnnotationSpec | Mapping[str, Any]]) -> str:
        """Return the complete SVG document."""
        fragments = self.compile(annotations)
        defs = "\n".join(f.defs for f in fragments if f.defs)
        elements = "\n".join(f.element for f in fragments if f.element)
        width, height = fmt(self.width), fmt(self.height)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
            'xmlns="http://www.w3.org/2000/svg">\n'
            f"<defs>\n{defs}\n</defs>\n"
            f"{elements}\n"
            "</svg>\n"
        )


def build_svg(
    width: int,
    height: int,
    annotations: Iterable[AnnotationSpec | Mapping[str, Any]],
    theme: str | None = None,
) -> str:
    """Build the SVG overlay for ``annotations`` on a width x height canvas."""
    return SvgDocumentBuilder(width, height, theme).build(annotations)
