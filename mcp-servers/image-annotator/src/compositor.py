"""
Raster side of annotation: read image metadata and composite an SVG overlay.

The overlay is rasterised with cairosvg at the source image's exact pixel
size and alpha-composited onto it with Pillow, anchored top-left. Output is
written to a temporary file beside the target and renamed into place, so a
failed composite never leaves a partial file at ``output_path``.
"""

from __future__ import annotations

import io
import logging
import os
import stat
import tempfile

import cairosvg
from PIL import Image

from annotation_types import ImageMetadata
from mcp_base import ErrorCodes, MCPError

_logger = logging.getLogger("annotator.compositor")

# Formats Pillow cannot write with an alpha band.
_NO_ALPHA_FORMATS = frozenset({"JPEG", "BMP", "PPM", "EPS", "PCX"})

# Errors Pillow raises for unreadable or oversized sources
_READ_ERRORS = (OSError, Image.DecompressionBombError)


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


_UMASK = _read_umask()


class ImageIOError(MCPError):
    """Reading, rasterising or writing an image failed."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCodes.IMAGE_IO_ERROR, message)


def read_metadata(path: str) -> ImageMetadata:
    """Measure an image without decoding its pixels."""
    try:
        with Image.open(path) as image:
            width, height = image.size
            image_format = (image.format or "unknown").lower()
    except _READ_ERRORS as e:
        raise ImageIOError(f"Cannot read image {path}: {e}") from e
    return ImageMetadata(width=width, height=height, format=image_format)


def render_overlay(svg: str, width: int, height: int) -> Image.Image:
    """Rasterise an SVG document to an RGBA image of the given size."""
    png_bytes = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=width,
        output_height=height,
    )
    overlay = Image.open(io.BytesIO(png_bytes))
    return overlay.convert("RGBA")


def _output_format(output_path: str, source_format: str | None) -> str:
    ext = os.path.splitext(output_path)[1].lower()
    return Image.registered_extensions().get(ext) or source_format or "PNG"


def _output_mode(output_path: str) -> int:
    """Keep an existing target's permissions; new files get the default for the umask."""
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def composite_overlay(path: str, svg: str, output_path: str) -> None:
    """Composite ``svg`` over the image at ``path`` and write ``output_path``."""
    tmp_path: str | None = None
    try:
        with Image.open(path) as source:
            source.load()
            has_alpha = source.has_transparency_data
            image_format = _output_format(output_path, source.format)
            base = source.convert("RGBA")

        overlay = render_overlay(svg, base.width, base.height)
        composed = Image.alpha_composite(base, overlay)
        if not has_alpha or image_format in _NO_ALPHA_FORMATS:
            composed = composed.convert("RGB")

        directory = os.path.dirname(os.path.abspath(output_path))
        fd, tmp_path = tempfile.mkstemp(prefix=".annotating-", dir=directory)
        os.close(fd)
        composed.save(tmp_path, format=image_format)
        os.chmod(tmp_path, _output_mode(output_path))
        os.replace(tmp_path, output_path)
        tmp_path = None
        _logger.debug("Composited overlay onto %s -> %s (%s)", path, output_path, image_format)
    except MCPError:
        raise
    except Exception as e:
        raise ImageIOError(f"Failed to composite {path} -> {output_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
