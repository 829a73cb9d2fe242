#!/usr/bin/env python3
"""
Image Annotator — command line entry point.

Usage:
    python cli.py <input> <output> --annotations '<json>' [--theme <name>]

Example:
    python cli.py screenshot.png annotated.png --theme documentation --annotations '[
      {"type": "marker", "x": 200, "y": 100, "number": 1},
      {"type": "arrow", "from": [230, 100], "to": [350, 150]},
      {"type": "callout", "x": 400, "y": 180, "text": "Click here to continue", "pointer": "left"}
    ]'
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

# Add shared path and own package root for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "_shared", "py"))
sys.path.insert(0, os.path.dirname(__file__))

from mcp_base import MCPError  # noqa: E402
from annotator import annotate_image  # noqa: E402
from palette import COLORS, THEMES  # noqa: E402
from svg_builder import ANNOTATION_TYPES  # noqa: E402

logger = logging.getLogger("annotator.cli")

EPILOG = f"""\
annotation types:
  {", ".join(ANNOTATION_TYPES)}

themes:
  {", ".join(THEMES)}

colors:
  {", ".join(COLORS)}
  (or any hex / CSS color string)
"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Add markers, arrows, callouts, highlights and more to a screenshot.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Input image path")
    parser.add_argument("output", help="Output image path")
    parser.add_argument(
        "--annotations", required=True, help="JSON array of annotation objects"
    )
    parser.add_argument("--theme", choices=sorted(THEMES), default=None, help="Preset theme")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        annotations = json.loads(args.annotations)
    except json.JSONDecodeError as e:
        print(f"Error parsing annotations JSON: {e}", file=sys.stderr)
        return 1
    if not isinstance(annotations, list):
        print("Error parsing annotations JSON: expected an array", file=sys.stderr)
        return 1

    logger.info("Annotating %s -> %s (%d annotations)", args.input, args.output, len(annotations))
    try:
        result = annotate_image(args.input, args.output, annotations, args.theme)
    except MCPError as e:
        logger.debug("annotate_image failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Annotated image saved: {result.output_path}")
    print(f"  Dimensions: {result.width}x{result.height}")
    print(f"  Annotations: {result.annotation_count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
