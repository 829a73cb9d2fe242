"""
Image Annotator MCP Server — Entry Point

Registers all annotation tools and starts the JSON-RPC listener.
Annotations are compiled to an SVG overlay and composited onto the
screenshot; every tool writes a new image and leaves the input untouched.

Tools (6):
  annotate_screenshot   — draw an arbitrary list of annotations
  get_image_dimensions  — width/height/format for planning coordinates
  create_step_guide     — numbered markers + labels + connectors
  highlight_area        — one circle/rect/highlight with optional label
  add_callout           — one speech-bubble callout
  blur_area             — mask a sensitive region

Environment:
  IMAGE_ANNOTATOR_ALLOWED_PATHS  — os.pathsep-separated sandbox roots (default: home)
  IMAGE_ANNOTATOR_LOG_LEVEL      — logging level for stderr output (default: WARNING)
"""

from __future__ import annotations

import logging
import os
import sys

# Add shared path and own package root for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "_shared", "py"))
sys.path.insert(0, os.path.dirname(__file__))

from mcp_base import MCPServer  # noqa: E402
from validation import init_sandbox  # noqa: E402

from tools.annotate_screenshot import AnnotateScreenshot  # noqa: E402
from tools.get_image_dimensions import GetImageDimensions  # noqa: E402
from tools.create_step_guide import CreateStepGuide  # noqa: E402
from tools.highlight_area import HighlightArea  # noqa: E402
from tools.add_callout import AddCallout  # noqa: E402
from tools.blur_area import BlurArea  # noqa: E402

# ─── Logging ────────────────────────────────────────────────────────────────
# stdout carries JSON-RPC frames, so logs go to stderr.

logging.basicConfig(
    level=os.environ.get("IMAGE_ANNOTATOR_LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)

# ─── Sandbox Initialization ─────────────────────────────────────────────────

allowed_paths_str = os.environ.get("IMAGE_ANNOTATOR_ALLOWED_PATHS", os.path.expanduser("~"))
allowed_paths = allowed_paths_str.split(os.pathsep)
init_sandbox(allowed_paths)

# ─── Server Setup ───────────────────────────────────────────────────────────

server = MCPServer(
    name="image-annotator",
    version="1.0.0",
    tools=[
        AnnotateScreenshot(),
        GetImageDimensions(),
        CreateStepGuide(),
        HighlightArea(),
        AddCallout(),
        BlurArea(),
    ],
)

if __name__ == "__main__":
    server.start()
