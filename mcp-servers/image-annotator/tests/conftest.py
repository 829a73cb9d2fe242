"""
Shared fixtures for image-annotator server tests.

Sets up sys.path so tools and shared modules can be imported correctly,
initialises the sandbox on temp dirs, and provides sample images.
"""

from __future__ import annotations

import importlib.util
import sys
import tempfile
import types
from pathlib import Path

import pytest
from PIL import Image

# ---- Setup Import Paths -----------------------------------------------------
# Load _shared/py/ modules explicitly to avoid import conflicts.

_shared_py_dir = Path(__file__).resolve().parent.parent.parent / "_shared" / "py"
_src = str(Path(__file__).resolve().parent.parent / "src")

if _src not in sys.path:
    sys.path.insert(0, _src)


def _load_shared_module(name: str, file_name: str) -> types.ModuleType:
    """Load a module from _shared/py/ and register it in sys.modules."""
    module_path = _shared_py_dir / file_name
    spec = importlib.util.spec_from_file_location(name, str(module_path))
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


# Load json_rpc (no dependencies), then mcp_base, then validation
_load_shared_module("json_rpc", "json_rpc.py")
_load_shared_module("mcp_base", "mcp_base.py")
validation = _load_shared_module("validation", "validation.py")


# ---- Fixtures ----------------------------------------------------------------


@pytest.fixture(autouse=True)
def _setup_sandbox() -> None:
    """Initialize sandbox with temp dirs for all tests."""
    validation.init_sandbox([  # type: ignore[attr-defined]
        tempfile.gettempdir(),
        "/private/var/folders",
        "/private/tmp",
        "/tmp",
    ])


@pytest.fixture()
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory inside the sandbox."""
    return tmp_path


@pytest.fixture()
def sample_image(tmp_dir: Path) -> Path:
    """A plain white 100x100 RGB PNG."""
    img = tmp_dir / "photo.png"
    Image.new("RGB", (100, 100), "white").save(img)
    return img


@pytest.fixture()
def large_image(tmp_dir: Path) -> Path:
    """A white 640x480 PNG, big enough for step guides and callouts."""
    img = tmp_dir / "screenshot.png"
    Image.new("RGB", (640, 480), "white").save(img)
    return img


@pytest.fixture()
def palette_image(tmp_dir: Path) -> Path:
    """A 60x40 palette PNG: left half transparent via tRNS, right half white."""
    img_path = tmp_dir / "palette.png"
    img = Image.new("P", (60, 40), 0)
    img.putpalette([0, 0, 0, 255, 255, 255] + [0] * (254 * 3))
    img.paste(1, (30, 0, 60, 40))
    img.save(img_path, transparency=0)
    return img_path


@pytest.fixture()
def transparent_image(tmp_dir: Path) -> Path:
    """A fully transparent 120x80 RGBA PNG."""
    img = tmp_dir / "transparent.png"
    Image.new("RGBA", (120, 80), (0, 0, 0, 0)).save(img)
    return img
