"""Shared fixtures: PNG files generated on the fly."""

import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from pngblue.constants import PNG_SIGNATURE
from pngblue.services.image_service import ImageService


def _chunk(ctype, data):
    crc = zlib.crc32(ctype + data) & 0xFFFFFFFF
    return struct.pack(">L", len(data)) + ctype + data + struct.pack(">L", crc)


def build_png(width, height, bit_depth, color_type, rows, plte=None, trns=None):
    """Assemble PNG bytes from already packed scanlines (filter type 0)."""
    ihdr = struct.pack(">IIBBBBB", width, height, bit_depth, color_type, 0, 0, 0)
    raw = b"".join(b"\x00" + row for row in rows)
    data = PNG_SIGNATURE + _chunk(b"IHDR", ihdr)
    if plte is not None:
        data += _chunk(b"PLTE", plte)
    if trns is not None:
        data += _chunk(b"tRNS", trns)
    return data + _chunk(b"IDAT", zlib.compress(raw)) + _chunk(b"IEND", b"")


@pytest.fixture
def make_png(tmp_path):
    """Write a PNG built from row-major pixel data and return its path."""

    def _make(name, size, pixels, mode="RGBA"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new(mode, size)
        img.putdata(pixels)
        img.save(path, format="PNG")
        return path

    return _make


@pytest.fixture
def make_raw_png(tmp_path):
    """Write a hand-assembled PNG (exact bit depth, PLTE and tRNS) and return its path."""

    def _make(name, width, height, bit_depth, color_type, rows, plte=None, trns=None):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_png(width, height, bit_depth, color_type, rows, plte=plte, trns=trns))
        return path

    return _make


@pytest.fixture
def load_png():
    return ImageService().load_image


@pytest.fixture
def sample_pixels():
    """2x2 image: black, dark red, transparent black, translucent gray-blue."""
    return [(0, 0, 0, 255), (10, 0, 0, 255), (0, 0, 0, 0), (50, 60, 70, 200)]


@pytest.fixture
def read_png():
    """Return (mode, size, pixels) of a PNG on disk."""

    def _read(path: Path):
        with Image.open(path) as img:
            return img.mode, img.size, list(img.getdata())

    return _read
