"""Tests for image helpers."""

import io
import os
from pathlib import Path

from PIL import Image

from src.services.imaging import (
    ImageResizer,
    make_identicon,
    mime_type_by_extension,
    sniff_mime_type,
)
from tests.conftest import write_image


class TestImageResizer:
    """Tests for poster resizing."""

    def test_scales_down_keeping_aspect_ratio(self, tmp_path: Path):
        source = tmp_path / "poster.jpg"
        write_image(source, (400, 600))
        resizer = ImageResizer(str(tmp_path / "cache"), 80)

        resized = resizer.resize(str(source), max_width=200)

        assert resized != str(source)
        with Image.open(resized) as img:
            assert img.size == (200, 300)

    def test_never_upscales(self, tmp_path: Path):
        source = tmp_path / "poster.jpg"
        write_image(source, (400, 600))
        resizer = ImageResizer(str(tmp_path / "cache"), 80)

        assert resizer.resize(str(source), max_width=800, max_height=1200) == str(source)

    def test_without_bounds_returns_original(self, tmp_path: Path):
        source = tmp_path / "poster.jpg"
        write_image(source)
        resizer = ImageResizer(str(tmp_path / "cache"), 80)

        assert resizer.resize(str(source)) == str(source)

    def test_result_is_cached(self, tmp_path: Path):
        source = tmp_path / "poster.jpg"
        write_image(source, (400, 600))
        resizer = ImageResizer(str(tmp_path / "cache"), 80)

        first = resizer.resize(str(source), max_height=300)
        mtime = os.stat(first).st_mtime_ns
        second = resizer.resize(str(source), max_height=300)

        assert first == second
        assert os.stat(second).st_mtime_ns == mtime

    def test_undecodable_image_returns_original(self, tmp_path: Path):
        source = tmp_path / "broken.jpg"
        source.write_bytes(b"not an image")
        resizer = ImageResizer(str(tmp_path / "cache"), 80)

        assert resizer.resize(str(source), max_width=100) == str(source)


class TestMimeTypes:
    """Tests for content type detection."""

    def test_by_extension(self):
        assert mime_type_by_extension("/a/b/movie.MKV") == "video/x-matroska"
        assert mime_type_by_extension("poster.jpg") == "image/jpeg"
        assert mime_type_by_extension("notes.txt") == "application/octet-stream"

    def test_sniff(self):
        assert sniff_mime_type(b"\xff\xd8\xff\xe0rest") == "image/jpeg"
        assert sniff_mime_type(b"\x89PNG\r\n\x1a\nrest") == "image/png"
        assert sniff_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"
        assert sniff_mime_type(b"hello") == "application/octet-stream"


class TestIdenticon:
    """Tests for generated avatars."""

    def test_png_of_requested_size(self):
        data = make_identicon("alice", size=60)
        assert sniff_mime_type(data) == "image/png"
        with Image.open(io.BytesIO(data)) as img:
            assert img.size == (60, 60)

    def test_deterministic(self):
        assert make_identicon("alice") == make_identicon("alice")
        assert make_identicon("alice") != make_identicon("bob")
