"""Image helpers: poster resizing with a disk cache, avatars, type sniffing."""

import asyncio
import hashlib
import io
import logging
import os
from datetime import UTC, datetime

from PIL import Image, ImageDraw, UnidentifiedImageError

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".mp4": "video/mp4",
    ".m4v": "video/x-m4v",
    ".mov": "video/quicktime",
    ".wmv": "video/x-ms-wmv",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    ".mp3": "audio/mpeg",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".wav": "audio/wav",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

# Leading bytes -> mime type
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)

IDENTICON_SIZE = 420
IDENTICON_GRID = 5


def mime_type_by_extension(path: str) -> str:
    _, ext = os.path.splitext(path)
    return MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)


def sniff_mime_type(data: bytes) -> str:
    """Guess the type of image data from its first bytes."""
    for signature, mime_type in _SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return DEFAULT_MIME_TYPE


def content_etag(data: bytes) -> str:
    """ETag of uploaded image bytes."""
    return hashlib.sha256(data).hexdigest()[:16]


def file_etag(path: str) -> str:
    """ETag of an image on disk, from its modification time."""
    mtime = datetime.fromtimestamp(os.stat(path).st_mtime, tz=UTC)
    return mtime.strftime("%Y%m%d%H%M%S")


def _target_size(
    width: int, height: int, max_width: int | None, max_height: int | None
) -> tuple[int, int]:
    """Largest size within the bounds that keeps the aspect ratio. Never upscales."""
    scale = 1.0
    if max_width and width > max_width:
        scale = min(scale, max_width / width)
    if max_height and height > max_height:
        scale = min(scale, max_height / height)
    return max(1, int(width * scale)), max(1, int(height * scale))


class ImageResizer:
    """Scales posters and logos down to what a client asked for.

    Results are written as JPEG to a cache directory, keyed by the source
    path, its modification time and the requested size and quality.
    """

    def __init__(self, cache_dir: str, quality: int) -> None:
        self.cache_dir = cache_dir
        self.quality = quality

    def _cache_path(self, path: str, mtime: float, width: int, height: int, quality: int) -> str:
        key = f"{path}:{mtime}:{width}:{height}:{quality}"
        name = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return os.path.join(self.cache_dir, name[:2], f"{name}.jpg")

    def resize(
        self,
        path: str,
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> str:
        """Path of a version of the image that fits the bounds.

        Returns the original path when no bounds are given, the image needs
        no scaling, or it cannot be decoded.
        """
        if not max_width and not max_height:
            return path
        quality = self.quality or quality or 90
        mtime = os.stat(path).st_mtime
        cached = self._cache_path(path, mtime, max_width or 0, max_height or 0, quality)
        if os.path.exists(cached):
            return cached

        try:
            with Image.open(path) as img:
                size = _target_size(img.width, img.height, max_width, max_height)
                if size == (img.width, img.height):
                    return path
                if img.mode != "RGB":
                    img = img.convert("RGB")
                img = img.resize(size, Image.Resampling.LANCZOS)
                os.makedirs(os.path.dirname(cached), exist_ok=True)
                tmp = f"{cached}.{os.getpid()}.tmp"
                img.save(tmp, format="JPEG", quality=quality)
                os.replace(tmp, cached)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Cannot resize {path}: {e}")
            return path
        logger.debug(f"Resized {path} to {size[0]}x{size[1]} q{quality}")
        return cached

    async def resize_async(
        self,
        path: str,
        max_width: int | None = None,
        max_height: int | None = None,
        quality: int | None = None,
    ) -> str:
        return await asyncio.to_thread(self.resize, path, max_width, max_height, quality)


def make_identicon(seed: str, size: int = IDENTICON_SIZE) -> bytes:
    """Render a symmetric block avatar derived from a seed, as PNG."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    color = (digest[0], digest[1], digest[2])
    background = (240, 240, 240)
    img = Image.new("RGB", (size, size), background)
    draw = ImageDraw.Draw(img)

    cell = size // (IDENTICON_GRID + 1)
    margin = (size - cell * IDENTICON_GRID) // 2
    half = (IDENTICON_GRID + 1) // 2
    for row in range(IDENTICON_GRID):
        for col in range(half):
            if digest[3 + row * half + col] % 2 == 0:
                continue
            for c in {col, IDENTICON_GRID - 1 - col}:
                x = margin + c * cell
                y = margin + row * cell
                draw.rectangle([x, y, x + cell - 1, y + cell - 1], fill=color)

    output = io.BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()
