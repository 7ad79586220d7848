"""Pixel buffers, image loading and nearest-neighbor resampling."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from .errors import DecodeError

_PASSTHROUGH_MODES = {"RGB": 3, "RGBA": 4}


@dataclass(frozen=True)
class PixelBuffer:
    """Interleaved 8-bit channel samples stored row-major."""

    width: int
    height: int
    channels: int
    data: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"pixel data has {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{self.channels}"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a Pillow image, normalising it to RGB or RGBA."""

        if image.mode not in _PASSTHROUGH_MODES:
            has_alpha = "A" in image.getbands() or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        width, height = image.size
        return cls(width, height, _PASSTHROUGH_MODES[image.mode], image.tobytes())

    def to_image(self) -> Image.Image:
        mode = {1: "L", 3: "RGB", 4: "RGBA"}.get(self.channels)
        if mode is None:
            raise ValueError(f"Unsupported channel count for preview: {self.channels}")
        return Image.frombytes(mode, (self.width, self.height), self.data)

    def pixel(self, x: int, y: int) -> bytes:
        start = (y * self.width + x) * self.channels
        return self.data[start : start + self.channels]


def load_pixel_buffer(path: str | Path) -> PixelBuffer:
    path = Path(path)
    try:
        with Image.open(path) as img:
            return PixelBuffer.from_image(img)
    except FileNotFoundError as exc:
        raise DecodeError(f"Input file not found: {path}") from exc
    except Image.DecompressionBombError as exc:
        raise DecodeError(f"Image too large to decode safely: {path}") from exc
    except OSError as exc:
        raise DecodeError(f"Failed to load image {path}") from exc


def target_width(source_width: int, source_height: int, desired_height: int) -> int:
    """Width that keeps the source aspect ratio at ``desired_height``.

    Rounds half up and never returns less than one pixel.
    """

    if source_width <= 0 or source_height <= 0:
        raise ValueError("Source image must have a positive size")
    scaled = source_width / source_height * desired_height
    return max(1, int(scaled + 0.5))


def resize_nearest(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """
    Nearest-neighbor resample of ``buffer`` to ``width`` x ``height``.
    Destination pixel (x, y) copies source pixel
    (floor(x * src_w / width), floor(y * src_h / height)) for every channel.
    Integer arithmetic keeps the mapping exact.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Target size must be positive")
    if (width, height) == (buffer.width, buffer.height):
        return buffer

    channels = buffer.channels
    src = buffer.data
    src_row_bytes = buffer.width * channels
    # Column offsets are shared by every row.
    columns = [((x * buffer.width) // width) * channels for x in range(width)]

    out = bytearray()
    for y in range(height):
        row_start = ((y * buffer.height) // height) * src_row_bytes
        for column in columns:
            start = row_start + column
            out += src[start : start + channels]

    return PixelBuffer(width, height, channels, bytes(out))
