"""Binary layout for palette + per-pixel index data."""

from __future__ import annotations

import warnings
from typing import List

from .bytestream import ByteReader, ByteWriter
from .errors import CapacityExceededError, FormatError
from .formats import DEFAULT_FORMAT, ImageFormat
from .palette import Color, IndexRecord, QuantizedImage

OVERFLOW_MODES = ("error", "wrap")


def _check_capacity(image: QuantizedImage, fmt: ImageFormat) -> List[str]:
    problems = []
    if len(image.palette) > fmt.max_palette_size:
        problems.append(
            f"palette has {len(image.palette)} colors (max {fmt.max_palette_size})"
        )
    if image.records:
        max_position = max(record.position for record in image.records)
        if max_position > fmt.max_pixel_index:
            problems.append(
                f"pixel position {max_position} exceeds {fmt.max_pixel_index}"
            )
        max_index = max(record.palette_index for record in image.records)
        if max_index > fmt.max_color_index:
            problems.append(f"palette index {max_index} exceeds {fmt.max_color_index}")
    return problems


def encode_image_data(
    image: QuantizedImage,
    fmt: ImageFormat = DEFAULT_FORMAT,
    overflow: str = "error",
) -> bytes:
    """Serialize ``image`` as header, palette bytes and index records.

    ``overflow`` selects how values beyond the field widths are handled:
    ``"error"`` raises :class:`CapacityExceededError`, ``"wrap"`` keeps the low
    bytes of each value (the legacy behavior) and emits a ``RuntimeWarning``.
    """

    if overflow not in OVERFLOW_MODES:
        raise ValueError(f"Unknown overflow mode: {overflow}")

    problems = _check_capacity(image, fmt)
    if problems:
        if overflow == "error":
            raise CapacityExceededError("Image exceeds format limits: " + "; ".join(problems))
        warnings.warn(
            "Values truncated to fit format limits: " + "; ".join(problems),
            RuntimeWarning,
            stacklevel=2,
        )
    wrap = overflow == "wrap"

    writer = ByteWriter()
    writer.write_u32(image.width, field="width")
    writer.write_u32(image.height, field="height")
    writer.write_u32(len(image.palette) * fmt.color_size, field="color data size")

    for r, g, b in image.palette:
        writer.write_bytes(bytes((r, g, b)))

    for position, palette_index in image.records:
        writer.write_uint(position, fmt.pixel_index_size, wrap=wrap, field="pixel position")
        writer.write_uint(palette_index, fmt.color_index_size, wrap=wrap, field="palette index")

    return writer.getvalue()


def decode_image_data(data: bytes, fmt: ImageFormat = DEFAULT_FORMAT) -> QuantizedImage:
    if len(data) < fmt.header_size:
        raise FormatError(f"image data has {len(data)} bytes, header needs {fmt.header_size}")
    reader = ByteReader(data)
    width = reader.read_u32()
    height = reader.read_u32()
    color_data_size = reader.read_u32()
    if color_data_size % fmt.color_size:
        raise FormatError(
            f"color data size {color_data_size} is not a multiple of {fmt.color_size}"
        )

    palette: List[Color] = []
    for _ in range(color_data_size // fmt.color_size):
        r, g, b = reader.read_bytes(fmt.color_size)
        palette.append((r, g, b))

    if reader.remaining % fmt.record_size:
        raise FormatError(
            f"{reader.remaining} trailing bytes do not form whole {fmt.record_size}-byte records"
        )
    records: List[IndexRecord] = []
    while reader.remaining:
        position = reader.read_uint(fmt.pixel_index_size)
        palette_index = reader.read_uint(fmt.color_index_size)
        records.append(IndexRecord(position, palette_index))

    return QuantizedImage(width, height, palette, records)
