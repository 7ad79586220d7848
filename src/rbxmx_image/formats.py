"""Layout constants for the palette-indexed image blob and its container."""

from __future__ import annotations

from dataclasses import dataclass

# Reference: Binary Image Blob (all fields little endian)
# Field              | Size         | Notes
# -------------------|--------------|-----------------------------------------
# width              | 4            |
# height             | 4            |
# colorDataSize      | 4            | palette length * 3
# palette            | 3 * colors   | R, G, B per entry, first-seen order
# index records      | 5 * pixels   | 3-byte pixel position + 2-byte palette index

ATTRIBUTE_TYPE_STRING = 2
DEFAULT_EXTENSION = ".rbxmx"
DEFAULT_ATTRIBUTE_NAME = "RawData"
DEFAULT_TOLERANCE = 0.1


@dataclass(frozen=True)
class ImageFormat:
    """Field widths used by the binary image encoder."""

    header_size: int = 12
    pixel_index_size: int = 3
    color_index_size: int = 2
    color_size: int = 3
    attribute_type_tag: int = ATTRIBUTE_TYPE_STRING

    @property
    def record_size(self) -> int:
        return self.pixel_index_size + self.color_index_size

    @property
    def max_pixel_index(self) -> int:
        return (1 << (8 * self.pixel_index_size)) - 1

    @property
    def max_color_index(self) -> int:
        return (1 << (8 * self.color_index_size)) - 1

    @property
    def max_palette_size(self) -> int:
        return self.max_color_index + 1


DEFAULT_FORMAT = ImageFormat()
