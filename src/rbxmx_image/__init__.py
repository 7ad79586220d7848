"""Palette-indexed image export for Roblox .rbxmx containers.

Converts a raster image into a compact palette + index blob, wraps it in a
base64 attribute table and substitutes it into a text template. It can be
invoked through the CLI (``python -m rbxmx_image``) or imported.
"""

from .attributes import (
    Attribute,
    decode_attributes,
    decode_attributes_base64,
    encode_attributes,
    encode_attributes_base64,
)
from .binary_image import decode_image_data, encode_image_data
from .converter import (
    ConversionResult,
    ConvertOptions,
    convert_file,
    convert_image,
    convert_pixels,
    render_preview,
)
from .errors import (
    CapacityExceededError,
    ConversionError,
    DecodeError,
    FormatError,
    OutputOpenError,
    TemplateMissingError,
    UsageError,
)
from .formats import DEFAULT_FORMAT, ImageFormat
from .palette import IndexRecord, QuantizedImage, colors_equal, quantize
from .pixels import PixelBuffer, load_pixel_buffer, resize_nearest
from .template import render_template

__all__ = [
    "Attribute",
    "CapacityExceededError",
    "ConversionError",
    "ConversionResult",
    "ConvertOptions",
    "DEFAULT_FORMAT",
    "DecodeError",
    "FormatError",
    "ImageFormat",
    "IndexRecord",
    "OutputOpenError",
    "PixelBuffer",
    "QuantizedImage",
    "TemplateMissingError",
    "UsageError",
    "colors_equal",
    "convert_file",
    "convert_image",
    "convert_pixels",
    "decode_attributes",
    "decode_attributes_base64",
    "decode_image_data",
    "encode_attributes",
    "encode_attributes_base64",
    "encode_image_data",
    "load_pixel_buffer",
    "quantize",
    "render_preview",
    "render_template",
    "resize_nearest",
]
