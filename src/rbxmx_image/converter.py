"""Image to rbxmx conversion pipeline.

resample -> palette quantize -> binary image blob -> attribute table (base64)
-> template substitution into the output container.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from PIL import Image

from .attributes import Attribute, encode_attributes_base64
from .binary_image import encode_image_data
from .errors import OutputOpenError, UsageError
from .formats import (
    DEFAULT_ATTRIBUTE_NAME,
    DEFAULT_EXTENSION,
    DEFAULT_FORMAT,
    DEFAULT_TOLERANCE,
    ImageFormat,
)
from .palette import QuantizedImage, create_matcher, quantize
from .pixels import PixelBuffer, load_pixel_buffer, resize_nearest, target_width
from .template import Substitution, render_template_file

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "raw-data.txt"


@dataclass
class ConvertOptions:
    """Options for a single conversion run."""

    height: int
    template_path: Path = DEFAULT_TEMPLATE_PATH
    extension: str = DEFAULT_EXTENSION
    output_path: Optional[Path] = None
    matcher: str = "bucket"  # bucket, linear
    tolerance: float = DEFAULT_TOLERANCE
    overflow: str = "error"  # error, wrap
    unterminated: str = "discard"  # discard, literal
    attribute_name: str = DEFAULT_ATTRIBUTE_NAME
    preview_path: Optional[Path] = None
    image_format: ImageFormat = DEFAULT_FORMAT


@dataclass
class ConversionResult:
    source_width: int
    source_height: int
    image: QuantizedImage
    image_data: bytes
    attributes_base64: str
    output_path: Optional[Path] = None


def output_path_for(path: str | Path, extension: str = DEFAULT_EXTENSION) -> Path:
    if not extension.startswith("."):
        extension = "." + extension
    return Path(path).with_suffix(extension)


def convert_pixels(buffer: PixelBuffer, options: ConvertOptions) -> ConversionResult:
    """Resample, quantize and encode ``buffer`` without touching the filesystem."""

    if options.height <= 0:
        raise UsageError(f"Invalid image size: {options.height}")
    if not options.tolerance > 0:
        raise UsageError(f"Invalid tolerance: {options.tolerance}")

    width = target_width(buffer.width, buffer.height, options.height)
    resized = resize_nearest(buffer, width, options.height)
    quantized = quantize(resized, create_matcher(options.matcher, options.tolerance))

    fmt = options.image_format
    image_data = encode_image_data(quantized, fmt, overflow=options.overflow)
    attributes_base64 = encode_attributes_base64(
        [Attribute(options.attribute_name, image_data, fmt.attribute_type_tag)]
    )
    return ConversionResult(
        source_width=buffer.width,
        source_height=buffer.height,
        image=quantized,
        image_data=image_data,
        attributes_base64=attributes_base64,
    )


def convert_image(image: Image.Image, options: ConvertOptions) -> ConversionResult:
    """Convert an in-memory Pillow image."""

    return convert_pixels(PixelBuffer.from_image(image), options)


def build_substitutions(result: ConversionResult) -> Dict[str, Substitution]:
    return {
        "attributes": lambda: result.attributes_base64,
        "image_width": lambda: str(result.image.width),
        "image_height": lambda: str(result.image.height),
    }


def render_preview(image: QuantizedImage) -> Image.Image:
    """Paint every index record with its palette color."""

    pixel_count = image.width * image.height
    out = [(0, 0, 0)] * pixel_count
    for position, palette_index in image.records:
        if position < pixel_count and palette_index < len(image.palette):
            out[position] = image.palette[palette_index]
    preview = Image.new("RGB", (image.width, image.height))
    preview.putdata(out)
    return preview


def convert_file(path: str | Path, options: ConvertOptions) -> ConversionResult:
    """Convert the image at ``path`` and write the rbxmx container.

    Everything is encoded, and the optional preview written, before the
    output file is opened, so a failure before that point leaves no
    container on disk.
    """

    path = Path(path)
    result = convert_pixels(load_pixel_buffer(path), options)

    output = Path(options.output_path) if options.output_path else output_path_for(path, options.extension)

    # written before the container
    if options.preview_path is not None:
        preview_path = Path(options.preview_path)
        try:
            render_preview(result.image).save(preview_path, format="PNG")
        except OSError as exc:
            raise OutputOpenError(f"Failed to write preview {preview_path}") from exc

    render_template_file(
        options.template_path,
        output,
        build_substitutions(result),
        unterminated=options.unterminated,
    )

    return replace(result, output_path=output)
