"""Command line interface for the rbxmx image converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

from .binary_image import OVERFLOW_MODES
from .converter import DEFAULT_TEMPLATE_PATH, ConvertOptions, convert_file
from .errors import ConversionError, UsageError
from .formats import DEFAULT_EXTENSION, DEFAULT_TOLERANCE
from .palette import MATCHERS
from .template import UNTERMINATED_MODES


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(f"{self.format_usage()}{self.prog}: error: {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="rbxmx-image",
        description=(
            "Convert an image into a palette-indexed blob embedded in an .rbxmx file.\n"
            "The image is scaled (nearest neighbor) to HEIGHT pixels keeping its aspect ratio.\n"
            "Colors within 10% of a palette entry on every channel share that entry."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("height", help="Target image height in pixels (positive integer)")
    parser.add_argument("image", type=Path, help="Source image file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: image path with its extension replaced)",
    )
    parser.add_argument(
        "--extension",
        default=DEFAULT_EXTENSION,
        help=f"Extension for the generated file (default: {DEFAULT_EXTENSION})",
    )
    parser.add_argument(
        "--template",
        type=Path,
        default=DEFAULT_TEMPLATE_PATH,
        help="Container template with `attributes`, `image_width` and `image_height` tokens",
    )
    parser.add_argument(
        "--matcher",
        choices=sorted(MATCHERS),
        default="bucket",
        help="Palette lookup strategy (both give identical results)",
    )
    parser.add_argument(
        "--tolerance",
        default=str(DEFAULT_TOLERANCE),
        help="Relative per-channel difference below which colors are merged (greater than 0)",
    )
    parser.add_argument(
        "--overflow",
        choices=OVERFLOW_MODES,
        default="error",
        help="Fail, or truncate like the legacy format, when values exceed field widths",
    )
    parser.add_argument(
        "--unterminated-token",
        dest="unterminated",
        choices=UNTERMINATED_MODES,
        default="discard",
        help="What to do with a template token left open at end of file",
    )
    parser.add_argument("--preview", type=Path, help="Also write the quantized image as PNG")
    return parser


def parse_height(text: str) -> int:
    try:
        height = int(text)
    except ValueError as exc:
        raise UsageError(f"Invalid image size: {text}") from exc
    if height <= 0:
        raise UsageError(f"Invalid image size: {text}")
    return height


def parse_tolerance(text: str) -> float:
    try:
        tolerance = float(text)
    except ValueError as exc:
        raise UsageError(f"Invalid tolerance: {text}") from exc
    # rejects NaN as well
    if not tolerance > 0:
        raise UsageError(f"Invalid tolerance: {text}")
    return tolerance


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        options = ConvertOptions(
            height=parse_height(args.height),
            template_path=args.template,
            extension=args.extension,
            output_path=args.output,
            matcher=args.matcher,
            tolerance=parse_tolerance(args.tolerance),
            overflow=args.overflow,
            unterminated=args.unterminated,
            preview_path=args.preview,
        )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = convert_file(args.image, options)
        for warning in caught:
            print(f"Warning: {warning.message}")

        image = result.image
        print(f"Resized image to {image.width}, {image.height}")
        print(f"{len(image.palette)} colors, {len(image.records)} indices")
        print(f"Wrote image to file {result.output_path}")
        return 0
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
