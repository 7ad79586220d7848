import warnings

import pytest

from rbxmx_image.binary_image import decode_image_data, encode_image_data
from rbxmx_image.errors import CapacityExceededError, FormatError
from rbxmx_image.formats import ImageFormat
from rbxmx_image.palette import IndexRecord, QuantizedImage


def _two_by_two() -> QuantizedImage:
    return QuantizedImage(
        2,
        2,
        [(10, 10, 10), (200, 50, 50)],
        [IndexRecord(0, 0), IndexRecord(1, 0), IndexRecord(2, 1), IndexRecord(3, 0)],
    )


def test_encode_layout() -> None:
    data = encode_image_data(_two_by_two())

    assert data == bytes(
        [2, 0, 0, 0]  # width
        + [2, 0, 0, 0]  # height
        + [6, 0, 0, 0]  # colorDataSize
        + [10, 10, 10, 200, 50, 50]  # palette
        + [0, 0, 0, 0, 0]  # pixel 0 -> color 0
        + [1, 0, 0, 0, 0]
        + [2, 0, 0, 1, 0]
        + [3, 0, 0, 0, 0]
    )
    assert len(data) == 12 + 2 * 3 + 4 * 5


def test_encode_is_deterministic() -> None:
    assert encode_image_data(_two_by_two()) == encode_image_data(_two_by_two())


def test_decode_reproduces_palette_and_records() -> None:
    original = _two_by_two()

    decoded = decode_image_data(encode_image_data(original))

    assert decoded == original


def test_multibyte_fields_are_little_endian() -> None:
    image = QuantizedImage(1, 1, [(1, 2, 3)], [IndexRecord(0x123456, 0xBEEF)])

    data = encode_image_data(image)

    assert data[-5:] == bytes([0x56, 0x34, 0x12, 0xEF, 0xBE])


def test_position_beyond_24_bits_is_rejected_by_default() -> None:
    image = QuantizedImage(1, 1, [(1, 2, 3)], [IndexRecord(1 << 24, 0)])

    with pytest.raises(CapacityExceededError):
        encode_image_data(image)


def test_position_wraps_in_legacy_mode() -> None:
    image = QuantizedImage(1, 1, [(1, 2, 3)], [IndexRecord((1 << 24) + 7, 0)])

    with pytest.warns(RuntimeWarning):
        data = encode_image_data(image, overflow="wrap")

    assert decode_image_data(data).records == [IndexRecord(7, 0)]


def test_palette_beyond_65536_colors() -> None:
    palette = [(i & 0xFF, (i >> 8) & 0xFF, (i >> 16) & 0xFF) for i in range(65537)]
    records = [IndexRecord(0, 65535), IndexRecord(1, 65536)]
    image = QuantizedImage(2, 1, palette, records)

    with pytest.raises(CapacityExceededError):
        encode_image_data(image)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        data = encode_image_data(image, overflow="wrap")
    assert any(issubclass(w.category, RuntimeWarning) for w in caught)

    decoded = decode_image_data(data)
    assert len(decoded.palette) == 65537
    # the index wraps back to the first slot
    assert decoded.records == [IndexRecord(0, 65535), IndexRecord(1, 0)]


def test_custom_format_widths() -> None:
    fmt = ImageFormat(pixel_index_size=4, color_index_size=1)
    image = QuantizedImage(1, 2, [(5, 6, 7)], [IndexRecord(0, 0), IndexRecord(1, 0)])

    data = encode_image_data(image, fmt)

    assert len(data) == 12 + 3 + 2 * 5
    assert decode_image_data(data, fmt) == image

    too_many = QuantizedImage(1, 1, [(i, 0, 0) for i in range(257)], [IndexRecord(0, 256)])
    with pytest.raises(CapacityExceededError):
        encode_image_data(too_many, fmt)


def test_unknown_overflow_mode() -> None:
    with pytest.raises(ValueError):
        encode_image_data(_two_by_two(), overflow="clamp")


def test_decode_rejects_truncated_blobs() -> None:
    data = encode_image_data(_two_by_two())

    with pytest.raises(FormatError):
        decode_image_data(data[:8])
    with pytest.raises(FormatError):
        decode_image_data(data[:-1])
