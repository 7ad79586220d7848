"""Attribute table encoding for the rbxmx ``AttributesSerialize`` blob."""

from __future__ import annotations

import base64
import binascii
from typing import Iterable, List, NamedTuple

from .bytestream import ByteReader, ByteWriter
from .errors import FormatError
from .formats import ATTRIBUTE_TYPE_STRING


class Attribute(NamedTuple):
    """A named byte blob. ``type_tag`` 2 marks string/bytes data."""

    name: str
    data: bytes
    type_tag: int = ATTRIBUTE_TYPE_STRING


def encode_attributes(attributes: Iterable[Attribute]) -> bytes:
    """
    Layout: u32 count, then per entry
    u32 nameLength, name, u8 typeTag, u32 dataLength, data.
    """
    entries = list(attributes)
    writer = ByteWriter()
    writer.write_u32(len(entries), field="attribute count")
    for attribute in entries:
        name = attribute.name.encode("utf-8")
        writer.write_u32(len(name), field="attribute name length")
        writer.write_bytes(name)
        writer.write_u8(attribute.type_tag, field="attribute type tag")
        writer.write_u32(len(attribute.data), field="attribute data length")
        writer.write_bytes(attribute.data)
    return writer.getvalue()


def encode_attributes_base64(attributes: Iterable[Attribute]) -> str:
    return base64.b64encode(encode_attributes(attributes)).decode("ascii")


def decode_attributes(data: bytes) -> List[Attribute]:
    reader = ByteReader(data)
    count = reader.read_u32()
    attributes: List[Attribute] = []
    for _ in range(count):
        name_length = reader.read_u32()
        raw_name = reader.read_bytes(name_length)
        try:
            name = raw_name.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"attribute name is not valid UTF-8: {raw_name!r}") from exc
        type_tag = reader.read_u8()
        data_length = reader.read_u32()
        attributes.append(Attribute(name, reader.read_bytes(data_length), type_tag))
    if reader.remaining:
        raise FormatError(f"{reader.remaining} unexpected trailing bytes after attributes")
    return attributes


def decode_attributes_base64(text: str | bytes) -> List[Attribute]:
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise FormatError(f"invalid base64 attribute data: {exc}") from exc
    return decode_attributes(raw)
