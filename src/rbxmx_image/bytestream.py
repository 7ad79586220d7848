"""Cursor based little-endian readers and writers over byte buffers."""

from __future__ import annotations

from .errors import CapacityExceededError, FormatError


class ByteWriter:
    """Append fixed-width little-endian fields to a growable buffer."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write_uint(self, value: int, size: int, *, wrap: bool = False, field: str = "value") -> None:
        """Write ``value`` as an unsigned integer of ``size`` bytes.

        Out-of-range values raise :class:`CapacityExceededError` unless ``wrap``
        is set, in which case only the low ``size`` bytes are kept.
        """

        limit = 1 << (8 * size)
        if value < 0 or value >= limit:
            if not wrap:
                msg = f"{field} {value} does not fit in {size} byte(s) (max {limit - 1})"
                raise CapacityExceededError(msg)
            value &= limit - 1
        self._buffer += value.to_bytes(size, "little")

    def write_u8(self, value: int, **kwargs) -> None:
        self.write_uint(value, 1, **kwargs)

    def write_u16(self, value: int, **kwargs) -> None:
        self.write_uint(value, 2, **kwargs)

    def write_u24(self, value: int, **kwargs) -> None:
        self.write_uint(value, 3, **kwargs)

    def write_u32(self, value: int, **kwargs) -> None:
        self.write_uint(value, 4, **kwargs)

    def write_bytes(self, data: bytes | bytearray) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class ByteReader:
    """Read fixed-width little-endian fields from a byte buffer."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def read_bytes(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            msg = f"need {size} byte(s) at offset {self._offset}, only {self.remaining} left"
            raise FormatError(msg)
        chunk = self._data[self._offset : self._offset + size]
        self._offset += size
        return chunk

    def read_uint(self, size: int) -> int:
        return int.from_bytes(self.read_bytes(size), "little")

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self) -> int:
        return self.read_uint(2)

    def read_u24(self) -> int:
        return self.read_uint(3)

    def read_u32(self) -> int:
        return self.read_uint(4)
