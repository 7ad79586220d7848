"""Palette extraction with fuzzy color matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple, Type

from .formats import DEFAULT_TOLERANCE
from .pixels import PixelBuffer

Color = Tuple[int, int, int]


class IndexRecord(NamedTuple):
    """A pixel's row-major position and the palette slot it refers to."""

    position: int
    palette_index: int


@dataclass
class QuantizedImage:
    width: int
    height: int
    palette: List[Color] = field(default_factory=list)
    records: List[IndexRecord] = field(default_factory=list)


def percent_difference(a: float, b: float) -> float:
    """Relative difference of ``a`` and ``b`` against their average.

    Two zero samples have no difference at all, so ``(0, 0)`` yields ``0.0``.
    """
    if a == b:
        return 0.0
    return abs(a - b) / ((a + b) * 0.5)


def colors_equal(a: Color, b: Color, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return (
        percent_difference(a[0], b[0]) < tolerance
        and percent_difference(a[1], b[1]) < tolerance
        and percent_difference(a[2], b[2]) < tolerance
    )


class ColorMatcher:
    """Owns a palette and resolves colors to palette indices.

    Matching is first-fit: the lowest palette index that is fuzzy-equal to the
    color wins, and unmatched colors are appended in first-seen order.
    """

    name = ""

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        # a color must match itself, otherwise first-fit degenerates
        if not tolerance > 0:
            raise ValueError(f"Tolerance must be greater than 0, got {tolerance}")
        self.tolerance = tolerance
        self.palette: List[Color] = []

    def find(self, color: Color) -> Optional[int]:
        raise NotImplementedError

    def add(self, color: Color) -> int:
        self.palette.append(color)
        return len(self.palette) - 1

    def match_or_add(self, color: Color) -> int:
        index = self.find(color)
        if index is None:
            index = self.add(color)
        return index


class LinearMatcher(ColorMatcher):
    """Scan the whole palette in insertion order for every lookup."""

    name = "linear"

    def find(self, color: Color) -> Optional[int]:
        for index, entry in enumerate(self.palette):
            if colors_equal(color, entry, self.tolerance):
                return index
        return None


class BucketMatcher(ColorMatcher):
    """First-fit matcher backed by red-channel buckets and an exact-color memo.

    Only palette entries whose red sample is within tolerance of the looked-up
    red sample are compared, and the smallest matching index is returned, so
    results are identical to :class:`LinearMatcher`.
    """

    name = "bucket"

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE) -> None:
        super().__init__(tolerance)
        self._by_red: Dict[int, List[int]] = {}
        self._memo: Dict[Color, int] = {}
        self._red_neighbors = [
            tuple(w for w in range(256) if percent_difference(v, w) < tolerance)
            for v in range(256)
        ]

    def find(self, color: Color) -> Optional[int]:
        best: Optional[int] = None
        for red in self._red_neighbors[color[0]]:
            # bucket lists are ascending
            for index in self._by_red.get(red, ()):
                if best is not None and index >= best:
                    break
                if colors_equal(color, self.palette[index], self.tolerance):
                    best = index
                    break
        return best

    def add(self, color: Color) -> int:
        index = super().add(color)
        self._by_red.setdefault(color[0], []).append(index)
        return index

    def match_or_add(self, color: Color) -> int:
        # Palette entries are only ever appended, so a resolved index stays
        # the first fit for the rest of the scan.
        index = self._memo.get(color)
        if index is None:
            index = super().match_or_add(color)
            self._memo[color] = index
        return index


MATCHERS: Dict[str, Type[ColorMatcher]] = {
    LinearMatcher.name: LinearMatcher,
    BucketMatcher.name: BucketMatcher,
}


def create_matcher(name: str, tolerance: float = DEFAULT_TOLERANCE) -> ColorMatcher:
    try:
        matcher_cls = MATCHERS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown matcher: {name}") from exc
    return matcher_cls(tolerance)


def quantize(buffer: PixelBuffer, matcher: ColorMatcher | None = None) -> QuantizedImage:
    """Build a palette and one index record per pixel, in row-major order.

    Channels beyond the third (alpha) are read but not stored.
    """

    if buffer.channels < 3:
        raise ValueError(f"Need at least 3 channels, got {buffer.channels}")
    if matcher is None:
        matcher = BucketMatcher()

    data = buffer.data
    step = buffer.channels
    records: List[IndexRecord] = []
    for position in range(buffer.width * buffer.height):
        i = position * step
        color = (data[i], data[i + 1], data[i + 2])
        records.append(IndexRecord(position, matcher.match_or_add(color)))

    return QuantizedImage(buffer.width, buffer.height, list(matcher.palette), records)
