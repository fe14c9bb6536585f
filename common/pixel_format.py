from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class PixelFormat:
    """Layout of a packed pixel buffer.

    ``band_order[i]`` is the byte offset inside a pixel that holds colour
    channel *i* of the (R, G, B, A) model. A band order of ``(3, 2, 1, 0)``
    therefore means the bytes in memory are A, B, G, R.
    """

    channels: int = 4
    bit_depth: int = 8
    band_order: Tuple[int, ...] = (3, 2, 1, 0)

    def validate(self) -> None:
        """Raise ``ValueError`` unless this describes a 4 x 8-bit interleaved layout."""
        if self.channels != 4:
            raise ValueError(f"unsupported channel count: {self.channels}")
        if self.bit_depth != 8:
            raise ValueError(f"unsupported bit depth: {self.bit_depth}")
        if sorted(self.band_order) != list(range(self.channels)):
            raise ValueError(f"band_order must be a permutation of 0..3, got {self.band_order}")

    @property
    def bytes_per_pixel(self) -> int:
        return self.channels * self.bit_depth // 8

    def view(self, buffer, width: int, height: int) -> np.ndarray:
        """Return a (height, width, channels) uint8 array sharing memory with ``buffer``.

        The array is writable whenever ``buffer`` is (bytearray, writable memoryview).
        """
        size = width * height * self.bytes_per_pixel
        if len(buffer) < size:
            raise ValueError(f"buffer too small for {width}x{height}: {len(buffer)} < {size}")
        return np.frombuffer(buffer, dtype=np.uint8, count=size).reshape(
            height, width, self.channels
        )

    def pack_color(self, rgba: Sequence[int]) -> Tuple[int, ...]:
        """Map an (r, g, b, a) colour into buffer byte order."""
        packed = [0] * self.channels
        for channel, offset in enumerate(self.band_order):
            packed[offset] = int(rgba[channel])
        return tuple(packed)

    def to_bgra(self, view: np.ndarray) -> np.ndarray:
        # fancy indexing always yields a contiguous copy
        r, g, b, a = self.band_order
        return view[..., [b, g, r, a]]


ABGR = PixelFormat(band_order=(3, 2, 1, 0))
RGBA = PixelFormat(band_order=(0, 1, 2, 3))
