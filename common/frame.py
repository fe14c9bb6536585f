from __future__ import annotations

from dataclasses import dataclass

import numpy as np

BYTES_PER_PIXEL = 4


@dataclass
class Frame:
    data: bytearray  # packed 4-channel pixels, width * 4 bytes per row
    width: int
    height: int
    ts_ms: float  # host frame time (ms), opaque

    @property
    def expected_size(self) -> int:
        return self.width * self.height * BYTES_PER_PIXEL

    @classmethod
    def filled(cls, width: int, height: int, value: int, ts_ms: float = 0.0) -> "Frame":
        return cls(
            data=bytearray([value & 0xFF]) * (width * height * BYTES_PER_PIXEL),
            width=width,
            height=height,
            ts_ms=ts_ms,
        )

    @classmethod
    def from_strided(
        cls, data, width: int, height: int, line_size: int, ts_ms: float = 0.0
    ) -> "Frame":
        """Pack a buffer whose rows are padded to ``line_size`` bytes into a tight frame.

        Raises
        ------
        ValueError
            If ``line_size`` is shorter than a row or ``data`` is too small.
        """
        row_bytes = width * BYTES_PER_PIXEL
        if line_size < row_bytes:
            raise ValueError(f"line_size {line_size} < row size {row_bytes}")
        if len(data) < height * line_size:
            raise ValueError(f"buffer too small: {len(data)} < {height * line_size}")

        rows = np.frombuffer(data, dtype=np.uint8, count=height * line_size).reshape(
            height, line_size
        )[:, :row_bytes]
        return cls(data=bytearray(rows.tobytes()), width=width, height=height, ts_ms=ts_ms)

    def write_strided(self, dest, line_size: int) -> None:
        """Copy the packed pixels back into ``dest`` whose rows are ``line_size`` bytes."""
        row_bytes = self.width * BYTES_PER_PIXEL
        if len(self.data) != self.expected_size:
            raise ValueError(f"frame holds {len(self.data)} bytes, expected {self.expected_size}")
        if line_size < row_bytes or len(dest) < self.height * line_size:
            raise ValueError("destination does not fit the frame")

        out = np.frombuffer(dest, dtype=np.uint8, count=self.height * line_size).reshape(
            self.height, line_size
        )
        out[:, :row_bytes] = np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, row_bytes
        )
