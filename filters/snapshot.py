from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from common.pixel_format import PixelFormat

from .errors import EncodingError

_LOG = logging.getLogger(__name__)


@dataclass
class SnapshotResult:
    """Outcome of :func:`save_png`: the target path and the failure, if any."""

    path: Path
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise EncodingError(f"could not write PNG to {self.path}: {self.error}") from self.error


def save_png(view: np.ndarray, path: str | Path, pixel_format: PixelFormat) -> SnapshotResult:
    """Encode ``view`` as PNG (codec defaults) and write it to ``path``, overwriting.

    Encode and write failures are returned in the result rather than raised.
    """
    path = Path(path)
    try:
        ok, encoded = cv2.imencode(".png", pixel_format.to_bgra(view))
        if not ok:
            return SnapshotResult(path=path, error=ValueError("PNG encoder produced no data"))
        path.write_bytes(encoded.tobytes())
    except (cv2.error, OSError) as exc:
        _LOG.debug("PNG write to %s failed: %s", path, exc)
        return SnapshotResult(path=path, error=exc)
    return SnapshotResult(path=path)
