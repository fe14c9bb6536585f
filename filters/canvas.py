"""Scoped drawing context over a packed pixel view.

A :class:`Canvas` wraps a writable ``(H, W, 4)`` uint8 array and draws on it
in place with OpenCV. Colours are given as (r, g, b, a) and packed into the
buffer's byte order through its :class:`~common.pixel_format.PixelFormat`,
so the same drawing code works whatever band order the host delivers.

Geometry follows OpenCV's pixel-centre convention: a rectangle spanning
``x = 100 .. 200`` covers pixel columns 100 through 200 inclusive.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import cv2
import numpy as np

from common.pixel_format import ABGR, PixelFormat

_LOG = logging.getLogger(__name__)

# Fractional bits handed to OpenCV's ``shift`` argument for sub-pixel geometry.
SUBPIXEL_SHIFT = 4
_SUBPIXEL_SCALE = 1 << SUBPIXEL_SHIFT

_MITER_RIGHT_ANGLE = math.sqrt(2.0)


class LineCap(enum.Enum):
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class LineJoin(enum.Enum):
    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


@dataclass(frozen=True)
class RenderingHints:
    """Quality switches for a canvas.

    Only ``antialias`` and ``stroke_pure`` change OpenCV's output; the
    others have no OpenCV counterpart and are carried for completeness.
    """

    antialias: bool = False
    color_quality: bool = False
    render_quality: bool = False
    text_antialias: bool = False
    stroke_pure: bool = False  # keep float geometry instead of snapping to the pixel grid
    fractional_metrics: bool = False

    @property
    def line_type(self) -> int:
        return cv2.LINE_AA if self.antialias else cv2.LINE_8


@dataclass(frozen=True)
class Stroke:
    width: float = 1.0
    cap: LineCap = LineCap.SQUARE
    join: LineJoin = LineJoin.MITER
    miter_limit: float = 10.0

    def validate(self) -> None:
        if not self.width > 0:
            raise ValueError(f"stroke width must be > 0, got {self.width}")
        if not self.miter_limit >= 1.0:
            raise ValueError(f"miter limit must be >= 1, got {self.miter_limit}")


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    def validate(self) -> None:
        if self.w < 0 or self.h < 0:
            raise ValueError(f"rect size must be non-negative, got {self.w}x{self.h}")

    def corners(self) -> Tuple[Tuple[float, float], ...]:
        x0, y0 = self.x, self.y
        x1, y1 = self.x + self.w, self.y + self.h
        return ((x0, y0), (x1, y0), (x1, y1), (x0, y1))


def _box(x0: float, y0: float, x1: float, y1: float) -> Tuple[Tuple[float, float], ...]:
    return ((x0, y0), (x1, y0), (x1, y1), (x0, y1))


class Canvas:
    """Exclusively owned drawing context; use it as a context manager.

    Leaving the ``with`` block disposes the canvas on every exit path.
    Drawing on a disposed canvas raises ``RuntimeError``.
    """

    def __init__(
        self,
        img: np.ndarray,
        pixel_format: PixelFormat = ABGR,
        hints: Optional[RenderingHints] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._img: Optional[np.ndarray] = img
        self._fmt = pixel_format
        self._hints = hints or RenderingHints()
        self._log = logger or _LOG
        self._color = pixel_format.pack_color((0, 0, 0, 255))
        self._stroke = Stroke()
        self._log.debug("canvas opened %sx%s hints=%s", img.shape[1], img.shape[0], self._hints)

    def __enter__(self) -> Canvas:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._img is None

    def dispose(self) -> None:
        self._img = None

    # ----------------------------------------------------------------- state

    def set_color(self, rgba: Sequence[int]) -> None:
        self._target()
        self._color = self._fmt.pack_color(rgba)

    def set_stroke(self, stroke: Stroke) -> None:
        self._target()
        stroke.validate()
        self._stroke = stroke

    # --------------------------------------------------------------- drawing

    def fill_rect(self, rect: Rect) -> None:
        img = self._target()
        self._fill_poly(img, rect.corners())

    def stroke_rect(self, rect: Rect) -> None:
        """Stroke the outline of ``rect`` with the current stroke.

        A rectangle is a closed path, so only the join style shows; the
        cap style has no visible end to apply to.
        """
        img = self._target()
        stroke = self._stroke

        hw = stroke.width / 2.0
        x0, y0 = rect.x, rect.y
        x1, y1 = rect.x + rect.w, rect.y + rect.h
        mitered = stroke.join is LineJoin.MITER and stroke.miter_limit >= _MITER_RIGHT_ANGLE
        ext = hw if mitered else 0.0

        bands = (
            _box(x0 - ext, y0 - hw, x1 + ext, y0 + hw),
            _box(x0 - ext, y1 - hw, x1 + ext, y1 + hw),
            _box(x0 - hw, y0 - ext, x0 + hw, y1 + ext),
            _box(x1 - hw, y0 - ext, x1 + hw, y1 + ext),
        )
        for band in bands:
            self._fill_poly(img, band)

        if stroke.join is LineJoin.ROUND:
            for cx, cy in ((x0, y0), (x1, y0), (x1, y1), (x0, y1)):
                self._fill_disc(img, cx, cy, hw)
        elif not mitered:
            corners = ((x0, y0, -1, -1), (x1, y0, 1, -1), (x1, y1, 1, 1), (x0, y1, -1, 1))
            for cx, cy, dx, dy in corners:
                self._fill_poly(img, ((cx + dx * hw, cy), (cx, cy + dy * hw), (cx, cy)))

    # -------------------------------------------------------------- internal

    def _target(self) -> np.ndarray:
        if self._img is None:
            raise RuntimeError("Canvas is disposed")
        return self._img

    def _points(self, pts: Iterable[Tuple[float, float]]) -> np.ndarray:
        arr = np.asarray(list(pts), dtype=np.float64)
        if not self._hints.stroke_pure:
            arr = np.round(arr)
        return np.round(arr * _SUBPIXEL_SCALE).astype(np.int32)

    def _fill_poly(self, img: np.ndarray, pts: Iterable[Tuple[float, float]]) -> None:
        cv2.fillConvexPoly(
            img,
            self._points(pts),
            self._color,
            lineType=self._hints.line_type,
            shift=SUBPIXEL_SHIFT,
        )

    def _fill_disc(self, img: np.ndarray, cx: float, cy: float, radius: float) -> None:
        center = self._points(((cx, cy),))[0]
        cv2.circle(
            img,
            (int(center[0]), int(center[1])),
            max(1, int(round(radius * _SUBPIXEL_SCALE))),
            self._color,
            thickness=-1,
            lineType=self._hints.line_type,
            shift=SUBPIXEL_SHIFT,
        )


def open_canvas(
    img: np.ndarray,
    pixel_format: PixelFormat = ABGR,
    hints: Optional[RenderingHints] = None,
    logger: Optional[logging.Logger] = None,
) -> Canvas:
    """Open a canvas over ``img``; meant for ``with open_canvas(...) as g:``."""
    return Canvas(img, pixel_format=pixel_format, hints=hints, logger=logger)
