"""Sample frame filter showing the lifecycle hooks and in-place drawing.

On the first frame it wraps the raw bytes in a pixel view, fills a square
in yellow, outlines it in magenta, and saves a PNG of the result to the
working directory. Every later frame is passed through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

from common.pixel_format import ABGR, PixelFormat

from .base import FilterState, FrameFilter
from .canvas import LineCap, LineJoin, Rect, RenderingHints, Stroke, open_canvas
from .errors import InitializationError
from .snapshot import save_png

_LOG = logging.getLogger(__name__)

SNAPSHOT_PATH = "java-sample.png"

YELLOW = (255, 255, 0, 255)
MAGENTA = (255, 0, 255, 255)


@dataclass
class SampleFilterConfig:
    """Configuration for :class:`SampleFilter`.

    The defaults reproduce the stock sample: one 100x100 square at (100, 100),
    ABGR input, and a snapshot named ``java-sample.png`` in the CWD.
    """

    rects: Tuple[Rect, ...] = (Rect(100.0, 100.0, 100.0, 100.0),)
    fill_color: Tuple[int, int, int, int] = YELLOW
    stroke_color: Tuple[int, int, int, int] = MAGENTA
    stroke: Stroke = field(
        default_factory=lambda: Stroke(
            width=3.0, cap=LineCap.SQUARE, join=LineJoin.ROUND, miter_limit=10.0
        )
    )
    hints: RenderingHints = field(
        default_factory=lambda: RenderingHints(
            antialias=True,
            color_quality=True,
            render_quality=True,
            text_antialias=True,
            stroke_pure=True,
            fractional_metrics=True,
        )
    )
    pixel_format: PixelFormat = ABGR
    snapshot_path: Path = Path(SNAPSHOT_PATH)


class SampleFilter(FrameFilter):
    """Draws on, and snapshots, only the first frame it sees."""

    def __init__(
        self,
        config: Optional[SampleFilterConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(logger=logger or _LOG)
        self._cfg = config or SampleFilterConfig()
        self.frames_seen = 0

    @classmethod
    def from_properties(cls, props: Mapping[str, str]) -> "SampleFilter":
        """Build a filter from host config properties (``snapshot_path`` only)."""
        unknown = sorted(set(props) - {"snapshot_path"})
        if unknown:
            raise ValueError(f"unknown SampleFilter properties: {', '.join(unknown)}")
        cfg = SampleFilterConfig()
        if "snapshot_path" in props:
            cfg = replace(cfg, snapshot_path=Path(props["snapshot_path"]))
        return cls(config=cfg)

    @property
    def config(self) -> SampleFilterConfig:
        return self._cfg

    # ----------------------------------------------------------------- hooks

    def init(self) -> None:
        self._log.info("init")
        try:
            self._cfg.pixel_format.validate()
            self._cfg.stroke.validate()
            for rect in self._cfg.rects:
                rect.validate()
        except ValueError as exc:
            raise InitializationError(f"invalid sample filter config: {exc}") from exc
        self.state = FilterState.INITIALIZED

    def on_frame(self, buffer, width: int, height: int, ts_ms: float):
        self._log.info("onFrame")
        self._log.debug("frame %sx%s ts_ms=%s", width, height, ts_ms)

        seen = self.frames_seen
        self.frames_seen += 1
        if seen != 0:
            # Only the first frame is drawn on.
            return None

        if isinstance(buffer, bytes):
            buffer = bytearray(buffer)

        cfg = self._cfg
        view = cfg.pixel_format.view(buffer, width, height)

        with open_canvas(view, cfg.pixel_format, cfg.hints, logger=self._log) as g2d:
            for rect in cfg.rects:
                g2d.set_color(cfg.fill_color)
                g2d.fill_rect(rect)

                g2d.set_stroke(cfg.stroke)
                g2d.set_color(cfg.stroke_color)
                g2d.stroke_rect(rect)

        self._log.info("Saving PNG of frame to: %s", cfg.snapshot_path.absolute())
        save_png(view, cfg.snapshot_path, cfg.pixel_format).raise_for_error()

        return buffer

    def destroy(self) -> None:
        self._log.info("destroy")
        self.state = FilterState.DESTROYED
