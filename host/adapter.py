"""Return-code host adapter for frame filters.

:class:`FilterHost` is the boundary a native video pipeline talks to. It
loads a filter from JSON config, hands it one packed frame per call, and
turns every failure into a logged, non-zero return code:

- ``filter_init(config)``: parse config, load the class, call ``init``.
- ``filter_frame(data, width, height, line_size, ts_ms)``: pack the strided
  rows, call ``on_frame``, copy a non-``None`` result back into ``data``.
- ``filter_uninit()``: call ``destroy`` and unload.

A filter exception during ``filter_frame`` is fatal: the host is marked
failed and every later frame is refused.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from common.frame import Frame

from .config import ConfigError, parse_config
from .loader import FilterLoadError, create_filter

_LOG = logging.getLogger(__name__)

OK = 0
ERROR = 1


class FilterHost:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or _LOG
        self._filter: Any = None
        self._failed = False

    @property
    def loaded(self) -> bool:
        return self._filter is not None

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def filter(self) -> Any:
        return self._filter

    # ----------------------------------------------------------------- main API

    def filter_init(self, config_text: str) -> int:
        # a re-init tears down whatever was loaded before
        self.filter_uninit()
        self._failed = False

        try:
            config = parse_config(config_text)
            flt = create_filter(config)
        except (ConfigError, FilterLoadError) as exc:
            self._log.error("%s", exc)
            return ERROR

        try:
            flt.init()
        except Exception:
            self._log.exception("error calling init method")
            return ERROR

        self._filter = flt
        return OK

    def filter_frame(
        self,
        data,
        width: int,
        height: int,
        line_size: int,
        ts_ms: float,
    ) -> int:
        if len(data) == 0 or width <= 0 or height <= 0:
            return OK

        if self._filter is None:
            self._log.error("no filter loaded")
            return ERROR
        if self._failed:
            self._log.error("filter failed earlier; refusing frame")
            return ERROR
        if memoryview(data).readonly:
            self._log.error("frame buffer is read-only")
            return ERROR

        try:
            frame = Frame.from_strided(data, width, height, line_size, ts_ms)
        except ValueError as exc:
            self._log.error("invalid frame: %s", exc)
            return ERROR

        try:
            out = self._filter.on_frame(frame.data, width, height, ts_ms)
        except Exception:
            self._failed = True
            self._log.exception("error calling on_frame method")
            return ERROR

        if out is None:
            return OK

        if len(out) != frame.expected_size:
            self._log.error(
                "on_frame returned a buffer with invalid length: %d != %d",
                len(out),
                frame.expected_size,
            )
            return ERROR

        Frame(data=out, width=width, height=height, ts_ms=ts_ms).write_strided(data, line_size)
        return OK

    def filter_uninit(self) -> None:
        flt, self._filter = self._filter, None
        if flt is None:
            return
        try:
            flt.destroy()
        except Exception:
            self._log.exception("error calling destroy method")
