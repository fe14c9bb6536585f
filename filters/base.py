from __future__ import annotations

import enum
import logging
from typing import Optional

_LOG = logging.getLogger(__name__)


class FilterState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DESTROYED = "destroyed"


class FrameFilter:
    """Base class for frame filters driven by a host.

    The host calls :meth:`init` once, :meth:`on_frame` once per frame
    (sequentially, never concurrently), then :meth:`destroy` once. Call
    order is the host's responsibility; ``state`` only records where the
    filter is in that sequence.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or _LOG
        self.state = FilterState.UNINITIALIZED

    def init(self) -> None:
        self.state = FilterState.INITIALIZED

    def on_frame(self, buffer, width: int, height: int, ts_ms: float):
        """Process one packed frame.

        Returns the (possibly mutated) buffer, or ``None`` for "no change".
        """
        return None

    def destroy(self) -> None:
        self.state = FilterState.DESTROYED
