#!/usr/bin/env python3
"""Push one synthetic frame through a filter via :class:`host.FilterHost`.

Example:
    python -m tools.run_filter filters.sample:SampleFilter -W 640 -H 360 -o out.png
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Optional

from common.frame import BYTES_PER_PIXEL, Frame
from common.pixel_format import RGBA
from filters.errors import EncodingError
from filters.snapshot import save_png
from host.adapter import OK, FilterHost

__version__ = "0.1.0"

_LOG = logging.getLogger(__name__)

FILL_BYTE = 0x55
PROPERTIES_ENV = "FRAME_FILTER_PROPERTIES"


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run_filter",
        description="Run a frame filter on a single synthetic frame.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument(
        "filter",
        metavar="FILTER",
        help="Filter class to run, e.g. 'filters.sample:SampleFilter'.",
    )
    ap.add_argument(
        "-c",
        "--config",
        help=(
            "JSON object of filter properties. Falls back to the "
            f"{PROPERTIES_ENV} environment variable."
        ),
    )
    ap.add_argument("-t", "--timestamp", type=float, default=0.0, help="Frame timestamp (ms).")
    ap.add_argument("-W", "--width", type=int, default=1280, help="Frame width.")
    ap.add_argument("-H", "--height", type=int, default=720, help="Frame height.")
    ap.add_argument(
        "-o",
        "--png_out",
        help="Write the filtered frame bytes to this path as an RGBA PNG.",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return ap


def _host_config(filter_name: str, props_json: Optional[str]) -> str:
    """Build host config JSON; raises ``json.JSONDecodeError`` on bad properties."""
    body: dict = {"class_name": filter_name}
    if props_json:
        body["properties"] = json.loads(props_json)
    return json.dumps(body)


def main(argv: Optional[list[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    props_json = args.config if args.config is not None else os.environ.get(PROPERTIES_ENV)
    try:
        config = _host_config(args.filter, props_json)
    except json.JSONDecodeError as exc:
        _LOG.error("invalid --config JSON: %s", exc)
        return 1

    host = FilterHost()
    rv = host.filter_init(config)
    _LOG.info("filter_init returned %d", rv)
    if rv != OK:
        return rv

    frame = Frame.filled(args.width, args.height, FILL_BYTE, ts_ms=args.timestamp)
    line_size = args.width * BYTES_PER_PIXEL
    rv = host.filter_frame(frame.data, frame.width, frame.height, line_size, frame.ts_ms)
    _LOG.info("filter_frame returned %d", rv)
    host.filter_uninit()

    if rv == OK and args.png_out:
        _LOG.info("writing PNG to %s", args.png_out)
        view = RGBA.view(frame.data, frame.width, frame.height)
        try:
            save_png(view, args.png_out, RGBA).raise_for_error()
        except EncodingError as exc:
            _LOG.error("%s", exc)
            return 1

    return rv


if __name__ == "__main__":
    raise SystemExit(main())
