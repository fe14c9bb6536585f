from __future__ import annotations

import json
import sys
import types
from pathlib import Path

import numpy as np
import pytest

from host import ERROR, OK, FilterHost, FilterLoadError, load_filter_class


class _Recording:
    calls: list

    def __init__(self) -> None:
        self.calls = []

    def init(self) -> None:
        self.calls.append("init")

    def on_frame(self, buffer, width, height, ts_ms):
        self.calls.append(("on_frame", width, height, ts_ms, len(buffer)))
        return None

    def destroy(self) -> None:
        self.calls.append("destroy")


class InvertFilter(_Recording):
    def on_frame(self, buffer, width, height, ts_ms):
        super().on_frame(buffer, width, height, ts_ms)
        return bytes(255 - b for b in buffer)


class ShortFilter(_Recording):
    def on_frame(self, buffer, width, height, ts_ms):
        super().on_frame(buffer, width, height, ts_ms)
        return b"\x00"


class BoomFilter(_Recording):
    def on_frame(self, buffer, width, height, ts_ms):
        super().on_frame(buffer, width, height, ts_ms)
        raise RuntimeError("boom")


class BadInitFilter(_Recording):
    def init(self) -> None:
        raise RuntimeError("cannot start")


@pytest.fixture
def fake_filters(monkeypatch):
    mod = types.ModuleType("fake_filters")
    for cls in (_Recording, InvertFilter, ShortFilter, BoomFilter, BadInitFilter):
        setattr(mod, cls.__name__, cls)
    monkeypatch.setitem(sys.modules, "fake_filters", mod)
    return mod


def _config(class_name: str, **props: str) -> str:
    body: dict = {"class_name": class_name}
    if props:
        body["properties"] = props
    return json.dumps(body)


def _started(class_name: str) -> FilterHost:
    host = FilterHost()
    assert host.filter_init(_config(class_name)) == OK
    return host


def test_init_failures_leave_host_unloaded(fake_filters, caplog):
    host = FilterHost()
    assert host.filter_init("{not json") == ERROR
    assert host.filter_init(_config("fake_filters:Missing")) == ERROR
    assert host.filter_init(_config("fake_filters:BadInitFilter")) == ERROR
    assert not host.loaded
    assert "error calling init method" in caplog.text


def test_frame_without_filter_is_an_error():
    assert FilterHost().filter_frame(bytearray(16), 2, 2, 8, 0.0) == ERROR


def test_empty_or_degenerate_frames_are_skipped(fake_filters):
    host = _started("fake_filters:_Recording")
    assert host.filter_frame(bytearray(), 2, 2, 8, 0.0) == OK
    assert host.filter_frame(bytearray(16), 0, 2, 8, 0.0) == OK
    assert host.filter_frame(bytearray(16), 2, -1, 8, 0.0) == OK
    assert host.filter.calls == ["init"]


def test_invalid_buffers_are_rejected(fake_filters):
    host = _started("fake_filters:_Recording")
    assert host.filter_frame(bytes(16), 2, 2, 8, 0.0) == ERROR  # read-only
    assert host.filter_frame(bytearray(16), 2, 2, 4, 0.0) == ERROR  # line_size too small
    assert host.filter_frame(bytearray(15), 2, 2, 8, 0.0) == ERROR  # too short
    assert host.filter.calls == ["init"]


def test_result_is_copied_back_honouring_line_size(fake_filters):
    host = _started("fake_filters:InvertFilter")
    width, height, line_size = 2, 2, 12
    data = bytearray([0x10]) * (height * line_size)

    assert host.filter_frame(data, width, height, line_size, 33.0) == OK

    assert host.filter.calls[-1] == ("on_frame", 2, 2, 33.0, 16)
    for row in range(height):
        start = row * line_size
        assert data[start : start + 8] == bytes([0xEF]) * 8
        assert data[start + 8 : start + 12] == bytes([0x10]) * 4


def test_none_result_leaves_data_untouched(fake_filters):
    host = _started("fake_filters:_Recording")
    data = bytearray(range(16))
    assert host.filter_frame(data, 2, 2, 8, 0.0) == OK
    assert data == bytearray(range(16))


def test_wrong_length_result_is_an_error(fake_filters, caplog):
    host = _started("fake_filters:ShortFilter")
    data = bytearray(16)
    assert host.filter_frame(data, 2, 2, 8, 0.0) == ERROR
    assert data == bytearray(16)
    assert "invalid length" in caplog.text


def test_filter_exception_is_fatal_for_later_frames(fake_filters):
    host = _started("fake_filters:BoomFilter")
    assert host.filter_frame(bytearray(16), 2, 2, 8, 0.0) == ERROR
    assert host.failed

    assert host.filter_frame(bytearray(16), 2, 2, 8, 1.0) == ERROR
    on_frames = [c for c in host.filter.calls if c != "init"]
    assert len(on_frames) == 1


def test_uninit_calls_destroy_once(fake_filters):
    host = _started("fake_filters:_Recording")
    flt = host.filter

    host.filter_uninit()
    host.filter_uninit()

    assert flt.calls == ["init", "destroy"]
    assert not host.loaded


def test_sample_filter_through_host_with_padded_rows(tmp_path: Path):
    snapshot = tmp_path / "host.png"
    host = FilterHost()
    assert (
        host.filter_init(_config("filters.sample:SampleFilter", snapshot_path=str(snapshot)))
        == OK
    )

    width, height = 240, 220
    line_size = width * 4 + 16
    data = bytearray([0x55]) * (height * line_size)

    assert host.filter_frame(data, width, height, line_size, 0.0) == OK
    assert snapshot.exists()

    row = 150 * line_size
    assert data[row + 150 * 4 : row + 151 * 4] == bytes([255, 0, 255, 255])
    assert data[row + width * 4 : row + line_size] == bytes([0x55]) * 16

    # second frame: sample filter returns None, data untouched
    again = bytearray([0x55]) * (height * line_size)
    assert host.filter_frame(again, width, height, line_size, 40.0) == OK
    assert set(again) == {0x55}

    host.filter_uninit()


def test_reinit_destroys_the_previous_filter(fake_filters):
    host = _started("fake_filters:_Recording")
    first = host.filter

    assert host.filter_init(_config("fake_filters:_Recording")) == OK
    second = host.filter
    host.filter_uninit()

    assert second is not first
    assert first.calls == ["init", "destroy"]
    assert second.calls == ["init", "destroy"]


def test_reinit_failure_still_destroys_the_previous_filter(fake_filters):
    host = _started("fake_filters:_Recording")
    first = host.filter

    assert host.filter_init(_config("fake_filters:BadInitFilter")) == ERROR
    assert first.calls == ["init", "destroy"]
    assert not host.loaded


def test_filter_module_raising_on_import_returns_error(tmp_path: Path, monkeypatch, caplog):
    (tmp_path / "broken_filter_mod.py").write_text(
        "raise RuntimeError('bad module')\n", encoding="utf-8"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "broken_filter_mod", raising=False)

    host = FilterHost()
    assert host.filter_init(_config("broken_filter_mod:X")) == ERROR
    assert host.filter_init(_config("..relative:Bar")) == ERROR
    assert not host.loaded
    assert "bad module" in caplog.text

    with pytest.raises(FilterLoadError) as ei:
        load_filter_class("broken_filter_mod:X")
    assert isinstance(ei.value.__cause__, RuntimeError)


def test_numpy_frame_buffer_is_accepted(fake_filters):
    host = _started("fake_filters:InvertFilter")
    data = np.full(16, 0x55, dtype=np.uint8)

    assert host.filter_frame(data, 2, 2, 8, 0.0) == OK
    assert data.tolist() == [0xAA] * 16
    assert host.filter_frame(np.zeros(0, dtype=np.uint8), 2, 2, 8, 0.0) == OK
