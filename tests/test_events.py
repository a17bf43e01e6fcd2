"""Tests for event emission and timing."""

import io

import pytest

import orjson

from tablekit.engine.kit import HTMLTableKit
from tablekit.observe.events import EventEmitter

from conftest import USERS_HTML


def _events(stream: io.StringIO) -> list[dict]:
    return [orjson.loads(line) for line in stream.getvalue().splitlines()]


def test_disabled_emitter_is_silent():
    stream = io.StringIO()
    EventEmitter(enabled=False, stream=stream).emit("x", {"a": 1})
    assert stream.getvalue() == ""


def test_emitter_writes_ndjson():
    stream = io.StringIO()
    EventEmitter(enabled=True, stream=stream).emit("x", {"a": 1})
    (event,) = _events(stream)
    assert event["event"] == "x"
    assert event["data"] == {"a": 1}
    assert "timestamp" in event


def test_kit_lifecycle_events():
    stream = io.StringIO()
    kit = HTMLTableKit.from_html(USERS_HTML, "users", emitter=EventEmitter(True, stream))
    kit.add_row({"name": "Bo"})
    kit.update_row("ghost", {})
    kit.delete_row("row_0")
    names = [e["event"] for e in _events(stream)]
    assert names == ["table.parsed", "row.added", "row.not_found", "row.deleted"]
    parsed = _events(stream)[0]["data"]
    assert parsed["rows"] == 1
    assert parsed["header_row"] is True
    assert parsed["columns"] == [{"name": "name", "type": "string"}, {"name": "age", "type": "number"}]



def test_timed_emits_after_block():
    stream = io.StringIO()
    emitter = EventEmitter(True, stream)
    with emitter.timed("work") as data:
        assert stream.getvalue() == ""
        data["items"] = 3
    (event,) = _events(stream)
    assert event["event"] == "work"
    assert event["data"]["items"] == 3
    assert event["data"]["duration_ms"] >= 0


def test_timed_is_silent_on_error():
    stream = io.StringIO()
    with pytest.raises(RuntimeError):
        with EventEmitter(True, stream).timed("work"):
            raise RuntimeError("boom")
    assert stream.getvalue() == ""
