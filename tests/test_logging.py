"""Tests for the tokencalc structured event logging system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tokencalc.config import CONFIG_FILENAME
from tokencalc.editor import FormulaEditor
from tokencalc.logging import (
    EventLevel,
    EventSink,
    EventType,
    TokencalcEvent,
    emit,
    emit_error,
    emit_info,
    set_project_dir,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sink(tmp_path: Path) -> EventSink:
    return EventSink(tmp_path)


def _lines(project_dir: Path) -> list[dict]:
    path = project_dir / "logs" / "events.ndjson"
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


# ---------------------------------------------------------------------------
# Event schema
# ---------------------------------------------------------------------------


class TestTokencalcEvent:
    def test_event_defaults(self) -> None:
        evt = TokencalcEvent(
            level=EventLevel.info,
            event_type=EventType.formula_evaluated,
            message="hello",
        )
        assert evt.schema_version == 1
        assert evt.ts.endswith("Z")
        assert evt.level == "info"
        assert evt.context == {}
        assert evt.error_code is None

    def test_all_event_types_exist(self) -> None:
        assert {e.value for e in EventType} == {
            "formula_evaluated",
            "formula_eval_error",
            "edit_committed",
            "edit_cancelled",
            "token_removed",
            "catalog_load_failed",
        }


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


class TestEventSink:
    def test_write_and_read(self, sink: EventSink, tmp_path: Path) -> None:
        sink.write(TokencalcEvent(level=EventLevel.info, event_type=EventType.token_removed, message="a"))
        sink.write(TokencalcEvent(level=EventLevel.error, event_type=EventType.formula_eval_error, message="b"))
        events = sink.read_global()
        assert [e["message"] for e in events] == ["b", "a"]
        assert len(_lines(tmp_path)) == 2

    def test_filters(self, sink: EventSink) -> None:
        sink.write(TokencalcEvent(level=EventLevel.info, event_type=EventType.token_removed))
        sink.write(TokencalcEvent(level=EventLevel.warning, event_type=EventType.formula_eval_error))
        assert len(sink.read_global(level="warning")) == 1
        assert len(sink.read_global(event_type="token_removed")) == 1
        assert len(sink.read_global(limit=1)) == 1

    def test_skips_corrupt_lines(self, sink: EventSink) -> None:
        sink.path.write_text('not json\n{"level": "info"}\n')
        assert sink.read_global() == [{"level": "info"}]

    def test_tail_read_drops_partial_line(self, tmp_path: Path) -> None:
        sink = EventSink(tmp_path, tail_bytes=400)
        for i in range(20):
            sink.write(TokencalcEvent(level=EventLevel.info, event_type=EventType.token_removed, message=str(i)))
        events = sink.read_global()
        assert 0 < len(events) < 20
        assert all("message" in e for e in events)
        assert events[0]["message"] == "19"

    def test_read_missing_file(self, sink: EventSink) -> None:
        assert sink.read_global() == []


# ---------------------------------------------------------------------------
# Module-level emit
# ---------------------------------------------------------------------------


class TestEmit:
    def test_without_sink_is_noop(self, tmp_path: Path) -> None:
        emit_info(EventType.token_removed, "ignored")
        assert _lines(tmp_path) == []

    def test_with_project_dir(self, tmp_path: Path) -> None:
        set_project_dir(tmp_path)
        emit_error(EventType.formula_eval_error, "boom", {"index": 2}, error_code="division_by_zero")
        (event,) = _lines(tmp_path)
        assert event["level"] == "error"
        assert event["error_code"] == "division_by_zero"
        assert event["context"] == {"index": 2}

    def test_disabled_by_config(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("logging_enabled: false\n")
        set_project_dir(tmp_path)
        emit_info(EventType.token_removed, "ignored")
        assert _lines(tmp_path) == []

    def test_never_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        set_project_dir(tmp_path)

        def _broken(self, event):
            raise OSError("disk full")

        monkeypatch.setattr(EventSink, "write", _broken)
        emit(TokencalcEvent(level=EventLevel.info, event_type=EventType.token_removed))


class TestEditorEvents:
    def test_evaluation_events(self, tmp_path: Path) -> None:
        set_project_dir(tmp_path)
        editor = FormulaEditor()
        editor.type_text("revenue")
        editor.press_key("/")
        editor.type_text("2")
        editor.press_key("=")
        editor.press_key("*")
        editor.press_key("=")

        ok, failed = _lines(tmp_path)
        assert ok["event_type"] == "formula_evaluated"
        assert ok["context"]["unresolved"] == ["revenue"]
        assert failed["event_type"] == "formula_eval_error"
        assert failed["level"] == "warning"
        assert failed["error_code"] == "malformed_expression"
        assert failed["context"]["index"] == 3

    def test_edit_events(self, tmp_path: Path) -> None:
        set_project_dir(tmp_path)
        editor = FormulaEditor()
        editor.type_text("1")
        editor.press_key("+")
        editor.session.begin(0)
        editor.session.update("5")
        editor.session.commit()
        editor.session.begin(0)
        editor.session.cancel()
        editor.press_key("Backspace")

        types = [e["event_type"] for e in _lines(tmp_path)]
        assert types == ["edit_committed", "edit_cancelled", "token_removed"]

    def test_stale_commit_not_logged(self, tmp_path: Path) -> None:
        set_project_dir(tmp_path)
        editor = FormulaEditor()
        editor.type_text("1")
        editor.press_key("+")
        editor.type_text("2")
        editor.press_key("Enter")
        editor.session.begin(2)
        editor.sequence.remove_at(2)
        assert editor.session.commit() is None

        assert [e["event_type"] for e in _lines(tmp_path)] == []
