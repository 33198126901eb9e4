"""Structured event logging for tokencalc.

Provides a unified event schema, filesystem NDJSON sink, and safe
emit helpers that never raise uncaught exceptions.
"""

from tokencalc.logging.events import (
    EventLevel,
    EventType,
    TokencalcEvent,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    reset_sink,
    set_project_dir,
)
from tokencalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "TokencalcEvent",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "reset_sink",
    "set_project_dir",
]
