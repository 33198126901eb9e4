"""Shared fixtures for tokencalc tests."""

from __future__ import annotations

from typing import Iterator

import pytest

from tokencalc.logging import reset_sink


@pytest.fixture(autouse=True)
def _detach_event_sink() -> Iterator[None]:
    """Keep the module-level event sink from leaking between tests."""
    reset_sink()
    yield
    reset_sink()
