"""Shared test fixtures for Ingestflow."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from ingestflow.core.classifier import MessageClassifier
from ingestflow.handlers.context import HandlerContext
from ingestflow.models.messages import RawMessage
from ingestflow.models.records import LoadedData
from ingestflow.routing.fanout import FanOutPersister
from ingestflow.routing.registry import SinkSet
from ingestflow.routing.sinks.memory import InMemorySink
from ingestflow.sources.memory import InMemoryEventSource


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class RecordingEventSource:
    """Event source that only records complete/abandon calls."""

    def __init__(self, *, fail_abandon: bool = False) -> None:
        self.calls: list[str] = []
        self._fail_abandon = fail_abandon

    def has_message(self) -> bool:
        return False

    def next_message(self) -> RawMessage:
        raise AssertionError("next_message() is not used in handler tests")

    def complete(self) -> None:
        self.calls.append("complete")

    def abandon(self) -> None:
        self.calls.append("abandon")
        if self._fail_abandon:
            raise ConnectionError("broker went away")


class CountingDataSource:
    """Data source that counts ``load_data()`` calls."""

    def __init__(self, values: dict[str, str] | None = None, error: Exception | None = None) -> None:
        self.calls = 0
        self._values = values or {}
        self._error = error

    def load_data(self) -> LoadedData:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return LoadedData(values=self._values)


class FailingSink:
    """A sink that always raises the given error."""

    def __init__(self, name: str = "failing", error: Exception | None = None) -> None:
        self._name = name
        self.error = error or OSError("disk full")
        self.attempts = 0

    @property
    def sink_name(self) -> str:
        return self._name

    def save(self, record) -> None:
        self.attempts += 1
        raise self.error


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


@pytest.fixture
def history_sink() -> InMemorySink:
    return InMemorySink("history")


@pytest.fixture
def external_sink() -> InMemorySink:
    return InMemorySink("external")


@pytest.fixture
def excluded_sink() -> InMemorySink:
    return InMemorySink("excluded")


@pytest.fixture
def unknown_sink() -> InMemorySink:
    return InMemorySink("unknown")


@pytest.fixture
def sink_set(
    history_sink: InMemorySink,
    external_sink: InMemorySink,
    excluded_sink: InMemorySink,
    unknown_sink: InMemorySink,
) -> SinkSet:
    """Success fans out to history + external; the rest are single sinks."""
    return SinkSet(
        success=FanOutPersister([history_sink, external_sink], name="success"),
        excluded=excluded_sink,
        unknown=unknown_sink,
    )


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@pytest.fixture
def make_member_event() -> Callable[..., RawMessage]:
    """Factory fixture: build a member-event RawMessage with sensible defaults."""

    def _factory(
        message_id: str = "m1",
        example: bool = False,
        other: bool = False,
        **overrides: Any,
    ) -> RawMessage:
        fields: dict[str, Any] = {
            "EventType": "MemberEvent",
            "MessageId": message_id,
            "Example": example,
            "Other": other,
        }
        fields.update(overrides)
        return RawMessage(fields=fields)

    return _factory


@pytest.fixture
def unknown_message() -> RawMessage:
    return RawMessage(fields={"EventType": "Heartbeat", "MessageId": "hb-1"})


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def recorder() -> RecordingEventSource:
    return RecordingEventSource()


@pytest.fixture
def source() -> InMemoryEventSource:
    return InMemoryEventSource()


@pytest.fixture
def context(source: InMemoryEventSource, sink_set: SinkSet) -> HandlerContext:
    return HandlerContext(source, sink_set)


@pytest.fixture
def classifier(context: HandlerContext) -> MessageClassifier:
    return MessageClassifier(context)


# ---------------------------------------------------------------------------
# Double factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_counting_source() -> Callable[..., CountingDataSource]:
    """Factory fixture: a data source that counts ``load_data()`` calls."""
    return CountingDataSource


@pytest.fixture
def make_failing_sink() -> Callable[..., FailingSink]:
    """Factory fixture: a sink whose ``save()`` always raises."""
    return FailingSink


@pytest.fixture
def make_recorder() -> Callable[..., RecordingEventSource]:
    """Factory fixture: an event source that records complete/abandon."""
    return RecordingEventSource
