"""Shared test fixtures and event types for all eventapi tests."""

import pytest
from loguru import logger

from eventapi import CancellableEvent, Event


class Ping(Event):
    msg: str


class Pong(Event):
    msg: str


class ChildPing(Ping):
    extra: str = ""


class ClickEvent(CancellableEvent):
    x: int = 0
    y: int = 0


class Recorder:
    """Collects the labels handlers append, in invocation order."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, label: str) -> None:
        self.calls.append(label)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def log_records():
    """Enable eventapi logging and capture emitted loguru records."""
    records: list[dict] = []
    logger.enable("eventapi")
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
    logger.disable("eventapi")
