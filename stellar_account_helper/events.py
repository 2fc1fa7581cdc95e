"""
Funding events and sinks.

The core never prints. Every notable step is emitted as a ``FundingEvent``
to an injected ``EventSink``; the default sink drops everything, so a
funding run is silent and deterministic unless the caller opts in.

Sinks:
    - NullEventSink (default)
    - RecordingEventSink (keeps events in memory, used by tests)
    - StructlogEventSink (forwards to a structlog logger)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from stellar_account_helper.logging_config import get_logger


class EventType(StrEnum):
    """Everything the helper reports while funding an account."""

    # Identity
    VIEW_ONLY_IDENTITY = "VIEW_ONLY_IDENTITY"

    # Orchestration
    STATE_ENTERED = "STATE_ENTERED"
    ACCOUNT_EXISTS = "ACCOUNT_EXISTS"
    FUNDING_REQUESTED = "FUNDING_REQUESTED"
    SUBMISSION_REJECTED = "SUBMISSION_REJECTED"
    BOOTSTRAP_REQUESTED = "BOOTSTRAP_REQUESTED"
    BOOTSTRAP_FAILED = "BOOTSTRAP_FAILED"
    ACCOUNT_FUNDED = "ACCOUNT_FUNDED"
    FUNDING_FAILED = "FUNDING_FAILED"


# Events that describe a problem rather than progress.
_WARNING_EVENTS = frozenset({
    EventType.VIEW_ONLY_IDENTITY,
    EventType.SUBMISSION_REJECTED,
    EventType.BOOTSTRAP_FAILED,
    EventType.FUNDING_FAILED,
})


@dataclass(frozen=True)
class FundingEvent:
    """A single structured event. ``fields`` never contains secrets."""

    type: EventType
    message: str
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "type": str(self.type),
            "message": self.message,
            "fields": self.fields,
        }


@runtime_checkable
class EventSink(Protocol):
    """Receives funding events."""

    def emit(self, event: FundingEvent) -> None:
        ...


class NullEventSink:
    """Drops every event."""

    def emit(self, event: FundingEvent) -> None:
        return None


class RecordingEventSink:
    """Keeps every event in order."""

    def __init__(self) -> None:
        self.events: list[FundingEvent] = []

    def emit(self, event: FundingEvent) -> None:
        self.events.append(event)

    def types(self) -> list[EventType]:
        return [event.type for event in self.events]


class StructlogEventSink:
    """Forwards events to structlog.

    Problem events go out at WARNING, progress at INFO. The event type is
    bound as ``event_type`` alongside the event's own fields.
    """

    def __init__(self, logger: Any | None = None) -> None:
        self._logger = logger or get_logger("stellar_account_helper")

    def emit(self, event: FundingEvent) -> None:
        log = self._logger.warning if event.type in _WARNING_EVENTS else self._logger.info
        log(event.message, event_type=str(event.type), **event.fields)


def emit(sink: EventSink | None, event_type: EventType, message: str, **fields: Any) -> None:
    """Emit to ``sink`` if one is configured."""
    if sink is not None:
        sink.emit(FundingEvent(type=event_type, message=message, fields=fields))
