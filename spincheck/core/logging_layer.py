# spincheck/core/logging_layer.py
# Logging Layer -- in-memory event trace for verification runs.
#
# Scope: Event-sourced logging. No file IO. No global mutable state.
# Every engine function accepts an optional EventLogger; when one is given,
# each scan decision is recorded as an Event. The harness prints the trace
# on request. All hashes are deterministic.
#
# Canonical import:
#   from spincheck.core.logging_layer import EventLogger, Event, EventFilter
#
# Prohibited: datetime.now(), uuid, random, file IO, global mutable state

# ===========================================================================
# SECTION 1 -- STDLIB IMPORTS
# ===========================================================================

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

# ===========================================================================
# SECTION 2 -- CONSTANTS
# ===========================================================================

# Event types emitted by the engine.
MARKER_FOUND: str       = "MARKER_FOUND"
FORMAT_DETECTED: str    = "FORMAT_DETECTED"
TOKENS_COLLECTED: str   = "TOKENS_COLLECTED"
RUN_COUNTED: str        = "RUN_COUNTED"
IDIOM_SLOT_MATCHED: str = "IDIOM_SLOT_MATCHED"
VERDICT: str            = "VERDICT"

# Field separator used inside hash preimage.
_HASH_SEP: str = "|"

# ===========================================================================
# SECTION 3 -- DATACLASSES: Event, EventFilter
# ===========================================================================

@dataclass(frozen=True)
class Event:
    """
    Immutable record of a single engine event.

    Fields
    ------
    id   : Deterministic identifier derived from the logger's counter.
    type : Category string (MARKER_FOUND, FORMAT_DETECTED, ...).
    data : Key-value payload, copied on entry.
    hash : SHA-256 hex digest over (id, type, data).
    """
    id: str
    type: str
    data: Dict[str, Any]
    hash: str


@dataclass
class EventFilter:
    """
    Filter specification for EventLogger.query_events().

    event_type : If set, only events of this type are returned.
    limit      : If set, at most this many events (oldest first).
    """
    event_type: Optional[str] = None
    limit: Optional[int] = None


# ===========================================================================
# SECTION 4 -- INTERNAL HELPERS
# ===========================================================================

def _compute_hash(event_id: str, event_type: str, data: Dict[str, Any]) -> str:
    """
    SHA-256 over event_id, event_type and repr(sorted(data.items())),
    joined by _HASH_SEP. Independent of dict insertion order.
    """
    preimage: str = (
        event_id
        + _HASH_SEP
        + event_type
        + _HASH_SEP
        + repr(sorted(data.items()))
    )
    return hashlib.sha256(preimage.encode("utf-8", errors="replace")).hexdigest()


def _make_event_id(counter: int) -> str:
    """Format: "EVT-{counter:016d}"."""
    return "EVT-{:016d}".format(counter)


# ===========================================================================
# SECTION 5 -- EventLogger
# ===========================================================================

class EventLogger:
    """
    Event-sourced trace of one or more verification calls.

    Events are held in an instance-level list. Each EventLogger is fully
    independent; sharing one between threads is the caller's business.
    log_event() raises LoggingError instead of dropping an event.
    """

    def __init__(self) -> None:
        self._store: List[Event] = []
        self._counter: int = 0

    def log_event(self, event_type: str, data: Dict[str, Any]) -> str:
        """
        Record one event and return its ID.

        Raises
        ------
        LoggingError : If event_type is empty or data is not a dict.
        """
        if not event_type:
            raise LoggingError("event_type must be a non-empty string")
        if not isinstance(data, dict):
            raise LoggingError(
                "data must be a dict; got: {}".format(type(data))
            )

        self._counter += 1
        event_id: str = _make_event_id(self._counter)
        payload: Dict[str, Any] = dict(data)
        event = Event(
            id=event_id,
            type=event_type,
            data=payload,
            hash=_compute_hash(event_id, event_type, payload),
        )
        self._store.append(event)
        return event_id

    def query_events(self, filter: EventFilter) -> List[Event]:
        """
        Return events matching the filter, in insertion order.

        Raises LoggingError if filter is None.
        """
        if filter is None:
            raise LoggingError("filter must not be None")

        results: List[Event] = [
            event for event in self._store
            if filter.event_type is None or event.type == filter.event_type
        ]
        if filter.limit is not None:
            results = results[: filter.limit]
        return results

    def get_event_stream(self) -> Iterator[Event]:
        yield from self._store

    def event_count(self) -> int:
        return len(self._store)


def emit(logger: Optional[EventLogger], event_type: str, **data: Any) -> None:
    """Log to `logger` if one was supplied."""
    if logger is not None:
        logger.log_event(event_type, data)


# ===========================================================================
# SECTION 6 -- EXCEPTIONS
# ===========================================================================

class LoggingError(Exception):
    """
    Raised by EventLogger on a malformed event or filter. Never silently
    swallowed.
    """


__all__ = [
    "MARKER_FOUND",
    "FORMAT_DETECTED",
    "TOKENS_COLLECTED",
    "RUN_COUNTED",
    "IDIOM_SLOT_MATCHED",
    "VERDICT",
    "Event",
    "EventFilter",
    "EventLogger",
    "LoggingError",
    "emit",
]
