"""Error capture at the engine's callback boundary.

The event bridge never swallows handler exceptions; it re-raises them to
whoever invoked the native callback. Hosts that embed the engine can wrap
those callbacks with ``ErrorHandlingService.guard`` to record failures (with
deduplication of repeated tracebacks) and choose between re-raising and
answering the engine with a fallback signal.

Usage
-----
svc = ErrorHandlingService(reraise=False)
for binding in chart.event_bindings():
    engine.attach(binding.path, svc.guard(binding.callback,
                                          owner_id=binding.owner_id,
                                          kind=binding.kind))
"""

from __future__ import annotations

import functools
import logging
import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

from chartbind.config.settings import DEFAULT_ERROR_CAPACITY
from chartbind.events.bridge import NativeSignal

__all__ = [
    "ErrorRecord",
    "DedupEntry",
    "ErrorHandlingService",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorRecord:
    """Structured capture of a callback failure.

    Attributes
    ----------
    exc_type: type
        Exception class.
    exc_value: BaseException
        Exception instance.
    traceback_str: str
        Formatted traceback text.
    timestamp: float
        POSIX timestamp when handled.
    iso_time: str
        ISO 8601 timestamp (UTC).
    owner_id: str | None
        Event owner the failing callback was bound to, when known.
    kind: str | None
        Event kind of the failing callback, when known.
    """

    exc_type: type
    exc_value: BaseException
    traceback_str: str
    timestamp: float
    iso_time: str
    owner_id: Optional[str] = None
    kind: Optional[str] = None

    def summary(self, max_len: int = 120) -> str:  # pragma: no cover - trivial
        msg = f"{self.exc_type.__name__}: {self.exc_value}"
        return msg if len(msg) <= max_len else msg[: max_len - 3] + "..."


@dataclass
class DedupEntry:
    """Aggregated repeated failures sharing exception type and traceback."""

    key: str
    first: ErrorRecord
    count: int
    last_timestamp: float


class ErrorHandlingService:
    """Records callback failures and applies the boundary's disposition policy.

    Args:
        capacity: Size of the raw error ring buffer.
        reraise: Re-raise after recording (default) or answer the engine
            with ``fallback`` instead.
        fallback: Signal returned to the engine when not re-raising.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_ERROR_CAPACITY,
        reraise: bool = True,
        fallback: NativeSignal = NativeSignal.PROCEED,
    ) -> None:
        self._errors: Deque[ErrorRecord] = deque(maxlen=max(1, capacity))
        self._reraise = reraise
        self._fallback = fallback
        self._dedup_enabled = True
        self._dedup: Dict[str, DedupEntry] = {}
        self._dedup_order: List[str] = []

    # ------------------------------------------------------------------
    # Boundary wrapper
    # ------------------------------------------------------------------
    def guard(
        self,
        callback: Callable[..., bool],
        *,
        owner_id: str | None = None,
        kind: str | None = None,
    ) -> Callable[..., bool]:
        @functools.wraps(callback)
        def _guarded(*args: Any, **kwargs: Any) -> bool:
            try:
                return callback(*args, **kwargs)
            except Exception as exc:
                self.handle_exception(
                    type(exc), exc, exc.__traceback__, owner_id=owner_id, kind=kind
                )
                if self._reraise:
                    raise
                return self._fallback.as_native()

        return _guarded

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------
    def handle_exception(
        self,
        exc_type,
        exc_value,
        tb,
        *,
        owner_id: str | None = None,
        kind: str | None = None,
    ) -> ErrorRecord:
        """Capture a failure and store an ``ErrorRecord``.

        Deduplication:
            When enabled (default), repeated exceptions with identical
            traceback text + type aggregate into a ``DedupEntry`` whose count
            increments; every occurrence still lands in the raw ring buffer.
        """
        trace_text = "".join(traceback.format_exception(exc_type, exc_value, tb))
        now = datetime.now(timezone.utc)
        record = ErrorRecord(
            exc_type=exc_type,
            exc_value=exc_value,
            traceback_str=trace_text,
            timestamp=now.timestamp(),
            iso_time=now.isoformat(),
            owner_id=owner_id,
            kind=kind,
        )
        self._errors.append(record)
        if self._dedup_enabled:
            key = f"{record.exc_type.__name__}|{hash(record.traceback_str)}"
            entry = self._dedup.get(key)
            if entry is None:
                self._dedup[key] = DedupEntry(
                    key=key, first=record, count=1, last_timestamp=record.timestamp
                )
                self._dedup_order.append(key)
            else:
                entry.count += 1
                entry.last_timestamp = record.timestamp
        log.warning(
            "callback failure for %s/%s: %s: %s",
            owner_id or "?",
            kind or "?",
            record.exc_type.__name__,
            record.exc_value,
            extra={"owner_id": owner_id, "event_kind": kind},
        )
        return record

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def recent_errors(self) -> List[ErrorRecord]:
        return list(self._errors)

    def dedup_entries(self) -> List[DedupEntry]:
        """Aggregated groups in first-seen order."""
        return [self._dedup[k] for k in self._dedup_order]

    def enable_dedup(self, enabled: bool = True) -> None:
        """Enable/disable deduplication; disabling clears current groups."""
        self._dedup_enabled = enabled
        if not enabled:
            self._dedup.clear()
            self._dedup_order.clear()

    def clear(self) -> None:
        self._errors.clear()
        self._dedup.clear()
        self._dedup_order.clear()
