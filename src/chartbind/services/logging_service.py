"""Capture of ``chartbind`` log records keyed by event owner.

The option tree and the event bridge attach context to their records through
``extra``: ``owner_id`` and ``event_kind`` for registrations and handler
failures, ``option_path`` for tree collisions. ``LoggingService`` keeps the
most recent records in a ring buffer with that context lifted into
``LogEntry`` fields, so a host can ask what happened to one series (and its
point handlers) without parsing messages.
"""

from __future__ import annotations

import json
import logging
import os
from collections import deque
from dataclasses import asdict, dataclass
from typing import Deque, Iterable, List, Optional, Union

from chartbind.config.settings import DEFAULT_LOG_CAPACITY, LOGGER_NAME

__all__ = [
    "LogEntry",
    "LoggingService",
    "get_logging_service",
]


@dataclass(frozen=True)
class LogEntry:
    level: str
    logger: str
    message: str
    created: float
    owner_id: Optional[str] = None
    kind: Optional[str] = None
    option_path: Optional[str] = None

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        return cls(
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            created=record.created,
            owner_id=getattr(record, "owner_id", None),
            kind=getattr(record, "event_kind", None),
            option_path=getattr(record, "option_path", None),
        )

    def belongs_to(self, owner_id: str) -> bool:
        """True for ``owner_id`` itself and its scoped sub-owners (``owner.point``)."""
        if self.owner_id is None:
            return False
        return self.owner_id == owner_id or self.owner_id.startswith(owner_id + ".")


class _RingBufferHandler(logging.Handler):
    def __init__(self, entries: Deque[LogEntry]) -> None:
        super().__init__(level=logging.DEBUG)
        self._entries = entries

    def emit(self, record: logging.LogRecord) -> None:
        self._entries.append(LogEntry.from_record(record))


def _level_no(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.NOTSET
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


class LoggingService:
    """Ring buffer of recent records from one logger hierarchy.

    Args:
        capacity: Maximum number of entries kept; older ones are evicted.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY) -> None:
        self._entries: Deque[LogEntry] = deque(maxlen=max(1, capacity))
        self._handler = _RingBufferHandler(self._entries)
        self._attached_to: Optional[logging.Logger] = None

    # Lifecycle --------------------------------------------------------
    def attach(self, logger_name: str = LOGGER_NAME) -> None:
        if self._attached_to is not None:
            return
        logger = logging.getLogger(logger_name)
        logger.addHandler(self._handler)
        # Registration records are DEBUG
        if logger.level == logging.NOTSET or logger.level > logging.DEBUG:
            logger.setLevel(logging.DEBUG)
        self._attached_to = logger

    def detach(self) -> None:
        if self._attached_to is None:
            return
        self._attached_to.removeHandler(self._handler)
        self._attached_to = None

    @property
    def attached(self) -> bool:
        return self._attached_to is not None

    def clear(self) -> None:
        self._entries.clear()

    # Query ------------------------------------------------------------
    def entries(
        self,
        *,
        min_level: Union[int, str, None] = None,
        owner_id: str | None = None,
        kind: str | None = None,
        logger_contains: str | None = None,
        limit: int | None = None,
    ) -> List[LogEntry]:
        """Entries oldest first, narrowed by the given filters.

        ``owner_id`` matches the owner and its scoped sub-owners; ``limit``
        keeps the newest matches.
        """
        threshold = _level_no(min_level)
        out: List[LogEntry] = []
        for entry in self._entries:
            if threshold and _level_no(entry.level) < threshold:
                continue
            if owner_id is not None and not entry.belongs_to(owner_id):
                continue
            if kind is not None and entry.kind != kind:
                continue
            if logger_contains and logger_contains not in entry.logger:
                continue
            out.append(entry)
        return out[-limit:] if limit is not None else out

    def for_owner(self, owner_id: str) -> List[LogEntry]:
        return self.entries(owner_id=owner_id)

    # Export ------------------------------------------------------------
    def export_jsonl(
        self,
        path: str | None = None,
        *,
        entries: Iterable[LogEntry] | None = None,
        append: bool = False,
    ) -> int:
        """Write ``entries`` (default: everything buffered) as JSON Lines.

        Returns the number of lines written.
        """
        selected = list(self._entries if entries is None else entries)
        file_path = path or os.path.join(os.getcwd(), "chartbind-logs.jsonl")
        with open(file_path, "a" if append else "w", encoding="utf-8") as f:
            for entry in selected:
                f.write(json.dumps(asdict(entry), sort_keys=True) + "\n")
        return len(selected)


_default_service: Optional[LoggingService] = None


def get_logging_service() -> LoggingService:
    """Process-wide service, created and attached on first use."""
    global _default_service
    if _default_service is None:
        _default_service = LoggingService()
        _default_service.attach()
    return _default_service
