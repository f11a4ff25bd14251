"""Import log persistence: a bounded local history plus an optional HTTP sink."""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import requests

logger = logging.getLogger("shelfintake.import")

DEFAULT_LOG_CAPACITY = 50


@dataclass
class ImportLog:
    id: str
    created_at: str
    errors: list[dict[str, Any]] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at,
            "errors": list(self.errors),
            "context": dict(self.context),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ImportLog":
        return cls(
            id=str(payload.get("id") or ""),
            created_at=str(payload.get("created_at") or ""),
            errors=list(payload.get("errors") or []),
            context=dict(payload.get("context") or {}),
        )


class ImportLogSink(Protocol):
    def save(self, log: ImportLog) -> None: ...


class RingBufferLogStore:
    """Keeps the most recent ``capacity`` logs, optionally mirrored to a JSON file."""

    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY, *, path: str | Path | None = None) -> None:
        self.capacity = max(1, int(capacity))
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._logs: deque[ImportLog] = deque(maxlen=self.capacity)
        if self.path is not None and self.path.exists():
            self._load()

    def save(self, log: ImportLog) -> None:
        with self._lock:
            self._logs.append(log)
            if self.path is not None:
                self._flush()

    def recent(self, limit: int | None = None) -> list[ImportLog]:
        with self._lock:
            logs = list(reversed(self._logs))
        if limit is not None:
            return logs[: max(0, limit)]
        return logs

    def __len__(self) -> int:
        return len(self._logs)

    def _load(self) -> None:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable import log file %s: %s", self.path, exc)
            return
        if not isinstance(payload, list):
            return
        for item in payload[-self.capacity :]:
            if isinstance(item, dict):
                self._logs.append(ImportLog.from_dict(item))

    def _flush(self) -> None:
        data = [log.to_dict() for log in self._logs]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            # The in-memory copy still holds the log.
            logger.warning("Could not write import log file %s: %s", self.path, exc)


class HttpImportLogSink:
    """POSTs each import log to an external collector."""

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def save(self, log: ImportLog) -> None:
        response = self.session.post(self.url, json=log.to_dict(), timeout=self.timeout)
        response.raise_for_status()


__all__ = [
    "DEFAULT_LOG_CAPACITY",
    "HttpImportLogSink",
    "ImportLog",
    "ImportLogSink",
    "RingBufferLogStore",
]
