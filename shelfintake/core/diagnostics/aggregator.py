"""Per-request collector for import diagnostics."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Iterable, TypeVar

from .errors import NETWORK_ERROR, SEVERITIES, ImportDiagnostic, Severity, _utcnow, friendly_message
from .logstore import DEFAULT_LOG_CAPACITY, ImportLog, ImportLogSink, RingBufferLogStore

logger = logging.getLogger("shelfintake.import")

T = TypeVar("T")

_LOG_LEVELS = {
    "critical": logging.ERROR,
    "error": logging.WARNING,
    "warning": logging.INFO,
    "info": logging.DEBUG,
}


class ErrorAggregator:
    """Collects diagnostics across pipeline stages for one request.

    ``sink`` is the external log destination; ``local_store`` keeps the bounded
    history used when the sink is missing or fails.
    """

    def __init__(
        self,
        *,
        sink: ImportLogSink | None = None,
        local_store: RingBufferLogStore | None = None,
        max_attempts: int = 3,
        base_delay_ms: int = 1000,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.sink = sink
        self.local_store = local_store if local_store is not None else RingBufferLogStore(DEFAULT_LOG_CAPACITY)
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self._sleep = sleep
        self._errors: list[ImportDiagnostic] = []

    def log(
        self,
        severity: Severity,
        code: str,
        message: str,
        *,
        row: int | None = None,
        field: str | None = None,
        value: Any = None,
        fix_suggestion: str | None = None,
        auto_fixable: bool = False,
    ) -> ImportDiagnostic:
        if severity not in SEVERITIES:
            raise ValueError(f"severity must be one of: {', '.join(SEVERITIES)}")
        diagnostic = ImportDiagnostic(
            severity=severity,
            code=code,
            message=message,
            friendly_message=friendly_message(
                code,
                message,
                row=row,
                field=field,
                value=value,
                fix_suggestion=fix_suggestion,
            ),
            row=row,
            field=field,
            value=value,
            fix_suggestion=fix_suggestion,
            auto_fixable=auto_fixable,
        )
        self._errors.append(diagnostic)
        logger.log(_LOG_LEVELS[severity], "[%s] %s: %s", severity.upper(), code, message)
        return diagnostic

    def extend(self, diagnostics: Iterable[ImportDiagnostic]) -> None:
        self._errors.extend(diagnostics)

    def get_all(self) -> list[ImportDiagnostic]:
        return list(self._errors)

    def get_by_severity(self, severity: Severity) -> list[ImportDiagnostic]:
        return [item for item in self._errors if item.severity == severity]

    def get_auto_fixable(self) -> list[ImportDiagnostic]:
        return [item for item in self._errors if item.auto_fixable]

    def has_critical(self) -> bool:
        return any(item.severity == "critical" for item in self._errors)

    def clear(self) -> None:
        self._errors = []

    def with_retry(
        self,
        fn: Callable[[], T],
        label: str = "operation",
        *,
        max_attempts: int | None = None,
        base_delay_ms: int | None = None,
    ) -> T:
        attempts = max(1, max_attempts if max_attempts is not None else self.max_attempts)
        delay_ms = base_delay_ms if base_delay_ms is not None else self.base_delay_ms
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                return fn()
            except Exception as exc:
                last_error = exc
                if attempt < attempts:
                    delay = attempt * delay_ms
                    logger.warning("Retry %d/%d for %s in %dms: %s", attempt, attempts, label, delay, exc)
                    self._sleep(delay / 1000.0)

        self.log(
            "error",
            NETWORK_ERROR,
            f"{label} failed after {attempts} attempts: {last_error}",
            fix_suggestion="Check the connection and try again.",
        )
        raise last_error

    def generate_log(self, context: dict[str, Any] | None = None) -> ImportLog:
        now = _utcnow()
        return ImportLog(
            id=f"log-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:8]}",
            created_at=now.isoformat(),
            errors=[item.to_dict() for item in self._errors],
            context=dict(context or {}),
        )

    def save_log(self, log: ImportLog) -> bool:
        """Persist ``log``; returns True when the external sink accepted it."""
        if self.sink is not None:
            try:
                self.sink.save(log)
                return True
            except Exception as exc:
                logger.warning("Import log sink failed, keeping log %s locally: %s", log.id, exc)
        self.local_store.save(log)
        return False

    def recent_logs(self, limit: int | None = None) -> list[ImportLog]:
        return self.local_store.recent(limit)


__all__ = ["ErrorAggregator"]
