"""Structured import diagnostics and their merchant-facing messages."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

Severity = Literal["critical", "error", "warning", "info"]

SEVERITIES: tuple[str, ...] = ("critical", "error", "warning", "info")

INVALID_PRICE = "INVALID_PRICE"
INVALID_STOCK = "INVALID_STOCK"
EMPTY_NAME = "EMPTY_NAME"
EMPTY_CATEGORY = "EMPTY_CATEGORY"
INVALID_IMAGE_URL = "INVALID_IMAGE_URL"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
PARSE_ERROR = "PARSE_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
TIMEOUT = "TIMEOUT"
DUPLICATE = "DUPLICATE"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
PLAN_LIMIT_EXCEEDED = "PLAN_LIMIT_EXCEEDED"
CATEGORY_ERROR = "CATEGORY_ERROR"
CREATE_FAILED = "CREATE_FAILED"
AUTO_FIXED = "AUTO_FIXED"

_TEMPLATES: dict[str, str] = {
    INVALID_PRICE: "Row {row}: price must be greater than 0{value}.{fix}",
    INVALID_STOCK: "Row {row}: stock must be a whole number of 0 or more{value}.{fix}",
    EMPTY_NAME: "Row {row}: the product name is required.{fix}",
    EMPTY_CATEGORY: "Row {row}: the category is required.{fix}",
    INVALID_IMAGE_URL: "Row {row}: invalid image URL{field}{value}.{fix}",
    UNSUPPORTED_FORMAT: "Unsupported file format{value}. Valid formats: CSV, XLSX, JSON, TXT.{fix}",
    PARSE_ERROR: "Row {row}: this line could not be read as a product.{fix}",
    NETWORK_ERROR: "Connection problem while saving. Check your connection and try again.{fix}",
    TIMEOUT: "The operation took too long. Try fewer products or a smaller file.{fix}",
    DUPLICATE: "Duplicate product name at positions {rows}.{fix}",
    FILE_TOO_LARGE: "The file is too large{value}.{fix}",
    PLAN_LIMIT_EXCEEDED: "Your plan does not allow this many products.{fix}",
    CATEGORY_ERROR: "Row {row}: the category{value} could not be created.{fix}",
    CREATE_FAILED: "Row {row}: the product could not be saved.{fix}",
    AUTO_FIXED: "Row {row}: {field_name} was corrected automatically{value}.",
}


@dataclass
class ImportDiagnostic:
    severity: Severity
    code: str
    message: str
    friendly_message: str
    row: int | None = None
    field: str | None = None
    value: Any = None
    fix_suggestion: str | None = None
    auto_fixable: bool = False
    timestamp: str = dataclasses.field(default_factory=lambda: _utcnow().isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "friendly_message": self.friendly_message,
            "row": self.row,
            "field": self.field,
            "value": _jsonable(self.value),
            "fix_suggestion": self.fix_suggestion,
            "auto_fixable": self.auto_fixable,
            "timestamp": self.timestamp,
        }


def friendly_message(
    code: str,
    message: str,
    *,
    row: int | None = None,
    field: str | None = None,
    value: Any = None,
    fix_suggestion: str | None = None,
) -> str:
    template = _TEMPLATES.get(code)
    if template is None:
        return message
    if "{row}" in template and row is None:
        # No row to anchor on; fall back to the sentence without the prefix.
        template = template.replace("Row {row}: ", "").replace("{row}", "?")
        template = template[:1].upper() + template[1:]
    rows = value if isinstance(value, (list, tuple)) else None
    return template.format(
        row=row,
        rows=", ".join(str(item) for item in rows) if rows else (row if row is not None else "?"),
        field=f' in field "{field}"' if field else "",
        field_name=field or "a value",
        value=_value_text(value) if rows is None else "",
        fix=f" Suggested fix: {fix_suggestion}" if fix_suggestion else "",
    )


def _value_text(value: Any) -> str:
    if value is None or value == "":
        return ""
    return f' (value: "{value}")'


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return str(value)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = [
    "AUTO_FIXED",
    "CATEGORY_ERROR",
    "CREATE_FAILED",
    "DUPLICATE",
    "EMPTY_CATEGORY",
    "EMPTY_NAME",
    "FILE_TOO_LARGE",
    "INVALID_IMAGE_URL",
    "INVALID_PRICE",
    "INVALID_STOCK",
    "ImportDiagnostic",
    "NETWORK_ERROR",
    "PARSE_ERROR",
    "PLAN_LIMIT_EXCEEDED",
    "SEVERITIES",
    "Severity",
    "TIMEOUT",
    "UNSUPPORTED_FORMAT",
    "friendly_message",
]
