from typing import Any

from babel.numbers import get_currency_symbol

from ...config import get_settings
from ...core.canonical import ParsedProductRecord

_DEFAULT_DESCRIPTION_LIMITS = {
    "low": 80,
    "medium": 160,
    "high": 240,
}
_SUPPORTED_VERBOSITIES = {"low", "medium", "high", "extrahigh"}


def _truncate_description(value: str | None, *, limit: int) -> str:
    text = str(value or "").strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit].rstrip()}... [truncated]"


def _normalize_verbosity(verbosity: str) -> str:
    normalized = str(verbosity or "").strip().lower()
    if normalized in _SUPPORTED_VERBOSITIES:
        return normalized
    return "medium"


def _format_number(value: float | int | None) -> str:
    if value is None:
        return ""
    return f"{float(value):.2f}".rstrip("0").rstrip(".")


def format_price(value: float | int | None, currency: str | None) -> str:
    if value is None:
        return ""
    number = _format_number(value)

    symbol = ""
    currency_code = str(currency or "").upper()
    if currency_code:
        try:
            symbol = get_currency_symbol(currency_code, locale="en_US")
        except Exception:
            symbol = currency_code

    if symbol:
        if symbol.isalpha():
            return f"{number} {symbol}"
        return f"{symbol}{number}"
    return number


def record_to_loggable(
    record: ParsedProductRecord,
    *,
    verbosity: str | None = None,
    debug_enabled: bool | None = None,
    currency: str | None = None,
) -> dict[str, Any] | None:
    settings = get_settings()
    if debug_enabled is None:
        debug_enabled = settings.debug

    if not debug_enabled:
        return None

    resolved_verbosity = verbosity if verbosity is not None else settings.log_verbosity
    level = _normalize_verbosity(resolved_verbosity)
    data = record.to_dict()
    if level == "extrahigh":
        return data

    if level == "high":
        data["description"] = _truncate_description(data.get("description"), limit=_DEFAULT_DESCRIPTION_LIMITS["high"])
        data["longDescription"] = _truncate_description(
            data.get("longDescription"), limit=_DEFAULT_DESCRIPTION_LIMITS["high"]
        )
        return data

    price = format_price(record.price, currency or settings.currency)
    summary = {
        "row": record.row,
        "source": record.source,
        "name": record.name,
        "description": _truncate_description(record.description, limit=_DEFAULT_DESCRIPTION_LIMITS["medium"]),
        "category": record.category,
        "price": price,
        "stock": record.stock,
        "stock_by_size": dict(record.stock_by_size or {}),
        "colors": list(record.colors or []),
        "images": {"count": len(record.secondary_images or []) + (1 if record.primary_image else 0)},
        "quality": record.quality,
    }

    if level == "low":
        return {
            "row": summary["row"],
            "name": summary["name"],
            "category": summary["category"],
            "price": summary["price"],
            "stock": summary["stock"],
        }

    return summary


__all__ = ["format_price", "record_to_loggable"]
