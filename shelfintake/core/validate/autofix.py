"""Repair of structurally salvageable price and stock values."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from ..diagnostics.errors import INVALID_PRICE, INVALID_STOCK, ImportDiagnostic

_LOOSE_SANITIZE_RE = re.compile(r"[^\d.,-]")
_LOOSE_THOUSANDS_RE = re.compile(r"\.(?=\d{3})")
_LOOSE_NUMBER_RE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)")
_LEADING_INT_RE = re.compile(r"-?\d+")


@dataclass(frozen=True)
class AutoFixResult:
    fixed: bool
    new_value: Any = None


def loose_price(value: Any) -> float:
    """Price parse that tolerates trailing junk and any dotted thousands group."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    text = _LOOSE_SANITIZE_RE.sub("", str(value or "")).lstrip("-")
    text = _LOOSE_THOUSANDS_RE.sub("", text)
    text = text.replace(",", ".", 1)
    match = _LOOSE_NUMBER_RE.match(text)
    if not match:
        return 0.0
    return float(match.group(1))


def coerce_stock(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value)) if math.isfinite(value) else 0
    match = _LEADING_INT_RE.search(str(value or ""))
    if not match:
        return 0
    return max(0, int(match.group(0)))


def try_auto_fix(diagnostic: ImportDiagnostic) -> AutoFixResult:
    if not diagnostic.auto_fixable:
        return AutoFixResult(False)
    if diagnostic.code == INVALID_PRICE:
        price = loose_price(diagnostic.value)
        if price > 0:
            return AutoFixResult(True, price)
        return AutoFixResult(False)
    if diagnostic.code == INVALID_STOCK:
        return AutoFixResult(True, coerce_stock(diagnostic.value))
    return AutoFixResult(False)


__all__ = ["AutoFixResult", "coerce_stock", "loose_price", "try_auto_fix"]
