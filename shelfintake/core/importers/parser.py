"""Turn pasted text, CSV or JSON into parsed product records.

Every input unit is processed independently: a bad line yields diagnostics and
is dropped, the rest of the batch carries on. Only an unsupported declared
format or an unreadable top-level JSON/CSV payload is critical.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Iterator

from ..canonical import DeclaredFormat, ParsedProductRecord, ParseMetadata, ParseOutcome
from ..config import CoreConfig
from ..detect.text import UnsupportedFormatError, classify_line, detect_format, normalize_lines
from ..diagnostics import (
    AUTO_FIXED,
    EMPTY_CATEGORY,
    EMPTY_NAME,
    INVALID_PRICE,
    INVALID_STOCK,
    PARSE_ERROR,
    UNSUPPORTED_FORMAT,
    ErrorAggregator,
    ImportDiagnostic,
)
from ..enrich.enhance import enhance_record
from ..enrich.inference import (
    DEFAULT_CATEGORY,
    detect_colors,
    detect_sizes,
    distribute_stock,
    infer_category,
    quality_score,
)
from ..validate.autofix import try_auto_fix
from .common import (
    RawFields,
    normalize_category,
    normalize_name,
    normalize_price,
    parse_stock,
)
from .csv import csv_rows
from .strategies import LineStrategy, MappingStrategy, ParseFailure

logger = logging.getLogger(__name__)

_JSON_STRATEGY = MappingStrategy("json")
_CSV_STRATEGY = MappingStrategy("csv")

PRICE_FIX_HINT = "Write the price as a plain number, for example 25000 or 25000.50."
STOCK_FIX_HINT = "Write the stock as a whole number, for example 10."


def _text_units(raw_text: str) -> Iterator[tuple[int, Any, LineStrategy]]:
    for number, line in normalize_lines(raw_text):
        yield number, line, classify_line(line)


def _json_units(raw_text: str) -> list[tuple[int, Any, LineStrategy]]:
    payload = json.loads(raw_text)
    items = payload if isinstance(payload, list) else [payload]
    return [(index, item, _JSON_STRATEGY) for index, item in enumerate(items, start=1)]


def _csv_units(raw_text: str) -> list[tuple[int, Any, LineStrategy]]:
    _, rows = csv_rows(raw_text)
    return [(index, row, _CSV_STRATEGY) for index, row in enumerate(rows, start=1)]


def parse(
    raw_text: str,
    declared_format: DeclaredFormat | str = "auto",
    *,
    config: CoreConfig | None = None,
    aggregator: ErrorAggregator | None = None,
) -> ParseOutcome:
    config = config or CoreConfig()
    aggregator = aggregator or ErrorAggregator()
    started = time.perf_counter()
    first_error = len(aggregator.get_all())
    metadata = ParseMetadata()

    def _outcome(records: list[ParsedProductRecord]) -> ParseOutcome:
        metadata.records_detected = len(records)
        metadata.elapsed_ms = (time.perf_counter() - started) * 1000
        return ParseOutcome(records=records, errors=aggregator.get_all()[first_error:], metadata=metadata)

    try:
        detected = detect_format(raw_text, declared_format)
    except UnsupportedFormatError as exc:
        aggregator.log(
            "critical",
            UNSUPPORTED_FORMAT,
            str(exc),
            value=exc.declared,
            fix_suggestion="Use text, CSV or JSON.",
        )
        return _outcome([])
    metadata.detected_format = detected

    try:
        if detected == "json":
            units = _json_units(raw_text)
        elif detected == "csv":
            units = _csv_units(raw_text)
        else:
            units = list(_text_units(raw_text))
    except json.JSONDecodeError as exc:
        aggregator.log(
            "critical",
            PARSE_ERROR,
            f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            fix_suggestion="Check the JSON syntax: it must be an object or an array of objects.",
        )
        return _outcome([])
    except ValueError as exc:
        aggregator.log("critical", PARSE_ERROR, str(exc), fix_suggestion="Check the CSV header and rows.")
        return _outcome([])

    metadata.total_lines = len(units)
    records: list[ParsedProductRecord] = []
    for row, unit, strategy in units:
        result = strategy.parse_line(unit)
        if isinstance(result, ParseFailure):
            aggregator.log(
                "error",
                result.code,
                result.message,
                row=row,
                value=unit if isinstance(unit, str) else None,
                fix_suggestion="Use: Name | category: X | price: Y | stock: Z",
            )
            continue
        record = build_record(
            result,
            row=row,
            source=strategy.name,
            config=config,
            aggregator=aggregator,
        )
        if record is not None:
            records.append(record)

    outcome = _outcome(records)
    logger.debug(
        "Parsed %d/%d %s units in %.1fms",
        len(records),
        metadata.total_lines,
        detected,
        metadata.elapsed_ms,
    )
    return outcome


def _salvage(
    code: str,
    raw: Any,
    *,
    row: int,
    field: str,
    config: CoreConfig,
    aggregator: ErrorAggregator,
) -> Any:
    """Try an auto-fix for ``raw``; returns the repaired value or None."""
    if not config.auto_fix:
        return None
    candidate = ImportDiagnostic(
        severity="error",
        code=code,
        message=f"Invalid {field}",
        friendly_message="",
        row=row,
        field=field,
        value=raw,
        auto_fixable=True,
    )
    fix = try_auto_fix(candidate)
    if not fix.fixed:
        return None
    aggregator.log(
        "info",
        AUTO_FIXED,
        f"{field} '{raw}' repaired to {fix.new_value}",
        row=row,
        field=field,
        value=fix.new_value,
    )
    return fix.new_value


def _resolve_price(fields: RawFields, *, row: int, config: CoreConfig, aggregator: ErrorAggregator) -> float:
    price = normalize_price(fields.price)
    if price > 0:
        return price
    raw = "" if fields.price is None else str(fields.price).strip()
    repaired = _salvage(INVALID_PRICE, raw, row=row, field="price", config=config, aggregator=aggregator) if raw else None
    if repaired is not None:
        return float(repaired)
    aggregator.log(
        "error",
        INVALID_PRICE,
        f"Price must be greater than 0, got {raw!r}" if raw else "Price is missing",
        row=row,
        field="price",
        value=raw or None,
        fix_suggestion=PRICE_FIX_HINT,
        auto_fixable=bool(raw),
    )
    return 0.0


def _resolve_stock(fields: RawFields, *, row: int, config: CoreConfig, aggregator: ErrorAggregator) -> int:
    raw = fields.stock
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    stock = parse_stock(raw)
    if stock is not None and stock >= 0:
        return stock
    repaired = _salvage(INVALID_STOCK, raw, row=row, field="stock", config=config, aggregator=aggregator)
    if repaired is not None:
        return int(repaired)
    aggregator.log(
        "warning",
        INVALID_STOCK,
        f"Stock must be a non-negative integer, got {raw!r}; using 0",
        row=row,
        field="stock",
        value=raw,
        fix_suggestion=STOCK_FIX_HINT,
        auto_fixable=True,
    )
    return 0


def _resolve_stock_map(fields: RawFields) -> dict[str, int] | None:
    if not fields.stock_by_size:
        return None
    stock_map: dict[str, int] = {}
    for size, value in fields.stock_by_size.items():
        quantity = parse_stock(value)
        if quantity is not None:
            stock_map[str(size).strip().upper()] = max(0, quantity)
    return stock_map or None


def build_record(
    fields: RawFields,
    *,
    row: int,
    source: str,
    config: CoreConfig,
    aggregator: ErrorAggregator,
) -> ParsedProductRecord | None:
    """Type, infer and check one extracted unit; None means it was rejected."""
    name = normalize_name(fields.name)
    if not name:
        aggregator.log("error", EMPTY_NAME, "Product name is empty", row=row, field="name")
        return None

    if fields.category:
        category = normalize_category(fields.category)
    else:
        category = infer_category(name)
        if config.strict and category == DEFAULT_CATEGORY:
            category = ""
    if not category:
        aggregator.log(
            "error",
            EMPTY_CATEGORY,
            "Category is missing and could not be inferred",
            row=row,
            field="category",
            fix_suggestion="Add 'category: <name>' to the line.",
        )
        return None

    price = _resolve_price(fields, row=row, config=config, aggregator=aggregator)
    if price <= 0:
        return None
    stock = _resolve_stock(fields, row=row, config=config, aggregator=aggregator)

    scan_text = " ".join(part for part in (fields.name, fields.description) if part)
    sizes = list(fields.sizes)
    if not sizes and config.detect_sizes:
        sizes = detect_sizes(scan_text)
    colors = list(fields.colors)
    if not colors and config.detect_colors:
        colors = detect_colors(scan_text)

    stock_by_size = _resolve_stock_map(fields)
    if stock_by_size is None and sizes:
        stock_by_size = distribute_stock(sizes, stock)

    primary_image = fields.primary_image or (fields.images[0] if fields.images else None)
    secondary_images = [image for image in fields.images if image != primary_image]

    suggested = normalize_price(fields.suggested_price) if fields.suggested_price is not None else 0.0

    record = ParsedProductRecord(
        name=name,
        category=category,
        price=price,
        stock=stock,
        description=fields.description,
        stock_by_size=stock_by_size,
        sizes=sizes,
        colors=colors,
        sku=fields.sku,
        tags=list(fields.tags),
        primary_image=primary_image,
        secondary_images=secondary_images,
        active=fields.active,
        suggested_price=suggested or None,
        raw_price=None if fields.price is None else str(fields.price),
        row=row,
        source=source,
    )
    if config.enhance:
        record = enhance_record(record)
    record.quality = quality_score(record)
    return record


__all__ = ["build_record", "parse"]
