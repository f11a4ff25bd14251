"""Stable public API facade for the shelfintake core pipeline."""


from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Sequence

from .canonical import FileValidationResult, ImportBatchResult, ParsedProductRecord, ParseOutcome
from .config import CoreConfig, config_from_env
from .diagnostics import ErrorAggregator, ImportDiagnostic
from .importers.common import (
    clean_text,
    normalize_price,
    parse_bool,
    parse_stock,
    split_images,
    split_sizes,
    split_tokens,
    LIST_SPLIT_RE,
)
from .importers.parser import parse
from .importers.strategies import parse_stock_map
from .persist import DEFAULT_PLACEHOLDER_IMAGE, BatchImporter, CatalogStore
from .validate import (
    FileValidationOptions,
    FileValidator,
    UploadedFile,
    ValidationResult,
    report_duplicates,
    duplicate_groups,
    validate_record,
)
from .validate.files import file_extension

_EXTENSION_FORMATS = {"json": "json", "csv": "csv", "txt": "text"}


@dataclass
class ParseReport:
    outcome: ParseOutcome
    duplicates: dict[str, list[int]] = field(default_factory=dict)
    validations: list[ValidationResult] = field(default_factory=list)

    @property
    def records(self) -> list[ParsedProductRecord]:
        return self.outcome.records

    @property
    def errors(self) -> list[ImportDiagnostic]:
        return [item for item in self.outcome.errors if item.severity in {"critical", "error"}]

    @property
    def warnings(self) -> list[ImportDiagnostic]:
        return [item for item in self.outcome.errors if item.severity in {"warning", "info"}]

    @property
    def has_critical(self) -> bool:
        return self.outcome.has_critical

    def to_dict(self) -> dict[str, Any]:
        products = []
        for record, validation in zip(self.outcome.records, self.validations):
            item = record.to_dict()
            item["validation"] = validation.to_dict()
            products.append(item)
        return {
            "products": products,
            "count": len(products),
            "errors": [item.to_dict() for item in self.errors],
            "warnings": [item.to_dict() for item in self.warnings],
            "duplicates": {key: list(indices) for key, indices in self.duplicates.items()},
            "metadata": self.outcome.metadata.to_dict(),
        }


def parse_text(
    text: str,
    *,
    declared_format: str = "auto",
    strict: bool = False,
    debug: bool = False,
    auto_fix: bool | None = None,
    enhance: bool | None = None,
    aggregator: ErrorAggregator | None = None,
) -> ParseReport:
    config = config_from_env(strict=strict, debug=debug)
    if auto_fix is not None:
        config = replace(config, auto_fix=auto_fix)
    if enhance is not None:
        config = replace(config, enhance=enhance)
    aggregator = aggregator or ErrorAggregator()
    outcome = parse(text, declared_format, config=config, aggregator=aggregator)
    duplicate_diagnostics = report_duplicates(outcome.records, aggregator)
    outcome.errors.extend(duplicate_diagnostics)
    return ParseReport(
        outcome=outcome,
        duplicates=duplicate_groups(outcome.records),
        validations=[validate_record(record) for record in outcome.records],
    )


def format_for_filename(filename: str) -> str:
    return _EXTENSION_FORMATS.get(file_extension(filename), "auto")


def validate_file(
    file_input: bytes | str | Path | UploadedFile,
    *,
    name: str | None = None,
    mime_type: str = "",
    options: FileValidationOptions | None = None,
) -> FileValidationResult:
    return FileValidator().validate(_coerce_upload(file_input, name=name, mime_type=mime_type), options)


def validate_records(records: ParsedProductRecord | list[ParsedProductRecord]) -> list[ValidationResult]:
    if isinstance(records, list):
        return [validate_record(record) for record in records]
    return [validate_record(records)]


def import_batch(
    tenant_id: str,
    records: Sequence[ParsedProductRecord],
    *,
    store: CatalogStore,
    aggregator: ErrorAggregator | None = None,
    placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
) -> ImportBatchResult:
    importer = BatchImporter(store, aggregator=aggregator, placeholder_image=placeholder_image)
    return importer.import_batch(tenant_id, records)


def record_from_payload(payload: dict[str, Any]) -> ParsedProductRecord:
    """Build a record from a reviewed product dict; validation happens at import time."""
    stock_map = parse_stock_map(payload.get("stock_by_size") or payload.get("stockBySize"))
    images = split_images(payload.get("images") or payload.get("secondary_images") or [])
    primary = clean_text(payload.get("primary_image") or payload.get("primaryImage"))
    if primary is None and images:
        primary = images[0]
    active = parse_bool(payload.get("active"))
    suggested = payload.get("suggested_price", payload.get("suggestedPrice"))
    return ParsedProductRecord(
        name=str(payload.get("name") or "").strip(),
        category=str(payload.get("category") or "").strip(),
        price=normalize_price(payload.get("price")),
        stock=parse_stock(payload.get("stock")) or 0,
        description=clean_text(payload.get("description")),
        long_description=clean_text(payload.get("long_description") or payload.get("longDescription")),
        stock_by_size={
            size: quantity
            for size, quantity in ((size, parse_stock(value)) for size, value in (stock_map or {}).items())
            if quantity is not None
        }
        or None,
        sizes=split_sizes(payload.get("sizes")),
        colors=split_tokens(payload.get("colors"), pattern=LIST_SPLIT_RE),
        sku=clean_text(payload.get("sku")),
        tags=split_tokens(payload.get("tags")),
        primary_image=primary,
        secondary_images=[image for image in images if image != primary],
        active=True if active is None else active,
        suggested_price=(normalize_price(suggested) or None) if suggested is not None else None,
    )


def _coerce_upload(
    value: bytes | str | Path | UploadedFile,
    *,
    name: str | None,
    mime_type: str,
) -> UploadedFile:
    if isinstance(value, UploadedFile):
        return value
    if isinstance(value, bytes):
        return UploadedFile(name=name or "upload", content=value, mime_type=mime_type)
    path = Path(value)
    return UploadedFile(name=name or path.name, content=path.read_bytes(), mime_type=mime_type)


__all__ = [
    "CoreConfig",
    "ParseReport",
    "config_from_env",
    "format_for_filename",
    "import_batch",
    "parse_text",
    "record_from_payload",
    "validate_file",
    "validate_records",
]
