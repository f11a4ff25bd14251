"""Bulk import helpers (parse, create, file checks) for the API routes."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import HTTPException

from ...config import get_settings
from ...core.api import ParseReport, format_for_filename, import_batch, parse_text, record_from_payload
from ...core.diagnostics import FILE_TOO_LARGE, ErrorAggregator
from ...core.persist import CatalogStore, ImportAbort, PlanLimitExceeded
from ...core.validate import FileValidationOptions, FileValidator, UploadedFile
from ..logging import record_to_loggable

logger = logging.getLogger("uvicorn.error")

NO_PRODUCTS_DETAIL = (
    "Could not detect products in the text. Try a more structured format like: "
    "Name | category: X | price: Y | stock: Z"
)


def _internal_error(message: str, exc: Exception) -> HTTPException:
    settings = get_settings()
    logger.exception("%s", message)
    detail = f"{message}: {exc}" if settings.debug else message
    return HTTPException(status_code=500, detail=detail)


def _save_log(aggregator: ErrorAggregator, context: dict[str, Any]) -> None:
    log = aggregator.generate_log(context)
    if not aggregator.save_log(log):
        logger.debug("Import log %s kept in local history", log.id)


def _first_critical(report: ParseReport) -> str:
    for diagnostic in report.errors:
        if diagnostic.severity == "critical":
            return diagnostic.friendly_message or diagnostic.message
    return NO_PRODUCTS_DETAIL


def run_parse(
    text: str,
    *,
    aggregator: ErrorAggregator,
    declared_format: str = "auto",
    auto_fix: bool = True,
    enhance: bool = False,
    file_name: str | None = None,
) -> dict[str, Any]:
    settings = get_settings()
    try:
        report = parse_text(
            text,
            declared_format=declared_format,
            auto_fix=auto_fix,
            enhance=enhance,
            debug=settings.debug,
            aggregator=aggregator,
        )
    except Exception as exc:
        raise _internal_error("Internal parse error", exc) from exc

    _save_log(
        aggregator,
        {
            "file_name": file_name,
            "format": report.outcome.metadata.detected_format,
            "total_products": report.outcome.metadata.total_lines,
            "successful_products": len(report.records),
        },
    )

    if report.has_critical:
        raise HTTPException(status_code=400, detail=_first_critical(report))
    if not report.records:
        raise HTTPException(status_code=400, detail=NO_PRODUCTS_DETAIL)

    for record in report.records:
        loggable = record_to_loggable(record)
        if loggable is not None:
            logger.debug("Parsed record:\n%s", json.dumps(loggable, ensure_ascii=False, indent=2))
    return report.to_dict()


def run_bulk_create(
    tenant_id: str,
    products: list[dict[str, Any]],
    *,
    store: CatalogStore,
    aggregator: ErrorAggregator,
    file_name: str | None = None,
) -> dict[str, Any]:
    if not products:
        raise HTTPException(status_code=400, detail="products must contain at least one item")

    settings = get_settings()
    records = [record_from_payload(product) for product in products]
    try:
        result = import_batch(
            tenant_id,
            records,
            store=store,
            aggregator=aggregator,
            placeholder_image=settings.placeholder_image,
        )
    except PlanLimitExceeded as exc:
        _save_log(aggregator, {"file_name": file_name, "total_products": len(records), "successful_products": 0})
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except ImportAbort as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        raise _internal_error("Internal import error", exc) from exc

    _save_log(
        aggregator,
        {
            "file_name": file_name,
            "format": "json",
            "total_products": result.total,
            "successful_products": result.created,
        },
    )
    return result.to_dict()


def run_validate_file(name: str, content: bytes, mime_type: str = "") -> dict[str, Any]:
    settings = get_settings()
    options = FileValidationOptions(max_size_mb=settings.max_upload_mb)
    result = FileValidator().validate(UploadedFile(name=name, content=content, mime_type=mime_type), options)
    return result.to_dict()


def run_parse_file(
    name: str,
    content: bytes,
    *,
    aggregator: ErrorAggregator,
    mime_type: str = "",
    auto_fix: bool = True,
    enhance: bool = False,
) -> dict[str, Any]:
    settings = get_settings()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        aggregator.log(
            "critical",
            FILE_TOO_LARGE,
            f"Upload of {len(content)} bytes exceeds {settings.max_upload_mb:g} MB",
            value=f"{len(content) / (1024 * 1024):.2f}MB",
            fix_suggestion=f"Split the file into parts under {settings.max_upload_mb:g} MB.",
        )
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.max_upload_mb:g} MB")

    validation = run_validate_file(name, content, mime_type)
    if not validation["is_valid"]:
        raise HTTPException(status_code=422, detail="; ".join(validation["errors"]))

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=422, detail="File must be UTF-8 encoded.") from exc

    payload = run_parse(
        text,
        aggregator=aggregator,
        declared_format=format_for_filename(name),
        auto_fix=auto_fix,
        enhance=enhance,
        file_name=name,
    )
    payload["file"] = validation
    return payload


__all__ = [
    "NO_PRODUCTS_DETAIL",
    "run_bulk_create",
    "run_parse",
    "run_parse_file",
    "run_validate_file",
]
