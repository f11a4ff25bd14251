"""JSON API routes: /health, /api/v1/bulk/*."""


from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ...config import get_settings
from ...core.diagnostics import ErrorAggregator, RingBufferLogStore
from ...core.persist import CatalogStore, Tenant
from ..deps import get_aggregator, get_catalog_store, get_log_store, require_tenant
from ..helpers.importing import run_bulk_create, run_parse, run_parse_file, run_validate_file
from ..schemas import BulkCreateRequest, ParseRequest

settings = get_settings()
router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "app": settings.app_name}


@router.post("/api/v1/bulk/parse")
def parse_bulk_text(
    payload: ParseRequest,
    aggregator: ErrorAggregator = Depends(get_aggregator),
) -> dict:
    return run_parse(
        payload.text,
        aggregator=aggregator,
        declared_format=payload.format,
        auto_fix=payload.auto_fix,
        enhance=payload.enhance,
        file_name=payload.file_name,
    )


@router.post("/api/v1/bulk/products")
def create_bulk_products(
    payload: BulkCreateRequest,
    tenant: Tenant = Depends(require_tenant),
    store: CatalogStore = Depends(get_catalog_store),
    aggregator: ErrorAggregator = Depends(get_aggregator),
) -> dict:
    return run_bulk_create(
        tenant.id,
        [product.model_dump() for product in payload.products],
        store=store,
        aggregator=aggregator,
        file_name=payload.file_name,
    )


@router.post("/api/v1/bulk/files/validate")
def validate_bulk_file(file: UploadFile = File(...)) -> dict:
    content = file.file.read()
    return run_validate_file(file.filename or "upload", content, file.content_type or "")


@router.post("/api/v1/bulk/files/parse")
def parse_bulk_file(
    file: UploadFile = File(...),
    auto_fix: bool = Form(True),
    enhance: bool = Form(False),
    aggregator: ErrorAggregator = Depends(get_aggregator),
) -> dict:
    content = file.file.read()
    return run_parse_file(
        file.filename or "upload",
        content,
        aggregator=aggregator,
        mime_type=file.content_type or "",
        auto_fix=auto_fix,
        enhance=enhance,
    )


@router.get("/api/v1/bulk/import-logs")
def list_import_logs(
    limit: int = Query(50, ge=1, le=50),
    log_store: RingBufferLogStore = Depends(get_log_store),
) -> dict:
    return {"logs": [log.to_dict() for log in log_store.recent(limit)]}
