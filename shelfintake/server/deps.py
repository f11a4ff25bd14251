"""Request-scoped dependencies: tenant, catalog store, import-log plumbing."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from ..config import get_settings
from ..core.diagnostics import ErrorAggregator, HttpImportLogSink, RingBufferLogStore
from ..core.persist import CatalogStore, HttpCatalogStore, InMemoryCatalogStore, Tenant

TENANT_HEADER = "X-Tenant-Id"


def resolve_tenant(request: Request) -> Tenant | None:
    tenant_id = (request.headers.get(TENANT_HEADER) or "").strip()
    if not tenant_id:
        authorization = (request.headers.get("Authorization") or "").strip()
        scheme, _, credential = authorization.partition(" ")
        if scheme.lower() == "bearer":
            tenant_id = credential.strip()
    if not tenant_id:
        return None
    return Tenant(id=tenant_id)


def require_tenant(tenant: Tenant | None = Depends(resolve_tenant)) -> Tenant:
    if tenant is None:
        raise HTTPException(status_code=401, detail="Authentication required: send X-Tenant-Id or a Bearer token.")
    return tenant


@lru_cache(maxsize=1)
def get_catalog_store() -> CatalogStore:
    settings = get_settings()
    if settings.catalog_api_url:
        return HttpCatalogStore(settings.catalog_api_url, token=settings.catalog_api_token)
    return InMemoryCatalogStore()


@lru_cache(maxsize=1)
def get_log_store() -> RingBufferLogStore:
    settings = get_settings()
    return RingBufferLogStore(settings.import_log_capacity, path=settings.import_log_path)


def get_aggregator(log_store: RingBufferLogStore = Depends(get_log_store)) -> ErrorAggregator:
    settings = get_settings()
    sink = HttpImportLogSink(settings.import_log_url, token=settings.catalog_api_token) if settings.import_log_url else None
    return ErrorAggregator(sink=sink, local_store=log_store)


__all__ = [
    "TENANT_HEADER",
    "get_aggregator",
    "get_catalog_store",
    "get_log_store",
    "require_tenant",
    "resolve_tenant",
]
