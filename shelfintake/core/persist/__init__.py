from .batch import BatchImporter, DEFAULT_PLACEHOLDER_IMAGE, ImportAbort, PlanLimitExceeded, build_product_payload
from .http_store import HttpCatalogStore
from .store import (
    CatalogStore,
    Category,
    CategoryConflictError,
    InMemoryCatalogStore,
    PlanLimit,
    StoreError,
    Tenant,
)

__all__ = [
    "BatchImporter",
    "CatalogStore",
    "Category",
    "CategoryConflictError",
    "DEFAULT_PLACEHOLDER_IMAGE",
    "HttpCatalogStore",
    "ImportAbort",
    "InMemoryCatalogStore",
    "PlanLimit",
    "PlanLimitExceeded",
    "StoreError",
    "Tenant",
    "build_product_payload",
]
