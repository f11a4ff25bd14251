"""Catalog store boundary used by the batch importer."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol

UNLIMITED = -1


@dataclass(frozen=True)
class Tenant:
    id: str
    name: str | None = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str
    tenant_id: str


@dataclass(frozen=True)
class PlanLimit:
    allowed: bool
    current: int
    limit: int

    @property
    def unlimited(self) -> bool:
        return self.limit == UNLIMITED

    def admits(self, count: int) -> bool:
        return self.unlimited or self.current + count <= self.limit


class StoreError(RuntimeError):
    """Raised by catalog stores when a read or write fails."""


class CategoryConflictError(StoreError):
    """The category already exists for this tenant (unique name constraint)."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Category already exists: {name}")
        self.name = name


class CatalogStore(Protocol):
    def list_categories(self, tenant_id: str) -> list[Category]: ...

    def create_category(self, data: dict[str, Any]) -> Category: ...

    def create_product(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def check_plan_limit(self, tenant_id: str, resource: str) -> PlanLimit: ...


@dataclass
class _TenantState:
    categories: dict[str, Category] = field(default_factory=dict)
    products: list[dict[str, Any]] = field(default_factory=list)
    limit: int = UNLIMITED
    baseline: int = 0


class InMemoryCatalogStore:
    """Process-local store; category names are unique per tenant, case-insensitively."""

    def __init__(self, limits: dict[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._tenants: dict[str, _TenantState] = {}
        for tenant_id, limit in (limits or {}).items():
            self._state(tenant_id).limit = limit

    def _state(self, tenant_id: str) -> _TenantState:
        return self._tenants.setdefault(tenant_id, _TenantState())

    def set_plan(self, tenant_id: str, limit: int, *, current: int = 0) -> None:
        """``current`` counts products that exist outside this store."""
        with self._lock:
            state = self._state(tenant_id)
            state.limit = limit
            state.baseline = current

    def list_categories(self, tenant_id: str) -> list[Category]:
        with self._lock:
            return list(self._state(tenant_id).categories.values())

    def create_category(self, data: dict[str, Any]) -> Category:
        tenant_id = str(data.get("tenant_id") or "")
        name = str(data.get("name") or "").strip()
        if not tenant_id or not name:
            raise StoreError("Category needs a tenant_id and a name")
        with self._lock:
            state = self._state(tenant_id)
            key = name.lower()
            if key in state.categories:
                raise CategoryConflictError(name)
            category = Category(
                id=f"cat_{uuid.uuid4().hex[:12]}",
                name=name,
                slug=str(data.get("slug") or key),
                tenant_id=tenant_id,
            )
            state.categories[key] = category
            return category

    def create_product(self, payload: dict[str, Any]) -> dict[str, Any]:
        tenant_id = str(payload.get("tenant_id") or "")
        if not tenant_id:
            raise StoreError("Product payload needs a tenant_id")
        product = {**payload, "id": f"prod_{uuid.uuid4().hex[:12]}"}
        with self._lock:
            self._state(tenant_id).products.append(product)
        return product

    def check_plan_limit(self, tenant_id: str, resource: str) -> PlanLimit:
        if resource != "products":
            return PlanLimit(allowed=True, current=0, limit=UNLIMITED)
        with self._lock:
            state = self._state(tenant_id)
            current = state.baseline + len(state.products)
            limit = state.limit
        return PlanLimit(allowed=limit == UNLIMITED or current < limit, current=current, limit=limit)

    def products(self, tenant_id: str) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._state(tenant_id).products)


__all__ = [
    "CatalogStore",
    "Category",
    "CategoryConflictError",
    "InMemoryCatalogStore",
    "PlanLimit",
    "StoreError",
    "Tenant",
    "UNLIMITED",
]
