"""Batch persistence: plan check, category resolution and per-record creation.

Records are written one by one, in input order. A failing record is reported
by index and never stops the loop; only the plan-limit precheck rejects the
whole batch, before anything is written.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import urlparse

from slugify import slugify

from ..canonical import BatchError, ImportBatchResult, ParsedProductRecord
from ..diagnostics import (
    CATEGORY_ERROR,
    CREATE_FAILED,
    EMPTY_CATEGORY,
    EMPTY_NAME,
    INVALID_PRICE,
    INVALID_STOCK,
    PLAN_LIMIT_EXCEEDED,
    ErrorAggregator,
)
from ..enrich.inference import distribute_stock
from ..validate.rules import validate_record
from .store import CatalogStore, CategoryConflictError, PlanLimit

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_IMAGE = "/images/default-product.svg"
DEFAULT_SIZE = "M"
MAX_SECONDARY_IMAGES = 5

_ISSUE_CODES = {
    "invalid_name": EMPTY_NAME,
    "missing_category": EMPTY_CATEGORY,
    "invalid_price": INVALID_PRICE,
    "negative_stock": INVALID_STOCK,
}


class ImportAbort(ValueError):
    """The whole batch was rejected before any write."""


class PlanLimitExceeded(ImportAbort):
    def __init__(self, limit: PlanLimit, requested: int) -> None:
        super().__init__(
            f"Plan limit exceeded: {limit.current} of {limit.limit} products used, "
            f"{requested} more requested"
        )
        self.limit = limit
        self.requested = requested


def _servable_image(url: str | None) -> bool:
    text = str(url or "").strip()
    if not text:
        return False
    if text.startswith("/") and not text.startswith("//"):
        return True
    parsed = urlparse(text)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def build_product_payload(
    record: ParsedProductRecord,
    *,
    tenant_id: str,
    category: str,
    placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
) -> dict[str, Any]:
    if record.stock_by_size:
        stock_map = dict(record.stock_by_size)
    elif record.sizes:
        stock_map = distribute_stock(record.sizes, record.stock)
    else:
        stock_map = {DEFAULT_SIZE: max(0, record.stock)}

    primary_image = record.primary_image if _servable_image(record.primary_image) else placeholder_image
    secondary_images = [
        image for image in (record.secondary_images or []) if image and image != primary_image
    ][:MAX_SECONDARY_IMAGES]
    colors = list(record.colors or [])
    sku = (record.sku or "").strip() or None

    return {
        "tenant_id": tenant_id,
        "name": record.name.strip(),
        "description": (record.description or "").strip(),
        "long_description": (record.long_description or "").strip() or None,
        "category": category,
        "price": record.price,
        "stock": sum(stock_map.values()),
        "stock_by_size": stock_map,
        "sizes": list(stock_map),
        "colors": colors,
        "color": colors[0] if colors else None,
        "tags": list(record.tags or []),
        "primary_image": primary_image,
        "secondary_images": secondary_images,
        "sku": sku,
        "active": record.active,
        "featured": False,
        "discount": 0,
    }


class BatchImporter:
    def __init__(
        self,
        store: CatalogStore,
        *,
        aggregator: ErrorAggregator | None = None,
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
    ) -> None:
        self.store = store
        self.aggregator = aggregator or ErrorAggregator()
        self.placeholder_image = placeholder_image

    def import_batch(self, tenant_id: str, records: Sequence[ParsedProductRecord]) -> ImportBatchResult:
        result = ImportBatchResult(total=len(records))
        if not records:
            return result

        self._check_plan_limit(tenant_id, len(records))
        categories = self._load_categories(tenant_id)

        for index, record in enumerate(records):
            validation = validate_record(record)
            if not validation.is_valid:
                for issue in validation.issues:
                    if issue.severity == "error":
                        self.aggregator.log(
                            "error",
                            _ISSUE_CODES.get(issue.code, CREATE_FAILED),
                            issue.message,
                            row=index + 1,
                            field=issue.field,
                        )
                result.errors.append(BatchError(index, "; ".join(validation.errors)))
                continue

            try:
                category = self._resolve_category(tenant_id, record.category, categories)
            except Exception as exc:
                logger.warning("Category %r failed for record %d: %s", record.category, index, exc)
                self.aggregator.log(
                    "error",
                    CATEGORY_ERROR,
                    str(exc),
                    row=index + 1,
                    field="category",
                    value=record.category,
                )
                result.errors.append(BatchError(index, f"Could not create category: {record.category}"))
                continue

            payload = build_product_payload(
                record,
                tenant_id=tenant_id,
                category=category,
                placeholder_image=self.placeholder_image,
            )
            try:
                product = self.store.create_product(payload)
            except Exception as exc:
                logger.warning("Product creation failed for record %d: %s", index, exc)
                self.aggregator.log("error", CREATE_FAILED, str(exc), row=index + 1, value=record.name)
                result.errors.append(BatchError(index, str(exc) or "Product creation failed"))
                continue
            result.created_ids.append(str(product.get("id")))

        logger.info(
            "Batch import for tenant %s: %d created, %d failed, %d total",
            tenant_id,
            result.created,
            len(result.errors),
            result.total,
        )
        return result

    def _check_plan_limit(self, tenant_id: str, requested: int) -> None:
        limit = self.aggregator.with_retry(
            lambda: self.store.check_plan_limit(tenant_id, "products"),
            "check plan limit",
        )
        if limit.admits(requested):
            return
        exc = PlanLimitExceeded(limit, requested)
        self.aggregator.log(
            "critical",
            PLAN_LIMIT_EXCEEDED,
            str(exc),
            value=limit.limit,
            fix_suggestion=f"Import at most {max(0, limit.limit - limit.current)} products or upgrade the plan.",
        )
        raise exc

    def _load_categories(self, tenant_id: str) -> dict[str, str]:
        existing = self.aggregator.with_retry(
            lambda: self.store.list_categories(tenant_id),
            "load categories",
        )
        return {category.name.strip().lower(): category.name for category in existing}

    def _resolve_category(self, tenant_id: str, name: str, cache: dict[str, str]) -> str:
        key = name.strip().lower()
        if key in cache:
            return cache[key]
        try:
            created = self.store.create_category(
                {"name": name.strip(), "slug": slugify(name), "tenant_id": tenant_id}
            )
        except CategoryConflictError:
            # Another writer created it first; reuse theirs.
            cache.update(self._load_categories(tenant_id))
            if key not in cache:
                raise
            return cache[key]
        cache[key] = created.name or name.strip()
        return cache[key]


__all__ = [
    "BatchImporter",
    "DEFAULT_PLACEHOLDER_IMAGE",
    "ImportAbort",
    "PlanLimitExceeded",
    "build_product_payload",
]
