"""REST-backed catalog store."""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .store import Category, CategoryConflictError, PlanLimit, StoreError


def http_session() -> requests.Session:
    s = requests.Session()
    # Reads only; product and category creation are not idempotent.
    retries = Retry(
        total=3,
        backoff_factor=0.6,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def _items(payload: Any, key: str) -> list[dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get(key, payload.get("items", []))
    if not isinstance(payload, list):
        raise StoreError(f"Unexpected {key} response shape")
    return [item for item in payload if isinstance(item, dict)]


def _category(data: dict[str, Any], tenant_id: str) -> Category:
    return Category(
        id=str(data.get("id") or ""),
        name=str(data.get("name") or ""),
        slug=str(data.get("slug") or ""),
        tenant_id=str(data.get("tenant_id") or tenant_id),
    )


class HttpCatalogStore:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or http_session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, tenant_id: str, *parts: str) -> str:
        return "/".join([self.base_url, "tenants", tenant_id, *parts])

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise StoreError(f"{method} {url} failed: {exc}") from exc
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise StoreError(f"Catalog API returned {response.status_code}: {response.text[:200]}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError("Catalog API returned invalid JSON") from exc

    def list_categories(self, tenant_id: str) -> list[Category]:
        response = self._request("GET", self._url(tenant_id, "categories"))
        return [_category(item, tenant_id) for item in _items(self._json(response), "categories")]

    def create_category(self, data: dict[str, Any]) -> Category:
        tenant_id = str(data.get("tenant_id") or "")
        response = self._request("POST", self._url(tenant_id, "categories"), json=data)
        if response.status_code == 409:
            raise CategoryConflictError(str(data.get("name") or ""))
        return _category(self._json(response), tenant_id)

    def create_product(self, payload: dict[str, Any]) -> dict[str, Any]:
        tenant_id = str(payload.get("tenant_id") or "")
        response = self._request("POST", self._url(tenant_id, "products"), json=payload)
        product = self._json(response)
        if not isinstance(product, dict) or not product.get("id"):
            raise StoreError("Catalog API did not return a product id")
        return product

    def check_plan_limit(self, tenant_id: str, resource: str) -> PlanLimit:
        response = self._request("GET", self._url(tenant_id, "limits", resource))
        data = self._json(response)
        if not isinstance(data, dict):
            raise StoreError("Unexpected plan limit response shape")
        try:
            return PlanLimit(
                allowed=bool(data.get("allowed", True)),
                current=int(data.get("current") or 0),
                limit=int(data.get("limit", -1)),
            )
        except (TypeError, ValueError) as exc:
            raise StoreError("Plan limit response has non-numeric values") from exc


__all__ = ["HttpCatalogStore", "http_session"]
