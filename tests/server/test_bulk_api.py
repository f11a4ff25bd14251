import pytest
from fastapi.testclient import TestClient

from shelfintake.core.diagnostics import ErrorAggregator, RingBufferLogStore
from shelfintake.core.persist import InMemoryCatalogStore, StoreError
from shelfintake.server.deps import get_aggregator, get_catalog_store, get_log_store
from shelfintake.server.helpers.importing import NO_PRODUCTS_DETAIL
from shelfintake.server.main import app

SCENARIO_LINES = "\n".join(
    [
        "Black shirt | category: Shirts | price: 25000 | stock: 10",
        "Shirt size S/M/L | category: Shirts | price: 25000 | stock: 15",
    ]
)


class UnreachableStore(InMemoryCatalogStore):
    def check_plan_limit(self, tenant_id, resource):
        raise StoreError("catalog API unreachable")


@pytest.fixture
def store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def log_store() -> RingBufferLogStore:
    return RingBufferLogStore()


@pytest.fixture
def client(store, log_store):
    app.dependency_overrides[get_catalog_store] = lambda: store
    app.dependency_overrides[get_log_store] = lambda: log_store
    app.dependency_overrides[get_aggregator] = lambda: ErrorAggregator(
        local_store=log_store,
        sleep=lambda _seconds: None,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def _product(name: str, **overrides) -> dict:
    product = {"name": name, "category": "Shirts", "price": 25000, "stock": 10}
    product.update(overrides)
    return product


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# -------------------------------------------------------------------
# Parse
# -------------------------------------------------------------------


def test_parse_returns_products_and_saves_a_log(client, log_store) -> None:
    response = client.post("/api/v1/bulk/parse", json={"text": SCENARIO_LINES})

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 2
    first, second = payload["products"]
    assert first["name"] == "Black Shirt"
    assert first["price"] == 25000
    assert second["stockBySize"] == {"S": 5, "M": 5, "L": 5}
    assert payload["metadata"]["detected_format"] == "text"
    assert len(log_store) == 1
    assert log_store.recent()[0].context["successful_products"] == 2


def test_parse_reports_duplicates(client) -> None:
    text = "Cap | price: 10\ncap | price: 12"

    payload = client.post("/api/v1/bulk/parse", json={"text": text}).json()

    assert payload["duplicates"] == {"cap": [0, 1]}
    assert [item["code"] for item in payload["warnings"]] == ["DUPLICATE"]


def test_parse_without_products_is_a_400(client, log_store) -> None:
    response = client.post("/api/v1/bulk/parse", json={"text": "hello world"})

    assert response.status_code == 400
    assert response.json()["detail"] == NO_PRODUCTS_DETAIL
    assert len(log_store) == 1


def test_parse_critical_error_is_a_400(client) -> None:
    invalid_json = client.post("/api/v1/bulk/parse", json={"text": "[{"})
    bad_format = client.post("/api/v1/bulk/parse", json={"text": "Cap | price: 10", "format": "xml"})

    assert invalid_json.status_code == 400
    assert invalid_json.json()["detail"].startswith("This line could not be read")
    assert bad_format.status_code == 400
    assert "xml" in bad_format.json()["detail"]


def test_parse_can_disable_auto_fix(client) -> None:
    text = "Shirt | category: Shirts | price: 12.5.3\nCap | price: 10"

    fixed = client.post("/api/v1/bulk/parse", json={"text": text}).json()
    strict = client.post("/api/v1/bulk/parse", json={"text": text, "auto_fix": False}).json()

    assert fixed["count"] == 2
    assert strict["count"] == 1
    assert [item["code"] for item in strict["errors"]] == ["INVALID_PRICE"]



def test_enhanced_parse_output_keeps_long_description_on_create(client, store) -> None:
    parsed = client.post(
        "/api/v1/bulk/parse",
        json={"text": "Black shirt | category: Shirts | price: 25000 | stock: 10", "enhance": True},
    ).json()
    product = parsed["products"][0]
    assert product["sizes"] == ["S", "M", "L", "XL"]
    assert "shirts" in product["tags"]

    response = client.post(
        "/api/v1/bulk/products",
        json={"products": parsed["products"]},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.status_code == 200
    saved = store.products("t1")[0]
    assert saved["long_description"] == product["longDescription"]
    assert saved["description"] == product["description"]


# -------------------------------------------------------------------
# Bulk create
# -------------------------------------------------------------------


def test_bulk_create_requires_a_tenant(client) -> None:
    response = client.post("/api/v1/bulk/products", json={"products": [_product("Black Shirt")]})

    assert response.status_code == 401


def test_bulk_create_reports_failures_by_index(client, store) -> None:
    products = [_product("Black Shirt"), _product("Free Shirt", price=0), _product("White Shirt")]

    response = client.post(
        "/api/v1/bulk/products",
        json={"products": products},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["created"] == 2
    assert payload["total"] == 3
    assert payload["errors"] == [{"index": 1, "reason": "Invalid price"}]
    assert len(store.products("t1")) == 2


def test_bulk_create_accepts_a_bearer_tenant(client, store) -> None:
    response = client.post(
        "/api/v1/bulk/products",
        json={"products": [_product("Black Shirt")]},
        headers={"Authorization": "Bearer t9"},
    )

    assert response.status_code == 200
    assert len(store.products("t9")) == 1


def test_bulk_create_succeeds_when_the_log_file_cannot_be_written(client, store, tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    unwritable = RingBufferLogStore(path=blocker / "import-logs.json")
    app.dependency_overrides[get_log_store] = lambda: unwritable
    app.dependency_overrides[get_aggregator] = lambda: ErrorAggregator(
        local_store=unwritable,
        sleep=lambda _seconds: None,
    )

    response = client.post(
        "/api/v1/bulk/products",
        json={"products": [_product("Black Shirt")]},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.status_code == 200
    assert response.json()["created"] == 1
    assert len(store.products("t1")) == 1
    assert len(unwritable) == 1


def test_bulk_create_accepts_parse_output(client, store) -> None:
    parsed = client.post("/api/v1/bulk/parse", json={"text": SCENARIO_LINES}).json()

    response = client.post(
        "/api/v1/bulk/products",
        json={"products": parsed["products"]},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.json()["created"] == 2
    sized = store.products("t1")[1]
    assert sized["stock_by_size"] == {"S": 5, "M": 5, "L": 5}
    assert sized["stock"] == 15


def test_bulk_create_rejects_empty_input(client) -> None:
    response = client.post("/api/v1/bulk/products", json={"products": []}, headers={"X-Tenant-Id": "t1"})

    assert response.status_code == 400


def test_bulk_create_over_plan_limit_is_a_403(client, store) -> None:
    store.set_plan("t1", 100, current=98)
    products = [_product(f"Shirt {index}") for index in range(5)]

    response = client.post("/api/v1/bulk/products", json={"products": products}, headers={"X-Tenant-Id": "t1"})

    assert response.status_code == 403
    assert store.products("t1") == []


def test_bulk_create_store_outage_is_a_500(client) -> None:
    app.dependency_overrides[get_catalog_store] = lambda: UnreachableStore()

    response = client.post(
        "/api/v1/bulk/products",
        json={"products": [_product("Black Shirt")]},
        headers={"X-Tenant-Id": "t1"},
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal import error"


# -------------------------------------------------------------------
# Files and logs
# -------------------------------------------------------------------


CSV_UPLOAD = b"name,category,price,stock\nBlack shirt,Shirts,25000,10\nBlue jeans,,30000,5\n"


def test_validate_file_endpoint(client) -> None:
    response = client.post(
        "/api/v1/bulk/files/validate",
        files={"file": ("products.csv", CSV_UPLOAD, "text/csv")},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["is_valid"] is True
    assert payload["metadata"]["name"] == "products.csv"


def test_parse_file_endpoint(client) -> None:
    response = client.post(
        "/api/v1/bulk/files/parse",
        files={"file": ("products.csv", CSV_UPLOAD, "text/csv")},
        data={"auto_fix": "true"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 2
    assert payload["products"][1]["category"] == "Pants"
    assert payload["metadata"]["detected_format"] == "csv"
    assert payload["file"]["is_valid"] is True


def test_parse_file_rejects_invalid_uploads(client) -> None:
    response = client.post(
        "/api/v1/bulk/files/parse",
        files={"file": ("catalog.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 422
    assert "Unsupported format: pdf" in response.json()["detail"]


def test_parse_file_rejects_oversized_uploads(client, monkeypatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_MB", "0.00001")

    response = client.post(
        "/api/v1/bulk/files/parse",
        files={"file": ("products.csv", CSV_UPLOAD, "text/csv")},
    )

    assert response.status_code == 413


def test_import_logs_lists_newest_first(client) -> None:
    client.post("/api/v1/bulk/parse", json={"text": "Cap | price: 10", "file_name": "first.txt"})
    client.post("/api/v1/bulk/parse", json={"text": "Cap | price: 10", "file_name": "second.txt"})

    response = client.get("/api/v1/bulk/import-logs", params={"limit": 1})

    assert response.status_code == 200
    logs = response.json()["logs"]
    assert [log["context"]["file_name"] for log in logs] == ["second.txt"]


def test_import_logs_limit_is_bounded(client) -> None:
    response = client.get("/api/v1/bulk/import-logs", params={"limit": 51})

    assert response.status_code == 422
