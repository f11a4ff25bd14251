import json

from tests.helpers._csv_helpers import build_csv

from shelfintake.core import parse
from shelfintake.core.detect import detect_format
from shelfintake.core.diagnostics import EMPTY_NAME, INVALID_PRICE, PARSE_ERROR


# -------------------------------------------------------------------
# JSON
# -------------------------------------------------------------------


def test_json_array_with_spanish_keys() -> None:
    payload = [
        {"nombre": "remera negra", "categoria": "remeras", "precio": "1.500", "stock": 3, "talles": "S/M"},
    ]

    outcome = parse(json.dumps(payload))

    assert outcome.metadata.detected_format == "json"
    record = outcome.records[0]
    assert record.name == "Remera Negra"
    assert record.category == "Remeras"
    assert record.price == 1500
    assert record.sizes == ["S", "M"]
    assert record.stock_by_size == {"S": 2, "M": 1}
    assert record.colors == ["Black"]
    assert record.source == "json"


def test_json_bad_elements_are_reported_by_position() -> None:
    payload = [
        {"name": "Black cap", "price": 10},
        5,
        {"name": "Widget"},
        {"price": 10},
    ]

    outcome = parse(json.dumps(payload))

    assert [record.name for record in outcome.records] == ["Black Cap"]
    assert [(item.code, item.row) for item in outcome.errors] == [
        (PARSE_ERROR, 2),
        (INVALID_PRICE, 3),
        (EMPTY_NAME, 4),
    ]
    assert outcome.errors[1].auto_fixable is False
    assert outcome.metadata.total_lines == 4


def test_json_single_object_is_one_unit() -> None:
    outcome = parse('{"name": "Gorra", "price": 10, "primaryImage": "https://cdn.test/g.jpg"}')

    record = outcome.records[0]
    assert record.category == "Accessories"
    assert record.primary_image == "https://cdn.test/g.jpg"


def test_json_stock_by_size_wins_over_stock() -> None:
    payload = [{"name": "Hoodie", "price": 50, "stock": 99, "stockBySize": {"s": 2, "m": 3}}]

    outcome = parse(json.dumps(payload))

    record = outcome.records[0]
    assert record.stock_by_size == {"S": 2, "M": 3}
    assert record.sizes == ["S", "M"]
    assert record.stock == 5


def test_invalid_json_is_critical() -> None:
    outcome = parse("[{bad json")

    assert outcome.records == []
    assert outcome.has_critical
    assert outcome.errors[0].code == PARSE_ERROR
    assert outcome.errors[0].message.startswith("Invalid JSON")


# -------------------------------------------------------------------
# CSV
# -------------------------------------------------------------------


def test_csv_rows_become_records() -> None:
    text = build_csv(
        [
            {"name": "Black shirt", "category": "Shirts", "price": "25000", "stock": "9", "sizes": "S/M/L"},
            {"name": "Running shoes", "category": "", "price": "$40", "stock": "2", "sizes": ""},
        ]
    )

    outcome = parse(text)

    assert outcome.metadata.detected_format == "csv"
    first, second = outcome.records
    assert first.stock_by_size == {"S": 3, "M": 3, "L": 3}
    assert first.row == 1
    assert second.category == "Footwear"
    assert second.price == 40
    assert second.source == "csv"


def test_csv_semicolon_export_is_detected() -> None:
    text = build_csv([{"nombre": "Remera", "precio": "1500,50", "stock": "3"}], sep=";")

    outcome = parse(text)

    assert outcome.metadata.detected_format == "csv"
    assert outcome.records[0].price == 1500.5


def test_csv_missing_price_is_reported_with_data_row_index() -> None:
    text = build_csv(
        [
            {"name": "Cap", "price": "10"},
            {"name": "Belt", "price": ""},
        ]
    )

    outcome = parse(text)

    assert [record.name for record in outcome.records] == ["Cap"]
    assert [(item.code, item.row) for item in outcome.errors] == [(INVALID_PRICE, 2)]


def test_csv_header_without_rows_is_critical() -> None:
    outcome = parse("name,price\n", "csv")

    assert outcome.has_critical
    assert outcome.records == []


# -------------------------------------------------------------------
# Detection
# -------------------------------------------------------------------


def test_detect_format_rules() -> None:
    assert detect_format('[{"name": "x"}]') == "json"
    assert detect_format("  {\"name\": \"x\"}") == "json"
    assert detect_format("name,price\nCap,10") == "csv"
    assert detect_format("Black shirt, category shirts, price 25000") == "text"
    assert detect_format("Cap | price: 10") == "text"
    assert detect_format("[NEW] Cap | price: 10") == "text"
    assert detect_format("[{bad json") == "json"
    assert detect_format("name,price\nCap,10", "text") == "text"


def test_bracketed_pipe_line_is_parsed_as_text() -> None:
    outcome = parse("[NEW] Black shirt | category: Shirts | price: 100 | stock: 1")

    assert outcome.metadata.detected_format == "text"
    assert not outcome.has_critical
    assert len(outcome.records) == 1
    record = outcome.records[0]
    assert record.name.endswith("Black Shirt")
    assert record.category == "Shirts"
    assert record.price == 100
