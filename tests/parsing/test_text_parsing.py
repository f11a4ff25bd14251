from shelfintake.core import CoreConfig, parse, parse_text
from shelfintake.core.diagnostics import (
    AUTO_FIXED,
    DUPLICATE,
    EMPTY_CATEGORY,
    INVALID_PRICE,
    INVALID_STOCK,
    PARSE_ERROR,
    UNSUPPORTED_FORMAT,
    ErrorAggregator,
)


def _codes(outcome) -> list[str]:
    return [item.code for item in outcome.errors]


# -------------------------------------------------------------------
# Pipe lines
# -------------------------------------------------------------------


def test_pipe_line_yields_normalized_record() -> None:
    outcome = parse("Black shirt | category: Shirts | price: 25000 | stock: 10")

    assert outcome.errors == []
    assert len(outcome.records) == 1
    record = outcome.records[0]
    assert record.name == "Black Shirt"
    assert record.category == "Shirts"
    assert record.price == 25000
    assert record.stock == 10
    assert record.stock_by_size is None
    assert record.colors == ["Black"]
    assert record.row == 1
    assert record.source == "pipe"
    assert outcome.metadata.detected_format == "text"
    assert outcome.metadata.total_lines == 1
    assert outcome.metadata.records_detected == 1


def test_sizes_in_name_split_stock_evenly() -> None:
    outcome = parse("Shirt size S/M/L | category: Shirts | price: 25000 | stock: 15")

    record = outcome.records[0]
    assert record.sizes == ["S", "M", "L"]
    assert record.stock_by_size == {"S": 5, "M": 5, "L": 5}
    assert record.stock == 15


def test_repeated_sizes_in_mixed_case_keep_the_full_stock() -> None:
    outcome = parse("Shirt | category: Shirts | price: 100 | stock: 10 | sizes: s/S/M")

    record = outcome.records[0]
    assert record.sizes == ["S", "M"]
    assert record.stock_by_size == {"S": 5, "M": 5}
    assert record.stock == 10


def test_currency_symbol_and_thousands_dot_are_stripped() -> None:
    outcome = parse("Shirt | category: Shirts | price: $12.000 | stock: 10")

    assert outcome.records[0].price == 12000


def test_lead_in_phrase_is_removed_and_category_inferred() -> None:
    outcome = parse("Add: Blue jeans | price: 30")

    record = outcome.records[0]
    assert record.name == "Blue Jeans"
    assert record.category == "Pants"
    assert record.colors == ["Blue"]
    assert record.stock == 0


def test_pipe_labels_accept_spanish_synonyms() -> None:
    outcome = parse("Remera lisa | categoria: remeras | precio: 1.500 | cantidad: 3 | talles: S, M")

    record = outcome.records[0]
    assert record.category == "Remeras"
    assert record.price == 1500
    assert record.sizes == ["S", "M"]
    assert record.stock_by_size == {"S": 2, "M": 1}


def test_explicit_images_keep_first_as_primary() -> None:
    outcome = parse(
        "Cap | category: Accessories | price: 10 | images: https://cdn.test/a.jpg, https://cdn.test/b.jpg"
    )

    record = outcome.records[0]
    assert record.primary_image == "https://cdn.test/a.jpg"
    assert record.secondary_images == ["https://cdn.test/b.jpg"]


# -------------------------------------------------------------------
# Semicolon and loose lines
# -------------------------------------------------------------------


def test_semicolon_line_searches_labels_inside_segments() -> None:
    outcome = parse("Hoodie Gris; categoria: Hoodies; precio: 15.500,50; cantidad: 4")

    record = outcome.records[0]
    assert record.source == "semicolon"
    assert record.name == "Hoodie Gris"
    assert record.category == "Hoodies"
    assert record.price == 15500.5
    assert record.stock == 4
    assert record.colors == ["Gray"]


def test_loose_line_with_keywords() -> None:
    outcome = parse("Black hoodie, category hoodies, price 15000, stock 8")

    record = outcome.records[0]
    assert record.source == "loose"
    assert record.name == "Black Hoodie"
    assert record.category == "Hoodies"
    assert record.price == 15000
    assert record.stock == 8


def test_loose_line_with_dollar_price_and_unit_count() -> None:
    outcome = parse("Gorra roja $3500 10 units")

    record = outcome.records[0]
    assert record.name == "Gorra Roja"
    assert record.category == "Accessories"
    assert record.price == 3500
    assert record.stock == 10
    assert record.colors == ["Red"]


def test_loose_line_without_any_field_is_a_parse_error() -> None:
    outcome = parse("hello world")

    assert outcome.records == []
    assert _codes(outcome) == [PARSE_ERROR]
    assert outcome.errors[0].row == 1
    assert outcome.errors[0].severity == "error"


# -------------------------------------------------------------------
# Independence, comments and rows
# -------------------------------------------------------------------


def test_bad_line_does_not_stop_the_batch() -> None:
    text = "\n".join(
        [
            "Black shirt | category: Shirts | price: 25000 | stock: 10",
            "Mystery item | category: Misc | price: abc",
            "Blue jeans | price: 30000 | stock: 5",
        ]
    )

    outcome = parse(text)

    assert [record.row for record in outcome.records] == [1, 3]
    price_errors = [item for item in outcome.errors if item.code == INVALID_PRICE]
    assert len(price_errors) == 1
    assert price_errors[0].row == 2
    assert price_errors[0].value == "abc"
    assert outcome.metadata.total_lines == 3


def test_blank_lines_and_comments_are_skipped() -> None:
    outcome = parse("# exported from the old shop\n\nCap | category: Accessories | price: 10\n")

    assert len(outcome.records) == 1
    assert outcome.records[0].row == 3
    assert outcome.metadata.total_lines == 1


def test_records_are_returned_in_input_order() -> None:
    text = "Cap | price: 10\nBelt | price: 20\nBoots | price: 30"

    outcome = parse(text)

    assert [record.name for record in outcome.records] == ["Cap", "Belt", "Boots"]


# -------------------------------------------------------------------
# Auto-fix
# -------------------------------------------------------------------


def test_malformed_price_is_auto_fixed() -> None:
    outcome = parse("Shirt | category: Shirts | price: 12.5.3 | stock: 2")

    assert outcome.records[0].price == 12.5
    assert _codes(outcome) == [AUTO_FIXED]
    assert outcome.errors[0].severity == "info"


def test_malformed_price_without_auto_fix_drops_the_record() -> None:
    outcome = parse(
        "Shirt | category: Shirts | price: 12.5.3 | stock: 2",
        config=CoreConfig(auto_fix=False),
    )

    assert outcome.records == []
    assert _codes(outcome) == [INVALID_PRICE]
    assert outcome.errors[0].auto_fixable is True


def test_negative_stock_is_clamped_by_auto_fix() -> None:
    outcome = parse("Shirt | category: Shirts | price: 10 | stock: -3")

    assert outcome.records[0].stock == 0
    assert _codes(outcome) == [AUTO_FIXED]


def test_negative_stock_without_auto_fix_warns_and_uses_zero() -> None:
    outcome = parse("Shirt | category: Shirts | price: 10 | stock: -3", config=CoreConfig(auto_fix=False))

    assert outcome.records[0].stock == 0
    assert _codes(outcome) == [INVALID_STOCK]
    assert outcome.errors[0].severity == "warning"


# -------------------------------------------------------------------
# Strict mode and formats
# -------------------------------------------------------------------


def test_uninferable_category_falls_back_to_general() -> None:
    outcome = parse("Ceramic mug | price: 10")

    assert outcome.records[0].category == "General"


def test_strict_mode_rejects_uninferable_category() -> None:
    outcome = parse("Ceramic mug | price: 10", config=CoreConfig(strict=True))

    assert outcome.records == []
    assert _codes(outcome) == [EMPTY_CATEGORY]


def test_unsupported_declared_format_is_critical() -> None:
    outcome = parse("Cap | price: 10", "xml")

    assert outcome.records == []
    assert outcome.has_critical
    assert _codes(outcome) == [UNSUPPORTED_FORMAT]
    assert outcome.errors[0].value == "xml"


def test_parse_errors_are_scoped_to_the_call() -> None:
    aggregator = ErrorAggregator()
    parse("hello world", aggregator=aggregator)

    outcome = parse("Cap | price: 10", aggregator=aggregator)

    assert outcome.errors == []
    assert len(aggregator.get_all()) == 1


# -------------------------------------------------------------------
# Report facade
# -------------------------------------------------------------------


def test_duplicate_names_are_grouped_and_warned() -> None:
    text = "\n".join(
        [
            "Black shirt | category: Shirts | price: 100 | stock: 1",
            "black shirt | category: Shirts | price: 200 | stock: 2",
            "Cap | category: Accessories | price: 10",
        ]
    )

    report = parse_text(text)

    assert report.duplicates == {"black shirt": [0, 1]}
    duplicates = [item for item in report.warnings if item.code == DUPLICATE]
    assert len(duplicates) == 1
    assert duplicates[0].value == [0, 1]
    assert "0, 1" in duplicates[0].friendly_message
    assert len(report.records) == 3


def test_report_payload_carries_validation_per_product() -> None:
    report = parse_text("Black shirt | category: Shirts | price: 25000 | stock: 10")

    payload = report.to_dict()

    assert payload["count"] == 1
    product = payload["products"][0]
    assert product["name"] == "Black Shirt"
    assert product["validation"]["is_valid"] is True
    assert "Add a main image" in product["validation"]["warnings"]
    assert payload["metadata"]["detected_format"] == "text"
    assert payload["duplicates"] == {}


def test_parse_text_auto_fix_flag_overrides_environment(monkeypatch) -> None:
    monkeypatch.setenv("IMPORT_AUTO_FIX", "1")

    report = parse_text("Shirt | category: Shirts | price: 12.5.3", auto_fix=False)

    assert report.records == []
    assert [item.code for item in report.errors] == [INVALID_PRICE]
