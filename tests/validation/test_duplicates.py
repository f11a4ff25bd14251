from tests.helpers._record_builders import make_record

from shelfintake.core.diagnostics import DUPLICATE, ErrorAggregator
from shelfintake.core.validate import detect_duplicates, duplicate_groups, report_duplicates


def test_detect_duplicates_groups_by_trimmed_lowercase_name() -> None:
    records = [make_record(name="Black Shirt"), make_record(name=" black shirt "), make_record(name="Cap")]

    assert detect_duplicates(records) == {"black shirt": [0, 1], "cap": [2]}
    assert duplicate_groups(records) == {"black shirt": [0, 1]}


def test_empty_names_are_ignored() -> None:
    records = [make_record(name=""), make_record(name="  ")]

    assert detect_duplicates(records) == {}


def test_grouping_does_not_depend_on_order() -> None:
    records = [make_record(name="Cap"), make_record(name="Belt"), make_record(name="cap")]

    forward = duplicate_groups(records)
    backward = duplicate_groups(list(reversed(records)))

    assert set(forward) == set(backward) == {"cap"}
    assert forward["cap"] == [0, 2]
    assert backward["cap"] == [0, 2]


def test_report_duplicates_logs_one_warning_per_group() -> None:
    aggregator = ErrorAggregator()
    records = [make_record(name="Cap"), make_record(name="cap"), make_record(name="Belt"), make_record(name="BELT")]

    diagnostics = report_duplicates(records, aggregator)

    assert [item.value for item in diagnostics] == [[0, 1], [2, 3]]
    assert all(item.code == DUPLICATE and item.severity == "warning" for item in diagnostics)
    assert aggregator.get_by_severity("warning") == diagnostics
    assert diagnostics[0].friendly_message.startswith("Duplicate product name at positions 0, 1.")
