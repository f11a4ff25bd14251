"""Duplicate-name detection within one batch."""

from __future__ import annotations

from typing import Iterable

from ..canonical import ParsedProductRecord
from ..diagnostics import DUPLICATE, ErrorAggregator, ImportDiagnostic


def _name_key(name: str | None) -> str:
    return (name or "").strip().lower()


def detect_duplicates(records: Iterable[ParsedProductRecord]) -> dict[str, list[int]]:
    """Map normalized name -> input indices, in input order."""
    groups: dict[str, list[int]] = {}
    for index, record in enumerate(records):
        key = _name_key(record.name)
        if not key:
            continue
        groups.setdefault(key, []).append(index)
    return groups


def duplicate_groups(records: Iterable[ParsedProductRecord]) -> dict[str, list[int]]:
    return {key: indices for key, indices in detect_duplicates(records).items() if len(indices) > 1}


def report_duplicates(
    records: list[ParsedProductRecord],
    aggregator: ErrorAggregator,
) -> list[ImportDiagnostic]:
    diagnostics: list[ImportDiagnostic] = []
    for key, indices in duplicate_groups(records).items():
        diagnostics.append(
            aggregator.log(
                "warning",
                DUPLICATE,
                f"Duplicate product name '{key}' at indices {indices}",
                field="name",
                value=indices,
                fix_suggestion="Rename or remove the repeated products before importing.",
            )
        )
    return diagnostics


__all__ = ["detect_duplicates", "duplicate_groups", "report_duplicates"]
