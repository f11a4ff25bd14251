"""Input format detection and per-line strategy selection."""

from __future__ import annotations

import csv
import json

from ..canonical import DetectedFormat
from ..importers.csv import header_keys, sniff_delimiter
from ..importers.strategies import (
    LineStrategy,
    LooseStrategy,
    MAPPING_SYNONYMS,
    PipeStrategy,
    SemicolonStrategy,
)

SUPPORTED_FORMATS: tuple[str, ...] = ("auto", "text", "json", "csv")

_PIPE = PipeStrategy()
_SEMICOLON = SemicolonStrategy()
_LOOSE = LooseStrategy()


class UnsupportedFormatError(ValueError):
    def __init__(self, declared: str) -> None:
        super().__init__(
            f"Unsupported format '{declared}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
        self.declared = declared


def normalize_lines(raw_text: str) -> list[tuple[int, str]]:
    """Non-blank, non-comment lines paired with their 1-based line number."""
    text = str(raw_text or "").replace("\r\n", "\n").replace("\r", "\n")
    lines: list[tuple[int, str]] = []
    for number, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        lines.append((number, stripped))
    return lines


def looks_like_csv_header(line: str) -> bool:
    delimiter = sniff_delimiter(line)
    if delimiter not in line:
        return False
    cells = next(csv.reader([line], delimiter=delimiter), [])
    targets = {MAPPING_SYNONYMS.get(key) for key in header_keys(cells)}
    return "name" in targets and "price" in targets


def detect_format(raw_text: str, declared: str = "auto") -> DetectedFormat:
    normalized = str(declared or "auto").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(str(declared))
    if normalized != "auto":
        return normalized  # type: ignore[return-value]

    stripped = str(raw_text or "").lstrip("\ufeff").strip()
    lines = normalize_lines(stripped)
    if stripped.startswith(("[", "{")) and _json_or_unseparated(stripped, lines):
        return "json"
    if lines and looks_like_csv_header(lines[0][1]):
        return "csv"
    return "text"


def _json_or_unseparated(text: str, lines: list[tuple[int, str]]) -> bool:
    # A bracketed lead-in such as "[NEW] Shirt | price: 10" is a product line, not JSON.
    try:
        json.loads(text)
    except ValueError:
        first = lines[0][1] if lines else ""
        return "|" not in first and ";" not in first
    return True


def classify_line(line: str) -> LineStrategy:
    if "|" in line:
        return _PIPE
    if ";" in line:
        return _SEMICOLON
    return _LOOSE


__all__ = [
    "SUPPORTED_FORMATS",
    "UnsupportedFormatError",
    "classify_line",
    "detect_format",
    "looks_like_csv_header",
    "normalize_lines",
]
