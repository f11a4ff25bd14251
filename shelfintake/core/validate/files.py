"""Pre-ingestion checks on uploaded product files.

Checks are cheap and pure: size, extension, declared MIME type, then a coarse
content-shape pass for small files. Hard problems land in ``errors``; anything
the parser can still cope with lands in ``warnings``.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from pathlib import PurePath

from ..canonical import FileMetadata, FileValidationResult

CONTENT_CHECK_LIMIT_BYTES = 1024 * 1024
CSV_SAMPLE_ROWS = 10
MIN_TEXT_LENGTH = 10
NAME_FIELDS = ("name", "nombre")

MIME_TYPES: dict[str, tuple[str, ...]] = {
    "csv": ("text/csv", "application/csv", "text/plain", "application/vnd.ms-excel"),
    "xlsx": (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    ),
    "xls": ("application/vnd.ms-excel",),
    "json": ("application/json", "text/json"),
    "txt": ("text/plain",),
}


@dataclass(frozen=True)
class UploadedFile:
    name: str
    content: bytes
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class FileValidationOptions:
    max_size_mb: float = 10
    allowed_extensions: tuple[str, ...] = ("csv", "xlsx", "xls", "json", "txt")
    required_columns: tuple[str, ...] = ("name", "price")


@dataclass
class _Findings:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def file_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lstrip(".").lower()


class FileValidator:
    def validate(
        self,
        file: UploadedFile,
        options: FileValidationOptions | None = None,
    ) -> FileValidationResult:
        options = options or FileValidationOptions()
        found = _Findings()
        extension = file_extension(file.name)

        size_mb = file.size / (1024 * 1024)
        if size_mb > options.max_size_mb:
            found.errors.append(
                f"File is too large ({size_mb:.2f}MB). Maximum size: {options.max_size_mb:g}MB"
            )

        allowed = tuple(ext.lower() for ext in options.allowed_extensions)
        if extension not in allowed:
            found.errors.append(
                f"Unsupported format: {extension or '(none)'}. Allowed formats: {', '.join(allowed)}"
            )

        if file.mime_type and not self._mime_matches(file.mime_type, extension):
            found.warnings.append(f"MIME type ({file.mime_type}) does not match the extension (.{extension})")

        if file.size < CONTENT_CHECK_LIMIT_BYTES:
            self._check_content(file.content, extension, options, found)

        return FileValidationResult(
            is_valid=not found.errors,
            errors=found.errors,
            warnings=found.warnings,
            metadata=FileMetadata(
                name=file.name,
                size_bytes=file.size,
                mime_type=file.mime_type or "unknown",
                extension=extension,
            ),
        )

    @staticmethod
    def _mime_matches(mime_type: str, extension: str) -> bool:
        known = MIME_TYPES.get(extension, ())
        base = mime_type.split(";", 1)[0].strip().lower()
        return not known or base in known

    def _check_content(
        self,
        content: bytes,
        extension: str,
        options: FileValidationOptions,
        found: _Findings,
    ) -> None:
        if extension in {"xlsx", "xls"}:
            found.warnings.append("Spreadsheet content was not validated; it is checked when the file is processed")
            return
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            found.warnings.append(f"Could not validate the file content: {exc.reason}")
            return

        if not text.strip():
            found.errors.append("The file is empty")
            return

        if extension == "csv":
            self._check_csv(text, options.required_columns, found)
        elif extension == "json":
            self._check_json(text, found)
        elif extension == "txt" and len(text.strip()) < MIN_TEXT_LENGTH:
            found.warnings.append("The text file looks too short")

    @staticmethod
    def _check_csv(text: str, required_columns: tuple[str, ...], found: _Findings) -> None:
        lines = [line for line in text.splitlines() if line.strip()]
        rows = list(csv.reader(io.StringIO("\n".join(lines))))
        header = [cell.strip().lower() for cell in rows[0]]

        missing = [
            column
            for column in required_columns
            if not any(column.lower() in cell for cell in header)
        ]
        if missing:
            found.errors.append(f"Missing required columns: {', '.join(missing)}")

        if len(rows) == 1:
            found.warnings.append("The CSV only has a header row, no data")

        for number, row in enumerate(rows[1 : CSV_SAMPLE_ROWS + 1], start=2):
            if len(row) != len(header):
                found.warnings.append(f"Row {number} has {len(row)} columns, expected {len(header)}")

    @staticmethod
    def _check_json(text: str, found: _Findings) -> None:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            found.errors.append(f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})")
            return

        if isinstance(payload, list):
            if not payload:
                found.warnings.append("The JSON array is empty")
                return
            first = payload[0]
            if not isinstance(first, dict):
                found.errors.append("Array elements must be objects")
            elif not any(first.get(key) for key in NAME_FIELDS):
                found.warnings.append('Objects should have a "name" field')
        elif isinstance(payload, dict):
            if not any(payload.get(key) for key in NAME_FIELDS):
                found.warnings.append('The object should have a "name" field')
        else:
            found.errors.append("JSON must be an object or an array of objects")


__all__ = [
    "FileValidationOptions",
    "FileValidator",
    "MIME_TYPES",
    "UploadedFile",
    "file_extension",
]
