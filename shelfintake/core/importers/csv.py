import csv
import io

from .strategies import mapping_key

CSV_DELIMITERS = (",", ";")


def decode_csv_bytes(data: bytes) -> str:
    for encoding in ("utf-8-sig", "utf-8"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError("CSV must be UTF-8 encoded.")


def sniff_delimiter(header_line: str) -> str:
    """Spreadsheet exports in comma-decimal locales use ``;``."""
    return ";" if header_line.count(";") > header_line.count(",") else ","


def csv_rows(csv_text: str) -> tuple[list[str], list[dict[str, str]]]:
    text = csv_text.lstrip("\ufeff")
    first_line = text.split("\n", 1)[0]
    reader = csv.DictReader(io.StringIO(text), delimiter=sniff_delimiter(first_line))
    headers = [str(header or "").strip() for header in (reader.fieldnames or [])]
    if not any(headers):
        raise ValueError("CSV header row is required.")
    reader.fieldnames = headers
    rows: list[dict[str, str]] = []
    for row in reader:
        cleaned = {str(key or ""): str(value or "").strip() for key, value in row.items() if key}
        if any(cleaned.values()):
            rows.append(cleaned)
    if not rows:
        raise ValueError("CSV must include at least one data row.")
    return headers, rows


def header_keys(headers: list[str]) -> set[str]:
    return {mapping_key(header) for header in headers if header}


__all__ = ["CSV_DELIMITERS", "csv_rows", "decode_csv_bytes", "header_keys", "sniff_delimiter"]
