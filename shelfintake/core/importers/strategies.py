"""Per-line and per-object extraction strategies.

Each strategy turns one raw input unit (a text line, a JSON object, a CSV row)
into ``RawFields`` or a ``ParseFailure``. Typing and inference happen later in
the parser.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Protocol

from ..diagnostics.errors import EMPTY_NAME, PARSE_ERROR
from .common import (
    LIST_SPLIT_RE,
    RawFields,
    assign_label,
    clean_text,
    match_label,
    normalize_category,
    parse_bool,
    split_images,
    split_sizes,
    split_tokens,
    strip_lead_in,
)

_KEYWORD_STOP = (
    r"categor(?:y|ía|ia)|price|precio|cost|costo|stock|qty|units?|cantidad|unidades?"
)
_LOOSE_NAME_RE = re.compile(
    rf"^(?P<name>.+?)\s*(?=,|(?<!\w)(?:{_KEYWORD_STOP})(?!\w)|\$|$)",
    re.IGNORECASE,
)
_LOOSE_CATEGORY_RE = re.compile(r"(?<!\w)categor(?:y|ía|ia)\s*:?\s*(?P<value>[^\W\d_][\w-]*)", re.IGNORECASE)
_LOOSE_PRICE_RE = re.compile(
    r"(?:(?<!\w)(?:price|precio|cost|costo)(?!\w)|\$)\s*:?\s*\$?\s*(?P<value>\d+(?:[.,]\d+)*)",
    re.IGNORECASE,
)
_LOOSE_STOCK_RE = re.compile(
    r"(?<!\w)(?:stock|qty|units?|cantidad|unidades?)(?!\w)\s*:?\s*(?P<value>-?\d+)"
    r"|(?<![\w.,])(?P<count>\d+)\s*(?:units?|unidades?|pcs)(?!\w)",
    re.IGNORECASE,
)
_STOCK_PAIR_RE = re.compile(r"^\s*(?P<size>[^:=]+?)\s*[:=]\s*(?P<qty>-?\d+)\s*$")
_KEY_RE = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ParseFailure:
    code: str
    message: str


class LineStrategy(Protocol):
    name: str

    def parse_line(self, raw: Any) -> RawFields | ParseFailure: ...


class PipeStrategy:
    """``Name | category: X | price: Y | stock: Z`` with labels anchored at segment start."""

    name = "pipe"
    separator = "|"
    anchored = True

    def parse_line(self, raw: str) -> RawFields | ParseFailure:
        segments = [segment.strip() for segment in str(raw).split(self.separator)]
        name = strip_lead_in(segments[0])
        if not name:
            return ParseFailure(EMPTY_NAME, "Line has no product name before the first separator")
        fields = RawFields(name=name)
        for segment in segments[1:]:
            if not segment:
                continue
            matched = match_label(segment, anchored=self.anchored)
            if matched is not None:
                assign_label(fields, *matched)
        return fields


class SemicolonStrategy(PipeStrategy):
    """Same labels as the pipe form, searched anywhere inside each segment."""

    name = "semicolon"
    separator = ";"
    anchored = False


class LooseStrategy:
    """Free text such as ``Black shirt, category shirts, price 25000, stock 10``."""

    name = "loose"

    def parse_line(self, raw: str) -> RawFields | ParseFailure:
        text = strip_lead_in(raw)
        name_match = _LOOSE_NAME_RE.match(text)
        name = name_match.group("name").strip(" ,") if name_match else ""
        if not name:
            return ParseFailure(EMPTY_NAME, "Could not find a product name in the line")

        category = _LOOSE_CATEGORY_RE.search(text)
        price = _LOOSE_PRICE_RE.search(text)
        stock = _LOOSE_STOCK_RE.search(text)
        if category is None and price is None and stock is None:
            return ParseFailure(PARSE_ERROR, "Line has no category, price or stock information")

        fields = RawFields(name=name)
        if category is not None:
            fields.category = category.group("value")
        if price is not None:
            fields.price = price.group("value")
        if stock is not None:
            fields.stock = stock.group("value") or stock.group("count")
        return fields


# Normalized key -> RawFields attribute. Keys are lower-cased with
# non-alphanumerics removed, so "primaryImage" and "primary_image" agree.
MAPPING_SYNONYMS: dict[str, str] = {
    "name": "name",
    "nombre": "name",
    "title": "name",
    "description": "description",
    "descripcion": "description",
    "desc": "description",
    "category": "category",
    "categoria": "category",
    "cat": "category",
    "price": "price",
    "precio": "price",
    "stock": "stock",
    "quantity": "stock",
    "qty": "stock",
    "cantidad": "stock",
    "sizes": "sizes",
    "size": "sizes",
    "talles": "sizes",
    "colors": "colors",
    "color": "colors",
    "colores": "colors",
    "sku": "sku",
    "code": "sku",
    "codigo": "sku",
    "images": "images",
    "imagenes": "images",
    "primaryimage": "primary_image",
    "mainimage": "primary_image",
    "imagenprincipal": "primary_image",
    "image": "primary_image",
    "tags": "tags",
    "etiquetas": "tags",
    "stockbysize": "stock_by_size",
    "stockportalle": "stock_by_size",
    "active": "active",
    "activo": "active",
    "suggestedprice": "suggested_price",
    "preciosugerido": "suggested_price",
}


def mapping_key(key: Any) -> str:
    text = unicodedata.normalize("NFKD", str(key or "").strip().lower())
    return _KEY_RE.sub("", text.encode("ascii", "ignore").decode("ascii"))


def parse_stock_map(value: Any) -> dict[str, Any] | None:
    if isinstance(value, dict):
        return {str(size).strip(): qty for size, qty in value.items() if str(size).strip()}
    text = str(value or "").strip()
    if not text:
        return None
    pairs: dict[str, Any] = {}
    for chunk in text.split(","):
        match = _STOCK_PAIR_RE.match(chunk)
        if match:
            pairs[match.group("size").upper()] = match.group("qty")
    return pairs or None


class MappingStrategy:
    """One JSON object or CSV row with named fields."""

    def __init__(self, name: str = "json") -> None:
        self.name = name

    def parse_line(self, raw: Any) -> RawFields | ParseFailure:
        if not isinstance(raw, dict):
            return ParseFailure(PARSE_ERROR, f"Expected an object, got {type(raw).__name__}")

        values: dict[str, Any] = {}
        for key, value in raw.items():
            target = MAPPING_SYNONYMS.get(mapping_key(key))
            if target is None or target in values:
                continue
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            values[target] = value

        name = str(values.get("name") or "").strip()
        if not name:
            return ParseFailure(EMPTY_NAME, "Object has no name field")

        fields = RawFields(name=name)
        fields.category = str(values.get("category") or "").strip()
        fields.price = values.get("price")
        fields.stock = values.get("stock")
        fields.suggested_price = values.get("suggested_price")
        fields.description = clean_text(values.get("description"))
        fields.sku = clean_text(values.get("sku"))
        fields.sizes = split_sizes(values.get("sizes"))
        fields.colors = split_tokens(
            [normalize_category(token) for token in split_tokens(values.get("colors"), pattern=LIST_SPLIT_RE)]
        )
        fields.images = split_images(values.get("images"))
        fields.primary_image = clean_text(values.get("primary_image"))
        fields.tags = split_tokens(values.get("tags"))
        fields.stock_by_size = parse_stock_map(values.get("stock_by_size"))
        active = parse_bool(values.get("active"))
        fields.active = True if active is None else active
        return fields


__all__ = [
    "LineStrategy",
    "LooseStrategy",
    "MAPPING_SYNONYMS",
    "MappingStrategy",
    "ParseFailure",
    "PipeStrategy",
    "SemicolonStrategy",
    "mapping_key",
    "parse_stock_map",
]
