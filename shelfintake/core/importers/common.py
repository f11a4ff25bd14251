import math
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse


_PRICE_SANITIZE_RE = re.compile(r"[^\d.,]")
# A dot followed by exactly three digits and then end-of-string or another separator.
_THOUSANDS_DOT_RE = re.compile(r"\.(?=\d{3}(?:$|[.,]))")
_STOCK_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_WHITESPACE_RE = re.compile(r"\s+")
_IMAGE_SPLIT_RE = re.compile(r"[,\s]+")
LIST_SPLIT_RE = re.compile(r"[,/]")
_LEAD_IN_RE = re.compile(
    r"^\s*(?:quiero cargar|cargar|producto|product|item|add|load)\s*:\s*",
    re.IGNORECASE,
)

# Field -> accepted labels, local-language equivalents included. Longer labels
# sit before their prefixes so "suggested price" never reads as "price".
LABEL_SYNONYMS: dict[str, tuple[str, ...]] = {
    "suggested_price": ("suggested price", "precio sugerido"),
    "category": ("category", "categoría", "categoria", "cat"),
    "price": ("price", "precio", "cost"),
    "stock": ("stock", "quantity", "qty", "cantidad", "units"),
    "sku": ("sku", "code", "código", "codigo"),
    "description": ("description", "descripción", "descripcion", "desc"),
    "sizes": ("sizes", "size", "talles", "talle"),
    "colors": ("colors", "colours", "color", "colour", "colores"),
    "images": ("images", "image", "imágenes", "imagenes", "imagen"),
    "tags": ("tags", "tag", "etiquetas"),
}


def _label_pattern(labels: tuple[str, ...], *, anchored: bool) -> re.Pattern[str]:
    alternation = "|".join(re.escape(label) for label in labels)
    if anchored:
        return re.compile(rf"^\s*(?:{alternation})\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)\s*:?\s*(?P<value>.+?)\s*$", re.IGNORECASE)


_ANCHORED_LABELS = {key: _label_pattern(labels, anchored=True) for key, labels in LABEL_SYNONYMS.items()}
_SEARCH_LABELS = {key: _label_pattern(labels, anchored=False) for key, labels in LABEL_SYNONYMS.items()}


@dataclass
class RawFields:
    """String-level fields pulled out of one input line or object."""

    name: str = ""
    category: str = ""
    price: Any = None
    stock: Any = None
    description: str | None = None
    sku: str | None = None
    sizes: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    primary_image: str | None = None
    tags: list[str] = field(default_factory=list)
    stock_by_size: dict[str, Any] | None = None
    suggested_price: Any = None
    active: bool = True


def match_label(segment: str, *, anchored: bool) -> tuple[str, str] | None:
    if anchored:
        for key, pattern in _ANCHORED_LABELS.items():
            match = pattern.search(segment)
            if match:
                return key, match.group("value").strip()
        return None

    # Unanchored: the label that appears first in the segment wins.
    best: tuple[int, str, str] | None = None
    for key, pattern in _SEARCH_LABELS.items():
        match = pattern.search(segment)
        if match and (best is None or match.start() < best[0]):
            best = (match.start(), key, match.group("value").strip())
    if best is None:
        return None
    return best[1], best[2]


def assign_label(fields: RawFields, key: str, value: str) -> None:
    if not value:
        return
    if key == "category":
        fields.category = value
    elif key == "price":
        fields.price = value
    elif key == "suggested_price":
        fields.suggested_price = value
    elif key == "stock":
        fields.stock = value
    elif key == "sku":
        fields.sku = value
    elif key == "description":
        fields.description = value
    elif key == "sizes":
        fields.sizes = split_sizes(value)
    elif key == "colors":
        fields.colors = split_tokens(
            [normalize_category(token) for token in split_tokens(value, pattern=LIST_SPLIT_RE)]
        )
    elif key == "images":
        fields.images = split_images(value)
    elif key == "tags":
        fields.tags = split_tokens(value)


def strip_lead_in(line: str) -> str:
    return _LEAD_IN_RE.sub("", str(line or "").strip(), count=1)


def normalize_price(value: Any) -> float:
    """Parse a human-typed price; 0.0 means unparsable."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    text = _PRICE_SANITIZE_RE.sub("", str(value))
    text = _THOUSANDS_DOT_RE.sub("", text)
    text = text.replace(",", ".")
    try:
        parsed = float(text)
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def parse_stock(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _STOCK_PREFIX_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def normalize_name(value: Any) -> str:
    tokens = _WHITESPACE_RE.split(str(value or "").strip())
    return " ".join(token[:1].upper() + token[1:].lower() for token in tokens if token)


def normalize_category(value: Any) -> str:
    text = _WHITESPACE_RE.sub(" ", str(value or "").strip())
    return text[:1].upper() + text[1:].lower()


def clean_text(value: Any) -> str | None:
    text = str(value or "").strip()
    return text or None


def split_tokens(value: Any, *, sep: str = ",", pattern: re.Pattern[str] | None = None) -> list[str]:
    if isinstance(value, (list, tuple)):
        items = [str(item or "") for item in value]
    else:
        text = str(value or "").strip()
        if not text:
            return []
        items = pattern.split(text) if pattern is not None else text.split(sep)
    seen: set[str] = set()
    out: list[str] = []
    for token in items:
        stripped = token.strip()
        if not stripped or stripped in seen:
            continue
        seen.add(stripped)
        out.append(stripped)
    return out


def split_sizes(value: Any) -> list[str]:
    """Upper-cased size tokens, de-duplicated after case folding."""
    return split_tokens([token.upper() for token in split_tokens(value, pattern=LIST_SPLIT_RE)])


def is_valid_image_url(url: Any) -> bool:
    text = str(url or "").strip()
    if not text:
        return False
    if text.startswith(("/", "./")):
        return True
    parsed = urlparse(text)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def split_images(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        candidates = [str(item or "").strip() for item in value]
    else:
        candidates = _IMAGE_SPLIT_RE.split(str(value or "").strip())
    seen: set[str] = set()
    out: list[str] = []
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        out.append(candidate)
    return out


def parse_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if not text:
        return None
    if text in {"1", "true", "yes", "y", "si", "sí"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    return None


__all__ = [
    "LABEL_SYNONYMS",
    "LIST_SPLIT_RE",
    "RawFields",
    "assign_label",
    "clean_text",
    "is_valid_image_url",
    "match_label",
    "normalize_category",
    "normalize_name",
    "normalize_price",
    "parse_bool",
    "parse_stock",
    "split_images",
    "split_sizes",
    "split_tokens",
    "strip_lead_in",
]
