"""Attribute inference: category, sizes, colors and per-size stock."""

from __future__ import annotations

import re
from functools import lru_cache

from ..canonical import ParsedProductRecord
from ..importers.common import normalize_category, split_tokens, LIST_SPLIT_RE

DEFAULT_CATEGORY = "General"
MAX_SIZES = 10

# Table order matters: the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Shirts", ("t-shirt", "tshirt", "shirt", "tee", "polo", "remera", "camiseta", "musculosa")),
    ("Pants", ("pants", "jean", "jeans", "trousers", "short", "bermuda", "pantalon", "pantalón")),
    ("Hoodies", ("hoodie", "sweater", "sweatshirt", "buzo", "sudadera", "canguro")),
    ("Footwear", ("sneaker", "shoe", "boot", "zapatilla", "zapato", "calzado")),
    (
        "Accessories",
        ("accessory", "cap", "belt", "backpack", "bag", "gorra", "cinturon", "cinturón", "mochila", "bolso"),
    ),
    ("Jackets", ("jacket", "coat", "campera", "chaqueta", "abrigo")),
    ("Dresses", ("dress", "vestido", "enterito")),
)

LETTER_SIZES: tuple[str, ...] = ("XXXL", "XXL", "XL", "XS", "S", "M", "L")

COLOR_NAMES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Light Blue", ("light blue", "sky blue", "celeste")),
    ("Black", ("black", "negro", "negra")),
    ("White", ("white", "blanco", "blanca")),
    ("Gray", ("gray", "grey", "gris")),
    ("Red", ("red", "rojo", "roja")),
    ("Blue", ("blue", "azul")),
    ("Navy", ("navy",)),
    ("Green", ("green", "verde")),
    ("Yellow", ("yellow", "amarillo", "amarilla")),
    ("Pink", ("pink", "rosa")),
    ("Beige", ("beige",)),
    ("Brown", ("brown", "marron", "marrón")),
    ("Orange", ("orange", "naranja")),
    ("Purple", ("purple", "violet", "violeta")),
    ("Turquoise", ("turquoise", "turquesa")),
    ("Coral", ("coral",)),
    ("Salmon", ("salmon", "salmón")),
    ("Gold", ("gold", "golden", "dorado", "dorada")),
    ("Silver", ("silver", "plateado", "plateada")),
)

_SIZE_TOKEN = r"[A-Za-z]{1,4}|\d{1,2}"
_SIZE_LABEL_RE = re.compile(
    rf"(?<!\w)(?:sizes?|talles?)\s*:?\s*((?:{_SIZE_TOKEN})(?:\s*[/,]\s*(?:{_SIZE_TOKEN}))*)(?![\w/])",
    re.IGNORECASE,
)
_SIZE_RUN_RE = re.compile(r"(?<![\w/])((?:[A-Za-z]{1,4}|\d{2})(?:\s*/\s*(?:[A-Za-z]{1,4}|\d{2}))+)(?![\w/])")
_LETTER_SIZE_RE = re.compile(r"(?<![\w/])(XXXL|XXL|XL|XS)(?![\w/])|(?<!\S)([SML])(?=$|[\s,;|])")
_COLOR_LABEL_RE = re.compile(r"(?<!\w)(?:colou?rs?|colores)\s*:\s*([^|;]+)", re.IGNORECASE)
_NUMERIC_SIZE_RE = re.compile(r"^\d{1,2}$")


@lru_cache(maxsize=None)
def _keyword_re(keyword: str) -> re.Pattern[str]:
    # Accept simple plurals ("shoes", "dresses", "jeans").
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?:e?s)?(?!\w)", re.IGNORECASE)


def infer_category(name: str) -> str:
    lowered = str(name or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if _keyword_re(keyword).search(lowered):
                return category
    return DEFAULT_CATEGORY


def _size_value(token: str) -> str | None:
    cleaned = token.strip().upper()
    if cleaned in LETTER_SIZES or _NUMERIC_SIZE_RE.match(cleaned):
        return cleaned
    return None


def detect_sizes(text: str) -> list[str]:
    """Size tokens in order of first appearance, at most ``MAX_SIZES``."""
    source = str(text or "")
    found: list[tuple[int, int, str]] = []

    for match in _SIZE_LABEL_RE.finditer(source):
        for offset, token in enumerate(split_tokens(match.group(1), pattern=LIST_SPLIT_RE)):
            size = _size_value(token)
            if size:
                found.append((match.start(1), offset, size))

    for match in _SIZE_RUN_RE.finditer(source):
        tokens = [token.strip() for token in match.group(1).split("/")]
        sizes = [_size_value(token) for token in tokens]
        if all(sizes):
            for offset, size in enumerate(sizes):
                found.append((match.start(1), offset, size))

    for match in _LETTER_SIZE_RE.finditer(source):
        # Single-letter sizes need whitespace or a line edge around them.
        group = 1 if match.group(1) else 2
        found.append((match.start(group), 0, match.group(group)))

    ordered: list[str] = []
    for _, _, size in sorted(found, key=lambda item: (item[0], item[1])):
        if size not in ordered:
            ordered.append(size)
    return ordered[:MAX_SIZES]


def detect_colors(text: str) -> list[str]:
    source = str(text or "")
    lowered = source.lower()
    synonyms = sorted(
        ((synonym, canonical) for canonical, names in COLOR_NAMES for synonym in names),
        key=lambda item: len(item[0]),
        reverse=True,
    )
    taken: list[tuple[int, int]] = []
    found: list[tuple[int, str]] = []
    for synonym, canonical in synonyms:
        for match in re.finditer(rf"(?<!\w){re.escape(synonym)}(?!\w)", lowered):
            start, end = match.span()
            if any(start < t_end and end > t_start for t_start, t_end in taken):
                continue
            taken.append((start, end))
            found.append((start, canonical))

    for match in _COLOR_LABEL_RE.finditer(source):
        for token in split_tokens(match.group(1), pattern=LIST_SPLIT_RE):
            found.append((match.start(1), normalize_category(token)))

    colors: list[str] = []
    for _, color in sorted(found, key=lambda item: item[0]):
        if color.lower() not in {existing.lower() for existing in colors}:
            colors.append(color)
    return colors


def distribute_stock(sizes: list[str], total: int) -> dict[str, int]:
    """Spread ``total`` over ``sizes``; earlier sizes absorb the remainder."""
    if not sizes:
        return {}
    total = max(0, int(total))
    base, remainder = divmod(total, len(sizes))
    return {size: base + (1 if index < remainder else 0) for index, size in enumerate(sizes)}


def quality_score(record: ParsedProductRecord) -> int:
    score = 0
    if record.name and len(record.name) >= 3:
        score += 20
    if record.category:
        score += 15
    if record.price > 0:
        score += 15
    if record.stock >= 0:
        score += 10
    if record.description and len(record.description) >= 20:
        score += 15
    if record.tags:
        score += 5
    if record.primary_image:
        score += 10
    if record.sizes:
        score += 5
    if record.colors:
        score += 5
    if record.sku:
        score += 5
    return min(100, score)


__all__ = [
    "CATEGORY_KEYWORDS",
    "COLOR_NAMES",
    "DEFAULT_CATEGORY",
    "LETTER_SIZES",
    "MAX_SIZES",
    "detect_colors",
    "detect_sizes",
    "distribute_stock",
    "infer_category",
    "quality_score",
]
