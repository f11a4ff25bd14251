"""Optional copy and attribute suggestions for accepted records.

Enhancement fills gaps only: descriptions and sizes the merchant already
wrote are kept, and generated tags are appended after the merchant's own.
"""

from __future__ import annotations

from dataclasses import replace

from ..canonical import ParsedProductRecord
from .inference import DEFAULT_CATEGORY, distribute_stock

MAX_TAGS = 15

SUGGESTED_SIZES: dict[str, tuple[str, ...]] = {
    "Shirts": ("S", "M", "L", "XL"),
    "Hoodies": ("S", "M", "L", "XL"),
    "Jackets": ("S", "M", "L", "XL"),
    "Pants": ("36", "38", "40", "42"),
    "Footwear": ("38", "39", "40", "41", "42"),
}
DEFAULT_SUGGESTED_SIZES: tuple[str, ...] = ("S", "M", "L")

_TAG_STOPWORDS = frozenset(
    {"with", "from", "para", "that", "this", "your", "de", "la", "el", "los", "las", "del", "con"}
)
_APPAREL_TAGS: tuple[str, ...] = ("clothing", "fashion", "apparel")


def short_description(name: str, category: str) -> str:
    return f"High quality {name} from our {category} line. Modern, comfortable design."


def long_description(
    name: str,
    category: str,
    summary: str,
    *,
    sizes: list[str] | None = None,
    colors: list[str] | None = None,
) -> str:
    lines = [
        summary,
        "",
        "Features:",
        "- Premium materials",
        "- Versatile, modern design",
        "- Made for everyday wear",
    ]
    if sizes:
        lines.append(f"- Available sizes: {', '.join(sizes)}")
    if colors:
        lines.append(f"- Available colors: {', '.join(colors)}")
    lines.extend(["", f"A great pick for anyone looking for quality {category.lower()}."])
    return "\n".join(lines)


def generate_tags(name: str, category: str, colors: list[str] | None = None) -> list[str]:
    """Category, keywords from the name, colors, then generic apparel tags."""
    tags = [category.lower()]
    tags.extend(
        word for word in name.lower().split() if len(word) > 3 and word not in _TAG_STOPWORDS
    )
    tags.extend(color.lower() for color in colors or [])
    if category != DEFAULT_CATEGORY:
        tags.extend(_APPAREL_TAGS)
    return list(dict.fromkeys(tags))[:MAX_TAGS]


def suggest_sizes(category: str) -> list[str]:
    if category == DEFAULT_CATEGORY:
        return []
    return list(SUGGESTED_SIZES.get(category, DEFAULT_SUGGESTED_SIZES))


def enhance_record(record: ParsedProductRecord) -> ParsedProductRecord:
    summary = record.description or short_description(record.name, record.category)
    sizes = list(record.sizes or []) or suggest_sizes(record.category)

    stock_by_size = record.stock_by_size
    if not stock_by_size and sizes and record.stock > 0:
        stock_by_size = distribute_stock(sizes, record.stock)

    tags = list(
        dict.fromkeys([*(record.tags or []), *generate_tags(record.name, record.category, record.colors)])
    )[:MAX_TAGS]

    return replace(
        record,
        description=summary,
        long_description=long_description(
            record.name,
            record.category,
            summary,
            sizes=sizes,
            colors=record.colors,
        ),
        tags=tags,
        sizes=sizes,
        stock_by_size=stock_by_size,
    )


__all__ = [
    "DEFAULT_SUGGESTED_SIZES",
    "MAX_TAGS",
    "SUGGESTED_SIZES",
    "enhance_record",
    "generate_tags",
    "long_description",
    "short_description",
    "suggest_sizes",
]
