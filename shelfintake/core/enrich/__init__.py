from .enhance import enhance_record, generate_tags, suggest_sizes
from .inference import (
    CATEGORY_KEYWORDS,
    COLOR_NAMES,
    DEFAULT_CATEGORY,
    LETTER_SIZES,
    MAX_SIZES,
    detect_colors,
    detect_sizes,
    distribute_stock,
    infer_category,
    quality_score,
)

__all__ = [
    "CATEGORY_KEYWORDS",
    "COLOR_NAMES",
    "DEFAULT_CATEGORY",
    "LETTER_SIZES",
    "MAX_SIZES",
    "detect_colors",
    "detect_sizes",
    "distribute_stock",
    "enhance_record",
    "generate_tags",
    "infer_category",
    "quality_score",
    "suggest_sizes",
]
