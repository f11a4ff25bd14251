from dataclasses import dataclass, field
from typing import Any, Literal

DeclaredFormat = Literal["auto", "text", "json", "csv"]
DetectedFormat = Literal["text", "json", "csv"]


@dataclass
class ParsedProductRecord:
    name: str
    category: str
    price: float
    stock: int = 0
    description: str | None = None
    long_description: str | None = None
    stock_by_size: dict[str, int] | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    sku: str | None = None
    tags: list[str] | None = None
    primary_image: str | None = None
    secondary_images: list[str] | None = None
    active: bool = True
    suggested_price: float | None = None
    raw_price: str | None = None
    row: int | None = None
    source: str | None = None
    quality: int | None = None

    def __post_init__(self) -> None:
        if self.stock_by_size:
            self.stock_by_size = {str(key): int(value) for key, value in self.stock_by_size.items()}
            self.sizes = list(self.stock_by_size)
            self.stock = sum(self.stock_by_size.values())
        elif self.stock_by_size is not None:
            self.stock_by_size = None
        self.sizes = _none_if_empty(self.sizes)
        self.colors = _none_if_empty(self.colors)
        self.tags = _none_if_empty(self.tags)
        self.secondary_images = _none_if_empty(self.secondary_images)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "longDescription": self.long_description,
            "category": self.category,
            "price": self.price,
            "stock": self.stock,
            "stockBySize": dict(self.stock_by_size) if self.stock_by_size else None,
            "sizes": list(self.sizes) if self.sizes else None,
            "colors": list(self.colors) if self.colors else None,
            "sku": self.sku,
            "tags": list(self.tags) if self.tags else None,
            "primaryImage": self.primary_image,
            "secondaryImages": list(self.secondary_images) if self.secondary_images else None,
            "active": self.active,
            "suggestedPrice": self.suggested_price,
            "rawPrice": self.raw_price,
            "row": self.row,
            "source": self.source,
            "quality": self.quality,
        }


@dataclass
class ParseMetadata:
    total_lines: int = 0
    detected_format: str = "text"
    records_detected: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_lines": self.total_lines,
            "detected_format": self.detected_format,
            "records_detected": self.records_detected,
            "elapsed_ms": round(self.elapsed_ms, 3),
        }


@dataclass
class BatchError:
    index: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "reason": self.reason}


@dataclass
class ImportBatchResult:
    created_ids: list[str] = field(default_factory=list)
    errors: list[BatchError] = field(default_factory=list)
    total: int = 0

    @property
    def created(self) -> int:
        return len(self.created_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": self.created,
            "created_ids": list(self.created_ids),
            "errors": [error.to_dict() for error in self.errors],
            "total": self.total,
        }


@dataclass(frozen=True)
class FileMetadata:
    name: str
    size_bytes: int
    mime_type: str
    extension: str


@dataclass
class FileValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: FileMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        metadata = self.metadata
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metadata": {
                "name": metadata.name,
                "size_bytes": metadata.size_bytes,
                "mime_type": metadata.mime_type,
                "extension": metadata.extension,
            }
            if metadata is not None
            else None,
        }


def _none_if_empty(values: list[str] | None) -> list[str] | None:
    if not values:
        return None
    return list(values)


@dataclass
class ParseOutcome:
    records: list[ParsedProductRecord] = field(default_factory=list)
    errors: list[Any] = field(default_factory=list)
    metadata: ParseMetadata = field(default_factory=ParseMetadata)

    @property
    def has_critical(self) -> bool:
        return any(getattr(error, "severity", None) == "critical" for error in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "errors": [error.to_dict() for error in self.errors],
            "metadata": self.metadata.to_dict(),
        }
