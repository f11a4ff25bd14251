from .entities import (
    BatchError,
    DeclaredFormat,
    DetectedFormat,
    FileMetadata,
    FileValidationResult,
    ImportBatchResult,
    ParseMetadata,
    ParseOutcome,
    ParsedProductRecord,
)

__all__ = [
    "BatchError",
    "DeclaredFormat",
    "DetectedFormat",
    "FileMetadata",
    "FileValidationResult",
    "ImportBatchResult",
    "ParseMetadata",
    "ParseOutcome",
    "ParsedProductRecord",
]
