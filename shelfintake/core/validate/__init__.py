from .autofix import AutoFixResult, try_auto_fix
from .duplicates import detect_duplicates, duplicate_groups, report_duplicates
from .files import FileValidationOptions, FileValidator, UploadedFile
from .report import ValidationIssue, ValidationResult
from .rules import validate_record

__all__ = [
    "AutoFixResult",
    "FileValidationOptions",
    "FileValidator",
    "UploadedFile",
    "ValidationIssue",
    "ValidationResult",
    "detect_duplicates",
    "duplicate_groups",
    "report_duplicates",
    "try_auto_fix",
    "validate_record",
]
