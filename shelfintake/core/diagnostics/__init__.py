from .aggregator import ErrorAggregator
from .errors import (
    AUTO_FIXED,
    CATEGORY_ERROR,
    CREATE_FAILED,
    DUPLICATE,
    EMPTY_CATEGORY,
    EMPTY_NAME,
    FILE_TOO_LARGE,
    INVALID_IMAGE_URL,
    INVALID_PRICE,
    INVALID_STOCK,
    NETWORK_ERROR,
    PARSE_ERROR,
    PLAN_LIMIT_EXCEEDED,
    SEVERITIES,
    TIMEOUT,
    UNSUPPORTED_FORMAT,
    ImportDiagnostic,
    Severity,
    friendly_message,
)
from .logstore import DEFAULT_LOG_CAPACITY, HttpImportLogSink, ImportLog, ImportLogSink, RingBufferLogStore

__all__ = [
    "AUTO_FIXED",
    "CATEGORY_ERROR",
    "CREATE_FAILED",
    "DEFAULT_LOG_CAPACITY",
    "DUPLICATE",
    "EMPTY_CATEGORY",
    "EMPTY_NAME",
    "ErrorAggregator",
    "FILE_TOO_LARGE",
    "HttpImportLogSink",
    "INVALID_IMAGE_URL",
    "INVALID_PRICE",
    "INVALID_STOCK",
    "ImportDiagnostic",
    "ImportLog",
    "ImportLogSink",
    "NETWORK_ERROR",
    "PARSE_ERROR",
    "PLAN_LIMIT_EXCEEDED",
    "RingBufferLogStore",
    "SEVERITIES",
    "Severity",
    "TIMEOUT",
    "UNSUPPORTED_FORMAT",
    "friendly_message",
]
