"""Core pipeline API.

The core layer is framework-agnostic and safe to import from scripts, tests,
CLI commands, and web frontends.
"""

from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "BatchImporter": ("shelfintake.core.persist", "BatchImporter"),
    "CoreConfig": ("shelfintake.core.config", "CoreConfig"),
    "ErrorAggregator": ("shelfintake.core.diagnostics", "ErrorAggregator"),
    "FileValidator": ("shelfintake.core.validate", "FileValidator"),
    "InMemoryCatalogStore": ("shelfintake.core.persist", "InMemoryCatalogStore"),
    "ParseReport": ("shelfintake.core.api", "ParseReport"),
    "ParsedProductRecord": ("shelfintake.core.canonical", "ParsedProductRecord"),
    "config_from_env": ("shelfintake.core.config", "config_from_env"),
    "detect_format": ("shelfintake.core.detect", "detect_format"),
    "import_batch": ("shelfintake.core.api", "import_batch"),
    "parse": ("shelfintake.core.importers", "parse"),
    "parse_text": ("shelfintake.core.api", "parse_text"),
    "record_from_payload": ("shelfintake.core.api", "record_from_payload"),
    "validate_file": ("shelfintake.core.api", "validate_file"),
    "validate_record": ("shelfintake.core.validate", "validate_record"),
    "validate_records": ("shelfintake.core.api", "validate_records"),
}

__all__ = [
    "BatchImporter",
    "CoreConfig",
    "ErrorAggregator",
    "FileValidator",
    "InMemoryCatalogStore",
    "ParseReport",
    "ParsedProductRecord",
    "config_from_env",
    "detect_format",
    "import_batch",
    "parse",
    "parse_text",
    "record_from_payload",
    "validate_file",
    "validate_record",
    "validate_records",
]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute_name = target
    module = __import__(module_name, fromlist=[attribute_name])
    value = getattr(module, attribute_name)
    globals()[name] = value
    return value
