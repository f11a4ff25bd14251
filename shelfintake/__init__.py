"""Public package entrypoint for the shelfintake bulk product import pipeline.

This package provides a stable import surface for the core parse/validate/import
logic, plus optional frontend adapters (CLI and FastAPI server).
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "ParsedProductRecord": ("shelfintake.core", "ParsedProductRecord"),
    "app": ("shelfintake.server.main", "app"),
    "create_app": ("shelfintake.server.main", "create_app"),
    "import_batch": ("shelfintake.core", "import_batch"),
    "parse_text": ("shelfintake.core", "parse_text"),
    "validate_file": ("shelfintake.core", "validate_file"),
}

try:
    __version__ = version("shelfintake")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ParsedProductRecord",
    "__version__",
    "app",
    "create_app",
    "import_batch",
    "parse_text",
    "validate_file",
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
