from typing import Any

# Resolved on first access so that sibling packages can import the
# helper modules here without loading the parser.
_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "build_record": ("shelfintake.core.importers.parser", "build_record"),
    "parse": ("shelfintake.core.importers.parser", "parse"),
}

__all__ = ["build_record", "parse"]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute_name = target
    module = __import__(module_name, fromlist=[attribute_name])
    value = getattr(module, attribute_name)
    globals()[name] = value
    return value
