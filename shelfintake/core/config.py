"""Core pipeline configuration.

Core config is side-effect free: it does not load dotenv files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CoreConfig:
    strict: bool = False
    debug: bool = False
    auto_fix: bool = True
    detect_sizes: bool = True
    detect_colors: bool = True
    enhance: bool = False


def _flag(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def config_from_env(*, strict: bool = False, debug: bool = False) -> CoreConfig:
    return CoreConfig(
        strict=strict,
        debug=debug,
        auto_fix=_flag("IMPORT_AUTO_FIX", True),
        detect_sizes=_flag("IMPORT_DETECT_SIZES", True),
        detect_colors=_flag("IMPORT_DETECT_COLORS", True),
        enhance=_flag("IMPORT_ENHANCE", False),
    )


__all__ = ["CoreConfig", "config_from_env"]
