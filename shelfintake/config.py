"""Shared runtime settings for server/CLI adapters.

This module owns environment-backed application settings. It is intentionally
separate from ``shelfintake.core.config`` because core config stays minimal and
framework-agnostic.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_tagline: str
    debug: bool
    log_verbosity: str
    cors_allow_origins: tuple[str, ...]
    catalog_api_url: str | None
    catalog_api_token: str | None
    import_log_url: str | None
    import_log_path: str | None
    import_log_capacity: int
    max_upload_mb: float
    placeholder_image: str
    currency: str


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, default: str, *, allowed: set[str]) -> str:
    val = os.getenv(name)
    if val is None:
        return default
    normalized = val.strip().lower()
    if normalized in allowed:
        return normalized
    return default


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return int(val.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None:
        return default
    try:
        return float(val.strip())
    except ValueError:
        return default


def _env_optional(name: str) -> str | None:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    )
    return Settings(
        app_name=os.getenv("APP_NAME", "ShelfIntake"),
        app_tagline=os.getenv(
            "APP_TAGLINE",
            "Paste a product list, get a validated catalog batch.",
        ),
        debug=_env_bool("DEBUG", default=False),
        log_verbosity=_env_choice(
            "LOG_VERBOSITY",
            default="medium",
            allowed={"low", "medium", "high", "extrahigh"},
        ),
        cors_allow_origins=origins or ("*",),
        catalog_api_url=_env_optional("CATALOG_API_URL"),
        catalog_api_token=_env_optional("CATALOG_API_TOKEN"),
        import_log_url=_env_optional("IMPORT_LOG_URL"),
        import_log_path=_env_optional("IMPORT_LOG_PATH"),
        import_log_capacity=max(1, _env_int("IMPORT_LOG_CAPACITY", 50)),
        max_upload_mb=_env_float("MAX_UPLOAD_MB", 10.0),
        placeholder_image=os.getenv("PLACEHOLDER_IMAGE", "/images/default-product.svg"),
        currency=os.getenv("CATALOG_CURRENCY", "USD").strip().upper() or "USD",
    )


__all__ = ["Settings", "get_settings"]
