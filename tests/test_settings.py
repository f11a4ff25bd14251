from shelfintake.config import get_settings
from shelfintake.core import config_from_env


def test_settings_defaults(monkeypatch) -> None:
    for name in ("DEBUG", "CATALOG_API_URL", "IMPORT_LOG_CAPACITY", "MAX_UPLOAD_MB", "CATALOG_CURRENCY"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.debug is False
    assert settings.catalog_api_url is None
    assert settings.import_log_capacity == 50
    assert settings.max_upload_mb == 10.0
    assert settings.currency == "USD"


def test_settings_tolerate_bad_values(monkeypatch) -> None:
    monkeypatch.setenv("IMPORT_LOG_CAPACITY", "0")
    monkeypatch.setenv("MAX_UPLOAD_MB", "lots")
    monkeypatch.setenv("LOG_VERBOSITY", "LOUD")
    monkeypatch.setenv("CATALOG_API_URL", "  ")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test")

    settings = get_settings()

    assert settings.import_log_capacity == 1
    assert settings.max_upload_mb == 10.0
    assert settings.log_verbosity == "medium"
    assert settings.catalog_api_url is None
    assert settings.cors_allow_origins == ("https://a.test", "https://b.test")


def test_core_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("IMPORT_AUTO_FIX", "0")
    monkeypatch.setenv("IMPORT_DETECT_COLORS", "no")

    config = config_from_env(strict=True)

    assert config.strict is True
    assert config.auto_fix is False
    assert config.detect_colors is False
    assert config.detect_sizes is True


def test_core_config_enhance_is_opt_in(monkeypatch) -> None:
    monkeypatch.delenv("IMPORT_ENHANCE", raising=False)
    assert config_from_env().enhance is False

    monkeypatch.setenv("IMPORT_ENHANCE", "true")
    assert config_from_env().enhance is True
