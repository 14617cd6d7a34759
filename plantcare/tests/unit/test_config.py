import pytest

from plantcare.app.config import Settings, get_settings


def test_defaults_outside_test_mode(monkeypatch):
    for name in ("TEST_MODE", "DB_NAME", "DEMO_MODE", "CORS_ORIGINS", "MAX_UPLOAD_BYTES"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.db_name == "plantcare"
    assert settings.test_mode is False
    assert settings.demo_mode is False
    assert settings.max_upload_bytes == 5 * 1024 * 1024
    assert settings.cors_origins == ("http://localhost:5173",)


def test_test_mode_isolates_database(monkeypatch):
    monkeypatch.setenv("TEST_MODE", "true")
    monkeypatch.delenv("DB_NAME", raising=False)

    assert Settings.from_env().db_name == "plantcare_test"


@pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("ON", True), ("0", False), ("", False)])
def test_demo_mode_flag(monkeypatch, raw, expected):
    monkeypatch.setenv("DEMO_MODE", raw)
    assert Settings.from_env().demo_mode is expected


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "2048")
    monkeypatch.setenv("UPLOAD_DIR", "/tmp/plant-images")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.max_upload_bytes == 2048
    assert settings.upload_dir == "/tmp/plant-images"
    assert settings.log_level == "DEBUG"


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    first = get_settings()
    monkeypatch.setenv("DB_HOST", "elsewhere")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().db_host == "elsewhere"
