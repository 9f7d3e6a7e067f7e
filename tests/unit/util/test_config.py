"""Unit tests for application settings."""

from idbridge.config import Settings


def test_callback_urls_follow_host_in_development():
    settings = Settings(environment="development", host="localhost", port=9000)

    assert settings.directory.login_url == "http://localhost:9000/login"
    assert settings.directory.verify_url == "http://localhost:9000/auth/verify"


def test_callback_urls_use_https_in_production():
    settings = Settings(environment="production", host="id.example.com")

    assert settings.directory.login_url == "https://id.example.com/login"


def test_nested_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CACHE__BACKEND", "redis")
    monkeypatch.setenv("CACHE__TTL_SECONDS", "120")
    monkeypatch.setenv("DIRECTORY__PROJECT_ID", "my-project")

    settings = Settings()

    assert settings.cache.backend == "redis"
    assert settings.cache.ttl_seconds == 120
    assert settings.directory.project_id == "my-project"
