import pytest

from nurse_funnel.config import AppConfig


def test_defaults_in_dev():
    config = AppConfig.load_from_env()
    assert config.env == "dev"
    assert config.database_url == "sqlite:///./leads.db"
    assert config.admin_api_key == ""
    assert config.notice_ttl_seconds == 600


def test_legacy_postgres_scheme_is_rewritten(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://user:pass@db:5432/leads")
    assert AppConfig.load_from_env().database_url == "postgresql://user:pass@db:5432/leads"


def test_invalid_env_falls_back_to_dev(monkeypatch):
    monkeypatch.setenv("ENV", "staging")
    assert AppConfig.load_from_env().env == "dev"


def test_prod_requires_admin_key(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    with pytest.raises(RuntimeError):
        AppConfig.load_from_env()

    monkeypatch.setenv("ADMIN_API_KEY", "secret")
    config = AppConfig.load_from_env()
    assert config.env == "prod"
    assert config.admin_api_key == "secret"
