import os

import pytest

from app import _get_bool_env, _get_int_env, create_app
from app.cache_store import MemoryCacheStore, RedisCacheStore


def test_defaults(app):
    assert app.config["INVOICE_QUERY_CACHE_ENABLED"] is True
    assert app.config["INVOICE_QUERY_CACHE_TTL"] == 300
    assert app.config["REPORT_RECIPIENT"] == "admin@example.com"
    assert app.config["DAILY_REPORTS_ENABLED"] is False
    assert app.config["DEMO"] is True
    assert app.config["QUERY_CACHE_MAX_SIZE"] == 1024
    assert isinstance(app.extensions["query_cache_store"], MemoryCacheStore)
    assert app.extensions["query_cache_store"].max_size == 1024


def test_bool_env(monkeypatch):
    monkeypatch.setenv("FEATURE_FLAG", " Yes ")
    assert _get_bool_env("FEATURE_FLAG") is True
    monkeypatch.setenv("FEATURE_FLAG", "off")
    assert _get_bool_env("FEATURE_FLAG", default=True) is False
    monkeypatch.delenv("FEATURE_FLAG")
    assert _get_bool_env("FEATURE_FLAG", default=True) is True


def test_int_env(monkeypatch):
    monkeypatch.setenv("SOME_TTL", "60")
    assert _get_int_env("SOME_TTL", 5) == 60
    monkeypatch.setenv("SOME_TTL", "")
    assert _get_int_env("SOME_TTL", 5) == 5
    monkeypatch.setenv("SOME_TTL", "soon")
    with pytest.raises(RuntimeError) as excinfo:
        _get_int_env("SOME_TTL", 5)
    assert "SOME_TTL" in str(excinfo.value)
    assert excinfo.value.__suppress_context__ is True


def test_environment_configuration(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))
    monkeypatch.setenv("QUERY_CACHE_URL", "redis://localhost:6379/1")
    monkeypatch.setenv("INVOICE_QUERY_CACHE_TTL", "30")
    monkeypatch.setenv("INVOICE_QUERY_CACHE_ENABLED", "false")
    monkeypatch.setenv("REPORT_RECIPIENT", "ops@example.com")
    monkeypatch.delenv("DATABASE_URL", raising=False)

    app = create_app(["--demo"])

    assert app.config["SQLALCHEMY_DATABASE_URI"] == (
        f"sqlite:///{os.path.join(str(tmp_path), 'invoices.db')}"
    )
    assert app.config["INVOICE_QUERY_CACHE_TTL"] == 30
    assert app.config["INVOICE_QUERY_CACHE_ENABLED"] is False
    assert app.config["REPORT_RECIPIENT"] == "ops@example.com"
    assert isinstance(app.extensions["query_cache_store"], RedisCacheStore)


def test_memory_cache_size_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path))
    monkeypatch.setenv("QUERY_CACHE_MAX_SIZE", "16")
    monkeypatch.delenv("QUERY_CACHE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    app = create_app(["--demo"])

    assert app.config["QUERY_CACHE_MAX_SIZE"] == 16
    assert app.extensions["query_cache_store"].max_size == 16
