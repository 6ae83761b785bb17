from __future__ import annotations

import pytest

from dompet import _resolve_config, create_app
from dompet import config as dompet_config
from dompet.config import BaseConfig, DevConfig


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    for name in ("DOMPET_DATABASE_URL", "DOMPET_DEV_MODE", "DOMPET_SECRET_KEY", "DOMPET_DEFAULT_CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOMPET_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'dompet.db'}"
    assert config.DEFAULT_CURRENCY == "IDR"
    assert config.SQLITE_PRAGMAS["foreign_keys"] == "on"
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_database_url_override(monkeypatch):
    monkeypatch.setenv("DOMPET_DATABASE_URL", "postgresql://ledger@localhost/dompet")

    config = BaseConfig()

    assert not config.is_sqlite
    assert config.sqlalchemy_engine_options() == {}


def test_secret_required_outside_dev_mode(monkeypatch):
    monkeypatch.setenv("DOMPET_DEV_MODE", "false")

    with pytest.raises(ValueError):
        BaseConfig()

    monkeypatch.setenv("DOMPET_SECRET_KEY", "rahasia")
    assert BaseConfig().SECRET_KEY == "rahasia"


def test_currency_must_be_iso_code(monkeypatch):
    monkeypatch.setenv("DOMPET_DEFAULT_CURRENCY", "rupiah")

    with pytest.raises(ValueError):
        BaseConfig()

    monkeypatch.setenv("DOMPET_DEFAULT_CURRENCY", "usd")
    assert BaseConfig().DEFAULT_CURRENCY == "USD"


def test_config_resolution():
    assert _resolve_config("development") is DevConfig
    assert _resolve_config("TESTING") is dompet_config.TestConfig
    assert _resolve_config("staging") is BaseConfig
    assert _resolve_config(None) is BaseConfig


def test_create_app_uses_default_currency(monkeypatch):
    monkeypatch.setenv("DOMPET_DEFAULT_CURRENCY", "SGD")
    app = create_app("testing")
    try:
        assert app.config["TESTING"] is True
        response = app.test_client().post("/wallets", json={"name": "DBS"})
        assert response.get_json()["currency"] == "SGD"
    finally:
        app.extensions["dompet"]["engine"].dispose()
