"""Dompet application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import LedgerError
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger(__name__)


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered on the app."""

    yield "dompet.blueprints.wallets"
    yield "dompet.blueprints.categories"
    yield "dompet.blueprints.transactions"
    yield "dompet.blueprints.reports"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["DOMPET_CONFIG"] = config_obj
    app.json.sort_keys = False  # type: ignore[attr-defined]

    setup_logging(config_obj)

    # Deferred so that importing the package does not configure mappers.
    from .blueprints.fields import IdConverter
    from .extensions import init_db

    init_db(app)
    app.url_map.converters["id"] = IdConverter
    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"config": config_cls.__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    """Render ledger and HTTP failures as JSON error payloads."""

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        if exc.status_code < 500:
            return jsonify(exc.to_dict()), exc.status_code
        logger.exception("Ledger operation failed", extra={"error_code": exc.code})
        return jsonify({"error": "internal_error"}), 500

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        name = (exc.name or "error").lower().replace(" ", "_")
        return jsonify({"error": name, "message": exc.description}), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected_error(exc: Exception):
        logger.exception("Unhandled error while serving request")
        return jsonify({"error": "internal_error"}), 500


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
