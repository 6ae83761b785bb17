"""Database and extension wiring for Dompet."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app
from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database, session_scope as _engine_scope

EXTENSION_KEY = "dompet"


def init_db(app: Flask) -> None:
    """Initialize the engine and schema using configuration from the app."""

    config: BaseConfig = app.config["DOMPET_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    app.extensions[EXTENSION_KEY] = {"engine": engine, "session_factory": session_factory}


def get_engine() -> Engine:
    """Return the engine bound to the current app."""

    state = current_app.extensions.get(EXTENSION_KEY)
    if state is None:
        raise RuntimeError("Database engine not initialized")
    return state["engine"]


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around one request's ledger work."""

    with _engine_scope(get_engine()) as session:
        yield session
