# Overview: Picks the financial repository implementation for an application.

from __future__ import annotations

from flask import Flask, current_app
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from .base import FinancialRepository
from .local_repository import LocalFinancialRepository
from .sql_repository import SqlFinancialRepository

EXTENSION_KEY = "financial_repository"
REQUIRED_TABLES = ("settings", "time_entries", "expenses", "advances")


def _sql_tables_ready() -> bool:
    try:
        existing = set(inspect(db.engine).get_table_names())
    except SQLAlchemyError:
        current_app.logger.exception("Database inspection failed")
        return False
    return all(table in existing for table in REQUIRED_TABLES)


def select_repository(app: Flask) -> FinancialRepository:
    """
    Choose the backend from STORAGE_BACKEND:
    - "sql": always SQL
    - "local": always the JSON store at LOCAL_STORE_PATH
    - "auto": SQL when its tables exist, else the JSON store

    Must run inside an application context.
    """
    backend = (app.config.get("STORAGE_BACKEND") or "auto").lower()
    local_path = app.config.get("LOCAL_STORE_PATH", "quinzena_store.json")

    if backend == "sql":
        repo: FinancialRepository = SqlFinancialRepository()
    elif backend == "local":
        repo = LocalFinancialRepository(local_path)
    elif backend == "auto":
        if _sql_tables_ready():
            repo = SqlFinancialRepository()
        else:
            app.logger.warning(
                "Financial tables missing; falling back to local store at %s", local_path
            )
            repo = LocalFinancialRepository(local_path)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

    app.logger.info("Financial repository: %s", repo.name)
    return repo


def get_repository() -> FinancialRepository:
    """Repository bound to the current app; selected once, on first use."""
    app = current_app._get_current_object()
    repo = app.extensions.get(EXTENSION_KEY)
    if repo is None:
        repo = select_repository(app)
        app.extensions[EXTENSION_KEY] = repo
    return repo
