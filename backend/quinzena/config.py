# backend/quinzena/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the process by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///quinzena.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Financial data backend: "sql", "local" (JSON file) or "auto"
    # "auto" uses SQL when its tables exist, otherwise the local JSON store
    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "auto")
    LOCAL_STORE_PATH = os.environ.get("LOCAL_STORE_PATH", "quinzena_store.json")

    # Span of the generated fortnight catalog (inclusive)
    PERIOD_START_YEAR = int(os.environ.get("PERIOD_START_YEAR", "2025"))
    PERIOD_END_YEAR = int(os.environ.get("PERIOD_END_YEAR", "2026"))

    # Narrative report (Gemini)
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_BASE_URL = os.environ.get(
        "GEMINI_BASE_URL",
        "https://generativelanguage.googleapis.com/v1beta",
    )
    GEMINI_TIMEOUT = float(os.environ.get("GEMINI_TIMEOUT", "30"))

    # Bootstrap account created by "flask system init"
    DEFAULT_ADMIN_USERNAME = os.environ.get("DEFAULT_ADMIN_USERNAME", "ADM")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "123456")
