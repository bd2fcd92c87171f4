from __future__ import annotations

"""Functional test bootstrap.

Point the app at a file-backed SQLite database shared across the process and
apply migrations once at session start, before any test creates the FastAPI
app via TestClient. Every test starts from empty tables.
"""

import os
import pathlib
import pytest

_ROOT = pathlib.Path(__file__).resolve().parents[2]
_DB_FILE = _ROOT / "tmp" / "functional_tests.db"
_DB_FILE.parent.mkdir(parents=True, exist_ok=True)
if _DB_FILE.exists():
    _DB_FILE.unlink()

os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL"] = os.environ["TEST_DATABASE_URL"]
# Migrations are applied explicitly below
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"

_TABLES = ("response_annotation", "customer_response", "questionnaire_version")


@pytest.fixture(scope="session", autouse=True)
def functional_sqlite_bootstrap():
    """Session-level bootstrap: apply migrations once for the shared DB."""
    from assessment.db.base import get_engine
    from assessment.db.migrations_runner import apply_migrations

    apply_migrations(get_engine(os.environ["TEST_DATABASE_URL"]), migrations_dir=str(_ROOT / "migrations"))
    yield


@pytest.fixture(autouse=True)
def clean_tables(functional_sqlite_bootstrap):
    from sqlalchemy import text as sql_text
    from assessment.db.base import get_engine

    with get_engine(os.environ["TEST_DATABASE_URL"]).begin() as conn:
        for table in _TABLES:
            conn.execute(sql_text(f"DELETE FROM {table}"))
    yield


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from assessment.main import create_app

    with TestClient(create_app()) as c:
        yield c
