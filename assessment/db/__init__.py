"""Database bootstrap utilities for the assessment service.

This module exposes convenience imports for engine construction and a
migrations runner that applies SQL files from the project's migrations/
directory. The DB layer does not leak ORM models into route handlers.
"""

from assessment.db.base import get_engine
from assessment.db.migrations_runner import apply_migrations

__all__ = [
    "get_engine",
    "apply_migrations",
]
