"""Configuration utilities for the assessment service.

This module loads application configuration with the following rules:
- Primary source: `assessment_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("assessment_config.json")
DEFAULT_DSN = "sqlite+pysqlite:///:memory:"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(text: object) -> bool:
    return str(text).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class ScoringConfig(BaseModel):
    """Numeric policy for the scoring engine.

    The legacy positional fallback types an untyped section by its index:
    the first `legacy_weighted_sections` are weighted, the next
    `legacy_matrix_sections` are matrix, the rest are count.
    """

    decimal_places: int = Field(default=2, ge=0, le=6)
    legacy_positional_types: bool = False
    legacy_weighted_sections: int = Field(default=7, ge=0)
    legacy_matrix_sections: int = Field(default=2, ge=0)


class ExportConfig(BaseModel):
    include_header: bool = Field(default=True)


class AppConfig(BaseModel):
    database: DatabaseConfig
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) assessment_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or DEFAULT_DSN
    )

    places_text = _env("SCORING_DECIMAL_PLACES") or _read_config_file("scoring.decimal_places") or _base("scoring.decimal_places", "2")
    legacy_text = _env("SCORING_LEGACY_POSITIONAL_TYPES") or _read_config_file("scoring.legacy_positional_types") or _base("scoring.legacy_positional_types", "false")
    legacy_weighted_text = _env("SCORING_LEGACY_WEIGHTED_SECTIONS") or _base("scoring.legacy_weighted_sections", "7")
    legacy_matrix_text = _env("SCORING_LEGACY_MATRIX_SECTIONS") or _base("scoring.legacy_matrix_sections", "2")

    include_header_text = _env("EXPORT_INCLUDE_HEADER") or _read_config_file("export.include_header") or _base("export.include_header", "true")

    try:
        cfg = AppConfig(
            database=DatabaseConfig(dsn=dsn),
            scoring=ScoringConfig(
                decimal_places=int(str(places_text).strip()),
                legacy_positional_types=_truthy(legacy_text),
                legacy_weighted_sections=int(str(legacy_weighted_text).strip()),
                legacy_matrix_sections=int(str(legacy_matrix_text).strip()),
            ),
            export=ExportConfig(include_header=_truthy(include_header_text)),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ScoringConfig",
    "ExportConfig",
    "load_config",
]
