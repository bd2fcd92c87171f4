"""Questionnaire version data access helpers.

Definitions are written once and never rewritten; only the `is_active` flag
changes after creation.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import text as sql_text

from assessment.db.base import get_engine
from assessment.logic.errors import DefinitionConflictError
from assessment.models.questionnaire import QuestionnaireDefinition, QuestionnaireSummary


logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _from_row(row) -> QuestionnaireDefinition:
    body = json.loads(row["definition_json"])
    body.update(
        {
            "id": row["version_id"],
            "name": row["name"],
            "is_active": bool(row["is_active"]),
            "created_at": row["created_at"],
        }
    )
    return QuestionnaireDefinition.model_validate(body)


def save_definition(definition: QuestionnaireDefinition) -> QuestionnaireDefinition:
    """Persist a new questionnaire version; existing ids are never overwritten."""
    created_at = definition.created_at.isoformat() if definition.created_at else utc_timestamp()
    payload = definition.model_dump_json(include={"sections"})
    eng = get_engine()
    with eng.begin() as conn:
        exists = conn.execute(
            sql_text("SELECT 1 FROM questionnaire_version WHERE version_id = :id"),
            {"id": definition.id},
        ).fetchone()
        if exists:
            raise DefinitionConflictError(definition.id)
        conn.execute(
            sql_text(
                """
                INSERT INTO questionnaire_version (version_id, name, is_active, created_at, definition_json)
                VALUES (:id, :name, :active, :created_at, :body)
                """
            ),
            {
                "id": definition.id,
                "name": definition.name,
                "active": bool(definition.is_active),
                "created_at": created_at,
                "body": payload,
            },
        )
    logger.info("questionnaire_saved version_id=%s sections=%s", definition.id, len(definition.sections))
    return QuestionnaireDefinition.model_validate({**definition.model_dump(), "created_at": created_at})


def get_definition(version_id: str) -> QuestionnaireDefinition | None:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(
                """
                SELECT version_id, name, is_active, created_at, definition_json
                FROM questionnaire_version WHERE version_id = :id
                """
            ),
            {"id": version_id},
        ).mappings().fetchone()
    if not row:
        return None
    return _from_row(row)


def list_definitions() -> List[QuestionnaireSummary]:
    """Return version summaries, newest first (tie-breaker by id)."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT version_id, name, is_active, created_at, definition_json
                FROM questionnaire_version
                ORDER BY created_at DESC, version_id ASC
                """
            )
        ).mappings().all()
    result: List[QuestionnaireSummary] = []
    for r in rows:
        sections = json.loads(r["definition_json"]).get("sections") or []
        result.append(
            QuestionnaireSummary(
                id=r["version_id"],
                name=r["name"],
                is_active=bool(r["is_active"]),
                created_at=r["created_at"],
                section_count=len(sections),
            )
        )
    return result


def set_active(version_id: str, is_active: bool) -> bool:
    eng = get_engine()
    with eng.begin() as conn:
        res = conn.execute(
            sql_text("UPDATE questionnaire_version SET is_active = :active WHERE version_id = :id"),
            {"id": version_id, "active": bool(is_active)},
        )
    logger.info("questionnaire_active_set version_id=%s is_active=%s rows=%s", version_id, is_active, res.rowcount)
    return res.rowcount > 0


def delete_definition(version_id: str) -> bool:
    """Delete a version; responses referencing it are left orphaned."""
    eng = get_engine()
    with eng.begin() as conn:
        res = conn.execute(
            sql_text("DELETE FROM questionnaire_version WHERE version_id = :id"),
            {"id": version_id},
        )
    logger.info("questionnaire_deleted version_id=%s rows=%s", version_id, res.rowcount)
    return res.rowcount > 0


__all__ = [
    "utc_timestamp",
    "save_definition",
    "get_definition",
    "list_definitions",
    "set_active",
    "delete_definition",
]
