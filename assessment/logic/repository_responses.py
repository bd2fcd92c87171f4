"""Customer response and annotation data access helpers."""

from __future__ import annotations

import json
import logging
from typing import List

from sqlalchemy import text as sql_text

from assessment.db.base import get_engine
from assessment.logic.repository_questionnaires import utc_timestamp
from assessment.models.response import CommentKind, ResponseAnnotations, ResponseRecord


logger = logging.getLogger(__name__)

# annotation_key used for the single executive summary row of a response
EXECUTIVE_SUMMARY_KEY = "_"

_SELECT_RESPONSE = """
    SELECT response_id, questionnaire_version_id, questionnaire_version_name,
           customer_name, customer_email, submitted_at, answers_json
    FROM customer_response
"""


def _from_row(row) -> ResponseRecord:
    return ResponseRecord(
        id=row["response_id"],
        questionnaire_version_id=row["questionnaire_version_id"],
        questionnaire_version_name=row["questionnaire_version_name"],
        customer_name=row["customer_name"],
        customer_email=row["customer_email"],
        submitted_at=row["submitted_at"],
        answers=json.loads(row["answers_json"] or "{}"),
    )


def save_response(record: ResponseRecord) -> ResponseRecord:
    submitted_at = record.submitted_at.isoformat() if record.submitted_at else utc_timestamp()
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text(
                """
                INSERT INTO customer_response (
                    response_id, questionnaire_version_id, questionnaire_version_name,
                    customer_name, customer_email, submitted_at, answers_json
                ) VALUES (:id, :vid, :vname, :cname, :cemail, :submitted_at, :answers)
                """
            ),
            {
                "id": record.id,
                "vid": record.questionnaire_version_id,
                "vname": record.questionnaire_version_name,
                "cname": record.customer_name,
                "cemail": record.customer_email,
                "submitted_at": submitted_at,
                "answers": json.dumps(record.answers, sort_keys=True),
            },
        )
    logger.info(
        "response_saved response_id=%s version_id=%s answers=%s",
        record.id,
        record.questionnaire_version_id,
        len(record.answers),
    )
    return ResponseRecord.model_validate({**record.model_dump(), "submitted_at": submitted_at})


def response_exists(response_id: str) -> bool:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT 1 FROM customer_response WHERE response_id = :id"),
            {"id": response_id},
        ).fetchone()
    return row is not None


def get_response(response_id: str) -> ResponseRecord | None:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text(_SELECT_RESPONSE + " WHERE response_id = :id"),
            {"id": response_id},
        ).mappings().fetchone()
    if not row:
        return None
    return _from_row(row)


def list_responses(questionnaire_version_id: str | None = None) -> List[ResponseRecord]:
    """Return responses, most recently submitted first."""
    query = _SELECT_RESPONSE
    params: dict = {}
    if questionnaire_version_id:
        query += " WHERE questionnaire_version_id = :vid"
        params["vid"] = questionnaire_version_id
    query += " ORDER BY submitted_at DESC, response_id ASC"
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(sql_text(query), params).mappings().all()
    return [_from_row(r) for r in rows]


def get_annotations(response_id: str) -> ResponseAnnotations:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT kind, annotation_key, body FROM response_annotation
                WHERE response_id = :id
                ORDER BY kind ASC, annotation_key ASC
                """
            ),
            {"id": response_id},
        ).mappings().all()
    executive_summary = None
    admin: dict[str, str] = {}
    dynamic: dict[str, str] = {}
    for r in rows:
        if r["kind"] == CommentKind.EXECUTIVE_SUMMARY:
            executive_summary = r["body"]
        elif r["kind"] == CommentKind.ADMIN:
            admin[r["annotation_key"]] = r["body"]
        elif r["kind"] == CommentKind.DYNAMIC:
            dynamic[r["annotation_key"]] = r["body"]
    return ResponseAnnotations(
        executive_summary=executive_summary,
        admin_comments=admin,
        dynamic_comments=dynamic,
    )


def save_annotation(response_id: str, kind: str, section_id: str | None, body: str) -> None:
    """Insert or replace one comment for a response."""
    key = EXECUTIVE_SUMMARY_KEY if kind == CommentKind.EXECUTIVE_SUMMARY else str(section_id)
    params = {"id": response_id, "kind": kind, "key": key}
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text(
                "DELETE FROM response_annotation WHERE response_id = :id AND kind = :kind AND annotation_key = :key"
            ),
            params,
        )
        conn.execute(
            sql_text(
                """
                INSERT INTO response_annotation (response_id, kind, annotation_key, body, updated_at)
                VALUES (:id, :kind, :key, :body, :updated_at)
                """
            ),
            {**params, "body": body, "updated_at": utc_timestamp()},
        )
    logger.info("annotation_saved response_id=%s kind=%s key=%s", response_id, kind, key)


__all__ = [
    "save_response",
    "response_exists",
    "get_response",
    "list_responses",
    "get_annotations",
    "save_annotation",
]
