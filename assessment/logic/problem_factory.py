"""Centralised construction of problem+json payloads for domain errors.

Single source of truth for mapping domain error codes to HTTP statuses and
titles, so route modules never embed status numbers for domain failures.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi.responses import JSONResponse

from assessment.http.problem import PROBLEM_MEDIA_TYPE
from assessment.logic.errors import AssessmentError


logger = logging.getLogger(__name__)

ERROR_MAP: Dict[str, Dict[str, object]] = {
    "REPORT_DEFINITION_MISSING": {"status": 422, "title": "Report cannot be computed"},
    "QUESTIONNAIRE_DEFINITION_INVALID": {"status": 422, "title": "Invalid questionnaire definition"},
    "QUESTIONNAIRE_VERSION_EXISTS": {"status": 409, "title": "Conflict"},
    "QUESTIONNAIRE_NOT_FOUND": {"status": 404, "title": "Questionnaire not found"},
    "RESPONSE_NOT_FOUND": {"status": 404, "title": "Response not found"},
    "SECTION_NOT_FOUND": {"status": 404, "title": "Section not found"},
    "RESPONSE_ANSWER_INVALID": {"status": 422, "title": "Invalid answers"},
    "RESPONSE_ALREADY_SUBMITTED": {"status": 409, "title": "Conflict"},
    "COMMENT_INVALID": {"status": 422, "title": "Invalid comment"},
}


def problem(code: str, detail: str, *, errors: Optional[list] = None) -> Dict[str, object]:
    mapping = ERROR_MAP.get(code, {"status": 500, "title": "Error"})
    body: Dict[str, object] = {
        "title": mapping["title"],
        "status": mapping["status"],
        "detail": detail,
        "code": code,
    }
    if errors:
        body["errors"] = list(errors)
    logger.info("error_handler.handle code=%s status=%s", code, mapping["status"])
    return body


def problem_from_error(exc: AssessmentError) -> Dict[str, object]:
    return problem(exc.code, str(exc), errors=getattr(exc, "errors", None))


def problem_response(body: Dict[str, object]) -> JSONResponse:
    return JSONResponse(body, status_code=int(body.get("status", 500)), media_type=PROBLEM_MEDIA_TYPE)


def error_response(exc: AssessmentError) -> JSONResponse:
    return problem_response(problem_from_error(exc))


__all__ = ["ERROR_MAP", "problem", "problem_from_error", "problem_response", "error_response"]
