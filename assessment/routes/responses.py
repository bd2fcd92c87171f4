"""Customer response submission, listing and annotation endpoints."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from assessment.logic.errors import InvalidAnswerError, QuestionnaireNotFoundError, ResponseNotFoundError
from assessment.logic.problem_factory import error_response, problem, problem_response
from assessment.logic.repository_questionnaires import get_definition
from assessment.logic.repository_responses import (
    get_annotations,
    get_response,
    list_responses,
    response_exists,
    save_annotation,
    save_response,
)
from assessment.logic.scoring import find_option
from assessment.models.questionnaire import QuestionnaireDefinition
from assessment.models.response import CommentKind, CommentUpdate, ResponseRecord, ResponseSubmission


router = APIRouter()
logger = logging.getLogger(__name__)


def _answer_errors(definition: QuestionnaireDefinition, answers: dict) -> List[str]:
    questions = {q.id: q for s in definition.sections for q in s.questions}
    errors: List[str] = []
    for question_id, option_id in sorted(answers.items()):
        question = questions.get(question_id)
        if question is None:
            errors.append(f"unknown question {question_id!r}")
        elif find_option(question, option_id) is None:
            errors.append(f"question {question_id!r} has no option {option_id!r}")
    return errors


@router.post(
    "/responses",
    summary="Submit a completed assessment",
    operation_id="submitResponse",
    tags=["Responses"],
)
def submit_response(payload: ResponseSubmission):
    definition = get_definition(payload.questionnaire_version_id)
    if definition is None:
        return error_response(QuestionnaireNotFoundError(payload.questionnaire_version_id))
    errors = _answer_errors(definition, payload.answers)
    if errors:
        return error_response(InvalidAnswerError(errors))

    record = ResponseRecord(
        id=payload.response_id or str(uuid.uuid4()),
        questionnaire_version_id=definition.id,
        answers=payload.answers,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        questionnaire_version_name=definition.name,
        submitted_at=datetime.now(timezone.utc).replace(microsecond=0),
    )
    if response_exists(record.id):
        return problem_response(problem("RESPONSE_ALREADY_SUBMITTED", f"response {record.id!r} was already submitted"))
    saved = save_response(record)
    return JSONResponse(saved.model_dump(mode="json"), status_code=201)


@router.get(
    "/responses",
    summary="List submitted responses",
    operation_id="listResponses",
    tags=["Responses"],
)
def get_responses(questionnaire_version_id: str | None = None):
    return {"items": [r.model_dump(mode="json") for r in list_responses(questionnaire_version_id)]}


@router.get(
    "/responses/{response_id}",
    summary="Get a submitted response with its annotations",
    operation_id="getResponse",
    tags=["Responses"],
)
def get_response_detail(response_id: str):
    record = get_response(response_id)
    if record is None:
        return error_response(ResponseNotFoundError(response_id))
    return {
        "response": record.model_dump(mode="json"),
        "annotations": get_annotations(response_id).model_dump(),
    }


@router.put(
    "/responses/{response_id}/comments",
    summary="Set the executive summary or a per-section comment",
    operation_id="putResponseComment",
    tags=["Responses"],
)
def put_response_comment(response_id: str, payload: CommentUpdate):
    if not response_exists(response_id):
        return error_response(ResponseNotFoundError(response_id))
    if payload.kind not in CommentKind.ALL:
        return problem_response(problem("COMMENT_INVALID", f"kind must be one of {list(CommentKind.ALL)}"))
    if payload.kind != CommentKind.EXECUTIVE_SUMMARY and not payload.section_id:
        return problem_response(problem("COMMENT_INVALID", "section_id is required for section comments"))
    save_annotation(response_id, payload.kind, payload.section_id, payload.body)
    return get_annotations(response_id).model_dump()


__all__ = ["router"]
