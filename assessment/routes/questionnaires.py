"""Questionnaire version upload, listing and lifecycle endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from assessment.config import AppConfig, load_config
from assessment.logic.errors import (
    DefinitionConflictError,
    DefinitionValidationError,
    QuestionnaireNotFoundError,
)
from assessment.logic.problem_factory import error_response
from assessment.logic.questionnaire_import import definition_from_upload
from assessment.logic.repository_questionnaires import (
    delete_definition,
    get_definition,
    list_definitions,
    save_definition,
    set_active,
)


router = APIRouter()
logger = logging.getLogger(__name__)


def _store_upload(payload: Dict[str, Any], version_name: str | None, cfg: AppConfig):
    try:
        definition = definition_from_upload(payload, version_name, settings=cfg.scoring)
        saved = save_definition(definition)
    except (DefinitionValidationError, DefinitionConflictError) as exc:
        logger.info("questionnaire_upload_failed code=%s detail=%s", exc.code, exc)
        return error_response(exc)
    return JSONResponse(saved.model_dump(mode="json"), status_code=201)


@router.post(
    "/questionnaires",
    summary="Upload a questionnaire version (JSON body)",
    operation_id="uploadQuestionnaire",
    tags=["Questionnaires"],
)
def upload_questionnaire(payload: Dict[str, Any] = Body(...), cfg: AppConfig = Depends(load_config)):
    logger.info("questionnaire_upload_request source=json sections=%s", len(payload.get("sections") or []))
    return _store_upload(payload, None, cfg)


@router.post(
    "/questionnaires/upload",
    summary="Upload a questionnaire version (multipart JSON file)",
    operation_id="uploadQuestionnaireFile",
    tags=["Questionnaires"],
)
async def upload_questionnaire_file(
    file: UploadFile = File(...),
    version_name: str | None = Form(None),
    cfg: AppConfig = Depends(load_config),
):
    data = await file.read()
    logger.info(
        "questionnaire_upload_request source=multipart filename=%s size_bytes=%s",
        file.filename,
        len(data),
    )
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return error_response(DefinitionValidationError([f"file is not valid JSON: {exc}"]))
    return _store_upload(payload, version_name, cfg)


@router.get(
    "/questionnaires",
    summary="List questionnaire versions",
    operation_id="listQuestionnaires",
    tags=["Questionnaires"],
)
def get_questionnaires():
    return {"items": [s.model_dump(mode="json") for s in list_definitions()]}


@router.get(
    "/questionnaires/{version_id}",
    summary="Get a questionnaire version with its sections",
    operation_id="getQuestionnaire",
    tags=["Questionnaires"],
)
def get_questionnaire(version_id: str):
    definition = get_definition(version_id)
    if definition is None:
        return error_response(QuestionnaireNotFoundError(version_id))
    return definition.model_dump(mode="json")


@router.post(
    "/questionnaires/{version_id}/toggle-active",
    summary="Flip the active flag of a questionnaire version",
    operation_id="toggleQuestionnaireActive",
    tags=["Questionnaires"],
)
def toggle_questionnaire_active(version_id: str):
    definition = get_definition(version_id)
    if definition is None:
        return error_response(QuestionnaireNotFoundError(version_id))
    new_state = not definition.is_active
    set_active(version_id, new_state)
    return {"id": version_id, "is_active": new_state}


@router.delete(
    "/questionnaires/{version_id}",
    summary="Delete a questionnaire version",
    operation_id="deleteQuestionnaire",
    tags=["Questionnaires"],
)
def remove_questionnaire(version_id: str):
    if not delete_definition(version_id):
        return error_response(QuestionnaireNotFoundError(version_id))
    return Response(status_code=204)


__all__ = ["router"]
