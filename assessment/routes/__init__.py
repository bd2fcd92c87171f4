"""APIRouter registration for the assessment service."""

from __future__ import annotations

from fastapi import APIRouter

from assessment.routes.questionnaires import router as questionnaires_router
from assessment.routes.reports import router as reports_router
from assessment.routes.responses import router as responses_router

api_router = APIRouter()
api_router.include_router(questionnaires_router, tags=["Questionnaires"])  # tags applied per-operation
api_router.include_router(responses_router, tags=["Responses"])  # tags applied per-operation
api_router.include_router(reports_router, tags=["Reports"])  # tags applied per-operation

__all__ = ["api_router"]
