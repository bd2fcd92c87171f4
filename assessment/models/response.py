"""Pydantic models for customer responses and their free-text annotations."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResponseRecord(BaseModel):
    """One customer's selected option per answered question.

    Customer name/email and the questionnaire version name are copied onto the
    record when it is created; they are never read back from the link or the
    definition.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    questionnaire_version_id: str
    answers: Dict[str, str] = Field(default_factory=dict)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    questionnaire_version_name: Optional[str] = None
    submitted_at: Optional[datetime] = None


class ResponseSubmission(BaseModel):
    questionnaire_version_id: str
    answers: Dict[str, str] = Field(default_factory=dict)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    response_id: Optional[str] = None


class ResponseAnnotations(BaseModel):
    """Administrator commentary kept apart from computed report values."""

    executive_summary: Optional[str] = None
    admin_comments: Dict[str, str] = Field(default_factory=dict)
    dynamic_comments: Dict[str, str] = Field(default_factory=dict)


class CommentKind:
    EXECUTIVE_SUMMARY = "executive_summary"
    ADMIN = "admin"
    DYNAMIC = "dynamic"

    ALL = (EXECUTIVE_SUMMARY, ADMIN, DYNAMIC)


class CommentUpdate(BaseModel):
    kind: str
    section_id: Optional[str] = None
    body: str = ""


__all__ = [
    "ResponseRecord",
    "ResponseSubmission",
    "ResponseAnnotations",
    "CommentKind",
    "CommentUpdate",
]
