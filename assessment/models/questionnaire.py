"""Pydantic models for questionnaire definitions.

A definition is a frozen snapshot: once a response references a version it is
never edited, only toggled active/inactive or deleted.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    score: int | float = Field(allow_inf_nan=False)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str = ""
    options: List[Option]

    @field_validator("options")
    @classmethod
    def options_must_be_unique_and_non_empty(cls, v: List[Option]) -> List[Option]:
        if not v:
            raise ValueError("question.options must contain at least one option")
        ids = [opt.id for opt in v]
        if len(set(ids)) != len(ids):
            raise ValueError("question.options ids must be unique within a question")
        return v


class Section(BaseModel):
    """A themed group of questions sharing one scoring strategy.

    `section_type` is kept as a free string so that malformed stored data can
    still be loaded and reported on; the classifier rejects unknown values.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    section_type: Optional[str] = None
    weight: float = Field(default=0.0, allow_inf_nan=False)
    matrix_axis: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    comment: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)


class QuestionnaireDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    sections: List[Section] = Field(default_factory=list)
    is_active: bool = False
    created_at: Optional[datetime] = None

    def find_section(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


class QuestionnaireSummary(BaseModel):
    id: str
    name: str
    is_active: bool
    created_at: Optional[datetime] = None
    section_count: int = 0


__all__ = [
    "Option",
    "Question",
    "Section",
    "QuestionnaireDefinition",
    "QuestionnaireSummary",
]
