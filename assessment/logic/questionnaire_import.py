"""Questionnaire upload normalisation and validation.

Turns an uploaded JSON document into a `QuestionnaireDefinition`:
- ids come from `tempId` when given, else from a slug of the title/text,
  else from a positional fallback; options default to `a`, `b`, `c`, ...
- `title`/`name`, `text`/`question`/`prompt`, `points`/`score` and
  `type`/`sectionType`/`section_type` are accepted interchangeably.
- New versions are stored inactive.

Validation requires an explicit section type on every section unless the
legacy positional fallback is enabled.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from assessment.config import ScoringConfig
from assessment.logic.errors import DefinitionValidationError
from assessment.models.questionnaire import QuestionnaireDefinition
from assessment.models.section_type import MatrixAxis, SectionType


logger = logging.getLogger(__name__)


def generate_slug(text: object) -> str:
    text = str(text or "").lower()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^\w-]+", "", text)
    text = re.sub(r"--+", "-", text)
    return text.strip("-")


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _unique(candidate: str, seen: set[str]) -> str:
    value = candidate
    n = 2
    while value in seen:
        value = f"{candidate}-{n}"
        n += 1
    seen.add(value)
    return value


def _option_id(index: int) -> str:
    # a..z, then aa, ab, ...
    letters = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(97 + rem) + letters
    return letters


def normalize_upload(payload: Dict[str, Any], version_name: Optional[str] = None) -> Dict[str, Any]:
    """Return a definition body with ids assigned and field aliases resolved."""
    if not isinstance(payload, dict):
        raise DefinitionValidationError(["upload must be a JSON object"])
    sections_in = payload.get("sections")
    if not isinstance(sections_in, list):
        raise DefinitionValidationError(["'sections' array is missing or not an array"])

    raw_name = version_name or _first(payload, "versionName", "version_name", "name")
    if raw_name is not None and not isinstance(raw_name, str):
        raise DefinitionValidationError(["version name must be a string"])
    name = (raw_name or "").strip()
    if not name:
        raise DefinitionValidationError(["a version name is required"])
    version_id = str(_first(payload, "id", "versionId") or generate_slug(name) or f"v-{int(time.time() * 1000)}")

    section_ids: set[str] = set()
    question_ids: set[str] = set()
    sections: List[Dict[str, Any]] = []
    for s_idx, section in enumerate(sections_in):
        if not isinstance(section, dict):
            raise DefinitionValidationError([f"sections[{s_idx}] must be an object"])
        title = _first(section, "name", "title") or ""
        sid = _unique(
            str(section.get("tempId") or section.get("id") or generate_slug(title) or f"section-{s_idx + 1}-{uuid.uuid4().hex[:4]}"),
            section_ids,
        )
        questions: List[Dict[str, Any]] = []
        for q_idx, question in enumerate(section.get("questions") or []):
            if not isinstance(question, dict):
                raise DefinitionValidationError([f"sections[{s_idx}].questions[{q_idx}] must be an object"])
            prompt = _first(question, "prompt", "text", "question") or ""
            qid = _unique(
                str(question.get("tempId") or question.get("id") or generate_slug(str(prompt)[:20]) or f"q-{s_idx + 1}-{q_idx + 1}-{uuid.uuid4().hex[:4]}"),
                question_ids,
            )
            options = []
            for o_idx, option in enumerate(question.get("options") or []):
                if not isinstance(option, dict):
                    raise DefinitionValidationError([f"question {qid!r} options[{o_idx}] must be an object"])
                options.append(
                    {
                        "id": str(option.get("tempId") or option.get("id") or _option_id(o_idx)),
                        "text": option.get("text") or "",
                        "score": _first(option, "score", "points"),
                    }
                )
            questions.append({"id": qid, "prompt": prompt, "options": options})
        axis = _first(section, "matrix_axis", "matrixAxis", "axis")
        sections.append(
            {
                "id": sid,
                "name": title,
                "section_type": _first(section, "section_type", "sectionType", "type"),
                "weight": section.get("weight") if section.get("weight") is not None else 0,
                "matrix_axis": str(axis).lower() if axis is not None else None,
                "description": section.get("description"),
                "instructions": section.get("instructions"),
                "comment": section.get("comment"),
                "questions": questions,
            }
        )

    return {"id": version_id, "name": name, "sections": sections, "is_active": False}


def validate_definition(definition: QuestionnaireDefinition, settings: Optional[ScoringConfig] = None) -> None:
    """Raise DefinitionValidationError listing every structural problem."""
    settings = settings or ScoringConfig()
    errors: List[str] = []
    if not definition.sections:
        errors.append("questionnaire must contain at least one section")

    seen_sections: set[str] = set()
    seen_questions: set[str] = set()
    for section in definition.sections:
        if section.id in seen_sections:
            errors.append(f"duplicate section id {section.id!r}")
        seen_sections.add(section.id)

        declared = (section.section_type or "").strip().lower()
        if not declared:
            if not settings.legacy_positional_types:
                errors.append(f"section {section.id!r} must declare a type ({', '.join(SectionType.ALL)})")
        elif declared not in SectionType.ALL:
            errors.append(f"section {section.id!r} has unknown type {section.section_type!r}")

        if declared == SectionType.MATRIX and len(section.questions) != 1:
            errors.append(f"matrix section {section.id!r} must have exactly one question")
        if section.matrix_axis is not None and section.matrix_axis not in MatrixAxis.ALL:
            errors.append(f"section {section.id!r} has invalid matrix axis {section.matrix_axis!r}")

        for question in section.questions:
            if question.id in seen_questions:
                errors.append(f"duplicate question id {question.id!r}")
            seen_questions.add(question.id)

    if errors:
        raise DefinitionValidationError(errors)


def definition_from_upload(
    payload: Dict[str, Any],
    version_name: Optional[str] = None,
    *,
    settings: Optional[ScoringConfig] = None,
) -> QuestionnaireDefinition:
    body = normalize_upload(payload, version_name)
    try:
        definition = QuestionnaireDefinition.model_validate(body)
    except PydanticValidationError as exc:
        messages = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        ]
        logger.info("questionnaire_upload_rejected version_id=%s errors=%s", body.get("id"), len(messages))
        raise DefinitionValidationError(messages) from exc
    validate_definition(definition, settings)
    return definition


__all__ = [
    "generate_slug",
    "normalize_upload",
    "validate_definition",
    "definition_from_upload",
]
