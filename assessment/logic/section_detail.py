"""Per-section drill-down view built on top of an existing Report."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from assessment.config import ScoringConfig
from assessment.logic.errors import SectionNotFoundError, UnknownSectionTypeError
from assessment.logic.report_service import ReportBundle
from assessment.logic.scoring import highest_option_score, score_band, selected_option
from assessment.logic.section_classifier import classify_section


def build_section_detail(bundle: ReportBundle, section_id: str, *, settings: Optional[ScoringConfig] = None) -> Dict[str, Any]:
    """Return question-level rows plus the section's slice of the report.

    Section scores are read from the bundle's Report; only option lookups are
    repeated here. The dynamic comment falls back to the section's default
    comment from the definition.
    """
    definition = bundle.definition
    found = [(i, s) for i, s in enumerate(definition.sections) if s.id == section_id]
    if not found:
        raise SectionNotFoundError(section_id)
    index, section = found[0]
    try:
        section_type: Optional[str] = classify_section(section, index, settings=settings)
    except UnknownSectionTypeError:
        section_type = None

    answers = bundle.response.answers
    questions: List[Dict[str, Any]] = []
    for question in section.questions:
        option = selected_option(question, answers)
        questions.append(
            {
                "question_id": question.id,
                "prompt": question.prompt,
                "selected_option_id": option.id if option else None,
                "selected_option_text": option.text if option else None,
                "score": option.score if option else None,
                "score_band": score_band(option.score) if option else None,
            }
        )

    report = bundle.report
    score = report.find_section_score(section.id)
    count = report.find_count_analysis(section.id)
    annotations = bundle.annotations
    return {
        "section": {
            "id": section.id,
            "name": section.name,
            "section_type": section_type,
            "description": section.description,
            "instructions": section.instructions,
        },
        "highest_option_score": highest_option_score(section),
        "questions": questions,
        "section_score": score.model_dump() if score else None,
        "count_analysis": count.model_dump(mode="json") if count else None,
        "warnings": [w.model_dump() for w in report.warnings if w.section_id == section.id],
        "comments": {
            "admin": annotations.admin_comments.get(section.id),
            "dynamic": annotations.dynamic_comments.get(section.id, section.comment),
        },
    }


__all__ = ["build_section_detail"]
