"""Report assembly and composite ranking.

`build_report` is a deterministic pure function of a definition and a
response: it performs no I/O and mutates nothing outside its return value.
Structural failures (no definition) abort; per-section anomalies become
`SectionWarning` entries so one malformed section cannot blank out the rest
of the report.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from assessment.config import ScoringConfig
from assessment.logic.count_analysis import analyze_count_section
from assessment.logic.errors import MissingDefinitionError, UnknownSectionTypeError
from assessment.logic.matrix_analysis import analyze_matrix_pair
from assessment.logic.scoring import round_half_up, to_decimal, unknown_option_answers
from assessment.logic.section_classifier import classify_section
from assessment.logic.weighted_analysis import analyze_weighted_section
from assessment.models.questionnaire import QuestionnaireDefinition, Section
from assessment.models.report import CountAnalysis, Report, SectionWarning, WeightedScore
from assessment.models.response import ResponseRecord
from assessment.models.section_type import SectionType


logger = logging.getLogger(__name__)

UNKNOWN_OPTION = "UNKNOWN_OPTION"


def composite_ranking(section_scores: Iterable[WeightedScore], places: int = 2) -> float:
    """Sum of weighted average scores; matrix and count sections never count."""
    total = sum((to_decimal(s.weighted_average_score) for s in section_scores), Decimal(0))
    return float(round_half_up(total, places))


def _option_warnings(section: Section, answers) -> List[SectionWarning]:
    return [
        SectionWarning(
            section_id=section.id,
            code=UNKNOWN_OPTION,
            detail=f"question {question_id!r} answered with unknown option {option_id!r}",
        )
        for question_id, option_id in unknown_option_answers(section, answers)
    ]


def build_report(
    definition: Optional[QuestionnaireDefinition],
    response: ResponseRecord,
    *,
    settings: Optional[ScoringConfig] = None,
) -> Report:
    """Build the three report views and the composite ranking.

    Raises MissingDefinitionError when `definition` is None or is not the
    version the response was recorded against.
    """
    if definition is None:
        raise MissingDefinitionError(response.questionnaire_version_id)
    if definition.id != response.questionnaire_version_id:
        raise MissingDefinitionError(
            response.questionnaire_version_id,
            f"response {response.id!r} references questionnaire version "
            f"{response.questionnaire_version_id!r}, got {definition.id!r}",
        )

    settings = settings or ScoringConfig()
    answers = response.answers
    section_scores: List[WeightedScore] = []
    count_analyses: List[CountAnalysis] = []
    matrix_sections: List[Section] = []
    warnings: List[SectionWarning] = []

    for index, section in enumerate(definition.sections):
        try:
            section_type = classify_section(section, index, settings=settings)
        except UnknownSectionTypeError as exc:
            logger.warning(
                "report_section_excluded response_id=%s section_id=%s reason=%s",
                response.id,
                section.id,
                exc,
            )
            warnings.append(SectionWarning(section_id=section.id, code=exc.code, detail=str(exc)))
            continue

        warnings.extend(_option_warnings(section, answers))
        if section_type == SectionType.WEIGHTED:
            section_scores.append(analyze_weighted_section(section, answers, settings=settings))
        elif section_type == SectionType.MATRIX:
            matrix_sections.append(section)
        else:
            count_analyses.append(analyze_count_section(section, answers))

    report = Report(
        questionnaire_version_id=definition.id,
        response_id=response.id,
        section_scores=section_scores,
        matrix_analysis=analyze_matrix_pair(matrix_sections, answers),
        count_analyses=count_analyses,
        composite_ranking=composite_ranking(section_scores, settings.decimal_places),
        warnings=warnings,
    )
    logger.info(
        "report_built response_id=%s version_id=%s weighted=%s matrix=%s count=%s warnings=%s composite=%s",
        response.id,
        definition.id,
        len(section_scores),
        report.matrix_analysis is not None,
        len(count_analyses),
        len(warnings),
        report.composite_ranking,
    )
    return report


__all__ = ["build_report", "composite_ranking", "UNKNOWN_OPTION"]
