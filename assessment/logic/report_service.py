"""Load report inputs from storage and hand them to the scoring engine.

This is the only place where the engine's inputs are fetched; every consumer
(on-screen JSON, section detail, CSV export) goes through
`build_report_for_response` so they all see the same Report value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from assessment.config import ScoringConfig
from assessment.logic.errors import ResponseNotFoundError
from assessment.logic.report_builder import build_report
from assessment.logic.repository_questionnaires import get_definition
from assessment.logic.repository_responses import get_annotations, get_response
from assessment.models.questionnaire import QuestionnaireDefinition
from assessment.models.report import Report
from assessment.models.response import ResponseAnnotations, ResponseRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportBundle:
    report: Report
    response: ResponseRecord
    definition: QuestionnaireDefinition
    annotations: ResponseAnnotations


def build_report_for_response(response_id: str, *, settings: Optional[ScoringConfig] = None) -> ReportBundle:
    """Fetch a response and its definition, then build the report.

    Raises ResponseNotFoundError for an unknown response and
    MissingDefinitionError (from the engine) when its questionnaire version
    has been deleted.
    """
    logger.info("report_build_start response_id=%s", response_id)
    record = get_response(response_id)
    if record is None:
        raise ResponseNotFoundError(response_id)
    definition = get_definition(record.questionnaire_version_id)
    report = build_report(definition, record, settings=settings)
    return ReportBundle(
        report=report,
        response=record,
        definition=definition,
        annotations=get_annotations(response_id),
    )


__all__ = ["ReportBundle", "build_report_for_response"]
