"""Matrix-pair analyzer: two matrix sections become one plotted point."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Tuple

from assessment.logic.scoring import selected_option
from assessment.models.questionnaire import Section
from assessment.models.report import MatrixAnalysis, MatrixPoint
from assessment.models.section_type import MatrixAxis


logger = logging.getLogger(__name__)


def _axis(section: Section) -> str:
    return (section.matrix_axis or "").strip().lower()


def pair_matrix_sections(sections: Sequence[Section]) -> Optional[Tuple[Section, Section]]:
    """Pick the (X, Y) sections to plot.

    The first section tagged `x` and the first tagged `y` win. When only one
    axis is tagged, that section keeps its axis and the other axis takes the
    first untagged matrix section (else the first other one). With no usable
    tag, the first two matrix sections in definition order are used, X
    before Y.
    """
    x_section = next((s for s in sections if _axis(s) == MatrixAxis.X), None)
    y_section = next((s for s in sections if _axis(s) == MatrixAxis.Y), None)
    if x_section is not None and y_section is not None:
        return x_section, y_section
    anchor = x_section if x_section is not None else y_section
    if anchor is not None:
        others = [s for s in sections if s is not anchor]
        if not others:
            return None
        partner = next((s for s in others if _axis(s) not in MatrixAxis.ALL), others[0])
        return (anchor, partner) if anchor is x_section else (partner, anchor)
    if len(sections) < 2:
        return None
    return sections[0], sections[1]


def axis_coordinate(section: Section, answers: Mapping[str, str]) -> int | float | None:
    if not section.questions:
        return None
    if len(section.questions) > 1:
        logger.warning(
            "matrix_section_extra_questions section_id=%s questions=%s",
            section.id,
            len(section.questions),
        )
    option = selected_option(section.questions[0], answers)
    return option.score if option is not None else None


def analyze_matrix_pair(
    sections: Sequence[Section],
    answers: Mapping[str, str],
) -> Optional[MatrixAnalysis]:
    """Return the matrix placement, or None when it cannot be plotted.

    None covers fewer than two matrix sections and an unanswered axis
    question; a missing coordinate is never filled with zero.
    """
    pair = pair_matrix_sections(sections)
    if pair is None:
        return None
    x_section, y_section = pair
    x = axis_coordinate(x_section, answers)
    y = axis_coordinate(y_section, answers)
    if x is None or y is None:
        logger.info(
            "matrix_analysis_skipped x_section=%s y_section=%s x_answered=%s y_answered=%s",
            x_section.id,
            y_section.id,
            x is not None,
            y is not None,
        )
        return None
    return MatrixAnalysis(
        x_axis_label=x_section.name,
        y_axis_label=y_section.name,
        x_section_id=x_section.id,
        y_section_id=y_section.id,
        point=MatrixPoint(x=x, y=y),
    )


__all__ = ["pair_matrix_sections", "axis_coordinate", "analyze_matrix_pair"]
