"""Weighted-section analyzer.

Averages the scores of answered questions only; unanswered questions are
skipped rather than counted as zero. Rounding happens once, when the output
model is built.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional

from assessment.config import ScoringConfig
from assessment.logic.scoring import (
    as_number,
    highest_option_score,
    iter_selected_options,
    max_possible_score,
    round_half_up,
    score_band,
    to_decimal,
)
from assessment.models.questionnaire import Section
from assessment.models.report import WeightedScore


def analyze_weighted_section(
    section: Section,
    answers: Mapping[str, str],
    *,
    settings: Optional[ScoringConfig] = None,
) -> WeightedScore:
    settings = settings or ScoringConfig()
    places = settings.decimal_places

    achieved = Decimal(0)
    answered = 0
    for _question, option in iter_selected_options(section, answers):
        achieved += to_decimal(option.score)
        answered += 1

    average = achieved / answered if answered else Decimal(0)
    rounded_average = round_half_up(average, places)
    weighted = round_half_up(average * to_decimal(section.weight), places)

    return WeightedScore(
        section_id=section.id,
        section_name=section.name,
        weight=section.weight,
        achieved_score=as_number(achieved),
        average_score=float(rounded_average),
        weighted_average_score=float(weighted),
        max_possible_score=as_number(max_possible_score(section)),
        question_count=len(section.questions),
        answered_count=answered,
        highest_option_score=highest_option_score(section),
        score_band=score_band(rounded_average),
    )


__all__ = ["analyze_weighted_section"]
