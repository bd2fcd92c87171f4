"""Option/score lookup primitives and numeric formatting rules.

All arithmetic is carried out on `Decimal` built from the string form of each
score so that half-up rounding behaves the way a person reading the report
expects (2.675 rounds to 2.68, not 2.67).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Mapping, Tuple

from assessment.models.questionnaire import Option, Question, Section


DEFAULT_HIGHEST_OPTION_SCORE = 4

# (upper bound inclusive, band); anything above the last bound is green
SCORE_BANDS: Tuple[Tuple[Decimal, str], ...] = (
    (Decimal("1.5"), "red"),
    (Decimal("2.5"), "orange"),
    (Decimal("3.5"), "yellow"),
)
TOP_SCORE_BAND = "green"


def to_decimal(value: int | float | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: int | float | Decimal, places: int = 2) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def as_number(value: Decimal) -> int | float:
    """Return an int for integral values, a float otherwise."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def find_option(question: Question, option_id: str | None) -> Option | None:
    if option_id is None:
        return None
    for option in question.options:
        if option.id == option_id:
            return option
    return None


def selected_option(question: Question, answers: Mapping[str, str]) -> Option | None:
    """Return the option selected for `question`, or None when unanswered.

    An answer pointing at an option id the question does not carry counts as
    unanswered; `unknown_option_answers` reports those separately.
    """
    return find_option(question, answers.get(question.id))


def iter_selected_options(section: Section, answers: Mapping[str, str]) -> Iterable[Tuple[Question, Option]]:
    for question in section.questions:
        option = selected_option(question, answers)
        if option is not None:
            yield question, option


def unknown_option_answers(section: Section, answers: Mapping[str, str]) -> List[Tuple[str, str]]:
    """Return (question_id, option_id) pairs whose option is not defined."""
    unknown: List[Tuple[str, str]] = []
    for question in section.questions:
        option_id = answers.get(question.id)
        if option_id is not None and find_option(question, option_id) is None:
            unknown.append((question.id, option_id))
    return unknown


def highest_score(options: Iterable[Option]) -> int | float:
    return max([opt.score for opt in options] + [0])


def highest_option_score(section: Section) -> int | float:
    """Highest score offered by the section's first question (bar-chart scale)."""
    if not section.questions or not section.questions[0].options:
        return DEFAULT_HIGHEST_OPTION_SCORE
    return highest_score(section.questions[0].options)


def max_possible_score(section: Section) -> Decimal:
    return sum((to_decimal(highest_score(q.options)) for q in section.questions), Decimal(0))


def score_band(score: int | float | Decimal) -> str:
    value = to_decimal(score)
    for upper, band in SCORE_BANDS:
        if value <= upper:
            return band
    return TOP_SCORE_BAND


__all__ = [
    "DEFAULT_HIGHEST_OPTION_SCORE",
    "to_decimal",
    "round_half_up",
    "as_number",
    "find_option",
    "selected_option",
    "iter_selected_options",
    "unknown_option_answers",
    "highest_score",
    "highest_option_score",
    "max_possible_score",
    "score_band",
]
