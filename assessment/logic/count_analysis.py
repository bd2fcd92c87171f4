"""Count/frequency analyzer for `count` sections."""

from __future__ import annotations

from collections import Counter
from typing import Mapping

from assessment.logic.scoring import iter_selected_options
from assessment.models.questionnaire import Section
from assessment.models.report import CountAnalysis


def analyze_count_section(section: Section, answers: Mapping[str, str]) -> CountAnalysis:
    """Tally selected scores and report every score tied for most frequent."""
    counts: Counter = Counter(option.score for _q, option in iter_selected_options(section, answers))
    score_counts = dict(sorted(counts.items()))
    most_frequent = []
    if score_counts:
        top = max(score_counts.values())
        most_frequent = [score for score, n in score_counts.items() if n == top]
    return CountAnalysis(
        section_id=section.id,
        section_name=section.name,
        score_counts=score_counts,
        most_frequent_scores=most_frequent,
    )


__all__ = ["analyze_count_section"]
