"""Pydantic models for computed report views.

A Report is derived from a definition and a response on every view and is
never persisted. The on-screen view and the CSV export serialize the same
instance.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeightedScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    section_id: str
    section_name: str
    weight: float
    achieved_score: int | float
    average_score: float
    weighted_average_score: float
    max_possible_score: int | float = 0
    question_count: int = 0
    answered_count: int = 0
    highest_option_score: int | float = 4
    score_band: str = "red"


class MatrixPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int | float
    y: int | float


class MatrixAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    x_axis_label: str
    y_axis_label: str
    x_section_id: str
    y_section_id: str
    point: MatrixPoint


class CountAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    section_id: str
    section_name: str
    score_counts: Dict[int | float, int] = Field(default_factory=dict)
    most_frequent_scores: List[int | float] = Field(default_factory=list)


class SectionWarning(BaseModel):
    """Data-integrity note attached to one section of a report."""

    model_config = ConfigDict(frozen=True)

    section_id: str
    code: str
    detail: str = ""


class Report(BaseModel):
    model_config = ConfigDict(frozen=True)

    questionnaire_version_id: str
    response_id: str
    section_scores: List[WeightedScore] = Field(default_factory=list)
    matrix_analysis: Optional[MatrixAnalysis] = None
    count_analyses: List[CountAnalysis] = Field(default_factory=list)
    composite_ranking: float = 0.0
    warnings: List[SectionWarning] = Field(default_factory=list)

    def find_section_score(self, section_id: str) -> WeightedScore | None:
        for score in self.section_scores:
            if score.section_id == section_id:
                return score
        return None

    def find_count_analysis(self, section_id: str) -> CountAnalysis | None:
        for analysis in self.count_analyses:
            if analysis.section_id == section_id:
                return analysis
        return None


__all__ = [
    "WeightedScore",
    "MatrixPoint",
    "MatrixAnalysis",
    "CountAnalysis",
    "SectionWarning",
    "Report",
]
