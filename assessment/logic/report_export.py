"""CSV export of a computed Report.

The export serializes an already-built Report and never rescores. Rows are
long-form (`analysis, section_id, section_name, metric, value`); weighted
sections are listed by average score descending, matching the on-screen
ordering of the area scores. Administrator comments, when given, are
appended as `comment` rows and never feed a score.
"""

from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List

from assessment.models.report import Report, WeightedScore
from assessment.models.response import ResponseAnnotations, ResponseRecord


HEADER = [
    "analysis",
    "section_id",
    "section_name",
    "metric",
    "value",
]

_WEIGHTED_METRICS = (
    "weight",
    "achieved_score",
    "max_possible_score",
    "answered_count",
    "question_count",
    "average_score",
    "weighted_average_score",
    "score_band",
)


def ranked_section_scores(report: Report) -> List[WeightedScore]:
    """Weighted scores by average descending; ties keep definition order."""
    return sorted(report.section_scores, key=lambda s: -s.average_score)


def _format(value: object, places: int = 2) -> str:
    if isinstance(value, float):
        return f"{value:.{places}f}"
    if isinstance(value, list):
        return "|".join(_format(v, places) for v in value)
    return "" if value is None else str(value)


def report_rows(
    report: Report,
    record: ResponseRecord | None = None,
    annotations: ResponseAnnotations | None = None,
    places: int = 2,
) -> Iterable[Dict[str, str]]:
    if record is not None:
        for metric, value in (
            ("response_id", record.id),
            ("customer_name", record.customer_name),
            ("customer_email", record.customer_email),
            ("questionnaire_version", record.questionnaire_version_name or record.questionnaire_version_id),
            ("submitted_at", record.submitted_at.isoformat() if record.submitted_at else None),
        ):
            yield {"analysis": "response", "section_id": "", "section_name": "", "metric": metric, "value": _format(value, places)}

    for score in ranked_section_scores(report):
        for metric in _WEIGHTED_METRICS:
            yield {
                "analysis": "weighted",
                "section_id": score.section_id,
                "section_name": score.section_name,
                "metric": metric,
                "value": _format(getattr(score, metric), places),
            }

    matrix = report.matrix_analysis
    if matrix is not None:
        yield {"analysis": "matrix", "section_id": matrix.x_section_id, "section_name": matrix.x_axis_label, "metric": "x", "value": _format(matrix.point.x, places)}
        yield {"analysis": "matrix", "section_id": matrix.y_section_id, "section_name": matrix.y_axis_label, "metric": "y", "value": _format(matrix.point.y, places)}

    for analysis in report.count_analyses:
        for score, n in analysis.score_counts.items():
            yield {
                "analysis": "count",
                "section_id": analysis.section_id,
                "section_name": analysis.section_name,
                "metric": f"score_{_format(score, places)}",
                "value": str(n),
            }
        yield {
            "analysis": "count",
            "section_id": analysis.section_id,
            "section_name": analysis.section_name,
            "metric": "most_frequent_scores",
            "value": _format(analysis.most_frequent_scores, places),
        }

    for warning in report.warnings:
        yield {"analysis": "warning", "section_id": warning.section_id, "section_name": "", "metric": warning.code, "value": warning.detail}

    if annotations is not None:
        if annotations.executive_summary:
            yield {"analysis": "comment", "section_id": "", "section_name": "", "metric": "executive_summary", "value": annotations.executive_summary}
        for kind, comments in (("admin", annotations.admin_comments), ("dynamic", annotations.dynamic_comments)):
            for section_id, body in sorted(comments.items()):
                yield {"analysis": "comment", "section_id": section_id, "section_name": "", "metric": kind, "value": body}

    yield {"analysis": "composite", "section_id": "", "section_name": "", "metric": "composite_ranking", "value": _format(report.composite_ranking, places)}


def build_report_csv(
    report: Report,
    record: ResponseRecord | None = None,
    annotations: ResponseAnnotations | None = None,
    *,
    include_header: bool = True,
    places: int = 2,
) -> bytes:
    buf = io.StringIO(newline="")
    writer = csv.DictWriter(buf, fieldnames=HEADER)
    if include_header:
        writer.writeheader()
    for row in report_rows(report, record, annotations, places):
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


__all__ = ["HEADER", "ranked_section_scores", "report_rows", "build_report_csv"]
