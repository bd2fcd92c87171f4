"""Report endpoints: full report, section drill-down and CSV export.

All three read the same Report built by `build_report_for_response`; the CSV
export carries the same ETag as the JSON view of that report.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse, Response

from assessment.config import AppConfig, load_config
from assessment.logic.errors import AssessmentError
from assessment.logic.etag import compare_etag, compute_report_etag
from assessment.logic.problem_factory import error_response
from assessment.logic.report_export import build_report_csv
from assessment.logic.report_service import build_report_for_response
from assessment.logic.section_detail import build_section_detail


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/reports/{response_id}",
    summary="Compute the report for a response",
    operation_id="getReport",
    tags=["Reports"],
)
def get_report(
    response_id: str,
    if_none_match: str | None = Header(None, alias="If-None-Match"),
    cfg: AppConfig = Depends(load_config),
):
    try:
        bundle = build_report_for_response(response_id, settings=cfg.scoring)
    except AssessmentError as exc:
        logger.info("report_unavailable response_id=%s code=%s", response_id, exc.code)
        return error_response(exc)
    etag = compute_report_etag(bundle.report, bundle.annotations)
    if compare_etag(if_none_match, etag):
        return Response(status_code=304, headers={"ETag": etag})
    body = {
        "report": bundle.report.model_dump(mode="json"),
        "annotations": bundle.annotations.model_dump(),
        "response": bundle.response.model_dump(mode="json"),
    }
    return JSONResponse(body, headers={"ETag": etag})


@router.get(
    "/reports/{response_id}/sections/{section_id}",
    summary="Question-level detail for one section of a report",
    operation_id="getReportSection",
    tags=["Reports"],
)
def get_report_section(response_id: str, section_id: str, cfg: AppConfig = Depends(load_config)):
    try:
        bundle = build_report_for_response(response_id, settings=cfg.scoring)
        detail = build_section_detail(bundle, section_id, settings=cfg.scoring)
    except AssessmentError as exc:
        logger.info("report_section_unavailable response_id=%s section_id=%s code=%s", response_id, section_id, exc.code)
        return error_response(exc)
    return JSONResponse(detail, headers={"ETag": compute_report_etag(bundle.report, bundle.annotations)})


@router.get(
    "/reports/{response_id}/export.csv",
    summary="Export the report for a response as CSV",
    operation_id="exportReportCsv",
    tags=["Reports", "Export"],
)
def export_report(response_id: str, cfg: AppConfig = Depends(load_config)):
    try:
        bundle = build_report_for_response(response_id, settings=cfg.scoring)
    except AssessmentError as exc:
        logger.info("report_export_unavailable response_id=%s code=%s", response_id, exc.code)
        return error_response(exc)
    data = build_report_csv(
        bundle.report,
        bundle.response,
        bundle.annotations,
        include_header=cfg.export.include_header,
        places=cfg.scoring.decimal_places,
    )
    return Response(
        content=data,
        media_type="text/csv; charset=utf-8",
        headers={
            "ETag": compute_report_etag(bundle.report, bundle.annotations),
            "Content-Disposition": f'attachment; filename="report-{response_id}.csv"',
        },
    )


__all__ = ["router"]
