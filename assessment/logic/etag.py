"""ETag computation helpers.

Report ETags are derived from the canonical JSON of the Report value plus the
response's annotations, so the on-screen view, the section drill-down and the
CSV export of the same report carry the same tag, and editing a comment
invalidates it.
"""

from __future__ import annotations

import hashlib

from assessment.models.report import Report
from assessment.models.response import ResponseAnnotations


def compute_report_etag(report: Report, annotations: ResponseAnnotations | None = None) -> str:
    """Token: Report JSON (+ annotations JSON) -> SHA1 -> W/"…"."""
    token = report.model_dump_json()
    if annotations is not None:
        token += "\n" + annotations.model_dump_json()
    return f'W/"{hashlib.sha1(token.encode("utf-8")).hexdigest()}"'


def compare_etag(header_value: str | None, etag: str) -> bool:
    """Return True when an If-None-Match style header lists `etag` (or `*`)."""
    if not header_value:
        return False

    def _bare(token: str) -> str:
        token = token.strip()
        if token.startswith("W/"):
            token = token[2:]
        return token.strip('"')

    target = _bare(etag)
    for part in header_value.split(","):
        if part.strip() == "*" or _bare(part) == target:
            return True
    return False


__all__ = ["compute_report_etag", "compare_etag"]
