from __future__ import annotations

import logging
import re

from app.core.config import settings
from app.features.cv_context import build_document_context
from app.linter import (
    apply_extraction_penalty_adjustments,
    attach_issue_confidence,
    build_report,
    collect_issues,
    create_rules,
)
from app.normalize import normalize_cv_text
from app.schemas.cv import CvAnalyzeMeta, CvAnalyzeResponse, CvReport, ExtractionStatus, InputSource

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class CvAnalyzeError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 400, code: str = "invalid_input"):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def analyze(text: str | None, role_id: str | None = None) -> CvReport:
    """Lint a CV's extracted text and return the scored report.

    Total over any string input: empty text yields a report with the
    corresponding structural issues rather than an error.
    """
    ctx = build_document_context(text or "", role_id)
    issues = collect_issues(ctx, create_rules())
    issues = attach_issue_confidence(issues, ctx.extraction_quality)
    issues = apply_extraction_penalty_adjustments(issues, ctx.extraction_quality)
    return build_report(ctx, issues)


def text_preview(text: str, limit: int | None = None) -> str:
    max_chars = settings.cv_text_preview_chars if limit is None else limit
    return _WHITESPACE_RE.sub(" ", text).strip()[:max_chars]


def resolve_extraction_status(status: ExtractionStatus, text_length: int) -> ExtractionStatus:
    if status == "ok" and text_length < settings.cv_low_text_threshold:
        return "low_text"
    return status


def analyze_cv_payload(
    text: str | None,
    target_role: str | None = None,
    extraction_status: ExtractionStatus = "text_input",
    source: InputSource = "text",
) -> CvAnalyzeResponse:
    normalized = normalize_cv_text(text)
    if source == "text" and not normalized:
        raise CvAnalyzeError("Paste CV text to analyze.", status_code=400, code="missing_input")

    status = resolve_extraction_status(extraction_status, len(normalized))
    report = analyze(normalized, target_role)
    logger.info(
        "cv_analyze_completed role=%s issues=%s overall=%s status=%s",
        report.keyword_coverage.role,
        len(report.issues),
        report.scores.overall,
        status,
    )
    return CvAnalyzeResponse(
        **report.model_dump(),
        text_preview=text_preview(normalized),
        meta=CvAnalyzeMeta(
            source=source,
            extraction_status=status,
            text_length=len(normalized),
            fallback_recommended=status in ("failed", "low_text"),
            role=report.keyword_coverage.role,
        ),
    )
