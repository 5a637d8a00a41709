from __future__ import annotations

from collections.abc import Sequence

from app.core.config.scoring import get_scoring_value
from app.core.numbers import clamp, round_half_up
from app.features.cv_context import DocumentContext
from app.schemas.cv import (
    BreakdownItem,
    CategoryScores,
    CvReport,
    Issue,
    MissingByTier,
    ReportDebug,
)

from .penalties import keyword_experience_dependent_share, penalty_weights

CATEGORY_MAX_SCORES: dict[str, int] = {
    "ats": 25,
    "structure": 20,
    "impact": 25,
    "consistency": 15,
    "keywords": 15,
}

CATEGORY_LABELS: dict[str, str] = {
    "ats": "ATS & Readability",
    "structure": "Structure & Completeness",
    "impact": "Impact & Evidence",
    "consistency": "Consistency & Hygiene",
    "keywords": "Keyword Coverage",
}

# Tighter at higher extraction quality: a cleanly parsed non-CV should not score well.
NON_CV_CATEGORY_CAPS: dict[str, dict[str, int]] = {
    "high": {"impact": 6, "consistency": 5},
    "medium": {"impact": 8, "consistency": 6},
    "low": {"impact": 12, "consistency": 8},
}


def category_max_scores() -> dict[str, int]:
    configured = get_scoring_value("categories.max_scores", None)
    maxima = dict(CATEGORY_MAX_SCORES)
    if isinstance(configured, dict):
        for category, value in configured.items():
            if category in maxima and isinstance(value, (int, float)) and value >= 0:
                maxima[category] = int(value)
    return maxima


def non_cv_caps(level: str) -> dict[str, int]:
    configured = get_scoring_value(f"categories.non_cv_caps.{level}", None)
    caps = dict(NON_CV_CATEGORY_CAPS.get(level, NON_CV_CATEGORY_CAPS["high"]))
    if isinstance(configured, dict):
        for category, value in configured.items():
            if category in caps and isinstance(value, (int, float)):
                caps[category] = int(value)
    return caps


def score_categories(
    issues: Sequence[Issue],
    ctx: DocumentContext,
) -> tuple[CategoryScores, list[BreakdownItem]]:
    maxima = category_max_scores()
    raw: dict[str, float] = {category: float(maximum) for category, maximum in maxima.items()}

    for issue in issues:
        if issue.category not in raw:
            continue
        delta = issue.applied_score_delta if issue.applied_score_delta is not None else issue.score_delta
        raw[issue.category] += delta

    scores = {category: int(clamp(round_half_up(value), 0, maxima[category])) for category, value in raw.items()}

    if ctx.likely_non_cv:
        caps = non_cv_caps(ctx.extraction_quality.level)
        for category, cap in caps.items():
            scores[category] = min(scores[category], cap)

    breakdown = [
        BreakdownItem(id=category, label=CATEGORY_LABELS[category], score=scores[category], max=maxima[category])
        for category in CATEGORY_MAX_SCORES
    ]
    return CategoryScores(overall=sum(scores.values()), **scores), breakdown


def build_report(ctx: DocumentContext, issues: Sequence[Issue]) -> CvReport:
    scores, breakdown = score_categories(issues, ctx)
    coverage = ctx.keyword_coverage
    return CvReport(
        scores=scores,
        breakdown=breakdown,
        issues=list(issues),
        keyword_coverage=coverage.to_report(),
        debug=ReportDebug(
            extraction_quality=ctx.extraction_quality,
            missing_keywords=MissingByTier(
                critical=list(coverage.missing_by_tier.critical),
                strong=list(coverage.missing_by_tier.strong),
                nice=list(coverage.missing_by_tier.nice),
            ),
            penalty_weights=penalty_weights(),
            keyword_experience_dependent_share=keyword_experience_dependent_share(),
        ),
    )
