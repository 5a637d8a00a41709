from __future__ import annotations

from collections.abc import Sequence

from app.core.config.scoring import get_scoring_float_map, get_scoring_value
from app.core.numbers import clamp, round_to
from app.schemas.cv import ExtractionQuality, Issue

EXTRACTION_SENSITIVE_ISSUE_IDS = frozenset(
    {
        "no_outcome_language",
        "low_bullet_count",
        "low_numeric_density",
        "keyword_missing",
        "keyword_missing_critical",
        "merged_bullets_suspected",
    }
)

BASE_CONFIDENCE_BY_SEVERITY: dict[str, float] = {"critical": 0.93, "warn": 0.82, "info": 0.72}
EXTRACTION_CONFIDENCE_MULTIPLIERS: dict[str, float] = {"high": 1.0, "medium": 0.82, "low": 0.56}
SEVERITY_SHARE = 0.45
FALLBACK_BASE_CONFIDENCE = 0.7


def round_confidence(value: float) -> float:
    return round_to(clamp(value, 0.0, 1.0), 2)


def confidence_from_evidence(issue: Issue) -> float | None:
    values = [entry.confidence for entry in issue.evidence if entry.confidence is not None]
    if not values:
        return None
    return round_confidence(sum(values) / len(values))


def attach_issue_confidence(issues: Sequence[Issue], extraction_quality: ExtractionQuality | None) -> list[Issue]:
    """Blend severity and evidence confidence, then discount extraction-sensitive issues by quality level."""
    base_by_severity = get_scoring_float_map("confidence.base_by_severity", BASE_CONFIDENCE_BY_SEVERITY)
    multipliers = get_scoring_float_map("confidence.extraction_multipliers", EXTRACTION_CONFIDENCE_MULTIPLIERS)
    severity_share = float(get_scoring_value("confidence.severity_share", SEVERITY_SHARE))
    level = extraction_quality.level if extraction_quality is not None else "high"
    multiplier = multipliers.get(level, 1.0)

    calibrated: list[Issue] = []
    for issue in issues:
        base = base_by_severity.get(issue.severity, FALLBACK_BASE_CONFIDENCE)
        evidence_confidence = confidence_from_evidence(issue)
        if evidence_confidence is None:
            blended = base
        else:
            blended = base * severity_share + evidence_confidence * (1 - severity_share)
        if issue.id in EXTRACTION_SENSITIVE_ISSUE_IDS:
            blended *= multiplier
        calibrated.append(issue.model_copy(update={"confidence": round_confidence(blended)}))
    return calibrated
