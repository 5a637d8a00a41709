from __future__ import annotations

from collections.abc import Sequence

from app.core.config.scoring import get_scoring_float_map, get_scoring_value
from app.core.numbers import round_to
from app.schemas.cv import ExtractionQuality, Issue

EXTRACTION_PENALTY_WEIGHTS: dict[str, float] = {"high": 1.0, "medium": 0.7, "low": 0.4}

BULLET_DEPENDENT_ISSUE_IDS = frozenset(
    {
        "no_outcome_language",
        "low_bullet_count",
        "low_numeric_density",
        "keyword_missing",
    }
)

# Share of the keyword_missing penalty that depends on experience bullets being parsed correctly.
KEYWORD_EXPERIENCE_DEPENDENT_SHARE = 0.65


def penalty_weights() -> dict[str, float]:
    return get_scoring_float_map("penalties.extraction_weights", EXTRACTION_PENALTY_WEIGHTS)


def keyword_experience_dependent_share() -> float:
    return float(get_scoring_value("penalties.keyword_experience_dependent_share", KEYWORD_EXPERIENCE_DEPENDENT_SHARE))


def keyword_adjusted_delta(base_delta: float, extraction_weight: float, dependent_share: float) -> float:
    stable_share = 1 - dependent_share
    return base_delta * stable_share + base_delta * dependent_share * extraction_weight


def apply_extraction_penalty_adjustments(
    issues: Sequence[Issue],
    extraction_quality: ExtractionQuality | None,
) -> list[Issue]:
    """Scale the score impact of bullet-dependent issues when extraction quality is below high.

    Confidence is left alone. Every returned issue carries ``applied_score_delta``.
    """
    level = extraction_quality.level if extraction_quality is not None else "high"
    weight = penalty_weights().get(level, 1.0)
    dependent_share = keyword_experience_dependent_share()

    adjusted: list[Issue] = []
    for issue in issues:
        base_delta = float(issue.score_delta)
        if weight >= 1 or base_delta >= 0 or issue.id not in BULLET_DEPENDENT_ISSUE_IDS:
            applied = base_delta
        elif issue.id == "keyword_missing":
            applied = round_to(keyword_adjusted_delta(base_delta, weight, dependent_share), 2)
        else:
            applied = round_to(base_delta * weight, 2)
        adjusted.append(issue.model_copy(update={"applied_score_delta": applied}))
    return adjusted
