from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from app.core.config.scoring import get_scoring_value
from app.core.numbers import clamp, round_half_up, round_to
from app.schemas.cv import KeywordCoverageResult, MatchedKeyword, MissingByTier
from app.taxonomy import KeywordPackProvider, get_role_pack

if TYPE_CHECKING:
    from .cv_context import LineEntry

EXPERIENCE_WEIGHT = 1.0
SKILLS_ONLY_WEIGHT = 0.4
SKILLS_STUFFING_MIN_KEYWORDS = 8
SKILLS_STUFFING_MAX_CHARS = 340
SKILLS_STUFFING_DENSITY_THRESHOLD = 0.022

_WHITESPACE_RE = re.compile(r"\s+")


def _keyword_weights() -> tuple[float, float]:
    experience = float(get_scoring_value("keywords.experience_weight", EXPERIENCE_WEIGHT))
    skills_only = float(get_scoring_value("keywords.skills_only_weight", SKILLS_ONLY_WEIGHT))
    return experience, skills_only


def _stuffing_thresholds() -> tuple[int, int, float]:
    min_keywords = int(get_scoring_value("keywords.stuffing.min_keywords", SKILLS_STUFFING_MIN_KEYWORDS))
    max_chars = int(get_scoring_value("keywords.stuffing.max_chars", SKILLS_STUFFING_MAX_CHARS))
    density = float(get_scoring_value("keywords.stuffing.density_threshold", SKILLS_STUFFING_DENSITY_THRESHOLD))
    return min_keywords, max_chars, density


def _matches_any(text: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in patterns)


def _count_matches(text: str, patterns: Sequence[re.Pattern[str]]) -> int:
    if not text:
        return 0
    return sum(sum(1 for _ in pattern.finditer(text)) for pattern in patterns)


def _region_text(line_entries: Sequence[LineEntry], region: str) -> str:
    texts = [entry.text.strip() for entry in line_entries if entry.region == region]
    return "\n".join(text for text in texts if text)


def compute_keyword_coverage(
    normalized_text: str,
    line_entries: Sequence[LineEntry],
    role_id: str | None,
    provider: KeywordPackProvider | None = None,
) -> KeywordCoverageResult:
    """Match the role's keyword pack against the whole text and the experience/skills regions.

    An experience-region match earns full weight. A keyword seen only in the
    skills region earns partial weight and is listed in ``skills_only``.
    """
    pack = get_role_pack(role_id, provider)
    experience_weight, skills_only_weight = _keyword_weights()
    min_keywords, max_chars, density_threshold = _stuffing_thresholds()

    all_text = normalized_text or ""
    skills_text = _region_text(line_entries, "skills")
    experience_text = _region_text(line_entries, "experience")

    found: list[str] = []
    missing: list[str] = []
    missing_by_tier: dict[str, list[str]] = {"critical": [], "strong": [], "nice": []}
    skills_only: list[str] = []
    matched: list[MatchedKeyword] = []

    weighted_found = 0.0
    found_in_experience = 0
    found_in_skills = 0
    skills_mentions = 0

    for keyword in pack.keywords:
        patterns = keyword.matchers
        label = keyword.display_label
        in_all = _matches_any(all_text, patterns)
        in_experience = _matches_any(experience_text, patterns)
        in_skills = _matches_any(skills_text, patterns)

        if in_experience:
            weight = experience_weight
        elif in_skills:
            weight = skills_only_weight
        else:
            weight = 0.0
        weighted_found += weight

        if in_all or in_experience or in_skills:
            found.append(label)
            matched.append(
                MatchedKeyword(
                    key=keyword.key,
                    label=label,
                    tier=keyword.tier,
                    in_experience=in_experience,
                    in_skills=in_skills,
                    found_weight=weight,
                )
            )
        else:
            missing.append(label)
            missing_by_tier[keyword.tier].append(label)

        if in_skills and not in_experience:
            skills_only.append(label)
        if in_skills:
            found_in_skills += 1
            skills_mentions += _count_matches(skills_text, patterns)
        if in_experience:
            found_in_experience += 1

    total = len(pack.keywords)
    skills_chars = len(_WHITESPACE_RE.sub(" ", skills_text).strip())
    keyword_density = skills_mentions / skills_chars if skills_chars > 0 else 0.0
    stuffing = (
        found_in_skills >= min_keywords and 0 < skills_chars <= max_chars
    ) or (skills_chars > 0 and keyword_density > density_threshold)

    coverage_pct = round_half_up(len(found) / total * 100) if total else 0
    weighted_pct = round_half_up(weighted_found / total * 100) if total else 0
    tiers = pack.keyword_tiers

    return KeywordCoverageResult(
        role=pack.id,
        role_label=pack.label,
        total=total,
        critical_total=len(tiers["critical"]),
        strong_total=len(tiers["strong"]),
        found=found,
        missing=missing,
        missing_critical=list(missing_by_tier["critical"]),
        missing_strong=list(missing_by_tier["strong"]),
        missing_by_tier=MissingByTier(**missing_by_tier),
        skills_only=skills_only,
        found_in_experience_count=found_in_experience,
        found_in_skills_count=found_in_skills,
        coverage_pct=int(clamp(coverage_pct, 0, 100)),
        weighted_coverage_pct=int(clamp(weighted_pct, 0, 100)),
        keyword_stuffing_suspected=stuffing,
        weighted_found=round_to(weighted_found, 2),
        weighted_total=total,
        skills_chars=skills_chars,
        keyword_density=round_to(keyword_density, 4),
        matched_keywords=matched,
    )
