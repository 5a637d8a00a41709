from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from app.core.config.scoring import get_scoring_float_map
from app.core.numbers import clamp, round_to
from app.normalize import word_count
from app.schemas.cv import ExtractionLevel, ExtractionQuality, ExtractionSignals

from .cv_patterns import MIDLINE_BULLET_RE, iter_bullet_tokens

EXTRACTION_QUALITY_WEIGHTS: dict[str, float] = {
    "midline_bullet_token": 0.12,
    "merged_bullet_line": 0.08,
    "very_long_line_ratio": 0.25,
    "very_short_line_ratio": 0.18,
    "suspicious_hyphen_wrap": 0.03,
}
LEVEL_THRESHOLDS: dict[str, float] = {"high": 0.75, "medium": 0.5}

VERY_LONG_LINE_CHARS = 180
VERY_SHORT_LINE_WORDS = 2
SHORT_LINE_NOTE_RATIO = 0.2
_LOWERCASE_START_RE = re.compile(r"^[a-z]")


def extraction_level(score: float) -> ExtractionLevel:
    thresholds = get_scoring_float_map("extraction_quality.levels", LEVEL_THRESHOLDS)
    if score >= thresholds["high"]:
        return "high"
    if score >= thresholds["medium"]:
        return "medium"
    return "low"


def _count_midline_tokens(line: str) -> int:
    tokens = iter_bullet_tokens(line)
    midline = sum(1 for token in tokens if token.offset > 0)
    if len(tokens) <= 1:
        midline += len(MIDLINE_BULLET_RE.findall(line))
    return midline


def analyze_extraction_quality(
    lines: Iterable[str],
    merged_line_numbers: Iterable[int] = (),
) -> ExtractionQuality:
    """Estimate how trustworthy the extracted line structure is.

    Pure function of the line texts and the line numbers already flagged as
    holding merged bullets. The score starts at 1 and loses weight for mid-line
    bullet tokens, merged lines, very long or very short lines, and hyphenated
    wraps.
    """
    weights = get_scoring_float_map("extraction_quality.weights", EXTRACTION_QUALITY_WEIGHTS)
    texts: Sequence[str] = [text for text in ((line or "").strip() for line in lines) if text]
    line_count = max(1, len(texts))

    midline_tokens = 0
    very_long = 0
    very_short = 0
    hyphen_wraps = 0
    total_length = 0

    for index, line in enumerate(texts):
        total_length += len(line)
        if len(line) > VERY_LONG_LINE_CHARS:
            very_long += 1
        if word_count(line) <= VERY_SHORT_LINE_WORDS:
            very_short += 1
        midline_tokens += _count_midline_tokens(line)
        if index < len(texts) - 1 and line.endswith("-") and _LOWERCASE_START_RE.match(texts[index + 1]):
            hyphen_wraps += 1

    merged_count = len(set(merged_line_numbers))
    very_long_ratio = very_long / line_count
    very_short_ratio = very_short / line_count

    penalty = (
        midline_tokens * weights["midline_bullet_token"]
        + merged_count * weights["merged_bullet_line"]
        + very_long_ratio * weights["very_long_line_ratio"]
        + very_short_ratio * weights["very_short_line_ratio"]
        + hyphen_wraps * weights["suspicious_hyphen_wrap"]
    )
    score = clamp(round_to(1 - penalty, 3), 0.0, 1.0)

    notes: list[str] = []
    if midline_tokens > 0:
        notes.append("Detected bullet tokens in mid-line positions; PDF line merging is likely.")
    if merged_count > 0:
        notes.append("Some lines appear to contain multiple merged bullet statements.")
    if very_long >= 3:
        notes.append("Multiple very long lines reduce parser reliability.")
    if very_short_ratio > SHORT_LINE_NOTE_RATIO:
        notes.append("Many very short lines suggest extraction noise.")
    if hyphen_wraps > 0:
        notes.append("Detected suspicious hyphen line wraps from PDF extraction.")

    return ExtractionQuality(
        score=score,
        level=extraction_level(score),
        signals=ExtractionSignals(
            merged_bullet_lines=merged_count,
            midline_bullet_tokens=midline_tokens,
            avg_line_length=round_to(total_length / line_count, 1),
            very_long_lines=very_long,
            very_short_lines=very_short,
            suspicious_hyphen_wraps=hyphen_wraps,
        ),
        notes=notes,
    )
