from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from app.normalize import count_spacing_issues, first_word, normalize_cv_text
from app.schemas.cv import ExtractionQuality, KeywordCoverageResult
from app.taxonomy import KeywordPackProvider, normalize_role_id

from .cv_patterns import (
    ACTION_VERBS,
    BULLET_START_RE,
    CONTACT_LINE_RE,
    DATE_FORMAT_ORDER,
    DATE_FORMAT_RECOMMENDED,
    DUPLICATE_MIN_CHARS,
    EMAIL_RE,
    LINKEDIN_RE,
    LONG_LINE_CHARS,
    MIDLINE_BULLET_SYMBOL_RE,
    OUTCOME_RE,
    PHONE_RE,
    RESPONSIBLE_FOR_RE,
    ROLE_HINT_RE,
    SCOPE_RE,
    SECTION_NAMES,
    SENIORITY_HINT_RE,
    SENTENCE_SPLIT_RE,
    SHORT_BULLET_WORDS,
    SKILLS_ALIAS_MAX_RANK,
    SKILLS_LABEL_ALIAS_RE,
    SPECIAL_CHAR_RE,
    SPECIALIZATION_HINT_RE,
    STACK_EXCEPTION_PATTERNS,
    STACK_RULES,
    STACK_WINDOW_LINES,
    SUMMARY_ALIAS_MAX_RANK,
    TRAILING_PUNCTUATION_RE,
    YEARS_HINT_RE,
    BulletToken,
    detect_date_formats,
    detect_section_heading,
    has_metric_token,
    is_caps_heavy_line,
    iter_bullet_tokens,
    normalize_bullet_marker,
)
from .extraction_quality import analyze_extraction_quality
from .keyword_coverage import compute_keyword_coverage

logger = logging.getLogger(__name__)

SUMMARY_MIN_WORDS = 16
SUMMARY_MAX_WORDS = 110
SUMMARY_MAX_SENTENCES = 4
SUMMARY_INTRO_LINES = 4
ALIAS_EVIDENCE_LINES = 3
MERGED_EVIDENCE_LINES = 4
DATE_EVIDENCE_LINES = 3


@dataclass(frozen=True)
class LineEntry:
    rank: int
    line_number: int
    text: str
    section: str
    region: str
    block_key: str
    is_heading: bool = False


@dataclass(frozen=True)
class Bullet:
    section: str
    region: str
    line_number: int
    source_line: str
    line: str
    marker: str
    word_count: int
    has_metric: bool
    starts_with_action_verb: bool
    starts_with_responsible: bool
    has_outcome_language: bool
    has_outcome_evidence: bool
    has_scope_language: bool
    has_trailing_punctuation: bool
    merged_from_line: bool = False


@dataclass(frozen=True)
class MergedBulletLine:
    line_number: int
    text: str
    reason: str


@dataclass(frozen=True)
class MergedBullets:
    suspected: bool
    count: int
    evidence: tuple[MergedBulletLine, ...] = ()


@dataclass(frozen=True)
class AliasLine:
    line_number: int
    text: str
    reason: str


@dataclass(frozen=True)
class AliasDetection:
    found: bool
    alias_type: str | None = None
    lines: tuple[AliasLine, ...] = ()


@dataclass(frozen=True)
class SectionFlags:
    experience: bool = False
    education: bool = False
    skills: bool = False
    projects: bool = False
    summary: bool = False

    def count(self) -> int:
        return sum(1 for name in SECTION_NAMES if getattr(self, name))


@dataclass(frozen=True)
class AliasFlags:
    skills: bool = False
    summary: bool = False


@dataclass(frozen=True)
class SectionDetection:
    explicit_headings: SectionFlags
    skills_alias: AliasDetection
    summary_alias: AliasDetection
    implicit_by_alias: AliasFlags
    heading_suggestion: AliasFlags


@dataclass(frozen=True)
class ContactInfo:
    has_email: bool
    has_phone: bool
    has_linkedin: bool

    @property
    def has_any(self) -> bool:
        return self.has_email or self.has_phone or self.has_linkedin


@dataclass(frozen=True)
class DateEvidence:
    line_number: int
    text: str


@dataclass(frozen=True)
class DateFormats:
    month_year: int
    slash_date: int
    year_only: int
    used_count: int
    used_formats: tuple[str, ...]
    suggested_format: str
    evidence: Mapping[str, tuple[DateEvidence, ...]]


@dataclass(frozen=True)
class StackContradiction:
    id: str
    left: str
    right: str
    line_start: int
    line_end: int
    snippet: str
    reason: str


@dataclass(frozen=True)
class DocumentContext:
    role_id: str
    text: str
    text_length: int
    lines: tuple[str, ...]
    non_empty_lines: tuple[str, ...]
    line_entries: tuple[LineEntry, ...]
    sections_present: SectionFlags
    section_lines: Mapping[str, tuple[str, ...]]
    section_count: int
    cv_signal_score: int
    likely_non_cv: bool
    section_detection: SectionDetection
    contact: ContactInfo
    bullet_lines: tuple[Bullet, ...]
    bullet_count: int
    bullets_with_metrics: int
    numeric_bullet_ratio: float
    experience_bullet_count: int
    experience_bullets_with_numbers: int
    responsible_for_count: int
    responsible_for_ratio: float
    weak_action_verb_count: int
    weak_action_verb_ratio: float
    repeated_bullet_start_ratio: float
    short_bullet_count: int
    short_bullet_ratio: float
    outcome_language_count: int
    outcome_evidence_count: int
    outcome_ratio: float
    bullets_without_outcome: tuple[Bullet, ...]
    scope_language_count: int
    mixed_bullet_markers: bool
    trailing_punctuation_mixed: bool
    merged_bullets: MergedBullets
    stack_contradictions: tuple[StackContradiction, ...]
    date_formats: DateFormats
    duplicate_line_count: int
    long_line_count: int
    caps_heavy_line_count: int
    spacing_issue_count: int
    special_char_ratio: float
    extraction_quality: ExtractionQuality
    keyword_coverage: KeywordCoverageResult
    coverage_line_entries: tuple[LineEntry, ...] = field(default=(), repr=False)


def _assign_region(section: str, line: str, rank: int) -> str:
    if section in ("experience", "projects"):
        return "experience"
    if section == "skills":
        return "skills"
    if rank <= SKILLS_ALIAS_MAX_RANK and SKILLS_LABEL_ALIAS_RE.search(line):
        return "skills"
    return "other"


def _make_bullet(
    content: str,
    marker: str,
    *,
    section: str,
    region: str,
    line_number: int,
    source_line: str,
    merged_from_line: bool = False,
) -> Bullet:
    has_metric = has_metric_token(content)
    has_outcome = bool(OUTCOME_RE.search(content))
    return Bullet(
        section=section,
        region=region,
        line_number=line_number,
        source_line=source_line,
        line=content,
        marker=marker,
        word_count=len(content.split()),
        has_metric=has_metric,
        starts_with_action_verb=first_word(content) in ACTION_VERBS,
        starts_with_responsible=bool(RESPONSIBLE_FOR_RE.search(content)),
        has_outcome_language=has_outcome,
        has_outcome_evidence=has_metric or has_outcome,
        has_scope_language=bool(SCOPE_RE.search(content)),
        has_trailing_punctuation=bool(TRAILING_PUNCTUATION_RE.search(content)),
        merged_from_line=merged_from_line,
    )


def _bullet_segments(line: str, tokens: Sequence[BulletToken]) -> list[tuple[str, str]]:
    segments: list[tuple[str, str]] = []
    for index, token in enumerate(tokens):
        end = tokens[index + 1].offset if index + 1 < len(tokens) else len(line)
        content = line[token.content_start:end].strip()
        if content:
            segments.append((token.token, content))
    return segments


def _detect_skills_alias(line_entries: Sequence[LineEntry]) -> AliasDetection:
    hits = [
        entry
        for entry in line_entries
        if entry.rank <= SKILLS_ALIAS_MAX_RANK and SKILLS_LABEL_ALIAS_RE.search(entry.text)
    ]
    if not hits:
        return AliasDetection(found=False)
    return AliasDetection(
        found=True,
        alias_type="labeled_block",
        lines=tuple(
            AliasLine(
                line_number=entry.line_number,
                text=entry.text,
                reason="skills alias label",
            )
            for entry in hits[:ALIAS_EVIDENCE_LINES]
        ),
    )


def _detect_summary_alias(line_entries: Sequence[LineEntry]) -> AliasDetection:
    # Favors precision; some concise summaries are missed.
    candidates = [
        entry
        for entry in line_entries
        if entry.rank <= SUMMARY_ALIAS_MAX_RANK
        and not CONTACT_LINE_RE.search(entry.text)
        and not SKILLS_LABEL_ALIAS_RE.search(entry.text)
    ]
    intro_lines = candidates[:SUMMARY_INTRO_LINES]
    intro_text = " ".join(entry.text for entry in intro_lines).strip()
    if not intro_text:
        return AliasDetection(found=False)

    words = intro_text.split()
    sentences = [part for part in (chunk.strip() for chunk in SENTENCE_SPLIT_RE.split(intro_text)) if part]
    sentence_count = len(sentences) or len(intro_lines)

    likely_intro = (
        SUMMARY_MIN_WORDS <= len(words) <= SUMMARY_MAX_WORDS
        and 1 <= sentence_count <= SUMMARY_MAX_SENTENCES
        and bool(ROLE_HINT_RE.search(intro_text))
        and bool(SPECIALIZATION_HINT_RE.search(intro_text))
        and bool(YEARS_HINT_RE.search(intro_text) or SENIORITY_HINT_RE.search(intro_text))
    )
    if not likely_intro:
        return AliasDetection(found=False)
    return AliasDetection(
        found=True,
        alias_type="intro_paragraph",
        lines=tuple(
            AliasLine(
                line_number=entry.line_number,
                text=entry.text,
                reason="summary intro heuristic",
            )
            for entry in intro_lines[:ALIAS_EVIDENCE_LINES]
        ),
    )


def _merge_unique(values: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        normalized = (value or "").strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        out.append(normalized)
    return out


def _find_stack_contradictions(line_entries: Sequence[LineEntry]) -> list[StackContradiction]:
    blocks: dict[str, list[LineEntry]] = {}
    for entry in line_entries:
        if entry.region != "experience":
            continue
        blocks.setdefault(entry.block_key or "other:0", []).append(entry)

    contradictions: list[StackContradiction] = []
    seen: set[tuple[str, str, int, int]] = set()

    # Clarifiers that sit further apart than the window are still missed.
    for block_key, block_lines in blocks.items():
        for start, base in enumerate(block_lines):
            for rule in STACK_RULES:
                if not rule.left.search(base.text) and not rule.right.search(base.text):
                    continue
                upper = min(len(block_lines) - 1, start + STACK_WINDOW_LINES)
                for stop in range(start, upper + 1):
                    window = block_lines[start:stop + 1]
                    window_text = " ".join(entry.text for entry in window)
                    if not rule.left.search(window_text) or not rule.right.search(window_text):
                        continue
                    if any(pattern.search(window_text) for pattern in STACK_EXCEPTION_PATTERNS):
                        continue

                    line_start = window[0].line_number
                    line_end = window[-1].line_number
                    key = (block_key, rule.id, line_start, line_end)
                    if key in seen:
                        continue
                    seen.add(key)
                    contradictions.append(
                        StackContradiction(
                            id=rule.id,
                            left=rule.left_label,
                            right=rule.right_label,
                            line_start=line_start,
                            line_end=line_end,
                            snippet=window_text,
                            reason=f"matched {rule.left_label} + {rule.right_label} within {len(window)} lines",
                        )
                    )
                    break
    return contradictions


def _ratio(count: int, total: int) -> float:
    return count / total if total else 0.0


def build_document_context(
    raw_text: str | None,
    role_id: str | None = None,
    provider: KeywordPackProvider | None = None,
) -> DocumentContext:
    """Walk the normalized lines once and derive every structural signal the rules read.

    Accumulators live only inside this call; the returned context and its
    members are immutable.
    """
    role = normalize_role_id(role_id, provider)
    text = normalize_cv_text(raw_text)
    lines = text.split("\n") if text else []

    section_lines: dict[str, list[str]] = {name: [] for name in (*SECTION_NAMES, "other")}
    explicit: set[str] = set()
    block_counter: Counter[str] = Counter()
    current_section = "other"
    rank = 0

    long_lines = 0
    caps_heavy_lines = 0
    duplicate_lines = 0
    occurrences: Counter[str] = Counter()

    line_entries: list[LineEntry] = []
    bullets: list[Bullet] = []
    bullet_markers: set[str] = set()
    bullet_starts: Counter[str] = Counter()
    merged_lines: list[MergedBulletLine] = []
    date_evidence: dict[str, list[DateEvidence]] = {fmt: [] for fmt in DATE_FORMAT_ORDER}

    for index, source in enumerate(lines):
        line = source.strip()
        if not line:
            continue
        rank += 1
        line_number = index + 1

        heading = detect_section_heading(line)
        if heading:
            explicit.add(heading)
            current_section = heading
            block_counter[heading] += 1
            line_entries.append(
                LineEntry(
                    rank=rank,
                    line_number=line_number,
                    text=line,
                    section=heading,
                    region="header",
                    block_key=f"{heading}:{block_counter[heading]}",
                    is_heading=True,
                )
            )
            continue

        region = _assign_region(current_section, line, rank)
        line_entries.append(
            LineEntry(
                rank=rank,
                line_number=line_number,
                text=line,
                section=current_section,
                region=region,
                block_key=f"{current_section}:{block_counter[current_section]}",
            )
        )
        section_lines[current_section].append(line)

        if len(line) > LONG_LINE_CHARS:
            long_lines += 1
        if is_caps_heavy_line(line):
            caps_heavy_lines += 1

        duplicate_key = line.lower()
        if occurrences[duplicate_key] >= 1 and len(line) >= DUPLICATE_MIN_CHARS:
            duplicate_lines += 1
        occurrences[duplicate_key] += 1

        for fmt in detect_date_formats(line):
            if len(date_evidence[fmt]) < DATE_EVIDENCE_LINES:
                date_evidence[fmt].append(DateEvidence(line_number=line_number, text=line))

        bullet_context = {
            "section": current_section,
            "region": region,
            "line_number": line_number,
            "source_line": line,
        }
        start_match = BULLET_START_RE.match(line)
        tokens = iter_bullet_tokens(line)
        segments = _bullet_segments(line, tokens)

        if start_match and len(segments) <= 1:
            marker = normalize_bullet_marker(start_match.group(1))
            content = start_match.group(2).strip()
            bullet_markers.add(marker)
            bullet_starts[first_word(content)] += 1
            bullets.append(_make_bullet(content, marker, **bullet_context))
            continue

        if not segments:
            continue

        multiple_tokens = len(segments) > 1
        midline_token = any(token.offset > 0 for token in tokens)
        if multiple_tokens or midline_token or MIDLINE_BULLET_SYMBOL_RE.search(line):
            merged_lines.append(
                MergedBulletLine(
                    line_number=line_number,
                    text=line,
                    reason="multiple bullet tokens on one line" if multiple_tokens else "bullet token found in mid-line",
                )
            )

        for raw_token, content in segments:
            marker = normalize_bullet_marker(raw_token)
            bullet_markers.add(marker)
            bullet_starts[first_word(content)] += 1
            bullets.append(_make_bullet(content, marker, merged_from_line=True, **bullet_context))

    skills_alias = _detect_skills_alias(line_entries)
    summary_alias = _detect_summary_alias(line_entries)
    skills_implicit = "skills" not in explicit and skills_alias.found
    summary_implicit = "summary" not in explicit and summary_alias.found

    present = set(explicit)
    if skills_implicit:
        present.add("skills")
    if summary_implicit:
        present.add("summary")
    sections_present = SectionFlags(**{name: name in present for name in SECTION_NAMES})
    explicit_headings = SectionFlags(**{name: name in explicit for name in SECTION_NAMES})

    bullet_count = len(bullets)
    experience_bullets = [bullet for bullet in bullets if bullet.region == "experience"]
    bullets_with_metrics = sum(1 for bullet in bullets if bullet.has_metric)
    responsible_for = sum(1 for bullet in bullets if bullet.starts_with_responsible)
    weak_action_verbs = sum(1 for bullet in bullets if not bullet.starts_with_action_verb)
    outcome_language = sum(1 for bullet in bullets if bullet.has_outcome_language)
    outcome_evidence = sum(1 for bullet in experience_bullets if bullet.has_outcome_evidence)
    scope_language = sum(1 for bullet in bullets if bullet.has_scope_language)
    short_bullets = sum(1 for bullet in bullets if bullet.word_count < SHORT_BULLET_WORDS)
    punctuated = sum(1 for bullet in bullets if bullet.has_trailing_punctuation)
    max_start = max(bullet_starts.values(), default=0)

    used_formats = tuple(fmt for fmt in DATE_FORMAT_ORDER if date_evidence[fmt])
    date_formats = DateFormats(
        month_year=len(date_evidence["MMM YYYY"]) + len(date_evidence["Month YYYY"]),
        slash_date=len(date_evidence["MM/YYYY"]),
        year_only=len(date_evidence["YYYY"]),
        used_count=len(used_formats),
        used_formats=used_formats,
        suggested_format=DATE_FORMAT_RECOMMENDED,
        evidence=MappingProxyType({fmt: tuple(items) for fmt, items in date_evidence.items()}),
    )

    special_chars = len(SPECIAL_CHAR_RE.findall(text))

    skills_coverage_lines = set(
        _merge_unique(section_lines["skills"] + [line.text for line in skills_alias.lines])
    )
    coverage_entries = [
        replace(entry, region="skills")
        if entry.region == "other" and entry.text.lower() in skills_coverage_lines
        else entry
        for entry in line_entries
    ]

    keyword_coverage = compute_keyword_coverage(text, coverage_entries, role, provider)
    stack_contradictions = _find_stack_contradictions(coverage_entries)
    extraction_quality = analyze_extraction_quality(
        (entry.text for entry in line_entries),
        (item.line_number for item in merged_lines),
    )

    contact = ContactInfo(
        has_email=bool(EMAIL_RE.search(text)),
        has_phone=bool(PHONE_RE.search(text)),
        has_linkedin=bool(LINKEDIN_RE.search(text)),
    )
    section_count = sections_present.count()
    cv_signal_score = (
        (2 if contact.has_any else 0)
        + (2 if section_count >= 2 else 0)
        + (2 if sections_present.experience else 0)
        + (2 if bullet_count >= 4 else 0)
        + (1 if used_formats else 0)
    )
    likely_non_cv = cv_signal_score <= 2 or (not contact.has_any and section_count == 0 and bullet_count == 0)

    logger.debug(
        "cv_context_built role=%s lines=%s bullets=%s sections=%s signal=%s",
        role,
        len(line_entries),
        bullet_count,
        section_count,
        cv_signal_score,
    )

    return DocumentContext(
        role_id=role,
        text=text,
        text_length=len(text),
        lines=tuple(lines),
        non_empty_lines=tuple(entry.text for entry in line_entries),
        line_entries=tuple(line_entries),
        sections_present=sections_present,
        section_lines=MappingProxyType({name: tuple(items) for name, items in section_lines.items()}),
        section_count=section_count,
        cv_signal_score=cv_signal_score,
        likely_non_cv=likely_non_cv,
        section_detection=SectionDetection(
            explicit_headings=explicit_headings,
            skills_alias=skills_alias,
            summary_alias=summary_alias,
            implicit_by_alias=AliasFlags(skills=skills_implicit, summary=summary_implicit),
            heading_suggestion=AliasFlags(skills=skills_implicit, summary=summary_implicit),
        ),
        contact=contact,
        bullet_lines=tuple(bullets),
        bullet_count=bullet_count,
        bullets_with_metrics=bullets_with_metrics,
        numeric_bullet_ratio=_ratio(bullets_with_metrics, bullet_count),
        experience_bullet_count=len(experience_bullets),
        experience_bullets_with_numbers=sum(1 for bullet in experience_bullets if bullet.has_metric),
        responsible_for_count=responsible_for,
        responsible_for_ratio=_ratio(responsible_for, bullet_count),
        weak_action_verb_count=weak_action_verbs,
        weak_action_verb_ratio=_ratio(weak_action_verbs, bullet_count),
        repeated_bullet_start_ratio=_ratio(max_start, bullet_count),
        short_bullet_count=short_bullets,
        short_bullet_ratio=_ratio(short_bullets, bullet_count),
        outcome_language_count=outcome_language,
        outcome_evidence_count=outcome_evidence,
        outcome_ratio=_ratio(outcome_evidence, len(experience_bullets)),
        bullets_without_outcome=tuple(bullet for bullet in experience_bullets if not bullet.has_outcome_evidence),
        scope_language_count=scope_language,
        mixed_bullet_markers=len(bullet_markers) > 1,
        trailing_punctuation_mixed=0 < punctuated < bullet_count,
        merged_bullets=MergedBullets(
            suspected=bool(merged_lines),
            count=len(merged_lines),
            evidence=tuple(merged_lines[:MERGED_EVIDENCE_LINES]),
        ),
        stack_contradictions=tuple(stack_contradictions),
        date_formats=date_formats,
        duplicate_line_count=duplicate_lines,
        long_line_count=long_lines,
        caps_heavy_line_count=caps_heavy_lines,
        spacing_issue_count=count_spacing_issues(raw_text),
        special_char_ratio=_ratio(special_chars, len(text)),
        extraction_quality=extraction_quality,
        keyword_coverage=keyword_coverage,
        coverage_line_entries=tuple(coverage_entries),
    )
