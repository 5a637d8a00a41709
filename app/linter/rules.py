from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from app.core.numbers import round_half_up
from app.features.cv_context import Bullet, DocumentContext
from app.schemas.cv import Category, Severity

from .evidence import EvidenceInput

TOO_SHORT_TEXT_CHARS = 900
LONG_LINE_MIN_COUNT = 6
LONG_LINE_CHARS = 130
SPECIAL_CHAR_RATIO_LIMIT = 0.06
MIN_BULLETS = 6
MIN_BULLETS_FOR_RATIOS = 4
NUMERIC_RATIO_FLOOR = 0.2
RESPONSIBLE_FOR_RATIO_LIMIT = 0.3
WEAK_VERB_RATIO_LIMIT = 0.5
REPEATED_START_RATIO_LIMIT = 0.45
OUTCOME_RATIO_FLOOR = 0.25
OUTCOME_RATIO_EXTREME_FLOOR = 0.08
CONFIDENT_BULLET_COUNT = 8
SHORT_BULLET_RATIO_LIMIT = 0.6
SHORT_BULLET_WORDS = 8
DUPLICATE_LINE_MIN_COUNT = 2
CAPS_LINE_MIN_COUNT = 3
SPACING_ISSUE_MIN_COUNT = 3
WEIGHTED_COVERAGE_FLOOR = 50
SKILLS_ONLY_MIN_COUNT = 2


@dataclass(frozen=True)
class IssuePatch:
    """Fields a rule overrides on its own defaults when it fires."""

    severity: Severity | None = None
    score_delta: float | None = None
    title: str | None = None
    message: str | None = None
    explanation: str | None = None
    why: str | None = None
    fix: str | None = None
    evidence: tuple[EvidenceInput, ...] = ()


RuleResult = Optional[IssuePatch]


@dataclass(frozen=True)
class Rule:
    id: str
    severity: Severity
    category: Category
    score_delta: float
    title: str
    message: str
    why: str
    fix: str
    evaluate: Callable[[DocumentContext], RuleResult]


def format_percent(value: float) -> str:
    return f"{round_half_up(value * 100)}%"


def top_line_evidence(ctx: DocumentContext, count: int = 2, reason: str = "top CV lines") -> tuple[dict[str, Any], ...]:
    lines = [entry for entry in ctx.line_entries if not entry.is_heading][:count]
    return tuple(
        {"line_start": entry.line_number, "line_end": entry.line_number, "snippet": entry.text, "reason": reason}
        for entry in lines
    )


def top_bullet_evidence(
    bullets: Iterable[Bullet],
    count: int = 2,
    reason: str = "matched bullet",
) -> tuple[dict[str, Any], ...]:
    selected: list[Bullet] = []
    for bullet in bullets:
        if len(selected) >= count:
            break
        selected.append(bullet)
    return tuple(
        {"line_start": bullet.line_number, "line_end": bullet.line_number, "snippet": bullet.line, "reason": reason}
        for bullet in selected
    )


def first_date_evidence(ctx: DocumentContext) -> tuple[Any, ...]:
    formats = ctx.date_formats
    return tuple(formats.evidence[fmt][0] for fmt in formats.used_formats if formats.evidence.get(fmt))


def _experience_bullets(ctx: DocumentContext) -> list[Bullet]:
    return [bullet for bullet in ctx.bullet_lines if bullet.region == "experience"]


def _sample(values: Sequence[str], limit: int) -> str:
    return ", ".join(values[:limit]) or "none"


# ats


def _missing_email(ctx: DocumentContext) -> RuleResult:
    if ctx.contact.has_email:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _missing_phone(ctx: DocumentContext) -> RuleResult:
    if ctx.contact.has_phone:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _missing_linkedin(ctx: DocumentContext) -> RuleResult:
    if ctx.contact.has_linkedin:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _too_short_for_ats(ctx: DocumentContext) -> RuleResult:
    if ctx.text_length >= TOO_SHORT_TEXT_CHARS:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _long_line_readability(ctx: DocumentContext) -> RuleResult:
    if ctx.long_line_count < LONG_LINE_MIN_COUNT:
        return None
    long_lines = [
        entry for entry in ctx.line_entries if not entry.is_heading and len(entry.text) > LONG_LINE_CHARS
    ][:2]
    return IssuePatch(
        message=f"{ctx.long_line_count} long lines were detected.",
        evidence=tuple(
            {
                "line_start": entry.line_number,
                "line_end": entry.line_number,
                "snippet": entry.text,
                "reason": "very long line",
            }
            for entry in long_lines
        ),
    )


def _merged_bullets_suspected(ctx: DocumentContext) -> RuleResult:
    if not ctx.merged_bullets.suspected:
        return None
    return IssuePatch(evidence=ctx.merged_bullets.evidence)


def _excessive_special_characters(ctx: DocumentContext) -> RuleResult:
    if ctx.special_char_ratio <= SPECIAL_CHAR_RATIO_LIMIT:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 1))


# structure


def _no_experience_section(ctx: DocumentContext) -> RuleResult:
    if ctx.sections_present.experience:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _missing_skills_section(ctx: DocumentContext) -> RuleResult:
    if ctx.sections_present.skills:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _implicit_skills_heading(ctx: DocumentContext) -> RuleResult:
    if not ctx.section_detection.heading_suggestion.skills:
        return None
    return IssuePatch(evidence=ctx.section_detection.skills_alias.lines)


def _missing_education_section(ctx: DocumentContext) -> RuleResult:
    if ctx.sections_present.education:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 1))


def _missing_summary_section(ctx: DocumentContext) -> RuleResult:
    if ctx.sections_present.summary:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _implicit_summary_heading(ctx: DocumentContext) -> RuleResult:
    if not ctx.section_detection.heading_suggestion.summary:
        return None
    return IssuePatch(evidence=ctx.section_detection.summary_alias.lines)


def _no_projects_and_no_experience(ctx: DocumentContext) -> RuleResult:
    if ctx.sections_present.projects or ctx.sections_present.experience:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _low_bullet_count(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count >= MIN_BULLETS:
        return None
    return IssuePatch(
        message=f"Only {ctx.bullet_count} bullet points were detected.",
        evidence=top_bullet_evidence(ctx.bullet_lines, 2, "detected bullet"),
    )


# impact


def _low_numeric_density(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS or ctx.numeric_bullet_ratio >= NUMERIC_RATIO_FLOOR:
        return None
    return IssuePatch(
        message=f"Only {format_percent(ctx.numeric_bullet_ratio)} of bullets include metrics.",
        evidence=top_bullet_evidence(
            (bullet for bullet in ctx.bullet_lines if not bullet.has_metric), 2, "bullet without metric"
        ),
    )


def _low_numeric_density_small_sample(ctx: DocumentContext) -> RuleResult:
    if not (0 < ctx.bullet_count < MIN_BULLETS) or ctx.numeric_bullet_ratio >= NUMERIC_RATIO_FLOOR:
        return None
    return IssuePatch(evidence=top_bullet_evidence(ctx.bullet_lines, 2))


def _no_metrics_in_experience(ctx: DocumentContext) -> RuleResult:
    if ctx.experience_bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.experience_bullets_with_numbers > 0:
        return None
    return IssuePatch(
        evidence=top_bullet_evidence(_experience_bullets(ctx), 2, "experience bullet without metric"),
    )


def _too_many_responsible_for(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.responsible_for_ratio <= RESPONSIBLE_FOR_RATIO_LIMIT:
        return None
    return IssuePatch(
        message=f"{format_percent(ctx.responsible_for_ratio)} of bullets start with “Responsible for”.",
        evidence=top_bullet_evidence(
            (bullet for bullet in ctx.bullet_lines if bullet.starts_with_responsible),
            2,
            "starts with Responsible for",
        ),
    )


def _weak_action_verbs(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.weak_action_verb_ratio <= WEAK_VERB_RATIO_LIMIT:
        return None
    return IssuePatch(
        message=f"{format_percent(ctx.weak_action_verb_ratio)} of bullets do not start with strong action verbs.",
        evidence=top_bullet_evidence(
            (bullet for bullet in ctx.bullet_lines if not bullet.starts_with_action_verb),
            2,
            "weak opening verb",
        ),
    )


def _repeated_bullet_starts(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.repeated_bullet_start_ratio <= REPEATED_START_RATIO_LIMIT:
        return None
    return IssuePatch(evidence=top_bullet_evidence(ctx.bullet_lines, 2, "repeated bullet starts"))


def _no_outcome_language(ctx: DocumentContext) -> RuleResult:
    total = ctx.experience_bullet_count
    if total == 0:
        return None

    if total < MIN_BULLETS and ctx.outcome_ratio < OUTCOME_RATIO_FLOOR:
        return IssuePatch(
            severity="info",
            score_delta=-1,
            title="Add more bullets to show impact",
            message="There are too few experience bullets for robust outcome analysis.",
            why="Outcome scoring is noisy on very small bullet sets.",
            fix="Add more role bullets with measurable outcomes and scope.",
            evidence=top_bullet_evidence(ctx.bullets_without_outcome, 2, "bullet lacks explicit outcome"),
        )

    if ctx.outcome_ratio >= OUTCOME_RATIO_FLOOR:
        return None

    extraction_low = ctx.extraction_quality.level == "low"
    confident_bullets = total >= CONFIDENT_BULLET_COUNT and not ctx.merged_bullets.suspected
    extremely_low = ctx.outcome_ratio < OUTCOME_RATIO_EXTREME_FLOOR
    downgrade = extraction_low and not (confident_bullets and extremely_low)

    if downgrade:
        return IssuePatch(
            severity="info",
            score_delta=-1,
            title="Outcome language may be under-detected",
            message="Extraction quality is low, so outcome detection may undercount.",
            evidence=top_bullet_evidence(ctx.bullets_without_outcome, 2, "bullet lacks outcome evidence"),
        )
    return IssuePatch(
        evidence=top_bullet_evidence(ctx.bullets_without_outcome, 2, "bullet lacks outcome evidence"),
    )


def _no_scope_language(ctx: DocumentContext) -> RuleResult:
    if ctx.experience_bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.scope_language_count > 0:
        return None
    return IssuePatch(
        evidence=top_bullet_evidence(_experience_bullets(ctx), 2, "experience bullet without scope"),
    )


def _short_bullets_majority(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS_FOR_RATIOS or ctx.short_bullet_ratio <= SHORT_BULLET_RATIO_LIMIT:
        return None
    return IssuePatch(
        evidence=top_bullet_evidence(
            (bullet for bullet in ctx.bullet_lines if bullet.word_count < SHORT_BULLET_WORDS), 2, "short bullet"
        ),
    )


def _insufficient_impact_evidence(ctx: DocumentContext) -> RuleResult:
    if not ctx.likely_non_cv:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2, "document lacks CV structure"))


# consistency


def _inconsistent_date_format(ctx: DocumentContext) -> RuleResult:
    formats = ctx.date_formats
    if formats.used_count <= 1:
        return None
    return IssuePatch(
        message=(
            f"Detected mixed date formats: {', '.join(formats.used_formats)}. "
            f"Recommended format: {formats.suggested_format}."
        ),
        fix=f"Use one format consistently, e.g., {formats.suggested_format} (Jan 2022, Mar 2024).",
        evidence=first_date_evidence(ctx),
    )


def _mixed_bullet_markers(ctx: DocumentContext) -> RuleResult:
    if not ctx.mixed_bullet_markers:
        return None
    return IssuePatch(evidence=top_bullet_evidence(ctx.bullet_lines, 2, "mixed marker style"))


def _duplicate_lines(ctx: DocumentContext) -> RuleResult:
    if ctx.duplicate_line_count < DUPLICATE_LINE_MIN_COUNT:
        return None
    return IssuePatch(
        message=f"{ctx.duplicate_line_count} duplicate lines were detected.",
        evidence=top_line_evidence(ctx, 2),
    )


def _excessive_caps_lines(ctx: DocumentContext) -> RuleResult:
    if ctx.caps_heavy_line_count < CAPS_LINE_MIN_COUNT:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _trailing_punctuation_inconsistent(ctx: DocumentContext) -> RuleResult:
    if ctx.bullet_count < MIN_BULLETS_FOR_RATIOS or not ctx.trailing_punctuation_mixed:
        return None
    return IssuePatch(evidence=top_bullet_evidence(ctx.bullet_lines, 2, "mixed punctuation style"))


def _spacing_hygiene(ctx: DocumentContext) -> RuleResult:
    if ctx.spacing_issue_count < SPACING_ISSUE_MIN_COUNT:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2))


def _stack_contradiction(ctx: DocumentContext) -> RuleResult:
    if not ctx.stack_contradictions:
        return None
    return IssuePatch(evidence=ctx.stack_contradictions)


def _insufficient_consistency_signals(ctx: DocumentContext) -> RuleResult:
    if not ctx.likely_non_cv:
        return None
    return IssuePatch(evidence=top_line_evidence(ctx, 2, "document lacks CV structure"))


# keywords


def _keyword_missing(ctx: DocumentContext) -> RuleResult:
    coverage = ctx.keyword_coverage
    if coverage.weighted_coverage_pct >= WEIGHTED_COVERAGE_FLOOR:
        return None
    missing_critical = _sample(coverage.missing_by_tier.critical, 6)
    return IssuePatch(
        message=f"Weighted keyword coverage is {coverage.weighted_coverage_pct}% (experience-weighted).",
        explanation=f"Missing critical keywords (sample): {missing_critical}.",
        evidence=({"snippet": f"Missing critical: {missing_critical}", "reason": "critical keyword gap"},),
    )


def _keyword_missing_critical(ctx: DocumentContext) -> RuleResult:
    missing = ctx.keyword_coverage.missing_by_tier.critical
    if not missing:
        return None
    return IssuePatch(
        evidence=({"snippet": f"Missing critical: {', '.join(missing[:8])}", "reason": "critical keywords not found"},),
    )


def _skills_only_keywords(ctx: DocumentContext) -> RuleResult:
    skills_only = ctx.keyword_coverage.skills_only
    if len(skills_only) < SKILLS_ONLY_MIN_COUNT:
        return None
    return IssuePatch(
        evidence=(
            {"snippet": f"Skills-only keywords: {', '.join(skills_only[:8])}", "reason": "skills-only keyword match"},
        ),
    )


def _no_keywords_in_experience(ctx: DocumentContext) -> RuleResult:
    coverage = ctx.keyword_coverage
    if coverage.total == 0 or coverage.found_in_experience_count > 0:
        return None
    return IssuePatch(
        evidence=top_bullet_evidence(_experience_bullets(ctx), 2, "experience bullet lacks role keywords"),
    )


def _keyword_stuffing_suspected(ctx: DocumentContext) -> RuleResult:
    coverage = ctx.keyword_coverage
    if not coverage.keyword_stuffing_suspected:
        return None
    return IssuePatch(
        evidence=(
            {
                "snippet": f"Skills chars: {coverage.skills_chars}, density: {coverage.keyword_density}",
                "reason": "high skills keyword density",
            },
        ),
    )


def create_rules() -> list[Rule]:
    """Return the ordered rule table. Rules are pure and never read each other's results."""
    return [
        Rule(
            id="missing_email",
            severity="critical",
            category="ats",
            score_delta=-8,
            title="Missing email address",
            message="No email address was detected in your CV.",
            why="ATS systems and recruiters rely on clear contact details for follow-up.",
            fix="Add a professional email near the top header.",
            evaluate=_missing_email,
        ),
        Rule(
            id="missing_phone",
            severity="warn",
            category="ats",
            score_delta=-3,
            title="Missing phone number",
            message="A phone number was not detected.",
            why="Some recruiters still prefer a direct call option.",
            fix="Include an international-format phone number in the header.",
            evaluate=_missing_phone,
        ),
        Rule(
            id="missing_linkedin",
            severity="warn",
            category="ats",
            score_delta=-3,
            title="Missing LinkedIn profile",
            message="No LinkedIn URL was detected.",
            why="For senior roles, LinkedIn helps validate seniority and history quickly.",
            fix="Add a LinkedIn profile URL in your contact block.",
            evaluate=_missing_linkedin,
        ),
        Rule(
            id="too_short_for_ats",
            severity="warn",
            category="ats",
            score_delta=-4,
            title="CV text is too short",
            message="The extracted CV text appears unusually short for ATS screening.",
            why="Very short CVs often miss role-relevant evidence.",
            fix="Expand experience bullets with concrete scope, impact, and technologies.",
            evaluate=_too_short_for_ats,
        ),
        Rule(
            id="long_line_readability",
            severity="warn",
            category="ats",
            score_delta=-3,
            title="Long lines hurt readability",
            message="Several long lines were detected.",
            why="Dense line wraps reduce recruiter readability and can hurt parsing.",
            fix="Split long bullets into concise statements.",
            evaluate=_long_line_readability,
        ),
        Rule(
            id="merged_bullets_suspected",
            severity="warn",
            category="ats",
            score_delta=-3,
            title="Merged bullets suspected after PDF extraction",
            message="Some lines appear to contain multiple bullets merged together.",
            why="ATS parsers may misread merged bullets and miss achievements.",
            fix="Re-export PDF and ensure bullets are line-broken; ATS may misparse merged lines.",
            evaluate=_merged_bullets_suspected,
        ),
        Rule(
            id="excessive_special_characters",
            severity="info",
            category="ats",
            score_delta=-2,
            title="High special-character density",
            message="The CV includes many non-standard symbols.",
            why="Some ATS parsers struggle with decorative symbols and uncommon glyphs.",
            fix="Prefer plain text bullets and standard punctuation.",
            evaluate=_excessive_special_characters,
        ),
        Rule(
            id="no_experience_section",
            severity="critical",
            category="structure",
            score_delta=-8,
            title="Missing Experience section",
            message="No dedicated Experience section heading was detected.",
            why="Experience is the main signal for senior-level hiring.",
            fix="Add a clear “Experience” heading with role-by-role bullets.",
            evaluate=_no_experience_section,
        ),
        Rule(
            id="missing_skills_section",
            severity="warn",
            category="structure",
            score_delta=-4,
            title="Missing Skills section",
            message="No dedicated Skills section was detected.",
            why="Skills sections improve ATS keyword extraction.",
            fix="Add a concise Skills section listing relevant frontend technologies.",
            evaluate=_missing_skills_section,
        ),
        Rule(
            id="implicit_skills_heading_suggestion",
            severity="info",
            category="structure",
            score_delta=0,
            title="Skills detected without explicit heading",
            message="Skills-like labeled blocks were found (e.g., Languages/Technologies).",
            why="Explicit SKILLS headings can improve ATS section parsing.",
            fix="Consider adding a clear “Skills” heading.",
            evaluate=_implicit_skills_heading,
        ),
        Rule(
            id="missing_education_section",
            severity="warn",
            category="structure",
            score_delta=-2,
            title="Missing Education section",
            message="No Education section heading was detected.",
            why="Many ATS profiles expect a basic education block.",
            fix="Add an Education section with degree, school, and graduation year.",
            evaluate=_missing_education_section,
        ),
        Rule(
            id="missing_summary_section",
            severity="info",
            category="structure",
            score_delta=-1,
            title="No summary statement",
            message="A profile/summary section was not detected.",
            why="A short summary can frame seniority and specialization quickly.",
            fix="Add a 2–3 line summary tailored to the target role.",
            evaluate=_missing_summary_section,
        ),
        Rule(
            id="implicit_summary_heading_suggestion",
            severity="info",
            category="structure",
            score_delta=0,
            title="Summary detected without explicit heading",
            message="An intro paragraph near the top looks like a summary/profile block.",
            why="Explicit SUMMARY/PROFILE headings improve ATS reliability.",
            fix="Consider adding a clear “Summary” or “Profile” heading.",
            evaluate=_implicit_summary_heading,
        ),
        Rule(
            id="no_projects_and_no_experience",
            severity="critical",
            category="structure",
            score_delta=-6,
            title="No projects or experience sections",
            message="Neither Projects nor Experience section was found.",
            why="Interviewers need proof of applied frontend engineering work.",
            fix="Add at least one of these sections with measurable outcomes.",
            evaluate=_no_projects_and_no_experience,
        ),
        Rule(
            id="low_bullet_count",
            severity="warn",
            category="structure",
            score_delta=-4,
            title="Low bullet count",
            message="Few bullet points were detected.",
            why="Bullet points make achievements easier to parse and compare.",
            fix="Use action-oriented bullets for each role/project.",
            evaluate=_low_bullet_count,
        ),
        Rule(
            id="low_numeric_density",
            severity="warn",
            category="impact",
            score_delta=-6,
            title="Low quantified impact",
            message="Few bullets include metrics.",
            why="Quantified impact strongly improves credibility for senior candidates.",
            fix="Add metrics such as %, latency, conversion, scale, or cost savings.",
            evaluate=_low_numeric_density,
        ),
        Rule(
            id="low_numeric_density_small_sample",
            severity="info",
            category="impact",
            score_delta=-1,
            title="Add more bullets before metric-density scoring",
            message="The CV has too few bullets for strong metric-density analysis.",
            why="Small bullet sets can produce noisy metric-density signals.",
            fix="First add more experience bullets, then include measurable outcomes.",
            evaluate=_low_numeric_density_small_sample,
        ),
        Rule(
            id="no_metrics_in_experience",
            severity="warn",
            category="impact",
            score_delta=-4,
            title="Experience bullets lack metrics",
            message="Experience bullets do not contain measurable outcomes.",
            why="Senior frontend impact should tie to business or performance results.",
            fix="Add at least one metric per major experience entry.",
            evaluate=_no_metrics_in_experience,
        ),
        Rule(
            id="too_many_responsible_for",
            severity="warn",
            category="impact",
            score_delta=-4,
            title="Overuse of “Responsible for”",
            message="Many bullets start with “Responsible for”.",
            why="This phrasing describes duties, not outcomes.",
            fix="Start bullets with strong action verbs and concrete results.",
            evaluate=_too_many_responsible_for,
        ),
        Rule(
            id="weak_action_verbs",
            severity="warn",
            category="impact",
            score_delta=-5,
            title="Weak action-verb usage",
            message="Many bullets do not start with strong action verbs.",
            why="Action-led bullets communicate ownership and leadership better.",
            fix="Rewrite bullets to start with verbs like Built, Led, Optimized, or Delivered.",
            evaluate=_weak_action_verbs,
        ),
        Rule(
            id="repeated_bullet_starts",
            severity="info",
            category="impact",
            score_delta=-2,
            title="Repetitive bullet openings",
            message="Many bullets begin with the same opening word.",
            why="Variation improves readability and keeps impact statements distinct.",
            fix="Vary sentence starts while keeping action + impact structure.",
            evaluate=_repeated_bullet_starts,
        ),
        Rule(
            id="no_outcome_language",
            severity="warn",
            category="impact",
            score_delta=-3,
            title="Missing outcome language",
            message="Experience bullets rarely describe outcomes.",
            why="Recruiters prioritize outcomes over task descriptions.",
            fix="Include outcomes such as improved, reduced, increased, shipped, or optimized.",
            evaluate=_no_outcome_language,
        ),
        Rule(
            id="no_scope_language",
            severity="info",
            category="impact",
            score_delta=-2,
            title="Missing scale or scope cues",
            message="Bullets do not indicate system or user scale.",
            why="Scope helps calibrate impact and seniority.",
            fix="Add scope context such as users, traffic, or team size.",
            evaluate=_no_scope_language,
        ),
        Rule(
            id="short_bullets_majority",
            severity="warn",
            category="impact",
            score_delta=-3,
            title="Most bullets are too short",
            message="Most bullets are very short and may omit context/impact.",
            why="Good bullets usually combine action, scope, and measurable result.",
            fix="Expand bullets to include technology, scope, and impact.",
            evaluate=_short_bullets_majority,
        ),
        Rule(
            id="insufficient_impact_evidence",
            severity="warn",
            category="impact",
            score_delta=-6,
            title="Not enough CV evidence to assess impact",
            message="The text does not look like a CV, so impact signals could not be found.",
            why="Impact scoring needs experience bullets, dates, and contact details to be meaningful.",
            fix="Upload or paste your actual CV with experience bullets and contact details.",
            evaluate=_insufficient_impact_evidence,
        ),
        Rule(
            id="inconsistent_date_format",
            severity="warn",
            category="consistency",
            score_delta=-4,
            title="Inconsistent date format",
            message="Detected mixed date formats.",
            why="Inconsistent timelines make experience harder to scan quickly.",
            fix="Use one date format consistently.",
            evaluate=_inconsistent_date_format,
        ),
        Rule(
            id="mixed_bullet_markers",
            severity="info",
            category="consistency",
            score_delta=-2,
            title="Mixed bullet markers",
            message="Different bullet marker styles are mixed.",
            why="Visual inconsistency can reduce polish and readability.",
            fix="Use a single bullet style throughout the document.",
            evaluate=_mixed_bullet_markers,
        ),
        Rule(
            id="duplicate_lines",
            severity="warn",
            category="consistency",
            score_delta=-3,
            title="Duplicate lines detected",
            message="Duplicate lines were detected.",
            why="Duplicate content can look careless and reduce signal quality.",
            fix="Remove repeated lines and keep each bullet unique.",
            evaluate=_duplicate_lines,
        ),
        Rule(
            id="excessive_caps_lines",
            severity="warn",
            category="consistency",
            score_delta=-2,
            title="Too many ALL-CAPS lines",
            message="Multiple lines are mostly uppercase.",
            why="Overuse of caps hurts readability and professional tone.",
            fix="Reserve uppercase for short headings only.",
            evaluate=_excessive_caps_lines,
        ),
        Rule(
            id="trailing_punctuation_inconsistent",
            severity="info",
            category="consistency",
            score_delta=-1,
            title="Inconsistent bullet punctuation",
            message="Some bullets end with punctuation while others do not.",
            why="Consistent punctuation improves document polish.",
            fix="Pick one style and apply it consistently.",
            evaluate=_trailing_punctuation_inconsistent,
        ),
        Rule(
            id="spacing_hygiene",
            severity="info",
            category="consistency",
            score_delta=-1,
            title="Spacing hygiene issues",
            message="Multiple spacing anomalies were detected.",
            why="Formatting noise can affect ATS parsing and human readability.",
            fix="Normalize spacing and remove repeated spaces/tabs.",
            evaluate=_spacing_hygiene,
        ),
        Rule(
            id="stack_contradiction",
            severity="warn",
            category="consistency",
            score_delta=-5,
            title="Potential stack contradiction",
            message="Conflicting stack acronyms/frameworks were detected in nearby lines.",
            why="Contradictory stack descriptions can confuse ATS and reviewers.",
            fix="Clarify architecture boundaries (frontend vs backend) or correct the acronym.",
            evaluate=_stack_contradiction,
        ),
        Rule(
            id="insufficient_consistency_signals",
            severity="info",
            category="consistency",
            score_delta=-3,
            title="Not enough CV structure to assess consistency",
            message="Dates, bullets, and sections are too sparse to judge formatting consistency.",
            why="Consistency checks compare repeated CV elements such as dates and bullets.",
            fix="Provide a complete CV with dated roles and bulleted achievements.",
            evaluate=_insufficient_consistency_signals,
        ),
        Rule(
            id="keyword_missing",
            severity="warn",
            category="keywords",
            score_delta=-6,
            title="Keyword coverage is low",
            message="Weighted keyword coverage is low.",
            why="Role-aligned terms improve ATS matching for interview screening.",
            fix="Add relevant role keywords naturally in experience and project bullets.",
            evaluate=_keyword_missing,
        ),
        Rule(
            id="keyword_missing_critical",
            severity="warn",
            category="keywords",
            score_delta=-4,
            title="Critical keywords missing",
            message="Some high-priority role keywords are missing.",
            why="Critical keywords are often used as first-pass ATS filters.",
            fix="Include critical terms where they were used in real work.",
            evaluate=_keyword_missing_critical,
        ),
        Rule(
            id="skills_only_keywords",
            severity="info",
            category="keywords",
            score_delta=-3,
            title="Keywords only in Skills section",
            message="Several keywords appear in Skills but not in Experience.",
            why="Keywords without supporting experience can look unsubstantiated.",
            fix="Move key terms into experience bullets with concrete outcomes.",
            evaluate=_skills_only_keywords,
        ),
        Rule(
            id="no_keywords_in_experience",
            severity="warn",
            category="keywords",
            score_delta=-4,
            title="No role keywords in Experience",
            message="Role keywords are not present in Experience bullets.",
            why="Experience carries the most weight during screening.",
            fix="Reference relevant tools/techniques in impact-oriented experience bullets.",
            evaluate=_no_keywords_in_experience,
        ),
        Rule(
            id="keyword_stuffing_suspected",
            severity="info",
            category="keywords",
            score_delta=-2,
            title="Possible keyword stuffing in Skills",
            message="Keyword density is unusually high in a short Skills block.",
            why="ATS and recruiters prefer natural keyword usage with evidence.",
            fix="Prefer adding keywords naturally in experience bullets.",
            evaluate=_keyword_stuffing_suspected,
        ),
    ]
