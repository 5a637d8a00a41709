from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from app.features.cv_context import DocumentContext
from app.schemas.cv import Issue

from .evidence import EvidenceInput, add_evidence
from .rules import IssuePatch, Rule, first_date_evidence, top_line_evidence

logger = logging.getLogger(__name__)

SEVERITY_ORDER: dict[str, int] = {"critical": 0, "warn": 1, "info": 2}
_PATCH_FIELDS = ("severity", "score_delta", "title", "message", "explanation", "why", "fix")


def default_issue_evidence(ctx: DocumentContext, issue_id: str, category: str) -> list[EvidenceInput]:
    if issue_id == "merged_bullets_suspected":
        return list(ctx.merged_bullets.evidence[:2])
    if issue_id == "stack_contradiction":
        return list(ctx.stack_contradictions[:2])
    if issue_id == "inconsistent_date_format":
        return list(first_date_evidence(ctx)[:2])
    if category == "impact" and ctx.bullet_lines:
        return [
            {
                "line_start": bullet.line_number,
                "line_end": bullet.line_number,
                "snippet": bullet.line,
                "reason": "impact bullet sample",
            }
            for bullet in ctx.bullet_lines[:2]
        ]
    return list(top_line_evidence(ctx, 2, "source line sample"))


def issue_from_rule(rule: Rule, patch: IssuePatch | None, ctx: DocumentContext) -> Issue:
    fields: dict[str, Any] = {name: getattr(rule, name) for name in _PATCH_FIELDS if name != "explanation"}
    fields["explanation"] = None
    if patch is not None:
        for name in _PATCH_FIELDS:
            value = getattr(patch, name)
            if value is not None:
                fields[name] = value

    issue = Issue(
        id=rule.id,
        category=rule.category,
        severity=fields["severity"],
        score_delta=float(fields["score_delta"]),
        title=fields["title"],
        message=fields["message"],
        explanation=fields["explanation"] or fields["message"],
        why=fields["why"],
        fix=fields["fix"],
    )
    issue = add_evidence(issue, patch.evidence if patch is not None else ())
    if issue.evidence:
        return issue
    return add_evidence(issue, default_issue_evidence(ctx, issue.id, issue.category))


def evaluate_rules(ctx: DocumentContext, rules: Iterable[Rule]) -> list[Issue]:
    """Run every rule against the context; a rule that raises is logged and treated as not firing."""
    issues: list[Issue] = []
    for rule in rules:
        try:
            result = rule.evaluate(ctx)
        except Exception:
            logger.warning("cv_rule_failed rule=%s", rule.id, exc_info=True)
            continue

        if result is None:
            continue
        if isinstance(result, IssuePatch):
            issues.append(issue_from_rule(rule, result, ctx))
        else:
            logger.warning("cv_rule_unexpected_result rule=%s type=%s", rule.id, type(result).__name__)
    return issues


def low_extraction_quality_issue(ctx: DocumentContext) -> Issue:
    issue = Issue(
        id="low_extraction_quality",
        severity="info",
        category="ats",
        score_delta=0,
        title="PDF extraction quality is low; some scores may be undercounted",
        message="Bullet and line parsing quality is low, so some impact-related checks are softened.",
        explanation="Extraction artifacts can affect bullet parsing, outcome detection, and keyword signals.",
        why="Score accuracy depends on reliable text extraction.",
        fix="Try re-exporting PDF (avoid columns/text boxes), or upload DOCX for best results.",
    )
    evidence: list[EvidenceInput] = list(ctx.merged_bullets.evidence[:1])
    if not evidence:
        evidence = list(top_line_evidence(ctx, 1, "source line sample"))
    return add_evidence(issue, evidence)


def sort_issues(issues: Sequence[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda issue: (SEVERITY_ORDER.get(issue.severity, 999), issue.id))


def ensure_issue_evidence(issues: Sequence[Issue], ctx: DocumentContext) -> list[Issue]:
    ensured: list[Issue] = []
    for issue in issues:
        if issue.severity in ("warn", "info") and not issue.evidence:
            issue = add_evidence(issue, default_issue_evidence(ctx, issue.id, issue.category))
        ensured.append(issue)
    return ensured


def collect_issues(ctx: DocumentContext, rules: Iterable[Rule]) -> list[Issue]:
    """Evaluate rules, add the extraction-quality notice, then sort and backfill evidence."""
    issues = evaluate_rules(ctx, rules)
    if ctx.extraction_quality.level == "low":
        issues.append(low_extraction_quality_issue(ctx))
    return ensure_issue_evidence(sort_issues(issues), ctx)
