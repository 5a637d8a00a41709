from .confidence import EXTRACTION_SENSITIVE_ISSUE_IDS, attach_issue_confidence
from .engine import collect_issues, evaluate_rules, sort_issues
from .evidence import add_evidence, make_snippet, mask_email, mask_phone, mask_pii, normalize_evidence_entry
from .penalties import BULLET_DEPENDENT_ISSUE_IDS, apply_extraction_penalty_adjustments
from .rules import IssuePatch, Rule, create_rules
from .scorer import CATEGORY_LABELS, CATEGORY_MAX_SCORES, build_report, score_categories

__all__ = [
    "BULLET_DEPENDENT_ISSUE_IDS",
    "CATEGORY_LABELS",
    "CATEGORY_MAX_SCORES",
    "EXTRACTION_SENSITIVE_ISSUE_IDS",
    "IssuePatch",
    "Rule",
    "add_evidence",
    "apply_extraction_penalty_adjustments",
    "attach_issue_confidence",
    "build_report",
    "collect_issues",
    "create_rules",
    "evaluate_rules",
    "make_snippet",
    "mask_email",
    "mask_phone",
    "mask_pii",
    "normalize_evidence_entry",
    "score_categories",
    "sort_issues",
]
