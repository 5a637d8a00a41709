from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.config import settings

Severity = Literal["critical", "warn", "info"]
Category = Literal["ats", "structure", "impact", "consistency", "keywords"]
ExtractionLevel = Literal["high", "medium", "low"]
ExtractionStatus = Literal["ok", "failed", "low_text", "text_input"]
EvidenceSource = Literal["pdf", "docx", "raw_text"]
InputSource = Literal["text", "file"]
KeywordTierName = Literal["critical", "strong", "nice"]

EVIDENCE_SNIPPET_MAX_CHARS = 140


class CvModel(BaseModel):
    """Report models serialize with camelCase keys and accept either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Evidence(CvModel):
    snippet: str = Field(max_length=EVIDENCE_SNIPPET_MAX_CHARS)
    line: int | None = None
    line_start: int | None = None
    line_end: int | None = None
    reason: str | None = None
    details: str | None = None
    source: EvidenceSource | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class Issue(CvModel):
    id: str
    severity: Severity
    category: Category
    score_delta: float = Field(le=0.0)
    applied_score_delta: float | None = None
    title: str
    message: str
    explanation: str
    why: str
    fix: str
    evidence: list[Evidence] = Field(default_factory=list, max_length=3)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


class ExtractionSignals(CvModel):
    merged_bullet_lines: int = 0
    midline_bullet_tokens: int = 0
    avg_line_length: float = 0.0
    very_long_lines: int = 0
    very_short_lines: int = 0
    suspicious_hyphen_wraps: int = 0


class ExtractionQuality(CvModel):
    score: float = Field(ge=0.0, le=1.0)
    level: ExtractionLevel
    signals: ExtractionSignals = Field(default_factory=ExtractionSignals)
    notes: list[str] = Field(default_factory=list)


class MissingByTier(CvModel):
    critical: list[str] = Field(default_factory=list)
    strong: list[str] = Field(default_factory=list)
    nice: list[str] = Field(default_factory=list)


class MatchedKeyword(CvModel):
    key: str
    label: str
    tier: KeywordTierName
    in_experience: bool
    in_skills: bool
    found_weight: float


class KeywordCoverageReport(CvModel):
    role: str
    role_label: str
    total: int
    critical_total: int
    strong_total: int
    found: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    missing_critical: list[str] = Field(default_factory=list)
    missing_strong: list[str] = Field(default_factory=list)
    missing_by_tier: MissingByTier = Field(default_factory=MissingByTier)
    skills_only: list[str] = Field(default_factory=list)
    found_in_experience_count: int = 0
    found_in_skills_count: int = 0
    coverage_pct: int = Field(default=0, ge=0, le=100)
    weighted_coverage_pct: int = Field(default=0, ge=0, le=100)
    keyword_stuffing_suspected: bool = False


class KeywordCoverageResult(KeywordCoverageReport):
    weighted_found: float = 0.0
    weighted_total: int = 0
    skills_chars: int = 0
    keyword_density: float = 0.0
    matched_keywords: list[MatchedKeyword] = Field(default_factory=list)

    def to_report(self) -> KeywordCoverageReport:
        return KeywordCoverageReport.model_validate(
            self.model_dump(include=set(KeywordCoverageReport.model_fields))
        )


class CategoryScores(CvModel):
    overall: int = Field(ge=0)
    ats: int = Field(ge=0)
    structure: int = Field(ge=0)
    impact: int = Field(ge=0)
    consistency: int = Field(ge=0)
    keywords: int = Field(ge=0)


class BreakdownItem(CvModel):
    id: Category
    label: str
    score: int
    max: int


class ReportDebug(CvModel):
    extraction_quality: ExtractionQuality
    missing_keywords: MissingByTier
    penalty_weights: dict[str, float] = Field(default_factory=dict)
    keyword_experience_dependent_share: float


class CvReport(CvModel):
    scores: CategoryScores
    breakdown: list[BreakdownItem] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)
    keyword_coverage: KeywordCoverageReport
    debug: ReportDebug


class CvAnalyzeMeta(CvModel):
    source: InputSource
    extraction_status: ExtractionStatus
    text_length: int = Field(ge=0)
    fallback_recommended: bool = False
    role: str


class CvAnalyzeResponse(CvReport):
    text_preview: str = ""
    meta: CvAnalyzeMeta


class CvAnalyzeRequest(CvModel):
    text: str = Field(default="", max_length=settings.cv_max_text_chars)
    target_role: str | None = Field(default=None, max_length=100)
    extraction_status: ExtractionStatus = "text_input"
    source: InputSource = "text"
