from __future__ import annotations

import re
from dataclasses import dataclass

SECTION_NAMES: tuple[str, ...] = ("experience", "education", "skills", "projects", "summary")
MAX_HEADING_CHARS = 72

SECTION_HEADING_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "experience": (
        re.compile(r"^(professional\s+)?experience:?$", re.IGNORECASE),
        re.compile(r"^work(\s+experience)?[:]?$", re.IGNORECASE),
        re.compile(r"^employment(\s+history)?[:]?$", re.IGNORECASE),
        re.compile(r"^career(\s+history)?[:]?$", re.IGNORECASE),
    ),
    "education": (
        re.compile(r"^education:?$", re.IGNORECASE),
        re.compile(r"^academic(\s+background)?[:]?$", re.IGNORECASE),
        re.compile(r"^certifications?[:]?$", re.IGNORECASE),
    ),
    "skills": (
        re.compile(r"^skills:?$", re.IGNORECASE),
        re.compile(r"^technical skills:?$", re.IGNORECASE),
        re.compile(r"^core skills:?$", re.IGNORECASE),
        re.compile(r"^tech stack:?$", re.IGNORECASE),
        re.compile(r"^technologies:?$", re.IGNORECASE),
        re.compile(r"^core competencies:?$", re.IGNORECASE),
    ),
    "projects": (
        re.compile(r"^projects?[:]?$", re.IGNORECASE),
        re.compile(r"^selected projects?[:]?$", re.IGNORECASE),
        re.compile(r"^project highlights:?$", re.IGNORECASE),
    ),
    "summary": (
        re.compile(r"^summary:?$", re.IGNORECASE),
        re.compile(r"^profile:?$", re.IGNORECASE),
        re.compile(r"^about:?$", re.IGNORECASE),
        re.compile(r"^professional summary:?$", re.IGNORECASE),
        re.compile(r"^objective:?$", re.IGNORECASE),
    ),
}

SKILLS_ALIAS_MAX_RANK = 20
SUMMARY_ALIAS_MAX_RANK = 12
SKILLS_LABEL_ALIAS_RE = re.compile(r"^(languages?|technologies|frameworks?|tools?)\s*:\s*\S+", re.IGNORECASE)
CONTACT_LINE_RE = re.compile(r"\b(?:@|linkedin\.com|github\.com|https?://|\+?\d[\d().\s-]{6,})\b", re.IGNORECASE)

ROLE_HINT_RE = re.compile(
    r"\b(front[-\s]?end|frontend|ui|javascript|typescript|angular|react|vue|engineer|developer|architect)\b",
    re.IGNORECASE,
)
SPECIALIZATION_HINT_RE = re.compile(
    r"\b(performance|accessibility|scalab(?:le|ility)|architecture|design systems?|state management|testing|web)\b",
    re.IGNORECASE,
)
YEARS_HINT_RE = re.compile(r"\b\d+\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
SENIORITY_HINT_RE = re.compile(r"\b(senior|lead|principal|staff)\b", re.IGNORECASE)
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

ACTION_VERBS = frozenset(
    {
        "built", "implemented", "designed", "developed", "created", "led", "optimized", "improved",
        "reduced", "increased", "launched", "delivered", "automated", "integrated", "migrated",
        "refactored", "architected", "deployed", "scaled", "secured", "enhanced", "debugged",
        "streamlined", "orchestrated", "drove", "spearheaded", "initiated", "boosted", "cut",
        "owned", "collaborated", "mentored", "introduced", "monitored", "analyzed", "standardized",
        "shipped", "stabilized", "prevented", "accelerated",
    }
)

OUTCOME_TERMS: tuple[str, ...] = (
    "improved", "reduced", "increased", "accelerated", "shipped", "delivered", "stabilized",
    "prevented", "automated", "optimized", "cut", "boosted", "grew", "led", "owned", "migrated",
    "standardized", "streamlined", "refactored",
)
SCOPE_TERMS: tuple[str, ...] = (
    "users", "customers", "requests", "events", "sessions", "components", "features",
    "platform", "team", "services", "applications", "traffic", "revenue", "tenants",
)
OUTCOME_RE = re.compile(r"\b(?:" + "|".join(OUTCOME_TERMS) + r")\b", re.IGNORECASE)
SCOPE_RE = re.compile(r"\b(?:" + "|".join(SCOPE_TERMS) + r")\b", re.IGNORECASE)
RESPONSIBLE_FOR_RE = re.compile(r"^responsible\s+for\b", re.IGNORECASE)
TRAILING_PUNCTUATION_RE = re.compile(r"[.!?]$")

METRIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:^|\D)\d+(?:\.\d+)?\s*%"),
    re.compile(r"\b\d+(?:\.\d+)?\s*(?:ms|s|sec|secs|seconds|min|mins|minutes)\b", re.IGNORECASE),
    re.compile(r"[$€£₺]\s?\d+(?:\.\d+)?\s*(?:k|m|b)?\b", re.IGNORECASE),
    re.compile(r"\b\d+(?:\.\d+)?\s*(?:k|m|b)\b", re.IGNORECASE),
    re.compile(r"\b\d+(?:\.\d+)?x\b", re.IGNORECASE),
    re.compile(r"\b(?:reduced|increased|cut|improved|boosted|grew)\s+by\s+\d+(?:\.\d+)?%?", re.IGNORECASE),
    re.compile(
        r"\bfrom\s+\d+(?:\.\d+)?\s*(?:ms|s|sec|secs|seconds|%|k|m|b)?\s+to\s+\d+(?:\.\d+)?\s*(?:ms|s|sec|secs|seconds|%|k|m|b)?\b",
        re.IGNORECASE,
    ),
)
DIGIT_RE = re.compile(r"\d")

BULLET_SYMBOLS = "•●◦▪‣"
ASCII_MARKERS = frozenset({"-", "*"})
DATE_RANGE_START_RE = re.compile(r"\b(?:19|20)\d{2}\s*$")
DATE_RANGE_END_RE = re.compile(
    r"^(?:present|current|now|today|\d|(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+(?:19|20)\d{2})",
    re.IGNORECASE,
)
BULLET_START_RE = re.compile(r"^([•●◦▪‣\-*]|\d+[.)])\s+(.+)$")
BULLET_TOKEN_RE = re.compile(r"(?:^|\s)([•●◦▪‣]|\d+[.)]|[-*])\s+")
MIDLINE_BULLET_SYMBOL_RE = re.compile(r".+\s[•●◦▪‣]\s+\S")
MIDLINE_BULLET_RE = re.compile(r"\S\s+[•●◦▪‣]\s+\S")
NUMBERED_MARKER_RE = re.compile(r"\d+[.)]")

EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[\s.-]?)?(?:\(?\d{2,4}\)?[\s.-]?)?\d{3}[\s.-]?\d{4}\b")
LINKEDIN_RE = re.compile(r"\blinkedin\.com/[^\s)]+", re.IGNORECASE)

DATE_FORMAT_ORDER: tuple[str, ...] = ("MMM YYYY", "Month YYYY", "MM/YYYY", "YYYY")
DATE_FORMAT_RECOMMENDED = "MMM YYYY"
# "May" is spelled the same in both month styles, so it only counts as MMM YYYY.
DATE_PATTERNS: dict[str, re.Pattern[str]] = {
    "MMM YYYY": re.compile(
        r"\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[\s.-]+(?:19|20)\d{2}\b",
        re.IGNORECASE,
    ),
    "Month YYYY": re.compile(
        r"\b(?:January|February|March|April|June|July|August|September|October|November|December)[\s.-]+(?:19|20)\d{2}\b",
        re.IGNORECASE,
    ),
    "MM/YYYY": re.compile(r"\b(?:0?[1-9]|1[0-2])[/-](?:19|20)\d{2}\b"),
    "YYYY": re.compile(r"\b(?:19|20)\d{2}\b"),
}
SPECIFIC_DATE_FORMATS = frozenset({"MMM YYYY", "Month YYYY", "MM/YYYY"})

LONG_LINE_CHARS = 130
DUPLICATE_MIN_CHARS = 16
CAPS_MIN_LETTERS = 10
CAPS_UPPER_RATIO = 0.85
SHORT_BULLET_WORDS = 8
SPECIAL_CHAR_RE = re.compile(r"[^\w\s.,;:()\-+/%$€£₺]")
NON_ALPHA_RE = re.compile(r"[^A-Za-z]")
NON_UPPER_RE = re.compile(r"[^A-Z]")


@dataclass(frozen=True)
class StackRule:
    id: str
    left_label: str
    right_label: str
    left: re.Pattern[str]
    right: re.Pattern[str]


STACK_WINDOW_LINES = 8
STACK_RULES: tuple[StackRule, ...] = (
    StackRule(
        id="mern_vs_angular",
        left_label="MERN",
        right_label="Angular",
        left=re.compile(r"\bmern\b", re.IGNORECASE),
        right=re.compile(r"\bangular\b", re.IGNORECASE),
    ),
    StackRule(
        id="mean_vs_react",
        left_label="MEAN",
        right_label="React",
        left=re.compile(r"\bmean\b", re.IGNORECASE),
        right=re.compile(r"\breact\b", re.IGNORECASE),
    ),
    StackRule(
        id="next_vs_angular_universal",
        left_label="Next.js",
        right_label="Angular Universal",
        left=re.compile(r"\bnext(?:\.js)?\b", re.IGNORECASE),
        right=re.compile(r"\bangular\s+universal\b", re.IGNORECASE),
    ),
)
STACK_EXCEPTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"angular\s+frontend\s*(?:and|\+)\s*node\s+backend", re.IGNORECASE),
    re.compile(r"react(?:\s+app)?\s+(?:embedded|inside)\s+in\s+angular\s+shell", re.IGNORECASE),
    re.compile(r"migrated\s+from\s+react\s+to\s+angular", re.IGNORECASE),
    re.compile(r"\bfrontend\b[\s\w,-]{0,30}\bbackend\b", re.IGNORECASE),
    re.compile(r"\bbackend\b[\s\w,-]{0,30}\bfrontend\b", re.IGNORECASE),
)


@dataclass(frozen=True)
class BulletToken:
    token: str
    offset: int
    content_start: int


def detect_section_heading(line: str) -> str | None:
    trimmed = (line or "").strip()
    if not trimmed or len(trimmed) > MAX_HEADING_CHARS:
        return None
    for section, patterns in SECTION_HEADING_PATTERNS.items():
        if any(pattern.search(trimmed) for pattern in patterns):
            return section
    return None


def _is_date_range_dash(line: str, token: str, offset: int, content_start: int) -> bool:
    if token != "-" or offset == 0:
        return False
    return bool(DATE_RANGE_START_RE.search(line[:offset]) and DATE_RANGE_END_RE.match(line[content_start:]))


def iter_bullet_tokens(line: str) -> list[BulletToken]:
    """Find every bullet marker on a line, at the start or mid-line.

    The only exemption is a dash joining two dates, as in "Jan 2021 - Present"
    or "03/2019 - 12/2020".
    """
    text = line or ""
    tokens: list[BulletToken] = []
    for match in BULLET_TOKEN_RE.finditer(text):
        token = match.group(1)
        offset = match.start(1)
        if _is_date_range_dash(text, token, offset, match.end()):
            continue
        tokens.append(BulletToken(token=token, offset=offset, content_start=match.end()))
    return tokens


def normalize_bullet_marker(raw_token: str) -> str:
    if NUMBERED_MARKER_RE.search(raw_token):
        return "numbered"
    if raw_token in ASCII_MARKERS or raw_token in BULLET_SYMBOLS:
        return raw_token
    return "symbol"


def detect_date_formats(line: str) -> list[str]:
    used = [fmt for fmt in DATE_FORMAT_ORDER if DATE_PATTERNS[fmt].search(line or "")]
    if any(fmt in SPECIFIC_DATE_FORMATS for fmt in used):
        return [fmt for fmt in used if fmt != "YYYY"]
    return used


def is_caps_heavy_line(line: str) -> bool:
    letters = NON_ALPHA_RE.sub("", line or "")
    if len(letters) < CAPS_MIN_LETTERS:
        return False
    upper = NON_UPPER_RE.sub("", letters)
    return len(upper) / len(letters) > CAPS_UPPER_RATIO


def has_metric_token(content: str) -> bool:
    return any(pattern.search(content) for pattern in METRIC_PATTERNS) or bool(DIGIT_RE.search(content))
