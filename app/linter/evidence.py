from __future__ import annotations

import dataclasses
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Union

from app.core.numbers import clamp
from app.schemas.cv import EVIDENCE_SNIPPET_MAX_CHARS, Evidence, Issue

MAX_EVIDENCE_PER_ISSUE = 3
REASON_MAX_CHARS = 96

_EMAIL_RE = re.compile(
    r"\b([A-Z0-9._%+-])([A-Z0-9._%+-]*)([A-Z0-9._%+-])@([A-Z0-9.-]+\.[A-Z]{2,})\b",
    re.IGNORECASE,
)
_PHONE_RE = re.compile(r"\+?\d[\d().\s-]{5,}\d")
_DIGIT_RE = re.compile(r"\d")
_WHITESPACE_RE = re.compile(r"\s+")
_EVIDENCE_SOURCES = frozenset({"pdf", "docx", "raw_text"})

EvidenceInput = Union[str, Mapping[str, Any], Evidence, Any]


def make_snippet(text: str | None, max_len: int = EVIDENCE_SNIPPET_MAX_CHARS) -> str:
    compact = _WHITESPACE_RE.sub(" ", text or "").strip()
    if not compact:
        return ""
    if len(compact) <= max_len:
        return compact
    if max_len <= 3:
        return "." * max(1, max_len)
    return f"{compact[:max_len - 3].rstrip()}..."


def _mask_email_match(match: re.Match[str]) -> str:
    first, middle, last, domain = match.groups()
    masked_middle = "***" if middle else ""
    return f"{first}{masked_middle}{last}@{domain}"


def mask_email(source: str | None) -> str:
    return _EMAIL_RE.sub(_mask_email_match, source or "")


def _mask_phone_match(match: re.Match[str]) -> str:
    value = match.group(0)
    total_digits = len(_DIGIT_RE.findall(value))
    if total_digits <= 3:
        return value
    keep_after = total_digits - 3
    seen = 0

    def _replace(digit: re.Match[str]) -> str:
        nonlocal seen
        seen += 1
        return digit.group(0) if seen > keep_after else "*"

    return _DIGIT_RE.sub(_replace, value)


def mask_phone(source: str | None) -> str:
    return _PHONE_RE.sub(_mask_phone_match, source or "")


def mask_pii(snippet: str | None) -> str:
    return mask_phone(mask_email(snippet))


def _as_mapping(entry: Any) -> Mapping[str, Any] | None:
    if isinstance(entry, Mapping):
        return entry
    if isinstance(entry, Evidence):
        return entry.model_dump()
    if dataclasses.is_dataclass(entry) and not isinstance(entry, type):
        return dataclasses.asdict(entry)
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_confidence(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(clamp(float(value), 0.0, 1.0))


def normalize_evidence_entry(entry: EvidenceInput) -> Evidence | None:
    """Turn a raw evidence entry into a bounded, PII-masked ``Evidence`` or drop it."""
    if not entry:
        return None

    if isinstance(entry, str):
        snippet = make_snippet(mask_pii(entry))
        return Evidence(snippet=snippet) if snippet else None

    data = _as_mapping(entry)
    if data is None:
        return None

    raw_snippet = str(data.get("snippet") or data.get("text") or "").strip()
    snippet = make_snippet(mask_pii(raw_snippet))
    if not snippet:
        return None

    line = _as_int(data.get("line"))
    line_start = _as_int(data.get("line_start"))
    line_end = _as_int(data.get("line_end"))
    line_number = _as_int(data.get("line_number"))
    if not line_start and line_number is not None:
        line_start = line_number
        line_end = line_number

    reason = data.get("reason")
    details = data.get("details")
    source = data.get("source")
    return Evidence(
        snippet=snippet,
        line=line,
        line_start=line_start,
        line_end=line_end,
        reason=make_snippet(str(reason), REASON_MAX_CHARS) if reason else None,
        details=make_snippet(mask_pii(str(details))) if details else None,
        source=source if source in _EVIDENCE_SOURCES else None,
        confidence=_as_confidence(data.get("confidence")),
    )


def normalize_evidence(entries: EvidenceInput | Iterable[EvidenceInput] | None) -> list[Evidence]:
    if entries is None:
        return []
    if isinstance(entries, (str, Mapping, Evidence)) or dataclasses.is_dataclass(entries):
        items: Iterable[EvidenceInput] = [entries]
    else:
        items = entries
    normalized: list[Evidence] = []
    for entry in items:
        evidence = normalize_evidence_entry(entry)
        if evidence is None:
            continue
        normalized.append(evidence)
        if len(normalized) >= MAX_EVIDENCE_PER_ISSUE:
            break
    return normalized


def add_evidence(issue: Issue, entries: EvidenceInput | Iterable[EvidenceInput] | None) -> Issue:
    """Replace the issue's evidence with the normalized entries, keeping it unchanged when none survive."""
    normalized = normalize_evidence(entries)
    if not normalized:
        return issue
    return issue.model_copy(update={"evidence": normalized})
