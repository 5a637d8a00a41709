from __future__ import annotations

import re

_NBSP_RE = re.compile("\u00a0")
_LINE_ENDING_RE = re.compile(r"\r\n?")
_INLINE_SPACE_RE = re.compile(r"[ \t]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_SPACING_ISSUE_RE = re.compile(r" {2,}|\t")
_LEADING_NON_ALPHA_RE = re.compile(r"^[^A-Za-z]+")
_NON_LOWER_ALPHA_RE = re.compile(r"[^a-z]")


def normalize_cv_text(raw_text: str | None) -> str:
    text = str(raw_text or "")
    # Lone surrogates from broken PDF extraction cannot be encoded; they become "?".
    text = text.encode("utf-8", "replace").decode("utf-8")
    text = _NBSP_RE.sub(" ", text)
    text = _LINE_ENDING_RE.sub("\n", text)
    text = _INLINE_SPACE_RE.sub(" ", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def word_count(line: str | None) -> int:
    return len((line or "").split())


def first_word(value: str | None) -> str:
    stripped = _LEADING_NON_ALPHA_RE.sub("", (value or "").strip())
    parts = stripped.split()
    if not parts:
        return ""
    return _NON_LOWER_ALPHA_RE.sub("", parts[0].lower())


def count_spacing_issues(raw_text: str | None) -> int:
    return len(_SPACING_ISSUE_RE.findall(raw_text or ""))
