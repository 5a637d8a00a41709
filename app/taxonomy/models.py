from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

KeywordTier = Literal["critical", "strong", "nice"]
KEYWORD_TIERS: tuple[KeywordTier, ...] = ("critical", "strong", "nice")


@dataclass(frozen=True)
class KeywordDefinition:
    key: str
    label: str
    tier: KeywordTier
    patterns: tuple[re.Pattern[str], ...]
    synonyms: tuple[re.Pattern[str], ...] = ()

    @property
    def matchers(self) -> tuple[re.Pattern[str], ...]:
        return self.patterns + self.synonyms

    @property
    def display_label(self) -> str:
        return (self.label or self.key).lower()


@dataclass(frozen=True)
class RolePack:
    id: str
    label: str
    keywords: tuple[KeywordDefinition, ...] = field(default_factory=tuple)

    @property
    def keyword_tiers(self) -> dict[str, list[str]]:
        tiers: dict[str, list[str]] = {tier: [] for tier in KEYWORD_TIERS}
        for keyword in self.keywords:
            tiers[keyword.tier].append(keyword.label)
        return tiers
