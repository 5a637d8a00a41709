from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .models import KEYWORD_TIERS, KeywordDefinition, RolePack
from .provider import KeywordPackProvider


class LocalKeywordPacks(KeywordPackProvider):
    def __init__(self, packs_path: str | Path | None = None) -> None:
        path = Path(packs_path) if packs_path else Path(__file__).with_name("keyword_packs.json")
        self._packs = self._load_packs(path)

    @staticmethod
    def _compile(sources: Any, *, role_id: str, key: str) -> tuple[re.Pattern[str], ...]:
        compiled: list[re.Pattern[str]] = []
        for source in sources or []:
            try:
                compiled.append(re.compile(str(source), re.IGNORECASE))
            except re.error as exc:
                raise RuntimeError(
                    f"Invalid keyword pattern '{source}' for '{role_id}.{key}': {exc}"
                ) from exc
        return tuple(compiled)

    @classmethod
    def _load_packs(cls, path: Path) -> dict[str, RolePack]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise RuntimeError(f"Invalid keyword packs file '{path}': expected a top-level mapping.")

        packs: dict[str, RolePack] = {}
        for role_id, payload in raw.items():
            normalized_id = str(role_id).strip().lower()
            keywords: list[KeywordDefinition] = []
            for item in payload.get("keywords") or []:
                key = str(item["key"]).strip()
                tier = str(item.get("tier", "nice")).strip().lower()
                if tier not in KEYWORD_TIERS:
                    raise RuntimeError(f"Unknown keyword tier '{tier}' for '{normalized_id}.{key}'.")
                keywords.append(
                    KeywordDefinition(
                        key=key,
                        label=str(item.get("label") or key),
                        tier=tier,  # type: ignore[arg-type]
                        patterns=cls._compile(item.get("patterns"), role_id=normalized_id, key=key),
                        synonyms=cls._compile(item.get("synonyms"), role_id=normalized_id, key=key),
                    )
                )
            packs[normalized_id] = RolePack(
                id=normalized_id,
                label=str(payload.get("label") or normalized_id),
                keywords=tuple(keywords),
            )
        return packs

    def role_ids(self) -> tuple[str, ...]:
        return tuple(self._packs.keys())

    def get_pack(self, role_id: str) -> RolePack | None:
        return self._packs.get(role_id)
