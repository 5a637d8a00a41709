from __future__ import annotations

from functools import lru_cache

from app.core.config import settings

from .local_keyword_packs import LocalKeywordPacks
from .models import RolePack
from .provider import KeywordPackProvider

FALLBACK_ROLE_ID = "senior_frontend_angular"

ROLE_ALIASES: dict[str, str] = {
    "angular": "senior_frontend_angular",
    "react": "senior_frontend_react",
    "general": "senior_frontend_general",
    "general_fe": "senior_frontend_general",
    "frontend": "senior_frontend_general",
}


@lru_cache(maxsize=1)
def get_default_keyword_pack_provider() -> KeywordPackProvider:
    return LocalKeywordPacks()


def default_role_id(provider: KeywordPackProvider | None = None) -> str:
    packs = provider or get_default_keyword_pack_provider()
    configured = ROLE_ALIASES.get(settings.cv_default_role, settings.cv_default_role)
    if packs.get_pack(configured) is not None:
        return configured
    return FALLBACK_ROLE_ID


def normalize_role_id(raw_role: str | None, provider: KeywordPackProvider | None = None) -> str:
    packs = provider or get_default_keyword_pack_provider()
    raw = str(raw_role or "").strip().lower()
    if not raw:
        return default_role_id(packs)
    if raw in ROLE_ALIASES:
        return ROLE_ALIASES[raw]
    if packs.get_pack(raw) is not None:
        return raw
    return default_role_id(packs)


def get_role_pack(raw_role: str | None, provider: KeywordPackProvider | None = None) -> RolePack:
    packs = provider or get_default_keyword_pack_provider()
    role_id = normalize_role_id(raw_role, packs)
    pack = packs.get_pack(role_id) or packs.get_pack(FALLBACK_ROLE_ID)
    if pack is None:
        raise RuntimeError(f"No keyword pack registered for role '{role_id}'.")
    return pack
