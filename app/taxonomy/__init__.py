from .keyword_packs import (
    FALLBACK_ROLE_ID,
    ROLE_ALIASES,
    get_default_keyword_pack_provider,
    get_role_pack,
    normalize_role_id,
)
from .local_keyword_packs import LocalKeywordPacks
from .models import KEYWORD_TIERS, KeywordDefinition, RolePack
from .provider import KeywordPackProvider

__all__ = [
    "FALLBACK_ROLE_ID",
    "KEYWORD_TIERS",
    "ROLE_ALIASES",
    "KeywordDefinition",
    "KeywordPackProvider",
    "LocalKeywordPacks",
    "RolePack",
    "get_default_keyword_pack_provider",
    "get_role_pack",
    "normalize_role_id",
]
