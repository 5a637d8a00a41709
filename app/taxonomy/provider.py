from __future__ import annotations

from typing import Protocol

from .models import RolePack


class KeywordPackProvider(Protocol):
    def role_ids(self) -> tuple[str, ...]:
        """Return known role identifiers in registry order."""

    def get_pack(self, role_id: str) -> RolePack | None:
        """Return the keyword pack for an exact role id, or None."""
