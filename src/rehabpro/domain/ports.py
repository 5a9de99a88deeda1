# src/rehabpro/domain/ports.py
from __future__ import annotations

from typing import Protocol

from rehabpro.domain.settings import CalculationSettings


# ----------------------------
# Settings profile storage
# ----------------------------

class SettingsRepository(Protocol):
    """
    Profiles belong to one user. Lookups, updates and deletes by id only
    see rows owned by the given user; anything else reads as missing.
    """

    def save(
        self,
        user_id: str,
        settings: CalculationSettings,
        profile_id: int | None = None,
    ) -> int:
        ...

    def get(self, profile_id: int, user_id: str | None) -> CalculationSettings | None:
        ...

    def list_for_user(self, user_id: str) -> list[tuple[int, CalculationSettings]]:
        ...

    def get_default(self, user_id: str) -> CalculationSettings | None:
        ...

    def delete(self, profile_id: int, user_id: str) -> bool:
        ...
