from rehabpro.domain.ports import SettingsRepository
from rehabpro.domain.settings import CalculationSettings


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self) -> None:
        self._items: dict[int, tuple[str, CalculationSettings]] = {}
        self._next_id = 1

    def _owner(self, profile_id: int) -> str | None:
        rec = self._items.get(profile_id)
        return rec[0] if rec else None

    def save(
        self,
        user_id: str,
        settings: CalculationSettings,
        profile_id: int | None = None,
    ) -> int:
        if profile_id is None:
            profile_id = self._next_id
            self._next_id += 1
        elif self._owner(profile_id) != user_id:
            raise KeyError(f"settings profile {profile_id} not found for user {user_id}")

        # one default per user
        if settings.is_default:
            for pid, (owner, other) in list(self._items.items()):
                if owner == user_id and pid != profile_id and other.is_default:
                    self._items[pid] = (owner, other.model_copy(update={"is_default": False}))

        self._items[profile_id] = (user_id, settings)
        return profile_id

    def get(self, profile_id: int, user_id: str | None) -> CalculationSettings | None:
        rec = self._items.get(profile_id)
        if rec is None or rec[0] != user_id:
            return None
        return rec[1]

    def list_for_user(self, user_id: str) -> list[tuple[int, CalculationSettings]]:
        return [(pid, s) for pid, (owner, s) in sorted(self._items.items()) if owner == user_id]

    def get_default(self, user_id: str) -> CalculationSettings | None:
        for _, s in self.list_for_user(user_id):
            if s.is_default:
                return s
        return None

    def delete(self, profile_id: int, user_id: str) -> bool:
        if self._owner(profile_id) != user_id:
            return False
        del self._items[profile_id]
        return True
