from __future__ import annotations

from rehabpro.adapters.logging_utils import get_logger
from rehabpro.domain.ports import SettingsRepository
from rehabpro.domain.settings import DEFAULT_SETTINGS, CalculationSettings

logger = get_logger(__name__)


def resolve_settings(
    repo: SettingsRepository | None,
    user_id: str | None,
    profile_id: int | None = None,
) -> CalculationSettings:
    """
    Pick the profile a report should run under:
      1. the explicitly requested profile (must belong to user_id)
      2. the user's default profile
      3. the built-in defaults

    Callers resolve once and hand the value to the engine.
    """
    if repo is not None and profile_id is not None:
        found = repo.get(profile_id, user_id)
        if found is None:
            raise LookupError(f"settings profile {profile_id} not found for user {user_id}")
        return found

    if repo is not None and user_id:
        default = repo.get_default(user_id)
        if default is not None:
            return default
        logger.info(
            "no default settings profile; using built-in defaults",
            extra={"context": {"user_id": user_id}},
        )

    return DEFAULT_SETTINGS


def save_profile(
    repo: SettingsRepository,
    user_id: str,
    settings: CalculationSettings,
    profile_id: int | None = None,
) -> int:
    pid = repo.save(user_id, settings, profile_id=profile_id)
    logger.info(
        "settings profile saved",
        extra={"context": {
            "user_id": user_id,
            "profile_id": pid,
            "name": settings.name,
            "is_default": settings.is_default,
        }},
    )
    return pid


def delete_profile(repo: SettingsRepository, user_id: str, profile_id: int) -> bool:
    deleted = repo.delete(profile_id, user_id)
    if not deleted:
        logger.warning(
            "settings profile not deleted: missing or owned by another user",
            extra={"context": {"user_id": user_id, "profile_id": profile_id}},
        )
    return deleted
