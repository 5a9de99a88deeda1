# src/rehabpro/adapters/sql_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select

from rehabpro.domain.settings import CalculationSettings, settings_from_row, settings_to_row


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SettingsProfileRow(SQLModel, table=True):
    __tablename__ = "calculation_settings"

    id: int | None = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)

    name: str = "Default"
    is_default: bool = Field(default=False, index=True)

    # flat settings-table layout (mao_method, contingency_tiers, ...)
    settings: dict[str, Any] = Field(sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)


class SqlSettingsRepository:
    def __init__(self, uri: str = "sqlite:///rehabpro.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    @staticmethod
    def _owned(session: Session, profile_id: int, user_id: str | None) -> SettingsProfileRow | None:
        row = session.get(SettingsProfileRow, profile_id)
        if row is None or row.user_id != user_id:
            return None
        return row

    def save(
        self,
        user_id: str,
        settings: CalculationSettings,
        profile_id: int | None = None,
    ) -> int:
        row_data = settings_to_row(settings)
        with Session(self.engine) as session:
            if profile_id is not None:
                row = self._owned(session, profile_id, user_id)
                if row is None:
                    raise KeyError(f"settings profile {profile_id} not found for user {user_id}")
                row.name = settings.name
                row.is_default = settings.is_default
                row.settings = row_data
                row.updated_at = _utcnow()
            else:
                row = SettingsProfileRow(
                    user_id=user_id,
                    name=settings.name,
                    is_default=settings.is_default,
                    settings=row_data,
                )
                session.add(row)
            session.flush()

            # one default per user
            if settings.is_default:
                stmt = select(SettingsProfileRow).where(
                    SettingsProfileRow.user_id == user_id,
                    SettingsProfileRow.is_default == True,  # noqa: E712
                    SettingsProfileRow.id != row.id,
                )
                for other in session.exec(stmt):
                    other.is_default = False
                    other.settings = {**(other.settings or {}), "is_default": False}
                    other.updated_at = _utcnow()
                    session.add(other)

            session.commit()
            session.refresh(row)
            return int(row.id)  # type: ignore[arg-type]

    def get(self, profile_id: int, user_id: str | None) -> CalculationSettings | None:
        with Session(self.engine) as session:
            row = self._owned(session, profile_id, user_id)
            return settings_from_row(row.settings) if row else None

    def list_for_user(self, user_id: str) -> list[tuple[int, CalculationSettings]]:
        with Session(self.engine) as session:
            stmt = (
                select(SettingsProfileRow)
                .where(SettingsProfileRow.user_id == user_id)
                .order_by(SettingsProfileRow.id)
            )
            return [(int(r.id), settings_from_row(r.settings)) for r in session.exec(stmt)]  # type: ignore[arg-type]

    def get_default(self, user_id: str) -> CalculationSettings | None:
        with Session(self.engine) as session:
            stmt = select(SettingsProfileRow).where(
                SettingsProfileRow.user_id == user_id,
                SettingsProfileRow.is_default == True,  # noqa: E712
            )
            row = session.exec(stmt).first()
            return settings_from_row(row.settings) if row else None

    def delete(self, profile_id: int, user_id: str) -> bool:
        with Session(self.engine) as session:
            row = self._owned(session, profile_id, user_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True
