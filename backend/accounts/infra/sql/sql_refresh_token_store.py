"""SQL adapter for :class:`~accounts.services._shared.ports.RefreshTokenStore`."""

from __future__ import annotations

from datetime import UTC, datetime

from accounts.models.refresh_token import RefreshToken
from accounts.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from accounts.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    # SQLite returns naive datetimes; stored values are always UTC
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=_utc(row.expires_at),
        revoked=row.is_revoked,
        created_at=_utc(row.created_at),
    )


class SqlRefreshTokenStore(RefreshTokenStore):
    """
    Refresh tokens in the ``refresh_tokens`` table.

    Each operation runs in its own :class:`SQLAlchemyUnitOfWork` and commits
    before returning. Atomic revocation relies on a conditional ``UPDATE``
    and its ``rowcount``.
    """

    def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        with SQLAlchemyUnitOfWork() as uow:
            row = RefreshToken(
                user_id=record.user_id,
                token=record.token,
                expires_at=record.expires_at.astimezone(UTC),
                is_revoked=record.revoked,
            )
            uow.refresh_tokens.add(row)
            uow.session.refresh(row)
            return _to_record(row)

    def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.find_live(token)
            return _to_record(row) if row is not None else None

    def find_by_user_id(self, user_id: int) -> list[RefreshTokenRecord]:
        with SQLAlchemyUnitOfWork() as uow:
            return [_to_record(row) for row in uow.refresh_tokens.list_for_user(user_id)]

    def revoke_all_by_user_id(self, user_id: int) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.revoke_all_for_user(user_id)

    def revoke_by_token(self, token: str) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.revoke_token(token)

    def delete_expired(self) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_expired(now=datetime.now(UTC))

    def is_token_valid(self, token: str) -> bool:
        return self.find_by_token(token) is not None
