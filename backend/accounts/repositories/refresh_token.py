"""Refresh-token repository backing the SQL refresh store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

from sqlalchemy import delete, select, update

from accounts.models.refresh_token import RefreshToken
from accounts.repositories.base import BaseRepository


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only access to :class:`RefreshToken` rows.

    Revocation helpers issue single ``UPDATE`` statements so the database
    arbitrates concurrent callers; ``rowcount`` reports who won.
    """

    model = RefreshToken

    def _base_select(self):
        return select(RefreshToken).where(RefreshToken.is_deleted.is_(False))

    def find_live(self, token: str, *, now: datetime | None = None) -> RefreshToken | None:
        """Return the non-revoked, non-expired record for ``token``."""
        stmt = self._base_select().where(
            RefreshToken.token == token,
            RefreshToken.is_revoked.is_(False),
            RefreshToken.expires_at > (now or _utcnow()),
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def list_for_user(self, user_id: int) -> list[RefreshToken]:
        stmt = (
            self._base_select()
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def revoke_token(self, token: str) -> bool:
        """Flip ``is_revoked`` for ``token``; ``True`` only if this call did it."""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.token == token,
                RefreshToken.is_revoked.is_(False),
                RefreshToken.is_deleted.is_(False),
            )
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def revoke_all_for_user(self, user_id: int) -> int:
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.is_revoked.is_(False),
                RefreshToken.is_deleted.is_(False),
            )
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def delete_expired(self, *, now: datetime | None = None) -> int:
        """Physically remove rows whose expiry has passed."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= (now or _utcnow()))
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount or 0)
