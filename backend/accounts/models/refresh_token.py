"""Persisted refresh-token records."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin


class RefreshToken(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Capability record for one issued refresh token.

    A record is *valid* iff it is not revoked, not expired and not
    soft-deleted. Records are never updated except to flip ``is_revoked``.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    user = relationship("User", lazy="raise")

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_tokens_token"),)

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        expires_at = self.expires_at
        # SQLite hands back naive datetimes; stored values are always UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at <= now

    def is_valid(self, now: datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_deleted and not self.is_expired(now)
