"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from accounts.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from accounts.repositories.refresh_token import RefreshTokenRepository
from accounts.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    "RefreshTokenRepository",
    "UserRepository",
]
