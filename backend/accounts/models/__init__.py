from accounts.models.refresh_token import RefreshToken
from accounts.models.user import Gender, User

__all__ = [
    "Gender",
    "RefreshToken",
    "User",
]
