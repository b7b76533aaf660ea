from .action_tokens import ActionTokens
from .service import AuthService

__all__ = ["ActionTokens", "AuthService"]
