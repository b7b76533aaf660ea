from .fernet_action_token_cipher import FernetActionTokenCipher, derive_key
from .werkzeug_password_hasher import WerkzeugPasswordHasher

__all__ = ["FernetActionTokenCipher", "WerkzeugPasswordHasher", "derive_key"]
