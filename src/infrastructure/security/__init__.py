"""Security infrastructure - JWT, password and opaque token handling."""

from src.infrastructure.security.jwt import (create_access_token,
                                             decode_expired_token,
                                             verify_token)
from src.infrastructure.security.password import (get_password_hash,
                                                  needs_rehash,
                                                  verify_password)
from src.infrastructure.security.tokens import generate_opaque_token

__all__ = [
    "create_access_token",
    "decode_expired_token",
    "verify_token",
    "verify_password",
    "get_password_hash",
    "needs_rehash",
    "generate_opaque_token",
]
