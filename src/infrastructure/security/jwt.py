"""JWT token handling for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.infrastructure.config.settings import get_settings

settings = get_settings()


def create_access_token(
    data: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """Create signed JWT access token carrying the given claims plus exp/iat/iss/aud"""
    to_encode = data.copy()
    now = datetime.now(UTC)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update(
        {
            "exp": expire,
            "iat": now,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )
    encoded_jwt = jwt.encode(
        to_encode, settings.secret_key, algorithm=settings.algorithm
    )
    assert isinstance(encoded_jwt, str)
    return encoded_jwt


def _decode(token: str, *, verify_exp: bool) -> dict[str, Any]:
    try:
        # Reject tokens whose header names another algorithm before touching the signature
        header = jwt.get_unverified_header(token)
        if header.get("alg") != settings.algorithm:
            raise ValueError(f"Invalid token: unexpected algorithm {header.get('alg')!r}")

        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"verify_exp": verify_exp},
        )
        if not isinstance(payload, dict):
            raise TypeError("Token payload must be a dictionary")
        return payload
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}") from e


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode JWT token, returns payload"""
    return _decode(token, verify_exp=True)


def decode_expired_token(token: str) -> dict[str, Any]:
    """
    Verify signature, algorithm, issuer and audience but accept an expired token.

    Used by the refresh flow, where the access token is expected to have lapsed.
    """
    return _decode(token, verify_exp=False)
