"""Opaque random tokens (refresh and password-reset)."""

import base64
import secrets

from src.infrastructure.config.settings import get_settings

settings = get_settings()


def generate_opaque_token(num_bytes: int | None = None) -> str:
    """Base64 of ``num_bytes`` random bytes (default: settings.refresh_token_bytes, 64)"""
    raw = secrets.token_bytes(num_bytes or settings.refresh_token_bytes)
    return base64.b64encode(raw).decode("ascii")
