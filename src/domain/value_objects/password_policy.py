"""Password complexity policy."""

import re

SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;':\",./<>?"

MIN_LENGTH = 8
MAX_BYTES = 72  # bcrypt input limit

_SPECIAL_PATTERN = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")


def password_policy_violations(password: str) -> list[str]:
    """Return human-readable reasons the password fails the policy (empty when it passes)."""
    problems: list[str] = []
    if len(password) < MIN_LENGTH:
        problems.append(f"at least {MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_BYTES:
        problems.append(f"at most {MAX_BYTES} bytes")
    if not re.search(r"[A-Z]", password):
        problems.append("an uppercase letter")
    if not re.search(r"[a-z]", password):
        problems.append("a lowercase letter")
    if not re.search(r"\d", password):
        problems.append("a digit")
    if not _SPECIAL_PATTERN.search(password):
        problems.append("a special character")
    return problems


def is_strong_password(password: str) -> bool:
    return not password_policy_violations(password)
