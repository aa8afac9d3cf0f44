"""Tests for password verifiers and opaque tokens"""

import base64

from src.infrastructure.security.password import (get_password_hash,
                                                  is_bcrypt_hash,
                                                  needs_rehash,
                                                  verify_password)
from src.infrastructure.security.tokens import generate_opaque_token


def test_hash_and_verify():
    hashed = get_password_hash("Str0ng!Pass")

    assert is_bcrypt_hash(hashed)
    assert hashed != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not needs_rehash(hashed)


def test_legacy_plaintext_verifier_is_accepted_and_flagged():
    assert verify_password("legacy-secret", "legacy-secret")
    assert not verify_password("other", "legacy-secret")
    assert needs_rehash("legacy-secret")


def test_empty_verifier_never_matches():
    assert not verify_password("", "")
    assert not verify_password("anything", "")


def test_opaque_token_is_base64_of_64_random_bytes():
    token = generate_opaque_token()

    assert len(base64.b64decode(token)) == 64
    assert token != generate_opaque_token()


def test_opaque_token_size_can_be_overridden():
    assert len(base64.b64decode(generate_opaque_token(16))) == 16
