"""
Session lifecycle: login, token rotation, logout and password management.

State per credential:
    NoSession -> Active(access, refresh) -> Active(rotated) -> Revoked/Expired

The credential's refresh-token slot also carries password-reset tokens:
requesting a reset replaces (and so ends) any pending refresh session.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from email_validator import EmailNotValidError, validate_email

from src.domain.entities.actor import Actor
from src.domain.exceptions import (AuthenticationException,
                                   InvalidTokenException,
                                   ResourceNotFoundException,
                                   ValidationException)
from src.domain.value_objects.password_policy import \
    password_policy_violations
from src.infrastructure.config.settings import get_settings
from src.infrastructure.exceptions import CorruptRecordError
from src.infrastructure.security.jwt import (create_access_token,
                                             decode_expired_token,
                                             verify_token)
from src.infrastructure.security.password import (get_password_hash,
                                                  needs_rehash,
                                                  verify_password)
from src.infrastructure.security.tokens import generate_opaque_token
from src.shared.utils.datetime import utc_now
from src.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from src.application.interfaces.repositories import (IPermissionRepository,
                                                         IRoleRepository,
                                                         IUserRepository)
    from src.application.interfaces.services import INotifier
    from src.application.services.permission_resolver import \
        PermissionResolver
    from src.infrastructure.persistence.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
INVALID_REFRESH = "Invalid or expired refresh token."
INVALID_RESET = "Invalid or expired reset token. Please request a new one."
DEFAULT_ROLE_NAME = "User"

# Claim names carried by access tokens
CLAIM_USER_ID = "UserId"
CLAIM_EMAIL = "Email"
CLAIM_ROLE = "role"
CLAIM_ROLE_ID = "RoleId"
CLAIM_COMPANY_ID = "CompanyId"


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Real bcrypt hash used to spend comparable time when the email is unknown"""
    return get_password_hash(generate_cuid())


@dataclass(frozen=True)
class SessionUser:
    id: int
    email: str
    full_name: str | None
    role: str
    role_id: int | None
    company_id: int | None


@dataclass(frozen=True)
class TokenPair:
    token: str
    refresh_token: str
    refresh_token_expires_at: datetime


@dataclass(frozen=True)
class LoginResult:
    tokens: TokenPair
    user: SessionUser
    permissions: list[str] = field(default_factory=list)


def _claim_int(claims: dict[str, Any], name: str) -> int | None:
    value = claims.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidTokenException(f"Invalid token claim: {name}") from e


def actor_from_claims(claims: dict[str, Any]) -> Actor:
    """Build the request actor from verified access-token claims"""
    user_id = _claim_int(claims, CLAIM_USER_ID)
    if user_id is None:
        raise InvalidTokenException("Token is missing the UserId claim.")
    return Actor(
        user_id=user_id,
        role_id=_claim_int(claims, CLAIM_ROLE_ID),
        company_id=_claim_int(claims, CLAIM_COMPANY_ID),
        email=claims.get(CLAIM_EMAIL),
        role_name=claims.get(CLAIM_ROLE),
    )


def validate_access_token(token: str) -> Actor:
    """
    Verify a bearer token (signature, algorithm, issuer, audience, expiry).

    Raises:
        AuthenticationException: token invalid or expired
    """
    try:
        claims = verify_token(token)
    except ValueError as e:
        raise AuthenticationException("Invalid or expired access token.") from e
    try:
        return actor_from_claims(claims)
    except InvalidTokenException as e:
        raise AuthenticationException(e.message) from e


class SessionManager:
    """Issues, rotates and revokes credentials"""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        permission_resolver: PermissionResolver,
        notifier: INotifier | None = None,
    ) -> None:
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.permission_repo = permission_repo
        self.permission_resolver = permission_resolver
        self.notifier = notifier
        self.settings = get_settings()

    # Token helpers

    def _claims(self, user: User, role_name: str | None) -> dict[str, Any]:
        return {
            CLAIM_USER_ID: user.id,
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: role_name or DEFAULT_ROLE_NAME,
            CLAIM_ROLE_ID: user.role_id,
            CLAIM_COMPANY_ID: user.company_id,
            "jti": generate_cuid(),
        }

    def _access_token(self, user: User, role_name: str | None) -> str:
        return create_access_token(
            self._claims(user, role_name),
            expires_delta=timedelta(minutes=self.settings.access_token_expire_minutes),
        )

    def _refresh_expiry(self, now: datetime) -> datetime:
        return now + timedelta(days=self.settings.refresh_token_expire_days)

    async def _role_name(self, user: User) -> str | None:
        if user.role_id is None:
            return None
        return await self.role_repo.get_name(user.role_id)

    # Operations

    async def login(
        self, email: str | None, password: str | None, *, use_permission_cache: bool = False
    ) -> LoginResult:
        """
        Authenticate by email and password and open a new session.

        Any previous refresh token of the user stops being accepted.

        Raises:
            ValidationException: email or password missing
            AuthenticationException: no active user with these credentials
        """
        if not email or not password:
            raise ValidationException("Email and password are required.")

        user = await self.user_repo.get_active_by_email(email)
        if user is None:
            verify_password(password, _dummy_hash())
            logger.warning("Failed login attempt for email: %s", email)
            raise AuthenticationException(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for user: %s", user.id)
            raise AuthenticationException(INVALID_CREDENTIALS)

        if needs_rehash(user.password_hash):
            await self.user_repo.update_password(user.id, get_password_hash(password))
            logger.info("Upgraded legacy password verifier for user: %s", user.id)

        role_name = await self._role_name(user)
        now = utc_now()
        refresh_token = generate_opaque_token()
        refresh_expires = self._refresh_expiry(now)
        await self.user_repo.set_refresh_token(user.id, refresh_token, refresh_expires)

        if use_permission_cache:
            permissions = await self.permission_resolver.resolve(user.role_id, user.company_id)
        elif user.role_id is not None and user.company_id is not None:
            permissions = set(
                await self.permission_repo.get_permission_names(user.role_id, user.company_id)
            )
        else:
            permissions = set()

        logger.info("Successful login for user: %s", user.id)
        return LoginResult(
            tokens=TokenPair(
                token=self._access_token(user, role_name),
                refresh_token=refresh_token,
                refresh_token_expires_at=refresh_expires,
            ),
            user=SessionUser(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                role=role_name or DEFAULT_ROLE_NAME,
                role_id=user.role_id,
                company_id=user.company_id,
            ),
            permissions=sorted(permissions),
        )

    async def refresh(self, access_token: str | None, refresh_token: str | None) -> TokenPair:
        """
        Exchange an (expired) access token plus the current refresh token for a new pair.

        The swap is a compare-and-set on the stored token: of two concurrent
        calls with the same pair exactly one succeeds.

        Raises:
            ValidationException: either token missing
            InvalidTokenException: access token forged, wrong algorithm, or no UserId claim
            AuthenticationException: refresh token stale, mismatched or expired
        """
        if not access_token or not refresh_token:
            raise ValidationException("Token and refresh token are required.")

        try:
            claims = decode_expired_token(access_token)
        except ValueError as e:
            logger.warning("Refresh rejected: %s", e)
            raise InvalidTokenException("Invalid access token.") from e

        user_id = _claim_int(claims, CLAIM_USER_ID)
        if user_id is None:
            raise InvalidTokenException("Invalid token: missing UserId claim.")

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active or user.is_deleted:
            logger.warning("Refresh rejected for unknown or inactive user: %s", user_id)
            raise AuthenticationException(INVALID_REFRESH)

        now = utc_now()
        new_refresh = generate_opaque_token()
        new_expiry = self._refresh_expiry(now)
        rotated = await self.user_repo.rotate_refresh_token(
            user.id, refresh_token, new_refresh, new_expiry, now
        )
        if not rotated:
            logger.warning("Stale or mismatched refresh token for user: %s", user.id)
            raise AuthenticationException(INVALID_REFRESH)

        role_name = await self._role_name(user)
        logger.info("Rotated session tokens for user: %s", user.id)
        return TokenPair(
            token=self._access_token(user, role_name),
            refresh_token=new_refresh,
            refresh_token_expires_at=new_expiry,
        )

    async def logout(self, user_id: int) -> None:
        """
        Revoke the user's refresh token. Idempotent.

        Raises:
            ResourceNotFoundException: user missing, inactive or deleted
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active or user.is_deleted:
            raise ResourceNotFoundException("User", user_id)
        await self.user_repo.clear_refresh_token(user.id)
        logger.info("User logged out: %s", user.id)

    async def change_password(
        self,
        user_id: int,
        current_password: str | None,
        new_password: str | None,
        confirm_password: str | None,
    ) -> None:
        """
        Raises:
            ValidationException: missing fields, mismatch, or weak new password
            ResourceNotFoundException: user missing or deleted
            AuthenticationException: current password wrong
        """
        if not current_password or not new_password or not confirm_password:
            raise ValidationException("All password fields are required.")
        self._check_new_password(new_password, confirm_password)

        user = await self.user_repo.get_by_id(user_id)
        if user is None or user.is_deleted:
            raise ResourceNotFoundException("User", user_id)

        if not verify_password(current_password, user.password_hash):
            logger.warning("Wrong current password on change for user: %s", user.id)
            raise AuthenticationException("Current password is incorrect.")

        await self.user_repo.update_password(user.id, get_password_hash(new_password))
        logger.info("Password changed for user: %s", user.id)

    async def forgot_password(self, email: str | None) -> None:
        """
        Issue a one-hour reset token and hand the reset link to the notifier.

        Raises:
            ValidationException: email missing or malformed
            ResourceNotFoundException: no user with this email
            CorruptRecordError: the stored email itself is malformed
        """
        if not email:
            raise ValidationException("Email is required.", field="email")
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationException("Invalid email format.", field="email") from e

        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.warning("Password reset requested for unknown email: %s", email)
            raise ResourceNotFoundException("User", email)

        try:
            validate_email(user.email, check_deliverability=False)
        except EmailNotValidError as e:
            logger.error("Stored email for user %s is malformed", user.id)
            raise CorruptRecordError("user", "email") from e

        token = generate_opaque_token()
        expires_at = utc_now() + timedelta(minutes=self.settings.reset_token_expire_minutes)
        await self.user_repo.set_refresh_token(user.id, token, expires_at)

        reset_link = self.build_reset_link(user.email, token)
        if self.notifier is not None:
            await self.notifier.send_password_reset(user.email, reset_link)
        logger.info("Password reset issued for user: %s", user.id)

    def build_reset_link(self, email: str, token: str) -> str:
        query = urlencode({"email": email, "token": token})
        return f"{self.settings.frontend_url.rstrip('/')}/reset-password?{query}"

    async def reset_password(
        self,
        email: str | None,
        token: str | None,
        new_password: str | None,
        confirm_password: str | None,
    ) -> None:
        """
        Redeem a reset token. Single use: the token is cleared with the same write.

        Raises:
            ValidationException: missing fields, mismatch, or weak new password
            InvalidTokenException: token unknown, already used or expired
        """
        if not email or not token or not new_password or not confirm_password:
            raise ValidationException("Email, token and both password fields are required.")
        self._check_new_password(new_password, confirm_password)

        redeemed = await self.user_repo.consume_reset_token(
            email, token, get_password_hash(new_password), utc_now()
        )
        if not redeemed:
            logger.warning("Invalid or expired reset token presented for email: %s", email)
            raise InvalidTokenException(INVALID_RESET)
        logger.info("Password reset completed for email: %s", email)

    @staticmethod
    def _check_new_password(new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            raise ValidationException(
                "New password and confirmation do not match.", field="confirmPassword"
            )
        problems = password_policy_violations(new_password)
        if problems:
            raise ValidationException(
                "Password must contain " + ", ".join(problems) + ".", field="newPassword"
            )
