"""
Request context management using contextvars.

Provides async-safe storage for request-scoped data like the current user.

Usage:
    # In the auth dependency:
    set_current_user(user_id=42, company_id=7, ip_address="10.0.0.1")

    # Anywhere in the same request (log records pick it up automatically):
    ctx = get_request_context()  # ctx.user_id == 42

    # Context is automatically reset per request due to contextvars
"""

from contextvars import ContextVar
from dataclasses import dataclass

# Context variables for request-scoped user data
_current_user_id: ContextVar[int | None] = ContextVar("current_user_id", default=None)
_current_company_id: ContextVar[int | None] = ContextVar("current_company_id", default=None)
_current_ip_address: ContextVar[str | None] = ContextVar("current_ip_address", default=None)
_current_user_agent: ContextVar[str | None] = ContextVar("current_user_agent", default=None)


@dataclass(frozen=True)
class RequestContext:
    """Immutable snapshot of the current request context."""

    user_id: int | None
    company_id: int | None = None
    ip_address: str | None = None
    user_agent: str | None = None


def set_current_user(
    user_id: int | None,
    company_id: int | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """Set the current user context for this request (called after authentication)."""
    _current_user_id.set(user_id)
    _current_company_id.set(company_id)
    _current_ip_address.set(ip_address)
    _current_user_agent.set(user_agent)


def get_request_context() -> RequestContext:
    """Get a snapshot of the current request context."""
    return RequestContext(
        user_id=_current_user_id.get(),
        company_id=_current_company_id.get(),
        ip_address=_current_ip_address.get(),
        user_agent=_current_user_agent.get(),
    )
