"""
Service interfaces (ports) for the application layer.

These protocols define the contracts for collaborators the application
services call out to. Following Dependency Inversion Principle (DIP).
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol


class ICacheService(Protocol):
    """Protocol for the permission cache (in-process or Redis)"""

    def is_available(self) -> bool: ...

    def lock(self, key: str) -> asyncio.Lock:
        """Lock serializing the check-then-fill sequence for one key"""
        ...

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool: ...


class INotifier(Protocol):
    """Protocol for outbound notifications (DIP)"""

    async def send_password_reset(self, recipient: str, reset_link: str) -> bool:
        """
        Deliver a reset link. Returns False (and logs) when delivery was skipped
        or failed; never raises for delivery problems.
        """
        ...
