"""Permission lookup per (role, company) with a time-boxed cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.infrastructure.config.settings import get_settings

if TYPE_CHECKING:
    from src.application.interfaces.repositories import IPermissionRepository
    from src.application.interfaces.services import ICacheService

logger = logging.getLogger(__name__)


class PermissionResolver:
    """
    Resolve the permission names granted to a role within a company.

    Cache TTL: settings.cache_ttl_permissions (5 minutes by default).
    Entries are not invalidated when grants change, so a revoked permission can
    stay visible for up to one TTL.
    """

    def __init__(
        self,
        permission_repo: IPermissionRepository,
        cache: ICacheService,
        ttl_seconds: int | None = None,
    ):
        self.permission_repo = permission_repo
        self.cache = cache
        self.ttl = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_permissions

    @staticmethod
    def cache_key(role_id: int, company_id: int) -> str:
        return f"permissions:{role_id}:{company_id}"

    async def resolve(self, role_id: int | None, company_id: int | None) -> set[str]:
        """
        Get permission names for a role in a company.
        Returns an empty set when either id is missing (e.g. platform accounts without a company).
        """
        if role_id is None or company_id is None:
            return set()

        key = self.cache_key(role_id, company_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return set(cached)

        # Only one request per key recomputes; the others wait and read the fresh entry
        async with self.cache.lock(key):
            cached = await self.cache.get(key)
            if cached is not None:
                return set(cached)

            names = await self.permission_repo.get_permission_names(role_id, company_id)
            await self.cache.set(key, sorted(names), ttl=self.ttl)
            logger.debug(
                "Resolved %d permissions for role %s in company %s", len(names), role_id, company_id
            )
            return set(names)
