import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.services import ICacheService, INotifier
from src.application.interfaces.storage import IStorageService
from src.application.services.access_scope_resolver import AccessScopeResolver
from src.application.services.permission_resolver import PermissionResolver
from src.application.services.session_manager import (SessionManager,
                                                      validate_access_token)
from src.application.use_cases.hierarchy.hierarchy_lifecycle import \
    HierarchyLifecycle
from src.application.use_cases.hierarchy.project_membership import \
    ProjectMembershipService
from src.application.use_cases.reference_data.reference_data import \
    ReferenceDataService
from src.domain.entities.actor import Actor
from src.domain.exceptions import AuthenticationException
from src.infrastructure.cache.local_cache import LocalTTLCache
from src.infrastructure.cache.redis_cache import CacheService
from src.infrastructure.config.settings import get_settings
from src.infrastructure.external.email.smtp_notifier import SmtpNotifier
from src.infrastructure.external.storage.local_storage import \
    LocalStorageService
from src.infrastructure.persistence.database import get_db, get_db_transactional
from src.infrastructure.persistence.repositories import (
    CompanyRepository,
    DocumentRepository,
    PermissionRepository,
    ProjectRepository,
    RoleRepository,
    TaskListRepository,
    TaskPriorityRepository,
    TaskRepository,
    TaskStatusRepository,
    UserRepository,
)
from src.shared.context import set_current_user

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Global service instances (singletons)
_cache_service: ICacheService | None = None
_storage_service: IStorageService | None = None
_notifier: INotifier | None = None
_scope_resolver = AccessScopeResolver()


# Cache service dependencies (defined early for use in other dependencies)
async def get_cache_service() -> ICacheService:
    """
    Permission cache dependency (singleton)

    In-process TTL cache unless main.py installed the Redis CacheService on startup.
    """
    global _cache_service
    if _cache_service is None:
        _cache_service = LocalTTLCache()
    return _cache_service


def set_cache_service(cache_service: ICacheService | None):
    """Set global cache service (called on app startup)"""
    global _cache_service
    _cache_service = cache_service


async def install_shared_cache(cache_service: CacheService) -> bool:
    """
    Connect the Redis cache and make it the permission cache.

    Returns False and keeps the in-process cache when Redis is unreachable.
    """
    await cache_service.connect()
    if not cache_service.is_available():
        logger.warning("Redis cache unavailable; using in-process permission cache")
        set_cache_service(None)
        return False
    set_cache_service(cache_service)
    logger.info("Redis cache initialized successfully")
    return True


async def get_storage_service() -> IStorageService:
    """Blob store dependency (singleton)"""
    global _storage_service
    if _storage_service is None:
        settings = get_settings()
        _storage_service = LocalStorageService(
            settings.storage_root, max_upload_size=settings.max_upload_size
        )
    return _storage_service


async def get_notifier() -> INotifier:
    """Notifier dependency (singleton)"""
    global _notifier
    if _notifier is None:
        _notifier = SmtpNotifier()
    return _notifier


def get_scope_resolver() -> AccessScopeResolver:
    return _scope_resolver


async def get_current_actor(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Actor:
    """
    Validate the bearer token and return the calling actor.
    Also records the caller in the request context for logging.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        actor = validate_access_token(credentials.credentials)
    except AuthenticationException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    set_current_user(
        actor.user_id,
        company_id=actor.company_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return actor


async def get_session_manager(
    db: AsyncSession = Depends(get_db_transactional),
    cache: ICacheService = Depends(get_cache_service),
    notifier: INotifier = Depends(get_notifier),
) -> SessionManager:
    """Session manager dependency with transaction management"""
    permission_repo = PermissionRepository(db)
    return SessionManager(
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        permission_repo=permission_repo,
        permission_resolver=PermissionResolver(permission_repo, cache),
        notifier=notifier,
    )


def _build_hierarchy(db: AsyncSession, storage: IStorageService | None) -> HierarchyLifecycle:
    """Internal helper to construct HierarchyLifecycle with all dependencies"""
    return HierarchyLifecycle(
        scope_resolver=_scope_resolver,
        project_repo=ProjectRepository(db),
        task_list_repo=TaskListRepository(db),
        task_repo=TaskRepository(db),
        document_repo=DocumentRepository(db),
        user_repo=UserRepository(db),
        company_repo=CompanyRepository(db),
        storage=storage,
    )


async def get_hierarchy(db: AsyncSession = Depends(get_db)) -> HierarchyLifecycle:
    """Hierarchy dependency for read operations"""
    return _build_hierarchy(db, None)


# Transactional dependencies for write operations
async def get_hierarchy_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    storage: IStorageService = Depends(get_storage_service),
) -> HierarchyLifecycle:
    """Hierarchy dependency with transaction management; cascades commit or roll back as a unit"""
    return _build_hierarchy(db, storage)


async def get_membership_service(
    db: AsyncSession = Depends(get_db_transactional),
) -> ProjectMembershipService:
    return ProjectMembershipService(
        scope_resolver=_scope_resolver,
        project_repo=ProjectRepository(db),
        user_repo=UserRepository(db),
    )


async def get_reference_data_service(
    db: AsyncSession = Depends(get_db_transactional),
) -> ReferenceDataService:
    return ReferenceDataService(
        status_repo=TaskStatusRepository(db),
        priority_repo=TaskPriorityRepository(db),
        task_repo=TaskRepository(db),
    )
