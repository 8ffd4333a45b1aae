"""FastAPI dependencies for authentication and database access.

This module provides dependency injection functions for FastAPI endpoints,
including settings, identity verification, the current user, authorization
guards and service instances. Tests replace any of them through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Header, Path
from sqlmodel import Session

from .config import Settings, get_settings
from .database import get_session
from .exceptions import AuthorizationException
from .logging_config import SecurityLoggingMixin
from .models.user import User
from .schemas.auth_schemas import IdentityClaims
from .services.admin_service import AdminService
from .services.auth_service import AuthService
from .services.item_service import ItemService
from .services.swap_service import SwapService
from .services.user_service import UserService

_security_log = SecurityLoggingMixin()


# Dependency for getting application settings
def get_app_settings() -> Settings:
    """Get application settings.

    Returns:
        Settings: Application configuration
    """
    return get_settings()


# Dependency for getting authentication service
def get_auth_service(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    """Get authentication service instance.

    Args:
        settings: Application settings

    Returns:
        AuthService: Authentication service instance
    """
    return AuthService(settings)


def get_user_service(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserService:
    return UserService(session, settings)


def get_item_service(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ItemService:
    return ItemService(session, settings)


def get_swap_service(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SwapService:
    return SwapService(session, settings)


def get_admin_service(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AdminService:
    return AdminService(session, settings)


# Dependency for identity token validation
async def get_current_identity(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> IdentityClaims:
    """Verify the bearer token and return its claims.

    Args:
        auth_service: Authentication service instance
        authorization: Authorization header with Bearer token

    Returns:
        IdentityClaims: Verified identity claims

    Raises:
        AuthenticationException: If the token is missing or invalid
    """
    return auth_service.authenticate(authorization)


# Dependency for getting current user
async def get_current_user(
    claims: Annotated[IdentityClaims, Depends(get_current_identity)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Get the stored user for the caller, creating it on first sight.

    Args:
        claims: Verified identity claims
        user_service: User service instance

    Returns:
        User: Current user record
    """
    return await user_service.sync_from_identity(claims)


async def require_admin_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require admin user for endpoint access.

    Args:
        current_user: Current authenticated user

    Returns:
        User: Current user if admin

    Raises:
        AuthorizationException: If user is not admin
    """
    if not current_user.is_admin:
        _security_log.log_authorization_failure(
            user_id=current_user.id,
            resource="admin",
            action="access",
            reason="admin role required",
        )
        raise AuthorizationException("Admin access required")
    return current_user


async def get_self_scoped_user(
    user_id: Annotated[str, Path(description="User ID, must be the caller's own")],
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Allow access only to the caller's own ``{user_id}`` resources.

    Raises:
        AuthorizationException: If the path user is not the caller
    """
    if user_id != current_user.id:
        _security_log.log_authorization_failure(
            user_id=current_user.id,
            resource=f"user:{user_id}",
            action="access",
            reason="path user differs from caller",
        )
        raise AuthorizationException("You can only access your own data")
    return current_user


# Type aliases for common dependency patterns
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin_user)]
SelfUser = Annotated[User, Depends(get_self_scoped_user)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]
SwapServiceDep = Annotated[SwapService, Depends(get_swap_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
DatabaseSession = Annotated[Session, Depends(get_session)]
