"""
API Dependencies
Access Guard wiring for API routes
"""

from typing import Callable, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.exceptions import AuthorizationException
from vetclinic.core.guard import AccessGuard, Principal, authorize, authorize_any
from vetclinic.core.permissions import Permission
from vetclinic.db.session import get_db_session
from vetclinic.monitoring.metrics import authorization_denials_total


async def get_current_principal(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    """
    Dependency to resolve the caller from the Authorization header

    Raises:
        AuthenticationException: If the token is absent, malformed or invalid
        InactivePrincipalException: If the account is deactivated
    """
    return await AccessGuard(db).authenticate(authorization)


def require_permission(permission: Permission) -> Callable:
    """Dependency factory admitting principals whose role holds the permission"""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        try:
            authorize(principal, permission)
        except AuthorizationException:
            authorization_denials_total.labels(reason=permission.value).inc()
            raise
        return principal

    return dependency


def require_any_permission(*permissions: Permission) -> Callable:
    """Dependency factory admitting principals holding at least one of the permissions"""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        try:
            authorize_any(principal, permissions)
        except AuthorizationException:
            authorization_denials_total.labels(reason="|".join(p.value for p in permissions)).inc()
            raise
        return principal

    return dependency
