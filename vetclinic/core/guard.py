"""
Access Guard
Resolves credentials into a Principal and checks it against the Permission Catalog
"""

import uuid
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetclinic.core.exceptions import (
    AuthenticationException,
    AuthorizationException,
    InactivePrincipalException,
)
from vetclinic.core.logging import get_logger
from vetclinic.core.permissions import Permission, Role, permissions_for
from vetclinic.core.security import verify_access_token

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """An authenticated caller"""

    id: uuid.UUID
    username: str
    email: str
    role: Optional[Role]
    is_active: bool

    @property
    def permissions(self) -> FrozenSet[Permission]:
        return permissions_for(self.role)

    @property
    def role_name(self) -> Optional[str]:
        return self.role.value if self.role else None

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=Role.parse(user.role),
            is_active=user.is_active,
        )


def _extract_bearer_token(credential: Optional[str]) -> str:
    if not credential:
        raise AuthenticationException(message="Missing authorization header")

    scheme, _, token = credential.partition(" ")
    if scheme != "Bearer" or not token.strip():
        raise AuthenticationException(message="Invalid authorization header format")

    return token.strip()


class AccessGuard:
    """Credential resolution against the users table"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate(self, credential: Optional[str]) -> Principal:
        """
        Resolve an Authorization header value into a Principal

        Args:
            credential: Raw header value, expected as "Bearer <jwt>"

        Returns:
            The active Principal the token was issued to

        Raises:
            AuthenticationException: Absent, malformed or unverifiable credential
            InactivePrincipalException: The account exists but is deactivated
        """
        from vetclinic.db.models import User

        token = _extract_bearer_token(credential)
        payload = verify_access_token(token)

        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError:
            raise AuthenticationException(message="Invalid token subject")

        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if user is None:
            raise AuthenticationException(message="User not found")

        if not user.is_active:
            raise InactivePrincipalException(details={"user_id": str(user.id)})

        return Principal.from_user(user)


def _require_principal(principal: Principal) -> None:
    if not isinstance(principal, Principal):
        raise TypeError(
            f"authorize() requires an authenticated Principal, got {type(principal).__name__}"
        )


def authorize(principal: Principal, permission: Permission) -> None:
    """
    Admit the principal or raise

    Raises:
        AuthorizationException: The principal's role lacks the permission
    """
    _require_principal(principal)

    if permission not in principal.permissions:
        logger.debug(f"Denied {permission} to {principal.username} ({principal.role_name})")
        raise AuthorizationException(
            message=f"Access denied: Missing '{permission}' permission",
            required_permissions=[permission],
            role=principal.role_name,
        )


def authorize_any(principal: Principal, permissions: Iterable[Permission]) -> None:
    """
    Admit the principal if it holds at least one of the permissions

    Raises:
        AuthorizationException: None of the permissions are held
    """
    _require_principal(principal)
    required = list(permissions)

    if not required or principal.permissions.isdisjoint(required):
        logger.debug(f"Denied any of {required} to {principal.username} ({principal.role_name})")
        raise AuthorizationException(
            message="Access denied: Missing any of the required permissions",
            required_permissions=required,
            role=principal.role_name,
        )
