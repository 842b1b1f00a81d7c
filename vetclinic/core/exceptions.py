"""
Custom Exceptions
Application-specific exception classes
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional


class AppException(Exception):
    """Base application exception"""

    def __init__(
        self,
        message: str,
        code: str = "app_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)


class ValidationException(AppException):
    """Validation error exception"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="validation_error",
            status_code=400,
            details=details,
        )


class AuthenticationException(AppException):
    """Missing, malformed or unverifiable credential"""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="authentication_error",
            status_code=401,
            details=details,
        )


class InactivePrincipalException(AuthenticationException):
    """Credential is valid but the account has been deactivated"""

    def __init__(
        self,
        message: str = "Account is inactive",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)
        self.code = "inactive_principal"


class AuthorizationException(AppException):
    """Authenticated principal lacks the required permission(s)"""

    def __init__(
        self,
        message: str = "Permission denied",
        required_permissions: Optional[Iterable[str]] = None,
        role: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if required_permissions is not None:
            details["required_permissions"] = [str(p) for p in required_permissions]
        if role is not None or "required_permissions" in details:
            details["role"] = role
        super().__init__(
            message=message,
            code="authorization_error",
            status_code=403,
            details=details,
        )


class NotFoundException(AppException):
    """Resource not found exception"""

    def __init__(
        self,
        resource: str = "Resource",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"{resource} not found",
            code="not_found",
            status_code=404,
            details=details,
        )


class VersionNotFoundException(NotFoundException):
    """Requested document version is outside 1..current_version"""

    def __init__(self, version: int, current_version: int):
        super().__init__(
            resource="Version",
            details={"version": version, "current_version": current_version},
        )
        self.code = "version_not_found"


class ConflictException(AppException):
    """Resource conflict exception"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="conflict",
            status_code=409,
            details=details,
        )


class InvalidPayloadException(AppException):
    """Uploaded file is empty, too large or of an unaccepted media type"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="invalid_payload",
            status_code=400,
            details=details,
        )


class InvalidTTLException(AppException):
    """Share-link lifetime is not a positive duration"""

    def __init__(
        self,
        message: str = "Share link lifetime must be positive",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="invalid_ttl",
            status_code=400,
            details=details,
        )
