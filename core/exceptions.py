"""
Registry exception hierarchy.

Servicer implementations raise these; the server exception interceptor maps
them onto gRPC status codes (see ``grpc_app/interceptors/exceptions.py``).
"""
from __future__ import annotations

from typing import Optional

from shared.codes import ErrorCode


class RegistryException(Exception):
    """Base class of every error carrying an ``ErrorCode``."""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "RegistryError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class NotFoundException(RegistryException):
    def __init__(self, resource: str, name: Optional[str] = None):
        message = f"{resource} {name!r} not found" if name else f"{resource} not found"
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            error_type="NotFound",
            details={"resource": resource, "name": name} if name else {"resource": resource},
        )


class AlreadyExistsException(RegistryException):
    def __init__(self, resource: str, name: str):
        super().__init__(
            code=ErrorCode.ALREADY_EXISTS,
            message=f"{resource} {name!r} already exists",
            error_type="AlreadyExists",
            details={"resource": resource, "name": name},
        )


class ValidationException(RegistryException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=ErrorCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="ValidationError",
            details=details,
            field=field,
        )


class PermissionDeniedException(RegistryException):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message=message,
            error_type="PermissionDenied",
        )


class UnauthorizedException(RegistryException):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message=message,
            error_type="Unauthorized",
        )


class UnimplementedException(RegistryException):
    def __init__(self, method: str):
        super().__init__(
            code=ErrorCode.UNIMPLEMENTED,
            message=f"method {method} not implemented",
            error_type="Unimplemented",
            details={"method": method},
        )
