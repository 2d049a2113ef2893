"""
Shared error codes used across layers (core / server / client).

This module provides a single source of truth to avoid drift between
multiple enum definitions scattered across the codebase.
"""
from enum import IntEnum


class ErrorCode(IntEnum):
    """Registry error codes; the server maps them onto gRPC status codes."""

    SUCCESS = 0

    # request errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003

    # resource errors (2xxxx)
    NOT_FOUND = 20001
    ALREADY_EXISTS = 20002
    FAILED_PRECONDITION = 20003

    # auth errors (3xxxx)
    PERMISSION_ERROR = 30000
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002
    TOKEN_INVALID = 30003

    # server errors (4xxxx)
    SYSTEM_ERROR = 40000
    SERVICE_UNAVAILABLE = 40003
    UNIMPLEMENTED = 40004

    # rate limiting (5xxxx)
    TOO_MANY_REQUESTS = 50001


__all__ = ["ErrorCode"]
