from __future__ import annotations

from dataclasses import dataclass

from fastapi import status


@dataclass(eq=False)
class BlogException(Exception):
    message: str
    code: str = "error"
    details: dict | None = None

    def __str__(self) -> str:
        return self.message


class ValidationError(BlogException):
    code = "validation_error"


class AuthenticationError(BlogException):
    code = "authentication_error"


class AuthorizationError(BlogException):
    code = "authorization_error"


class NotFoundError(BlogException):
    code = "not_found"


class StorageError(BlogException):
    code = "storage_error"


class DatabaseError(StorageError):
    code = "database_error"


EXC_TO_STATUS: dict[type[BlogException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: BlogException) -> int:
    for typ, st in EXC_TO_STATUS.items():
        if isinstance(exc, typ):
            return st
    return status.HTTP_400_BAD_REQUEST


def headers_for(exc: BlogException) -> dict[str, str]:
    if isinstance(exc, AuthenticationError):
        return {"WWW-Authenticate": "Bearer"}
    return {}
