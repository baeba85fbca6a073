"""
Error taxonomy shared by services and routers.

Each error is an HTTPException so a service can raise it and FastAPI renders it
with the right status. Bodies are shaped as {"error": detail} by the handlers
registered in bingo.main.
"""
from fastapi import HTTPException, status


class BingoError(HTTPException):
    """Base class for errors surfaced to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail, headers=headers)


class AuthenticationError(BingoError):
    """No valid session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ValidationError(BingoError):
    """Missing or malformed input, or a reference the actor does not own."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class AuthorizationError(BingoError):
    """Authenticated actor is not allowed to touch the target."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFoundError(BingoError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(BingoError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class DependencyError(BingoError):
    """A store, cipher or other collaborator failed. Detail is always generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"


class EncryptionConfigError(RuntimeError):
    """Message encryption key is missing or unusable."""
