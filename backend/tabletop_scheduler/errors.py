"""Error taxonomy shared by services and routers.

Each error is an ``HTTPException`` so services can raise them exactly where
they detect the problem; ``main.py`` renders every one of them in the
``{"success": false, "error": ...}`` envelope.
"""
from fastapi import HTTPException, status


class AuthenticationRequired(HTTPException):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidToken(HTTPException):
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidInput(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundOrForbidden(HTTPException):
    """Missing and not-owned resources look the same to the caller."""

    def __init__(self, detail: str = "Not found or access denied"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class CapacityExceeded(HTTPException):
    def __init__(self, detail: str = "Game is full"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
