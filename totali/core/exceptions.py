"""Application exceptions rendered into the API response envelope."""

from typing import Dict, Optional

from fastapi import status


class AppException(Exception):
    """Base exception carrying an HTTP status code and a client-facing detail."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        detail: str = "Internal server error",
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers
        super().__init__(detail)


class BadRequestError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND


class ServiceUnavailableError(AppException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
