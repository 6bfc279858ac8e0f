"""
Error taxonomy shared by the workflows, gateways and HTTP layer.

Every failure a request can end in is a PortfolioError subclass. The HTTP
layer renders them as ``{"message": ..., "code": ...}`` with the class's
status code; raw gateway errors stay in the server logs.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ALREADY_LIKED = "ALREADY_LIKED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    STORE_ERROR = "STORE_ERROR"


class PortfolioError(Exception):
    status_code: int = 500
    code: ErrorCode = ErrorCode.STORE_ERROR
    default_message: str = "Unexpected error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"message": self.message, "code": self.code.value}


class ValidationError(PortfolioError):
    status_code = 400
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Please fill in all required fields."


class AlreadyLikedError(PortfolioError):
    status_code = 400
    code = ErrorCode.ALREADY_LIKED
    default_message = "You have already liked this project."


class NotFoundError(PortfolioError):
    status_code = 404
    code = ErrorCode.NOT_FOUND
    default_message = "Not found."


class InvalidTransitionError(PortfolioError):
    status_code = 409
    code = ErrorCode.INVALID_TRANSITION
    default_message = "This offer has already been decided."


class AuthError(PortfolioError):
    status_code = 401
    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid login credentials."


class StoreError(PortfolioError):
    status_code = 500
    code = ErrorCode.STORE_ERROR
    default_message = "The request could not be completed."
