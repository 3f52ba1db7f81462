"""
Error taxonomy shared by every service.

Services raise these; the handlers in shared.api.handlers turn them into the
{success, message, error} envelope. `status_code` is a class default that a
call site may override where a client-visible code has to be kept as-is
(e.g. the order flow answers a missing address with 401).
"""
from typing import Any, Optional


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        error: Any = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.error = error
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class InvalidIdentifierError(AppError):
    status_code = 400
    default_message = "Invalid identifier"


class InvalidParameterError(AppError):
    status_code = 400
    default_message = "Invalid parameter"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class InsufficientStockError(AppError):
    status_code = 401
    default_message = "Stock not available"


class DuplicateEntryError(AppError):
    status_code = 422
    default_message = "Duplicate entry found"


class InternalError(AppError):
    status_code = 500
