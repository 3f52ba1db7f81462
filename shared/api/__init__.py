from .errors import (
    AppError,
    ValidationError,
    InvalidIdentifierError,
    InvalidParameterError,
    NotFoundError,
    InsufficientStockError,
    DuplicateEntryError,
    InternalError,
)
from .handlers import register_exception_handlers
from .schemas import ApiResponse, CamelModel

__all__ = [
    "AppError",
    "ValidationError",
    "InvalidIdentifierError",
    "InvalidParameterError",
    "NotFoundError",
    "InsufficientStockError",
    "DuplicateEntryError",
    "InternalError",
    "register_exception_handlers",
    "ApiResponse",
    "CamelModel",
]
