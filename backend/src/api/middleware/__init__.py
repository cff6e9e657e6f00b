"""FastAPI middleware for caller identity and error handling."""

from .error_handlers import (
    http_exception_handler,
    internal_exception_handler,
    register_error_handlers,
    service_exception_handler,
    validation_exception_handler,
)
from .identity import get_principal

__all__ = [
    "get_principal",
    "register_error_handlers",
    "validation_exception_handler",
    "service_exception_handler",
    "http_exception_handler",
    "internal_exception_handler",
]
