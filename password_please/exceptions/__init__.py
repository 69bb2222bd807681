"""
Application exceptions module.

This module provides a centralized location for all custom exceptions.

Usage:
    from password_please.exceptions import InvalidCounterValueError

    if not content.isdigit():
        raise InvalidCounterValueError(path=str(path), content=content)

Exception Hierarchy:
    AppError (base)
    ├── ServiceUnavailableError (503)
    └── CounterStorageError (500)
        ├── CounterFileError
        └── InvalidCounterValueError
"""

from .base import (
    AppError,
    ServiceUnavailableError,
)

from .storage import (
    CounterStorageError,
    CounterFileError,
    InvalidCounterValueError,
)

__all__ = [
    "AppError",
    "ServiceUnavailableError",
    "CounterStorageError",
    "CounterFileError",
    "InvalidCounterValueError",
]
