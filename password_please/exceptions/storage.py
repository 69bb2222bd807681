"""
Counter storage exception classes.

These are raised while loading the persisted password counter at startup.
They are fatal: the application refuses to start rather than serve with an
ambiguous counter value.
"""
from .base import AppError


class CounterStorageError(AppError):
    """Base class for counter file errors"""

    def __init__(self, message: str = "Counter storage error", path: str = None):
        details = {"path": path} if path else {}
        super().__init__(message, "COUNTER_STORAGE_ERROR", 500, details)


class CounterFileError(CounterStorageError):
    """Counter file could not be opened or read"""

    def __init__(self, message: str = "Failed to open counter file", path: str = None):
        super().__init__(message, path)
        self.code = "COUNTER_FILE_ERROR"


class InvalidCounterValueError(CounterStorageError):
    """Counter file content is not an unsigned decimal integer"""

    def __init__(self, message: str = "Failed to read counter value", path: str = None, content: str = None):
        super().__init__(message, path)
        self.code = "INVALID_COUNTER_VALUE"
        if content is not None:
            self.details["content"] = content
