"""Diagnostics services.

 - ``LoggingService``: ring-buffer capture of ``chartbind`` log records
 - ``ErrorHandlingService``: failure capture for native engine callbacks
"""

from .logging_service import LoggingService, get_logging_service  # noqa: F401
from .error_handling_service import ErrorHandlingService  # noqa: F401

__all__ = [
    "LoggingService",
    "get_logging_service",
    "ErrorHandlingService",
]
