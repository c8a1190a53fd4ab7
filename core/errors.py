# core/errors.py

from fastapi import HTTPException


class StoreError(Exception):
    """Base class for in-memory store failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFound(StoreError):
    pass


class DuplicateRecord(StoreError):
    pass


class QuotaExceeded(StoreError):
    pass


def extract_store_error(error: Exception) -> str:
    """
    Readable detail for store exceptions and plain Python errors alike.
    """
    if isinstance(error, StoreError):
        return error.message

    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or error.__class__.__name__


def handle_store_error(error: Exception, operation: str = "Store operation", status_code: int = 500) -> HTTPException:
    """
    Handle store errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to create project")
        status_code: HTTP status code for errors without a specific mapping

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    if isinstance(error, HTTPException):
        return error

    error_detail = extract_store_error(error)
    logger.error(f"{operation}: {error_detail}")

    if isinstance(error, RecordNotFound):
        return HTTPException(status_code=404, detail=f"{operation}: {error_detail}")
    if isinstance(error, DuplicateRecord):
        return HTTPException(status_code=409, detail=f"{operation}: {error_detail}")
    if isinstance(error, QuotaExceeded):
        return HTTPException(status_code=507, detail=f"{operation}: {error_detail}")
    if isinstance(error, ValueError):
        return HTTPException(status_code=422, detail=f"{operation}: {error_detail}")

    return HTTPException(status_code=status_code, detail=f"{operation} failed")
