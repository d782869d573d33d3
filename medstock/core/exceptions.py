# medstock/core/exceptions.py

from fastapi import HTTPException

from medstock.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | list | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class NotFoundError(AppException):
    def __init__(
        self,
        message: str = "Resource not found",
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
        details: dict | None = None,
    ):
        super().__init__(404, message, error_code, details)


class StorageFaultError(AppException):
    """The store was unavailable or the transaction was aborted; nothing was applied."""

    def __init__(self, message: str = "Storage operation failed", details: dict | None = None):
        super().__init__(500, message, ErrorCode.STORAGE_FAULT, details)
