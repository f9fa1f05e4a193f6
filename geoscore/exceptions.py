"""Custom exceptions for the scoring core."""

from typing import Any


class GeoScoreError(Exception):
    """Base exception for the GEO visibility scoring core."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to the error envelope used in reports."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}


class EmptyResultSetError(GeoScoreError):
    """Aggregation was called without any judge evaluations."""

    def __init__(self, message: str = "Cannot aggregate empty results"):
        super().__init__(message=message, code="empty_result_set")


class ValidationError(GeoScoreError):
    """Input payload failed validation."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="validation_error",
            details=details,
        )
