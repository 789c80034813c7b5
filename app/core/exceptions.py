"""
Base exception classes for application-wide error handling.

Every domain error in the portal derives from BaseApplicationError so that
views can turn any of them into the same JSON error body.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Missing or malformed input, broken preconditions
    └── ConflictError - State conflicts (duplicate members, ledger edits)

Usage:
    from core.exceptions import ConflictError, ValidationError

    # Raise with message only
    raise ValidationError("Fee item is required")

    # Raise with error code and details for the client
    raise ConflictError(
        "Matric number already registered",
        error_code="MATRIC_NUMBER_EXISTS",
        details={"matric_number": "CS/2021/001"},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, references, etc.)

    Example:
        try:
            record = ReconciliationService.record_success(member, fee, result)
        except BaseApplicationError as e:
            logger.warning(f"Payment not recorded: {e.error_code}")
            return Response(e.to_dict(), status=400)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Fee item not found",
                "error_code": "FEE_ITEM_NOT_FOUND",
                "details": {"fee_item_id": "dues"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required inputs (member, fee item, gateway reference)
    - Business rule violations caught before any side effect
    - Field-level validation errors in services

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate registrations (email, matric number)
    - Attempts to edit or delete an append-only row

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
