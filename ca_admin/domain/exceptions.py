"""Domain exceptions for the CA admin back office.

Defines domain-level exceptions that represent business rule violations and
store failures. Presentation layer maps them to HTTP responses in exception
handlers; multi-step engines catch leaf failures and report them instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ca_admin.application.dtos.cascade import CascadeDeleteResult


class CaAdminException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CaAdminException):
    """Raised when input validation fails (e.g. malformed contact, PAN or email)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(CaAdminException):
    """Raised when a reference resolves to nothing."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'client', 'year').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ResourceAlreadyExistsException(CaAdminException):
    """Raised when an explicitly created child (e.g. a year) already exists."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} already exists: {resource_id}",
            "RESOURCE_ALREADY_EXISTS",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class StoreException(CaAdminException):
    """Raised when an underlying document database call fails.

    Attributes:
        code: Store status code in lowercase-hyphen form
            (e.g. 'not-found', 'permission-denied', 'unavailable').
    """

    def __init__(self, code: str, message: str, path: str | None = None) -> None:
        """Initialize with store code, message and optional document path.

        Args:
            code: Store status code (e.g. 'unavailable').
            message: Message returned by the store or transport.
            path: Optional path of the document or collection involved.
        """
        self.code = code
        details: dict[str, Any] = {"code": code}
        if path:
            details["path"] = path
        super().__init__(message, "STORE_ERROR", details)


class PartialCascadeException(CaAdminException):
    """Raised when a cascade delete could not remove its root document.

    Descendant cleanup may have partially succeeded; the partial result is
    attached so callers can report what was removed.
    """

    def __init__(self, result: CascadeDeleteResult) -> None:
        self.result = result
        super().__init__(
            f"Cascade delete incomplete for {result.client_path}",
            "PARTIAL_CASCADE",
            {
                "client_path": result.client_path,
                "deleted_years": result.deleted_years,
                "deleted_documents": result.deleted_documents,
                "deleted_generic": result.deleted_generic,
                "errors": [e.message for e in result.errors],
            },
        )
