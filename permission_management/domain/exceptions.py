"""Domain exceptions for permission management.

Defines domain-level exceptions that represent business rule violations
(catalog invariants, unknown permissions, malformed holders). These are
independent of infrastructure concerns; the API layer maps them to HTTP
responses.
"""

from typing import Any


class PermissionManagementException(Exception):
    """Base exception for all permission management errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. permission name, holder).
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
        """Serialize for JSON error responses."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(PermissionManagementException):
    """Raised when input validation fails (e.g. empty name, unknown provider)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class UnknownPermissionException(PermissionManagementException):
    """Raised when a permission name is not defined in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Permission is not defined: {name}",
            "UNKNOWN_PERMISSION",
            {"name": name},
        )


class DuplicateDefinitionException(PermissionManagementException):
    """Raised when a permission or group name is defined twice in the catalog."""

    def __init__(self, name: str, kind: str = "permission") -> None:
        """Initialize with the duplicate name.

        Args:
            name: The permission or group name that already exists.
            kind: 'permission' or 'group'.
        """
        super().__init__(
            f"{kind.capitalize()} '{name}' is already defined",
            "DUPLICATE_DEFINITION",
            {"name": name, "kind": kind},
        )


class PermissionGroupNotFoundException(PermissionManagementException):
    """Raised when a requested permission group does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Permission group not found: {name}",
            "PERMISSION_GROUP_NOT_FOUND",
            {"name": name},
        )


class CatalogNotInitializedException(PermissionManagementException):
    """Raised when the catalog is read before definition providers have run."""

    def __init__(self) -> None:
        super().__init__(
            "Permission catalog is not initialized; call initialize() at startup.",
            "CATALOG_NOT_INITIALIZED",
        )


class OrphanedPermissionException(PermissionManagementException):
    """Raised when dynamic records reference parents that never resolve."""

    def __init__(self, orphans: dict[str, str]) -> None:
        """Initialize with the unresolved records.

        Args:
            orphans: Mapping of record name -> missing or cyclic parent name.
        """
        super().__init__(
            f"{len(orphans)} dynamic permission(s) have unresolved parents",
            "ORPHANED_PERMISSION",
            {"orphans": dict(orphans)},
        )


class InvalidHolderKeyException(PermissionManagementException):
    """Raised when a holder key (provider_key) is empty or malformed."""

    def __init__(self, provider_key: str | None, reason: str) -> None:
        """Initialize with the rejected key and reason.

        Args:
            provider_key: The rejected holder key.
            reason: Human-readable reason (e.g. 'empty').
        """
        super().__init__(
            f"Invalid holder key: {reason}",
            "INVALID_HOLDER_KEY",
            {"provider_key": provider_key, "reason": reason},
        )


class AuthorizationException(PermissionManagementException):
    """Raised when a principal lacks the required permission."""

    def __init__(self, name: str, holder: str | None = None) -> None:
        """Initialize with the permission and optional holder id.

        Args:
            name: Permission that was required.
            holder: Optional user id of the denied principal.
        """
        details: dict[str, Any] = {"name": name}
        if holder:
            details["holder"] = holder
        super().__init__(f"Permission denied: {name}", "PERMISSION_DENIED", details)


class BatchOperationException(PermissionManagementException):
    """Raised when a per-item batch fallback fails after committing some items.

    The original error is chained as __cause__; committed items are not
    rolled back.
    """

    def __init__(
        self,
        operation: str,
        committed: list[str],
        failed: str,
        reason: str,
    ) -> None:
        """Initialize with batch progress.

        Args:
            operation: 'grant' or 'revoke'.
            committed: Names already written before the failure.
            failed: Name whose write failed.
            reason: Error message of the failure.
        """
        super().__init__(
            f"Batch {operation} failed at '{failed}' after {len(committed)} item(s)",
            "BATCH_PARTIAL_FAILURE",
            {
                "operation": operation,
                "committed": list(committed),
                "failed": failed,
                "reason": reason,
            },
        )
