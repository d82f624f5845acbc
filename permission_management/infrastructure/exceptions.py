"""Infrastructure exceptions raised by storage backends."""

from permission_management.domain.exceptions import PermissionManagementException


class StoreUnavailableException(PermissionManagementException):
    """Raised when the backing store cannot be reached (connection, driver I/O).

    Not retried internally; retry policy belongs to the caller.
    """

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize with the failed store operation.

        Args:
            operation: Store method that failed (e.g. 'set_status').
            reason: Driver error message.
        """
        super().__init__(
            f"Permission store unavailable during {operation}: {reason}",
            "STORE_UNAVAILABLE",
            {"operation": operation, "reason": reason},
        )


class DatabaseNotConfiguredException(PermissionManagementException):
    """Raised when an SQL store is requested but DATABASE_URL is empty."""

    def __init__(self) -> None:
        super().__init__(
            "SQL database not configured; set DATABASE_URL",
            "DATABASE_NOT_CONFIGURED",
        )
