"""Shared repository helpers: tenant filters and driver error translation."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import ColumnElement
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from permission_management.infrastructure.exceptions import StoreUnavailableException


def tenant_clause(model: Any, tenant_id: str | None) -> ColumnElement[bool]:
    """WHERE clause selecting one tenant's rows (host rows have NULL tenant_id)."""
    if tenant_id is None:
        return model.tenant_id.is_(None)
    return model.tenant_id == tenant_id


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise connection and driver I/O failures as StoreUnavailableException.

    Constraint violations and programming errors propagate unchanged.
    """
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        raise StoreUnavailableException(operation, str(e.orig or e)) from e
    except DBAPIError as e:
        if e.connection_invalidated:
            raise StoreUnavailableException(operation, str(e.orig or e)) from e
        raise
