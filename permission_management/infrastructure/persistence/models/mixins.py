"""SQLAlchemy mixins shared by the permission tables (DRY)."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from permission_management.shared.utils import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TenantMixin:
    """Nullable tenant_id; NULL rows belong to the host.

    No foreign key: tenants are owned by another subsystem.
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[str | None]:
        return mapped_column(String(64), nullable=True, index=True)


class CreatedAtMixin:
    """created_at set by the database (timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class MultiTenantModel(CuidMixin, TenantMixin, CreatedAtMixin):
    """Combined mixin: CUID + nullable tenant_id + created_at."""
