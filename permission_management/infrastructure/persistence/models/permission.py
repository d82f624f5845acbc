"""Permission grant, dynamic definition, and user-role ORM models.

Uniqueness includes the tenant; NULL (host) is folded to '' inside the
unique indexes because SQL treats NULLs as distinct.
"""

from sqlalchemy import Boolean, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from permission_management.core.constants import HOLDER_KEY_MAX_LENGTH
from permission_management.infrastructure.persistence.database import Base
from permission_management.infrastructure.persistence.models.mixins import (
    MultiTenantModel,
)


class PermissionGrantModel(MultiTenantModel, Base):
    """Explicit grant or prohibition. Table: permission_grant."""

    __tablename__ = "permission_grant"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    provider_name: Mapped[str] = mapped_column(String(8), nullable=False)
    provider_key: Mapped[str] = mapped_column(
        String(HOLDER_KEY_MAX_LENGTH), nullable=False
    )
    is_granted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index(
            "ix_permission_grant_holder", "tenant_id", "provider_name", "provider_key"
        ),
    )


Index(
    "uq_permission_grant_key",
    PermissionGrantModel.name,
    PermissionGrantModel.provider_name,
    PermissionGrantModel.provider_key,
    func.coalesce(PermissionGrantModel.tenant_id, ""),
    unique=True,
)


class DynamicPermissionModel(MultiTenantModel, Base):
    """Flat dynamic permission definition. Table: dynamic_permission."""

    __tablename__ = "dynamic_permission"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    is_granted_by_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    group_name: Mapped[str | None] = mapped_column(String(128), nullable=True)


Index(
    "uq_dynamic_permission_name",
    DynamicPermissionModel.name,
    func.coalesce(DynamicPermissionModel.tenant_id, ""),
    unique=True,
)


class UserRoleModel(MultiTenantModel, Base):
    """User-role membership read by the checker. Table: user_role."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(String(HOLDER_KEY_MAX_LENGTH), nullable=False)
    role_id: Mapped[str] = mapped_column(String(HOLDER_KEY_MAX_LENGTH), nullable=False)

    __table_args__ = (Index("ix_user_role_lookup", "tenant_id", "user_id"),)


Index(
    "uq_user_role",
    UserRoleModel.user_id,
    UserRoleModel.role_id,
    func.coalesce(UserRoleModel.tenant_id, ""),
    unique=True,
)
