"""UserRole repository: role memberships read by the permission checker."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from permission_management.infrastructure.persistence.models.permission import (
    UserRoleModel,
)
from permission_management.infrastructure.persistence.repositories.base import (
    tenant_clause,
    translate_store_errors,
)


class SqlUserRoleRepository:
    """User-role link table. Lists, assigns and removes roles of a user."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_role_ids(self, user_id: str, tenant_id: str | None) -> list[str]:
        with translate_store_errors("get_role_ids"):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UserRoleModel.role_id)
                    .where(
                        UserRoleModel.user_id == user_id,
                        tenant_clause(UserRoleModel, tenant_id),
                    )
                    .order_by(UserRoleModel.created_at, UserRoleModel.role_id)
                )
                return list(result.scalars().all())

    async def assign_role(
        self, user_id: str, role_id: str, tenant_id: str | None = None
    ) -> None:
        """Add the membership; no-op when it already exists."""
        with translate_store_errors("assign_role"):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    select(UserRoleModel.id).where(
                        UserRoleModel.user_id == user_id,
                        UserRoleModel.role_id == role_id,
                        tenant_clause(UserRoleModel, tenant_id),
                    )
                )
                if result.scalar_one_or_none() is None:
                    session.add(
                        UserRoleModel(user_id=user_id, role_id=role_id, tenant_id=tenant_id)
                    )

    async def remove_role(
        self, user_id: str, role_id: str, tenant_id: str | None = None
    ) -> None:
        with translate_store_errors("remove_role"):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    delete(UserRoleModel).where(
                        UserRoleModel.user_id == user_id,
                        UserRoleModel.role_id == role_id,
                        tenant_clause(UserRoleModel, tenant_id),
                    )
                )
