"""SQL store for dynamic permission definition records (ambient tenant)."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from permission_management.core.tenant_context import current_tenant_id
from permission_management.domain.entities import DynamicPermissionRecord
from permission_management.infrastructure.persistence.models.permission import (
    DynamicPermissionModel,
)
from permission_management.infrastructure.persistence.repositories.base import (
    tenant_clause,
    translate_store_errors,
)


class SqlDynamicPermissionStore:
    """Reads and writes DynamicPermissionRecord rows of the ambient tenant."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_records(self) -> list[DynamicPermissionRecord]:
        with translate_store_errors("get_records"):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(DynamicPermissionModel)
                    .where(tenant_clause(DynamicPermissionModel, current_tenant_id()))
                    .order_by(DynamicPermissionModel.created_at, DynamicPermissionModel.name)
                )
                rows = result.scalars().all()
        return [
            DynamicPermissionRecord(
                name=row.name,
                display_name=row.display_name,
                description=row.description,
                parent_name=row.parent_name,
                is_granted_by_default=row.is_granted_by_default,
                group_name=row.group_name,
            )
            for row in rows
        ]

    async def save_record(self, record: DynamicPermissionRecord) -> None:
        tenant_id = current_tenant_id()
        with translate_store_errors("save_record"):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    select(DynamicPermissionModel).where(
                        DynamicPermissionModel.name == record.name,
                        tenant_clause(DynamicPermissionModel, tenant_id),
                    )
                )
                row = result.scalar_one_or_none()
                if row is None:
                    row = DynamicPermissionModel(name=record.name, tenant_id=tenant_id)
                    session.add(row)
                row.display_name = record.display_name
                row.description = record.description
                row.parent_name = record.parent_name
                row.is_granted_by_default = record.is_granted_by_default
                row.group_name = record.group_name

    async def delete_record(self, name: str) -> None:
        with translate_store_errors("delete_record"):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    delete(DynamicPermissionModel).where(
                        DynamicPermissionModel.name == name,
                        tenant_clause(DynamicPermissionModel, current_tenant_id()),
                    )
                )
