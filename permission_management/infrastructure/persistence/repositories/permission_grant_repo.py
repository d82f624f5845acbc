"""SQL grant store: one row per (name, provider_name, provider_key, tenant_id).

Each write runs in its own transaction, so a cancelled call rolls back
instead of leaving a partial write. Batch writes for one holder share a
single transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from permission_management.domain.entities import PermissionGrant
from permission_management.domain.enums import PermissionGrantStatus
from permission_management.domain.exceptions import ValidationException
from permission_management.infrastructure.persistence.models.permission import (
    PermissionGrantModel,
)
from permission_management.infrastructure.persistence.repositories.base import (
    tenant_clause,
    translate_store_errors,
)
from permission_management.shared.utils import ensure_utc

logger = logging.getLogger(__name__)


def _to_entity(row: PermissionGrantModel) -> PermissionGrant:
    return PermissionGrant(
        id=row.id,
        name=row.name,
        provider_name=row.provider_name,
        provider_key=row.provider_key,
        is_granted=row.is_granted,
        tenant_id=row.tenant_id,
        created_at=ensure_utc(row.created_at),
    )


class SqlPermissionStore:
    """Tenant-aware grant store on SQLAlchemy async sessions. Batch-capable."""

    supports_batch = True

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @staticmethod
    def _holder_filter(
        provider_name: str, provider_key: str, tenant_id: str | None
    ) -> list:
        return [
            PermissionGrantModel.provider_name == provider_name,
            PermissionGrantModel.provider_key == provider_key,
            tenant_clause(PermissionGrantModel, tenant_id),
        ]

    async def get_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> PermissionGrantStatus:
        with translate_store_errors("get_status"):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(PermissionGrantModel.is_granted).where(
                        PermissionGrantModel.name == name,
                        *self._holder_filter(provider_name, provider_key, tenant_id),
                    )
                )
                is_granted = result.scalar_one_or_none()
        if is_granted is None:
            return PermissionGrantStatus.UNDEFINED
        return (
            PermissionGrantStatus.GRANTED if is_granted else PermissionGrantStatus.PROHIBITED
        )

    async def get_all(
        self, provider_name: str, provider_key: str, *, tenant_id: str | None = None
    ) -> list[PermissionGrant]:
        with translate_store_errors("get_all"):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(PermissionGrantModel)
                    .where(*self._holder_filter(provider_name, provider_key, tenant_id))
                    .order_by(PermissionGrantModel.name)
                )
                return [_to_entity(row) for row in result.scalars().all()]

    async def set_status(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        status: PermissionGrantStatus,
        *,
        tenant_id: str | None = None,
    ) -> None:
        if status == PermissionGrantStatus.UNDEFINED:
            raise ValidationException(
                "UNDEFINED is not a storable status; use delete()", field="status"
            )
        await self._save(
            "set_status",
            [name],
            provider_name,
            provider_key,
            status == PermissionGrantStatus.GRANTED,
            tenant_id,
        )

    async def delete(
        self,
        name: str,
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> None:
        await self._delete("delete", [name], provider_name, provider_key, tenant_id)

    async def batch_save(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
        *,
        tenant_id: str | None = None,
    ) -> None:
        await self._save(
            "batch_save", names, provider_name, provider_key, is_granted, tenant_id
        )

    async def batch_delete(
        self,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        *,
        tenant_id: str | None = None,
    ) -> None:
        await self._delete("batch_delete", names, provider_name, provider_key, tenant_id)

    async def _save(
        self,
        operation: str,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
        tenant_id: str | None,
    ) -> None:
        names = list(dict.fromkeys(names))
        if not names:
            return
        # A concurrent writer may insert the same key between our SELECT and
        # INSERT; the second attempt then finds the row and updates it.
        for attempt in (1, 2):
            try:
                with translate_store_errors(operation):
                    async with self._session_factory() as session, session.begin():
                        await self._upsert(
                            session, names, provider_name, provider_key, is_granted, tenant_id
                        )
                return
            except IntegrityError:
                if attempt == 2:
                    raise
                logger.debug(
                    "Concurrent grant insert for %s/%s; retrying as update",
                    provider_name,
                    provider_key,
                )

    async def _upsert(
        self,
        session: AsyncSession,
        names: list[str],
        provider_name: str,
        provider_key: str,
        is_granted: bool,
        tenant_id: str | None,
    ) -> None:
        result = await session.execute(
            select(PermissionGrantModel).where(
                PermissionGrantModel.name.in_(names),
                *self._holder_filter(provider_name, provider_key, tenant_id),
            )
        )
        existing = {row.name: row for row in result.scalars().all()}
        for name in names:
            row = existing.get(name)
            if row is not None:
                row.is_granted = is_granted
                continue
            session.add(
                PermissionGrantModel(
                    name=name,
                    provider_name=provider_name,
                    provider_key=provider_key,
                    is_granted=is_granted,
                    tenant_id=tenant_id,
                )
            )

    async def _delete(
        self,
        operation: str,
        names: Sequence[str],
        provider_name: str,
        provider_key: str,
        tenant_id: str | None,
    ) -> None:
        if not names:
            return
        with translate_store_errors(operation):
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    delete(PermissionGrantModel).where(
                        PermissionGrantModel.name.in_(list(names)),
                        *self._holder_filter(provider_name, provider_key, tenant_id),
                    )
                )
