"""Tests for the SQL grant, dynamic definition and user-role stores on SQLite."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine

from permission_management.application.definition_context import (
    PermissionDefinitionManager,
)
from permission_management.application.providers import DynamicPermissionDefinitionProvider
from permission_management.core.tenant_context import change_tenant
from permission_management.domain.entities import DynamicPermissionRecord
from permission_management.domain.enums import PermissionGrantStatus
from permission_management.domain.exceptions import ValidationException
from permission_management.infrastructure.exceptions import StoreUnavailableException
from permission_management.infrastructure.persistence.database import (
    create_session_factory,
)
from permission_management.infrastructure.persistence.models import PermissionGrantModel
from permission_management.infrastructure.persistence.repositories import (
    SqlDynamicPermissionStore,
    SqlPermissionStore,
    SqlUserRoleRepository,
)

GRANTED = PermissionGrantStatus.GRANTED
PROHIBITED = PermissionGrantStatus.PROHIBITED
UNDEFINED = PermissionGrantStatus.UNDEFINED


@pytest.fixture
def store(session_factory) -> SqlPermissionStore:
    return SqlPermissionStore(session_factory)


async def _row_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(PermissionGrantModel))
        return result.scalar_one()


class TestSqlPermissionStore:
    async def test_missing_row_is_undefined(self, store) -> None:
        assert await store.get_status("A", "U", "alice") == UNDEFINED

    async def test_set_status_upserts_single_row(self, store, session_factory) -> None:
        await store.set_status("A", "U", "alice", GRANTED)
        await store.set_status("A", "U", "alice", PROHIBITED)

        assert await store.get_status("A", "U", "alice") == PROHIBITED
        assert await _row_count(session_factory) == 1

    async def test_host_and_tenant_rows_are_distinct(self, store, session_factory) -> None:
        await store.set_status("A", "U", "alice", GRANTED)
        await store.set_status("A", "U", "alice", PROHIBITED, tenant_id="acme")
        await store.set_status("A", "U", "alice", GRANTED)

        assert await store.get_status("A", "U", "alice") == GRANTED
        assert await store.get_status("A", "U", "alice", tenant_id="acme") == PROHIBITED
        assert await store.get_status("A", "U", "alice", tenant_id="other") == UNDEFINED
        assert await _row_count(session_factory) == 2

    async def test_undefined_is_rejected(self, store) -> None:
        with pytest.raises(ValidationException):
            await store.set_status("A", "U", "alice", UNDEFINED)

    async def test_get_all_returns_entities_ordered_by_name(self, store) -> None:
        await store.set_status("B", "R", "admin", PROHIBITED)
        await store.set_status("A", "R", "admin", GRANTED)
        await store.set_status("A", "R", "viewer", GRANTED)

        grants = await store.get_all("R", "admin")

        assert [(g.name, g.is_granted) for g in grants] == [("A", True), ("B", False)]
        assert all(g.tenant_id is None and g.created_at.tzinfo is not None for g in grants)

    async def test_delete_is_idempotent(self, store) -> None:
        await store.set_status("A", "U", "alice", GRANTED)
        await store.delete("A", "U", "alice")
        await store.delete("A", "U", "alice")

        assert await store.get_status("A", "U", "alice") == UNDEFINED

    async def test_batch_save_updates_existing_and_inserts_new(
        self, store, session_factory
    ) -> None:
        await store.set_status("A", "R", "admin", PROHIBITED, tenant_id="acme")

        await store.batch_save(["A", "B", "B", "C"], "R", "admin", True, tenant_id="acme")

        grants = await store.get_all("R", "admin", tenant_id="acme")
        assert [(g.name, g.is_granted) for g in grants] == [
            ("A", True),
            ("B", True),
            ("C", True),
        ]
        assert await _row_count(session_factory) == 3

    async def test_batch_delete_only_touches_holder_and_tenant(self, store) -> None:
        await store.batch_save(["A", "B"], "R", "admin", True, tenant_id="acme")
        await store.batch_save(["A"], "R", "admin", True)

        await store.batch_delete(["A", "B"], "R", "admin", tenant_id="acme")

        assert await store.get_all("R", "admin", tenant_id="acme") == []
        assert await store.get_status("A", "R", "admin") == GRANTED

    async def test_unreachable_database_raises_store_unavailable(self, tmp_path) -> None:
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'grants.db'}"
        )
        store = SqlPermissionStore(create_session_factory(engine))
        try:
            with pytest.raises(StoreUnavailableException) as exc_info:
                await store.get_status("A", "U", "alice")
            assert exc_info.value.error_code == "STORE_UNAVAILABLE"
            assert exc_info.value.details["operation"] == "get_status"
        finally:
            await engine.dispose()


class TestSqlDynamicPermissionStore:
    async def test_records_round_trip_per_tenant(self, session_factory) -> None:
        store = SqlDynamicPermissionStore(session_factory)
        await store.save_record(DynamicPermissionRecord("Docs", group_name="Content"))
        with change_tenant("acme"):
            await store.save_record(
                DynamicPermissionRecord("Docs", display_name="Acme docs", is_granted_by_default=True)
            )

        host_records = await store.get_records()
        with change_tenant("acme"):
            acme_records = await store.get_records()

        assert host_records == [DynamicPermissionRecord("Docs", group_name="Content")]
        assert acme_records == [
            DynamicPermissionRecord("Docs", display_name="Acme docs", is_granted_by_default=True)
        ]

    async def test_save_record_updates_existing(self, session_factory) -> None:
        store = SqlDynamicPermissionStore(session_factory)
        await store.save_record(DynamicPermissionRecord("Docs"))
        await store.save_record(DynamicPermissionRecord("Docs", description="All documents"))

        assert await store.get_records() == [
            DynamicPermissionRecord("Docs", description="All documents")
        ]

    async def test_delete_record(self, session_factory) -> None:
        store = SqlDynamicPermissionStore(session_factory)
        await store.save_record(DynamicPermissionRecord("Docs"))
        await store.delete_record("Docs")
        await store.delete_record("Docs")

        assert await store.get_records() == []

    async def test_provider_builds_tree_from_rows(self, session_factory) -> None:
        store = SqlDynamicPermissionStore(session_factory)
        await store.save_record(DynamicPermissionRecord("Docs.Edit", parent_name="Docs"))
        await store.save_record(DynamicPermissionRecord("Docs", group_name="Content"))
        await store.save_record(DynamicPermissionRecord("Stray", parent_name="Gone"))
        manager = PermissionDefinitionManager([DynamicPermissionDefinitionProvider(store)])

        await manager.initialize()

        assert manager.get_permission("Docs.Edit").parent is manager.get_permission("Docs")
        assert manager.get_permission_or_none("Stray") is None


class TestSqlUserRoleRepository:
    async def test_assign_list_and_remove(self, session_factory) -> None:
        repo = SqlUserRoleRepository(session_factory)
        await repo.assign_role("alice", "editor")
        await repo.assign_role("alice", "admin")
        await repo.assign_role("alice", "admin")
        await repo.assign_role("alice", "auditor", tenant_id="acme")

        assert sorted(await repo.get_role_ids("alice", None)) == ["admin", "editor"]
        assert await repo.get_role_ids("alice", "acme") == ["auditor"]

        await repo.remove_role("alice", "editor")
        assert await repo.get_role_ids("alice", None) == ["admin"]
