"""Definition provider that builds catalog nodes from persisted flat records."""

from __future__ import annotations

import logging

from permission_management.application.definition_context import (
    PermissionDefinitionContext,
)
from permission_management.application.interfaces.stores import IDynamicPermissionStore
from permission_management.domain.entities import (
    DynamicPermissionRecord,
    PermissionDefinition,
)
from permission_management.domain.exceptions import (
    OrphanedPermissionException,
    ValidationException,
)

logger = logging.getLogger(__name__)

ORPHAN_POLICIES = ("warn", "error")


class DynamicPermissionDefinitionProvider:
    """Materializes DynamicPermissionRecord rows into the catalog.

    Roots are created first; children are attached in repeated passes until a
    pass creates nothing. Records whose parent never resolves (missing from
    the record set, or part of a cycle) are not created. They are logged, and
    with orphan_policy="error" reported as OrphanedPermissionException once
    every resolvable record is in place.
    """

    def __init__(
        self,
        store: IDynamicPermissionStore,
        default_group_name: str = "Default",
        orphan_policy: str = "warn",
    ) -> None:
        if orphan_policy not in ORPHAN_POLICIES:
            raise ValidationException(
                f"orphan_policy must be one of {ORPHAN_POLICIES}", field="orphan_policy"
            )
        self._store = store
        self._default_group_name = default_group_name
        self._orphan_policy = orphan_policy

    async def define(self, context: PermissionDefinitionContext) -> None:
        records = await self._store.get_records()
        orphans = load_records(context, records, self._default_group_name)
        if not orphans:
            return
        for name, parent_name in orphans.items():
            logger.warning(
                "Dynamic permission %s skipped: parent %s never resolved",
                name,
                parent_name,
            )
        if self._orphan_policy == "error":
            raise OrphanedPermissionException(orphans)


def load_records(
    context: PermissionDefinitionContext,
    records: list[DynamicPermissionRecord],
    default_group_name: str = "Default",
) -> dict[str, str]:
    """Add records to the context; return {name: parent_name} of the uncreated ones.

    Raises:
        DuplicateDefinitionException: If a record name is already defined.
    """
    for record in records:
        group_name = record.group_name or default_group_name
        if context.get_group_or_none(group_name) is None:
            context.add_group(group_name)

    created: dict[str, PermissionDefinition] = {}
    pending: list[DynamicPermissionRecord] = []
    for record in records:
        if record.parent_name:
            pending.append(record)
            continue
        group = context.get_group(record.group_name or default_group_name)
        created[record.name] = group.add_permission(
            record.name,
            display_name=record.display_name,
            description=record.description,
            is_granted_by_default=record.is_granted_by_default,
        )

    # Each pass either attaches at least one child or ends the loop.
    progressed = True
    while pending and progressed:
        progressed = False
        remaining: list[DynamicPermissionRecord] = []
        for record in pending:
            parent = created.get(record.parent_name)
            if parent is None:
                remaining.append(record)
                continue
            created[record.name] = parent.add_child(
                record.name,
                display_name=record.display_name,
                description=record.description,
                is_granted_by_default=record.is_granted_by_default,
            )
            progressed = True
        pending = remaining

    return {record.name: record.parent_name for record in pending}
