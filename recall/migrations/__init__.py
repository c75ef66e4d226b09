"""
Schema migrations for the persisted document.

Migrations operate on the raw decoded JSON (plain dicts), before it is
validated into pydantic models, and mutate it in place.

Adding a migration:
1. Write a function `migrate_to_vN(data: dict) -> None`
2. Register it in MIGRATIONS under N
3. Bump CURRENT_SCHEMA_VERSION
"""

from __future__ import annotations

from typing import Any, Callable

from recall.logging_utils import get_logger
from recall.migrations.v2_metadata import is_legacy_card, migrate_to_v2


LOG = get_logger()

CURRENT_SCHEMA_VERSION = 2

# Documents without a schemaVersion predate versioning
LEGACY_SCHEMA_VERSION = 1

Migration = Callable[[dict[str, Any]], None]

MIGRATIONS: dict[int, Migration] = {
    2: migrate_to_v2,
}


def get_schema_version(data: dict[str, Any]) -> int:
    version = data.get("schemaVersion")
    return LEGACY_SCHEMA_VERSION if version is None else int(version)


def run_migrations(data: dict[str, Any]) -> bool:
    """
    Upgrade `data` to CURRENT_SCHEMA_VERSION in place.

    Each registered migration from the stored version + 1 up to the current
    version runs in order; schemaVersion is bumped after each one.

    Args:
        data: Decoded persisted document

    Returns:
        True if any migration ran (the caller should persist the result)
    """
    previous = get_schema_version(data)
    migrated = False

    for target in range(previous + 1, CURRENT_SCHEMA_VERSION + 1):
        migration = MIGRATIONS.get(target)
        if migration is None:
            continue

        LOG.info("schema_migration", extra={"from_version": target - 1, "to_version": target})
        migration(data)
        data["schemaVersion"] = target
        migrated = True

    return migrated


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "LEGACY_SCHEMA_VERSION",
    "MIGRATIONS",
    "get_schema_version",
    "is_legacy_card",
    "migrate_to_v2",
    "run_migrations",
]
