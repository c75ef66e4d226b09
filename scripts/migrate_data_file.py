"""
Run schema migrations on a recall JSON data file.

Upgrades an older document (e.g. v1 cards with top-level easeFactor /
interval / stepIndex) to the current schema version in place.

Usage:
    # Migrate the file
    python -m scripts.migrate_data_file data/recall.json

    # Dry run - report what would change without writing
    python -m scripts.migrate_data_file data/recall.json --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from recall.migrations import CURRENT_SCHEMA_VERSION, get_schema_version, is_legacy_card, run_migrations
from recall.storage.persistence import JsonFilePersistence


def count_legacy_cards(document: dict) -> int:
    return sum(
        1
        for deck in document.get("decks") or []
        for record in (deck.get("cards") or {}).values()
        if is_legacy_card(record)
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate a recall data file to the current schema")
    parser.add_argument("path", type=Path, help="JSON data file")
    parser.add_argument("--dry-run", action="store_true", help="Show what would change without writing")
    args = parser.parse_args(argv)

    persistence = JsonFilePersistence(args.path)
    document = persistence.read()
    if document is None:
        print(f"No data file found at: {args.path}")
        return 1

    version = get_schema_version(document)
    legacy = count_legacy_cards(document)
    print(f"Schema version: {version} (current: {CURRENT_SCHEMA_VERSION})")
    print(f"Legacy cards:   {legacy}")

    if not run_migrations(document):
        print("✓ Already up to date, nothing to do")
        return 0

    if args.dry_run:
        print(f"\n⚠ DRY RUN MODE - would migrate to schema {document['schemaVersion']}, nothing written")
        return 0

    persistence.write(document)
    print(f"✓ Migrated {args.path} to schema {document['schemaVersion']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
