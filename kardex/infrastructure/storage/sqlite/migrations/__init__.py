"""Versioned SQL migrations."""

from kardex.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    run_migrations,
)

__all__ = ["MigrationInfo", "MigrationResult", "discover_migrations", "run_migrations"]
