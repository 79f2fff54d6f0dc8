"""Database migrations module."""

from src.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationResult,
    MigrationStatus,
    SchemaCheck,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)

__all__ = [
    "MigrationResult",
    "MigrationStatus",
    "SchemaCheck",
    "get_migration_status",
    "initialize_database",
    "verify_schema_integrity",
]
