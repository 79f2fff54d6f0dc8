"""
Versioned schema migrations for the ledger database.

Migration files live beside this module as ``v<NNN>_<name>.sql`` and are
recorded in ``schema_migrations`` with a content checksum. An existing
database file is copied aside before migrating and copied back if any
migration fails, so a failed upgrade leaves the ledger as it was.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = [
    "vendors",
    "customers",
    "products",
    "vehicles",
    "purchases",
    "purchase_items",
    "invoices",
    "invoice_items",
    "vendor_returns",
    "vendor_return_items",
    "vendor_payments",
    "customer_payments",
    "hamali_cash_payments",
    "stock_movements",
    "vehicle_inventory",
    "vehicle_inventory_movements",
    "schema_migrations",
]

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    exists: bool
    current_version: str | None = None
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


@dataclass
class SchemaCheck:
    name: str
    passed: bool
    detail: str = ""


def _resolve_db_path(db_path: Path | None) -> Path:
    return db_path if db_path is not None else get_settings().storage.db_path


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order; misnamed files are skipped."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> checksum. Empty before the first migration."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.monotonic()

    def elapsed() -> int:
        return int((time.monotonic() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)"
            " VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed(), str(e))

    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = await cursor.fetchall()
    if violations:
        error = f"{len(violations)} foreign key violations after migration"
        logger.error("migration_left_violations", version=migration.version, count=len(violations))
        return MigrationResult(migration.version, migration.name, False, elapsed(), error)

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed())
    return MigrationResult(migration.version, migration.name, True, elapsed())


async def _apply_pending(db_path: Path) -> list[MigrationResult]:
    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        applied = await get_applied_migrations(conn)

        for migration in discover_migrations():
            if migration.version in applied:
                if applied[migration.version] != migration.checksum:
                    # An edited migration is never re-run against live data.
                    logger.error("migration_checksum_changed", version=migration.version)
                    break
                continue
            result = await _apply(conn, migration)
            results.append(result)
            if not result.success:
                break
    return results


def _snapshot(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def _restore(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    backup_path.unlink()
    logger.warning("database_restored_from_backup", db_path=str(db_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply every pending migration.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file aside and restore it on failure

    Returns:
        Results for the migrations that were attempted; empty when up to date
    """
    db_path = _resolve_db_path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = _snapshot(db_path) if create_backup_before and db_path.exists() else None
    try:
        results = await _apply_pending(db_path)
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path is not None:
            _restore(db_path, backup_path)
        raise

    if backup_path is not None:
        if all(r.success for r in results):
            backup_path.unlink()
        else:
            _restore(db_path, backup_path)
    return results


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    db_path = _resolve_db_path(db_path)
    discovered = [m.version for m in discover_migrations()]
    if not db_path.exists():
        return MigrationStatus(exists=False, pending=discovered)

    async with aiosqlite.connect(db_path) as conn:
        applied = sorted(await get_applied_migrations(conn))
    return MigrationStatus(
        exists=True,
        current_version=applied[-1] if applied else None,
        applied=applied,
        pending=[v for v in discovered if v not in applied],
    )


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """Foreign keys, SQLite's own integrity check, and the ledger's tables."""
    db_path = _resolve_db_path(db_path)
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        SchemaCheck("foreign_keys", violations == 0, f"{violations} violations" if violations else ""),
        SchemaCheck("integrity", integrity == "ok", "" if integrity == "ok" else integrity),
        SchemaCheck("required_tables", not missing, ", ".join(missing)),
    ]
