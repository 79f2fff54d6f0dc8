#!/usr/bin/env python3
"""
Mandi Ledger management CLI.

Usage:
    python manage.py serve            Run migrations and start the API server
    python manage.py migrate          Apply pending database migrations
    python manage.py status           Show migration status and schema checks
    python manage.py reconcile-stock  Compare product stock with the movement log
    python manage.py reconcile-stock --repair
"""

import argparse
import asyncio
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn in the foreground. The app migrates on startup."""
    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "src.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")

    print(f"Starting server on {args.host}:{args.port}...")
    try:
        result = subprocess.run(uvicorn_cmd, cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return
    sys.exit(result.returncode)


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from src.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
        return

    failed = False
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
            failed = True
    if failed:
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Print migration status and schema integrity checks."""
    from src.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    status = asyncio.run(get_migration_status(args.db_path))
    print(f"Database exists:    {status.exists}")
    print(f"Current version:    {status.current_version or 'N/A'}")
    print(f"Applied migrations: {', '.join(status.applied) or '-'}")
    print(f"Pending migrations: {', '.join(status.pending) or '-'}")

    if not status.exists:
        return

    failed = False
    for check in asyncio.run(verify_schema_integrity(args.db_path)):
        print(f"[{'PASS' if check.passed else 'FAIL'}] {check.name}")
        if not check.passed:
            failed = True
            if check.detail:
                print(f"       {check.detail}")
    if failed:
        sys.exit(1)


async def _reconcile(repair: bool):
    from src.application.use_cases import ReconcileStockUseCase
    from src.infrastructure.storage.sqlite import close_pool

    try:
        return await ReconcileStockUseCase().execute(repair=repair)
    finally:
        await close_pool()


def cmd_reconcile_stock(args: argparse.Namespace) -> None:
    """Replay every product's movement log and report drift."""
    from src.config import configure_logging

    configure_logging()
    result = asyncio.run(_reconcile(args.repair))

    print(f"Products checked: {result.products_checked}")
    if not result.drifts:
        print("No drift found.")
        return

    print(f"Drifted products: {len(result.drifts)}")
    for drift in result.drifts:
        action = "repaired" if drift.repaired else "not repaired"
        print(
            f"  #{drift.product_id} {drift.product_name}: "
            f"recorded {drift.recorded:g}, replayed {drift.replayed:g} "
            f"(drift {drift.drift:+g}, {action})"
        )
    if not args.repair:
        print("Run again with --repair to reset stock to the replayed values.")
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Mandi Ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status and schema checks")
    p_status.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_status.set_defaults(func=cmd_status)

    # reconcile-stock
    p_reconcile = sub.add_parser(
        "reconcile-stock", help="Compare product stock with the movement log"
    )
    p_reconcile.add_argument(
        "--repair", action="store_true", help="Reset drifted stock to the replayed value"
    )
    p_reconcile.set_defaults(func=cmd_reconcile_stock)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
