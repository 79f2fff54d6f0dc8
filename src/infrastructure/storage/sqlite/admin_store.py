"""Administrative table statistics and destructive table clears."""

import aiosqlite

from src.config import get_logger
from src.core.exceptions import EntityInUseError, ValidationError
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

# Children first so foreign keys never block a clear.
CLEARABLE_TABLES = (
    "hamali_cash_payments",
    "customer_payments",
    "vendor_payments",
    "vehicle_inventory_movements",
    "vehicle_inventory",
    "stock_movements",
    "vendor_return_items",
    "vendor_returns",
    "invoice_items",
    "invoices",
    "purchase_items",
    "purchases",
    "vehicles",
    "products",
    "customers",
    "vendors",
)

# Dependent tables cleared along with the requested one.
_DEPENDENTS = {
    "invoices": ("invoice_items",),
    "purchases": ("purchase_items",),
    "vendor_returns": ("vendor_return_items",),
    "vehicles": ("vehicle_inventory_movements", "vehicle_inventory"),
}


class SQLiteAdminStore:
    """Row counts and whitelisted clears. Not part of ledger accounting."""

    async def table_stats(self) -> dict[str, int]:
        stats: dict[str, int] = {}
        async with get_connection() as conn:
            for table in CLEARABLE_TABLES:
                cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
                stats[table] = (await cursor.fetchone())[0]
        return stats

    async def clear_table(self, table: str) -> int:
        """Delete every row of a whitelisted table. Returns rows removed."""
        if table not in CLEARABLE_TABLES:
            raise ValidationError("table", "is not a clearable table", table)

        async with get_transaction() as conn:
            try:
                for dependent in _DEPENDENTS.get(table, ()):
                    await conn.execute(f"DELETE FROM {dependent}")
                cursor = await conn.execute(f"DELETE FROM {table}")
            except aiosqlite.IntegrityError as e:
                raise EntityInUseError("table", table) from e
            logger.warning("table_cleared", table=table, rows=cursor.rowcount)
            return cursor.rowcount
