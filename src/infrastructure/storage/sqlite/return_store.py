"""SQLite implementation of vendor return storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.vendor_return import VendorReturn, VendorReturnItem
from src.core.interfaces.document_store import IVendorReturnStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteVendorReturnStore(IVendorReturnStore):
    """SQLite implementation of vendor returns and their items."""

    async def create_return(self, vendor_return: VendorReturn) -> VendorReturn:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO vendor_returns (
                    vendor_id, purchase_id, vehicle_id, return_date,
                    total_amount, status, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    vendor_return.vendor_id,
                    vendor_return.purchase_id,
                    vendor_return.vehicle_id,
                    vendor_return.return_date.isoformat(),
                    vendor_return.total_amount,
                    vendor_return.status,
                    vendor_return.notes,
                    vendor_return.created_at.isoformat(),
                ),
            )
            vendor_return.id = cursor.lastrowid

            for item in vendor_return.items:
                item.return_id = vendor_return.id
                item_cursor = await conn.execute(
                    """
                    INSERT INTO vendor_return_items (
                        return_id, product_id, quantity, unit_price, total, reason
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item.return_id,
                        item.product_id,
                        item.quantity,
                        item.unit_price,
                        item.total,
                        item.reason,
                    ),
                )
                item.id = item_cursor.lastrowid

            logger.info(
                "vendor_return_created",
                return_id=vendor_return.id,
                vendor_id=vendor_return.vendor_id,
                total_amount=vendor_return.total_amount,
            )
            return vendor_return

    async def get_return(self, return_id: int) -> VendorReturn | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM vendor_returns WHERE id = ?", (return_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            vendor_return = self._row_to_return(row)
            vendor_return.items = (await self._load_items(conn, [return_id])).get(return_id, [])
            return vendor_return

    async def list_returns(self, vendor_id: int | None = None) -> list[VendorReturn]:
        async with get_connection() as conn:
            if vendor_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM vendor_returns ORDER BY return_date DESC, id DESC"
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM vendor_returns WHERE vendor_id = ?
                    ORDER BY return_date DESC, id DESC
                    """,
                    (vendor_id,),
                )
            returns = [self._row_to_return(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [r.id for r in returns])  # type: ignore[misc]
            for vendor_return in returns:
                vendor_return.items = items.get(vendor_return.id, [])  # type: ignore[arg-type]
            return returns

    async def _load_items(
        self, conn: aiosqlite.Connection, return_ids: list[int]
    ) -> dict[int, list[VendorReturnItem]]:
        if not return_ids:
            return {}
        placeholders = ", ".join("?" for _ in return_ids)
        cursor = await conn.execute(
            f"SELECT * FROM vendor_return_items WHERE return_id IN ({placeholders}) ORDER BY id",
            return_ids,
        )
        grouped: dict[int, list[VendorReturnItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["return_id"], []).append(
                VendorReturnItem(
                    id=row["id"],
                    return_id=row["return_id"],
                    product_id=row["product_id"],
                    quantity=row["quantity"],
                    unit_price=row["unit_price"],
                    total=row["total"],
                    reason=row["reason"],
                )
            )
        return grouped

    @staticmethod
    def _row_to_return(row: aiosqlite.Row) -> VendorReturn:
        return VendorReturn(
            id=row["id"],
            vendor_id=row["vendor_id"],
            purchase_id=row["purchase_id"],
            vehicle_id=row["vehicle_id"],
            return_date=date.fromisoformat(row["return_date"]),
            total_amount=row["total_amount"],
            status=row["status"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
