"""SQLite implementation of purchase storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.purchase import Purchase, PurchaseItem
from src.core.interfaces.document_store import IPurchaseStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLitePurchaseStore(IPurchaseStore):
    """SQLite implementation of purchases and purchase items."""

    async def create_purchase(self, purchase: Purchase) -> Purchase:
        """Create a purchase and its items."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO purchases (
                    vendor_id, vehicle_id, purchase_date, total_amount, status, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    purchase.vendor_id,
                    purchase.vehicle_id,
                    purchase.purchase_date.isoformat(),
                    purchase.total_amount,
                    purchase.status,
                    purchase.created_at.isoformat(),
                ),
            )
            purchase.id = cursor.lastrowid

            for item in purchase.items:
                item.purchase_id = purchase.id
                await self._insert_item(conn, item)

            logger.info(
                "purchase_created",
                purchase_id=purchase.id,
                vendor_id=purchase.vendor_id,
                items=len(purchase.items),
            )
            return purchase

    async def _insert_item(self, conn: aiosqlite.Connection, item: PurchaseItem) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO purchase_items (purchase_id, product_id, quantity, unit_price, total)
            VALUES (?, ?, ?, ?, ?)
            """,
            (item.purchase_id, item.product_id, item.quantity, item.unit_price, item.total),
        )
        item.id = cursor.lastrowid

    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM purchases WHERE id = ?", (purchase_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            purchase = self._row_to_purchase(row)
            purchase.items = (await self._load_items(conn, [purchase_id])).get(purchase_id, [])
            return purchase

    async def list_purchases(self, vendor_id: int | None = None) -> list[Purchase]:
        async with get_connection() as conn:
            if vendor_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM purchases ORDER BY purchase_date DESC, id DESC"
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM purchases WHERE vendor_id = ?
                    ORDER BY purchase_date DESC, id DESC
                    """,
                    (vendor_id,),
                )
            purchases = [self._row_to_purchase(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [p.id for p in purchases])  # type: ignore[misc]
            for purchase in purchases:
                purchase.items = items.get(purchase.id, [])  # type: ignore[arg-type]
            return purchases

    async def _load_items(
        self, conn: aiosqlite.Connection, purchase_ids: list[int]
    ) -> dict[int, list[PurchaseItem]]:
        if not purchase_ids:
            return {}
        placeholders = ", ".join("?" for _ in purchase_ids)
        cursor = await conn.execute(
            f"SELECT * FROM purchase_items WHERE purchase_id IN ({placeholders}) ORDER BY id",
            purchase_ids,
        )
        grouped: dict[int, list[PurchaseItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["purchase_id"], []).append(self._row_to_item(row))
        return grouped

    @staticmethod
    def _row_to_purchase(row: aiosqlite.Row) -> Purchase:
        return Purchase(
            id=row["id"],
            vendor_id=row["vendor_id"],
            vehicle_id=row["vehicle_id"],
            purchase_date=date.fromisoformat(row["purchase_date"]),
            total_amount=row["total_amount"],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PurchaseItem:
        return PurchaseItem(
            id=row["id"],
            purchase_id=row["purchase_id"],
            product_id=row["product_id"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            total=row["total"],
        )
