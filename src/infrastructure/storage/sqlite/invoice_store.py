"""
SQLite implementation of invoice storage.

Handles invoice headers and line items. Weight breakdowns are stored as a
JSON array on the item row.
"""

import json
from datetime import UTC, date, datetime
from typing import Any

import aiosqlite

from src.config import get_logger
from src.core.entities.invoice import (
    HamaliMode,
    Invoice,
    InvoiceItem,
    InvoiceStatus,
)
from src.core.exceptions import DuplicateInvoiceNumberError, EntityNotFoundError
from src.core.interfaces.document_store import IInvoiceStore, InvoiceFilter
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """SQLite implementation of invoice storage."""

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create a new invoice with its items."""
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO invoices (
                        invoice_number, customer_id, vehicle_id, vendor_id, invoice_date,
                        subtotal, bags, include_hamali_charge, hamali_mode,
                        hamali_rate_per_kg, hamali_rate_per_bag, hamali_charge_amount,
                        hamali_paid_by_cash, total_kg_weight, grand_total, status,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice.invoice_number,
                        invoice.customer_id,
                        invoice.vehicle_id,
                        invoice.vendor_id,
                        invoice.invoice_date.isoformat(),
                        invoice.subtotal,
                        invoice.bags,
                        int(invoice.include_hamali_charge),
                        invoice.hamali_mode.value if invoice.hamali_mode else None,
                        invoice.hamali_rate_per_kg,
                        invoice.hamali_rate_per_bag,
                        invoice.hamali_charge_amount,
                        int(invoice.hamali_paid_by_cash),
                        invoice.total_kg_weight,
                        invoice.grand_total,
                        invoice.status.value,
                        invoice.created_at.isoformat(),
                        invoice.updated_at.isoformat(),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                if "invoice_number" in str(e):
                    raise DuplicateInvoiceNumberError(invoice.invoice_number) from e
                raise
            invoice.id = cursor.lastrowid

            for item in invoice.items:
                item.invoice_id = invoice.id
                await self._insert_item(conn, item)

            logger.info(
                "invoice_created",
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                items=len(invoice.items),
            )
            return invoice

    async def _insert_item(self, conn: aiosqlite.Connection, item: InvoiceItem) -> None:
        """Insert a single line item."""
        cursor = await conn.execute(
            """
            INSERT INTO invoice_items (
                invoice_id, product_id, vehicle_id, quantity, unit_price,
                total, bags, weight_breakdown
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.invoice_id,
                item.product_id,
                item.vehicle_id,
                item.quantity,
                item.unit_price,
                item.total,
                item.bags,
                json.dumps(item.weight_breakdown) if item.weight_breakdown else None,
            ),
        )
        item.id = cursor.lastrowid

    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        """Get invoice by ID with items."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            invoice = self._row_to_invoice(row)
            invoice.items = (await self._load_items(conn, [invoice_id])).get(invoice_id, [])
            return invoice

    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT id FROM invoices WHERE invoice_number = ?", (invoice_number,)
            )
            row = await cursor.fetchone()
        return await self.get_invoice(row["id"]) if row else None

    async def get_item(self, item_id: int) -> InvoiceItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoice_items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
            return self._row_to_item(row) if row else None

    async def list_invoices(
        self, filters: InvoiceFilter | None = None
    ) -> tuple[list[Invoice], int]:
        """List invoices newest first, with the unpaginated total."""
        filters = filters or InvoiceFilter()
        where, params = self._build_where(filters)

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM invoices i LEFT JOIN vehicles v ON v.id = i.vehicle_id {where}",
                params,
            )
            total = (await cursor.fetchone())[0]

            query = (
                f"SELECT i.* FROM invoices i LEFT JOIN vehicles v ON v.id = i.vehicle_id {where} "
                "ORDER BY i.invoice_date DESC, i.id DESC"
            )
            page_params = list(params)
            if filters.limit is not None:
                query += " LIMIT ? OFFSET ?"
                page_params.extend([filters.limit, filters.offset])

            cursor = await conn.execute(query, page_params)
            invoices = [self._row_to_invoice(row) for row in await cursor.fetchall()]
            items = await self._load_items(conn, [i.id for i in invoices])  # type: ignore[misc]
            for invoice in invoices:
                invoice.items = items.get(invoice.id, [])  # type: ignore[arg-type]
            return invoices, total

    @staticmethod
    def _build_where(filters: InvoiceFilter) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        if filters.start_date is not None:
            clauses.append("i.invoice_date >= ?")
            params.append(filters.start_date.isoformat())
        if filters.end_date is not None:
            clauses.append("i.invoice_date <= ?")
            params.append(filters.end_date.isoformat())
        if filters.customer_id is not None:
            clauses.append("i.customer_id = ?")
            params.append(filters.customer_id)
        if filters.vehicle_id is not None:
            clauses.append("i.vehicle_id = ?")
            params.append(filters.vehicle_id)
        if filters.shop is not None:
            clauses.append("v.shop = ?")
            params.append(filters.shop)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    async def list_items(self, invoice_id: int | None = None) -> list[InvoiceItem]:
        async with get_connection() as conn:
            if invoice_id is None:
                cursor = await conn.execute("SELECT * FROM invoice_items ORDER BY id")
            else:
                cursor = await conn.execute(
                    "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY id",
                    (invoice_id,),
                )
            return [self._row_to_item(row) for row in await cursor.fetchall()]

    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Persist the header and every existing item in one transaction."""
        invoice.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET
                    invoice_date = ?, subtotal = ?, bags = ?, include_hamali_charge = ?,
                    hamali_mode = ?, hamali_rate_per_kg = ?, hamali_rate_per_bag = ?,
                    hamali_charge_amount = ?, hamali_paid_by_cash = ?, total_kg_weight = ?,
                    grand_total = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    invoice.invoice_date.isoformat(),
                    invoice.subtotal,
                    invoice.bags,
                    int(invoice.include_hamali_charge),
                    invoice.hamali_mode.value if invoice.hamali_mode else None,
                    invoice.hamali_rate_per_kg,
                    invoice.hamali_rate_per_bag,
                    invoice.hamali_charge_amount,
                    int(invoice.hamali_paid_by_cash),
                    invoice.total_kg_weight,
                    invoice.grand_total,
                    invoice.status.value,
                    invoice.updated_at.isoformat(),
                    invoice.id,
                ),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("invoice", invoice.id)  # type: ignore[arg-type]

            for item in invoice.items:
                await conn.execute(
                    """
                    UPDATE invoice_items SET
                        quantity = ?, unit_price = ?, total = ?, bags = ?, weight_breakdown = ?
                    WHERE id = ? AND invoice_id = ?
                    """,
                    (
                        item.quantity,
                        item.unit_price,
                        item.total,
                        item.bags,
                        json.dumps(item.weight_breakdown) if item.weight_breakdown else None,
                        item.id,
                        invoice.id,
                    ),
                )

            logger.info("invoice_updated", invoice_id=invoice.id, grand_total=invoice.grand_total)
            return invoice

    async def delete_invoices(self, invoice_ids: list[int]) -> int:
        """Delete invoices; items go with them through ON DELETE CASCADE."""
        if not invoice_ids:
            return 0
        placeholders = ", ".join("?" for _ in invoice_ids)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"DELETE FROM invoices WHERE id IN ({placeholders})", invoice_ids
            )
            logger.info("invoices_deleted", count=cursor.rowcount)
            return cursor.rowcount

    async def product_day_totals(
        self, product_id: int, invoice_date: date
    ) -> tuple[float, float]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(ii.total), 0), COALESCE(SUM(ii.quantity), 0)
                FROM invoice_items ii
                JOIN invoices i ON i.id = ii.invoice_id
                WHERE ii.product_id = ? AND i.invoice_date = ?
                """,
                (product_id, invoice_date.isoformat()),
            )
            row = await cursor.fetchone()
            return float(row[0]), float(row[1])

    async def _load_items(
        self, conn: aiosqlite.Connection, invoice_ids: list[int]
    ) -> dict[int, list[InvoiceItem]]:
        if not invoice_ids:
            return {}
        placeholders = ", ".join("?" for _ in invoice_ids)
        cursor = await conn.execute(
            f"SELECT * FROM invoice_items WHERE invoice_id IN ({placeholders}) ORDER BY id",
            invoice_ids,
        )
        grouped: dict[int, list[InvoiceItem]] = {}
        for row in await cursor.fetchall():
            grouped.setdefault(row["invoice_id"], []).append(self._row_to_item(row))
        return grouped

    def _row_to_invoice(self, row: aiosqlite.Row) -> Invoice:
        """Convert database row to Invoice entity."""
        return Invoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            customer_id=row["customer_id"],
            vehicle_id=row["vehicle_id"],
            vendor_id=row["vendor_id"],
            invoice_date=date.fromisoformat(row["invoice_date"]),
            subtotal=row["subtotal"],
            bags=row["bags"],
            include_hamali_charge=bool(row["include_hamali_charge"]),
            hamali_mode=HamaliMode(row["hamali_mode"]) if row["hamali_mode"] else None,
            hamali_rate_per_kg=row["hamali_rate_per_kg"],
            hamali_rate_per_bag=row["hamali_rate_per_bag"],
            hamali_charge_amount=row["hamali_charge_amount"],
            hamali_paid_by_cash=bool(row["hamali_paid_by_cash"]),
            total_kg_weight=row["total_kg_weight"],
            grand_total=row["grand_total"],
            status=InvoiceStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_item(self, row: aiosqlite.Row) -> InvoiceItem:
        """Convert database row to InvoiceItem entity."""
        return InvoiceItem(
            id=row["id"],
            invoice_id=row["invoice_id"],
            product_id=row["product_id"],
            vehicle_id=row["vehicle_id"],
            quantity=row["quantity"],
            unit_price=row["unit_price"],
            total=row["total"],
            bags=row["bags"],
            weight_breakdown=json.loads(row["weight_breakdown"]) if row["weight_breakdown"] else [],
        )
