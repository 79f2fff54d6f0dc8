"""SQLite implementation of payment storage."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.payment import CustomerPayment, HamaliCashPayment, VendorPayment
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces.payment_store import IPaymentStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLitePaymentStore(IPaymentStore):
    """Vendor, customer and hamali cash payments."""

    # Vendor payments

    async def create_vendor_payment(self, payment: VendorPayment) -> VendorPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO vendor_payments (
                    vendor_id, purchase_id, amount, payment_date,
                    payment_method, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.vendor_id,
                    payment.purchase_id,
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.notes,
                    payment.created_at.isoformat(),
                ),
            )
            payment.id = cursor.lastrowid
            logger.info(
                "vendor_payment_created",
                payment_id=payment.id,
                vendor_id=payment.vendor_id,
                amount=payment.amount,
            )
            return payment

    async def get_vendor_payment(self, payment_id: int) -> VendorPayment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM vendor_payments WHERE id = ?", (payment_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_vendor_payment(row) if row else None

    async def list_vendor_payments(self, vendor_id: int | None = None) -> list[VendorPayment]:
        async with get_connection() as conn:
            if vendor_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM vendor_payments ORDER BY payment_date DESC, id DESC"
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM vendor_payments WHERE vendor_id = ?
                    ORDER BY payment_date DESC, id DESC
                    """,
                    (vendor_id,),
                )
            return [self._row_to_vendor_payment(row) for row in await cursor.fetchall()]

    async def update_vendor_payment(self, payment: VendorPayment) -> VendorPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE vendor_payments SET
                    vendor_id = ?, purchase_id = ?, amount = ?, payment_date = ?,
                    payment_method = ?, notes = ?
                WHERE id = ?
                """,
                (
                    payment.vendor_id,
                    payment.purchase_id,
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.notes,
                    payment.id,
                ),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("vendor_payment", payment.id)  # type: ignore[arg-type]
            return payment

    # Customer payments

    async def create_customer_payment(self, payment: CustomerPayment) -> CustomerPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO customer_payments (
                    customer_id, invoice_id, amount, payment_date,
                    payment_method, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.customer_id,
                    payment.invoice_id,
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.notes,
                    payment.created_at.isoformat(),
                ),
            )
            payment.id = cursor.lastrowid
            logger.info(
                "customer_payment_created",
                payment_id=payment.id,
                customer_id=payment.customer_id,
                amount=payment.amount,
            )
            return payment

    async def get_customer_payment(self, payment_id: int) -> CustomerPayment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM customer_payments WHERE id = ?", (payment_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_customer_payment(row) if row else None

    async def list_customer_payments(
        self, customer_id: int | None = None
    ) -> list[CustomerPayment]:
        async with get_connection() as conn:
            if customer_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM customer_payments ORDER BY payment_date DESC, id DESC"
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM customer_payments WHERE customer_id = ?
                    ORDER BY payment_date DESC, id DESC
                    """,
                    (customer_id,),
                )
            return [self._row_to_customer_payment(row) for row in await cursor.fetchall()]

    async def update_customer_payment(self, payment: CustomerPayment) -> CustomerPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE customer_payments SET
                    customer_id = ?, invoice_id = ?, amount = ?, payment_date = ?,
                    payment_method = ?, notes = ?
                WHERE id = ?
                """,
                (
                    payment.customer_id,
                    payment.invoice_id,
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.notes,
                    payment.id,
                ),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("customer_payment", payment.id)  # type: ignore[arg-type]
            return payment

    # Hamali cash

    async def create_hamali_payment(self, payment: HamaliCashPayment) -> HamaliCashPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO hamali_cash_payments (
                    amount, payment_date, payment_method, customer_id, invoice_id,
                    invoice_number, total_bill_amount, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.customer_id,
                    payment.invoice_id,
                    payment.invoice_number,
                    payment.total_bill_amount,
                    payment.notes,
                    payment.created_at.isoformat(),
                ),
            )
            payment.id = cursor.lastrowid
            logger.info(
                "hamali_cash_recorded",
                payment_id=payment.id,
                invoice_id=payment.invoice_id,
                amount=payment.amount,
            )
            return payment

    async def list_hamali_payments(self) -> list[HamaliCashPayment]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM hamali_cash_payments ORDER BY payment_date DESC, id DESC"
            )
            return [self._row_to_hamali_payment(row) for row in await cursor.fetchall()]

    async def get_hamali_payment_for_invoice(self, invoice_id: int) -> HamaliCashPayment | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM hamali_cash_payments WHERE invoice_id = ? ORDER BY id LIMIT 1",
                (invoice_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_hamali_payment(row) if row else None

    async def update_hamali_payment(self, payment: HamaliCashPayment) -> HamaliCashPayment:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE hamali_cash_payments SET
                    amount = ?, payment_date = ?, payment_method = ?, customer_id = ?,
                    invoice_id = ?, invoice_number = ?, total_bill_amount = ?, notes = ?
                WHERE id = ?
                """,
                (
                    payment.amount,
                    payment.payment_date.isoformat(),
                    payment.payment_method,
                    payment.customer_id,
                    payment.invoice_id,
                    payment.invoice_number,
                    payment.total_bill_amount,
                    payment.notes,
                    payment.id,
                ),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("hamali_cash_payment", payment.id)  # type: ignore[arg-type]
            return payment

    async def delete_hamali_payment(self, payment_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM hamali_cash_payments WHERE id = ?", (payment_id,)
            )
            return cursor.rowcount > 0

    async def detach_invoices(self, invoice_ids: list[int]) -> None:
        if not invoice_ids:
            return
        placeholders = ", ".join("?" for _ in invoice_ids)
        async with get_transaction() as conn:
            await conn.execute(
                f"UPDATE customer_payments SET invoice_id = NULL WHERE invoice_id IN ({placeholders})",
                invoice_ids,
            )
            await conn.execute(
                f"UPDATE hamali_cash_payments SET invoice_id = NULL WHERE invoice_id IN ({placeholders})",
                invoice_ids,
            )

    @staticmethod
    def _row_to_vendor_payment(row: aiosqlite.Row) -> VendorPayment:
        return VendorPayment(
            id=row["id"],
            vendor_id=row["vendor_id"],
            purchase_id=row["purchase_id"],
            amount=row["amount"],
            payment_date=date.fromisoformat(row["payment_date"]),
            payment_method=row["payment_method"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_customer_payment(row: aiosqlite.Row) -> CustomerPayment:
        return CustomerPayment(
            id=row["id"],
            customer_id=row["customer_id"],
            invoice_id=row["invoice_id"],
            amount=row["amount"],
            payment_date=date.fromisoformat(row["payment_date"]),
            payment_method=row["payment_method"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_hamali_payment(row: aiosqlite.Row) -> HamaliCashPayment:
        return HamaliCashPayment(
            id=row["id"],
            amount=row["amount"],
            payment_date=date.fromisoformat(row["payment_date"]),
            payment_method=row["payment_method"],
            customer_id=row["customer_id"],
            invoice_id=row["invoice_id"],
            invoice_number=row["invoice_number"],
            total_bill_amount=row["total_bill_amount"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
