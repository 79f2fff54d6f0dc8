"""SQLite implementation of vendor and customer storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.party import Customer, Vendor
from src.core.exceptions import EntityInUseError, EntityNotFoundError
from src.core.interfaces.catalog_store import ICustomerStore, IVendorStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteVendorStore(IVendorStore):
    """SQLite implementation of vendor storage."""

    async def create(self, vendor: Vendor) -> Vendor:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO vendors (name, phone, address, email) VALUES (?, ?, ?, ?)",
                (vendor.name, vendor.phone, vendor.address, vendor.email),
            )
            vendor.id = cursor.lastrowid
            logger.info("vendor_created", vendor_id=vendor.id)
            return vendor

    async def get(self, vendor_id: int) -> Vendor | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM vendors WHERE id = ?", (vendor_id,))
            row = await cursor.fetchone()
            return self._row_to_vendor(row) if row else None

    async def list_vendors(self) -> list[Vendor]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM vendors ORDER BY name")
            return [self._row_to_vendor(row) for row in await cursor.fetchall()]

    async def update(self, vendor: Vendor) -> Vendor:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE vendors SET name = ?, phone = ?, address = ?, email = ? WHERE id = ?",
                (vendor.name, vendor.phone, vendor.address, vendor.email, vendor.id),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("vendor", vendor.id)  # type: ignore[arg-type]
            return vendor

    async def delete(self, vendor_id: int) -> bool:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute("DELETE FROM vendors WHERE id = ?", (vendor_id,))
            except aiosqlite.IntegrityError as e:
                raise EntityInUseError("vendor", vendor_id) from e
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("vendor_deleted", vendor_id=vendor_id)
            return deleted

    @staticmethod
    def _row_to_vendor(row: aiosqlite.Row) -> Vendor:
        return Vendor(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            address=row["address"],
            email=row["email"],
        )


class SQLiteCustomerStore(ICustomerStore):
    """SQLite implementation of customer storage."""

    _INSERT = "INSERT INTO customers (name, phone, address, email) VALUES (?, ?, ?, ?)"

    async def create(self, customer: Customer) -> Customer:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                self._INSERT,
                (customer.name, customer.phone, customer.address, customer.email),
            )
            customer.id = cursor.lastrowid
            logger.info("customer_created", customer_id=customer.id)
            return customer

    async def create_many(self, customers: list[Customer]) -> list[Customer]:
        async with get_transaction() as conn:
            for customer in customers:
                cursor = await conn.execute(
                    self._INSERT,
                    (customer.name, customer.phone, customer.address, customer.email),
                )
                customer.id = cursor.lastrowid
            logger.info("customers_imported", count=len(customers))
            return customers

    async def get(self, customer_id: int) -> Customer | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM customers WHERE id = ?", (customer_id,))
            row = await cursor.fetchone()
            return self._row_to_customer(row) if row else None

    async def list_customers(self) -> list[Customer]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM customers ORDER BY name")
            return [self._row_to_customer(row) for row in await cursor.fetchall()]

    async def update(self, customer: Customer) -> Customer:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE customers SET name = ?, phone = ?, address = ?, email = ? WHERE id = ?",
                (customer.name, customer.phone, customer.address, customer.email, customer.id),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("customer", customer.id)  # type: ignore[arg-type]
            return customer

    async def delete(self, customer_id: int) -> bool:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute(
                    "DELETE FROM customers WHERE id = ?", (customer_id,)
                )
            except aiosqlite.IntegrityError as e:
                raise EntityInUseError("customer", customer_id) from e
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("customer_deleted", customer_id=customer_id)
            return deleted

    @staticmethod
    def _row_to_customer(row: aiosqlite.Row) -> Customer:
        return Customer(
            id=row["id"],
            name=row["name"],
            phone=row["phone"],
            address=row["address"],
            email=row["email"],
        )
