"""SQLite implementation of product storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.product import Product
from src.core.exceptions import EntityInUseError, EntityNotFoundError
from src.core.interfaces.catalog_store import IProductStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteProductStore(IProductStore):
    """
    SQLite implementation of the product catalog.

    ``current_stock`` is only written through ``set_current_stock``;
    ``update`` leaves it alone so the stock mirror stays the single writer.
    """

    async def create(self, product: Product) -> Product:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO products (
                    name, unit, purchase_price, sale_price, current_stock, reorder_level
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    product.name,
                    product.unit,
                    product.purchase_price,
                    product.sale_price,
                    product.current_stock,
                    product.reorder_level,
                ),
            )
            product.id = cursor.lastrowid
            logger.info("product_created", product_id=product.id, name=product.name)
            return product

    async def get(self, product_id: int) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def list_products(self) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products ORDER BY name")
            return [self._row_to_product(row) for row in await cursor.fetchall()]

    async def list_low_stock(self) -> list[Product]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM products
                WHERE current_stock <= reorder_level
                ORDER BY current_stock, name
                """
            )
            return [self._row_to_product(row) for row in await cursor.fetchall()]

    async def update(self, product: Product) -> Product:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE products SET
                    name = ?, unit = ?, purchase_price = ?, sale_price = ?, reorder_level = ?
                WHERE id = ?
                """,
                (
                    product.name,
                    product.unit,
                    product.purchase_price,
                    product.sale_price,
                    product.reorder_level,
                    product.id,
                ),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("product", product.id)  # type: ignore[arg-type]
            return product

    async def set_current_stock(self, product_id: int, current_stock: float) -> None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE products SET current_stock = ? WHERE id = ?",
                (current_stock, product_id),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("product", product_id)

    async def set_sale_price(self, product_id: int, sale_price: float) -> None:
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE products SET sale_price = ? WHERE id = ?",
                (sale_price, product_id),
            )

    async def delete(self, product_id: int) -> bool:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute("DELETE FROM products WHERE id = ?", (product_id,))
            except aiosqlite.IntegrityError as e:
                raise EntityInUseError("product", product_id) from e
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("product_deleted", product_id=product_id)
            return deleted

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            unit=row["unit"],
            purchase_price=row["purchase_price"],
            sale_price=row["sale_price"],
            current_stock=row["current_stock"],
            reorder_level=row["reorder_level"],
        )
