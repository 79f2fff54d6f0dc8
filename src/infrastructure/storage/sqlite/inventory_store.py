"""SQLite implementation of the product stock log and vehicle inventory."""

from datetime import date, datetime
from typing import Any

import aiosqlite

from src.config import get_logger
from src.core.entities.inventory import (
    MovementDirection,
    ReferenceType,
    StockMovement,
    VehicleInventory,
    VehicleInventoryMovement,
    VehicleMovementType,
)
from src.core.interfaces.inventory_store import IStockMovementStore, IVehicleInventoryStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteStockMovementStore(IStockMovementStore):
    """Append-only ``stock_movements`` table."""

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Record a stock movement."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    product_id, type, quantity, reason, movement_date,
                    reference_id, reference_type, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.product_id,
                    movement.type.value,
                    movement.quantity,
                    movement.reason,
                    movement.movement_date.isoformat(),
                    movement.reference_id,
                    movement.reference_type.value if movement.reference_type else None,
                    movement.created_at.isoformat(),
                ),
            )
            movement.id = cursor.lastrowid
            logger.debug(
                "stock_movement_recorded",
                movement_id=movement.id,
                type=movement.type.value,
                qty=movement.quantity,
            )
            return movement

    async def list_movements(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        product_id: int | None = None,
    ) -> list[StockMovement]:
        """List movements in insertion order."""
        clauses: list[str] = []
        params: list[Any] = []
        if start_date is not None:
            clauses.append("movement_date >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            clauses.append("movement_date <= ?")
            params.append(end_date.isoformat())
        if product_id is not None:
            clauses.append("product_id = ?")
            params.append(product_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM stock_movements {where} ORDER BY id", params
            )
            return [self._row_to_movement(row) for row in await cursor.fetchall()]

    async def list_by_references(
        self, reference_type: ReferenceType, reference_ids: list[int]
    ) -> list[StockMovement]:
        if not reference_ids:
            return []
        placeholders = ", ".join("?" for _ in reference_ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_movements
                WHERE reference_type = ? AND reference_id IN ({placeholders})
                ORDER BY id
                """,
                (reference_type.value, *reference_ids),
            )
            return [self._row_to_movement(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            product_id=row["product_id"],
            type=MovementDirection(row["type"]),
            quantity=row["quantity"],
            reason=row["reason"],
            movement_date=date.fromisoformat(row["movement_date"]),
            reference_id=row["reference_id"],
            reference_type=ReferenceType(row["reference_type"]) if row["reference_type"] else None,
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteVehicleInventoryStore(IVehicleInventoryStore):
    """``vehicle_inventory`` rows (one per pair) and their movement log."""

    async def get_inventory(
        self, vehicle_id: int, product_id: int
    ) -> VehicleInventory | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM vehicle_inventory WHERE vehicle_id = ? AND product_id = ?",
                (vehicle_id, product_id),
            )
            row = await cursor.fetchone()
            return self._row_to_inventory(row) if row else None

    async def upsert_quantity(
        self, vehicle_id: int, product_id: int, quantity: float
    ) -> VehicleInventory:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO vehicle_inventory (vehicle_id, product_id, quantity)
                VALUES (?, ?, ?)
                ON CONFLICT(vehicle_id, product_id) DO UPDATE SET quantity = excluded.quantity
                """,
                (vehicle_id, product_id, quantity),
            )
            cursor = await conn.execute(
                "SELECT * FROM vehicle_inventory WHERE vehicle_id = ? AND product_id = ?",
                (vehicle_id, product_id),
            )
            return self._row_to_inventory(await cursor.fetchone())

    async def list_inventory(self, vehicle_id: int | None = None) -> list[VehicleInventory]:
        async with get_connection() as conn:
            if vehicle_id is None:
                cursor = await conn.execute(
                    "SELECT * FROM vehicle_inventory ORDER BY vehicle_id, product_id"
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM vehicle_inventory WHERE vehicle_id = ? ORDER BY product_id",
                    (vehicle_id,),
                )
            return [self._row_to_inventory(row) for row in await cursor.fetchall()]

    async def add_movement(
        self, movement: VehicleInventoryMovement
    ) -> VehicleInventoryMovement:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO vehicle_inventory_movements (
                    vehicle_id, product_id, type, quantity, movement_date,
                    reference_id, reference_type, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.vehicle_id,
                    movement.product_id,
                    movement.type.value,
                    movement.quantity,
                    movement.movement_date.isoformat(),
                    movement.reference_id,
                    movement.reference_type.value if movement.reference_type else None,
                    movement.notes,
                    movement.created_at.isoformat(),
                ),
            )
            movement.id = cursor.lastrowid
            return movement

    async def list_movements(
        self,
        vehicle_id: int | None = None,
        product_id: int | None = None,
    ) -> list[VehicleInventoryMovement]:
        clauses: list[str] = []
        params: list[Any] = []
        if vehicle_id is not None:
            clauses.append("vehicle_id = ?")
            params.append(vehicle_id)
        if product_id is not None:
            clauses.append("product_id = ?")
            params.append(product_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM vehicle_inventory_movements {where} ORDER BY id", params
            )
            return [self._row_to_movement(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_inventory(row: aiosqlite.Row) -> VehicleInventory:
        return VehicleInventory(
            id=row["id"],
            vehicle_id=row["vehicle_id"],
            product_id=row["product_id"],
            quantity=row["quantity"],
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> VehicleInventoryMovement:
        return VehicleInventoryMovement(
            id=row["id"],
            vehicle_id=row["vehicle_id"],
            product_id=row["product_id"],
            type=VehicleMovementType(row["type"]),
            quantity=row["quantity"],
            movement_date=date.fromisoformat(row["movement_date"]),
            reference_id=row["reference_id"],
            reference_type=ReferenceType(row["reference_type"]) if row["reference_type"] else None,
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
