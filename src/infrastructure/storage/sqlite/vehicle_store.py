"""SQLite implementation of vehicle storage."""

import aiosqlite

from src.config import get_logger
from src.core.entities.vehicle import Vehicle
from src.core.exceptions import EntityInUseError, EntityNotFoundError
from src.core.interfaces.catalog_store import IVehicleStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

_COLUMNS = (
    "number",
    "type",
    "capacity",
    "driver_name",
    "driver_phone",
    "entry_date",
    "vendor_id",
    "shop",
    "starting_weight",
    "starting_bags",
    "total_weight_gain",
    "total_weight_loss",
)


class SQLiteVehicleStore(IVehicleStore):
    """SQLite implementation of vehicle storage."""

    async def create(self, vehicle: Vehicle) -> Vehicle:
        placeholders = ", ".join("?" for _ in _COLUMNS)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"INSERT INTO vehicles ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(getattr(vehicle, col) for col in _COLUMNS),
            )
            vehicle.id = cursor.lastrowid
            logger.info("vehicle_created", vehicle_id=vehicle.id, number=vehicle.number)
            return vehicle

    async def get(self, vehicle_id: int) -> Vehicle | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM vehicles WHERE id = ?", (vehicle_id,))
            row = await cursor.fetchone()
            return self._row_to_vehicle(row) if row else None

    async def list_vehicles(self) -> list[Vehicle]:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM vehicles ORDER BY id DESC")
            return [self._row_to_vehicle(row) for row in await cursor.fetchall()]

    async def update(self, vehicle: Vehicle) -> Vehicle:
        assignments = ", ".join(f"{col} = ?" for col in _COLUMNS)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"UPDATE vehicles SET {assignments} WHERE id = ?",
                (*(getattr(vehicle, col) for col in _COLUMNS), vehicle.id),
            )
            if cursor.rowcount == 0:
                raise EntityNotFoundError("vehicle", vehicle.id)  # type: ignore[arg-type]
            return vehicle

    async def delete(self, vehicle_id: int) -> bool:
        async with get_transaction() as conn:
            try:
                cursor = await conn.execute("DELETE FROM vehicles WHERE id = ?", (vehicle_id,))
            except aiosqlite.IntegrityError as e:
                raise EntityInUseError("vehicle", vehicle_id) from e
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("vehicle_deleted", vehicle_id=vehicle_id)
            return deleted

    @staticmethod
    def _row_to_vehicle(row: aiosqlite.Row) -> Vehicle:
        return Vehicle(id=row["id"], **{col: row[col] for col in _COLUMNS})
