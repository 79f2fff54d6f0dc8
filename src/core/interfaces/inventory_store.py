"""Abstract interfaces for stock movement and vehicle inventory storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.inventory import (
    ReferenceType,
    StockMovement,
    VehicleInventory,
    VehicleInventoryMovement,
)


class IStockMovementStore(ABC):
    """Append-only product stock log."""

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Append a stock movement."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        product_id: int | None = None,
    ) -> list[StockMovement]:
        """List movements in insertion order, optionally filtered."""
        pass

    @abstractmethod
    async def list_by_references(
        self, reference_type: ReferenceType, reference_ids: list[int]
    ) -> list[StockMovement]:
        """List movements caused by the given documents."""
        pass


class IVehicleInventoryStore(ABC):
    """Per-(vehicle, product) cached quantity plus its movement log."""

    @abstractmethod
    async def get_inventory(
        self, vehicle_id: int, product_id: int
    ) -> VehicleInventory | None:
        """Get the inventory row for a vehicle/product pair."""
        pass

    @abstractmethod
    async def upsert_quantity(
        self, vehicle_id: int, product_id: int, quantity: float
    ) -> VehicleInventory:
        """Set the cached quantity, creating the row if missing."""
        pass

    @abstractmethod
    async def list_inventory(self, vehicle_id: int | None = None) -> list[VehicleInventory]:
        """List inventory rows for one vehicle or all vehicles."""
        pass

    @abstractmethod
    async def add_movement(
        self, movement: VehicleInventoryMovement
    ) -> VehicleInventoryMovement:
        """Append a vehicle movement."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        vehicle_id: int | None = None,
        product_id: int | None = None,
    ) -> list[VehicleInventoryMovement]:
        """List vehicle movements in insertion order."""
        pass
