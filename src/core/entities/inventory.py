"""Inventory domain entities: product stock log and vehicle stock ledger."""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementDirection(str, Enum):
    """Direction of a product-level stock movement."""

    IN = "in"
    OUT = "out"


class VehicleMovementType(str, Enum):
    """Vehicle ledger event types. Manual corrections reuse these."""

    LOAD = "load"
    SALE = "sale"


class ReferenceType(str, Enum):
    """Document that caused a movement."""

    PURCHASE = "purchase"
    INVOICE = "invoice"
    VENDOR_RETURN = "vendor_return"
    MANUAL = "manual"


MANUAL_UPDATE_NOTE = "Manual stock update"


class StockMovement(BaseModel):
    """Append-only product stock event. Quantity is always positive."""

    id: int | None = None
    product_id: int
    type: MovementDirection
    quantity: float
    reason: str
    movement_date: date = Field(default_factory=date.today)
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def signed_quantity(self) -> float:
        return self.quantity if self.type == MovementDirection.IN else -self.quantity


class VehicleInventory(BaseModel):
    """Cached on-hand quantity for one (vehicle, product) pair."""

    id: int | None = None
    vehicle_id: int
    product_id: int
    quantity: float = 0.0


class VehicleInventoryMovement(BaseModel):
    """Append-only vehicle stock event; the source of truth for VehicleInventory."""

    id: int | None = None
    vehicle_id: int
    product_id: int
    type: VehicleMovementType
    quantity: float
    movement_date: date = Field(default_factory=date.today)
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def signed_quantity(self) -> float:
        return self.quantity if self.type == VehicleMovementType.LOAD else -self.quantity
