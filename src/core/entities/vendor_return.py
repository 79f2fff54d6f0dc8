"""Vendor return entities: stock sent back to a supplier."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field


class VendorReturnItem(BaseModel):
    """A returned line with the reason for the return."""

    id: int | None = None
    return_id: int | None = None
    product_id: int
    quantity: float
    unit_price: float
    total: float = 0.0
    reason: str


class VendorReturn(BaseModel):
    """Return to vendor. Reduces vendor balance and stock."""

    id: int | None = None
    vendor_id: int
    purchase_id: int | None = None
    vehicle_id: int | None = None
    return_date: date = Field(default_factory=date.today)
    total_amount: float = 0.0
    status: str = "completed"
    notes: str | None = None
    items: list[VendorReturnItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
