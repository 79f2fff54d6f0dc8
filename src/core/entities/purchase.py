"""Purchase entities: stock bought from a vendor."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field


class PurchaseItem(BaseModel):
    """A purchased line. ``total`` is set by the line engine."""

    id: int | None = None
    purchase_id: int | None = None
    product_id: int
    quantity: float
    unit_price: float
    total: float = 0.0


class Purchase(BaseModel):
    """Vendor purchase, optionally received directly onto a vehicle."""

    id: int | None = None
    vendor_id: int
    vehicle_id: int | None = None
    purchase_date: date = Field(default_factory=date.today)
    total_amount: float = 0.0
    status: str = "completed"
    items: list[PurchaseItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
