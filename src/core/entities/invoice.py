"""Sales invoice entities."""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class HamaliMode(str, Enum):
    """How the handling surcharge is charged. Exactly one per invoice."""

    PER_KG = "per_kg"
    PER_BAG = "per_bag"


class InvoiceItem(BaseModel):
    """
    A sold line.

    When ``weight_breakdown`` lists individual bag weights, ``quantity`` is
    their sum and ``bags`` their count; the line engine enforces this.
    """

    id: int | None = None
    invoice_id: int | None = None
    product_id: int
    vehicle_id: int | None = None
    quantity: float = 0.0
    unit_price: float
    total: float = 0.0
    bags: int | None = None
    weight_breakdown: list[float] = Field(default_factory=list)


class Invoice(BaseModel):
    """Customer invoice with optional hamali surcharge."""

    id: int | None = None
    invoice_number: str
    customer_id: int
    vehicle_id: int | None = None
    vendor_id: int | None = None
    invoice_date: date = Field(default_factory=date.today)
    subtotal: float = 0.0
    bags: int = 0
    include_hamali_charge: bool = False
    hamali_mode: HamaliMode | None = None
    hamali_rate_per_kg: float = 2.0
    hamali_rate_per_bag: float = 0.0
    hamali_charge_amount: float = 0.0
    hamali_paid_by_cash: bool = False
    total_kg_weight: float = 0.0
    grand_total: float = 0.0
    status: InvoiceStatus = InvoiceStatus.PENDING
    items: list[InvoiceItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_hamali(self) -> bool:
        return self.include_hamali_charge and self.hamali_charge_amount > 0
