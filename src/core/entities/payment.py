"""Payment entities. Payments are editable after creation."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field


class VendorPayment(BaseModel):
    """Money paid to a vendor."""

    id: int | None = None
    vendor_id: int
    purchase_id: int | None = None
    amount: float
    payment_date: date = Field(default_factory=date.today)
    payment_method: str = "cash"
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CustomerPayment(BaseModel):
    """Money received from a customer."""

    id: int | None = None
    customer_id: int
    invoice_id: int | None = None
    amount: float
    payment_date: date = Field(default_factory=date.today)
    payment_method: str = "cash"
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class HamaliCashPayment(BaseModel):
    """
    Cash handed directly to porters.

    Either recorded standalone or auto-created from an invoice whose hamali
    charge was paid by cash.
    """

    id: int | None = None
    amount: float
    payment_date: date = Field(default_factory=date.today)
    payment_method: str = "cash"
    customer_id: int | None = None
    invoice_id: int | None = None
    invoice_number: str | None = None
    total_bill_amount: float | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
