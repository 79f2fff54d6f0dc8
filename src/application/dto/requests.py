"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from src.core.entities.invoice import HamaliMode, InvoiceStatus

# --- Parties ---


class PartyCreateRequest(BaseModel):
    """Create a vendor or customer."""

    name: str = Field(..., min_length=1, description="Display name")
    phone: str = Field(..., min_length=1, description="Contact phone number")
    address: str | None = Field(default=None, description="Postal address")
    email: str | None = Field(default=None, description="Email address")


class PartyUpdateRequest(BaseModel):
    """Partial update of a vendor or customer."""

    name: str | None = Field(default=None, min_length=1)
    phone: str | None = Field(default=None, min_length=1)
    address: str | None = None
    email: str | None = None


class CustomerBulkCreateRequest(BaseModel):
    """Import several customers at once."""

    customers: list[PartyCreateRequest] = Field(..., min_length=1)


# --- Catalog ---


class ProductCreateRequest(BaseModel):
    """Create a product. A non-zero ``current_stock`` is booked as opening stock."""

    name: str = Field(..., min_length=1)
    unit: str = Field(default="kg", examples=["kg", "bag", "crate"])
    purchase_price: float = Field(default=0.0, ge=0)
    sale_price: float = Field(default=0.0, ge=0)
    current_stock: float = Field(default=0.0, ge=0, description="Opening stock")
    reorder_level: float = Field(default=10.0, ge=0)


class ProductUpdateRequest(BaseModel):
    """Partial product update. A changed ``current_stock`` is booked as a manual movement."""

    name: str | None = Field(default=None, min_length=1)
    unit: str | None = None
    purchase_price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    current_stock: float | None = Field(default=None, ge=0)
    reorder_level: float | None = Field(default=None, ge=0)


class VehicleCreateRequest(BaseModel):
    """Register a vehicle."""

    number: str = Field(..., min_length=1, examples=["MH12AB1234"])
    type: str = Field(default="truck")
    capacity: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
    entry_date: str | None = None
    vendor_id: int | None = Field(default=None, description="Owning vendor")
    shop: int | None = Field(default=None, description="Site/branch tag (defaults from settings)")
    starting_weight: float | None = Field(default=None, ge=0)
    starting_bags: int | None = Field(default=None, ge=0)
    total_weight_gain: float = Field(default=0.0, ge=0)
    total_weight_loss: float = Field(default=0.0, ge=0)


class VehicleUpdateRequest(BaseModel):
    """Partial vehicle update."""

    number: str | None = Field(default=None, min_length=1)
    type: str | None = None
    capacity: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
    entry_date: str | None = None
    vendor_id: int | None = None
    shop: int | None = None
    starting_weight: float | None = Field(default=None, ge=0)
    starting_bags: int | None = Field(default=None, ge=0)
    total_weight_gain: float | None = Field(default=None, ge=0)
    total_weight_loss: float | None = Field(default=None, ge=0)


# --- Purchases ---


class PurchaseItemRequest(BaseModel):
    """A purchased line."""

    product_id: int
    quantity: float = Field(..., gt=0, description="Quantity bought")
    unit_price: float = Field(..., ge=0, description="Price per unit")


class CreatePurchaseRequest(BaseModel):
    """Request to record a purchase from a vendor."""

    vendor_id: int
    vehicle_id: int | None = Field(
        default=None, description="Receive the goods directly onto this vehicle"
    )
    purchase_date: date | None = Field(default=None, description="Defaults to today")
    status: str = Field(default="completed")
    items: list[PurchaseItemRequest] = Field(..., min_length=1)


# --- Invoices ---


class InvoiceItemRequest(BaseModel):
    """A sold line. Either ``quantity`` or ``weight_breakdown`` must be given."""

    product_id: int
    quantity: float = Field(default=0.0, ge=0, description="Derived from weight_breakdown if given")
    unit_price: float = Field(..., ge=0)
    bags: int | None = Field(default=None, ge=0)
    weight_breakdown: list[float] = Field(
        default_factory=list,
        description="Individual bag weights",
        examples=[[12, 15, 9]],
    )


class CreateInvoiceRequest(BaseModel):
    """Request to create a customer invoice."""

    invoice_number: str = Field(..., min_length=1, examples=["INV-2024-0001"])
    customer_id: int
    vehicle_id: int | None = Field(default=None, description="Sell off this vehicle's stock")
    vendor_id: int | None = None
    invoice_date: date | None = Field(default=None, description="Defaults to today")
    bags: int = Field(default=0, ge=0, description="Derived from line bags when present")
    include_hamali_charge: bool = False
    hamali_mode: HamaliMode | None = Field(
        default=None,
        description="per_kg or per_bag; inferred from the rates when omitted",
    )
    hamali_rate_per_kg: float | None = Field(
        default=None, ge=0, description="Defaults from ledger settings"
    )
    hamali_rate_per_bag: float = Field(default=0.0, ge=0)
    hamali_paid_by_cash: bool = False
    status: InvoiceStatus = InvoiceStatus.PENDING
    items: list[InvoiceItemRequest] = Field(..., min_length=1)


class UpdateInvoiceRequest(BaseModel):
    """Header edits. Totals are always recomputed."""

    invoice_date: date | None = None
    bags: int | None = Field(default=None, ge=0)
    include_hamali_charge: bool | None = None
    hamali_mode: HamaliMode | None = None
    hamali_rate_per_kg: float | None = Field(default=None, ge=0)
    hamali_rate_per_bag: float | None = Field(default=None, ge=0)
    hamali_paid_by_cash: bool | None = None
    status: InvoiceStatus | None = None


class UpdateInvoiceItemRequest(BaseModel):
    """Line edits. Replacing ``weight_breakdown`` re-derives quantity and bags."""

    quantity: float | None = Field(default=None, gt=0)
    unit_price: float | None = Field(default=None, ge=0)
    bags: int | None = Field(default=None, ge=0)
    weight_breakdown: list[float] | None = None


class BulkDeleteInvoicesRequest(BaseModel):
    """Invoices to delete."""

    invoice_ids: list[int] = Field(..., min_length=1)


# --- Vendor returns ---


class VendorReturnItemRequest(BaseModel):
    """A returned line."""

    product_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    reason: str = Field(..., min_length=1, examples=["Damaged", "Quality issue"])


class CreateVendorReturnRequest(BaseModel):
    """Request to return goods to a vendor."""

    vendor_id: int
    purchase_id: int | None = None
    vehicle_id: int | None = None
    return_date: date | None = None
    notes: str | None = None
    items: list[VendorReturnItemRequest] = Field(..., min_length=1)


# --- Payments ---


class VendorPaymentRequest(BaseModel):
    """Money paid to a vendor."""

    vendor_id: int
    purchase_id: int | None = None
    amount: float = Field(..., gt=0)
    payment_date: date | None = None
    payment_method: str = Field(default="cash", examples=["cash", "upi", "bank"])
    notes: str | None = None


class VendorPaymentUpdateRequest(BaseModel):
    vendor_id: int | None = None
    purchase_id: int | None = None
    amount: float | None = Field(default=None, gt=0)
    payment_date: date | None = None
    payment_method: str | None = None
    notes: str | None = None


class CustomerPaymentRequest(BaseModel):
    """Money received from a customer."""

    customer_id: int
    invoice_id: int | None = None
    amount: float = Field(..., gt=0)
    payment_date: date | None = None
    payment_method: str = Field(default="cash")
    notes: str | None = None


class CustomerPaymentUpdateRequest(BaseModel):
    customer_id: int | None = None
    invoice_id: int | None = None
    amount: float | None = Field(default=None, gt=0)
    payment_date: date | None = None
    payment_method: str | None = None
    notes: str | None = None


class HamaliCashRequest(BaseModel):
    """Cash paid directly to porters."""

    amount: float = Field(..., gt=0)
    payment_date: date | None = None
    payment_method: str = Field(default="cash")
    customer_id: int | None = None
    invoice_id: int | None = None
    invoice_number: str | None = None
    total_bill_amount: float | None = Field(default=None, ge=0)
    notes: str | None = None


# --- Inventory ---


class StockMovementRequest(BaseModel):
    """Manual product stock movement."""

    product_id: int
    type: Literal["in", "out"]
    quantity: float = Field(..., gt=0)
    reason: str = Field(..., min_length=1, examples=["Spoilage", "Opening count"])
    movement_date: date | None = None


class VehicleLoadRequest(BaseModel):
    """Load stock onto a vehicle."""

    product_id: int
    quantity: float = Field(..., gt=0)
    movement_date: date | None = None
    notes: str | None = None


class VehicleAdjustRequest(BaseModel):
    """Set a vehicle's on-hand quantity for a product."""

    quantity: float = Field(..., ge=0, description="New on-hand quantity")


# --- Admin ---


class ClearTableRequest(BaseModel):
    """Destructive table clear. ``confirm`` must be true."""

    table: str = Field(..., examples=["stock_movements"])
    confirm: bool = Field(default=False)
