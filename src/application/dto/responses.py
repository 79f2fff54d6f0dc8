"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.

Most responses are read straight off entities and service results with
``model_validate(obj)``; computed properties (balances, margins) are
picked up as attributes.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.core.entities.inventory import (
    MovementDirection,
    ReferenceType,
    VehicleMovementType,
)
from src.core.entities.invoice import HamaliMode, InvoiceStatus


class EntityResponse(BaseModel):
    """Base for responses built from entities or service dataclasses."""

    model_config = ConfigDict(from_attributes=True)


# --- Parties and catalog ---


class PartyResponse(EntityResponse):
    """Vendor or customer."""

    id: int
    name: str
    phone: str
    address: str | None = None
    email: str | None = None


class ProductResponse(EntityResponse):
    id: int
    name: str
    unit: str
    purchase_price: float
    sale_price: float
    current_stock: float
    reorder_level: float
    is_low_stock: bool
    margin: float


class VehicleResponse(EntityResponse):
    id: int
    number: str
    type: str
    capacity: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
    entry_date: str | None = None
    vendor_id: int | None = None
    shop: int
    starting_weight: float | None = None
    starting_bags: int | None = None
    total_weight_gain: float
    total_weight_loss: float


# --- Documents ---


class PurchaseItemResponse(EntityResponse):
    id: int
    product_id: int
    quantity: float
    unit_price: float
    total: float


class PurchaseResponse(EntityResponse):
    id: int
    vendor_id: int
    vehicle_id: int | None = None
    purchase_date: date
    total_amount: float
    status: str
    items: list[PurchaseItemResponse] = Field(default_factory=list)
    created_at: datetime


class InvoiceItemResponse(EntityResponse):
    id: int
    invoice_id: int
    product_id: int
    vehicle_id: int | None = None
    quantity: float
    unit_price: float
    total: float
    bags: int | None = None
    weight_breakdown: list[float] = Field(default_factory=list)


class InvoiceResponse(EntityResponse):
    id: int
    invoice_number: str
    customer_id: int
    vehicle_id: int | None = None
    vendor_id: int | None = None
    invoice_date: date
    subtotal: float
    bags: int
    include_hamali_charge: bool
    hamali_mode: HamaliMode | None = None
    hamali_rate_per_kg: float
    hamali_rate_per_bag: float
    hamali_charge_amount: float
    hamali_paid_by_cash: bool
    total_kg_weight: float
    grand_total: float
    status: InvoiceStatus
    items: list[InvoiceItemResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class VehicleShortfallResponse(EntityResponse):
    """A vehicle sale that was skipped because the vehicle was short."""

    vehicle_id: int
    product_id: int
    requested: float
    available: float


class CreateInvoiceResponse(BaseModel):
    """Created invoice plus advisory warnings."""

    invoice: InvoiceResponse
    vehicle_shortfalls: list[VehicleShortfallResponse] = Field(default_factory=list)
    hamali_cash_payment_id: int | None = None


class InvoiceListResponse(BaseModel):
    """Filtered, paginated invoice list."""

    invoices: list[InvoiceResponse]
    total: int
    limit: int | None = None
    offset: int = 0


class DeleteInvoicesResponse(BaseModel):
    deleted: int
    invoice_ids: list[int] = Field(default_factory=list)
    restored_movements: int


class VendorReturnItemResponse(EntityResponse):
    id: int
    product_id: int
    quantity: float
    unit_price: float
    total: float
    reason: str


class VendorReturnResponse(EntityResponse):
    id: int
    vendor_id: int
    purchase_id: int | None = None
    vehicle_id: int | None = None
    return_date: date
    total_amount: float
    status: str
    notes: str | None = None
    items: list[VendorReturnItemResponse] = Field(default_factory=list)
    created_at: datetime


# --- Payments ---


class VendorPaymentResponse(EntityResponse):
    id: int
    vendor_id: int
    purchase_id: int | None = None
    amount: float
    payment_date: date
    payment_method: str
    notes: str | None = None
    created_at: datetime


class CustomerPaymentResponse(EntityResponse):
    id: int
    customer_id: int
    invoice_id: int | None = None
    amount: float
    payment_date: date
    payment_method: str
    notes: str | None = None
    created_at: datetime


class HamaliCashPaymentResponse(EntityResponse):
    id: int
    amount: float
    payment_date: date
    payment_method: str
    customer_id: int | None = None
    invoice_id: int | None = None
    invoice_number: str | None = None
    total_bill_amount: float | None = None
    notes: str | None = None
    created_at: datetime


# --- Inventory ---


class StockMovementResponse(EntityResponse):
    """Stock movement response DTO."""

    id: int
    product_id: int
    type: MovementDirection
    quantity: float
    reason: str
    movement_date: date
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    created_at: datetime


class VehicleInventoryResponse(EntityResponse):
    vehicle_id: int
    product_id: int
    quantity: float


class VehicleMovementResponse(EntityResponse):
    id: int
    vehicle_id: int
    product_id: int
    type: VehicleMovementType
    quantity: float
    movement_date: date
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    notes: str | None = None
    created_at: datetime


class VehicleReconstructionResponse(EntityResponse):
    """Cached vehicle quantity versus the movement log."""

    vehicle_id: int
    product_id: int
    cached: float
    loaded: float
    sold: float
    replayed: float
    consistent: bool


class StockDriftResponse(EntityResponse):
    product_id: int
    product_name: str
    recorded: float
    replayed: float
    drift: float
    repaired: bool


class StockReconcileResponse(BaseModel):
    """Result of replaying the stock movement log."""

    products_checked: int
    drifted: int
    repaired: bool
    drifts: list[StockDriftResponse] = Field(default_factory=list)


# --- Balances and reports ---


class VendorBalanceResponse(EntityResponse):
    vendor_id: int
    vendor_name: str | None = None
    total_purchases: float
    total_payments: float
    total_returns: float
    balance: float


class CustomerBalanceResponse(EntityResponse):
    customer_id: int
    customer_name: str | None = None
    total_invoiced: float
    total_paid: float
    balance: float
    as_of: date | None = None


class PeriodBalanceResponse(EntityResponse):
    start_date: date
    end_date: date
    customer_id: int | None = None
    opening_balance: float
    period_sales: float
    period_payments: float
    closing_balance: float


class DailySummaryResponse(EntityResponse):
    day: date
    sales: float
    invoice_count: int
    hamali_total: float
    total_weight: float
    bags: int


class ProductMarginResponse(EntityResponse):
    product_id: int
    name: str
    purchase_price: float
    sale_price: float
    margin: float
    margin_percent: float


class HamaliSummaryResponse(EntityResponse):
    invoice_hamali_total: float
    direct_cash_hamali_total: float
    total_hamali_collected: float
    invoices_with_hamali: int
    invoices_without_hamali: int
    sales_with_hamali: float
    sales_without_hamali: float
    direct_cash_count: int


class CustomerPaymentSummaryResponse(EntityResponse):
    customer_id: int
    customer_name: str
    total_invoiced: float
    total_paid: float
    balance: float
    invoice_count: int
    status: str


class ProfitLossResponse(EntityResponse):
    total_purchases: float
    total_returns: float
    net_purchases: float
    total_sales: float
    gross_profit: float
    invoice_count: int
    hamali: HamaliSummaryResponse
    product_margins: list[ProductMarginResponse] = Field(default_factory=list)
    customer_payments: list[CustomerPaymentSummaryResponse] = Field(default_factory=list)


# --- Admin and health ---


class TableStatsResponse(BaseModel):
    tables: dict[str, int]


class ClearTableResponse(BaseModel):
    table: str
    deleted: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
    database: str | None = None
    latency_ms: float | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
