"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from src.application.dto.requests import (
    BulkDeleteInvoicesRequest,
    CreateInvoiceRequest,
    CreatePurchaseRequest,
    CreateVendorReturnRequest,
    InvoiceItemRequest,
    PurchaseItemRequest,
    StockMovementRequest,
    UpdateInvoiceItemRequest,
    UpdateInvoiceRequest,
    VehicleAdjustRequest,
    VehicleLoadRequest,
    VendorReturnItemRequest,
)
from src.application.dto.responses import (
    CreateInvoiceResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceResponse,
    PurchaseResponse,
    VendorReturnResponse,
)

__all__ = [
    # Requests
    "CreatePurchaseRequest",
    "PurchaseItemRequest",
    "CreateInvoiceRequest",
    "InvoiceItemRequest",
    "UpdateInvoiceRequest",
    "UpdateInvoiceItemRequest",
    "BulkDeleteInvoicesRequest",
    "CreateVendorReturnRequest",
    "VendorReturnItemRequest",
    "StockMovementRequest",
    "VehicleLoadRequest",
    "VehicleAdjustRequest",
    # Responses
    "CreateInvoiceResponse",
    "InvoiceResponse",
    "PurchaseResponse",
    "VendorReturnResponse",
    "ErrorResponse",
    "HealthResponse",
]
