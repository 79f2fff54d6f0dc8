"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services inside one transaction
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers that write.
"""

from src.application.dto.requests import (
    CreateInvoiceRequest,
    CreatePurchaseRequest,
    CreateVendorReturnRequest,
    UpdateInvoiceItemRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    CreateInvoiceResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceResponse,
    PurchaseResponse,
    VendorReturnResponse,
)
from src.application.services import (
    get_ledger_service,
    get_line_engine,
    get_report_service,
    get_stock_mirror_service,
    get_transaction_factory,
    get_vehicle_inventory_service,
    reset_services,
)
from src.application.use_cases import (
    CreateInvoiceUseCase,
    CreatePurchaseUseCase,
    CreateVendorReturnUseCase,
    DeleteInvoicesUseCase,
    UpdateInvoiceUseCase,
)

__all__ = [
    # Request DTOs
    "CreatePurchaseRequest",
    "CreateInvoiceRequest",
    "CreateVendorReturnRequest",
    "UpdateInvoiceRequest",
    "UpdateInvoiceItemRequest",
    # Response DTOs
    "PurchaseResponse",
    "InvoiceResponse",
    "CreateInvoiceResponse",
    "VendorReturnResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "CreatePurchaseUseCase",
    "CreateInvoiceUseCase",
    "CreateVendorReturnUseCase",
    "UpdateInvoiceUseCase",
    "DeleteInvoicesUseCase",
    # Service factories
    "get_line_engine",
    "get_transaction_factory",
    "get_stock_mirror_service",
    "get_vehicle_inventory_service",
    "get_ledger_service",
    "get_report_service",
    "reset_services",
]
