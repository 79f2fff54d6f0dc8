"""Core interfaces (ports) for dependency injection."""

from src.core.interfaces.catalog_store import (
    ICustomerStore,
    IProductStore,
    IVehicleStore,
    IVendorStore,
)
from src.core.interfaces.document_store import (
    IInvoiceStore,
    InvoiceFilter,
    IPurchaseStore,
    IVendorReturnStore,
)
from src.core.interfaces.inventory_store import IStockMovementStore, IVehicleInventoryStore
from src.core.interfaces.payment_store import IPaymentStore

__all__ = [
    # Catalog
    "IProductStore",
    "IVehicleStore",
    "IVendorStore",
    "ICustomerStore",
    # Documents
    "IPurchaseStore",
    "IInvoiceStore",
    "InvoiceFilter",
    "IVendorReturnStore",
    # Payments
    "IPaymentStore",
    # Inventory
    "IStockMovementStore",
    "IVehicleInventoryStore",
]
