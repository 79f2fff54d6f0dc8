"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.admin_store import SQLiteAdminStore
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.inventory_store import (
    SQLiteStockMovementStore,
    SQLiteVehicleInventoryStore,
)
from src.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore
from src.infrastructure.storage.sqlite.party_store import SQLiteCustomerStore, SQLiteVendorStore
from src.infrastructure.storage.sqlite.payment_store import SQLitePaymentStore
from src.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from src.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseStore
from src.infrastructure.storage.sqlite.return_store import SQLiteVendorReturnStore
from src.infrastructure.storage.sqlite.vehicle_store import SQLiteVehicleStore

# Aliases for backward compatibility
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_vendor_store: SQLiteVendorStore | None = None
_customer_store: SQLiteCustomerStore | None = None
_product_store: SQLiteProductStore | None = None
_vehicle_store: SQLiteVehicleStore | None = None
_purchase_store: SQLitePurchaseStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None
_return_store: SQLiteVendorReturnStore | None = None
_payment_store: SQLitePaymentStore | None = None
_stock_movement_store: SQLiteStockMovementStore | None = None
_vehicle_inventory_store: SQLiteVehicleInventoryStore | None = None
_admin_store: SQLiteAdminStore | None = None


async def get_vendor_store() -> SQLiteVendorStore:
    """Get singleton vendor store instance."""
    global _vendor_store
    if _vendor_store is None:
        _vendor_store = SQLiteVendorStore()
    return _vendor_store


async def get_customer_store() -> SQLiteCustomerStore:
    """Get singleton customer store instance."""
    global _customer_store
    if _customer_store is None:
        _customer_store = SQLiteCustomerStore()
    return _customer_store


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_vehicle_store() -> SQLiteVehicleStore:
    """Get singleton vehicle store instance."""
    global _vehicle_store
    if _vehicle_store is None:
        _vehicle_store = SQLiteVehicleStore()
    return _vehicle_store


async def get_purchase_store() -> SQLitePurchaseStore:
    """Get singleton purchase store instance."""
    global _purchase_store
    if _purchase_store is None:
        _purchase_store = SQLitePurchaseStore()
    return _purchase_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


async def get_return_store() -> SQLiteVendorReturnStore:
    """Get singleton vendor return store instance."""
    global _return_store
    if _return_store is None:
        _return_store = SQLiteVendorReturnStore()
    return _return_store


async def get_payment_store() -> SQLitePaymentStore:
    """Get singleton payment store instance."""
    global _payment_store
    if _payment_store is None:
        _payment_store = SQLitePaymentStore()
    return _payment_store


async def get_stock_movement_store() -> SQLiteStockMovementStore:
    """Get singleton stock movement store instance."""
    global _stock_movement_store
    if _stock_movement_store is None:
        _stock_movement_store = SQLiteStockMovementStore()
    return _stock_movement_store


async def get_vehicle_inventory_store() -> SQLiteVehicleInventoryStore:
    """Get singleton vehicle inventory store instance."""
    global _vehicle_inventory_store
    if _vehicle_inventory_store is None:
        _vehicle_inventory_store = SQLiteVehicleInventoryStore()
    return _vehicle_inventory_store


async def get_admin_store() -> SQLiteAdminStore:
    """Get singleton admin store instance."""
    global _admin_store
    if _admin_store is None:
        _admin_store = SQLiteAdminStore()
    return _admin_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteVendorStore",
    "SQLiteCustomerStore",
    "SQLiteProductStore",
    "SQLiteVehicleStore",
    "SQLitePurchaseStore",
    "SQLiteInvoiceStore",
    "SQLiteVendorReturnStore",
    "SQLitePaymentStore",
    "SQLiteStockMovementStore",
    "SQLiteVehicleInventoryStore",
    "SQLiteAdminStore",
    # Factory functions
    "get_vendor_store",
    "get_customer_store",
    "get_product_store",
    "get_vehicle_store",
    "get_purchase_store",
    "get_invoice_store",
    "get_return_store",
    "get_payment_store",
    "get_stock_movement_store",
    "get_vehicle_inventory_store",
    "get_admin_store",
]
