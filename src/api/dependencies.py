"""
Dependency injection container for FastAPI.

Provides stores and use case instances to route handlers. Tests swap
these out through ``app.dependency_overrides``.
"""

from src.application.use_cases import (
    CreateInvoiceUseCase,
    CreatePurchaseUseCase,
    CreateVendorReturnUseCase,
    DeleteInvoicesUseCase,
    GenerateReportsUseCase,
    GetBalancesUseCase,
    ManageCatalogUseCase,
    ManagePaymentsUseCase,
    ManageVehicleInventoryUseCase,
    ReconcileStockUseCase,
    UpdateInvoiceUseCase,
)
from src.infrastructure.storage.sqlite import (
    SQLiteAdminStore,
    SQLiteCustomerStore,
    SQLiteInvoiceStore,
    SQLitePaymentStore,
    SQLiteProductStore,
    SQLitePurchaseStore,
    SQLiteStockMovementStore,
    SQLiteVehicleInventoryStore,
    SQLiteVehicleStore,
    SQLiteVendorReturnStore,
    SQLiteVendorStore,
    get_admin_store,
    get_customer_store,
    get_invoice_store,
    get_payment_store,
    get_product_store,
    get_purchase_store,
    get_return_store,
    get_stock_movement_store,
    get_vehicle_inventory_store,
    get_vehicle_store,
    get_vendor_store,
)


# Store dependencies
async def get_vendors() -> SQLiteVendorStore:
    return await get_vendor_store()


async def get_customers() -> SQLiteCustomerStore:
    return await get_customer_store()


async def get_products() -> SQLiteProductStore:
    return await get_product_store()


async def get_vehicles() -> SQLiteVehicleStore:
    return await get_vehicle_store()


async def get_purchases() -> SQLitePurchaseStore:
    return await get_purchase_store()


async def get_invoices() -> SQLiteInvoiceStore:
    return await get_invoice_store()


async def get_returns() -> SQLiteVendorReturnStore:
    return await get_return_store()


async def get_payments() -> SQLitePaymentStore:
    return await get_payment_store()


async def get_stock_movements() -> SQLiteStockMovementStore:
    return await get_stock_movement_store()


async def get_vehicle_inventory() -> SQLiteVehicleInventoryStore:
    return await get_vehicle_inventory_store()


async def get_admin() -> SQLiteAdminStore:
    return await get_admin_store()


# Use case dependencies
def get_create_purchase_use_case() -> CreatePurchaseUseCase:
    """Get create purchase use case."""
    return CreatePurchaseUseCase()


def get_create_invoice_use_case() -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    """Get update invoice use case."""
    return UpdateInvoiceUseCase()


def get_delete_invoices_use_case() -> DeleteInvoicesUseCase:
    """Get bulk delete invoices use case."""
    return DeleteInvoicesUseCase()


def get_create_vendor_return_use_case() -> CreateVendorReturnUseCase:
    """Get create vendor return use case."""
    return CreateVendorReturnUseCase()


def get_catalog_use_case() -> ManageCatalogUseCase:
    """Get product/vehicle catalog use case."""
    return ManageCatalogUseCase()


def get_payments_use_case() -> ManagePaymentsUseCase:
    """Get payments use case."""
    return ManagePaymentsUseCase()


def get_vehicle_inventory_use_case() -> ManageVehicleInventoryUseCase:
    """Get vehicle inventory use case."""
    return ManageVehicleInventoryUseCase()


def get_balances_use_case() -> GetBalancesUseCase:
    """Get balances use case."""
    return GetBalancesUseCase()


def get_reports_use_case() -> GenerateReportsUseCase:
    """Get reports use case."""
    return GenerateReportsUseCase()


def get_reconcile_stock_use_case() -> ReconcileStockUseCase:
    """Get stock reconciliation use case."""
    return ReconcileStockUseCase()
