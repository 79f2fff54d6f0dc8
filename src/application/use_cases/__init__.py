"""Application use cases."""

from src.application.use_cases.create_invoice import CreateInvoiceResult, CreateInvoiceUseCase
from src.application.use_cases.create_purchase import CreatePurchaseUseCase
from src.application.use_cases.create_vendor_return import CreateVendorReturnUseCase
from src.application.use_cases.delete_invoices import (
    DeleteInvoicesResult,
    DeleteInvoicesUseCase,
)
from src.application.use_cases.generate_reports import GenerateReportsUseCase
from src.application.use_cases.get_balances import GetBalancesUseCase
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.application.use_cases.manage_payments import ManagePaymentsUseCase
from src.application.use_cases.manage_vehicle_inventory import ManageVehicleInventoryUseCase
from src.application.use_cases.reconcile_stock import (
    ReconcileStockResult,
    ReconcileStockUseCase,
)
from src.application.use_cases.update_invoice import UpdateInvoiceUseCase

__all__ = [
    "CreatePurchaseUseCase",
    "CreateInvoiceUseCase",
    "CreateInvoiceResult",
    "CreateVendorReturnUseCase",
    "UpdateInvoiceUseCase",
    "DeleteInvoicesUseCase",
    "DeleteInvoicesResult",
    "ManageCatalogUseCase",
    "ManagePaymentsUseCase",
    "ManageVehicleInventoryUseCase",
    "GetBalancesUseCase",
    "GenerateReportsUseCase",
    "ReconcileStockUseCase",
    "ReconcileStockResult",
]
