"""API route modules."""

from src.api.routes.admin import router as admin_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.parties import customers_router, vendors_router
from src.api.routes.payments import (
    customer_payments_router,
    hamali_cash_router,
    vendor_payments_router,
)
from src.api.routes.products import router as products_router
from src.api.routes.purchases import router as purchases_router
from src.api.routes.reports import router as reports_router
from src.api.routes.stock import router as stock_router
from src.api.routes.vehicles import router as vehicles_router
from src.api.routes.vendor_returns import router as vendor_returns_router

__all__ = [
    "health_router",
    "vendors_router",
    "customers_router",
    "products_router",
    "vehicles_router",
    "purchases_router",
    "invoices_router",
    "vendor_returns_router",
    "vendor_payments_router",
    "customer_payments_router",
    "hamali_cash_router",
    "stock_router",
    "reports_router",
    "admin_router",
]
