"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from src.config import get_settings
from src.core.services import (
    LedgerService,
    LineEngine,
    ReportService,
    StockMirrorService,
    VehicleInventoryService,
)

TransactionFactory = Callable[[], AbstractAsyncContextManager[Any]]

_line_engine: LineEngine | None = None


def get_line_engine() -> LineEngine:
    """Get the shared (stateless) line engine."""
    global _line_engine
    if _line_engine is None:
        _line_engine = LineEngine()
    return _line_engine


def get_transaction_factory() -> TransactionFactory:
    """Transaction context used by write use cases."""
    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import get_transaction

    return get_transaction


async def get_stock_mirror_service() -> StockMirrorService:
    """Stock mirror wired to SQLite stores and the configured product policy."""
    from src.infrastructure.storage.sqlite import get_product_store, get_stock_movement_store

    return StockMirrorService(
        product_store=await get_product_store(),
        movement_store=await get_stock_movement_store(),
        policy=get_settings().inventory.product_policy,
    )


async def get_vehicle_inventory_service(
    stock_mirror: StockMirrorService | None = None,
) -> VehicleInventoryService:
    """Vehicle ledger wired to SQLite stores and the configured vehicle policy."""
    from src.infrastructure.storage.sqlite import get_vehicle_inventory_store

    return VehicleInventoryService(
        inventory_store=await get_vehicle_inventory_store(),
        stock_mirror=stock_mirror or await get_stock_mirror_service(),
        policy=get_settings().inventory.vehicle_policy,
    )


async def get_ledger_service() -> LedgerService:
    """Balance aggregator over all SQLite document stores."""
    from src.infrastructure.storage.sqlite import (
        get_customer_store,
        get_invoice_store,
        get_payment_store,
        get_purchase_store,
        get_return_store,
        get_vendor_store,
    )

    return LedgerService(
        purchase_store=await get_purchase_store(),
        invoice_store=await get_invoice_store(),
        return_store=await get_return_store(),
        payment_store=await get_payment_store(),
        vendor_store=await get_vendor_store(),
        customer_store=await get_customer_store(),
    )


async def get_report_service() -> ReportService:
    """Report service over all SQLite document stores."""
    from src.infrastructure.storage.sqlite import (
        get_customer_store,
        get_invoice_store,
        get_payment_store,
        get_product_store,
        get_purchase_store,
        get_return_store,
    )

    return ReportService(
        invoice_store=await get_invoice_store(),
        purchase_store=await get_purchase_store(),
        return_store=await get_return_store(),
        payment_store=await get_payment_store(),
        product_store=await get_product_store(),
        customer_store=await get_customer_store(),
    )


def reset_services() -> None:
    """Reset cached services (for testing)."""
    global _line_engine
    _line_engine = None
