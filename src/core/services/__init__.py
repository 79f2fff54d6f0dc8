"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from src.core.services.ledger import (
    CustomerBalance,
    LedgerService,
    PeriodBalance,
    VendorBalance,
)
from src.core.services.line_engine import LineEngine, average_sale_price
from src.core.services.reports import (
    CustomerPaymentSummary,
    DailySummary,
    HamaliSummary,
    ProductMargin,
    ProfitLossReport,
    ReportService,
)
from src.core.services.stock_mirror import StockDrift, StockMirrorService, clamp_stock
from src.core.services.vehicle_ledger import (
    VehicleDeduction,
    VehicleInventoryService,
    VehicleReconstruction,
)

__all__ = [
    # Line Engine
    "LineEngine",
    "average_sale_price",
    # Ledger
    "LedgerService",
    "VendorBalance",
    "CustomerBalance",
    "PeriodBalance",
    # Stock Mirror
    "StockMirrorService",
    "StockDrift",
    "clamp_stock",
    # Vehicle Inventory
    "VehicleInventoryService",
    "VehicleDeduction",
    "VehicleReconstruction",
    # Reports
    "ReportService",
    "DailySummary",
    "ProfitLossReport",
    "ProductMargin",
    "HamaliSummary",
    "CustomerPaymentSummary",
]
