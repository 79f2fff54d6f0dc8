"""Core domain entities."""

from src.core.entities.inventory import (
    MANUAL_UPDATE_NOTE,
    MovementDirection,
    ReferenceType,
    StockMovement,
    VehicleInventory,
    VehicleInventoryMovement,
    VehicleMovementType,
)
from src.core.entities.invoice import HamaliMode, Invoice, InvoiceItem, InvoiceStatus
from src.core.entities.party import Customer, Vendor
from src.core.entities.payment import CustomerPayment, HamaliCashPayment, VendorPayment
from src.core.entities.product import Product
from src.core.entities.purchase import Purchase, PurchaseItem
from src.core.entities.vehicle import Vehicle
from src.core.entities.vendor_return import VendorReturn, VendorReturnItem

__all__ = [
    # Parties
    "Vendor",
    "Customer",
    # Catalog
    "Product",
    "Vehicle",
    # Documents
    "Purchase",
    "PurchaseItem",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "HamaliMode",
    "VendorReturn",
    "VendorReturnItem",
    # Payments
    "VendorPayment",
    "CustomerPayment",
    "HamaliCashPayment",
    # Inventory
    "MovementDirection",
    "VehicleMovementType",
    "ReferenceType",
    "StockMovement",
    "VehicleInventory",
    "VehicleInventoryMovement",
    "MANUAL_UPDATE_NOTE",
]
