"""Abstract interfaces for purchases, invoices and vendor returns."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from src.core.entities.invoice import Invoice, InvoiceItem
from src.core.entities.purchase import Purchase
from src.core.entities.vendor_return import VendorReturn


@dataclass
class InvoiceFilter:
    """Filters for invoice listing."""

    start_date: date | None = None
    end_date: date | None = None
    customer_id: int | None = None
    vehicle_id: int | None = None
    shop: int | None = None
    limit: int | None = None
    offset: int = 0


class IPurchaseStore(ABC):
    """Purchase persistence."""

    @abstractmethod
    async def create_purchase(self, purchase: Purchase) -> Purchase:
        """Create a purchase with all its items."""
        pass

    @abstractmethod
    async def get_purchase(self, purchase_id: int) -> Purchase | None:
        """Get a purchase with items."""
        pass

    @abstractmethod
    async def list_purchases(self, vendor_id: int | None = None) -> list[Purchase]:
        """List purchases with items, optionally for one vendor."""
        pass


class IInvoiceStore(ABC):
    """Invoice persistence."""

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create an invoice with all its items."""
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: int) -> Invoice | None:
        """Get an invoice with items."""
        pass

    @abstractmethod
    async def get_by_number(self, invoice_number: str) -> Invoice | None:
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InvoiceItem | None:
        pass

    @abstractmethod
    async def list_invoices(
        self, filters: InvoiceFilter | None = None
    ) -> tuple[list[Invoice], int]:
        """List invoices with items and the unpaginated match count."""
        pass

    @abstractmethod
    async def list_items(self, invoice_id: int | None = None) -> list[InvoiceItem]:
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Persist header fields and every item of an invoice."""
        pass

    @abstractmethod
    async def delete_invoices(self, invoice_ids: list[int]) -> int:
        """Delete invoices and their items. Returns invoices removed."""
        pass

    @abstractmethod
    async def product_day_totals(
        self, product_id: int, invoice_date: date
    ) -> tuple[float, float]:
        """Return (sum of line totals, sum of quantities) for a product on a date."""
        pass


class IVendorReturnStore(ABC):
    """Vendor return persistence."""

    @abstractmethod
    async def create_return(self, vendor_return: VendorReturn) -> VendorReturn:
        pass

    @abstractmethod
    async def get_return(self, return_id: int) -> VendorReturn | None:
        pass

    @abstractmethod
    async def list_returns(self, vendor_id: int | None = None) -> list[VendorReturn]:
        pass
