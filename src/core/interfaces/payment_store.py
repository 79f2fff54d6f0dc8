"""Abstract interface for vendor, customer and hamali cash payments."""

from abc import ABC, abstractmethod

from src.core.entities.payment import CustomerPayment, HamaliCashPayment, VendorPayment


class IPaymentStore(ABC):
    """Payment persistence."""

    @abstractmethod
    async def create_vendor_payment(self, payment: VendorPayment) -> VendorPayment:
        pass

    @abstractmethod
    async def get_vendor_payment(self, payment_id: int) -> VendorPayment | None:
        pass

    @abstractmethod
    async def list_vendor_payments(self, vendor_id: int | None = None) -> list[VendorPayment]:
        pass

    @abstractmethod
    async def update_vendor_payment(self, payment: VendorPayment) -> VendorPayment:
        pass

    @abstractmethod
    async def create_customer_payment(self, payment: CustomerPayment) -> CustomerPayment:
        pass

    @abstractmethod
    async def get_customer_payment(self, payment_id: int) -> CustomerPayment | None:
        pass

    @abstractmethod
    async def list_customer_payments(
        self, customer_id: int | None = None
    ) -> list[CustomerPayment]:
        pass

    @abstractmethod
    async def update_customer_payment(self, payment: CustomerPayment) -> CustomerPayment:
        pass

    @abstractmethod
    async def create_hamali_payment(self, payment: HamaliCashPayment) -> HamaliCashPayment:
        pass

    @abstractmethod
    async def list_hamali_payments(self) -> list[HamaliCashPayment]:
        pass

    @abstractmethod
    async def get_hamali_payment_for_invoice(self, invoice_id: int) -> HamaliCashPayment | None:
        pass

    @abstractmethod
    async def update_hamali_payment(self, payment: HamaliCashPayment) -> HamaliCashPayment:
        pass

    @abstractmethod
    async def delete_hamali_payment(self, payment_id: int) -> bool:
        pass

    @abstractmethod
    async def detach_invoices(self, invoice_ids: list[int]) -> None:
        """Clear invoice links on payments that referenced deleted invoices."""
        pass
