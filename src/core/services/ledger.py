"""
Ledger aggregator.

Vendor and customer balances are recomputed from the source documents on
every call. Nothing is cached, so two calls without an intervening write
always agree.
"""

import math
from dataclasses import dataclass
from datetime import date

from src.core.interfaces import (
    ICustomerStore,
    IInvoiceStore,
    InvoiceFilter,
    IPaymentStore,
    IPurchaseStore,
    IVendorReturnStore,
    IVendorStore,
)


@dataclass
class VendorBalance:
    vendor_id: int
    vendor_name: str | None
    total_purchases: float
    total_payments: float
    total_returns: float

    @property
    def balance(self) -> float:
        return self.total_purchases - self.total_payments - self.total_returns


@dataclass
class CustomerBalance:
    customer_id: int
    customer_name: str | None
    total_invoiced: float
    total_paid: float
    as_of: date | None = None

    @property
    def balance(self) -> float:
        return self.total_invoiced - self.total_paid


@dataclass
class PeriodBalance:
    """Opening and closing balance for ``[start_date, end_date]``."""

    start_date: date
    end_date: date
    customer_id: int | None
    opening_balance: float
    period_sales: float
    period_payments: float

    @property
    def closing_balance(self) -> float:
        return self.opening_balance + self.period_sales - self.period_payments


class LedgerService:
    """Running balances over purchases, invoices, returns and payments."""

    def __init__(
        self,
        purchase_store: IPurchaseStore,
        invoice_store: IInvoiceStore,
        return_store: IVendorReturnStore,
        payment_store: IPaymentStore,
        vendor_store: IVendorStore | None = None,
        customer_store: ICustomerStore | None = None,
    ):
        self._purchases = purchase_store
        self._invoices = invoice_store
        self._returns = return_store
        self._payments = payment_store
        self._vendors = vendor_store
        self._customers = customer_store

    async def vendor_balance(
        self, vendor_id: int, vendor_name: str | None = None
    ) -> VendorBalance:
        """purchases - payments - returns for one vendor."""
        purchases = await self._purchases.list_purchases(vendor_id=vendor_id)
        payments = await self._payments.list_vendor_payments(vendor_id=vendor_id)
        returns = await self._returns.list_returns(vendor_id=vendor_id)
        return VendorBalance(
            vendor_id=vendor_id,
            vendor_name=vendor_name,
            total_purchases=math.fsum(p.total_amount for p in purchases),
            total_payments=math.fsum(p.amount for p in payments),
            total_returns=math.fsum(r.total_amount for r in returns),
        )

    async def customer_balance(
        self,
        customer_id: int,
        as_of: date | None = None,
        customer_name: str | None = None,
    ) -> CustomerBalance:
        """invoiced - paid for one customer, optionally up to and including ``as_of``."""
        invoices, _ = await self._invoices.list_invoices(
            InvoiceFilter(customer_id=customer_id, end_date=as_of)
        )
        payments = await self._payments.list_customer_payments(customer_id=customer_id)
        if as_of is not None:
            payments = [p for p in payments if p.payment_date <= as_of]
        return CustomerBalance(
            customer_id=customer_id,
            customer_name=customer_name,
            total_invoiced=math.fsum(i.grand_total for i in invoices),
            total_paid=math.fsum(p.amount for p in payments),
            as_of=as_of,
        )

    async def period_balance(
        self,
        start_date: date,
        end_date: date,
        customer_id: int | None = None,
    ) -> PeriodBalance:
        """
        Opening/closing balance for a report window.

        opening = invoiced before start - paid before start
        closing = opening + invoiced in window - paid in window
        """
        invoices, _ = await self._invoices.list_invoices(
            InvoiceFilter(customer_id=customer_id, end_date=end_date)
        )
        payments = await self._payments.list_customer_payments(customer_id=customer_id)

        opening_sales = math.fsum(i.grand_total for i in invoices if i.invoice_date < start_date)
        opening_paid = math.fsum(p.amount for p in payments if p.payment_date < start_date)
        period_sales = math.fsum(
            i.grand_total for i in invoices if start_date <= i.invoice_date <= end_date
        )
        period_paid = math.fsum(
            p.amount for p in payments if start_date <= p.payment_date <= end_date
        )

        return PeriodBalance(
            start_date=start_date,
            end_date=end_date,
            customer_id=customer_id,
            opening_balance=opening_sales - opening_paid,
            period_sales=period_sales,
            period_payments=period_paid,
        )

    async def all_vendor_balances(self) -> list[VendorBalance]:
        if self._vendors is None:
            return []
        return [
            await self.vendor_balance(v.id, vendor_name=v.name)  # type: ignore[arg-type]
            for v in await self._vendors.list_vendors()
        ]

    async def all_customer_balances(self, as_of: date | None = None) -> list[CustomerBalance]:
        if self._customers is None:
            return []
        return [
            await self.customer_balance(c.id, as_of=as_of, customer_name=c.name)  # type: ignore[arg-type]
            for c in await self._customers.list_customers()
        ]
