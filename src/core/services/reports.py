"""
Reconciliation reports.

Read-side aggregation only; every figure is re-derived from stored
documents on each call.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from src.core.entities.invoice import Invoice
from src.core.interfaces import (
    ICustomerStore,
    IInvoiceStore,
    InvoiceFilter,
    IPaymentStore,
    IProductStore,
    IPurchaseStore,
    IVendorReturnStore,
)


def _in_range(day: date, start_date: date | None, end_date: date | None) -> bool:
    if start_date is not None and day < start_date:
        return False
    if end_date is not None and day > end_date:
        return False
    return True


@dataclass
class DailySummary:
    day: date
    sales: float = 0.0
    invoice_count: int = 0
    hamali_total: float = 0.0
    total_weight: float = 0.0
    bags: int = 0


@dataclass
class ProductMargin:
    product_id: int
    name: str
    purchase_price: float
    sale_price: float

    @property
    def margin(self) -> float:
        return self.sale_price - self.purchase_price

    @property
    def margin_percent(self) -> float:
        if self.purchase_price <= 0:
            return 0.0
        return self.margin / self.purchase_price * 100


@dataclass
class HamaliSummary:
    invoice_hamali_total: float
    direct_cash_hamali_total: float
    invoices_with_hamali: int
    invoices_without_hamali: int
    sales_with_hamali: float
    sales_without_hamali: float
    direct_cash_count: int

    @property
    def total_hamali_collected(self) -> float:
        return self.invoice_hamali_total + self.direct_cash_hamali_total


@dataclass
class CustomerPaymentSummary:
    customer_id: int
    customer_name: str
    total_invoiced: float
    total_paid: float
    invoice_count: int

    @property
    def balance(self) -> float:
        return self.total_invoiced - self.total_paid

    @property
    def status(self) -> str:
        if self.balance <= 0:
            return "paid"
        if self.total_paid > 0:
            return "partial"
        return "unpaid"


@dataclass
class ProfitLossReport:
    total_purchases: float
    total_returns: float
    total_sales: float
    invoice_count: int
    hamali: HamaliSummary
    product_margins: list[ProductMargin] = field(default_factory=list)
    customer_payments: list[CustomerPaymentSummary] = field(default_factory=list)

    @property
    def net_purchases(self) -> float:
        return self.total_purchases - self.total_returns

    @property
    def gross_profit(self) -> float:
        return self.total_sales - self.net_purchases


class ReportService:
    """Daily summaries and profit/loss over the ledger."""

    def __init__(
        self,
        invoice_store: IInvoiceStore,
        purchase_store: IPurchaseStore,
        return_store: IVendorReturnStore,
        payment_store: IPaymentStore,
        product_store: IProductStore,
        customer_store: ICustomerStore,
    ):
        self._invoices = invoice_store
        self._purchases = purchase_store
        self._returns = return_store
        self._payments = payment_store
        self._products = product_store
        self._customers = customer_store

    async def _load_invoices(
        self,
        start_date: date | None,
        end_date: date | None,
        vehicle_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[Invoice]:
        invoices, _ = await self._invoices.list_invoices(
            InvoiceFilter(
                start_date=start_date,
                end_date=end_date,
                vehicle_id=vehicle_id,
                customer_id=customer_id,
            )
        )
        return invoices

    async def daily_summary(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        vehicle_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[DailySummary]:
        """Per-date sales, hamali, weight and bags. Newest date first."""
        invoices = await self._load_invoices(start_date, end_date, vehicle_id, customer_id)

        grouped: dict[date, list[Invoice]] = defaultdict(list)
        for invoice in invoices:
            grouped[invoice.invoice_date].append(invoice)

        return [
            DailySummary(
                day=day,
                sales=math.fsum(i.grand_total for i in day_invoices),
                invoice_count=len(day_invoices),
                hamali_total=math.fsum(i.hamali_charge_amount for i in day_invoices),
                total_weight=math.fsum(i.total_kg_weight for i in day_invoices),
                bags=sum(i.bags for i in day_invoices),
            )
            for day, day_invoices in sorted(grouped.items(), reverse=True)
        ]

    async def hamali_summary(
        self,
        invoices: list[Invoice],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> HamaliSummary:
        with_hamali = [i for i in invoices if i.include_hamali_charge]
        without_hamali = [i for i in invoices if not i.include_hamali_charge]
        # Rows linked to an invoice are already in that invoice's hamali charge.
        cash = [
            p
            for p in await self._payments.list_hamali_payments()
            if p.invoice_id is None and _in_range(p.payment_date, start_date, end_date)
        ]
        return HamaliSummary(
            invoice_hamali_total=math.fsum(i.hamali_charge_amount for i in with_hamali),
            direct_cash_hamali_total=math.fsum(p.amount for p in cash),
            invoices_with_hamali=len(with_hamali),
            invoices_without_hamali=len(without_hamali),
            sales_with_hamali=math.fsum(i.grand_total for i in with_hamali),
            sales_without_hamali=math.fsum(i.grand_total for i in without_hamali),
            direct_cash_count=len(cash),
        )

    async def customer_payment_summary(
        self,
        invoices: list[Invoice],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[CustomerPaymentSummary]:
        """Invoiced vs paid for every customer that has invoices."""
        by_customer: dict[int, list[Invoice]] = defaultdict(list)
        for invoice in invoices:
            by_customer[invoice.customer_id].append(invoice)

        paid: dict[int, float] = defaultdict(float)
        for payment in await self._payments.list_customer_payments():
            if _in_range(payment.payment_date, start_date, end_date):
                paid[payment.customer_id] += payment.amount

        names = {c.id: c.name for c in await self._customers.list_customers()}
        return [
            CustomerPaymentSummary(
                customer_id=customer_id,
                customer_name=names.get(customer_id, "Unknown"),
                total_invoiced=math.fsum(i.grand_total for i in customer_invoices),
                total_paid=paid[customer_id],
                invoice_count=len(customer_invoices),
            )
            for customer_id, customer_invoices in sorted(by_customer.items())
        ]

    async def profit_loss(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ProfitLossReport:
        """sales - (purchases - returns), with margin, hamali and payment breakdowns."""
        invoices = await self._load_invoices(start_date, end_date)
        purchases = [
            p
            for p in await self._purchases.list_purchases()
            if _in_range(p.purchase_date, start_date, end_date)
        ]
        returns = [
            r
            for r in await self._returns.list_returns()
            if _in_range(r.return_date, start_date, end_date)
        ]
        margins = [
            ProductMargin(
                product_id=p.id,  # type: ignore[arg-type]
                name=p.name,
                purchase_price=p.purchase_price,
                sale_price=p.sale_price,
            )
            for p in await self._products.list_products()
        ]

        return ProfitLossReport(
            total_purchases=math.fsum(p.total_amount for p in purchases),
            total_returns=math.fsum(r.total_amount for r in returns),
            total_sales=math.fsum(i.grand_total for i in invoices),
            invoice_count=len(invoices),
            hamali=await self.hamali_summary(invoices, start_date, end_date),
            product_margins=margins,
            customer_payments=await self.customer_payment_summary(
                invoices, start_date, end_date
            ),
        )
