"""Tests for vendor/customer balances."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.core.entities import (
    Customer,
    CustomerPayment,
    Invoice,
    Purchase,
    Vendor,
    VendorPayment,
    VendorReturn,
)
from src.core.services import LedgerService


def invoice(invoice_id: int, day: date, grand_total: float, customer_id: int = 1) -> Invoice:
    return Invoice(
        id=invoice_id,
        invoice_number=f"INV-{invoice_id:03d}",
        customer_id=customer_id,
        invoice_date=day,
        grand_total=grand_total,
    )


def customer_payment(day: date, amount: float, customer_id: int = 1) -> CustomerPayment:
    return CustomerPayment(customer_id=customer_id, amount=amount, payment_date=day)


class FakeInvoiceStore:
    """Applies the customer/date filters the way the sqlite store does."""

    def __init__(self, invoices: list[Invoice]):
        self.invoices = invoices

    async def list_invoices(self, filters=None):
        rows = [
            i
            for i in self.invoices
            if (filters.customer_id is None or i.customer_id == filters.customer_id)
            and (filters.start_date is None or i.invoice_date >= filters.start_date)
            and (filters.end_date is None or i.invoice_date <= filters.end_date)
        ]
        return rows, len(rows)


@pytest.fixture
def stores():
    purchases = AsyncMock()
    payments = AsyncMock()
    returns = AsyncMock()
    vendors = AsyncMock()
    customers = AsyncMock()
    purchases.list_purchases.return_value = []
    payments.list_vendor_payments.return_value = []
    payments.list_customer_payments.return_value = []
    returns.list_returns.return_value = []
    return purchases, payments, returns, vendors, customers


def make_ledger(stores, invoices: list[Invoice] | None = None) -> LedgerService:
    purchases, payments, returns, vendors, customers = stores
    return LedgerService(
        purchase_store=purchases,
        invoice_store=FakeInvoiceStore(invoices or []),
        return_store=returns,
        payment_store=payments,
        vendor_store=vendors,
        customer_store=customers,
    )


class TestVendorBalance:
    async def test_purchases_minus_payments_and_returns(self, stores):
        purchases, payments, returns, _, _ = stores
        purchases.list_purchases.return_value = [Purchase(vendor_id=1, total_amount=1000)]
        payments.list_vendor_payments.return_value = [VendorPayment(vendor_id=1, amount=300)]
        returns.list_returns.return_value = [VendorReturn(vendor_id=1, total_amount=100)]

        balance = await make_ledger(stores).vendor_balance(1)

        assert balance.balance == 600
        purchases.list_purchases.assert_awaited_with(vendor_id=1)

    async def test_second_payment_settles(self, stores):
        purchases, payments, returns, _, _ = stores
        purchases.list_purchases.return_value = [Purchase(vendor_id=1, total_amount=1000)]
        returns.list_returns.return_value = [VendorReturn(vendor_id=1, total_amount=100)]
        payments.list_vendor_payments.return_value = [
            VendorPayment(vendor_id=1, amount=300),
            VendorPayment(vendor_id=1, amount=600),
        ]

        balance = await make_ledger(stores).vendor_balance(1)

        assert balance.balance == 0

    async def test_idempotent(self, stores):
        purchases, payments, _, _, _ = stores
        purchases.list_purchases.return_value = [
            Purchase(vendor_id=1, total_amount=0.1) for _ in range(10)
        ]
        payments.list_vendor_payments.return_value = [VendorPayment(vendor_id=1, amount=0.3)]
        ledger = make_ledger(stores)

        first = await ledger.vendor_balance(1)
        second = await ledger.vendor_balance(1)

        assert first == second
        assert first.balance == second.balance == pytest.approx(0.7)

    async def test_all_vendor_balances(self, stores):
        _, _, _, vendors, _ = stores
        vendors.list_vendors.return_value = [
            Vendor(id=1, name="Ramesh Farms", phone="9000000001"),
            Vendor(id=2, name="Green Valley", phone="9000000002"),
        ]

        balances = await make_ledger(stores).all_vendor_balances()

        assert [b.vendor_name for b in balances] == ["Ramesh Farms", "Green Valley"]

    async def test_all_vendor_balances_without_store(self, stores):
        purchases, payments, returns, _, _ = stores
        ledger = LedgerService(purchases, FakeInvoiceStore([]), returns, payments)
        assert await ledger.all_vendor_balances() == []


class TestCustomerBalance:
    async def test_invoiced_minus_paid(self, stores):
        _, payments, _, _, _ = stores
        payments.list_customer_payments.return_value = [
            customer_payment(date(2024, 3, 2), 400),
        ]
        invoices = [invoice(1, date(2024, 3, 1), 1000), invoice(2, date(2024, 3, 3), 500)]

        balance = await make_ledger(stores, invoices).customer_balance(1)

        assert balance.total_invoiced == 1500
        assert balance.balance == 1100

    async def test_as_of_excludes_later_activity(self, stores):
        _, payments, _, _, _ = stores
        payments.list_customer_payments.return_value = [
            customer_payment(date(2024, 3, 2), 400),
            customer_payment(date(2024, 3, 9), 100),
        ]
        invoices = [invoice(1, date(2024, 3, 1), 1000), invoice(2, date(2024, 3, 5), 500)]

        balance = await make_ledger(stores, invoices).customer_balance(
            1, as_of=date(2024, 3, 4)
        )

        assert balance.balance == 600

    async def test_all_customer_balances(self, stores):
        _, _, _, _, customers = stores
        customers.list_customers.return_value = [
            Customer(id=1, name="Sharma Traders", phone="9800000001"),
            Customer(id=2, name="City Hotel", phone="9800000002"),
        ]
        invoices = [invoice(1, date(2024, 3, 1), 250, customer_id=2)]

        balances = await make_ledger(stores, invoices).all_customer_balances()

        assert [b.balance for b in balances] == [0, 250]


class TestPeriodBalance:
    @pytest.fixture
    def history(self, stores):
        _, payments, _, _, _ = stores
        payments.list_customer_payments.return_value = [
            customer_payment(date(2024, 2, 20), 300),
            customer_payment(date(2024, 3, 3), 200),
            customer_payment(date(2024, 3, 8), 150),
            customer_payment(date(2024, 3, 20), 50),
        ]
        return [
            invoice(1, date(2024, 2, 15), 800),
            invoice(2, date(2024, 3, 1), 450),
            invoice(3, date(2024, 3, 10), 120.55),
            invoice(4, date(2024, 3, 25), 999),
        ]

    async def test_opening_and_closing(self, stores, history):
        ledger = make_ledger(stores, history)

        period = await ledger.period_balance(date(2024, 3, 1), date(2024, 3, 10), customer_id=1)

        assert period.opening_balance == 500
        assert period.period_sales == pytest.approx(570.55)
        assert period.period_payments == 350
        assert period.closing_balance == pytest.approx(720.55)

    @pytest.mark.parametrize(
        ("start", "end"),
        [
            (date(2024, 1, 1), date(2024, 2, 20)),
            (date(2024, 2, 16), date(2024, 3, 1)),
            (date(2024, 3, 1), date(2024, 3, 1)),
            (date(2024, 3, 1), date(2024, 3, 9)),
            (date(2024, 3, 4), date(2024, 3, 10)),
            (date(2024, 3, 11), date(2024, 3, 31)),
        ],
    )
    async def test_closing_ties_out_with_balance_as_of(self, stores, history, start, end):
        ledger = make_ledger(stores, history)

        period = await ledger.period_balance(start, end, customer_id=1)
        direct = await ledger.customer_balance(1, as_of=end)

        assert period.closing_balance == pytest.approx(direct.balance)
