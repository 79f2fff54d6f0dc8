"""Tests for GetBalancesUseCase, GenerateReportsUseCase and ReconcileStockUseCase."""

from contextlib import nullcontext
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.use_cases.generate_reports import GenerateReportsUseCase
from src.application.use_cases.get_balances import GetBalancesUseCase
from src.application.use_cases.reconcile_stock import ReconcileStockUseCase
from src.core.entities import Customer, MovementDirection, StockMovement, Vendor
from src.core.exceptions import EntityNotFoundError, ValidationError
from src.core.services import CustomerBalance, VendorBalance


@pytest.fixture
def ledger():
    service = AsyncMock()
    service.vendor_balance.return_value = VendorBalance(
        vendor_id=1, vendor_name="Ramesh Farms",
        total_purchases=1000, total_payments=300, total_returns=100,
    )
    service.customer_balance.return_value = CustomerBalance(
        customer_id=1, customer_name="Sharma Traders", total_invoiced=800, total_paid=200,
    )
    return service


@pytest.fixture
def party_stores():
    vendors = AsyncMock()
    customers = AsyncMock()
    vendors.get.return_value = Vendor(id=1, name="Ramesh Farms", phone="9000000001")
    customers.get.return_value = Customer(id=1, name="Sharma Traders", phone="9800000001")
    return vendors, customers


@pytest.fixture
def balances(ledger, party_stores):
    vendors, customers = party_stores
    return GetBalancesUseCase(ledger=ledger, vendor_store=vendors, customer_store=customers)


class TestGetBalancesUseCase:
    async def test_vendor_balance(self, balances, ledger):
        result = await balances.vendor_balance(1)

        assert result.balance == 600
        ledger.vendor_balance.assert_awaited_once_with(1, vendor_name="Ramesh Farms")

    async def test_unknown_vendor(self, balances, party_stores):
        party_stores[0].get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await balances.vendor_balance(9)

    async def test_customer_balance_as_of(self, balances, ledger):
        result = await balances.customer_balance(1, as_of=date(2024, 3, 31))

        assert result.balance == 600
        assert ledger.customer_balance.call_args.kwargs["as_of"] == date(2024, 3, 31)

    async def test_unknown_customer(self, balances, party_stores):
        party_stores[1].get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await balances.customer_balance(9)

    async def test_period_rejects_inverted_range(self, balances, ledger):
        with pytest.raises(ValidationError):
            await balances.period_balance(date(2024, 3, 10), date(2024, 3, 1))
        ledger.period_balance.assert_not_awaited()


class TestGenerateReportsUseCase:
    async def test_daily_summary_delegates(self):
        reports = AsyncMock()
        reports.daily_summary.return_value = []

        await GenerateReportsUseCase(reports).daily_summary(
            date(2024, 3, 1), date(2024, 3, 31), vehicle_id=7
        )

        reports.daily_summary.assert_awaited_once_with(
            date(2024, 3, 1), date(2024, 3, 31), 7, None
        )

    async def test_inverted_range(self):
        reports = AsyncMock()

        with pytest.raises(ValidationError):
            await GenerateReportsUseCase(reports).profit_loss(date(2024, 4, 1), date(2024, 3, 1))
        reports.profit_loss.assert_not_awaited()


class TestReconcileStockUseCase:
    async def test_reports_and_repairs_drift(self, products, mirror):
        await mirror.apply(
            StockMovement(product_id=1, type=MovementDirection.IN, quantity=20, reason="test")
        )
        products.products[1].current_stock = 25
        use_case = ReconcileStockUseCase(
            product_store=products, stock_mirror=mirror, transaction=nullcontext
        )

        check = await use_case.execute()
        assert check.products_checked == 2
        assert len(check.drifts) == 1
        assert products.products[1].current_stock == 25

        repaired = await use_case.execute(repair=True)
        response = use_case.to_response(repaired)
        assert response.drifted == 1
        assert response.repaired
        assert products.products[1].current_stock == 20

        assert (await use_case.execute()).drifts == []
