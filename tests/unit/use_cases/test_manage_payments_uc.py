"""Tests for ManagePaymentsUseCase."""

from contextlib import nullcontext
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import (
    CustomerPaymentRequest,
    CustomerPaymentUpdateRequest,
    HamaliCashRequest,
    VendorPaymentRequest,
    VendorPaymentUpdateRequest,
)
from src.application.use_cases.manage_payments import ManagePaymentsUseCase
from src.core.entities import CustomerPayment, VendorPayment
from src.core.exceptions import EntityNotFoundError, UnknownReferenceError


@pytest.fixture
def payment_store():
    store = AsyncMock()
    store.create_vendor_payment.side_effect = lambda p: p.model_copy(update={"id": 1})
    store.create_customer_payment.side_effect = lambda p: p.model_copy(update={"id": 2})
    store.create_hamali_payment.side_effect = lambda p: p.model_copy(update={"id": 3})
    store.update_vendor_payment.side_effect = lambda p: p
    store.update_customer_payment.side_effect = lambda p: p
    return store


@pytest.fixture
def stores():
    """vendor, customer, purchase and invoice lookups that find everything."""
    return AsyncMock(), AsyncMock(), AsyncMock(), AsyncMock()


@pytest.fixture
def use_case(payment_store, stores):
    vendors, customers, purchases, invoices = stores
    return ManagePaymentsUseCase(
        payment_store=payment_store,
        vendor_store=vendors,
        customer_store=customers,
        purchase_store=purchases,
        invoice_store=invoices,
        transaction=nullcontext,
    )


class TestVendorPayments:
    async def test_create_defaults_date(self, use_case):
        payment = await use_case.create_vendor_payment(
            VendorPaymentRequest(vendor_id=1, amount=300)
        )

        assert payment.id == 1
        assert payment.payment_date == date.today()
        assert payment.payment_method == "cash"

    async def test_unknown_vendor(self, use_case, stores):
        stores[0].get.return_value = None

        with pytest.raises(UnknownReferenceError):
            await use_case.create_vendor_payment(VendorPaymentRequest(vendor_id=9, amount=1))

    async def test_unknown_purchase(self, use_case, stores):
        stores[2].get_purchase.return_value = None

        with pytest.raises(UnknownReferenceError) as exc_info:
            await use_case.create_vendor_payment(
                VendorPaymentRequest(vendor_id=1, purchase_id=4, amount=1)
            )
        assert exc_info.value.details["entity"] == "purchase"

    async def test_update_amount_and_clear_link(self, use_case, payment_store):
        payment_store.get_vendor_payment.return_value = VendorPayment(
            id=1, vendor_id=1, purchase_id=4, amount=300, notes="advance"
        )

        payment = await use_case.update_vendor_payment(
            1, VendorPaymentUpdateRequest(amount=350, purchase_id=None, payment_method=None)
        )

        assert payment.amount == 350
        assert payment.purchase_id is None
        assert payment.payment_method == "cash"
        assert payment.notes == "advance"

    async def test_update_missing(self, use_case, payment_store):
        payment_store.get_vendor_payment.return_value = None

        with pytest.raises(EntityNotFoundError) as exc_info:
            await use_case.update_vendor_payment(5, VendorPaymentUpdateRequest(amount=1))
        assert exc_info.value.code == "VENDOR_PAYMENT_NOT_FOUND"


class TestCustomerPayments:
    async def test_create(self, use_case, stores):
        payment = await use_case.create_customer_payment(
            CustomerPaymentRequest(customer_id=1, invoice_id=11, amount=500)
        )

        assert payment.id == 2
        stores[3].get_invoice.assert_awaited_once_with(11)

    async def test_unknown_invoice(self, use_case, stores):
        stores[3].get_invoice.return_value = None

        with pytest.raises(UnknownReferenceError):
            await use_case.create_customer_payment(
                CustomerPaymentRequest(customer_id=1, invoice_id=11, amount=500)
            )

    async def test_update(self, use_case, payment_store):
        payment_store.get_customer_payment.return_value = CustomerPayment(
            id=2, customer_id=1, amount=500
        )

        payment = await use_case.update_customer_payment(
            2, CustomerPaymentUpdateRequest(payment_date=date(2024, 3, 12))
        )

        assert payment.payment_date == date(2024, 3, 12)
        assert payment.amount == 500

    async def test_update_missing(self, use_case, payment_store):
        payment_store.get_customer_payment.return_value = None

        with pytest.raises(EntityNotFoundError):
            await use_case.update_customer_payment(5, CustomerPaymentUpdateRequest(amount=1))


class TestHamaliCash:
    async def test_standalone(self, use_case, stores):
        payment = await use_case.create_hamali_payment(HamaliCashRequest(amount=120))

        assert payment.id == 3
        assert payment.invoice_id is None
        stores[1].get.assert_not_awaited()

    async def test_unknown_customer(self, use_case, stores):
        stores[1].get.return_value = None

        with pytest.raises(UnknownReferenceError):
            await use_case.create_hamali_payment(HamaliCashRequest(amount=120, customer_id=4))
