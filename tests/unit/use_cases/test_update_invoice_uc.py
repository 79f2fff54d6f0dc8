"""Tests for UpdateInvoiceUseCase: every edit recomputes the invoice."""

from contextlib import nullcontext
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import UpdateInvoiceItemRequest, UpdateInvoiceRequest
from src.application.use_cases.update_invoice import UpdateInvoiceUseCase
from src.core.entities import (
    HamaliCashPayment,
    HamaliMode,
    Invoice,
    InvoiceItem,
    MovementDirection,
)
from src.core.exceptions import EntityNotFoundError, ValidationError
from src.core.services import LineEngine


def stored_invoice() -> Invoice:
    invoice = Invoice(
        id=11,
        invoice_number="INV-2024-0001",
        customer_id=1,
        invoice_date=date(2024, 3, 10),
        include_hamali_charge=True,
        hamali_rate_per_kg=2.0,
        items=[
            InvoiceItem(
                id=1, invoice_id=11, product_id=1, unit_price=20.0,
                weight_breakdown=[12, 15, 9],
            ),
            InvoiceItem(id=2, invoice_id=11, product_id=2, quantity=10, unit_price=30.0),
        ],
    )
    return LineEngine().price_invoice(invoice)


@pytest.fixture
def invoice():
    return stored_invoice()


@pytest.fixture
def invoice_store(invoice):
    store = AsyncMock()
    store.get_invoice.return_value = invoice
    store.get_item.side_effect = lambda item_id: next(
        (i for i in invoice.items if i.id == item_id), None
    )
    store.update_invoice.side_effect = lambda inv: inv
    store.product_day_totals.return_value = (0.0, 0.0)
    return store


@pytest.fixture
def payment_store():
    store = AsyncMock()
    store.get_hamali_payment_for_invoice.return_value = None
    return store


@pytest.fixture
def use_case(invoice_store, payment_store, products, mirror):
    products.products[1].current_stock = 100
    products.products[2].current_stock = 100
    return UpdateInvoiceUseCase(
        invoice_store=invoice_store,
        product_store=products,
        payment_store=payment_store,
        stock_mirror=mirror,
        transaction=nullcontext,
    )


class TestUpdateInvoiceHeader:
    async def test_switch_to_per_bag_recomputes(self, use_case, invoice_store):
        request = UpdateInvoiceRequest(hamali_mode=HamaliMode.PER_BAG, hamali_rate_per_bag=5.0)

        updated = await use_case.execute(11, request)

        assert updated.bags == 3
        assert updated.hamali_charge_amount == 15
        assert updated.grand_total == updated.subtotal + 15
        invoice_store.update_invoice.assert_awaited_once()

    async def test_disable_hamali(self, use_case):
        updated = await use_case.execute(11, UpdateInvoiceRequest(include_hamali_charge=False))

        assert updated.hamali_charge_amount == 0
        assert updated.grand_total == updated.subtotal

    async def test_hamali_mode_can_be_reset_to_auto(self, use_case, invoice):
        invoice.hamali_mode = HamaliMode.PER_BAG
        invoice.hamali_rate_per_bag = 0.0

        updated = await use_case.execute(11, UpdateInvoiceRequest(hamali_mode=None))

        assert updated.hamali_mode is None
        assert updated.hamali_charge_amount == 92

    async def test_omitted_fields_untouched(self, use_case):
        updated = await use_case.execute(11, UpdateInvoiceRequest(hamali_rate_per_kg=None))
        assert updated.hamali_rate_per_kg == 2.0

    async def test_header_edit_books_no_stock(self, use_case, movements):
        await use_case.execute(11, UpdateInvoiceRequest(hamali_rate_per_kg=3.0))
        assert movements.movements == []

    async def test_missing_invoice(self, use_case, invoice_store):
        invoice_store.get_invoice.return_value = None

        with pytest.raises(EntityNotFoundError) as exc_info:
            await use_case.execute(404, UpdateInvoiceRequest(bags=1))
        assert exc_info.value.code == "INVOICE_NOT_FOUND"


class TestUpdateInvoiceItem:
    async def test_replacing_breakdown_rederives_line_and_totals(self, use_case):
        updated = await use_case.update_item(
            1, UpdateInvoiceItemRequest(weight_breakdown=[12, 15, 9, 10])
        )

        line = updated.items[0]
        assert line.quantity == 46
        assert line.bags == 4
        assert line.total == 920
        assert updated.bags == 4
        assert updated.total_kg_weight == 56
        assert updated.subtotal == 1220
        assert updated.hamali_charge_amount == 112
        assert updated.grand_total == 1332

    async def test_quantity_increase_books_out(self, use_case, products, movements):
        await use_case.update_item(2, UpdateInvoiceItemRequest(quantity=14))

        assert products.products[2].current_stock == 96
        assert movements.movements[0].type == MovementDirection.OUT
        assert movements.movements[0].quantity == 4
        assert movements.movements[0].reason == "Invoice INV-2024-0001 edited"

    async def test_breakdown_shrink_books_in(self, use_case, products, movements):
        await use_case.update_item(1, UpdateInvoiceItemRequest(weight_breakdown=[12, 15]))

        assert products.products[1].current_stock == 109
        assert movements.movements[0].type == MovementDirection.IN

    async def test_price_only_edit(self, use_case, movements):
        updated = await use_case.update_item(2, UpdateInvoiceItemRequest(unit_price=35.0))

        assert updated.items[1].total == 350
        assert updated.subtotal == 720 + 350
        assert movements.movements == []

    async def test_conflicting_quantity_rejected(self, use_case, invoice_store):
        with pytest.raises(ValidationError):
            await use_case.update_item(1, UpdateInvoiceItemRequest(quantity=50))
        invoice_store.update_invoice.assert_not_awaited()

    async def test_missing_item(self, use_case):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await use_case.update_item(99, UpdateInvoiceItemRequest(unit_price=1.0))
        assert exc_info.value.code == "INVOICE_ITEM_NOT_FOUND"


def linked_cash(amount: float = 92.0) -> HamaliCashPayment:
    return HamaliCashPayment(
        id=5,
        amount=amount,
        payment_date=date(2024, 3, 10),
        customer_id=1,
        invoice_id=11,
        invoice_number="INV-2024-0001",
        total_bill_amount=1112,
    )


class TestHamaliCashSync:
    async def test_rate_change_updates_linked_cash(self, use_case, invoice, payment_store):
        invoice.hamali_paid_by_cash = True
        payment_store.get_hamali_payment_for_invoice.return_value = linked_cash()

        updated = await use_case.execute(11, UpdateInvoiceRequest(hamali_rate_per_kg=3.0))

        saved = payment_store.update_hamali_payment.call_args.args[0]
        assert saved.id == 5
        assert saved.amount == updated.hamali_charge_amount == 138
        assert saved.total_bill_amount == updated.grand_total
        payment_store.delete_hamali_payment.assert_not_awaited()

    async def test_disabling_hamali_removes_linked_cash(self, use_case, invoice, payment_store):
        invoice.hamali_paid_by_cash = True
        payment_store.get_hamali_payment_for_invoice.return_value = linked_cash()

        await use_case.execute(11, UpdateInvoiceRequest(include_hamali_charge=False))

        payment_store.delete_hamali_payment.assert_awaited_once_with(5)
        payment_store.update_hamali_payment.assert_not_awaited()

    async def test_clearing_paid_by_cash_removes_linked_cash(self, use_case, invoice, payment_store):
        invoice.hamali_paid_by_cash = True
        payment_store.get_hamali_payment_for_invoice.return_value = linked_cash()

        await use_case.execute(11, UpdateInvoiceRequest(hamali_paid_by_cash=False))

        payment_store.delete_hamali_payment.assert_awaited_once_with(5)

    async def test_marking_paid_by_cash_creates_row(self, use_case, payment_store):
        await use_case.execute(11, UpdateInvoiceRequest(hamali_paid_by_cash=True))

        created = payment_store.create_hamali_payment.call_args.args[0]
        assert created.invoice_id == 11
        assert created.amount == 92

    async def test_line_edit_resyncs_amount(self, use_case, invoice, payment_store):
        invoice.hamali_paid_by_cash = True
        payment_store.get_hamali_payment_for_invoice.return_value = linked_cash()

        await use_case.update_item(1, UpdateInvoiceItemRequest(weight_breakdown=[12, 15, 9, 10]))

        assert payment_store.update_hamali_payment.call_args.args[0].amount == 112

    async def test_no_cash_row_when_not_paid_by_cash(self, use_case, payment_store):
        await use_case.execute(11, UpdateInvoiceRequest(hamali_rate_per_kg=3.0))

        payment_store.create_hamali_payment.assert_not_awaited()
        payment_store.update_hamali_payment.assert_not_awaited()
        payment_store.delete_hamali_payment.assert_not_awaited()
