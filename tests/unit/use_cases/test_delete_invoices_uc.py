"""Tests for DeleteInvoicesUseCase."""

from contextlib import nullcontext
from datetime import date
from unittest.mock import AsyncMock

import pytest

from src.application.use_cases.delete_invoices import DeleteInvoicesUseCase
from src.core.entities import (
    Invoice,
    InvoiceItem,
    MovementDirection,
    ReferenceType,
    StockMovement,
)
from src.core.exceptions import EntityNotFoundError


def sale(invoice_id: int, product_id: int, quantity: float, direction=MovementDirection.OUT):
    return StockMovement(
        product_id=product_id,
        type=direction,
        quantity=quantity,
        reason=f"Invoice {invoice_id}",
        reference_id=invoice_id,
        reference_type=ReferenceType.INVOICE,
    )


@pytest.fixture
def invoices():
    return {
        11: Invoice(
            id=11,
            invoice_number="INV-11",
            customer_id=1,
            invoice_date=date(2024, 3, 10),
            items=[
                InvoiceItem(id=1, product_id=1, quantity=20, unit_price=25.0),
                InvoiceItem(id=2, product_id=2, quantity=5, unit_price=16.0),
            ],
        ),
        12: Invoice(
            id=12,
            invoice_number="INV-12",
            customer_id=2,
            invoice_date=date(2024, 3, 11),
            items=[InvoiceItem(id=3, product_id=1, quantity=8, unit_price=25.0)],
        ),
    }


@pytest.fixture
def invoice_store(invoices):
    store = AsyncMock()
    store.get_invoice.side_effect = lambda invoice_id: invoices.get(invoice_id)
    store.delete_invoices.side_effect = lambda ids: len(ids)
    store.product_day_totals.return_value = (0.0, 0.0)
    return store


@pytest.fixture
def payment_store():
    return AsyncMock()


@pytest.fixture
def use_case(invoice_store, payment_store, products, movements, mirror):
    return DeleteInvoicesUseCase(
        invoice_store=invoice_store,
        product_store=products,
        payment_store=payment_store,
        movement_store=movements,
        stock_mirror=mirror,
        transaction=nullcontext,
    )


class TestDeleteInvoicesUseCase:
    async def test_restores_sold_stock(self, use_case, products, movements):
        movements.movements = [sale(11, 1, 20), sale(11, 2, 5), sale(12, 1, 8)]

        result = await use_case.execute([11, 12])

        assert result.deleted == [11, 12]
        assert products.products[1].current_stock == 28
        assert products.products[2].current_stock == 5
        restored = result.restored_movements
        assert len(restored) == 3
        assert all(m.type == MovementDirection.IN for m in restored)
        assert restored[0].reason == "Invoice INV-11 deleted"

    async def test_restores_net_of_edits(self, use_case, products, movements):
        movements.movements = [
            sale(11, 1, 20),
            sale(11, 1, 6, MovementDirection.IN),
            sale(11, 2, 5),
            sale(11, 2, 2),
        ]

        await use_case.execute([11])

        assert products.products[1].current_stock == 14
        assert products.products[2].current_stock == 7

    async def test_unrelated_movements_ignored(self, use_case, products, movements):
        movements.movements = [
            StockMovement(product_id=1, type=MovementDirection.OUT, quantity=9, reason="Spoilage")
        ]

        result = await use_case.execute([11])

        assert result.restored_movements == []
        assert products.products[1].current_stock == 0

    async def test_detaches_payments_then_deletes(self, use_case, invoice_store, payment_store):
        await use_case.execute([12, 11, 12])

        payment_store.detach_invoices.assert_awaited_once_with([12, 11])
        invoice_store.delete_invoices.assert_awaited_once_with([12, 11])

    async def test_missing_ids_skipped(self, use_case, invoice_store):
        result = await use_case.execute([11, 99])

        assert result.deleted == [11]
        response = use_case.to_response(result)
        assert response.deleted == 1
        assert response.invoice_ids == [11]

    async def test_nothing_found(self, use_case, invoice_store):
        with pytest.raises(EntityNotFoundError):
            await use_case.execute([98, 99])
        invoice_store.delete_invoices.assert_not_awaited()
