"""Tests for API routes with use cases and stores swapped out."""

from datetime import date
from unittest.mock import AsyncMock

from src.api.dependencies import (
    get_admin,
    get_balances_use_case,
    get_create_invoice_use_case,
    get_delete_invoices_use_case,
    get_invoices,
)
from src.api.main import app
from src.application.use_cases.create_invoice import CreateInvoiceResult, CreateInvoiceUseCase
from src.application.use_cases.delete_invoices import DeleteInvoicesResult, DeleteInvoicesUseCase
from src.application.use_cases.get_balances import GetBalancesUseCase
from src.core.entities import Invoice, InvoiceItem
from src.core.exceptions import (
    DuplicateInvoiceNumberError,
    EntityInUseError,
    EntityNotFoundError,
    InsufficientStockError,
    UnknownReferenceError,
)
from src.core.services import VehicleDeduction, VendorBalance


def _invoice(**kwargs) -> Invoice:
    defaults = dict(
        id=11,
        invoice_number="INV-2024-0001",
        customer_id=1,
        invoice_date=date(2024, 3, 10),
        subtotal=1020,
        total_kg_weight=46,
        hamali_charge_amount=92,
        include_hamali_charge=True,
        grand_total=1112,
        items=[
            InvoiceItem(
                id=1,
                invoice_id=11,
                product_id=1,
                quantity=36,
                unit_price=20,
                total=720,
                weight_breakdown=[12, 15, 9],
            ),
            InvoiceItem(id=2, invoice_id=11, product_id=2, quantity=10, unit_price=30, total=300),
        ],
    )
    defaults.update(kwargs)
    return Invoice(**defaults)


def _create_use_case(**execute_kwargs) -> CreateInvoiceUseCase:
    use_case = CreateInvoiceUseCase()
    use_case.execute = AsyncMock(**execute_kwargs)  # type: ignore[method-assign]
    return use_case


class TestHealth:
    async def test_health(self, async_client):
        response = await async_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_root_health(self, async_client):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert "version" in response.json()

    async def test_request_id_header(self, async_client):
        response = await async_client.get("/api/health")
        assert "X-Request-ID" in response.headers


class TestInvoiceRoutes:
    async def test_create_invoice(self, async_client, sample_invoice_payload):
        result = CreateInvoiceResult(
            invoice=_invoice(vehicle_id=7),
            vehicle_shortfalls=[
                VehicleDeduction(
                    vehicle_id=7, product_id=2, requested=10, available=4, insufficient=True
                )
            ],
        )
        use_case = _create_use_case(return_value=result)
        app.dependency_overrides[get_create_invoice_use_case] = lambda: use_case

        response = await async_client.post("/api/invoices", json=sample_invoice_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["invoice"]["grand_total"] == 1112
        assert body["invoice"]["items"][0]["weight_breakdown"] == [12, 15, 9]
        assert body["vehicle_shortfalls"] == [
            {"vehicle_id": 7, "product_id": 2, "requested": 10, "available": 4}
        ]
        assert body["hamali_cash_payment_id"] is None
        request = use_case.execute.call_args.args[0]
        assert request.items[0].weight_breakdown == [12, 15, 9]

    async def test_duplicate_number_is_conflict(self, async_client, sample_invoice_payload):
        app.dependency_overrides[get_create_invoice_use_case] = lambda: _create_use_case(
            side_effect=DuplicateInvoiceNumberError("INV-2024-0001", existing_id=3)
        )

        response = await async_client.post("/api/invoices", json=sample_invoice_payload)

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_INVOICE_NUMBER"
        assert response.json()["hint"]

    async def test_unknown_product_is_bad_request(self, async_client, sample_invoice_payload):
        app.dependency_overrides[get_create_invoice_use_case] = lambda: _create_use_case(
            side_effect=UnknownReferenceError("product", 9)
        )

        response = await async_client.post("/api/invoices", json=sample_invoice_payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_REFERENCE"

    async def test_strict_shortfall_is_conflict(self, async_client, sample_invoice_payload):
        app.dependency_overrides[get_create_invoice_use_case] = lambda: _create_use_case(
            side_effect=InsufficientStockError("vehicle", 2, 10, 4, vehicle_id=7)
        )

        response = await async_client.post("/api/invoices", json=sample_invoice_payload)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INSUFFICIENT_STOCK"

    async def test_missing_unit_price_is_unprocessable(self, async_client, sample_invoice_payload):
        del sample_invoice_payload["items"][1]["unit_price"]

        response = await async_client.post("/api/invoices", json=sample_invoice_payload)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_list_passes_filters(self, async_client):
        store = AsyncMock()
        store.list_invoices.return_value = ([_invoice()], 5)
        app.dependency_overrides[get_invoices] = lambda: store

        response = await async_client.get(
            "/api/invoices", params={"shop": 12, "limit": 1, "start_date": "2024-03-01"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 5
        assert len(body["invoices"]) == 1
        filters = store.list_invoices.call_args.args[0]
        assert filters.shop == 12
        assert filters.start_date == date(2024, 3, 1)

    async def test_get_missing_invoice(self, async_client):
        store = AsyncMock()
        store.get_invoice.return_value = None
        app.dependency_overrides[get_invoices] = lambda: store

        response = await async_client.get("/api/invoices/404")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_bulk_delete(self, async_client):
        use_case = DeleteInvoicesUseCase()
        use_case.execute = AsyncMock(  # type: ignore[method-assign]
            return_value=DeleteInvoicesResult(deleted=[11, 12])
        )
        app.dependency_overrides[get_delete_invoices_use_case] = lambda: use_case

        response = await async_client.post(
            "/api/invoices/bulk-delete", json={"invoice_ids": [11, 12]}
        )

        assert response.status_code == 200
        assert response.json()["deleted"] == 2
        use_case.execute.assert_awaited_once_with([11, 12])

    async def test_bulk_delete_missing(self, async_client):
        use_case = DeleteInvoicesUseCase()
        use_case.execute = AsyncMock(  # type: ignore[method-assign]
            side_effect=EntityNotFoundError("invoice", 99)
        )
        app.dependency_overrides[get_delete_invoices_use_case] = lambda: use_case

        response = await async_client.post("/api/invoices/bulk-delete", json={"invoice_ids": [99]})

        assert response.status_code == 404
        assert response.json()["error_code"] == "INVOICE_NOT_FOUND"


class TestReportRoutes:
    async def test_vendor_balance(self, async_client):
        use_case = GetBalancesUseCase()
        use_case.vendor_balance = AsyncMock(  # type: ignore[method-assign]
            return_value=VendorBalance(
                vendor_id=1,
                vendor_name="Ramesh Farms",
                total_purchases=1000,
                total_payments=300,
                total_returns=100,
            )
        )
        app.dependency_overrides[get_balances_use_case] = lambda: use_case

        response = await async_client.get("/api/reports/vendor-balances/1")

        assert response.status_code == 200
        assert response.json()["balance"] == 600

    async def test_period_balance_requires_dates(self, async_client):
        response = await async_client.get("/api/reports/period-balance")
        assert response.status_code == 422


class TestAdminRoutes:
    async def test_clear_requires_confirmation(self, async_client):
        store = AsyncMock()
        app.dependency_overrides[get_admin] = lambda: store

        response = await async_client.post(
            "/api/admin/clear-table", json={"table": "invoices", "confirm": False}
        )

        assert response.status_code == 400
        store.clear_table.assert_not_awaited()

    async def test_clear_in_use_is_conflict(self, async_client):
        store = AsyncMock()
        store.clear_table.side_effect = EntityInUseError("table", "vendors")
        app.dependency_overrides[get_admin] = lambda: store

        response = await async_client.post(
            "/api/admin/clear-table", json={"table": "vendors", "confirm": True}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "ENTITY_IN_USE"
