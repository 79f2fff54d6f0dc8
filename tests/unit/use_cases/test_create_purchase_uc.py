"""Tests for CreatePurchaseUseCase and CreateVendorReturnUseCase."""

from contextlib import nullcontext
from unittest.mock import AsyncMock

import pytest

from src.application.dto.requests import CreatePurchaseRequest, CreateVendorReturnRequest
from src.application.use_cases.create_purchase import CreatePurchaseUseCase
from src.application.use_cases.create_vendor_return import CreateVendorReturnUseCase
from src.core.entities import (
    MovementDirection,
    Purchase,
    ReferenceType,
    Vehicle,
    Vendor,
    VendorReturn,
    VehicleMovementType,
)
from src.core.exceptions import UnknownReferenceError, ValidationError


@pytest.fixture
def vendor_store():
    store = AsyncMock()
    store.get.return_value = Vendor(id=1, name="Ramesh Farms", phone="9000000001")
    return store


@pytest.fixture
def vehicle_registry():
    store = AsyncMock()
    store.get.return_value = Vehicle(id=7, number="MH12AB1234")
    return store


@pytest.fixture
def purchase_store():
    store = AsyncMock()

    async def create_purchase(purchase: Purchase) -> Purchase:
        purchase.id = 21
        return purchase

    store.create_purchase.side_effect = create_purchase
    return store


@pytest.fixture
def return_store():
    store = AsyncMock()

    async def create_return(vendor_return: VendorReturn) -> VendorReturn:
        vendor_return.id = 31
        return vendor_return

    store.create_return.side_effect = create_return
    return store


@pytest.fixture
def purchase_use_case(purchase_store, vendor_store, vehicle_registry, products, mirror, vehicles):
    return CreatePurchaseUseCase(
        purchase_store=purchase_store,
        vendor_store=vendor_store,
        vehicle_store=vehicle_registry,
        product_store=products,
        stock_mirror=mirror,
        vehicle_inventory=vehicles,
        transaction=nullcontext,
    )


@pytest.fixture
def return_use_case(
    return_store, vendor_store, purchase_store, vehicle_registry, products, mirror, vehicles
):
    return CreateVendorReturnUseCase(
        return_store=return_store,
        vendor_store=vendor_store,
        purchase_store=purchase_store,
        vehicle_store=vehicle_registry,
        product_store=products,
        stock_mirror=mirror,
        vehicle_inventory=vehicles,
        transaction=nullcontext,
    )


class TestCreatePurchaseUseCase:
    async def test_prices_and_books_stock_in(self, purchase_use_case, products, movements):
        request = CreatePurchaseRequest(
            vendor_id=1,
            items=[
                {"product_id": 1, "quantity": 50, "unit_price": 18.0},
                {"product_id": 2, "quantity": 10, "unit_price": 10.0},
            ],
        )

        purchase = await purchase_use_case.execute(request)

        assert purchase.id == 21
        assert purchase.total_amount == 1000
        assert products.products[1].current_stock == 50
        assert products.products[2].current_stock == 10
        assert [m.type for m in movements.movements] == [MovementDirection.IN] * 2
        assert movements.movements[0].reference_type == ReferenceType.PURCHASE
        assert movements.movements[0].reason == "Purchase #21"

    async def test_vehicle_purchase_loads_vehicle(
        self, purchase_use_case, products, vehicle_store
    ):
        request = CreatePurchaseRequest(
            vendor_id=1,
            vehicle_id=7,
            items=[{"product_id": 1, "quantity": 50, "unit_price": 18.0}],
        )

        await purchase_use_case.execute(request)

        assert (await vehicle_store.get_inventory(7, 1)).quantity == 50
        assert vehicle_store.movements[0].type == VehicleMovementType.LOAD
        assert products.products[1].current_stock == 50

    async def test_unknown_vendor(self, purchase_use_case, vendor_store, purchase_store):
        vendor_store.get.return_value = None
        request = CreatePurchaseRequest(
            vendor_id=5, items=[{"product_id": 1, "quantity": 1, "unit_price": 1.0}]
        )

        with pytest.raises(UnknownReferenceError):
            await purchase_use_case.execute(request)
        purchase_store.create_purchase.assert_not_awaited()

    async def test_unknown_vehicle(self, purchase_use_case, vehicle_registry):
        vehicle_registry.get.return_value = None
        request = CreatePurchaseRequest(
            vendor_id=1, vehicle_id=8, items=[{"product_id": 1, "quantity": 1, "unit_price": 1.0}]
        )

        with pytest.raises(UnknownReferenceError) as exc_info:
            await purchase_use_case.execute(request)
        assert exc_info.value.details["entity"] == "vehicle"


class TestCreateVendorReturnUseCase:
    async def test_books_stock_out(self, return_use_case, products, movements):
        products.products[1].current_stock = 30
        request = CreateVendorReturnRequest(
            vendor_id=1,
            items=[{"product_id": 1, "quantity": 5, "unit_price": 20.0, "reason": "Rotten"}],
        )

        vendor_return = await return_use_case.execute(request)

        assert vendor_return.total_amount == 100
        assert products.products[1].current_stock == 25
        assert movements.movements[0].reason == "Vendor return: Rotten"
        assert movements.movements[0].reference_type == ReferenceType.VENDOR_RETURN

    async def test_vehicle_shortfall_is_advisory(self, return_use_case, products, vehicle_store):
        products.products[1].current_stock = 30
        request = CreateVendorReturnRequest(
            vendor_id=1,
            vehicle_id=7,
            items=[{"product_id": 1, "quantity": 5, "unit_price": 20.0, "reason": "Damaged"}],
        )

        await return_use_case.execute(request)

        assert await vehicle_store.get_inventory(7, 1) is None
        assert products.products[1].current_stock == 25

    async def test_unknown_purchase(self, return_use_case, purchase_store):
        purchase_store.get_purchase.return_value = None
        request = CreateVendorReturnRequest(
            vendor_id=1,
            purchase_id=404,
            items=[{"product_id": 1, "quantity": 5, "unit_price": 20.0, "reason": "Damaged"}],
        )

        with pytest.raises(UnknownReferenceError):
            await return_use_case.execute(request)

    async def test_blank_reason_rejected(self, return_use_case, return_store):
        request = CreateVendorReturnRequest(
            vendor_id=1,
            items=[{"product_id": 1, "quantity": 5, "unit_price": 20.0, "reason": "   "}],
        )

        with pytest.raises(ValidationError):
            await return_use_case.execute(request)
        return_store.create_return.assert_not_awaited()
