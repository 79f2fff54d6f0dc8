"""Tests for the product stock mirror."""

import pytest

from src.core.entities import MovementDirection, StockMovement
from src.core.exceptions import InsufficientStockError, UnknownReferenceError
from src.core.services import clamp_stock


def movement(product_id: int, direction: MovementDirection, quantity: float) -> StockMovement:
    return StockMovement(
        product_id=product_id, type=direction, quantity=quantity, reason="test"
    )


class TestClampStock:
    def test_in_adds(self):
        assert clamp_stock(10.0, 5.0, MovementDirection.IN) == 15.0

    def test_out_subtracts(self):
        assert clamp_stock(10.0, 4.0, MovementDirection.OUT) == 6.0

    def test_out_never_negative(self):
        assert clamp_stock(3.0, 10.0, MovementDirection.OUT) == 0.0


class TestApply:
    async def test_in_movement_updates_counter_and_log(self, mirror, products, movements):
        await mirror.apply(movement(1, MovementDirection.IN, 40))

        assert products.products[1].current_stock == 40
        assert len(movements.movements) == 1
        assert movements.movements[0].id == 1

    async def test_repeated_overdraft_settles_at_zero(self, mirror, products):
        await mirror.apply(movement(1, MovementDirection.IN, 10))

        for _ in range(3):
            await mirror.apply(movement(1, MovementDirection.OUT, 7))
            assert products.products[1].current_stock >= 0

        assert products.products[1].current_stock == 0

    async def test_overdraft_order_independent(self, mirror, products):
        await mirror.apply(movement(2, MovementDirection.OUT, 50))
        await mirror.apply(movement(2, MovementDirection.OUT, 1))
        assert products.products[2].current_stock == 0

    async def test_overdraft_still_logged(self, mirror, movements):
        await mirror.apply(movement(1, MovementDirection.OUT, 5))
        assert movements.movements[0].quantity == 5

    async def test_unknown_product(self, mirror):
        with pytest.raises(UnknownReferenceError):
            await mirror.apply(movement(99, MovementDirection.IN, 1))

    async def test_strict_policy_raises(self, strict_mirror, products, movements):
        products.products[1].current_stock = 5

        with pytest.raises(InsufficientStockError) as exc_info:
            await strict_mirror.apply(movement(1, MovementDirection.OUT, 6))

        assert exc_info.value.details["available"] == 5
        assert products.products[1].current_stock == 5
        assert movements.movements == []

    async def test_strict_policy_allows_exact_stock(self, strict_mirror, products):
        products.products[1].current_stock = 5
        await strict_mirror.apply(movement(1, MovementDirection.OUT, 5))
        assert products.products[1].current_stock == 0


class TestReconcile:
    async def test_consistent_counters(self, mirror):
        await mirror.apply(movement(1, MovementDirection.IN, 20))
        await mirror.apply(movement(1, MovementDirection.OUT, 5))

        assert await mirror.reconcile() == []

    async def test_detects_drift(self, mirror, products):
        await mirror.apply(movement(1, MovementDirection.IN, 20))
        products.products[1].current_stock = 17

        drifts = await mirror.reconcile()

        assert len(drifts) == 1
        assert drifts[0].product_id == 1
        assert drifts[0].replayed == 20
        assert drifts[0].drift == -3
        assert not drifts[0].repaired
        assert products.products[1].current_stock == 17

    async def test_repair_resets_counter(self, mirror, products):
        await mirror.apply(movement(1, MovementDirection.IN, 20))
        products.products[1].current_stock = 17
        products.products[2].current_stock = 4

        drifts = await mirror.reconcile(repair=True)

        assert {d.product_id for d in drifts} == {1, 2}
        assert all(d.repaired for d in drifts)
        assert products.products[1].current_stock == 20
        assert products.products[2].current_stock == 0

    async def test_replay_applies_clamp(self, mirror, products):
        await mirror.apply(movement(1, MovementDirection.OUT, 5))
        await mirror.apply(movement(1, MovementDirection.IN, 3))

        assert products.products[1].current_stock == 3
        assert await mirror.reconcile() == []
