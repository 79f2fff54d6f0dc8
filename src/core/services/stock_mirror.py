"""
Product stock mirror.

``Product.current_stock`` is a materialized view over the StockMovement
log. Every change goes through ``apply`` so that the log and the counter
move together; ``reconcile`` replays the log to detect (and optionally
repair) drift.
"""

from collections import defaultdict
from dataclasses import dataclass

from src.config import get_logger
from src.core.entities.inventory import MovementDirection, StockMovement
from src.core.exceptions import InsufficientStockError, UnknownReferenceError
from src.core.interfaces import IProductStore, IStockMovementStore

logger = get_logger(__name__)


def clamp_stock(current: float, quantity: float, direction: MovementDirection) -> float:
    """Apply a movement to a stock level, never going below zero."""
    if direction == MovementDirection.IN:
        return current + quantity
    return max(0.0, current - quantity)


@dataclass
class StockDrift:
    """Difference between the stored counter and a replay of the log."""

    product_id: int
    product_name: str
    recorded: float
    replayed: float
    repaired: bool = False

    @property
    def drift(self) -> float:
        return self.recorded - self.replayed


class StockMirrorService:
    """
    Keeps product stock and the movement log consistent.

    Policies:
    - advisory: an overdraft is absorbed by clamping at zero
    - strict: an overdraft raises InsufficientStockError
    """

    def __init__(
        self,
        product_store: IProductStore,
        movement_store: IStockMovementStore,
        policy: str = "advisory",
    ):
        self._products = product_store
        self._movements = movement_store
        self._policy = policy

    async def apply(self, movement: StockMovement) -> StockMovement:
        """Record a movement and update the product's stock counter."""
        product = await self._products.get(movement.product_id)
        if product is None:
            raise UnknownReferenceError("product", movement.product_id)

        current = product.current_stock
        if (
            self._policy == "strict"
            and movement.type == MovementDirection.OUT
            and movement.quantity > current
        ):
            raise InsufficientStockError(
                "product", movement.product_id, movement.quantity, current
            )

        new_stock = clamp_stock(current, movement.quantity, movement.type)
        if movement.type == MovementDirection.OUT and movement.quantity > current:
            logger.info(
                "product_stock_clamped",
                product_id=movement.product_id,
                requested=movement.quantity,
                available=current,
            )

        await self._products.set_current_stock(movement.product_id, new_stock)
        movement = await self._movements.add_movement(movement)

        logger.debug(
            "product_stock_updated",
            product_id=movement.product_id,
            direction=movement.type.value,
            quantity=movement.quantity,
            stock=new_stock,
        )
        return movement

    async def reconcile(self, repair: bool = False) -> list[StockDrift]:
        """
        Replay every product's movement log and compare with the counter.

        Products without movements replay to zero.
        """
        replayed: dict[int, float] = defaultdict(float)
        for movement in await self._movements.list_movements():
            replayed[movement.product_id] = clamp_stock(
                replayed[movement.product_id], movement.quantity, movement.type
            )

        drifts: list[StockDrift] = []
        for product in await self._products.list_products():
            expected = replayed.get(product.id, 0.0)  # type: ignore[arg-type]
            if abs(product.current_stock - expected) <= 1e-9:
                continue

            drift = StockDrift(
                product_id=product.id,  # type: ignore[arg-type]
                product_name=product.name,
                recorded=product.current_stock,
                replayed=expected,
            )
            if repair:
                await self._products.set_current_stock(drift.product_id, expected)
                drift.repaired = True
            drifts.append(drift)

        logger.info("stock_reconciled", drifted=len(drifts), repaired=repair)
        return drifts
