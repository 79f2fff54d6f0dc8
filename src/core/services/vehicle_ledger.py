"""
Vehicle inventory ledger.

Per-(vehicle, product) on-hand quantity, maintained through an append-only
movement log. Loads and sales are mirrored into product stock; a sale the
vehicle cannot cover is advisory by default: it is skipped on the vehicle
and logged, while the product stock is still decremented.
"""

import math
from dataclasses import dataclass
from datetime import date

from src.config import get_logger
from src.core.entities.inventory import (
    MANUAL_UPDATE_NOTE,
    MovementDirection,
    ReferenceType,
    StockMovement,
    VehicleInventory,
    VehicleInventoryMovement,
    VehicleMovementType,
)
from src.core.exceptions import InsufficientStockError, ValidationError
from src.core.interfaces import IVehicleInventoryStore
from src.core.services.stock_mirror import StockMirrorService

logger = get_logger(__name__)


@dataclass
class VehicleDeduction:
    """Outcome of a vehicle sale. ``insufficient`` is the soft-failure sentinel."""

    vehicle_id: int
    product_id: int
    requested: float
    available: float
    insufficient: bool = False
    inventory: VehicleInventory | None = None


@dataclass
class VehicleReconstruction:
    """Cached quantity versus the quantity derived from the movement log."""

    vehicle_id: int
    product_id: int
    cached: float
    loaded: float
    sold: float

    @property
    def replayed(self) -> float:
        return self.loaded - self.sold

    @property
    def consistent(self) -> bool:
        return math.isclose(self.cached, self.replayed, abs_tol=1e-9)


class VehicleInventoryService:
    """Load, sell and adjust stock carried on vehicles."""

    def __init__(
        self,
        inventory_store: IVehicleInventoryStore,
        stock_mirror: StockMirrorService,
        policy: str = "advisory",
    ):
        self._store = inventory_store
        self._mirror = stock_mirror
        self._policy = policy

    async def current_quantity(self, vehicle_id: int, product_id: int) -> float:
        row = await self._store.get_inventory(vehicle_id, product_id)
        return row.quantity if row else 0.0

    async def load(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: float,
        movement_date: date | None = None,
        reference_id: int | None = None,
        reference_type: ReferenceType | None = None,
        notes: str | None = None,
        reason: str | None = None,
    ) -> VehicleInventory:
        """Add stock to a vehicle and mirror it into product stock."""
        if quantity <= 0:
            raise ValidationError("quantity", "must be greater than zero", quantity)
        movement_date = movement_date or date.today()

        current = await self.current_quantity(vehicle_id, product_id)
        inventory = await self._store.upsert_quantity(
            vehicle_id, product_id, current + quantity
        )
        await self._store.add_movement(
            VehicleInventoryMovement(
                vehicle_id=vehicle_id,
                product_id=product_id,
                type=VehicleMovementType.LOAD,
                quantity=quantity,
                movement_date=movement_date,
                reference_id=reference_id,
                reference_type=reference_type,
                notes=notes,
            )
        )
        await self._mirror.apply(
            StockMovement(
                product_id=product_id,
                type=MovementDirection.IN,
                quantity=quantity,
                reason=reason or notes or f"Vehicle {vehicle_id} load",
                movement_date=movement_date,
                reference_id=reference_id,
                reference_type=reference_type,
            )
        )

        logger.info(
            "vehicle_stock_loaded",
            vehicle_id=vehicle_id,
            product_id=product_id,
            quantity=quantity,
            on_hand=inventory.quantity,
        )
        return inventory

    async def deduct(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: float,
        movement_date: date | None = None,
        reference_id: int | None = None,
        reference_type: ReferenceType | None = None,
        notes: str | None = None,
        reason: str | None = None,
    ) -> VehicleDeduction:
        """
        Sell stock off a vehicle.

        Product stock is decremented whether or not the vehicle could cover
        the sale. Under the strict policy a shortfall raises instead.
        """
        if quantity <= 0:
            raise ValidationError("quantity", "must be greater than zero", quantity)
        movement_date = movement_date or date.today()

        available = await self.current_quantity(vehicle_id, product_id)
        result = VehicleDeduction(
            vehicle_id=vehicle_id,
            product_id=product_id,
            requested=quantity,
            available=available,
        )

        if available < quantity:
            if self._policy == "strict":
                raise InsufficientStockError(
                    "vehicle", product_id, quantity, available, vehicle_id=vehicle_id
                )
            logger.warning(
                "vehicle_stock_insufficient",
                vehicle_id=vehicle_id,
                product_id=product_id,
                requested=quantity,
                available=available,
                reference_type=reference_type.value if reference_type else None,
                reference_id=reference_id,
            )
            result.insufficient = True
        else:
            result.inventory = await self._store.upsert_quantity(
                vehicle_id, product_id, available - quantity
            )
            await self._store.add_movement(
                VehicleInventoryMovement(
                    vehicle_id=vehicle_id,
                    product_id=product_id,
                    type=VehicleMovementType.SALE,
                    quantity=quantity,
                    movement_date=movement_date,
                    reference_id=reference_id,
                    reference_type=reference_type,
                    notes=notes,
                )
            )

        await self._mirror.apply(
            StockMovement(
                product_id=product_id,
                type=MovementDirection.OUT,
                quantity=quantity,
                reason=reason or notes or f"Vehicle {vehicle_id} sale",
                movement_date=movement_date,
                reference_id=reference_id,
                reference_type=reference_type,
            )
        )
        return result

    async def adjust(
        self, vehicle_id: int, product_id: int, new_quantity: float
    ) -> VehicleInventory:
        """
        Set a vehicle's on-hand quantity.

        The difference is logged as a load or sale annotated as a manual
        update and mirrored into product stock like any other movement.
        """
        if new_quantity < 0:
            raise ValidationError("quantity", "must be zero or greater", new_quantity)

        current = await self.current_quantity(vehicle_id, product_id)
        diff = new_quantity - current

        if diff > 0:
            inventory = await self.load(
                vehicle_id,
                product_id,
                diff,
                reference_type=ReferenceType.MANUAL,
                notes=MANUAL_UPDATE_NOTE,
            )
        elif diff < 0:
            result = await self.deduct(
                vehicle_id,
                product_id,
                -diff,
                reference_type=ReferenceType.MANUAL,
                notes=MANUAL_UPDATE_NOTE,
            )
            inventory = result.inventory  # type: ignore[assignment]
        else:
            inventory = await self._store.upsert_quantity(vehicle_id, product_id, current)

        logger.info(
            "vehicle_stock_adjusted",
            vehicle_id=vehicle_id,
            product_id=product_id,
            previous=current,
            quantity=new_quantity,
        )
        return inventory

    async def reconstruct(self, vehicle_id: int, product_id: int) -> VehicleReconstruction:
        """Rebuild a pair's quantity from its movement log."""
        movements = await self._store.list_movements(
            vehicle_id=vehicle_id, product_id=product_id
        )
        loaded = math.fsum(
            m.quantity for m in movements if m.type == VehicleMovementType.LOAD
        )
        sold = math.fsum(
            m.quantity for m in movements if m.type == VehicleMovementType.SALE
        )
        return VehicleReconstruction(
            vehicle_id=vehicle_id,
            product_id=product_id,
            cached=await self.current_quantity(vehicle_id, product_id),
            loaded=loaded,
            sold=sold,
        )
