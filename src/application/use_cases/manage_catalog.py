"""
Catalog use cases.

Products and vehicles need more than a plain store call: any stock a
product is created or edited with is booked through the stock mirror, and
vehicles must point at a known vendor.
"""

from datetime import date

from src.application.dto.requests import (
    ProductCreateRequest,
    ProductUpdateRequest,
    StockMovementRequest,
    VehicleCreateRequest,
    VehicleUpdateRequest,
)
from src.application.services import (
    TransactionFactory,
    get_stock_mirror_service,
    get_transaction_factory,
)
from src.application.use_cases.references import require_reference
from src.config import get_logger, get_settings
from src.core.entities.inventory import (
    MANUAL_UPDATE_NOTE,
    MovementDirection,
    ReferenceType,
    StockMovement,
)
from src.core.entities.product import Product
from src.core.entities.vehicle import Vehicle
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces import IProductStore, IVehicleStore, IVendorStore
from src.core.services import StockMirrorService

logger = get_logger(__name__)

OPENING_STOCK_NOTE = "Opening stock"

_REQUIRED_VEHICLE_FIELDS = ("number", "type", "shop", "total_weight_gain", "total_weight_loss")


class ManageCatalogUseCase:
    """Product and vehicle writes that touch stock or references."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        vehicle_store: IVehicleStore | None = None,
        vendor_store: IVendorStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._product_store = product_store
        self._vehicle_store = vehicle_store
        self._vendor_store = vendor_store
        self._stock_mirror = stock_mirror
        self._transaction = transaction

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_vehicle_store(self) -> IVehicleStore:
        if self._vehicle_store is None:
            from src.infrastructure.storage.sqlite import get_vehicle_store

            self._vehicle_store = await get_vehicle_store()
        return self._vehicle_store

    async def _get_vendor_store(self) -> IVendorStore:
        if self._vendor_store is None:
            from src.infrastructure.storage.sqlite import get_vendor_store

            self._vendor_store = await get_vendor_store()
        return self._vendor_store

    async def _get_stock_mirror(self) -> StockMirrorService:
        if self._stock_mirror is None:
            self._stock_mirror = await get_stock_mirror_service()
        return self._stock_mirror

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    # --- Products ---

    async def create_product(self, request: ProductCreateRequest) -> Product:
        """Create a product; opening stock is booked as an ``in`` movement."""
        opening = request.current_stock
        product = Product(**request.model_dump(exclude={"current_stock"}))

        async with self._get_transaction()():
            product = await (await self._get_product_store()).create(product)
            if opening > 0:
                mirror = await self._get_stock_mirror()
                await mirror.apply(
                    StockMovement(
                        product_id=product.id,  # type: ignore[arg-type]
                        type=MovementDirection.IN,
                        quantity=opening,
                        reason=OPENING_STOCK_NOTE,
                        reference_type=ReferenceType.MANUAL,
                    )
                )
                product.current_stock = opening
        return product

    async def update_product(self, product_id: int, request: ProductUpdateRequest) -> Product:
        """Partial update; a changed ``current_stock`` becomes a manual movement."""
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        target_stock = changes.pop("current_stock", None)
        store = await self._get_product_store()

        async with self._get_transaction()():
            product = await store.get(product_id)
            if product is None:
                raise EntityNotFoundError("product", product_id)
            product = product.model_copy(update=changes)
            product = await store.update(product)

            if target_stock is not None:
                diff = target_stock - product.current_stock
                if abs(diff) > 1e-9:
                    mirror = await self._get_stock_mirror()
                    await mirror.apply(
                        StockMovement(
                            product_id=product_id,
                            type=MovementDirection.IN if diff > 0 else MovementDirection.OUT,
                            quantity=abs(diff),
                            reason=MANUAL_UPDATE_NOTE,
                            reference_type=ReferenceType.MANUAL,
                        )
                    )
                    product.current_stock = target_stock

        logger.info("product_updated", product_id=product_id, fields=sorted(request.model_fields_set))
        return product

    async def record_movement(self, request: StockMovementRequest) -> StockMovement:
        """Manual stock entry, applied through the mirror like any other movement."""
        async with self._get_transaction()():
            await require_reference(await self._get_product_store(), "product", request.product_id)
            mirror = await self._get_stock_mirror()
            return await mirror.apply(
                StockMovement(
                    product_id=request.product_id,
                    type=MovementDirection(request.type),
                    quantity=request.quantity,
                    reason=request.reason,
                    movement_date=request.movement_date or date.today(),
                    reference_type=ReferenceType.MANUAL,
                )
            )

    # --- Vehicles ---

    async def create_vehicle(self, request: VehicleCreateRequest) -> Vehicle:
        data = request.model_dump()
        if data["shop"] is None:
            data["shop"] = get_settings().ledger.default_shop
        vehicle = Vehicle(**data)

        async with self._get_transaction()():
            await require_reference(await self._get_vendor_store(), "vendor", vehicle.vendor_id)
            return await (await self._get_vehicle_store()).create(vehicle)

    async def update_vehicle(self, vehicle_id: int, request: VehicleUpdateRequest) -> Vehicle:
        changes = request.model_dump(exclude_unset=True)
        store = await self._get_vehicle_store()

        async with self._get_transaction()():
            vehicle = await store.get(vehicle_id)
            if vehicle is None:
                raise EntityNotFoundError("vehicle", vehicle_id)
            for name in _REQUIRED_VEHICLE_FIELDS:
                if name in changes and changes[name] is None:
                    del changes[name]
            vehicle = vehicle.model_copy(update=changes)
            await require_reference(await self._get_vendor_store(), "vendor", vehicle.vendor_id)
            return await store.update(vehicle)
