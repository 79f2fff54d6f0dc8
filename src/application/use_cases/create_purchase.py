"""Create Purchase Use Case: price lines, book stock in, all in one transaction."""

from datetime import date

from src.application.dto.requests import CreatePurchaseRequest
from src.application.dto.responses import PurchaseResponse
from src.application.services import (
    TransactionFactory,
    get_line_engine,
    get_stock_mirror_service,
    get_transaction_factory,
    get_vehicle_inventory_service,
)
from src.application.use_cases.references import require_products, require_reference
from src.config import get_logger
from src.core.entities.inventory import MovementDirection, ReferenceType, StockMovement
from src.core.entities.purchase import Purchase, PurchaseItem
from src.core.interfaces import IProductStore, IPurchaseStore, IVehicleStore, IVendorStore
from src.core.services import LineEngine, StockMirrorService, VehicleInventoryService

logger = get_logger(__name__)


class CreatePurchaseUseCase:
    """
    Record goods bought from a vendor.

    Without a vehicle each line is a product ``in`` movement. With a vehicle
    each line is loaded onto it, which also books the product movement.
    """

    def __init__(
        self,
        purchase_store: IPurchaseStore | None = None,
        vendor_store: IVendorStore | None = None,
        vehicle_store: IVehicleStore | None = None,
        product_store: IProductStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        vehicle_inventory: VehicleInventoryService | None = None,
        line_engine: LineEngine | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._purchase_store = purchase_store
        self._vendor_store = vendor_store
        self._vehicle_store = vehicle_store
        self._product_store = product_store
        self._stock_mirror = stock_mirror
        self._vehicle_inventory = vehicle_inventory
        self._engine = line_engine or get_line_engine()
        self._transaction = transaction

    async def _get_purchase_store(self) -> IPurchaseStore:
        if self._purchase_store is None:
            from src.infrastructure.storage.sqlite import get_purchase_store

            self._purchase_store = await get_purchase_store()
        return self._purchase_store

    async def _get_vendor_store(self) -> IVendorStore:
        if self._vendor_store is None:
            from src.infrastructure.storage.sqlite import get_vendor_store

            self._vendor_store = await get_vendor_store()
        return self._vendor_store

    async def _get_vehicle_store(self) -> IVehicleStore:
        if self._vehicle_store is None:
            from src.infrastructure.storage.sqlite import get_vehicle_store

            self._vehicle_store = await get_vehicle_store()
        return self._vehicle_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_stock_mirror(self) -> StockMirrorService:
        if self._stock_mirror is None:
            self._stock_mirror = await get_stock_mirror_service()
        return self._stock_mirror

    async def _get_vehicle_inventory(self) -> VehicleInventoryService:
        if self._vehicle_inventory is None:
            self._vehicle_inventory = await get_vehicle_inventory_service(
                await self._get_stock_mirror()
            )
        return self._vehicle_inventory

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def execute(self, request: CreatePurchaseRequest) -> Purchase:
        """Execute create purchase use case."""
        logger.info(
            "create_purchase_started",
            vendor_id=request.vendor_id,
            vehicle_id=request.vehicle_id,
            items=len(request.items),
        )

        purchase = Purchase(
            vendor_id=request.vendor_id,
            vehicle_id=request.vehicle_id,
            purchase_date=request.purchase_date or date.today(),
            status=request.status,
            items=[
                PurchaseItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in request.items
            ],
        )
        self._engine.price_purchase(purchase)

        async with self._get_transaction()():
            await require_reference(await self._get_vendor_store(), "vendor", purchase.vendor_id)
            await require_reference(
                await self._get_vehicle_store(), "vehicle", purchase.vehicle_id
            )
            await require_products(
                await self._get_product_store(), [i.product_id for i in purchase.items]
            )

            store = await self._get_purchase_store()
            purchase = await store.create_purchase(purchase)
            reason = f"Purchase #{purchase.id}"

            for item in purchase.items:
                if purchase.vehicle_id is not None:
                    vehicles = await self._get_vehicle_inventory()
                    await vehicles.load(
                        purchase.vehicle_id,
                        item.product_id,
                        item.quantity,
                        movement_date=purchase.purchase_date,
                        reference_id=purchase.id,
                        reference_type=ReferenceType.PURCHASE,
                        reason=reason,
                    )
                else:
                    mirror = await self._get_stock_mirror()
                    await mirror.apply(
                        StockMovement(
                            product_id=item.product_id,
                            type=MovementDirection.IN,
                            quantity=item.quantity,
                            reason=reason,
                            movement_date=purchase.purchase_date,
                            reference_id=purchase.id,
                            reference_type=ReferenceType.PURCHASE,
                        )
                    )

        logger.info(
            "create_purchase_complete",
            purchase_id=purchase.id,
            total_amount=purchase.total_amount,
        )
        return purchase

    def to_response(self, purchase: Purchase) -> PurchaseResponse:
        """Convert result to API response."""
        return PurchaseResponse.model_validate(purchase)
