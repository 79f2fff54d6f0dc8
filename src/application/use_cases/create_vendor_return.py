"""Create Vendor Return Use Case."""

from datetime import date

from src.application.dto.requests import CreateVendorReturnRequest
from src.application.dto.responses import VendorReturnResponse
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
from src.core.entities.vendor_return import VendorReturn, VendorReturnItem
from src.core.exceptions import UnknownReferenceError
from src.core.interfaces import (
    IProductStore,
    IPurchaseStore,
    IVehicleStore,
    IVendorReturnStore,
    IVendorStore,
)
from src.core.services import LineEngine, StockMirrorService, VehicleInventoryService

logger = get_logger(__name__)


class CreateVendorReturnUseCase:
    """
    Send goods back to a vendor.

    Reduces the vendor balance by the return total and takes the stock out,
    off the vehicle too when one is given (advisory, like a sale).
    """

    def __init__(
        self,
        return_store: IVendorReturnStore | None = None,
        vendor_store: IVendorStore | None = None,
        purchase_store: IPurchaseStore | None = None,
        vehicle_store: IVehicleStore | None = None,
        product_store: IProductStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        vehicle_inventory: VehicleInventoryService | None = None,
        line_engine: LineEngine | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._return_store = return_store
        self._vendor_store = vendor_store
        self._purchase_store = purchase_store
        self._vehicle_store = vehicle_store
        self._product_store = product_store
        self._stock_mirror = stock_mirror
        self._vehicle_inventory = vehicle_inventory
        self._engine = line_engine or get_line_engine()
        self._transaction = transaction

    async def _get_return_store(self) -> IVendorReturnStore:
        if self._return_store is None:
            from src.infrastructure.storage.sqlite import get_return_store

            self._return_store = await get_return_store()
        return self._return_store

    async def _get_vendor_store(self) -> IVendorStore:
        if self._vendor_store is None:
            from src.infrastructure.storage.sqlite import get_vendor_store

            self._vendor_store = await get_vendor_store()
        return self._vendor_store

    async def _get_purchase_store(self) -> IPurchaseStore:
        if self._purchase_store is None:
            from src.infrastructure.storage.sqlite import get_purchase_store

            self._purchase_store = await get_purchase_store()
        return self._purchase_store

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

    async def execute(self, request: CreateVendorReturnRequest) -> VendorReturn:
        """Execute create vendor return use case."""
        logger.info(
            "create_vendor_return_started",
            vendor_id=request.vendor_id,
            items=len(request.items),
        )

        vendor_return = VendorReturn(
            vendor_id=request.vendor_id,
            purchase_id=request.purchase_id,
            vehicle_id=request.vehicle_id,
            return_date=request.return_date or date.today(),
            notes=request.notes,
            items=[
                VendorReturnItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    reason=item.reason,
                )
                for item in request.items
            ],
        )
        self._engine.price_return(vendor_return)

        async with self._get_transaction()():
            await require_reference(
                await self._get_vendor_store(), "vendor", vendor_return.vendor_id
            )
            await require_reference(
                await self._get_vehicle_store(), "vehicle", vendor_return.vehicle_id
            )
            if vendor_return.purchase_id is not None:
                purchases = await self._get_purchase_store()
                if await purchases.get_purchase(vendor_return.purchase_id) is None:
                    raise UnknownReferenceError("purchase", vendor_return.purchase_id)
            await require_products(
                await self._get_product_store(), [i.product_id for i in vendor_return.items]
            )

            store = await self._get_return_store()
            vendor_return = await store.create_return(vendor_return)

            for item in vendor_return.items:
                reason = f"Vendor return: {item.reason}"
                if vendor_return.vehicle_id is not None:
                    vehicles = await self._get_vehicle_inventory()
                    await vehicles.deduct(
                        vendor_return.vehicle_id,
                        item.product_id,
                        item.quantity,
                        movement_date=vendor_return.return_date,
                        reference_id=vendor_return.id,
                        reference_type=ReferenceType.VENDOR_RETURN,
                        reason=reason,
                    )
                else:
                    mirror = await self._get_stock_mirror()
                    await mirror.apply(
                        StockMovement(
                            product_id=item.product_id,
                            type=MovementDirection.OUT,
                            quantity=item.quantity,
                            reason=reason,
                            movement_date=vendor_return.return_date,
                            reference_id=vendor_return.id,
                            reference_type=ReferenceType.VENDOR_RETURN,
                        )
                    )

        logger.info(
            "create_vendor_return_complete",
            return_id=vendor_return.id,
            total_amount=vendor_return.total_amount,
        )
        return vendor_return

    def to_response(self, vendor_return: VendorReturn) -> VendorReturnResponse:
        """Convert result to API response."""
        return VendorReturnResponse.model_validate(vendor_return)
