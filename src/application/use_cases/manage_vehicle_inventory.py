"""Vehicle inventory use cases: load, adjust and audit stock on vehicles."""

from src.application.dto.requests import VehicleAdjustRequest, VehicleLoadRequest
from src.application.dto.responses import VehicleInventoryResponse
from src.application.services import (
    TransactionFactory,
    get_stock_mirror_service,
    get_transaction_factory,
    get_vehicle_inventory_service,
)
from src.application.use_cases.references import require_reference
from src.config import get_logger
from src.core.entities.inventory import ReferenceType, VehicleInventory
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces import IProductStore, IVehicleInventoryStore, IVehicleStore
from src.core.services import VehicleInventoryService, VehicleReconstruction

logger = get_logger(__name__)


class ManageVehicleInventoryUseCase:
    """Direct vehicle stock operations outside of purchases and invoices."""

    def __init__(
        self,
        vehicle_store: IVehicleStore | None = None,
        product_store: IProductStore | None = None,
        inventory_store: IVehicleInventoryStore | None = None,
        vehicle_inventory: VehicleInventoryService | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._vehicle_store = vehicle_store
        self._product_store = product_store
        self._inventory_store = inventory_store
        self._vehicle_inventory = vehicle_inventory
        self._transaction = transaction

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

    async def _get_inventory_store(self) -> IVehicleInventoryStore:
        if self._inventory_store is None:
            from src.infrastructure.storage.sqlite import get_vehicle_inventory_store

            self._inventory_store = await get_vehicle_inventory_store()
        return self._inventory_store

    async def _get_vehicle_inventory(self) -> VehicleInventoryService:
        if self._vehicle_inventory is None:
            self._vehicle_inventory = await get_vehicle_inventory_service(
                await get_stock_mirror_service()
            )
        return self._vehicle_inventory

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def _require_vehicle(self, vehicle_id: int) -> None:
        if await (await self._get_vehicle_store()).get(vehicle_id) is None:
            raise EntityNotFoundError("vehicle", vehicle_id)

    async def load(self, vehicle_id: int, request: VehicleLoadRequest) -> VehicleInventory:
        """Put stock on a vehicle; product stock rises by the same amount."""
        async with self._get_transaction()():
            await self._require_vehicle(vehicle_id)
            await require_reference(await self._get_product_store(), "product", request.product_id)
            service = await self._get_vehicle_inventory()
            return await service.load(
                vehicle_id,
                request.product_id,
                request.quantity,
                movement_date=request.movement_date,
                reference_type=ReferenceType.MANUAL,
                notes=request.notes,
                reason=request.notes or f"Loaded onto vehicle {vehicle_id}",
            )

    async def adjust(
        self, vehicle_id: int, product_id: int, request: VehicleAdjustRequest
    ) -> VehicleInventory:
        """Set the on-hand quantity; the difference is logged as a manual update."""
        async with self._get_transaction()():
            await self._require_vehicle(vehicle_id)
            await require_reference(await self._get_product_store(), "product", product_id)
            service = await self._get_vehicle_inventory()
            return await service.adjust(vehicle_id, product_id, request.quantity)

    async def reconstruct(self, vehicle_id: int, product_id: int) -> VehicleReconstruction:
        await self._require_vehicle(vehicle_id)
        await require_reference(await self._get_product_store(), "product", product_id)
        service = await self._get_vehicle_inventory()
        result = await service.reconstruct(vehicle_id, product_id)
        if not result.consistent:
            logger.warning(
                "vehicle_inventory_inconsistent",
                vehicle_id=vehicle_id,
                product_id=product_id,
                cached=result.cached,
                replayed=result.replayed,
            )
        return result

    async def list_inventory(self, vehicle_id: int) -> list[VehicleInventory]:
        await self._require_vehicle(vehicle_id)
        return await (await self._get_inventory_store()).list_inventory(vehicle_id)

    def to_response(self, inventory: VehicleInventory) -> VehicleInventoryResponse:
        """Convert result to API response."""
        return VehicleInventoryResponse.model_validate(inventory)
