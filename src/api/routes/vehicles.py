"""Vehicle and vehicle inventory endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import (
    get_catalog_use_case,
    get_vehicle_inventory,
    get_vehicle_inventory_use_case,
    get_vehicles,
)
from src.application.dto.requests import (
    VehicleAdjustRequest,
    VehicleCreateRequest,
    VehicleLoadRequest,
    VehicleUpdateRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    VehicleInventoryResponse,
    VehicleMovementResponse,
    VehicleReconstructionResponse,
    VehicleResponse,
)
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.application.use_cases.manage_vehicle_inventory import ManageVehicleInventoryUseCase
from src.infrastructure.storage.sqlite import SQLiteVehicleInventoryStore, SQLiteVehicleStore

router = APIRouter(prefix="/api/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleResponse])
async def list_vehicles(
    store: SQLiteVehicleStore = Depends(get_vehicles),
) -> list[VehicleResponse]:
    return [VehicleResponse.model_validate(v) for v in await store.list_vehicles()]


@router.post(
    "",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_vehicle(
    request: VehicleCreateRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> VehicleResponse:
    return VehicleResponse.model_validate(await use_case.create_vehicle(request))


@router.get("/inventory", response_model=list[VehicleInventoryResponse])
async def list_all_inventory(
    store: SQLiteVehicleInventoryStore = Depends(get_vehicle_inventory),
) -> list[VehicleInventoryResponse]:
    """On-hand quantities across every vehicle."""
    return [VehicleInventoryResponse.model_validate(i) for i in await store.list_inventory()]


@router.get("/inventory/movements", response_model=list[VehicleMovementResponse])
async def list_all_movements(
    store: SQLiteVehicleInventoryStore = Depends(get_vehicle_inventory),
) -> list[VehicleMovementResponse]:
    return [VehicleMovementResponse.model_validate(m) for m in await store.list_movements()]


@router.get(
    "/{vehicle_id}", response_model=VehicleResponse, responses={404: {"model": ErrorResponse}}
)
async def get_vehicle(
    vehicle_id: int,
    store: SQLiteVehicleStore = Depends(get_vehicles),
) -> VehicleResponse:
    vehicle = await store.get(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail=f"Vehicle not found: {vehicle_id}")
    return VehicleResponse.model_validate(vehicle)


@router.patch(
    "/{vehicle_id}", response_model=VehicleResponse, responses={404: {"model": ErrorResponse}}
)
async def update_vehicle(
    vehicle_id: int,
    request: VehicleUpdateRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> VehicleResponse:
    return VehicleResponse.model_validate(await use_case.update_vehicle(vehicle_id, request))


@router.delete(
    "/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_vehicle(
    vehicle_id: int,
    store: SQLiteVehicleStore = Depends(get_vehicles),
) -> None:
    if not await store.delete(vehicle_id):
        raise HTTPException(status_code=404, detail=f"Vehicle not found: {vehicle_id}")


# Vehicle inventory


@router.get(
    "/{vehicle_id}/inventory",
    response_model=list[VehicleInventoryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_vehicle_inventory_rows(
    vehicle_id: int,
    use_case: ManageVehicleInventoryUseCase = Depends(get_vehicle_inventory_use_case),
) -> list[VehicleInventoryResponse]:
    return [use_case.to_response(row) for row in await use_case.list_inventory(vehicle_id)]


@router.post(
    "/{vehicle_id}/inventory/load",
    response_model=VehicleInventoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def load_vehicle(
    vehicle_id: int,
    request: VehicleLoadRequest,
    use_case: ManageVehicleInventoryUseCase = Depends(get_vehicle_inventory_use_case),
) -> VehicleInventoryResponse:
    """Load stock onto a vehicle. Product stock rises by the same amount."""
    return use_case.to_response(await use_case.load(vehicle_id, request))


@router.get(
    "/{vehicle_id}/inventory/movements",
    response_model=list[VehicleMovementResponse],
)
async def list_vehicle_movements(
    vehicle_id: int,
    product_id: int | None = None,
    store: SQLiteVehicleInventoryStore = Depends(get_vehicle_inventory),
) -> list[VehicleMovementResponse]:
    movements = await store.list_movements(vehicle_id=vehicle_id, product_id=product_id)
    return [VehicleMovementResponse.model_validate(m) for m in movements]


@router.patch(
    "/{vehicle_id}/inventory/{product_id}",
    response_model=VehicleInventoryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def adjust_vehicle_inventory(
    vehicle_id: int,
    product_id: int,
    request: VehicleAdjustRequest,
    use_case: ManageVehicleInventoryUseCase = Depends(get_vehicle_inventory_use_case),
) -> VehicleInventoryResponse:
    """Set the on-hand quantity. The difference is logged as a manual update."""
    return use_case.to_response(await use_case.adjust(vehicle_id, product_id, request))


@router.get(
    "/{vehicle_id}/inventory/{product_id}/reconstruct",
    response_model=VehicleReconstructionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconstruct_vehicle_inventory(
    vehicle_id: int,
    product_id: int,
    use_case: ManageVehicleInventoryUseCase = Depends(get_vehicle_inventory_use_case),
) -> VehicleReconstructionResponse:
    """Compare the cached quantity with loads minus sales from the movement log."""
    result = await use_case.reconstruct(vehicle_id, product_id)
    return VehicleReconstructionResponse.model_validate(result)
