"""Product stock movement endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    get_catalog_use_case,
    get_reconcile_stock_use_case,
    get_stock_movements,
)
from src.application.dto.requests import StockMovementRequest
from src.application.dto.responses import (
    ErrorResponse,
    StockMovementResponse,
    StockReconcileResponse,
)
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.application.use_cases.reconcile_stock import ReconcileStockUseCase
from src.core.exceptions import ValidationError
from src.infrastructure.storage.sqlite import SQLiteStockMovementStore

router = APIRouter(prefix="/api/stock-movements", tags=["stock"])


@router.post(
    "",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def record_stock_movement(
    request: StockMovementRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> StockMovementResponse:
    """Manual stock in/out. Product stock is updated with the movement."""
    movement = await use_case.record_movement(request)
    return StockMovementResponse.model_validate(movement)


@router.get("", response_model=list[StockMovementResponse])
async def list_stock_movements(
    start_date: date | None = None,
    end_date: date | None = None,
    product_id: int | None = None,
    store: SQLiteStockMovementStore = Depends(get_stock_movements),
) -> list[StockMovementResponse]:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date", "must not be after end_date", start_date)
    movements = await store.list_movements(
        start_date=start_date, end_date=end_date, product_id=product_id
    )
    return [StockMovementResponse.model_validate(m) for m in movements]


@router.post("/reconcile", response_model=StockReconcileResponse)
async def reconcile_stock(
    repair: bool = False,
    use_case: ReconcileStockUseCase = Depends(get_reconcile_stock_use_case),
) -> StockReconcileResponse:
    """Replay the movement log and report (or repair) drifted product stock."""
    result = await use_case.execute(repair=repair)
    return use_case.to_response(result)
