"""Purchase endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_create_purchase_use_case, get_purchases
from src.application.dto.requests import CreatePurchaseRequest
from src.application.dto.responses import ErrorResponse, PurchaseResponse
from src.application.use_cases.create_purchase import CreatePurchaseUseCase
from src.infrastructure.storage.sqlite import SQLitePurchaseStore

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.post(
    "",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_purchase(
    request: CreatePurchaseRequest,
    use_case: CreatePurchaseUseCase = Depends(get_create_purchase_use_case),
) -> PurchaseResponse:
    """Record a purchase and book its stock in (onto the vehicle if given)."""
    purchase = await use_case.execute(request)
    return use_case.to_response(purchase)


@router.get("", response_model=list[PurchaseResponse])
async def list_purchases(
    vendor_id: int | None = None,
    store: SQLitePurchaseStore = Depends(get_purchases),
) -> list[PurchaseResponse]:
    """List purchases with their items, optionally for one vendor."""
    purchases = await store.list_purchases(vendor_id=vendor_id)
    return [PurchaseResponse.model_validate(p) for p in purchases]


@router.get(
    "/{purchase_id}",
    response_model=PurchaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    purchase_id: int,
    store: SQLitePurchaseStore = Depends(get_purchases),
) -> PurchaseResponse:
    purchase = await store.get_purchase(purchase_id)
    if purchase is None:
        raise HTTPException(status_code=404, detail=f"Purchase not found: {purchase_id}")
    return PurchaseResponse.model_validate(purchase)
