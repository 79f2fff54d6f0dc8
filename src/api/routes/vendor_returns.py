"""Vendor return endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_create_vendor_return_use_case, get_returns
from src.application.dto.requests import CreateVendorReturnRequest
from src.application.dto.responses import ErrorResponse, VendorReturnResponse
from src.application.use_cases.create_vendor_return import CreateVendorReturnUseCase
from src.infrastructure.storage.sqlite import SQLiteVendorReturnStore

router = APIRouter(prefix="/api/vendor-returns", tags=["vendor-returns"])


@router.post(
    "",
    response_model=VendorReturnResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_vendor_return(
    request: CreateVendorReturnRequest,
    use_case: CreateVendorReturnUseCase = Depends(get_create_vendor_return_use_case),
) -> VendorReturnResponse:
    """Return goods to a vendor. Reduces the vendor balance and stock."""
    vendor_return = await use_case.execute(request)
    return use_case.to_response(vendor_return)


@router.get("", response_model=list[VendorReturnResponse])
async def list_vendor_returns(
    vendor_id: int | None = None,
    store: SQLiteVendorReturnStore = Depends(get_returns),
) -> list[VendorReturnResponse]:
    returns = await store.list_returns(vendor_id=vendor_id)
    return [VendorReturnResponse.model_validate(r) for r in returns]


@router.get(
    "/{return_id}",
    response_model=VendorReturnResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_vendor_return(
    return_id: int,
    store: SQLiteVendorReturnStore = Depends(get_returns),
) -> VendorReturnResponse:
    vendor_return = await store.get_return(return_id)
    if vendor_return is None:
        raise HTTPException(status_code=404, detail=f"Vendor return not found: {return_id}")
    return VendorReturnResponse.model_validate(vendor_return)
