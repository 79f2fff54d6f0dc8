"""Product catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_catalog_use_case, get_products
from src.application.dto.requests import ProductCreateRequest, ProductUpdateRequest
from src.application.dto.responses import ErrorResponse, ProductResponse
from src.application.use_cases.manage_catalog import ManageCatalogUseCase
from src.infrastructure.storage.sqlite import SQLiteProductStore

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    store: SQLiteProductStore = Depends(get_products),
) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in await store.list_products()]


@router.get("/low-stock", response_model=list[ProductResponse])
async def list_low_stock(
    store: SQLiteProductStore = Depends(get_products),
) -> list[ProductResponse]:
    """Products at or below their reorder level."""
    return [ProductResponse.model_validate(p) for p in await store.list_low_stock()]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductCreateRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> ProductResponse:
    """Create a product. Opening stock is booked as a stock movement."""
    return ProductResponse.model_validate(await use_case.create_product(request))


@router.get(
    "/{product_id}", response_model=ProductResponse, responses={404: {"model": ErrorResponse}}
)
async def get_product(
    product_id: int,
    store: SQLiteProductStore = Depends(get_products),
) -> ProductResponse:
    product = await store.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
    return ProductResponse.model_validate(product)


@router.patch(
    "/{product_id}", response_model=ProductResponse, responses={404: {"model": ErrorResponse}}
)
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    use_case: ManageCatalogUseCase = Depends(get_catalog_use_case),
) -> ProductResponse:
    return ProductResponse.model_validate(await use_case.update_product(product_id, request))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    store: SQLiteProductStore = Depends(get_products),
) -> None:
    if not await store.delete(product_id):
        raise HTTPException(status_code=404, detail=f"Product not found: {product_id}")
