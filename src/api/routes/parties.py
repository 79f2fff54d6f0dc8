"""Vendor and customer endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_customers, get_vendors
from src.application.dto.requests import (
    CustomerBulkCreateRequest,
    PartyCreateRequest,
    PartyUpdateRequest,
)
from src.application.dto.responses import ErrorResponse, PartyResponse
from src.core.entities.party import Customer, Vendor
from src.infrastructure.storage.sqlite import SQLiteCustomerStore, SQLiteVendorStore

vendors_router = APIRouter(prefix="/api/vendors", tags=["vendors"])
customers_router = APIRouter(prefix="/api/customers", tags=["customers"])


# Vendors


@vendors_router.get("", response_model=list[PartyResponse])
async def list_vendors(
    store: SQLiteVendorStore = Depends(get_vendors),
) -> list[PartyResponse]:
    return [PartyResponse.model_validate(v) for v in await store.list_vendors()]


@vendors_router.post("", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    request: PartyCreateRequest,
    store: SQLiteVendorStore = Depends(get_vendors),
) -> PartyResponse:
    vendor = await store.create(Vendor(**request.model_dump()))
    return PartyResponse.model_validate(vendor)


@vendors_router.get(
    "/{vendor_id}", response_model=PartyResponse, responses={404: {"model": ErrorResponse}}
)
async def get_vendor(
    vendor_id: int,
    store: SQLiteVendorStore = Depends(get_vendors),
) -> PartyResponse:
    vendor = await store.get(vendor_id)
    if vendor is None:
        raise HTTPException(status_code=404, detail=f"Vendor not found: {vendor_id}")
    return PartyResponse.model_validate(vendor)


@vendors_router.patch(
    "/{vendor_id}", response_model=PartyResponse, responses={404: {"model": ErrorResponse}}
)
async def update_vendor(
    vendor_id: int,
    request: PartyUpdateRequest,
    store: SQLiteVendorStore = Depends(get_vendors),
) -> PartyResponse:
    vendor = await store.get(vendor_id)
    if vendor is None:
        raise HTTPException(status_code=404, detail=f"Vendor not found: {vendor_id}")
    updated = vendor.model_copy(update=request.model_dump(exclude_unset=True, exclude_none=True))
    return PartyResponse.model_validate(await store.update(updated))


@vendors_router.delete(
    "/{vendor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_vendor(
    vendor_id: int,
    store: SQLiteVendorStore = Depends(get_vendors),
) -> None:
    """Hard delete. Refused while purchases, payments or vehicles reference the vendor."""
    if not await store.delete(vendor_id):
        raise HTTPException(status_code=404, detail=f"Vendor not found: {vendor_id}")


# Customers


@customers_router.get("", response_model=list[PartyResponse])
async def list_customers(
    store: SQLiteCustomerStore = Depends(get_customers),
) -> list[PartyResponse]:
    return [PartyResponse.model_validate(c) for c in await store.list_customers()]


@customers_router.post("", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    request: PartyCreateRequest,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> PartyResponse:
    customer = await store.create(Customer(**request.model_dump()))
    return PartyResponse.model_validate(customer)


@customers_router.post(
    "/bulk", response_model=list[PartyResponse], status_code=status.HTTP_201_CREATED
)
async def bulk_create_customers(
    request: CustomerBulkCreateRequest,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> list[PartyResponse]:
    """Import several customers in one transaction."""
    customers = await store.create_many([Customer(**c.model_dump()) for c in request.customers])
    return [PartyResponse.model_validate(c) for c in customers]


@customers_router.get(
    "/{customer_id}", response_model=PartyResponse, responses={404: {"model": ErrorResponse}}
)
async def get_customer(
    customer_id: int,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> PartyResponse:
    customer = await store.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    return PartyResponse.model_validate(customer)


@customers_router.patch(
    "/{customer_id}", response_model=PartyResponse, responses={404: {"model": ErrorResponse}}
)
async def update_customer(
    customer_id: int,
    request: PartyUpdateRequest,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> PartyResponse:
    customer = await store.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    updated = customer.model_copy(
        update=request.model_dump(exclude_unset=True, exclude_none=True)
    )
    return PartyResponse.model_validate(await store.update(updated))


@customers_router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_customer(
    customer_id: int,
    store: SQLiteCustomerStore = Depends(get_customers),
) -> None:
    """Hard delete. Refused while invoices or payments reference the customer."""
    if not await store.delete(customer_id):
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
