"""Vendor payment, customer payment and hamali cash endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_payments, get_payments_use_case
from src.application.dto.requests import (
    CustomerPaymentRequest,
    CustomerPaymentUpdateRequest,
    HamaliCashRequest,
    VendorPaymentRequest,
    VendorPaymentUpdateRequest,
)
from src.application.dto.responses import (
    CustomerPaymentResponse,
    ErrorResponse,
    HamaliCashPaymentResponse,
    VendorPaymentResponse,
)
from src.application.use_cases.manage_payments import ManagePaymentsUseCase
from src.infrastructure.storage.sqlite import SQLitePaymentStore

vendor_payments_router = APIRouter(prefix="/api/vendor-payments", tags=["payments"])
customer_payments_router = APIRouter(prefix="/api/customer-payments", tags=["payments"])
hamali_cash_router = APIRouter(prefix="/api/hamali-cash", tags=["payments"])


# Vendor payments


@vendor_payments_router.post(
    "",
    response_model=VendorPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_vendor_payment(
    request: VendorPaymentRequest,
    use_case: ManagePaymentsUseCase = Depends(get_payments_use_case),
) -> VendorPaymentResponse:
    payment = await use_case.create_vendor_payment(request)
    return VendorPaymentResponse.model_validate(payment)


@vendor_payments_router.get("", response_model=list[VendorPaymentResponse])
async def list_vendor_payments(
    vendor_id: int | None = None,
    store: SQLitePaymentStore = Depends(get_payments),
) -> list[VendorPaymentResponse]:
    payments = await store.list_vendor_payments(vendor_id=vendor_id)
    return [VendorPaymentResponse.model_validate(p) for p in payments]


@vendor_payments_router.patch(
    "/{payment_id}",
    response_model=VendorPaymentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_vendor_payment(
    payment_id: int,
    request: VendorPaymentUpdateRequest,
    use_case: ManagePaymentsUseCase = Depends(get_payments_use_case),
) -> VendorPaymentResponse:
    payment = await use_case.update_vendor_payment(payment_id, request)
    return VendorPaymentResponse.model_validate(payment)


# Customer payments


@customer_payments_router.post(
    "",
    response_model=CustomerPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_customer_payment(
    request: CustomerPaymentRequest,
    use_case: ManagePaymentsUseCase = Depends(get_payments_use_case),
) -> CustomerPaymentResponse:
    payment = await use_case.create_customer_payment(request)
    return CustomerPaymentResponse.model_validate(payment)


@customer_payments_router.get("", response_model=list[CustomerPaymentResponse])
async def list_customer_payments(
    customer_id: int | None = None,
    store: SQLitePaymentStore = Depends(get_payments),
) -> list[CustomerPaymentResponse]:
    payments = await store.list_customer_payments(customer_id=customer_id)
    return [CustomerPaymentResponse.model_validate(p) for p in payments]


@customer_payments_router.patch(
    "/{payment_id}",
    response_model=CustomerPaymentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_customer_payment(
    payment_id: int,
    request: CustomerPaymentUpdateRequest,
    use_case: ManagePaymentsUseCase = Depends(get_payments_use_case),
) -> CustomerPaymentResponse:
    payment = await use_case.update_customer_payment(payment_id, request)
    return CustomerPaymentResponse.model_validate(payment)


# Hamali cash


@hamali_cash_router.post(
    "",
    response_model=HamaliCashPaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_hamali_cash(
    request: HamaliCashRequest,
    use_case: ManagePaymentsUseCase = Depends(get_payments_use_case),
) -> HamaliCashPaymentResponse:
    payment = await use_case.create_hamali_payment(request)
    return HamaliCashPaymentResponse.model_validate(payment)


@hamali_cash_router.get("", response_model=list[HamaliCashPaymentResponse])
async def list_hamali_cash(
    store: SQLitePaymentStore = Depends(get_payments),
) -> list[HamaliCashPaymentResponse]:
    return [HamaliCashPaymentResponse.model_validate(p) for p in await store.list_hamali_payments()]


@hamali_cash_router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_hamali_cash(
    payment_id: int,
    store: SQLitePaymentStore = Depends(get_payments),
) -> None:
    if not await store.delete_hamali_payment(payment_id):
        raise HTTPException(status_code=404, detail=f"Hamali cash payment not found: {payment_id}")
