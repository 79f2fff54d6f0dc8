"""Customer invoice endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import (
    get_create_invoice_use_case,
    get_delete_invoices_use_case,
    get_invoices,
    get_update_invoice_use_case,
)
from src.application.dto.requests import (
    BulkDeleteInvoicesRequest,
    CreateInvoiceRequest,
    UpdateInvoiceItemRequest,
    UpdateInvoiceRequest,
)
from src.application.dto.responses import (
    CreateInvoiceResponse,
    DeleteInvoicesResponse,
    ErrorResponse,
    InvoiceItemResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from src.application.use_cases.create_invoice import CreateInvoiceUseCase
from src.application.use_cases.delete_invoices import DeleteInvoicesUseCase
from src.application.use_cases.update_invoice import UpdateInvoiceUseCase
from src.core.interfaces import InvoiceFilter
from src.infrastructure.storage.sqlite import SQLiteInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post(
    "",
    response_model=CreateInvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_invoice(
    request: CreateInvoiceRequest,
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> CreateInvoiceResponse:
    """
    Bill a customer.

    Vehicle shortfalls do not fail the invoice under the advisory policy;
    they are reported in ``vehicle_shortfalls``.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    start_date: date | None = None,
    end_date: date | None = None,
    customer_id: int | None = None,
    vehicle_id: int | None = None,
    shop: int | None = None,
    limit: int | None = Query(default=None, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteInvoiceStore = Depends(get_invoices),
) -> InvoiceListResponse:
    """List invoices newest first with the total count before pagination."""
    invoices, total = await store.list_invoices(
        InvoiceFilter(
            start_date=start_date,
            end_date=end_date,
            customer_id=customer_id,
            vehicle_id=vehicle_id,
            shop=shop,
            limit=limit,
            offset=offset,
        )
    )
    return InvoiceListResponse(
        invoices=[InvoiceResponse.model_validate(i) for i in invoices],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/items", response_model=list[InvoiceItemResponse])
async def list_invoice_items(
    invoice_id: int | None = None,
    store: SQLiteInvoiceStore = Depends(get_invoices),
) -> list[InvoiceItemResponse]:
    items = await store.list_items(invoice_id=invoice_id)
    return [InvoiceItemResponse.model_validate(i) for i in items]


@router.post(
    "/bulk-delete",
    response_model=DeleteInvoicesResponse,
    responses={404: {"model": ErrorResponse}},
)
async def bulk_delete_invoices(
    request: BulkDeleteInvoicesRequest,
    use_case: DeleteInvoicesUseCase = Depends(get_delete_invoices_use_case),
) -> DeleteInvoicesResponse:
    """Delete invoices and put the stock they took back."""
    result = await use_case.execute(request.invoice_ids)
    return use_case.to_response(result)


@router.patch(
    "/items/{item_id}",
    response_model=InvoiceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_invoice_item(
    item_id: int,
    request: UpdateInvoiceItemRequest,
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """Edit a line; the owning invoice's totals are recomputed."""
    invoice = await use_case.update_item(item_id, request)
    return use_case.to_response(invoice)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    store: SQLiteInvoiceStore = Depends(get_invoices),
) -> InvoiceResponse:
    invoice = await store.get_invoice(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail=f"Invoice not found: {invoice_id}")
    return InvoiceResponse.model_validate(invoice)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequest,
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """Edit header fields; totals are recomputed."""
    invoice = await use_case.execute(invoice_id, request)
    return use_case.to_response(invoice)
