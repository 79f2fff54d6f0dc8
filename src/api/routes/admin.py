"""Administrative endpoints: row counts and destructive table clears."""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_admin
from src.application.dto.requests import ClearTableRequest
from src.application.dto.responses import ClearTableResponse, ErrorResponse, TableStatsResponse
from src.core.exceptions import ValidationError
from src.infrastructure.storage.sqlite import SQLiteAdminStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/table-stats", response_model=TableStatsResponse)
async def table_stats(
    store: SQLiteAdminStore = Depends(get_admin),
) -> TableStatsResponse:
    return TableStatsResponse(tables=await store.table_stats())


@router.post(
    "/clear-table",
    response_model=ClearTableResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def clear_table(
    request: ClearTableRequest,
    store: SQLiteAdminStore = Depends(get_admin),
) -> ClearTableResponse:
    """Delete every row of a whitelisted table. Requires ``confirm: true``."""
    if not request.confirm:
        raise ValidationError("confirm", "must be true to clear a table", request.confirm)
    deleted = await store.clear_table(request.table)
    return ClearTableResponse(table=request.table, deleted=deleted)
