"""Balance and report endpoints."""

from datetime import date

from fastapi import APIRouter, Depends

from src.api.dependencies import get_balances_use_case, get_reports_use_case
from src.application.dto.responses import (
    CustomerBalanceResponse,
    DailySummaryResponse,
    ErrorResponse,
    PeriodBalanceResponse,
    ProfitLossResponse,
    VendorBalanceResponse,
)
from src.application.use_cases.generate_reports import GenerateReportsUseCase
from src.application.use_cases.get_balances import GetBalancesUseCase

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get(
    "/profit-loss",
    response_model=ProfitLossResponse,
    responses={400: {"model": ErrorResponse}},
)
async def profit_loss(
    start_date: date | None = None,
    end_date: date | None = None,
    use_case: GenerateReportsUseCase = Depends(get_reports_use_case),
) -> ProfitLossResponse:
    """Sales minus net purchases, with margin, hamali and payment breakdowns."""
    report = await use_case.profit_loss(start_date, end_date)
    return ProfitLossResponse.model_validate(report)


@router.get(
    "/daily-summary",
    response_model=list[DailySummaryResponse],
    responses={400: {"model": ErrorResponse}},
)
async def daily_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    vehicle_id: int | None = None,
    customer_id: int | None = None,
    use_case: GenerateReportsUseCase = Depends(get_reports_use_case),
) -> list[DailySummaryResponse]:
    """Per-day sales, hamali, weight and bags. Newest day first."""
    rows = await use_case.daily_summary(start_date, end_date, vehicle_id, customer_id)
    return [DailySummaryResponse.model_validate(r) for r in rows]


@router.get(
    "/period-balance",
    response_model=PeriodBalanceResponse,
    responses={400: {"model": ErrorResponse}},
)
async def period_balance(
    start_date: date,
    end_date: date,
    customer_id: int | None = None,
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> PeriodBalanceResponse:
    result = await use_case.period_balance(start_date, end_date, customer_id=customer_id)
    return PeriodBalanceResponse.model_validate(result)


@router.get("/vendor-balances", response_model=list[VendorBalanceResponse])
async def vendor_balances(
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> list[VendorBalanceResponse]:
    return [VendorBalanceResponse.model_validate(b) for b in await use_case.all_vendor_balances()]


@router.get(
    "/vendor-balances/{vendor_id}",
    response_model=VendorBalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def vendor_balance(
    vendor_id: int,
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> VendorBalanceResponse:
    return VendorBalanceResponse.model_validate(await use_case.vendor_balance(vendor_id))


@router.get("/customer-balances", response_model=list[CustomerBalanceResponse])
async def customer_balances(
    as_of: date | None = None,
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> list[CustomerBalanceResponse]:
    balances = await use_case.all_customer_balances(as_of=as_of)
    return [CustomerBalanceResponse.model_validate(b) for b in balances]


@router.get(
    "/customer-balances/{customer_id}",
    response_model=CustomerBalanceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def customer_balance(
    customer_id: int,
    as_of: date | None = None,
    use_case: GetBalancesUseCase = Depends(get_balances_use_case),
) -> CustomerBalanceResponse:
    result = await use_case.customer_balance(customer_id, as_of=as_of)
    return CustomerBalanceResponse.model_validate(result)
