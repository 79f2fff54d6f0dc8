"""Generate Reports Use Case: daily summary and profit/loss."""

from datetime import date

from src.application.services import get_report_service
from src.config import get_logger
from src.core.exceptions import ValidationError
from src.core.services import DailySummary, ProfitLossReport, ReportService

logger = get_logger(__name__)


def _check_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date", "must not be after end_date", start_date)


class GenerateReportsUseCase:
    def __init__(self, reports: ReportService | None = None):
        self._reports = reports

    async def _get_reports(self) -> ReportService:
        if self._reports is None:
            self._reports = await get_report_service()
        return self._reports

    async def daily_summary(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        vehicle_id: int | None = None,
        customer_id: int | None = None,
    ) -> list[DailySummary]:
        _check_range(start_date, end_date)
        reports = await self._get_reports()
        return await reports.daily_summary(start_date, end_date, vehicle_id, customer_id)

    async def profit_loss(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> ProfitLossReport:
        _check_range(start_date, end_date)
        reports = await self._get_reports()
        report = await reports.profit_loss(start_date, end_date)
        logger.info(
            "profit_loss_generated",
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
            gross_profit=report.gross_profit,
        )
        return report
