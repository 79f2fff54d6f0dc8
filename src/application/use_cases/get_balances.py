"""Get Balances Use Case: vendor, customer and period balances."""

from datetime import date

from src.application.services import get_ledger_service
from src.config import get_logger
from src.core.exceptions import EntityNotFoundError, ValidationError
from src.core.interfaces import ICustomerStore, IVendorStore
from src.core.services import CustomerBalance, LedgerService, PeriodBalance, VendorBalance

logger = get_logger(__name__)


class GetBalancesUseCase:
    """Read-only balance queries. Every call recomputes from the documents."""

    def __init__(
        self,
        ledger: LedgerService | None = None,
        vendor_store: IVendorStore | None = None,
        customer_store: ICustomerStore | None = None,
    ):
        self._ledger = ledger
        self._vendor_store = vendor_store
        self._customer_store = customer_store

    async def _get_ledger(self) -> LedgerService:
        if self._ledger is None:
            self._ledger = await get_ledger_service()
        return self._ledger

    async def _get_vendor_store(self) -> IVendorStore:
        if self._vendor_store is None:
            from src.infrastructure.storage.sqlite import get_vendor_store

            self._vendor_store = await get_vendor_store()
        return self._vendor_store

    async def _get_customer_store(self) -> ICustomerStore:
        if self._customer_store is None:
            from src.infrastructure.storage.sqlite import get_customer_store

            self._customer_store = await get_customer_store()
        return self._customer_store

    async def vendor_balance(self, vendor_id: int) -> VendorBalance:
        vendor = await (await self._get_vendor_store()).get(vendor_id)
        if vendor is None:
            raise EntityNotFoundError("vendor", vendor_id)
        ledger = await self._get_ledger()
        return await ledger.vendor_balance(vendor_id, vendor_name=vendor.name)

    async def customer_balance(self, customer_id: int, as_of: date | None = None) -> CustomerBalance:
        customer = await (await self._get_customer_store()).get(customer_id)
        if customer is None:
            raise EntityNotFoundError("customer", customer_id)
        ledger = await self._get_ledger()
        return await ledger.customer_balance(customer_id, as_of=as_of, customer_name=customer.name)

    async def period_balance(
        self, start_date: date, end_date: date, customer_id: int | None = None
    ) -> PeriodBalance:
        if start_date > end_date:
            raise ValidationError("start_date", "must not be after end_date", start_date)
        ledger = await self._get_ledger()
        return await ledger.period_balance(start_date, end_date, customer_id=customer_id)

    async def all_vendor_balances(self) -> list[VendorBalance]:
        return await (await self._get_ledger()).all_vendor_balances()

    async def all_customer_balances(self, as_of: date | None = None) -> list[CustomerBalance]:
        return await (await self._get_ledger()).all_customer_balances(as_of=as_of)
