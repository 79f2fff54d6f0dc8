"""Reconcile Stock Use Case: replay the movement log against product stock."""

from dataclasses import dataclass, field

from src.application.dto.responses import StockDriftResponse, StockReconcileResponse
from src.application.services import (
    TransactionFactory,
    get_stock_mirror_service,
    get_transaction_factory,
)
from src.config import get_logger
from src.core.interfaces import IProductStore
from src.core.services import StockDrift, StockMirrorService

logger = get_logger(__name__)


@dataclass
class ReconcileStockResult:
    products_checked: int
    repaired: bool
    drifts: list[StockDrift] = field(default_factory=list)


class ReconcileStockUseCase:
    """Detect (and optionally repair) drift between the counter and the log."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._product_store = product_store
        self._stock_mirror = stock_mirror
        self._transaction = transaction

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_stock_mirror(self) -> StockMirrorService:
        if self._stock_mirror is None:
            self._stock_mirror = await get_stock_mirror_service()
        return self._stock_mirror

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def execute(self, repair: bool = False) -> ReconcileStockResult:
        async with self._get_transaction()():
            products = await (await self._get_product_store()).list_products()
            drifts = await (await self._get_stock_mirror()).reconcile(repair=repair)

        for drift in drifts:
            logger.warning(
                "stock_drift_detected",
                product_id=drift.product_id,
                recorded=drift.recorded,
                replayed=drift.replayed,
                repaired=drift.repaired,
            )
        return ReconcileStockResult(
            products_checked=len(products), repaired=repair, drifts=drifts
        )

    def to_response(self, result: ReconcileStockResult) -> StockReconcileResponse:
        """Convert result to API response."""
        return StockReconcileResponse(
            products_checked=result.products_checked,
            drifted=len(result.drifts),
            repaired=result.repaired,
            drifts=[StockDriftResponse.model_validate(d) for d in result.drifts],
        )
