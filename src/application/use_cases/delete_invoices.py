"""Delete Invoices Use Case: compensating stock movements, payment detach."""

import math
from collections import defaultdict
from dataclasses import dataclass, field

from src.application.dto.responses import DeleteInvoicesResponse
from src.application.services import (
    TransactionFactory,
    get_stock_mirror_service,
    get_transaction_factory,
)
from src.application.use_cases.sale_price import refresh_average_prices
from src.config import get_logger, get_settings
from src.core.entities.inventory import MovementDirection, ReferenceType, StockMovement
from src.core.entities.invoice import Invoice
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces import (
    IInvoiceStore,
    IPaymentStore,
    IProductStore,
    IStockMovementStore,
)
from src.core.services import StockMirrorService

logger = get_logger(__name__)


@dataclass
class DeleteInvoicesResult:
    deleted: list[int] = field(default_factory=list)
    restored_movements: list[StockMovement] = field(default_factory=list)


class DeleteInvoicesUseCase:
    """
    Bulk-delete invoices.

    For each (invoice, product) the net quantity the invoice took out of
    stock, including later edits, is booked back as an ``in`` movement.
    Vehicle inventory is not reversed. Customer payments and hamali cash
    records pointing at the invoices are kept but detached.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        product_store: IProductStore | None = None,
        payment_store: IPaymentStore | None = None,
        movement_store: IStockMovementStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._invoice_store = invoice_store
        self._product_store = product_store
        self._payment_store = payment_store
        self._movement_store = movement_store
        self._stock_mirror = stock_mirror
        self._transaction = transaction

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from src.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_payment_store(self) -> IPaymentStore:
        if self._payment_store is None:
            from src.infrastructure.storage.sqlite import get_payment_store

            self._payment_store = await get_payment_store()
        return self._payment_store

    async def _get_movement_store(self) -> IStockMovementStore:
        if self._movement_store is None:
            from src.infrastructure.storage.sqlite import get_stock_movement_store

            self._movement_store = await get_stock_movement_store()
        return self._movement_store

    async def _get_stock_mirror(self) -> StockMirrorService:
        if self._stock_mirror is None:
            self._stock_mirror = await get_stock_mirror_service()
        return self._stock_mirror

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def execute(self, invoice_ids: list[int]) -> DeleteInvoicesResult:
        """Execute delete invoices use case."""
        invoice_ids = list(dict.fromkeys(invoice_ids))
        logger.info("delete_invoices_started", invoice_ids=invoice_ids)

        result = DeleteInvoicesResult()
        invoice_store = await self._get_invoice_store()
        invoices: list[Invoice] = []

        async with self._get_transaction()():
            for invoice_id in invoice_ids:
                invoice = await invoice_store.get_invoice(invoice_id)
                if invoice is not None:
                    invoices.append(invoice)
            if not invoices:
                raise EntityNotFoundError("invoice", ", ".join(map(str, invoice_ids)))

            found = [invoice.id for invoice in invoices]
            movements = await (await self._get_movement_store()).list_by_references(
                ReferenceType.INVOICE, found  # type: ignore[arg-type]
            )
            net: dict[tuple[int, int], list[float]] = defaultdict(list)
            for movement in movements:
                sign = 1.0 if movement.type == MovementDirection.OUT else -1.0
                net[(movement.reference_id, movement.product_id)].append(  # type: ignore[index]
                    sign * movement.quantity
                )

            mirror = await self._get_stock_mirror()
            for invoice in invoices:
                products = dict.fromkeys(item.product_id for item in invoice.items)
                for product_id in products:
                    quantity = math.fsum(net.get((invoice.id, product_id), []))  # type: ignore[arg-type]
                    if quantity <= 1e-9:
                        continue
                    result.restored_movements.append(
                        await mirror.apply(
                            StockMovement(
                                product_id=product_id,
                                type=MovementDirection.IN,
                                quantity=quantity,
                                reason=f"Invoice {invoice.invoice_number} deleted",
                                movement_date=invoice.invoice_date,
                                reference_id=invoice.id,
                                reference_type=ReferenceType.INVOICE,
                            )
                        )
                    )

            await (await self._get_payment_store()).detach_invoices(found)  # type: ignore[arg-type]
            await invoice_store.delete_invoices(found)  # type: ignore[arg-type]
            result.deleted = found  # type: ignore[assignment]

        precision = get_settings().ledger.price_precision
        for invoice in invoices:
            await refresh_average_prices(
                invoice_store,
                await self._get_product_store(),
                self._get_transaction(),
                [item.product_id for item in invoice.items],
                invoice.invoice_date,
                precision=precision,
            )

        logger.info(
            "invoices_deleted",
            deleted=len(result.deleted),
            missing=len(invoice_ids) - len(result.deleted),
            restored=len(result.restored_movements),
        )
        return result

    def to_response(self, result: DeleteInvoicesResult) -> DeleteInvoicesResponse:
        """Convert result to API response."""
        return DeleteInvoicesResponse(
            deleted=len(result.deleted),
            invoice_ids=result.deleted,
            restored_movements=len(result.restored_movements),
        )
