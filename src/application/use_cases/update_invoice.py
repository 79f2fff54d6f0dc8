"""
Update Invoice Use Case.

Every edit re-runs the line engine and persists the recomputed subtotal,
hamali and grand total in the same transaction as the edit. Quantity
changes are booked as product stock movements so the mirror stays
reconcilable; vehicle inventory is not touched by edits. A hamali cash
row linked to the invoice follows the recomputed hamali charge.
"""

from src.application.dto.requests import UpdateInvoiceItemRequest, UpdateInvoiceRequest
from src.application.dto.responses import InvoiceResponse
from src.application.services import (
    TransactionFactory,
    get_line_engine,
    get_stock_mirror_service,
    get_transaction_factory,
)
from src.application.use_cases.create_invoice import HAMALI_CASH_NOTE
from src.application.use_cases.sale_price import refresh_average_prices
from src.config import get_logger, get_settings
from src.core.entities.inventory import MovementDirection, ReferenceType, StockMovement
from src.core.entities.invoice import Invoice
from src.core.entities.payment import HamaliCashPayment
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces import IInvoiceStore, IPaymentStore, IProductStore
from src.core.services import LineEngine, StockMirrorService

logger = get_logger(__name__)


class UpdateInvoiceUseCase:
    """Edit invoice headers and lines with recompute-on-write."""

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        product_store: IProductStore | None = None,
        payment_store: IPaymentStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        line_engine: LineEngine | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._invoice_store = invoice_store
        self._product_store = product_store
        self._payment_store = payment_store
        self._stock_mirror = stock_mirror
        self._engine = line_engine or get_line_engine()
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

    async def _get_stock_mirror(self) -> StockMirrorService:
        if self._stock_mirror is None:
            self._stock_mirror = await get_stock_mirror_service()
        return self._stock_mirror

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def _load(self, invoice_id: int) -> Invoice:
        store = await self._get_invoice_store()
        invoice = await store.get_invoice(invoice_id)
        if invoice is None:
            raise EntityNotFoundError("invoice", invoice_id)
        return invoice

    async def execute(self, invoice_id: int, request: UpdateInvoiceRequest) -> Invoice:
        """Apply header edits."""
        changes = {
            name: value
            for name, value in request.model_dump(exclude_unset=True).items()
            if value is not None or name == "hamali_mode"
        }
        logger.info("update_invoice_started", invoice_id=invoice_id, fields=sorted(changes))

        async with self._get_transaction()():
            invoice = await self._load(invoice_id)
            previous_date = invoice.invoice_date
            for name, value in changes.items():
                setattr(invoice, name, value)
            invoice = await self._reprice_and_save(
                invoice, {item.id: item.quantity for item in invoice.items}, "bags" in changes
            )

        await self._refresh_prices(invoice, previous_date)
        return invoice

    async def update_item(self, item_id: int, request: UpdateInvoiceItemRequest) -> Invoice:
        """Apply line edits and recompute the owning invoice."""
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        logger.info("update_invoice_item_started", item_id=item_id, fields=sorted(changes))

        store = await self._get_invoice_store()
        async with self._get_transaction()():
            existing = await store.get_item(item_id)
            if existing is None:
                raise EntityNotFoundError("invoice_item", item_id)
            invoice = await self._load(existing.invoice_id)  # type: ignore[arg-type]
            previous = {item.id: item.quantity for item in invoice.items}

            item = next(i for i in invoice.items if i.id == item_id)
            if "weight_breakdown" in changes:
                item.weight_breakdown = list(changes["weight_breakdown"])
                if item.weight_breakdown:
                    # Re-derived from the new breakdown unless given explicitly.
                    item.quantity = 0.0
                    item.bags = None
            if "quantity" in changes:
                item.quantity = changes["quantity"]
            if "unit_price" in changes:
                item.unit_price = changes["unit_price"]
            if "bags" in changes:
                item.bags = changes["bags"]

            invoice = await self._reprice_and_save(invoice, previous, header_bags_given=False)

        await self._refresh_prices(invoice, invoice.invoice_date)
        return invoice

    async def _reprice_and_save(
        self,
        invoice: Invoice,
        previous_quantities: dict[int | None, float],
        header_bags_given: bool,
    ) -> Invoice:
        if not header_bags_given and any(item.bags is not None for item in invoice.items):
            invoice.bags = 0
        self._engine.price_invoice(invoice)

        store = await self._get_invoice_store()
        invoice = await store.update_invoice(invoice)

        mirror = await self._get_stock_mirror()
        for item in invoice.items:
            delta = item.quantity - previous_quantities.get(item.id, item.quantity)
            if abs(delta) <= 1e-9:
                continue
            await mirror.apply(
                StockMovement(
                    product_id=item.product_id,
                    type=MovementDirection.OUT if delta > 0 else MovementDirection.IN,
                    quantity=abs(delta),
                    reason=f"Invoice {invoice.invoice_number} edited",
                    movement_date=invoice.invoice_date,
                    reference_id=invoice.id,
                    reference_type=ReferenceType.INVOICE,
                )
            )

        await self._sync_hamali_cash(invoice)

        logger.info(
            "invoice_recomputed",
            invoice_id=invoice.id,
            subtotal=invoice.subtotal,
            hamali=invoice.hamali_charge_amount,
            grand_total=invoice.grand_total,
        )
        return invoice

    async def _sync_hamali_cash(self, invoice: Invoice) -> None:
        payments = await self._get_payment_store()
        linked = await payments.get_hamali_payment_for_invoice(invoice.id)  # type: ignore[arg-type]

        if not (invoice.hamali_paid_by_cash and invoice.has_hamali):
            if linked is not None:
                await payments.delete_hamali_payment(linked.id)  # type: ignore[arg-type]
                logger.info("hamali_cash_removed", invoice_id=invoice.id, payment_id=linked.id)
            return

        if linked is None:
            await payments.create_hamali_payment(
                HamaliCashPayment(
                    amount=invoice.hamali_charge_amount,
                    payment_date=invoice.invoice_date,
                    customer_id=invoice.customer_id,
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    total_bill_amount=invoice.grand_total,
                    notes=HAMALI_CASH_NOTE,
                )
            )
            return

        linked.amount = invoice.hamali_charge_amount
        linked.payment_date = invoice.invoice_date
        linked.customer_id = invoice.customer_id
        linked.invoice_number = invoice.invoice_number
        linked.total_bill_amount = invoice.grand_total
        await payments.update_hamali_payment(linked)

    async def _refresh_prices(self, invoice: Invoice, *dates) -> None:
        product_ids = [item.product_id for item in invoice.items]
        for day in dict.fromkeys((*dates, invoice.invoice_date)):
            await refresh_average_prices(
                await self._get_invoice_store(),
                await self._get_product_store(),
                self._get_transaction(),
                product_ids,
                day,
                precision=get_settings().ledger.price_precision,
            )

    def to_response(self, invoice: Invoice) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.model_validate(invoice)
