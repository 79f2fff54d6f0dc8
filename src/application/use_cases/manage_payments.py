"""Payment use cases: vendor and customer payments, hamali cash."""

from datetime import date

from src.application.dto.requests import (
    CustomerPaymentRequest,
    CustomerPaymentUpdateRequest,
    HamaliCashRequest,
    VendorPaymentRequest,
    VendorPaymentUpdateRequest,
)
from src.application.services import TransactionFactory, get_transaction_factory
from src.application.use_cases.references import require_reference
from src.config import get_logger
from src.core.entities.payment import CustomerPayment, HamaliCashPayment, VendorPayment
from src.core.exceptions import EntityNotFoundError
from src.core.interfaces import (
    ICustomerStore,
    IInvoiceStore,
    IPaymentStore,
    IPurchaseStore,
    IVendorStore,
)

logger = get_logger(__name__)


class _InvoiceLookup:
    def __init__(self, store: IInvoiceStore):
        self._store = store

    async def get(self, invoice_id: int):
        return await self._store.get_invoice(invoice_id)


class _PurchaseLookup:
    def __init__(self, store: IPurchaseStore):
        self._store = store

    async def get(self, purchase_id: int):
        return await self._store.get_purchase(purchase_id)


class ManagePaymentsUseCase:
    """
    Record and edit payments.

    Payments only move balances; they never touch stock. Every party or
    document a payment points at must exist.
    """

    def __init__(
        self,
        payment_store: IPaymentStore | None = None,
        vendor_store: IVendorStore | None = None,
        customer_store: ICustomerStore | None = None,
        purchase_store: IPurchaseStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._payment_store = payment_store
        self._vendor_store = vendor_store
        self._customer_store = customer_store
        self._purchase_store = purchase_store
        self._invoice_store = invoice_store
        self._transaction = transaction

    async def _get_payment_store(self) -> IPaymentStore:
        if self._payment_store is None:
            from src.infrastructure.storage.sqlite import get_payment_store

            self._payment_store = await get_payment_store()
        return self._payment_store

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

    async def _get_purchase_store(self) -> IPurchaseStore:
        if self._purchase_store is None:
            from src.infrastructure.storage.sqlite import get_purchase_store

            self._purchase_store = await get_purchase_store()
        return self._purchase_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    async def _check_vendor_payment(self, payment: VendorPayment) -> None:
        await require_reference(await self._get_vendor_store(), "vendor", payment.vendor_id)
        await require_reference(
            _PurchaseLookup(await self._get_purchase_store()), "purchase", payment.purchase_id
        )

    async def _check_customer_payment(self, payment: CustomerPayment) -> None:
        await require_reference(await self._get_customer_store(), "customer", payment.customer_id)
        await require_reference(
            _InvoiceLookup(await self._get_invoice_store()), "invoice", payment.invoice_id
        )

    # --- Vendor payments ---

    async def create_vendor_payment(self, request: VendorPaymentRequest) -> VendorPayment:
        payment = VendorPayment(
            **request.model_dump(exclude={"payment_date"}),
            payment_date=request.payment_date or date.today(),
        )
        async with self._get_transaction()():
            await self._check_vendor_payment(payment)
            return await (await self._get_payment_store()).create_vendor_payment(payment)

    async def update_vendor_payment(
        self, payment_id: int, request: VendorPaymentUpdateRequest
    ) -> VendorPayment:
        store = await self._get_payment_store()
        async with self._get_transaction()():
            payment = await store.get_vendor_payment(payment_id)
            if payment is None:
                raise EntityNotFoundError("vendor_payment", payment_id)
            payment = payment.model_copy(update=_updates(request))
            await self._check_vendor_payment(payment)
            return await store.update_vendor_payment(payment)

    # --- Customer payments ---

    async def create_customer_payment(self, request: CustomerPaymentRequest) -> CustomerPayment:
        payment = CustomerPayment(
            **request.model_dump(exclude={"payment_date"}),
            payment_date=request.payment_date or date.today(),
        )
        async with self._get_transaction()():
            await self._check_customer_payment(payment)
            return await (await self._get_payment_store()).create_customer_payment(payment)

    async def update_customer_payment(
        self, payment_id: int, request: CustomerPaymentUpdateRequest
    ) -> CustomerPayment:
        store = await self._get_payment_store()
        async with self._get_transaction()():
            payment = await store.get_customer_payment(payment_id)
            if payment is None:
                raise EntityNotFoundError("customer_payment", payment_id)
            payment = payment.model_copy(update=_updates(request))
            await self._check_customer_payment(payment)
            return await store.update_customer_payment(payment)

    # --- Hamali cash ---

    async def create_hamali_payment(self, request: HamaliCashRequest) -> HamaliCashPayment:
        payment = HamaliCashPayment(
            **request.model_dump(exclude={"payment_date"}),
            payment_date=request.payment_date or date.today(),
        )
        async with self._get_transaction()():
            await require_reference(
                await self._get_customer_store(), "customer", payment.customer_id
            )
            await require_reference(
                _InvoiceLookup(await self._get_invoice_store()), "invoice", payment.invoice_id
            )
            payment = await (await self._get_payment_store()).create_hamali_payment(payment)

        logger.info("hamali_cash_recorded", payment_id=payment.id, amount=payment.amount)
        return payment


def _updates(request) -> dict:
    """Fields explicitly set on a partial update. Links may be cleared with null."""
    nullable = {"purchase_id", "invoice_id", "notes"}
    return {
        name: value
        for name, value in request.model_dump(exclude_unset=True).items()
        if value is not None or name in nullable
    }
