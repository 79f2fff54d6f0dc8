"""Create Invoice Use Case: line engine, stock out, hamali cash, average price."""

from dataclasses import dataclass, field
from datetime import date

from src.application.dto.requests import CreateInvoiceRequest
from src.application.dto.responses import (
    CreateInvoiceResponse,
    InvoiceResponse,
    VehicleShortfallResponse,
)
from src.application.services import (
    TransactionFactory,
    get_line_engine,
    get_stock_mirror_service,
    get_transaction_factory,
    get_vehicle_inventory_service,
)
from src.application.use_cases.references import require_products, require_reference
from src.application.use_cases.sale_price import refresh_average_prices
from src.config import get_logger, get_settings
from src.core.entities.inventory import MovementDirection, ReferenceType, StockMovement
from src.core.entities.invoice import Invoice, InvoiceItem
from src.core.entities.payment import HamaliCashPayment
from src.core.exceptions import DuplicateInvoiceNumberError
from src.core.interfaces import (
    ICustomerStore,
    IInvoiceStore,
    IPaymentStore,
    IProductStore,
    IVehicleStore,
    IVendorStore,
)
from src.core.services import (
    LineEngine,
    StockMirrorService,
    VehicleDeduction,
    VehicleInventoryService,
)

logger = get_logger(__name__)

HAMALI_CASH_NOTE = "Hamali paid by cash on invoice"


@dataclass
class CreateInvoiceResult:
    """Result of creating an invoice."""

    invoice: Invoice
    vehicle_shortfalls: list[VehicleDeduction] = field(default_factory=list)
    hamali_payment: HamaliCashPayment | None = None
    sale_prices: dict[int, float] = field(default_factory=dict)


class CreateInvoiceUseCase:
    """
    Bill a customer.

    The invoice, its items, the stock movements and any hamali cash record
    commit together. The average sale price refresh runs afterwards and
    never fails the invoice.
    """

    def __init__(
        self,
        invoice_store: IInvoiceStore | None = None,
        customer_store: ICustomerStore | None = None,
        vendor_store: IVendorStore | None = None,
        vehicle_store: IVehicleStore | None = None,
        product_store: IProductStore | None = None,
        payment_store: IPaymentStore | None = None,
        stock_mirror: StockMirrorService | None = None,
        vehicle_inventory: VehicleInventoryService | None = None,
        line_engine: LineEngine | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._invoice_store = invoice_store
        self._customer_store = customer_store
        self._vendor_store = vendor_store
        self._vehicle_store = vehicle_store
        self._product_store = product_store
        self._payment_store = payment_store
        self._stock_mirror = stock_mirror
        self._vehicle_inventory = vehicle_inventory
        self._engine = line_engine or get_line_engine()
        self._transaction = transaction

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from src.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_customer_store(self) -> ICustomerStore:
        if self._customer_store is None:
            from src.infrastructure.storage.sqlite import get_customer_store

            self._customer_store = await get_customer_store()
        return self._customer_store

    async def _get_vendor_store(self) -> IVendorStore:
        if self._vendor_store is None:
            from src.infrastructure.storage.sqlite import get_vendor_store

            self._vendor_store = await get_vendor_store()
        return self._vendor_store

    async def _get_vehicle_store(self) -> IVehicleStore:
        if self._vehicle_store is None:
            from src.infrastructure.storage.sqlite import get_vehicle_store

            self._vehicle_store = await get_vehicle_store()
        return self._vehicle_store

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

    async def _get_vehicle_inventory(self) -> VehicleInventoryService:
        if self._vehicle_inventory is None:
            self._vehicle_inventory = await get_vehicle_inventory_service(
                await self._get_stock_mirror()
            )
        return self._vehicle_inventory

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = get_transaction_factory()
        return self._transaction

    def _build_invoice(self, request: CreateInvoiceRequest) -> Invoice:
        ledger_settings = get_settings().ledger
        rate_per_kg = (
            request.hamali_rate_per_kg
            if request.hamali_rate_per_kg is not None
            else ledger_settings.default_hamali_rate_per_kg
        )
        return Invoice(
            invoice_number=request.invoice_number.strip(),
            customer_id=request.customer_id,
            vehicle_id=request.vehicle_id,
            vendor_id=request.vendor_id,
            invoice_date=request.invoice_date or date.today(),
            bags=request.bags,
            include_hamali_charge=request.include_hamali_charge,
            hamali_mode=request.hamali_mode,
            hamali_rate_per_kg=rate_per_kg,
            hamali_rate_per_bag=request.hamali_rate_per_bag,
            hamali_paid_by_cash=request.hamali_paid_by_cash,
            status=request.status,
            items=[
                InvoiceItem(
                    product_id=item.product_id,
                    vehicle_id=request.vehicle_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    bags=item.bags,
                    weight_breakdown=list(item.weight_breakdown),
                )
                for item in request.items
            ],
        )

    async def execute(self, request: CreateInvoiceRequest) -> CreateInvoiceResult:
        """Execute create invoice use case."""
        logger.info(
            "create_invoice_started",
            invoice_number=request.invoice_number,
            customer_id=request.customer_id,
            vehicle_id=request.vehicle_id,
            items=len(request.items),
        )

        invoice = self._engine.price_invoice(self._build_invoice(request))
        result = CreateInvoiceResult(invoice=invoice)
        invoice_store = await self._get_invoice_store()

        async with self._get_transaction()():
            await require_reference(
                await self._get_customer_store(), "customer", invoice.customer_id
            )
            await require_reference(await self._get_vendor_store(), "vendor", invoice.vendor_id)
            await require_reference(
                await self._get_vehicle_store(), "vehicle", invoice.vehicle_id
            )
            await require_products(
                await self._get_product_store(), [i.product_id for i in invoice.items]
            )

            existing = await invoice_store.get_by_number(invoice.invoice_number)
            if existing is not None:
                raise DuplicateInvoiceNumberError(invoice.invoice_number, existing.id)

            invoice = await invoice_store.create_invoice(invoice)
            result.invoice = invoice
            reason = f"Invoice {invoice.invoice_number}"

            for item in invoice.items:
                if item.vehicle_id is not None:
                    vehicles = await self._get_vehicle_inventory()
                    deduction = await vehicles.deduct(
                        item.vehicle_id,
                        item.product_id,
                        item.quantity,
                        movement_date=invoice.invoice_date,
                        reference_id=invoice.id,
                        reference_type=ReferenceType.INVOICE,
                        reason=reason,
                    )
                    if deduction.insufficient:
                        result.vehicle_shortfalls.append(deduction)
                else:
                    mirror = await self._get_stock_mirror()
                    await mirror.apply(
                        StockMovement(
                            product_id=item.product_id,
                            type=MovementDirection.OUT,
                            quantity=item.quantity,
                            reason=reason,
                            movement_date=invoice.invoice_date,
                            reference_id=invoice.id,
                            reference_type=ReferenceType.INVOICE,
                        )
                    )

            if invoice.hamali_paid_by_cash and invoice.has_hamali:
                payments = await self._get_payment_store()
                result.hamali_payment = await payments.create_hamali_payment(
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

        result.sale_prices = await refresh_average_prices(
            invoice_store,
            await self._get_product_store(),
            self._get_transaction(),
            [item.product_id for item in invoice.items],
            invoice.invoice_date,
            precision=get_settings().ledger.price_precision,
        )

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            grand_total=invoice.grand_total,
            hamali=invoice.hamali_charge_amount,
            shortfalls=len(result.vehicle_shortfalls),
        )
        return result

    def to_response(self, result: CreateInvoiceResult) -> CreateInvoiceResponse:
        """Convert result to API response."""
        return CreateInvoiceResponse(
            invoice=InvoiceResponse.model_validate(result.invoice),
            vehicle_shortfalls=[
                VehicleShortfallResponse.model_validate(s) for s in result.vehicle_shortfalls
            ],
            hamali_cash_payment_id=result.hamali_payment.id if result.hamali_payment else None,
        )
