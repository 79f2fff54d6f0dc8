"""Best-effort refresh of the daily weighted average sale price."""

from collections.abc import Iterable
from datetime import date

from src.application.services import TransactionFactory
from src.config import get_logger
from src.core.interfaces import IInvoiceStore, IProductStore
from src.core.services import average_sale_price

logger = get_logger(__name__)


async def refresh_average_prices(
    invoice_store: IInvoiceStore,
    product_store: IProductStore,
    transaction: TransactionFactory,
    product_ids: Iterable[int],
    invoice_date: date,
    precision: int = 2,
) -> dict[int, float]:
    """
    Set each product's sale price to its weighted average for ``invoice_date``.

    Runs after the invoice write has committed, one transaction per product.
    A failure is logged and never propagates.
    """
    updated: dict[int, float] = {}
    for product_id in dict.fromkeys(product_ids):
        try:
            async with transaction():
                total, quantity = await invoice_store.product_day_totals(
                    product_id, invoice_date
                )
                price = average_sale_price(total, quantity, precision)
                if price is None:
                    continue
                await product_store.set_sale_price(product_id, price)
        except Exception as e:
            logger.warning(
                "average_price_update_failed",
                product_id=product_id,
                invoice_date=invoice_date.isoformat(),
                error=str(e),
            )
            continue

        updated[product_id] = price
        logger.info(
            "average_price_updated",
            product_id=product_id,
            invoice_date=invoice_date.isoformat(),
            sale_price=price,
        )
    return updated
