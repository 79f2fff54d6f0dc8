"""
Invoice/purchase line engine.

Layer-pure pricing rules shared by every document that carries lines:
line totals, weight breakdown to quantity/bags derivation, the hamali
surcharge and grand totals. Accumulation is done in full precision;
rounding belongs to presentation.
"""

import math
from collections.abc import Sequence

from src.core.entities.invoice import HamaliMode, Invoice, InvoiceItem
from src.core.entities.purchase import Purchase, PurchaseItem
from src.core.entities.vendor_return import VendorReturn, VendorReturnItem
from src.core.exceptions import ValidationError

PricedLine = PurchaseItem | VendorReturnItem | InvoiceItem


def _check_non_negative(field: str, value: float) -> None:
    if value is None or math.isnan(value) or value < 0:
        raise ValidationError(field, "must be zero or greater", value)


def _check_positive(field: str, value: float) -> None:
    if value is None or math.isnan(value) or value <= 0:
        raise ValidationError(field, "must be greater than zero", value)


class LineEngine:
    """
    Central pricing for purchases, invoices and vendor returns.

    The quantity/weight breakdown/bags cross-field rule is enforced here
    and nowhere else, so that every write path (create and edit) derives
    the same numbers.
    """

    def resolve_weight_breakdown(self, item: InvoiceItem, index: int = 0) -> InvoiceItem:
        """
        Derive quantity and bags from individual bag weights.

        A supplied non-zero quantity or bag count that disagrees with the
        breakdown is rejected instead of silently overwritten.
        """
        if not item.weight_breakdown:
            return item

        for weight in item.weight_breakdown:
            _check_positive(f"items[{index}].weight_breakdown", weight)

        derived_quantity = math.fsum(item.weight_breakdown)
        derived_bags = len(item.weight_breakdown)

        if item.quantity and not math.isclose(
            item.quantity, derived_quantity, rel_tol=1e-9, abs_tol=1e-9
        ):
            raise ValidationError(
                f"items[{index}].quantity",
                f"does not match weight breakdown sum {derived_quantity}",
                item.quantity,
            )
        if item.bags is not None and item.bags != derived_bags:
            raise ValidationError(
                f"items[{index}].bags",
                f"does not match weight breakdown length {derived_bags}",
                item.bags,
            )

        item.quantity = derived_quantity
        item.bags = derived_bags
        return item

    def price_lines(self, items: Sequence[PricedLine]) -> float:
        """Set ``total = quantity * unit_price`` on each line and return the subtotal."""
        if not items:
            raise ValidationError("items", "at least one line item is required")

        for index, item in enumerate(items):
            _check_positive(f"items[{index}].quantity", item.quantity)
            _check_non_negative(f"items[{index}].unit_price", item.unit_price)
            item.total = item.quantity * item.unit_price

        return math.fsum(item.total for item in items)

    def resolve_hamali_mode(self, invoice: Invoice) -> HamaliMode:
        if invoice.hamali_mode is not None:
            return invoice.hamali_mode
        if invoice.hamali_rate_per_bag > 0:
            return HamaliMode.PER_BAG
        return HamaliMode.PER_KG

    def compute_hamali(self, invoice: Invoice) -> float:
        """Hamali charge for an already weighed invoice."""
        _check_non_negative("hamali_rate_per_kg", invoice.hamali_rate_per_kg)
        _check_non_negative("hamali_rate_per_bag", invoice.hamali_rate_per_bag)

        if not invoice.include_hamali_charge:
            return 0.0

        if self.resolve_hamali_mode(invoice) == HamaliMode.PER_BAG:
            return invoice.bags * invoice.hamali_rate_per_bag
        return invoice.total_kg_weight * invoice.hamali_rate_per_kg

    def _resolve_bags(self, invoice: Invoice) -> int:
        line_bags = [item.bags for item in invoice.items if item.bags is not None]
        if not line_bags:
            if invoice.bags < 0:
                raise ValidationError("bags", "must be zero or greater", invoice.bags)
            return invoice.bags

        derived = sum(line_bags)
        if invoice.bags and invoice.bags != derived:
            raise ValidationError(
                "bags", f"does not match line bag count {derived}", invoice.bags
            )
        return derived

    def price_invoice(self, invoice: Invoice) -> Invoice:
        """Derive every computed field of an invoice in place."""
        for index, item in enumerate(invoice.items):
            self.resolve_weight_breakdown(item, index)

        invoice.subtotal = self.price_lines(invoice.items)
        invoice.bags = self._resolve_bags(invoice)
        invoice.total_kg_weight = math.fsum(item.quantity for item in invoice.items)
        invoice.hamali_charge_amount = self.compute_hamali(invoice)
        invoice.grand_total = invoice.subtotal + invoice.hamali_charge_amount
        return invoice

    def price_purchase(self, purchase: Purchase) -> Purchase:
        purchase.total_amount = self.price_lines(purchase.items)
        return purchase

    def price_return(self, vendor_return: VendorReturn) -> VendorReturn:
        for index, item in enumerate(vendor_return.items):
            if not item.reason or not item.reason.strip():
                raise ValidationError(f"items[{index}].reason", "is required")
        vendor_return.total_amount = self.price_lines(vendor_return.items)
        return vendor_return


def average_sale_price(total: float, quantity: float, precision: int = 2) -> float | None:
    """
    Daily weighted average sale price, rounded for storage on the product.

    Returns None when nothing was sold so the caller keeps the old price.
    """
    if quantity <= 0:
        return None
    return round(total / quantity, precision)
