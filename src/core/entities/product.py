"""Product catalog entity."""

from pydantic import BaseModel


class Product(BaseModel):
    """
    A tradeable item.

    ``current_stock`` is a denormalized counter maintained by the stock
    mirror; it never goes below zero. ``sale_price`` is refreshed to the
    daily weighted average after each invoice.
    """

    id: int | None = None
    name: str
    unit: str = "kg"
    purchase_price: float = 0.0
    sale_price: float = 0.0
    current_stock: float = 0.0
    reorder_level: float = 10.0

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.reorder_level

    @property
    def margin(self) -> float:
        return self.sale_price - self.purchase_price
