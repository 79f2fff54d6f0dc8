"""Trading partner entities: vendors supply stock, customers buy it."""

from pydantic import BaseModel


class Vendor(BaseModel):
    """Supplier or farmer that sells produce to the business."""

    id: int | None = None
    name: str
    phone: str
    address: str | None = None
    email: str | None = None


class Customer(BaseModel):
    """Buyer of produce, billed through invoices."""

    id: int | None = None
    name: str
    phone: str
    address: str | None = None
    email: str | None = None
