"""Vehicle entity: a mobile stock location."""

from pydantic import BaseModel


class Vehicle(BaseModel):
    """Truck or cart carrying loaded stock for field sales."""

    id: int | None = None
    number: str
    type: str = "truck"
    capacity: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
    entry_date: str | None = None
    vendor_id: int | None = None  # owning vendor
    shop: int = 45  # site/branch tag
    starting_weight: float | None = None  # baseline for load reconciliation
    starting_bags: int | None = None
    total_weight_gain: float = 0.0
    total_weight_loss: float = 0.0
