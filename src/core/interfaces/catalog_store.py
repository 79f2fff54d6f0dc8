"""Abstract interfaces for products, vehicles and trading partners."""

from abc import ABC, abstractmethod

from src.core.entities.party import Customer, Vendor
from src.core.entities.product import Product
from src.core.entities.vehicle import Vehicle


class IProductStore(ABC):
    """Product catalog persistence."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def get(self, product_id: int) -> Product | None:
        pass

    @abstractmethod
    async def list_products(self) -> list[Product]:
        pass

    @abstractmethod
    async def list_low_stock(self) -> list[Product]:
        """Products at or below their reorder level."""
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def set_current_stock(self, product_id: int, current_stock: float) -> None:
        """Overwrite the stock mirror value."""
        pass

    @abstractmethod
    async def set_sale_price(self, product_id: int, sale_price: float) -> None:
        pass

    @abstractmethod
    async def delete(self, product_id: int) -> bool:
        pass


class IVehicleStore(ABC):
    """Vehicle persistence."""

    @abstractmethod
    async def create(self, vehicle: Vehicle) -> Vehicle:
        pass

    @abstractmethod
    async def get(self, vehicle_id: int) -> Vehicle | None:
        pass

    @abstractmethod
    async def list_vehicles(self) -> list[Vehicle]:
        pass

    @abstractmethod
    async def update(self, vehicle: Vehicle) -> Vehicle:
        pass

    @abstractmethod
    async def delete(self, vehicle_id: int) -> bool:
        pass


class IVendorStore(ABC):
    """Vendor persistence."""

    @abstractmethod
    async def create(self, vendor: Vendor) -> Vendor:
        pass

    @abstractmethod
    async def get(self, vendor_id: int) -> Vendor | None:
        pass

    @abstractmethod
    async def list_vendors(self) -> list[Vendor]:
        pass

    @abstractmethod
    async def update(self, vendor: Vendor) -> Vendor:
        pass

    @abstractmethod
    async def delete(self, vendor_id: int) -> bool:
        pass


class ICustomerStore(ABC):
    """Customer persistence."""

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        pass

    @abstractmethod
    async def create_many(self, customers: list[Customer]) -> list[Customer]:
        """Bulk import in one transaction."""
        pass

    @abstractmethod
    async def get(self, customer_id: int) -> Customer | None:
        pass

    @abstractmethod
    async def list_customers(self) -> list[Customer]:
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        pass

    @abstractmethod
    async def delete(self, customer_id: int) -> bool:
        pass
