"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from src.config import reset_settings
from src.core.entities import (
    Product,
    ReferenceType,
    StockMovement,
    VehicleInventory,
    VehicleInventoryMovement,
)
from src.core.interfaces import IProductStore, IStockMovementStore, IVehicleInventoryStore
from src.core.services import StockMirrorService, VehicleInventoryService


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temp data dir and drop cached settings between tests."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert results and all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def sqlite_pool(migrated_db: Path) -> AsyncGenerator[Path, None]:
    """Route the global connection pool to the migrated temp database."""
    import src.infrastructure.storage.sqlite.connection as conn_module

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = migrated_db
    mock_settings.storage.pool_size = 1
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield migrated_db
        finally:
            await conn_module.close_pool()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app. Overrides are cleared afterwards."""
    from src.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sample_invoice_payload() -> dict:
    """Invoice body with a weight breakdown line and per-kg hamali."""
    return {
        "invoice_number": "INV-2024-0001",
        "customer_id": 1,
        "invoice_date": "2024-03-10",
        "include_hamali_charge": True,
        "hamali_rate_per_kg": 2.0,
        "items": [
            {"product_id": 1, "unit_price": 20.0, "weight_breakdown": [12, 15, 9]},
            {"product_id": 2, "quantity": 10, "unit_price": 30.0},
        ],
    }


# --- In-memory stores for service and use case tests ---


class InMemoryProductStore(IProductStore):
    def __init__(self):
        self.products: dict[int, Product] = {}

    async def create(self, product: Product) -> Product:
        product.id = len(self.products) + 1
        self.products[product.id] = product
        return product

    async def get(self, product_id: int) -> Product | None:
        return self.products.get(product_id)

    async def list_products(self) -> list[Product]:
        return list(self.products.values())

    async def list_low_stock(self) -> list[Product]:
        return [p for p in self.products.values() if p.is_low_stock]

    async def update(self, product: Product) -> Product:
        self.products[product.id] = product  # type: ignore[index]
        return product

    async def set_current_stock(self, product_id: int, current_stock: float) -> None:
        self.products[product_id].current_stock = current_stock

    async def set_sale_price(self, product_id: int, sale_price: float) -> None:
        self.products[product_id].sale_price = sale_price

    async def delete(self, product_id: int) -> bool:
        return self.products.pop(product_id, None) is not None


class InMemoryMovementStore(IStockMovementStore):
    def __init__(self):
        self.movements: list[StockMovement] = []

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        movement.id = len(self.movements) + 1
        self.movements.append(movement)
        return movement

    async def list_movements(self, start_date=None, end_date=None, product_id=None):
        return [
            m for m in self.movements if product_id is None or m.product_id == product_id
        ]

    async def list_by_references(
        self, reference_type: ReferenceType, reference_ids: list[int]
    ) -> list[StockMovement]:
        return [
            m
            for m in self.movements
            if m.reference_type == reference_type and m.reference_id in reference_ids
        ]


class InMemoryVehicleInventoryStore(IVehicleInventoryStore):
    def __init__(self):
        self.rows: dict[tuple[int, int], VehicleInventory] = {}
        self.movements: list[VehicleInventoryMovement] = []

    async def get_inventory(self, vehicle_id: int, product_id: int):
        return self.rows.get((vehicle_id, product_id))

    async def upsert_quantity(self, vehicle_id: int, product_id: int, quantity: float):
        row = VehicleInventory(vehicle_id=vehicle_id, product_id=product_id, quantity=quantity)
        self.rows[(vehicle_id, product_id)] = row
        return row

    async def list_inventory(self, vehicle_id: int | None = None):
        return [r for r in self.rows.values() if vehicle_id is None or r.vehicle_id == vehicle_id]

    async def add_movement(self, movement: VehicleInventoryMovement):
        movement.id = len(self.movements) + 1
        self.movements.append(movement)
        return movement

    async def list_movements(self, vehicle_id=None, product_id=None):
        return [
            m
            for m in self.movements
            if (vehicle_id is None or m.vehicle_id == vehicle_id)
            and (product_id is None or m.product_id == product_id)
        ]


@pytest.fixture
def products() -> InMemoryProductStore:
    store = InMemoryProductStore()
    store.products[1] = Product(id=1, name="Tomato", purchase_price=18.0, sale_price=25.0)
    store.products[2] = Product(id=2, name="Onion", purchase_price=12.0, sale_price=16.0)
    return store


@pytest.fixture
def movements() -> InMemoryMovementStore:
    return InMemoryMovementStore()


@pytest.fixture
def vehicle_store() -> InMemoryVehicleInventoryStore:
    return InMemoryVehicleInventoryStore()


@pytest.fixture
def mirror(products, movements) -> StockMirrorService:
    return StockMirrorService(products, movements)


@pytest.fixture
def strict_mirror(products, movements) -> StockMirrorService:
    return StockMirrorService(products, movements, policy="strict")


@pytest.fixture
def vehicles(vehicle_store, mirror) -> VehicleInventoryService:
    return VehicleInventoryService(vehicle_store, mirror)
