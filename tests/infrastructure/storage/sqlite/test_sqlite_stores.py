"""Tests for the SQLite stores against a migrated temp database."""

from datetime import date

import pytest

from src.core.entities import (
    Customer,
    CustomerPayment,
    HamaliCashPayment,
    HamaliMode,
    Invoice,
    InvoiceItem,
    MovementDirection,
    Product,
    Purchase,
    PurchaseItem,
    ReferenceType,
    StockMovement,
    Vehicle,
    VehicleInventoryMovement,
    VehicleMovementType,
    Vendor,
    VendorPayment,
    VendorReturn,
    VendorReturnItem,
)
from src.core.exceptions import (
    DuplicateInvoiceNumberError,
    EntityInUseError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.interfaces import InvoiceFilter
from src.infrastructure.storage.sqlite import (
    SQLiteAdminStore,
    SQLiteCustomerStore,
    SQLiteInvoiceStore,
    SQLitePaymentStore,
    SQLiteProductStore,
    SQLitePurchaseStore,
    SQLiteStockMovementStore,
    SQLiteVehicleInventoryStore,
    SQLiteVehicleStore,
    SQLiteVendorReturnStore,
    SQLiteVendorStore,
)


@pytest.fixture
async def seeded(sqlite_pool) -> dict[str, int]:
    """One vendor, customer, vehicle and two products."""
    vendor = await SQLiteVendorStore().create(Vendor(name="Ramesh Farms", phone="9000000001"))
    customer = await SQLiteCustomerStore().create(
        Customer(name="Sharma Traders", phone="9800000001")
    )
    vehicle = await SQLiteVehicleStore().create(
        Vehicle(number="MH12AB1234", vendor_id=vendor.id, shop=12)
    )
    products = SQLiteProductStore()
    tomato = await products.create(Product(name="Tomato", purchase_price=18, sale_price=25))
    onion = await products.create(Product(name="Onion", purchase_price=12, sale_price=16))
    return {
        "vendor": vendor.id,
        "customer": customer.id,
        "vehicle": vehicle.id,
        "tomato": tomato.id,
        "onion": onion.id,
    }


def _invoice(seeded: dict[str, int], number: str, invoice_date: date, **kwargs) -> Invoice:
    return Invoice(
        invoice_number=number,
        customer_id=seeded["customer"],
        invoice_date=invoice_date,
        items=[
            InvoiceItem(
                product_id=seeded["tomato"],
                quantity=36,
                unit_price=20,
                total=720,
                bags=3,
                weight_breakdown=[12, 15, 9],
            ),
            InvoiceItem(product_id=seeded["onion"], quantity=10, unit_price=30, total=300),
        ],
        subtotal=1020,
        grand_total=1020,
        **kwargs,
    )


class TestProductStore:
    async def test_update_leaves_stock_alone(self, seeded):
        store = SQLiteProductStore()
        await store.set_current_stock(seeded["tomato"], 40)

        product = await store.get(seeded["tomato"])
        product.current_stock = 999
        product.sale_price = 27
        await store.update(product)

        stored = await store.get(seeded["tomato"])
        assert stored.current_stock == 40
        assert stored.sale_price == 27

    async def test_set_stock_on_missing_product(self, seeded):
        with pytest.raises(EntityNotFoundError):
            await SQLiteProductStore().set_current_stock(999, 1)

    async def test_low_stock_listing(self, seeded):
        store = SQLiteProductStore()
        await store.set_current_stock(seeded["onion"], 50)

        low = await store.list_low_stock()

        assert [p.name for p in low] == ["Tomato"]

    async def test_delete_referenced_product_is_in_use(self, seeded):
        await SQLiteStockMovementStore().add_movement(
            StockMovement(
                product_id=seeded["tomato"], type=MovementDirection.IN, quantity=5, reason="count"
            )
        )

        with pytest.raises(EntityInUseError):
            await SQLiteProductStore().delete(seeded["tomato"])

    async def test_delete_unreferenced_product(self, seeded):
        store = SQLiteProductStore()

        assert await store.delete(seeded["onion"]) is True
        assert await store.get(seeded["onion"]) is None


class TestPartyStores:
    async def test_vendor_in_use_by_vehicle(self, seeded):
        with pytest.raises(EntityInUseError):
            await SQLiteVendorStore().delete(seeded["vendor"])

    async def test_customer_bulk_create(self, seeded):
        store = SQLiteCustomerStore()

        created = await store.create_many(
            [Customer(name="Gupta Stores", phone="1"), Customer(name="Patel Mart", phone="2")]
        )

        assert all(c.id is not None for c in created)
        assert len(await store.list_customers()) == 3


class TestInvoiceStore:
    async def test_round_trip_keeps_breakdown_and_hamali(self, seeded):
        store = SQLiteInvoiceStore()
        created = await store.create_invoice(
            _invoice(
                seeded,
                "INV-1",
                date(2024, 3, 10),
                include_hamali_charge=True,
                hamali_mode=HamaliMode.PER_KG,
                hamali_charge_amount=92,
            )
        )

        invoice = await store.get_invoice(created.id)

        assert invoice.hamali_mode == HamaliMode.PER_KG
        assert invoice.include_hamali_charge is True
        assert invoice.items[0].weight_breakdown == [12, 15, 9]
        assert invoice.items[1].weight_breakdown == []
        assert (await store.get_by_number("INV-1")).id == created.id

    async def test_duplicate_number(self, seeded):
        store = SQLiteInvoiceStore()
        await store.create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 10)))

        with pytest.raises(DuplicateInvoiceNumberError):
            await store.create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 11)))
        _, total = await store.list_invoices()
        assert total == 1

    async def test_list_newest_first_with_filters_and_paging(self, seeded):
        store = SQLiteInvoiceStore()
        for day in (1, 5, 9):
            await store.create_invoice(
                _invoice(seeded, f"INV-{day}", date(2024, 3, day), vehicle_id=seeded["vehicle"])
            )
        await store.create_invoice(_invoice(seeded, "INV-X", date(2024, 3, 7)))

        invoices, total = await store.list_invoices(InvoiceFilter(shop=12, limit=2))
        assert total == 3
        assert [i.invoice_number for i in invoices] == ["INV-9", "INV-5"]

        invoices, total = await store.list_invoices(
            InvoiceFilter(start_date=date(2024, 3, 5), end_date=date(2024, 3, 8))
        )
        assert total == 2
        assert [i.invoice_number for i in invoices] == ["INV-X", "INV-5"]

    async def test_update_rewrites_items(self, seeded):
        store = SQLiteInvoiceStore()
        invoice = await store.create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 10)))

        invoice.items[0].weight_breakdown = [12, 15, 9, 10]
        invoice.items[0].quantity = 46
        invoice.items[0].total = 920
        await store.update_invoice(invoice)

        item = await store.get_item(invoice.items[0].id)
        assert item.quantity == 46
        assert item.weight_breakdown == [12, 15, 9, 10]

    async def test_update_missing_invoice(self, seeded):
        invoice = _invoice(seeded, "INV-1", date(2024, 3, 10))
        invoice.id = 404

        with pytest.raises(EntityNotFoundError):
            await SQLiteInvoiceStore().update_invoice(invoice)

    async def test_delete_cascades_items(self, seeded):
        store = SQLiteInvoiceStore()
        invoice = await store.create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 10)))

        assert await store.delete_invoices([invoice.id, 999]) == 1
        assert await store.list_items() == []

    async def test_product_day_totals(self, seeded):
        store = SQLiteInvoiceStore()
        await store.create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 10)))
        await store.create_invoice(_invoice(seeded, "INV-2", date(2024, 3, 10)))
        await store.create_invoice(_invoice(seeded, "INV-3", date(2024, 3, 11)))

        revenue, quantity = await store.product_day_totals(seeded["tomato"], date(2024, 3, 10))

        assert revenue == 1440
        assert quantity == 72


class TestPurchaseAndReturnStores:
    async def test_purchase_with_items(self, seeded):
        store = SQLitePurchaseStore()
        purchase = await store.create_purchase(
            Purchase(
                vendor_id=seeded["vendor"],
                total_amount=1000,
                items=[
                    PurchaseItem(product_id=seeded["tomato"], quantity=50, unit_price=20, total=1000)
                ],
            )
        )

        fetched = await store.get_purchase(purchase.id)
        assert fetched.total_amount == 1000
        assert fetched.items[0].quantity == 50
        assert [p.id for p in await store.list_purchases(vendor_id=seeded["vendor"])] == [
            purchase.id
        ]

    async def test_vendor_return_with_items(self, seeded):
        store = SQLiteVendorReturnStore()
        vendor_return = await store.create_return(
            VendorReturn(
                vendor_id=seeded["vendor"],
                total_amount=100,
                items=[
                    VendorReturnItem(
                        product_id=seeded["tomato"],
                        quantity=5,
                        unit_price=20,
                        total=100,
                        reason="Damaged",
                    )
                ],
            )
        )

        fetched = await store.get_return(vendor_return.id)
        assert fetched.items[0].reason == "Damaged"
        assert len(await store.list_returns(vendor_id=seeded["vendor"])) == 1


class TestInventoryStores:
    async def test_vehicle_inventory_upsert_keeps_one_row(self, seeded):
        store = SQLiteVehicleInventoryStore()

        first = await store.upsert_quantity(seeded["vehicle"], seeded["tomato"], 50)
        second = await store.upsert_quantity(seeded["vehicle"], seeded["tomato"], 30)

        assert first.id == second.id
        assert second.quantity == 30
        assert len(await store.list_inventory(seeded["vehicle"])) == 1

    async def test_vehicle_movements_filter(self, seeded):
        store = SQLiteVehicleInventoryStore()
        events = (
            ("tomato", VehicleMovementType.LOAD),
            ("onion", VehicleMovementType.LOAD),
            ("tomato", VehicleMovementType.SALE),
        )
        for product_key, kind in events:
            await store.add_movement(
                VehicleInventoryMovement(
                    vehicle_id=seeded["vehicle"],
                    product_id=seeded[product_key],
                    type=kind,
                    quantity=10,
                )
            )

        movements = await store.list_movements(seeded["vehicle"], seeded["tomato"])

        assert [m.type for m in movements] == [VehicleMovementType.LOAD, VehicleMovementType.SALE]
        assert sum(m.signed_quantity for m in movements) == 0

    async def test_stock_movements_by_reference(self, seeded):
        store = SQLiteStockMovementStore()
        for reference_id in (1, 2, 3):
            await store.add_movement(
                StockMovement(
                    product_id=seeded["tomato"],
                    type=MovementDirection.OUT,
                    quantity=reference_id,
                    reason="Sale",
                    reference_id=reference_id,
                    reference_type=ReferenceType.INVOICE,
                )
            )
        await store.add_movement(
            StockMovement(
                product_id=seeded["tomato"],
                type=MovementDirection.IN,
                quantity=9,
                reason="Purchase",
                reference_id=1,
                reference_type=ReferenceType.PURCHASE,
            )
        )

        movements = await store.list_by_references(ReferenceType.INVOICE, [1, 3])

        assert [m.quantity for m in movements] == [1, 3]
        assert await store.list_by_references(ReferenceType.INVOICE, []) == []

    async def test_stock_movements_date_window(self, seeded):
        store = SQLiteStockMovementStore()
        for day in (1, 15, 30):
            await store.add_movement(
                StockMovement(
                    product_id=seeded["onion"],
                    type=MovementDirection.IN,
                    quantity=day,
                    reason="count",
                    movement_date=date(2024, 3, day),
                )
            )

        movements = await store.list_movements(date(2024, 3, 2), date(2024, 3, 30))

        assert [m.quantity for m in movements] == [15, 30]


class TestPaymentStore:
    async def test_detach_invoices_keeps_payments(self, seeded):
        invoice = await SQLiteInvoiceStore().create_invoice(
            _invoice(seeded, "INV-1", date(2024, 3, 10))
        )
        payments = SQLitePaymentStore()
        customer_payment = await payments.create_customer_payment(
            CustomerPayment(customer_id=seeded["customer"], invoice_id=invoice.id, amount=500)
        )
        hamali = await payments.create_hamali_payment(
            HamaliCashPayment(amount=92, invoice_id=invoice.id, invoice_number="INV-1")
        )

        await payments.detach_invoices([invoice.id])
        await SQLiteInvoiceStore().delete_invoices([invoice.id])

        assert (await payments.get_customer_payment(customer_payment.id)).invoice_id is None
        kept = await payments.list_hamali_payments()
        assert [p.id for p in kept] == [hamali.id]
        assert kept[0].invoice_id is None

    async def test_hamali_payment_for_invoice(self, seeded):
        invoice = await SQLiteInvoiceStore().create_invoice(
            _invoice(seeded, "INV-1", date(2024, 3, 10))
        )
        payments = SQLitePaymentStore()
        await payments.create_hamali_payment(HamaliCashPayment(amount=30))
        linked = await payments.create_hamali_payment(
            HamaliCashPayment(amount=92, invoice_id=invoice.id, invoice_number="INV-1")
        )

        found = await payments.get_hamali_payment_for_invoice(invoice.id)
        assert found.id == linked.id

        found.amount = 138
        await payments.update_hamali_payment(found)

        assert sorted(p.amount for p in await payments.list_hamali_payments()) == [30, 138]
        assert await payments.get_hamali_payment_for_invoice(invoice.id + 1) is None

    async def test_update_missing_hamali_payment(self, seeded):
        with pytest.raises(EntityNotFoundError):
            await SQLitePaymentStore().update_hamali_payment(HamaliCashPayment(id=404, amount=1))

    async def test_update_vendor_payment(self, seeded):
        payments = SQLitePaymentStore()
        payment = await payments.create_vendor_payment(
            VendorPayment(vendor_id=seeded["vendor"], amount=300)
        )

        payment.amount = 350
        await payments.update_vendor_payment(payment)

        listed = await payments.list_vendor_payments(vendor_id=seeded["vendor"])
        assert [p.amount for p in listed] == [350]


class TestAdminStore:
    async def test_stats_count_rows(self, seeded):
        stats = await SQLiteAdminStore().table_stats()

        assert stats["products"] == 2
        assert stats["invoices"] == 0

    async def test_clear_invoices_takes_items(self, seeded):
        await SQLiteInvoiceStore().create_invoice(_invoice(seeded, "INV-1", date(2024, 3, 10)))

        removed = await SQLiteAdminStore().clear_table("invoices")

        assert removed == 1
        stats = await SQLiteAdminStore().table_stats()
        assert stats["invoice_items"] == 0

    async def test_clear_referenced_table_is_in_use(self, seeded):
        with pytest.raises(EntityInUseError):
            await SQLiteAdminStore().clear_table("vendors")
        assert (await SQLiteAdminStore().table_stats())["vendors"] == 1

    async def test_unknown_table_rejected(self, seeded):
        with pytest.raises(ValidationError):
            await SQLiteAdminStore().clear_table("schema_migrations")
