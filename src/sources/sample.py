"""
Demo dataset: 15 products across two warehouses, October to December 2024.

Ledger and staff figures deliberately disagree with the counts, so every
month shows discrepancies in both channels.
"""

from datetime import date

from core.records import (
    LedgerEntry,
    LedgerKind,
    Product,
    StaffReport,
    Warehouse,
    WarehouseCount,
)
from sources.memory import InMemoryRecordSource

# (name, category, initial_stock); ids follow list order starting at 1
PRODUCTS = [
    ("Laptop Dell XPS 15", "Electronics", 45),
    ("Wireless Mouse Logitech", "Electronics", 150),
    ("Mechanical Keyboard RGB", "Electronics", 80),
    ('27" 4K Monitor', "Electronics", 35),
    ("USB-C Hub Pro", "Office Supplies", 200),
    ("Laptop Stand Aluminum", "Office Supplies", 65),
    ("LED Desk Lamp", "Office Supplies", 50),
    ("Ergonomic Office Chair", "Furniture", 20),
    ("HD Webcam 1080p", "Electronics", 45),
    ("Gaming Headset 7.1", "Electronics", 60),
    ('iPad Pro 12.9"', "Electronics", 40),
    ("iPhone 15 Case", "Accessories", 320),
    ("Screen Protector Set", "Accessories", 280),
    ("Wireless Charger 15W", "Electronics", 110),
    ("Bluetooth Speaker", "Electronics", 75),
]

# (date, product_id, quantity, kind, counterparty)
LEDGER = [
    ("2024-10-02", 1, 10, "purchase", "Tech Corp"),
    ("2024-10-05", 2, 50, "purchase", "Tech Corp"),
    ("2024-10-08", 1, 5, "sale", "John Doe"),
    ("2024-10-10", 3, 30, "purchase", "Electronics Ltd"),
    ("2024-10-12", 2, 12, "sale", "ABC Corp"),
    ("2024-10-15", 4, 15, "purchase", "Tech Corp"),
    ("2024-10-18", 5, 80, "purchase", "Office Supply Co"),
    ("2024-10-20", 3, 8, "sale", "Jane Smith"),
    ("2024-10-22", 1, 3, "sale", "Retail Customer"),
    ("2024-10-25", 11, 20, "purchase", "Apple Distributor"),
    ("2024-10-28", 12, 100, "purchase", "Accessories Plus"),
    ("2024-11-01", 6, 40, "purchase", "Furniture Direct"),
    ("2024-11-04", 7, 30, "purchase", "Office Supply Co"),
    ("2024-11-07", 2, 8, "sale", "Michael Brown"),
    ("2024-11-10", 13, 50, "purchase", "Tech Accessories"),
    ("2024-11-12", 4, 6, "sale", "Emily Davis"),
    ("2024-11-15", 8, 10, "purchase", "Furniture Direct"),
    ("2024-11-18", 9, 25, "purchase", "Electronics Ltd"),
    ("2024-11-20", 14, 60, "purchase", "Tech Corp"),
    ("2024-11-22", 10, 35, "purchase", "Gaming Store"),
    ("2024-11-25", 3, 5, "sale", "Sarah Wilson"),
    ("2024-11-28", 15, 45, "purchase", "Audio Systems Inc"),
    ("2024-11-30", 5, 15, "sale", "XYZ Company"),
    ("2024-12-02", 11, 7, "sale", "Retail Customer"),
    ("2024-12-05", 12, 25, "sale", "ABC Corp"),
    ("2024-12-08", 1, 8, "sale", "Tech Solutions"),
    ("2024-12-10", 13, 40, "sale", "Mobile Shop"),
    ("2024-12-12", 14, 20, "sale", "Wireless World"),
    ("2024-12-15", 2, 18, "sale", "Computer Store"),
    ("2024-12-18", 15, 12, "sale", "Audio Shop"),
    ("2024-12-20", 4, 4, "sale", "Display Center"),
    ("2024-12-22", 6, 10, "sale", "Office Depot"),
    ("2024-12-25", 9, 9, "sale", "Video Chat Co"),
    ("2024-12-28", 10, 14, "sale", "Gamer Zone"),
]

# (date, product_id, quantity, counterparty)
STAFF_REPORTS = [
    ("2024-10-01", 1, 2, "Walk-in"),
    ("2024-10-02", 2, 5, "Walk-in"),
    ("2024-10-03", 3, 3, "Customer A"),
    ("2024-10-04", 5, 8, "Walk-in"),
    ("2024-10-07", 1, 1, "Customer B"),
    ("2024-10-08", 2, 6, "Walk-in"),
    ("2024-10-09", 4, 2, "Customer C"),
    ("2024-10-11", 3, 4, "Walk-in"),
    ("2024-10-14", 5, 10, "Customer D"),
    ("2024-10-16", 1, 2, "Walk-in"),
    ("2024-10-17", 2, 7, "Customer E"),
    ("2024-10-19", 4, 3, "Walk-in"),
    ("2024-10-21", 3, 5, "Customer F"),
    ("2024-10-23", 5, 12, "Walk-in"),
    ("2024-10-24", 1, 1, "Customer G"),
    ("2024-10-26", 2, 4, "Walk-in"),
    ("2024-10-28", 4, 2, "Customer H"),
    ("2024-10-30", 3, 3, "Walk-in"),
    ("2024-11-01", 5, 6, "Customer I"),
    ("2024-11-03", 6, 2, "Walk-in"),
    ("2024-11-05", 7, 4, "Customer J"),
    ("2024-11-07", 1, 3, "Walk-in"),
    ("2024-11-09", 2, 8, "Customer K"),
    ("2024-11-11", 4, 1, "Walk-in"),
    ("2024-11-13", 3, 6, "Customer L"),
    ("2024-11-15", 5, 9, "Walk-in"),
    ("2024-11-17", 8, 2, "Customer M"),
    ("2024-11-19", 9, 5, "Walk-in"),
    ("2024-11-21", 1, 2, "Customer N"),
    ("2024-11-23", 10, 4, "Walk-in"),
    ("2024-11-25", 2, 7, "Customer O"),
    ("2024-11-27", 4, 2, "Walk-in"),
    ("2024-11-29", 3, 5, "Customer P"),
    ("2024-12-01", 5, 11, "Walk-in"),
    ("2024-12-03", 11, 3, "Customer Q"),
    ("2024-12-05", 12, 15, "Walk-in"),
    ("2024-12-07", 13, 8, "Customer R"),
    ("2024-12-09", 14, 6, "Walk-in"),
    ("2024-12-11", 15, 4, "Customer S"),
    ("2024-12-13", 1, 5, "Walk-in"),
    ("2024-12-15", 2, 12, "Customer T"),
    ("2024-12-17", 4, 3, "Walk-in"),
    ("2024-12-19", 3, 7, "Customer U"),
    ("2024-12-21", 6, 2, "Walk-in"),
    ("2024-12-23", 7, 5, "Customer V"),
    ("2024-12-25", 9, 4, "Walk-in"),
    ("2024-12-27", 10, 8, "Customer W"),
    ("2024-12-29", 5, 10, "Customer X"),
]

# (date, product_id, quantity, warehouse)
WAREHOUSE_COUNTS = [
    # Warehouse 1
    ("2024-10-31", 1, 38, Warehouse.W1),
    ("2024-10-31", 2, 115, Warehouse.W1),
    ("2024-10-31", 3, 64, Warehouse.W1),
    ("2024-10-31", 4, 27, Warehouse.W1),
    ("2024-10-31", 5, 145, Warehouse.W1),
    ("2024-10-31", 6, 50, Warehouse.W1),
    ("2024-10-31", 7, 35, Warehouse.W1),
    ("2024-10-31", 8, 12, Warehouse.W1),
    ("2024-11-30", 1, 28, Warehouse.W1),
    ("2024-11-30", 2, 95, Warehouse.W1),
    ("2024-11-30", 3, 55, Warehouse.W1),
    ("2024-11-30", 4, 21, Warehouse.W1),
    ("2024-11-30", 5, 115, Warehouse.W1),
    ("2024-11-30", 9, 35, Warehouse.W1),
    ("2024-12-31", 1, 18, Warehouse.W1),
    ("2024-12-31", 2, 65, Warehouse.W1),
    ("2024-12-31", 3, 42, Warehouse.W1),
    ("2024-12-31", 4, 15, Warehouse.W1),
    ("2024-12-31", 5, 85, Warehouse.W1),
    ("2024-12-31", 9, 20, Warehouse.W1),
    ("2024-12-31", 10, 28, Warehouse.W1),
    # Warehouse 2
    ("2024-10-31", 11, 38, Warehouse.W2),
    ("2024-10-31", 12, 310, Warehouse.W2),
    ("2024-10-31", 13, 270, Warehouse.W2),
    ("2024-10-31", 14, 105, Warehouse.W2),
    ("2024-10-31", 15, 70, Warehouse.W2),
    ("2024-11-30", 11, 33, Warehouse.W2),
    ("2024-11-30", 12, 275, Warehouse.W2),
    ("2024-11-30", 13, 220, Warehouse.W2),
    ("2024-11-30", 14, 95, Warehouse.W2),
    ("2024-12-31", 11, 23, Warehouse.W2),
    ("2024-12-31", 12, 235, Warehouse.W2),
    ("2024-12-31", 13, 172, Warehouse.W2),
    ("2024-12-31", 14, 59, Warehouse.W2),
    ("2024-12-31", 15, 54, Warehouse.W2),
]


def sample_record_source() -> InMemoryRecordSource:
    """Fresh InMemoryRecordSource loaded with the demo dataset."""
    source = InMemoryRecordSource()

    for name, category, initial_stock in PRODUCTS:
        source.add(Product(source.next_id(Product), name, category, initial_stock))

    for day, product_id, quantity, kind, counterparty in LEDGER:
        source.add(LedgerEntry(
            id=source.next_id(LedgerEntry),
            product_id=product_id,
            date=date.fromisoformat(day),
            quantity=quantity,
            kind=LedgerKind(kind),
            counterparty=counterparty,
        ))

    for day, product_id, quantity, counterparty in STAFF_REPORTS:
        source.add(StaffReport(
            id=source.next_id(StaffReport),
            product_id=product_id,
            date=date.fromisoformat(day),
            quantity=quantity,
            counterparty=counterparty,
        ))

    for day, product_id, quantity, warehouse in WAREHOUSE_COUNTS:
        source.add(WarehouseCount(
            id=source.next_id(WarehouseCount),
            product_id=product_id,
            date=date.fromisoformat(day),
            warehouse=warehouse,
            quantity=quantity,
        ))

    return source
