"""
Pytest fixtures for reconciliation tests.
"""

import pytest

from core.logging import configure_logging
from core.records import (
    DateWindow,
    LedgerEntry,
    LedgerKind,
    Product,
    StaffReport,
    Warehouse,
    WarehouseCount,
)
from sources.memory import InMemoryRecordSource
from sources.sample import sample_record_source


@pytest.fixture(scope="session", autouse=True)
def logging_configured():
    """Structured logging as the application configures it."""
    configure_logging("WARNING")


class Recorder:
    """Adds records to a source with auto-assigned ids."""

    def __init__(self, source: InMemoryRecordSource):
        self.source = source

    def product(self, name="Laptop Dell XPS 15", category="Electronics", initial_stock=0):
        return self.source.add(
            Product(self.source.next_id(Product), name, category, initial_stock)
        )

    def purchase(self, product, day, quantity, counterparty=None):
        return self._ledger(product, day, quantity, LedgerKind.PURCHASE, counterparty)

    def sale(self, product, day, quantity, counterparty=None):
        return self._ledger(product, day, quantity, LedgerKind.SALE, counterparty)

    def staff(self, product, day, quantity, counterparty=None):
        return self.source.add(StaffReport(
            id=self.source.next_id(StaffReport),
            product_id=product.id,
            date=day,
            quantity=quantity,
            counterparty=counterparty,
        ))

    def count(self, product, day, quantity, warehouse=Warehouse.W1):
        return self.source.add(WarehouseCount(
            id=self.source.next_id(WarehouseCount),
            product_id=product.id,
            date=day,
            warehouse=warehouse,
            quantity=quantity,
        ))

    def _ledger(self, product, day, quantity, kind, counterparty):
        return self.source.add(LedgerEntry(
            id=self.source.next_id(LedgerEntry),
            product_id=product.id,
            date=day,
            quantity=quantity,
            kind=kind,
            counterparty=counterparty,
        ))


@pytest.fixture
def source():
    """Empty in-memory record source."""
    return InMemoryRecordSource()


@pytest.fixture
def record(source):
    """Recorder bound to the `source` fixture."""
    return Recorder(source)


@pytest.fixture
def laptop(record):
    """Product with initial_stock=45."""
    return record.product(initial_stock=45)


@pytest.fixture
def december():
    """December 2024 window."""
    return DateWindow.month(2024, 12)


@pytest.fixture
def sample_source():
    """Demo dataset, Oct-Dec 2024."""
    return sample_record_source()

