"""
Record Source protocol: the query contract the reconciliation core consumes.

Storage is owned elsewhere; any object with these methods can feed the
calculator and the reconstructor (see sources.memory for the in-memory one).
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol, runtime_checkable

from core.records import (
    DateWindow,
    LedgerEntry,
    Product,
    StaffReport,
    WarehouseCount,
)


# ledger, staff reports, warehouse counts
QUERIES_PER_PRODUCT = 3


@runtime_checkable
class RecordSource(Protocol):
    """
    Read-only queries over products and their records.

    Date bounds are inclusive; None leaves that side open.
    """

    def list_products(self) -> list[Product]:
        """All products, ascending by id."""
        ...

    def get_product(self, product_id: int) -> Product | None:
        ...

    def list_ledger_entries(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[LedgerEntry]:
        ...

    def list_staff_reports(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[StaffReport]:
        ...

    def list_warehouse_counts(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[WarehouseCount]:
        ...


@dataclass(frozen=True)
class ProductRecords:
    """The three record kinds for one product in one window."""

    ledger: list[LedgerEntry] = field(default_factory=list)
    staff: list[StaffReport] = field(default_factory=list)
    counts: list[WarehouseCount] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.ledger or self.staff or self.counts)


def fetch_product_records(
    source: RecordSource,
    product_id: int,
    window: DateWindow,
    executor: Executor | None = None,
) -> ProductRecords:
    """
    Run the three window queries for one product.

    With an executor the queries run concurrently and are all awaited before
    returning. An empty window issues no queries.
    """
    if window.is_empty:
        return ProductRecords()

    queries = (
        source.list_ledger_entries,
        source.list_staff_reports,
        source.list_warehouse_counts,
    )
    if executor is None:
        ledger, staff, counts = (
            query(product_id, window.start, window.end) for query in queries
        )
    else:
        futures = [
            executor.submit(query, product_id, window.start, window.end)
            for query in queries
        ]
        ledger, staff, counts = (f.result() for f in futures)

    return ProductRecords(ledger=list(ledger), staff=list(staff), counts=list(counts))
