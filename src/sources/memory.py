"""
In-memory Record Source.

Append-only lists behind the RecordSource query contract. Used for the
sample dataset, for CSV exports once loaded, and in tests.
"""

from datetime import date
from typing import Iterable

from core.records import LedgerEntry, Product, StaffReport, WarehouseCount

Record = Product | LedgerEntry | StaffReport | WarehouseCount


def _in_range(day: date, date_from: date | None, date_to: date | None) -> bool:
    if date_from is not None and day < date_from:
        return False
    if date_to is not None and day > date_to:
        return False
    return True


class InMemoryRecordSource:
    """
    List-backed RecordSource.

    Queries return records in insertion order. Records are never edited or
    removed once added.
    """

    def __init__(self, records: Iterable[Record] = ()):
        self._products: dict[int, Product] = {}
        self._ledger: list[LedgerEntry] = []
        self._staff: list[StaffReport] = []
        self._counts: list[WarehouseCount] = []
        self.add_all(records)

    def add(self, record: Record) -> Record:
        if isinstance(record, Product):
            self._products[record.id] = record
        elif isinstance(record, LedgerEntry):
            self._ledger.append(record)
        elif isinstance(record, StaffReport):
            self._staff.append(record)
        elif isinstance(record, WarehouseCount):
            self._counts.append(record)
        else:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")
        return record

    def add_all(self, records: Iterable[Record]) -> "InMemoryRecordSource":
        for record in records:
            self.add(record)
        return self

    def next_id(self, record_type: type) -> int:
        """Next free identifier for a record kind (1 when empty)."""
        existing = {
            Product: self._products.values(),
            LedgerEntry: self._ledger,
            StaffReport: self._staff,
            WarehouseCount: self._counts,
        }[record_type]
        return max((r.id for r in existing), default=0) + 1

    # --- RecordSource queries ---

    def list_products(self) -> list[Product]:
        return sorted(self._products.values(), key=lambda p: p.id)

    def get_product(self, product_id: int) -> Product | None:
        return self._products.get(product_id)

    def list_ledger_entries(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[LedgerEntry]:
        return [
            e for e in self._ledger
            if e.product_id == product_id and _in_range(e.date, date_from, date_to)
        ]

    def list_staff_reports(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[StaffReport]:
        return [
            r for r in self._staff
            if r.product_id == product_id and _in_range(r.date, date_from, date_to)
        ]

    def list_warehouse_counts(
        self, product_id: int, date_from: date | None = None, date_to: date | None = None
    ) -> list[WarehouseCount]:
        return [
            c for c in self._counts
            if c.product_id == product_id and _in_range(c.date, date_from, date_to)
        ]

    def __len__(self) -> int:
        return len(self._products) + len(self._ledger) + len(self._staff) + len(self._counts)
