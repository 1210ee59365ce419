"""
Discrepancy calculator.

Each source yields its own expected stock for the window, and each is
checked against the physically counted total:

    ledger:  initial_stock + (purchases - sales)
    staff:   initial_stock - staff-reported sales

The two channels are never merged; comparing them shows which one the
physical counts agree with.
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import asdict, fields

import pandas as pd
import structlog
from pydantic import BaseModel, Field

from core.config import settings
from core.exceptions import ProductNotFoundError
from core.records import (
    DateWindow,
    LedgerEntry,
    LedgerKind,
    Product,
    StaffReport,
    Warehouse,
    WarehouseCount,
)
from core.source import QUERIES_PER_PRODUCT, RecordSource, fetch_product_records

logger = structlog.get_logger(__name__)


class DiscrepancyResult(BaseModel):
    """Per-product comparison of counted stock against each source."""

    product_id: int
    product_name: str
    category: str
    initial_stock: int
    ledger_stock: int = Field(description="Purchases minus sales in the window")
    staff_stock: int = Field(description="Staff-reported units sold in the window")
    warehouse_stock: dict[Warehouse, int] = Field(
        description="Latest in-window count per warehouse (0 if uncounted)"
    )
    total_real_stock: int = Field(description="Sum of the warehouse counts")
    discrepancy_vs_ledger: int
    discrepancy_vs_staff: int
    discrepancy_vs_ledger_pct: float = Field(
        description="discrepancy_vs_ledger / total_real_stock * 100, 0 when nothing counted"
    )
    discrepancy_vs_staff_pct: float

    @property
    def expected_by_ledger(self) -> int:
        return self.initial_stock + self.ledger_stock

    @property
    def expected_by_staff(self) -> int:
        return self.initial_stock - self.staff_stock


def records_to_frame(records: list, record_type: type) -> pd.DataFrame:
    """Frame with one row per record; keeps the columns when empty."""
    columns = [f.name for f in fields(record_type)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


def latest_warehouse_stock(counts: list[WarehouseCount]) -> dict[Warehouse, int]:
    """
    Quantity of the most recent count per warehouse; 0 for uncounted ones.

    Counts sharing a date are ordered by record id, so the highest id wins.
    """
    stock = {w: 0 for w in Warehouse}
    if not counts:
        return stock

    df = records_to_frame(counts, WarehouseCount)
    latest = (
        df.sort_values(["date", "id"], kind="mergesort")
        .groupby("warehouse", sort=False)
        .tail(1)
    )
    for row in latest.itertuples(index=False):
        stock[row.warehouse] = int(row.quantity)
    return stock


def discrepancy_pct(discrepancy: int, total_real_stock: int) -> float:
    """Percentage of counted stock, rounded to 2 places; 0 when nothing counted."""
    if total_real_stock == 0:
        return 0.0
    return round(discrepancy / total_real_stock * 100, 2)


def compute_discrepancy(
    product: Product,
    ledger: list[LedgerEntry],
    staff: list[StaffReport],
    counts: list[WarehouseCount],
) -> DiscrepancyResult:
    """
    Compare one product's counted stock with its ledger and staff records.

    The records must already be limited to the reporting window.
    """
    ledger_df = records_to_frame(ledger, LedgerEntry)
    by_kind = ledger_df.groupby("kind", sort=False)["quantity"].sum()
    purchases = int(by_kind.get(LedgerKind.PURCHASE, 0))
    sales = int(by_kind.get(LedgerKind.SALE, 0))
    ledger_stock = purchases - sales

    staff_stock = int(sum(r.quantity for r in staff))

    warehouse_stock = latest_warehouse_stock(counts)
    total_real_stock = sum(warehouse_stock.values())

    vs_ledger = total_real_stock - (product.initial_stock + ledger_stock)
    vs_staff = total_real_stock - (product.initial_stock - staff_stock)

    return DiscrepancyResult(
        product_id=product.id,
        product_name=product.name,
        category=product.category,
        initial_stock=product.initial_stock,
        ledger_stock=ledger_stock,
        staff_stock=staff_stock,
        warehouse_stock=warehouse_stock,
        total_real_stock=total_real_stock,
        discrepancy_vs_ledger=vs_ledger,
        discrepancy_vs_staff=vs_staff,
        discrepancy_vs_ledger_pct=discrepancy_pct(vs_ledger, total_real_stock),
        discrepancy_vs_staff_pct=discrepancy_pct(vs_staff, total_real_stock),
    )


class DiscrepancyCalculator:
    """
    Runs compute_discrepancy for every product of a Record Source.

    Products are processed on a thread pool; results come back in ascending
    product id whatever order the workers finish in. Each product's three
    window queries go to a separate query pool and run concurrently, so a
    product worker never waits on its own pool.

    Usage:
        calculator = DiscrepancyCalculator(source)
        results = calculator.compute_discrepancies(DateWindow.month(2024, 12))
    """

    def __init__(self, source: RecordSource, max_workers: int | None = None):
        self.source = source
        self.max_workers = max_workers or settings.max_workers

    def compute_discrepancies(self, window: DateWindow | None = None) -> list[DiscrepancyResult]:
        """One result per product for the window (defaults to the current month)."""
        window = window or DateWindow.current_month()
        products = sorted(self.source.list_products(), key=lambda p: p.id)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor, \
                ThreadPoolExecutor(max_workers=self.max_workers * QUERIES_PER_PRODUCT) as queries:
            results = list(
                executor.map(lambda product: self._compute(product, window, queries), products)
            )

        logger.info(
            "discrepancies.computed",
            window=str(window),
            products=len(results),
            empty_window=window.is_empty,
        )
        return results

    def compute_product(self, product_id: int, window: DateWindow | None = None) -> DiscrepancyResult:
        """Single-product variant; raises ProductNotFoundError for unknown ids."""
        product = self.source.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        with ThreadPoolExecutor(max_workers=QUERIES_PER_PRODUCT) as queries:
            return self._compute(product, window or DateWindow.current_month(), queries)

    def _compute(
        self, product: Product, window: DateWindow, queries: Executor
    ) -> DiscrepancyResult:
        records = fetch_product_records(self.source, product.id, window, queries)
        result = compute_discrepancy(product, records.ledger, records.staff, records.counts)
        logger.debug(
            "discrepancy.computed",
            product_id=product.id,
            total_real_stock=result.total_real_stock,
            vs_ledger=result.discrepancy_vs_ledger,
            vs_staff=result.discrepancy_vs_staff,
        )
        return result
