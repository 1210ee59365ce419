"""
Stock-level timeline reconstruction for one product.

The replay is anchored at the latest known stock (the newest count per
warehouse) and walks backward, latest record first:

    count     -> stock becomes the counted quantity
    purchase  -> stock -= quantity
    sale      -> stock += quantity
    staff     -> stock += quantity

Each step records the level that held just before the record, and the
series ends with the current stock at the window end.
"""

import datetime
from concurrent.futures import ThreadPoolExecutor
from typing import Literal

import pandas as pd
import structlog
from pydantic import BaseModel, Field

from core.discrepancy import latest_warehouse_stock
from core.exceptions import ProductNotFoundError
from core.records import (
    DateWindow,
    LedgerEntry,
    Product,
    StaffReport,
    Warehouse,
    WarehouseCount,
)
from core.source import QUERIES_PER_PRODUCT, RecordSource, fetch_product_records

logger = structlog.get_logger(__name__)

SourceKind = Literal["ledger", "staff_report", "warehouse_count", "current"]
TransactionKind = Literal["purchase", "sale", "count", "current"]

# Same-date order: ledger, staff, count (then record id)
SOURCE_RANK = {"ledger": 0, "staff_report": 1, "warehouse_count": 2}

SORT_KEYS = ["date", "rank", "id"]


class TimelineSample(BaseModel):
    """One point of the stock-level chart."""

    date: datetime.date
    stock_level: int
    source_kind: SourceKind
    transaction_kind: TransactionKind


class TransactionRow(BaseModel):
    """A sample with the record details and its forward-in-time effect."""

    date: datetime.date
    source_kind: SourceKind
    transaction_kind: TransactionKind
    quantity: int = Field(description="Quantity on the record (counted quantity for counts)")
    delta: int = Field(description="Change from this sample's level to the next one")
    stock_level: int
    counterparty: str | None = None
    warehouse: Warehouse | None = None


class Timeline(BaseModel):
    """Chronological samples plus the parallel transaction history."""

    product_id: int
    product_name: str
    window_start: datetime.date
    window_end: datetime.date
    current_stock: int = Field(description="Anchor: latest known total counted stock")
    samples: list[TimelineSample]
    transactions: list[TransactionRow]

    def to_frame(self) -> pd.DataFrame:
        """Samples as a DataFrame, ready for a line chart."""
        return pd.DataFrame(
            [s.model_dump() for s in self.samples],
            columns=list(TimelineSample.model_fields),
        )


def current_stock(product: Product, counts: list[WarehouseCount]) -> int:
    """
    Latest known total stock: the newest count per warehouse, summed.

    A product that was never counted falls back to its initial_stock.
    """
    if not counts:
        return product.initial_stock
    return sum(latest_warehouse_stock(counts).values())


def merge_records(
    ledger: list[LedgerEntry],
    staff: list[StaffReport],
    counts: list[WarehouseCount],
) -> list[dict]:
    """
    All records as event dicts, ascending by date with a stable same-date order.

    Only the sort keys go through pandas; the events keep their Python values.
    """
    events = []
    for entry in ledger:
        events.append({
            "date": entry.date,
            "rank": SOURCE_RANK["ledger"],
            "id": entry.id,
            "source_kind": "ledger",
            "transaction_kind": entry.kind.value,
            "quantity": entry.quantity,
            "counterparty": entry.counterparty,
            "warehouse": None,
        })
    for report in staff:
        events.append({
            "date": report.date,
            "rank": SOURCE_RANK["staff_report"],
            "id": report.id,
            "source_kind": "staff_report",
            "transaction_kind": "sale",
            "quantity": report.quantity,
            "counterparty": report.counterparty,
            "warehouse": None,
        })
    for count in counts:
        events.append({
            "date": count.date,
            "rank": SOURCE_RANK["warehouse_count"],
            "id": count.id,
            "source_kind": "warehouse_count",
            "transaction_kind": "count",
            "quantity": count.quantity,
            "counterparty": None,
            "warehouse": count.warehouse,
        })
    if not events:
        return []

    keys = pd.DataFrame([[e[k] for k in SORT_KEYS] for e in events], columns=SORT_KEYS)
    order = keys.sort_values(SORT_KEYS, kind="mergesort").index
    return [events[i] for i in order]


def reconstruct(
    product: Product,
    ledger: list[LedgerEntry],
    staff: list[StaffReport],
    counts: list[WarehouseCount],
    window: DateWindow,
    current: int,
) -> Timeline:
    """
    Replay one product's in-window records backward from the current stock.

    Always returns at least the final anchor sample.
    """
    events = merge_records(ledger, staff, counts)

    cumulative = current
    levels = []
    for event in reversed(events):
        if event["source_kind"] == "warehouse_count":
            cumulative = event["quantity"]
        elif event["transaction_kind"] == "purchase":
            cumulative -= event["quantity"]
        else:
            # ledger sale or staff-reported sale
            cumulative += event["quantity"]
        levels.append(cumulative)
    levels.reverse()

    rows = [
        TransactionRow(
            date=event["date"],
            source_kind=event["source_kind"],
            transaction_kind=event["transaction_kind"],
            quantity=event["quantity"],
            delta=0,
            stock_level=level,
            counterparty=event["counterparty"],
            warehouse=event["warehouse"],
        )
        for event, level in zip(events, levels)
    ]
    rows.append(
        TransactionRow(
            date=window.end,
            source_kind="current",
            transaction_kind="current",
            quantity=current,
            delta=0,
            stock_level=current,
        )
    )
    for row, later in zip(rows, rows[1:]):
        row.delta = later.stock_level - row.stock_level

    samples = [
        TimelineSample(
            date=row.date,
            stock_level=row.stock_level,
            source_kind=row.source_kind,
            transaction_kind=row.transaction_kind,
        )
        for row in rows
    ]

    return Timeline(
        product_id=product.id,
        product_name=product.name,
        window_start=window.start,
        window_end=window.end,
        current_stock=current,
        samples=samples,
        transactions=rows,
    )


class TimelineReconstructor:
    """
    Fetches one product's records and reconstructs its stock timeline.

    The window queries and the all-time count query for the anchor are issued
    concurrently; the replay itself is sequential.
    """

    def __init__(self, source: RecordSource):
        self.source = source

    def reconstruct_timeline(self, product_id: int, window: DateWindow | None = None) -> Timeline:
        product = self.source.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        window = window or DateWindow.current_month()

        # window queries plus the all-time count query for the anchor
        with ThreadPoolExecutor(max_workers=QUERIES_PER_PRODUCT + 1) as executor:
            all_counts = executor.submit(self.source.list_warehouse_counts, product_id)
            records = fetch_product_records(self.source, product_id, window, executor)
            anchor = current_stock(product, all_counts.result())

        timeline = reconstruct(
            product, records.ledger, records.staff, records.counts, window, anchor
        )
        logger.info(
            "timeline.reconstructed",
            product_id=product_id,
            window=str(window),
            samples=len(timeline.samples),
            current_stock=anchor,
        )
        return timeline
