# Reconciliation core: derives expected stock from the ledger and staff
# channels, compares it with warehouse counts, and rebuilds stock timelines.

from .exceptions import ReconciliationError, ProductNotFoundError
from .records import (
    Product,
    LedgerEntry,
    LedgerKind,
    StaffReport,
    Warehouse,
    WarehouseCount,
    DateWindow,
)
from .source import RecordSource, ProductRecords, fetch_product_records
from .discrepancy import DiscrepancyCalculator, DiscrepancyResult, compute_discrepancy
from .timeline import (
    Timeline,
    TimelineReconstructor,
    TimelineSample,
    TransactionRow,
    reconstruct,
)
from .reconciliation import (
    DiscrepancyReport,
    ReconciliationEngine,
    Severity,
    classify_discrepancy,
)

__all__ = [
    "ReconciliationError",
    "ProductNotFoundError",
    "Product",
    "LedgerEntry",
    "LedgerKind",
    "StaffReport",
    "Warehouse",
    "WarehouseCount",
    "DateWindow",
    "RecordSource",
    "ProductRecords",
    "fetch_product_records",
    "DiscrepancyCalculator",
    "DiscrepancyResult",
    "compute_discrepancy",
    "Timeline",
    "TimelineReconstructor",
    "TimelineSample",
    "TransactionRow",
    "reconstruct",
    "DiscrepancyReport",
    "ReconciliationEngine",
    "Severity",
    "classify_discrepancy",
]
