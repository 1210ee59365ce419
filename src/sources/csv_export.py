"""
Loader for CSV exports of the record store.

Expected files in the export directory:
- products.csv          id, name, category, initial_stock
- ledger.csv            id, date, product_id, quantity, kind, counterparty
- staff_reports.csv     id, date, product_id, quantity, counterparty
- warehouse_counts.csv  id, date, product_id, quantity, warehouse

Export quirks handled:
- Older exports use the store's column names: "type" for kind,
  "buyer_name" for counterparty, "quantity_sold" for staff quantities
- Dates come in several formats depending on who keyed them in
- Warehouse labels vary ("Warehouse 1", "W1", "wh-2")
- Missing id column: ids are assigned from row order
- Repeated ids: product copies are all rejected, other records are flagged

Rows that cannot become valid records are dropped and listed in the
per-file quality reports.
"""

from dataclasses import dataclass
from pathlib import Path

import pandas as pd
import structlog

from core.config import settings
from core.exceptions import ReconciliationError
from core.parsers import DateParser, LedgerKindNormalizer, WarehouseNormalizer
from core.quality import RecordQualityChecker, RecordQualityReport
from core.records import LedgerEntry, Product, StaffReport, WarehouseCount
from sources.memory import InMemoryRecordSource

logger = structlog.get_logger(__name__)


@dataclass
class LoadedRecords:
    """Records loaded from one export plus a quality report per file."""

    source: InMemoryRecordSource
    quality_reports: dict[str, RecordQualityReport]


class CsvExportLoader:
    """
    Loads a record-store CSV export into an InMemoryRecordSource.

    Usage:
        loaded = CsvExportLoader("exports/2024-12").load_all()
        engine = ReconciliationEngine(loaded.source)
    """

    FILES = {
        "products": "products.csv",
        "ledger": "ledger.csv",
        "staff": "staff_reports.csv",
        "counts": "warehouse_counts.csv",
    }

    # Store column names -> record field names
    COLUMN_ALIASES = {
        "type": "kind",
        "buyer_name": "counterparty",
        "quantity_sold": "quantity",
        "warehouse_name": "warehouse",
    }

    def __init__(self, data_dir: Path | str | None = None, warehouse_aliases: dict | None = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.date_parser = DateParser()
        self.warehouse_normalizer = WarehouseNormalizer(warehouse_aliases)
        self.kind_normalizer = LedgerKindNormalizer()

    def load_all(self) -> LoadedRecords:
        """Load every export file; products first so references can be checked."""
        products, products_report = self.load_products()
        product_ids = {p.id for p in products}

        ledger, ledger_report = self.load_ledger(product_ids)
        staff, staff_report = self.load_staff_reports(product_ids)
        counts, counts_report = self.load_warehouse_counts(product_ids)

        source = InMemoryRecordSource([*products, *ledger, *staff, *counts])
        logger.info(
            "csv_export.loaded",
            data_dir=str(self.data_dir),
            products=len(products),
            ledger=len(ledger),
            staff=len(staff),
            counts=len(counts),
        )

        return LoadedRecords(
            source=source,
            quality_reports={
                "products": products_report,
                "ledger": ledger_report,
                "staff": staff_report,
                "counts": counts_report,
            },
        )

    def load_products(self) -> tuple[list[Product], RecordQualityReport]:
        df = self._read("products")
        if "initial_stock" not in df.columns:
            df["initial_stock"] = 0
        df["initial_stock"] = df["initial_stock"].fillna(0)

        report = (
            RecordQualityChecker("Products", required=["id", "name", "category"])
            .check_duplicates(["id"], severity="critical")
            .check_min_quantity("initial_stock", 0)
            .run(df)
        )
        df = self._drop_rejected(df, report)

        products = [
            Product(
                id=int(row.id),
                name=str(row.name),
                category=str(row.category),
                initial_stock=int(row.initial_stock),
            )
            for row in df.itertuples(index=False)
        ]
        return products, report

    def load_ledger(self, product_ids: set[int]) -> tuple[list[LedgerEntry], RecordQualityReport]:
        """
        Load ledger entries.

        Direction spellings vary ("purchase", "buy", "sale", ...); rows with an
        unknown direction are rejected.
        """
        df = self._read("ledger")
        df["date_parsed"] = self._parse_dates(df)
        df["kind_parsed"] = self.kind_normalizer.normalize_series(_column(df, "kind"))

        report = (
            RecordQualityChecker(
                "Ledger", required=["id", "date", "product_id", "quantity", "kind"]
            )
            .check_parsed("date", "date_parsed")
            .check_parsed("kind", "kind_parsed")
            .check_min_quantity("quantity", 1)
            .check_duplicates(["id"])
            .check_known_products(product_ids)
            .run(df)
        )
        df = self._drop_rejected(df, report)

        entries = [
            LedgerEntry(
                id=int(row.id),
                product_id=int(row.product_id),
                date=row.date_parsed,
                quantity=int(row.quantity),
                kind=row.kind_parsed,
                counterparty=_optional_str(getattr(row, "counterparty", None)),
            )
            for row in df.itertuples(index=False)
        ]
        return entries, report

    def load_staff_reports(
        self, product_ids: set[int]
    ) -> tuple[list[StaffReport], RecordQualityReport]:
        df = self._read("staff")
        df["date_parsed"] = self._parse_dates(df)

        report = (
            RecordQualityChecker("Staff reports", required=["id", "date", "product_id", "quantity"])
            .check_parsed("date", "date_parsed")
            .check_min_quantity("quantity", 1)
            .check_duplicates(["id"])
            .check_known_products(product_ids)
            .run(df)
        )
        df = self._drop_rejected(df, report)

        reports = [
            StaffReport(
                id=int(row.id),
                product_id=int(row.product_id),
                date=row.date_parsed,
                quantity=int(row.quantity),
                counterparty=_optional_str(getattr(row, "counterparty", None)),
            )
            for row in df.itertuples(index=False)
        ]
        return reports, report

    def load_warehouse_counts(
        self, product_ids: set[int]
    ) -> tuple[list[WarehouseCount], RecordQualityReport]:
        """
        Load physical counts.

        A count of 0 is a valid observation. Several counts for one warehouse
        on one date are kept and reported as info.
        """
        df = self._read("counts")
        df["date_parsed"] = self._parse_dates(df)
        df["warehouse_parsed"] = self.warehouse_normalizer.normalize_series(_column(df, "warehouse"))

        report = (
            RecordQualityChecker(
                "Warehouse counts",
                required=["id", "date", "product_id", "quantity", "warehouse"],
            )
            .check_parsed("date", "date_parsed")
            .check_parsed("warehouse", "warehouse_parsed")
            .check_min_quantity("quantity", 0)
            .check_duplicates(["id"])
            .check_known_products(product_ids)
            .check_same_date_counts(["product_id", "warehouse_parsed", "date_parsed"])
            .run(df)
        )
        df = self._drop_rejected(df, report)

        counts = [
            WarehouseCount(
                id=int(row.id),
                product_id=int(row.product_id),
                date=row.date_parsed,
                warehouse=row.warehouse_parsed,
                quantity=int(row.quantity),
            )
            for row in df.itertuples(index=False)
        ]
        return counts, report

    def _read(self, key: str) -> pd.DataFrame:
        path = self.data_dir / self.FILES[key]
        if not path.exists():
            raise ReconciliationError("EXPORT_NOT_FOUND", path=str(path))

        df = pd.read_csv(path)

        # Normalize column names
        df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
        df = df.rename(columns=self.COLUMN_ALIASES)

        if "id" not in df.columns:
            df["id"] = range(1, len(df) + 1)
        for col in ("id", "product_id"):
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors="coerce")
        return df

    def _parse_dates(self, df: pd.DataFrame) -> pd.Series:
        return self.date_parser.parse_series(_column(df, "date"))

    def _drop_rejected(self, df: pd.DataFrame, report: RecordQualityReport) -> pd.DataFrame:
        rejected = report.rejected_rows()
        if rejected:
            logger.warning(
                "csv_export.rows_dropped",
                source=report.source_name,
                dropped=len(rejected),
                total=report.total_rows,
            )
        return df.drop(index=list(rejected))


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    """The named column, or an all-missing one when the export lacks it."""
    if name in df.columns:
        return df[name]
    return pd.Series(None, index=df.index, dtype=object)


def _optional_str(value) -> str | None:
    if value is None or pd.isna(value):
        return None
    return str(value).strip() or None
