"""
Reconciliation engine: the entry point for reporting callers.

Runs the discrepancy calculator across all products for a window, grades
the results, and drills into a single product's stock timeline.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import pandas as pd

from core.config import settings
from core.discrepancy import DiscrepancyCalculator, DiscrepancyResult
from core.records import DateWindow, Warehouse
from core.source import RecordSource
from core.timeline import Timeline, TimelineReconstructor


class Severity(Enum):
    """How far counted stock is from a channel's expectation."""

    OK = "ok"  # |pct| <= warning threshold
    WARNING = "warning"  # warning < |pct| <= critical
    CRITICAL = "critical"  # |pct| > critical threshold


SEVERITY_ORDER = {Severity.OK: 0, Severity.WARNING: 1, Severity.CRITICAL: 2}

CHANNELS = {
    "ledger": "discrepancy_vs_ledger_pct",
    "staff": "discrepancy_vs_staff_pct",
}

FRAME_COLUMNS = [
    "product_id",
    "product_name",
    "category",
    "initial_stock",
    "ledger_stock",
    "staff_stock",
    "warehouse1_stock",
    "warehouse2_stock",
    "total_real_stock",
    "discrepancy_vs_ledger",
    "discrepancy_vs_staff",
    "discrepancy_vs_ledger_pct",
    "discrepancy_vs_staff_pct",
]


def classify_discrepancy(
    pct: float,
    warning_pct: float = settings.warning_pct,
    critical_pct: float = settings.critical_pct,
) -> Severity:
    abs_pct = abs(pct)
    if abs_pct > critical_pct:
        return Severity.CRITICAL
    elif abs_pct > warning_pct:
        return Severity.WARNING
    return Severity.OK


@dataclass
class DiscrepancyReport:
    """Discrepancy results for one window, graded by severity."""

    window: DateWindow
    results: list[DiscrepancyResult] = field(default_factory=list)
    warning_pct: float = settings.warning_pct
    critical_pct: float = settings.critical_pct

    def severity(self, result: DiscrepancyResult, channel: str) -> Severity:
        return classify_discrepancy(
            getattr(result, CHANNELS[channel]), self.warning_pct, self.critical_pct
        )

    def flagged(self, min_severity: Severity = Severity.WARNING) -> list[DiscrepancyResult]:
        """Results where either channel reaches min_severity."""
        floor = SEVERITY_ORDER[min_severity]
        return [
            r for r in self.results
            if any(SEVERITY_ORDER[self.severity(r, c)] >= floor for c in CHANNELS)
        ]

    def to_frame(self) -> pd.DataFrame:
        """
        One row per product, in product order.

        Columns follow DiscrepancyResult with the warehouse counts spread out
        and a severity column per channel.
        """
        rows = []
        for r in self.results:
            row = r.model_dump(exclude={"warehouse_stock"})
            row["warehouse1_stock"] = r.warehouse_stock[Warehouse.W1]
            row["warehouse2_stock"] = r.warehouse_stock[Warehouse.W2]
            rows.append(row)

        df = pd.DataFrame(rows, columns=FRAME_COLUMNS)

        for channel, pct_col in CHANNELS.items():
            abs_pct = df[pct_col].astype(float).abs()
            df[f"{channel}_severity"] = np.select(
                [abs_pct > self.critical_pct, abs_pct > self.warning_pct],
                [Severity.CRITICAL.value, Severity.WARNING.value],
                default=Severity.OK.value,
            )
        return df

    def channel_summary(self) -> dict:
        """
        Per channel: mean absolute percentage and severity counts.

        The channel with the lower mean is the one the counts agree with;
        more_reliable_channel is None on a tie or when nothing was counted.
        """
        df = self.to_frame()
        counted = df[df["total_real_stock"] > 0]

        summary = {}
        for channel, pct_col in CHANNELS.items():
            mean_abs = float(counted[pct_col].abs().mean()) if len(counted) > 0 else 0.0
            counts = df[f"{channel}_severity"].value_counts()
            summary[channel] = {
                "mean_abs_pct": round(mean_abs, 2),
                **{s.value: int(counts.get(s.value, 0)) for s in Severity},
            }

        ledger_mean = summary["ledger"]["mean_abs_pct"]
        staff_mean = summary["staff"]["mean_abs_pct"]
        if len(counted) == 0 or ledger_mean == staff_mean:
            summary["more_reliable_channel"] = None
        else:
            summary["more_reliable_channel"] = "ledger" if ledger_mean < staff_mean else "staff"
        return summary

    def summary(self) -> dict:
        return {
            "window": str(self.window),
            "products": len(self.results),
            "counted_products": sum(1 for r in self.results if r.total_real_stock > 0),
            "flagged": len(self.flagged()),
            "critical": len(self.flagged(Severity.CRITICAL)),
            "channels": self.channel_summary(),
        }


class ReconciliationEngine:
    """
    Compares the ledger and staff channels against warehouse counts.

    Usage:
        engine = ReconciliationEngine(source)
        report = engine.discrepancy_report(DateWindow.month(2024, 12))
        report.flagged()
        engine.reconstruct_timeline(product_id=1, window=report.window)
    """

    def __init__(
        self,
        source: RecordSource,
        max_workers: int | None = None,
        warning_pct: float | None = None,
        critical_pct: float | None = None,
    ):
        self.source = source
        self.calculator = DiscrepancyCalculator(source, max_workers=max_workers)
        self.reconstructor = TimelineReconstructor(source)
        self.warning_pct = settings.warning_pct if warning_pct is None else warning_pct
        self.critical_pct = settings.critical_pct if critical_pct is None else critical_pct

    def compute_discrepancies(self, window: DateWindow | None = None) -> list[DiscrepancyResult]:
        return self.calculator.compute_discrepancies(window)

    def compute_product_discrepancy(
        self, product_id: int, window: DateWindow | None = None
    ) -> DiscrepancyResult:
        return self.calculator.compute_product(product_id, window)

    def discrepancy_report(self, window: DateWindow | None = None) -> DiscrepancyReport:
        window = window or DateWindow.current_month()
        return DiscrepancyReport(
            window=window,
            results=self.compute_discrepancies(window),
            warning_pct=self.warning_pct,
            critical_pct=self.critical_pct,
        )

    def reconstruct_timeline(self, product_id: int, window: DateWindow | None = None) -> Timeline:
        return self.reconstructor.reconstruct_timeline(product_id, window)
