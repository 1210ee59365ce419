"""
Tests for the reconciliation engine and its report.
"""

from datetime import date

import pytest

from core.config import settings
from core.exceptions import ProductNotFoundError
from core.reconciliation import (
    FRAME_COLUMNS,
    DiscrepancyReport,
    ReconciliationEngine,
    Severity,
    classify_discrepancy,
)
from core.records import DateWindow


@pytest.fixture
def october():
    return DateWindow.month(2024, 10)


@pytest.fixture
def engine(sample_source):
    return ReconciliationEngine(sample_source, warning_pct=5.0, critical_pct=10.0)


class TestClassifyDiscrepancy:
    """Severity thresholds are inclusive on the lower band."""

    @pytest.mark.parametrize("pct,expected", [
        (0.0, Severity.OK),
        (-5.0, Severity.OK),
        (5.01, Severity.WARNING),
        (-10.0, Severity.WARNING),
        (10.01, Severity.CRITICAL),
        (-63.48, Severity.CRITICAL),
    ])
    def test_bands(self, pct, expected):
        assert classify_discrepancy(pct, 5.0, 10.0) == expected

    def test_custom_thresholds(self):
        assert classify_discrepancy(-7.0, 8.0, 20.0) == Severity.OK


class TestDiscrepancyReport:
    """Tests for DiscrepancyReport on the October demo data."""

    def test_to_frame_columns(self, engine, october):
        df = engine.discrepancy_report(october).to_frame()

        assert list(df.columns) == FRAME_COLUMNS + ["ledger_severity", "staff_severity"]
        assert df["product_id"].tolist() == list(range(1, 16))

    def test_to_frame_spreads_warehouses(self, engine, october):
        df = engine.discrepancy_report(october).to_frame().set_index("product_id")

        assert df.loc[1, "warehouse1_stock"] == 38
        assert df.loc[1, "warehouse2_stock"] == 0
        assert df.loc[12, "warehouse2_stock"] == 310
        assert df.loc[2, "ledger_severity"] == "critical"
        assert df.loc[2, "staff_severity"] == "critical"
        assert df.loc[15, "staff_severity"] == "warning"

    def test_flagged(self, engine, october):
        report = engine.discrepancy_report(october)

        assert len(report.flagged()) == 11
        assert len(report.flagged(Severity.CRITICAL)) == 10
        assert len(report.flagged(Severity.OK)) == 15
        assert {r.product_id for r in report.flagged()}.isdisjoint({9, 10, 13, 14})

    def test_summary(self, engine, october):
        summary = engine.discrepancy_report(october).summary()

        assert summary["window"] == "2024-10-01..2024-10-31"
        assert summary["products"] == 15
        assert summary["counted_products"] == 13
        assert summary["flagged"] == 11
        assert summary["critical"] == 10

    def test_channel_summary(self, engine, october):
        channels = engine.discrepancy_report(october).channel_summary()

        assert channels["ledger"]["critical"] == 10
        assert channels["ledger"]["warning"] == 1
        assert channels["ledger"]["ok"] == 4
        assert channels["staff"]["critical"] == 5
        assert channels["staff"]["warning"] == 2
        assert channels["staff"]["ok"] == 8
        assert channels["staff"]["mean_abs_pct"] < channels["ledger"]["mean_abs_pct"]
        assert channels["more_reliable_channel"] == "staff"

    def test_empty_report(self, october):
        report = DiscrepancyReport(window=october)

        assert report.to_frame().empty
        assert report.flagged() == []
        assert report.channel_summary()["more_reliable_channel"] is None
        assert report.summary()["products"] == 0


class TestReconciliationEngine:
    """Tests for ReconciliationEngine entry points."""

    def test_compute_discrepancies(self, engine, october):
        results = engine.compute_discrepancies(october)

        assert len(results) == 15
        assert results[1].discrepancy_vs_ledger == -73
        assert results[1].discrepancy_vs_ledger_pct == -63.48
        assert results[1].discrepancy_vs_staff_pct == -11.3

    def test_compute_product_discrepancy(self, engine, october):
        result = engine.compute_product_discrepancy(9, october)

        assert result.discrepancy_vs_ledger == -45
        assert result.discrepancy_vs_staff == -45
        assert result.discrepancy_vs_ledger_pct == 0.0

    def test_compute_product_discrepancy_unknown(self, engine, october):
        with pytest.raises(ProductNotFoundError):
            engine.compute_product_discrepancy(99, october)

    def test_reconstruct_timeline(self, engine):
        timeline = engine.reconstruct_timeline(1, DateWindow.month(2024, 12))

        assert timeline.samples[-1].stock_level == 18
        assert timeline.samples[-1].date == date(2024, 12, 31)

    def test_thresholds_default_from_settings(self, sample_source):
        engine = ReconciliationEngine(sample_source)

        assert engine.warning_pct == settings.warning_pct
        assert engine.critical_pct == settings.critical_pct
