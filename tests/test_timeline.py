"""
Tests for stock timeline reconstruction.
"""

from datetime import date

import pytest

from core.exceptions import ProductNotFoundError
from core.records import DateWindow, Warehouse
from core.timeline import TimelineReconstructor, current_stock, merge_records


def d(day: int, month: int = 12) -> date:
    return date(2024, month, day)


def levels(timeline):
    return [s.stock_level for s in timeline.samples]


@pytest.fixture
def reconstructor(source):
    return TimelineReconstructor(source)


class TestSampleTimeline:
    """Reconstruction over the demo dataset."""

    def test_december_laptop(self, sample_source, december):
        timeline = TimelineReconstructor(sample_source).reconstruct_timeline(1, december)

        assert [(s.date, s.stock_level, s.source_kind, s.transaction_kind) for s in timeline.samples] == [
            (d(8), 31, "ledger", "sale"),
            (d(13), 23, "staff_report", "sale"),
            (d(31), 18, "warehouse_count", "count"),
            (d(31), 18, "current", "current"),
        ]
        assert [t.delta for t in timeline.transactions] == [-8, -5, 0, 0]
        assert timeline.current_stock == 18

    def test_october_anchored_on_latest_count(self, sample_source):
        """The anchor is December's count, not October's."""
        window = DateWindow.month(2024, 10)

        timeline = TimelineReconstructor(sample_source).reconstruct_timeline(1, window)

        assert levels(timeline) == [42, 40, 50, 49, 44, 42, 39, 38, 18]
        assert [t.delta for t in timeline.transactions] == [-2, 10, -1, -5, -2, -3, -1, -20, 0]
        assert timeline.samples[-1].date == d(31, month=10)

    def test_transactions_carry_record_details(self, sample_source, december):
        timeline = TimelineReconstructor(sample_source).reconstruct_timeline(1, december)
        sale, staff, count, current = timeline.transactions

        assert sale.counterparty == "Tech Solutions"
        assert sale.quantity == 8
        assert staff.counterparty == "Walk-in"
        assert count.warehouse == Warehouse.W1
        assert count.quantity == 18
        assert current.counterparty is None

    def test_to_frame(self, sample_source, december):
        df = TimelineReconstructor(sample_source).reconstruct_timeline(1, december).to_frame()

        assert list(df.columns) == ["date", "stock_level", "source_kind", "transaction_kind"]
        assert df["stock_level"].tolist() == [31, 23, 18, 18]


class TestReconstruction:
    """Edge cases of the backward replay."""

    def test_empty_window_single_current_sample(self, reconstructor, record, laptop, december):
        record.count(laptop, d(15, month=11), 30)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert len(timeline.samples) == 1
        sample = timeline.samples[0]
        assert sample.date == d(31)
        assert sample.stock_level == 30
        assert sample.source_kind == "current"

    def test_malformed_window_single_current_sample(self, reconstructor, record, laptop):
        record.purchase(laptop, d(10), 5)
        record.count(laptop, d(20), 40)

        timeline = reconstructor.reconstruct_timeline(laptop.id, DateWindow(d(31), d(1)))

        assert len(timeline.samples) == 1
        assert timeline.samples[0].date == d(1)
        assert timeline.samples[0].stock_level == 40

    def test_never_recorded_product_stays_at_initial_stock(self, reconstructor, laptop, december):
        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert levels(timeline) == [45]
        assert timeline.current_stock == 45

    def test_uncounted_product_anchors_on_initial_stock(self, reconstructor, record, laptop, december):
        record.purchase(laptop, d(3), 10)
        record.sale(laptop, d(9), 4)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert levels(timeline) == [39, 49, 45]

    def test_zero_count_is_an_observation(self, reconstructor, record, laptop, december):
        record.sale(laptop, d(5), 3)
        record.count(laptop, d(10), 0)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert timeline.current_stock == 0
        assert levels(timeline) == [3, 0, 0]

    def test_anchor_sums_both_warehouses(self, reconstructor, record, laptop, december):
        record.count(laptop, d(20), 12, Warehouse.W1)
        record.count(laptop, d(22), 8, Warehouse.W2)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert timeline.current_stock == 20
        assert timeline.samples[-1].stock_level == 20

    def test_final_sample_is_current_stock(self, reconstructor, record, laptop, december):
        record.purchase(laptop, d(2), 10)
        record.staff(laptop, d(6), 3)
        record.count(laptop, d(15), 50)
        record.sale(laptop, d(20), 4)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert timeline.samples[-1].date == december.end
        assert timeline.samples[-1].stock_level == timeline.current_stock == 50

    def test_deltas_are_forward_effects(self, reconstructor, record, laptop, december):
        """Purchases add their quantity, sales and staff reports remove it; counts correct."""
        record.purchase(laptop, d(2), 10)
        record.staff(laptop, d(6), 3)
        record.sale(laptop, d(8), 5)
        record.count(laptop, d(15), 50)
        record.purchase(laptop, d(18), 7)
        record.sale(laptop, d(20), 2)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        for row in timeline.transactions:
            if row.transaction_kind == "purchase":
                assert row.delta == row.quantity
            elif row.source_kind in ("ledger", "staff_report"):
                assert row.delta == -row.quantity
        assert levels(timeline) == [48, 58, 55, 50, 45, 52, 50]
        assert [t.delta for t in timeline.transactions] == [10, -3, -5, -5, 7, -2, 0]

    def test_counterparty_mixed_with_missing(self, reconstructor, record, laptop, december):
        """Records with and without a counterparty share one timeline."""
        record.purchase(laptop, d(2), 10, counterparty="Tech Corp")
        record.sale(laptop, d(5), 4)
        record.staff(laptop, d(6), 1)
        record.count(laptop, d(10), 50)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert [t.counterparty for t in timeline.transactions] == [
            "Tech Corp", None, None, None, None,
        ]
        assert [t.warehouse for t in timeline.transactions] == [
            None, None, None, Warehouse.W1, None,
        ]
        assert levels(timeline) == [45, 55, 51, 50, 50]

    def test_same_date_order_ledger_staff_count(self, reconstructor, record, laptop, december):
        record.count(laptop, d(10), 40)
        record.staff(laptop, d(10), 2)
        record.sale(laptop, d(10), 5)

        timeline = reconstructor.reconstruct_timeline(laptop.id, december)

        assert [s.source_kind for s in timeline.samples] == [
            "ledger", "staff_report", "warehouse_count", "current",
        ]
        assert levels(timeline) == [47, 42, 40, 40]

    def test_reconstruction_is_repeatable(self, reconstructor, record, laptop, december):
        record.purchase(laptop, d(2), 10)
        record.count(laptop, d(15), 50)

        first = reconstructor.reconstruct_timeline(laptop.id, december)
        second = reconstructor.reconstruct_timeline(laptop.id, december)

        assert first == second

    def test_unknown_product(self, reconstructor, december):
        with pytest.raises(ProductNotFoundError):
            reconstructor.reconstruct_timeline(404, december)


class TestHelpers:
    """Tests for current_stock() and merge_records()."""

    def test_current_stock_uses_latest_count_per_warehouse(self, record, laptop):
        counts = [
            record.count(laptop, d(1), 10, Warehouse.W1),
            record.count(laptop, d(5), 7, Warehouse.W1),
            record.count(laptop, d(3), 4, Warehouse.W2),
        ]

        assert current_stock(laptop, counts) == 11

    def test_current_stock_without_counts(self, laptop):
        assert current_stock(laptop, []) == 45

    def test_merge_records_empty(self):
        events = merge_records([], [], [])

        assert events == []
