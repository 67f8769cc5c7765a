"""Tests for the in-memory record store."""

from datetime import date

import pytest

from adspend_kpi.analytics import KPIAggregator, comparison_windows
from adspend_kpi.ingestion import enrich
from adspend_kpi.models import AdSpendRecord, EnrichedRecord
from adspend_kpi.storage import AdSpendStore


def make_enriched(day: str, spend: float, conversions: int) -> EnrichedRecord:
    record = AdSpendRecord(date=day, spend=spend, clicks=10, conversions=conversions)
    return enrich(record, date(2025, 7, 2), "ad_spend.csv")


@pytest.fixture
def records() -> list[EnrichedRecord]:
    return [
        make_enriched("2025-05-15", 30.0, 6),
        make_enriched("2025-06-01", 12.5, 2),
        make_enriched("2025-06-20", 7.5, 3),
        make_enriched("2025-07-05", 50.0, 1),
    ]


@pytest.fixture
def store(records: list[EnrichedRecord]) -> AdSpendStore:
    store = AdSpendStore()
    store.insert_many(records)
    return store


class TestAdSpendStore:
    """Tests for AdSpendStore."""

    def test_insert_many(self, records: list[EnrichedRecord]) -> None:
        store = AdSpendStore()
        assert store.insert_many(records) == 4
        assert store.insert_many(records[:1]) == 1
        assert len(store) == 5

    def test_insert_empty(self) -> None:
        store = AdSpendStore()
        assert store.insert_many([]) == 0
        assert len(store) == 0

    def test_query_all(
        self, store: AdSpendStore, records: list[EnrichedRecord]
    ) -> None:
        """Unbounded query returns records equal to what was inserted."""
        assert store.query() == records

    def test_query_range_inclusive(self, store: AdSpendStore) -> None:
        rows = store.query(date(2025, 6, 1), date(2025, 6, 20))
        assert [r.date for r in rows] == ["2025-06-01", "2025-06-20"]

    def test_query_open_ended(self, store: AdSpendStore) -> None:
        assert len(store.query(start=date(2025, 6, 2))) == 2
        assert len(store.query(end=date(2025, 6, 1))) == 2

    def test_clear(self, store: AdSpendStore) -> None:
        store.clear()
        assert len(store) == 0
        assert store.query() == []

    def test_sql(self, store: AdSpendStore) -> None:
        """Raw SQL runs against the ad_spend table."""
        result = store.sql("SELECT COUNT(*) AS n FROM ad_spend")
        assert result["n"][0] == 4

    def test_sql_totals_match_expressions(self, store: AdSpendStore) -> None:
        """SQL aggregation and the expression path agree."""
        current, prior = comparison_windows(date(2025, 7, 1), 30)
        engine = KPIAggregator(store.frame())
        for window in (current, prior):
            via_sql = store.period_totals_sql(window)
            via_expr = engine.get_period_totals(window)
            assert via_sql.total_spend == pytest.approx(via_expr.total_spend)
            assert via_sql.total_conversions == via_expr.total_conversions
            assert via_sql.total_revenue == pytest.approx(via_expr.total_revenue)
            assert via_sql.row_count == via_expr.row_count

    def test_sql_current_window(self, store: AdSpendStore) -> None:
        current, _ = comparison_windows(date(2025, 7, 1), 30)
        totals = store.period_totals_sql(current)
        assert totals.total_spend == pytest.approx(20.0)
        assert totals.total_conversions == 5
        assert totals.total_revenue == pytest.approx(250.0)
