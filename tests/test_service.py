"""Tests for KPIService end to end."""

from datetime import date
from pathlib import Path

import pytest

from adspend_kpi.exceptions import EmptyInputError, InvalidWindowError
from adspend_kpi.services import KPIService
from adspend_kpi.storage import AdSpendStore

RAW_CSV = """date,platform,account,campaign,country,device,spend,clicks,impressions,conversions
2025-06-01,Google,Acme,Summer,US,mobile,10.00,20,500,2
2025-07-01,Meta,Acme,Summer,US,desktop,15.10,20,500,3
2025-05-02,Google,Acme,Spring,US,mobile,20.00,30,800,4
2025-05-31,Google,Acme,Spring,GB,mobile,26.50,25,700,6
2025-04-01,Google,Acme,Spring,GB,mobile,999,1,1,1
2025-06-15,Google,broken-row
"""


@pytest.fixture
def service() -> KPIService:
    service = KPIService(store=AdSpendStore())
    service.ingest(RAW_CSV, "ad_spend.csv", load_date=date(2025, 7, 2))
    return service


class TestKPIService:
    """Tests for ingest(), compare() and to_response()."""

    def test_ingest_stats(self) -> None:
        service = KPIService()
        stats = service.ingest(RAW_CSV, "ad_spend.csv")
        assert stats.accepted == 5
        assert stats.skipped == 1
        assert len(service.store) == 5

    def test_ingest_empty_stores_nothing(self) -> None:
        service = KPIService()
        with pytest.raises(EmptyInputError):
            service.ingest("\n", "empty.csv")
        assert len(service.store) == 0

    def test_ingest_with_byte_order_mark(self) -> None:
        """Rows from a BOM-prefixed file land in their date window."""
        service = KPIService()
        service.ingest("\ufeffdate,spend,conversions\n2025-06-15,20,4\n", "bom.csv")
        cac = service.compare(date(2025, 7, 1), 30)[0]
        assert cac.current_value == 5.0

    def test_compare_response(self, service: KPIService) -> None:
        """End-to-end CAC and ROAS comparison."""
        rows = service.to_response(service.compare(date(2025, 7, 1), 30))
        assert rows == [
            {
                "metric": "CAC",
                "last_30_days": 5.02,
                "prior_30_days": 4.65,
                "delta_absolute": 0.37,
                "delta_percentage": "7.96%",
            },
            {
                "metric": "ROAS",
                "last_30_days": 9.96,
                "prior_30_days": 10.75,
                "delta_absolute": -0.79,
                "delta_percentage": "-7.37%",
            },
        ]

    def test_default_days(self, service: KPIService) -> None:
        """days defaults to the registry value (30)."""
        end_date = date(2025, 7, 1)
        assert service.compare(end_date) == service.compare(end_date, 30)

    def test_default_end_date(self, service: KPIService) -> None:
        """No end date compares windows ending today (no data there)."""
        rows = service.compare()
        assert [r.metric for r in rows] == ["CAC", "ROAS"]
        assert all(r.current_value is None for r in rows)

    def test_response_keys_fixed(self, service: KPIService) -> None:
        """Key names do not change with the window length."""
        rows = service.to_response(service.compare(date(2025, 7, 1), 7))
        assert set(rows[0]) == {
            "metric",
            "last_30_days",
            "prior_30_days",
            "delta_absolute",
            "delta_percentage",
        }

    def test_invalid_days(self, service: KPIService) -> None:
        with pytest.raises(InvalidWindowError):
            service.compare(date(2025, 7, 1), 0)

    def test_schema_path_from_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """ADSPEND_SCHEMA_PATH points the service at another registry."""
        path = tmp_path / "registry.yaml"
        path.write_text(
            "kpi:\n  revenue_per_conversion: 100\n  default_window_days: 7\n"
        )
        monkeypatch.setenv("ADSPEND_SCHEMA_PATH", str(path))
        service = KPIService()
        assert service.default_window_days == 7
        service.ingest(RAW_CSV, "ad_spend.csv")
        assert service.store.query()[0].revenue_estimate == 200
