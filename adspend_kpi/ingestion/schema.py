"""Schema registry loading for the ad spend dataset."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import SchemaLoadError
from ..models.ad_spend import REVENUE_PER_CONVERSION

DEFAULT_SCHEMA_PATH = Path(__file__).parent.parent / "config" / "schema_registry.yaml"


def _identity_map(names: tuple[str, ...]) -> dict[str, list[str]]:
    return {name: [name] for name in names}


IDENTIFIER_COLUMNS = ("date", "platform", "account", "campaign", "country", "device")
DECIMAL_COLUMNS = ("spend",)
INTEGER_COLUMNS = ("clicks", "impressions", "conversions")


@dataclass(frozen=True)
class AdSpendSchema:
    """Column layout and KPI constants.

    column_map: {internal_name: [raw header names]}
    """

    delimiter: str = ","
    column_map: dict[str, list[str]] = field(
        default_factory=lambda: _identity_map(
            IDENTIFIER_COLUMNS + DECIMAL_COLUMNS + INTEGER_COLUMNS
        )
    )
    identifier_columns: tuple[str, ...] = IDENTIFIER_COLUMNS
    decimal_columns: tuple[str, ...] = DECIMAL_COLUMNS
    integer_columns: tuple[str, ...] = INTEGER_COLUMNS
    revenue_per_conversion: float = REVENUE_PER_CONVERSION
    default_window_days: int = 30

    def internal_name(self, raw_name: str) -> str | None:
        """Resolve a trimmed raw header name to its internal column name."""
        for internal, aliases in self.column_map.items():
            if raw_name == internal or raw_name in aliases:
                return internal
        return None

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "AdSpendSchema":
        """Build from the parsed YAML registry (``ad_spend`` and ``kpi`` keys)."""
        columns = config.get("ad_spend", {})
        kpi = config.get("kpi", {})
        defaults = cls()
        return cls(
            delimiter=columns.get("delimiter", defaults.delimiter),
            column_map={
                k: list(v)
                for k, v in columns.get("column_map", defaults.column_map).items()
            },
            identifier_columns=tuple(
                columns.get("identifier_columns", defaults.identifier_columns)
            ),
            decimal_columns=tuple(
                columns.get("decimal_columns", defaults.decimal_columns)
            ),
            integer_columns=tuple(
                columns.get("integer_columns", defaults.integer_columns)
            ),
            revenue_per_conversion=kpi.get(
                "revenue_per_conversion", defaults.revenue_per_conversion
            ),
            default_window_days=kpi.get(
                "default_window_days", defaults.default_window_days
            ),
        )


def load_schema(path: Path | None = None) -> AdSpendSchema:
    """Load schema configuration from YAML."""
    path = path or DEFAULT_SCHEMA_PATH
    try:
        with open(path) as f:
            return AdSpendSchema.from_dict(yaml.safe_load(f) or {})
    except Exception as e:
        raise SchemaLoadError(f"Failed to load schema from {path}: {e}") from e
