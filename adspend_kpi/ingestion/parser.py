"""Record parser: raw delimited text -> validated AdSpendRecord rows."""

from dataclasses import dataclass

import polars as pl

from ..exceptions import EmptyInputError
from ..models.ad_spend import AdSpendRecord
from .cleaner import apply_coercion, count_defaulted
from .schema import AdSpendSchema
from .validator import to_records


@dataclass(frozen=True)
class ParseStats:
    """Row accounting for one parse call.

    accepted + skipped == data_lines always holds.
    """

    total_lines: int  # Non-blank lines, header included
    accepted: int
    skipped: int  # Field count did not match the header
    defaulted_values: int = 0  # Numeric cells coerced to 0

    @property
    def data_lines(self) -> int:
        return max(self.total_lines - 1, 0)


def split_lines(raw_text: str) -> list[str]:
    """Split text into lines, discarding blank ones."""
    return [line for line in raw_text.splitlines() if line.strip()]


def _header_columns(
    header: list[str], schema: AdSpendSchema
) -> list[tuple[int, str]]:
    """Map header positions to internal column names.

    Unknown columns are dropped; if two headers resolve to the same
    internal name, the first one wins.
    """
    positions: list[tuple[int, str]] = []
    seen: set[str] = set()
    for i, raw_name in enumerate(header):
        internal = schema.internal_name(raw_name.strip())
        if internal is None or internal in seen:
            continue
        seen.add(internal)
        positions.append((i, internal))
    return positions


def parse(
    raw_text: str | None, schema: AdSpendSchema | None = None
) -> tuple[list[AdSpendRecord], ParseStats]:
    """Parse raw delimited text into typed records.

    The first non-blank line is the header. Rows whose field count differs
    from the header are skipped and counted, never fatal. Numeric fields
    that fail to parse default to 0.

    Args:
        raw_text: Full text of the delimited file
        schema: Column layout (default: built-in ad spend layout)

    Returns:
        Tuple of (records in input order, ParseStats)

    Raises:
        EmptyInputError: If the text is empty or has no data lines
    """
    schema = schema or AdSpendSchema()

    if not raw_text:
        raise EmptyInputError("Raw text is empty")

    # A UTF-8 byte order mark would otherwise stick to the first header name
    lines = split_lines(raw_text.removeprefix("\ufeff"))
    if not lines:
        raise EmptyInputError("Raw text contains no non-blank lines")
    if len(lines) == 1:
        raise EmptyInputError("Raw text contains a header but no data lines")

    header = lines[0].split(schema.delimiter)
    positions = _header_columns(header, schema)
    columns = [name for _, name in positions]

    # line_no keeps one frame row per accepted line even when no header
    # column is recognised.
    rows: list[list[int | str]] = []
    skipped = 0
    for line_no, line in enumerate(lines[1:], start=2):
        fields = line.split(schema.delimiter)
        if len(fields) != len(header):
            skipped += 1
            continue
        rows.append([line_no, *(fields[i].strip() for i, _ in positions)])

    df = pl.DataFrame(
        rows,
        schema={"line_no": pl.Int64, **{name: pl.Utf8 for name in columns}},
        orient="row",
    )

    defaulted = count_defaulted(
        df, list(schema.decimal_columns), list(schema.integer_columns)
    )

    df = apply_coercion(
        df,
        string_cols=list(schema.identifier_columns),
        decimal_cols=list(schema.decimal_columns),
        integer_cols=list(schema.integer_columns),
    )

    records = to_records(df)

    stats = ParseStats(
        total_lines=len(lines),
        accepted=len(records),
        skipped=skipped,
        defaulted_values=defaulted,
    )
    return records, stats
