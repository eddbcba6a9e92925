"""Turn raw database records into column-name keyed rows."""

from __future__ import annotations

from typing import Dict, List, Sequence

from .errors import RowScanError
from .values import normalize_value


class RowMaterializer:
    """Map each record onto the column list produced by the query."""

    def __init__(self, columns: Sequence[str]) -> None:
        self.columns: List[str] = list(columns)

    def duplicates(self) -> List[str]:
        """Column names that occur more than once; the last occurrence wins."""

        seen = set()
        dupes: List[str] = []
        for column in self.columns:
            if column in seen and column not in dupes:
                dupes.append(column)
            seen.add(column)
        return dupes

    def materialize(self, record: Sequence[object], ordinal: int) -> Dict[str, object]:
        """
        Return ``{column: value}`` for one record.

        Values keep the kind the driver reported; byte containers become
        ``bytes``. ``ordinal`` is the 1-based record position used in errors.
        """

        try:
            values = list(record)
        except TypeError as exc:
            raise RowScanError(ordinal, f"record is not a sequence: {exc}") from exc
        if len(values) != len(self.columns):
            raise RowScanError(
                ordinal,
                f"expected {len(self.columns)} values, got {len(values)}",
            )
        return {
            column: normalize_value(value)
            for column, value in zip(self.columns, values)
        }
