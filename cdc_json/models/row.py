"""
ChangeRow Data Model - changelog row representation
A row of column values tagged with the kind of change it describes
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple


class RowKind(str, Enum):
    """Kind of change a changelog row applies to downstream state"""

    INSERT = "INSERT"
    UPDATE_BEFORE = "UPDATE_BEFORE"
    UPDATE_AFTER = "UPDATE_AFTER"
    DELETE = "DELETE"

    @property
    def short_string(self) -> str:
        """Compact notation used in row descriptions (+I, -U, +U, -D)"""
        return _SHORT_STRINGS[self]


_SHORT_STRINGS = {
    RowKind.INSERT: "+I",
    RowKind.UPDATE_BEFORE: "-U",
    RowKind.UPDATE_AFTER: "+U",
    RowKind.DELETE: "-D",
}


@dataclass(frozen=True)
class ChangeRow:
    """
    Single changelog row

    Attributes:
        kind: Change kind; upstream producers may hand over anything, the
            envelope mapper rejects values outside RowKind
        columns: Column values in schema field order
    """

    kind: Any
    columns: Tuple[Any, ...]

    @classmethod
    def of(cls, kind: Any, *columns: Any) -> "ChangeRow":
        """
        Build a row from positional column values

        Example:
            >>> ChangeRow.of(RowKind.INSERT, "sku-1", 42)
        """
        return cls(kind=kind, columns=tuple(columns))

    @classmethod
    def from_sequence(cls, kind: Any, columns: Sequence[Any]) -> "ChangeRow":
        return cls(kind=kind, columns=tuple(columns))

    def __len__(self) -> int:
        return len(self.columns)

    def __str__(self) -> str:
        prefix = self.kind.short_string if isinstance(self.kind, RowKind) else str(self.kind)
        if isinstance(self.columns, (tuple, list)):
            values = ",".join("null" if v is None else str(v) for v in self.columns)
        else:
            values = str(self.columns)
        return f"{prefix}({values})"
