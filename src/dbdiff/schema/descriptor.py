"""
Table schema descriptor.

A TableSchema captures what the diff engines need to know about a table:
its ordered column names and which column positions form the primary key.
Column identity is positional, so two tables are comparable only when their
columns appear in the same order.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import SchemaError, SchemaIncompatibleError

logger = logging.getLogger(__name__)

# Column positions must fit a signed 32-bit index.
MAX_COLUMNS = 2**31 - 1


@dataclass(frozen=True)
class TableSchema:
    """Ordered column names plus the sorted positions of the primary key."""

    column_names: tuple[str, ...]
    primary_key_indices: tuple[int, ...] = ()

    def __post_init__(self):
        names = tuple(self.column_names)
        if len(names) > MAX_COLUMNS:
            raise SchemaError(f"too many columns in table ({len(names)})")

        seen = set()
        for name in names:
            if name in seen:
                raise SchemaError(f"duplicate column name {name!r}")
            seen.add(name)

        key = tuple(sorted(set(self.primary_key_indices)))
        for index in key:
            if not 0 <= index < len(names):
                raise SchemaError(
                    f"primary key index {index} out of range for {len(names)} columns"
                )

        object.__setattr__(self, "column_names", names)
        object.__setattr__(self, "primary_key_indices", key)

    @classmethod
    def build(
        cls, column_names: Sequence[str], primary_key_indices: Iterable[int]
    ) -> "TableSchema":
        """Build a descriptor from names and key positions in any order."""
        return cls(tuple(column_names), tuple(primary_key_indices))

    @classmethod
    def from_columns(cls, columns: Iterable[tuple[str, bool]]) -> "TableSchema":
        """
        Build a descriptor from (name, is_primary_key) pairs.

        Args:
            columns: Column definitions in table order

        Returns:
            TableSchema
        """
        names = []
        key = []
        for position, (name, is_key) in enumerate(columns):
            names.append(name)
            if is_key:
                key.append(position)
        return cls(tuple(names), tuple(key))

    @property
    def field_count(self) -> int:
        return len(self.column_names)

    @property
    def all_indices(self) -> tuple[int, ...]:
        return tuple(range(self.field_count))

    @property
    def non_key_indices(self) -> tuple[int, ...]:
        key = set(self.primary_key_indices)
        return tuple(i for i in range(self.field_count) if i not in key)

    @property
    def has_primary_key(self) -> bool:
        return bool(self.primary_key_indices)

    @property
    def primary_key_names(self) -> list[str]:
        return [self.column_names[i] for i in self.primary_key_indices]

    def compatible(self, other: "TableSchema") -> bool:
        """Same columns in the same order and the same primary key set."""
        return (
            self.column_names == other.column_names
            and self.primary_key_indices == other.primary_key_indices
        )

    def ensure_compatible(self, other: "TableSchema") -> None:
        """
        Raise SchemaIncompatibleError describing the first difference found.

        Args:
            other: Descriptor of the table being compared against
        """
        if self.compatible(other):
            return

        if self.field_count != other.field_count:
            detail = f"column count {self.field_count} != {other.field_count}"
        elif self.column_names != other.column_names:
            position = next(
                i for i, (a, b) in enumerate(zip(self.column_names, other.column_names))
                if a != b
            )
            detail = (
                f"column {position} is {self.column_names[position]!r} "
                f"vs {other.column_names[position]!r}"
            )
        else:
            detail = (
                f"primary key ({', '.join(self.primary_key_names)}) "
                f"vs ({', '.join(other.primary_key_names)})"
            )

        raise SchemaIncompatibleError(
            f"table definitions differ: {detail}", source=self, target=other
        )

    def extract_key(self, row: Sequence[Any]) -> tuple:
        """Primary-key composite of a row."""
        return tuple(row[i] for i in self.primary_key_indices)

    def change_set(
        self,
        left: Sequence[Any],
        right: Sequence[Any],
        offset: int = 0,
        indices: Iterable[int] | None = None,
    ) -> list[int]:
        """
        Column positions whose values differ between two rows.

        Compares left[i] with right[i + offset] for every column in indices
        (all columns by default), which lets the caller pass one joined row
        holding both halves side by side. None only equals None.
        """
        if indices is None:
            indices = self.all_indices
        return [i for i in indices if left[i] != right[i + offset]]
