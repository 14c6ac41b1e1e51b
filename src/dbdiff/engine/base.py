"""
Shared pieces of the diff engines: run statistics and statement building.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import asdict, dataclass
from typing import Any

from utils.database_types import DatabaseType

from ..errors import DegenerateClauseError
from ..render import Statement, StatementType
from ..schema import TableSchema

logger = logging.getLogger(__name__)


@dataclass
class DiffStats:
    """Counters collected while a diff runs."""

    strategy: str
    source_rows: int = 0
    target_rows: int = 0
    inserts: int = 0
    updates: int = 0
    deletes: int = 0
    suppressed: int = 0
    duration_seconds: float = 0.0

    @property
    def total_statements(self) -> int:
        return self.inserts + self.updates + self.deletes

    def count(self, statement_type: StatementType) -> None:
        if statement_type is StatementType.INSERT:
            self.inserts += 1
        elif statement_type is StatementType.UPDATE:
            self.updates += 1
        else:
            self.deletes += 1

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["total_statements"] = self.total_statements
        return data


class DiffEngine:
    """Base class for the local and remote strategies."""

    strategy = "base"

    def __init__(self, schema: TableSchema, db_type: DatabaseType, chunk_size: int = 1000):
        self.schema = schema
        self.db_type = db_type
        self.chunk_size = chunk_size
        self.stats = DiffStats(strategy=self.strategy)

    def diff(self, source_table: str, target_table: str) -> Iterator[Statement]:
        raise NotImplementedError

    def _has_primary_key(self, target_table: str) -> bool:
        if self.schema.has_primary_key:
            return True
        logger.warning(
            f"Table {target_table} has no primary key, rows cannot be matched; "
            f"no statements will be generated"
        )
        return False

    def _statement(
        self,
        statement_type: StatementType,
        table: str,
        key: tuple,
        render: Callable[[], str],
    ) -> Statement | None:
        """Render a statement, or count it as suppressed if a clause is empty."""
        try:
            sql = render()
        except DegenerateClauseError as e:
            self.stats.suppressed += 1
            logger.debug(f"Suppressed {statement_type.value} on {table} for key {key}: {e}")
            return None

        self.stats.count(statement_type)
        return Statement(statement_type=statement_type, table=table, key=key, sql=sql)
