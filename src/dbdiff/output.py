"""
Statement output.

StatementWriter turns generated statements into an SQL script, one
statement per line. open_output picks the destination. Either way the
script goes through a temporary file first: stdout receives it only once
the run has succeeded, and a file path is replaced by it only then.
"""

import contextlib
import logging
import os
import shutil
import sys
import tempfile
from collections import Counter
from collections.abc import Iterable, Iterator
from typing import TextIO

from utils.database_types import DatabaseType

from .render import Statement, StatementType

logger = logging.getLogger(__name__)


class StatementWriter:
    """Write statements to a text stream, optionally inside a transaction."""

    def __init__(
        self,
        stream: TextIO,
        db_type: DatabaseType = DatabaseType.MYSQL,
        transaction: bool = False,
    ):
        self.stream = stream
        self.db_type = db_type
        self.transaction = transaction
        self.counts: Counter[StatementType] = Counter()
        self._in_transaction = False

    def write(self, statement: Statement) -> None:
        # BEGIN is deferred so that an empty diff produces an empty script
        if self.transaction and not self._in_transaction:
            self.stream.write(f"{self.db_type.begin_transaction};\n")
            self._in_transaction = True

        self.stream.write(f"{statement.sql};\n")
        self.counts[statement.statement_type] += 1

    def write_all(self, statements: Iterable[Statement]) -> int:
        written = 0
        for statement in statements:
            self.write(statement)
            written += 1
        return written

    def close(self) -> None:
        """Finish the script. Does not close the underlying stream."""
        if self._in_transaction:
            self.stream.write("COMMIT;\n")
            self._in_transaction = False
        self.stream.flush()

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@contextlib.contextmanager
def open_output(path: str | None = None) -> Iterator[TextIO]:
    """
    Open the destination for a generated script.

    Args:
        path: File to write, or None / "-" for stdout

    Yields:
        Writable text stream
    """
    if path is None or path == "-":
        # spooled to disk so that a failed run prints nothing
        with tempfile.TemporaryFile("w+", encoding="utf-8") as spool:
            yield spool
            spool.seek(0)
            shutil.copyfileobj(spool, sys.stdout)
            sys.stdout.flush()
        return

    directory = os.path.dirname(os.path.abspath(path))
    fd, temp_path = tempfile.mkstemp(prefix=".dbdiff-", suffix=".sql", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as stream:
            yield stream
        os.replace(temp_path, path)
        logger.info(f"Script written to {path}")
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_path)
        raise
