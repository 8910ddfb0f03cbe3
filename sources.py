import csv
from typing import Iterator, Optional, TextIO
from pydantic import ValidationError
import structlog

from errors import RecordParseError, SourceUnavailableError
from models import Transaction

logger = structlog.get_logger()


class CsvTransactionSource:
    """Lazily read transaction records from a CSV file.

    The file is opened on ``__enter__`` so a missing input fails before any
    record is handed out. Records are validated one row at a time while
    iterating; the first bad row raises ``RecordParseError``.

        with CsvTransactionSource("transactions.csv") as source:
            for transaction in source:
                ...
    """

    def __init__(self, path: str, delimiter: str = ",", encoding: str = "utf-8"):
        self.path = path
        self.delimiter = delimiter
        self.encoding = encoding
        self._file: Optional[TextIO] = None

    def __enter__(self) -> "CsvTransactionSource":
        try:
            self._file = open(self.path, newline="", encoding=self.encoding)
        except OSError as e:
            raise SourceUnavailableError(self.path, e.strerror or str(e)) from e
        logger.debug("Transaction source opened", path=self.path)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __iter__(self) -> Iterator[Transaction]:
        if self._file is None:
            raise RuntimeError("CsvTransactionSource must be entered before iterating")

        reader = csv.DictReader(self._file, delimiter=self.delimiter, skipinitialspace=True)
        rows = iter(reader)
        while True:
            try:
                row = next(rows)
            except StopIteration:
                return
            except UnicodeDecodeError as e:
                # Raised before the line is counted
                raise RecordParseError(self.path, reader.line_num + 1, str(e)) from e
            except csv.Error as e:
                raise RecordParseError(self.path, reader.line_num, str(e)) from e
            yield self._parse_row(self._normalize(row), reader.line_num)

    @staticmethod
    def _normalize(row: dict) -> dict:
        # Short rows (no amount column) come back with None values
        return {
            key.strip().lower(): value
            for key, value in row.items()
            if key is not None and value is not None
        }

    def _parse_row(self, values: dict, line_number: int) -> Transaction:
        try:
            return Transaction.model_validate(values)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'record'}: {error['msg']}"
                for error in e.errors()
            )
            raise RecordParseError(self.path, line_number, details, row=values) from e
