"""CSV allocation provider.

Reads the static allocation CSV (``project_name``, ``bera_amount``) into
untyped string records. The parser is tolerant: a missing, unreadable or
empty file yields no records, and ragged rows are relaxed rather than
aborting the whole parse.
"""

import csv
import io
import logging
import time
from pathlib import Path

from ...core.models import RawRecord
from ...core.types import DataSource
from ..base import BaseProvider

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("project_name", "bera_amount")


class CSVAllocationProvider(BaseProvider):
    """Loads raw allocation records from a delimited text file."""

    SOURCE = DataSource.CSV

    def __init__(self, csv_path: Path | str | None = None, delimiter: str = ","):
        """
        Initialize CSV allocation provider.

        Args:
            csv_path: Path to the allocation CSV file
            delimiter: Field delimiter
        """
        super().__init__()
        self.csv_path = Path(csv_path) if csv_path else None
        self.delimiter = delimiter

    def is_available(self) -> bool:
        """Check if the CSV file exists and is a regular file."""
        if self.csv_path is None:
            return False
        return self.csv_path.is_file()

    def parse_text(self, text: str) -> list[dict[str, str]]:
        """
        Parse delimited text with a header row into field mappings.

        Values and header names are trimmed. Short rows are padded with
        empty strings, extra cells are dropped, blank lines are skipped
        and lines the csv module cannot parse are skipped.

        Args:
            text: Raw CSV text including the header row

        Returns:
            List of dicts keyed by header name
        """
        if not text or not text.strip():
            return []

        reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=self.delimiter)

        header: list[str] | None = None
        records: list[dict[str, str]] = []

        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                logger.debug(f"Skipping unparseable line {reader.line_num}: {e}")
                continue

            if not row or all(not cell.strip() for cell in row):
                continue

            if header is None:
                header = [cell.strip() for cell in row]
                missing = [c for c in REQUIRED_COLUMNS if c not in header]
                if missing:
                    logger.warning(f"CSV header is missing columns: {', '.join(missing)}")
                continue

            if len(row) != len(header):
                logger.debug(
                    f"Line {reader.line_num} has {len(row)} fields, expected {len(header)}"
                )

            record = {}
            for i, name in enumerate(header):
                record[name] = row[i].strip() if i < len(row) else ""
            records.append(record)

        return records

    def get_records(self, csv_path: Path | str | None = None) -> list[dict[str, str]]:
        """
        Read and parse the allocation file.

        Args:
            csv_path: Optional path overriding the configured one

        Returns:
            Parsed records, or an empty list when the file is absent,
            unreadable or empty
        """
        path = Path(csv_path) if csv_path else self.csv_path
        if path is None:
            logger.error("No CSV path configured")
            return []

        start_time = time.time()

        if not path.is_file():
            logger.error(f"CSV file not found: {path}")
            self._record_audit(
                action="load",
                endpoint=str(path),
                success=False,
                error_message="File not found",
            )
            return []

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            self._record_audit(
                action="load",
                endpoint=str(path),
                success=False,
                error_message=str(e),
            )
            return []

        if not text.strip():
            logger.warning(f"CSV file is empty: {path}")
            return []

        records = self.parse_text(text)
        if not records:
            logger.warning(f"No valid records found in {path}")

        self._record_audit(
            action="load",
            endpoint=str(path),
            success=True,
            duration_ms=self._elapsed_ms(start_time),
            notes=f"Loaded {len(records)} rows",
        )
        logger.info(f"Loaded {len(records)} allocation rows from {path}")
        return records

    def get_raw_records(self, csv_path: Path | str | None = None) -> list[RawRecord]:
        """
        Read the allocation file as RawRecord objects.

        Rows without a project name cannot be keyed and are skipped.
        """
        raw_records = []
        for row in self.get_records(csv_path):
            record = RawRecord.from_row(row)
            if not record.project_name:
                logger.debug(f"Skipping row without project_name: {row}")
                continue
            raw_records.append(record)
        return raw_records
