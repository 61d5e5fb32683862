"""Shared row processing for catalog and position loaders."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, Iterable, List, Optional, Tuple, TypeVar, Union
import logging

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from ..config import MarginConfigManager
from ..normalizers import RecordNormalizer
from ..utils.type_coercion import safe_str
from ..validation import LoadError, RowParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SourcePath = Union[str, Path]


class BaseSourceLoader(ABC, Generic[T]):
    """Base class for loaders that turn delimited rows into models.

    Rows that are short or fail validation are skipped and their 1-based
    source line numbers kept in ``skipped_rows``. Only a source that cannot
    be read fails the load.
    """

    data_type: str = "records"

    def __init__(
        self,
        config_manager: Optional[MarginConfigManager] = None,
        normalizer: Optional[RecordNormalizer] = None,
    ):
        self.config_manager = config_manager or MarginConfigManager()
        self.normalizer = normalizer or RecordNormalizer(self.config_manager)
        self.skipped_rows: List[int] = []

    @property
    @abstractmethod
    def min_fields(self) -> int:
        """Minimum number of fields a row needs."""

    @abstractmethod
    def _load_error(self, message: str, file_path: str) -> LoadError:
        """Build the typed load error for this source."""

    @abstractmethod
    def _read_rows(self, path: Path) -> Iterable[Tuple[int, List[str]]]:
        """Yield (line number, fields) for each data row of the source."""

    @abstractmethod
    def _create_record(self, fields: List[str], row_number: int) -> T:
        """Create a model from one row.

        Raises:
            PydanticValidationError: If a field fails validation
            RowParseError: If the row cannot be interpreted
        """

    def load(self, source: SourcePath) -> List[T]:
        """Load all valid records from a source file.

        Args:
            source: Path to the source file

        Returns:
            List of records in source order

        Raises:
            LoadError: If the source cannot be read
        """
        path = Path(source)
        logger.info(f"Loading {self.data_type} from: {path}")

        try:
            # Materialize rows so a late read failure leaves no partial result
            rows = list(self._read_rows(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {self.data_type} source {path}: {e}")
            raise self._load_error(f"Could not load {self.data_type} source", str(path)) from e

        records = self._process_rows(rows)
        logger.info(f"Loaded {len(records)} {self.data_type} from {path}")
        return records

    def from_dataframe(self, df: pd.DataFrame) -> List[T]:
        """Create records from a DataFrame whose header rows are already removed.

        Columns are taken positionally in the source column order.

        Args:
            df: DataFrame with one source row per DataFrame row

        Returns:
            List of records in DataFrame order
        """
        df = df.reset_index(drop=True)
        rows = []
        for i, row in df.iterrows():
            fields = [safe_str(value, default="") for value in row.tolist()]
            while fields and not fields[-1]:
                fields.pop()
            rows.append((int(i) + 1, fields))

        records = self._process_rows(rows)
        logger.info(f"Created {len(records)} {self.data_type} from DataFrame")
        return records

    def _process_rows(self, rows: Iterable[Tuple[int, List[str]]]) -> List[T]:
        self.skipped_rows = []
        records = []

        for row_number, fields in rows:
            if not any(fields):
                continue

            if len(fields) < self.min_fields:
                logger.warning(
                    f"Skipping {self.data_type} row {row_number}: "
                    f"{len(fields)} fields, need {self.min_fields}"
                )
                self.skipped_rows.append(row_number)
                continue

            try:
                records.append(self._create_record(fields, row_number))
            except (PydanticValidationError, RowParseError) as e:
                logger.warning(f"Skipping {self.data_type} row {row_number}: {e}")
                self.skipped_rows.append(row_number)

        if self.skipped_rows:
            logger.info(f"Skipped {len(self.skipped_rows)} malformed {self.data_type} rows")

        return records
