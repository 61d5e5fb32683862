"""Loader for combination margin parameter files."""

from pathlib import Path
from typing import Iterator, List, Optional, Tuple
import logging

from ..config import MarginConfigManager
from ..models import Combination
from ..normalizers import RecordNormalizer
from ..schemas import CombinationRowSchema
from ..validation import CatalogLoadError, LoadError
from .base_loader import BaseSourceLoader

logger = logging.getLogger(__name__)


class CombinationCatalogLoader(BaseSourceLoader[Combination]):
    """Loads combination templates from a tab-delimited parameter file.

    Layout: header rows first, then one combination per line with columns
    date, name, settlement prices, priority, margin and attribute. Runs of
    tabs count as a single delimiter.
    """

    data_type = "combinations"

    def __init__(
        self,
        config_manager: Optional[MarginConfigManager] = None,
        normalizer: Optional[RecordNormalizer] = None,
    ):
        super().__init__(config_manager, normalizer)
        self.settings = self.config_manager.get_catalog_settings()

    @property
    def min_fields(self) -> int:
        return int(self.settings["min_fields"])

    def _load_error(self, message: str, file_path: str) -> LoadError:
        return CatalogLoadError(message, file_path=file_path)

    def _read_rows(self, path: Path) -> Iterator[Tuple[int, List[str]]]:
        header_rows = int(self.settings["header_rows"])
        with open(path, "r", encoding=self.settings["encoding"]) as f:
            for line_number, line in enumerate(f, start=1):
                if line_number <= header_rows:
                    continue
                yield line_number, self.normalizer.split_catalog_line(line)

    def _create_record(self, fields: List[str], row_number: int) -> Combination:
        row = CombinationRowSchema.model_validate(
            {
                "date": fields[0],
                "name": fields[1],
                "settlement_prices": fields[2],
                "priority": fields[3],
                "margin": fields[4],
                "attribute": fields[5],
            },
            context={"thousands_separator": self.normalizer.thousands_separator},
        )

        legs = self.normalizer.parse_legs(row.name, row.settlement_prices, row_number)

        return Combination(
            date=row.date,
            name=row.name,
            legs=legs,
            priority=row.priority,
            margin=row.margin,
            attribute=row.attribute,
            source_row=row_number,
        )
