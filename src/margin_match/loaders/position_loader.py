"""Loader for client position files."""

import csv
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
import logging

from ..config import MarginConfigManager
from ..models import Position
from ..normalizers import RecordNormalizer
from ..schemas import PositionRowSchema
from ..validation import LoadError, PositionLoadError
from .base_loader import BaseSourceLoader

logger = logging.getLogger(__name__)


class PositionBookLoader(BaseSourceLoader[Position]):
    """Loads client positions from a comma-delimited file.

    Columns: account, contract, direction, quantity. One header row.
    """

    data_type = "positions"

    def __init__(
        self,
        config_manager: Optional[MarginConfigManager] = None,
        normalizer: Optional[RecordNormalizer] = None,
    ):
        super().__init__(config_manager, normalizer)
        self.settings = self.config_manager.get_position_settings()

    @property
    def min_fields(self) -> int:
        return int(self.settings["min_fields"])

    def _load_error(self, message: str, file_path: str) -> LoadError:
        return PositionLoadError(message, file_path=file_path)

    def _read_rows(self, path: Path) -> Iterator[Tuple[int, List[str]]]:
        header_rows = int(self.settings["header_rows"])
        # utf-8-sig handles spreadsheet exports that start with a BOM
        encoding = self.settings["encoding"]
        if encoding.lower().replace("_", "-") == "utf-8":
            encoding = "utf-8-sig"

        with open(path, "r", encoding=encoding, newline="") as f:
            reader = csv.reader(f, delimiter=self.settings["delimiter"])
            for fields in reader:
                if reader.line_num <= header_rows:
                    continue
                yield reader.line_num, [field.strip() for field in fields]

    def _create_record(self, fields: List[str], row_number: int) -> Position:
        row = PositionRowSchema(
            account=fields[0],
            contract=fields[1],
            direction=fields[2],
            quantity=fields[3],
        )

        return Position(
            account=row.account,
            contract=row.contract,
            is_buy=self.normalizer.normalize_direction(row.direction),
            quantity=row.quantity,
            source_row=row_number,
        )
