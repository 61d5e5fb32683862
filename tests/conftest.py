"""Shared fixtures for margin matching tests."""

from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Sequence

import pytest

from margin_match.config import MarginConfigManager
from margin_match.models import Combination, Position
from margin_match.normalizers import RecordNormalizer

CATALOG_HEADER = [
    "Combination margin offset parameters",
    "Exchange: DCE\tGenerated: 2025-10-17",
    "date\tname\tsettlement_prices\tpriority\tmargin\tattribute",
]

POSITIONS_HEADER = "account,contract,direction,quantity"

SAMPLE_DATA_DIR = Path(__file__).parent.parent / "src" / "margin_match" / "data"


@pytest.fixture
def config_manager() -> MarginConfigManager:
    return MarginConfigManager()


@pytest.fixture
def normalizer(config_manager: MarginConfigManager) -> RecordNormalizer:
    return RecordNormalizer(config_manager)


@pytest.fixture
def make_combination(normalizer: RecordNormalizer) -> Callable[..., Combination]:
    """Build a combination the way the catalog loader does."""
    counter = {"row": 3}

    def _make(name: str, prices: str, priority: int, margin: str) -> Combination:
        counter["row"] += 1
        return Combination(
            date="20251017",
            name=name,
            legs=normalizer.parse_legs(name, prices),
            priority=priority,
            margin=Decimal(margin),
            attribute="test",
            source_row=counter["row"],
        )

    return _make


@pytest.fixture
def make_position() -> Callable[..., Position]:
    counter = {"row": 1}

    def _make(account: str, contract: str, direction: str, quantity: int) -> Position:
        counter["row"] += 1
        return Position(
            account=account,
            contract=contract,
            is_buy=direction == "buy",
            quantity=quantity,
            source_row=counter["row"],
        )

    return _make


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[[Sequence[str]], Path]:
    """Write catalog rows (already tab-joined) below the three header rows."""

    def _write(rows: Sequence[str], name: str = "combinations.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([*CATALOG_HEADER, *rows]) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_positions(tmp_path: Path) -> Callable[[Sequence[str]], Path]:
    """Write position rows below the header row."""

    def _write(rows: Sequence[str], name: str = "positions.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([POSITIONS_HEADER, *rows]) + "\n", encoding="utf-8")
        return path

    return _write


def tab_row(*fields: str) -> str:
    return "\t".join(fields)


@pytest.fixture
def scenario_catalog(make_combination) -> List[Combination]:
    """Same-month hedges for a2601 plus an a2601/a2603 calendar spread."""
    return [
        make_combination("a2601,-a2601", "4203,4203", 1, "840.60"),
        make_combination("-a2601,a2601", "4203,4203", 1, "840.60"),
        make_combination("a2603,-a2603", "4180,4180", 1, "836.00"),
        make_combination("-a2603,a2603", "4180,4180", 1, "836.00"),
        make_combination("a2601,-a2603", "4203,4180", 250, "3362.40"),
    ]
