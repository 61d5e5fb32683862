"""Tests for catalog and position loaders."""

import io
from decimal import Decimal

import pandas as pd
import pytest

from margin_match.loaders import CombinationCatalogLoader, PositionBookLoader
from margin_match.validation import CatalogLoadError, LoadError, PositionLoadError

from .conftest import tab_row


class TestCombinationCatalogLoader:

    def test_loads_rows_after_three_header_rows(self, config_manager, write_catalog):
        path = write_catalog([
            tab_row("20251017", "a2601,-a2601", "4203,4203", "1", "840.60", "same-month"),
            tab_row("20251017", "a2601,-a2603", "4203,4180", "250", "3362.40", "spread"),
        ])

        combos = CombinationCatalogLoader(config_manager).load(path)

        assert [c.name for c in combos] == ["a2601,-a2601", "a2601,-a2603"]
        first = combos[0]
        assert first.priority == 1
        assert first.margin == Decimal("840.60")
        assert first.attribute == "same-month"
        assert first.source_row == 4

    def test_derives_legs_from_name(self, config_manager, write_catalog):
        path = write_catalog([
            tab_row("20251017", "a2601,-a2603", "4203,4180", "250", "3362.40", "spread"),
        ])

        legs = CombinationCatalogLoader(config_manager).load(path)[0].legs

        assert [(leg.contract, leg.is_buy, leg.settlement_price) for leg in legs] == [
            ("a2601", True, Decimal("4203")),
            ("a2603", False, Decimal("4180")),
        ]

    def test_strips_thousands_separators_from_margin(self, config_manager, write_catalog):
        path = write_catalog([
            tab_row("20251017", "m2601,-m2605", "2950,2875", "260", "1,460", "spread"),
            tab_row("20251017", "y2601,-m2601", "8120,2950", "400", "1,234,567.89", "inter"),
        ])

        combos = CombinationCatalogLoader(config_manager).load(path)

        assert combos[0].margin == Decimal("1460")
        assert combos[1].margin == Decimal("1234567.89")

    def test_runs_of_tabs_are_one_delimiter(self, config_manager, write_catalog):
        path = write_catalog([
            "20251017\t\ta2601,-a2601\t4203,4203\t\t\t1\t840.60\tsame-month",
        ])

        combos = CombinationCatalogLoader(config_manager).load(path)

        assert len(combos) == 1
        assert combos[0].priority == 1

    def test_short_row_is_skipped_without_aborting(self, config_manager, write_catalog):
        path = write_catalog([
            tab_row("20251017", "a2601,-a2601", "4203,4203", "1"),
            tab_row("20251017", "a2603,-a2603", "4180,4180", "1", "836.00", "same-month"),
        ])
        loader = CombinationCatalogLoader(config_manager)

        combos = loader.load(path)

        assert [c.name for c in combos] == ["a2603,-a2603"]
        assert loader.skipped_rows == [4]

    @pytest.mark.parametrize("priority,margin,prices", [
        ("high", "840.60", "4203,4203"),
        ("1", "n/a", "4203,4203"),
        ("1", "840.60", "4203,abc"),
    ])
    def test_unparsable_numbers_skip_row(self, config_manager, write_catalog, priority, margin, prices):
        path = write_catalog([
            tab_row("20251017", "a2601,-a2601", prices, priority, margin, "same-month"),
            tab_row("20251017", "a2603,-a2603", "4180,4180", "1", "836.00", "same-month"),
        ])
        loader = CombinationCatalogLoader(config_manager)

        combos = loader.load(path)

        assert [c.name for c in combos] == ["a2603,-a2603"]
        assert loader.skipped_rows == [4]

    def test_unequal_price_list_keeps_overlapping_prefix(self, config_manager, write_catalog):
        path = write_catalog([
            tab_row("20251017", "a2601,-m2601,y2601", "4203,2950", "5", "100", "three legs"),
        ])

        combo = CombinationCatalogLoader(config_manager).load(path)[0]

        assert [leg.contract for leg in combo.legs] == ["a2601", "m2601"]

    def test_blank_lines_are_ignored(self, config_manager, write_catalog):
        path = write_catalog([
            "",
            tab_row("20251017", "a2601,-a2601", "4203,4203", "1", "840.60", "same-month"),
            "   ",
        ])
        loader = CombinationCatalogLoader(config_manager)

        assert len(loader.load(path)) == 1
        assert loader.skipped_rows == []

    def test_missing_file_raises_catalog_load_error(self, config_manager, tmp_path):
        missing = tmp_path / "missing.txt"

        with pytest.raises(CatalogLoadError) as exc_info:
            CombinationCatalogLoader(config_manager).load(missing)

        assert isinstance(exc_info.value, LoadError)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert exc_info.value.file_path == str(missing)
        assert "catalog" in str(exc_info.value)
        assert str(exc_info.value).startswith(
            f"Could not load combinations source | Data type: catalog | File: {missing} | Cause: "
        )

    def test_undecodable_file_raises_catalog_load_error(self, config_manager, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(b"\xff\xfe\xfa\n" * 5)

        with pytest.raises(CatalogLoadError):
            CombinationCatalogLoader(config_manager).load(path)

    def test_from_dataframe(self, config_manager):
        df = pd.DataFrame([
            ["20251017", "a2601,-a2601", "4203,4203", "1", "840.60", "same-month"],
            ["20251017", "bad", "x", "1", "1", None],
        ])
        loader = CombinationCatalogLoader(config_manager)

        combos = loader.from_dataframe(df)

        assert [c.name for c in combos] == ["a2601,-a2601"]
        assert loader.skipped_rows == [2]

    def test_from_read_csv_with_float_priority(self, config_manager):
        # The blank priority cell turns the column into float64
        df = pd.read_csv(io.StringIO(
            "date\tname\tprices\tpriority\tmargin\tattribute\n"
            "20251017\ta2601,-a2601\t4203,4203\t1\t840.60\tsame-month\n"
            "20251017\ta2603,-a2603\t4180,4180\t\t836.00\tsame-month\n"
        ), sep="\t", dtype={"date": str, "margin": str})
        loader = CombinationCatalogLoader(config_manager)

        combos = loader.from_dataframe(df)

        assert [(c.name, c.priority) for c in combos] == [("a2601,-a2601", 1)]
        assert loader.skipped_rows == [2]


class TestPositionBookLoader:

    def test_loads_rows_after_header(self, config_manager, write_positions):
        path = write_positions([
            "client_A,a2601,buy,10",
            "client_A,a2601,sell,4",
        ])

        positions = PositionBookLoader(config_manager).load(path)

        assert len(positions) == 2
        first = positions[0]
        assert (first.account, first.contract, first.is_buy, first.quantity) == (
            "client_A", "a2601", True, 10
        )
        assert positions[1].is_buy is False

    @pytest.mark.parametrize("token,expected", [
        ("BUY", True),
        ("Buy", True),
        (" buy ", True),
        ("sell", False),
        ("SELL", False),
        ("short", False),
    ])
    def test_direction_is_case_insensitive_and_non_buy_is_sell(
        self, config_manager, write_positions, token, expected
    ):
        path = write_positions([f"client_A,a2601,{token},1"])

        assert PositionBookLoader(config_manager).load(path)[0].is_buy is expected

    def test_short_and_malformed_rows_are_skipped(self, config_manager, write_positions):
        path = write_positions([
            "client_A,a2601,buy",
            "client_A,a2601,buy,ten",
            "client_A,a2601,buy,0",
            ",a2601,buy,3",
            "client_B,m2601,sell,5",
        ])
        loader = PositionBookLoader(config_manager)

        positions = loader.load(path)

        assert [p.account for p in positions] == ["client_B"]
        assert loader.skipped_rows == [2, 3, 4, 5]

    def test_missing_file_raises_position_load_error(self, config_manager, tmp_path):
        with pytest.raises(PositionLoadError) as exc_info:
            PositionBookLoader(config_manager).load(tmp_path / "nope.csv")

        assert exc_info.value.data_type == "positions"

    def test_from_dataframe(self, config_manager):
        df = pd.DataFrame(
            [["client_A", "a2601", "buy", 10], ["client_A", "a2601", "Sell", 4]],
            columns=["account", "contract", "direction", "quantity"],
        )

        positions = PositionBookLoader(config_manager).from_dataframe(df)

        assert [(p.is_buy, p.quantity) for p in positions] == [(True, 10), (False, 4)]

    def test_from_read_csv_with_blank_quantity(self, config_manager):
        # One blank cell makes pandas store the quantity column as float64
        df = pd.read_csv(io.StringIO(
            "account,contract,direction,quantity\n"
            "client_A,a2601,buy,10\n"
            "client_A,a2601,sell,4\n"
            "client_B,m2601,buy,\n"
        ))
        loader = PositionBookLoader(config_manager)

        positions = loader.from_dataframe(df)

        assert [(p.account, p.quantity) for p in positions] == [("client_A", 10), ("client_A", 4)]
        assert loader.skipped_rows == [3]

