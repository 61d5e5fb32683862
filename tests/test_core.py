"""Tests for catalog, position book and account pool."""

from decimal import Decimal

import pytest

from margin_match.core import (
    AccountPositionPool,
    CombinationCatalog,
    PositionBook,
    standalone_name,
)
from margin_match.models import PairResult, PairResultType, PositionKey


def _paired(combination, pair_count, account="client_A"):
    return PairResult(
        result_id="MRG_1_test",
        result_type=PairResultType.PAIRED,
        rule_order=1,
        account=account,
        combination=combination,
        pair_count=pair_count,
        margin_per_unit=combination.margin,
        total_margin_saving=combination.margin * pair_count,
    )


class TestCombinationCatalog:

    def test_by_priority_is_stable(self, make_combination):
        spread = make_combination("a2601,-a2603", "4203,4180", 250, "3362.40")
        first = make_combination("a2601,-a2601", "4203,4203", 1, "840.60")
        second = make_combination("-a2601,a2601", "4203,4203", 1, "840.60")

        ordered = CombinationCatalog([spread, first, second]).by_priority()

        assert [c.name for c in ordered] == ["a2601,-a2601", "-a2601,a2601", "a2601,-a2603"]

    def test_find_standalone_prefers_lowest_priority(self, make_combination):
        spread_copy = make_combination("a2601,-a2601", "9999,9999", 300, "1.00")
        reference = make_combination("a2601,-a2601", "4203,4203", 1, "840.60")
        tie = make_combination("a2601,-a2601", "1111,1111", 1, "840.60")

        catalog = CombinationCatalog([spread_copy, reference, tie])

        found = catalog.find_standalone(PositionKey("a2601", True))
        assert found is reference

    def test_find_standalone_for_sell_uses_reversed_name(self, make_combination):
        sell_reference = make_combination("-a2601,a2601", "4203,4210", 1, "840.60")
        catalog = CombinationCatalog([sell_reference])

        assert catalog.find_standalone(PositionKey("a2601", False)) is sell_reference
        assert catalog.find_standalone(PositionKey("a2601", True)) is None

    def test_standalone_name(self):
        assert standalone_name(PositionKey("a2601", True)) == "a2601,-a2601"
        assert standalone_name(PositionKey("a2601", False)) == "-a2601,a2601"

    def test_configured_name_format(self):
        catalog = CombinationCatalog([], sell_prefix="~", leg_separator=";")

        assert catalog.standalone_name(PositionKey("a2601", True)) == "a2601;~a2601"
        assert catalog.standalone_name(PositionKey("a2601", False)) == "~a2601;a2601"
        assert standalone_name(PositionKey("m2605", False), "~", ";") == "~m2605;m2605"

    def test_is_standalone_reference(self, make_combination):
        assert make_combination("a2601,-a2601", "4203,4203", 1, "840.60").is_standalone_reference
        assert make_combination("-a2601,a2601", "4203,4203", 1, "840.60").is_standalone_reference
        assert not make_combination("a2601,-a2603", "4203,4180", 250, "3362.40").is_standalone_reference
        assert not make_combination("a2601,a2601", "4203,4203", 9, "1.00").is_standalone_reference
        assert not make_combination("a2601,-a2601", "4203", 1, "840.60").is_standalone_reference

    def test_len_and_iteration_keep_source_order(self, scenario_catalog):
        catalog = CombinationCatalog(scenario_catalog)

        assert len(catalog) == 5
        assert list(catalog) == scenario_catalog


class TestPositionBook:

    def test_groups_by_account_in_first_seen_order(self, make_position):
        book = PositionBook([
            make_position("client_B", "m2601", "buy", 5),
            make_position("client_A", "a2601", "buy", 10),
            make_position("client_B", "m2605", "sell", 5),
        ])

        assert book.accounts() == ["client_B", "client_A"]
        assert [p.contract for p in book.positions_for("client_B")] == ["m2601", "m2605"]
        assert book.total_quantity("client_B") == 10
        assert book.positions_for("client_Z") == []


class TestAccountPositionPool:

    def test_sums_fungible_positions_and_keeps_first_representative(self, make_position):
        first = make_position("client_A", "a2601", "buy", 6)
        second = make_position("client_A", "a2601", "buy", 4)
        pool = AccountPositionPool("client_A", [first, second])

        key = PositionKey("a2601", True)
        assert pool.available(key) == 10
        assert pool.representative(key) is first

    def test_rejects_other_accounts(self, make_position):
        with pytest.raises(ValueError):
            AccountPositionPool("client_A", [make_position("client_B", "a2601", "buy", 1)])

    def test_matchable_sets_is_min_across_legs(self, make_position):
        pool = AccountPositionPool("client_A", [
            make_position("client_A", "a2601", "buy", 10),
            make_position("client_A", "a2601", "sell", 4),
        ])

        keys = [PositionKey("a2601", True), PositionKey("a2601", False)]
        assert pool.matchable_sets(keys) == 4
        assert pool.matchable_sets([PositionKey("a2601", True), PositionKey("a2603", False)]) == 0
        assert pool.matchable_sets([]) == 0

    def test_repeated_leg_needs_lots_per_occurrence(self, make_position):
        pool = AccountPositionPool("client_A", [make_position("client_A", "a2601", "buy", 5)])
        key = PositionKey("a2601", True)

        assert pool.matchable_sets([key, key]) == 2

    def test_record_pair_consumes_every_leg(self, make_position, make_combination):
        combo = make_combination("a2601,-a2601", "4203,4203", 1, "840.60")
        pool = AccountPositionPool("client_A", [
            make_position("client_A", "a2601", "buy", 10),
            make_position("client_A", "a2601", "sell", 4),
        ])

        assert pool.record_pair(_paired(combo, 4), combo.leg_keys)

        assert pool.available(PositionKey("a2601", True)) == 6
        assert pool.available(PositionKey("a2601", False)) == 0
        assert pool.residuals() == [(PositionKey("a2601", True), 6)]

    def test_record_pair_is_atomic(self, make_position, make_combination):
        combo = make_combination("a2601,-a2601", "4203,4203", 1, "840.60")
        pool = AccountPositionPool("client_A", [
            make_position("client_A", "a2601", "buy", 10),
            make_position("client_A", "a2601", "sell", 4),
        ])

        assert not pool.record_pair(_paired(combo, 5), combo.leg_keys)

        assert pool.available(PositionKey("a2601", True)) == 10
        assert pool.available(PositionKey("a2601", False)) == 4

    def test_record_dropped_shows_in_statistics(self, make_position):
        pool = AccountPositionPool("client_A", [make_position("client_A", "c2601", "buy", 3)])

        pool.record_dropped(PositionKey("c2601", True))
        stats = pool.get_statistics()

        assert stats["dropped_lots"] == 3
        assert stats["dropped_residuals"] == [("c2601 buy", 3)]
        assert stats["remaining_lots"] == 0
        assert pool.residuals() == []

    def test_statistics_track_pairing_rate(self, make_position, make_combination):
        combo = make_combination("a2601,-a2601", "4203,4203", 1, "840.60")
        pool = AccountPositionPool("client_A", [
            make_position("client_A", "a2601", "buy", 2),
            make_position("client_A", "a2601", "sell", 2),
        ])
        pool.record_pair(_paired(combo, 2), combo.leg_keys)

        stats = pool.get_statistics()

        assert stats["original_lots"] == 4
        assert stats["paired_lots"] == 4
        assert stats["pairing_rate"] == pytest.approx(100.0)
        assert stats["match_history"] == [("a2601,-a2601", 2, "paired")]
        assert combo.margin * 2 == Decimal("1681.20")
