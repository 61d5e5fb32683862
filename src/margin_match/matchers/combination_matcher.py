"""Combination pairing rule (Rule 1)."""

from typing import Dict, List
import logging

from ..models import Combination, PairResult, PairResultType, PositionUsage
from ..config import MarginConfigManager
from ..core import AccountPositionPool, CombinationCatalog
from .base_matcher import BaseMatcher

logger = logging.getLogger(__name__)


class CombinationMatcher(BaseMatcher):
    """Rule 1: Greedy priority-ordered combination pairing.

    Walks the catalog from the lowest priority value up. A combination
    matches only when every leg has lots available; it then takes as many
    full leg sets as the scarcest leg allows and consumes them at once.
    Earlier matches are never revisited, so the result is greedy rather
    than globally optimal.
    """

    rule_number = 1

    def __init__(self, config_manager: MarginConfigManager):
        super().__init__(config_manager)
        logger.info("Initialized CombinationMatcher")

    def find_pairs(
        self, pool: AccountPositionPool, catalog: CombinationCatalog
    ) -> List[PairResult]:
        """Find paired results for one account.

        Args:
            pool: Available lots of the account
            catalog: Shared combination catalog

        Returns:
            Paired results in the order the combinations matched
        """
        results = []

        for combination in catalog.by_priority():
            keys = combination.leg_keys
            pair_count = pool.matchable_sets(keys)
            if pair_count <= 0:
                continue

            result = self._create_pair_result(pool, combination, pair_count)

            if pool.record_pair(result, keys):
                results.append(result)
                logger.debug(f"Matched {pool.account}: {result.summary_line}")
            else:
                logger.warning(
                    f"Failed to record {combination.name} for {pool.account}"
                )

        logger.info(f"{pool.account}: found {len(results)} paired combinations")
        return results

    def _create_pair_result(
        self, pool: AccountPositionPool, combination: Combination, pair_count: int
    ) -> PairResult:
        usages = []
        for key in combination.leg_keys:
            position = pool.representative(key)
            if position is not None:
                usages.append(PositionUsage(position=position, used_quantity=pair_count))

        return PairResult(
            result_id=self.generate_result_id(),
            result_type=PairResultType.PAIRED,
            rule_order=self.rule_number,
            account=pool.account,
            combination=combination,
            pair_count=pair_count,
            margin_per_unit=combination.margin,
            total_margin_saving=combination.margin * pair_count,
            position_usages=usages,
        )

    def get_rule_info(self) -> Dict:
        """Get information about the combination pairing rule.

        Returns:
            Dictionary with rule metadata
        """
        return {
            "rule_number": self.rule_number,
            "name": self.rule_name,
            "description": "Pairs positions against catalog combinations in ascending priority order",
            "matched_fields": [
                "leg contract",
                "leg direction",
                "account",
            ],
            "notes": "Greedy: consumed lots are not reallocated to later combinations",
        }
