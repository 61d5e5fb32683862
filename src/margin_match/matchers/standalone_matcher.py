"""Standalone residual valuation rule (Rule 2)."""

from decimal import Decimal
from typing import Dict, List, Optional
import logging

from ..models import Combination, PairResult, PairResultType, PositionKey, PositionUsage
from ..config import MarginConfigManager
from ..core import AccountPositionPool, CombinationCatalog
from .base_matcher import BaseMatcher

logger = logging.getLogger(__name__)


class StandaloneMatcher(BaseMatcher):
    """Rule 2: Value residual lots at standalone margin.

    Each key with lots left after pairing is looked up as a same-contract
    hedge ("c,-c" for a buy, "-c,c" for a sell). The settlement price comes
    from leg 0 of that combination for a buy and leg 1 for a sell, and the
    per-lot margin is that price times the standalone multiplier (2).
    Residuals without a reference combination produce no result.
    """

    rule_number = 2

    def __init__(self, config_manager: MarginConfigManager):
        super().__init__(config_manager)
        self.multiplier = config_manager.get_standalone_multiplier()
        logger.info(f"Initialized StandaloneMatcher with multiplier {self.multiplier}")

    def find_pairs(
        self, pool: AccountPositionPool, catalog: CombinationCatalog
    ) -> List[PairResult]:
        """Value the residual lots of one account.

        Args:
            pool: Available lots of the account, after pairing
            catalog: Shared combination catalog

        Returns:
            Unpaired results in first-seen key order
        """
        results = []

        for key, quantity in pool.residuals():
            reference = catalog.find_standalone(key)
            price = self._reference_price(reference, key)

            if reference is None or price is None:
                logger.warning(
                    f"{pool.account}: no standalone combination '{catalog.standalone_name(key)}' "
                    f"for {quantity} residual lots of {key}, dropped"
                )
                pool.record_dropped(key)
                continue

            position = pool.representative(key)
            if position is None:
                continue

            margin_per_lot = price * self.multiplier
            result = PairResult(
                result_id=self.generate_result_id(),
                result_type=PairResultType.UNPAIRED,
                rule_order=self.rule_number,
                account=pool.account,
                combination=reference,
                pair_count=quantity,
                margin_per_unit=margin_per_lot,
                total_margin_saving=margin_per_lot * quantity,
                position_usages=[PositionUsage(position=position, used_quantity=quantity)],
            )

            if pool.record_residual(result, key):
                results.append(result)
                logger.debug(f"Valued {pool.account}: {result.summary_line}")

        logger.info(f"{pool.account}: valued {len(results)} unpaired positions")
        return results

    def _reference_price(
        self, reference: Optional[Combination], key: PositionKey
    ) -> Optional[Decimal]:
        """Settlement price for the residual: leg 0 for buy, leg 1 for sell."""
        if reference is None:
            return None
        if not reference.is_standalone_reference:
            logger.warning(
                f"Standalone combination '{reference.name}' (row {reference.source_row}) "
                f"is not a two-leg hedge of {key.contract}"
            )
        leg_index = 0 if key.is_buy else 1
        if leg_index >= len(reference.legs):
            logger.warning(
                f"Standalone combination '{reference.name}' has no leg {leg_index}"
            )
            return None
        return reference.legs[leg_index].settlement_price

    def get_rule_info(self) -> Dict:
        """Get information about the standalone residual rule.

        Returns:
            Dictionary with rule metadata
        """
        return {
            "rule_number": self.rule_number,
            "name": self.rule_name,
            "description": "Values unpaired lots at settlement price x "
            f"{self.multiplier} per lot",
            "matched_fields": [
                "standalone name (c,-c for buy, -c,c for sell)",
                "lowest priority reference",
            ],
            "notes": "Buy residuals price from leg 0, sell residuals from leg 1",
        }
