"""Per-account pool of available position lots."""

from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING
import logging

from ..models import Position, PositionKey

if TYPE_CHECKING:
    from ..models import PairResult

logger = logging.getLogger(__name__)


class AccountPositionPool:
    """Manages the lots of one account still available for matching.

    Created for a single account pass and discarded afterwards. Quantities of
    records sharing a (contract, direction) key are summed; consumption is
    immediate and irreversible, so earlier matches reduce what later
    combinations can see.
    """

    def __init__(self, account: str, positions: Sequence[Position]):
        """Initialize the pool from an account's position records.

        Args:
            account: Account identifier
            positions: Position records of that account
        """
        self.account = account
        self._available: Dict[PositionKey, int] = {}
        self._representatives: Dict[PositionKey, Position] = {}

        for position in positions:
            if position.account != account:
                raise ValueError(
                    f"Position {position.display_id} belongs to {position.account}, not {account}"
                )
            key = position.key
            self._available[key] = self._available.get(key, 0) + position.quantity
            # First record for the key represents it in usages
            self._representatives.setdefault(key, position)

        self._original_total = sum(self._available.values())
        self._paired_lots = 0
        self._unpaired_lots = 0
        self._dropped: List[Tuple[PositionKey, int]] = []
        self._match_history: List[Tuple[str, int, str]] = []  # (name, count, type)

        logger.debug(
            f"Initialized pool for {account} with {len(self._available)} keys, "
            f"{self._original_total} lots"
        )

    def available(self, key: PositionKey) -> int:
        """Lots still available for a key, 0 when the account never held it."""
        return self._available.get(key, 0)

    def keys(self) -> List[PositionKey]:
        """Pool keys in first-seen order."""
        return list(self._available)

    def representative(self, key: PositionKey) -> Optional[Position]:
        """Representative position record for a key."""
        return self._representatives.get(key)

    def matchable_sets(self, keys: Sequence[PositionKey]) -> int:
        """Number of full leg sets currently available for these keys.

        Returns 0 when any key is absent or exhausted. A key listed twice
        needs two lots per set.
        """
        if not keys:
            return 0
        counts = []
        for key, needed in Counter(keys).items():
            count = self._available.get(key)
            if count is None or count <= 0:
                return 0
            counts.append(count // needed)
        return min(counts)

    def residuals(self) -> List[Tuple[PositionKey, int]]:
        """Keys with lots left over, in first-seen order."""
        return [(key, qty) for key, qty in self._available.items() if qty > 0]

    def record_pair(self, match_result: "PairResult", keys: Sequence[PositionKey]) -> bool:
        """Atomically consume ``pair_count`` lots from every leg key.

        Args:
            match_result: The paired result being committed
            keys: Pool keys of the combination legs

        Returns:
            True if all legs were consumed, False if any leg lacked lots
        """
        count = match_result.pair_count
        required = Counter(keys)

        # Verify every leg first so a failure leaves no partial state
        for key, needed in required.items():
            if self._available.get(key, 0) < count * needed:
                logger.warning(
                    f"{self.account}: {key} has {self.available(key)} lots, "
                    f"cannot consume {count * needed} for {match_result.combination.name}"
                )
                return False

        for key, needed in required.items():
            self._available[key] -= count * needed

        self._paired_lots += count * len(keys)
        self._match_history.append(
            (match_result.combination.name, count, match_result.result_type.value)
        )
        logger.debug(
            f"{self.account}: consumed {count} sets for {match_result.combination.name}"
        )
        return True

    def record_residual(self, match_result: "PairResult", key: PositionKey) -> bool:
        """Consume all remaining lots of a key for an unpaired result."""
        remaining = self._available.get(key, 0)
        if remaining != match_result.pair_count:
            logger.warning(
                f"{self.account}: residual {key} has {remaining} lots, "
                f"result carries {match_result.pair_count}"
            )
            return False

        self._available[key] = 0
        self._unpaired_lots += remaining
        self._match_history.append(
            (match_result.combination.name, remaining, match_result.result_type.value)
        )
        return True

    def record_dropped(self, key: PositionKey) -> None:
        """Record a residual that has no standalone reference to value it."""
        remaining = self._available.get(key, 0)
        if remaining <= 0:
            return
        self._dropped.append((key, remaining))
        self._available[key] = 0

    def get_statistics(self) -> Dict[str, Any]:
        """Get pool statistics for this account.

        Returns:
            Dictionary with lot counts and pairing efficiency
        """
        return {
            "account": self.account,
            "original_lots": self._original_total,
            "paired_lots": self._paired_lots,
            "unpaired_lots": self._unpaired_lots,
            "dropped_lots": sum(qty for _, qty in self._dropped),
            "dropped_residuals": [(str(key), qty) for key, qty in self._dropped],
            "remaining_lots": sum(self._available.values()),
            "pairing_rate": (self._paired_lots / max(self._original_total, 1)) * 100,
            "match_history": self._match_history.copy(),
        }
