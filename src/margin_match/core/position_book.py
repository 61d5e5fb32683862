"""Position book grouping client positions per account."""

from typing import Dict, Iterator, List, Sequence
import logging

from ..models import Position

logger = logging.getLogger(__name__)


class PositionBook:
    """Holds position records grouped by account.

    Accounts are kept in the order they first appear in the source, which
    fixes the order of per-account results.
    """

    def __init__(self, positions: Sequence[Position]):
        self._positions: List[Position] = list(positions)
        self._by_account: Dict[str, List[Position]] = {}

        for position in self._positions:
            self._by_account.setdefault(position.account, []).append(position)

        logger.info(
            f"Initialized position book with {len(self._positions)} positions "
            f"across {len(self._by_account)} accounts"
        )

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def accounts(self) -> List[str]:
        return list(self._by_account)

    def positions_for(self, account: str) -> List[Position]:
        """Get all position records of an account in source order."""
        return list(self._by_account.get(account, []))

    def total_quantity(self, account: str) -> int:
        """Total lots held by an account across all contracts and directions."""
        return sum(position.quantity for position in self._by_account.get(account, []))
