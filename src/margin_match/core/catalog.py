"""Read-only combination catalog with priority ordering and standalone lookup."""

from typing import Dict, Iterator, List, Optional, Sequence
import logging

from ..models import Combination, PositionKey

logger = logging.getLogger(__name__)


def standalone_name(key: PositionKey, sell_prefix: str = "-", leg_separator: str = ",") -> str:
    """Build the name of the same-contract hedge used to value a residual.

    A buy residual of a2601 is valued from "a2601,-a2601"; a sell residual
    from "-a2601,a2601".
    """
    if key.is_buy:
        return f"{key.contract}{leg_separator}{sell_prefix}{key.contract}"
    return f"{sell_prefix}{key.contract}{leg_separator}{key.contract}"


class CombinationCatalog:
    """Holds the loaded combination templates.

    Loaded once and shared read-only across all account passes. Names are
    not unique; lookups by name resolve to the lowest priority value, the
    earliest catalog entry winning ties.
    """

    def __init__(
        self,
        combinations: Sequence[Combination],
        sell_prefix: str = "-",
        leg_separator: str = ",",
    ):
        """Initialize the catalog.

        Args:
            combinations: Combinations in catalog source order
            sell_prefix: Marker of a sell leg in combination names
            leg_separator: Separator between legs in combination names
        """
        self._combinations: List[Combination] = list(combinations)
        self.sell_prefix = sell_prefix
        self.leg_separator = leg_separator

        # sorted() is stable, so equal priorities keep catalog order
        self._by_priority: List[Combination] = sorted(
            self._combinations, key=lambda combo: combo.priority
        )

        self._best_by_name: Dict[str, Combination] = {}
        for combo in self._combinations:
            current = self._best_by_name.get(combo.name)
            if current is None or combo.priority < current.priority:
                self._best_by_name[combo.name] = combo

        logger.info(
            f"Initialized catalog with {len(self._combinations)} combinations "
            f"({len(self._best_by_name)} distinct names)"
        )

    def __len__(self) -> int:
        return len(self._combinations)

    def __iter__(self) -> Iterator[Combination]:
        return iter(self._combinations)

    @property
    def combinations(self) -> List[Combination]:
        """Combinations in source order."""
        return list(self._combinations)

    def by_priority(self) -> List[Combination]:
        """Combinations ordered by ascending priority, ties in source order."""
        return self._by_priority

    def find_by_name(self, name: str) -> Optional[Combination]:
        """Get the highest precedence combination with this exact name."""
        return self._best_by_name.get(name)

    def standalone_name(self, key: PositionKey) -> str:
        """Standalone hedge name for a key, in this catalog's name format."""
        return standalone_name(key, self.sell_prefix, self.leg_separator)

    def find_standalone(self, key: PositionKey) -> Optional[Combination]:
        """Get the standalone reference combination for a residual position.

        Args:
            key: Pool key of the residual position

        Returns:
            The matching combination, or None if the catalog has none
        """
        return self.find_by_name(self.standalone_name(key))
