"""Record normalizer for combination and position source rows."""

import re
from typing import Any, List
import logging

from ..config import MarginConfigManager
from ..models import Leg
from ..utils.type_coercion import safe_decimal, safe_str
from ..validation import RowParseError

logger = logging.getLogger(__name__)


class RecordNormalizer:
    """Normalizes raw catalog and position fields to standardized values."""

    def __init__(self, config_manager: MarginConfigManager):
        """Initialize normalizer with configuration.

        Args:
            config_manager: Configuration manager with source format settings
        """
        self.config_manager = config_manager
        catalog_settings = config_manager.get_catalog_settings()

        self._catalog_delimiter = re.compile(catalog_settings["delimiter_pattern"])
        self._leg_separator = catalog_settings["leg_separator"]
        self._sell_prefix = catalog_settings["sell_prefix"]
        self._thousands_separator = catalog_settings["thousands_separator"]
        self._buy_token = config_manager.get_buy_token().strip().lower()

        logger.info("Initialized record normalizer")

    @property
    def thousands_separator(self) -> str:
        return self._thousands_separator

    def split_catalog_line(self, line: str) -> List[str]:
        """Split a catalog line on runs of the delimiter.

        Trailing empty fields are dropped, so a row whose last columns are
        blank counts as short.
        """
        fields = [field.strip() for field in self._catalog_delimiter.split(line.strip())]
        while fields and not fields[-1]:
            fields.pop()
        return fields

    def normalize_direction(self, direction: Any) -> bool:
        """Normalize a direction token to is_buy.

        Comparison is case-insensitive; anything other than the buy token is
        treated as sell.

        Args:
            direction: Raw direction token (e.g., "buy", "BUY", "sell")

        Returns:
            True for buy, False otherwise
        """
        token = safe_str(direction, default="")
        return token.lower() == self._buy_token

    def parse_legs(self, name: str, settlement_prices: str, row_number: int = 0) -> List[Leg]:
        """Derive combination legs from the name and price columns.

        e.g. "a2601,-a2603" with "4203,4180" gives a buy a2601 leg priced
        4203 and a sell a2603 leg priced 4180. Legs are matched to prices
        positionally; when the two lists differ in length only the
        overlapping prefix is kept.

        Args:
            name: Signed leg contracts joined by the leg separator
            settlement_prices: Prices joined by the leg separator
            row_number: Source row, for error reporting

        Returns:
            Ordered list of legs

        Raises:
            RowParseError: If a leg contract is empty or a price is unparsable
        """
        contracts = name.split(self._leg_separator)
        prices = settlement_prices.split(self._leg_separator)

        if len(contracts) != len(prices):
            logger.debug(
                f"Row {row_number}: {len(contracts)} legs but {len(prices)} prices in "
                f"'{name}', keeping first {min(len(contracts), len(prices))}"
            )

        legs = []
        for raw_contract, raw_price in zip(contracts, prices):
            contract = raw_contract.strip()
            is_buy = True
            if contract.startswith(self._sell_prefix):
                is_buy = False
                contract = contract[len(self._sell_prefix):].strip()

            if not contract:
                raise RowParseError(f"Empty leg contract in '{name}'", row_number)

            # Prices are split on the same character, so no grouping separator here
            price = safe_decimal(raw_price, thousands_separator="")
            if price is None:
                raise RowParseError(
                    f"Invalid settlement price {raw_price.strip()!r} in '{name}'",
                    row_number,
                )

            legs.append(Leg(contract=contract, is_buy=is_buy, settlement_price=price))

        if not legs:
            raise RowParseError(f"No legs derived from '{name}'", row_number)

        return legs
