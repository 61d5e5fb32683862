"""Combination data model for margin offset matching system."""

from decimal import Decimal
from typing import NamedTuple
from pydantic import BaseModel, Field, ConfigDict


class PositionKey(NamedTuple):
    """Key under which fungible position lots are pooled."""

    contract: str
    is_buy: bool

    def __str__(self) -> str:
        return f"{self.contract} {'buy' if self.is_buy else 'sell'}"


class Leg(BaseModel):
    """One side of a combination: contract, direction and settlement price."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True
    )

    contract: str = Field(..., min_length=1, description="Instrument identifier (e.g., a2601)")
    is_buy: bool = Field(..., description="True for the buy leg, False for the sell leg")
    settlement_price: Decimal = Field(..., description="Settlement price of the leg contract")

    @property
    def key(self) -> PositionKey:
        """Position pool key this leg draws from."""
        return PositionKey(self.contract, self.is_buy)

    @property
    def signed_contract(self) -> str:
        """Contract code as written in combination names."""
        return self.contract if self.is_buy else f"-{self.contract}"

    def __str__(self) -> str:
        return f"{self.signed_contract}@{self.settlement_price}"


class Combination(BaseModel):
    """Represents a multi-leg margin offset template.

    A client holding every leg simultaneously is charged ``margin`` per
    matched unit of the full leg set instead of the standalone margins.
    Lower ``priority`` values are matched first.
    """

    model_config = ConfigDict(
        frozen=True,  # Catalog is shared read-only across account passes
        validate_assignment=True,
        str_strip_whitespace=True
    )

    date: str = Field(default="", description="Provenance date of the parameter row")
    name: str = Field(..., min_length=1, description="Comma joined signed leg contracts (e.g., a2601,-a2601)")
    legs: list[Leg] = Field(..., min_length=1, description="Ordered legs, leg 0 is the first name token")
    priority: int = Field(..., description="Matching precedence, lower value matched first")
    margin: Decimal = Field(..., description="Margin per matched unit of the full leg set")
    attribute: str = Field(default="", description="Classification tag, not used for matching")
    source_row: int = Field(default=0, ge=0, description="Row position in the catalog source")

    @property
    def leg_keys(self) -> list[PositionKey]:
        """Pool keys of all legs in leg order."""
        return [leg.key for leg in self.legs]

    @property
    def is_standalone_reference(self) -> bool:
        """Check if this is a same-contract hedge used for standalone valuation."""
        return (
            len(self.legs) == 2
            and self.legs[0].contract == self.legs[1].contract
            and self.legs[0].is_buy != self.legs[1].is_buy
        )

    def __str__(self) -> str:
        return f"Combination({self.name}, priority={self.priority}, margin={self.margin:.2f})"
