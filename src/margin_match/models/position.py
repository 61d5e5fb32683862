"""Position data model for margin offset matching system."""

from pydantic import BaseModel, Field, ConfigDict

from .combination import PositionKey


class Position(BaseModel):
    """Represents a single client holding from the position book.

    Records sharing the same (account, contract, is_buy) are fungible and
    are summed before matching.
    """

    model_config = ConfigDict(
        frozen=True,  # Immutable for thread safety
        validate_assignment=True,
        str_strip_whitespace=True
    )

    account: str = Field(..., min_length=1, description="Client account identifier")
    contract: str = Field(..., min_length=1, description="Instrument identifier")
    is_buy: bool = Field(..., description="True for long (buy), False for short (sell)")
    quantity: int = Field(..., gt=0, description="Lot count")
    source_row: int = Field(default=0, ge=0, description="Row position in the position source")

    @property
    def key(self) -> PositionKey:
        """Pool key for fungible lots of this position."""
        return PositionKey(self.contract, self.is_buy)

    @property
    def direction(self) -> str:
        return "buy" if self.is_buy else "sell"

    @property
    def display_id(self) -> str:
        """Get a display-friendly ID for logging and output."""
        return f"P_{self.source_row}"

    def __str__(self) -> str:
        return (
            f"Position({self.account}, {self.contract}, {self.direction}, "
            f"qty={self.quantity})"
        )
