"""Pair result data model for margin offset matching system."""

from decimal import Decimal
from enum import Enum
from typing import List
from pydantic import BaseModel, Field, ConfigDict

from .combination import Combination
from .position import Position


class PairResultType(str, Enum):
    """Kind of allocation produced by the matcher."""

    PAIRED = "paired"  # Rule 1 - Full leg set matched against a combination
    UNPAIRED = "unpaired"  # Rule 2 - Residual lots valued at standalone margin


class PositionUsage(BaseModel):
    """Lots of one position identity consumed by an allocation."""

    model_config = ConfigDict(frozen=True)

    position: Position = Field(..., description="Representative position record for the pool key")
    used_quantity: int = Field(..., gt=0, description="Lots consumed")

    def __str__(self) -> str:
        return f"{self.used_quantity} x {self.position.contract} {self.position.direction}"


class PairResult(BaseModel):
    """Represents one allocation outcome for an account.

    Paired results reference the matched combination and carry one usage per
    leg. Unpaired results reference the standalone combination used for
    valuation and carry a single usage for the residual position.
    """

    model_config = ConfigDict(
        frozen=True,  # Immutable once the matching pass is done
        validate_assignment=True,
    )

    result_id: str = Field(..., description="Unique identifier for this result")
    result_type: PairResultType = Field(..., description="Paired or unpaired")
    rule_order: int = Field(..., ge=1, description="Rule that produced this result")
    account: str = Field(..., description="Account the allocation belongs to")

    combination: Combination = Field(
        ..., description="Matched combination, or standalone reference when unpaired"
    )
    pair_count: int = Field(
        ..., gt=0, description="Full leg sets matched, or residual lots when unpaired"
    )
    margin_per_unit: Decimal = Field(
        ..., description="Margin per pair, or standalone margin per lot when unpaired"
    )
    total_margin_saving: Decimal = Field(..., description="pair_count * margin_per_unit")

    position_usages: List[PositionUsage] = Field(
        default_factory=list, description="Positions consumed by this allocation"
    )

    @property
    def is_unpaired(self) -> bool:
        return self.result_type == PairResultType.UNPAIRED

    @property
    def contracts_used(self) -> int:
        """Total lots consumed across all usages."""
        return sum(usage.used_quantity for usage in self.position_usages)

    @property
    def summary_line(self) -> str:
        """Get a one-line summary of this result for display."""
        if self.is_unpaired:
            usage = self.position_usages[0]
            return (
                f"Unpaired {self.account}: {usage.position.contract} "
                f"{usage.position.direction} | Qty: {self.pair_count} | "
                f"Margin/lot: {self.margin_per_unit:.2f} | "
                f"Total: {self.total_margin_saving:.2f}"
            )
        return (
            f"Pair {self.account}: {self.combination.name} "
            f"(priority={self.combination.priority}) | Pairs: {self.pair_count} | "
            f"Margin/pair: {self.margin_per_unit:.2f} | "
            f"Total: {self.total_margin_saving:.2f}"
        )

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"PairResult({self.result_id}: {self.result_type.value}, {self.pair_count})"
