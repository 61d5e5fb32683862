"""
Pydantic schemas for raw source row validation.

These schemas define the expected structure of one combination catalog row
and one position book row after the line has been split into fields. All
fields arrive as strings; validators coerce them to typed values. A row that
fails validation is skipped by the loader.

Validation context:
    thousands_separator: grouping character stripped from the margin column
"""

from decimal import Decimal
from typing import Any, Union
from pydantic import BaseModel, Field, field_validator, ConfigDict, ValidationInfo

from ..utils.type_coercion import safe_decimal, safe_int


class CombinationRowSchema(BaseModel):
    """
    Schema for one combination parameter row.

    Columns: date, name, settlementPrices, priority, margin, attribute.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,  # Auto-strip whitespace from strings
    )

    date: str = Field(default="", description="Provenance date")
    name: str = Field(..., min_length=1, description="Signed leg contracts joined by commas")
    settlement_prices: str = Field(..., min_length=1, description="Leg settlement prices joined by commas")
    priority: Union[str, int] = Field(..., description="Matching precedence, lower first")
    margin: Union[str, float, Decimal] = Field(..., description="Margin per full leg set")
    attribute: str = Field(default="", description="Classification tag")

    @field_validator("priority")
    @classmethod
    def coerce_priority(cls, v: Union[str, int]) -> int:
        """Coerce priority text to int."""
        result = safe_int(v)
        if result is None:
            raise ValueError(f"Invalid priority: {v!r}")
        return result

    @field_validator("margin")
    @classmethod
    def coerce_margin(cls, v: Any, info: ValidationInfo) -> Decimal:
        """Coerce margin to Decimal, removing thousands separators (e.g., "1,460")."""
        separator = ","
        if info.context:
            separator = info.context.get("thousands_separator", separator)
        result = safe_decimal(v, thousands_separator=separator)
        if result is None:
            raise ValueError(f"Invalid margin: {v!r}")
        return result


class PositionRowSchema(BaseModel):
    """
    Schema for one position book row.

    Columns: account, contract, direction, quantity. The direction token is
    kept raw; the normalizer decides buy or sell.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
    )

    account: str = Field(..., min_length=1, description="Client account")
    contract: str = Field(..., min_length=1, description="Instrument identifier")
    direction: str = Field(default="", description="Raw direction token")
    quantity: Union[str, int] = Field(..., description="Lot count")

    @field_validator("quantity")
    @classmethod
    def coerce_quantity(cls, v: Union[str, int]) -> int:
        """Coerce quantity to a positive int."""
        result = safe_int(v)
        if result is None:
            raise ValueError(f"Invalid quantity: {v!r}")
        if result <= 0:
            raise ValueError(f"Quantity must be positive: {result}")
        return result
