"""Input validation schemas."""

from .input_schemas import CombinationRowSchema, PositionRowSchema

__all__ = ["CombinationRowSchema", "PositionRowSchema"]
