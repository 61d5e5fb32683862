"""Margin offset matching data models."""

from .combination import Combination, Leg, PositionKey
from .position import Position
from .pair_result import PairResult, PairResultType, PositionUsage

__all__ = [
    "Combination",
    "Leg",
    "PositionKey",
    "Position",
    "PairResult",
    "PairResultType",
    "PositionUsage",
]
