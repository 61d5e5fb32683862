"""Margin offset matching rule implementations."""

from .base_matcher import BaseMatcher
from .combination_matcher import CombinationMatcher
from .standalone_matcher import StandaloneMatcher

__all__ = [
    "BaseMatcher",
    "CombinationMatcher",
    "StandaloneMatcher",
]
