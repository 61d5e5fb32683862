"""Core components for margin offset matching."""

from .catalog import CombinationCatalog, standalone_name
from .position_book import PositionBook
from .position_pool import AccountPositionPool

__all__ = [
    "CombinationCatalog",
    "standalone_name",
    "PositionBook",
    "AccountPositionPool",
]
