"""Combination margin offset matching engine."""

from .config import MarginConfigManager, MarginMatchingConfig
from .core import CombinationCatalog, PositionBook
from .loaders import CombinationCatalogLoader, PositionBookLoader
from .main import MarginMatchingEngine, find_pairs
from .models import Combination, Leg, PairResult, PairResultType, Position, PositionUsage
from .reporting import format_report, summarize
from .validation import CatalogLoadError, LoadError, PositionLoadError

__version__ = "1.0.0"

__all__ = [
    "MarginConfigManager",
    "MarginMatchingConfig",
    "CombinationCatalog",
    "PositionBook",
    "CombinationCatalogLoader",
    "PositionBookLoader",
    "MarginMatchingEngine",
    "find_pairs",
    "Combination",
    "Leg",
    "PairResult",
    "PairResultType",
    "Position",
    "PositionUsage",
    "format_report",
    "summarize",
    "CatalogLoadError",
    "LoadError",
    "PositionLoadError",
]
