"""Source loaders for combination catalogs and position books."""

from .base_loader import BaseSourceLoader
from .catalog_loader import CombinationCatalogLoader
from .position_loader import PositionBookLoader

__all__ = [
    "BaseSourceLoader",
    "CombinationCatalogLoader",
    "PositionBookLoader",
]
