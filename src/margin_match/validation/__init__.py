"""Source loading errors."""

from .exceptions import (
    LoadError,
    CatalogLoadError,
    PositionLoadError,
    RowParseError
)

__all__ = [
    "LoadError",
    "CatalogLoadError",
    "PositionLoadError",
    "RowParseError"
]
