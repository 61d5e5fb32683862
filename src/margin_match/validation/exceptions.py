"""Custom exceptions for source loading."""

from typing import Optional


class LoadError(Exception):
    """
    Base exception for source load failures.

    Raised when a catalog or position source cannot be read at all. No
    partial data is returned alongside it.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        data_type: Optional[str] = None,
    ):
        """
        Initialize LoadError with detailed error information.

        Args:
            message: Human-readable error message
            file_path: Path to the source that failed to load
            data_type: Type of data being loaded ("catalog" or "positions")
        """
        super().__init__(message)
        self.file_path = file_path
        self.data_type = data_type

    def __str__(self) -> str:
        """Return detailed error message."""
        parts = [str(self.args[0]) if self.args else "Load error"]

        if self.data_type:
            parts.append(f"Data type: {self.data_type}")

        if self.file_path:
            parts.append(f"File: {self.file_path}")

        if self.__cause__ is not None:
            parts.append(f"Cause: {self.__cause__}")

        return " | ".join(parts)


class CatalogLoadError(LoadError):
    """Combination catalog source could not be loaded."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, file_path=file_path, data_type="catalog", **kwargs)


class PositionLoadError(LoadError):
    """Position book source could not be loaded."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(message, file_path=file_path, data_type="positions", **kwargs)


class RowParseError(ValueError):
    """A single source row is malformed and must be skipped.

    Never propagates out of a loader.
    """

    def __init__(self, message: str, row_number: Optional[int] = None):
        super().__init__(message)
        self.row_number = row_number

    def __str__(self) -> str:
        base_msg = str(self.args[0]) if self.args else "Row parse error"
        if self.row_number is not None:
            return f"{base_msg} | Row: {self.row_number}"
        return base_msg
