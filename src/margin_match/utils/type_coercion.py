"""Type coercion utilities for raw source fields."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Safely convert value to integer.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Integer value or default

    Examples:
        >>> safe_int("12")
        12
        >>> safe_int(" 7 ")
        7
        >>> safe_int("10.0")
        10
        >>> safe_int("abc")
        >>> safe_int("1.5")
    """
    if value is None or value == "":
        return default

    if isinstance(value, bool):
        return default

    if isinstance(value, int):
        return value

    try:
        if isinstance(value, float):
            if not value.is_integer():
                return default
            return int(value)
        text = str(value).strip()
        if "." in text:
            # Whole-number text such as "10.0" from float64 DataFrame columns
            number = Decimal(text)
            if number != number.to_integral_value():
                return default
            return int(number)
        return int(text)
    except (ValueError, TypeError, InvalidOperation):
        return default


def safe_decimal(
    value: Any,
    default: Optional[Decimal] = None,
    thousands_separator: str = ","
) -> Optional[Decimal]:
    """
    Safely convert value to Decimal, dropping thousands separators.

    Args:
        value: Value to convert
        default: Default value if conversion fails
        thousands_separator: Grouping character removed before parsing

    Returns:
        Decimal value or default

    Examples:
        >>> safe_decimal("1,460")
        Decimal('1460')
        >>> safe_decimal(840.6)
        Decimal('840.6')
        >>> safe_decimal("n/a")
    """
    if value is None or value == "":
        return default

    if isinstance(value, Decimal):
        return value if value.is_finite() else default

    try:
        if isinstance(value, float):
            # Convert to string first to avoid float precision issues
            result = Decimal(str(value))
        elif isinstance(value, int):
            result = Decimal(value)
        else:
            cleaned = str(value).strip()
            if thousands_separator:
                cleaned = cleaned.replace(thousands_separator, "")
            if not cleaned:
                return default
            result = Decimal(cleaned)
    except (ValueError, TypeError, InvalidOperation):
        return default

    return result if result.is_finite() else default


def safe_str(
    value: Any,
    default: Optional[str] = None,
) -> Optional[str]:
    """
    Safely convert value to a stripped string.

    Args:
        value: Value to convert
        default: Default value for None, NaN or blank input

    Returns:
        String value or default

    Examples:
        >>> safe_str(" a2601 ")
        'a2601'
        >>> safe_str(None, default="")
        ''
    """
    if value is None:
        return default

    # NaN from pandas never equals itself
    if isinstance(value, float) and value != value:
        return default

    text = str(value).strip()
    return text if text else default
