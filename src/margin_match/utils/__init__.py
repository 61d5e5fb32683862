"""Utility functions."""

from .type_coercion import safe_int, safe_decimal, safe_str
from .dataframe_output import (
    RESULT_COLUMNS,
    results_to_dataframe,
    results_to_json,
    write_results_csv,
)

__all__ = [
    "safe_int",
    "safe_decimal",
    "safe_str",
    "RESULT_COLUMNS",
    "results_to_dataframe",
    "results_to_json",
    "write_results_csv",
]
