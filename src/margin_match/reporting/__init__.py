"""Result aggregation and text reports."""

from .summary import (
    AccountSummary,
    MarginSummary,
    format_money,
    format_report,
    format_result,
    summarize,
)

__all__ = [
    "AccountSummary",
    "MarginSummary",
    "format_money",
    "format_report",
    "format_result",
    "summarize",
]
