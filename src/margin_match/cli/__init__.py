"""CLI display components for margin matching."""

from .margin_display import MarginDisplay

__all__ = ["MarginDisplay"]
