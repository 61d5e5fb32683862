"""Source record normalizers."""

from .record_normalizer import RecordNormalizer

__all__ = ["RecordNormalizer"]
