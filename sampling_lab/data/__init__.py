"""Data loading."""

from .loader import load_paired_columns

__all__ = ["load_paired_columns"]
