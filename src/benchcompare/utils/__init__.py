"""
Utility helpers for benchcompare.

Only dependency-free helpers live here so that parsers, the comparator and
the report builder can share them without import cycles.
"""

from .formatting import format_number, format_ratio, parse_number

__all__ = [
    'format_number',
    'format_ratio',
    'parse_number',
]
