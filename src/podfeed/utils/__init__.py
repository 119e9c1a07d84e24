"""Utility helpers for podfeed."""

from podfeed.utils.text import (
    clean_text,
    format_bytes,
    format_duration,
    parse_duration,
    parse_int,
)

__all__ = [
    "clean_text",
    "format_bytes",
    "format_duration",
    "parse_duration",
    "parse_int",
]
