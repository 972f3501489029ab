"""Exceptions raised by the CPI trends services.

All of them derive from `ValueError` so callers that already guard loaders
with `except ValueError` keep working.
"""
from __future__ import annotations

from datetime import date


class CpiTrendsError(ValueError):
    """Base class for CPI trends errors."""


class ParseError(CpiTrendsError):
    """A date or value cell could not be parsed."""


class DuplicateDateError(CpiTrendsError):
    """Two input rows share the same observation date."""

    def __init__(self, duplicate: date):
        self.date = duplicate
        super().__init__(f"Duplicate observation date in CPI input: {duplicate.isoformat()}")


class EmptySeriesError(CpiTrendsError):
    """The series has no observations to work on."""
