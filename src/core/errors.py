"""Sheetkeep exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SheetkeepError(Exception):
    """Base exception for all Sheetkeep failures."""


class SheetkeepConfigError(SheetkeepError):
    """Raised for invalid runtime configuration."""


class SheetkeepIngestError(SheetkeepError):
    """Raised for malformed spreadsheet input."""


class SheetkeepNamingError(SheetkeepIngestError):
    """Raised when a file name sanitizes to an empty dataset name."""


class SheetkeepStoreError(SheetkeepError):
    """Raised for document store read and write failures."""


class SheetkeepDependencyError(SheetkeepError):
    """Raised when an optional runtime dependency is missing."""
