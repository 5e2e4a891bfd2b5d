"""
SKOLL UI - Terminal rendering of valuations.
"""

from .report import ValuationReport, format_wad

__all__ = ["ValuationReport", "format_wad"]
