"""Training Programs - weekly walking and running tables in Google Sheets.

This package builds and extends program tables whose estimated rows project
each day's target from the last three weeks of actual values.
"""

__version__ = "0.1.0"

from .programs.builder import ProgramTableBuilder
from .programs.service import ProgramService
from .sheets.client import GoogleSheetsClient


__all__ = [
    "GoogleSheetsClient",
    "ProgramService",
    "ProgramTableBuilder",
]
