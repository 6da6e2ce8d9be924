from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class SpreadsheetContext:
    """Context for Google Spreadsheet service"""
    sheets_service: Any
    drive_service: Any
    folder_id: Optional[str] = None
    strict_arguments: bool = False
