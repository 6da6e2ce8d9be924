"""
The spreadsheet://{spreadsheet_id}/info resource.
"""

import json
import logging

from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.errors import InvalidURIFormat

logger = logging.getLogger(__name__)

INFO_URI_TEMPLATE = "spreadsheet://{spreadsheet_id}/info"


def parse_info_uri(uri: str) -> str:
    """Extract the spreadsheet id from 'spreadsheet://<id>/info'."""
    parts = uri.split('://')
    if len(parts) != 2:
        raise InvalidURIFormat("invalid URI format")

    spreadsheet_id = parts[1].split('/')[0]
    if not spreadsheet_id:
        raise InvalidURIFormat("invalid URI format: missing spreadsheet_id")
    return spreadsheet_id


def get_spreadsheet_info(context: SpreadsheetContext, spreadsheet_id: str) -> str:
    """
    Get basic information about a Google Spreadsheet.

    Args:
        context: Client handles
        spreadsheet_id: The ID of the spreadsheet

    Returns:
        Indented JSON string with the title and each sheet's id and grid size
    """
    logger.info(f"Reading spreadsheet info for {spreadsheet_id}")
    spreadsheet = context.sheets_service.spreadsheets().get(spreadsheetId=spreadsheet_id).execute()

    info = {
        "title": spreadsheet.get('properties', {}).get('title', 'Unknown'),
        "sheets": [
            {
                "title": sheet['properties']['title'],
                "sheetId": sheet['properties']['sheetId'],
                "gridProperties": sheet['properties'].get('gridProperties', {})
            }
            for sheet in spreadsheet.get('sheets', [])
        ]
    }

    return json.dumps(info, indent=2)


def read_spreadsheet_info(context: SpreadsheetContext, uri: str) -> str:
    """Resolve an info URI. Invalid URIs and remote failures raise."""
    return get_spreadsheet_info(context, parse_info_uri(uri))
