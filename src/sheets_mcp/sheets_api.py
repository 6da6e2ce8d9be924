"""
Request templates shared by the operation handlers.
"""

from typing import Any, Dict, List, Optional

from sheets_mcp.errors import SheetNotFound


def full_range(sheet: str, range_string: Optional[str] = None) -> str:
    """'Sheet1!A1:B2', or the bare sheet name when no range is given."""
    if range_string:
        return f"{sheet}!{range_string}"
    return sheet


def resolve_sheet_id(sheets_service, spreadsheet_id: str, title: str) -> int:
    """Look up the numeric sheetId of the sheet titled ``title``."""
    spreadsheet = sheets_service.spreadsheets().get(
        spreadsheetId=spreadsheet_id,
        fields='sheets(properties(sheetId,title))'
    ).execute()

    for s in spreadsheet.get('sheets', []):
        if s['properties']['title'] == title:
            return s['properties']['sheetId']

    raise SheetNotFound(title)


def batch_update(sheets_service, spreadsheet_id: str,
                 requests: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Send structural requests through spreadsheets.batchUpdate."""
    return sheets_service.spreadsheets().batchUpdate(
        spreadsheetId=spreadsheet_id,
        body={"requests": requests}
    ).execute()


def update_sheet_properties(sheet_id: int, fields: str, **properties) -> Dict[str, Any]:
    """updateSheetProperties request touching only ``fields``."""
    return {
        "updateSheetProperties": {
            "properties": {"sheetId": sheet_id, **properties},
            "fields": fields
        }
    }


def get_values(sheets_service, spreadsheet_id: str, range_name: str,
               value_render_option: Optional[str] = None) -> Dict[str, Any]:
    params = {'spreadsheetId': spreadsheet_id, 'range': range_name}
    if value_render_option:
        params['valueRenderOption'] = value_render_option
    return sheets_service.spreadsheets().values().get(**params).execute()
