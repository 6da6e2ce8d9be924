"""
Structural operations sent through spreadsheets.batchUpdate: sheet
management, row/column insertion, sorting, find & replace, formatting,
merging and named ranges.
"""

from dataclasses import replace
from typing import Any, Dict, List

from sheets_mcp.a1 import grid_range_to_a1, parse_range
from sheets_mcp.arguments import Arguments
from sheets_mcp.colors import parse_color
from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.errors import InvalidArgument, MissingArgument
from sheets_mcp.sheets_api import batch_update, resolve_sheet_id, update_sheet_properties

MERGE_TYPES = ('MERGE_ALL', 'MERGE_COLUMNS', 'MERGE_ROWS')


def _insert_dimension(context: SpreadsheetContext, args: Arguments,
                      dimension: str, start_key: str) -> Dict[str, Any]:
    spreadsheet_id = args.get('spreadsheet_id', '')
    sheet = args.get('sheet', '')
    count = args.get_int('count', 0)
    if not spreadsheet_id or not sheet or count <= 0:
        raise MissingArgument("spreadsheet_id, sheet, and count are required")

    sheet_id = resolve_sheet_id(context.sheets_service, spreadsheet_id, sheet)
    start = args.get_int(start_key, 0)

    return batch_update(context.sheets_service, spreadsheet_id, [
        {
            "insertDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": dimension,
                    "startIndex": start,
                    "endIndex": start + count
                },
                "inheritFromBefore": start > 0
            }
        }
    ])


def add_rows(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    return _insert_dimension(context, args, 'ROWS', 'start_row')


def add_columns(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    return _insert_dimension(context, args, 'COLUMNS', 'start_column')


def list_sheets(context: SpreadsheetContext, args: Arguments) -> List[str]:
    args.require('spreadsheet_id')
    spreadsheet = context.sheets_service.spreadsheets().get(
        spreadsheetId=args.get('spreadsheet_id', '')
    ).execute()
    return [sheet['properties']['title'] for sheet in spreadsheet.get('sheets', [])]


def create_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """Add a sheet tab and report its id, title and position."""
    args.require('spreadsheet_id', 'title')
    spreadsheet_id = args.get('spreadsheet_id', '')

    result = batch_update(context.sheets_service, spreadsheet_id, [
        {"addSheet": {"properties": {"title": args.get('title', '')}}}
    ])

    replies = result.get('replies') or [{}]
    if 'addSheet' not in replies[0]:
        return result

    new_sheet_props = replies[0]['addSheet']['properties']
    return {
        'sheetId': new_sheet_props['sheetId'],
        'title': new_sheet_props['title'],
        'index': new_sheet_props.get('index'),
        'spreadsheetId': spreadsheet_id
    }


def delete_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet')
    spreadsheet_id = args.get('spreadsheet_id', '')
    sheet_id = resolve_sheet_id(context.sheets_service, spreadsheet_id, args.get('sheet', ''))
    return batch_update(context.sheets_service, spreadsheet_id, [
        {"deleteSheet": {"sheetId": sheet_id}}
    ])


def duplicate_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet')
    spreadsheet_id = args.get('spreadsheet_id', '')
    sheet_id = resolve_sheet_id(context.sheets_service, spreadsheet_id, args.get('sheet', ''))

    request = {"sourceSheetId": sheet_id}
    new_title = args.get('new_title', '')
    if new_title:
        request["newSheetName"] = new_title

    return batch_update(context.sheets_service, spreadsheet_id, [{"duplicateSheet": request}])


def rename_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet', 'sheet', 'new_name')
    spreadsheet = args.get('spreadsheet', '')
    sheet_id = resolve_sheet_id(context.sheets_service, spreadsheet, args.get('sheet', ''))
    return batch_update(context.sheets_service, spreadsheet, [
        update_sheet_properties(sheet_id, 'title', title=args.get('new_name', ''))
    ])


def _set_hidden(context: SpreadsheetContext, args: Arguments, hidden: bool) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet')
    spreadsheet_id = args.get('spreadsheet_id', '')
    sheet_id = resolve_sheet_id(context.sheets_service, spreadsheet_id, args.get('sheet', ''))
    return batch_update(context.sheets_service, spreadsheet_id, [
        update_sheet_properties(sheet_id, 'hidden', hidden=hidden)
    ])


def hide_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    return _set_hidden(context, args, True)


def unhide_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    return _set_hidden(context, args, False)


def copy_sheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """
    Copy a sheet into another spreadsheet, then rename the copy to dst_sheet
    unless the API already gave it that title.
    """
    args.require('src_spreadsheet', 'src_sheet', 'dst_spreadsheet', 'dst_sheet')
    src_spreadsheet = args.get('src_spreadsheet', '')
    dst_spreadsheet = args.get('dst_spreadsheet', '')
    dst_sheet = args.get('dst_sheet', '')
    sheets_service = context.sheets_service

    src_sheet_id = resolve_sheet_id(sheets_service, src_spreadsheet, args.get('src_sheet', ''))

    copy_result = sheets_service.spreadsheets().sheets().copyTo(
        spreadsheetId=src_spreadsheet,
        sheetId=src_sheet_id,
        body={
            "destinationSpreadsheetId": dst_spreadsheet
        }
    ).execute()

    if copy_result.get('title') == dst_sheet:
        return {"copy": copy_result}

    rename_result = batch_update(sheets_service, dst_spreadsheet, [
        update_sheet_properties(copy_result['sheetId'], 'title', title=dst_sheet)
    ])
    return {
        "copy": copy_result,
        "rename": rename_result
    }


def find_replace(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """Find and replace in one sheet, or in every sheet when all_sheets is set."""
    args.require('spreadsheet_id', 'find')
    spreadsheet_id = args.get('spreadsheet_id', '')

    request = {
        "find": args.get('find', ''),
        "replacement": args.get('replacement', ''),
        "matchCase": args.get('match_case', False),
        "matchEntireCell": args.get('match_entire_cell', False),
    }

    if args.get('all_sheets', False):
        request["allSheets"] = True
    else:
        sheet = args.get('sheet', '')
        if not sheet:
            raise MissingArgument("sheet is required when all_sheets is false")
        request["sheetId"] = resolve_sheet_id(context.sheets_service, spreadsheet_id, sheet)

    return batch_update(context.sheets_service, spreadsheet_id, [{"findReplace": request}])


def _resolve_grid_range(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet', 'range')
    # parse before the sheet lookup so a bad range costs no API call
    cells = parse_range(0, args.get('range', ''))
    sheet_id = resolve_sheet_id(
        context.sheets_service, args.get('spreadsheet_id', ''), args.get('sheet', '')
    )
    return replace(cells, sheet_id=sheet_id).to_dict()


def sort_range(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    grid_range = _resolve_grid_range(context, args)
    sort_order = "ASCENDING" if args.get('ascending', True) else "DESCENDING"

    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {
            "sortRange": {
                "range": grid_range,
                "sortSpecs": [{
                    "dimensionIndex": args.get_int('sort_column', 0),
                    "sortOrder": sort_order
                }]
            }
        }
    ])


def format_cells(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """
    Apply background/text colors, bold, italic and font size to a range.
    Only the options that were supplied are written.
    """
    args.require('spreadsheet_id', 'sheet', 'range')
    cell_format: Dict[str, Any] = {}
    text_format: Dict[str, Any] = {}
    fields = []

    if 'background_color' in args:
        cell_format['backgroundColor'] = parse_color(args.bag['background_color']).to_dict()
        fields.append('userEnteredFormat.backgroundColor')
    if 'text_color' in args:
        text_format['foregroundColor'] = parse_color(args.bag['text_color']).to_dict()
        fields.append('userEnteredFormat.textFormat.foregroundColor')
    if args.has('bold', False):
        text_format['bold'] = args.get('bold', False)
        fields.append('userEnteredFormat.textFormat.bold')
    if args.has('italic', False):
        text_format['italic'] = args.get('italic', False)
        fields.append('userEnteredFormat.textFormat.italic')
    if args.has('font_size', 10):
        text_format['fontSize'] = args.get_int('font_size', 10)
        fields.append('userEnteredFormat.textFormat.fontSize')

    if text_format:
        cell_format['textFormat'] = text_format

    if not fields:
        raise MissingArgument(
            "at least one of background_color, text_color, bold, italic, or font_size is required"
        )

    grid_range = _resolve_grid_range(context, args)

    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {
            "repeatCell": {
                "range": grid_range,
                "cell": {"userEnteredFormat": cell_format},
                "fields": ','.join(fields)
            }
        }
    ])


def merge_cells(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet', 'range')
    merge_type = args.get('merge_type', '') or 'MERGE_ALL'
    if merge_type not in MERGE_TYPES:
        raise InvalidArgument(
            f"invalid merge_type '{merge_type}'. Must be one of: {', '.join(MERGE_TYPES)}"
        )

    grid_range = _resolve_grid_range(context, args)
    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {"mergeCells": {"range": grid_range, "mergeType": merge_type}}
    ])


def unmerge_cells(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    grid_range = _resolve_grid_range(context, args)
    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {"unmergeCells": {"range": grid_range}}
    ])


def batch_update_spreadsheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """Raw spreadsheets.batchUpdate with caller-supplied request objects."""
    args.require('spreadsheet_id')
    requests = args.bag.get('requests')
    if not requests:
        raise MissingArgument("requests list cannot be empty")
    if not isinstance(requests, list) or not all(isinstance(req, dict) for req in requests):
        raise InvalidArgument("Each request must be a dictionary")

    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), requests)


def list_named_ranges(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, Any]]:
    args.require('spreadsheet_id')
    spreadsheet = context.sheets_service.spreadsheets().get(
        spreadsheetId=args.get('spreadsheet_id', ''),
        fields='namedRanges,sheets(properties(sheetId,title))'
    ).execute()

    sheet_map = {
        s['properties']['sheetId']: s['properties']['title']
        for s in spreadsheet.get('sheets', [])
    }

    result = []
    for nr in spreadsheet.get('namedRanges', []):
        grid_range = nr.get('range', {})
        # sheetId is omitted by the API for the first sheet
        sheet_id = grid_range.get('sheetId', 0)
        sheet_title = sheet_map.get(sheet_id)
        result.append({
            'namedRangeId': nr.get('namedRangeId'),
            'name': nr.get('name'),
            'sheetId': sheet_id,
            'sheetTitle': sheet_title,
            'a1Range': grid_range_to_a1(grid_range, sheet_title) if sheet_title else None,
        })

    return result


def create_named_range(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'name', 'sheet', 'range')
    grid_range = _resolve_grid_range(context, args)

    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {
            "addNamedRange": {
                "namedRange": {
                    "name": args.get('name', ''),
                    "range": grid_range
                }
            }
        }
    ])


def delete_named_range(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'named_range_id')
    return batch_update(context.sheets_service, args.get('spreadsheet_id', ''), [
        {"deleteNamedRange": {"namedRangeId": args.get('named_range_id', '')}}
    ])
