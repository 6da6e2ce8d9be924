"""
Cell value operations: reading, writing, appending, clearing and searching,
including the multi-range and multi-spreadsheet batch reads.
"""

from typing import Any, Dict, List

from sheets_mcp.a1 import column_index_to_letter
from sheets_mcp.arguments import Arguments, to_values
from sheets_mcp.batch import fan_out
from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.errors import InvalidArgument, MissingArgument, SheetNotFound
from sheets_mcp.sheets_api import full_range, get_values


def get_sheet_data(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """
    Values of a sheet or range. With include_grid_data the full grid
    (formatting and metadata) is returned as the API sends it.
    """
    args.require('spreadsheet_id', 'sheet')
    spreadsheet_id = args.get('spreadsheet_id', '')
    range_name = full_range(args.get('sheet', ''), args.get('range', ''))

    if args.get('include_grid_data', False):
        return context.sheets_service.spreadsheets().get(
            spreadsheetId=spreadsheet_id,
            ranges=[range_name],
            includeGridData=True
        ).execute()

    values_result = get_values(context.sheets_service, spreadsheet_id, range_name)
    return {
        'spreadsheetId': spreadsheet_id,
        'valueRanges': [{
            'range': range_name,
            'values': values_result.get('values', [])
        }]
    }


def get_sheet_formulas(context: SpreadsheetContext, args: Arguments) -> List[List[Any]]:
    args.require('spreadsheet_id', 'sheet')
    result = get_values(
        context.sheets_service,
        args.get('spreadsheet_id', ''),
        full_range(args.get('sheet', ''), args.get('range', '')),
        value_render_option='FORMULA'
    )
    return result.get('values', [])


def update_cells(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet', 'range')
    data = args.values('data')

    return context.sheets_service.spreadsheets().values().update(
        spreadsheetId=args.get('spreadsheet_id', ''),
        range=full_range(args.get('sheet', ''), args.get('range', '')),
        valueInputOption='USER_ENTERED',
        body={'values': data}
    ).execute()


def batch_update_cells(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """Write several ranges of one sheet in a single values.batchUpdate call."""
    args.require('spreadsheet_id', 'sheet')
    sheet = args.get('sheet', '')

    ranges = args.bag.get('ranges')
    if ranges is None:
        raise MissingArgument("ranges is required")
    if not isinstance(ranges, dict):
        raise InvalidArgument("ranges must be an object/map")

    data = []
    for range_str, raw_values in ranges.items():
        try:
            values = to_values(raw_values)
        except InvalidArgument as e:
            raise InvalidArgument(f"range {range_str}: {e}") from e
        data.append({
            'range': full_range(sheet, range_str),
            'values': values
        })

    return context.sheets_service.spreadsheets().values().batchUpdate(
        spreadsheetId=args.get('spreadsheet_id', ''),
        body={
            'valueInputOption': 'USER_ENTERED',
            'data': data
        }
    ).execute()


def append_data(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """Append rows after the last row with data; the API locates the table."""
    args.require('spreadsheet_id', 'sheet')
    data = args.values('data')

    return context.sheets_service.spreadsheets().values().append(
        spreadsheetId=args.get('spreadsheet_id', ''),
        range=args.get('sheet', ''),
        valueInputOption='USER_ENTERED',
        insertDataOption='INSERT_ROWS',
        body={'values': data}
    ).execute()


def clear_range(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'sheet', 'range')

    return context.sheets_service.spreadsheets().values().clear(
        spreadsheetId=args.get('spreadsheet_id', ''),
        range=full_range(args.get('sheet', ''), args.get('range', '')),
        body={}
    ).execute()


def get_multiple_sheet_data(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, Any]]:
    """
    Read several ranges, possibly from different spreadsheets.

    Each query is a dict with 'spreadsheet_id', 'sheet' and 'range'. A query
    that is incomplete or fails gets an 'error' entry instead of 'data'; the
    others are still read.
    """
    queries = args.list_of('queries', dict)
    sheets_service = context.sheets_service

    def read(query: Dict[str, Any]) -> List[List[Any]]:
        spreadsheet_id = query.get('spreadsheet_id')
        sheet = query.get('sheet')
        range_str = query.get('range')
        if not all([spreadsheet_id, sheet, range_str]):
            raise MissingArgument('Missing required keys (spreadsheet_id, sheet, range)')

        result = get_values(sheets_service, spreadsheet_id, full_range(sheet, range_str))
        return result.get('values', [])

    def keys(query: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'spreadsheet_id': query.get('spreadsheet_id'),
            'sheet': query.get('sheet'),
            'range': query.get('range'),
        }

    return [result.to_dict() for result in fan_out(queries, read, keys)]


def _summarize_sheet(sheets_service, spreadsheet_id: str, sheet: Dict[str, Any],
                     rows_to_fetch: int) -> Dict[str, Any]:
    sheet_title = sheet.get('properties', {}).get('title')
    if not sheet_title:
        raise SheetNotFound('')

    # A1:5 covers every column of the first five rows
    result = get_values(sheets_service, spreadsheet_id, f"{sheet_title}!A1:{rows_to_fetch}")
    values = result.get('values', [])
    return {
        'headers': values[0] if values else [],
        'first_rows': values[1:rows_to_fetch] if len(values) > 1 else [],
    }


def get_multiple_spreadsheet_summary(context: SpreadsheetContext,
                                     args: Arguments) -> List[Dict[str, Any]]:
    """
    Summarize several spreadsheets: title, then per sheet its headers and
    first rows. Failures are isolated per spreadsheet and per sheet.
    """
    spreadsheet_ids = args.list_of('spreadsheet_ids', str)
    rows_to_fetch = max(1, args.get_int('rows_to_fetch', 5))
    sheets_service = context.sheets_service

    def summarize(spreadsheet_id: str) -> Dict[str, Any]:
        spreadsheet = sheets_service.spreadsheets().get(
            spreadsheetId=spreadsheet_id,
            fields='properties.title,sheets(properties(title,sheetId))'
        ).execute()

        sheet_results = fan_out(
            spreadsheet.get('sheets', []),
            lambda sheet: _summarize_sheet(sheets_service, spreadsheet_id, sheet, rows_to_fetch),
            lambda sheet: {
                'title': sheet.get('properties', {}).get('title'),
                'sheet_id': sheet.get('properties', {}).get('sheetId'),
            },
            describe_error=lambda sheet, message: _sheet_error(sheet, message),
        )

        sheet_summaries = []
        for result in sheet_results:
            summary = {**result.keys, 'headers': [], 'first_rows': [], 'error': result.error}
            if result.success:
                summary.update(result.data)
            sheet_summaries.append(summary)

        return {
            'title': spreadsheet.get('properties', {}).get('title', 'Unknown Title'),
            'sheets': sheet_summaries,
        }

    results = fan_out(
        spreadsheet_ids,
        summarize,
        lambda spreadsheet_id: {'spreadsheet_id': spreadsheet_id},
        describe_error=lambda spreadsheet_id, message:
            f'Error fetching spreadsheet {spreadsheet_id}: {message}',
    )

    summaries = []
    for result in results:
        summary = {**result.keys, 'title': None, 'sheets': [], 'error': result.error}
        if result.success:
            summary.update(result.data)
        summaries.append(summary)
    return summaries


def _sheet_error(sheet: Dict[str, Any], message: str) -> str:
    sheet_title = sheet.get('properties', {}).get('title')
    if not sheet_title:
        return 'Sheet title not found'
    return f'Error fetching data for sheet {sheet_title}: {message}'


def find_in_spreadsheet(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, Any]]:
    """
    Find cells whose value contains the query, in one sheet or all of them.
    Matches are reported as {sheet, cell, value} with the cell in A1 notation.
    """
    args.require('spreadsheet_id', 'query')
    spreadsheet_id = args.get('spreadsheet_id', '')
    sheet = args.get('sheet', '')
    case_sensitive = args.get('case_sensitive', False)
    max_results = max(1, args.get_int('max_results', 50))
    query = args.get('query', '')
    sheets_service = context.sheets_service

    spreadsheet = sheets_service.spreadsheets().get(
        spreadsheetId=spreadsheet_id,
        fields='sheets(properties(title,sheetId))'
    ).execute()

    sheets_to_search = [
        s.get('properties', {}).get('title')
        for s in spreadsheet.get('sheets', [])
        if not sheet or s.get('properties', {}).get('title') == sheet
    ]
    if not sheets_to_search:
        raise SheetNotFound(sheet)

    search_query = query if case_sensitive else query.lower()
    results = []

    for sheet_name in sheets_to_search:
        values = get_values(sheets_service, spreadsheet_id, sheet_name).get('values', [])

        for row_idx, row in enumerate(values):
            for col_idx, cell_value in enumerate(row):
                cell_str = str(cell_value)
                compare_value = cell_str if case_sensitive else cell_str.lower()

                if search_query in compare_value:
                    results.append({
                        'sheet': sheet_name,
                        'cell': f"{column_index_to_letter(col_idx)}{row_idx + 1}",
                        'value': cell_value
                    })
                    if len(results) >= max_results:
                        return results

    return results
