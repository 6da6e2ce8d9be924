#!/usr/bin/env python
"""
Google Spreadsheet MCP Server
A Model Context Protocol (MCP) server built with FastMCP for interacting with Google Sheets.

Every tool returns JSON text: the operation's payload, or {"error": message}.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

# MCP imports
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from sheets_mcp.auth import build_services, get_credentials
from sheets_mcp.config import load_config
from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.dispatcher import dispatch
from sheets_mcp.resources import INFO_URI_TEMPLATE, read_spreadsheet_info

logger = logging.getLogger(__name__)

CONFIG = load_config()


@asynccontextmanager
async def spreadsheet_lifespan(server: FastMCP) -> AsyncIterator[SpreadsheetContext]:
    """Manage Google Spreadsheet API connection lifecycle"""
    creds = get_credentials(CONFIG)
    sheets_service, drive_service = build_services(creds)

    yield SpreadsheetContext(
        sheets_service=sheets_service,
        drive_service=drive_service,
        folder_id=CONFIG.drive_folder_id,
        strict_arguments=CONFIG.strict_arguments
    )


mcp = FastMCP("Google Spreadsheet",
              dependencies=["google-auth", "google-auth-oauthlib", "google-api-python-client"],
              lifespan=spreadsheet_lifespan,
              host=CONFIG.host,
              port=CONFIG.port)


def tool(annotations: Optional[ToolAnnotations] = None):
    """
    Conditional tool decorator that only registers tools if they're enabled.

    If CONFIG.enabled_tools is None (default), all tools are enabled.

    Args:
        annotations: Optional ToolAnnotations for the tool

    Returns:
        Decorator function
    """
    def decorator(func):
        enabled = CONFIG.enabled_tools
        if enabled is None or func.__name__ in enabled:
            if annotations:
                return mcp.tool(annotations=annotations)(func)
            return mcp.tool()(func)
        # not registered; the function stays callable
        return func

    return decorator


def _call(name: str, ctx: Context, **arguments) -> str:
    """Dispatch ``name`` with the non-None arguments so handler defaults apply."""
    context = ctx.request_context.lifespan_context
    bag = {key: value for key, value in arguments.items() if value is not None}
    return dispatch(context, name, bag)


@tool(
    annotations=ToolAnnotations(
        title="Get Sheet Data",
        readOnlyHint=True,
    ),
)
def get_sheet_data(spreadsheet_id: str,
                   sheet: str,
                   range: Optional[str] = None,
                   include_grid_data: bool = False,
                   ctx: Context = None) -> str:
    """
    Get data from a specific sheet in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        range: Optional cell range in A1 notation (e.g., 'A1:C10'). If not provided, gets all data.
        include_grid_data: If True, includes cell formatting and other metadata in the response.
            Note: Setting this to True will significantly increase the response size.
            Default is False (returns values only, more efficient).

    Returns:
        Grid data with either full metadata or just values, depending on include_grid_data
    """
    return _call('get_sheet_data', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet,
                 range=range, include_grid_data=include_grid_data)


@tool(
    annotations=ToolAnnotations(
        title="Get Sheet Formulas",
        readOnlyHint=True,
    ),
)
def get_sheet_formulas(spreadsheet_id: str,
                       sheet: str,
                       range: Optional[str] = None,
                       ctx: Context = None) -> str:
    """
    Get formulas from a specific sheet in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        range: Optional cell range in A1 notation (e.g., 'A1:C10'). If not provided, gets all formulas.

    Returns:
        A 2D array of the sheet formulas.
    """
    return _call('get_sheet_formulas', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range)


@tool(
    annotations=ToolAnnotations(
        title="Update Cells",
        destructiveHint=True,
    ),
)
def update_cells(spreadsheet_id: str,
                 sheet: str,
                 range: str,
                 data: List[List[Any]],
                 ctx: Context = None) -> str:
    """
    Update cells in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:C10')
        data: 2D array of values to update

    Returns:
        Result of the update operation
    """
    return _call('update_cells', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet,
                 range=range, data=data)


@tool(
    annotations=ToolAnnotations(
        title="Batch Update Cells",
        destructiveHint=True,
    ),
)
def batch_update_cells(spreadsheet_id: str,
                       sheet: str,
                       ranges: Dict[str, List[List[Any]]],
                       ctx: Context = None) -> str:
    """
    Batch update multiple ranges in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        ranges: Dictionary mapping range strings to 2D arrays of values
               e.g., {'A1:B2': [[1, 2], [3, 4]], 'D1:E2': [['a', 'b'], ['c', 'd']]}

    Returns:
        Result of the batch update operation
    """
    return _call('batch_update_cells', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, ranges=ranges)


@tool(
    annotations=ToolAnnotations(
        title="Append Data",
        destructiveHint=True,
    ),
)
def append_data(spreadsheet_id: str,
                sheet: str,
                data: List[List[Any]],
                ctx: Context = None) -> str:
    """
    Append rows after the last row with data in a sheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        data: 2D array of rows to append

    Returns:
        Result of the append operation
    """
    return _call('append_data', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, data=data)


@tool(
    annotations=ToolAnnotations(
        title="Clear Range",
        destructiveHint=True,
    ),
)
def clear_range(spreadsheet_id: str,
                sheet: str,
                range: str,
                ctx: Context = None) -> str:
    """
    Clear the values of a range, keeping its formatting.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:C10')

    Returns:
        Result of the clear operation
    """
    return _call('clear_range', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range)


@tool(
    annotations=ToolAnnotations(
        title="Add Rows",
        destructiveHint=True,
    ),
)
def add_rows(spreadsheet_id: str,
             sheet: str,
             count: int,
             start_row: Optional[int] = None,
             ctx: Context = None) -> str:
    """
    Add rows to a sheet in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        count: Number of rows to add
        start_row: 0-based row index to start adding. If not provided, adds at the beginning.

    Returns:
        Result of the operation
    """
    return _call('add_rows', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet,
                 count=count, start_row=start_row)


@tool(
    annotations=ToolAnnotations(
        title="Add Columns",
        destructiveHint=True,
    ),
)
def add_columns(spreadsheet_id: str,
                sheet: str,
                count: int,
                start_column: Optional[int] = None,
                ctx: Context = None) -> str:
    """
    Add columns to a sheet in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        sheet: The name of the sheet
        count: Number of columns to add
        start_column: 0-based column index to start adding. If not provided, adds at the beginning.

    Returns:
        Result of the operation
    """
    return _call('add_columns', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet,
                 count=count, start_column=start_column)


@tool(
    annotations=ToolAnnotations(
        title="List Sheets",
        readOnlyHint=True,
    ),
)
def list_sheets(spreadsheet_id: str, ctx: Context = None) -> str:
    """
    List all sheets in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)

    Returns:
        List of sheet names
    """
    return _call('list_sheets', ctx, spreadsheet_id=spreadsheet_id)


@tool(
    annotations=ToolAnnotations(
        title="Create Sheet",
        destructiveHint=True,
    ),
)
def create_sheet(spreadsheet_id: str,
                 title: str,
                 ctx: Context = None) -> str:
    """
    Create a new sheet tab in an existing Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        title: The title for the new sheet

    Returns:
        Information about the newly created sheet
    """
    return _call('create_sheet', ctx, spreadsheet_id=spreadsheet_id, title=title)


@tool(
    annotations=ToolAnnotations(
        title="Delete Sheet",
        destructiveHint=True,
    ),
)
def delete_sheet(spreadsheet_id: str,
                 sheet: str,
                 ctx: Context = None) -> str:
    """
    Delete a sheet tab from a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet to delete

    Returns:
        Result of the delete operation
    """
    return _call('delete_sheet', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet)


@tool(
    annotations=ToolAnnotations(
        title="Duplicate Sheet",
        destructiveHint=True,
    ),
)
def duplicate_sheet(spreadsheet_id: str,
                    sheet: str,
                    new_title: Optional[str] = None,
                    ctx: Context = None) -> str:
    """
    Duplicate a sheet within the same spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet to duplicate
        new_title: Optional title for the copy. Google picks one if omitted.

    Returns:
        Result of the duplicate operation
    """
    return _call('duplicate_sheet', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet,
                 new_title=new_title)


@tool(
    annotations=ToolAnnotations(
        title="Rename Sheet",
        destructiveHint=True,
    ),
)
def rename_sheet(spreadsheet: str,
                 sheet: str,
                 new_name: str,
                 ctx: Context = None) -> str:
    """
    Rename a sheet in a Google Spreadsheet.

    Args:
        spreadsheet: Spreadsheet ID
        sheet: Current sheet name
        new_name: New sheet name

    Returns:
        Result of the operation
    """
    return _call('rename_sheet', ctx, spreadsheet=spreadsheet, sheet=sheet, new_name=new_name)


@tool(
    annotations=ToolAnnotations(
        title="Hide Sheet",
        destructiveHint=True,
    ),
)
def hide_sheet(spreadsheet_id: str, sheet: str, ctx: Context = None) -> str:
    """
    Hide a sheet tab.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet

    Returns:
        Result of the operation
    """
    return _call('hide_sheet', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet)


@tool(
    annotations=ToolAnnotations(
        title="Unhide Sheet",
        destructiveHint=True,
    ),
)
def unhide_sheet(spreadsheet_id: str, sheet: str, ctx: Context = None) -> str:
    """
    Show a hidden sheet tab.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet

    Returns:
        Result of the operation
    """
    return _call('unhide_sheet', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet)


@tool(
    annotations=ToolAnnotations(
        title="Copy Sheet",
        destructiveHint=True,
    ),
)
def copy_sheet(src_spreadsheet: str,
               src_sheet: str,
               dst_spreadsheet: str,
               dst_sheet: str,
               ctx: Context = None) -> str:
    """
    Copy a sheet from one spreadsheet to another.

    Args:
        src_spreadsheet: Source spreadsheet ID
        src_sheet: Source sheet name
        dst_spreadsheet: Destination spreadsheet ID
        dst_sheet: Destination sheet name

    Returns:
        Result of the copy, and of the rename when the copy needed one
    """
    return _call('copy_sheet', ctx, src_spreadsheet=src_spreadsheet, src_sheet=src_sheet,
                 dst_spreadsheet=dst_spreadsheet, dst_sheet=dst_sheet)


@tool(
    annotations=ToolAnnotations(
        title="Find and Replace",
        destructiveHint=True,
    ),
)
def find_replace(spreadsheet_id: str,
                 find: str,
                 replacement: str = "",
                 sheet: Optional[str] = None,
                 all_sheets: bool = False,
                 match_case: bool = False,
                 match_entire_cell: bool = False,
                 ctx: Context = None) -> str:
    """
    Find and replace text in one sheet or across the whole spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        find: Text to search for
        replacement: Replacement text (default: empty string)
        sheet: Sheet to search. Required unless all_sheets is True.
        all_sheets: Search every sheet
        match_case: Case-sensitive matching
        match_entire_cell: Only match cells whose whole value equals find

    Returns:
        Result of the findReplace request, including the replacement counts
    """
    return _call('find_replace', ctx, spreadsheet_id=spreadsheet_id, find=find,
                 replacement=replacement, sheet=sheet, all_sheets=all_sheets,
                 match_case=match_case, match_entire_cell=match_entire_cell)


@tool(
    annotations=ToolAnnotations(
        title="Sort Range",
        destructiveHint=True,
    ),
)
def sort_range(spreadsheet_id: str,
               sheet: str,
               range: str,
               sort_column: int = 0,
               ascending: bool = True,
               ctx: Context = None) -> str:
    """
    Sort the rows of a range by one column.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A2:C10')
        sort_column: 0-based column index within the sheet to sort by
        ascending: Sort ascending (default) or descending

    Returns:
        Result of the sort operation
    """
    return _call('sort_range', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range,
                 sort_column=sort_column, ascending=ascending)


@tool(
    annotations=ToolAnnotations(
        title="Format Cells",
        destructiveHint=True,
    ),
)
def format_cells(spreadsheet_id: str,
                 sheet: str,
                 range: str,
                 background_color: Optional[Dict[str, float]] = None,
                 text_color: Optional[Dict[str, float]] = None,
                 bold: Optional[bool] = None,
                 italic: Optional[bool] = None,
                 font_size: Optional[int] = None,
                 ctx: Context = None) -> str:
    """
    Format a range of cells. Only the options given are changed.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:C10')
        background_color: Color as {'red': 0-1, 'green': 0-1, 'blue': 0-1, 'alpha': 0-1}
        text_color: Text color, same shape as background_color
        bold: Bold text
        italic: Italic text
        font_size: Font size in points

    Returns:
        Result of the format operation
    """
    return _call('format_cells', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range,
                 background_color=background_color, text_color=text_color,
                 bold=bold, italic=italic, font_size=font_size)


@tool(
    annotations=ToolAnnotations(
        title="Merge Cells",
        destructiveHint=True,
    ),
)
def merge_cells(spreadsheet_id: str,
                sheet: str,
                range: str,
                merge_type: str = "MERGE_ALL",
                ctx: Context = None) -> str:
    """
    Merge a range of cells.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:C3')
        merge_type: MERGE_ALL, MERGE_COLUMNS or MERGE_ROWS

    Returns:
        Result of the merge operation
    """
    return _call('merge_cells', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range,
                 merge_type=merge_type)


@tool(
    annotations=ToolAnnotations(
        title="Unmerge Cells",
        destructiveHint=True,
    ),
)
def unmerge_cells(spreadsheet_id: str,
                  sheet: str,
                  range: str,
                  ctx: Context = None) -> str:
    """
    Unmerge every merged cell inside a range.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:C3')

    Returns:
        Result of the unmerge operation
    """
    return _call('unmerge_cells', ctx, spreadsheet_id=spreadsheet_id, sheet=sheet, range=range)


@tool(
    annotations=ToolAnnotations(
        title="List Named Ranges",
        readOnlyHint=True,
    ),
)
def list_named_ranges(spreadsheet_id: str, ctx: Context = None) -> str:
    """
    List all named ranges in a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)

    Returns:
        List of named ranges with their ID, name, sheet and A1 range
    """
    return _call('list_named_ranges', ctx, spreadsheet_id=spreadsheet_id)


@tool(
    annotations=ToolAnnotations(
        title="Create Named Range",
        destructiveHint=True,
    ),
)
def create_named_range(spreadsheet_id: str,
                       name: str,
                       sheet: str,
                       range: str,
                       ctx: Context = None) -> str:
    """
    Create a named range.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        name: Name for the range (e.g., 'SalesData')
        sheet: The name of the sheet
        range: Cell range in A1 notation (e.g., 'A1:D100')

    Returns:
        Result of the operation
    """
    return _call('create_named_range', ctx, spreadsheet_id=spreadsheet_id, name=name,
                 sheet=sheet, range=range)


@tool(
    annotations=ToolAnnotations(
        title="Delete Named Range",
        destructiveHint=True,
    ),
)
def delete_named_range(spreadsheet_id: str,
                       named_range_id: str,
                       ctx: Context = None) -> str:
    """
    Delete a named range. The cells themselves are not changed.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        named_range_id: ID of the named range, as returned by list_named_ranges

    Returns:
        Result of the operation
    """
    return _call('delete_named_range', ctx, spreadsheet_id=spreadsheet_id,
                 named_range_id=named_range_id)


@tool(
    annotations=ToolAnnotations(
        title="Get Multiple Sheet Data",
        readOnlyHint=True,
    ),
)
def get_multiple_sheet_data(queries: List[Dict[str, str]],
                            ctx: Context = None) -> str:
    """
    Get data from multiple specific ranges in Google Spreadsheets.

    Args:
        queries: A list of dictionaries, each specifying a query.
                 Each dictionary should have 'spreadsheet_id', 'sheet', and 'range' keys.
                 Example: [{'spreadsheet_id': 'abc', 'sheet': 'Sheet1', 'range': 'A1:B5'},
                           {'spreadsheet_id': 'xyz', 'sheet': 'Data', 'range': 'C1:C10'}]

    Returns:
        A list of dictionaries, each containing the original query parameters
        and the fetched 'data' or an 'error'.
    """
    return _call('get_multiple_sheet_data', ctx, queries=queries)


@tool(
    annotations=ToolAnnotations(
        title="Get Multiple Spreadsheet Summary",
        readOnlyHint=True,
    ),
)
def get_multiple_spreadsheet_summary(spreadsheet_ids: List[str],
                                     rows_to_fetch: int = 5,
                                     ctx: Context = None) -> str:
    """
    Get a summary of multiple Google Spreadsheets, including sheet names,
    headers, and the first few rows of data for each sheet.

    Args:
        spreadsheet_ids: A list of spreadsheet IDs to summarize.
        rows_to_fetch: The number of rows (including header) to fetch for the summary (default: 5).

    Returns:
        A list of dictionaries, each representing a spreadsheet summary.
        Includes spreadsheet title, sheet summaries (title, headers, first rows), or an error.
    """
    return _call('get_multiple_spreadsheet_summary', ctx, spreadsheet_ids=spreadsheet_ids,
                 rows_to_fetch=rows_to_fetch)


@tool(
    annotations=ToolAnnotations(
        title="Find Cells",
        readOnlyHint=True,
    ),
)
def find_in_spreadsheet(spreadsheet_id: str,
                        query: str,
                        sheet: Optional[str] = None,
                        case_sensitive: bool = False,
                        max_results: int = 50,
                        ctx: Context = None) -> str:
    """
    Find cells containing a value in a spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        query: Text to look for in cell values
        sheet: Limit the search to this sheet. Searches all sheets if omitted.
        case_sensitive: Case-sensitive matching (default: False)
        max_results: Stop after this many matches (default: 50)

    Returns:
        Matches as {sheet, cell, value}, with the cell in A1 notation
    """
    return _call('find_in_spreadsheet', ctx, spreadsheet_id=spreadsheet_id, query=query,
                 sheet=sheet, case_sensitive=case_sensitive, max_results=max_results)


@tool(
    annotations=ToolAnnotations(
        title="Batch Update",
        destructiveHint=True,
    ),
)
def batch_update(spreadsheet_id: str,
                 requests: List[Dict[str, Any]],
                 ctx: Context = None) -> str:
    """
    Execute a batch update on a Google Spreadsheet using the full batchUpdate endpoint.

    Args:
        spreadsheet_id: The ID of the spreadsheet (found in the URL)
        requests: List of Sheets API request objects, e.g.
            [{'addSheet': {'properties': {'title': 'New Sheet'}}}]

    Returns:
        Result of the batch update operation, including one reply per request
    """
    return _call('batch_update', ctx, spreadsheet_id=spreadsheet_id, requests=requests)


@tool(
    annotations=ToolAnnotations(
        title="List Spreadsheets",
        readOnlyHint=True,
    ),
)
def list_spreadsheets(folder_id: Optional[str] = None, ctx: Context = None) -> str:
    """
    List all spreadsheets in the specified Google Drive folder.
    If no folder is specified, uses the configured default folder or lists from 'My Drive'.

    Args:
        folder_id: Optional Google Drive folder ID to search in.

    Returns:
        List of spreadsheets with their ID and title
    """
    return _call('list_spreadsheets', ctx, folder_id=folder_id)


@tool(
    annotations=ToolAnnotations(
        title="Create Spreadsheet",
        destructiveHint=True,
    ),
)
def create_spreadsheet(title: str, folder_id: Optional[str] = None, ctx: Context = None) -> str:
    """
    Create a new Google Spreadsheet.

    Args:
        title: The title of the new spreadsheet
        folder_id: Optional Google Drive folder ID where the spreadsheet should be created.
                  If not provided, uses the configured default folder or root.

    Returns:
        Information about the newly created spreadsheet including its ID
    """
    return _call('create_spreadsheet', ctx, title=title, folder_id=folder_id)


@tool(
    annotations=ToolAnnotations(
        title="Search Spreadsheets by Name or Content",
        readOnlyHint=True,
    ),
)
def search_spreadsheets(query: str,
                        max_results: int = 20,
                        ctx: Context = None) -> str:
    """
    Search for spreadsheets in Google Drive by name or content.

    Args:
        query: Search text, matched against file names and contents
        max_results: Maximum number of results (default: 20, max: 100)

    Returns:
        Matching spreadsheets with ID, name, timestamps, owners and web link
    """
    return _call('search_spreadsheets', ctx, query=query, max_results=max_results)


@tool(
    annotations=ToolAnnotations(
        title="List Folders",
        readOnlyHint=True,
    ),
)
def list_folders(parent_folder_id: Optional[str] = None, ctx: Context = None) -> str:
    """
    List all folders in the specified Google Drive folder.
    If no parent folder is specified, lists folders from 'My Drive' root.

    Args:
        parent_folder_id: Optional Google Drive folder ID to search within.

    Returns:
        List of folders with their ID, name, and parent information
    """
    return _call('list_folders', ctx, parent_folder_id=parent_folder_id)


@tool(
    annotations=ToolAnnotations(
        title="Share Spreadsheet",
        destructiveHint=True,
    ),
)
def share_spreadsheet(spreadsheet_id: str,
                      recipients: List[Dict[str, str]],
                      send_notification: bool = True,
                      ctx: Context = None) -> str:
    """
    Share a Google Spreadsheet with multiple users via email, assigning specific roles.

    Args:
        spreadsheet_id: The ID of the spreadsheet to share.
        recipients: A list of dictionaries, each containing 'email_address' and 'role'.
                    The role should be one of: 'reader', 'commenter', 'writer'.
                    Example: [
                        {'email_address': 'user1@example.com', 'role': 'writer'},
                        {'email_address': 'user2@example.com', 'role': 'reader'}
                    ]
        send_notification: Whether to send a notification email to the users. Defaults to True.

    Returns:
        A dictionary containing lists of 'successes' and 'failures'.
    """
    return _call('share_spreadsheet', ctx, spreadsheet_id=spreadsheet_id, recipients=recipients,
                 send_notification=send_notification)


@tool(
    annotations=ToolAnnotations(
        title="List Permissions",
        readOnlyHint=True,
    ),
)
def list_permissions(spreadsheet_id: str, ctx: Context = None) -> str:
    """
    List who has access to a spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet

    Returns:
        Permissions with ID, type, role, email address and display name
    """
    return _call('list_permissions', ctx, spreadsheet_id=spreadsheet_id)


@tool(
    annotations=ToolAnnotations(
        title="Remove Permission",
        destructiveHint=True,
    ),
)
def remove_permission(spreadsheet_id: str,
                      permission_id: str,
                      ctx: Context = None) -> str:
    """
    Revoke a permission on a spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        permission_id: ID of the permission, as returned by list_permissions

    Returns:
        Confirmation of the removal
    """
    return _call('remove_permission', ctx, spreadsheet_id=spreadsheet_id,
                 permission_id=permission_id)


@tool(
    annotations=ToolAnnotations(
        title="Export Spreadsheet",
        readOnlyHint=True,
    ),
)
def export_spreadsheet(spreadsheet_id: str,
                       format: str = "csv",
                       ctx: Context = None) -> str:
    """
    Describe how to export a spreadsheet. No file is downloaded.

    Args:
        spreadsheet_id: The ID of the spreadsheet
        format: One of csv, pdf, xlsx, ods, tsv (default: csv)

    Returns:
        The export mime type and Drive export URL
    """
    return _call('export_spreadsheet', ctx, spreadsheet_id=spreadsheet_id, format=format)


@mcp.resource(INFO_URI_TEMPLATE)
def spreadsheet_info(spreadsheet_id: str) -> str:
    """
    Get basic information about a Google Spreadsheet.

    Args:
        spreadsheet_id: The ID of the spreadsheet

    Returns:
        JSON string with spreadsheet information
    """
    context = mcp.get_context().request_context.lifespan_context
    return read_spreadsheet_info(context, INFO_URI_TEMPLATE.format(spreadsheet_id=spreadsheet_id))


def main():
    logging.basicConfig(
        level=getattr(logging, CONFIG.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )

    if CONFIG.enabled_tools is not None:
        logger.info(f"Tool filtering enabled. Active tools: {', '.join(sorted(CONFIG.enabled_tools))}")
    else:
        logger.info("Tool filtering disabled. All tools are enabled.")

    logger.info(f"Starting server with {CONFIG.transport} transport")
    mcp.run(transport=CONFIG.transport)
