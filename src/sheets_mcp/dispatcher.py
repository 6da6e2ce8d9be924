"""
Operation table and dispatch.

Every tool call goes through ``dispatch``: the argument bag is bound to the
context's coercion mode, the handler runs, and the outcome is serialized as
JSON text. Input errors and remote failures come back as ``{"error": ...}``
and never propagate to the transport.
"""

import json
import logging
from typing import Any, Callable, Dict, NamedTuple, Optional

from googleapiclient.errors import HttpError

from sheets_mcp import drive, structure, values
from sheets_mcp.arguments import Arguments, ArgumentBag
from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.errors import SheetsMCPError, describe_remote_error

logger = logging.getLogger(__name__)


class Operation(NamedTuple):
    handler: Callable[[SpreadsheetContext, Arguments], Any]
    # used in "failed to <action>: ..." messages
    action: str


OPERATIONS: Dict[str, Operation] = {
    # cell values
    'get_sheet_data': Operation(values.get_sheet_data, 'get sheet data'),
    'get_sheet_formulas': Operation(values.get_sheet_formulas, 'get formulas'),
    'update_cells': Operation(values.update_cells, 'update cells'),
    'batch_update_cells': Operation(values.batch_update_cells, 'batch update cells'),
    'append_data': Operation(values.append_data, 'append data'),
    'clear_range': Operation(values.clear_range, 'clear range'),
    'get_multiple_sheet_data': Operation(values.get_multiple_sheet_data, 'get multiple sheet data'),
    'get_multiple_spreadsheet_summary': Operation(values.get_multiple_spreadsheet_summary,
                                                  'get spreadsheet summaries'),
    'find_in_spreadsheet': Operation(values.find_in_spreadsheet, 'search spreadsheet'),

    # sheet structure
    'add_rows': Operation(structure.add_rows, 'add rows'),
    'add_columns': Operation(structure.add_columns, 'add columns'),
    'list_sheets': Operation(structure.list_sheets, 'list sheets'),
    'create_sheet': Operation(structure.create_sheet, 'create sheet'),
    'delete_sheet': Operation(structure.delete_sheet, 'delete sheet'),
    'duplicate_sheet': Operation(structure.duplicate_sheet, 'duplicate sheet'),
    'rename_sheet': Operation(structure.rename_sheet, 'rename sheet'),
    'hide_sheet': Operation(structure.hide_sheet, 'hide sheet'),
    'unhide_sheet': Operation(structure.unhide_sheet, 'unhide sheet'),
    'copy_sheet': Operation(structure.copy_sheet, 'copy sheet'),
    'find_replace': Operation(structure.find_replace, 'find and replace'),
    'sort_range': Operation(structure.sort_range, 'sort range'),
    'format_cells': Operation(structure.format_cells, 'format cells'),
    'merge_cells': Operation(structure.merge_cells, 'merge cells'),
    'unmerge_cells': Operation(structure.unmerge_cells, 'unmerge cells'),
    'batch_update': Operation(structure.batch_update_spreadsheet, 'batch update spreadsheet'),
    'list_named_ranges': Operation(structure.list_named_ranges, 'list named ranges'),
    'create_named_range': Operation(structure.create_named_range, 'create named range'),
    'delete_named_range': Operation(structure.delete_named_range, 'delete named range'),

    # drive
    'list_spreadsheets': Operation(drive.list_spreadsheets, 'list spreadsheets'),
    'create_spreadsheet': Operation(drive.create_spreadsheet, 'create spreadsheet'),
    'search_spreadsheets': Operation(drive.search_spreadsheets, 'search spreadsheets'),
    'list_folders': Operation(drive.list_folders, 'list folders'),
    'share_spreadsheet': Operation(drive.share_spreadsheet, 'share spreadsheet'),
    'list_permissions': Operation(drive.list_permissions, 'list permissions'),
    'remove_permission': Operation(drive.remove_permission, 'remove permission'),
    'export_spreadsheet': Operation(drive.export_spreadsheet, 'export spreadsheet'),
}


def run_operation(context: SpreadsheetContext, name: str,
                  bag: Optional[ArgumentBag] = None) -> Any:
    """
    Run one operation and return its payload or an error envelope.

    Args:
        context: Client handles and server settings
        name: Operation name, a key of OPERATIONS
        bag: Loosely-typed arguments as received from the caller

    Returns:
        The handler's result, or {"error": message}
    """
    operation = OPERATIONS.get(name)
    if operation is None:
        return {"error": f"unknown operation '{name}'"}

    args = Arguments(bag, strict=context.strict_arguments)
    try:
        return operation.handler(context, args)
    except SheetsMCPError as e:
        return {"error": str(e)}
    except HttpError as e:
        message = f"failed to {operation.action}: {describe_remote_error(e)}"
        logger.error(message)
        return {"error": message}
    except (OSError, ValueError, TypeError, KeyError) as e:
        message = f"failed to {operation.action}: {e}"
        logger.error(message)
        return {"error": message}


def to_json(result: Any) -> str:
    try:
        return json.dumps(result)
    except (TypeError, ValueError) as e:
        return json.dumps({"error": f"failed to serialize result: {e}"})


def dispatch(context: SpreadsheetContext, name: str,
             bag: Optional[ArgumentBag] = None) -> str:
    """Run an operation and serialize the outcome as JSON text."""
    return to_json(run_operation(context, name, bag))
