"""Tests for the MCP tool layer."""

import asyncio
import json
from unittest.mock import MagicMock

from sheets_mcp import server
from sheets_mcp.dispatcher import OPERATIONS


def _ctx(context):
    ctx = MagicMock()
    ctx.request_context.lifespan_context = context
    return ctx


def test_every_operation_is_a_tool():
    tools = asyncio.run(server.mcp.list_tools())
    assert {t.name for t in tools} == set(OPERATIONS)


def test_tool_annotations():
    tools = {t.name: t for t in asyncio.run(server.mcp.list_tools())}
    assert tools["get_sheet_data"].annotations.readOnlyHint is True
    assert tools["delete_sheet"].annotations.destructiveHint is True


def test_tool_returns_json(context):
    result = server.list_sheets("abc", ctx=_ctx(context))
    assert json.loads(result) == ["Sheet1", "Data"]


def test_omitted_optionals_use_defaults(context, mock_sheets_service):
    server.get_sheet_data("abc", "Sheet1", ctx=_ctx(context))

    mock_sheets_service.spreadsheets.return_value.values.return_value.get.assert_called_once_with(
        spreadsheetId="abc", range="Sheet1"
    )


def test_format_cells_sends_only_given_options(context, mock_sheets_service):
    server.format_cells("abc", "Data", "A1:B2", bold=True, ctx=_ctx(context))

    _, kwargs = mock_sheets_service.spreadsheets.return_value.batchUpdate.call_args
    assert kwargs["body"]["requests"][0]["repeatCell"]["fields"] == "userEnteredFormat.textFormat.bold"


def test_error_envelope(context):
    result = json.loads(server.sort_range("abc", "Data", "A1", ctx=_ctx(context)))
    assert result == {"error": "invalid range format 'A1': expected 'A1:B2' notation"}


def test_disabled_tool_not_registered(monkeypatch):
    monkeypatch.setattr(server.CONFIG, "enabled_tools", {"list_sheets"})

    def clear_range():
        pass

    registered = MagicMock()
    monkeypatch.setattr(server.mcp, "tool", registered)

    assert server.tool()(clear_range) is clear_range
    registered.assert_not_called()
