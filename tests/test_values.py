"""Unit tests for cell value operations."""

import pytest

from sheets_mcp import values
from sheets_mcp.arguments import Arguments
from sheets_mcp.errors import InvalidArgument, MissingArgument, SheetNotFound

from conftest import make_http_error, spreadsheet_metadata


def _values_api(service):
    return service.spreadsheets.return_value.values.return_value


class TestGetSheetData:
    def test_values_projection(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {
            "values": [["a", "b"], [1, 2]]
        }

        result = values.get_sheet_data(context, Arguments({
            "spreadsheet_id": "abc", "sheet": "Sheet1", "range": "A1:B2",
        }))

        assert result == {
            "spreadsheetId": "abc",
            "valueRanges": [{"range": "Sheet1!A1:B2", "values": [["a", "b"], [1, 2]]}],
        }

    def test_whole_sheet_without_range(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {}

        result = values.get_sheet_data(context, Arguments({"spreadsheet_id": "abc", "sheet": "Sheet1"}))

        _values_api(mock_sheets_service).get.assert_called_once_with(
            spreadsheetId="abc", range="Sheet1"
        )
        assert result["valueRanges"][0]["values"] == []

    def test_grid_data_passthrough(self, context, mock_sheets_service):
        values.get_sheet_data(context, Arguments({
            "spreadsheet_id": "abc", "sheet": "Sheet1", "include_grid_data": True,
        }))

        mock_sheets_service.spreadsheets.return_value.get.assert_called_with(
            spreadsheetId="abc", ranges=["Sheet1"], includeGridData=True
        )

    def test_missing_sheet(self, context):
        with pytest.raises(MissingArgument, match="spreadsheet_id and sheet are required"):
            values.get_sheet_data(context, Arguments({"spreadsheet_id": "abc"}))


def test_get_sheet_formulas(context, mock_sheets_service):
    _values_api(mock_sheets_service).get.return_value.execute.return_value = {
        "values": [["=SUM(A1:A3)"]]
    }

    result = values.get_sheet_formulas(context, Arguments({
        "spreadsheet_id": "abc", "sheet": "Sheet1", "range": "B1",
    }))

    assert result == [["=SUM(A1:A3)"]]
    _values_api(mock_sheets_service).get.assert_called_once_with(
        spreadsheetId="abc", range="Sheet1!B1", valueRenderOption="FORMULA"
    )


class TestWrites:
    def test_update_cells(self, context, mock_sheets_service):
        values.update_cells(context, Arguments({
            "spreadsheet_id": "abc", "sheet": "Sheet1", "range": "A1:B1", "data": [[1, "x"]],
        }))

        _values_api(mock_sheets_service).update.assert_called_once_with(
            spreadsheetId="abc",
            range="Sheet1!A1:B1",
            valueInputOption="USER_ENTERED",
            body={"values": [[1, "x"]]},
        )

    def test_update_cells_rejects_bad_data(self, context, mock_sheets_service):
        with pytest.raises(InvalidArgument, match="invalid data format"):
            values.update_cells(context, Arguments({
                "spreadsheet_id": "abc", "sheet": "Sheet1", "range": "A1", "data": [1, 2],
            }))
        _values_api(mock_sheets_service).update.assert_not_called()

    def test_batch_update_cells(self, context, mock_sheets_service):
        values.batch_update_cells(context, Arguments({
            "spreadsheet_id": "abc",
            "sheet": "Sheet1",
            "ranges": {"A1:B1": [[1, 2]], "D1": [["x"]]},
        }))

        _, kwargs = _values_api(mock_sheets_service).batchUpdate.call_args
        assert kwargs["body"] == {
            "valueInputOption": "USER_ENTERED",
            "data": [
                {"range": "Sheet1!A1:B1", "values": [[1, 2]]},
                {"range": "Sheet1!D1", "values": [["x"]]},
            ],
        }

    def test_batch_update_cells_names_bad_range(self, context):
        with pytest.raises(InvalidArgument, match="range D1"):
            values.batch_update_cells(context, Arguments({
                "spreadsheet_id": "abc", "sheet": "Sheet1", "ranges": {"D1": "x"},
            }))

    def test_batch_update_cells_ranges_must_be_map(self, context):
        with pytest.raises(InvalidArgument, match="ranges must be an object"):
            values.batch_update_cells(context, Arguments({
                "spreadsheet_id": "abc", "sheet": "Sheet1", "ranges": [[1]],
            }))

    def test_append_data(self, context, mock_sheets_service):
        values.append_data(context, Arguments({
            "spreadsheet_id": "abc", "sheet": "Log", "data": [["2024-01-01", 3]],
        }))

        _values_api(mock_sheets_service).append.assert_called_once_with(
            spreadsheetId="abc",
            range="Log",
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": [["2024-01-01", 3]]},
        )

    def test_clear_range(self, context, mock_sheets_service):
        values.clear_range(context, Arguments({
            "spreadsheet_id": "abc", "sheet": "Sheet1", "range": "A1:Z100",
        }))

        _values_api(mock_sheets_service).clear.assert_called_once_with(
            spreadsheetId="abc", range="Sheet1!A1:Z100", body={}
        )


class TestGetMultipleSheetData:
    def test_incomplete_query_isolated(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {"values": [[1]]}
        queries = [
            {"spreadsheet_id": "a", "sheet": "Sheet1", "range": "A1:A1"},
            {"spreadsheet_id": "b", "sheet": "", "range": "A1:A1"},
            {"spreadsheet_id": "c", "sheet": "Sheet1", "range": "B1:B1"},
        ]

        result = values.get_multiple_sheet_data(context, Arguments({"queries": queries}))

        assert len(result) == 3
        assert result[0]["data"] == [[1]]
        assert result[2]["data"] == [[1]]
        assert "data" not in result[1]
        assert result[1]["error"] == "Missing required keys (spreadsheet_id, sheet, range)"
        assert [r["spreadsheet_id"] for r in result] == ["a", "b", "c"]
        assert _values_api(mock_sheets_service).get.call_count == 2

    def test_remote_failure_isolated(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.side_effect = [
            make_http_error(404, "Requested entity was not found."),
            {"values": [["ok"]]},
        ]
        queries = [
            {"spreadsheet_id": "gone", "sheet": "Sheet1", "range": "A1"},
            {"spreadsheet_id": "here", "sheet": "Sheet1", "range": "A1"},
        ]

        result = values.get_multiple_sheet_data(context, Arguments({"queries": queries}))

        assert result[0]["error"] == "Requested entity was not found."
        assert result[1]["data"] == [["ok"]]


class TestSpreadsheetSummary:
    def test_headers_and_first_rows(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {
            "values": [["Name", "Amount"], ["Rent", 900], ["Food", 300]]
        }

        result = values.get_multiple_spreadsheet_summary(context, Arguments({
            "spreadsheet_ids": ["abc"], "rows_to_fetch": 3,
        }))

        assert result[0]["spreadsheet_id"] == "abc"
        assert result[0]["title"] == "Budget"
        assert result[0]["error"] is None
        first = result[0]["sheets"][0]
        assert first["title"] == "Sheet1"
        assert first["sheet_id"] == 0
        assert first["headers"] == ["Name", "Amount"]
        assert first["first_rows"] == [["Rent", 900], ["Food", 300]]
        _values_api(mock_sheets_service).get.assert_any_call(spreadsheetId="abc", range="Sheet1!A1:3")

    def test_rows_to_fetch_at_least_one(self, context, mock_sheets_service):
        values.get_multiple_spreadsheet_summary(context, Arguments({
            "spreadsheet_ids": ["abc"], "rows_to_fetch": 0,
        }))
        _values_api(mock_sheets_service).get.assert_any_call(spreadsheetId="abc", range="Sheet1!A1:1")

    def test_untitled_sheet_not_read(self, context, mock_sheets_service):
        mock_sheets_service.spreadsheets.return_value.get.return_value.execute.return_value = {
            "properties": {"title": "Budget"},
            "sheets": [{"properties": {"sheetId": 3}}],
        }

        result = values.get_multiple_spreadsheet_summary(context, Arguments({"spreadsheet_ids": ["abc"]}))

        sheet = result[0]["sheets"][0]
        assert sheet["error"] == "Sheet title not found"
        assert sheet["headers"] == []
        _values_api(mock_sheets_service).get.assert_not_called()

    def test_spreadsheet_failure_isolated(self, context, mock_sheets_service):
        mock_sheets_service.spreadsheets.return_value.get.return_value.execute.side_effect = [
            make_http_error(404, "not found"),
            spreadsheet_metadata(("Only", 1), title="Second"),
        ]
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {"values": []}

        result = values.get_multiple_spreadsheet_summary(context, Arguments({
            "spreadsheet_ids": ["missing", "ok"],
        }))

        assert result[0] == {
            "spreadsheet_id": "missing",
            "title": None,
            "sheets": [],
            "error": "Error fetching spreadsheet missing: not found",
        }
        assert result[1]["title"] == "Second"
        assert result[1]["sheets"][0]["headers"] == []

    def test_sheet_read_failure(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.side_effect = [
            make_http_error(400, "Unable to parse range"),
            {"values": [["h"]]},
        ]

        result = values.get_multiple_spreadsheet_summary(context, Arguments({"spreadsheet_ids": ["abc"]}))

        sheets = result[0]["sheets"]
        assert sheets[0]["error"] == "Error fetching data for sheet Sheet1: Unable to parse range"
        assert sheets[1]["headers"] == ["h"]
        assert sheets[1]["error"] is None


class TestFindInSpreadsheet:
    def test_case_insensitive_by_default(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {
            "values": [["Total", "x"], ["", "grand TOTAL"]]
        }

        result = values.find_in_spreadsheet(context, Arguments({
            "spreadsheet_id": "abc", "query": "total", "sheet": "Data",
        }))

        assert result == [
            {"sheet": "Data", "cell": "A1", "value": "Total"},
            {"sheet": "Data", "cell": "B2", "value": "grand TOTAL"},
        ]

    def test_max_results(self, context, mock_sheets_service):
        _values_api(mock_sheets_service).get.return_value.execute.return_value = {
            "values": [["a", "a", "a"]]
        }

        result = values.find_in_spreadsheet(context, Arguments({
            "spreadsheet_id": "abc", "query": "a", "max_results": 2,
        }))

        assert len(result) == 2

    def test_unknown_sheet(self, context):
        with pytest.raises(SheetNotFound):
            values.find_in_spreadsheet(context, Arguments({
                "spreadsheet_id": "abc", "query": "a", "sheet": "Nope",
            }))
