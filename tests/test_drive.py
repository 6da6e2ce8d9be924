"""Unit tests for Drive operations."""

import pytest

from sheets_mcp import drive
from sheets_mcp.arguments import Arguments
from sheets_mcp.errors import MissingArgument, UnsupportedFormat

from conftest import make_http_error


def _permissions(service):
    return service.permissions.return_value


class TestListSpreadsheets:
    def test_my_drive(self, context, mock_drive_service):
        result = drive.list_spreadsheets(context, Arguments({}))

        assert result == [{"id": "file1", "title": "Budget"}, {"id": "file2", "title": "Roadmap"}]
        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert kwargs["q"] == "mimeType='application/vnd.google-apps.spreadsheet'"

    def test_default_folder(self, context, mock_drive_service):
        context.folder_id = "folder123"
        drive.list_spreadsheets(context, Arguments({}))

        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert kwargs["q"].endswith(" and 'folder123' in parents")

    def test_folder_override(self, context, mock_drive_service):
        context.folder_id = "folder123"
        drive.list_spreadsheets(context, Arguments({"folder_id": "other"}))

        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert "'other' in parents" in kwargs["q"]


class TestCreateSpreadsheet:
    def test_in_root(self, context, mock_drive_service):
        mock_drive_service.files.return_value.create.return_value.execute.return_value = {
            "id": "new1", "name": "Plan",
        }

        result = drive.create_spreadsheet(context, Arguments({"title": "Plan"}))

        assert result == {"spreadsheetId": "new1", "title": "Plan", "folder": "root"}
        _, kwargs = mock_drive_service.files.return_value.create.call_args
        assert "parents" not in kwargs["body"]

    def test_in_folder(self, context, mock_drive_service):
        mock_drive_service.files.return_value.create.return_value.execute.return_value = {
            "id": "new1", "name": "Plan", "parents": ["f1"],
        }

        result = drive.create_spreadsheet(context, Arguments({"title": "Plan", "folder_id": "f1"}))

        assert result["folder"] == "f1"
        _, kwargs = mock_drive_service.files.return_value.create.call_args
        assert kwargs["body"]["parents"] == ["f1"]

    def test_title_required(self, context):
        with pytest.raises(MissingArgument, match="title is required"):
            drive.create_spreadsheet(context, Arguments({}))


class TestShareSpreadsheet:
    def test_successes_and_failures(self, context, mock_drive_service):
        _permissions(mock_drive_service).create.return_value.execute.side_effect = [
            {"id": "perm1"},
            make_http_error(400, "Invalid email"),
        ]
        recipients = [
            {"email_address": "a@example.com"},
            {"email_address": "b@example.com", "role": "owner"},
            {"role": "reader"},
            {"email_address": "c@example.com", "role": "reader"},
        ]

        result = drive.share_spreadsheet(context, Arguments({
            "spreadsheet_id": "abc", "recipients": recipients, "send_notification": False,
        }))

        assert result["successes"] == [
            {"email_address": "a@example.com", "role": "writer", "permissionId": "perm1"},
        ]
        assert result["failures"] == [
            {"email_address": "b@example.com",
             "error": "Invalid role 'owner'. Must be 'reader', 'commenter', or 'writer'."},
            {"email_address": None, "error": "Missing email_address in recipient entry."},
            {"email_address": "c@example.com", "error": "Failed to share: Invalid email"},
        ]
        assert _permissions(mock_drive_service).create.call_count == 2
        _, kwargs = _permissions(mock_drive_service).create.call_args_list[0]
        assert kwargs["body"] == {"type": "user", "role": "writer", "emailAddress": "a@example.com"}
        assert kwargs["sendNotificationEmail"] is False


def test_list_permissions(context, mock_drive_service):
    _permissions(mock_drive_service).list.return_value.execute.return_value = {
        "permissions": [{"id": "p1", "role": "owner"}]
    }

    assert drive.list_permissions(context, Arguments({"spreadsheet_id": "abc"})) == [
        {"id": "p1", "role": "owner"}
    ]


def test_remove_permission(context, mock_drive_service):
    result = drive.remove_permission(context, Arguments({"spreadsheet_id": "abc", "permission_id": "p1"}))

    assert result == {"spreadsheetId": "abc", "permissionId": "p1", "removed": True}
    _permissions(mock_drive_service).delete.assert_called_once_with(
        fileId="abc", permissionId="p1", supportsAllDrives=True
    )


class TestExport:
    def test_xlsx_mime_type(self, context, mock_drive_service):
        result = drive.export_spreadsheet(context, Arguments({"spreadsheet_id": "abc", "format": "xlsx"}))

        assert result["mimeType"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        assert result["format"] == "xlsx"
        assert result["exportUrl"].startswith("https://www.googleapis.com/drive/v3/files/abc/export")
        assert not mock_drive_service.method_calls

    def test_defaults_to_csv(self, context):
        result = drive.export_spreadsheet(context, Arguments({"spreadsheet_id": "abc"}))
        assert result["mimeType"] == "text/csv"

    def test_unsupported_format(self, context, mock_drive_service, mock_sheets_service):
        with pytest.raises(UnsupportedFormat, match="unsupported format 'bogus'"):
            drive.export_spreadsheet(context, Arguments({"spreadsheet_id": "abc", "format": "bogus"}))
        assert not mock_drive_service.method_calls
        assert not mock_sheets_service.method_calls


def test_list_folders(context, mock_drive_service):
    mock_drive_service.files.return_value.list.return_value.execute.return_value = {
        "files": [{"id": "f1", "name": "Reports", "parents": ["root-id"]}, {"id": "f2", "name": "Shared"}]
    }

    result = drive.list_folders(context, Arguments({}))

    assert result == [
        {"id": "f1", "name": "Reports", "parent": "root-id"},
        {"id": "f2", "name": "Shared", "parent": "root"},
    ]
    _, kwargs = mock_drive_service.files.return_value.list.call_args
    assert "'root' in parents" in kwargs["q"]


class TestSearchSpreadsheets:
    def test_query_and_projection(self, context, mock_drive_service):
        mock_drive_service.files.return_value.list.return_value.execute.return_value = {
            "files": [{
                "id": "s1",
                "name": "Budget",
                "createdTime": "2024-01-01T00:00:00Z",
                "modifiedTime": "2024-02-01T00:00:00Z",
                "owners": [{"emailAddress": "me@example.com"}],
                "webViewLink": "https://docs.google.com/spreadsheets/d/s1",
            }]
        }

        result = drive.search_spreadsheets(context, Arguments({"query": "bud"}))

        assert result == [{
            "id": "s1",
            "name": "Budget",
            "created_time": "2024-01-01T00:00:00Z",
            "modified_time": "2024-02-01T00:00:00Z",
            "owners": ["me@example.com"],
            "web_link": "https://docs.google.com/spreadsheets/d/s1",
        }]
        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert "name contains 'bud'" in kwargs["q"]
        assert kwargs["pageSize"] == 20

    def test_max_results_clamped(self, context, mock_drive_service):
        drive.search_spreadsheets(context, Arguments({"query": "x", "max_results": 500}))
        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert kwargs["pageSize"] == 100

    def test_trailing_backslash_escaped(self, context, mock_drive_service):
        drive.search_spreadsheets(context, Arguments({"query": "foo\\"}))
        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert "name contains 'foo\\\\'" in kwargs["q"]

    def test_quotes_escaped(self, context, mock_drive_service):
        drive.search_spreadsheets(context, Arguments({"query": "bob's"}))
        _, kwargs = mock_drive_service.files.return_value.list.call_args
        assert "name contains 'bob\\'s'" in kwargs["q"]
