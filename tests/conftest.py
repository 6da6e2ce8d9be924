"""Shared pytest fixtures for sheets-mcp tests."""

import json
import tempfile
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from sheets_mcp.context import SpreadsheetContext


def spreadsheet_metadata(*sheets, title="Budget"):
    """spreadsheets.get response for (title, sheetId) pairs."""
    return {
        "properties": {"title": title},
        "sheets": [
            {"properties": {"title": name, "sheetId": sheet_id}}
            for name, sheet_id in sheets
        ],
    }


def make_http_error(status=404, message="Requested entity was not found."):
    """HttpError carrying a JSON error body, as googleapiclient raises it."""
    resp = MagicMock(status=status, reason="Error")
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


@pytest.fixture
def mock_sheets_service():
    """Create a mock Google Sheets service with two sheets."""
    service = MagicMock()
    service.spreadsheets.return_value.get.return_value.execute.return_value = spreadsheet_metadata(
        ("Sheet1", 0), ("Data", 42)
    )
    return service


@pytest.fixture
def mock_drive_service():
    """Create a mock Google Drive service."""
    service = MagicMock()
    service.files.return_value.list.return_value.execute.return_value = {
        "files": [
            {"id": "file1", "name": "Budget"},
            {"id": "file2", "name": "Roadmap"},
        ]
    }
    return service


@pytest.fixture
def context(mock_sheets_service, mock_drive_service):
    """SpreadsheetContext over the mock services."""
    return SpreadsheetContext(
        sheets_service=mock_sheets_service,
        drive_service=mock_drive_service,
    )


@pytest.fixture
def batch_update_body(mock_sheets_service):
    """Return the body of the last spreadsheets.batchUpdate call."""

    def _body():
        _, kwargs = mock_sheets_service.spreadsheets.return_value.batchUpdate.call_args
        return kwargs["body"]

    return _body


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def sample_credentials():
    """Create sample OAuth credentials for testing."""
    return {
        "token": "test_access_token",
        "refresh_token": "test_refresh_token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "scopes": ["https://www.googleapis.com/auth/spreadsheets"],
    }
