"""
Error types for the Sheets MCP server.

Input errors subclass SheetsMCPError and are turned into ``{"error": ...}``
responses by the dispatcher. Remote API failures arrive as
``googleapiclient.errors.HttpError`` and are described with
``describe_remote_error``.
"""

import json


class SheetsMCPError(Exception):
    """Base class for errors reported back to the caller."""


class MissingArgument(SheetsMCPError):
    """A required argument is absent or empty."""


class InvalidArgument(SheetsMCPError):
    """An argument is present but has the wrong shape."""


class InvalidRangeFormat(SheetsMCPError):
    """A range string is not of the form 'A1:B2'."""

    def __init__(self, range_string: str):
        super().__init__(f"invalid range format '{range_string}': expected 'A1:B2' notation")
        self.range_string = range_string


class InvalidCellNotation(SheetsMCPError):
    """A cell reference is not a column-letter run followed by a row number."""

    def __init__(self, cell: str, reason: str):
        super().__init__(f"invalid cell notation '{cell}': {reason}")
        self.cell = cell
        self.reason = reason


class InvalidColorFormat(SheetsMCPError):
    """A color argument is not an object."""


class SheetNotFound(SheetsMCPError):
    """No sheet in the spreadsheet has the requested title."""

    def __init__(self, title: str):
        super().__init__(f"sheet '{title}' not found")
        self.title = title


class UnsupportedFormat(SheetsMCPError):
    """An export format outside the supported table."""

    def __init__(self, export_format: str, supported):
        super().__init__(
            f"unsupported format '{export_format}'. Must be one of: {', '.join(supported)}"
        )
        self.export_format = export_format


class InvalidURIFormat(SheetsMCPError):
    """A resource URI is not of the form 'spreadsheet://<id>/info'."""


class CredentialsError(SheetsMCPError):
    """Every configured authentication method failed."""


def describe_remote_error(error: Exception) -> str:
    """
    Return the most useful message for a failed API call.

    HttpError bodies are JSON documents of the form
    ``{"error": {"message": ...}}``; when the body can be decoded the API's own
    message is used, otherwise the exception text.
    """
    details = str(error)
    content = getattr(error, 'content', None)
    if content:
        try:
            if isinstance(content, bytes):
                content = content.decode('utf-8')
            message = json.loads(content).get('error', {}).get('message')
        except (ValueError, AttributeError):
            message = None
        if message:
            details = message
    return details
