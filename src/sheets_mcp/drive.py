"""
Google Drive operations: listing, creating, searching and exporting
spreadsheets, folder listing, and sharing permissions.
"""

import logging
from typing import Any, Dict, List

from sheets_mcp.arguments import Arguments
from sheets_mcp.batch import fan_out
from sheets_mcp.context import SpreadsheetContext
from sheets_mcp.errors import InvalidArgument, MissingArgument, UnsupportedFormat

logger = logging.getLogger(__name__)

SPREADSHEET_MIME_TYPE = 'application/vnd.google-apps.spreadsheet'
FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'

EXPORT_MIME_TYPES = {
    'csv': 'text/csv',
    'pdf': 'application/pdf',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'ods': 'application/vnd.oasis.opendocument.spreadsheet',
    'tsv': 'text/tab-separated-values',
}

SHARE_ROLES = ('reader', 'commenter', 'writer')


def list_spreadsheets(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, str]]:
    """
    Spreadsheets in the given folder, the configured default folder, or
    'My Drive', most recently modified first.
    """
    target_folder_id = args.get('folder_id', '') or context.folder_id

    query = f"mimeType='{SPREADSHEET_MIME_TYPE}'"
    if target_folder_id:
        query += f" and '{target_folder_id}' in parents"
        logger.info(f"Searching for spreadsheets in folder: {target_folder_id}")
    else:
        logger.info("Searching for spreadsheets in 'My Drive'")

    results = context.drive_service.files().list(
        q=query,
        spaces='drive',
        includeItemsFromAllDrives=True,
        supportsAllDrives=True,
        fields='files(id, name)',
        orderBy='modifiedTime desc'
    ).execute()

    return [{'id': f['id'], 'title': f['name']} for f in results.get('files', [])]


def create_spreadsheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('title')
    title = args.get('title', '')
    target_folder_id = args.get('folder_id', '') or context.folder_id

    file_body = {
        'name': title,
        'mimeType': SPREADSHEET_MIME_TYPE,
    }
    if target_folder_id:
        file_body['parents'] = [target_folder_id]

    spreadsheet = context.drive_service.files().create(
        supportsAllDrives=True,
        body=file_body,
        fields='id, name, parents'
    ).execute()

    spreadsheet_id = spreadsheet.get('id')
    parents = spreadsheet.get('parents')
    logger.info(f"Spreadsheet created with ID: {spreadsheet_id}")

    return {
        'spreadsheetId': spreadsheet_id,
        'title': spreadsheet.get('name', title),
        'folder': parents[0] if parents else 'root',
    }


def share_spreadsheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, List[Dict[str, Any]]]:
    """
    Grant each recipient a role. Recipients are processed independently and
    reported as 'successes' or 'failures'.
    """
    args.require('spreadsheet_id')
    spreadsheet_id = args.get('spreadsheet_id', '')
    recipients = args.list_of('recipients', dict)
    send_notification = args.get('send_notification', True)

    def share(recipient: Dict[str, Any]) -> Dict[str, Any]:
        email_address = recipient.get('email_address')
        role = recipient.get('role') or 'writer'

        if not email_address:
            raise MissingArgument('Missing email_address in recipient entry.')
        if role not in SHARE_ROLES:
            raise InvalidArgument(
                f"Invalid role '{role}'. Must be 'reader', 'commenter', or 'writer'."
            )

        result = context.drive_service.permissions().create(
            fileId=spreadsheet_id,
            body={
                'type': 'user',
                'role': role,
                'emailAddress': email_address
            },
            sendNotificationEmail=send_notification,
            fields='id'
        ).execute()
        return {'role': role, 'permissionId': result.get('id')}

    results = fan_out(
        recipients,
        share,
        lambda recipient: {'email_address': recipient.get('email_address') or None},
        describe_error=_share_error,
    )

    return {
        'successes': [{**r.keys, **r.data} for r in results if r.success],
        'failures': [{**r.keys, 'error': r.error} for r in results if not r.success],
    }


def _share_error(recipient: Dict[str, Any], message: str) -> str:
    role = recipient.get('role') or 'writer'
    if not recipient.get('email_address') or role not in SHARE_ROLES:
        return message
    return f"Failed to share: {message}"


def list_permissions(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, Any]]:
    args.require('spreadsheet_id')
    result = context.drive_service.permissions().list(
        fileId=args.get('spreadsheet_id', ''),
        supportsAllDrives=True,
        fields='permissions(id, type, role, emailAddress, displayName)'
    ).execute()
    return result.get('permissions', [])


def remove_permission(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    args.require('spreadsheet_id', 'permission_id')
    spreadsheet_id = args.get('spreadsheet_id', '')
    permission_id = args.get('permission_id', '')

    context.drive_service.permissions().delete(
        fileId=spreadsheet_id,
        permissionId=permission_id,
        supportsAllDrives=True
    ).execute()

    return {'spreadsheetId': spreadsheet_id, 'permissionId': permission_id, 'removed': True}


def export_spreadsheet(context: SpreadsheetContext, args: Arguments) -> Dict[str, Any]:
    """
    Describe how to export a spreadsheet in the requested format.
    No file is downloaded; the caller gets the mime type and export link.
    """
    args.require('spreadsheet_id')
    spreadsheet_id = args.get('spreadsheet_id', '')
    export_format = args.get('format', '') or 'csv'

    mime_type = EXPORT_MIME_TYPES.get(export_format)
    if mime_type is None:
        raise UnsupportedFormat(export_format, EXPORT_MIME_TYPES)

    return {
        'spreadsheetId': spreadsheet_id,
        'format': export_format,
        'mimeType': mime_type,
        'exportUrl': f"https://www.googleapis.com/drive/v3/files/{spreadsheet_id}/export?mimeType={mime_type}",
        'message': f"Use the Drive export endpoint with mimeType {mime_type} to download "
                   f"spreadsheet {spreadsheet_id} as {export_format}.",
    }


def list_folders(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, str]]:
    parent_folder_id = args.get('parent_folder_id', '') or 'root'

    query = f"mimeType='{FOLDER_MIME_TYPE}' and '{parent_folder_id}' in parents"
    logger.info(f"Searching for folders in parent folder: {parent_folder_id}")

    results = context.drive_service.files().list(
        q=query,
        spaces='drive',
        includeItemsFromAllDrives=True,
        supportsAllDrives=True,
        fields='files(id, name, parents)',
        orderBy='name'
    ).execute()

    return [
        {
            'id': folder['id'],
            'name': folder['name'],
            'parent': folder['parents'][0] if folder.get('parents') else 'root'
        }
        for folder in results.get('files', [])
    ]


def search_spreadsheets(context: SpreadsheetContext, args: Arguments) -> List[Dict[str, Any]]:
    """Spreadsheets whose name or content contains the query."""
    args.require('query')
    query = args.get('query', '').replace('\\', '\\\\').replace("'", "\\'")
    max_results = min(max(1, args.get_int('max_results', 20)), 100)

    search_query = (
        f"mimeType='{SPREADSHEET_MIME_TYPE}' and "
        f"(name contains '{query}' or fullText contains '{query}')"
    )

    results = context.drive_service.files().list(
        q=search_query,
        pageSize=max_results,
        spaces='drive',
        includeItemsFromAllDrives=True,
        supportsAllDrives=True,
        fields='files(id, name, createdTime, modifiedTime, owners, webViewLink)',
        orderBy='modifiedTime desc'
    ).execute()

    return [
        {
            'id': f['id'],
            'name': f['name'],
            'created_time': f.get('createdTime'),
            'modified_time': f.get('modifiedTime'),
            'owners': [owner.get('emailAddress') for owner in f.get('owners', [])],
            'web_link': f.get('webViewLink')
        }
        for f in results.get('files', [])
    ]
