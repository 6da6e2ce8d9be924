"""
Google credentials and API clients.

Authentication methods are tried in order: base64 service-account JSON in
CREDENTIALS_CONFIG, a service-account file, the OAuth installed-app flow
with a cached token, and finally Application Default Credentials.
"""

import base64
import json
import logging
import os
from typing import Tuple

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from sheets_mcp.config import ServerConfig
from sheets_mcp.errors import CredentialsError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets', 'https://www.googleapis.com/auth/drive']


def _from_credentials_config(config: ServerConfig):
    try:
        info = json.loads(base64.b64decode(config.credentials_config))
    except ValueError as e:
        raise CredentialsError(f"failed to decode CREDENTIALS_CONFIG: {e}") from e
    logger.info("Using service account credentials from CREDENTIALS_CONFIG")
    return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)


def _from_service_account_file(config: ServerConfig):
    try:
        creds = service_account.Credentials.from_service_account_file(
            config.service_account_path,
            scopes=SCOPES
        )
    except (OSError, ValueError) as e:
        logger.warning(f"Error using service account authentication: {e}")
        return None
    logger.info("Using service account authentication")
    logger.info(f"Working with Google Drive folder ID: {config.drive_folder_id or 'Not specified'}")
    return creds


def _save_token(config: ServerConfig, creds) -> None:
    try:
        with open(config.token_path, 'w') as token:
            token.write(creds.to_json())
    except OSError as e:
        logger.warning(f"Failed to save token: {e}")


def _from_oauth(config: ServerConfig):
    logger.info("Trying OAuth authentication flow")
    creds = None
    if os.path.exists(config.token_path):
        with open(config.token_path, 'r') as token:
            creds = Credentials.from_authorized_user_info(json.load(token), SCOPES)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            logger.info("Attempting to refresh expired token...")
            creds.refresh(Request())
            logger.info("Token refreshed successfully")
            _save_token(config, creds)
            return creds
        except RefreshError as e:
            logger.warning(f"Token refresh failed: {e}")
            logger.info("Triggering reauthentication flow...")

    if not os.path.exists(config.credentials_path):
        logger.info(f"No OAuth client secrets at {config.credentials_path}")
        return None

    try:
        flow = InstalledAppFlow.from_client_secrets_file(config.credentials_path, SCOPES)
        creds = flow.run_local_server(port=0)
    except Exception as e:
        logger.warning(f"Error with OAuth flow: {e}")
        return None

    _save_token(config, creds)
    logger.info("Successfully authenticated using OAuth flow")
    return creds


def _from_application_default():
    logger.info("Attempting to use Application Default Credentials (ADC)")
    try:
        creds, project = google.auth.default(scopes=SCOPES)
    except DefaultCredentialsError as e:
        logger.error(f"Error using Application Default Credentials: {e}")
        raise CredentialsError(
            "All authentication methods failed. Please configure credentials."
        ) from e
    logger.info(f"Successfully authenticated using ADC for project: {project}")
    return creds


def get_credentials(config: ServerConfig):
    """
    Resolve credentials for the Sheets and Drive scopes.

    Raises:
        CredentialsError: if every method fails
    """
    if config.credentials_config:
        return _from_credentials_config(config)

    creds = None
    if config.service_account_path and os.path.exists(config.service_account_path):
        creds = _from_service_account_file(config)

    if not creds:
        creds = _from_oauth(config)

    if not creds:
        creds = _from_application_default()

    return creds


def build_services(creds) -> Tuple[object, object]:
    """Sheets v4 and Drive v3 clients sharing one set of credentials."""
    sheets_service = build('sheets', 'v4', credentials=creds)
    drive_service = build('drive', 'v3', credentials=creds)
    return sheets_service, drive_service
