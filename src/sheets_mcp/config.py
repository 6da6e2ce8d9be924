"""
Server settings from the environment and command-line flags.
"""

import os
import sys
from dataclasses import dataclass
from typing import List, Mapping, Optional, Set

TRUTHY = ('1', 'true', 'yes', 'on')


@dataclass
class ServerConfig:
    credentials_config: Optional[str] = None
    service_account_path: str = 'service_account.json'
    credentials_path: str = 'credentials.json'
    token_path: str = 'token.json'
    drive_folder_id: Optional[str] = None
    enabled_tools: Optional[Set[str]] = None
    transport: str = 'stdio'
    host: str = '0.0.0.0'
    port: int = 8000
    strict_arguments: bool = False
    log_level: str = 'INFO'


def _flag_value(argv: List[str], flag: str) -> Optional[str]:
    for i, arg in enumerate(argv):
        if arg == flag and i + 1 < len(argv):
            return argv[i + 1]
    return None


def _parse_enabled_tools(argv: List[str], environ: Mapping[str, str]) -> Optional[Set[str]]:
    """
    Parse enabled tools from --include-tools or ENABLED_TOOLS.
    Returns None if all tools should be enabled.
    """
    enabled_tools_str = _flag_value(argv, '--include-tools') or environ.get('ENABLED_TOOLS')
    if not enabled_tools_str:
        return None

    tools = {tool.strip() for tool in enabled_tools_str.split(',') if tool.strip()}
    return tools if tools else None


def _parse_port(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 8000


def load_config(argv: Optional[List[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Build a ServerConfig from ``argv`` and ``environ`` (default: the process's)."""
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ

    return ServerConfig(
        credentials_config=environ.get('CREDENTIALS_CONFIG') or None,
        service_account_path=(environ.get('SERVICE_ACCOUNT_PATH')
                              or environ.get('GOOGLE_APPLICATION_CREDENTIALS')
                              or 'service_account.json'),
        credentials_path=environ.get('CREDENTIALS_PATH', 'credentials.json'),
        token_path=environ.get('TOKEN_PATH', 'token.json'),
        drive_folder_id=environ.get('DRIVE_FOLDER_ID') or None,
        enabled_tools=_parse_enabled_tools(argv, environ),
        transport=_flag_value(argv, '--transport') or 'stdio',
        host=environ.get('HOST') or environ.get('FASTMCP_HOST') or '0.0.0.0',
        port=_parse_port(environ.get('PORT') or environ.get('FASTMCP_PORT') or '8000'),
        strict_arguments=environ.get('STRICT_ARGUMENTS', '').strip().lower() in TRUTHY,
        log_level=environ.get('LOG_LEVEL', 'INFO').upper(),
    )
