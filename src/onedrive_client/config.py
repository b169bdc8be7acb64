# -*- coding: utf-8 -*-
"""
Configuration management for the OneDrive upload CLI.

This module handles command-line argument parsing and configuration setup.
Values missing from the command line fall back to environment variables,
which may be loaded from a .env file.
"""

import os
import sys

from dotenv import load_dotenv

from .constants import DEFAULT_RANGE_SIZE, MAX_RANGE_SIZE, RANGE_ALIGNMENT, ConflictBehavior


def _arg(argv, index, env_name=None, default=None):
    """Positional argument at index, else the environment variable, else default."""
    if len(argv) > index and argv[index]:
        return argv[index]
    if env_name and os.environ.get(env_name):
        return os.environ[env_name]
    return default


class Config:
    """Configuration for OneDrive upload operations"""

    def __init__(self, argv=None):
        """
        Parse command-line arguments and initialize configuration.

        Arguments are parsed from sys.argv in the following order:
        1. tenant_id - Azure AD tenant ID (env: ONEDRIVE_TENANT_ID)
        2. client_id - App registration client ID (env: ONEDRIVE_CLIENT_ID)
        3. client_secret - App registration client secret (env: ONEDRIVE_CLIENT_SECRET)
        4. drive_user - User ID or principal name owning the drive (env: ONEDRIVE_DRIVE_USER)
        5. upload_path - Destination folder path in the drive (e.g. /Backups)
        6. file_path - Local file to upload
        7. range_size (optional) - Bytes per upload session range (default: 327680,
           env: ONEDRIVE_RANGE_SIZE)
        8. login_endpoint (optional) - Azure AD endpoint (default: login.microsoftonline.com,
           env: ONEDRIVE_LOGIN_ENDPOINT)
        9. graph_endpoint (optional) - Graph API endpoint (default: graph.microsoft.com,
           env: ONEDRIVE_GRAPH_ENDPOINT)
        10. conflict_behavior (optional) - fail, replace or rename (default: replace)
        11. max_retry (optional) - Max retry attempts for API requests (default: 3)
        12. debug (optional) - Enable general debug output (default: False, env: DEBUG)
        13. debug_metadata (optional) - Enable Graph API debug output (default: False,
            env: DEBUG_METADATA)
        """
        load_dotenv()
        argv = sys.argv if argv is None else argv

        # Required arguments
        self.tenant_id = _arg(argv, 1, 'ONEDRIVE_TENANT_ID')
        self.client_id = _arg(argv, 2, 'ONEDRIVE_CLIENT_ID')
        self.client_secret = _arg(argv, 3, 'ONEDRIVE_CLIENT_SECRET')
        self.drive_user = _arg(argv, 4, 'ONEDRIVE_DRIVE_USER')
        self.upload_path = _arg(argv, 5, default='/')
        self.file_path = _arg(argv, 6)

        # Optional arguments with defaults
        self.range_size = int(_arg(argv, 7, 'ONEDRIVE_RANGE_SIZE', DEFAULT_RANGE_SIZE))
        self.login_endpoint = _arg(argv, 8, 'ONEDRIVE_LOGIN_ENDPOINT', "login.microsoftonline.com")
        self.graph_endpoint = _arg(argv, 9, 'ONEDRIVE_GRAPH_ENDPOINT', "graph.microsoft.com")
        self.conflict_behavior = _arg(argv, 10, default=ConflictBehavior.REPLACE.value).lower()
        self.max_retry = int(_arg(argv, 11, default=3))

        # Debug flags
        self.debug = str(_arg(argv, 12, 'DEBUG', "false")).lower() == "true"
        self.debug_metadata = str(_arg(argv, 13, 'DEBUG_METADATA', "false")).lower() == "true"

    def validate(self):
        """
        Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.tenant_id:
            raise ValueError("tenant_id cannot be empty")
        if not self.client_id:
            raise ValueError("client_id cannot be empty")
        if not self.client_secret:
            raise ValueError("client_secret cannot be empty")
        if not self.drive_user:
            raise ValueError("drive_user cannot be empty")
        if not self.file_path:
            raise ValueError("file_path cannot be empty")
        if self.range_size <= 0:
            raise ValueError("range_size must be positive")
        if self.range_size > MAX_RANGE_SIZE:
            raise ValueError(f"range_size cannot exceed {MAX_RANGE_SIZE} bytes")
        if self.conflict_behavior not in [behavior.value for behavior in ConflictBehavior]:
            raise ValueError("conflict_behavior must be one of: fail, replace, rename")
        if self.max_retry < 0:
            raise ValueError("max_retry must be non-negative")

        # Graph accepts unaligned ranges only as the final one
        if self.range_size % RANGE_ALIGNMENT != 0:
            print(f"[!] range_size {self.range_size} is not a multiple of {RANGE_ALIGNMENT}; "
                  "OneDrive may reject intermediate ranges")


def parse_config(argv=None):
    """
    Parse configuration from command-line arguments and environment.

    Returns:
        Config: Configured Config object

    Raises:
        ValueError: If configuration is invalid
    """
    config = Config(argv)
    config.validate()
    return config
