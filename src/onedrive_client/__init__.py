# -*- coding: utf-8 -*-
"""
OneDrive Client Package
=======================

This package provides a client for the OneDrive API of Microsoft Graph:
drives and drive items as proxies, OAuth token bookkeeping through MSAL,
and chunked uploads of large files through upload sessions.

Modules:
--------
- config: Configuration and argument parsing
- auth: Microsoft authentication (MSAL)
- client: Client entry point, OAuth state and drive lookups
- graph_api: Graph request/response objects and retry handling
- proxies: Drive, drive item, permission and upload session proxies
- upload: Upload session driver
- ranges: Byte range planning for upload sessions
- content: Content sources (bytes, strings, seekable streams)
- parameters: Query string, header and body parameter directors
- models: Graph resource models
- monitoring: Rate limiting monitoring and statistics tracking
- utils: Shared utility functions

Usage Example:
-------------
    from onedrive_client import Client, Graph, DriveItemParameterDirector

    graph = Graph()
    client = Client(client_id, graph, graph.session, DriveItemParameterDirector())
    client.obtain_access_token(client_secret, code)

    root = client.get_root()
    session = root.start_upload('big.bin', open('big.bin', 'rb'), {'range_size': 5 * 327680})
    item = session.complete()
"""

__version__ = "1.0.0"

# Main exports for convenience
from .config import parse_config, Config
from .auth import acquire_token
from .client import Client, create_client
from .constants import (
    AccessTokenStatus,
    ConflictBehavior,
    DriveType,
    SharingLinkScope,
    SharingLinkType,
    SpecialFolderName,
)
from .content import BytesContent, ContentSource, StreamContent, as_content_source
from .exceptions import (
    OneDriveError,
    InvalidConfiguration,
    AuthenticationError,
    UnexpectedStatus,
    IncompleteUpload,
    ConflictError,
)
from .graph_api import Graph, GraphRequest, GraphResponse
from .models import Drive, DriveItem, UploadSession
from .monitoring import upload_stats, rate_monitor, print_rate_limiting_summary
from .parameters import DriveItemParameterDirector
from .proxies import DriveItemProxy, DriveProxy, PermissionProxy, UploadSessionProxy
from .ranges import RangeDescriptor, RangePlan, plan_ranges
from .upload import complete_upload_session
from .utils import is_debug_metadata_enabled, is_debug_enabled

__all__ = [
    # Configuration
    'parse_config',
    'Config',
    # Authentication
    'acquire_token',
    # Client
    'Client',
    'create_client',
    # Constants
    'AccessTokenStatus',
    'ConflictBehavior',
    'DriveType',
    'SharingLinkScope',
    'SharingLinkType',
    'SpecialFolderName',
    # Content
    'BytesContent',
    'ContentSource',
    'StreamContent',
    'as_content_source',
    # Errors
    'OneDriveError',
    'InvalidConfiguration',
    'AuthenticationError',
    'UnexpectedStatus',
    'IncompleteUpload',
    'ConflictError',
    # Graph API
    'Graph',
    'GraphRequest',
    'GraphResponse',
    # Models
    'Drive',
    'DriveItem',
    'UploadSession',
    # Proxies
    'DriveItemParameterDirector',
    'DriveItemProxy',
    'DriveProxy',
    'PermissionProxy',
    'UploadSessionProxy',
    # Upload
    'RangeDescriptor',
    'RangePlan',
    'plan_ranges',
    'complete_upload_session',
    # Monitoring
    'upload_stats',
    'rate_monitor',
    'print_rate_limiting_summary',
    # Utilities
    'is_debug_metadata_enabled',
    'is_debug_enabled',
]
