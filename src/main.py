#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OneDrive File Upload Script
===========================

PURPOSE:
    Uploads a local file into a OneDrive (or SharePoint document library)
    folder through Microsoft Graph, typically from a CI/CD pipeline or a
    scheduled job. Small files are sent in a single request; larger files go
    through an upload session, one byte range at a time.

SYNOPSIS:
    python main.py <tenant_id> <client_id> <client_secret> <drive_user>
                   <upload_path> <file_path> [range_size] [login_endpoint]
                   [graph_endpoint] [conflict_behavior] [max_retry]
                   [debug] [debug_metadata]

PARAMETERS:
    <tenant_id>
        Azure AD tenant ID (GUID format).
        Falls back to the ONEDRIVE_TENANT_ID environment variable.

    <client_id>
        Azure AD App Registration application (client) ID.
        Requires the Files.ReadWrite.All application permission.
        Falls back to ONEDRIVE_CLIENT_ID.

    <client_secret>
        Azure AD App Registration client secret value.
        `WARNING: Keep this secure! Never commit to version control.
        Falls back to ONEDRIVE_CLIENT_SECRET.

    <drive_user>
        User ID or user principal name owning the target drive.
        `Example`: 'jane@contoso.com'
        Falls back to ONEDRIVE_DRIVE_USER.

    <upload_path>
        Destination folder, relative to the drive root. Must exist.
        `Example`: '/Backups/2025' ('/' for the root)

    <file_path>
        Local file to upload.

    [range_size]
        Bytes per upload session range (default: 327680). Should be a
        multiple of 327680 (320 KiB), at most 60 MiB.

    [login_endpoint] / [graph_endpoint]
        Sovereign cloud endpoints (defaults: login.microsoftonline.com,
        graph.microsoft.com).

    [conflict_behavior]
        fail, replace or rename (default: replace).

    [max_retry]
        Retries for throttled (429) or failed (5xx) API requests (default: 3).
        Upload session ranges are never retried.

    [debug] / [debug_metadata]
        'true' to enable verbose output (defaults: false).

EXAMPLES:
    python main.py tenant-guid-here client-guid-here client-secret-here \\
           jane@contoso.com "/Backups" "build/release.zip"

    # Upload in 10 MiB ranges with debug output:
    python main.py tenant-guid-here client-guid-here client-secret-here \\
           jane@contoso.com "/Backups" "build/release.zip" 10485760 \\
           "" "" rename 3 true

REQUIREMENTS:
    - requests (HTTP client for Graph REST API)
    - msal (Microsoft Authentication Library)
    - python-dotenv (Environment variable loading)
"""

import os
import sys
import time

import requests

from onedrive_client.auth import acquire_token
from onedrive_client.client import create_client
from onedrive_client.config import parse_config
from onedrive_client.constants import SIMPLE_UPLOAD_LIMIT
from onedrive_client.exceptions import OneDriveError
from onedrive_client.monitoring import format_bytes, print_rate_limiting_summary, upload_stats
from onedrive_client.utils import is_debug_enabled


def get_destination_folder(drive, upload_path):
    """Resolve the destination folder, the root for '' or '/'."""
    if not upload_path or upload_path.strip('/') == '':
        return drive.get_root()
    return drive.get_drive_item_by_path(upload_path)


def upload_local_file(folder, file_path, config):
    """
    Upload a local file into a drive folder.

    Files up to SIMPLE_UPLOAD_LIMIT bytes are sent with a single PUT;
    larger ones go through an upload session.

    Returns:
        DriveItemProxy: The uploaded file
    """
    name = os.path.basename(file_path)
    file_size = os.path.getsize(file_path)
    options = {'conflictBehavior': config.conflict_behavior}

    if file_size <= SIMPLE_UPLOAD_LIMIT:
        print(f"[→] Simple upload: {name} ({format_bytes(file_size)})")
        with open(file_path, 'rb') as f:
            item = folder.upload(name, f.read(), options)
        upload_stats.stats['simple_uploads'] += 1
        upload_stats.stats['bytes_uploaded'] += file_size
        return item

    print(f"[→] Upload session: {name} ({format_bytes(file_size)}, {config.range_size:,} bytes per range)")
    with open(file_path, 'rb') as f:
        session = folder.start_upload(name, f, {
            'conflictBehavior': config.conflict_behavior,
            'fileSize': file_size,
            'range_size': config.range_size,
        })
        item = session.complete()
    upload_stats.stats['session_uploads'] += 1
    return item


def main():
    """
    Main execution function.

    Process:
        1. Parse configuration from command-line arguments and environment
        2. Authenticate and resolve the destination folder
        3. Upload the file
        4. Print summary statistics and exit with the appropriate code
    """
    try:
        config = parse_config()
    except ValueError as e:
        print(f"[!] Invalid configuration: {e}")
        sys.exit(1)

    # Set environment variables for debug flags (enables the debug checks in utils.py)
    if config.debug:
        os.environ['DEBUG'] = 'true'
    if config.debug_metadata:
        os.environ['DEBUG_METADATA'] = 'true'

    # ============================================================
    # [1/3] CONFIGURATION
    # ============================================================
    print("\n" + "="*60)
    print("[1/3] CONFIGURATION")
    print("="*60)
    print(f"[=] File:              {config.file_path}")
    print(f"[=] Destination:       {config.drive_user}:{config.upload_path}")
    print(f"[=] Range size:        {config.range_size:,} bytes")
    print(f"[=] Conflict behavior: {config.conflict_behavior}")

    if not os.path.isfile(config.file_path):
        print(f"[!] File not found: {config.file_path}")
        sys.exit(1)

    # ============================================================
    # [2/3] ONEDRIVE CONNECTION
    # ============================================================
    connection_start = time.time()
    print("\n" + "="*60)
    print("[2/3] ONEDRIVE CONNECTION")
    print("="*60)
    try:
        token = acquire_token(
            config.tenant_id, config.client_id, config.client_secret,
            config.login_endpoint, config.graph_endpoint
        )
        client = create_client(config)
        client.graph.set_access_token(token['access_token'])

        drive = client.get_drive_by_user(config.drive_user)
        folder = get_destination_folder(drive, config.upload_path)

        connection_elapsed = time.time() - connection_start
        print(f"[✓] Connected: {config.upload_path} ({connection_elapsed:.3f}s)")
        if is_debug_enabled():
            print(f"[DEBUG] Drive ID: {drive.id}")
            print(f"[DEBUG] Folder ID: {folder.id}")

    except (OneDriveError, requests.exceptions.RequestException) as conn_error:
        print(f"[Error] Failed to connect to OneDrive: {conn_error}")
        print("[!] Ensure that:")
        print("    - Your credentials are correct")
        print("    - The app has the Files.ReadWrite.All permission")
        print("    - The upload path exists in the user's drive")
        sys.exit(1)

    # ============================================================
    # [3/3] UPLOAD
    # ============================================================
    upload_start = time.time()
    print("\n" + "="*60)
    print("[3/3] UPLOAD")
    print("="*60)
    failed = False
    try:
        item = upload_local_file(folder, config.file_path, config)
        upload_elapsed = time.time() - upload_start
        print(f"[✓] Uploaded: {item.name} ({item.id}) in {upload_elapsed:.3f}s")
        if item.web_url:
            print(f"[=] {item.web_url}")
    except (OneDriveError, OSError, requests.exceptions.RequestException) as upload_error:
        upload_stats.stats['failed_uploads'] += 1
        print(f"[Error] Upload failed: {upload_error}")
        failed = True

    print("\n" + "="*60)
    print("[✓] UPLOAD SUMMARY")
    print("="*60)
    upload_stats.print_summary()
    print_rate_limiting_summary()

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
