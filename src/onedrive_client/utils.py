# -*- coding: utf-8 -*-
"""
Shared utility functions for OneDrive client operations.

This module provides common helper functions used across multiple modules.
"""

import os
import urllib.parse


def is_debug_metadata_enabled():
    """
    Check if debug metadata mode is enabled via DEBUG_METADATA environment variable.

    This is for detailed Graph API debugging: raw response bodies, throttling
    headers and resource unit consumption.

    Returns:
        bool: True if debug metadata mode is enabled, False otherwise
    """
    return os.environ.get('DEBUG_METADATA', 'false').lower() == 'true'


def is_debug_enabled():
    """
    Check if general debug mode is enabled via DEBUG environment variable.

    This controls per-request messages, per-range upload progress and other
    verbose operation details. Error messages and the final summary are
    always printed.

    Returns:
        bool: True if general debug mode is enabled, False otherwise
    """
    return os.environ.get('DEBUG', 'false').lower() == 'true'


def build_query_string(params):
    """
    Encode query parameters the way Graph expects them (RFC 3986, %20 for spaces).

    Args:
        params (dict): Parameter names to values

    Returns:
        str: Encoded query string without the leading '?'
    """
    return urllib.parse.urlencode(params, quote_via=urllib.parse.quote, safe='$@')


def append_query_string(endpoint, params):
    """Append encoded params to endpoint, leaving it untouched when params is empty."""
    if not params:
        return endpoint
    return f"{endpoint}?{build_query_string(params)}"


def encode_item_name(name):
    """Percent-encode a drive item name for use inside a path-based locator."""
    return urllib.parse.quote(str(name), safe='')


def encode_path(path):
    """Percent-encode a drive path, keeping separators; a leading '/' is ensured."""
    path = str(path)
    if not path.startswith('/'):
        path = '/' + path
    return urllib.parse.quote(path, safe='/')
