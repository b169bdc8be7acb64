# -*- coding: utf-8 -*-
"""
Microsoft authentication module for the OneDrive client.

This module handles Azure AD authentication using MSAL (Microsoft Authentication Library):
    - client credentials flow, for unattended app-only access
    - authorization code flow, for delegated access on behalf of a user
"""

import urllib.parse

import msal

from .exceptions import AuthenticationError


# Scopes MSAL adds on its own and refuses to receive explicitly
RESERVED_SCOPES = frozenset(['offline_access', 'openid', 'profile'])


def build_authority(login_endpoint, tenant):
    """
    Build the Azure AD authority URL.

    Format: https://login.microsoftonline.com/{tenant}
    """
    return f'https://{login_endpoint}/{tenant}'


def filter_scopes(scopes):
    """Drop the scopes MSAL reserves for itself, keeping order."""
    return [scope for scope in scopes if scope.lower() not in RESERVED_SCOPES]


def _report_token_error(token, login_endpoint, graph_endpoint):
    """
    Print troubleshooting guidance for a failed token request and raise.

    MSAL returns errors in the token dict, not as exceptions.

    Raises:
        AuthenticationError: Always
    """
    error_msg = token.get("error", "unknown_error")
    error_desc = token.get("error_description", "No description provided")
    error_codes = token.get("error_codes", [])

    print("[!] ========================================")
    print("[!] AUTHENTICATION FAILED")
    print("[!] ========================================")

    if "invalid_client" in error_msg or 7000215 in error_codes:
        print("[!] Error: Invalid client credentials")
        print("[!] Troubleshooting steps:")
        print("[!]   1. Verify your CLIENT_ID is correct (check Azure AD app registration)")
        print("[!]   2. Verify your CLIENT_SECRET has no extra spaces and has not expired")
        print("[!]   3. Ensure you're using the correct TENANT_ID")
        summary = "Invalid client credentials"

    elif "invalid_grant" in error_msg:
        print("[!] Error: Authorization code or refresh token rejected")
        print("[!] Troubleshooting steps:")
        print("[!]   1. Authorization codes are single-use; request a new one")
        print("[!]   2. Verify the redirect URI matches the one used to log in")
        print("[!]   3. Refresh tokens expire; log in again if renewal keeps failing")
        summary = "Invalid grant"

    elif "unauthorized_client" in error_msg or 700016 in error_codes:
        print("[!] Error: Application not authorized")
        print("[!] Troubleshooting steps:")
        print("[!]   1. Go to Azure AD portal → App registrations → Your app → API permissions")
        print("[!]   2. Verify 'Microsoft Graph' Files.ReadWrite (or Files.ReadWrite.All) is added")
        print("[!]   3. Click 'Grant admin consent' for application permissions")
        summary = "Application not authorized"

    elif "invalid_scope" in error_msg or "AADSTS70011" in error_desc:
        print("[!] Error: Invalid scope requested")
        print(f"[!]   Verify Graph API endpoint is correct: {graph_endpoint}")
        summary = "Invalid scope"

    else:
        print(f"[!] Error: {error_msg}")
        print("[!] Common issues:")
        print("[!]   - Network connectivity problems")
        print(f"[!]   - Incorrect tenant ID or login endpoint ({login_endpoint})")
        if error_codes:
            print(f"[!]   Error codes: {error_codes}")
        summary = error_msg

    print(f"[!] Technical details: {error_desc}")
    print("[!] ========================================")
    raise AuthenticationError(f"Authentication failed: {summary} - {error_desc}")


def acquire_token(tenant_id, client_id, client_secret, login_endpoint, graph_endpoint):
    """
    Acquire an app-only token from Azure Active Directory using MSAL.

    This handles the OAuth 2.0 client credentials flow (no user interaction).
    App-only tokens cannot use /me; address drives by user, group, site or ID.

    Args:
        tenant_id (str): Azure AD tenant ID (GUID format)
        client_id (str): Application (client) ID from Azure AD app registration
        client_secret (str): Client secret value from Azure AD app registration
        login_endpoint (str): Azure AD authentication endpoint (e.g., 'login.microsoftonline.com')
        graph_endpoint (str): Microsoft Graph API endpoint (e.g., 'graph.microsoft.com')

    Returns:
        dict: Token dictionary containing 'access_token', 'token_type' and 'expires_in'

    Raises:
        AuthenticationError: If authentication fails
    """
    app = msal.ConfidentialClientApplication(
        client_id,
        authority=build_authority(login_endpoint, tenant_id),
        client_credential=client_secret
    )

    # '/.default' scope means "use all permissions granted to this app"
    token = app.acquire_token_for_client(scopes=[f"https://{graph_endpoint}/.default"])

    if "access_token" not in token:
        _report_token_error(token, login_endpoint, graph_endpoint)

    return token


def get_authorization_url(client_id, scopes, redirect_uri, login_endpoint, tenant='common'):
    """
    Build the URL a user visits to authorize this application.

    The URL is built locally, without contacting the authority.

    After logging in, the user agent is redirected to redirect_uri with a
    'code' query string parameter, to be exchanged by exchange_code().

    Returns:
        str: Authorization request URL
    """
    query = urllib.parse.urlencode({
        'client_id': client_id,
        'response_type': 'code',
        'redirect_uri': redirect_uri,
        'scope': ' '.join(scopes),
        'response_mode': 'query',
    }, quote_via=urllib.parse.quote)
    return f"{build_authority(login_endpoint, tenant)}/oauth2/v2.0/authorize?{query}"


def exchange_code(client_id, client_secret, code, scopes, redirect_uri, login_endpoint,
                  graph_endpoint, tenant='common'):
    """
    Exchange an authorization code for an access token (and refresh token).

    Returns:
        dict: Token response ('access_token', 'refresh_token', 'expires_in', ...)

    Raises:
        AuthenticationError: If the code is rejected
    """
    app = msal.ConfidentialClientApplication(
        client_id,
        authority=build_authority(login_endpoint, tenant),
        client_credential=client_secret
    )
    token = app.acquire_token_by_authorization_code(
        code,
        scopes=filter_scopes(scopes),
        redirect_uri=redirect_uri
    )

    if "access_token" not in token:
        _report_token_error(token, login_endpoint, graph_endpoint)

    return token


def refresh_token(client_id, client_secret, refresh_token_value, scopes, login_endpoint,
                  graph_endpoint, tenant='common'):
    """
    Renew an access token from a refresh token.

    Returns:
        dict: Token response ('access_token', 'refresh_token', 'expires_in', ...)

    Raises:
        AuthenticationError: If the refresh token is rejected
    """
    app = msal.ConfidentialClientApplication(
        client_id,
        authority=build_authority(login_endpoint, tenant),
        client_credential=client_secret
    )
    token = app.acquire_token_by_refresh_token(refresh_token_value, scopes=filter_scopes(scopes))

    if "access_token" not in token:
        _report_token_error(token, login_endpoint, graph_endpoint)

    return token
