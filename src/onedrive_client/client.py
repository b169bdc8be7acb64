# -*- coding: utf-8 -*-
"""
OneDrive client: the entry point of the library.

A Client holds the OAuth state (redirect URI, token) and gives access to
drives and drive items as proxies. The state is a plain dict, so it can be
persisted between requests and handed back through the 'state' option.

Example:
    client = Client(client_id, Graph(), requests.Session(), DriveItemParameterDirector())
    url = client.get_log_in_url(['files.readwrite', 'offline_access'], redirect_uri)
    # ... user logs in, the redirect URI receives ?code=...
    client.obtain_access_token(client_secret, code)
    client.get_root().upload('hello.txt', 'Hello World!')
"""

import time

from . import auth
from .constants import AccessTokenStatus, TOKEN_EXPIRING_THRESHOLD
from .exceptions import InvalidConfiguration
from .graph_api import Graph
from .models import Drive, DriveItem
from .parameters import DriveItemParameterDirector
from .proxies import DriveItemProxy, DriveProxy, expect_status
from .utils import encode_path


DEFAULT_LOGIN_ENDPOINT = "login.microsoftonline.com"


class Client:
    """
    Client for the OneDrive API.

    Args:
        client_id (str): Application (client) ID
        graph (Graph): Graph used for API requests
        http_client (requests.Session): Session used by the Graph. Only held
            for callers; token exchanges go through MSAL, not this session
        parameter_director (DriveItemParameterDirector): Builds request parameters
        options (dict):
            'state': a state previously returned by get_state()
            'login_endpoint': Azure AD host (default: login.microsoftonline.com)
            'tenant': Azure AD tenant segment (default: 'common')

    Raises:
        InvalidConfiguration: If client_id is None
    """

    def __init__(self, client_id, graph, http_client, parameter_director, options=None):
        if client_id is None:
            raise InvalidConfiguration('The client ID must be set')

        options = options or {}
        self.client_id = client_id
        self.graph = graph
        self.http_client = http_client
        self.parameter_director = parameter_director
        self.login_endpoint = options.get('login_endpoint', DEFAULT_LOGIN_ENDPOINT)
        self.tenant = options.get('tenant', 'common')

        self._state = options.get('state') or {
            'redirect_uri': None,
            'scopes': [],
            'token': None,
        }

        token = self._state.get('token')
        if token is not None:
            self.graph.set_access_token(token['data']['access_token'])

    # OAuth state

    def get_state(self):
        """Get the OAuth state, to be persisted and passed back as the 'state' option."""
        return self._state

    def get_log_in_url(self, scopes, redirect_uri):
        """
        Get the URL the user visits to log in and authorize this application.

        The redirect URI is remembered in the state for obtain_access_token().

        Args:
            scopes (list[str]): Requested scopes, e.g. ['files.readwrite', 'offline_access']
            redirect_uri (str): Where the user agent is sent back with a code

        Returns:
            str: The log in URL
        """
        redirect_uri = str(redirect_uri)
        self._state['redirect_uri'] = redirect_uri
        self._state['scopes'] = list(scopes)
        return auth.get_authorization_url(
            self.client_id, scopes, redirect_uri, self.login_endpoint, self.tenant
        )

    def get_token_expire(self):
        """
        Get the number of seconds before the access token expires.

        Returns:
            int: Seconds left; zero or negative once expired
        """
        token = self._state['token']
        return int(token['obtained'] + token['data']['expires_in'] - time.time())

    def get_access_token_status(self):
        """
        Get the status of the access token.

        Returns:
            AccessTokenStatus: MISSING, EXPIRED, EXPIRING (60 seconds or less
            left) or VALID
        """
        if self._state.get('token') is None:
            return AccessTokenStatus.MISSING

        remaining = self.get_token_expire()

        if remaining <= 0:
            return AccessTokenStatus.EXPIRED

        if remaining <= TOKEN_EXPIRING_THRESHOLD:
            return AccessTokenStatus.EXPIRING

        return AccessTokenStatus.VALID

    def _store_token(self, data):
        self._state['token'] = {
            'obtained': time.time(),
            'data': data,
        }
        self.graph.set_access_token(data['access_token'])

    def obtain_access_token(self, client_secret, code):
        """
        Exchange the code received on the redirect URI for an access token.

        Raises:
            InvalidConfiguration: If get_log_in_url() was not called first
            AuthenticationError: If the code is rejected
        """
        redirect_uri = self._state.get('redirect_uri')
        if redirect_uri is None:
            raise InvalidConfiguration(
                "The state's redirect URI must be set to call obtain_access_token()"
            )

        data = auth.exchange_code(
            self.client_id, str(client_secret), str(code), self._state.get('scopes', []),
            redirect_uri, self.login_endpoint, self.graph.graph_endpoint, self.tenant
        )

        self._state['redirect_uri'] = None
        self._store_token(data)

    def renew_access_token(self, client_secret):
        """
        Renew the access token with the refresh token held in the state.

        Raises:
            InvalidConfiguration: If no refresh token is available (the
                'offline_access' scope was not granted)
            AuthenticationError: If the refresh token is rejected
        """
        token = self._state.get('token')
        refresh_token = token['data'].get('refresh_token') if token else None
        if refresh_token is None:
            raise InvalidConfiguration(
                "The refresh token is not set or no permission for"
                " 'offline_access' was given to renew the token"
            )

        scopes = self._state.get('scopes') or token['data'].get('scope', '').split()
        data = auth.refresh_token(
            self.client_id, client_secret, refresh_token, scopes,
            self.login_endpoint, self.graph.graph_endpoint, self.tenant
        )
        self._store_token(data)

    # Drives

    def _get_drive(self, endpoint):
        response = self.graph.create_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return DriveProxy(self.graph, response.get_response_as_object(Drive), self.parameter_director)

    def _get_drive_item(self, endpoint):
        response = self.graph.create_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return DriveItemProxy(self.graph, response.get_response_as_object(DriveItem), self.parameter_director)

    def _get_drive_items(self, endpoint):
        response = self.graph.create_collection_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return [
            DriveItemProxy(self.graph, item, self.parameter_director)
            for item in response.get_response_as_object(DriveItem)
        ]

    def get_drives(self):
        """Get the drives available to the signed-in user."""
        endpoint = '/me/drives'
        response = self.graph.create_collection_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return [
            DriveProxy(self.graph, drive, self.parameter_director)
            for drive in response.get_response_as_object(Drive)
        ]

    def get_my_drive(self):
        """Get the signed-in user's default drive."""
        return self._get_drive('/me/drive')

    def get_drive_by_id(self, drive_id):
        return self._get_drive(f'/drives/{drive_id}')

    def get_drive_by_user(self, id_or_user_principal_name):
        return self._get_drive(f'/users/{id_or_user_principal_name}/drive')

    def get_drive_by_group(self, group_id):
        return self._get_drive(f'/groups/{group_id}/drive')

    def get_drive_by_site(self, site_id):
        return self._get_drive(f'/sites/{site_id}/drive')

    # Drive items of the signed-in user's drive

    def get_drive_item_by_id(self, item_id):
        return self._get_drive_item(f'/me/drive/items/{item_id}')

    def get_drive_item_by_path(self, path):
        """Get a drive item by path, relative to the root ('/folder/file.txt')."""
        return self._get_drive_item(f'/me/drive/root:{encode_path(path)}')

    def get_root(self):
        return self._get_drive_item('/me/drive/root')

    def get_special_folder(self, special_folder_name):
        """Get a special folder by name (see SpecialFolderName)."""
        name = getattr(special_folder_name, 'value', special_folder_name)
        return self._get_drive_item(f'/me/drive/special/{name}')

    def get_shared(self):
        """Get the drive items shared with the signed-in user."""
        return self._get_drive_items('/me/drive/sharedWithMe')

    def get_recent(self):
        """Get the drive items recently used by the signed-in user."""
        return self._get_drive_items('/me/drive/recent')


def create_client(config, state=None):
    """
    Create a Client wired with a Graph, a requests session and the default
    parameter director.

    Args:
        config (Config): Client configuration
        state (dict): State previously returned by Client.get_state()

    Returns:
        Client: The client
    """
    graph = Graph(graph_endpoint=config.graph_endpoint, max_retries=config.max_retry)
    options = {
        'login_endpoint': config.login_endpoint,
        'tenant': config.tenant_id,
    }
    if state is not None:
        options['state'] = state
    return Client(config.client_id, graph, graph.session, DriveItemParameterDirector(), options)
