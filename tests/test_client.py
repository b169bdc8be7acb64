"""
Client tests: OAuth state bookkeeping (MSAL mocked) and drive lookups
"""

import time
from unittest.mock import MagicMock, patch

import pytest

from onedrive_client.client import Client, create_client
from onedrive_client.constants import AccessTokenStatus, SpecialFolderName
from onedrive_client.exceptions import AuthenticationError, InvalidConfiguration
from onedrive_client.proxies import DriveItemProxy, DriveProxy

from conftest import make_response


TOKEN_DATA = {
    'token_type': 'Bearer',
    'access_token': 'AccessToken',
    'refresh_token': 'RefreshToken',
    'expires_in': 3600,
    'scope': 'files.readwrite',
}


@pytest.fixture
def msal():
    with patch('onedrive_client.auth.msal') as mock_msal:
        yield mock_msal


@pytest.fixture
def client(graph, director):
    return Client('ClientId', graph, graph.session, director)


def client_with_token(graph, director, obtained, expires_in=3600):
    state = {
        'redirect_uri': None,
        'scopes': ['files.readwrite'],
        'token': {'obtained': obtained, 'data': dict(TOKEN_DATA, expires_in=expires_in)},
    }
    return Client('ClientId', graph, graph.session, director, {'state': state})


class TestClientState:

    def test_client_id_is_required(self, graph, director):
        with pytest.raises(InvalidConfiguration) as excinfo:
            Client(None, graph, graph.session, director)

        assert str(excinfo.value) == 'The client ID must be set'

    def test_initial_state(self, client):
        assert client.get_state() == {'redirect_uri': None, 'scopes': [], 'token': None}
        assert client.get_access_token_status() == AccessTokenStatus.MISSING

    def test_get_log_in_url(self, client, msal):
        url = client.get_log_in_url(['files.readwrite', 'offline_access'], 'http://localhost/callback')

        assert url == (
            'https://login.microsoftonline.com/common/oauth2/v2.0/authorize'
            '?client_id=ClientId'
            '&response_type=code'
            '&redirect_uri=http%3A%2F%2Flocalhost%2Fcallback'
            '&scope=files.readwrite%20offline_access'
            '&response_mode=query'
        )
        assert client.get_state()['redirect_uri'] == 'http://localhost/callback'
        # Built locally, no authority lookup
        msal.PublicClientApplication.assert_not_called()
        msal.ConfidentialClientApplication.assert_not_called()

    def test_obtain_access_token(self, client, graph, msal):
        app = msal.ConfidentialClientApplication.return_value
        app.acquire_token_by_authorization_code.return_value = dict(TOKEN_DATA)
        client.get_log_in_url(['files.readwrite'], 'http://localhost/callback')

        client.obtain_access_token('Secret', 'Code')

        app.acquire_token_by_authorization_code.assert_called_once_with(
            'Code', scopes=['files.readwrite'], redirect_uri='http://localhost/callback'
        )
        state = client.get_state()
        assert state['redirect_uri'] is None
        assert state['token']['data']['access_token'] == 'AccessToken'
        assert graph.access_token == 'AccessToken'
        assert client.get_access_token_status() == AccessTokenStatus.VALID

    def test_obtain_access_token_requires_redirect_uri(self, client, msal):
        with pytest.raises(InvalidConfiguration):
            client.obtain_access_token('Secret', 'Code')

        msal.ConfidentialClientApplication.assert_not_called()

    def test_obtain_access_token_rejected(self, client, msal):
        msal.ConfidentialClientApplication.return_value.acquire_token_by_authorization_code.return_value = {
            'error': 'invalid_grant',
            'error_description': 'AADSTS70000: code expired',
        }
        client.get_log_in_url(['files.readwrite'], 'http://localhost/callback')

        with pytest.raises(AuthenticationError):
            client.obtain_access_token('Secret', 'Code')

        assert client.get_state()['token'] is None

    def test_renew_access_token(self, graph, director, msal):
        client = client_with_token(graph, director, time.time() - 4000)
        app = msal.ConfidentialClientApplication.return_value
        app.acquire_token_by_refresh_token.return_value = dict(TOKEN_DATA, access_token='Renewed')

        assert client.get_access_token_status() == AccessTokenStatus.EXPIRED

        client.renew_access_token('Secret')

        app.acquire_token_by_refresh_token.assert_called_once_with('RefreshToken', scopes=['files.readwrite'])
        assert graph.access_token == 'Renewed'
        assert client.get_access_token_status() == AccessTokenStatus.VALID

    def test_renew_access_token_requires_refresh_token(self, client):
        with pytest.raises(InvalidConfiguration):
            client.renew_access_token('Secret')

    @pytest.mark.parametrize('elapsed, expected', [
        (0, AccessTokenStatus.VALID),
        (3560, AccessTokenStatus.EXPIRING),
        (3600, AccessTokenStatus.EXPIRED),
        (7200, AccessTokenStatus.EXPIRED),
    ])
    def test_access_token_status(self, graph, director, elapsed, expected):
        client = client_with_token(graph, director, time.time() - elapsed)

        assert client.get_access_token_status() == expected

    def test_state_restores_access_token(self, graph, director):
        graph.set_access_token(None)

        client_with_token(graph, director, time.time())

        assert graph.access_token == 'AccessToken'


class TestClientLookups:

    @pytest.mark.parametrize('method, args, path', [
        ('get_my_drive', (), '/me/drive'),
        ('get_drive_by_id', ('d1',), '/drives/d1'),
        ('get_drive_by_user', ('jane@contoso.com',), '/users/jane@contoso.com/drive'),
        ('get_drive_by_group', ('g1',), '/groups/g1/drive'),
        ('get_drive_by_site', ('s1',), '/sites/s1/drive'),
    ])
    def test_drive_lookups(self, client, session, method, args, path):
        session.request.return_value = make_response(200, {'id': 'drive-id', 'driveType': 'business'})

        drive = getattr(client, method)(*args)

        assert isinstance(drive, DriveProxy)
        assert drive.id == 'drive-id'
        assert session.request.call_args.args == ('GET', f'https://graph.microsoft.com/v1.0{path}')

    def test_get_drives(self, client, session):
        session.request.return_value = make_response(200, {'value': [{'id': 'a'}, {'id': 'b'}]})

        drives = client.get_drives()

        assert [drive.id for drive in drives] == ['a', 'b']

    @pytest.mark.parametrize('method, args, path', [
        ('get_drive_item_by_id', ('123',), '/me/drive/items/123'),
        ('get_drive_item_by_path', ('/Docs/a b.txt',), '/me/drive/root:/Docs/a%20b.txt'),
        ('get_root', (), '/me/drive/root'),
        ('get_special_folder', (SpecialFolderName.DOCUMENTS,), '/me/drive/special/documents'),
    ])
    def test_drive_item_lookups(self, client, session, method, args, path):
        session.request.return_value = make_response(200, {'id': 'item-id'})

        item = getattr(client, method)(*args)

        assert isinstance(item, DriveItemProxy)
        assert item.id == 'item-id'
        assert session.request.call_args.args == ('GET', f'https://graph.microsoft.com/v1.0{path}')

    @pytest.mark.parametrize('method, path', [
        ('get_shared', '/me/drive/sharedWithMe'),
        ('get_recent', '/me/drive/recent'),
    ])
    def test_drive_item_collections(self, client, session, method, path):
        session.request.return_value = make_response(200, {'value': [{'id': 'x'}]})

        items = getattr(client, method)()

        assert [item.id for item in items] == ['x']
        assert session.request.call_args.args[1].endswith(path)


def test_create_client():
    config = MagicMock(
        client_id='ClientId',
        tenant_id='TenantId',
        login_endpoint='login.microsoftonline.us',
        graph_endpoint='graph.microsoft.us',
        max_retry=5,
    )

    client = create_client(config)

    assert client.client_id == 'ClientId'
    assert client.tenant == 'TenantId'
    assert client.login_endpoint == 'login.microsoftonline.us'
    assert client.graph.base_url == 'https://graph.microsoft.us/v1.0'
    assert client.graph.max_retries == 5
    assert client.http_client is client.graph.session
