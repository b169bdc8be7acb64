"""
Drive, drive item and upload session proxy tests
"""

import pytest

from onedrive_client.constants import SharingLinkScope, SharingLinkType
from onedrive_client.exceptions import ConflictError, UnexpectedStatus
from onedrive_client.models import Drive, DriveItem
from onedrive_client.proxies import DriveItemProxy, DriveProxy, UploadSessionProxy, merge_dicts

from conftest import make_response


@pytest.fixture
def folder(graph, director):
    item = DriveItem.from_dict({
        'id': 'folder-id',
        'name': 'Folder',
        'folder': {'childCount': 0},
        'parentReference': {'driveId': 'drive-id'},
    })
    return DriveItemProxy(graph, item, director)


def last_request(session):
    args, kwargs = session.request.call_args
    return args[0], args[1], kwargs


class TestDriveItemProxy:

    def test_properties(self, folder):
        assert folder.id == 'folder-id'
        assert folder.name == 'Folder'
        assert folder.is_folder
        assert folder.parent_reference.drive_id == 'drive-id'

    def test_create_folder(self, folder, session):
        session.request.return_value = make_response(201, {'id': 'new', 'name': 'Reports', 'folder': {}})

        child = folder.create_folder('Reports', {'conflictBehavior': 'rename', 'description': 'Monthly'})

        method, url, kwargs = last_request(session)
        assert method == 'POST'
        assert url == 'https://graph.microsoft.com/v1.0/drives/drive-id/items/folder-id/children'
        assert kwargs['json'] == {
            'folder': {'@odata.type': 'microsoft.graph.folder'},
            'name': 'Reports',
            '@microsoft.graph.conflictBehavior': 'rename',
            'description': 'Monthly',
        }
        assert child.id == 'new'
        assert child.is_folder

    def test_create_folder_conflict(self, folder, session):
        session.request.return_value = make_response(409, {'error': {'code': 'nameAlreadyExists'}})

        with pytest.raises(ConflictError) as excinfo:
            folder.create_folder('Reports')

        assert str(excinfo.value) == 'There is already a drive item named "Reports" in this folder'

    def test_get_children(self, folder, session):
        session.request.return_value = make_response(200, {'value': [{'id': 'a'}, {'id': 'b'}]})

        children = folder.get_children({'top': 2, 'orderBy': [('name', 'asc')]})

        method, url, _ = last_request(session)
        assert method == 'GET'
        assert url.endswith('/drives/drive-id/items/folder-id/children?$top=2&$orderby=name%20asc')
        assert [child.id for child in children] == ['a', 'b']

    def test_upload(self, folder, session):
        session.request.return_value = make_response(201, {'id': 'file', 'name': 'my file.txt'})

        item = folder.upload('my file.txt', 'Hello', {'conflictBehavior': 'replace', 'contentType': 'text/plain'})

        method, url, kwargs = last_request(session)
        assert method == 'PUT'
        assert url.endswith(
            '/drives/drive-id/items/folder-id:/my%20file.txt:/content'
            '?@microsoft.graph.conflictBehavior=replace'
        )
        assert kwargs['headers']['Content-Type'] == 'text/plain'
        assert kwargs['data'] == b'Hello'
        assert item.id == 'file'

    def test_upload_conflict(self, folder, session):
        session.request.return_value = make_response(409)

        with pytest.raises(ConflictError):
            folder.upload('a.txt', b'x', {'conflictBehavior': 'fail'})

    def test_upload_unexpected_status(self, folder, session):
        session.request.return_value = make_response(403)

        with pytest.raises(UnexpectedStatus) as excinfo:
            folder.upload('a.txt', b'x')

        assert excinfo.value.status == 403
        assert excinfo.value.method == 'PUT'

    def test_start_upload(self, folder, session):
        session.request.return_value = make_response(200, {
            'uploadUrl': 'https://uplo.ad/url',
            'expirationDateTime': '2099-01-01T00:00:00Z',
            'nextExpectedRanges': ['0-'],
        })

        upload = folder.start_upload('big.bin', b'0123456789', {
            'conflictBehavior': 'rename',
            'type': 'application/zip',
            'range_size': 4,
        })

        method, url, kwargs = last_request(session)
        assert method == 'POST'
        assert url.endswith('/drives/drive-id/items/folder-id:/big.bin:/createUploadSession')
        assert kwargs['json'] == {'item': {'@microsoft.graph.conflictBehavior': 'rename'}}
        assert isinstance(upload, UploadSessionProxy)
        assert upload.upload_url == 'https://uplo.ad/url'
        assert upload.next_expected_ranges == ['0-']
        assert upload.content_type == 'application/zip'
        assert upload.range_size == 4

    def test_start_upload_conflict(self, folder, session):
        session.request.return_value = make_response(409)

        with pytest.raises(ConflictError):
            folder.start_upload('big.bin', b'x')

    def test_upload_session_complete(self, folder, session):
        session.request.side_effect = [
            make_response(200, {'uploadUrl': 'https://uplo.ad/url', 'expirationDateTime': '2099-01-01T00:00:00Z'}),
            make_response(202),
            make_response(202),
            make_response(201, {'id': 'big', 'name': 'big.bin'}),
        ]

        item = folder.start_upload('big.bin', b'0123456789', {'range_size': 4}).complete()

        assert isinstance(item, DriveItemProxy)
        assert item.id == 'big'
        ranges = [call.kwargs['headers']['Content-Range'] for call in session.request.call_args_list[1:]]
        assert ranges == ['bytes 0-3/10', 'bytes 4-7/10', 'bytes 8-9/10']
        # Upload URLs are pre-authenticated
        assert all('Authorization' not in call.kwargs['headers'] for call in session.request.call_args_list[1:])

    def test_download(self, folder, session):
        session.request.return_value = make_response(200, b'file content')

        assert folder.download() == b'file content'
        assert last_request(session)[1].endswith('/drives/drive-id/items/folder-id/content')

    def test_delete(self, folder, session):
        session.request.return_value = make_response(204)

        folder.delete()

        method, url, _ = last_request(session)
        assert method == 'DELETE'
        assert url.endswith('/drives/drive-id/items/folder-id')

    def test_delete_unexpected_status(self, folder, session):
        session.request.return_value = make_response(404)

        with pytest.raises(UnexpectedStatus):
            folder.delete()

    def test_rename(self, folder, session):
        session.request.return_value = make_response(200, {'id': 'folder-id', 'name': 'Renamed'})

        renamed = folder.rename('Renamed', {'description': 'New'})

        method, _, kwargs = last_request(session)
        assert method == 'PATCH'
        assert kwargs['json'] == {'name': 'Renamed', 'description': 'New'}
        assert renamed.name == 'Renamed'

    def test_move(self, folder, graph, director, session):
        destination = DriveItemProxy(graph, DriveItem(id='dest'), director)
        session.request.return_value = make_response(200, {'id': 'folder-id'})

        folder.move(destination)

        assert last_request(session)[2]['json'] == {'parentReference': {'id': 'dest'}}

    def test_copy_returns_monitor_url(self, folder, graph, director, session):
        destination = DriveItemProxy(graph, DriveItem.from_dict({
            'id': 'dest', 'parentReference': {'driveId': 'other-drive'},
        }), director)
        session.request.return_value = make_response(202, headers={'Location': 'https://monitor/1'})

        location = folder.copy(destination, {'name': 'Copy'})

        method, url, kwargs = last_request(session)
        assert method == 'POST'
        assert url.endswith('/folder-id/copy')
        assert kwargs['json'] == {'parentReference': {'id': 'dest', 'driveId': 'other-drive'}, 'name': 'Copy'}
        assert location == 'https://monitor/1'

    def test_create_link(self, folder, session):
        session.request.return_value = make_response(201, {
            'id': 'perm', 'roles': ['write'], 'link': {'type': 'edit', 'webUrl': 'https://1drv.ms/e'},
        })

        permission = folder.create_link(SharingLinkType.EDIT, {'scope': SharingLinkScope.ORGANIZATION})

        assert last_request(session)[2]['json'] == {'type': 'edit', 'scope': 'organization'}
        assert permission.id == 'perm'
        assert permission.roles == ['write']
        assert permission.link.web_url == 'https://1drv.ms/e'

    def test_locator_without_drive_id(self, graph, director, session):
        item = DriveItemProxy(graph, DriveItem(id='abc'), director)
        session.request.return_value = make_response(200, b'x')

        item.download()

        assert last_request(session)[1] == 'https://graph.microsoft.com/v1.0/me/drive/items/abc/content'


class TestDriveProxy:

    @pytest.fixture
    def drive(self, graph, director):
        return DriveProxy(graph, Drive.from_dict({
            'id': 'drive-id',
            'driveType': 'business',
            'root': {'id': 'root-id', 'root': {}},
        }), director)

    def test_properties(self, drive):
        assert drive.drive_type == 'business'
        assert drive.root.is_root
        assert drive.special == []

    def test_get_drive_item_by_path(self, drive, session):
        session.request.return_value = make_response(200, {'id': 'x', 'name': 'Q1 Report.pdf'})

        item = drive.get_drive_item_by_path('Reports/Q1 Report.pdf')

        assert last_request(session)[1] == (
            'https://graph.microsoft.com/v1.0/drives/drive-id/root:/Reports/Q1%20Report.pdf'
        )
        assert item.name == 'Q1 Report.pdf'

    def test_get_drive_item_by_id(self, drive, session):
        session.request.return_value = make_response(200, {'id': 'x'})

        drive.get_drive_item_by_id('x')

        assert last_request(session)[1].endswith('/drives/drive-id/items/x')

    def test_get_root(self, drive, session):
        session.request.return_value = make_response(200, {'id': 'root-id', 'root': {}})

        assert drive.get_root().is_root

    def test_items_keep_the_drive_id(self, drive, session):
        # Root items carry no parentReference; /me/drive is unavailable to app-only tokens
        session.request.side_effect = [
            make_response(200, {'id': 'root-id', 'root': {}}),
            make_response(200, {'uploadUrl': 'https://uplo.ad/url', 'expirationDateTime': '2099-01-01T00:00:00Z'}),
            make_response(201, {'id': 'big'}),
            make_response(204),
        ]

        root = drive.get_root()
        item = root.start_upload('big.bin', b'abc').complete()
        item.delete()

        urls = [call.args[1] for call in session.request.call_args_list]
        assert urls[1] == 'https://graph.microsoft.com/v1.0/drives/drive-id/items/root-id:/big.bin:/createUploadSession'
        assert urls[3] == 'https://graph.microsoft.com/v1.0/drives/drive-id/items/big'
        assert item.drive_id == 'drive-id'

    def test_create_shared_folder(self, drive, graph, director, session):
        remote = DriveItemProxy(graph, DriveItem.from_dict({
            'id': 'remote-id', 'parentReference': {'driveId': 'remote-drive'},
        }), director)
        session.request.return_value = make_response(201, {'id': 'shortcut'})

        shortcut = drive.create_shared_folder('Shared', remote)

        assert last_request(session)[2]['json'] == {
            'remoteItem': {
                '@odata.type': 'microsoft.graph.remoteItem',
                'id': 'remote-id',
                'parentReference': {'driveId': 'remote-drive'},
            },
            'name': 'Shared',
        }
        assert shortcut.id == 'shortcut'


def test_merge_dicts_is_recursive():
    merged = merge_dicts({'a': {'b': 1, 'c': 2}, 'd': 1}, {'a': {'c': 3}, 'e': 4})

    assert merged == {'a': {'b': 1, 'c': 3}, 'd': 1, 'e': 4}
