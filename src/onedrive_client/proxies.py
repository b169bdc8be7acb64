# -*- coding: utf-8 -*-
"""
Object-oriented proxies over OneDrive resources.

A proxy wraps a resource model (DriveItem, Drive, ...) together with the
Graph it came from, exposes the model's fields as read-only properties and
adds the operations that can be performed on the resource.

Example:
    root = client.get_root()
    folder = root.create_folder('Reports', {'conflictBehavior': 'rename'})
    session = folder.start_upload('big.bin', open('big.bin', 'rb'))
    item = session.complete()
"""

from .constants import DEFAULT_CONTENT_TYPE, DEFAULT_RANGE_SIZE
from .content import as_content_source
from .exceptions import ConflictError, UnexpectedStatus
from .models import DriveItem, Permission, UploadSession
from .upload import complete_upload_session
from .utils import append_query_string, encode_item_name, encode_path, is_debug_enabled


def merge_dicts(base, overrides):
    """Recursively merge overrides into a copy of base."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def expect_status(response, method, endpoint, *statuses):
    """Raise UnexpectedStatus unless the response status is one of statuses."""
    if response.status not in statuses:
        raise UnexpectedStatus(method, endpoint, response.status)
    return response


class PermissionProxy:
    """A permission on a drive item, e.g. a sharing link"""

    def __init__(self, graph, permission):
        self.graph = graph
        self.permission = permission

    @property
    def id(self):
        return self.permission.id

    @property
    def roles(self):
        return self.permission.roles

    @property
    def link(self):
        return self.permission.link

    @property
    def granted_to(self):
        return self.permission.granted_to

    def __repr__(self):
        return f"PermissionProxy(id={self.id!r}, roles={self.roles!r})"


class DriveItemProxy:
    """
    A file or folder in a drive.

    Folder-only operations: create_folder, get_children, upload, start_upload.
    File-only operations: download, copy.
    """

    def __init__(self, graph, item, parameter_director, drive_id=None):
        self.graph = graph
        self.item = item
        self.parameter_director = parameter_director
        # Owning drive, when known from the lookup rather than the item
        self.drive_id = drive_id

    # Resource fields

    @property
    def id(self):
        return self.item.id

    @property
    def name(self):
        return self.item.name

    @property
    def size(self):
        return self.item.size

    @property
    def description(self):
        return self.item.description

    @property
    def e_tag(self):
        return self.item.e_tag

    @property
    def c_tag(self):
        return self.item.c_tag

    @property
    def web_url(self):
        return self.item.web_url

    @property
    def web_dav_url(self):
        return self.item.web_dav_url

    @property
    def created_date_time(self):
        return self.item.created_date_time

    @property
    def last_modified_date_time(self):
        return self.item.last_modified_date_time

    @property
    def parent_reference(self):
        return self.item.parent_reference

    @property
    def file(self):
        return self.item.file

    @property
    def folder(self):
        return self.item.folder

    @property
    def file_system_info(self):
        return self.item.file_system_info

    @property
    def remote_item(self):
        return self.item.remote_item

    @property
    def special_folder(self):
        return self.item.special_folder

    @property
    def is_root(self):
        return self.item.is_root

    @property
    def is_folder(self):
        return self.item.is_folder

    @property
    def is_file(self):
        return self.item.is_file

    @property
    def children(self):
        return self.get_children()

    @property
    def content(self):
        return self.download()

    @property
    def _locator(self):
        drive_id = self._drive_id
        if drive_id:
            return f"/drives/{drive_id}/items/{self.id}"
        return f"/me/drive/items/{self.id}"

    def _wrap(self, item):
        return DriveItemProxy(self.graph, item, self.parameter_director, self._drive_id)

    @property
    def _drive_id(self):
        parent = self.item.parent_reference
        if parent is not None and parent.drive_id:
            return parent.drive_id
        return self.drive_id

    # Operations

    def create_folder(self, name, options=None):
        """
        Create a folder under this folder.

        Args:
            name (str): Folder name
            options (dict): 'description', 'conflictBehavior'

        Returns:
            DriveItemProxy: The folder created

        Raises:
            ConflictError: If an item with this name exists and the conflict
                behavior is 'fail'
        """
        endpoint = f"{self._locator}/children"
        body_params = self.parameter_director.build_post_children_body_parameters(options or {})
        body = merge_dicts({
            'folder': {
                '@odata.type': 'microsoft.graph.folder',
            },
            'name': str(name),
        }, body_params)

        response = self.graph.create_request('POST', endpoint).attach_body(body).execute()

        if response.status == 409:
            raise ConflictError(name)
        expect_status(response, 'POST', endpoint, 200, 201)

        if is_debug_enabled():
            print(f"[✓] Folder created: {name}")
        return self._wrap(response.get_response_as_object(DriveItem))

    def get_children(self, options=None):
        """
        List the children of this folder.

        Args:
            options (dict): 'top' (int), 'orderBy' (list of (property, direction)
                tuples, e.g. [('name', 'desc')])

        Returns:
            list[DriveItemProxy]: The first page of children
        """
        query_params = self.parameter_director.build_get_children(options or {})
        endpoint = append_query_string(f"{self._locator}/children", query_params)

        response = self.graph.create_collection_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)

        return [self._wrap(item) for item in response.get_response_as_object(DriveItem)]

    def delete(self):
        """Delete this drive item."""
        endpoint = self._locator
        response = self.graph.create_request('DELETE', endpoint).execute()
        expect_status(response, 'DELETE', endpoint, 204)

        if is_debug_enabled():
            print(f"[×] Deleted: {self.name}")

    def upload(self, name, content, options=None):
        """
        Upload a file under this folder in a single request.

        Suited to small files (up to 4 MB); use start_upload() beyond that.

        Args:
            name (str): File name
            content: bytes, str or binary stream
            options (dict): 'conflictBehavior', 'contentType'

        Returns:
            DriveItemProxy: The file created or replaced

        Raises:
            ConflictError: If an item with this name exists and the conflict
                behavior is 'fail'
        """
        options = options or {}
        endpoint = f"{self._locator}:/{encode_item_name(name)}:/content"
        query_params = self.parameter_director.build_put_content_query_string_parameters(options)
        endpoint = append_query_string(endpoint, query_params)
        header_params = self.parameter_director.build_put_content_header_parameters(options)

        source = as_content_source(content)
        body = source.read_range(0, source.size)

        response = self.graph.create_request('PUT', endpoint) \
            .add_headers(header_params) \
            .attach_body(body) \
            .execute()

        if response.status == 409:
            raise ConflictError(name)
        expect_status(response, 'PUT', endpoint, 200, 201)

        return self._wrap(response.get_response_as_object(DriveItem))

    def start_upload(self, name, content, options=None):
        """
        Create an upload session to upload a large file under this folder.

        Uploading takes two steps: this call creates the session, then
        complete() on the returned proxy sends the content range by range.

        Args:
            name (str): File name
            content: bytes, str, binary stream or ContentSource
            options (dict): 'conflictBehavior', 'description', 'fileSize',
                'type' or 'contentType' (Content-Type of each range),
                'range_size' (bytes per range)

        Returns:
            UploadSessionProxy: The session, ready to be completed

        Raises:
            ConflictError: If an item with this name exists and the conflict
                behavior is 'fail'
        """
        options = options or {}
        endpoint = f"{self._locator}:/{encode_item_name(name)}:/createUploadSession"
        body_params = self.parameter_director.build_post_create_upload_session_body_parameters(options)

        response = self.graph.create_request('POST', endpoint).attach_body(body_params).execute()

        if response.status == 409:
            raise ConflictError(name)
        expect_status(response, 'POST', endpoint, 200)

        session = response.get_response_as_object(UploadSession)

        if is_debug_enabled():
            print(f"[DEBUG] Upload session created for {name}, expires {session.expiration_date_time}")

        return UploadSessionProxy(
            self.graph, session, content, self.parameter_director, options, drive_id=self._drive_id
        )

    def download(self):
        """
        Download the content of this file.

        Returns:
            bytes: The file content
        """
        endpoint = f"{self._locator}/content"
        response = self.graph.create_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return response.body

    def rename(self, name, options=None):
        """
        Rename this drive item.

        Args:
            name (str): New name
            options (dict): Extra properties to set, e.g. {'description': '...'}

        Returns:
            DriveItemProxy: The renamed item
        """
        endpoint = self._locator
        body = merge_dicts({'name': str(name)}, options or {})

        response = self.graph.create_request('PATCH', endpoint).attach_body(body).execute()
        expect_status(response, 'PATCH', endpoint, 200)

        return self._wrap(response.get_response_as_object(DriveItem))

    def move(self, destination_item, options=None):
        """
        Move this drive item under a destination folder.

        Args:
            destination_item (DriveItemProxy): Destination folder
            options (dict): Extra properties to set, e.g. {'name': 'new.txt'}

        Returns:
            DriveItemProxy: The moved item
        """
        endpoint = self._locator
        body = merge_dicts({
            'parentReference': {
                'id': destination_item.id,
            },
        }, options or {})

        response = self.graph.create_request('PATCH', endpoint).attach_body(body).execute()
        expect_status(response, 'PATCH', endpoint, 200)

        return self._wrap(response.get_response_as_object(DriveItem))

    def copy(self, destination_item, options=None):
        """
        Copy this file under a destination folder.

        The copy runs asynchronously on the service side. A new name is
        required when copying into the same folder.

        Args:
            destination_item (DriveItemProxy): Destination folder
            options (dict): Extra properties, e.g. {'name': 'copy.txt'}

        Returns:
            str: URL of the monitor reporting the copy progress
        """
        endpoint = f"{self._locator}/copy"
        parent_reference = {'id': destination_item.id}
        if destination_item._drive_id:
            parent_reference['driveId'] = destination_item._drive_id

        body = merge_dicts({'parentReference': parent_reference}, options or {})

        response = self.graph.create_request('POST', endpoint).attach_body(body).execute()
        expect_status(response, 'POST', endpoint, 202)

        return response.headers.get('Location')

    def create_link(self, link_type, options=None):
        """
        Create a sharing link to this drive item.

        Args:
            link_type (str): 'view', 'edit' or 'embed' (see SharingLinkType)
            options (dict): 'scope' ('anonymous' or 'organization')

        Returns:
            PermissionProxy: The permission holding the link
        """
        endpoint = f"{self._locator}/createLink"
        body = {'type': getattr(link_type, 'value', link_type)}
        scope = (options or {}).get('scope')
        if scope is not None:
            body['scope'] = getattr(scope, 'value', scope)

        response = self.graph.create_request('POST', endpoint).attach_body(body).execute()
        expect_status(response, 'POST', endpoint, 200, 201)

        return PermissionProxy(self.graph, response.get_response_as_object(Permission))

    def __repr__(self):
        return f"DriveItemProxy(id={self.id!r}, name={self.name!r})"


class DriveProxy:
    """A drive: the container of a root folder and its descendants"""

    def __init__(self, graph, drive, parameter_director):
        self.graph = graph
        self.drive = drive
        self.parameter_director = parameter_director

    @property
    def id(self):
        return self.drive.id

    @property
    def name(self):
        return self.drive.name

    @property
    def drive_type(self):
        return self.drive.drive_type

    @property
    def web_url(self):
        return self.drive.web_url

    @property
    def owner(self):
        return self.drive.owner

    @property
    def quota(self):
        return self.drive.quota

    @property
    def root(self):
        if self.drive.root is None:
            return None
        return self._wrap(self.drive.root)

    @property
    def special(self):
        return [self._wrap(item) for item in self.drive.special]

    @property
    def items(self):
        return [self._wrap(item) for item in self.drive.items]

    def _wrap(self, item):
        return DriveItemProxy(self.graph, item, self.parameter_director, self.id)

    def _get_drive_item(self, endpoint):
        response = self.graph.create_request('GET', endpoint).execute()
        expect_status(response, 'GET', endpoint, 200)
        return self._wrap(response.get_response_as_object(DriveItem))

    def get_drive_item_by_id(self, item_id):
        """Get a drive item of this drive by ID."""
        return self._get_drive_item(f"/drives/{self.id}/items/{item_id}")

    def get_drive_item_by_path(self, path):
        """Get a drive item of this drive by path, relative to the root ('/folder/file.txt')."""
        return self._get_drive_item(f"/drives/{self.id}/root:{encode_path(path)}")

    def get_root(self):
        """Get the root folder of this drive."""
        return self._get_drive_item(f"/drives/{self.id}/items/root")

    def create_shared_folder(self, name, remote, options=None):
        """
        Add a folder shared from another drive to the root of this drive.

        Args:
            name (str): Name of the shortcut in this drive
            remote (DriveItemProxy): The shared folder

        Returns:
            DriveItemProxy: The shortcut created
        """
        endpoint = f"/drives/{self.id}/root/children"
        body = merge_dicts({
            'remoteItem': {
                '@odata.type': 'microsoft.graph.remoteItem',
                'id': remote.id,
                'parentReference': {
                    'driveId': remote.parent_reference.drive_id if remote.parent_reference else None,
                },
            },
            'name': str(name),
        }, options or {})

        response = self.graph.create_request('POST', endpoint).attach_body(body).execute()
        expect_status(response, 'POST', endpoint, 201)

        return self._wrap(response.get_response_as_object(DriveItem))

    def __repr__(self):
        return f"DriveProxy(id={self.id!r}, drive_type={self.drive_type!r})"


class UploadSessionProxy:
    """
    An upload session bound to the content it will upload.

    Options:
        'type' or 'contentType': Content-Type of each range
            (default: application/octet-stream)
        'range_size': bytes per range (default: 327680, must be positive)
    """

    def __init__(self, graph, session, content, parameter_director, options=None, drive_id=None):
        options = options or {}
        self.drive_id = drive_id
        self.graph = graph
        self.session = session
        self.content = content
        self.parameter_director = parameter_director
        self.content_type = options.get('type') or options.get('contentType') or DEFAULT_CONTENT_TYPE
        self.range_size = options.get('range_size', DEFAULT_RANGE_SIZE)

    @property
    def upload_url(self):
        return self.session.upload_url

    @property
    def expiration_date_time(self):
        return self.session.expiration_date_time

    @property
    def next_expected_ranges(self):
        return self.session.next_expected_ranges

    def complete(self):
        """
        Upload the content range by range.

        Returns:
            DriveItemProxy: The drive item created

        Raises:
            InvalidConfiguration: If range_size is not positive
            UnexpectedStatus: If a range is answered with an unexpected status
            IncompleteUpload: If the last range is accepted but no item is created
        """
        item = complete_upload_session(
            self.graph, self.session, self.content,
            content_type=self.content_type,
            range_size=self.range_size
        )
        return DriveItemProxy(self.graph, item, self.parameter_director, self.drive_id)

    def __repr__(self):
        return f"UploadSessionProxy(upload_url={self.upload_url!r})"

