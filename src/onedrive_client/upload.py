# -*- coding: utf-8 -*-
"""
Upload session driver.

Sends the content of a large file to an already-created upload session, one
range per PUT request, strictly in order and one request at a time.

Response handling per range:
    - 202 on a range that is not the last: accepted, send the next one
    - 200/201 on the last range: the drive item was created, return it
    - 202 on the last range: IncompleteUpload
    - anything else: UnexpectedStatus, nothing more is sent

There is no retry and no resumption from the session's nextExpectedRanges:
on failure the caller starts a new session.
"""

from datetime import datetime, timezone

from .constants import DEFAULT_CONTENT_TYPE, DEFAULT_RANGE_SIZE
from .content import as_content_source
from .exceptions import IncompleteUpload, InvalidConfiguration, UnexpectedStatus
from .models import DriveItem
from .monitoring import upload_stats
from .ranges import plan_ranges
from .utils import is_debug_enabled


def progress_status(offset, file_size):
    """Display upload progress."""
    if is_debug_enabled():
        percentage = offset / file_size * 100 if file_size else 100.0
        print(f"Uploaded {offset} bytes from {file_size} bytes ... {percentage:.2f}%")


def complete_upload_session(graph, session, content, content_type=DEFAULT_CONTENT_TYPE,
                            range_size=DEFAULT_RANGE_SIZE):
    """
    Upload content to an upload session and return the created drive item.

    Args:
        graph (Graph): Graph used to create the PUT requests
        session (UploadSession): Session returned by createUploadSession
        content: bytes, str, binary stream or ContentSource
        content_type (str): Content-Type sent with every range
        range_size (int): Number of bytes per range (positive)

    Returns:
        DriveItem: The drive item created from the uploaded content

    Raises:
        InvalidConfiguration: If the session has no upload URL, has expired,
            or range_size is not positive; raised before any request is sent
        UnexpectedStatus: If a range gets a status outside the accepted set
        IncompleteUpload: If the last range is accepted but no item is created
        requests.exceptions.RequestException: Transport failures, unchanged
    """
    upload_url = session.upload_url
    if not upload_url:
        raise InvalidConfiguration("The upload session has no upload URL")

    expires = session.expiration_date_time
    if expires is not None:
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        if expires <= datetime.now(timezone.utc):
            raise InvalidConfiguration(f"The upload session expired at {expires.isoformat()}")

    source = as_content_source(content)
    plan = plan_ranges(source.size, range_size)
    last_index = len(plan) - 1

    if is_debug_enabled():
        print(f"[→] Uploading {source.size:,} bytes in {len(plan)} range(s) of {range_size:,} bytes")

    for index, descriptor in enumerate(plan):
        body = source.read_range(descriptor.start, descriptor.length)

        headers = {
            'Content-Type': content_type,
            'Content-Length': str(descriptor.length),
            'Content-Range': descriptor.header_value,
        }

        if is_debug_enabled():
            print(f"[DEBUG] Uploading range: {descriptor.header_value}")

        response = graph.create_request('PUT', upload_url, retry=False) \
            .add_headers(headers) \
            .attach_body(body) \
            .execute()

        status = response.status
        is_last = index == last_index

        if status == 202 and not is_last:
            upload_stats.record_range(descriptor.length)
            progress_status(descriptor.end + 1, source.size)
            continue

        if status in (200, 201) and is_last:
            upload_stats.record_range(descriptor.length)
            progress_status(source.size, source.size)
            item = response.get_response_as_object(DriveItem)
            if is_debug_enabled():
                print(f"[✓] Upload session complete: {item.name} ({item.id})")
            return item

        if status == 202:
            raise IncompleteUpload()

        raise UnexpectedStatus('PUT', upload_url, status)

    # A plan always holds at least one range, so the loop returns or raises
    raise IncompleteUpload()
