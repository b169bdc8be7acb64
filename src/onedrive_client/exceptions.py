# -*- coding: utf-8 -*-
"""
Exception types raised by the OneDrive client.

Library code raises these and never prints-and-swallows; the command-line
entry point is the only place where they are caught and reported.
"""


class OneDriveError(Exception):
    """Base class for all OneDrive client errors"""


class InvalidConfiguration(OneDriveError, ValueError):
    """Caller misuse detected before any network call (bad range size, missing client ID, ...)"""


class AuthenticationError(OneDriveError):
    """Token acquisition or renewal failed"""


class UnexpectedStatus(OneDriveError):
    """
    An HTTP response carried a status code outside the accepted set.

    Attributes:
        method (str): HTTP method of the failed request
        url (str): Endpoint or absolute URL the request targeted
        status (int): Status code returned by the server
    """

    def __init__(self, method, url, status):
        self.method = method
        self.url = url
        self.status = status
        super().__init__(f"Unexpected status code produced by '{method} {url}': {status}")


class IncompleteUpload(OneDriveError):
    """The last range of an upload session was accepted but never finalized"""

    def __init__(self, message="OneDrive did not create a drive item for the uploaded file"):
        super().__init__(message)


class ConflictError(OneDriveError):
    """A drive item with the same name already exists in the target folder"""

    def __init__(self, name):
        self.name = name
        super().__init__(f'There is already a drive item named "{name}" in this folder')
