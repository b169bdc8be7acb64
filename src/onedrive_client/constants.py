# -*- coding: utf-8 -*-
"""
Constant values accepted by OneDrive operations.
"""

from enum import Enum


class ConflictBehavior(str, Enum):
    """What OneDrive does when the target name is already taken"""
    FAIL = "fail"
    REPLACE = "replace"
    RENAME = "rename"


class SharingLinkType(str, Enum):
    """Kind of sharing link created by create_link()"""
    VIEW = "view"
    EDIT = "edit"
    EMBED = "embed"


class SharingLinkScope(str, Enum):
    """Audience of a sharing link"""
    ANONYMOUS = "anonymous"
    ORGANIZATION = "organization"


class SpecialFolderName(str, Enum):
    """Well-known folders reachable under /me/drive/special"""
    DOCUMENTS = "documents"
    PHOTOS = "photos"
    CAMERA_ROLL = "cameraroll"
    APP_ROOT = "approot"
    MUSIC = "music"


class AccessTokenStatus(str, Enum):
    """Lifecycle status of the access token held in the client state"""
    MISSING = "missing"
    EXPIRED = "expired"
    EXPIRING = "expiring"
    VALID = "valid"


class DriveType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    DOCUMENT_LIBRARY = "documentLibrary"


# Upload session ranges must be multiples of 320 KiB
RANGE_ALIGNMENT = 327680

# Default number of bytes sent per upload session PUT
DEFAULT_RANGE_SIZE = RANGE_ALIGNMENT

# Microsoft's documented ceiling for a single range
MAX_RANGE_SIZE = 60 * 1024 * 1024

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Files at or below this size go through a single PUT /content request
SIMPLE_UPLOAD_LIMIT = 4 * 1024 * 1024

# Seconds before expiry at which a token is reported as expiring
TOKEN_EXPIRING_THRESHOLD = 60
