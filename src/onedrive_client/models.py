# -*- coding: utf-8 -*-
"""
OneDrive resource models.

One dataclass per Graph resource, built from the JSON returned by the API.
Only the fields this client reads are named; the full payload is kept in
`raw` for anything else.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a Graph ISO 8601 timestamp ('2024-01-01T00:00:00Z'); None passes through."""
    if not value:
        return None
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    # Graph emits up to 7 fractional digits, datetime accepts 6
    if '.' in value:
        head, _, tail = value.partition('.')
        digits = ''
        rest = ''
        for index, char in enumerate(tail):
            if not char.isdigit():
                rest = tail[index:]
                break
            digits += char
        value = f"{head}.{digits[:6].ljust(6, '0')}{rest}"
    return datetime.fromisoformat(value)


@dataclass
class Identity:
    id: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identity":
        return cls(id=data.get("id"), display_name=data.get("displayName"))


@dataclass
class IdentitySet:
    user: Optional[Identity] = None
    application: Optional[Identity] = None
    device: Optional[Identity] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IdentitySet":
        def identity(key):
            return Identity.from_dict(data[key]) if data.get(key) else None

        return cls(
            user=identity("user"),
            application=identity("application"),
            device=identity("device"),
        )


@dataclass
class ItemReference:
    """Reference to a drive item, typically the parent of another item"""
    drive_id: Optional[str] = None
    drive_type: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemReference":
        return cls(
            drive_id=data.get("driveId"),
            drive_type=data.get("driveType"),
            id=data.get("id"),
            name=data.get("name"),
            path=data.get("path"),
        )


@dataclass
class Hashes:
    quick_xor_hash: Optional[str] = None
    sha1_hash: Optional[str] = None
    sha256_hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hashes":
        return cls(
            quick_xor_hash=data.get("quickXorHash"),
            sha1_hash=data.get("sha1Hash"),
            sha256_hash=data.get("sha256Hash"),
        )


@dataclass
class File:
    """File facet of a drive item"""
    mime_type: Optional[str] = None
    hashes: Optional[Hashes] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "File":
        return cls(
            mime_type=data.get("mimeType"),
            hashes=Hashes.from_dict(data["hashes"]) if data.get("hashes") else None,
        )


@dataclass
class Folder:
    """Folder facet of a drive item"""
    child_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Folder":
        return cls(child_count=data.get("childCount", 0))


@dataclass
class FileSystemInfo:
    created_date_time: Optional[datetime] = None
    last_accessed_date_time: Optional[datetime] = None
    last_modified_date_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileSystemInfo":
        return cls(
            created_date_time=parse_datetime(data.get("createdDateTime")),
            last_accessed_date_time=parse_datetime(data.get("lastAccessedDateTime")),
            last_modified_date_time=parse_datetime(data.get("lastModifiedDateTime")),
        )


@dataclass
class Quota:
    total: int = 0
    used: int = 0
    remaining: int = 0
    deleted: int = 0
    state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quota":
        return cls(
            total=data.get("total", 0),
            used=data.get("used", 0),
            remaining=data.get("remaining", 0),
            deleted=data.get("deleted", 0),
            state=data.get("state"),
        )


@dataclass
class SharingLink:
    type: Optional[str] = None
    scope: Optional[str] = None
    web_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SharingLink":
        return cls(type=data.get("type"), scope=data.get("scope"), web_url=data.get("webUrl"))


@dataclass
class Permission:
    id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    link: Optional[SharingLink] = None
    granted_to: Optional[IdentitySet] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Permission":
        return cls(
            id=data.get("id"),
            roles=list(data.get("roles") or []),
            link=SharingLink.from_dict(data["link"]) if data.get("link") else None,
            granted_to=IdentitySet.from_dict(data["grantedTo"]) if data.get("grantedTo") else None,
            raw=data,
        )


@dataclass
class RemoteItem:
    """Item living in another drive, as seen from a shared folder"""
    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    parent_reference: Optional[ItemReference] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteItem":
        parent = data.get("parentReference")
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            size=data.get("size"),
            parent_reference=ItemReference.from_dict(parent) if parent else None,
        )


@dataclass
class SpecialFolder:
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpecialFolder":
        return cls(name=data.get("name"))


@dataclass
class DriveItem:
    """A file, folder or other item stored in a drive"""
    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    description: Optional[str] = None
    e_tag: Optional[str] = None
    c_tag: Optional[str] = None
    web_url: Optional[str] = None
    web_dav_url: Optional[str] = None
    created_date_time: Optional[datetime] = None
    last_modified_date_time: Optional[datetime] = None
    created_by: Optional[IdentitySet] = None
    last_modified_by: Optional[IdentitySet] = None
    parent_reference: Optional[ItemReference] = None
    file: Optional[File] = None
    folder: Optional[Folder] = None
    file_system_info: Optional[FileSystemInfo] = None
    remote_item: Optional[RemoteItem] = None
    special_folder: Optional[SpecialFolder] = None
    is_root: bool = False
    download_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_folder(self) -> bool:
        return self.folder is not None

    @property
    def is_file(self) -> bool:
        return self.file is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DriveItem":
        def facet(key, model):
            return model.from_dict(data[key]) if data.get(key) is not None else None

        return cls(
            id=data.get("id"),
            name=data.get("name"),
            size=data.get("size"),
            description=data.get("description"),
            e_tag=data.get("eTag"),
            c_tag=data.get("cTag"),
            web_url=data.get("webUrl"),
            web_dav_url=data.get("webDavUrl"),
            created_date_time=parse_datetime(data.get("createdDateTime")),
            last_modified_date_time=parse_datetime(data.get("lastModifiedDateTime")),
            created_by=facet("createdBy", IdentitySet),
            last_modified_by=facet("lastModifiedBy", IdentitySet),
            parent_reference=facet("parentReference", ItemReference),
            file=facet("file", File),
            folder=facet("folder", Folder),
            file_system_info=facet("fileSystemInfo", FileSystemInfo),
            remote_item=facet("remoteItem", RemoteItem),
            special_folder=facet("specialFolder", SpecialFolder),
            is_root="root" in data,
            download_url=data.get("@microsoft.graph.downloadUrl"),
            raw=data,
        )


@dataclass
class Drive:
    """A OneDrive, OneDrive for Business or document library drive"""
    id: Optional[str] = None
    name: Optional[str] = None
    drive_type: Optional[str] = None
    web_url: Optional[str] = None
    owner: Optional[IdentitySet] = None
    quota: Optional[Quota] = None
    root: Optional[DriveItem] = None
    special: List[DriveItem] = field(default_factory=list)
    items: List[DriveItem] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Drive":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            drive_type=data.get("driveType"),
            web_url=data.get("webUrl"),
            owner=IdentitySet.from_dict(data["owner"]) if data.get("owner") else None,
            quota=Quota.from_dict(data["quota"]) if data.get("quota") else None,
            root=DriveItem.from_dict(data["root"]) if data.get("root") else None,
            special=[DriveItem.from_dict(item) for item in data.get("special") or []],
            items=[DriveItem.from_dict(item) for item in data.get("items") or []],
            raw=data,
        )


@dataclass
class UploadSession:
    """
    A pending multi-range upload.

    next_expected_ranges is the server's hint of outstanding ranges
    ("0-", "26-"); it is exposed for callers but not used to resume uploads.
    """
    upload_url: Optional[str] = None
    expiration_date_time: Optional[datetime] = None
    next_expected_ranges: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UploadSession":
        return cls(
            upload_url=data.get("uploadUrl"),
            expiration_date_time=parse_datetime(data.get("expirationDateTime")),
            next_expected_ranges=list(data.get("nextExpectedRanges") or []),
        )
