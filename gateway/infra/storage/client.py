"""Gateway object layer protocol and data types.

This module defines the generic object-storage contract served by the
gateway together with the immutable value types it returns. Every value is
rebuilt from a fresh backend response; nothing here is cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Protocol, Sequence


@dataclass(frozen=True, slots=True)
class BucketInfo:
    """Snapshot of a bucket as reported by the backend."""

    name: str
    created: datetime | None


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    """Metadata of a stored object."""

    bucket: str
    name: str
    size: int
    mod_time: datetime | None
    etag: str
    content_type: str = ""
    content_encoding: str = ""
    user_defined: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListObjectsInfo:
    """One page of a bucket listing."""

    is_truncated: bool
    next_marker: str
    objects: list[ObjectInfo]
    prefixes: list[str]


@dataclass(frozen=True, slots=True)
class PartInfo:
    """An uploaded part of a multipart upload."""

    part_number: int
    size: int
    etag: str
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class CompletePart:
    """Part reference supplied when completing a multipart upload."""

    part_number: int
    etag: str


@dataclass(frozen=True, slots=True)
class ListPartsInfo:
    """One page of the parts uploaded to a multipart upload."""

    bucket: str
    object: str
    upload_id: str
    storage_class: str
    part_number_marker: int
    next_part_number_marker: int
    max_parts: int
    is_truncated: bool
    parts: list[PartInfo]
    encoding_type: str = ""


@dataclass(frozen=True, slots=True)
class UploadMetadata:
    """An in-progress multipart upload."""

    object: str
    upload_id: str
    initiated: datetime | None


@dataclass(frozen=True, slots=True)
class ListMultipartsInfo:
    """One page of in-progress multipart uploads."""

    key_marker: str
    upload_id_marker: str
    next_key_marker: str
    next_upload_id_marker: str
    max_uploads: int
    is_truncated: bool
    uploads: list[UploadMetadata]
    prefix: str
    delimiter: str
    common_prefixes: list[str]
    encoding_type: str = ""


@dataclass(frozen=True, slots=True)
class StorageInfo:
    """Backend capacity; unknown for S3 backends."""

    total: int | None = None
    free: int | None = None


class ObjectLayer(Protocol):
    """Generic object-storage contract implemented by the gateway.

    Every method either returns a populated result or raises a
    ``StorageError`` subclass from ``gateway.infra.storage.errors``.
    """

    def make_bucket(self, location: str, bucket: str) -> None:
        """Create a bucket in the given location."""
        ...

    def get_bucket_info(self, bucket: str) -> BucketInfo:
        """Return bucket metadata.

        Raises:
            BucketNotFound: If no bucket with this name is visible.
        """
        ...

    def list_buckets(self) -> list[BucketInfo]:
        """Return all buckets in backend order."""
        ...

    def delete_bucket(self, bucket: str) -> None:
        """Delete an empty bucket.

        Raises:
            BucketNotEmpty: If the bucket still holds objects.
            BucketNotFound: If the bucket does not exist.
        """
        ...

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        marker: str,
        delimiter: str,
        max_keys: int,
    ) -> ListObjectsInfo:
        """List one page of objects."""
        ...

    def get_object(
        self,
        bucket: str,
        object_name: str,
        offset: int,
        length: int,
        sink: BinaryIO,
    ) -> None:
        """Copy ``length`` bytes starting at ``offset`` into ``sink``."""
        ...

    def get_object_info(self, bucket: str, object_name: str) -> ObjectInfo:
        """Return object metadata.

        Raises:
            ObjectNotFound: If the object does not exist.
        """
        ...

    def put_object(
        self,
        bucket: str,
        object_name: str,
        size: int,
        data: BinaryIO,
        metadata: dict[str, str] | None,
        sha256sum: str = "",
    ) -> ObjectInfo:
        """Upload an object, optionally verifying its SHA-256 digest.

        Raises:
            ChecksumMismatch: If the uploaded content does not match
                ``sha256sum``.
        """
        ...

    def copy_object(
        self,
        src_bucket: str,
        src_object: str,
        dest_bucket: str,
        dest_object: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        """Server-side copy of an object."""
        ...

    def delete_object(self, bucket: str, object_name: str) -> None:
        """Delete an object."""
        ...

    def new_multipart_upload(
        self, bucket: str, object_name: str, metadata: dict[str, str] | None
    ) -> str:
        """Start a multipart upload and return its upload ID."""
        ...

    def put_object_part(
        self,
        bucket: str,
        object_name: str,
        upload_id: str,
        part_id: int,
        size: int,
        data: BinaryIO,
        md5_hex: str = "",
        sha256sum: str = "",
    ) -> PartInfo:
        """Upload one part of a multipart upload."""
        ...

    def copy_object_part(
        self,
        src_bucket: str,
        src_object: str,
        dest_bucket: str,
        dest_object: str,
        upload_id: str,
        part_id: int,
        start_offset: int,
        length: int,
    ) -> PartInfo:
        """Copy a byte range into a part. Never supported by this gateway."""
        ...

    def list_object_parts(
        self,
        bucket: str,
        object_name: str,
        upload_id: str,
        part_number_marker: int,
        max_parts: int,
    ) -> ListPartsInfo:
        """List one page of uploaded parts in ascending part order."""
        ...

    def abort_multipart_upload(
        self, bucket: str, object_name: str, upload_id: str
    ) -> None:
        """Abort a multipart upload and discard its parts."""
        ...

    def complete_multipart_upload(
        self,
        bucket: str,
        object_name: str,
        upload_id: str,
        uploaded_parts: Sequence[CompletePart],
    ) -> ObjectInfo:
        """Assemble the listed parts into the final object."""
        ...

    def list_multipart_uploads(
        self,
        bucket: str,
        prefix: str,
        key_marker: str,
        upload_id_marker: str,
        delimiter: str,
        max_uploads: int,
    ) -> ListMultipartsInfo:
        """List one page of in-progress multipart uploads."""
        ...
