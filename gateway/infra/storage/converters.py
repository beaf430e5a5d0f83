"""Reshape boto3 S3 responses into gateway value types.

Pagination markers and other opaque tokens are copied through unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping

from gateway.infra.storage import metadata as meta
from gateway.infra.storage.client import (
    BucketInfo,
    ListMultipartsInfo,
    ListObjectsInfo,
    ListPartsInfo,
    ObjectInfo,
    PartInfo,
    UploadMetadata,
)


def trim_etag(etag: str | None) -> str:
    """Strip the surrounding quotes S3 puts around entity tags."""
    if not etag:
        return ""
    if len(etag) >= 2 and etag.startswith('"') and etag.endswith('"'):
        return etag[1:-1]
    return etag


def bucket_info(entry: Mapping[str, Any]) -> BucketInfo:
    return BucketInfo(name=entry["Name"], created=entry.get("CreationDate"))


def object_info(bucket: str, name: str, response: Mapping[str, Any]) -> ObjectInfo:
    """Build ``ObjectInfo`` from a HEAD/GET object response."""
    user_defined = meta.from_response(response)
    return ObjectInfo(
        bucket=bucket,
        name=name,
        size=int(response.get("ContentLength") or 0),
        mod_time=response.get("LastModified"),
        etag=trim_etag(response.get("ETag")),
        content_type=response.get("ContentType") or "",
        content_encoding=response.get("ContentEncoding") or "",
        user_defined=user_defined,
    )


def listed_object_info(bucket: str, entry: Mapping[str, Any]) -> ObjectInfo:
    """Build ``ObjectInfo`` from one ``Contents`` entry of a listing."""
    return ObjectInfo(
        bucket=bucket,
        name=entry["Key"],
        size=int(entry.get("Size") or 0),
        mod_time=entry.get("LastModified"),
        etag=trim_etag(entry.get("ETag")),
        user_defined={"Content-Type": ""},
    )


def listed_prefixes(response: Mapping[str, Any]) -> list[str]:
    """Common prefixes of a listing page.

    The listed prefix itself comes first, followed by the backend's
    ``CommonPrefixes`` in backend order.
    """
    prefixes: list[str] = []
    listed = response.get("Prefix") or ""
    if listed:
        prefixes.append(listed)
    for entry in response.get("CommonPrefixes") or []:
        if entry["Prefix"] not in prefixes:
            prefixes.append(entry["Prefix"])
    return prefixes


def list_objects_info(bucket: str, response: Mapping[str, Any]) -> ListObjectsInfo:
    return ListObjectsInfo(
        is_truncated=bool(response.get("IsTruncated")),
        next_marker=response.get("NextMarker") or "",
        objects=[listed_object_info(bucket, e) for e in response.get("Contents") or []],
        prefixes=listed_prefixes(response),
    )


def part_info(entry: Mapping[str, Any]) -> PartInfo:
    return PartInfo(
        part_number=int(entry["PartNumber"]),
        size=int(entry.get("Size") or 0),
        etag=trim_etag(entry.get("ETag")),
        last_modified=entry.get("LastModified"),
    )


def list_parts_info(response: Mapping[str, Any]) -> ListPartsInfo:
    return ListPartsInfo(
        bucket=response.get("Bucket") or "",
        object=response.get("Key") or "",
        upload_id=response.get("UploadId") or "",
        storage_class=response.get("StorageClass") or "",
        part_number_marker=int(response.get("PartNumberMarker") or 0),
        next_part_number_marker=int(response.get("NextPartNumberMarker") or 0),
        max_parts=int(response.get("MaxParts") or 0),
        is_truncated=bool(response.get("IsTruncated")),
        parts=[part_info(p) for p in response.get("Parts") or []],
        encoding_type=response.get("EncodingType") or "",
    )


def upload_metadata(entry: Mapping[str, Any]) -> UploadMetadata:
    return UploadMetadata(
        object=entry["Key"],
        upload_id=entry["UploadId"],
        initiated=entry.get("Initiated"),
    )


def list_multiparts_info(response: Mapping[str, Any]) -> ListMultipartsInfo:
    return ListMultipartsInfo(
        key_marker=response.get("KeyMarker") or "",
        upload_id_marker=response.get("UploadIdMarker") or "",
        next_key_marker=response.get("NextKeyMarker") or "",
        next_upload_id_marker=response.get("NextUploadIdMarker") or "",
        max_uploads=int(response.get("MaxUploads") or 0),
        is_truncated=bool(response.get("IsTruncated")),
        uploads=[upload_metadata(u) for u in response.get("Uploads") or []],
        prefix=response.get("Prefix") or "",
        delimiter=response.get("Delimiter") or "",
        common_prefixes=[p["Prefix"] for p in response.get("CommonPrefixes") or []],
        encoding_type=response.get("EncodingType") or "",
    )
