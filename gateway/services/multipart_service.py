"""Multipart upload orchestration.

An upload session moves from created (``new_multipart_upload``) through
accepting parts (``put_object_part``) to one of two terminal states: completed
(``complete_multipart_upload``) or aborted (``abort_multipart_upload``). The
backend owns the session state; this service forwards each step, translates
backend errors and reshapes the results. Part validation on completion (every
part present, entity tags matching, strictly ascending part numbers) is left
to the backend, so parts are submitted exactly in the caller's order.
"""

from __future__ import annotations

import base64
from typing import Any, BinaryIO, Sequence

from gateway.infra.storage import converters
from gateway.infra.storage import metadata as meta
from gateway.infra.storage.client import (
    CompletePart,
    ListMultipartsInfo,
    ListPartsInfo,
    ObjectInfo,
    PartInfo,
)
from gateway.infra.storage.errors import NotSupported, StorageError
from gateway.infra.storage.streams import DigestReader
from gateway.services.base import BaseService


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


class MultipartService(BaseService):
    """Create, fill, list, complete and abort multipart uploads."""

    def new_multipart_upload(
        self, bucket: str, object_name: str, metadata: dict[str, str] | None
    ) -> str:
        """Start an upload session and return its opaque upload ID."""
        params = meta.to_request_params(meta.strip_internal_keys(metadata))
        response = self._call(
            "create_multipart_upload",
            self.client.create_multipart_upload,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
            **params,
        )
        upload_id = response.get("UploadId")
        if not upload_id:
            raise StorageError(
                "S3 response missing UploadId", bucket=bucket, object_name=object_name
            )
        return str(upload_id)

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
        """Upload one part; uploading the same part number again replaces it.

        Both digests are hex strings and are decoded before anything is sent.

        Raises:
            ValueError: If either digest is not valid hex.
        """
        md5_bytes = bytes.fromhex(md5_hex)
        sha256_bytes = bytes.fromhex(sha256sum)

        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": object_name,
            "UploadId": upload_id,
            "PartNumber": int(part_id),
            "Body": DigestReader(data, limit=size),
        }
        if size >= 0:
            params["ContentLength"] = size
        if md5_bytes:
            params["ContentMD5"] = _b64(md5_bytes)
        if sha256_bytes:
            params["ChecksumSHA256"] = _b64(sha256_bytes)

        response = self._call(
            "upload_part",
            self.client.upload_part,
            bucket=bucket,
            object_name=object_name,
            **params,
        )
        return PartInfo(
            part_number=int(part_id),
            size=size if size >= 0 else params["Body"].bytes_read,
            etag=converters.trim_etag(response.get("ETag")),
            last_modified=None,
        )

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
        raise NotSupported("CopyObjectPart")

    def list_object_parts(
        self,
        bucket: str,
        object_name: str,
        upload_id: str,
        part_number_marker: int,
        max_parts: int,
    ) -> ListPartsInfo:
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": object_name,
            "UploadId": upload_id,
        }
        if part_number_marker > 0:
            params["PartNumberMarker"] = part_number_marker
        if max_parts > 0:
            params["MaxParts"] = max_parts
        response = self._call(
            "list_parts",
            self.client.list_parts,
            bucket=bucket,
            object_name=object_name,
            **params,
        )
        return converters.list_parts_info(response)

    def abort_multipart_upload(
        self, bucket: str, object_name: str, upload_id: str
    ) -> None:
        self._call(
            "abort_multipart_upload",
            self.client.abort_multipart_upload,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
            UploadId=upload_id,
        )

    def complete_multipart_upload(
        self,
        bucket: str,
        object_name: str,
        upload_id: str,
        uploaded_parts: Sequence[CompletePart],
    ) -> ObjectInfo:
        """Assemble the parts and return a fresh stat of the finished object.

        Backend rejections (missing part, entity tag mismatch, parts out of
        order) are raised; the session then stays open and can be aborted.
        """
        payload = {
            "Parts": [
                {"ETag": part.etag, "PartNumber": int(part.part_number)}
                for part in uploaded_parts
            ]
        }
        self._call(
            "complete_multipart_upload",
            self.client.complete_multipart_upload,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
            UploadId=upload_id,
            MultipartUpload=payload,
        )
        return self._stat_object(bucket, object_name)

    def list_multipart_uploads(
        self,
        bucket: str,
        prefix: str,
        key_marker: str,
        upload_id_marker: str,
        delimiter: str,
        max_uploads: int,
    ) -> ListMultipartsInfo:
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if key_marker:
            params["KeyMarker"] = key_marker
        if upload_id_marker:
            params["UploadIdMarker"] = upload_id_marker
        if delimiter:
            params["Delimiter"] = delimiter
        if max_uploads > 0:
            params["MaxUploads"] = max_uploads
        response = self._call(
            "list_multipart_uploads",
            self.client.list_multipart_uploads,
            bucket=bucket,
            **params,
        )
        return converters.list_multiparts_info(response)
