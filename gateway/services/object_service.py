"""Object read and write paths.

Reads stream a byte range of a backend object into a caller-supplied sink.
Writes stream the caller's data to the backend through a digest tee; when an
expected SHA-256 is supplied and does not match, the freshly written object is
removed again on a best-effort basis and ``ChecksumMismatch`` is raised.
"""

from __future__ import annotations

import logging
import time
from typing import Any, BinaryIO

from botocore.exceptions import IncompleteReadError

from gateway.infra.storage import converters
from gateway.infra.storage import metadata as meta
from gateway.infra.storage.client import ListObjectsInfo, ObjectInfo
from gateway.infra.storage.errors import ChecksumMismatch
from gateway.infra.storage.streams import DigestReader, copy_exactly
from gateway.services.base import BaseService

logger = logging.getLogger(__name__)


class ObjectService(BaseService):
    """Object listing, reads, writes, copies and deletes."""

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        marker: str,
        delimiter: str,
        max_keys: int,
    ) -> ListObjectsInfo:
        return self._list_objects(self.client, bucket, prefix, marker, delimiter, max_keys)

    def anon_list_objects(
        self,
        bucket: str,
        prefix: str,
        marker: str,
        delimiter: str,
        max_keys: int,
    ) -> ListObjectsInfo:
        return self._list_objects(
            self.anon_client, bucket, prefix, marker, delimiter, max_keys
        )

    def _list_objects(
        self,
        client: Any,
        bucket: str,
        prefix: str,
        marker: str,
        delimiter: str,
        max_keys: int,
    ) -> ListObjectsInfo:
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if marker:
            params["Marker"] = marker
        if delimiter:
            params["Delimiter"] = delimiter
        if max_keys > 0:
            params["MaxKeys"] = max_keys
        response = self._call("list_objects", client.list_objects, bucket=bucket, **params)
        return converters.list_objects_info(bucket, response)

    def get_object(
        self,
        bucket: str,
        object_name: str,
        offset: int,
        length: int,
        sink: BinaryIO,
    ) -> None:
        """Copy ``length`` bytes of the object, starting at ``offset``, to ``sink``.

        Raises:
            IncompleteReadError: If the object ends before ``offset + length``.
        """
        self._get_object(self.client, bucket, object_name, offset, length, sink)

    def anon_get_object(
        self,
        bucket: str,
        object_name: str,
        offset: int,
        length: int,
        sink: BinaryIO,
    ) -> None:
        self._get_object(self.anon_client, bucket, object_name, offset, length, sink)

    def _get_object(
        self,
        client: Any,
        bucket: str,
        object_name: str,
        offset: int,
        length: int,
        sink: BinaryIO,
    ) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        if length == 0:
            self._stat_object(bucket, object_name, client=client)
            return

        start = time.perf_counter()
        response = self._call(
            "get_object",
            client.get_object,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
            Range=f"bytes={offset}-{offset + length - 1}",
        )
        body = response["Body"]
        try:
            copied = copy_exactly(body, sink, length, self._settings.STREAM_CHUNK_BYTES)
        finally:
            body.close()
        if copied < length:
            exc = IncompleteReadError(actual_bytes=copied, expected_bytes=length)
            self._report_failure(
                "get_object",
                exc,
                exc,
                time.perf_counter() - start,
                bucket=bucket,
                object_name=object_name,
            )
            raise exc

    def get_object_info(self, bucket: str, object_name: str) -> ObjectInfo:
        return self._stat_object(bucket, object_name)

    def anon_get_object_info(self, bucket: str, object_name: str) -> ObjectInfo:
        return self._stat_object(bucket, object_name, client=self.anon_client)

    def put_object(
        self,
        bucket: str,
        object_name: str,
        size: int,
        data: BinaryIO,
        metadata: dict[str, str] | None,
        sha256sum: str = "",
    ) -> ObjectInfo:
        """Upload ``size`` bytes of ``data`` and return the stored object's info.

        Raises:
            ChecksumMismatch: If ``sha256sum`` is given and the uploaded bytes
                hash to a different value. The object is deleted first.
        """
        return self._put_object(
            self.client, bucket, object_name, size, data, metadata, sha256sum
        )

    def anon_put_object(
        self,
        bucket: str,
        object_name: str,
        size: int,
        data: BinaryIO,
        metadata: dict[str, str] | None,
        sha256sum: str = "",
    ) -> ObjectInfo:
        return self._put_object(
            self.anon_client, bucket, object_name, size, data, metadata, sha256sum
        )

    def _put_object(
        self,
        client: Any,
        bucket: str,
        object_name: str,
        size: int,
        data: BinaryIO,
        metadata: dict[str, str] | None,
        sha256sum: str,
    ) -> ObjectInfo:
        reader = DigestReader(data, limit=size)
        params = meta.to_request_params(meta.strip_internal_keys(metadata))
        if size >= 0:
            params["ContentLength"] = size

        self._call(
            "put_object",
            client.put_object,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
            Body=reader,
            **params,
        )

        if sha256sum:
            computed = reader.hexdigest()
            if computed != sha256sum.lower():
                logger.warning(
                    "checksum_mismatch bucket=%s object=%s expected=%s computed=%s",
                    bucket,
                    object_name,
                    sha256sum,
                    computed,
                )
                self._discard_object(client, bucket, object_name)
                raise ChecksumMismatch(
                    bucket=bucket,
                    object_name=object_name,
                    expected=sha256sum,
                    computed=computed,
                )

        return self._stat_object(bucket, object_name, client=client)

    def _discard_object(self, client: Any, bucket: str, object_name: str) -> None:
        # Failure here must not mask the checksum error being reported.
        try:
            self._call(
                "delete_object",
                client.delete_object,
                bucket=bucket,
                object_name=object_name,
                Bucket=bucket,
                Key=object_name,
            )
        except Exception as exc:
            logger.error(
                "rollback_failed bucket=%s object=%s error=%s",
                bucket,
                object_name,
                exc,
                extra={
                    "extra": {
                        "bucket": bucket,
                        "object": object_name,
                        "exception": repr(exc),
                    }
                },
            )

    def copy_object(
        self,
        src_bucket: str,
        src_object: str,
        dest_bucket: str,
        dest_object: str,
        metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        """Server-side copy; returns a fresh stat of the destination."""
        params: dict[str, Any] = {
            "Bucket": dest_bucket,
            "Key": dest_object,
            "CopySource": {"Bucket": src_bucket, "Key": src_object},
        }
        if metadata:
            params.update(meta.to_request_params(meta.strip_internal_keys(metadata)))
            params["MetadataDirective"] = "REPLACE"
        self._call(
            "copy_object",
            self.client.copy_object,
            bucket=src_bucket,
            object_name=src_object,
            **params,
        )
        return self._stat_object(dest_bucket, dest_object)

    def delete_object(self, bucket: str, object_name: str) -> None:
        self._call(
            "delete_object",
            self.client.delete_object,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
        )
