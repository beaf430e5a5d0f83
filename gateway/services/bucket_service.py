"""Bucket operations on top of the backend's primitives."""

from __future__ import annotations

from typing import Any

from gateway.infra.storage import converters
from gateway.infra.storage.client import BucketInfo
from gateway.infra.storage.errors import BucketNotFound
from gateway.services.base import BaseService

# S3 rejects an explicit LocationConstraint for its default region.
DEFAULT_LOCATIONS = frozenset({"", "us-east-1"})


class BucketService(BaseService):
    """Create, stat, list and delete buckets."""

    def make_bucket(self, location: str, bucket: str) -> None:
        """Create ``bucket``.

        Name validation is left to the backend; a rejected name surfaces as
        ``InvalidBucketName``.
        """
        params: dict[str, Any] = {"Bucket": bucket}
        if (location or "") not in DEFAULT_LOCATIONS:
            params["CreateBucketConfiguration"] = {"LocationConstraint": location}
        self._call("create_bucket", self.client.create_bucket, bucket=bucket, **params)

    def get_bucket_info(self, bucket: str) -> BucketInfo:
        """Look ``bucket`` up in the full bucket listing.

        The backend has no stat-bucket call returning a creation date, so this
        costs one listing per call.
        """
        for info in self._list_buckets(bucket=bucket):
            if info.name == bucket:
                return info
        raise BucketNotFound(bucket=bucket)

    def list_buckets(self) -> list[BucketInfo]:
        return self._list_buckets()

    def _list_buckets(self, *, bucket: str = "") -> list[BucketInfo]:
        response = self._call("list_buckets", self.client.list_buckets, bucket=bucket)
        return [converters.bucket_info(b) for b in response.get("Buckets") or []]

    def delete_bucket(self, bucket: str) -> None:
        self._call("delete_bucket", self.client.delete_bucket, bucket=bucket, Bucket=bucket)

    def anon_get_bucket_info(self, bucket: str) -> BucketInfo:
        """Check ``bucket`` through the anonymous handle.

        Anonymous callers cannot list buckets, so existence is checked with a
        HEAD request and the creation date stays unknown.
        """
        self._call(
            "head_bucket", self.anon_client.head_bucket, bucket=bucket, Bucket=bucket
        )
        return BucketInfo(name=bucket, created=None)
