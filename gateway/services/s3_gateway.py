from __future__ import annotations

import logging
from typing import Any

from gateway.common.config import Settings, get_settings
from gateway.infra.storage.client import StorageInfo
from gateway.infra.storage.errors import NotSupported
from gateway.infra.storage.s3_client import BackendClients

from .bucket_service import BucketService
from .multipart_service import MultipartService
from .object_service import ObjectService

logger = logging.getLogger("gateway.startup")


class S3Gateway(BucketService, ObjectService, MultipartService):
    """Generic object layer served by a remote S3-compatible backend.

    Bucket access policies are not managed by the gateway; the policy calls
    always raise ``NotSupported``.
    """

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "S3Gateway":
        """Build the backend handles from settings and wrap them.

        Raises:
            BackendUnavailableError: If the backend endpoint is unreachable.
        """
        settings = settings or get_settings()
        clients = BackendClients.from_settings(settings)
        logger.info(
            "S3 gateway ready. [event=gateway_ready] (endpoint=%s)",
            settings.S3_ENDPOINT_URL,
        )
        return cls(clients, settings=settings)

    def shutdown(self) -> None:
        self._clients.close()

    def storage_info(self) -> StorageInfo:
        """Capacity is not exposed by S3 backends."""
        return StorageInfo()

    def set_bucket_policies(self, bucket: str, policies: Any) -> None:
        raise NotSupported("SetBucketPolicies")

    def get_bucket_policies(self, bucket: str) -> Any:
        raise NotSupported("GetBucketPolicies")

    def delete_bucket_policies(self, bucket: str) -> None:
        raise NotSupported("DeleteBucketPolicies")
