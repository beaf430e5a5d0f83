"""Backend client handles for an S3-compatible endpoint.

The gateway talks to the backend through two boto3 clients: one signed with
the configured credentials and one unsigned for anonymous request paths. Both
are built once at startup and passed explicitly to the gateway.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from gateway.infra.storage.errors import BackendUnavailableError, StorageError

if TYPE_CHECKING:
    from gateway.common.config import Settings

logger = logging.getLogger("gateway.startup")


@dataclass(frozen=True)
class BackendClients:
    """Authenticated and anonymous boto3 S3 clients for one endpoint."""

    client: Any
    anon_client: Any
    endpoint_url: str = ""

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BackendClients":
        """Build and probe both handles.

        Raises:
            BackendUnavailableError: If the endpoint cannot be reached.
            StorageError: If boto3 is not installed.
        """
        client = cls._build_client(settings, anonymous=False)
        anon_client = cls._build_client(settings, anonymous=True)
        cls._probe(client, settings.S3_ENDPOINT_URL, "authenticated")
        cls._probe(anon_client, settings.S3_ENDPOINT_URL, "anonymous")
        return cls(
            client=client,
            anon_client=anon_client,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )

    @staticmethod
    def _build_client(settings: "Settings", *, anonymous: bool) -> Any:
        """Create a boto3 S3 client from settings."""
        try:
            import boto3
            from botocore import UNSIGNED
            from botocore.config import Config
        except ImportError as exc:
            raise StorageError(
                "boto3 and botocore are required for the S3 gateway. "
                "Install with: pip install boto3"
            ) from exc

        config_kwargs: dict[str, Any] = {
            "s3": {"addressing_style": settings.S3_ADDRESSING_STYLE},
            "connect_timeout": settings.S3_CONNECT_TIMEOUT,
            "read_timeout": settings.S3_READ_TIMEOUT,
            "retries": {"max_attempts": settings.S3_MAX_ATTEMPTS, "mode": "standard"},
        }
        client_kwargs: dict[str, Any] = {
            "endpoint_url": settings.S3_ENDPOINT_URL,
            "region_name": settings.S3_REGION,
            "use_ssl": bool(settings.S3_USE_SSL),
        }
        if anonymous:
            config_kwargs["signature_version"] = UNSIGNED
        elif settings.has_credentials:
            client_kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
            client_kwargs["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY

        return boto3.client("s3", config=Config(**config_kwargs), **client_kwargs)

    @staticmethod
    def _probe(client: Any, endpoint_url: str, label: str) -> None:
        """Fail unless the endpoint answers.

        Any response from the backend, including an error response such as
        AccessDenied for the anonymous handle, proves it is reachable.
        """
        try:
            client.list_buckets()
        except ClientError as exc:
            logger.info(
                "S3 endpoint answered the %s probe with an error response."
                " [event=backend_probe_answered] (endpoint=%s, error=%s)",
                label,
                endpoint_url,
                exc,
            )
        except (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as exc:
            logger.error(
                "S3 endpoint is unreachable, gateway startup aborted."
                " [event=backend_probe_failed] (endpoint=%s, client=%s, error=%s)",
                endpoint_url,
                label,
                exc,
            )
            raise BackendUnavailableError(
                f"S3 endpoint {endpoint_url} is unreachable ({label} client): {exc}",
                orig=exc,
            ) from exc
        else:
            logger.info(
                "S3 endpoint probe succeeded. [event=backend_probe_ok] (endpoint=%s, client=%s)",
                endpoint_url,
                label,
            )

    def close(self) -> None:
        """Release the connection pools of both handles."""
        self.client.close()
        self.anon_client.close()
