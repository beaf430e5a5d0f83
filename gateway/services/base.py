from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from gateway.common.config import Settings, get_settings
from gateway.infra.observability.metrics import record_operation
from gateway.infra.storage import converters
from gateway.infra.storage.client import ObjectInfo
from gateway.infra.storage.errors import StorageError, translate_error
from gateway.infra.storage.s3_client import BackendClients

T = TypeVar("T")

logger = logging.getLogger("gateway.backend")


def _outcome(exc: BaseException) -> str:
    if isinstance(exc, StorageError) and exc.kind is not None:
        return exc.kind.value
    return type(exc).__name__


class BaseService:
    """Shared plumbing for gateway services.

    Every backend call goes through ``_call`` so that failures are
    translated into the semantic taxonomy at the boundary, and each call is
    logged and measured the same way.
    """

    def __init__(
        self,
        clients: BackendClients,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._clients = clients
        self._settings = settings or get_settings()

    @property
    def clients(self) -> BackendClients:
        return self._clients

    @property
    def client(self) -> Any:
        return self._clients.client

    @property
    def anon_client(self) -> Any:
        return self._clients.anon_client

    def _call(
        self,
        operation: str,
        fn: Callable[..., T],
        *,
        bucket: str = "",
        object_name: str = "",
        **kwargs: Any,
    ) -> T:
        start = time.perf_counter()
        try:
            result = fn(**kwargs)
        except Exception as exc:
            translated = translate_error(exc, bucket, object_name)
            self._report_failure(
                operation,
                exc,
                translated,
                time.perf_counter() - start,
                bucket=bucket,
                object_name=object_name,
            )
            if translated is exc:
                raise
            raise translated from exc

        elapsed = time.perf_counter() - start
        self._record(operation, "ok", elapsed)
        logger.debug(
            "backend_call operation=%s bucket=%s object=%s duration_ms=%.3f",
            operation,
            bucket or "-",
            object_name or "-",
            round(elapsed * 1000, 3),
        )
        return result

    def _report_failure(
        self,
        operation: str,
        exc: BaseException,
        translated: BaseException,
        elapsed: float,
        *,
        bucket: str = "",
        object_name: str = "",
    ) -> None:
        """Log and count a failed operation under its semantic outcome."""
        outcome = _outcome(translated)
        self._record(operation, outcome, elapsed)
        logger.warning(
            "backend_error operation=%s bucket=%s object=%s outcome=%s duration_ms=%.3f",
            operation,
            bucket or "-",
            object_name or "-",
            outcome,
            round(elapsed * 1000, 3),
            extra={
                "extra": {
                    "operation": operation,
                    "bucket": bucket,
                    "object": object_name,
                    "outcome": outcome,
                    "duration_ms": round(elapsed * 1000, 3),
                    "exception": repr(exc),
                }
            },
        )

    def _record(self, operation: str, outcome: str, elapsed: float) -> None:
        if self._settings.ENABLE_METRICS:
            record_operation(operation, outcome, elapsed)

    def _stat_object(
        self, bucket: str, object_name: str, *, client: Any = None
    ) -> ObjectInfo:
        """Fresh HEAD of an object, the authoritative view after any write."""
        response = self._call(
            "head_object",
            (client or self.client).head_object,
            bucket=bucket,
            object_name=object_name,
            Bucket=bucket,
            Key=object_name,
        )
        return converters.object_info(bucket, object_name, response)
