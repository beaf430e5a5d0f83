"""Semantic storage errors and backend error translation.

Backend failures reach the gateway as ``botocore.exceptions.ClientError``
instances carrying an S3 error code. ``translate_error`` maps those codes onto
the caller-facing taxonomy below; the original exception is always preserved
as ``__cause__`` and on the ``orig`` attribute.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from botocore.exceptions import ClientError


class ErrorKind(str, Enum):
    BUCKET_ALREADY_OWNED = "BucketAlreadyOwned"
    BUCKET_NOT_EMPTY = "BucketNotEmpty"
    INVALID_BUCKET_NAME = "InvalidBucketName"
    BUCKET_NOT_FOUND = "BucketNotFound"
    OBJECT_NOT_FOUND = "ObjectNotFound"
    INVALID_OBJECT_NAME = "InvalidObjectName"
    PREFIX_ACCESS_DENIED = "PrefixAccessDenied"
    CHECKSUM_MISMATCH = "ChecksumMismatch"
    NOT_SUPPORTED = "NotSupported"
    UNRECOGNIZED = "Unrecognized"


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""

    kind: ErrorKind | None = None
    template = "Storage operation failed"
    object_scoped = True

    def __init__(
        self,
        message: str | None = None,
        *,
        bucket: str = "",
        object_name: str = "",
        code: str | None = None,
        orig: BaseException | None = None,
    ) -> None:
        self.bucket = bucket
        self.object_name = object_name
        self.code = code
        self.orig = orig
        super().__init__(message or self._describe())

    def _describe(self) -> str:
        target = self.bucket
        if self.object_name:
            target = f"{self.bucket}/{self.object_name}"
        return f"{self.template}: {target}" if target else self.template


class BackendUnavailableError(StorageError):
    """Raised when a backend client cannot reach its endpoint."""

    template = "Storage backend is unreachable"


class BucketAlreadyOwned(StorageError):
    kind = ErrorKind.BUCKET_ALREADY_OWNED
    template = "Bucket already owned by you"
    object_scoped = False


class BucketNotEmpty(StorageError):
    kind = ErrorKind.BUCKET_NOT_EMPTY
    template = "Bucket not empty"
    object_scoped = False


class InvalidBucketName(StorageError):
    kind = ErrorKind.INVALID_BUCKET_NAME
    template = "Bucket name invalid"
    object_scoped = False


class BucketNotFound(StorageError):
    kind = ErrorKind.BUCKET_NOT_FOUND
    template = "Bucket not found"
    object_scoped = False


class ObjectNotFound(StorageError):
    kind = ErrorKind.OBJECT_NOT_FOUND
    template = "Object not found"


class InvalidObjectName(StorageError):
    kind = ErrorKind.INVALID_OBJECT_NAME
    template = "Object name invalid"


class PrefixAccessDenied(StorageError):
    kind = ErrorKind.PREFIX_ACCESS_DENIED
    template = "Access denied"


class ChecksumMismatch(StorageError):
    kind = ErrorKind.CHECKSUM_MISMATCH
    template = "Content SHA-256 mismatch"

    def __init__(
        self,
        *,
        bucket: str = "",
        object_name: str = "",
        expected: str = "",
        computed: str = "",
    ) -> None:
        self.expected = expected
        self.computed = computed
        super().__init__(bucket=bucket, object_name=object_name)

    def _describe(self) -> str:
        return (
            f"{super()._describe()} "
            f"(expected={self.expected}, computed={self.computed})"
        )


class NotSupported(StorageError):
    kind = ErrorKind.NOT_SUPPORTED
    template = "Not supported by the S3 gateway"

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{self.template}: {operation}")


class Unrecognized(StorageError):
    """Backend error with no semantic counterpart; wraps the original."""

    kind = ErrorKind.UNRECOGNIZED
    template = "Backend error"

    def _describe(self) -> str:
        return (
            f"{self.template} {self.code or '<no code>'} "
            f"(bucket={self.bucket or '-'}, object={self.object_name or '-'}): "
            f"{self.orig}"
        )


# HEAD responses carry no error body, so botocore reports the HTTP status.
_CODE_ALIASES: dict[str, str] = {
    "404": "NoSuchKey",
    "NotFound": "NoSuchKey",
    "403": "AccessDenied",
}


def _no_such_key(bucket: str, object_name: str) -> type[StorageError]:
    return ObjectNotFound if object_name else BucketNotFound


_ERROR_TABLE: dict[str, Callable[[str, str], type[StorageError]]] = {
    "BucketAlreadyOwnedByYou": lambda b, o: BucketAlreadyOwned,
    "BucketNotEmpty": lambda b, o: BucketNotEmpty,
    "InvalidBucketName": lambda b, o: InvalidBucketName,
    "NoSuchBucket": lambda b, o: BucketNotFound,
    "NoSuchKey": _no_such_key,
    "XMinioInvalidObjectName": lambda b, o: InvalidObjectName,
    "InvalidObjectName": lambda b, o: InvalidObjectName,
    "KeyTooLongError": lambda b, o: InvalidObjectName,
    "AccessDenied": lambda b, o: PrefixAccessDenied,
}


def backend_error_code(exc: BaseException) -> str | None:
    """Return the S3 error code carried by a backend error, if any."""
    if not isinstance(exc, ClientError):
        return None
    error = exc.response.get("Error") or {}
    code = error.get("Code")
    return str(code) if code is not None else None


def translate_error(
    exc: BaseException, bucket: str = "", object_name: str = ""
) -> BaseException:
    """Map a backend error onto the semantic taxonomy.

    Errors that did not come from the backend's typed-error surface are
    returned unchanged, as are errors that are already semantic.
    """
    if isinstance(exc, StorageError) or not isinstance(exc, ClientError):
        return exc

    code = backend_error_code(exc)
    resolve = _ERROR_TABLE.get(_CODE_ALIASES.get(code or "", code or ""))
    error_cls = resolve(bucket, object_name) if resolve else Unrecognized
    translated = error_cls(
        bucket=bucket,
        object_name=object_name if error_cls.object_scoped else "",
        code=code,
        orig=exc,
    )
    translated.__cause__ = exc
    return translated
