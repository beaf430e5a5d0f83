"""Object storage backend layer.

This package holds the gateway's value types, the semantic error taxonomy,
the backend error translator, the metadata adapter and the boto3 client
handles used to reach an S3-compatible backend.
"""

from .client import (
    BucketInfo,
    CompletePart,
    ListMultipartsInfo,
    ListObjectsInfo,
    ListPartsInfo,
    ObjectInfo,
    ObjectLayer,
    PartInfo,
    StorageInfo,
    UploadMetadata,
)
from .errors import (
    BackendUnavailableError,
    BucketAlreadyOwned,
    BucketNotEmpty,
    BucketNotFound,
    ChecksumMismatch,
    ErrorKind,
    InvalidBucketName,
    InvalidObjectName,
    NotSupported,
    ObjectNotFound,
    PrefixAccessDenied,
    StorageError,
    Unrecognized,
    translate_error,
)
from .s3_client import BackendClients

__all__ = [
    "BackendClients",
    "BucketInfo",
    "CompletePart",
    "ListMultipartsInfo",
    "ListObjectsInfo",
    "ListPartsInfo",
    "ObjectInfo",
    "ObjectLayer",
    "PartInfo",
    "StorageInfo",
    "UploadMetadata",
    "BackendUnavailableError",
    "BucketAlreadyOwned",
    "BucketNotEmpty",
    "BucketNotFound",
    "ChecksumMismatch",
    "ErrorKind",
    "InvalidBucketName",
    "InvalidObjectName",
    "NotSupported",
    "ObjectNotFound",
    "PrefixAccessDenied",
    "StorageError",
    "Unrecognized",
    "translate_error",
]
