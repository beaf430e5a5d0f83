from .base import BaseService
from .bucket_service import BucketService
from .multipart_service import MultipartService
from .object_service import ObjectService
from .s3_gateway import S3Gateway

__all__ = [
    "BaseService",
    "BucketService",
    "ObjectService",
    "MultipartService",
    "S3Gateway",
]
