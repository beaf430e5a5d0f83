"""Conversion between gateway metadata maps and backend header views.

The gateway speaks flat ``dict[str, str]`` metadata. The backend side is a
multi-valued header map in canonical MIME form, which is then projected onto
the keyword arguments a ``boto3`` S3 client expects. Converting back keeps
only the first value of a multi-valued header.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

USER_META_PREFIX = "X-Amz-Meta-"

# Pseudo-metadata used internally to carry a content MD5 hint.
MD5_SUM_KEY = "md5Sum"

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
)

# Canonical header -> boto3 request/response field.
STANDARD_HEADERS: dict[str, str] = {
    "Content-Type": "ContentType",
    "Content-Encoding": "ContentEncoding",
    "Content-Disposition": "ContentDisposition",
    "Content-Language": "ContentLanguage",
    "Cache-Control": "CacheControl",
    "X-Amz-Storage-Class": "StorageClass",
}


def canonical_header_key(key: str) -> str:
    """Return the canonical MIME form of a header key.

    ``content-type`` becomes ``Content-Type``. Keys holding characters that
    are not valid in a header token are returned unchanged.
    """
    if not key or any(ch not in _TOKEN_CHARS for ch in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def to_backend(metadata: Mapping[str, str] | None) -> dict[str, list[str]]:
    return {canonical_header_key(k): [v] for k, v in (metadata or {}).items()}


def from_backend(headers: Mapping[str, Sequence[str] | str] | None) -> dict[str, str]:
    """Collapse a multi-valued header map, keeping the first value of each key."""
    result: dict[str, str] = {}
    for key, values in (headers or {}).items():
        if isinstance(values, str):
            result[canonical_header_key(key)] = values
        elif values:
            result[canonical_header_key(key)] = values[0]
    return result


def strip_internal_keys(metadata: Mapping[str, str] | None) -> dict[str, str]:
    """Copy ``metadata`` without the ``md5Sum`` pseudo key."""
    return {
        k: v
        for k, v in (metadata or {}).items()
        if k.lower() != MD5_SUM_KEY.lower()
    }


def to_request_params(metadata: Mapping[str, str] | None) -> dict[str, Any]:
    """Build boto3 keyword arguments for a write carrying ``metadata``."""
    params: dict[str, Any] = {}
    user: dict[str, str] = {}
    for key, values in to_backend(metadata).items():
        value = values[0]
        field_name = STANDARD_HEADERS.get(key)
        if field_name:
            params[field_name] = value
        elif key.startswith(USER_META_PREFIX):
            user[key[len(USER_META_PREFIX):]] = value
        else:
            user[key] = value
    if user:
        params["Metadata"] = user
    return params


def from_response(response: Mapping[str, Any]) -> dict[str, str]:
    """Rebuild the user-visible metadata map from a HEAD/GET response.

    ``Content-Type`` is always present in the result, even when the backend
    only reported it as a top-level field.
    """
    headers: dict[str, list[str]] = {}
    for name, value in (response.get("Metadata") or {}).items():
        headers[USER_META_PREFIX + name] = [value]
    for header, field_name in STANDARD_HEADERS.items():
        value = response.get(field_name)
        if value:
            headers[header] = [value]
    result = from_backend(headers)
    result["Content-Type"] = response.get("ContentType") or ""
    return result
