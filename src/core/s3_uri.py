"""S3 locations for the remote document store.

A store URI names a bucket and a key prefix; every store document
lives under that prefix.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import SheetkeepConfigError, SheetkeepError, SheetkeepStoreError

S3_SCHEME = "s3://"


@dataclass(frozen=True)
class S3Location:
    """Bucket and key prefix holding a document store."""

    bucket: str
    prefix: str

    def object_key(self, *parts: str) -> str:
        """Return the object key for ``parts`` below the prefix."""
        return "/".join((self.prefix, *parts))

    def object_uri(self, key: str) -> str:
        """Return the ``s3://`` URI of an object key in this bucket."""
        return f"{S3_SCHEME}{self.bucket}/{key}"


def is_s3_uri(uri: str | None) -> bool:
    """Return whether a URI uses the ``s3://`` scheme."""
    return bool(uri) and str(uri).startswith(S3_SCHEME)


def parse_s3_uri(uri: str, domain: str) -> S3Location:
    """Split a store URI into bucket and prefix.

    Args:
        uri: URI in format ``s3://bucket/prefix``.
        domain: ``"config"`` for settings errors, anything else for store errors.

    Returns:
        Parsed store location; surrounding slashes are removed from the prefix.

    Raises:
        SheetkeepConfigError: If a config-domain URI is invalid.
        SheetkeepStoreError: If a store-domain URI is invalid.
    """
    if not is_s3_uri(uri):
        raise _invalid_uri_error(uri, domain)
    bucket, _, prefix = uri[len(S3_SCHEME) :].partition("/")
    prefix = prefix.strip("/")
    if not bucket or not prefix:
        raise _invalid_uri_error(uri, domain)
    return S3Location(bucket=bucket, prefix=prefix)


def _invalid_uri_error(uri: str, domain: str) -> SheetkeepError:
    message = (
        f"Invalid store URI '{uri}': expected s3://bucket/prefix "
        "with both a bucket and a key prefix."
    )
    if domain == "config":
        return SheetkeepConfigError(message)
    return SheetkeepStoreError(message)
