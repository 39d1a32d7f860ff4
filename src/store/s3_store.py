"""S3-backed document store.

Each namespace is one JSON object under ``{prefix}/collections/``;
a batch commit is a single PUT of the merged object, which readers
observe atomically. The registry lives under ``{prefix}/metadata/``.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import SheetkeepConfig
from core.constants import COLLECTIONS_DIR_NAME, METADATA_DIR_NAME, METADATA_DOCUMENT_NAME
from core.errors import SheetkeepStoreError
from core.logging_config import get_logger
from core.s3_uri import S3Location
from store.document_store import (
    decode_document,
    encode_document,
    merge_namespace_entries,
    namespace_entries,
    validate_namespace,
)
from store.metadata_registry import merge_registry_fields

_LOGGER = get_logger(__name__)
_MISSING_OBJECT_CODES = ("NoSuchKey", "404", "NotFound")


class S3DocumentStore:
    """Document store persisted as JSON objects in one S3 prefix."""

    def __init__(self, location: S3Location, s3_client: Any) -> None:
        self._location = location
        self._s3_client = s3_client
        self._lock = threading.Lock()

    def commit_batch(self, namespace: str, entries: Mapping[str, Mapping[str, Any]]) -> None:
        """Upsert entries into a namespace object with one PUT.

        Raises:
            SheetkeepStoreError: If the object cannot be read or written.
        """
        key = self._namespace_key(namespace)
        with self._lock:
            document = merge_namespace_entries(self._get_document(key), entries)
            self._put_document(key, document)
        _LOGGER.info(
            "batch_committed",
            namespace=namespace,
            entry_count=len(entries),
            bucket=self._location.bucket,
        )

    def read_metadata(self) -> dict[str, Any] | None:
        """Return registry fields, or None when the registry object is absent."""
        return self._get_document(self._metadata_key())

    def merge_metadata(
        self,
        fields: Mapping[str, Any],
        union_names: Sequence[str] = (),
    ) -> None:
        """Merge fields into the registry object."""
        key = self._metadata_key()
        with self._lock:
            merged = merge_registry_fields(self._get_document(key), fields, union_names)
            self._put_document(key, merged)

    def scan_namespace(self, namespace: str) -> list[dict[str, Any]]:
        """Return all entries of a namespace; unknown namespaces are empty."""
        return namespace_entries(self._get_document(self._namespace_key(namespace)))

    def _namespace_key(self, namespace: str) -> str:
        return self._location.object_key(
            COLLECTIONS_DIR_NAME, f"{validate_namespace(namespace)}.json"
        )

    def _metadata_key(self) -> str:
        return self._location.object_key(METADATA_DIR_NAME, f"{METADATA_DOCUMENT_NAME}.json")

    def _get_document(self, key: str) -> dict[str, Any] | None:
        """Download and decode an object, returning None when it does not exist."""
        uri = self._location.object_uri(key)
        try:
            response = self._s3_client.get_object(Bucket=self._location.bucket, Key=key)
            payload = response["Body"].read()
        except ClientError as error:
            if error.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                return None
            raise SheetkeepStoreError(
                f"Failed to read {uri}: {error}. Check AWS credentials and bucket access."
            ) from error
        except BotoCoreError as error:
            raise SheetkeepStoreError(f"Failed to read {uri}: {error}.") from error
        return decode_document(payload, uri)

    def _put_document(self, key: str, document: Mapping[str, Any]) -> None:
        """Encode and upload an object."""
        uri = self._location.object_uri(key)
        payload = encode_document(document, uri)
        try:
            self._s3_client.put_object(
                Bucket=self._location.bucket,
                Key=key,
                Body=payload,
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as error:
            raise SheetkeepStoreError(
                f"Failed to write {uri}: {error}. Check AWS credentials and retry the upload."
            ) from error


def create_s3_client(config: SheetkeepConfig) -> Any:
    """Create a boto3 S3 client from runtime config.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")
