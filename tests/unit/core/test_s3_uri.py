"""Unit tests for S3 store locations."""

from __future__ import annotations

import pytest

from core.errors import SheetkeepConfigError, SheetkeepStoreError
from core.s3_uri import S3Location, is_s3_uri, parse_s3_uri


def test_parse_s3_uri_strips_prefix_slashes() -> None:
    """Surrounding slashes do not become part of the key prefix."""
    assert parse_s3_uri("s3://sheets/emigrants/", domain="store") == S3Location(
        bucket="sheets", prefix="emigrants"
    )


def test_parse_s3_uri_requires_scheme() -> None:
    """A bare bucket/prefix pair is not a store URI."""
    assert is_s3_uri("sheets/emigrants") is False
    with pytest.raises(SheetkeepConfigError):
        parse_s3_uri("sheets/emigrants", domain="config")


def test_parse_s3_uri_requires_prefix() -> None:
    """Store-domain failures raise store errors."""
    with pytest.raises(SheetkeepStoreError):
        parse_s3_uri("s3://sheets/", domain="store")


def test_location_builds_object_keys_and_uris() -> None:
    """Object keys are joined below the prefix."""
    location = S3Location(bucket="sheets", prefix="team/emigrants")

    key = location.object_key("metadata", "datasets.json")

    assert key == "team/emigrants/metadata/datasets.json"
    assert location.object_uri(key) == "s3://sheets/team/emigrants/metadata/datasets.json"
