from __future__ import annotations

import pytest

from harness.concourse import (
    CheckRequest,
    CheckResponse,
    InRequest,
    InResponse,
    Metadata,
    Source,
    Version,
    metadata_value_for_key,
)
from harness.exceptions import HarnessError, MetadataNotFound


def test_metadata_value_for_key_returns_first_match() -> None:
    metadata = [
        Metadata(name="release_type", value="Minor Release"),
        Metadata(name="version", value="1.2.3"),
        Metadata(name="version", value="ignored"),
    ]
    assert metadata_value_for_key(metadata, "version") == "1.2.3"


def test_metadata_value_for_key_missing() -> None:
    with pytest.raises(MetadataNotFound, match="name not found: eula_slug") as exc_info:
        metadata_value_for_key([Metadata(name="version", value="1")], "eula_slug")
    assert isinstance(exc_info.value, HarnessError)
    assert isinstance(exc_info.value, LookupError)


def test_check_request_serializes_without_empty_version() -> None:
    request = CheckRequest(source=Source(api_token="t", product_slug="p"))
    payload = request.model_dump(exclude_none=True)
    assert payload == {"source": {"api_token": "t", "product_slug": "p"}}


def test_in_request_round_trips_extra_source_fields() -> None:
    request = InRequest.model_validate(
        {
            "source": {"api_token": "t", "product_slug": "p", "sort_by": "semver"},
            "version": {"product_version": "1.0"},
            "params": {"globs": ["*.tgz"]},
        }
    )
    assert request.source.model_dump()["sort_by"] == "semver"
    assert request.params == {"globs": ["*.tgz"]}


def test_responses_parse_resource_output() -> None:
    versions = CheckResponse.model_validate_json('[{"product_version": "1.0"}, {"product_version": "1.1"}]')
    assert [v.product_version for v in versions.root] == ["1.0", "1.1"]

    response = InResponse.model_validate(
        {"version": {"product_version": "1.1"}, "metadata": [{"name": "version", "value": "1.1"}]}
    )
    assert response.version == Version(product_version="1.1")
    assert metadata_value_for_key(response.metadata, "version") == "1.1"
