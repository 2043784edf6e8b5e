"""End-to-end tests of the Pivotal Network client against the fake service.

The fake service runs in a spawned process on an ephemeral port and the
client talks to it over real HTTP with `requests`. No network access beyond
localhost is needed.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

from harness import fake_service
from pivnet.client import ClientConfig, PivnetClient
from pivnet.exceptions import AuthError, NotFound, UnexpectedStatus


pytestmark = pytest.mark.e2e

TOKEN = "e2e-token-1234567890"
SLUG = "e2e-product"

SEED = {
    "token": TOKEN,
    "releases": {
        SLUG: [
            {"id": 1, "version": "v1", "release_type": "Major Release"},
            {"id": 2, "version": "v2", "availability": "Selected User Groups Only"},
        ]
    },
    "product_files": {
        SLUG: [
            {"id": 11, "name": "v1 tarball", "aws_object_key": "product-files/e2e/v1.tgz"},
            {"id": 12, "name": "v2 tarball", "aws_object_key": "product-files/e2e/v2.tgz"},
        ]
    },
    "user_groups": {2: [{"id": 100, "name": "early-access"}]},
}


@pytest.fixture
def service_url() -> Generator[str, None, None]:
    """Start a freshly seeded fake service for each test."""
    with fake_service.running(SEED) as url:
        yield url


@pytest.fixture
def client(service_url: str) -> Generator[PivnetClient, None, None]:
    with PivnetClient(ClientConfig(endpoint=service_url, token=TOKEN), timeout=10) as client:
        yield client


def test_find_then_delete_release(client: PivnetClient) -> None:
    assert client.get_product_versions(SLUG) == ["v1", "v2"]
    assert client.find_release_by_version(SLUG, "v2").id == 2

    deleted = client.delete_release(SLUG, "v2")
    assert deleted.id == 2
    assert client.get_product_versions(SLUG) == ["v1"]

    with pytest.raises(NotFound):
        client.delete_release(SLUG, "v2")


def test_product_files_and_user_groups(client: PivnetClient) -> None:
    files = client.get_product_files(SLUG)
    assert [f.aws_object_key for f in files] == ["product-files/e2e/v1.tgz", "product-files/e2e/v2.tgz"]

    release = client.find_release_by_version(SLUG, "v2")
    assert release.availability == "Selected User Groups Only"
    assert [g.name for g in client.get_user_groups(SLUG, release.id)] == ["early-access"]
    assert client.get_user_groups(SLUG, 1) == []


def test_bad_token_rejected(service_url: str) -> None:
    with PivnetClient(ClientConfig(endpoint=service_url, token="wrong-token"), timeout=10) as client:
        with pytest.raises(AuthError):
            client.get_releases(SLUG)


def test_unknown_product_is_unexpected_status(client: PivnetClient) -> None:
    with pytest.raises(UnexpectedStatus) as exc_info:
        client.get_releases("no-such-product")
    assert exc_info.value.status_code == 404
