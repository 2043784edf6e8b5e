"""Fixtures for the live acceptance suite.

Requires a reachable Pivotal Network endpoint, S3 credentials and the
resource executables; see `harness.config.AcceptanceSettings` for the
environment variables. Run with `pytest -m acceptance`.
"""

from __future__ import annotations

import sys
from collections.abc import Generator

import pytest

from harness.concourse import Source
from harness.suite import AcceptanceSuite
from pivnet.client import PivnetClient


@pytest.fixture(scope="session")
def suite() -> Generator[AcceptanceSuite, None, None]:
    with AcceptanceSuite() as suite:
        suite.setup(sys.stderr)
        yield suite


@pytest.fixture(scope="session")
def pivnet_client(suite: AcceptanceSuite) -> PivnetClient:
    assert suite.client is not None
    return suite.client


@pytest.fixture(scope="session")
def product_slug(suite: AcceptanceSuite) -> str:
    return suite.settings.product_slug


@pytest.fixture(scope="session")
def source(suite: AcceptanceSuite) -> Source:
    return Source.model_validate(suite.settings.source())
