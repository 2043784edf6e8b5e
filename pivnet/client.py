"""Synchronous client for the Pivotal Network v2 REST API.

Only the read and delete calls that the acceptance suite needs to set up and
verify fixture state are implemented. Every call is a single request/response
cycle with no retries; retry policy belongs to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import quote
from typing import Any, List, Optional, Protocol, Type, TypeVar

import requests
import structlog
from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator

from pivnet.exceptions import AuthError, NotFound, ProtocolError, TransportError, UnexpectedStatus
from pivnet.models import ProductFile, ProductFiles, Release, Releases, UserGroup, UserGroups


DEFAULT_USER_AGENT = "pivnet-resource/integration-test"
BODY_PREVIEW_CHARS = 512

_EnvelopeT = TypeVar("_EnvelopeT", bound=BaseModel)


class Response(Protocol):
    status_code: int
    text: str

    def json(self) -> Any: ...


class Transport(Protocol):
    """Anything with the ``requests.Session.request`` calling convention."""

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        timeout: Optional[float],
    ) -> Response: ...


class ClientConfig(BaseModel):
    endpoint: str
    token: str
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("endpoint", "token")
    @classmethod
    def ensure_not_blank(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if info.field_name == "endpoint":
            value = value.rstrip("/")
        if not value:
            raise ValueError("must be provided")
        return value


def _slug_path(product_slug: str) -> str:
    if not product_slug or not product_slug.strip():
        raise ValueError("product_slug must be provided")
    return f"/products/{quote(product_slug, safe='')}"


def _preview(text: str) -> str:
    text = text.strip()
    if len(text) > BODY_PREVIEW_CHARS:
        return f"{text[:BODY_PREVIEW_CHARS]}..."
    return text


class PivnetClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[Transport] = None,
        logger: Any = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._config = config
        self._session: Optional[requests.Session] = requests.Session() if transport is None else None
        self._transport: Transport = transport if transport is not None else self._session
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._timeout = timeout

    def close(self) -> None:
        """Close the session if this client created it; injected transports are left alone."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "PivnetClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _url(self, path: str) -> str:
        return f"{self._config.endpoint}/api/v2{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Token {self._config.token}",
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }

    def _send(self, method: str, path: str, *, expected_status: int) -> Response:
        url = self._url(path)
        self._logger.debug("pivnet.request", method=method, url=url)
        try:
            response = self._transport.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        status = response.status_code
        self._logger.debug("pivnet.response", method=method, url=url, status=status)
        if status == 401:
            raise AuthError(f"{method} {url} was rejected as unauthorized")
        if status != expected_status:
            body = _preview(response.text or "")
            raise UnexpectedStatus(
                f"{method} {url} returned {status}, expected {expected_status}: {body}",
                status_code=status,
                body=body,
            )
        return response

    def _get_collection(self, path: str, envelope: Type[_EnvelopeT]) -> _EnvelopeT:
        response = self._send("GET", path, expected_status=200)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(
                f"GET {self._url(path)} returned a non-JSON payload: {_preview(response.text or '')!r}"
            ) from exc
        try:
            return envelope.model_validate(payload)
        except ValidationError as exc:
            raise ProtocolError(f"Unexpected payload from GET {self._url(path)}: {exc}") from exc

    def get_releases(self, product_slug: str) -> List[Release]:
        envelope = self._get_collection(f"{_slug_path(product_slug)}/releases", Releases)
        return list(envelope.releases)

    def get_product_versions(self, product_slug: str) -> List[str]:
        return [release.version for release in self.get_releases(product_slug)]

    def find_release_by_version(self, product_slug: str, version: str) -> Release:
        releases = self.get_releases(product_slug)
        for release in releases:
            if release.version == version:
                return release
        raise NotFound(
            f"Could not find release for product_slug: {product_slug} and version: {version} "
            f"(searched {len(releases)} releases)"
        )

    def delete_release(self, product_slug: str, version: str) -> Release:
        release = self.find_release_by_version(product_slug, version)
        if release.id <= 0:
            raise ProtocolError(f"Release {version!r} of {product_slug} has invalid id {release.id}")

        self._send("DELETE", f"{_slug_path(product_slug)}/releases/{release.id}", expected_status=204)
        self._logger.info(
            "pivnet.release_deleted",
            product_slug=product_slug,
            version=version,
            release_id=release.id,
        )
        return release

    def get_product_files(self, product_slug: str) -> List[ProductFile]:
        envelope = self._get_collection(f"{_slug_path(product_slug)}/product_files", ProductFiles)
        return list(envelope.product_files)

    def get_user_groups(self, product_slug: str, release_id: int) -> List[UserGroup]:
        envelope = self._get_collection(
            f"{_slug_path(product_slug)}/releases/{release_id}/user_groups",
            UserGroups,
        )
        return list(envelope.user_groups)
