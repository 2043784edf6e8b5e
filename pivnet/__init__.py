"""Pivotal Network API client package exports."""

from pivnet.client import ClientConfig, PivnetClient
from pivnet.exceptions import (
    AuthError,
    NotFound,
    PivnetError,
    ProtocolError,
    TransportError,
    UnexpectedStatus,
)
from pivnet.models import ProductFile, Release, UserGroup

__all__ = [
    "AuthError",
    "ClientConfig",
    "NotFound",
    "PivnetClient",
    "PivnetError",
    "ProductFile",
    "ProtocolError",
    "Release",
    "TransportError",
    "UnexpectedStatus",
    "UserGroup",
]
