"""Payloads exchanged with the check/in/out resource executables."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, RootModel

from harness.exceptions import MetadataNotFound


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class Source(_Payload):
    api_token: str
    product_slug: str
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    region: Optional[str] = None


class Version(_Payload):
    product_version: str


class Metadata(BaseModel):
    name: str
    value: str


class CheckRequest(_Payload):
    source: Source
    version: Optional[Version] = None


class CheckResponse(RootModel[List[Version]]):
    pass


class InRequest(_Payload):
    source: Source
    version: Version
    params: Dict[str, Any] = Field(default_factory=dict)


class OutRequest(_Payload):
    source: Source
    params: Dict[str, Any] = Field(default_factory=dict)


class InResponse(_Payload):
    version: Version
    metadata: List[Metadata] = Field(default_factory=list)


class OutResponse(InResponse):
    pass


def metadata_value_for_key(metadata: Sequence[Metadata], name: str) -> str:
    for entry in metadata:
        if entry.name == name:
            return entry.value
    raise MetadataNotFound(name)
