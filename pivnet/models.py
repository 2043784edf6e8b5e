"""Pivotal Network API resources and their collection envelopes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class UserGroup(_Resource):
    id: int
    name: str
    description: Optional[str] = None


class ProductFile(_Resource):
    id: int
    name: str = ""
    aws_object_key: str = ""
    file_version: Optional[str] = None
    file_type: Optional[str] = None
    md5: Optional[str] = None
    description: Optional[str] = None


class Release(_Resource):
    id: int
    version: str
    release_type: Optional[str] = None
    release_date: Optional[str] = None
    release_notes_url: Optional[str] = None
    description: Optional[str] = None
    availability: Optional[str] = None
    eula: Optional[dict] = None
    controlled: Optional[bool] = None
    eccn: Optional[str] = None
    license_exception: Optional[str] = None
    end_of_support_date: Optional[str] = None
    end_of_guidance_date: Optional[str] = None
    end_of_availability_date: Optional[str] = None


class Releases(_Resource):
    releases: List[Release] = Field(...)


class ProductFiles(_Resource):
    product_files: List[ProductFile] = Field(...)


class UserGroups(_Resource):
    user_groups: List[UserGroup] = Field(...)
