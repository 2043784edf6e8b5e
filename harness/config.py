"""Acceptance suite configuration loaded from the environment."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from pivnet.client import DEFAULT_USER_AGENT, ClientConfig


ROOT = Path(__file__).resolve().parents[1]

SANITIZED_API_TOKEN = "***sanitized-api-token***"
SANITIZED_AWS_ACCESS_KEY_ID = "***sanitized-aws-access-key-id***"
SANITIZED_AWS_SECRET_ACCESS_KEY = "***sanitized-aws-secret-access-key***"


class AcceptanceSettings(BaseSettings):
    product_slug: str = Field(validation_alias="PRODUCT_SLUG")
    api_token: str = Field(validation_alias="API_TOKEN")
    aws_access_key_id: str = Field(validation_alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(validation_alias="AWS_SECRET_ACCESS_KEY")
    pivnet_region: str = Field(validation_alias="PIVNET_S3_REGION")
    pivnet_bucket_name: str = Field(validation_alias="PIVNET_BUCKET_NAME")
    s3_filepath_prefix: str = Field(validation_alias="S3_FILEPATH_PREFIX")
    endpoint: str = Field(validation_alias="PIVNET_ENDPOINT")
    s3_out_location: Path = Field(validation_alias="S3_OUT_LOCATION")

    check_path: Path = Field(default=Path("/opt/resource/check"), validation_alias="CHECK_PATH")
    in_path: Path = Field(default=Path("/opt/resource/in"), validation_alias="IN_PATH")
    out_path: Path = Field(default=Path("/opt/resource/out"), validation_alias="OUT_PATH")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, validation_alias="USER_AGENT")

    @field_validator(
        "product_slug",
        "api_token",
        "aws_access_key_id",
        "aws_secret_access_key",
        "pivnet_region",
        "pivnet_bucket_name",
        "s3_filepath_prefix",
        "endpoint",
        "s3_out_location",
        mode="before",
    )
    @classmethod
    def ensure_provided(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must be provided")
        return value

    def secret_mapping(self) -> dict[str, str]:
        return {
            self.api_token: SANITIZED_API_TOKEN,
            self.aws_access_key_id: SANITIZED_AWS_ACCESS_KEY_ID,
            self.aws_secret_access_key: SANITIZED_AWS_SECRET_ACCESS_KEY,
        }

    def client_config(self) -> ClientConfig:
        return ClientConfig(endpoint=self.endpoint, token=self.api_token, user_agent=self.user_agent)

    def source(self) -> dict[str, str]:
        """The `source` block every check/in/out request carries."""
        return {
            "api_token": self.api_token,
            "product_slug": self.product_slug,
            "access_key_id": self.aws_access_key_id,
            "secret_access_key": self.aws_secret_access_key,
            "endpoint": self.endpoint,
            "bucket": self.pivnet_bucket_name,
            "region": self.pivnet_region,
        }

    model_config = {
        "env_file": ROOT / ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> AcceptanceSettings:
    return AcceptanceSettings()
