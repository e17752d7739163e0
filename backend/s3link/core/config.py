from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        protected_namespaces=(),
    )

    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")
    s3_access_key: str | None = Field(default=None, alias="S3_ACCESS_KEY")
    s3_secret_key: str | None = Field(default=None, alias="S3_SECRET_KEY")
    s3_session_token: str | None = Field(default=None, alias="S3_SESSION_TOKEN")
    s3_region: str | None = Field(default=None, alias="S3_REGION")
    s3_addressing_style: Literal["auto", "virtual", "path"] = Field(
        default="auto", alias="S3_ADDRESSING_STYLE"
    )
    s3_signature_version: Literal["s3v4", "s3"] = Field(
        default="s3v4", alias="S3_SIGNATURE_VERSION"
    )

    s3_default_bucket: str = Field(default="", alias="S3_DEFAULT_BUCKET")
    s3_use_ssl: bool = Field(default=True, alias="S3_USE_SSL")

    # botocore releases up to and including this one get the bucket-style rewrite
    bucket_style_fix_max_version: str = Field(
        default="1.0.0", alias="BUCKET_STYLE_FIX_MAX_VERSION"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
