from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

Expiration = int | float | str | datetime | timedelta


class LinkConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    default_bucket: str = ""
    use_ssl: bool = True


class LinkRequest(BaseModel):
    object_key: str = Field(..., min_length=1)
    bucket: str = ""
    expiration: Expiration | None = None
    use_ssl: bool | None = None
