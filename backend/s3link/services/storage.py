import logging
from dataclasses import dataclass, field
from typing import Any, Final
from urllib.parse import urlsplit

import boto3
import botocore
from botocore import UNSIGNED
from botocore.auth import HmacV1QueryAuth, S3SigV4QueryAuth
from botocore.awsrequest import AWSRequest
from botocore.client import Config
from botocore.exceptions import NoCredentialsError

from s3link.core.config import Settings, get_settings
from s3link.core.exceptions import InvalidExpirationError
from s3link.schemas import Expiration
from s3link.services.expiration import expires_in_seconds

logger = logging.getLogger(__name__)

SIGV4_MAX_EXPIRES: Final[int] = 604800


@dataclass(frozen=True)
class RetrieveRequest:
    bucket: str
    key: str
    operation: str = "get_object"

    @property
    def params(self) -> dict[str, Any]:
        return {"Bucket": self.bucket, "Key": self.key}


@dataclass
class PreparedRequest:
    """URL of a retrieve request, editable before it is rendered or signed."""

    bucket: str
    key: str
    scheme: str
    host: str
    path: str = "/"
    port: int | None = None
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)

    def set_scheme(self, scheme: str) -> "PreparedRequest":
        self.scheme = scheme
        return self

    def set_port(self, port: int | None) -> "PreparedRequest":
        self.port = port
        return self

    def get_host(self) -> str:
        return self.host

    def get_url(self) -> str:
        return self.url

    @property
    def url(self) -> str:
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        return f"{self.scheme}://{netloc}{self.path or '/'}"

    @property
    def virtual_hosted(self) -> bool:
        return self.host.startswith(f"{self.bucket}.")

    @property
    def auth_path(self) -> str:
        # HMAC-SHA1 query auth signs the bucket even when it lives in the host.
        if self.virtual_hosted:
            return f"/{self.bucket}{self.path or '/'}"
        return self.path or "/"


class ObjectStoreClient:
    """S3-compatible client that builds retrieve requests and signs them."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.session = boto3.session.Session(
            aws_access_key_id=self.settings.s3_access_key,
            aws_secret_access_key=self.settings.s3_secret_key,
            aws_session_token=self.settings.s3_session_token,
            region_name=self.settings.s3_region,
        )
        self.addressing_style = self.settings.s3_addressing_style
        self.signature_version = self.settings.s3_signature_version
        self.client = self._make_client(self.signature_version)
        # Resolves endpoints and addressing exactly like the signing client.
        self._resolver = self._make_client(UNSIGNED)
        logger.info(
            "Initialised object store client (region=%s, endpoint=%s, addressing=%s)",
            self.region,
            self.client.meta.endpoint_url,
            self.addressing_style,
        )

    def _make_client(self, signature_version: Any):
        return self.session.client(
            "s3",
            endpoint_url=str(self.settings.s3_endpoint) if self.settings.s3_endpoint else None,
            region_name=self.settings.s3_region,
            config=Config(
                signature_version=signature_version,
                s3={"addressing_style": self.addressing_style},
            ),
        )

    @property
    def version(self) -> str:
        return botocore.__version__

    @property
    def region(self) -> str:
        return self.client.meta.region_name or "us-east-1"

    @property
    def forces_path_style(self) -> bool:
        return self.addressing_style == "path"

    def create_retrieve_request(self, bucket: str, key: str) -> RetrieveRequest:
        return RetrieveRequest(bucket=bucket, key=key)

    def prepare(self, descriptor: RetrieveRequest) -> PreparedRequest:
        url = self._resolver.generate_presigned_url(
            descriptor.operation,
            Params=descriptor.params,
        )
        parts = urlsplit(url)
        return PreparedRequest(
            bucket=descriptor.bucket,
            key=descriptor.key,
            scheme=parts.scheme,
            host=parts.hostname or "",
            port=parts.port,
            path=parts.path or "/",
        )

    def create_presigned_url(self, request: PreparedRequest, expiration: Expiration) -> str:
        expires_in = expires_in_seconds(expiration)

        credentials = self.session.get_credentials()
        if credentials is None:
            raise NoCredentialsError()
        credentials = credentials.get_frozen_credentials()

        if self.signature_version == "s3":
            auth = HmacV1QueryAuth(credentials, expires=expires_in)
        else:
            if expires_in > SIGV4_MAX_EXPIRES:
                raise InvalidExpirationError(
                    f"Signature version 4 URLs expire after at most {SIGV4_MAX_EXPIRES} seconds"
                )
            auth = S3SigV4QueryAuth(credentials, "s3", self.region, expires=expires_in)

        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers),
            auth_path=request.auth_path,
        )
        auth.add_auth(aws_request)
        logger.debug("Presigned %s for %d seconds", request.url, expires_in)
        return aws_request.url


_object_store: ObjectStoreClient | None = None


def get_object_store() -> ObjectStoreClient:
    global _object_store
    if _object_store is None:
        _object_store = ObjectStoreClient()
    return _object_store


def reset_object_store() -> None:
    global _object_store
    _object_store = None
