import logging

from s3link.core.config import get_settings
from s3link.core.exceptions import InvalidBucketNameError
from s3link.schemas import Expiration, LinkConfig, LinkRequest
from s3link.services.bucket_style import BucketStyle, select_bucket_style
from s3link.services.storage import ObjectStoreClient, get_object_store

logger = logging.getLogger(__name__)


def has_expiration(expiration: Expiration | None) -> bool:
    # "0" counts as no expiration, like the other empty values.
    return bool(expiration) and expiration != "0"


class S3Link:
    """Renders a link to an object in a bucket, signed when an expiration is given.

    Instances are callable so they can be handed to a template layer as-is::

        s3_link("photos/cat.png", "assets")
        s3_link("reports/q3.pdf", expiration="+15 minutes")
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        config: LinkConfig | None = None,
        bucket_style: BucketStyle | None = None,
    ) -> None:
        self.client = client
        self.config = config or LinkConfig()
        if bucket_style is None:
            settings = getattr(client, "settings", None) or get_settings()
            bucket_style = select_bucket_style(
                client.version,
                settings.bucket_style_fix_max_version,
                force_path_style=client.forces_path_style,
            )
        self.bucket_style = bucket_style

    @property
    def use_ssl(self) -> bool:
        return self.config.use_ssl

    @use_ssl.setter
    def use_ssl(self, value: bool) -> None:
        self.config = self.config.model_copy(update={"use_ssl": bool(value)})

    @property
    def default_bucket(self) -> str:
        return self.config.default_bucket

    @default_bucket.setter
    def default_bucket(self, value: str | None) -> None:
        value = "" if value is None else str(value)
        self.config = self.config.model_copy(update={"default_bucket": value})

    def set_use_ssl(self, use_ssl: bool) -> None:
        self.use_ssl = use_ssl

    def get_use_ssl(self) -> bool:
        return self.use_ssl

    def set_default_bucket(self, default_bucket: str | None) -> None:
        self.default_bucket = default_bucket

    def get_default_bucket(self) -> str:
        return self.default_bucket

    def resolve_bucket(self, bucket: str = "") -> str:
        resolved = (bucket or self.config.default_bucket).strip("/")
        if not resolved:
            raise InvalidBucketNameError("An empty bucket name was given")
        return resolved

    def build(
        self,
        object_key: str,
        bucket: str = "",
        expiration: Expiration | None = None,
    ) -> str:
        return self._build(object_key, bucket, expiration, self.config.use_ssl)

    __call__ = build

    def render(self, link_request: LinkRequest) -> str:
        return self._build(
            link_request.object_key,
            link_request.bucket,
            link_request.expiration,
            self.config.use_ssl if link_request.use_ssl is None else link_request.use_ssl,
        )

    def _build(
        self,
        object_key: str,
        bucket: str,
        expiration: Expiration | None,
        use_ssl: bool,
    ) -> str:
        bucket = self.resolve_bucket(bucket)

        # Going through a retrieve request keeps the configured regional endpoint.
        descriptor = self.client.create_retrieve_request(bucket, object_key)
        request = self.client.prepare(descriptor)
        request.set_scheme("https" if use_ssl else "http").set_port(None)
        request = self.bucket_style.apply(request, bucket)

        if has_expiration(expiration):
            logger.debug("Building signed link for %s/%s", bucket, object_key)
            return self.client.create_presigned_url(request, expiration)
        return request.get_url()


def get_s3_link(client: ObjectStoreClient | None = None) -> S3Link:
    settings = get_settings()
    return S3Link(
        client or get_object_store(),
        LinkConfig(
            default_bucket=settings.s3_default_bucket,
            use_ssl=settings.s3_use_ssl,
        ),
    )
