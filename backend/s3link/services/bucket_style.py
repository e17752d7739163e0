"""Bucket addressing fix-ups applied to prepared retrieve requests.

Some older client library releases resolve DNS-compatible buckets to
path-style URLs (``host/bucket/key``) where virtual-hosted URLs
(``bucket.host/key``) are expected. The helper picks one strategy when it is
constructed, based on the library version, so current releases never pay for
the rewrite.
"""

import logging
import re
from typing import Protocol

from botocore.utils import check_dns_name

from s3link.services.storage import PreparedRequest

logger = logging.getLogger(__name__)

_VERSION_PART_RE = re.compile(r"^(\d+)")


def parse_version(version: str) -> tuple[int, ...]:
    parts = []
    for chunk in version.strip().split("."):
        match = _VERSION_PART_RE.match(chunk)
        if not match:
            break
        parts.append(int(match.group(1)))
    return tuple(parts)


def version_at_most(version: str, threshold: str) -> bool:
    current, limit = parse_version(version), parse_version(threshold)
    width = max(len(current), len(limit))
    return current + (0,) * (width - len(current)) <= limit + (0,) * (width - len(limit))


class BucketStyle(Protocol):
    def apply(self, request: PreparedRequest, bucket: str) -> PreparedRequest:
        ...


class PassthroughBucketStyle:
    """Leaves the addressing chosen by the client library untouched."""

    def apply(self, request: PreparedRequest, bucket: str) -> PreparedRequest:
        return request


class VirtualHostedBucketStyle:
    """Moves the bucket from the path into the host when the library did not."""

    def __init__(self, force_path_style: bool = False) -> None:
        self.force_path_style = force_path_style

    def needs_rewrite(self, request: PreparedRequest, bucket: str) -> bool:
        if self.force_path_style or bucket in request.host:
            return False
        return check_dns_name(bucket)

    def apply(self, request: PreparedRequest, bucket: str) -> PreparedRequest:
        if not self.needs_rewrite(request, bucket):
            return request

        prefix = f"/{bucket}"
        path = request.path
        if path == prefix or path.startswith(f"{prefix}/"):
            path = path[len(prefix):] or "/"

        logger.warning(
            "Rewriting path-style URL for bucket %s to virtual-hosted style", bucket
        )
        request.host = f"{bucket}.{request.host}"
        request.path = path
        return request


def select_bucket_style(
    library_version: str,
    max_affected_version: str,
    force_path_style: bool = False,
) -> BucketStyle:
    if version_at_most(library_version, max_affected_version):
        logger.debug(
            "Client library %s <= %s, using virtual-hosted rewrite",
            library_version,
            max_affected_version,
        )
        return VirtualHostedBucketStyle(force_path_style=force_path_style)
    return PassthroughBucketStyle()
