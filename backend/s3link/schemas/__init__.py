from s3link.schemas.link import Expiration, LinkConfig, LinkRequest

__all__ = [
    "Expiration",
    "LinkConfig",
    "LinkRequest",
]
