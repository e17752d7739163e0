class S3LinkError(Exception):
    """Base class for errors raised by the link helper."""


class InvalidBucketNameError(S3LinkError, ValueError):
    """Raised when no usable bucket name is available for a link."""


class InvalidExpirationError(S3LinkError, ValueError):
    """Raised when an expiration cannot be turned into a signing window."""
