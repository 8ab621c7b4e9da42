"""
Errors raised by the bunny.net client factory.
"""


class BunnyClientError(Exception):
    """Base class for bunny-client errors."""


class MissingAccessKeyError(BunnyClientError, ValueError):
    """Raised when a client is requested without an access key."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Bunny access key is missing. Set BUNNY_ACCESS_KEY or pass a key to get_bunny_client()."
        )
